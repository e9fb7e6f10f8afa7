import datetime

from records.services import dates, obstetrics


def test_create_valid_date_clamps_month_and_day():
    assert dates.create_valid_date(2024, 1, 31) == datetime.date(2024, 2, 29)
    assert dates.create_valid_date(2023, 1, 31) == datetime.date(2023, 2, 28)
    assert dates.create_valid_date(2024, 14, 5) == datetime.date(2024, 12, 5)
    assert dates.create_valid_date(2024, -3, 0) == datetime.date(2024, 1, 1)
    assert dates.create_valid_date_string(2024, 3, 31) == '2024-04-30'


def test_add_helpers_answer_in_kind():
    assert dates.add_days('2024-02-28', 1) == '2024-02-29'
    assert dates.add_weeks(datetime.date(2024, 1, 1), 2) == datetime.date(2024, 1, 15)
    assert dates.add_months('2024-01-31', 1) == '2024-02-29'
    assert dates.add_months(datetime.date(2023, 11, 30), 3) == datetime.date(2024, 2, 29)


def test_unparseable_dates_are_returned_unchanged(monkeypatch):
    warnings = []
    monkeypatch.setattr(dates.logger, 'warning', lambda msg, *args: warnings.append(msg % args))
    assert dates.add_days('not-a-date', 3) == 'not-a-date'
    assert warnings == ["Unparseable date 'not-a-date', returned unchanged"]
    assert dates.weeks_between('garbage', '2024-01-01') == 0


def test_weeks_between_ignores_order():
    assert dates.weeks_between('2024-01-01', '2024-01-29') == 4
    assert dates.weeks_between('2024-01-29', '2024-01-01') == 4
    assert dates.weeks_between('2024-01-01', '2024-01-07') == 0


def test_ages():
    on = datetime.date(2024, 6, 1)
    assert dates.age_in_years('2000-06-02', on) == 23
    assert dates.age_in_years('2000-06-01', on) == 24
    assert dates.age_in_months('2024-01-15', on) == 4
    assert dates.age_in_years(None, on) is None


def test_due_date_and_gestational_age():
    lmp = datetime.date(2024, 1, 1)
    assert obstetrics.estimated_due_date(lmp) == datetime.date(2024, 10, 7)
    assert obstetrics.gestational_age_weeks(lmp, datetime.date(2024, 3, 11)) == 10
    # LMP in the future
    assert obstetrics.gestational_age_weeks(lmp, datetime.date(2023, 12, 1)) == 0


def test_trimester_boundaries():
    assert obstetrics.trimester(13) == 1
    assert obstetrics.trimester(14) == 2
    assert obstetrics.trimester(27) == 2
    assert obstetrics.trimester(28) == 3


def test_visit_schedule():
    plan = obstetrics.visit_schedule('2024-01-01', 3)
    assert [v['gestationalWeek'] for v in plan] == [4, 8, 12]
    assert plan[0] == {
        'visitNumber': 1,
        'gestationalWeek': 4,
        'visitDate': '2024-01-29',
        'nextAppointment': '2024-02-26',
    }
    assert obstetrics.visit_schedule(None, 3) == []


def test_assess_risk():
    assert obstetrics.assess_risk(25, 1, []) == 'low'
    assert obstetrics.assess_risk(25, 1, ['anaemia']) == 'medium'
    assert obstetrics.assess_risk(36, 1, []) == 'medium'
    assert obstetrics.assess_risk(25, 5, []) == 'medium'
    assert obstetrics.assess_risk(25, 1, ['anaemia', 'hypertension']) == 'high'
    assert obstetrics.assess_risk(41, 1, []) == 'high'
    assert obstetrics.assess_risk(15, 1, []) == 'high'
