import datetime

from records.services import vaccines


def test_catalogue_order_and_size():
    types = vaccines.vaccine_types()
    assert len(types) == 13
    assert types[0] == 'BCG'
    assert types[-1] == 'Other'


def test_schedule_info_for_multi_dose_vaccine():
    assert vaccines.get_vaccine_schedule_info('Pentavalent', 2) == {'interval': 2, 'isLastDose': False, 'maxDoses': 3}
    assert vaccines.get_vaccine_schedule_info('Pentavalent', 3)['isLastDose'] is True


def test_zero_interval_and_unknown_vaccine_fall_back_to_one():
    assert vaccines.get_vaccine_schedule_info('BCG', 1) == {'interval': 1, 'isLastDose': True, 'maxDoses': 1}
    assert vaccines.get_vaccine_schedule_info('Smallpox', 1) == {'interval': 1, 'isLastDose': True, 'maxDoses': 1}


def test_next_due_date():
    given = datetime.date(2024, 1, 31)
    assert vaccines.next_due_date('Hepatitis B', 1, given) == datetime.date(2024, 3, 31)
    assert vaccines.next_due_date('Measles', 1, given) == datetime.date(2024, 7, 31)
    assert vaccines.next_due_date('Tetanus Toxoid', 1, given) == datetime.date(2024, 2, 29)
    assert vaccines.next_due_date('Measles', 2, given) is None
    assert vaccines.next_due_date('BCG', 1, given) is None


def test_validate_dose_number():
    assert vaccines.validate_dose_number('OPV', 4) is None
    assert 'has 4 dose' in vaccines.validate_dose_number('OPV', 5)
    assert vaccines.validate_dose_number('OPV', 0) == 'doseNumber must be at least 1'
    # free-form vaccines only need a positive dose
    assert vaccines.validate_dose_number('Typhoid conjugate', 7) is None
