"""
Antenatal care arithmetic: due dates, gestational age, visit planning
and a simple risk grading.
"""
from __future__ import annotations

import datetime
from typing import Iterable, List, Optional

from .dates import add_weeks, parse_date

PREGNANCY_DAYS = 280
DEFAULT_FIRST_VISIT_WEEK = 4
DEFAULT_INTERVAL_WEEKS = 4

RISK_LEVELS = ('low', 'medium', 'high')


def estimated_due_date(lmp) -> Optional[datetime.date]:
    start = parse_date(lmp)
    if start is None:
        return None
    return start + datetime.timedelta(days=PREGNANCY_DAYS)


def gestational_age_weeks(lmp, on=None) -> int:
    """Completed weeks since LMP; 0 when LMP is missing or in the future."""
    start = parse_date(lmp)
    if start is None:
        return 0
    today = parse_date(on) or datetime.date.today()
    return max(0, (today - start).days // 7)


def trimester(weeks: int) -> int:
    if weeks < 14:
        return 1
    if weeks < 28:
        return 2
    return 3


def next_appointment(visit_date, interval_weeks: int = DEFAULT_INTERVAL_WEEKS):
    return add_weeks(visit_date, interval_weeks)


def visit_schedule(lmp, count: int, first_week: int = DEFAULT_FIRST_VISIT_WEEK,
                   interval_weeks: int = DEFAULT_INTERVAL_WEEKS) -> List[dict]:
    """Planned visits counted from LMP.

    Visit ``i`` falls in gestational week ``first_week + i * interval_weeks``.
    """
    start = parse_date(lmp)
    if start is None:
        return []
    plan = []
    for i in range(max(0, int(count))):
        week = first_week + i * interval_weeks
        visit_date = add_weeks(start, week)
        plan.append({
            'visitNumber': i + 1,
            'gestationalWeek': week,
            'visitDate': visit_date.isoformat(),
            'nextAppointment': next_appointment(visit_date, interval_weeks).isoformat(),
        })
    return plan


def assess_risk(age: Optional[int], gravida: Optional[int], risk_factors: Optional[Iterable] = None) -> str:
    factors = [f for f in (risk_factors or []) if f]
    if len(factors) >= 2 or (age is not None and (age >= 40 or age < 16)):
        return 'high'
    if len(factors) == 1 or (age is not None and age >= 35) or (gravida or 0) >= 5:
        return 'medium'
    return 'low'
