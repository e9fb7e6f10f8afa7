"""
Immunization dose schedule.

Each vaccine in the national schedule has a dose count and a spacing in
months between consecutive doses.  The calculator answers whether a dose
is the last one and when the next dose falls due.
"""
from __future__ import annotations

import datetime
from typing import Dict, List, Optional

from .dates import add_months, parse_date

VACCINE_SCHEDULES: Dict[str, Dict[str, int]] = {
    'BCG': {'interval': 0, 'maxDoses': 1},
    'Hepatitis B': {'interval': 2, 'maxDoses': 3},
    'OPV': {'interval': 2, 'maxDoses': 4},
    'Pentavalent': {'interval': 2, 'maxDoses': 3},
    'Pneumococcal': {'interval': 2, 'maxDoses': 3},
    'Rotavirus': {'interval': 2, 'maxDoses': 2},
    'Measles': {'interval': 6, 'maxDoses': 2},
    'Yellow Fever': {'interval': 0, 'maxDoses': 1},
    'Meningitis': {'interval': 0, 'maxDoses': 1},
    'Tetanus Toxoid': {'interval': 1, 'maxDoses': 5},
    'HPV': {'interval': 6, 'maxDoses': 2},
    'COVID-19': {'interval': 1, 'maxDoses': 2},
    'Other': {'interval': 1, 'maxDoses': 3},
}


def vaccine_types() -> List[str]:
    return list(VACCINE_SCHEDULES)


def is_known_vaccine(vaccine_type: str) -> bool:
    return vaccine_type in VACCINE_SCHEDULES


def get_vaccine_schedule_info(vaccine_type: str, dose_number: int) -> dict:
    schedule = VACCINE_SCHEDULES.get(vaccine_type) or {}
    # single-dose vaccines carry interval 0; they are always the last dose
    interval = schedule.get('interval') or 1
    max_doses = schedule.get('maxDoses') or 1
    return {
        'interval': interval,
        'isLastDose': int(dose_number) >= max_doses,
        'maxDoses': max_doses,
    }


def validate_dose_number(vaccine_type: str, dose_number: int) -> Optional[str]:
    """Return an error message when the dose is outside the vaccine's range."""
    try:
        dose = int(dose_number)
    except (TypeError, ValueError):
        return 'doseNumber must be a whole number'
    if dose < 1:
        return 'doseNumber must be at least 1'
    if is_known_vaccine(vaccine_type):
        max_doses = VACCINE_SCHEDULES[vaccine_type]['maxDoses']
        if dose > max_doses:
            return f'{vaccine_type} has {max_doses} dose(s); got dose {dose}'
    return None


def next_due_date(vaccine_type: str, dose_number: int, vaccination_date) -> Optional[datetime.date]:
    given = parse_date(vaccination_date)
    if given is None:
        return None
    info = get_vaccine_schedule_info(vaccine_type, dose_number)
    if info['isLastDose']:
        return None
    return add_months(given, info['interval'])


def schedule_catalogue() -> List[dict]:
    return [
        {'vaccineType': name, 'interval': s['interval'], 'maxDoses': s['maxDoses']}
        for name, s in VACCINE_SCHEDULES.items()
    ]
