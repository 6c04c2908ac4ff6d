"""
Example households for quick calculations and demos.

Each preset is a plain record in the same shape ``Household.from_dict``
and the CLI's ``--input`` JSON accept.
"""

from typing import Any, Dict, List

from .errors import ValidationError
from .models import Household

# Ten-hour sessions
SESSION_HOURS = 10


def _child(age: int, hourly_fee: float, sessions: int) -> Dict[str, Any]:
    return {
        "age": age,
        "care_type": "centre-based",
        "fee_mode": "hourly",
        "hourly_fee": hourly_fee,
        "hours_per_week": sessions * SESSION_HOURS,
    }


PRESETS: Dict[str, Dict[str, Any]] = {
    "full-time-both": {
        "name": "Full-time Both Parents",
        "description": "5 days per week each, typical full-time arrangement",
        "household": {
            "parent1": {"income": 80000, "days_per_week": 5, "hours_per_day": 8},
            "parent2": {"income": 70000, "days_per_week": 5, "hours_per_day": 8},
            "children": [_child(3, 12.00, 5)],
        },
    },
    "full-time-one": {
        "name": "Full-time One Parent",
        "description": "One parent working, one at home",
        "household": {
            "parent1": {"income": 90000, "days_per_week": 5, "hours_per_day": 8},
            "parent2": {"income": 0, "days_per_week": 0, "hours_per_day": 0},
            "children": [_child(2, 12.50, 5)],
        },
    },
    "part-time-both": {
        "name": "Part-time Both Parents",
        "description": "3 days per week each",
        "household": {
            "parent1": {"income": 50000, "days_per_week": 3, "hours_per_day": 8},
            "parent2": {"income": 45000, "days_per_week": 3, "hours_per_day": 8},
            "children": [_child(4, 11.50, 3)],
        },
    },
    "full-part": {
        "name": "Full-time + Part-time",
        "description": "One full-time (5 days), one part-time (3 days)",
        "household": {
            "parent1": {"income": 85000, "days_per_week": 5, "hours_per_day": 8},
            "parent2": {"income": 40000, "days_per_week": 3, "hours_per_day": 6},
            "children": [_child(2, 13.00, 5)],
        },
    },
    "four-four": {
        "name": "Four Days Each",
        "description": "Both parents working 4 days per week",
        "household": {
            "parent1": {"income": 75000, "days_per_week": 4, "hours_per_day": 8},
            "parent2": {"income": 70000, "days_per_week": 4, "hours_per_day": 8},
            "children": [_child(3, 12.00, 4)],
        },
    },
    "compressed": {
        "name": "Compressed Week",
        "description": "One parent working 4 long days, other at home",
        "household": {
            "parent1": {"income": 95000, "days_per_week": 4, "hours_per_day": 10},
            "parent2": {"income": 0, "days_per_week": 0, "hours_per_day": 0},
            "children": [_child(1, 13.50, 4)],
        },
    },
}


def list_presets() -> List[str]:
    return list(PRESETS)


def load_preset(name: str) -> Household:
    """Build the household for a named preset."""
    try:
        preset = PRESETS[name]
    except KeyError:
        raise ValidationError(
            "preset", f"must be one of {', '.join(PRESETS)}", name
        ) from None
    return Household.from_dict(preset["household"])
