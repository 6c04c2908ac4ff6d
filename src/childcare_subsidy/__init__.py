"""
childcare-subsidy: Australian Child Care Subsidy (CCS) engine.

Calculates a household's subsidy entitlement and out-of-pocket childcare
cost from versioned rate tables, and sweeps work-day arrangements to find
the one that leaves the family best off.
"""

__version__ = "0.2.0"

from .calculators import calculate_household
from .config import DEFAULT_SCHEDULE, RateSchedule, load_rate_schedule
from .errors import ConfigurationError, DomainError, SubsidyError, ValidationError
from .models import (
    CareType,
    ChildProfile,
    DailyFee,
    HourlyFee,
    Household,
    ParentProfile,
    Weekday,
)
from .scenarios import (
    Metric,
    ScenarioMode,
    ScenarioOptions,
    find_best_scenario,
    generate_scenarios,
)

__all__ = [
    "calculate_household",
    "generate_scenarios",
    "find_best_scenario",
    "Metric",
    "ScenarioMode",
    "ScenarioOptions",
    "RateSchedule",
    "DEFAULT_SCHEDULE",
    "load_rate_schedule",
    "Household",
    "ParentProfile",
    "ChildProfile",
    "DailyFee",
    "HourlyFee",
    "CareType",
    "Weekday",
    "SubsidyError",
    "ValidationError",
    "ConfigurationError",
    "DomainError",
]
