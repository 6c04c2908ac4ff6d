"""
Child Care Subsidy calculators.

Each module handles one step of the household pipeline and reads its policy
numbers from a ``RateSchedule``:
1. income - full-time-equivalent income to adjusted household income
2. subsidy_rate - household income to a per-child CCS percentage
3. activity_test - work hours to a subsidised-hours allowance
4. schedule - work days to the days needing paid care
5. costs - capped fees, withholding and out-of-pocket amounts
"""

from .activity_test import (
    ActivityLevel,
    ActivityTestResult,
    calculate_hours_per_fortnight,
    calculate_subsidised_hours,
    determine_applicable_units,
)
from .costs import (
    CostBreakdown,
    CostTotals,
    HouseholdCosts,
    apply_withholding,
    calculate_child_cost,
    calculate_effective_daily_rate,
    calculate_effective_hourly_rate,
    calculate_weekly_costs,
)
from .household import HouseholdResult, calculate_household
from .income import (
    HouseholdSnapshot,
    calculate_adjusted_income,
    calculate_household_income,
    snapshot_household,
)
from .insights import calculate_per_person_rates, check_threshold_risk
from .schedule import SchedulePolicy, ScheduleResult, resolve_schedule
from .subsidy_rate import (
    SubsidyDetermination,
    Tier,
    calculate_child_rate,
    calculate_higher_rate,
    calculate_standard_rate,
    rate_curve,
)

__all__ = [
    "calculate_adjusted_income",
    "calculate_household_income",
    "snapshot_household",
    "HouseholdSnapshot",
    "calculate_standard_rate",
    "calculate_higher_rate",
    "calculate_child_rate",
    "rate_curve",
    "SubsidyDetermination",
    "Tier",
    "calculate_hours_per_fortnight",
    "calculate_subsidised_hours",
    "determine_applicable_units",
    "ActivityLevel",
    "ActivityTestResult",
    "resolve_schedule",
    "SchedulePolicy",
    "ScheduleResult",
    "apply_withholding",
    "calculate_effective_hourly_rate",
    "calculate_effective_daily_rate",
    "calculate_weekly_costs",
    "calculate_child_cost",
    "CostBreakdown",
    "CostTotals",
    "HouseholdCosts",
    "calculate_household",
    "HouseholdResult",
    "calculate_per_person_rates",
    "check_threshold_risk",
]
