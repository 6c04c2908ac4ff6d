"""
Income adjustment - converts full-time-equivalent income to the income
actually earned on a part-week pattern.

Adjusted income = base annual income x (work days per week / 5).
Hours per day is validated but does not change the result; it only feeds
the activity test and care-hours calculations.
"""

from dataclasses import dataclass
from typing import Optional

from ..config import DEFAULT_SCHEDULE, RateSchedule
from ..errors import ValidationError, require_number
from ..models import MAX_HOURS_PER_DAY, MAX_WORK_DAYS, Household

FULL_TIME_DAYS = 5


@dataclass(frozen=True)
class HouseholdSnapshot:
    """Adjusted income for each parent and the household total."""

    parent1_income: float
    parent2_income: float
    household_income: float


def calculate_adjusted_income(
    income: float,
    days_per_week: float,
    hours_per_day: float = 0,
) -> float:
    """
    Scale a full-time-equivalent income to the days actually worked.

    Args:
        income: Annual full-time-equivalent income (>= 0)
        days_per_week: Days worked per week (0-5)
        hours_per_day: Hours worked per day (0-24), accepted for interface
            compatibility and ignored by the formula

    Returns:
        Adjusted annual income
    """
    require_number("income", income, minimum=0)
    require_number("days_per_week", days_per_week, 0, MAX_WORK_DAYS)
    require_number("hours_per_day", hours_per_day, 0, MAX_HOURS_PER_DAY)

    return income * (days_per_week / FULL_TIME_DAYS)


def calculate_household_income(parent1_income: float, parent2_income: float = 0) -> float:
    """Combined adjusted income of both parents."""
    require_number("parent1_income", parent1_income, minimum=0)
    require_number("parent2_income", parent2_income, minimum=0)
    return parent1_income + parent2_income


def split_household_income(combined_income: float, parent1_ratio: float = 0.5) -> tuple:
    """
    Split a combined income between two parents.

    Returns:
        (parent1_income, parent2_income)
    """
    require_number("combined_income", combined_income, minimum=0)
    require_number("parent1_ratio", parent1_ratio, 0, 1)
    return combined_income * parent1_ratio, combined_income * (1 - parent1_ratio)


def validate_income(
    income: float,
    minimum: float = 0,
    maximum: Optional[float] = None,
    config: RateSchedule = DEFAULT_SCHEDULE,
) -> float:
    """Check an income against the schedule's accepted range."""
    upper = config.max_income if maximum is None else maximum
    if minimum > upper:
        raise ValidationError("income", f"range is empty ({minimum} > {upper})", income)
    return require_number("income", income, minimum, upper)


def snapshot_household(
    household: Household,
    config: RateSchedule = DEFAULT_SCHEDULE,
) -> HouseholdSnapshot:
    """Adjusted incomes for every parent in the household."""
    p1 = household.parent1
    validate_income(p1.income, config=config)
    parent1_income = calculate_adjusted_income(p1.income, p1.days_per_week, p1.hours_per_day)

    parent2_income = 0.0
    p2 = household.parent2
    if p2 is not None:
        validate_income(p2.income, config=config)
        parent2_income = calculate_adjusted_income(p2.income, p2.days_per_week, p2.hours_per_day)

    return HouseholdSnapshot(
        parent1_income=parent1_income,
        parent2_income=parent2_income,
        household_income=calculate_household_income(parent1_income, parent2_income),
    )
