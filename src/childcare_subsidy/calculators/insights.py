"""
Insights on a calculated household: what the childcare bill costs each
earning parent, and how close household income sits to the higher tier's
cliff where younger siblings drop from 50% to the standard rate.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..config import DEFAULT_SCHEDULE, RateSchedule
from ..errors import require_number
from ..models import Household
from ..money import round_money

WORK_DAYS_PER_WEEK = 5
MONTHS_PER_YEAR = 12

# Distance from a threshold that triggers a warning
THRESHOLD_WARNING_RANGE = 10000


@dataclass(frozen=True)
class PersonRates:
    """Out-of-pocket cost expressed against one parent's income."""

    income: float
    daily_rate: float
    weekly_rate: float
    monthly_rate: float
    annual_rate: float
    percentage: float
    net_income: float


@dataclass(frozen=True)
class PerPersonRates:
    parent1: PersonRates
    parent2: PersonRates
    shared: PersonRates


class RiskLevel(Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class ThresholdRisk:
    level: RiskLevel
    message: str = ""
    detail: str = ""
    threshold: float = 0
    distance: float = 0

    @property
    def show_warning(self) -> bool:
        return self.level is not RiskLevel.NONE


def _person_rates(income: float, annual_out_of_pocket: float, weeks_per_year: int) -> PersonRates:
    if income <= 0:
        return PersonRates(income, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
    weekly = annual_out_of_pocket / weeks_per_year
    return PersonRates(
        income=income,
        daily_rate=round_money(weekly / WORK_DAYS_PER_WEEK),
        weekly_rate=round_money(weekly),
        monthly_rate=round_money(annual_out_of_pocket / MONTHS_PER_YEAR),
        annual_rate=round_money(annual_out_of_pocket),
        percentage=round_money(annual_out_of_pocket / income * 100),
        net_income=round_money(income - annual_out_of_pocket),
    )


def calculate_per_person_rates(
    parent1_income: float,
    parent2_income: float,
    annual_out_of_pocket: float,
    config: RateSchedule = DEFAULT_SCHEDULE,
) -> PerPersonRates:
    """
    Childcare cost as if each earning parent paid all of it from their salary.

    A parent with no income gets zeroed rates. ``shared`` is the household
    view: the same cost against the combined income.

    Args:
        parent1_income: Parent 1's adjusted annual income
        parent2_income: Parent 2's adjusted annual income
        annual_out_of_pocket: Household out-of-pocket cost per year
        config: Rate schedule (weeks per year)
    """
    require_number("parent1_income", parent1_income, minimum=0)
    require_number("parent2_income", parent2_income, minimum=0)
    require_number("annual_out_of_pocket", annual_out_of_pocket)

    weeks = config.weeks_per_year
    return PerPersonRates(
        parent1=_person_rates(parent1_income, annual_out_of_pocket, weeks),
        parent2=_person_rates(parent2_income, annual_out_of_pocket, weeks),
        shared=_person_rates(parent1_income + parent2_income, annual_out_of_pocket, weeks),
    )


def check_threshold_risk(
    income: float,
    has_multiple_young_children: bool,
    config: RateSchedule = DEFAULT_SCHEDULE,
    warning_range: Optional[float] = None,
) -> ThresholdRisk:
    """
    Warn when household income is near the higher tier's flat-50 band.

    Only families with two or more children at or below the higher-rate age
    ceiling are affected. Levels:
        low    - within range below the start of the last higher band
        medium - inside the last band, below the revert threshold
        high   - within range above the revert threshold
    """
    require_number("household_income", income, minimum=0)
    if not has_multiple_young_children:
        return ThresholdRisk(RiskLevel.NONE)

    span = THRESHOLD_WARNING_RANGE if warning_range is None else warning_range
    require_number("warning_range", span, minimum=0)
    lower = config.higher.bands[-1].start
    upper = config.higher.revert_threshold

    if lower - span <= income < lower:
        distance = lower - income
        return ThresholdRisk(
            level=RiskLevel.LOW,
            message=f"Approaching ${lower:,.0f} threshold",
            detail=(
                f"Income is ${distance:,.0f} below the threshold. Above it, younger "
                f"children receive a flat {config.higher.bands[-1].rate:g}% subsidy."
            ),
            threshold=lower,
            distance=distance,
        )
    if lower <= income < upper:
        distance = upper - income
        return ThresholdRisk(
            level=RiskLevel.MEDIUM,
            message=f"In the {config.higher.bands[-1].rate:g}% subsidy zone",
            detail=(
                f"Earning ${distance:,.0f} more crosses ${upper:,.0f} and younger "
                "children revert to the standard rate."
            ),
            threshold=upper,
            distance=distance,
        )
    if upper <= income < upper + span:
        distance = income - upper
        return ThresholdRisk(
            level=RiskLevel.HIGH,
            message=f"Just crossed the ${upper:,.0f} threshold",
            detail=(
                f"Income is ${distance:,.0f} over the threshold; younger children "
                "now use the standard rate."
            ),
            threshold=upper,
            distance=distance,
        )
    return ThresholdRisk(RiskLevel.NONE)


def has_multiple_young_children(
    household: Household,
    config: RateSchedule = DEFAULT_SCHEDULE,
) -> bool:
    """True when two or more children are at or below the higher-rate age ceiling."""
    young = [c for c in household.children if c.age <= config.higher_rate_age_ceiling]
    return len(young) >= 2
