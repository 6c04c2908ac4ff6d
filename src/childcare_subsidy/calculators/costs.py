"""
Cost calculation - subsidy, withholding and out-of-pocket amounts.

Per child and per week:
    effective rate   = min(provider fee, rate cap)
    subsidy per unit = rate% x effective rate
    gross subsidy    = subsidy per unit x min(subsidised units, actual units)
    withheld         = withholding% x gross subsidy
    paid subsidy     = gross subsidy - withheld
    full cost        = provider fee x actual units
    out-of-pocket    = full cost - paid subsidy

A unit is an hour for hourly fees and a day for daily fees. Every money
figure is rounded to cents where it is computed.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from ..config import DEFAULT_SCHEDULE, RateSchedule
from ..errors import DomainError, ValidationError, require_number
from ..models import MAX_CHILD_AGE, WEEKDAYS, CareType, ChildProfile, DailyFee, HourlyFee
from ..money import PERIOD_MULTIPLIERS, round_money
from .activity_test import ActivityTestResult
from .schedule import ScheduleResult
from .subsidy_rate import SubsidyDetermination, calculate_child_rate


@dataclass(frozen=True)
class WithholdingResult:
    gross_subsidy: float
    withheld_amount: float
    paid_subsidy: float
    withholding_rate: float


@dataclass(frozen=True)
class WeeklyCosts:
    """One week of care for one child."""

    subsidy_per_unit: float
    fee: float
    subsidised_units: float
    actual_units: float
    units_with_subsidy: float
    units_without_subsidy: float
    gross_subsidy: float
    withheld: float
    paid_subsidy: float
    full_cost: float
    out_of_pocket: float
    withholding_rate: float


@dataclass(frozen=True)
class CostTotals:
    """Money figures for one period."""

    gross_subsidy: float = 0.0
    withheld: float = 0.0
    paid_subsidy: float = 0.0
    full_cost: float = 0.0
    out_of_pocket: float = 0.0

    def scaled(self, multiplier: float) -> "CostTotals":
        return CostTotals(
            gross_subsidy=round_money(self.gross_subsidy * multiplier),
            withheld=round_money(self.withheld * multiplier),
            paid_subsidy=round_money(self.paid_subsidy * multiplier),
            full_cost=round_money(self.full_cost * multiplier),
            out_of_pocket=round_money(self.out_of_pocket * multiplier),
        )

    def __add__(self, other: "CostTotals") -> "CostTotals":
        return CostTotals(
            gross_subsidy=round_money(self.gross_subsidy + other.gross_subsidy),
            withheld=round_money(self.withheld + other.withheld),
            paid_subsidy=round_money(self.paid_subsidy + other.paid_subsidy),
            full_cost=round_money(self.full_cost + other.full_cost),
            out_of_pocket=round_money(self.out_of_pocket + other.out_of_pocket),
        )


@dataclass(frozen=True)
class CostBreakdown:
    """Weekly and annual costs for one child."""

    position: int
    age: float
    care_type: CareType
    fee_mode: str
    determination: SubsidyDetermination
    rate_cap: float
    effective_rate: float
    hours_per_day: Optional[float]
    weekly: WeeklyCosts
    annual: CostTotals

    @property
    def subsidy_rate(self) -> float:
        return self.determination.rate

    @property
    def weekly_totals(self) -> CostTotals:
        w = self.weekly
        return CostTotals(w.gross_subsidy, w.withheld, w.paid_subsidy, w.full_cost, w.out_of_pocket)


@dataclass(frozen=True)
class HouseholdCosts:
    """Costs summed across every child."""

    weekly: CostTotals
    annual: CostTotals
    children: int

    def for_period(self, period: str) -> CostTotals:
        """Weekly totals converted to weekly/fortnightly/monthly/annual."""
        if period == "annual":
            return self.annual
        if period not in PERIOD_MULTIPLIERS:
            raise ValidationError(
                "period", f"must be one of {', '.join(PERIOD_MULTIPLIERS)}", period
            )
        return self.weekly.scaled(PERIOD_MULTIPLIERS[period])


def resolve_withholding(
    withholding_pct: Optional[float] = None,
    config: RateSchedule = DEFAULT_SCHEDULE,
) -> float:
    """Default the withholding percentage and check it against the schedule."""
    if withholding_pct is None:
        return config.withholding.default
    require_number("withholding_pct", withholding_pct)
    w = config.withholding
    if not w.minimum <= withholding_pct <= w.maximum:
        raise DomainError(
            f"Withholding rate must be between {w.minimum:g} and {w.maximum:g} "
            f"(got {withholding_pct!r})"
        )
    return withholding_pct


def apply_withholding(
    gross_subsidy: float,
    withholding_pct: Optional[float] = None,
    config: RateSchedule = DEFAULT_SCHEDULE,
) -> WithholdingResult:
    """
    Split a subsidy into the withheld and paid portions.

    paid + withheld equals the rounded gross exactly, to the cent.
    """
    require_number("gross_subsidy", gross_subsidy, minimum=0)
    pct = resolve_withholding(withholding_pct, config)

    gross = round_money(gross_subsidy)
    withheld = round_money(gross * pct / 100)
    paid = round_money(gross - withheld)

    return WithholdingResult(
        gross_subsidy=gross,
        withheld_amount=withheld,
        paid_subsidy=paid,
        withholding_rate=pct,
    )


def calculate_effective_hourly_rate(
    provider_fee: float,
    care_type: CareType,
    child_age: float,
    config: RateSchedule = DEFAULT_SCHEDULE,
) -> float:
    """Lesser of the provider's hourly fee and the hourly rate cap."""
    require_number("provider_fee", provider_fee, minimum=0)
    require_number("child_age", child_age, 0, MAX_CHILD_AGE)
    cap = config.hourly_cap(CareType.parse(care_type), child_age)
    return round_money(min(provider_fee, cap))


def calculate_effective_daily_rate(
    provider_daily_fee: float,
    care_type: CareType,
    child_age: float,
    hours_per_day: float,
    config: RateSchedule = DEFAULT_SCHEDULE,
) -> float:
    """Lesser of the provider's daily fee and the hourly cap scaled to a day."""
    require_number("provider_daily_fee", provider_daily_fee, minimum=0)
    require_number("child_age", child_age, 0, MAX_CHILD_AGE)
    require_number("hours_per_day", hours_per_day, 0, 24)
    if hours_per_day <= 0:
        raise ValidationError("hours_per_day", "must be greater than 0", hours_per_day)
    cap = config.daily_cap(CareType.parse(care_type), child_age, hours_per_day)
    return round_money(min(provider_daily_fee, cap))


def calculate_subsidy_per_unit(subsidy_rate: float, effective_rate: float) -> float:
    """Subsidy per hour or per day, rounded to cents."""
    require_number("subsidy_rate", subsidy_rate, 0, 100)
    require_number("effective_rate", effective_rate, minimum=0)
    return round_money(subsidy_rate / 100 * effective_rate)


def calculate_weekly_costs(
    subsidy_per_unit: float,
    fee: float,
    subsidised_units: float,
    actual_units: float,
    withholding_pct: Optional[float] = None,
    config: RateSchedule = DEFAULT_SCHEDULE,
) -> WeeklyCosts:
    """
    Weekly subsidy and cost for one child.

    Args:
        subsidy_per_unit: Subsidy per hour or day
        fee: Provider fee per hour or day
        subsidised_units: Allowance from the activity test, same unit
        actual_units: Units of care used in the week
        withholding_pct: Withholding percentage, schedule default if None
        config: Rate schedule

    Returns:
        WeeklyCosts
    """
    require_number("subsidy_per_unit", subsidy_per_unit, minimum=0)
    require_number("fee", fee, minimum=0)
    require_number("subsidised_units", subsidised_units, minimum=0)
    require_number("actual_units", actual_units, minimum=0)

    with_subsidy = min(subsidised_units, actual_units)
    without_subsidy = max(0, actual_units - subsidised_units)

    withholding = apply_withholding(subsidy_per_unit * with_subsidy, withholding_pct, config)
    full_cost = round_money(fee * actual_units)

    return WeeklyCosts(
        subsidy_per_unit=subsidy_per_unit,
        fee=fee,
        subsidised_units=subsidised_units,
        actual_units=actual_units,
        units_with_subsidy=with_subsidy,
        units_without_subsidy=without_subsidy,
        gross_subsidy=withholding.gross_subsidy,
        withheld=withholding.withheld_amount,
        paid_subsidy=withholding.paid_subsidy,
        full_cost=full_cost,
        out_of_pocket=round_money(full_cost - withholding.paid_subsidy),
        withholding_rate=withholding.withholding_rate,
    )


def calculate_annual_cost(
    weekly_cost: float,
    weeks_per_year: Optional[int] = None,
    config: RateSchedule = DEFAULT_SCHEDULE,
) -> float:
    """Weekly amount times weeks per year (52 by default)."""
    require_number("weekly_cost", weekly_cost)
    weeks = config.weeks_per_year if weeks_per_year is None else weeks_per_year
    require_number("weeks_per_year", weeks, minimum=1)
    return round_money(weekly_cost * weeks)


def calculate_net_income(household_income: float, annual_out_of_pocket: float) -> float:
    """Household income left after childcare; negative when care costs more."""
    require_number("household_income", household_income, minimum=0)
    require_number("annual_out_of_pocket", annual_out_of_pocket)
    return round_money(household_income - annual_out_of_pocket)


def calculate_cost_percentage(annual_out_of_pocket: float, household_income: float) -> float:
    """Out-of-pocket cost as a percentage of household income."""
    require_number("annual_out_of_pocket", annual_out_of_pocket)
    require_number("household_income", household_income, minimum=0)
    if household_income == 0:
        return 0.0
    return round_money(annual_out_of_pocket / household_income * 100)


def calculate_child_cost(
    child: ChildProfile,
    position: int,
    household_income: float,
    activity: ActivityTestResult,
    schedule: Optional[ScheduleResult] = None,
    withholding_pct: Optional[float] = None,
    config: RateSchedule = DEFAULT_SCHEDULE,
) -> CostBreakdown:
    """
    Full weekly and annual breakdown for one child.

    When a schedule is given, care is limited to the days it requires:
    a daily booking covers at most ``schedule.day_count`` days and weekly
    hours are spread evenly across the five weekdays.
    """
    determination = calculate_child_rate(household_income, child.age, position, config)
    fee = child.fee

    if isinstance(fee, HourlyFee):
        fee_mode = "hourly"
        hours_per_day = None
        rate_cap = config.hourly_cap(child.care_type, child.age)
        effective = calculate_effective_hourly_rate(fee.hourly_fee, child.care_type, child.age, config)
        fee_amount = fee.hourly_fee
        subsidised = activity.hours_per_week
        actual = fee.hours_per_week
        if schedule is not None:
            actual = fee.hours_per_week * schedule.day_count / len(WEEKDAYS)
    elif isinstance(fee, DailyFee):
        fee_mode = "daily"
        hours_per_day = fee.hours_per_day
        rate_cap = config.daily_cap(child.care_type, child.age, fee.hours_per_day)
        effective = calculate_effective_daily_rate(
            fee.daily_fee, child.care_type, child.age, fee.hours_per_day, config
        )
        fee_amount = fee.daily_fee
        subsidised = activity.days_per_week(fee.hours_per_day)
        actual = fee.days_of_care
        if schedule is not None:
            actual = min(fee.days_of_care, schedule.day_count)
    else:
        raise TypeError(f"Unsupported fee mode: {type(fee).__name__}")

    per_unit = calculate_subsidy_per_unit(determination.rate, effective)
    weekly = calculate_weekly_costs(per_unit, fee_amount, subsidised, actual, withholding_pct, config)

    return CostBreakdown(
        position=position,
        age=child.age,
        care_type=child.care_type,
        fee_mode=fee_mode,
        determination=determination,
        rate_cap=rate_cap,
        effective_rate=effective,
        hours_per_day=hours_per_day,
        weekly=weekly,
        annual=CostTotals(
            gross_subsidy=calculate_annual_cost(weekly.gross_subsidy, config=config),
            withheld=calculate_annual_cost(weekly.withheld, config=config),
            paid_subsidy=calculate_annual_cost(weekly.paid_subsidy, config=config),
            full_cost=calculate_annual_cost(weekly.full_cost, config=config),
            out_of_pocket=calculate_annual_cost(weekly.out_of_pocket, config=config),
        ),
    )


def aggregate_costs(breakdowns: Iterable[CostBreakdown]) -> HouseholdCosts:
    """Sum every child's weekly and annual figures."""
    weekly = CostTotals()
    annual = CostTotals()
    count = 0
    for breakdown in breakdowns:
        weekly = weekly + breakdown.weekly_totals
        annual = annual + breakdown.annual
        count += 1
    return HouseholdCosts(weekly=weekly, annual=annual, children=count)
