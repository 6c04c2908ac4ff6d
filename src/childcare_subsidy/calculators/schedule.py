"""
Schedule resolution - which weekdays need paid childcare.

Care is needed only on days when BOTH parents work: a parent who is home
can mind the children. When only one parent works (a single parent, or a
second parent with no work days) care is needed on every day that parent
works.
The union policy (care whenever either parent works) is available for
comparison but is never applied by default.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple

from ..config import DEFAULT_SCHEDULE, RateSchedule
from ..errors import ValidationError, require_number
from ..models import MAX_WORK_DAYS, WEEKDAYS, Household, Weekday, sort_days
from ..money import round_money


class SchedulePolicy(Enum):
    INTERSECTION = "intersection"
    UNION = "union"


@dataclass(frozen=True)
class ScheduleResult:
    """Days needing paid care and the days a parent is home."""

    care_days: Tuple[Weekday, ...]
    days_without_care: Tuple[Weekday, ...]
    parent1_days: Tuple[Weekday, ...]
    parent2_days: Tuple[Weekday, ...]
    overlapping_days: Tuple[Weekday, ...]
    parent1_only_days: Tuple[Weekday, ...]
    parent2_only_days: Tuple[Weekday, ...]
    policy: SchedulePolicy
    explanation: str

    @property
    def day_count(self) -> int:
        return len(self.care_days)

    def breakdown(self) -> Dict[str, str]:
        """Day lists formatted for display."""
        return {
            "parent1_days": format_days(self.parent1_days),
            "parent2_days": format_days(self.parent2_days),
            "care_days": format_days(self.care_days),
            "days_without_care": format_days(self.days_without_care),
            "overlapping_days": format_days(self.overlapping_days),
            "parent1_only_days": format_days(self.parent1_only_days),
            "parent2_only_days": format_days(self.parent2_only_days),
            "explanation": self.explanation,
        }


@dataclass(frozen=True)
class CostSavings:
    days_without_care: int
    weekly_savings: float
    annual_savings: float
    percentage_saved: int


def format_days(days: Iterable[Weekday]) -> str:
    labels = [d.label for d in days]
    return ", ".join(labels) if labels else "None"


def _normalise(field: str, days: Iterable) -> Tuple[Weekday, ...]:
    if isinstance(days, str):
        raise ValidationError(field, "must be a collection of weekdays", days)
    parsed = [Weekday.parse(d) for d in days]
    if len(set(parsed)) != len(parsed):
        raise ValidationError(field, "must not repeat a weekday", days)
    return sort_days(parsed)


def resolve_schedule(
    parent1_days: Iterable,
    parent2_days: Optional[Iterable] = None,
    policy: SchedulePolicy = SchedulePolicy.INTERSECTION,
) -> ScheduleResult:
    """
    Resolve the care days for one or two parents' work days.

    Args:
        parent1_days: Weekdays parent 1 works
        parent2_days: Weekdays parent 2 works, or None for a single parent.
            An empty collection on either side means only the other
            parent works, so care follows that parent's days.
        policy: INTERSECTION (default) or UNION

    Returns:
        ScheduleResult with the care days, the complementary days and a
        human-readable explanation
    """
    policy = SchedulePolicy(policy)
    p1 = _normalise("parent1_days", parent1_days)
    p2: Tuple[Weekday, ...] = () if parent2_days is None else _normalise("parent2_days", parent2_days)
    overlapping: Tuple[Weekday, ...] = ()

    if not p2:
        care = p1
        explanation = (
            f"Single parent working {format_days(p1)}. "
            "Childcare needed on all work days."
        )
    elif not p1:
        care = p2
        explanation = (
            f"Only parent 2 working {format_days(p2)}. "
            "Childcare needed on all work days."
        )
    else:
        overlapping = tuple(d for d in p1 if d in p2)
        if policy is SchedulePolicy.INTERSECTION:
            care = overlapping
        else:
            care = sort_days(set(p1) | set(p2))
        explanation = (
            f"Parent 1: {format_days(p1)}. Parent 2: {format_days(p2)}. "
            f"Childcare needed: {format_days(care)}."
        )

    return ScheduleResult(
        care_days=care,
        days_without_care=tuple(d for d in WEEKDAYS if d not in care),
        parent1_days=p1,
        parent2_days=p2,
        overlapping_days=overlapping,
        parent1_only_days=tuple(d for d in p1 if d not in p2),
        parent2_only_days=tuple(d for d in p2 if d not in p1),
        policy=policy,
        explanation=explanation,
    )


def resolve_household_schedule(
    household: Household,
    policy: SchedulePolicy = SchedulePolicy.INTERSECTION,
) -> ScheduleResult:
    p1 = household.parent1
    p2 = household.working_parent2
    return resolve_schedule(
        p1.work_days if p1.is_working else (),
        p2.work_days if p2 is not None else None,
        policy,
    )


def days_from_count(count: int) -> Tuple[Weekday, ...]:
    """The first ``count`` weekdays, starting Monday."""
    _check_count(count)
    return WEEKDAYS[:count]


def days_from_count_staggered(count: int) -> Tuple[Weekday, ...]:
    """The last ``count`` weekdays, ending Friday."""
    _check_count(count)
    return WEEKDAYS[len(WEEKDAYS) - count:]


def _check_count(count: int):
    if isinstance(count, bool) or not isinstance(count, int) or not 0 <= count <= MAX_WORK_DAYS:
        raise ValidationError("days", f"must be a whole number between 0 and {MAX_WORK_DAYS}", count)


def calculate_cost_savings(
    total_days: int,
    care_days: int,
    daily_rate: float,
    config: RateSchedule = DEFAULT_SCHEDULE,
) -> CostSavings:
    """
    Savings from days a parent is home instead of paying for care.

    Args:
        total_days: Days care would otherwise be booked (usually 5)
        care_days: Days care is actually needed
        daily_rate: Provider's daily fee
        config: Rate schedule (weeks per year)
    """
    require_number("total_days", total_days, minimum=0)
    require_number("care_days", care_days, 0, total_days)
    require_number("daily_rate", daily_rate, minimum=0)

    days_without_care = total_days - care_days
    weekly = days_without_care * daily_rate
    percentage = math.floor(days_without_care / total_days * 100 + 0.5) if total_days > 0 else 0

    return CostSavings(
        days_without_care=days_without_care,
        weekly_savings=round_money(weekly),
        annual_savings=round_money(weekly * config.weeks_per_year),
        percentage_saved=percentage,
    )
