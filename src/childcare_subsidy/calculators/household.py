"""
Household pipeline: income -> rates -> activity test -> schedule -> costs.

``calculate_household`` is pure. Pass any mutable mapping as ``cache`` to
memoise results across calls; the key is the full hashable input.
"""

from dataclasses import dataclass
from typing import MutableMapping, Optional, Tuple

from ..config import DEFAULT_SCHEDULE, RateSchedule
from ..errors import DomainError
from ..models import Household
from .activity_test import ActivityTestResult, evaluate_household_activity
from .costs import (
    CostBreakdown,
    HouseholdCosts,
    aggregate_costs,
    calculate_child_cost,
    calculate_cost_percentage,
    calculate_net_income,
    resolve_withholding,
)
from .income import HouseholdSnapshot, snapshot_household
from .schedule import ScheduleResult, SchedulePolicy, resolve_household_schedule


@dataclass(frozen=True)
class HouseholdResult:
    """Everything computed for one household."""

    snapshot: HouseholdSnapshot
    activity: ActivityTestResult
    schedule: ScheduleResult
    children: Tuple[CostBreakdown, ...]
    totals: HouseholdCosts
    net_income: float
    cost_percentage: float
    withholding_rate: float

    @property
    def household_income(self) -> float:
        return self.snapshot.household_income


CacheKey = Tuple[Household, RateSchedule, float, SchedulePolicy]


def calculate_household(
    household: Household,
    config: RateSchedule = DEFAULT_SCHEDULE,
    withholding_pct: Optional[float] = None,
    cache: Optional[MutableMapping[CacheKey, HouseholdResult]] = None,
    policy: SchedulePolicy = SchedulePolicy.INTERSECTION,
) -> HouseholdResult:
    """
    Run the full pipeline for a household.

    Args:
        household: Parents and children
        config: Rate schedule
        withholding_pct: Withholding override, schedule default if None
        cache: Optional memo mapping owned by the caller
        policy: Care-day policy; intersection unless explicitly overridden

    Returns:
        HouseholdResult
    """
    if not household.children:
        raise DomainError("At least one child is required to calculate costs")
    pct = resolve_withholding(withholding_pct, config)

    key = (household, config, pct, policy)
    if cache is not None and key in cache:
        return cache[key]

    snapshot = snapshot_household(household, config)
    activity = evaluate_household_activity(household, config)
    schedule = resolve_household_schedule(household, policy)

    children = tuple(
        calculate_child_cost(
            child,
            position,
            snapshot.household_income,
            activity,
            schedule,
            pct,
            config,
        )
        for position, child in household.ordered_children()
    )
    totals = aggregate_costs(children)
    annual_oop = totals.annual.out_of_pocket

    result = HouseholdResult(
        snapshot=snapshot,
        activity=activity,
        schedule=schedule,
        children=children,
        totals=totals,
        net_income=calculate_net_income(snapshot.household_income, annual_oop),
        cost_percentage=calculate_cost_percentage(annual_oop, snapshot.household_income),
        withholding_rate=pct,
    )
    if cache is not None:
        cache[key] = result
    return result
