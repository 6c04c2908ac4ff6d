"""
Scenario generator: re-runs the household pipeline across work-day
combinations so families can compare arrangements.

Generation is a pure map over ``(parent1_days, parent2_days, name)``
tuples. Each combination is independent, so the map may run on a thread
pool; results always come back in combination order.

Day placement: parent 1 works the first N weekdays. With ``stagger`` set
(the default) parent 2 works the last M weekdays, so the days both parents
work, and so the days needing paid care, are as few as the counts allow:
max(0, N + M - 5) when both parents work. A parent at 0 days counts as
absent, so care follows the other parent's days.
"""

import hashlib
import secrets
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, List, MutableMapping, Optional, Sequence, Tuple

from tqdm import tqdm

from ..calculators.household import HouseholdResult, calculate_household
from ..calculators.schedule import days_from_count, days_from_count_staggered
from ..config import DEFAULT_SCHEDULE, RateSchedule
from ..errors import ValidationError
from ..models import MAX_WORK_DAYS, Household, ParentProfile

COMMON_COMBINATIONS: Tuple[Tuple[int, int, str], ...] = (
    (5, 5, "5+5 days (Both full-time)"),
    (5, 4, "5+4 days"),
    (5, 3, "5+3 days"),
    (5, 2, "5+2 days"),
    (5, 0, "5+0 days (One parent working)"),
    (4, 4, "4+4 days"),
    (4, 3, "4+3 days"),
    (4, 2, "4+2 days"),
    (3, 3, "3+3 days"),
    (3, 2, "3+2 days"),
    (2, 2, "2+2 days"),
)

SINGLE_PARENT_COMBINATIONS: Tuple[Tuple[int, int, str], ...] = (
    (5, 0, "5 days (Full-time)"),
    (4, 0, "4 days"),
    (3, 0, "3 days"),
    (2, 0, "2 days"),
    (1, 0, "1 day"),
)

ID_DIGEST_SIZE = 5


class ScenarioMode(Enum):
    ALL = "all"
    COMMON = "common"
    SINGLE_PARENT = "single-parent"
    CUSTOM = "custom"


@dataclass(frozen=True)
class ScenarioOptions:
    """Configuration for a scenario sweep."""

    mode: ScenarioMode = ScenarioMode.COMMON
    stagger: bool = True
    workers: int = 1
    show_progress: bool = False
    # Fixed salt makes scenario IDs reproducible; None draws a fresh one
    salt: Optional[str] = None
    withholding_pct: Optional[float] = None


@dataclass(frozen=True)
class CustomCombination:
    """Caller-chosen work days with an optional display name."""

    parent1_days: int
    parent2_days: int = 0
    name: Optional[str] = None


@dataclass(frozen=True)
class Scenario:
    """One fully computed work arrangement."""

    id: str
    name: str
    parent1_days: int
    parent2_days: int
    result: HouseholdResult
    is_favorite: bool = False
    is_custom: bool = False

    @property
    def total_work_days(self) -> int:
        return self.parent1_days + self.parent2_days

    @property
    def parent1_income(self) -> float:
        return self.result.snapshot.parent1_income

    @property
    def parent2_income(self) -> float:
        return self.result.snapshot.parent2_income

    @property
    def household_income(self) -> float:
        return self.result.snapshot.household_income

    @property
    def care_days(self) -> int:
        return self.result.schedule.day_count

    @property
    def annual_subsidy(self) -> float:
        return self.result.totals.annual.paid_subsidy

    @property
    def annual_cost(self) -> float:
        return self.result.totals.annual.full_cost

    @property
    def annual_out_of_pocket(self) -> float:
        return self.result.totals.annual.out_of_pocket

    @property
    def net_income(self) -> float:
        return self.result.net_income

    @property
    def cost_percentage(self) -> float:
        return self.result.cost_percentage

    def with_favorite(self, flag: bool = True) -> "Scenario":
        """Copy tagged as favorited; computed fields are untouched."""
        return replace(self, is_favorite=bool(flag))


def default_name(parent1_days: int, parent2_days: int, single_parent: bool = False) -> str:
    if single_parent:
        return f"{parent1_days} day" if parent1_days == 1 else f"{parent1_days} days"
    return f"{parent1_days}+{parent2_days} days"


def scenario_id(parent1_days: int, parent2_days: int, name: str, index: int, salt: str) -> str:
    """Identifier unique within a sweep and stable for a given salt."""
    digest = hashlib.blake2b(
        f"{salt}|{index}|{parent1_days}|{parent2_days}|{name}".encode("utf-8"),
        digest_size=ID_DIGEST_SIZE,
    ).hexdigest()
    return f"scenario-{parent1_days}-{parent2_days}-{digest}"


def _check_days(field: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= MAX_WORK_DAYS:
        raise ValidationError(field, f"must be a whole number between 0 and {MAX_WORK_DAYS}", value)
    return value


def _is_single_parent(household: Household) -> bool:
    return household.is_single_parent or household.parent2.income == 0


def build_combinations(
    household: Household,
    mode: ScenarioMode,
    custom: Optional[Sequence[CustomCombination]] = None,
) -> List[Tuple[int, int, str]]:
    """
    Work-day combinations for a mode.

    Single-parent combinations have parent 2 days of 0; parent 2 stays in
    the household and counts as not working.
    """
    mode = ScenarioMode(mode)

    if mode is ScenarioMode.ALL:
        if household.parent2 is None:
            return [(d, 0, default_name(d, 0, True)) for d in range(MAX_WORK_DAYS, 0, -1)]
        return [
            (p1, p2, default_name(p1, p2))
            for p1 in range(MAX_WORK_DAYS, -1, -1)
            for p2 in range(MAX_WORK_DAYS, -1, -1)
            if p1 or p2
        ]
    if mode is ScenarioMode.COMMON:
        if _is_single_parent(household):
            return list(SINGLE_PARENT_COMBINATIONS)
        return list(COMMON_COMBINATIONS)
    if mode is ScenarioMode.SINGLE_PARENT:
        return list(SINGLE_PARENT_COMBINATIONS)

    if not custom:
        raise ValidationError("custom", "must list at least one combination for custom mode", custom)
    combos = []
    for combo in custom:
        if not isinstance(combo, CustomCombination):
            combo = CustomCombination(*combo)
        p1 = _check_days("parent1_days", combo.parent1_days)
        p2 = _check_days("parent2_days", combo.parent2_days)
        combos.append((p1, p2, combo.name or default_name(p1, p2)))
    return combos


def _scenario_household(
    household: Household,
    parent1_days: int,
    parent2_days: int,
    stagger: bool,
) -> Household:
    p1 = household.parent1
    parent1 = ParentProfile(
        income=p1.income,
        days_per_week=parent1_days,
        hours_per_day=p1.hours_per_day,
        work_days=days_from_count(parent1_days),
    )
    parent2 = None
    if household.parent2 is not None:
        p2 = household.parent2
        place = days_from_count_staggered if stagger else days_from_count
        parent2 = ParentProfile(
            income=p2.income,
            days_per_week=parent2_days,
            hours_per_day=p2.hours_per_day,
            work_days=place(parent2_days),
        )
    return Household(parent1=parent1, parent2=parent2, children=household.children)


def generate_scenarios(
    household: Household,
    config: RateSchedule = DEFAULT_SCHEDULE,
    options: Optional[ScenarioOptions] = None,
    custom: Optional[Sequence[CustomCombination]] = None,
    cache: Optional[MutableMapping] = None,
) -> List[Scenario]:
    """
    Compute one Scenario per work-day combination.

    Args:
        household: Base household; each parent's income is full-time
            equivalent and their hours per day are kept for every scenario
        config: Rate schedule
        options: Mode, day placement, parallelism and ID salt
        custom: Combinations for ScenarioMode.CUSTOM
        cache: Optional memo mapping passed through to calculate_household

    Returns:
        Scenarios in combination order
    """
    options = options or ScenarioOptions()
    mode = ScenarioMode(options.mode)
    if isinstance(options.workers, bool) or not isinstance(options.workers, int) or options.workers < 1:
        raise ValidationError("workers", "must be a whole number of at least 1", options.workers)

    combos = build_combinations(household, mode, custom)
    salt = options.salt if options.salt is not None else secrets.token_hex(8)
    is_custom = mode is ScenarioMode.CUSTOM

    def build(item: Tuple[int, Tuple[int, int, str]]) -> Scenario:
        index, (p1_days, p2_days, name) = item
        variant = _scenario_household(household, p1_days, p2_days, options.stagger)
        result = calculate_household(variant, config, options.withholding_pct, cache)
        return Scenario(
            id=scenario_id(p1_days, p2_days, name, index, salt),
            name=name,
            parent1_days=p1_days,
            parent2_days=p2_days,
            result=result,
            is_custom=is_custom,
        )

    items = list(enumerate(combos))
    if options.workers > 1:
        with ThreadPoolExecutor(max_workers=options.workers) as executor:
            results = executor.map(build, items)
            iterator = (
                tqdm(results, total=len(items), desc="Scenarios")
                if options.show_progress
                else results
            )
            return list(iterator)

    iterator = tqdm(items, desc="Scenarios") if options.show_progress else items
    return [build(item) for item in iterator]


class BatchGate:
    """
    Last-writer-wins guard for recalculation batches.

    Each ``begin()`` supersedes every earlier batch. A batch that finishes
    after a newer one began has its results discarded by ``publish``.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._generation = 0

    def begin(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._generation

    def publish(self, token: int, value: Any) -> Optional[Any]:
        """Return ``value`` if its batch is still the latest, else None."""
        return value if self.is_current(token) else None

    def run(self, fn: Callable[..., Any], *args, **kwargs) -> Optional[Any]:
        """Start a batch, run ``fn`` and publish its result."""
        token = self.begin()
        return self.publish(token, fn(*args, **kwargs))
