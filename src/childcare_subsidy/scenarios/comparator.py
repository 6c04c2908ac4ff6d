"""
Comparator: rank, filter and summarise generated scenarios.

Sorting is stable, so scenarios with equal metric values keep their
generation order in either direction.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

import pandas as pd

from ..errors import ValidationError
from .generator import Scenario


class Metric(Enum):
    """Scenario figures that can be ranked on."""

    NET_INCOME = "net-income"
    OUT_OF_POCKET = "out-of-pocket"
    SUBSIDY = "subsidy"
    WORK_DAYS = "work-days"
    COST_PERCENTAGE = "cost-percentage"

    @property
    def attribute(self) -> str:
        return _ATTRIBUTES[self]

    @property
    def higher_is_better(self) -> bool:
        return self not in (Metric.OUT_OF_POCKET, Metric.COST_PERCENTAGE)

    def value_of(self, scenario: Scenario) -> float:
        return getattr(scenario, self.attribute)

    @classmethod
    def parse(cls, value: Union["Metric", str]) -> "Metric":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().replace("_", "").replace("-", "").lower()
            if key in _ALIASES:
                return _ALIASES[key]
        raise ValidationError(
            "metric", f"must be one of {', '.join(m.value for m in cls)}", value
        )


_ATTRIBUTES = {
    Metric.NET_INCOME: "net_income",
    Metric.OUT_OF_POCKET: "annual_out_of_pocket",
    Metric.SUBSIDY: "annual_subsidy",
    Metric.WORK_DAYS: "total_work_days",
    Metric.COST_PERCENTAGE: "cost_percentage",
}

# Keys are lower-case with separators removed
_ALIASES = {
    "netincome": Metric.NET_INCOME,
    "netincomeafterchildcare": Metric.NET_INCOME,
    "outofpocket": Metric.OUT_OF_POCKET,
    "annualoutofpocket": Metric.OUT_OF_POCKET,
    "subsidy": Metric.SUBSIDY,
    "annualsubsidy": Metric.SUBSIDY,
    "workdays": Metric.WORK_DAYS,
    "totalworkdays": Metric.WORK_DAYS,
    "costpercentage": Metric.COST_PERCENTAGE,
    "childcarecostpercentage": Metric.COST_PERCENTAGE,
}


class SortOrder(Enum):
    ASC = "asc"
    DESC = "desc"


def compare_scenarios(
    a: Scenario,
    b: Scenario,
    metric: Union[Metric, str] = Metric.NET_INCOME,
    order: Union[SortOrder, str] = SortOrder.DESC,
) -> int:
    """
    Three-way comparison of two scenarios on a metric.

    Returns a negative number when ``a`` sorts first, positive when ``b``
    does and 0 for equal values.
    """
    metric = Metric.parse(metric)
    order = SortOrder(order)
    left, right = metric.value_of(a), metric.value_of(b)
    diff = (left > right) - (left < right)
    return diff if order is SortOrder.ASC else -diff


def sort_scenarios(
    scenarios: Iterable[Scenario],
    metric: Union[Metric, str] = Metric.NET_INCOME,
    order: Union[SortOrder, str] = SortOrder.DESC,
) -> List[Scenario]:
    """Stable sort on a metric."""
    metric = Metric.parse(metric)
    order = SortOrder(order)
    return sorted(scenarios, key=metric.value_of, reverse=order is SortOrder.DESC)


@dataclass(frozen=True)
class FilterCriteria:
    """Predicates combined with AND; None disables a predicate."""

    min_net_income: Optional[float] = None
    max_out_of_pocket: Optional[float] = None
    min_work_days: Optional[int] = None
    max_work_days: Optional[int] = None
    favorites_only: bool = False

    def matches(self, scenario: Scenario) -> bool:
        if self.min_net_income is not None and scenario.net_income < self.min_net_income:
            return False
        if self.max_out_of_pocket is not None and scenario.annual_out_of_pocket > self.max_out_of_pocket:
            return False
        if self.min_work_days is not None and scenario.total_work_days < self.min_work_days:
            return False
        if self.max_work_days is not None and scenario.total_work_days > self.max_work_days:
            return False
        if self.favorites_only and not scenario.is_favorite:
            return False
        return True


def filter_scenarios(
    scenarios: Iterable[Scenario],
    criteria: Optional[FilterCriteria] = None,
) -> List[Scenario]:
    criteria = criteria or FilterCriteria()
    return [s for s in scenarios if criteria.matches(s)]


def find_best_scenario(
    scenarios: Optional[Sequence[Scenario]],
    metric: Union[Metric, str] = Metric.NET_INCOME,
) -> Optional[Scenario]:
    """
    Best scenario for a metric, or None for an empty collection.

    Income, subsidy and work days are maximised; out-of-pocket cost and
    cost percentage are minimised. Ties go to the earliest scenario.
    """
    metric = Metric.parse(metric)
    if not scenarios:
        return None
    pick = max if metric.higher_is_better else min
    return pick(scenarios, key=metric.value_of)


def scenarios_to_frame(scenarios: Iterable[Scenario]) -> pd.DataFrame:
    """One row per scenario with its summary figures."""
    columns = [
        "id",
        "name",
        "parent1_days",
        "parent2_days",
        "work_days",
        "care_days",
        "household_income",
        "annual_subsidy",
        "annual_cost",
        "annual_out_of_pocket",
        "net_income",
        "cost_percentage",
        "is_favorite",
    ]
    rows = [
        {
            "id": s.id,
            "name": s.name,
            "parent1_days": s.parent1_days,
            "parent2_days": s.parent2_days,
            "work_days": s.total_work_days,
            "care_days": s.care_days,
            "household_income": s.household_income,
            "annual_subsidy": s.annual_subsidy,
            "annual_cost": s.annual_cost,
            "annual_out_of_pocket": s.annual_out_of_pocket,
            "net_income": s.net_income,
            "cost_percentage": s.cost_percentage,
            "is_favorite": s.is_favorite,
        }
        for s in scenarios
    ]
    return pd.DataFrame(rows, columns=columns)


@dataclass
class ScenarioRanking:
    """Scenarios ordered on one metric."""

    scenarios: List[Scenario]
    metric: Metric
    order: SortOrder

    @property
    def best(self) -> Optional[Scenario]:
        return find_best_scenario(self.scenarios, self.metric)

    def summary(self) -> Dict[str, Any]:
        best = self.best
        return {
            "scenarios": len(self.scenarios),
            "metric": self.metric.value,
            "order": self.order.value,
            "best": None if best is None else {
                "id": best.id,
                "name": best.name,
                "value": self.metric.value_of(best),
            },
        }

    def to_frame(self) -> pd.DataFrame:
        return scenarios_to_frame(self.scenarios)

    def detailed_report(self, top: Optional[int] = None) -> str:
        """Fixed-width text table of the ranked scenarios."""
        shown = self.scenarios if top is None else self.scenarios[:top]
        lines = [
            "=" * 70,
            "Childcare Scenario Comparison",
            "=" * 70,
            f"Scenarios: {len(self.scenarios):,}   "
            f"Ranked by: {self.metric.value} ({self.order.value})",
            "",
        ]
        if not shown:
            lines.extend(["  No scenarios to compare", "", "=" * 70])
            return "\n".join(lines)

        lines.append(
            f"  {'Scenario':<30} {'Subsidy':>11} {'Out-of-pocket':>14} {'Net income':>12}"
        )
        lines.append("-" * 70)
        for s in shown:
            lines.append(
                f"  {s.name[:30]:<30} ${s.annual_subsidy:>10,.0f} "
                f"${s.annual_out_of_pocket:>13,.0f} ${s.net_income:>11,.0f}"
            )
        lines.append("")

        best = self.best
        lines.extend([
            f"Best for {self.metric.value}: {best.name}",
            f"  Care days/week:   {best.care_days}",
            f"  Cost of income:   {best.cost_percentage:.2f}%",
            "=" * 70,
        ])
        return "\n".join(lines)


def rank_scenarios(
    scenarios: Iterable[Scenario],
    metric: Union[Metric, str] = Metric.NET_INCOME,
    order: Union[SortOrder, str] = SortOrder.DESC,
    criteria: Optional[FilterCriteria] = None,
) -> ScenarioRanking:
    """Filter then sort scenarios into a ScenarioRanking."""
    metric = Metric.parse(metric)
    order = SortOrder(order)
    kept = filter_scenarios(scenarios, criteria)
    return ScenarioRanking(sort_scenarios(kept, metric, order), metric, order)


def scenario_report(
    scenarios: Iterable[Scenario],
    metric: Union[Metric, str] = Metric.NET_INCOME,
    order: Union[SortOrder, str] = SortOrder.DESC,
    top: Optional[int] = None,
) -> str:
    return rank_scenarios(scenarios, metric, order).detailed_report(top)
