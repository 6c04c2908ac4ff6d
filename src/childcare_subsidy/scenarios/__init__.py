"""
Scenario sweeps: generate work-day arrangements and rank them.
"""

from .comparator import (
    FilterCriteria,
    Metric,
    ScenarioRanking,
    SortOrder,
    compare_scenarios,
    filter_scenarios,
    find_best_scenario,
    rank_scenarios,
    scenario_report,
    scenarios_to_frame,
    sort_scenarios,
)
from .generator import (
    BatchGate,
    CustomCombination,
    Scenario,
    ScenarioMode,
    ScenarioOptions,
    generate_scenarios,
)

__all__ = [
    "generate_scenarios",
    "Scenario",
    "ScenarioMode",
    "ScenarioOptions",
    "CustomCombination",
    "BatchGate",
    "Metric",
    "SortOrder",
    "compare_scenarios",
    "sort_scenarios",
    "FilterCriteria",
    "filter_scenarios",
    "find_best_scenario",
    "rank_scenarios",
    "ScenarioRanking",
    "scenarios_to_frame",
    "scenario_report",
]
