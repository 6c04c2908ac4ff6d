"""Tests for scenario generation."""

import pytest

from childcare_subsidy.calculators.household import calculate_household
from childcare_subsidy.errors import ValidationError
from childcare_subsidy.models import CareType, ChildProfile, HourlyFee, Household, ParentProfile
from childcare_subsidy.scenarios.generator import (
    COMMON_COMBINATIONS,
    BatchGate,
    CustomCombination,
    ScenarioMode,
    ScenarioOptions,
    generate_scenarios,
    scenario_id,
)

CHILD = ChildProfile(age=3, care_type=CareType.CENTRE_BASED, fee=HourlyFee(14, 50))


def two_parents(parent2_income=80000):
    return Household(
        parent1=ParentProfile(100000, 5, 8),
        parent2=ParentProfile(parent2_income, 5, 8),
        children=(CHILD,),
    )


def single_parent():
    return Household(parent1=ParentProfile(90000, 5, 8), children=(CHILD,))


def options(**kwargs):
    kwargs.setdefault("salt", "test")
    return ScenarioOptions(**kwargs)


def by_days(scenarios, p1, p2):
    return next(s for s in scenarios if (s.parent1_days, s.parent2_days) == (p1, p2))


# ============================================================
# Modes
# ============================================================


class TestModes:
    """Tests for the combination sets of each mode."""

    def test_all_mode_count_and_ids(self):
        """Every pair except 0+0, each with a unique identifier."""
        scenarios = generate_scenarios(two_parents(), options=options(mode=ScenarioMode.ALL))
        assert len(scenarios) == 35
        assert len({s.id for s in scenarios}) == 35
        pairs = {(s.parent1_days, s.parent2_days) for s in scenarios}
        assert (0, 0) not in pairs
        assert len(pairs) == 35

    def test_all_mode_single_parent(self):
        scenarios = generate_scenarios(single_parent(), options=options(mode=ScenarioMode.ALL))
        assert [s.parent1_days for s in scenarios] == [5, 4, 3, 2, 1]

    def test_common_mode(self):
        scenarios = generate_scenarios(two_parents(), options=options())
        assert [s.name for s in scenarios] == [name for _, _, name in COMMON_COMBINATIONS]
        assert scenarios[0].name == "5+5 days (Both full-time)"

    def test_common_mode_without_second_income(self):
        """No second income switches to the single-parent set."""
        scenarios = generate_scenarios(two_parents(parent2_income=0), options=options())
        assert [s.name for s in scenarios] == [
            "5 days (Full-time)", "4 days", "3 days", "2 days", "1 day",
        ]
        assert all(s.parent2_income == 0 for s in scenarios)
        assert all(s.result.schedule.parent2_days == () for s in scenarios)

    def test_single_parent_mode(self):
        scenarios = generate_scenarios(
            two_parents(), options=options(mode=ScenarioMode.SINGLE_PARENT)
        )
        assert len(scenarios) == 5
        assert all(s.parent2_days == 0 for s in scenarios)
        assert by_days(scenarios, 3, 0).care_days == 3

    def test_custom_mode(self):
        scenarios = generate_scenarios(
            two_parents(),
            options=options(mode=ScenarioMode.CUSTOM),
            custom=[(3, 2, "Mine"), CustomCombination(4, 1)],
        )
        assert [s.name for s in scenarios] == ["Mine", "4+1 days"]
        assert all(s.is_custom for s in scenarios)

    def test_custom_duplicates_get_distinct_ids(self):
        scenarios = generate_scenarios(
            two_parents(),
            options=options(mode=ScenarioMode.CUSTOM),
            custom=[(3, 3), (3, 3)],
        )
        assert scenarios[0].id != scenarios[1].id

    def test_custom_requires_combinations(self):
        with pytest.raises(ValidationError):
            generate_scenarios(two_parents(), options=options(mode=ScenarioMode.CUSTOM))

    def test_custom_days_out_of_range(self):
        with pytest.raises(ValidationError):
            generate_scenarios(
                two_parents(), options=options(mode=ScenarioMode.CUSTOM), custom=[(6, 1)]
            )


# ============================================================
# Scenario contents
# ============================================================


class TestScenarioContents:
    """Tests for the computed fields of each scenario."""

    def test_incomes_follow_days(self):
        scenarios = generate_scenarios(two_parents(), options=options())
        scenario = by_days(scenarios, 5, 3)
        assert scenario.parent1_income == 100000
        assert scenario.parent2_income == pytest.approx(48000)
        assert scenario.total_work_days == 8

    def test_staggered_days_reduce_care(self):
        """Parent 2 works the end of the week, so care is needed on the overlap only."""
        scenarios = generate_scenarios(two_parents(), options=options(mode=ScenarioMode.ALL))
        assert by_days(scenarios, 5, 5).care_days == 5
        assert by_days(scenarios, 3, 3).care_days == 1
        assert by_days(scenarios, 2, 2).care_days == 0

    def test_no_stagger(self):
        scenarios = generate_scenarios(
            two_parents(), options=options(mode=ScenarioMode.ALL, stagger=False)
        )
        assert by_days(scenarios, 3, 3).care_days == 3
        assert by_days(scenarios, 2, 2).care_days == 2

    def test_no_care_days_costs_nothing(self):
        scenarios = generate_scenarios(two_parents(), options=options(mode=ScenarioMode.ALL))
        scenario = by_days(scenarios, 2, 2)
        assert scenario.care_days == 0
        assert scenario.annual_out_of_pocket == 0
        assert scenario.annual_subsidy == 0
        assert scenario.net_income == scenario.household_income

    def test_one_parent_at_zero_days_needs_care(self):
        """With parent 2 at 0 days care follows parent 1, as for a single parent."""
        scenarios = generate_scenarios(two_parents(), options=options(mode=ScenarioMode.ALL))
        scenario = by_days(scenarios, 5, 0)
        assert scenario.care_days == 5
        assert scenario.annual_out_of_pocket > 0
        assert scenario.parent2_income == 0
        assert by_days(scenarios, 0, 3).care_days == 3

    def test_matches_direct_calculation(self):
        """A scenario equals calculate_household on the same arrangement."""
        scenarios = generate_scenarios(two_parents(), options=options(mode=ScenarioMode.ALL))
        arranged = Household(
            parent1=ParentProfile(100000, 5, 8),
            parent2=ParentProfile(80000, 0, 8),
            children=(CHILD,),
        )
        assert by_days(scenarios, 5, 0).result == calculate_household(arranged)

    def test_summary_metrics_match_result(self):
        scenario = generate_scenarios(two_parents(), options=options())[0]
        assert scenario.annual_subsidy == scenario.result.totals.annual.paid_subsidy
        assert scenario.annual_out_of_pocket == scenario.result.totals.annual.out_of_pocket
        assert scenario.cost_percentage == scenario.result.cost_percentage

    def test_with_favorite(self):
        """Favoriting returns a tagged copy and leaves figures unchanged."""
        scenario = generate_scenarios(two_parents(), options=options())[0]
        favorite = scenario.with_favorite()
        assert favorite.is_favorite
        assert not scenario.is_favorite
        assert favorite.net_income == scenario.net_income
        assert favorite.id == scenario.id


# ============================================================
# Determinism, parallelism and caching
# ============================================================


class TestDeterminism:
    """Tests for reproducible and parallel generation."""

    def test_fixed_salt_is_idempotent(self):
        first = generate_scenarios(two_parents(), options=options(mode=ScenarioMode.ALL))
        second = generate_scenarios(two_parents(), options=options(mode=ScenarioMode.ALL))
        assert first == second

    def test_different_salts(self):
        first = generate_scenarios(two_parents(), options=options(salt="a"))
        second = generate_scenarios(two_parents(), options=options(salt="b"))
        assert [s.id for s in first] != [s.id for s in second]
        assert [s.net_income for s in first] == [s.net_income for s in second]

    def test_random_salt_ids_unique(self):
        scenarios = generate_scenarios(two_parents(), options=ScenarioOptions(mode=ScenarioMode.ALL))
        assert len({s.id for s in scenarios}) == 35

    def test_id_format(self):
        assert scenario_id(5, 3, "5+3 days", 0, "x").startswith("scenario-5-3-")

    def test_workers_match_serial(self):
        serial = generate_scenarios(two_parents(), options=options(mode=ScenarioMode.ALL))
        parallel = generate_scenarios(
            two_parents(), options=options(mode=ScenarioMode.ALL, workers=4)
        )
        assert parallel == serial

    def test_progress_bar(self):
        scenarios = generate_scenarios(
            two_parents(), options=options(show_progress=True)
        )
        assert len(scenarios) == len(COMMON_COMBINATIONS)

    @pytest.mark.parametrize("workers", [0, -1, 1.5])
    def test_invalid_workers(self, workers):
        with pytest.raises(ValidationError):
            generate_scenarios(two_parents(), options=options(workers=workers))

    def test_shared_cache(self):
        cache = {}
        first = generate_scenarios(two_parents(), options=options(), cache=cache)
        second = generate_scenarios(two_parents(), options=options(), cache=cache)
        assert len(cache) == len(COMMON_COMBINATIONS)
        assert all(a.result is b.result for a, b in zip(first, second))


class TestBatchGate:
    """Tests for last-writer-wins batches."""

    def test_superseded_batch_discarded(self):
        gate = BatchGate()
        old = gate.begin()
        new = gate.begin()
        assert gate.publish(old, "stale") is None
        assert gate.publish(new, "fresh") == "fresh"
        assert not gate.is_current(old)

    def test_run(self):
        gate = BatchGate()
        assert gate.run(sum, [1, 2, 3]) == 6
