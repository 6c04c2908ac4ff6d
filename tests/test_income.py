"""Tests for the income adjuster."""

import pytest

from childcare_subsidy.calculators.income import (
    calculate_adjusted_income,
    calculate_household_income,
    snapshot_household,
    split_household_income,
    validate_income,
)
from childcare_subsidy.errors import ValidationError
from childcare_subsidy.models import Household, ParentProfile


class TestAdjustedIncome:
    """Tests for calculate_adjusted_income."""

    def test_full_time(self):
        assert calculate_adjusted_income(100000, 5) == 100000

    def test_part_time(self):
        """Three days earns three fifths."""
        assert calculate_adjusted_income(100000, 3) == 60000

    def test_zero_days(self):
        assert calculate_adjusted_income(100000, 0) == 0

    def test_hours_do_not_change_result(self):
        """Hours per day is accepted but ignored."""
        assert calculate_adjusted_income(100000, 3, 4) == calculate_adjusted_income(100000, 3, 12)

    @pytest.mark.parametrize(
        "args",
        [(-1, 5), (100000, 6), (100000, -1), (100000, 5, 25), (100000, 5, -1)],
    )
    def test_out_of_range(self, args):
        with pytest.raises(ValidationError):
            calculate_adjusted_income(*args)


class TestHouseholdIncome:
    """Tests for combining and splitting household income."""

    def test_sum(self):
        assert calculate_household_income(60000, 48000) == 108000

    def test_single_parent(self):
        assert calculate_household_income(70000) == 70000

    def test_negative_rejected(self):
        with pytest.raises(ValidationError):
            calculate_household_income(60000, -1)

    def test_split(self):
        p1, p2 = split_household_income(100000, 0.6)
        assert p1 == pytest.approx(60000)
        assert p2 == pytest.approx(40000)

    def test_split_ratio_range(self):
        with pytest.raises(ValidationError):
            split_household_income(100000, 1.5)


class TestValidateIncome:
    """Tests for validate_income."""

    def test_within_range(self):
        assert validate_income(250000) == 250000

    def test_above_schedule_maximum(self):
        """Schedule caps income at 10 million."""
        with pytest.raises(ValidationError):
            validate_income(10_000_001)

    def test_custom_range(self):
        with pytest.raises(ValidationError):
            validate_income(5, minimum=10, maximum=20)

    def test_empty_range(self):
        with pytest.raises(ValidationError, match="range is empty"):
            validate_income(5, minimum=30, maximum=20)


class TestSnapshot:
    """Tests for snapshot_household."""

    def test_two_parents(self):
        household = Household(
            parent1=ParentProfile(100000, 5, 8),
            parent2=ParentProfile(80000, 3, 7.6),
        )
        snapshot = snapshot_household(household)
        assert snapshot.parent1_income == 100000
        assert snapshot.parent2_income == pytest.approx(48000)
        assert snapshot.household_income == pytest.approx(148000)

    def test_single_parent(self):
        snapshot = snapshot_household(Household(parent1=ParentProfile(70000, 4, 8)))
        assert snapshot.parent2_income == 0
        assert snapshot.household_income == 56000

    def test_income_above_maximum(self):
        household = Household(parent1=ParentProfile(20_000_000, 5, 8))
        with pytest.raises(ValidationError):
            snapshot_household(household)
