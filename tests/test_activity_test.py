"""Tests for the activity test."""

import pytest

from childcare_subsidy.calculators.activity_test import (
    ActivityLevel,
    calculate_hours_per_fortnight,
    calculate_subsidised_hours,
    determine_applicable_units,
    evaluate_household_activity,
)
from childcare_subsidy.errors import ValidationError
from childcare_subsidy.models import Household, ParentProfile


class TestHoursPerFortnight:
    """Tests for calculate_hours_per_fortnight."""

    def test_full_time(self):
        assert calculate_hours_per_fortnight(5, 8) == 80

    def test_part_time(self):
        assert calculate_hours_per_fortnight(3, 7.6) == pytest.approx(45.6)

    def test_out_of_range(self):
        with pytest.raises(ValidationError):
            calculate_hours_per_fortnight(6, 8)


class TestSubsidisedHours:
    """Tests for calculate_subsidised_hours."""

    def test_lower_parent_decides(self):
        """5x8h and 3x7.6h: lower parent 45.6h is under the cutoff."""
        result = calculate_subsidised_hours(80, calculate_hours_per_fortnight(3, 7.6))
        assert result.level is ActivityLevel.BASE
        assert result.hours_per_fortnight == 72
        assert result.hours_per_week == 36
        assert result.lower_activity_hours == pytest.approx(45.6)

    def test_higher_level(self):
        result = calculate_subsidised_hours(80, 60)
        assert result.level is ActivityLevel.HIGHER
        assert result.hours_per_week == 50

    def test_cutoff_is_base(self):
        """Exactly 48 hours is still the base level."""
        assert calculate_subsidised_hours(80, 48).level is ActivityLevel.BASE
        assert calculate_subsidised_hours(80, 48.5).level is ActivityLevel.HIGHER

    def test_single_parent_uses_own_hours(self):
        """No second parent: the sole parent's hours decide."""
        assert calculate_subsidised_hours(80).level is ActivityLevel.HIGHER
        assert calculate_subsidised_hours(40).level is ActivityLevel.BASE

    def test_second_parent_not_working(self):
        """A second parent with zero hours is ignored like an absent one."""
        result = calculate_subsidised_hours(80, 0)
        assert result.level is ActivityLevel.HIGHER
        assert result.hours_per_fortnight == 100
        assert result.lower_activity_hours == 80
        assert calculate_subsidised_hours(40, 0).level is ActivityLevel.BASE

    def test_first_parent_not_working(self):
        assert calculate_subsidised_hours(0, 80).hours_per_fortnight == 100

    def test_neither_parent_working(self):
        result = calculate_subsidised_hours(0, 0)
        assert result.level is ActivityLevel.BASE
        assert result.lower_activity_hours == 0

    def test_negative_hours(self):
        with pytest.raises(ValidationError):
            calculate_subsidised_hours(80, -1)

    def test_household(self):
        household = Household(
            parent1=ParentProfile(100000, 5, 8),
            parent2=ParentProfile(80000, 4, 8),
        )
        assert evaluate_household_activity(household).level is ActivityLevel.HIGHER

    def test_household_with_idle_second_parent(self):
        """A second parent working 0 days matches a single-parent household."""
        idle = Household(
            parent1=ParentProfile(100000, 5, 8),
            parent2=ParentProfile(0, 0, 0),
        )
        single = Household(parent1=ParentProfile(100000, 5, 8))
        assert evaluate_household_activity(idle) == evaluate_household_activity(single)
        assert evaluate_household_activity(idle).level is ActivityLevel.HIGHER


class TestDaysConversion:
    """Tests for converting the allowance into care days."""

    def test_base_days(self):
        result = calculate_subsidised_hours(80, 40)
        assert result.days_per_week(10) == pytest.approx(3.6)
        assert result.days_per_fortnight(10) == pytest.approx(7.2)

    def test_capped_at_five_days(self):
        result = calculate_subsidised_hours(80, 80)
        assert result.days_per_week(8) == 5

    def test_zero_hours_per_day(self):
        with pytest.raises(ValidationError):
            calculate_subsidised_hours(80, 80).days_per_week(0)


class TestApplicableUnits:
    """Tests for determine_applicable_units."""

    def test_limited_by_allowance(self):
        units = determine_applicable_units(36, 40)
        assert units.applied == 36
        assert units.unsubsidised == 4
        assert units.reason == "Limited by subsidised hours cap"

    def test_limited_by_need(self):
        units = determine_applicable_units(50, 40)
        assert units.applied == 40
        assert units.unsubsidised == 0
        assert units.reason == "Limited by actual childcare hours needed"

    def test_equal(self):
        units = determine_applicable_units(40, 40)
        assert units.applied == 40
        assert units.reason == "Subsidised hours equals actual hours needed"
