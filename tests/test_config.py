"""Tests for rate schedule loading and cap lookup."""

import copy
import json

import pytest

from childcare_subsidy.config import (
    CCS_PARAMS_2025_26,
    DEFAULT_SCHEDULE,
    RateSchedule,
    load_rate_schedule,
)
from childcare_subsidy.errors import ConfigurationError, SubsidyError
from childcare_subsidy.models import AgeCategory, CareType


class TestDefaultSchedule:
    """Tests for the 2025-26 reference schedule."""

    def test_period(self):
        """Default schedule is the 2025-26 snapshot."""
        assert DEFAULT_SCHEDULE.period == "2025-26"

    def test_standard_tier_values(self):
        """Standard tier carries the published thresholds."""
        std = DEFAULT_SCHEDULE.standard
        assert std.max_rate == 90
        assert std.max_rate_income == 85279
        assert std.taper_start == 85280
        assert std.increment == 5000
        assert std.step == 1

    def test_higher_tier_has_four_bands(self):
        """Higher tier is four bands plus a revert threshold."""
        higher = DEFAULT_SCHEDULE.higher
        assert len(higher.bands) == 4
        assert higher.revert_threshold == 367563
        assert [b.is_flat for b in higher.bands] == [False, True, False, True]

    def test_activity_test_values(self):
        """Activity test cutoff and allowances."""
        test = DEFAULT_SCHEDULE.activity_test
        assert (test.cutoff, test.base_hours, test.higher_hours) == (48, 72, 100)

    def test_withholding_defaults(self):
        """Withholding defaults to 5% within 0-100."""
        w = DEFAULT_SCHEDULE.withholding
        assert (w.default, w.minimum, w.maximum) == (5, 0, 100)

    def test_schedule_is_hashable(self):
        """Schedules can key a memo cache."""
        assert hash(DEFAULT_SCHEDULE) == hash(RateSchedule.from_dict(CCS_PARAMS_2025_26))


class TestRateCaps:
    """Tests for hourly and daily cap lookup."""

    @pytest.mark.parametrize(
        "care_type,age,expected",
        [
            (CareType.CENTRE_BASED, 3, 14.63),
            (CareType.CENTRE_BASED, 6, 12.81),
            (CareType.OSHC, 8, 12.81),
            (CareType.FAMILY_DAY_CARE, 2, 13.56),
            (CareType.FAMILY_DAY_CARE, 10, 13.56),
            (CareType.IN_HOME_CARE, 4, 39.80),
        ],
    )
    def test_hourly_cap(self, care_type, age, expected):
        """Hourly caps by care type and age category."""
        assert DEFAULT_SCHEDULE.hourly_cap(care_type, age) == expected

    def test_age_category_threshold(self):
        """School age starts at 6."""
        assert DEFAULT_SCHEDULE.age_category(5) is AgeCategory.NON_SCHOOL_AGE
        assert DEFAULT_SCHEDULE.age_category(6) is AgeCategory.SCHOOL_AGE

    def test_daily_cap(self):
        """Daily cap is the hourly cap times hours per day."""
        assert DEFAULT_SCHEDULE.daily_cap(CareType.CENTRE_BASED, 3, 10) == 146.30
        assert DEFAULT_SCHEDULE.daily_cap(CareType.CENTRE_BASED, 3, 11) == 160.93

    def test_missing_cap_raises(self):
        """A care type absent from the table is a configuration error."""
        params = copy.deepcopy(CCS_PARAMS_2025_26)
        params["rate_caps"] = {"centre-based": params["rate_caps"]["centre-based"]}
        schedule = RateSchedule.from_dict(params)
        with pytest.raises(ConfigurationError, match="oshc"):
            schedule.hourly_cap(CareType.OSHC, 3)


class TestFromDict:
    """Tests for building schedules from parameter dicts."""

    def test_missing_section(self):
        """Missing section raises ConfigurationError naming it."""
        params = copy.deepcopy(CCS_PARAMS_2025_26)
        del params["activity_test"]
        with pytest.raises(ConfigurationError, match="activity_test"):
            RateSchedule.from_dict(params)

    def test_configuration_error_is_key_error(self):
        """ConfigurationError can be caught as KeyError or SubsidyError."""
        params = copy.deepcopy(CCS_PARAMS_2025_26)
        del params["withholding"]
        with pytest.raises(KeyError):
            RateSchedule.from_dict(params)
        with pytest.raises(SubsidyError):
            RateSchedule.from_dict(params)

    def test_rate_out_of_range(self):
        """Rates above 100 are rejected."""
        params = copy.deepcopy(CCS_PARAMS_2025_26)
        params["standard_rate"]["max_rate"] = 120
        with pytest.raises(ConfigurationError, match="between 0 and 100"):
            RateSchedule.from_dict(params)

    def test_unknown_care_type(self):
        """Unknown care type keys are malformed entries."""
        params = copy.deepcopy(CCS_PARAMS_2025_26)
        params["rate_caps"]["creche"] = {"school-age": 10}
        with pytest.raises(ConfigurationError):
            RateSchedule.from_dict(params)

    def test_bands_out_of_order(self):
        """Higher bands must ascend."""
        params = copy.deepcopy(CCS_PARAMS_2025_26)
        params["higher_rate"]["bands"].reverse()
        with pytest.raises(ConfigurationError, match="out of order"):
            RateSchedule.from_dict(params)

    def test_withholding_bounds(self):
        """Default withholding must sit inside [min, max]."""
        params = copy.deepcopy(CCS_PARAMS_2025_26)
        params["withholding"]["default"] = 50
        params["withholding"]["max"] = 20
        with pytest.raises(ConfigurationError, match="withholding"):
            RateSchedule.from_dict(params)


class TestLoadRateSchedule:
    """Tests for load_rate_schedule."""

    def test_default(self):
        """No source returns the default schedule."""
        assert load_rate_schedule() is DEFAULT_SCHEDULE
        assert load_rate_schedule("2025-26") is DEFAULT_SCHEDULE

    def test_unknown_period(self):
        """Unregistered period without a file raises."""
        with pytest.raises(ConfigurationError, match="1999-00"):
            load_rate_schedule("1999-00")

    def test_from_json_file(self, tmp_path):
        """Schedule loads from a JSON file with the params shape."""
        params = copy.deepcopy(CCS_PARAMS_2025_26)
        params["period"] = "2026-27"
        params["activity_test"]["cutoff"] = 50
        path = tmp_path / "rates.json"
        path.write_text(json.dumps(params))

        schedule = load_rate_schedule(path)
        assert schedule.period == "2026-27"
        assert schedule.activity_test.cutoff == 50
        assert schedule.standard == DEFAULT_SCHEDULE.standard

    def test_invalid_json_file(self, tmp_path):
        """Unparseable file raises ConfigurationError."""
        path = tmp_path / "rates.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            load_rate_schedule(path)

    def test_json_must_be_object(self, tmp_path):
        """Top-level JSON must be an object."""
        path = tmp_path / "rates.json"
        path.write_text("[1, 2, 3]")
        with pytest.raises(ConfigurationError, match="JSON object"):
            load_rate_schedule(path)
