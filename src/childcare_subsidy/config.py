"""
Rate schedule for Child Care Subsidy calculations.

Source: Australian Government Department of Education, CCS rates
Financial Year: 2025-26

All policy numbers live in ``CCS_PARAMS_2025_26``. Calculators read them
only through a ``RateSchedule``, so a new financial year is a new params
dict (or JSON file) and no code change.
"""

import json
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from .errors import ConfigurationError
from .models import AgeCategory, CareType
from .money import round_money

# Parameters from the 2025-26 CCS policy
CCS_PARAMS_2025_26 = {
    "period": "2025-26",
    # Standard rate: eldest child aged <= 5 and all school-age children
    "standard_rate": {
        "max_rate": 90,
        "floor_rate": 0,
        "max_rate_income": 85279,
        "taper_start": 85280,
        "zero_rate_income": 535279,
        "increment": 5000,  # dollars per step
        "step": 1,  # percentage points
    },
    # Higher rate: second and younger children aged <= 5
    "higher_rate": {
        "max_rate": 95,
        "max_rate_income": 143273,
        "bands": [
            {"start": 143274, "end": 188272, "rate": 95, "taper_to": 80},
            {"start": 188273, "end": 267562, "rate": 80},
            {"start": 267563, "end": 357562, "rate": 80, "taper_to": 50},
            {"start": 357563, "end": 367562, "rate": 50},
        ],
        "revert_threshold": 367563,
        "increment": 3000,
        "step": 1,
    },
    # Activity test, hours per fortnight
    "activity_test": {
        "cutoff": 48,
        "base_hours": 72,
        "higher_hours": 100,
    },
    # Hourly rate caps by care type and age category (AUD)
    "rate_caps": {
        "centre-based": {"school-age": 12.81, "non-school-age": 14.63},
        "oshc": {"school-age": 12.81, "non-school-age": 14.63},
        "family-day-care": {"school-age": 13.56, "non-school-age": 13.56},
        "in-home-care": {"school-age": 39.80, "non-school-age": 39.80},
    },
    # Percentage of subsidy withheld until reconciliation
    "withholding": {"default": 5, "min": 0, "max": 100},
    "school_age_threshold": 6,
    "higher_rate_age_ceiling": 5,
    "weeks_per_year": 52,
    "max_income": 10_000_000,
}


@dataclass(frozen=True)
class StandardTier:
    """Single taper from ``max_rate`` down to ``floor_rate``."""

    max_rate: float
    floor_rate: float
    max_rate_income: float
    taper_start: float
    zero_rate_income: float
    increment: float
    step: float


@dataclass(frozen=True)
class RateBand:
    """One band of the higher tier; tapers when ``taper_to`` is set."""

    start: float
    end: float
    rate: float
    taper_to: Optional[float] = None

    @property
    def is_flat(self) -> bool:
        return self.taper_to is None


@dataclass(frozen=True)
class HigherTier:
    """Stair of flat and tapering bands, reverting to standard above the top."""

    max_rate: float
    max_rate_income: float
    bands: Tuple[RateBand, ...]
    revert_threshold: float
    increment: float
    step: float


@dataclass(frozen=True)
class ActivityTest:
    cutoff: float
    base_hours: float
    higher_hours: float


@dataclass(frozen=True)
class Withholding:
    default: float
    minimum: float
    maximum: float


@dataclass(frozen=True)
class RateSchedule:
    """Immutable policy tables for one financial year."""

    period: str
    standard: StandardTier
    higher: HigherTier
    activity_test: ActivityTest
    rate_caps: Tuple[Tuple[CareType, AgeCategory, float], ...]
    withholding: Withholding
    school_age_threshold: int = 6
    higher_rate_age_ceiling: int = 5
    weeks_per_year: int = 52
    max_income: float = 10_000_000

    def age_category(self, age: float) -> AgeCategory:
        if age >= self.school_age_threshold:
            return AgeCategory.SCHOOL_AGE
        return AgeCategory.NON_SCHOOL_AGE

    def hourly_cap(self, care_type: CareType, age: float) -> float:
        """Hourly rate cap for a care type and child age."""
        category = self.age_category(age)
        for cap_type, cap_category, cap in self.rate_caps:
            if cap_type is care_type and cap_category is category:
                return cap
        raise ConfigurationError(
            f"No rate cap for {getattr(care_type, 'value', care_type)}/"
            f"{category.value} in rate schedule {self.period}"
        )

    def daily_cap(self, care_type: CareType, age: float, hours_per_day: float) -> float:
        """Hourly cap converted to a daily cap for ``hours_per_day`` hours."""
        return round_money(self.hourly_cap(care_type, age) * hours_per_day)

    @classmethod
    def from_dict(cls, params: Dict[str, Any]) -> "RateSchedule":
        """
        Build a schedule from a params dict shaped like ``CCS_PARAMS_2025_26``.

        Raises:
            ConfigurationError: if an entry is missing or inconsistent
        """
        period = params.get("period", "<unknown>") if isinstance(params, dict) else "<unknown>"
        try:
            schedule = cls._build(params)
        except ConfigurationError:
            raise
        except KeyError as exc:
            raise ConfigurationError(
                f"Rate schedule {period}: missing entry {exc.args[0]!r}"
            ) from None
        except (TypeError, ValueError, AttributeError) as exc:
            raise ConfigurationError(f"Rate schedule {period}: malformed entry ({exc})") from None
        schedule._check()
        return schedule

    @classmethod
    def _build(cls, params: Dict[str, Any]) -> "RateSchedule":
        std = params["standard_rate"]
        higher = params["higher_rate"]
        activity = params["activity_test"]
        withholding = params["withholding"]

        caps = []
        for care_key, by_age in params["rate_caps"].items():
            care_type = CareType(care_key)
            for age_key, cap in by_age.items():
                caps.append((care_type, AgeCategory(age_key), float(cap)))

        return cls(
            period=str(params["period"]),
            standard=StandardTier(
                max_rate=float(std["max_rate"]),
                floor_rate=float(std.get("floor_rate", 0)),
                max_rate_income=float(std["max_rate_income"]),
                taper_start=float(std["taper_start"]),
                zero_rate_income=float(std["zero_rate_income"]),
                increment=float(std["increment"]),
                step=float(std["step"]),
            ),
            higher=HigherTier(
                max_rate=float(higher["max_rate"]),
                max_rate_income=float(higher["max_rate_income"]),
                bands=tuple(
                    RateBand(
                        start=float(b["start"]),
                        end=float(b["end"]),
                        rate=float(b["rate"]),
                        taper_to=float(b["taper_to"]) if b.get("taper_to") is not None else None,
                    )
                    for b in higher["bands"]
                ),
                revert_threshold=float(higher["revert_threshold"]),
                increment=float(higher["increment"]),
                step=float(higher["step"]),
            ),
            activity_test=ActivityTest(
                cutoff=float(activity["cutoff"]),
                base_hours=float(activity["base_hours"]),
                higher_hours=float(activity["higher_hours"]),
            ),
            rate_caps=tuple(caps),
            withholding=Withholding(
                default=float(withholding["default"]),
                minimum=float(withholding["min"]),
                maximum=float(withholding["max"]),
            ),
            school_age_threshold=int(params.get("school_age_threshold", 6)),
            higher_rate_age_ceiling=int(params.get("higher_rate_age_ceiling", 5)),
            weeks_per_year=int(params.get("weeks_per_year", 52)),
            max_income=float(params.get("max_income", 10_000_000)),
        )

    def _check(self):
        """Reject schedules that break the rate and ordering invariants."""
        problems = []
        rates = [self.standard.max_rate, self.standard.floor_rate, self.higher.max_rate]
        rates += [b.rate for b in self.higher.bands]
        rates += [b.taper_to for b in self.higher.bands if b.taper_to is not None]
        if any(not 0 <= r <= 100 for r in rates):
            problems.append("rates must be between 0 and 100")
        if self.standard.increment <= 0 or self.higher.increment <= 0:
            problems.append("taper increments must be positive")
        if not self.standard.max_rate_income < self.standard.taper_start <= self.standard.zero_rate_income:
            problems.append("standard thresholds must be ascending")
        if not self.higher.bands:
            problems.append("higher tier needs at least one band")
        previous_end = self.higher.max_rate_income
        for band in self.higher.bands:
            if band.start <= previous_end or band.end < band.start:
                problems.append(f"higher band starting {band.start:g} is out of order")
            previous_end = band.end
        if self.higher.bands and self.higher.revert_threshold <= self.higher.bands[-1].end:
            problems.append("revert threshold must sit above the last higher band")
        w = self.withholding
        if not 0 <= w.minimum <= w.default <= w.maximum <= 100:
            problems.append("withholding must satisfy 0 <= min <= default <= max <= 100")
        if not self.rate_caps or any(cap < 0 or math.isnan(cap) for _, _, cap in self.rate_caps):
            problems.append("rate caps must be non-negative")
        if problems:
            raise ConfigurationError(f"Rate schedule {self.period}: " + "; ".join(problems))


# Registered policy periods
RATE_SCHEDULES: Dict[str, Dict[str, Any]] = {
    "2025-26": CCS_PARAMS_2025_26,
}

DEFAULT_PERIOD = "2025-26"

DEFAULT_SCHEDULE = RateSchedule.from_dict(CCS_PARAMS_2025_26)


def load_rate_schedule(source: Optional[Union[str, Path]] = None) -> RateSchedule:
    """
    Load a rate schedule by registered period or from a JSON file.

    Args:
        source: Period identifier such as "2025-26", a path to a JSON file
            with the same shape as ``CCS_PARAMS_2025_26``, or None for the
            default period

    Returns:
        RateSchedule for the requested period
    """
    if source is None or source == DEFAULT_PERIOD:
        return DEFAULT_SCHEDULE
    if str(source) in RATE_SCHEDULES:
        return RateSchedule.from_dict(RATE_SCHEDULES[str(source)])

    path = Path(source)
    if not path.exists():
        raise ConfigurationError(
            f"No rate schedule for {source}: not a registered period "
            f"({', '.join(RATE_SCHEDULES)}) or an existing file"
        )
    try:
        with path.open("r", encoding="utf-8") as fh:
            params = json.load(fh)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Rate schedule file {path} is not valid JSON: {exc}") from None
    if not isinstance(params, dict):
        raise ConfigurationError(f"Rate schedule file {path} must contain a JSON object")
    return RateSchedule.from_dict(params)
