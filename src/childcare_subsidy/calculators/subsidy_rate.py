"""
Subsidy rate resolution - maps household income to a CCS percentage.

Standard tier: one taper from the maximum rate down to the floor.
Higher tier: flat and tapering bands for second and younger children aged
at or below the age ceiling, reverting to the standard tier above the top
band. The standard tier never consults the higher tier.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Union

import numpy as np

from ..config import DEFAULT_SCHEDULE, HigherTier, RateSchedule
from ..errors import DomainError, ValidationError, require_number
from ..models import MAX_CHILD_AGE, ChildProfile


class Tier(Enum):
    STANDARD = "standard"
    HIGHER = "higher"


@dataclass(frozen=True)
class SubsidyDetermination:
    """Resolved subsidy percentage for one child."""

    rate: float
    tier: Tier
    reverted: bool = False
    position: int = 1
    age: float = 0

    @property
    def effective_tier(self) -> Tier:
        """Tier whose formula produced the rate."""
        return Tier.STANDARD if self.reverted else self.tier


def calculate_standard_rate(income: float, config: RateSchedule = DEFAULT_SCHEDULE) -> float:
    """
    Standard CCS rate.

    Income at or below ``max_rate_income`` gets the maximum rate, income at
    or above ``zero_rate_income`` gets the floor. In between, the rate drops
    one step for each complete increment above the taper start, plus one:
    $85,280-$90,279 is 89%, $90,280-$95,279 is 88%.
    """
    require_number("household_income", income, minimum=0)
    std = config.standard

    if income <= std.max_rate_income:
        return std.max_rate
    if income >= std.zero_rate_income:
        return std.floor_rate

    bracket = math.floor((income - std.taper_start) / std.increment)
    return max(std.floor_rate, std.max_rate - (bracket + 1) * std.step)


def _higher_band_rate(income: float, higher: HigherTier) -> Optional[float]:
    """Rate from the higher-tier bands, or None above the last band."""
    if income <= higher.max_rate_income:
        return higher.max_rate
    for band in higher.bands:
        if income > band.end:
            continue
        if band.is_flat:
            return band.rate
        bracket = math.floor((income - band.start) / higher.increment)
        return max(band.taper_to, band.rate - (bracket + 1) * higher.step)
    return None


def calculate_higher_rate(income: float, config: RateSchedule = DEFAULT_SCHEDULE) -> float:
    """Higher CCS rate, falling back to the standard rate above the top band."""
    require_number("household_income", income, minimum=0)
    rate = _higher_band_rate(income, config.higher)
    if rate is None:
        return calculate_standard_rate(income, config)
    return rate


def calculate_child_rate(
    income: float,
    age: float,
    position: int = 1,
    config: RateSchedule = DEFAULT_SCHEDULE,
) -> SubsidyDetermination:
    """
    Resolve the rate for one child.

    Args:
        income: Adjusted household income
        age: Child's age in years (0-18)
        position: 1 for the eldest child, 2+ for younger siblings
        config: Rate schedule

    Returns:
        SubsidyDetermination with the rate and the tier used
    """
    require_number("household_income", income, minimum=0)
    require_number("age", age, 0, MAX_CHILD_AGE)
    if isinstance(position, bool) or not isinstance(position, int) or position < 1:
        raise ValidationError("position", "must be a whole number of at least 1", position)

    if age > config.higher_rate_age_ceiling or position == 1:
        return SubsidyDetermination(
            rate=calculate_standard_rate(income, config),
            tier=Tier.STANDARD,
            position=position,
            age=age,
        )

    rate = _higher_band_rate(income, config.higher)
    if rate is None:
        return SubsidyDetermination(
            rate=calculate_standard_rate(income, config),
            tier=Tier.HIGHER,
            reverted=True,
            position=position,
            age=age,
        )
    return SubsidyDetermination(rate=rate, tier=Tier.HIGHER, position=position, age=age)


def calculate_children_rates(
    income: float,
    children: Sequence[Union[ChildProfile, float]],
    config: RateSchedule = DEFAULT_SCHEDULE,
) -> List[SubsidyDetermination]:
    """
    Resolve rates for every child, ordered oldest-first.

    Children may be ChildProfile records or bare ages. Equal ages keep
    their input order.
    """
    if not children:
        raise DomainError("At least one child is required to resolve subsidy rates")

    ages = [c.age if isinstance(c, ChildProfile) else c for c in children]
    ordered = sorted(ages, key=lambda a: -a)
    return [
        calculate_child_rate(income, age, position, config)
        for position, age in enumerate(ordered, start=1)
    ]


def rate_curve(
    incomes: Sequence[float],
    tier: Union[Tier, str] = Tier.STANDARD,
    config: RateSchedule = DEFAULT_SCHEDULE,
) -> np.ndarray:
    """
    Vectorized rate lookup over an array of incomes.

    Element-for-element identical to ``calculate_standard_rate`` or
    ``calculate_higher_rate``; used for rate tables and income sweeps.
    """
    tier = Tier(tier)
    incomes = np.asarray(incomes, dtype=float)
    if incomes.size and (not np.all(np.isfinite(incomes)) or np.any(incomes < 0)):
        raise ValidationError("incomes", "must be finite and non-negative", incomes.tolist())

    std = config.standard
    bracket = np.floor((incomes - std.taper_start) / std.increment)
    tapered = np.maximum(std.floor_rate, std.max_rate - (bracket + 1) * std.step)
    standard = np.where(
        incomes <= std.max_rate_income,
        std.max_rate,
        np.where(incomes >= std.zero_rate_income, std.floor_rate, tapered),
    )
    if tier is Tier.STANDARD:
        return standard

    higher = config.higher
    conditions = [incomes <= higher.max_rate_income]
    choices = [np.full_like(incomes, higher.max_rate)]
    for band in higher.bands:
        conditions.append(incomes <= band.end)
        if band.is_flat:
            choices.append(np.full_like(incomes, band.rate))
        else:
            band_bracket = np.floor((incomes - band.start) / higher.increment)
            choices.append(np.maximum(band.taper_to, band.rate - (band_bracket + 1) * higher.step))

    # Above the last band the higher tier reverts to the standard curve
    return np.select(conditions, choices, default=standard)
