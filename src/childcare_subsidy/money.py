"""Money rounding and reporting-period conversion."""

from decimal import ROUND_HALF_UP, Decimal

from .errors import ValidationError

CENTS = Decimal("0.01")

# Multipliers from a weekly amount
PERIOD_MULTIPLIERS = {
    "weekly": 1,
    "fortnightly": 2,
    "monthly": 52 / 12,
    "annual": 52,
}


def round_money(value: float) -> float:
    """Round a dollar amount half-up to whole cents."""
    # repr() gives the shortest decimal that round-trips, so 23.706 stays 23.706
    return float(Decimal(repr(float(value))).quantize(CENTS, rounding=ROUND_HALF_UP))


def convert_to_period(weekly_value: float, period: str = "weekly") -> float:
    """
    Convert a weekly amount to another reporting period.

    Args:
        weekly_value: Amount per week
        period: One of weekly, fortnightly, monthly, annual

    Returns:
        Amount for the requested period, rounded to cents
    """
    try:
        multiplier = PERIOD_MULTIPLIERS[period]
    except KeyError:
        raise ValidationError(
            "period", f"must be one of {', '.join(PERIOD_MULTIPLIERS)}", period
        ) from None
    return round_money(weekly_value * multiplier)
