"""
Exception types raised by the subsidy engine.

Every error is raised at the boundary that detects it and propagates to the
caller unchanged. The engine never retries or recovers.
"""

from typing import Any, Optional


class SubsidyError(Exception):
    """Base class for all engine errors."""


class ValidationError(SubsidyError, ValueError):
    """An input field is out of range or of the wrong type."""

    def __init__(self, field: str, constraint: str, value: Any = None):
        self.field = field
        self.constraint = constraint
        self.value = value
        super().__init__(f"{field} {constraint} (got {value!r})")


class ConfigurationError(SubsidyError, KeyError):
    """The rate schedule is missing or malformed for the requested entry."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable.
        return str(self.args[0]) if self.args else ""


class DomainError(SubsidyError, ValueError):
    """Inputs are individually valid but inconsistent as a whole."""


def require_number(
    field: str,
    value: Any,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
) -> float:
    """Check that ``value`` is a finite number within [minimum, maximum]."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(field, "must be a number", value)
    if value != value or value in (float("inf"), float("-inf")):
        raise ValidationError(field, "must be a finite number", value)
    if minimum is not None and value < minimum:
        raise ValidationError(field, f"must be at least {minimum}", value)
    if maximum is not None and value > maximum:
        raise ValidationError(field, f"must not exceed {maximum}", value)
    return value
