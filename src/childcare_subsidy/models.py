"""
Input records for a household subsidy calculation.

Records are frozen and validated on construction, so calculators can rely
on every field being in range.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .errors import ValidationError, require_number

MAX_WORK_DAYS = 5
MAX_HOURS_PER_DAY = 24
MAX_CHILD_AGE = 18
MAX_CARE_HOURS_PER_WEEK = 100


class Weekday(Enum):
    """Weekdays on which paid care can be needed."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: Any) -> "Weekday":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for day in cls:
                if key in (day.value, day.value[:3]):
                    return day
        raise ValidationError("work_days", "must contain weekday names", value)


WEEKDAYS: Tuple[Weekday, ...] = tuple(Weekday)


def sort_days(days: Iterable[Weekday]) -> Tuple[Weekday, ...]:
    """Return days in Monday-to-Friday order."""
    return tuple(sorted(days, key=WEEKDAYS.index))


class CareType(Enum):
    """Approved care categories with their own hourly rate caps."""

    CENTRE_BASED = "centre-based"
    OSHC = "oshc"
    FAMILY_DAY_CARE = "family-day-care"
    IN_HOME_CARE = "in-home-care"

    @classmethod
    def parse(cls, value: Any) -> "CareType":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower().replace("_", "-")
            if key == "centre-based-day-care":
                return cls.CENTRE_BASED
            for care_type in cls:
                if key in (care_type.value, care_type.name.lower().replace("_", "-")):
                    return care_type
        raise ValidationError(
            "care_type",
            f"must be one of {', '.join(c.value for c in cls)}",
            value,
        )


class AgeCategory(Enum):
    """Age grouping used to select a rate cap."""

    SCHOOL_AGE = "school-age"
    NON_SCHOOL_AGE = "non-school-age"


def _require_days(field_name: str, value: Any, maximum: int = MAX_WORK_DAYS) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field_name, "must be a whole number of days", value)
    if value < 0 or value > maximum:
        raise ValidationError(field_name, f"must be between 0 and {maximum}", value)
    return value


@dataclass(frozen=True)
class ParentProfile:
    """One parent's full-time-equivalent income and weekly work pattern."""

    income: float
    days_per_week: int
    hours_per_day: float
    work_days: Optional[Tuple[Weekday, ...]] = None

    def __post_init__(self):
        require_number("income", self.income, minimum=0)
        _require_days("days_per_week", self.days_per_week)
        require_number("hours_per_day", self.hours_per_day, 0, MAX_HOURS_PER_DAY)

        if self.work_days is None:
            days = WEEKDAYS[: self.days_per_week]
        else:
            if isinstance(self.work_days, str):
                raise ValidationError("work_days", "must be a collection of weekdays", self.work_days)
            parsed = [Weekday.parse(d) for d in self.work_days]
            if len(set(parsed)) != len(parsed):
                raise ValidationError("work_days", "must not repeat a weekday", self.work_days)
            if len(parsed) != self.days_per_week:
                raise ValidationError(
                    "work_days",
                    f"must list exactly {self.days_per_week} day(s) to match days_per_week",
                    self.work_days,
                )
            days = sort_days(parsed)
        object.__setattr__(self, "work_days", days)

    @property
    def is_working(self) -> bool:
        return self.days_per_week > 0 and self.hours_per_day > 0

    @property
    def hours_per_fortnight(self) -> float:
        return self.days_per_week * self.hours_per_day * 2

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParentProfile":
        work_days = data.get("work_days")
        return cls(
            income=data.get("income", 0),
            days_per_week=data.get("days_per_week", 0),
            hours_per_day=data.get("hours_per_day", 0),
            work_days=tuple(work_days) if work_days is not None else None,
        )


@dataclass(frozen=True)
class DailyFee:
    """Provider charges per session day."""

    daily_fee: float
    hours_per_day: float
    days_of_care: int

    def __post_init__(self):
        require_number("daily_fee", self.daily_fee, minimum=0)
        require_number("hours_per_day", self.hours_per_day, 0, MAX_HOURS_PER_DAY)
        if self.hours_per_day <= 0:
            raise ValidationError("hours_per_day", "must be greater than 0", self.hours_per_day)
        _require_days("days_of_care", self.days_of_care)


@dataclass(frozen=True)
class HourlyFee:
    """Provider charges per hour of care."""

    hourly_fee: float
    hours_per_week: float

    def __post_init__(self):
        require_number("hourly_fee", self.hourly_fee, minimum=0)
        require_number("hours_per_week", self.hours_per_week, 0, MAX_CARE_HOURS_PER_WEEK)


FeeMode = Union[DailyFee, HourlyFee]


@dataclass(frozen=True)
class ChildProfile:
    """A child in care, with the fee arrangement the provider charges."""

    age: int
    care_type: CareType
    fee: FeeMode

    def __post_init__(self):
        require_number("age", self.age, 0, MAX_CHILD_AGE)
        object.__setattr__(self, "care_type", CareType.parse(self.care_type))
        if not isinstance(self.fee, (DailyFee, HourlyFee)):
            raise ValidationError("fee", "must be a DailyFee or HourlyFee", self.fee)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChildProfile":
        """Build from a plain record with a ``fee_mode`` of daily or hourly."""
        mode = str(data.get("fee_mode", "hourly")).lower()
        if mode == "daily":
            fee: FeeMode = DailyFee(
                daily_fee=data.get("daily_fee", 0),
                hours_per_day=data.get("hours_per_day", 10),
                days_of_care=data.get("days_of_care", 0),
            )
        elif mode == "hourly":
            fee = HourlyFee(
                hourly_fee=data.get("hourly_fee", 0),
                hours_per_week=data.get("hours_per_week", 0),
            )
        else:
            raise ValidationError("fee_mode", "must be 'daily' or 'hourly'", mode)
        return cls(age=data.get("age"), care_type=data.get("care_type"), fee=fee)


@dataclass(frozen=True)
class Household:
    """One or two parents and the children in care."""

    parent1: ParentProfile
    parent2: Optional[ParentProfile] = None
    children: Tuple[ChildProfile, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not isinstance(self.parent1, ParentProfile):
            raise ValidationError("parent1", "must be a ParentProfile", self.parent1)
        if self.parent2 is not None and not isinstance(self.parent2, ParentProfile):
            raise ValidationError("parent2", "must be a ParentProfile or None", self.parent2)
        children = tuple(self.children)
        for child in children:
            if not isinstance(child, ChildProfile):
                raise ValidationError("children", "must contain ChildProfile records", child)
        object.__setattr__(self, "children", children)

    @property
    def working_parent2(self) -> Optional[ParentProfile]:
        """Parent 2 if they work at all; a parent who works nothing counts as absent."""
        if self.parent2 is not None and self.parent2.is_working:
            return self.parent2
        return None

    @property
    def is_single_parent(self) -> bool:
        return self.working_parent2 is None

    def ordered_children(self) -> List[Tuple[int, ChildProfile]]:
        """Children oldest-first with their 1-based sibling position."""
        # sorted() is stable, so equal ages keep their input order
        ordered = sorted(self.children, key=lambda c: -c.age)
        return [(position, child) for position, child in enumerate(ordered, start=1)]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Household":
        """Build a household from the JSON shape the CLI accepts."""
        if "parent1" not in data:
            raise ValidationError("parent1", "is required", None)
        parent2 = data.get("parent2")
        return cls(
            parent1=ParentProfile.from_dict(data["parent1"]),
            parent2=ParentProfile.from_dict(parent2) if parent2 else None,
            children=tuple(ChildProfile.from_dict(c) for c in data.get("children", [])),
        )
