"""Immutable snapshots consumed and produced by the planning engine."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Mapping

WEEKDAY_LABELS: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

DRIFT_LARGEST_ONLY = "largest_only"
DRIFT_REDISTRIBUTE = "redistribute"

Availability = Mapping[str, float]
AvailabilityByWeek = Mapping[str, Availability]


@dataclass(frozen=True, slots=True)
class PlannerPolicy:
    """Tunable constants of the allocation heuristic."""

    session_minutes: int = 50
    min_session_remainder_minutes: int = 20
    min_allocation_minutes: int = 15
    max_courses_per_day: int = 3
    urgency_cap_days: int = 30
    rounding_step_minutes: int = 5
    drift_correction: str = DRIFT_LARGEST_ONLY

    def as_dict(self) -> dict[str, Any]:
        return {
            "session_minutes": self.session_minutes,
            "min_session_remainder_minutes": self.min_session_remainder_minutes,
            "min_allocation_minutes": self.min_allocation_minutes,
            "max_courses_per_day": self.max_courses_per_day,
            "urgency_cap_days": self.urgency_cap_days,
            "rounding_step_minutes": self.rounding_step_minutes,
            "drift_correction": self.drift_correction,
        }


DEFAULT_POLICY = PlannerPolicy()


def _to_date(value: str | date) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def minutes_from_hours(hours: float) -> int:
    return round_half_up(float(hours) * 60)


def week_start_for(day: date) -> date:
    """Return the Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def week_key_for(day: date) -> str:
    return week_start_for(day).isoformat()


@dataclass(frozen=True, slots=True)
class Course:
    course_id: str
    name: str
    exam_date: date
    difficulty: int
    weight: int

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Course":
        return cls(
            course_id=str(payload["id"]),
            name=str(payload["name"]),
            exam_date=_to_date(payload["exam_date"]),
            difficulty=int(payload["difficulty"]),
            weight=int(payload["weight"]),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.course_id,
            "name": self.name,
            "exam_date": self.exam_date.isoformat(),
            "difficulty": self.difficulty,
            "weight": self.weight,
        }


@dataclass(frozen=True, slots=True)
class PlanItem:
    """Minutes assigned to one course on one day.

    ``course_name`` is a snapshot taken at generation time, so renaming or
    deleting the course later does not alter stored plans.
    """

    course_id: str
    course_name: str
    minutes: int

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "PlanItem":
        return cls(
            course_id=str(payload["course_id"]),
            course_name=str(payload["course_name"]),
            minutes=int(payload["minutes"]),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "course_id": self.course_id,
            "course_name": self.course_name,
            "minutes": self.minutes,
        }


@dataclass(frozen=True, slots=True)
class DayPlan:
    date: date
    items: tuple[PlanItem, ...] = ()

    @property
    def total_minutes(self) -> int:
        return sum(item.minutes for item in self.items)

    @property
    def is_rest_day(self) -> bool:
        return not self.items

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "DayPlan":
        return cls(
            date=_to_date(payload["date"]),
            items=tuple(PlanItem.from_dict(item) for item in payload.get("items", [])),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "items": [item.as_dict() for item in self.items],
        }


@dataclass(frozen=True, slots=True)
class WeeklyPlan:
    """Seven contiguous day plans, Monday first."""

    days: tuple[DayPlan, ...]

    def __post_init__(self) -> None:
        if len(self.days) != len(WEEKDAY_LABELS):
            raise ValueError(f"A weekly plan needs exactly 7 days, got {len(self.days)}")
        first = self.days[0].date
        if first.weekday() != 0:
            raise ValueError(f"A weekly plan must start on a Monday, got {first.isoformat()}")
        for offset, day in enumerate(self.days):
            if day.date != first + timedelta(days=offset):
                raise ValueError(f"Day {offset} of the plan is {day.date.isoformat()}, dates must be contiguous")

    @property
    def week_start(self) -> date:
        return self.days[0].date

    @property
    def total_minutes(self) -> int:
        return sum(day.total_minutes for day in self.days)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "WeeklyPlan":
        return cls(days=tuple(DayPlan.from_dict(day) for day in payload.get("days", [])))

    def as_dict(self) -> dict[str, Any]:
        return {
            "week_start": self.week_start.isoformat(),
            "days": [day.as_dict() for day in self.days],
        }
