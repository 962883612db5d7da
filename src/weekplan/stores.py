"""JSON-file collaborators that own courses, availability and the stored plan.

The engine never touches these: it receives snapshots read from them and
hands the finished plan to ``PlanStore.replace``.
"""

from __future__ import annotations

import uuid
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Callable

from loguru import logger

from weekplan.io import read_json, write_json, write_json_atomic
from weekplan.models import WEEKDAY_LABELS, Course, WeeklyPlan
from weekplan.validation import (
    ValidationReport,
    clamp_hours,
    validate_availability_records,
    validate_course_records,
)

SCHEMA_VERSION = "1.0"

DEFAULT_AVAILABILITY: dict[str, float] = {
    "Mon": 2.0,
    "Tue": 2.0,
    "Wed": 2.0,
    "Thu": 2.0,
    "Fri": 2.0,
    "Sat": 3.0,
    "Sun": 2.0,
}

_SAMPLE_COURSES: tuple[tuple[str, int, int, int], ...] = (
    ("Discrete Math", 10, 4, 4),
    ("Algorithms", 18, 5, 5),
    ("Databases", 14, 3, 3),
)


def new_course_id() -> str:
    return uuid.uuid4().hex


def _read_optional(path: Path) -> dict[str, Any] | None:
    if not path.exists():
        return None
    return read_json(path)


def _writable(report: ValidationReport, path: Path) -> None:
    if not report.ok:
        codes = ", ".join(sorted(report.error_codes()))
        raise ValueError(f"{path} has invalid records ({codes}); fix the file before editing it")


def _require_week_key(week_key: str) -> str:
    week_start = date.fromisoformat(week_key)
    if week_start.weekday() != 0:
        raise ValueError(f"Week key must be the date of a Monday, got {week_key}")
    return week_start.isoformat()


class CourseStore:
    """Ordered course list persisted as ``{"courses": [...]}``."""

    def __init__(self, path: str | Path, *, id_factory: Callable[[], str] = new_course_id) -> None:
        self.path = Path(path)
        self._id_factory = id_factory

    def load_with_report(self) -> tuple[list[Course], ValidationReport]:
        payload = _read_optional(self.path)
        if payload is None:
            return [], ValidationReport()
        courses, report = validate_course_records(payload)
        if report.errors:
            logger.warning(
                "Skipped invalid course records",
                path=str(self.path),
                codes=sorted(report.error_codes()),
            )
        return courses, report

    def load(self) -> list[Course]:
        return self.load_with_report()[0]

    def _load_for_write(self) -> list[Course]:
        courses, report = self.load_with_report()
        _writable(report, self.path)
        return courses

    def save(self, courses: list[Course]) -> None:
        write_json(
            self.path,
            {"schema_version": SCHEMA_VERSION, "courses": [course.as_dict() for course in courses]},
        )

    def add(self, name: str, exam_date: date, difficulty: int = 3, weight: int = 3) -> Course:
        """Create a course with a fresh id and put it first in the list."""
        trimmed = name.strip()
        if not trimmed:
            raise ValueError("Please enter a course name.")
        for label, value in (("difficulty", difficulty), ("weight", weight)):
            if not 1 <= int(value) <= 5:
                raise ValueError(f"{label} must be between 1 and 5, got {value}")

        courses = self._load_for_write()
        existing = {course.course_id for course in courses}
        course_id = self._id_factory()
        if course_id in existing:
            raise ValueError(f"Generated course id already exists: {course_id}")

        course = Course(
            course_id=course_id,
            name=trimmed,
            exam_date=exam_date,
            difficulty=int(difficulty),
            weight=int(weight),
        )
        self.save([course, *courses])
        logger.info("Added course", course_id=course.course_id, name=course.name)
        return course

    def remove(self, course_id: str) -> bool:
        courses = self._load_for_write()
        remaining = [course for course in courses if course.course_id != course_id]
        if len(remaining) == len(courses):
            return False
        self.save(remaining)
        logger.info("Removed course", course_id=course_id)
        return True

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
        logger.info("Cleared courses", path=str(self.path))

    def sorted_by_exam(self) -> list[Course]:
        return sorted(self.load(), key=lambda course: course.exam_date)

    def add_sample(self, today: date) -> list[Course]:
        """Replace the list with three demo courses relative to ``today``."""
        sample = [
            Course(
                course_id=self._id_factory(),
                name=name,
                exam_date=today + timedelta(days=offset),
                difficulty=difficulty,
                weight=weight,
            )
            for name, offset, difficulty, weight in _SAMPLE_COURSES
        ]
        self.save(sample)
        logger.info("Loaded sample courses", count=len(sample))
        return sample


class AvailabilityStore:
    """Hours per weekday, keyed by the ISO date of each week's Monday."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load_with_report(self) -> tuple[dict[str, dict[str, float]], ValidationReport]:
        payload = _read_optional(self.path)
        if payload is None:
            return {}, ValidationReport()
        by_week, report = validate_availability_records(payload)
        if report.errors:
            logger.warning(
                "Skipped invalid availability records",
                path=str(self.path),
                codes=sorted(report.error_codes()),
            )
        return by_week, report

    def load(self) -> dict[str, dict[str, float]]:
        return self.load_with_report()[0]

    def _load_for_write(self) -> dict[str, dict[str, float]]:
        by_week, report = self.load_with_report()
        _writable(report, self.path)
        return by_week

    def save(self, by_week: dict[str, dict[str, float]]) -> None:
        write_json(self.path, {"schema_version": SCHEMA_VERSION, "weeks": by_week})

    def get(self, week_key: str) -> dict[str, float] | None:
        return self.load().get(week_key)

    def get_or_default(self, week_key: str) -> dict[str, float]:
        stored = self.get(week_key)
        return dict(DEFAULT_AVAILABILITY) if stored is None else stored

    def set_hours(self, week_key: str, day: str, hours: float) -> dict[str, float]:
        """Set one day's hours, clamped into [0, 10].

        A week without stored hours starts from the defaults.
        """
        week_key = _require_week_key(week_key)
        if day not in WEEKDAY_LABELS:
            raise ValueError(f"Unknown weekday label {day!r}, expected one of {', '.join(WEEKDAY_LABELS)}")

        by_week = self._load_for_write()
        availability = dict(by_week.get(week_key, DEFAULT_AVAILABILITY))
        availability[day] = clamp_hours(hours)
        by_week[week_key] = availability
        self.save(by_week)
        logger.info("Set availability", week_key=week_key, day=day, hours=availability[day])
        return availability

    def reset_week(self, week_key: str) -> dict[str, float]:
        week_key = _require_week_key(week_key)
        by_week = self._load_for_write()
        by_week[week_key] = dict(DEFAULT_AVAILABILITY)
        self.save(by_week)
        logger.info("Reset availability", week_key=week_key)
        return by_week[week_key]

    def copy_from_previous(self, week_key: str) -> dict[str, float] | None:
        """Copy the hours of the closest earlier stored week.

        When no earlier week exists the second-to-last stored week is used.
        Returns ``None`` (and changes nothing) when there is nothing to copy.
        """
        week_key = _require_week_key(week_key)
        by_week = self._load_for_write()
        keys = sorted(by_week)
        earlier = [key for key in keys if key < week_key]
        if earlier:
            source_key = earlier[-1]
        elif len(keys) >= 2:
            source_key = keys[-2]
        else:
            return None

        by_week[week_key] = dict(by_week.get(source_key, DEFAULT_AVAILABILITY))
        self.save(by_week)
        logger.info("Copied availability", week_key=week_key, source_week_key=source_key)
        return by_week[week_key]

    def total_hours(self, week_key: str) -> float:
        availability = self.get_or_default(week_key)
        return sum(float(availability.get(label, 0) or 0) for label in WEEKDAY_LABELS)


class PlanStore:
    """Single stored weekly plan, replaced wholesale on every generation."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> WeeklyPlan | None:
        try:
            payload = _read_optional(self.path)
            if payload is None or not isinstance(payload.get("plan"), dict):
                return None
            return WeeklyPlan.from_dict(payload["plan"])
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Stored plan is unreadable", path=str(self.path), error=str(exc))
            return None

    def replace(self, plan: WeeklyPlan) -> None:
        write_json_atomic(self.path, {"schema_version": SCHEMA_VERSION, "plan": plan.as_dict()})
        logger.info("Stored weekly plan", path=str(self.path), week_start=plan.week_start.isoformat())

    def clear(self) -> bool:
        existed = self.path.exists()
        self.path.unlink(missing_ok=True)
        logger.info("Cleared stored plan", path=str(self.path), existed=existed)
        return existed
