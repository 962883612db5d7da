"""Shape and range checks for stored course and availability records."""

from __future__ import annotations

import math
from datetime import date
from typing import Any

from weekplan.models import WEEKDAY_LABELS, Course

from .errors import ValidationReport

MIN_HOURS = 0.0
MAX_HOURS = 10.0
MIN_RATING = 1
MAX_RATING = 5


def clamp_hours(hours: Any) -> float:
    """Coerce hours into [0, 10]; non-numeric or non-finite values become 0."""
    if isinstance(hours, bool) or not isinstance(hours, (int, float)):
        return 0.0
    value = float(hours)
    if not math.isfinite(value):
        return 0.0
    return min(MAX_HOURS, max(MIN_HOURS, value))


def _parse_date(raw: Any) -> date | None:
    if not isinstance(raw, str):
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        return None


def _is_rating(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and MIN_RATING <= value <= MAX_RATING


def validate_course_records(payload: Any) -> tuple[list[Course], ValidationReport]:
    """Validate ``{"courses": [...]}`` and return the valid courses in order.

    Invalid records are reported and skipped; every problem is collected
    before returning.
    """

    report = ValidationReport()
    records = payload.get("courses") if isinstance(payload, dict) else None
    if not isinstance(records, list):
        report.add_error(
            code="INVALID_TYPE",
            message="courses must be an array",
            field_path="$.courses",
        )
        return [], report

    courses: list[Course] = []
    seen_ids: set[str] = set()
    for idx, record in enumerate(records):
        path = f"$.courses[{idx}]"
        if not isinstance(record, dict):
            report.add_error(code="INVALID_TYPE", message="Course record must be an object", field_path=path)
            continue

        errors_before = len(report.errors)

        course_id = record.get("id")
        if not isinstance(course_id, str) or not course_id:
            report.add_error(code="MISSING_REQUIRED_FIELD", message="Course id is required", field_path=f"{path}.id")
        elif course_id in seen_ids:
            report.add_error(
                code="DUPLICATE_COURSE_ID",
                message=f"Duplicate course id: {course_id}",
                field_path=f"{path}.id",
            )
        else:
            seen_ids.add(course_id)

        name = record.get("name")
        if not isinstance(name, str) or not name.strip():
            report.add_error(
                code="EMPTY_COURSE_NAME",
                message="Course name cannot be empty",
                field_path=f"{path}.name",
            )

        if _parse_date(record.get("exam_date")) is None:
            report.add_error(
                code="INVALID_DATE_FORMAT",
                message="exam_date must be an ISO date (YYYY-MM-DD)",
                field_path=f"{path}.exam_date",
            )

        for key in ("difficulty", "weight"):
            if not _is_rating(record.get(key)):
                report.add_error(
                    code="OUT_OF_RANGE",
                    message=f"{key} must be an integer between {MIN_RATING} and {MAX_RATING}",
                    field_path=f"{path}.{key}",
                )

        if len(report.errors) == errors_before:
            courses.append(Course.from_dict({**record, "name": record["name"].strip()}))

    return courses, report


def validate_availability_records(payload: Any) -> tuple[dict[str, dict[str, float]], ValidationReport]:
    """Validate ``{"weeks": {week_key: {label: hours}}}``.

    Week keys must be the ISO date of a Monday. Hours outside [0, 10] are
    clamped and reported as infos rather than rejected.
    """

    report = ValidationReport()
    weeks = payload.get("weeks") if isinstance(payload, dict) else None
    if not isinstance(weeks, dict):
        report.add_error(code="INVALID_TYPE", message="weeks must be an object", field_path="$.weeks")
        return {}, report

    by_week: dict[str, dict[str, float]] = {}
    for week_key, availability in weeks.items():
        path = f"$.weeks.{week_key}"
        week_start = _parse_date(week_key)
        if week_start is None or week_start.weekday() != 0:
            report.add_error(
                code="INVALID_WEEK_KEY",
                message=f"Week key {week_key!r} is not the ISO date of a Monday",
                field_path=path,
                suggested_fix="Key each week by the date of its Monday (YYYY-MM-DD).",
            )
            continue
        if not isinstance(availability, dict):
            report.add_error(code="INVALID_TYPE", message="Week availability must be an object", field_path=path)
            continue

        hours_by_day: dict[str, float] = {}
        for label, hours in availability.items():
            if label not in WEEKDAY_LABELS:
                report.add_error(
                    code="UNKNOWN_WEEKDAY",
                    message=f"Unknown weekday label: {label!r}",
                    field_path=f"{path}.{label}",
                    suggested_fix=f"Use one of: {', '.join(WEEKDAY_LABELS)}",
                )
                continue
            if isinstance(hours, bool) or not isinstance(hours, (int, float)):
                report.add_error(
                    code="INVALID_TYPE",
                    message="Hours must be a number",
                    field_path=f"{path}.{label}",
                )
                continue
            clamped = clamp_hours(hours)
            if clamped != hours:
                report.add_info(
                    code="INFO_CLAMP_HOURS_APPLIED",
                    message=f"Hours were clamped into [{MIN_HOURS:g},{MAX_HOURS:g}]",
                    field_path=f"{path}.{label}",
                    extra={"applied_value": clamped},
                )
            hours_by_day[label] = clamped
        by_week[week_key] = hours_by_day

    return by_week, report
