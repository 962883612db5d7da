"""Warning and suggestion generation for a generated week."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Sequence

from weekplan.models import Course


def _calendar_day(today: date | datetime) -> date:
    return today.date() if isinstance(today, datetime) else today


def build_warnings_and_suggestions(
    *,
    courses: Sequence[Course],
    daily_plan: list[dict[str, Any]],
    today: date | datetime,
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """Flag the known gaps of the heuristic next to the plan."""
    warnings: list[dict[str, Any]] = []
    suggestions: list[dict[str, Any]] = []

    # (1) Drift correction could not bring the day back under budget.
    for day in daily_plan:
        overflow = int(day.get("total_minutes", 0)) - int(day.get("available_minutes", 0))
        if overflow > 0:
            warnings.append(
                {
                    "code": "WARN_DAY_OVER_BUDGET",
                    "severity": "warning",
                    "date": day.get("date"),
                    "overflow_minutes": overflow,
                    "message": "Planned minutes exceed the time available on this day.",
                }
            )
            suggestions.append(
                {
                    "code": "SUGGEST_REDISTRIBUTE_DRIFT",
                    "message": "Set drift_correction to 'redistribute' or add study time on crowded days.",
                }
            )

    # (2) Session chunks do not cover the whole allocation.
    for day in daily_plan:
        for item in day.get("items", []):
            unscheduled = int(item.get("unscheduled_minutes", 0) or 0)
            if unscheduled > 0:
                warnings.append(
                    {
                        "code": "WARN_SESSION_REMAINDER_DROPPED",
                        "severity": "info",
                        "date": day.get("date"),
                        "course_id": item.get("course_id"),
                        "unscheduled_minutes": unscheduled,
                        "message": "A remainder too short for a session was left out of the session list.",
                    }
                )

    # (3) Courses that never made it into the week.
    scheduled = {
        str(item.get("course_id"))
        for day in daily_plan
        for item in day.get("items", [])
    }
    for course in courses:
        if course.course_id in scheduled:
            continue
        warnings.append(
            {
                "code": "WARN_COURSE_NOT_SCHEDULED",
                "severity": "warning",
                "course_id": course.course_id,
                "message": "Course received no study time this week.",
            }
        )
        suggestions.append(
            {
                "code": "SUGGEST_ADD_TIME",
                "course_id": course.course_id,
                "message": "Add daily hours or raise the course weight to get it scheduled.",
            }
        )

    # (4) Exams already behind us are scored as due tomorrow.
    reference = _calendar_day(today)
    for course in courses:
        if course.exam_date < reference:
            warnings.append(
                {
                    "code": "WARN_EXAM_PASSED",
                    "severity": "warning",
                    "course_id": course.course_id,
                    "exam_date": course.exam_date.isoformat(),
                    "message": "Exam date is in the past; the course is treated as due in 1 day.",
                }
            )
            suggestions.append(
                {
                    "code": "SUGGEST_REMOVE_COURSE",
                    "course_id": course.course_id,
                    "message": "Remove the course or update its exam date.",
                }
            )

    if daily_plan and all(day.get("rest_day") for day in daily_plan):
        warnings.append(
            {
                "code": "WARN_ALL_REST_DAYS",
                "severity": "warning",
                "message": "Every day of the week ended up as a rest day.",
            }
        )
        suggestions.append(
            {
                "code": "SUGGEST_ADD_TIME",
                "message": "Increase the available hours for this week.",
            }
        )

    unique_suggestions: list[dict[str, Any]] = []
    seen: set[tuple[str, str]] = set()
    for item in suggestions:
        key = (str(item.get("code", "")), str(item.get("course_id", "*")))
        if key in seen:
            continue
        seen.add(key)
        unique_suggestions.append(item)

    return warnings, unique_suggestions
