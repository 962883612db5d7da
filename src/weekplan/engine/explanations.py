"""Per-course breakdown of why the plan favours some courses."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Sequence

from weekplan.models import DEFAULT_POLICY, Course, PlannerPolicy, round_half_up

from .scoring import compute_need_score, days_until

_BAR_MIN_PERCENT = 5
_BAR_MAX_PERCENT = 100


def urgency_label(days: int) -> str:
    if days <= 7:
        return "very soon"
    if days <= 14:
        return "soon"
    if days <= 30:
        return "upcoming"
    return "later"


def course_summary(
    course: Course,
    today: date | datetime,
    policy: PlannerPolicy = DEFAULT_POLICY,
) -> dict[str, Any]:
    days = days_until(course.exam_date, today)
    return {
        "days": days,
        "score": compute_need_score(course, today, policy),
        "urgency_label": urgency_label(days),
    }


def build_explanations(
    courses: Sequence[Course],
    today: date | datetime,
    policy: PlannerPolicy = DEFAULT_POLICY,
    limit: int | None = 5,
) -> list[dict[str, Any]]:
    """Rank courses by need score with a percentage of the top score.

    The reference score never drops below 1, so a week of far-away exams
    shows short bars instead of every course at 100%.
    """

    if not courses:
        return []

    rows: list[dict[str, Any]] = []
    for course in courses:
        summary = course_summary(course, today, policy)
        rows.append(
            {
                "course_id": course.course_id,
                "name": course.name,
                "days": summary["days"],
                "urgency_label": summary["urgency_label"],
                "difficulty": course.difficulty,
                "weight": course.weight,
                "score": summary["score"],
            }
        )

    max_score = max(max(row["score"] for row in rows), 1.0)
    for row in rows:
        percent = round_half_up(row["score"] / max_score * 100)
        row["percent"] = percent
        row["bar_percent"] = max(_BAR_MIN_PERCENT, min(_BAR_MAX_PERCENT, percent))

    ordered = sorted(rows, key=lambda row: row["score"], reverse=True)
    return ordered if limit is None else ordered[:limit]
