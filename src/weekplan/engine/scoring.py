"""Need score: exam urgency weighted by difficulty and importance."""

from __future__ import annotations

import math
from datetime import date, datetime, time
from typing import Sequence

from weekplan.models import DEFAULT_POLICY, Course, PlannerPolicy

_SECONDS_PER_DAY = 24 * 60 * 60


def days_until(exam_date: date, today: date | datetime) -> int:
    """Whole days left before the exam, never below 1.

    With a plain ``date`` the difference is counted in calendar days. With a
    ``datetime`` the exam is taken at midnight and any started day counts as
    a full one. Exams today or in the past are due in 1 day.
    """

    if isinstance(today, datetime):
        exam_start = datetime.combine(exam_date, time.min, tzinfo=today.tzinfo)
        seconds = (exam_start - today).total_seconds()
        days = math.ceil(seconds / _SECONDS_PER_DAY)
    else:
        days = (exam_date - today).days
    return max(1, days)


def compute_urgency(days: int, policy: PlannerPolicy = DEFAULT_POLICY) -> float:
    """Inverse of the days left, saturating at ``1 / urgency_cap_days``."""
    return 1.0 / min(policy.urgency_cap_days, max(1, days))


def compute_need_score(
    course: Course,
    today: date | datetime,
    policy: PlannerPolicy = DEFAULT_POLICY,
) -> float:
    """Compute ``urgency * difficulty * weight`` for one course."""

    urgency = compute_urgency(days_until(course.exam_date, today), policy)
    return urgency * course.difficulty * course.weight


def score_courses(
    courses: Sequence[Course],
    today: date | datetime,
    policy: PlannerPolicy = DEFAULT_POLICY,
) -> list[tuple[Course, float]]:
    return [(course, compute_need_score(course, today, policy)) for course in courses]
