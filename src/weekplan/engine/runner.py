"""Planning engine runner."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Sequence

from loguru import logger

from weekplan.models import (
    DEFAULT_POLICY,
    WEEKDAY_LABELS,
    Availability,
    Course,
    DayPlan,
    PlannerPolicy,
    WeeklyPlan,
    minutes_from_hours,
)
from weekplan.reporting.warnings import build_warnings_and_suggestions

from .allocator import allocate_day
from .explanations import build_explanations
from .scoring import score_courses
from .sessions import dropped_minutes, to_sessions


def build_week(
    courses: Sequence[Course],
    availability: Availability,
    week_start: date,
    today: date | datetime,
    policy: PlannerPolicy = DEFAULT_POLICY,
) -> WeeklyPlan:
    """Assemble the seven day plans of the week starting at ``week_start``.

    The caller checks the generation preconditions (courses present,
    availability present) before calling. Any failure raises and no partial
    plan is returned.
    """

    if week_start.weekday() != 0:
        raise ValueError(f"week_start must be a Monday, got {week_start.isoformat()}")

    days: list[DayPlan] = []
    for offset, label in enumerate(WEEKDAY_LABELS):
        day = week_start + timedelta(days=offset)
        hours = float(availability.get(label, 0) or 0)
        # Same ``today`` for every day: scores do not drift within one run.
        scored = score_courses(courses, today, policy)
        items = allocate_day(hours, scored, policy)
        days.append(DayPlan(date=day, items=tuple(items)))

    return WeeklyPlan(days=tuple(days))


def _daily_plan_payload(
    plan: WeeklyPlan,
    availability: Availability,
    policy: PlannerPolicy,
) -> list[dict[str, Any]]:
    payload: list[dict[str, Any]] = []
    for label, day in zip(WEEKDAY_LABELS, plan.days):
        payload.append(
            {
                "date": day.date.isoformat(),
                "weekday": label,
                "available_minutes": minutes_from_hours(float(availability.get(label, 0) or 0)),
                "total_minutes": day.total_minutes,
                "rest_day": day.is_rest_day,
                "items": [
                    {
                        **item.as_dict(),
                        "sessions": to_sessions(item.minutes, policy),
                        "unscheduled_minutes": dropped_minutes(item.minutes, policy),
                    }
                    for item in day.items
                ],
            }
        )
    return payload


def run_planner(
    *,
    courses: Sequence[Course],
    availability: Availability,
    week_start: date,
    today: date | datetime,
    policy: PlannerPolicy = DEFAULT_POLICY,
) -> dict[str, Any]:
    """Build the week and everything reported alongside it."""

    plan = build_week(courses, availability, week_start, today, policy)
    daily_plan = _daily_plan_payload(plan, availability, policy)
    warnings, suggestions = build_warnings_and_suggestions(
        courses=courses,
        daily_plan=daily_plan,
        today=today,
    )
    rest_days = sum(1 for day in plan.days if day.is_rest_day)

    logger.info(
        "Generated weekly plan",
        week_start=week_start.isoformat(),
        courses=len(courses),
        total_minutes=plan.total_minutes,
        rest_days=rest_days,
        warnings=len(warnings),
    )

    return {
        "status": "ok",
        "weekly_plan": plan,
        "daily_plan": daily_plan,
        "plan_summary": {
            "week_start": week_start.isoformat(),
            "today": today.isoformat(),
            "courses_count": len(courses),
            "total_planned_minutes": plan.total_minutes,
            "total_available_minutes": sum(day["available_minutes"] for day in daily_plan),
            "rest_days": rest_days,
        },
        "explanations": build_explanations(courses, today, policy),
        "warnings": warnings,
        "suggestions": suggestions,
        "policy": policy.as_dict(),
    }
