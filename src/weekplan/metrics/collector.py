"""Plan metrics collector."""

from __future__ import annotations

from statistics import mean, pstdev
from typing import Any


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def collect_metrics(result: dict[str, Any]) -> dict[str, Any]:
    """Summarise a ``run_planner`` result; ratios are clamped to [0,1]."""
    daily_plan = [day for day in result.get("daily_plan", []) if isinstance(day, dict)]
    courses_count = int(result.get("plan_summary", {}).get("courses_count", 0) or 0)

    planned_total = 0
    available_total = 0
    session_total = 0
    over_budget_days = 0
    rest_days = 0
    max_items_per_day = 0
    plan_size = 0
    scheduled_courses: set[str] = set()
    study_day_minutes: list[int] = []

    for day in daily_plan:
        items = [item for item in day.get("items", []) if isinstance(item, dict)]
        planned = sum(max(0, int(item.get("minutes", 0) or 0)) for item in items)
        available = max(0, int(day.get("available_minutes", 0) or 0))

        planned_total += planned
        available_total += available
        session_total += sum(sum(item.get("sessions", [])) for item in items)
        plan_size += len(items)
        max_items_per_day = max(max_items_per_day, len(items))
        scheduled_courses.update(str(item.get("course_id", "")) for item in items)

        if planned > available:
            over_budget_days += 1
        if items:
            study_day_minutes.append(planned)
        else:
            rest_days += 1

    avg_daily = mean(study_day_minutes) if study_day_minutes else 0.0
    cv = (pstdev(study_day_minutes) / max(1.0, avg_daily)) if study_day_minutes else 0.0

    return {
        "total_planned_minutes": planned_total,
        "total_available_minutes": available_total,
        "total_session_minutes": session_total,
        "utilization": _clamp01(planned_total / max(1, available_total)),
        "session_coverage": _clamp01(session_total / planned_total) if planned_total else 1.0,
        "course_coverage": _clamp01(len(scheduled_courses) / courses_count) if courses_count else 0.0,
        "courses_scheduled": len(scheduled_courses),
        "rest_days": rest_days,
        "rest_day_ratio": _clamp01(rest_days / max(1, len(daily_plan))),
        "over_budget_days": over_budget_days,
        "max_items_per_day": max_items_per_day,
        "balance_score": _clamp01(1.0 - min(1.0, cv)),
        "plan_size": plan_size,
    }
