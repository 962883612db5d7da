"""Proportional allocation of one day's study time.

Phases:
1) share minutes by need score and round to the policy step,
2) drop candidates too short to schedule,
3) keep the largest ``max_courses_per_day`` (stable on ties),
4) drift correction when rounding overshoots the day's budget.

Rule preserved: drift correction never pushes an item below the minimum
allocation, so a day can still end above budget (see ``day_overflow``).
"""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from loguru import logger

from weekplan.models import (
    DEFAULT_POLICY,
    DRIFT_REDISTRIBUTE,
    Course,
    PlanItem,
    PlannerPolicy,
    minutes_from_hours,
    round_half_up,
)


def round_to_step(value: float, step: int) -> int:
    """Round to the nearest multiple of ``step``, ties rounding up."""
    return round_half_up(value / step) * step


def _candidate_items(
    minutes_available: int,
    scored_courses: Sequence[tuple[Course, float]],
    policy: PlannerPolicy,
) -> list[PlanItem]:
    # Zero should be unreachable with positive scores; guard the division anyway.
    total_score = sum(score for _, score in scored_courses) or 1
    candidates: list[PlanItem] = []
    for course, score in scored_courses:
        share = score / total_score
        minutes = round_to_step(minutes_available * share, policy.rounding_step_minutes)
        candidates.append(PlanItem(course_id=course.course_id, course_name=course.name, minutes=minutes))
    return candidates


def _correct_drift(items: list[PlanItem], minutes_available: int, policy: PlannerPolicy) -> list[PlanItem]:
    used = sum(item.minutes for item in items)
    if used <= minutes_available or not items:
        return items

    overflow = used - minutes_available
    corrected = list(items)
    targets = range(len(corrected)) if policy.drift_correction == DRIFT_REDISTRIBUTE else range(1)
    for idx in targets:
        if overflow <= 0:
            break
        item = corrected[idx]
        trimmed = max(policy.min_allocation_minutes, item.minutes - overflow)
        overflow -= item.minutes - trimmed
        corrected[idx] = replace(item, minutes=trimmed)

    logger.debug(
        "Drift correction applied",
        used=used,
        minutes_available=minutes_available,
        remaining_overflow=max(0, overflow),
        strategy=policy.drift_correction,
    )
    return corrected


def allocate_day(
    available_hours: float,
    scored_courses: Sequence[tuple[Course, float]],
    policy: PlannerPolicy = DEFAULT_POLICY,
) -> list[PlanItem]:
    """Distribute one day's minutes across courses proportionally to score."""

    minutes_available = minutes_from_hours(available_hours)
    candidates = _candidate_items(minutes_available, scored_courses, policy)

    kept = [item for item in candidates if item.minutes >= policy.min_allocation_minutes]
    dropped = [item.course_id for item in candidates if item.minutes < policy.min_allocation_minutes]
    if dropped:
        logger.debug("Dropped short allocations", course_ids=dropped, minutes_available=minutes_available)

    # sorted() is stable: equal minutes keep the input course order.
    kept = sorted(kept, key=lambda item: item.minutes, reverse=True)
    if len(kept) > policy.max_courses_per_day:
        logger.debug(
            "Daily course cap reached",
            cap=policy.max_courses_per_day,
            discarded=[item.course_id for item in kept[policy.max_courses_per_day:]],
        )
        kept = kept[: policy.max_courses_per_day]

    return _correct_drift(kept, minutes_available, policy)


def day_overflow(items: Sequence[PlanItem], available_hours: float) -> int:
    """Minutes by which a day's items exceed its budget (0 when within it)."""
    return max(0, sum(item.minutes for item in items) - minutes_from_hours(available_hours))
