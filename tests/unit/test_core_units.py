from __future__ import annotations

from datetime import date, datetime

import pytest

from weekplan.engine import (
    allocate_day,
    build_explanations,
    build_week,
    compute_need_score,
    compute_urgency,
    day_overflow,
    days_until,
    dropped_minutes,
    round_to_step,
    score_courses,
    to_sessions,
    urgency_label,
)
from weekplan.models import Course, PlannerPolicy, minutes_from_hours, week_start_for

TODAY = date(2026, 1, 5)


def _course(course_id: str, exam: str, difficulty: int = 3, weight: int = 3) -> Course:
    return Course(
        course_id=course_id,
        name=course_id.upper(),
        exam_date=date.fromisoformat(exam),
        difficulty=difficulty,
        weight=weight,
    )


@pytest.mark.parametrize(
    ("exam", "expected"),
    [
        ("2026-01-15", 10),
        ("2026-01-06", 1),
        ("2026-01-05", 1),
        ("2025-12-20", 1),
        ("2026-03-01", 55),
    ],
)
def test_days_until_with_calendar_dates(exam: str, expected: int) -> None:
    assert days_until(date.fromisoformat(exam), TODAY) == expected


def test_days_until_counts_started_days_with_a_clock() -> None:
    morning = datetime(2026, 1, 5, 10, 0)
    assert days_until(date(2026, 1, 7), morning) == 2
    assert days_until(date(2026, 1, 6), morning) == 1
    assert days_until(date(2026, 1, 5), morning) == 1


def test_urgency_saturates_at_cap() -> None:
    assert compute_urgency(1) == 1.0
    assert compute_urgency(10) == pytest.approx(0.1)
    assert compute_urgency(30) == pytest.approx(1 / 30)
    assert compute_urgency(90) == pytest.approx(1 / 30)
    assert compute_urgency(90, PlannerPolicy(urgency_cap_days=60)) == pytest.approx(1 / 60)


def test_need_score_combines_urgency_difficulty_and_weight() -> None:
    near = _course("a", "2026-01-10", difficulty=4, weight=4)
    far = _course("b", "2026-02-14", difficulty=3, weight=2)

    assert compute_need_score(near, TODAY) == pytest.approx(3.2)
    assert compute_need_score(far, TODAY) == pytest.approx(0.2)
    assert [score for _, score in score_courses([near, far], TODAY)] == pytest.approx([3.2, 0.2])


@pytest.mark.parametrize(
    ("value", "step", "expected"),
    [(112.94, 5, 115), (7.06, 5, 5), (12.5, 5, 15), (12.49, 5, 10), (0.0, 5, 0), (16.67, 10, 20)],
)
def test_round_to_step_ties_round_up(value: float, step: int, expected: int) -> None:
    assert round_to_step(value, step) == expected


def test_minutes_from_hours_rounds_half_up() -> None:
    assert minutes_from_hours(2) == 120
    assert minutes_from_hours(1.5) == 90
    assert minutes_from_hours(0) == 0
    assert minutes_from_hours(50 / 60) == 50


def test_allocator_drops_short_allocations() -> None:
    near = _course("a", "2026-01-10", difficulty=4, weight=4)
    far = _course("b", "2026-02-14", difficulty=3, weight=2)
    items = allocate_day(2, score_courses([near, far], TODAY))

    assert [(item.course_id, item.minutes) for item in items] == [("a", 115)]
    assert items[0].course_name == "A"


def test_allocator_rest_day_when_no_time() -> None:
    courses = [_course("a", "2026-01-10"), _course("b", "2026-01-20")]
    assert allocate_day(0, score_courses(courses, TODAY)) == []


def test_allocator_handles_zero_scores() -> None:
    assert allocate_day(2, [(_course("a", "2026-01-10"), 0.0)]) == []


def test_allocator_keeps_three_largest_with_stable_ties() -> None:
    courses = [_course(f"c{idx}", "2026-01-15") for idx in range(5)]
    items = allocate_day(5, score_courses(courses, TODAY))

    assert [item.course_id for item in items] == ["c0", "c1", "c2"]
    assert all(item.minutes == 60 for item in items)


def test_allocator_orders_by_minutes_descending() -> None:
    scored = [(_course("low", "2026-01-15"), 1.0), (_course("high", "2026-01-15"), 3.0)]
    items = allocate_day(2, scored)
    assert [item.course_id for item in items] == ["high", "low"]
    assert [item.minutes for item in items] == [90, 30]


def test_drift_correction_trims_largest_item() -> None:
    scored = [(_course(name, "2026-01-15"), 1.0) for name in ("a", "b", "c")]
    items = allocate_day(100 / 60, scored)

    assert [item.minutes for item in items] == [30, 35, 35]
    assert day_overflow(items, 100 / 60) == 0


def test_drift_correction_floor_can_leave_day_over_budget() -> None:
    scored = [(_course(name, "2026-01-15"), 1.0) for name in ("a", "b", "c")]
    policy = PlannerPolicy(rounding_step_minutes=10)
    items = allocate_day(50 / 60, scored, policy)

    assert [item.minutes for item in items] == [15, 20, 20]
    assert day_overflow(items, 50 / 60) == 5


def test_redistribute_drift_correction_restores_budget() -> None:
    scored = [(_course(name, "2026-01-15"), 1.0) for name in ("a", "b", "c")]
    policy = PlannerPolicy(rounding_step_minutes=10, drift_correction="redistribute")
    items = allocate_day(50 / 60, scored, policy)

    assert [item.minutes for item in items] == [15, 15, 20]
    assert day_overflow(items, 50 / 60) == 0


@pytest.mark.parametrize(
    ("minutes", "sessions", "dropped"),
    [
        (115, [50, 50], 15),
        (120, [50, 50, 20], 0),
        (50, [50], 0),
        (20, [20], 0),
        (19, [], 19),
        (0, [], 0),
        (-10, [], 0),
    ],
)
def test_session_splitting(minutes: int, sessions: list[int], dropped: int) -> None:
    assert to_sessions(minutes) == sessions
    assert dropped_minutes(minutes) == dropped


def test_session_splitting_uses_policy_lengths() -> None:
    policy = PlannerPolicy(session_minutes=25, min_session_remainder_minutes=10)
    assert to_sessions(60, policy) == [25, 25, 10]


@pytest.mark.parametrize(
    ("days", "label"),
    [(1, "very soon"), (7, "very soon"), (8, "soon"), (14, "soon"), (15, "upcoming"), (30, "upcoming"), (31, "later")],
)
def test_urgency_labels(days: int, label: str) -> None:
    assert urgency_label(days) == label


def test_explanations_rank_courses_against_top_score() -> None:
    far = _course("b", "2026-02-14", difficulty=3, weight=2)
    near = _course("a", "2026-01-10", difficulty=4, weight=4)
    rows = build_explanations([far, near], TODAY)

    assert [row["course_id"] for row in rows] == ["a", "b"]
    assert rows[0]["percent"] == 100
    assert rows[0]["urgency_label"] == "very soon"
    assert rows[1]["percent"] == 6
    assert rows[1]["bar_percent"] == 6
    assert rows[1]["days"] == 40


def test_explanations_use_unit_reference_for_low_scores() -> None:
    rows = build_explanations([_course("x", "2026-03-06", difficulty=1, weight=1)], TODAY)

    assert rows[0]["percent"] == 3
    assert rows[0]["bar_percent"] == 5
    assert build_explanations([], TODAY) == []


def test_explanations_respect_limit() -> None:
    courses = [_course(f"c{idx}", f"2026-01-{10 + idx}") for idx in range(7)]
    assert len(build_explanations(courses, TODAY)) == 5
    assert len(build_explanations(courses, TODAY, limit=None)) == 7


def test_week_start_is_monday() -> None:
    assert week_start_for(date(2026, 1, 8)) == date(2026, 1, 5)
    assert week_start_for(date(2026, 1, 11)) == date(2026, 1, 5)
    assert week_start_for(date(2026, 1, 5)) == date(2026, 1, 5)


def test_build_week_requires_monday_start() -> None:
    courses = [_course("a", "2026-01-15")]
    with pytest.raises(ValueError, match="week_start must be a Monday"):
        build_week(courses, {"Mon": 2}, date(2026, 1, 6), TODAY)
