"""Planning engine."""

from weekplan.models import minutes_from_hours

from .allocator import allocate_day, day_overflow, round_to_step
from .explanations import build_explanations, course_summary, urgency_label
from .runner import build_week, run_planner
from .scoring import compute_need_score, compute_urgency, days_until, score_courses
from .sessions import dropped_minutes, iter_sessions, to_sessions

__all__ = [
    "allocate_day",
    "build_explanations",
    "build_week",
    "course_summary",
    "compute_need_score",
    "compute_urgency",
    "day_overflow",
    "days_until",
    "dropped_minutes",
    "iter_sessions",
    "minutes_from_hours",
    "round_to_step",
    "run_planner",
    "score_courses",
    "to_sessions",
    "urgency_label",
]
