"""Checks that gate the generate action."""

from __future__ import annotations

from typing import Sequence

from weekplan.models import WEEKDAY_LABELS, Availability, Course, minutes_from_hours

from .errors import ValidationError


def weekly_minutes(availability: Availability | None) -> int:
    if not availability:
        return 0
    return sum(minutes_from_hours(availability.get(label, 0) or 0) for label in WEEKDAY_LABELS)


def check_generation_preconditions(
    courses: Sequence[Course],
    availability: Availability | None,
    *,
    week_key: str = "",
) -> list[ValidationError]:
    """Return why generation must be refused; empty when it may run.

    A refusal is not a failure of the planner: the caller skips generation
    and leaves any stored plan as it is.
    """

    errors: list[ValidationError] = []
    if not courses:
        errors.append(
            ValidationError(
                code="NO_COURSES",
                message="Add at least one course before generating a plan",
                path="$.courses",
            )
        )
    if availability is None:
        errors.append(
            ValidationError(
                code="MISSING_AVAILABILITY",
                message=f"No availability set for the week of {week_key or 'the selected date'}",
                path=f"$.weeks.{week_key}" if week_key else "$.weeks",
            )
        )
    elif weekly_minutes(availability) <= 0:
        errors.append(
            ValidationError(
                code="NO_WEEKLY_TIME",
                message="The selected week has no study time available",
                path=f"$.weeks.{week_key}" if week_key else "$.weeks",
            )
        )
    return errors
