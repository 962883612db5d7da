"""Validation helpers."""

from .errors import ValidationError, ValidationIssue, ValidationReport
from .preconditions import check_generation_preconditions, weekly_minutes
from .records import clamp_hours, validate_availability_records, validate_course_records
from .request import validate_plan_request

__all__ = [
    "ValidationError",
    "ValidationIssue",
    "ValidationReport",
    "check_generation_preconditions",
    "clamp_hours",
    "validate_availability_records",
    "validate_course_records",
    "validate_plan_request",
    "weekly_minutes",
]
