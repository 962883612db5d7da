"""Validation for plan request payload."""

from __future__ import annotations

from datetime import date
from typing import Any

from .errors import ValidationError

_REQUIRED_PATH_FIELDS = ("courses_path", "availability_path")
_OPTIONAL_PATH_FIELDS = ("policy_path", "plan_path")
_DATE_FIELDS = ("week_of", "today")


def _is_date(value: str) -> bool:
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def validate_plan_request(payload: dict[str, Any]) -> list[ValidationError]:
    """Shape checks on plan_request before any referenced file is read."""
    errors: list[ValidationError] = []

    for field in _REQUIRED_PATH_FIELDS + _OPTIONAL_PATH_FIELDS:
        value = payload.get(field)
        if value is None:
            if field in _REQUIRED_PATH_FIELDS:
                errors.append(
                    ValidationError(
                        code="missing_field",
                        message=f"Missing required field: {field}",
                        path=f"$.{field}",
                    )
                )
        elif not isinstance(value, str) or not value.strip():
            errors.append(
                ValidationError(
                    code="invalid_type",
                    message=f"Field must be a non-empty string path: {field}",
                    path=f"$.{field}",
                )
            )

    for field in _DATE_FIELDS:
        value = payload.get(field)
        if value is None:
            continue
        if not isinstance(value, str) or not _is_date(value):
            errors.append(
                ValidationError(
                    code="invalid_date",
                    message=f"Field must be an ISO date (YYYY-MM-DD): {field}",
                    path=f"$.{field}",
                )
            )

    policy = payload.get("policy")
    if policy is not None and not isinstance(policy, dict):
        errors.append(ValidationError(code="invalid_type", message="policy must be an object", path="$.policy"))

    return errors
