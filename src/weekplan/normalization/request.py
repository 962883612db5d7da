"""Normalization for incoming request payloads."""

from __future__ import annotations

from datetime import date
from typing import Any

_STRING_FIELDS = ("courses_path", "availability_path", "policy_path", "plan_path", "week_of", "today")


def normalize_request(payload: dict[str, Any], *, today: date | None = None) -> dict[str, Any]:
    """Return a normalized copy of the plan request.

    ``today`` (the injected clock) fills in a missing ``today`` field.
    """
    normalized = dict(payload)
    if "schema_version" not in normalized:
        normalized["schema_version"] = "1.0"
    for field in _STRING_FIELDS:
        value = normalized.get(field)
        if isinstance(value, str):
            normalized[field] = value.strip()
    if today is not None and not normalized.get("today"):
        normalized["today"] = today.isoformat()
    return normalized
