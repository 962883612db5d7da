"""Resolve the effective planner policy from layered inputs."""

from __future__ import annotations

from typing import Any

from weekplan.models import DEFAULT_POLICY, DRIFT_LARGEST_ONLY, DRIFT_REDISTRIBUTE, PlannerPolicy
from weekplan.validation import ValidationReport

DEFAULT_POLICY_CONFIG: dict[str, Any] = DEFAULT_POLICY.as_dict()

_INTEGER_KEYS = (
    "session_minutes",
    "min_session_remainder_minutes",
    "min_allocation_minutes",
    "max_courses_per_day",
    "urgency_cap_days",
    "rounding_step_minutes",
)
_DRIFT_STRATEGIES = (DRIFT_LARGEST_ONLY, DRIFT_REDISTRIBUTE)


def resolve_policy(source: Any, validation_report: ValidationReport, *, field_path: str = "$.policy") -> PlannerPolicy:
    """Merge ``source`` over the defaults and return an engine-ready policy.

    Rejected values are reported and fall back to their default so that every
    problem is listed in one pass.
    """

    config = dict(DEFAULT_POLICY_CONFIG)
    if isinstance(source, dict):
        for key, value in source.items():
            if key == "schema_version":
                continue
            if key not in DEFAULT_POLICY_CONFIG:
                validation_report.add_error(
                    code="INVALID_POLICY_KEY",
                    message=f"Policy key {key!r} is not allowed",
                    field_path=f"{field_path}.{key}",
                    suggested_fix=f"Use one of: {', '.join(sorted(DEFAULT_POLICY_CONFIG))}",
                )
                continue
            config[key] = value

    for key in _INTEGER_KEYS:
        value = config[key]
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            validation_report.add_error(
                code="INVALID_POLICY_VALUE",
                message=f"{key} must be a positive integer",
                field_path=f"{field_path}.{key}",
            )
            config[key] = DEFAULT_POLICY_CONFIG[key]

    if config["min_session_remainder_minutes"] > config["session_minutes"]:
        validation_report.add_error(
            code="INVALID_POLICY_VALUE",
            message="min_session_remainder_minutes must be <= session_minutes",
            field_path=f"{field_path}.min_session_remainder_minutes",
        )
        config["min_session_remainder_minutes"] = min(
            DEFAULT_POLICY_CONFIG["min_session_remainder_minutes"], config["session_minutes"]
        )

    if config["drift_correction"] not in _DRIFT_STRATEGIES:
        validation_report.add_error(
            code="INVALID_POLICY_VALUE",
            message=f"drift_correction must be one of: {', '.join(_DRIFT_STRATEGIES)}",
            field_path=f"{field_path}.drift_correction",
        )
        config["drift_correction"] = DEFAULT_POLICY_CONFIG["drift_correction"]

    return PlannerPolicy(**config)
