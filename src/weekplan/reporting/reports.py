"""Build CLI reports."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from weekplan.validation import ValidationError, ValidationReport


def build_error_report(errors: list[ValidationError], code: str = "validation_error") -> dict[str, Any]:
    """Return a JSON-serializable error report."""
    return {
        "status": "error",
        "error": {
            "code": code,
            "count": len(errors),
            "details": [err.as_dict() for err in errors],
        },
    }


def build_error_report_with_validation(
    errors: list[ValidationError],
    validation_report: ValidationReport,
    code: str = "validation_error",
) -> dict[str, Any]:
    payload = build_error_report(errors, code=code)
    payload["validation_report"] = validation_report.as_dict()
    return payload


def build_success_report(
    result: dict[str, Any],
    metrics: dict[str, Any],
    validation_report: ValidationReport,
    *,
    generated_at: datetime | None = None,
) -> dict[str, Any]:
    """Return a JSON-serializable success report.

    The ``WeeklyPlan`` object in ``result`` is serialized here; everything
    else in ``result`` is already plain data.
    """
    stamp = (generated_at or datetime.now(timezone.utc)).isoformat().replace("+00:00", "Z")
    week_start = result.get("plan_summary", {}).get("week_start", "")
    plan_id = f"plan-{week_start}-{stamp.replace(':', '').replace('-', '').replace('T', '-').replace('Z', '')}"
    weekly_plan = result.get("weekly_plan")
    return {
        "status": "ok",
        "plan_output": {
            "schema_version": "1.0.0",
            "plan_id": plan_id,
            "generated_at": stamp,
            "plan_summary": result.get("plan_summary", {}),
            "weekly_plan": weekly_plan.as_dict() if weekly_plan is not None else None,
            "daily_plan": result.get("daily_plan", []),
            "explanations": result.get("explanations", []),
            "metrics": metrics,
            "warnings": result.get("warnings", []),
            "suggestions": result.get("suggestions", []),
            "policy": result.get("policy", {}),
            "validation_report": validation_report.as_dict(),
        },
    }
