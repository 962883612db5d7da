"""CLI entrypoint for weekplan."""

from __future__ import annotations

import argparse
import json
from datetime import date
from pathlib import Path
from typing import Any

from loguru import logger

from weekplan.engine import run_planner
from weekplan.io import read_json, write_json
from weekplan.logger import setup_logger
from weekplan.metrics import collect_metrics
from weekplan.models import WEEKDAY_LABELS, week_key_for, week_start_for
from weekplan.normalization import normalize_request, resolve_policy
from weekplan.reporting import (
    build_error_report,
    build_error_report_with_validation,
    build_success_report,
)
from weekplan.stores import AvailabilityStore, CourseStore, PlanStore
from weekplan.validation import (
    ValidationError,
    ValidationReport,
    check_generation_preconditions,
    validate_plan_request,
)


def _resolve_input_path(request_file: Path, value: str) -> Path:
    path = Path(value)
    if path.is_absolute():
        return path
    return (request_file.parent / path).resolve()


def _load_referenced_inputs(
    request_file: Path,
    request: dict[str, Any],
    validation_report: ValidationReport,
) -> tuple[dict[str, Any], list[ValidationError]]:
    loaded: dict[str, Any] = {"policy": request.get("policy")}
    errors: list[ValidationError] = []

    for path_field in ("courses_path", "availability_path", "policy_path"):
        raw = request.get(path_field)
        if raw is None:
            continue
        resolved = _resolve_input_path(request_file, raw)
        try:
            if not resolved.exists():
                raise FileNotFoundError(resolved)
            if path_field == "courses_path":
                courses, report = CourseStore(resolved).load_with_report()
                loaded["courses"] = courses
                validation_report.extend(report)
            elif path_field == "availability_path":
                by_week, report = AvailabilityStore(resolved).load_with_report()
                loaded["availability_by_week"] = by_week
                validation_report.extend(report)
            else:
                loaded["policy"] = {**read_json(resolved), **(request.get("policy") or {})}
        except FileNotFoundError:
            errors.append(
                ValidationError(
                    code="file_not_found",
                    message=f"Referenced file not found: {resolved}",
                    path=f"$.{path_field}",
                )
            )
        except ValueError as exc:
            errors.append(ValidationError(code="invalid_json", message=str(exc), path=f"$.{path_field}"))

    return loaded, errors


def run_plan_command(request_path: str, output_path: str, *, today: date | None = None) -> int:
    """Generate the week described by ``request_path``.

    Any refusal writes an error report and returns 2 without touching the
    stored plan.
    """
    validation_report = ValidationReport()

    try:
        request_payload = read_json(request_path)
    except (OSError, ValueError) as exc:
        error = build_error_report(
            [ValidationError(code="invalid_request", message=str(exc), path="$.request")],
            code="request_read_error",
        )
        write_json(output_path, error)
        return 2

    request_payload = normalize_request(request_payload, today=today or date.today())
    errors = validate_plan_request(request_payload)
    if errors:
        write_json(output_path, build_error_report(errors))
        return 2

    loaded, load_errors = _load_referenced_inputs(Path(request_path), request_payload, validation_report)
    if load_errors:
        write_json(
            output_path,
            build_error_report_with_validation(load_errors, validation_report=validation_report, code="input_load_error"),
        )
        return 2

    policy = resolve_policy(loaded.get("policy"), validation_report)
    if not validation_report.ok:
        write_json(
            output_path,
            build_error_report_with_validation(
                validation_report.to_errors(),
                validation_report=validation_report,
                code="validation_error",
            ),
        )
        return 2

    plan_today = date.fromisoformat(request_payload["today"])
    week_start = week_start_for(date.fromisoformat(request_payload.get("week_of") or request_payload["today"]))
    week_key = week_start.isoformat()
    courses = loaded["courses"]
    availability = loaded["availability_by_week"].get(week_key)

    refusals = check_generation_preconditions(courses, availability, week_key=week_key)
    if refusals:
        logger.warning("Plan generation refused", week_key=week_key, codes=[err.code for err in refusals])
        write_json(
            output_path,
            build_error_report_with_validation(refusals, validation_report=validation_report, code="generation_refused"),
        )
        return 2

    result = run_planner(
        courses=courses,
        availability=availability,
        week_start=week_start,
        today=plan_today,
        policy=policy,
    )
    metrics = collect_metrics(result)
    write_json(output_path, build_success_report(result, metrics, validation_report))

    plan_path = request_payload.get("plan_path")
    if plan_path:
        PlanStore(_resolve_input_path(Path(request_path), plan_path)).replace(result["weekly_plan"])
    return 0


def run_clear_command(plan_path: str) -> int:
    PlanStore(plan_path).clear()
    return 0


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True))


def run_course_command(args: argparse.Namespace) -> int:
    store = CourseStore(args.store)
    if args.course_command == "add":
        course = store.add(args.name, args.exam_date, args.difficulty, args.weight)
        _print_json(course.as_dict())
    elif args.course_command == "list":
        _print_json([course.as_dict() for course in store.sorted_by_exam()])
    elif args.course_command == "remove":
        if not store.remove(args.id):
            logger.error("Course not found", course_id=args.id)
            return 2
    elif args.course_command == "sample":
        _print_json([course.as_dict() for course in store.add_sample(args.today or date.today())])
    elif args.course_command == "clear":
        store.clear()
    return 0


def run_availability_command(args: argparse.Namespace) -> int:
    store = AvailabilityStore(args.store)
    week_key = week_key_for(args.week_of)
    if args.availability_command == "set":
        availability = store.set_hours(week_key, args.day, args.hours)
    elif args.availability_command == "reset":
        availability = store.reset_week(week_key)
    elif args.availability_command == "copy":
        copied = store.copy_from_previous(week_key)
        if copied is None:
            logger.warning("No earlier week to copy from", week_key=week_key)
            return 2
        availability = copied
    else:
        availability = store.get_or_default(week_key)
    _print_json(
        {
            "week_key": week_key,
            "availability": availability,
            "total_hours": sum(float(availability.get(label, 0) or 0) for label in WEEKDAY_LABELS),
        }
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="weekplan", description="Weekly study plan generator")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    plan_parser = subparsers.add_parser("plan", help="Generate a weekly plan from plan_request JSON")
    plan_parser.add_argument("--request", required=True, help="Path to plan_request.json")
    plan_parser.add_argument("--output", required=True, help="Path to plan_output.json")
    plan_parser.add_argument("--today", type=date.fromisoformat, help="Override today's date (YYYY-MM-DD)")

    clear_parser = subparsers.add_parser("clear", help="Remove a stored plan")
    clear_parser.add_argument("--plan", required=True, help="Path to the stored plan JSON")

    course_parser = subparsers.add_parser("course", help="Manage the course list")
    course_sub = course_parser.add_subparsers(dest="course_command", required=True)
    add_parser = course_sub.add_parser("add", help="Add a course")
    add_parser.add_argument("--name", required=True)
    add_parser.add_argument("--exam-date", required=True, type=date.fromisoformat)
    add_parser.add_argument("--difficulty", type=int, default=3, choices=range(1, 6))
    add_parser.add_argument("--weight", type=int, default=3, choices=range(1, 6))
    course_sub.add_parser("list", help="List courses by exam date")
    remove_parser = course_sub.add_parser("remove", help="Remove a course")
    remove_parser.add_argument("--id", required=True)
    sample_parser = course_sub.add_parser("sample", help="Replace the list with sample courses")
    sample_parser.add_argument("--today", type=date.fromisoformat)
    course_sub.add_parser("clear", help="Delete all courses")
    for sub in course_sub.choices.values():
        sub.add_argument("--store", required=True, help="Path to courses.json")

    availability_parser = subparsers.add_parser("availability", help="Manage weekly availability")
    availability_sub = availability_parser.add_subparsers(dest="availability_command", required=True)
    set_parser = availability_sub.add_parser("set", help="Set hours for one day")
    set_parser.add_argument("--day", required=True, choices=WEEKDAY_LABELS)
    set_parser.add_argument("--hours", required=True, type=float)
    availability_sub.add_parser("show", help="Show a week's hours")
    availability_sub.add_parser("reset", help="Reset a week to the default hours")
    availability_sub.add_parser("copy", help="Copy hours from the previous stored week")
    for sub in availability_sub.choices.values():
        sub.add_argument("--store", required=True, help="Path to availability.json")
        sub.add_argument("--week-of", required=True, type=date.fromisoformat, help="Any date in the target week")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logger("DEBUG" if args.verbose else "INFO")

    try:
        if args.command == "plan":
            return run_plan_command(args.request, args.output, today=args.today)
        if args.command == "clear":
            return run_clear_command(args.plan)
        if args.command == "course":
            return run_course_command(args)
        if args.command == "availability":
            return run_availability_command(args)
    except ValueError as exc:
        logger.error(str(exc))
        return 2

    parser.error("Unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
