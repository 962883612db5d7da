"""Error and issue types shared by every validation step."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class ValidationError:
    """One blocking problem, as written into error reports."""

    code: str
    message: str
    path: str

    @classmethod
    def from_issue(cls, issue: "ValidationIssue") -> "ValidationError":
        return cls(code=issue.code, message=issue.message, path=issue.field_path)

    def as_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message, "path": self.path}


@dataclass(slots=True)
class ValidationIssue:
    code: str
    message: str
    field_path: str
    suggested_fix: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        fix = {"suggested_fix": self.suggested_fix} if self.suggested_fix else {}
        return {"code": self.code, "message": self.message, "field_path": self.field_path, **fix, **self.extra}


@dataclass(slots=True)
class ValidationReport:
    """Issues gathered across record, request and policy checks.

    Checks keep going after the first error so one run lists everything the
    user has to fix. Infos (clamped values and the like) never block a run.
    """

    errors: list[ValidationIssue] = field(default_factory=list)
    infos: list[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def add_error(self, *, code: str, message: str, field_path: str, **details: Any) -> None:
        self.errors.append(_issue(code, message, field_path, **details))

    def add_info(self, *, code: str, message: str, field_path: str, **details: Any) -> None:
        self.infos.append(_issue(code, message, field_path, **details))

    def extend(self, other: "ValidationReport") -> None:
        self.errors += other.errors
        self.infos += other.infos

    def error_codes(self) -> set[str]:
        return {issue.code for issue in self.errors}

    def to_errors(self) -> list[ValidationError]:
        return [ValidationError.from_issue(issue) for issue in self.errors]

    def as_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "errors": [issue.as_dict() for issue in self.errors],
            "infos": [issue.as_dict() for issue in self.infos],
        }


def _issue(
    code: str,
    message: str,
    field_path: str,
    *,
    suggested_fix: str | None = None,
    extra: dict[str, Any] | None = None,
) -> ValidationIssue:
    return ValidationIssue(
        code=code,
        message=message,
        field_path=field_path,
        suggested_fix=suggested_fix,
        extra=dict(extra or {}),
    )
