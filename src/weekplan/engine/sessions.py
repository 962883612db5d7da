"""Split a daily allocation into study sessions."""

from __future__ import annotations

from typing import Iterator

from weekplan.models import DEFAULT_POLICY, PlannerPolicy


def iter_sessions(minutes: int, policy: PlannerPolicy = DEFAULT_POLICY) -> Iterator[int]:
    """Yield full sessions, then the remainder if it is long enough.

    Remainders shorter than ``min_session_remainder_minutes`` are dropped, so
    the yielded total can be lower than ``minutes``.
    """

    remaining = max(0, int(minutes))
    while remaining >= policy.session_minutes:
        yield policy.session_minutes
        remaining -= policy.session_minutes
    if remaining >= policy.min_session_remainder_minutes:
        yield remaining


def to_sessions(minutes: int, policy: PlannerPolicy = DEFAULT_POLICY) -> list[int]:
    return list(iter_sessions(minutes, policy))


def dropped_minutes(minutes: int, policy: PlannerPolicy = DEFAULT_POLICY) -> int:
    """Minutes of ``minutes`` that no session covers."""
    return max(0, int(minutes)) - sum(iter_sessions(minutes, policy))
