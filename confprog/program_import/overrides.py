"""Apply accepted schedule-validator fixes to parsed sessions."""

from __future__ import annotations

from dataclasses import replace

from confprog.program_import.aggregator import compute_duration_minutes
from confprog.program_import.formats import (
    is_clock_time,
    minutes_to_time,
    time_to_minutes,
)
from confprog.program_import.models import (
    ParsedSession,
    TimeOverride,
    ValidationIssue,
)


def _with_seconds(value: str) -> str:
    return f"{value}:00" if len(value) == 5 else value


def build_time_override(
    session: ParsedSession | None, issue: ValidationIssue
) -> TimeOverride:
    """Move a session to the suggested start, keeping its original length.

    The length is measured from the issue's current_time to the session's end
    time. Without a session, the end collapses onto the new start.
    """
    suggested = _with_seconds(issue.suggested_time)
    current = _with_seconds(issue.current_time)
    if session is None or not session.end_time:
        return TimeOverride(start_time=suggested, end_time=suggested)

    offset = time_to_minutes(session.end_time) - time_to_minutes(current)
    new_end = minutes_to_time(time_to_minutes(suggested) + offset)
    return TimeOverride(start_time=suggested, end_time=new_end)


def apply_time_overrides(
    sessions: list[ParsedSession],
    overrides: dict[str, TimeOverride],
) -> list[ParsedSession]:
    """Return sessions with overridden times (keyed by session name)."""
    out: list[ParsedSession] = []
    for s in sessions:
        override = overrides.get(s.session_name)
        if override is None:
            out.append(s)
            continue
        start = override.start_time or s.start_time
        end = override.end_time or s.end_time
        out.append(
            replace(
                s,
                start_time=start,
                end_time=end,
                duration_minutes=compute_duration_minutes(start, end),
            )
        )
    return out


def accept_issue(
    sessions: list[ParsedSession],
    overrides: dict[str, TimeOverride],
    issue: ValidationIssue,
) -> dict[str, TimeOverride]:
    """Record a fix for issue; returns a new overrides dict.

    Issues without a different suggested time, with a current or suggested
    time that is not HH:MM[:SS], or for a session already overridden, leave
    overrides unchanged.
    """
    if not issue.suggested_time or issue.suggested_time == issue.current_time:
        return dict(overrides)
    if not (is_clock_time(issue.current_time) and is_clock_time(issue.suggested_time)):
        return dict(overrides)
    if issue.session_name in overrides:
        return dict(overrides)

    session = next((s for s in sessions if s.session_name == issue.session_name), None)
    updated = dict(overrides)
    updated[issue.session_name] = build_time_override(session, issue)
    return updated
