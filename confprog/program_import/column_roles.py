"""Guess which CSV column plays which role from its header text.

The rules are an ordered table of (role, predicate) bindings. For each role,
headers are scanned left to right and the first header satisfying that
role's predicate wins; other roles are evaluated independently.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

from confprog.program_import.models import ColumnMapping


def _has_any(header: str, *needles: str) -> bool:
    return any(n in header for n in needles)


def _is_date(h: str) -> bool:
    return "date" in h


def _is_start_time(h: str) -> bool:
    return "time" in h and not _has_any(h, "ending", "end time")


def _is_end_time(h: str) -> bool:
    return "ending" in h or ("end" in h and "time" in h)


def _is_topic(h: str) -> bool:
    return _has_any(h, "topic", "title", "session name")


def _is_hall(h: str) -> bool:
    return _has_any(h, "hall", "venue", "room")


def _is_track(h: str) -> bool:
    return _has_any(h, "session", "track") and not _has_any(h, "name", "topic")


_SPEAKER_EXACT = {"name", "speaker", "faculty", "full name"}


def _is_speaker(h: str) -> bool:
    if h in _SPEAKER_EXACT:
        return True
    if _has_any(h, "speaker name", "faculty name"):
        return True
    return "name" in h and not _has_any(h, "session", "hall", "event")


def _is_role(h: str) -> bool:
    return _has_any(h, "role", "designation", "position")


def _is_email(h: str) -> bool:
    return _has_any(h, "email", "e-mail", "mail id")


def _is_phone(h: str) -> bool:
    return _has_any(h, "phone", "mobile", "contact", "cell", "tel")


@dataclass(frozen=True)
class ColumnRoleRule:
    role: str
    matches: Callable[[str], bool]


COLUMN_ROLE_RULES: tuple[ColumnRoleRule, ...] = (
    ColumnRoleRule("date", _is_date),
    ColumnRoleRule("time", _is_start_time),
    ColumnRoleRule("end_time", _is_end_time),
    ColumnRoleRule("topic", _is_topic),
    ColumnRoleRule("hall", _is_hall),
    ColumnRoleRule("session", _is_track),
    ColumnRoleRule("speaker", _is_speaker),
    ColumnRoleRule("role", _is_role),
    ColumnRoleRule("email", _is_email),
    ColumnRoleRule("phone", _is_phone),
)


def normalize_header(header: str) -> str:
    return (header or "").strip().lower()


def infer_column_mapping(
    headers: Iterable[str],
    rules: tuple[ColumnRoleRule, ...] = COLUMN_ROLE_RULES,
) -> ColumnMapping:
    """Infer a ColumnMapping from header names (case-insensitive)."""
    header_list = list(headers)
    assigned: dict[str, str] = {}

    for rule in rules:
        if rule.role in assigned:
            continue
        for header in header_list:
            if rule.matches(normalize_header(header)):
                assigned[rule.role] = header
                break

    return ColumnMapping(**assigned)
