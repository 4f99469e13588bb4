"""Program import data models."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any


SKIP_COLUMN = "__skip__"
REQUIRED_ROLES: tuple[str, ...] = ("date", "time", "topic")

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(email: str) -> bool:
    """Loose syntactic email check used for preview counts only."""
    return bool(_EMAIL_RE.match(email or ""))


class DateOrder(str, Enum):
    DAY_FIRST = "dd_first"
    MONTH_FIRST = "mm_first"


@dataclass(frozen=True)
class RawTable:
    """Parsed CSV: header names plus one dict per data row."""

    headers: tuple[str, ...]
    rows: tuple[dict[str, str], ...]

    def column_values(self, header: str) -> list[str]:
        return [row.get(header, "") for row in self.rows]

    def __len__(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class ColumnMapping:
    """Which CSV header plays which semantic role. None means unset."""

    date: str | None = None
    time: str | None = None
    end_time: str | None = None
    topic: str | None = None
    hall: str | None = None
    session: str | None = None
    speaker: str | None = None
    role: str | None = None
    email: str | None = None
    phone: str | None = None

    @classmethod
    def roles(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ColumnMapping":
        """Build a mapping from user input; "" and "__skip__" mean unset."""
        values: dict[str, str | None] = {}
        for key, raw in (data or {}).items():
            role = "end_time" if key == "endTime" else key
            if role not in cls.roles():
                raise ValueError(f"Unknown column role: {key!r}")
            values[role] = _clean_header(raw)
        return cls(**values)

    def to_dict(self) -> dict[str, str | None]:
        return {role: getattr(self, role) for role in self.roles()}

    def with_overrides(self, **roles: str | None) -> "ColumnMapping":
        unknown = set(roles) - set(self.roles())
        if unknown:
            raise ValueError(f"Unknown column role(s): {', '.join(sorted(unknown))}")
        return replace(self, **{k: _clean_header(v) for k, v in roles.items()})

    def is_set(self, role: str) -> bool:
        return getattr(self, role) is not None

    def missing_required(self) -> list[str]:
        return [role for role in REQUIRED_ROLES if not self.is_set(role)]

    def value(self, row: dict[str, str], role: str) -> str:
        """Read a role's cell from a row; unset roles read as ""."""
        header = getattr(self, role)
        if header is None:
            return ""
        return row.get(header, "") or ""


def _clean_header(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    if not text or text == SKIP_COLUMN:
        return None
    return text


@dataclass(frozen=True)
class ContactPerson:
    """A named participant with optional contact details."""

    name: str
    email: str = ""
    phone: str = ""

    @property
    def has_valid_email(self) -> bool:
        return is_valid_email(self.email)


@dataclass
class ParsedSession:
    """One unique program session aggregated from one or more CSV rows."""

    session_date: str  # YYYY-MM-DD
    start_time: str  # HH:MM:SS
    end_time: str
    duration_minutes: int | None
    session_name: str
    hall: str | None = None
    specialty_track: str | None = None
    session_type: str = "lecture"
    speakers: list[ContactPerson] = field(default_factory=list)
    chairpersons: list[ContactPerson] = field(default_factory=list)
    moderators: list[ContactPerson] = field(default_factory=list)

    @property
    def key(self) -> tuple[str, str, str, str, str]:
        return (
            self.session_date,
            self.hall or "",
            self.specialty_track or "",
            self.start_time,
            self.session_name,
        )

    @property
    def people(self) -> list[ContactPerson]:
        return [*self.speakers, *self.chairpersons, *self.moderators]

    @property
    def emails(self) -> list[str]:
        return [p.email for p in self.people if p.email]

    @property
    def phones(self) -> list[str]:
        return [p.phone for p in self.people if p.phone]

    @property
    def invalid_emails(self) -> list[str]:
        return [p.email for p in self.people if p.email and not p.has_valid_email]

    def to_record(self) -> dict[str, Any]:
        """Flatten for persistence and preview; name lists become comma-joined text."""
        return {
            "session_date": self.session_date,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration_minutes": self.duration_minutes,
            "session_name": self.session_name,
            "session_type": self.session_type,
            "hall": self.hall,
            "specialty_track": self.specialty_track,
            "speakers": _join_names(self.speakers),
            "chairpersons": _join_names(self.chairpersons),
            "moderators": _join_names(self.moderators),
            "speakers_with_contact": sum(1 for p in self.speakers if p.email),
            "_emails": ", ".join(self.emails) or None,
            "_phones": ", ".join(self.phones) or None,
            "_invalid_emails": self.invalid_emails,
        }


def _join_names(people: list[ContactPerson]) -> str | None:
    return ", ".join(p.name for p in people) or None


@dataclass(frozen=True)
class ValidationIssue:
    severity: str  # error | warning | info
    session_name: str
    current_time: str
    suggested_time: str
    reason: str


@dataclass(frozen=True)
class ValidationResult:
    summary: str
    issues: list[ValidationIssue] = field(default_factory=list)


@dataclass(frozen=True)
class TimeOverride:
    start_time: str
    end_time: str


@dataclass(frozen=True)
class FacultyMember:
    """A distinct person seen in the CSV, keyed by normalized name."""

    name: str
    email: str | None = None
    phone: str | None = None
    role: str = "Speaker"
    sessions: tuple[str, ...] = ()


@dataclass(frozen=True)
class ImportStats:
    sessions: int
    days: int
    halls: int
    speakers: int
    has_contact_info: bool = False
    faculty_with_contact: int = 0
    valid_emails: int = 0
    invalid_emails: int = 0
    missing_emails: int = 0


@dataclass(frozen=True)
class ImportResult:
    imported: int
    skipped_duplicates: int
    unique_sessions: int
    faculty_total: int = 0
    faculty_created: int = 0
    faculty_updated: int = 0

    @property
    def message(self) -> str:
        return (
            f"Imported {self.imported} sessions, {self.faculty_created} new faculty, "
            f"{self.faculty_updated} updated faculty"
        )
