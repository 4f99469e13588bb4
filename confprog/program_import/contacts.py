"""Faculty contact helpers: phone cleanup and the per-import faculty roster."""

from __future__ import annotations

import re

from confprog.program_import.models import ColumnMapping, FacultyMember, RawTable
from confprog.utils.config import config


_WHITESPACE_RE = re.compile(r"\s+")
_PHONE_STRIP_RE = re.compile(r"[^0-9+]")


def normalize_person_name(name: str) -> str:
    """Normalize a person name for matching (lowercase, collapse whitespace)."""

    normalized = (name or "").strip().lower()
    normalized = _WHITESPACE_RE.sub(" ", normalized)
    return normalized


def normalize_phone(phone: str, country_code: str | None = None) -> str | None:
    """Keep digits and '+'; prefix the country code to bare 10-digit numbers."""

    cleaned = _PHONE_STRIP_RE.sub("", (phone or "").strip())
    if not cleaned:
        return None

    code = config.importing.phone_country_code if country_code is None else country_code
    if len(cleaned) == 10 and not cleaned.startswith("+") and code:
        cleaned = code + cleaned
    return cleaned


def collect_faculty(
    table: RawTable,
    mapping: ColumnMapping,
    country_code: str | None = None,
) -> list[FacultyMember]:
    """One FacultyMember per distinct (normalized) name, in first-seen order.

    The first non-empty email and phone seen for a person win; the role is
    taken from their first row.
    """
    if not mapping.is_set("speaker"):
        return []

    roster: dict[str, dict] = {}
    for row in table.rows:
        name = mapping.value(row, "speaker").strip()
        if not name:
            continue

        key = normalize_person_name(name)
        email = mapping.value(row, "email").strip() or None
        phone = normalize_phone(mapping.value(row, "phone"), country_code)
        topic = mapping.value(row, "topic").strip()

        entry = roster.get(key)
        if entry is None:
            entry = {
                "name": name,
                "email": email,
                "phone": phone,
                "role": mapping.value(row, "role").strip() or "Speaker",
                "sessions": [],
            }
            roster[key] = entry
        else:
            if email and not entry["email"]:
                entry["email"] = email
            if phone and not entry["phone"]:
                entry["phone"] = phone

        if topic and topic not in entry["sessions"]:
            entry["sessions"].append(topic)

    return [
        FacultyMember(
            name=e["name"],
            email=e["email"],
            phone=e["phone"],
            role=e["role"],
            sessions=tuple(e["sessions"]),
        )
        for e in roster.values()
    ]
