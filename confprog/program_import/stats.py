"""Preview counters for a program import."""

from __future__ import annotations

from confprog.program_import.models import (
    ColumnMapping,
    ImportStats,
    ParsedSession,
    RawTable,
    is_valid_email,
)


def _is_phone_header(header: str) -> bool:
    h = header.lower()
    return "mobile" in h or "phone" in h


def compute_import_stats(
    table: RawTable,
    mapping: ColumnMapping,
    sessions: list[ParsedSession],
) -> ImportStats:
    """Count sessions, days, halls and distinct speakers, plus email health.

    Email counters are per distinct faculty name (case-insensitive) and are
    only computed when the CSV has an email or phone column.
    """
    days = {s.session_date for s in sessions}
    halls = {s.hall for s in sessions if s.hall}
    speakers = {p.name.strip() for s in sessions for p in s.speakers}

    has_email_column = any("email" in h.lower() for h in table.headers)
    has_phone_column = any(_is_phone_header(h) for h in table.headers)
    has_contact_info = has_email_column or has_phone_column

    with_contact = valid = invalid = missing = 0
    if has_contact_info and mapping.is_set("speaker"):
        seen: set[str] = set()
        for row in table.rows:
            name = mapping.value(row, "speaker").strip()
            if not name or name.lower() in seen:
                continue
            seen.add(name.lower())

            email = mapping.value(row, "email").strip()
            has_phone = any(
                _is_phone_header(k) and (v or "").strip() for k, v in row.items()
            )
            if email or has_phone:
                with_contact += 1

            if not email:
                missing += 1
            elif is_valid_email(email):
                valid += 1
            else:
                invalid += 1

    return ImportStats(
        sessions=len(sessions),
        days=len(days),
        halls=len(halls),
        speakers=len(speakers),
        has_contact_info=has_contact_info,
        faculty_with_contact=with_contact,
        valid_emails=valid,
        invalid_emails=invalid,
        missing_emails=missing,
    )
