"""Persist parsed program sessions and faculty contacts for one event."""

from __future__ import annotations

import hashlib
from typing import Any, Iterable

from confprog.program_import.contacts import normalize_person_name
from confprog.program_import.errors import NoValidSessionsError
from confprog.program_import.models import FacultyMember, ImportResult, ParsedSession
from confprog.utils.config import config


def generate_session_id(event_id: str, session: ParsedSession) -> str:
    """Generate a stable program session ID from the session key."""
    unique = f"program_session:{event_id}:{'|'.join(session.key)}".encode("utf-8")
    return "ps_" + hashlib.md5(unique).hexdigest()[:12]


def generate_faculty_id(event_id: str, normalized_name: str) -> str:
    unique = f"program_faculty:{event_id}:{normalized_name}".encode("utf-8")
    return "pf_" + hashlib.md5(unique).hexdigest()[:12]


def _duplicate_key(
    session_date: Any, start_time: Any, hall: Any, session_name: Any
) -> tuple[str, str, str, str]:
    return (str(session_date), str(start_time), str(hall or ""), str(session_name))


_INSERT_SESSION_SQL = """
    INSERT INTO program_sessions (
        id, event_id, session_name, session_type, session_date, start_time, end_time,
        duration_minutes, hall, specialty_track, speakers, chairpersons, moderators
    )
    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
    ON CONFLICT (id) DO UPDATE SET
        session_type = EXCLUDED.session_type,
        end_time = EXCLUDED.end_time,
        duration_minutes = EXCLUDED.duration_minutes,
        speakers = EXCLUDED.speakers,
        chairpersons = EXCLUDED.chairpersons,
        moderators = EXCLUDED.moderators,
        updated_at = NOW()
"""


class ProgramIngestor:
    """Persist aggregated sessions and faculty contacts for one event."""

    def __init__(self, postgres: Any, batch_size: int | None = None):
        self.postgres = postgres
        self.batch_size = batch_size or config.importing.batch_size

    def ingest(
        self,
        event_id: str,
        sessions: list[ParsedSession],
        faculty: Iterable[FacultyMember] = (),
        clear_existing: bool = False,
    ) -> ImportResult:
        if not sessions:
            raise NoValidSessionsError()

        if clear_existing:
            self.postgres.execute_update(
                "DELETE FROM program_sessions WHERE event_id = %s", (event_id,)
            )
            to_insert = list(sessions)
        else:
            existing = self._existing_session_keys(event_id)
            to_insert = [
                s
                for s in sessions
                if _duplicate_key(s.session_date, s.start_time, s.hall, s.session_name)
                not in existing
            ]

        imported = 0
        if to_insert:
            imported = self.postgres.execute_batch(
                _INSERT_SESSION_SQL,
                [self._session_params(event_id, s) for s in to_insert],
                page_size=self.batch_size,
            )

        faculty_list = list(faculty)
        created, updated = self._upsert_faculty(event_id, faculty_list)

        return ImportResult(
            imported=imported,
            skipped_duplicates=len(sessions) - len(to_insert),
            unique_sessions=len(sessions),
            faculty_total=len(faculty_list),
            faculty_created=created,
            faculty_updated=updated,
        )

    def _existing_session_keys(self, event_id: str) -> set[tuple[str, str, str, str]]:
        rows = self.postgres.execute_query(
            """
            SELECT session_date, start_time, hall, session_name
            FROM program_sessions
            WHERE event_id = %s
            """,
            (event_id,),
        )
        return {_duplicate_key(*row) for row in rows or []}

    def _session_params(self, event_id: str, s: ParsedSession) -> tuple:
        record = s.to_record()
        return (
            generate_session_id(event_id, s),
            event_id,
            record["session_name"],
            record["session_type"],
            record["session_date"],
            record["start_time"],
            record["end_time"] or None,
            record["duration_minutes"],
            record["hall"],
            record["specialty_track"],
            record["speakers"],
            record["chairpersons"],
            record["moderators"],
        )

    def _upsert_faculty(
        self, event_id: str, faculty: list[FacultyMember]
    ) -> tuple[int, int]:
        """Create missing faculty and fill in missing contact details.

        People with neither email nor phone carry nothing useful and are skipped.
        """
        with_contact = [f for f in faculty if f.email or f.phone]
        if not with_contact:
            return 0, 0

        rows = self.postgres.execute_query(
            """
            SELECT id, normalized_name, email, phone
            FROM program_faculty
            WHERE event_id = %s
            """,
            (event_id,),
        )
        by_name: dict[str, tuple] = {}
        by_email: dict[str, tuple] = {}
        for row in rows or []:
            by_name[row[1]] = row
            if row[2]:
                by_email[str(row[2]).lower()] = row

        created = 0
        updated = 0
        for member in with_contact:
            normalized = normalize_person_name(member.name)
            existing = by_name.get(normalized)
            if existing is None and member.email:
                existing = by_email.get(member.email.lower())

            if existing is not None:
                fill_email = member.email if not existing[2] and member.email else None
                fill_phone = member.phone if not existing[3] and member.phone else None
                if fill_email or fill_phone:
                    self.postgres.execute_update(
                        """
                        UPDATE program_faculty
                        SET email = COALESCE(email, %s),
                            phone = COALESCE(phone, %s),
                            updated_at = NOW()
                        WHERE id = %s
                        """,
                        (fill_email, fill_phone, existing[0]),
                    )
                    updated += 1
                continue

            inserted = self.postgres.execute_update(
                """
                INSERT INTO program_faculty (
                    id, event_id, name, normalized_name, email, phone, role
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                ON CONFLICT (event_id, normalized_name) DO NOTHING
                """,
                (
                    generate_faculty_id(event_id, normalized),
                    event_id,
                    member.name,
                    normalized,
                    member.email,
                    member.phone,
                    member.role,
                ),
            )
            if inserted:
                created += 1

        return created, updated
