"""Program schema helpers.

Imported sessions and faculty live in two tables. The bootstrap below is
idempotent so the importer can run against a fresh or an existing database.
"""

from __future__ import annotations

from typing import Any


PROGRAM_SCHEMA_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS program_sessions (
        id TEXT PRIMARY KEY,
        event_id TEXT NOT NULL,
        session_name TEXT NOT NULL,
        session_type TEXT NOT NULL DEFAULT 'lecture',
        session_date DATE NOT NULL,
        start_time TIME NOT NULL,
        end_time TIME,
        duration_minutes INTEGER,
        hall TEXT,
        specialty_track TEXT,
        speakers TEXT,
        chairpersons TEXT,
        moderators TEXT,
        created_at TIMESTAMP DEFAULT NOW(),
        updated_at TIMESTAMP DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS program_faculty (
        id TEXT PRIMARY KEY,
        event_id TEXT NOT NULL,
        name TEXT NOT NULL,
        normalized_name TEXT NOT NULL,
        email TEXT,
        phone TEXT,
        role TEXT,
        created_at TIMESTAMP DEFAULT NOW(),
        updated_at TIMESTAMP DEFAULT NOW(),
        CONSTRAINT uq_program_faculty_event_name UNIQUE (event_id, normalized_name)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_program_sessions_event_id ON program_sessions(event_id)",
    "CREATE INDEX IF NOT EXISTS idx_program_sessions_date_time ON program_sessions(session_date, start_time)",
    "CREATE INDEX IF NOT EXISTS idx_program_faculty_event_id ON program_faculty(event_id)",
)


def ensure_program_schema(postgres: Any) -> None:
    """Ensure program tables/indexes exist. Safe to call repeatedly."""

    for stmt in PROGRAM_SCHEMA_STATEMENTS:
        postgres.execute_update(stmt)
