from __future__ import annotations

import datetime as dt

import pytest

from confprog.program_import.errors import NoValidSessionsError
from confprog.program_import.ingestor import (
    ProgramIngestor,
    generate_session_id,
)
from confprog.program_import.models import FacultyMember
from confprog.program_import.pipeline import ProgramImport


class _FakePostgres:
    def __init__(
        self,
        existing_sessions: list[tuple] | None = None,
        existing_faculty: list[tuple] | None = None,
    ) -> None:
        self.existing_sessions = existing_sessions or []
        self.existing_faculty = existing_faculty or []
        self.updates: list[tuple[str, tuple | None]] = []
        self.batches: list[tuple[str, list[tuple], int]] = []

    def execute_query(self, query: str, params: tuple | None = None):
        q = " ".join(query.split())
        if "FROM program_sessions" in q:
            return self.existing_sessions
        if "FROM program_faculty" in q:
            return self.existing_faculty
        raise AssertionError(f"unexpected query: {q}")

    def execute_update(self, query: str, params: tuple | None = None) -> int:
        self.updates.append((" ".join(query.split()), params))
        return 1

    def execute_batch(self, query: str, params_list: list[tuple], page_size: int = 100) -> int:
        self.batches.append((" ".join(query.split()), params_list, page_size))
        return len(params_list)


@pytest.fixture
def program(program_csv: str) -> ProgramImport:
    return ProgramImport.from_text(program_csv)


def test_ingest_inserts_all_sessions_in_batches(program: ProgramImport) -> None:
    pg = _FakePostgres()

    result = ProgramIngestor(pg, batch_size=2).ingest("evt_1", program.sessions)

    assert result.imported == 3
    assert result.skipped_duplicates == 0
    assert result.unique_sessions == 3
    query, params, page_size = pg.batches[0]
    assert query.startswith("INSERT INTO program_sessions")
    assert page_size == 2
    first = params[0]
    assert first[0] == generate_session_id("evt_1", program.sessions[0])
    assert first[1:6] == ("evt_1", "Opening Keynote", "keynote", "2026-01-15", "09:00:00")
    assert first[10] == "Dr. Asha Rao"
    assert first[11] == "Dr. Vikram Sen"


def test_ingest_skips_sessions_already_in_program(program: ProgramImport) -> None:
    pg = _FakePostgres(
        existing_sessions=[
            (dt.date(2026, 1, 15), dt.time(9, 0), "Hall A", "Opening Keynote"),
        ]
    )

    result = ProgramIngestor(pg).ingest("evt_1", program.sessions)

    assert result.imported == 2
    assert result.skipped_duplicates == 1
    assert [p[2] for p in pg.batches[0][1]] == [
        "Glaucoma Update",
        "Panel: Cataract Complications",
    ]


def test_clear_existing_deletes_then_inserts_everything(program: ProgramImport) -> None:
    pg = _FakePostgres(
        existing_sessions=[
            (dt.date(2026, 1, 15), dt.time(9, 0), "Hall A", "Opening Keynote"),
        ]
    )

    result = ProgramIngestor(pg).ingest("evt_1", program.sessions, clear_existing=True)

    assert pg.updates[0] == (
        "DELETE FROM program_sessions WHERE event_id = %s",
        ("evt_1",),
    )
    assert result.imported == 3


def test_ingest_without_sessions_raises() -> None:
    with pytest.raises(NoValidSessionsError):
        ProgramIngestor(_FakePostgres()).ingest("evt_1", [])


def test_faculty_are_created_or_filled_in(program: ProgramImport) -> None:
    faculty = [
        FacultyMember(name="Dr. Asha Rao", email="asha@example.org", phone="+919876543210"),
        FacultyMember(name="Dr. Vikram Sen", email="vikram@example.org"),
        FacultyMember(name="Dr. No Contact"),
        FacultyMember(name="Dr. John Paul", email="john@example.org"),
    ]
    pg = _FakePostgres(
        existing_faculty=[
            ("pf_1", "dr. asha rao", "asha@example.org", None),
            ("pf_2", "vikram sen", "VIKRAM@example.org", "+911111111111"),
        ]
    )

    result = ProgramIngestor(pg).ingest("evt_1", program.sessions, faculty=faculty)

    assert result.faculty_total == 4
    assert result.faculty_created == 1
    assert result.faculty_updated == 1

    faculty_updates = [(q, p) for q, p in pg.updates if "program_faculty" in q]
    assert faculty_updates[0][0].startswith("UPDATE program_faculty")
    assert faculty_updates[0][1] == (None, "+919876543210", "pf_1")
    assert faculty_updates[1][0].startswith("INSERT INTO program_faculty")
    assert faculty_updates[1][1][2:5] == ("Dr. John Paul", "dr. john paul", "john@example.org")


def test_session_ids_are_stable_and_event_scoped(program: ProgramImport) -> None:
    s = program.sessions[0]

    assert generate_session_id("evt_1", s) == generate_session_id("evt_1", s)
    assert generate_session_id("evt_1", s) != generate_session_id("evt_2", s)
    assert generate_session_id("evt_1", s).startswith("ps_")


def test_faculty_insert_that_hits_a_conflict_is_not_counted(program: ProgramImport) -> None:
    class _ConflictingPostgres(_FakePostgres):
        def execute_update(self, query: str, params: tuple | None = None) -> int:
            super().execute_update(query, params)
            return 0 if "INSERT INTO program_faculty" in query else 1

    pg = _ConflictingPostgres()

    result = ProgramIngestor(pg).ingest(
        "evt_1",
        program.sessions,
        faculty=[FacultyMember(name="Dr. John Paul", email="john@example.org")],
    )

    assert any("INSERT INTO program_faculty" in q for q, _ in pg.updates)
    assert result.faculty_created == 0
    assert result.faculty_total == 1
