from __future__ import annotations

from confprog.db.program_schema import PROGRAM_SCHEMA_STATEMENTS, ensure_program_schema


class _FakePostgres:
    def __init__(self) -> None:
        self.statements: list[str] = []

    def execute_update(self, query: str, params: tuple | None = None) -> int:
        self.statements.append(" ".join(query.split()))
        return 0


def test_ensure_program_schema_runs_every_statement_idempotently() -> None:
    pg = _FakePostgres()

    ensure_program_schema(pg)

    assert len(pg.statements) == len(PROGRAM_SCHEMA_STATEMENTS)
    assert all("IF NOT EXISTS" in s for s in pg.statements)
    assert pg.statements[0].startswith("CREATE TABLE IF NOT EXISTS program_sessions")


def test_faculty_names_are_unique_per_event() -> None:
    faculty_ddl = next(s for s in PROGRAM_SCHEMA_STATEMENTS if "program_faculty (" in s)

    assert "UNIQUE (event_id, normalized_name)" in faculty_ddl
