"""Import a conference program CSV into PostgreSQL."""

# ruff: noqa: E402

from __future__ import annotations

import argparse
import os
import sys


_REPO_ROOT = os.path.dirname(os.path.dirname(__file__))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)


from confprog.db.postgres_client import PostgresClient
from confprog.db.program_schema import ensure_program_schema
from confprog.google_client import GeminiClient
from confprog.program_import.errors import (
    MissingRequiredColumnsError,
    ProgramImportError,
)
from confprog.program_import.ingestor import ProgramIngestor
from confprog.program_import.models import DateOrder
from confprog.program_import.overrides import accept_issue
from confprog.program_import.pipeline import ProgramImport
from confprog.program_import.schedule_validator import ScheduleValidator


def _parse_overrides(values: list[str]) -> dict[str, str | None]:
    """Parse repeated --map role=Header options ("role=" unsets a role)."""
    out: dict[str, str | None] = {}
    for item in values:
        if "=" not in item:
            raise ValueError(f"--map expects role=Header, got {item!r}")
        role, header = item.split("=", 1)
        out[role.strip()] = header.strip() or None
    return out


def _print_summary(program: ProgramImport) -> None:
    formats = program.formats
    stats = program.stats
    print(f"Columns: {', '.join(program.table.headers)}")
    for role, header in program.mapping.to_dict().items():
        print(f"   - {role}: {header or '(not mapped)'}")
    print(f"Date order: {formats.date_order.value}")
    print(f"Date format: {formats.date_format.name if formats.date_format else '?'}")
    print(f"Time format: {formats.time_format.name if formats.time_format else '?'}")
    print(
        f"Rows: {len(program.table)} | Sessions: {stats.sessions} | Days: {stats.days} "
        f"| Halls: {stats.halls} | Speakers: {stats.speakers}"
    )
    if stats.has_contact_info:
        print(
            f"Faculty with contact: {stats.faculty_with_contact} | "
            f"valid emails: {stats.valid_emails} | invalid: {stats.invalid_emails} | "
            f"missing: {stats.missing_emails}"
        )


def _run_validation(program: ProgramImport) -> ProgramImport:
    validator = ScheduleValidator(GeminiClient())
    result = validator.validate(program.sessions)
    print(f"AI validation: {result.summary or 'done'}")

    overrides = dict(program.time_overrides)
    for issue in result.issues:
        print(
            f"   [{issue.severity}] {issue.session_name}: "
            f"{issue.current_time} → {issue.suggested_time} ({issue.reason})"
        )
        if issue.severity == "error":
            overrides = accept_issue(program.sessions, overrides, issue)

    if len(overrides) != len(program.time_overrides):
        print(f"✅ Applied {len(overrides) - len(program.time_overrides)} suggested fix(es)")
    return program.with_time_overrides(overrides)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Import a conference program CSV into PostgreSQL"
    )
    parser.add_argument("--file", required=True, help="Path to a program CSV file")
    parser.add_argument("--event-id", help="Event the sessions belong to")
    parser.add_argument(
        "--date-order",
        choices=[o.value for o in DateOrder],
        help="Force day-first or month-first dates (default: infer)",
    )
    parser.add_argument(
        "--map",
        action="append",
        default=[],
        metavar="ROLE=HEADER",
        help="Override an inferred column, e.g. --map speaker='Faculty Name'",
    )
    parser.add_argument(
        "--clear-existing",
        action="store_true",
        help="Delete the event's existing sessions before import",
    )
    parser.add_argument(
        "--no-faculty",
        action="store_true",
        help="Do not create/update faculty contact records",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Run the AI schedule validator and apply error-level fixes",
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Parse and summarise only"
    )
    args = parser.parse_args()

    if not args.dry_run and not args.event_id:
        parser.error("--event-id is required unless --dry-run is given")

    with open(args.file, "r", encoding="utf-8") as f:
        raw_text = f.read()

    try:
        program = ProgramImport.from_text(
            raw_text,
            date_order=DateOrder(args.date_order) if args.date_order else None,
        )
        if args.map:
            program = program.with_mapping(
                program.mapping.with_overrides(**_parse_overrides(args.map))
            )
    except ValueError as e:
        print(f"❌ {e}")
        return 1

    _print_summary(program)

    missing = program.mapping.missing_required()
    if missing:
        print(f"❌ {MissingRequiredColumnsError(missing)}")
        return 1

    if args.validate:
        program = _run_validation(program)

    if args.dry_run:
        for s in program.sessions:
            record = s.to_record()
            print(
                f"   {record['session_date']} {record['start_time']}-{record['end_time']} "
                f"[{record['hall'] or '-'}] {record['session_name']}"
            )
        print("✅ Dry run complete (nothing written)")
        return 0

    with PostgresClient() as postgres:
        ensure_program_schema(postgres)
        ingestor = ProgramIngestor(postgres)
        try:
            result = ingestor.ingest(
                args.event_id,
                program.sessions,
                faculty=[] if args.no_faculty else program.faculty,
                clear_existing=args.clear_existing,
            )
        except ProgramImportError as e:
            print(f"❌ {e}")
            return 1

    print(f"✅ {result.message}")
    if result.skipped_duplicates:
        print(f"⚠️ Skipped {result.skipped_duplicates} session(s) already in the program")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
