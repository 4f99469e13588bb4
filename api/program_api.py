"""HTTP API for previewing, validating and importing conference programs."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from confprog.db.postgres_client import PostgresClient
from confprog.db.program_schema import ensure_program_schema
from confprog.google_client import GeminiClient
from confprog.program_import.errors import (
    MissingRequiredColumnsError,
    ProgramImportError,
    ScheduleValidationError,
)
from confprog.program_import.formats import CLOCK_TIME_PATTERN
from confprog.program_import.ingestor import ProgramIngestor
from confprog.program_import.models import (
    ColumnMapping,
    DateOrder,
    ParsedSession,
    TimeOverride,
)
from confprog.program_import.pipeline import ProgramImport
from confprog.program_import.schedule_validator import ScheduleValidator

app = FastAPI(title="Conference Program Import API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


postgres: PostgresClient | None = None
validator: ScheduleValidator | None = None


def _get_postgres() -> PostgresClient:
    global postgres
    if postgres is None:
        postgres = PostgresClient()
        ensure_program_schema(postgres)
    return postgres


def _get_validator() -> ScheduleValidator:
    global validator
    if validator is None:
        validator = ScheduleValidator(GeminiClient())
    return validator


@app.on_event("shutdown")
def _shutdown() -> None:
    if postgres is not None:
        postgres.close()


class TimeOverrideModel(BaseModel):
    start_time: str = Field(pattern=CLOCK_TIME_PATTERN)
    end_time: str = Field(pattern=CLOCK_TIME_PATTERN)


class PreviewRequest(BaseModel):
    csv_text: str
    mapping: dict[str, str | None] | None = None
    date_order: DateOrder | None = None
    time_overrides: dict[str, TimeOverrideModel] = Field(default_factory=dict)


class ImportRequest(PreviewRequest):
    event_id: str
    clear_existing: bool = False
    create_registrations: bool = True


class PreviewResponse(BaseModel):
    columns: list[str]
    mapping: dict[str, str | None]
    date_order: DateOrder
    date_format: str | None
    time_format: str | None
    sessions: list[dict[str, Any]]
    stats: dict[str, Any]


class FacultySummary(BaseModel):
    total: int
    created: int
    updated: int


class ImportResponse(BaseModel):
    success: bool
    imported: int
    skipped_duplicates: int
    total: int
    unique_sessions: int
    faculty: FacultySummary
    message: str


class ValidateSession(BaseModel):
    session_name: str
    session_date: str
    start_time: str
    end_time: str = ""
    hall: str | None = None


class ValidateRequest(BaseModel):
    sessions: list[ValidateSession]


class ValidationIssueModel(BaseModel):
    severity: str
    session_name: str
    current_time: str
    suggested_time: str
    reason: str


class ValidateResponse(BaseModel):
    summary: str
    issues: list[ValidationIssueModel]


def _build_import(request: PreviewRequest) -> ProgramImport:
    try:
        mapping = ColumnMapping.from_dict(request.mapping) if request.mapping else None
        program = ProgramImport.from_text(
            request.csv_text, mapping=mapping, date_order=request.date_order
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if request.time_overrides:
        program = program.with_time_overrides(
            {
                name: TimeOverride(start_time=o.start_time, end_time=o.end_time)
                for name, o in request.time_overrides.items()
            }
        )
    return program


@app.post("/api/program/preview", response_model=PreviewResponse)
def preview_program(request: PreviewRequest) -> PreviewResponse:
    """Parse a CSV and return the inferred mapping, formats and sessions."""
    program = _build_import(request)
    formats = program.formats
    return PreviewResponse(
        columns=list(program.table.headers),
        mapping=program.mapping.to_dict(),
        date_order=formats.date_order,
        date_format=formats.date_format.name if formats.date_format else None,
        time_format=formats.time_format.name if formats.time_format else None,
        sessions=[s.to_record() for s in program.sessions],
        stats=asdict(program.stats),
    )


@app.post("/api/program/import", response_model=ImportResponse)
def import_program(request: ImportRequest) -> ImportResponse:
    """Aggregate a CSV and persist its sessions (and faculty) for an event."""
    program = _build_import(request)
    missing = program.mapping.missing_required()
    if missing:
        raise HTTPException(
            status_code=400, detail=str(MissingRequiredColumnsError(missing))
        )

    faculty = program.faculty if request.create_registrations else []
    try:
        result = ProgramIngestor(_get_postgres()).ingest(
            request.event_id,
            program.sessions,
            faculty=faculty,
            clear_existing=request.clear_existing,
        )
    except ProgramImportError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        print(f"❌ Import failed for event {request.event_id}: {e}")
        raise HTTPException(status_code=500, detail="Import failed")

    return ImportResponse(
        success=True,
        imported=result.imported,
        skipped_duplicates=result.skipped_duplicates,
        total=len(program.table),
        unique_sessions=result.unique_sessions,
        faculty=FacultySummary(
            total=result.faculty_total,
            created=result.faculty_created,
            updated=result.faculty_updated,
        ),
        message=result.message,
    )


@app.post("/api/program/ai-validate", response_model=ValidateResponse)
def validate_program(request: ValidateRequest) -> ValidateResponse:
    """Ask the schedule validator for suspicious times."""
    sessions = [
        ParsedSession(
            session_date=s.session_date,
            start_time=s.start_time,
            end_time=s.end_time,
            duration_minutes=None,
            session_name=s.session_name,
            hall=s.hall,
        )
        for s in request.sessions
    ]
    try:
        result = _get_validator().validate(sessions)
    except ScheduleValidationError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return ValidateResponse(
        summary=result.summary,
        issues=[ValidationIssueModel(**asdict(i)) for i in result.issues],
    )


@app.get("/health")
def health():
    """Health check endpoint for deployment monitoring."""
    return {"status": "ok", "timestamp": datetime.now().isoformat()}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
