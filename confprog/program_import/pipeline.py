"""Parse → infer → detect → aggregate, wired together for one uploaded file."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property

from confprog.program_import.aggregator import aggregate_sessions
from confprog.program_import.column_roles import infer_column_mapping
from confprog.program_import.contacts import collect_faculty
from confprog.program_import.csv_table import parse_csv_text
from confprog.program_import.formats import DetectedFormats, detect_formats
from confprog.program_import.models import (
    ColumnMapping,
    DateOrder,
    FacultyMember,
    ImportStats,
    ParsedSession,
    RawTable,
    TimeOverride,
)
from confprog.program_import.overrides import apply_time_overrides
from confprog.program_import.stats import compute_import_stats


@dataclass(frozen=True)
class ProgramImport:
    """Immutable view of one import; every derived value is a pure function of inputs.

    Changing the mapping, the date order or the accepted time fixes yields a
    new ProgramImport that recomputes everything from scratch.
    """

    table: RawTable
    mapping: ColumnMapping
    date_order: DateOrder | None = None
    time_overrides: dict[str, TimeOverride] = field(default_factory=dict)

    @classmethod
    def from_text(
        cls,
        text: str,
        mapping: ColumnMapping | None = None,
        date_order: DateOrder | None = None,
    ) -> "ProgramImport":
        table = parse_csv_text(text)
        return cls(
            table=table,
            mapping=mapping or infer_column_mapping(table.headers),
            date_order=date_order,
        )

    def with_mapping(self, mapping: ColumnMapping) -> "ProgramImport":
        return ProgramImport(self.table, mapping, self.date_order, dict(self.time_overrides))

    def with_date_order(self, date_order: DateOrder | None) -> "ProgramImport":
        return ProgramImport(self.table, self.mapping, date_order, dict(self.time_overrides))

    def with_time_overrides(self, overrides: dict[str, TimeOverride]) -> "ProgramImport":
        return ProgramImport(self.table, self.mapping, self.date_order, dict(overrides))

    @cached_property
    def formats(self) -> DetectedFormats:
        return detect_formats(self.table, self.mapping, self.date_order)

    @cached_property
    def sessions(self) -> list[ParsedSession]:
        parsed = aggregate_sessions(self.table, self.mapping, formats=self.formats)
        if self.time_overrides:
            parsed = apply_time_overrides(parsed, self.time_overrides)
        return parsed

    @cached_property
    def faculty(self) -> list[FacultyMember]:
        return collect_faculty(self.table, self.mapping)

    @cached_property
    def stats(self) -> ImportStats:
        return compute_import_stats(self.table, self.mapping, self.sessions)
