"""Errors raised by the program import pipeline."""

from __future__ import annotations


class ProgramImportError(ValueError):
    """Base class for program import failures reported to the user."""


class TooFewRowsError(ProgramImportError):
    """The CSV has no header plus data row."""

    def __init__(self, line_count: int) -> None:
        super().__init__(
            "CSV file must have at least a header and one data row "
            f"(found {line_count} non-blank line(s))"
        )
        self.line_count = line_count


class MissingRequiredColumnsError(ProgramImportError):
    """Date, time or topic is not mapped to any column."""

    def __init__(self, roles: list[str]) -> None:
        super().__init__(f"Required columns not mapped: {', '.join(roles)}")
        self.roles = roles


class NoValidSessionsError(ProgramImportError):
    """Nothing survived aggregation, so there is nothing to import."""

    def __init__(self) -> None:
        super().__init__(
            "No valid sessions found in CSV. Please check the date and time format."
        )


class ScheduleValidationError(ProgramImportError):
    """The schedule validator returned something we could not use."""
