"""Minimal CSV reader for uploaded program sheets.

Quoted fields may contain commas. Quote characters are dropped, and a doubled
quote (``""``) is not collapsed into a literal quote: it just toggles the
quoted state twice. Newlines inside quoted fields are not supported.
"""

from __future__ import annotations

from confprog.program_import.errors import TooFewRowsError
from confprog.program_import.models import RawTable


_BOM = "\ufeff"


def parse_csv_line(line: str) -> list[str]:
    """Split one CSV line into trimmed fields."""
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append("".join(current).strip())
    return fields


def parse_csv_text(text: str) -> RawTable:
    """Parse CSV text into a RawTable.

    Raises:
        TooFewRowsError: fewer than two non-blank lines.
    """
    lines = [ln for ln in (text or "").split("\n") if ln.strip()]
    if len(lines) < 2:
        raise TooFewRowsError(len(lines))

    header_line = lines[0]
    if header_line.startswith(_BOM):
        header_line = header_line[len(_BOM) :]
    headers = tuple(parse_csv_line(header_line))

    rows: list[dict[str, str]] = []
    for line in lines[1:]:
        values = parse_csv_line(line)
        rows.append(
            {
                header: (values[idx] if idx < len(values) else "")
                for idx, header in enumerate(headers)
            }
        )

    return RawTable(headers=headers, rows=tuple(rows))
