from __future__ import annotations

import pytest

from confprog.program_import.formats import (
    TIME_FORMATS,
    date_formats,
    detect_date_format,
    detect_date_order,
    detect_formats,
    detect_time_format,
    parse_end_time_value,
    parse_time_value,
    to_24h,
)
from confprog.program_import.csv_table import parse_csv_text
from confprog.program_import.column_roles import infer_column_mapping
from confprog.program_import.models import DateOrder


@pytest.mark.parametrize(
    "values,expected",
    [
        (["15/01/2026", "03/02/2026"], DateOrder.DAY_FIRST),
        (["01/15/2026"], DateOrder.MONTH_FIRST),
        (["01/02/2026"], DateOrder.DAY_FIRST),
        (["01.02.2026", "02-25-2026"], DateOrder.MONTH_FIRST),
        (["2026-01-15", "TBD", ""], DateOrder.DAY_FIRST),
        ([], DateOrder.DAY_FIRST),
    ],
)
def test_detect_date_order(values: list[str], expected: DateOrder) -> None:
    assert detect_date_order(values) == expected


def test_first_position_over_twelve_wins_even_if_second_is_too() -> None:
    assert detect_date_order(["25/01/2026", "01/25/2026"]) == DateOrder.DAY_FIRST


@pytest.mark.parametrize(
    "value,order,name,normalized",
    [
        ("5.1.2026", DateOrder.DAY_FIRST, "DD.MM.YYYY", "2026-01-05"),
        ("15/01/2026", DateOrder.DAY_FIRST, "DD/MM/YYYY", "2026-01-15"),
        ("01/15/2026", DateOrder.MONTH_FIRST, "MM/DD/YYYY", "2026-01-15"),
        ("2026-03-09", DateOrder.DAY_FIRST, "YYYY-MM-DD", "2026-03-09"),
        ("2026-03-09", DateOrder.MONTH_FIRST, "YYYY-MM-DD", "2026-03-09"),
        ("9-3-2026", DateOrder.DAY_FIRST, "DD-MM-YYYY", "2026-03-09"),
        ("3-9-2026", DateOrder.MONTH_FIRST, "MM-DD-YYYY", "2026-03-09"),
    ],
)
def test_date_format_detection_and_normalization(
    value: str, order: DateOrder, name: str, normalized: str
) -> None:
    fmt = detect_date_format([value], order)

    assert fmt is not None
    assert fmt.name == name
    assert fmt.apply(value) == normalized


def test_date_format_detection_skips_blank_and_unrecognised_samples() -> None:
    fmt = detect_date_format(["", "TBD", "15/01/2026"], DateOrder.DAY_FIRST)

    assert fmt is not None
    assert fmt.name == "DD/MM/YYYY"


def test_chosen_date_format_does_not_parse_other_styles() -> None:
    slash = date_formats(DateOrder.DAY_FIRST)[1]

    assert slash.apply("15.01.2026") == ""


@pytest.mark.parametrize(
    "value,expected",
    [
        ("2:30 PM", "14:30:00"),
        ("12:00 AM", "00:00:00"),
        ("12:00 PM", "12:00:00"),
        ("9:05 am", "09:05:00"),
    ],
)
def test_twelve_hour_conversion(value: str, expected: str) -> None:
    fmt = detect_time_format([value])

    assert fmt is not None
    assert fmt.name == "HH:MM AM/PM (single)"
    assert parse_time_value(value, fmt) == (expected, expected)


def test_to_24h() -> None:
    assert to_24h(1, "pm") == 13
    assert to_24h(12, "AM") == 0
    assert to_24h(12, "PM") == 12
    assert to_24h(11, "AM") == 11


@pytest.mark.parametrize(
    "value,name,start,end",
    [
        ("9:00 AM - 10:30 AM", "HH:MM AM/PM - HH:MM AM/PM (range)", "09:00:00", "10:30:00"),
        ("11:30 AM to 1:00 PM", "HH:MM AM/PM - HH:MM AM/PM (range)", "11:30:00", "13:00:00"),
        ("9:00 - 9:45", "HH:MM - HH:MM (range)", "09:00:00", "09:45:00"),
        ("14:00–15:30", "HH:MM - HH:MM (range)", "14:00:00", "15:30:00"),
        ("14:00", "HH:MM (single)", "14:00:00", "14:00:00"),
    ],
)
def test_time_format_detection(value: str, name: str, start: str, end: str) -> None:
    fmt = detect_time_format(["", value])

    assert fmt is not None
    assert fmt.name == name
    assert parse_time_value(value, fmt) == (start, end)


def test_time_patterns_are_tried_in_priority_order() -> None:
    assert [f.name for f in TIME_FORMATS] == [
        "HH:MM AM/PM - HH:MM AM/PM (range)",
        "HH:MM AM/PM (single)",
        "HH:MM - HH:MM (range)",
        "HH:MM (single)",
    ]


def test_unmatched_time_value_parses_empty() -> None:
    fmt = detect_time_format(["9:00 - 9:45"])

    assert parse_time_value("TBA", fmt) == ("", "")
    assert parse_time_value("9:00", None) == ("", "")


def test_end_time_cell_uses_start_part_of_any_format() -> None:
    assert parse_end_time_value("5:15 PM") == "17:15:00"
    assert parse_end_time_value("10:00 - 11:00") == "10:00:00"
    assert parse_end_time_value("") == ""


def test_detect_formats_from_table() -> None:
    table = parse_csv_text(
        "Date,Time,Topic\n03/02/2026,2:30 PM,A\n01/15/2026,3:00 PM,B\n"
    )
    mapping = infer_column_mapping(table.headers)

    formats = detect_formats(table, mapping)

    assert formats.date_order == DateOrder.MONTH_FIRST
    assert formats.date_format is not None
    assert formats.date_format.name == "MM/DD/YYYY"
    assert formats.time_format is not None
    assert formats.time_format.name == "HH:MM AM/PM (single)"


def test_explicit_date_order_overrides_inference() -> None:
    table = parse_csv_text("Date,Time,Topic\n03/02/2026,9:00,A\n")
    mapping = infer_column_mapping(table.headers)

    formats = detect_formats(table, mapping, date_order=DateOrder.MONTH_FIRST)

    assert formats.date_order == DateOrder.MONTH_FIRST
    assert formats.date_format is not None
    assert formats.date_format.apply("03/02/2026") == "2026-03-02"
