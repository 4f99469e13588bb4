"""Group program CSV rows into unique sessions with their participants."""

from __future__ import annotations

from confprog.program_import.formats import (
    DetectedFormats,
    detect_formats,
    parse_end_time_value,
    parse_time_value,
    time_to_minutes,
)
from confprog.program_import.models import (
    ColumnMapping,
    ContactPerson,
    DateOrder,
    ParsedSession,
    RawTable,
)


SPEAKER = "speaker"
CHAIRPERSON = "chairperson"
MODERATOR = "moderator"


def classify_participant_role(role_text: str) -> str:
    """Map a free-text role cell to speaker, chairperson or moderator."""
    label = (role_text or "").lower()
    if "chair" in label or "coordinator" in label or "co-ordinator" in label:
        return CHAIRPERSON
    if "moderator" in label:
        return MODERATOR
    return SPEAKER


def infer_session_type(topic: str, track: str = "") -> str:
    """Coarse session type from topic and track keywords."""
    t = (topic or "").lower()
    tr = (track or "").lower()

    if "panel" in t or "discussion" in t:
        return "panel"
    if "keynote" in t or "oration" in t:
        return "keynote"
    if "workshop" in t:
        return "workshop"
    if "live" in t or "surgery" in t:
        return "live_surgery"
    if "exam" in tr or "exam" in t:
        return "exam"
    if "inaug" in t or "opening" in t:
        return "ceremony"
    if "break" in t or "lunch" in t or "tea" in t:
        return "break"
    return "lecture"


def compute_duration_minutes(start_time: str, end_time: str) -> int | None:
    """End minus start in minutes. Negative (overnight) spans are unknown: None."""
    if not start_time or not end_time:
        return None
    duration = time_to_minutes(end_time) - time_to_minutes(start_time)
    if duration < 0:
        return None
    return duration


def _add_participant(session: ParsedSession, person: ContactPerson, kind: str) -> None:
    if kind == CHAIRPERSON:
        people = session.chairpersons
    elif kind == MODERATOR:
        people = session.moderators
    else:
        people = session.speakers

    if any(p.name == person.name for p in people):
        return
    people.append(person)


def aggregate_sessions(
    table: RawTable,
    mapping: ColumnMapping,
    date_order: DateOrder | None = None,
    formats: DetectedFormats | None = None,
) -> list[ParsedSession]:
    """Build unique sessions from CSV rows, in first-seen order.

    Returns [] when date, time or topic is unmapped. Rows whose topic, date or
    start time is empty after parsing are skipped without diagnostics.
    """
    if mapping.missing_required():
        return []

    if formats is None:
        formats = detect_formats(table, mapping, date_order)

    sessions: dict[tuple[str, str, str, str, str], ParsedSession] = {}

    for row in table.rows:
        date_format = formats.date_format
        parsed_date = date_format.apply(mapping.value(row, "date")) if date_format else ""
        start_time, end_time = parse_time_value(
            mapping.value(row, "time"), formats.time_format
        )

        if start_time and end_time == start_time and mapping.is_set("end_time"):
            separate_end = parse_end_time_value(mapping.value(row, "end_time"))
            if separate_end:
                end_time = separate_end

        topic = mapping.value(row, "topic")
        if not topic or not parsed_date or not start_time:
            continue

        hall = mapping.value(row, "hall")
        track = mapping.value(row, "session")
        key = (parsed_date, hall, track, start_time, topic)

        session = sessions.get(key)
        if session is None:
            session = ParsedSession(
                session_date=parsed_date,
                start_time=start_time,
                end_time=end_time,
                duration_minutes=compute_duration_minutes(start_time, end_time),
                session_name=topic,
                hall=hall or None,
                specialty_track=track or None,
                session_type=infer_session_type(topic, track),
            )
            sessions[key] = session

        name = mapping.value(row, "speaker")
        if not name:
            continue
        role_text = mapping.value(row, "role") or "Speaker"
        person = ContactPerson(
            name=name,
            email=mapping.value(row, "email"),
            phone=mapping.value(row, "phone"),
        )
        _add_participant(session, person, classify_participant_role(role_text))

    return list(sessions.values())
