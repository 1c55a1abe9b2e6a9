"""Bulletin decoding - from the raw JSON body to ScheduleWithAbsences.

Response shape (unknown fields are ignored):

    {
      "schedule": [{"C2b": [null, "M 16 (Mu) odpadá", ...], "ABSENCE": [...]}, ...],
      "props":    [{"date": "2026-10-19", "priprava": false}, ...],
      "status":   {"lastUpdated": "...", "currentUpdateSchedule": 15, "message": null}
    }

The envelope and the ABSENCE records are structured data and fail hard with
MalformedInput. Lesson strings are free text and go through the lesson
parser, which never fails.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from jecnasupl.errors import MalformedInput
from jecnasupl.logging import get_logger
from jecnasupl.models import (
    ABSENCE_KEY,
    DailySchedule,
    ScheduleWithAbsences,
    SubstitutedLesson,
    SubstitutionResponse,
    TeacherAbsence,
)
from jecnasupl.parser.lesson import parse_substitution_text

log = get_logger(__name__)

UNKNOWN_DATE = "unknown"


def parse_substitution_json(body: str | bytes) -> SubstitutionResponse:
    """Decode the top-level bulletin envelope.

    Args:
        body: Raw response body.

    Raises:
        MalformedInput: If the body is not JSON, or ``schedule``/``status``
            are missing or have the wrong shape.
    """
    try:
        return SubstitutionResponse.model_validate_json(body)
    except ValidationError as e:
        raise MalformedInput(f"Invalid substitution response: {e}") from e


def parse_teacher_absences(day_schedule: Mapping[str, Any]) -> list[TeacherAbsence]:
    """Decode the ABSENCE entry of one day.

    Returns:
        Absences in bulletin order; empty when the day has no ABSENCE entry
        or ABSENCE is not a list.

    Raises:
        MalformedInput: If a record in the ABSENCE list does not validate.
    """
    raw = day_schedule.get(ABSENCE_KEY)
    if raw is None:
        return []
    if not isinstance(raw, list):
        log.debug("absence_entry_skipped", type=type(raw).__name__)
        return []

    absences: list[TeacherAbsence] = []
    for index, record in enumerate(raw):
        try:
            absences.append(TeacherAbsence.model_validate(record))
        except ValidationError as e:
            raise MalformedInput(f"Invalid absence record #{index}: {e}") from e
    return absences


def _entry_text(entry: Any) -> str | None:
    """Lesson text of an array slot, or None for an empty slot."""
    if not isinstance(entry, str) or not entry.strip():
        return None
    return entry


def parse_day_schedule(
    day_schedule: Mapping[str, Any],
) -> dict[str, list[SubstitutedLesson]]:
    """Parse every class array of one day.

    The hour of an entry is its array index + 1, so empty slots never shift
    the numbering of later entries. Classes with no entries are left out.

    Returns:
        Class name -> lessons, in bulletin order.
    """
    class_subs: dict[str, list[SubstitutedLesson]] = {}

    for class_name, entries in day_schedule.items():
        if class_name == ABSENCE_KEY:
            continue
        if not isinstance(entries, list):
            log.debug("class_entry_skipped", class_name=class_name, type=type(entries).__name__)
            continue

        lessons = []
        for index, entry in enumerate(entries):
            text = _entry_text(entry)
            if text is None:
                continue
            lessons.append(parse_substitution_text(text, index + 1))

        if lessons:
            class_subs[class_name] = lessons

    return class_subs


def parse_complete_schedule(body: str | bytes) -> ScheduleWithAbsences:
    """Decode a bulletin and parse every day, class and absence in it.

    Day ``i`` takes its date and preparation flag from ``props[i]``; days
    without a props entry get date "unknown" and no preparation flag.

    Raises:
        MalformedInput: See parse_substitution_json and parse_teacher_absences.
    """
    response = parse_substitution_json(body)

    daily_schedules: list[DailySchedule] = []
    for index, day_schedule in enumerate(response.schedule):
        props = response.props[index] if index < len(response.props) else None

        daily_schedules.append(
            DailySchedule(
                date=(props.date if props and props.date else UNKNOWN_DATE),
                is_priprava=bool(props and props.priprava),
                class_subs=parse_day_schedule(day_schedule),
                absences=parse_teacher_absences(day_schedule),
            )
        )

    log.debug(
        "schedule_parsed",
        days=len(daily_schedules),
        lessons=sum(
            len(lessons)
            for day in daily_schedules
            for lessons in day.class_subs.values()
        ),
        absences=sum(len(day.absences) for day in daily_schedules),
    )
    return ScheduleWithAbsences(daily_schedules=daily_schedules, status=response.status)
