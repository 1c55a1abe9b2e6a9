"""Pydantic models for substitution bulletin data.

All data structures use Pydantic v2 for validation, serialization, and type safety.
Python attributes are snake_case; serializing with ``by_alias=True`` yields the
camelCase names used on the wire (``substitutingTeacher``, ``isPriprava``...).
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

ABSENCE_KEY = "ABSENCE"


class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class SubstitutedLesson(_Record):
    """One parsed substitution entry for a class and lesson hour.

    Flags are independent: a lesson can be joined and shifted at once.
    """

    hour: int  # 1-based position in the class's array for the day
    group: str | None = None  # "1/2", "2/2"
    subject: str | None = None  # "M", "ZE", "TV"
    room: str | None = None  # "16", "17a", "TV"
    substituting_teacher: str | None = None  # "Rk" in "Rk(Lc)"
    missing_teacher: str | None = None  # "Lc" in "Rk(Lc)"
    is_dropped: bool = False
    is_joined: bool = False
    is_separated: bool = False
    room_changed: bool = False
    is_shifted: bool = False
    shift_target: str | None = None  # "6. h."
    note: str | None = None  # leftover text that could not be classified
    original_text: str  # entry exactly as it appeared in the bulletin


class AbsenceType(str, Enum):
    WHOLE_DAY = "wholeDay"
    SINGLE = "single"
    RANGE = "range"
    EXKURZE = "exkurze"


class AbsenceHours(_Record):
    from_: int = Field(alias="from")
    to: int

    @model_validator(mode="before")
    @classmethod
    def _single_hour(cls, data: Any) -> Any:
        # {"from": 3} describes a single hour
        if isinstance(data, dict) and data.get("to") is None and "from" in data:
            return {**data, "to": data["from"]}
        return data


class TeacherAbsence(_Record):
    """A teacher's absence from the ABSENCE entry of a day."""

    teacher: str | None = None  # full name, not always published
    teacher_code: str  # "Lc"
    type: AbsenceType
    hours: AbsenceHours | None = None  # only for single/range

    @model_validator(mode="before")
    @classmethod
    def _hours_only_for_hour_types(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("type") in (
            AbsenceType.WHOLE_DAY.value,
            AbsenceType.EXKURZE.value,
        ):
            return {**data, "hours": None}
        return data


class SubstitutionStatus(_Record):
    """Bulletin status block, passed through unchanged."""

    last_updated: str
    current_update_schedule: int  # minutes between bulletin refreshes
    message: str | None = None


class DailySchedule(_Record):
    date: str  # YYYY-MM-DD, or "unknown" when the day has no props entry
    is_priprava: bool = False  # preparation day
    class_subs: dict[str, list[SubstitutedLesson]] = Field(default_factory=dict)
    absences: list[TeacherAbsence] = Field(default_factory=list)


class ScheduleWithAbsences(_Record):
    daily_schedules: list[DailySchedule]
    status: SubstitutionStatus

    def for_class(self, class_name: str) -> list[tuple[str, list[SubstitutedLesson]]]:
        """Return (date, lessons) for every day on which the class has entries.

        Class names are matched case-insensitively.
        """
        wanted = class_name.strip().casefold()
        days: list[tuple[str, list[SubstitutedLesson]]] = []
        for day in self.daily_schedules:
            for name, lessons in day.class_subs.items():
                if name.casefold() == wanted:
                    days.append((day.date, lessons))
                    break
        return days


# --- Wire envelope ---


class DayProps(BaseModel):
    date: str | None = None
    priprava: bool | None = None


class SubstitutionResponse(BaseModel):
    """Top-level bulletin JSON. Unknown fields are ignored."""

    schedule: list[dict[str, Any]]
    props: list[DayProps] = Field(default_factory=list)
    status: SubstitutionStatus
