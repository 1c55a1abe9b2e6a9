"""Substitution bulletin parser for SPŠE Ječná.

Turns the jecnarozvrh JSON bulletin (one free-text entry per class and lesson
hour, in Czech) into typed schedules: lessons, teacher absences and day
metadata.
"""

from jecnasupl.client import SubstitutionClient
from jecnasupl.errors import MalformedInput
from jecnasupl.models import (
    AbsenceType,
    DailySchedule,
    ScheduleWithAbsences,
    SubstitutedLesson,
    SubstitutionStatus,
    TeacherAbsence,
)
from jecnasupl.parser.lesson import parse_substitution_text
from jecnasupl.parser.response import (
    parse_complete_schedule,
    parse_day_schedule,
    parse_substitution_json,
    parse_teacher_absences,
)

__all__ = [
    "AbsenceType",
    "DailySchedule",
    "MalformedInput",
    "ScheduleWithAbsences",
    "SubstitutedLesson",
    "SubstitutionClient",
    "SubstitutionStatus",
    "TeacherAbsence",
    "parse_complete_schedule",
    "parse_day_schedule",
    "parse_substitution_json",
    "parse_substitution_text",
    "parse_teacher_absences",
]
