"""Show the substitution bulletin as JSON or a table.

Fetches the bulletin from the configured jecnarozvrh endpoint (or reads a
saved response) and prints the parsed schedule.

Run with: python scripts/show_substitutions.py
Class:    python scripts/show_substitutions.py --class C2b --table
Offline:  python scripts/show_substitutions.py --file data/bulletin.json --table
URL:      python scripts/show_substitutions.py --url https://example.com/jecnarozvrh/data

Configuration comes from the environment or .env (SUPL_ENDPOINT_URL,
SUPL_CLASS_SYMBOL, LOG_LEVEL, LOG_JSON); CLI flags override it.

Exit codes:
  0 = success (JSON or table on stdout)
  1 = error (message on stderr)
"""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from jecnasupl.client import SubstitutionClient
from jecnasupl.config import get_config
from jecnasupl.logging import get_logger, setup_logging
from jecnasupl.models import (
    AbsenceType,
    ScheduleWithAbsences,
    SubstitutedLesson,
    TeacherAbsence,
)
from jecnasupl.parser.response import parse_complete_schedule

load_dotenv()

log = get_logger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    parser = argparse.ArgumentParser(
        description="Show the SPŠE Ječná substitution bulletin as JSON or table.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--file",
        type=Path,
        default=None,
        help="Read a saved bulletin JSON instead of fetching it.",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="Bulletin endpoint URL (overrides SUPL_ENDPOINT_URL).",
    )
    parser.add_argument(
        "--class",
        dest="class_symbol",
        default=None,
        help="Only show this class, e.g. C2b (overrides SUPL_CLASS_SYMBOL).",
    )
    parser.add_argument(
        "--table",
        action="store_true",
        help="Print a human-readable table instead of JSON.",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        default=None,
        help="Log in JSON format.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (DEBUG, INFO, WARNING, ERROR).",
    )
    return parser.parse_args(argv)


def _flags(lesson: SubstitutedLesson) -> str:
    labels = [
        ("dropped", lesson.is_dropped),
        ("joined", lesson.is_joined),
        ("separated", lesson.is_separated),
        ("room changed", lesson.room_changed),
        ("shifted", lesson.is_shifted),
    ]
    return ", ".join(label for label, is_set in labels if is_set)


def _status_line(schedule: ScheduleWithAbsences) -> str:
    status = schedule.status
    line = f"Last updated: {status.last_updated}"
    if status.current_update_schedule:
        line += f" (every {status.current_update_schedule} min)"
    if status.message:
        line += f"\n{status.message}"
    return line


def _absence(absence: TeacherAbsence) -> str:
    who = f"{absence.teacher} ({absence.teacher_code})" if absence.teacher else absence.teacher_code
    if absence.type is AbsenceType.WHOLE_DAY:
        return f"{who} whole day"
    if absence.type is AbsenceType.EXKURZE:
        return f"{who} excursion"
    if absence.hours is None:
        return who
    if absence.hours.from_ == absence.hours.to:
        return f"{who} hour {absence.hours.from_}"
    return f"{who} hours {absence.hours.from_}-{absence.hours.to}"


def format_table(
    schedule: ScheduleWithAbsences, class_symbol: str | None = None
) -> str:
    """Format the bulletin as human-readable text.

    The first block is the update status. Each day follows as its own block:
    the date, the absent teachers, then a lesson table with columns
    Class | Hour | Group | Subject | Room | Teacher | Missing | Flags | Note.
    """
    headers = ["Class", "Hour", "Group", "Subject", "Room", "Teacher", "Missing", "Flags", "Note"]
    wanted = class_symbol.strip().casefold() if class_symbol else None

    blocks = [_status_line(schedule)]
    for day in schedule.daily_schedules:
        title = f"{day.date}" + (" (příprava)" if day.is_priprava else "")
        if day.absences:
            title += "\nAbsent: " + ", ".join(_absence(a) for a in day.absences)

        rows = []
        for class_name, lessons in day.class_subs.items():
            if wanted is not None and class_name.casefold() != wanted:
                continue
            for lesson in lessons:
                shift = f" -> {lesson.shift_target}" if lesson.shift_target else ""
                rows.append(
                    [
                        class_name,
                        str(lesson.hour),
                        lesson.group or "-",
                        lesson.subject or "-",
                        lesson.room or "-",
                        lesson.substituting_teacher or "-",
                        lesson.missing_teacher or "-",
                        (_flags(lesson) + shift) or "-",
                        lesson.note or "",
                    ]
                )

        if not rows:
            blocks.append(f"{title}\n(no substitutions)")
            continue

        widths = [len(h) for h in headers]
        for row in rows:
            for i, cell in enumerate(row):
                widths[i] = max(widths[i], len(cell))

        header_line = " | ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
        separator = "-+-".join("-" * w for w in widths)
        row_lines = [
            " | ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)).rstrip()
            for row in rows
        ]
        blocks.append("\n".join([title, header_line.rstrip(), separator, *row_lines]))

    if not schedule.daily_schedules:
        blocks.append("(no days in bulletin)")
    return "\n\n".join(blocks)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    config = get_config()
    setup_logging(
        json_output=config.log_json if args.json_logs is None else args.json_logs,
        log_level=args.log_level or config.log_level,
    )

    class_symbol = args.class_symbol or config.supl_class_symbol or None

    if args.file is not None:
        schedule = parse_complete_schedule(args.file.read_bytes())
        log.info("bulletin_loaded", path=str(args.file))
    else:
        client = SubstitutionClient.from_config(config)
        if args.url:
            client.set_endpoint_url(args.url)
        schedule = client.fetch_schedule()

    if args.table:
        print(format_table(schedule, class_symbol))
    elif class_symbol:
        output = [
            {
                "date": date,
                "lessons": [lesson.model_dump(mode="json", by_alias=True) for lesson in lessons],
            }
            for date, lessons in schedule.for_class(class_symbol)
        ]
        print(json.dumps(output, indent=2, ensure_ascii=False))
    else:
        print(json.dumps(schedule.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)
