"""Lesson text parser - turns one bulletin entry into a SubstitutedLesson.

Entries are written by hand and follow no fixed grammar:

    "M 16 (Mu) odpadá"            maths in 16, Mu absent, lesson dropped
    "F 16 Rk(Lc)+"                physics in 16, Rk stands in for Lc
    "1/2 A 6 Ju(Ry)+"             first half of the class only
    "C 15 Mr(Bo) posun za 6. h."  shifted to the 6th hour

Parsing never fails. Anything a rule does not recognise stays in ``note``
(or is dropped as noise) and the untouched entry is kept in ``original_text``.
"""

from jecnasupl.models import SubstitutedLesson
from jecnasupl.parser.rules import (
    EXTRACTION_RULES,
    evaluate_flags,
    normalize_whitespace,
)

GYM = "TV"
MAX_SUBJECT_LENGTH = 4


def classify_residual(text: str) -> tuple[str | None, str | None]:
    """Split what the extraction rules left over into subject and note.

    A short capitalised first token ("M", "ZE", "EnM") is the subject code;
    everything else is note text.

    Returns:
        (subject, note), either of which may be None.
    """
    tokens = text.split()
    subject = None
    if tokens and len(tokens[0]) <= MAX_SUBJECT_LENGTH and tokens[0][0].isupper():
        subject = tokens.pop(0)
    note = " ".join(tokens).strip() or None
    return subject, note


def parse_substitution_text(text: str, hour: int) -> SubstitutedLesson:
    """Parse a single free-text substitution entry.

    Args:
        text: Entry as it appears in the class's array, e.g. "F 16 Rk(Lc)+".
        hour: 1-based lesson hour (array index + 1).

    Returns:
        SubstitutedLesson with every recognised field filled in. Fields no
        rule matched are None.
    """
    normalized = normalize_whitespace(text)
    flags = evaluate_flags(normalized, text)

    working = normalized
    found: dict[str, str] = {}
    for rule in EXTRACTION_RULES:
        working, captured = rule.apply(working, flags)
        found.update(captured)

    subject, note = classify_residual(working)
    room = found.get("room")
    is_dropped = flags.is_dropped

    # The gym is both a subject code and a room
    if subject is not None and subject.upper() == GYM:
        room = GYM
    elif room == GYM and subject is None:
        subject = GYM

    if room == "0":
        room = None
        is_dropped = True

    if subject is not None and (subject == "+" or subject.lower() == "uč"):
        subject = None

    if note is not None and (not note.strip() or note == "+"):
        note = None

    return SubstitutedLesson(
        hour=hour,
        group=found.get("group"),
        subject=subject,
        room=room,
        substituting_teacher=found.get("substituting_teacher"),
        missing_teacher=found.get("missing_teacher"),
        is_dropped=is_dropped,
        is_joined=flags.is_joined,
        is_separated=flags.is_separated,
        room_changed=flags.room_changed,
        is_shifted=flags.is_shifted,
        shift_target=found.get("shift_target"),
        note=note,
        original_text=text,
    )
