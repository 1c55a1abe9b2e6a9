import pytest

from jecnasupl.parser.lesson import classify_residual, parse_substitution_text
from jecnasupl.parser.rules import STRIPPED_KEYWORDS

REAL_ENTRIES = [
    "M 16 (Mu) odpadá",
    "M 16 Kp(Mu)+",
    "F 16 Rk(Lc)+",
    "Ch 1 (Bo) odpadá",
    "ZE 1 Ki(Ht) spoj.úklid",
    "Ele 3 Zn(Su)+",
    "DC L2,D6 Pt,Kt(Kr) rozděl. méně žáků.",
    "F 15 Rk(Sv)+",
    "C 15 Mr(Bo) posun za 6. h.",
    "M 15 Hr posun úklid",
    "1/2 A 6 Ju(Ry)+",
    "IT 17ab Me(Bo)+",
    "EnM 6 Nv(Su)+",
    "TV (Lc) odpadá",
    "uč. 8 přednáška PČR Vl",
    "2/2 WA 17a Pp(PV)+",
    "posun CIT 1/2 Nm 17b",
    "2/2 CIT L1(Sv) odpadá",
    "1/2 CIT D6 Pr(Sv)+, 2/2 Nm 17b",
    "2/2 PSS 8a Jk(Ms)",
    "A 23,24 Kn,Ir posun",
    "PSS 22 Jk(Ms)+",
    "1/2 C 27 Ja(Ry)+ úklid",
    "DS 13 Ka(Su)+",
    "2/2 CEL L4 Nv(Ry)",
    "M 21 Ng(Mu)+",
    "oběd",
    "vysvědčení",
    "Ch 3 Bo(Ht) výměna uč.",
]


def _set_fields(lesson) -> dict:
    """Fields that differ from their defaults, ignoring hour and original text."""
    dumped = lesson.model_dump(exclude={"hour", "original_text"})
    return {name: value for name, value in dumped.items() if value not in (None, False)}


def test_dropped_lesson_with_missing_teacher_only():
    lesson = parse_substitution_text("M 16 (Mu) odpadá", 2)

    assert lesson.hour == 2
    assert _set_fields(lesson) == {
        "subject": "M",
        "room": "16",
        "missing_teacher": "Mu",
        "is_dropped": True,
    }


def test_substitute_teacher_directly_before_parenthesis():
    lesson = parse_substitution_text("F 16 Rk(Lc)+", 4)

    assert _set_fields(lesson) == {
        "subject": "F",
        "room": "16",
        "substituting_teacher": "Rk",
        "missing_teacher": "Lc",
    }


def test_joined_lesson_with_cleaning_duty():
    lesson = parse_substitution_text("ZE 1 Ki(Ht) spoj.úklid", 1)

    assert _set_fields(lesson) == {
        "subject": "ZE",
        "room": "1",
        "substituting_teacher": "Ki",
        "missing_teacher": "Ht",
        "is_joined": True,
    }


def test_group_is_extracted():
    lesson = parse_substitution_text("1/2 A 6 Ju(Ry)+", 1)

    assert _set_fields(lesson) == {
        "group": "1/2",
        "subject": "A",
        "room": "6",
        "substituting_teacher": "Ju",
        "missing_teacher": "Ry",
    }


def test_shift_target():
    lesson = parse_substitution_text("C 15 Mr(Bo) posun za 6. h.", 3)

    assert _set_fields(lesson) == {
        "subject": "C",
        "room": "15",
        "substituting_teacher": "Mr",
        "missing_teacher": "Bo",
        "is_shifted": True,
        "shift_target": "6. h.",
    }


def test_shift_without_target():
    lesson = parse_substitution_text("A 23,24 Kn,Ir posun", 1)

    assert lesson.is_shifted is True
    assert lesson.shift_target is None
    assert lesson.subject == "A"
    assert lesson.note == "23,24 Kn,Ir"


def test_space_between_substitute_and_missing_teacher():
    lesson = parse_substitution_text("M 16 Kp (Mu)", 1)

    assert lesson.substituting_teacher == "Kp"
    assert lesson.missing_teacher == "Mu"
    assert lesson.subject == "M"
    assert lesson.note is None


def test_comma_separated_teachers_are_not_a_substitute():
    lesson = parse_substitution_text("DC L2,D6 Pt,Kt(Kr) rozděl. méně žáků.", 5)

    assert lesson.missing_teacher == "Kr"
    assert lesson.substituting_teacher is None
    assert lesson.is_separated is True
    assert lesson.subject == "DC"
    assert lesson.note == "L2,D6 Pt,Kt méně žáků."


def test_gym_in_parentheses_is_not_a_missing_teacher():
    lesson = parse_substitution_text("X (TV)", 1)

    assert lesson.missing_teacher is None
    assert lesson.substituting_teacher is None
    assert lesson.subject == "X"


def test_uppercase_missing_teacher_code():
    lesson = parse_substitution_text("2/2 WA 17a Pp(PV)+", 1)

    assert _set_fields(lesson) == {
        "group": "2/2",
        "subject": "WA",
        "room": "17a",
        "substituting_teacher": "Pp",
        "missing_teacher": "PV",
    }


def test_explicit_room_marker():
    lesson = parse_substitution_text("uč. 8 přednáška PČR Vl", 1)

    assert lesson.room == "8"
    assert lesson.subject == "PČR"
    assert lesson.note == "Vl"


def test_gym_as_room_becomes_subject():
    lesson = parse_substitution_text("TV (Lc) odpadá", 6)

    assert _set_fields(lesson) == {
        "subject": "TV",
        "room": "TV",
        "missing_teacher": "Lc",
        "is_dropped": True,
    }


def test_gym_as_subject_forces_room():
    lesson = parse_substitution_text("TV 16 Ko(Sv)", 1)

    assert lesson.subject == "TV"
    assert lesson.room == "TV"
    assert lesson.substituting_teacher == "Ko"


@pytest.mark.parametrize("text", ["M 0 (Mu)", "uč. 0 Ch"])
def test_room_zero_means_dropped(text):
    lesson = parse_substitution_text(text, 1)

    assert lesson.room is None
    assert lesson.is_dropped is True


def test_leftover_zero_is_not_a_note():
    lesson = parse_substitution_text("M 16 0", 1)

    assert _set_fields(lesson) == {
        "subject": "M",
        "room": "16",
        "is_dropped": True,
    }


def test_zero_inside_a_room_number_is_not_a_drop():
    lesson = parse_substitution_text("M 20 Kp(Mu)", 1)

    assert lesson.room == "20"
    assert lesson.is_dropped is False


def test_lunch_drops_only_without_teacher_pair():
    assert parse_substitution_text("oběd", 5).is_dropped is True
    assert parse_substitution_text("Oběd", 5).is_dropped is True
    assert parse_substitution_text("M 16 Kp(Mu) oběd", 5).is_dropped is False


def test_room_change_flag():
    lesson = parse_substitution_text("Ch 3 Bo(Ht) výměna", 1)

    assert lesson.room_changed is True
    assert lesson.room == "3"
    assert lesson.note is None


def test_flags_are_independent():
    lesson = parse_substitution_text("M 16 Kp(Mu) spoj. posun za 2. h.", 1)

    assert lesson.is_joined is True
    assert lesson.is_shifted is True
    assert lesson.shift_target == "2. h."
    assert lesson.is_dropped is False


def test_whitespace_is_normalized_but_original_text_kept():
    raw = "  M\n16   (Mu)\todpadá "
    lesson = parse_substitution_text(raw, 2)

    assert lesson.original_text == raw
    assert lesson.subject == "M"
    assert lesson.room == "16"
    assert lesson.missing_teacher == "Mu"
    assert lesson.is_dropped is True


@pytest.mark.parametrize("text", ["", "+", "   ", "(((", "))(", "posun", "1/2"])
def test_unrecognised_input_never_raises(text):
    lesson = parse_substitution_text(text, 7)

    assert lesson.hour == 7
    assert lesson.original_text == text
    assert lesson.note != "+"
    assert lesson.subject != "+"


def test_plus_only_entry_has_no_note():
    lesson = parse_substitution_text("+", 1)

    assert _set_fields(lesson) == {}


@pytest.mark.parametrize("text", REAL_ENTRIES)
def test_parsing_is_deterministic(text):
    assert parse_substitution_text(text, 3) == parse_substitution_text(text, 3)


@pytest.mark.parametrize("text", REAL_ENTRIES)
def test_note_never_contains_status_keywords(text):
    note = parse_substitution_text(text, 1).note or ""

    for keyword in STRIPPED_KEYWORDS:
        assert keyword not in note.casefold()


@pytest.mark.parametrize("text", REAL_ENTRIES)
def test_gym_subject_and_room_agree(text):
    lesson = parse_substitution_text(text, 1)

    if lesson.subject == "TV":
        assert lesson.room == "TV"


def test_classify_residual():
    assert classify_residual("EnM extra words") == ("EnM", "extra words")
    assert classify_residual("lab M") == (None, "lab M")
    assert classify_residual("Dlouhy text") == (None, "Dlouhy text")
    assert classify_residual("") == (None, None)
