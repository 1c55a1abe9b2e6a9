"""Extraction rules for free-text substitution entries.

A bulletin entry such as ``"C 15 Mr(Bo) posun za 6. h."`` is parsed in two
passes over declarative data:

  FLAG_RULES        independent predicates over a frozen snapshot of the
                    normalized text (dropped, joined, separated, ...)
  EXTRACTION_RULES  ordered rules; each one searches the working text,
                    captures named groups into lesson fields and removes
                    what it matched, so later rules never see it again

Rule order matters and is the order of EXTRACTION_RULES. Within a rule,
patterns are alternatives tried in priority order and the first match wins.
"""

import re
from dataclasses import dataclass
from typing import Callable

_WHITESPACE = re.compile(r"\s+")

# Teacher codes use Czech letters ("Šr", "Čk")
_UPPER = "A-ZÁČĎÉĚÍŇÓŘŠŤÚŮÝŽ"
_LOWER = "a-záčďéěíňóřšťúůýž"

# Checked by FLAG_RULES, then removed by KEYWORD_STRIP_RULE
DROPPED_KEYWORDS = ("odpadá", "odučeno")
LUNCH_KEYWORD = "oběd"
JOINED_KEYWORDS = ("spoj",)
SEPARATED_KEYWORDS = ("rozděl",)
ROOM_CHANGED_KEYWORDS = ("změna", "výměna")
SHIFTED_KEYWORDS = ("posun",)
NOISE_KEYWORDS = ("úklid", "vysvědčení", "vysv", "přednáška", "exkurze")

STRIPPED_KEYWORDS = (
    DROPPED_KEYWORDS
    + (LUNCH_KEYWORD,)
    + JOINED_KEYWORDS
    + SEPARATED_KEYWORDS
    + ROOM_CHANGED_KEYWORDS
    + SHIFTED_KEYWORDS
    + NOISE_KEYWORDS
)

_STANDALONE_ZERO = re.compile(r"(?<!\S)0(?!\S)")


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs (newlines included) to single spaces and trim."""
    return _WHITESPACE.sub(" ", text).strip()


@dataclass(frozen=True)
class LessonFlags:
    is_dropped: bool = False
    is_joined: bool = False
    is_separated: bool = False
    room_changed: bool = False
    is_shifted: bool = False


def _zero_or_lunch(snapshot: str, raw: str) -> bool:
    if _STANDALONE_ZERO.search(snapshot):
        return True
    # Lunch only cancels a lesson when no teacher pair "(Xx)" was given
    return LUNCH_KEYWORD in snapshot.casefold() and "(" not in raw


@dataclass(frozen=True)
class FlagRule:
    """Sets ``flag`` when the snapshot contains a keyword (case-insensitive)
    or when the optional ``extra`` predicate holds."""

    flag: str
    keywords: tuple[str, ...]
    extra: Callable[[str, str], bool] | None = None  # (snapshot, raw text)

    def matches(self, snapshot: str, raw: str) -> bool:
        lowered = snapshot.casefold()
        if any(keyword in lowered for keyword in self.keywords):
            return True
        return self.extra is not None and self.extra(snapshot, raw)


FLAG_RULES: tuple[FlagRule, ...] = (
    FlagRule("is_dropped", DROPPED_KEYWORDS, extra=_zero_or_lunch),
    FlagRule("is_joined", JOINED_KEYWORDS),
    FlagRule("is_separated", SEPARATED_KEYWORDS),
    FlagRule("room_changed", ROOM_CHANGED_KEYWORDS),
    FlagRule("is_shifted", SHIFTED_KEYWORDS),
)


def evaluate_flags(snapshot: str, raw: str) -> LessonFlags:
    """Evaluate every flag rule against the same normalized snapshot.

    Args:
        snapshot: Whitespace-normalized entry, before anything was removed.
        raw: Entry exactly as received.
    """
    return LessonFlags(**{rule.flag: rule.matches(snapshot, raw) for rule in FLAG_RULES})


@dataclass(frozen=True)
class ExtractionRule:
    """One stage of the waterfall.

    Attributes:
        name: Stage name, used in tests and debugging.
        patterns: Alternatives in priority order; the first that matches wins.
            Named groups listed in ``fields`` become lesson fields.
        fields: Lesson field names captured from named groups.
        consume_all: Remove every match of every pattern and capture nothing.
        when: Name of a LessonFlags flag that must be set for the rule to run.
    """

    name: str
    patterns: tuple[re.Pattern[str], ...]
    fields: tuple[str, ...] = ()
    consume_all: bool = False
    when: str | None = None

    def apply(self, text: str, flags: LessonFlags) -> tuple[str, dict[str, str]]:
        """Run the rule on the working text.

        Returns:
            The working text with the matched span(s) removed, and the
            captured fields (empty when nothing matched).
        """
        if self.when is not None and not getattr(flags, self.when):
            return text, {}

        if self.consume_all:
            for pattern in self.patterns:
                text = pattern.sub(" ", text)
            return normalize_whitespace(text), {}

        for pattern in self.patterns:
            match = pattern.search(text)
            if match is None:
                continue
            captured = {
                name: match.group(name)
                for name in self.fields
                if name in pattern.groupindex and match.group(name) is not None
            }
            remaining = text[: match.start()] + " " + text[match.end() :]
            return normalize_whitespace(remaining), captured

        return text, {}


def _keyword_alternation(keywords: tuple[str, ...]) -> str:
    # Longest first so "vysvědčení" wins over "vysv"
    ordered = sorted(keywords, key=len, reverse=True)
    return "|".join(re.escape(keyword) for keyword in ordered)


# "(Lc)" is always the missing teacher; a two-letter code right before it,
# as in "Rk(Lc)" or "Rk (Lc)", is the substitute. "TV" never matches the
# substitute pattern, so "TV (Lc)" keeps TV for the room rule, and "(TV)"
# or "(TH)" is a gym, not a missing teacher.
MISSING_TEACHER_RULE = ExtractionRule(
    name="missing_teacher",
    patterns=(
        re.compile(
            rf"(?:(?<!\S)(?P<substituting_teacher>[{_UPPER}][{_LOWER}]) ?)?"
            rf"\((?!T[VH]\))(?P<missing_teacher>[{_UPPER}][{_UPPER}{_LOWER}]?)\)"
        ),
    ),
    fields=("substituting_teacher", "missing_teacher"),
)

_POSUN = r"(?<!\S)\S*?posun\S*"

SHIFT_TARGET_RULE = ExtractionRule(
    name="shift_target",
    patterns=(
        # "posun za 6. h.", "posun z 3.h", "posun 2. h."
        re.compile(
            _POSUN + r"\s+(?:(?:za|z)\s+)?(?P<shift_target>\d+\.?\s?h\.?)(?!\w)",
            re.IGNORECASE,
        ),
        # "posun CIT": the token right after posun, even a lone "za"
        re.compile(_POSUN + r"\s+(?P<shift_target>\S+)", re.IGNORECASE),
        # bare "posun" at the end
        re.compile(_POSUN, re.IGNORECASE),
    ),
    fields=("shift_target",),
    when="is_shifted",
)

ROOM_RULE = ExtractionRule(
    name="room",
    patterns=(
        # "uč. 8", "uč.12a"
        re.compile(r"(?<!\w)uč\.?\s?(?P<room>\d+[a-z]?)(?!\w)", re.IGNORECASE),
        # "16", "1", "17a"
        re.compile(r"(?<!\S)(?P<room>\d{1,3}|\d{1,2}[a-z])(?!\S)"),
        # gym
        re.compile(r"(?<!\S)(?P<room>TV|TH)(?!\S)"),
    ),
    fields=("room",),
)

GROUP_RULE = ExtractionRule(
    name="group",
    patterns=(re.compile(r"(?<![\w/])(?P<group>\d+/\d+)(?![\w/])"),),
    fields=("group",),
)

KEYWORD_STRIP_RULE = ExtractionRule(
    name="keyword_strip",
    patterns=(
        # whole token, so "spoj.úklid" and "rozděl." leave nothing behind
        re.compile(
            rf"(?<!\S)\S*?(?:{_keyword_alternation(STRIPPED_KEYWORDS)})\S*",
            re.IGNORECASE,
        ),
        re.compile(r"(?<!\S)\++(?!\S)"),
        # lone "0" already set is_dropped
        _STANDALONE_ZERO,
    ),
    consume_all=True,
)

EXTRACTION_RULES: tuple[ExtractionRule, ...] = (
    MISSING_TEACHER_RULE,
    SHIFT_TARGET_RULE,
    ROOM_RULE,
    GROUP_RULE,
    KEYWORD_STRIP_RULE,
)
