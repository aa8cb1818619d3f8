"""Deterministic entity extraction using simple regex rules."""

from __future__ import annotations

import calendar
import re
from datetime import date, timedelta

from hostpilot.cortex.types import ExtractedEntities

MONTHS: dict[str, int] = {
    name.lower(): index for index, name in enumerate(calendar.month_name) if name
}
MONTHS.update({name.lower(): index for index, name in enumerate(calendar.month_abbr) if name})
MONTHS["sept"] = 9

MIN_YEAR = 1900
MAX_YEAR = 2100

WEEKDAYS = {name.lower() for name in calendar.day_name} | {name.lower() for name in calendar.day_abbr}

_MONTH_ALTERNATION = "|".join(sorted(MONTHS, key=len, reverse=True))

ISO_DATE_PATTERN = re.compile(r"\b(?P<year>\d{4})-(?P<month>\d{1,2})-(?P<day>\d{1,2})\b")
YEAR_MONTH_PATTERN = re.compile(r"\b(?P<year>\d{4})-(?P<month>\d{1,2})\b(?!-\d)")
MONTH_NAME_PATTERN = re.compile(
    rf"(?P<prefix>\b\w+\s+)?\b(?P<month>{_MONTH_ALTERNATION})\b\.?(?:,?\s+(?P<year>\d{{4}})\b)?",
    re.IGNORECASE,
)
YEAR_PATTERN = re.compile(r"\b(?P<year>19\d{2}|20\d{2})\b")
RELATIVE_MONTH_PATTERN = re.compile(r"\b(?P<which>this|last|next|previous)\s+month\b", re.IGNORECASE)
RELATIVE_WEEK_PATTERN = re.compile(r"\b(?P<which>this|last|next|previous)\s+week\b", re.IGNORECASE)
RELATIVE_DAY_PATTERN = re.compile(r"\b(?P<which>today|tomorrow|yesterday|tonight)\b", re.IGNORECASE)

QUOTED_NAME_PATTERN = re.compile(r"[\"“](?P<name>[^\"”]{2,80})[\"”]")
PREFIXED_NAME_PATTERN = re.compile(
    r"\b(?P<name>(?:Villa|Casa|Baan|Ban|Chalet|Cottage|Residence|Resort|Apartment|Condo|House)"
    r"(?:\s+[A-Z][\w'&-]*)+)"
)
PREPOSITION_NAME_PATTERN = re.compile(
    r"\b(?:for|at|in|of|about|on)\s+(?:the\s+)?(?P<name>[A-Z][\w'&-]*(?:\s+[A-Z][\w'&-]*)*)"
)

# A month name is only trusted as "May" when it reads like a date.
_AMBIGUOUS_MONTHS = {"may", "mar", "jan", "jun", "dec"}
_DATE_PREPOSITIONS = {"in", "for", "during", "of", "since", "until", "from", "to", "by", "before", "after"}

_NAME_STOPWORDS = {"I", "Q1", "Q2", "Q3", "Q4", "AM", "PM"}

STATUS_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("in-progress", re.compile(r"\b(?:in[- ]progress|ongoing)\b", re.IGNORECASE)),
    ("checked-in", re.compile(r"\bchecked[- ]in\b", re.IGNORECASE)),
    ("checked-out", re.compile(r"\bchecked[- ]out\b", re.IGNORECASE)),
    ("pending", re.compile(r"\b(?:pending|outstanding|unpaid)\b", re.IGNORECASE)),
    ("completed", re.compile(r"\b(?:completed|finished)\b", re.IGNORECASE)),
    ("cancelled", re.compile(r"\bcancell?ed\b", re.IGNORECASE)),
    ("overdue", re.compile(r"\boverdue\b", re.IGNORECASE)),
    ("paid", re.compile(r"\bpaid\b", re.IGNORECASE)),
    ("confirmed", re.compile(r"\bconfirmed\b", re.IGNORECASE)),
    ("uploaded", re.compile(r"\buploaded\b", re.IGNORECASE)),
)

UTILITY_TYPE_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("electricity", re.compile(r"\b(?:electric(?:ity)?|power)\b", re.IGNORECASE)),
    ("water", re.compile(r"\bwater\b", re.IGNORECASE)),
    ("internet", re.compile(r"\b(?:internet|wi-?fi|broadband)\b", re.IGNORECASE)),
    ("gas", re.compile(r"\bgas\b", re.IGNORECASE)),
)

FINANCE_TYPE_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("income", re.compile(r"\b(?:income|revenue|earnings?)\b", re.IGNORECASE)),
    ("expense", re.compile(r"\b(?:expenses?|costs?|spending|spent)\b", re.IGNORECASE)),
    ("commission", re.compile(r"\bcommissions?\b", re.IGNORECASE)),
    ("payout", re.compile(r"\bpayouts?\b", re.IGNORECASE)),
    ("fee", re.compile(r"\bfees?\b", re.IGNORECASE)),
)


def extract_entities(question: str, *, today: date | None = None) -> ExtractedEntities:
    """Extract structured fields from a question.

    Relative expressions ("last month", "tomorrow") resolve against `today`,
    which defaults to the current date. Anything that cannot be parsed into a
    valid value is left unset.
    """

    text = (question or "").strip()
    if not text:
        return ExtractedEntities()
    reference = today or date.today()

    month, year = _extract_month_year(text, reference)
    date_from, date_to = _extract_date_range(text, reference)
    return ExtractedEntities(
        property_name=_extract_property_name(text),
        utility_type=_first_match(text, UTILITY_TYPE_PATTERNS),
        status=_first_match(text, STATUS_PATTERNS),
        month=month,
        year=year,
        date_from=date_from,
        date_to=date_to,
        finance_type=_first_match(text, FINANCE_TYPE_PATTERNS),
    )


def _extract_property_name(text: str) -> str | None:
    quoted = QUOTED_NAME_PATTERN.search(text)
    if quoted:
        name = _clean_phrase(quoted.group("name"))
        if name:
            return name

    for pattern in (PREFIXED_NAME_PATTERN, PREPOSITION_NAME_PATTERN):
        for match in pattern.finditer(text):
            name = _trim_name_tokens(match.group("name"))
            if name:
                return name
    return None


def _trim_name_tokens(phrase: str) -> str | None:
    """Cut a capitalized phrase at the first token that cannot be part of a name."""

    kept: list[str] = []
    for token in phrase.split():
        bare = token.strip(".,:;!?'\"")
        if not bare or bare in _NAME_STOPWORDS or bare.lower() in MONTHS or bare.lower() in WEEKDAYS:
            break
        kept.append(bare)
    name = " ".join(kept)
    return name or None


def _extract_month_year(text: str, reference: date) -> tuple[int | None, int | None]:
    for match in YEAR_MONTH_PATTERN.finditer(text):
        month = int(match.group("month"))
        if 1 <= month <= 12:
            return month, _valid_year(int(match.group("year")))

    for match in MONTH_NAME_PATTERN.finditer(text):
        token = match.group("month").lower()
        year_text = match.group("year")
        if token in _AMBIGUOUS_MONTHS and not year_text:
            prefix = (match.group("prefix") or "").strip().lower()
            if prefix not in _DATE_PREPOSITIONS:
                continue
        return MONTHS[token], _valid_year(int(year_text)) if year_text else _standalone_year(text)

    relative = RELATIVE_MONTH_PATTERN.search(text)
    if relative:
        offset = {"this": 0, "next": 1}.get(relative.group("which").lower(), -1)
        shifted_year, shifted_month = divmod(reference.year * 12 + reference.month - 1 + offset, 12)
        return shifted_month + 1, shifted_year

    return None, _standalone_year(text)


def _standalone_year(text: str) -> int | None:
    without_dates = ISO_DATE_PATTERN.sub(" ", text)
    match = YEAR_PATTERN.search(without_dates)
    return int(match.group("year")) if match else None


def _extract_date_range(text: str, reference: date) -> tuple[date | None, date | None]:
    explicit: list[date] = []
    for match in ISO_DATE_PATTERN.finditer(text):
        try:
            explicit.append(
                date(int(match.group("year")), int(match.group("month")), int(match.group("day")))
            )
        except ValueError:
            continue
    if explicit:
        return min(explicit), max(explicit)

    relative_day = RELATIVE_DAY_PATTERN.search(text)
    if relative_day:
        offset = {"tomorrow": 1, "yesterday": -1}.get(relative_day.group("which").lower(), 0)
        day = reference + timedelta(days=offset)
        return day, day

    relative_week = RELATIVE_WEEK_PATTERN.search(text)
    if relative_week:
        offset = {"this": 0, "next": 7}.get(relative_week.group("which").lower(), -7)
        start = reference - timedelta(days=reference.weekday()) + timedelta(days=offset)
        return start, start + timedelta(days=6)

    return None, None


def _first_match(text: str, patterns: tuple[tuple[str, re.Pattern[str]], ...]) -> str | None:
    """Return the canonical value whose pattern occurs earliest in the text."""

    best: tuple[int, str] | None = None
    for value, pattern in patterns:
        match = pattern.search(text)
        if match and (best is None or match.start() < best[0]):
            best = (match.start(), value)
    return best[1] if best else None


def _clean_phrase(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip(" .,:;\"'")


def _valid_year(year: int) -> int | None:
    return year if MIN_YEAR <= year <= MAX_YEAR else None
