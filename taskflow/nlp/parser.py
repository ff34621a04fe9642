from __future__ import annotations

import enum
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

logger = logging.getLogger(__name__)


class Priority(str, enum.Enum):
    P1 = "P1"
    P2 = "P2"
    P3 = "P3"
    P4 = "P4"


@dataclass(frozen=True)
class ParsedTask:
    title: str
    assignee: str = ""  # "" means unassigned
    due: datetime | None = None  # naive, host-local
    priority: Priority = Priority.P3


_MONTHS = (
    "january|february|march|april|may|june|july|august|september|october|november|december"
    "|jan|feb|mar|apr|jun|jul|aug|sept|sep|oct|nov|dec"
)
_WEEKDAYS = "monday|tuesday|wednesday|thursday|friday|saturday|sunday|mon|tues|tue|wed|thurs|thu|fri|sat|sun"

# keyed by three-letter prefix
MONTH_NUMBERS = {name[:3]: i for i, name in enumerate(_MONTHS.split("|")[:12], start=1)}
WEEKDAY_NUMBERS = {name[:3]: i for i, name in enumerate(_WEEKDAYS.split("|")[:7])}

PRIORITY_PAT = re.compile(r"\b(p[1-4])\b", re.IGNORECASE)

_CONNECTOR = r"\b(?:by|to|for|assign(?:ed)?\s+to|give\s+to)\s+"
# a name word is never date vocabulary ("tomorrow", "next", "April 15", ...)
_NAME_WORD = rf"(?!(?:tomorrow|today|next|this)\b)(?!(?:{_MONTHS})\s+\d)[a-z]+"
_BOUNDARY = r"(?=\s+(?:(?:by|on|at|before|due|until|tomorrow|today|next|this)\b|\d))"

# first match wins
ASSIGNEE_PATTERNS = [
    # "... to Alice tomorrow", "... for Bob Smith at 5pm"
    re.compile(rf"{_CONNECTOR}({_NAME_WORD}(?:\s+{_NAME_WORD})*?)\b{_BOUNDARY}", re.IGNORECASE),
    # "... assigned to Carol" at the end of the sentence
    re.compile(rf"{_CONNECTOR}({_NAME_WORD}(?:\s+{_NAME_WORD})*)$", re.IGNORECASE),
]

TIME_PATTERNS = [
    re.compile(r"\b(?P<hour>\d{1,2}):(?P<minute>\d{2})\s*(?P<meridiem>am|pm)\b", re.IGNORECASE),
    re.compile(r"\b(?P<hour>\d{1,2})\s*(?P<meridiem>am|pm)\b", re.IGNORECASE),
    re.compile(r"\b(?P<hour>\d{1,2}):(?P<minute>\d{2})\b"),
]


def _midnight(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def _add_months(day: datetime, months: int) -> datetime:
    # Keeps the day of month, spilling into the following month when it does not exist (Jan 31 + 1 -> Mar 3).
    index = day.month - 1 + months
    first = day.replace(year=day.year + index // 12, month=index % 12 + 1, day=1)
    return first + timedelta(days=day.day - 1)


def _next_period(m: re.Match, now: datetime) -> datetime:
    if m["unit"].lower() == "week":
        return _midnight(now) + timedelta(days=7)
    return _add_months(_midnight(now), 1)


def _this_period(m: re.Match, now: datetime) -> datetime:
    days = 3 if m["unit"].lower() == "week" else 7
    return _midnight(now) + timedelta(days=days)


def _explicit_date(m: re.Match, now: datetime) -> datetime:
    """Month/day in the current year, or next year if that has already gone by."""
    month = m["month"]
    month = int(month) if month.isdigit() else MONTH_NUMBERS[month[:3].lower()]
    candidate = datetime(now.year, month, int(m["day"]))
    if candidate < now:
        candidate = candidate.replace(year=now.year + 1)
    return candidate


def _in_days(m: re.Match, now: datetime) -> datetime:
    return _midnight(now) + timedelta(days=int(m["count"]))


def _next_weekday(m: re.Match, now: datetime) -> datetime:
    target = WEEKDAY_NUMBERS[m["weekday"][:3].lower()]
    ahead = (target - now.weekday()) % 7 or 7
    return _midnight(now) + timedelta(days=ahead)


Resolver = Callable[[re.Match, datetime], datetime]

# Ordered; the first pattern that matches anywhere in the text decides the date.
DATE_RULES: list[tuple[re.Pattern, Resolver]] = [
    (re.compile(r"\btomorrow\b", re.I), lambda m, now: _midnight(now) + timedelta(days=1)),
    (re.compile(r"\btoday\b", re.I), lambda m, now: _midnight(now)),
    (re.compile(r"\bnext\s+(?P<unit>week|month)\b", re.I), _next_period),
    (re.compile(r"\bthis\s+(?P<unit>week|month)\b", re.I), _this_period),
    (re.compile(rf"\b(?P<day>\d{{1,2}})(?:st|nd|rd|th)?\s+(?P<month>{_MONTHS})\b", re.I), _explicit_date),
    (re.compile(rf"\b(?P<month>{_MONTHS})\s+(?P<day>\d{{1,2}})(?:st|nd|rd|th)?\b", re.I), _explicit_date),
    (re.compile(r"\b(?P<month>\d{1,2})/(?P<day>\d{1,2})\b"), _explicit_date),
    (re.compile(r"\bin\s+(?P<count>\d+)\s+days?\b", re.I), _in_days),
    (re.compile(rf"\bnext\s+(?P<weekday>{_WEEKDAYS})\b", re.I), _next_weekday),
]

# lead-ins and connectors are dropped only together with the date fragment they introduce
_LEAD_IN = r"(?:\b(?:assign(?:ed)?\s+to|give\s+to|at|on|due|until|before|by|to|for)\s+)*"
TITLE_NOISE = [
    re.compile(_LEAD_IN + fragment, re.IGNORECASE)
    for fragment in (
        r"\btomorrow\b",
        r"\btoday\b",
        rf"\bnext\s+(?:week|month|{_WEEKDAYS})\b",
        r"\bthis\s+(?:week|month)\b",
        r"\b\d{1,2}(?::\d{2})?\s*(?:am|pm)\b",
        r"\b\d{1,2}:\d{2}\b",
        rf"\b\d{{1,2}}(?:st|nd|rd|th)?\s+(?:{_MONTHS})\b",
        rf"\b(?:{_MONTHS})\s+\d{{1,2}}(?:st|nd|rd|th)?\b",
        r"\b\d{1,2}/\d{1,2}\b",
        r"\bin\s+\d+\s+days?\b",
        r"\b(?:at|on)\s+\d{1,2}(?:st|nd|rd|th)?\b",
    )
]
# stray lead-ins with nothing date-like after them
TITLE_NOISE.append(re.compile(r"\b(?:due|until|before)\s+", re.IGNORECASE))
LEADING_CONJUNCTION = re.compile(r"^(?:and\b|&)\s*", re.IGNORECASE)
DANGLING_LEAD_IN = re.compile(r"\s*\b(?:due|until|before)$", re.IGNORECASE)


def _cut(text: str, m: re.Match) -> str:
    return (text[: m.start()] + text[m.end() :]).strip()


def extract_priority(text: str) -> tuple[Priority, str]:
    m = PRIORITY_PAT.search(text)
    if not m:
        return Priority.P3, text
    return Priority(m.group(1).upper()), _cut(text, m)


def extract_assignee(text: str) -> tuple[str, str]:
    for pattern in ASSIGNEE_PATTERNS:
        m = pattern.search(text)
        if m:
            return m.group(1).strip(), _cut(text, m)
    return "", text


def _find_time(text: str) -> tuple[int, int] | None:
    for pattern in TIME_PATTERNS:
        m = pattern.search(text)
        if not m:
            continue
        parts = m.groupdict()
        hour = int(parts["hour"])
        minute = int(parts.get("minute") or 0)
        meridiem = (parts.get("meridiem") or "").lower()
        if meridiem == "pm" and hour != 12:
            hour += 12
        elif meridiem == "am" and hour == 12:
            hour = 0
        return hour, minute
    return None


def _find_date(text: str) -> tuple[re.Match, Resolver] | None:
    for pattern, resolve in DATE_RULES:
        m = pattern.search(text)
        if m:
            return m, resolve
    return None


def extract_due(text: str, now: datetime) -> datetime | None:
    """
    Find a due instant in `text` without modifying it.
    Date only -> midnight; time only -> today at that time; neither -> None.
    """
    clock = _find_time(text)
    found = _find_date(text)
    if clock is None and found is None:
        return None

    try:
        due = found[1](found[0], now) if found else _midnight(now)
        if clock:
            due = due.replace(hour=clock[0], minute=clock[1], second=0, microsecond=0)
    except (ValueError, OverflowError):
        logger.debug("Discarding invalid due date in %r", text)
        return None
    return due


def reduce_title(text: str, fallback: str) -> str:
    work = ASSIGNEE_PATTERNS[1].sub(" ", text)
    for pattern in TITLE_NOISE:
        work = pattern.sub(" ", work)

    title = LEADING_CONJUNCTION.sub("", " ".join(work.split()))
    title = DANGLING_LEAD_IN.sub("", title).strip(" ,;")
    return title or fallback


def parse_task(text: str, now: datetime | None = None) -> ParsedTask:
    """
    Heuristic quick-capture parser:
    - priority P1..P4 (default P3)
    - assignee after by/to/for/assign(ed) to/give to
    - due date/time ('tomorrow 3pm', 'April 15', '12/1', 'in 3 days', 'next fri')
    - what is left becomes the title, falling back to the raw text
    """
    now = now or datetime.now()
    original = text.strip()

    priority, work = extract_priority(original)
    assignee, work = extract_assignee(work)
    due = extract_due(work, now)
    title = reduce_title(work, original)

    logger.debug(
        "Parsed %r -> title=%r assignee=%r due=%s priority=%s", original, title, assignee, due, priority.value
    )
    return ParsedTask(title=title, assignee=assignee, due=due, priority=priority)
