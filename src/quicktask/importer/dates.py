# src/quicktask/importer/dates.py

"""
Date/time resolution for imported notes.

Relative words ("today", "tomorrow", weekday names, "next <weekday>") become local
calendar days; clock tokens ("3pm", "10:30", "7a") become hour/minute pairs.

Single clock tokens without a meridiem are read as PM. Quick notes mostly describe
afternoon/evening plans, so "call mom 6" means 18:00. Hours 13..23 and 0 are taken
as 24-hour values and skip the meridiem rule. Ranges resolve their two ends
together, see resolve_range().
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

DEFAULT_MERIDIEM = "p"

# Iteration order matters: when a line names several weekdays, the first entry of
# this table that appears wins, not the leftmost one in the text.
WEEKDAY_TABLE: tuple[tuple[str, int], ...] = (
    ("sunday", 6),
    ("sun", 6),
    ("monday", 0),
    ("mon", 0),
    ("tuesday", 1),
    ("tues", 1),
    ("tue", 1),
    ("wednesday", 2),
    ("wed", 2),
    ("thursday", 3),
    ("thurs", 3),
    ("thur", 3),
    ("thu", 3),
    ("friday", 4),
    ("fri", 4),
    ("saturday", 5),
    ("sat", 5),
)

RELATIVE_DAYS: dict[str, int] = {
    "today": 0,
    "tomorrow": 1,
    "tmrw": 1,
    "tmr": 1,
    "yesterday": -1,
}

_RELATIVE_RE = re.compile(r"\b(today|tomorrow|tmrw|tmr|yesterday)\b", re.IGNORECASE)
_NEXT_WEEKDAY_RES = [
    (re.compile(rf"\bnext\s+{name}\b", re.IGNORECASE), wd) for name, wd in WEEKDAY_TABLE
]
_WEEKDAY_RES = [(re.compile(rf"\b{name}\b", re.IGNORECASE), wd) for name, wd in WEEKDAY_TABLE]

Span = tuple[int, int]


def local_midnight(day: date) -> datetime:
    return datetime.combine(day, time.min)


def next_weekday(after: date, weekday: int) -> date:
    """First date strictly after `after` that falls on `weekday` (Monday=0)."""
    return after + timedelta(days=(weekday - after.weekday() - 1) % 7 + 1)


def find_relative_day(text: str, today: date) -> tuple[date, Span] | None:
    m = _RELATIVE_RE.search(text)
    if not m:
        return None
    offset = RELATIVE_DAYS[m.group(1).lower()]
    return today + timedelta(days=offset), m.span()


def find_weekday(text: str, today: date) -> tuple[date, Span] | None:
    """
    Resolve a weekday phrase.

    "next <weekday>" is looked up first and lands a week further out than the bare
    name: the first matching day strictly after today + 7 days. A bare name is the
    next occurrence strictly after today, so naming today's weekday means next week.
    """
    for rx, wd in _NEXT_WEEKDAY_RES:
        m = rx.search(text)
        if m:
            return next_weekday(today + timedelta(days=7), wd), m.span()

    for rx, wd in _WEEKDAY_RES:
        m = rx.search(text)
        if m:
            return next_weekday(today, wd), m.span()

    return None


def clock_pattern(name: str) -> str:
    """Regex fragment for one H[:MM][am|pm|a|p] token with groups prefixed by `name`."""
    return (
        rf"(?P<{name}_h>\d{{1,2}})(?::(?P<{name}_m>\d{{2}}))?"
        rf"(?:\s?(?P<{name}_ap>[ap])m|(?P<{name}_x>[ap]))?"
    )


def to_24h(hour: int, minute: int, meridiem: str | None) -> tuple[int, int] | None:
    """
    Normalize a 12-hour clock reading.

    12 AM -> 0, 12 PM -> 12, other PM hours add 12. Returns None for readings that
    are not a time of day.
    """
    if hour > 23 or minute > 59:
        return None
    if hour == 0 or hour > 12:
        return hour, minute

    mer = (meridiem or DEFAULT_MERIDIEM).lower()
    if mer == "a":
        return (0 if hour == 12 else hour), minute
    return (12 if hour == 12 else hour + 12), minute


@dataclass(frozen=True, slots=True)
class ClockToken:
    hour: int
    minute: int
    minutes_given: bool
    meridiem: str | None

    @property
    def explicit(self) -> bool:
        """True when the token is clearly a time (has minutes or a meridiem)."""
        return self.minutes_given or self.meridiem is not None

    @classmethod
    def from_match(cls, m: re.Match[str], name: str) -> ClockToken:
        minute_raw = m.group(f"{name}_m")
        meridiem = m.group(f"{name}_ap") or m.group(f"{name}_x")
        return cls(
            hour=int(m.group(f"{name}_h")),
            minute=int(minute_raw) if minute_raw else 0,
            minutes_given=minute_raw is not None,
            meridiem=meridiem.lower() if meridiem else None,
        )

    def on(self, day: date, meridiem: str | None = None) -> datetime | None:
        """Instant on `day`; `meridiem` fills in when the token has none of its own."""
        hm = to_24h(self.hour, self.minute, self.meridiem or meridiem)
        if hm is None:
            return None
        return datetime.combine(day, time(hm[0], hm[1]))

    def as_written(self, day: date) -> datetime | None:
        """Instant on `day` reading the hour on the 24-hour clock (no PM default)."""
        if self.hour > 23 or self.minute > 59:
            return None
        return datetime.combine(day, time(self.hour, self.minute))


_OTHER_MERIDIEM = {"a": "p", "p": "a"}


def resolve_range(first: ClockToken, last: ClockToken, day: date) -> tuple[datetime, datetime] | None:
    """
    Resolve both ends of "H[:MM][ap] - H[:MM][ap]" on `day`.

    - no meridiem on either side: hours as written ("10-11:30" -> 10:00..11:30)
    - one side without a meridiem borrows the other's ("3-5pm" -> 15:00..17:00),
      unless that puts the end before the start ("11-1pm" -> 11:00..13:00)
    - both sides marked: taken as they are
    """
    if first.meridiem is None and last.meridiem is None:
        start, end = first.as_written(day), last.as_written(day)
    elif first.meridiem is None:
        end = last.on(day)
        start = first.on(day, last.meridiem)
        if start is not None and end is not None and start > end:
            start = first.on(day, _OTHER_MERIDIEM[last.meridiem])
    elif last.meridiem is None:
        start = first.on(day)
        end = last.on(day, first.meridiem)
        if start is not None and end is not None and end < start:
            end = last.on(day, _OTHER_MERIDIEM[first.meridiem])
    else:
        start, end = first.on(day), last.on(day)

    if start is None or end is None:
        return None
    return start, end
