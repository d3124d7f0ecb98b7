# src/quicktask/importer/extractors.py

"""
Token extractors for one line of imported notes.

Every extractor is a plain function:

    (title, draft, ctx) -> (title, draft)

It looks for its token in the remaining title, strips the matched text and
returns an updated copy of the draft. A token that is not found leaves both
unchanged. Only the first duration, date and clock token is used; inline
#tags are all consumed.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from datetime import date, datetime

from .dates import ClockToken, clock_pattern, find_relative_day, find_weekday, resolve_range

MEETING_DEFAULT_MINUTES = 60

# Words that read as articles/prepositions rather than a meeting type ("the meeting").
_MEETING_TYPE_STOPWORDS = frozenset(
    {
        "a", "an", "the", "my", "our", "your", "his", "her", "their", "this",
        "that", "next", "for", "to", "with", "at", "in", "on", "of", "and", "or",
    }
)

_TAG_RE = re.compile(r"#([\w-]+)")
_DURATION_RE = re.compile(r"\[(\d+)([mh])\]")
_MEETING_RE = re.compile(
    r"(?:\b(?P<type>[a-z][\w-]*)\s+)?\b(?P<word>meeting|mtg)\b",
    re.IGNORECASE,
)
_RANGE_RE = re.compile(
    rf"\b{clock_pattern('s')}\s*[-–]\s*{clock_pattern('e')}\b",
    re.IGNORECASE,
)
# A lone clock token: not glued to another number ("10-20", "3/14", "1.5", "v2").
_TIME_RE = re.compile(
    rf"(?P<prefix>\bat\s+|@)?(?<![\w/.:-]){clock_pattern('t')}(?![\w/:-]|\.\d)",
    re.IGNORECASE,
)
_WS_RE = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class ParseContext:
    now: datetime
    keywords: Mapping[str, str]

    @property
    def today(self) -> date:
        return self.now.date()


@dataclass(frozen=True, slots=True)
class Draft:
    """Fields collected so far for the line being parsed."""

    tags: tuple[str, ...] = ()
    category_tags: tuple[str, ...] = ()
    day: date | None = None
    start: datetime | None = None
    duration_minutes: int | None = None
    meeting: bool = False
    meeting_type: str | None = None


Stage = Callable[[str, Draft, ParseContext], tuple[str, Draft]]


def squash(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


def _cut(text: str, start: int, end: int) -> str:
    return squash(f"{text[:start]} {text[end:]}")


def extract_tags(title: str, draft: Draft, ctx: ParseContext) -> tuple[str, Draft]:
    names = [m.group(1) for m in _TAG_RE.finditer(title)]
    if not names:
        return title, draft
    return squash(_TAG_RE.sub(" ", title)), replace(draft, tags=draft.tags + tuple(names))


def extract_duration(title: str, draft: Draft, ctx: ParseContext) -> tuple[str, Draft]:
    m = _DURATION_RE.search(title)
    if not m:
        return title, draft
    amount = int(m.group(1))
    minutes = amount * 60 if m.group(2) == "h" else amount
    return _cut(title, *m.span()), replace(draft, duration_minutes=minutes)


def extract_date(title: str, draft: Draft, ctx: ParseContext) -> tuple[str, Draft]:
    """today/tomorrow/yesterday first; weekday phrases only when none is present."""
    found = find_relative_day(title, ctx.today) or find_weekday(title, ctx.today)
    if found is None:
        return title, draft
    day, span = found
    return _cut(title, *span), replace(draft, day=day)


def detect_meeting(title: str, draft: Draft, ctx: ParseContext) -> tuple[str, Draft]:
    m = _MEETING_RE.search(title)
    if not m:
        return title, draft

    kind = m.group("type")
    if kind and kind.lower() in _MEETING_TYPE_STOPWORDS:
        kind = None
    kind = kind.lower() if kind else None

    tags = draft.tags + ("meeting",)
    if kind:
        tags += (f"meeting:{kind}",)

    title = _cut(title, m.start("word"), m.end("word"))
    return title, replace(draft, tags=tags, meeting=True, meeting_type=kind)


def extract_time_range(title: str, draft: Draft, ctx: ParseContext) -> tuple[str, Draft]:
    """
    Find "H[:MM][ap] - H[:MM][ap]" and timebox the line with it.

    Outside meetings a bare "10-12" is not taken as a range; one side needs minutes
    or a meridiem.
    """
    day = draft.day or ctx.today
    for m in _RANGE_RE.finditer(title):
        first = ClockToken.from_match(m, "s")
        last = ClockToken.from_match(m, "e")
        if not (draft.meeting or first.explicit or last.explicit):
            continue

        resolved = resolve_range(first, last, day)
        if resolved is None:
            continue

        start, end = resolved
        minutes = max(0, int((end - start).total_seconds() // 60))
        return _cut(title, *m.span()), replace(draft, start=start, duration_minutes=minutes)

    return title, draft


def extract_single_time(title: str, draft: Draft, ctx: ParseContext) -> tuple[str, Draft]:
    """First lone clock token, bare hours included ("call 3" -> 15:00); "at "/"@" go with it."""
    if draft.start is None:
        day = draft.day or ctx.today
        for m in _TIME_RE.finditer(title):
            start = ClockToken.from_match(m, "t").on(day)
            if start is None:
                continue
            title = _cut(title, *m.span())
            draft = replace(draft, start=start)
            break

    if draft.meeting and draft.duration_minutes is None:
        draft = replace(draft, duration_minutes=MEETING_DEFAULT_MINUTES)
    return title, draft


def extract_keywords(title: str, draft: Draft, ctx: ParseContext) -> tuple[str, Draft]:
    """Move mapped words (course or club names) into category tags."""
    kept: list[str] = []
    categories = list(draft.category_tags)
    for word in title.split():
        category = ctx.keywords.get(word.lower())
        if category is None:
            kept.append(word)
            continue
        if category not in categories:
            categories.append(category)
    return " ".join(kept), replace(draft, category_tags=tuple(categories))
