# tests/test_dates.py

from __future__ import annotations

import re
from datetime import date, datetime

import pytest

from quicktask.importer.dates import (
    ClockToken,
    clock_pattern,
    find_relative_day,
    find_weekday,
    local_midnight,
    next_weekday,
    resolve_range,
    to_24h,
)

TUESDAY = date(2024, 3, 12)


def test_next_weekday_is_strictly_after() -> None:
    assert next_weekday(TUESDAY, 4) == date(2024, 3, 15)  # Friday
    assert next_weekday(TUESDAY, 1) == date(2024, 3, 19)  # Tuesday -> next week
    assert next_weekday(TUESDAY, 0) == date(2024, 3, 18)  # Monday


def test_relative_words() -> None:
    assert find_relative_day("do it today", TUESDAY) == (TUESDAY, (6, 11))
    assert find_relative_day("Tomorrow run", TUESDAY)[0] == date(2024, 3, 13)
    assert find_relative_day("pay tmr", TUESDAY)[0] == date(2024, 3, 13)
    assert find_relative_day("pay tmrw", TUESDAY)[0] == date(2024, 3, 13)
    assert find_relative_day("missed yesterday", TUESDAY)[0] == date(2024, 3, 11)
    assert find_relative_day("todays list", TUESDAY) is None


def test_bare_weekday_resolves_to_next_occurrence() -> None:
    day, span = find_weekday("essay due friday", TUESDAY)
    assert day == date(2024, 3, 15)
    assert span == (10, 16)

    # today's own weekday means next week
    assert find_weekday("gym tue", TUESDAY)[0] == date(2024, 3, 19)
    assert find_weekday("thurs lab", TUESDAY)[0] == date(2024, 3, 14)


def test_next_weekday_phrase_lands_a_week_later() -> None:
    day, span = find_weekday("dinner next fri", TUESDAY)
    assert day == date(2024, 3, 22)
    assert span == (7, 15)

    assert find_weekday("Next Tuesday review", TUESDAY)[0] == date(2024, 3, 26)
    assert find_weekday("next mon", TUESDAY)[0] == date(2024, 3, 25)


@pytest.mark.parametrize(
    "text",
    ["call monday or sunday", "call sunday or monday"],
)
def test_weekday_table_order_wins_over_position(text: str) -> None:
    # Sunday comes first in the table, so it wins wherever it appears.
    day, span = find_weekday(text, TUESDAY)
    assert day == date(2024, 3, 17)
    assert text[span[0] : span[1]] == "sunday"


def test_weekday_names_match_whole_words_only() -> None:
    assert find_weekday("satisfy the client", TUESDAY) is None
    assert find_weekday("fries and monument", TUESDAY) is None


def test_to_24h_defaults_to_pm() -> None:
    assert to_24h(3, 0, None) == (15, 0)
    assert to_24h(3, 0, "p") == (15, 0)
    assert to_24h(3, 0, "a") == (3, 0)
    assert to_24h(12, 0, "a") == (0, 0)
    assert to_24h(12, 0, "p") == (12, 0)
    assert to_24h(12, 30, None) == (12, 30)


def test_to_24h_keeps_24_hour_values_and_rejects_garbage() -> None:
    assert to_24h(14, 30, None) == (14, 30)
    assert to_24h(0, 15, None) == (0, 15)
    assert to_24h(24, 0, None) is None
    assert to_24h(5, 60, "a") is None


def test_clock_token_from_pattern() -> None:
    rx = re.compile(clock_pattern("t"), re.IGNORECASE)

    tok = ClockToken.from_match(rx.fullmatch("10:30AM"), "t")
    assert (tok.hour, tok.minute, tok.meridiem, tok.explicit) == (10, 30, "a", True)
    assert tok.on(TUESDAY) == datetime(2024, 3, 12, 10, 30)

    tok = ClockToken.from_match(rx.fullmatch("7p"), "t")
    assert tok.on(TUESDAY) == datetime(2024, 3, 12, 19, 0)

    tok = ClockToken.from_match(rx.fullmatch("6 pm"), "t")
    assert tok.on(TUESDAY) == datetime(2024, 3, 12, 18, 0)

    tok = ClockToken.from_match(rx.fullmatch("4"), "t")
    assert not tok.explicit
    assert tok.on(TUESDAY) == datetime(2024, 3, 12, 16, 0)


def test_local_midnight() -> None:
    assert local_midnight(TUESDAY) == datetime(2024, 3, 12, 0, 0)


def _tok(text: str) -> ClockToken:
    rx = re.compile(clock_pattern("t"), re.IGNORECASE)
    return ClockToken.from_match(rx.fullmatch(text), "t")


@pytest.mark.parametrize(
    ("first", "last", "start", "end"),
    [
        ("10", "11:30", (10, 0), (11, 30)),
        ("3", "5pm", (15, 0), (17, 0)),
        ("9", "11am", (9, 0), (11, 0)),
        ("11", "1pm", (11, 0), (13, 0)),
        ("11am", "1", (11, 0), (13, 0)),
        ("1pm", "2:30pm", (13, 0), (14, 30)),
        ("11am", "9am", (11, 0), (9, 0)),
    ],
)
def test_resolve_range(first: str, last: str, start: tuple[int, int], end: tuple[int, int]) -> None:
    resolved = resolve_range(_tok(first), _tok(last), TUESDAY)
    assert resolved == (datetime(2024, 3, 12, *start), datetime(2024, 3, 12, *end))


def test_resolve_range_rejects_invalid_ends() -> None:
    assert resolve_range(_tok("10"), _tok("25"), TUESDAY) is None
