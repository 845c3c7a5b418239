"""Date finder - years and day/month/year dates, with or without separators."""

from __future__ import annotations

import calendar
import math
import string
from typing import Iterator, NamedTuple

from ...core.finder import FinderMetadata, PatternFinder

FIRST_YEAR = 1900
LAST_YEAR = 2099

DAYS = 366
SEPARATORS = "-/."
ORDERS = ("dmy", "mdy", "ymd")

YEAR_COST = math.log2(LAST_YEAR - FIRST_YEAR + 1)
DAY_MONTH_COST = math.log2(DAYS * 2)


class DateReading(NamedTuple):
    order: str
    day: int
    month: int
    year: int
    separator: str
    year_digits: int


def _is_digits(text: str) -> bool:
    # ASCII only: str.isdigit() accepts superscripts that int() rejects
    return bool(text) and all(c in string.digits for c in text)


def _full_year(text: str) -> int | None:
    value = int(text)
    if len(text) == 2:
        return 2000 + value if value < 50 else 1900 + value
    if len(text) == 4 and FIRST_YEAR <= value <= LAST_YEAR:
        return value
    return None


def _valid(day: int, month: int, year: int) -> bool:
    return 1 <= month <= 12 and 1 <= day <= calendar.monthrange(year, month)[1]


def _fields(text: str, order: str) -> tuple[str, str, str]:
    """Split an unseparated 6 or 8 digit string into (day, month, year)."""
    ylen = len(text) - 4
    if order == "ymd":
        year, month, day = text[:ylen], text[ylen:ylen + 2], text[ylen + 2:]
    elif order == "dmy":
        day, month, year = text[:2], text[2:4], text[4:]
    else:
        month, day, year = text[:2], text[2:4], text[4:]
    return day, month, year


def readings(text: str) -> Iterator[DateReading]:
    """Every valid day/month/year reading of ``text``."""
    separator = next((c for c in text if c not in string.digits), "")
    if separator:
        if separator not in SEPARATORS:
            return
        parts = text.split(separator)
        if len(parts) != 3 or not all(_is_digits(p) for p in parts):
            return
    elif len(text) not in (6, 8) or not _is_digits(text):
        return

    for order in ORDERS:
        if separator:
            named = dict(zip(order, parts))
            day, month, year = named["d"], named["m"], named["y"]
            if len(day) > 2 or len(month) > 2:
                continue
            if order == "ymd" and len(year) != 4:
                continue
        else:
            day, month, year = _fields(text, order)
        full = _full_year(year)
        if full is None or not _valid(int(day), int(month), full):
            continue
        yield DateReading(order, int(day), int(month), full, separator, len(year))


def date_cost(year_digits: int) -> float:
    """``log2(days * years * formats * separators)``; "no separator" counts as one."""
    years = 100 if year_digits == 2 else LAST_YEAR - FIRST_YEAR + 1
    return math.log2(DAYS * years * len(ORDERS) * (len(SEPARATORS) + 1))


class DatePatternFinder(PatternFinder):
    """
    Reports years between 1900 and 2099, four digit day/month pairs and
    complete dates such as ``25121999``, ``991225`` or ``1-5-2020``.
    """

    def metadata(self) -> FinderMetadata:
        return FinderMetadata(
            name="dates",
            classification="Date",
            description="Years and calendar dates",
        )

    def analyze(self, analysis) -> None:
        password = analysis.password
        n = len(password)
        for start in range(n):
            if analysis.cancelled:
                return
            if password[start] not in string.digits:
                continue
            self._four_digits(analysis, start)
            for end in range(start + 6, min(n, start + 10) + 1):
                text = password[start:end]
                if text[-1] not in string.digits:
                    continue
                reading = next(readings(text), None)
                if reading is None:
                    continue
                self.report(
                    analysis,
                    start,
                    end,
                    f"Date {reading.year:04d}-{reading.month:02d}-{reading.day:02d} ({reading.order})",
                    date_cost(reading.year_digits),
                )

    def _four_digits(self, analysis, start: int) -> None:
        text = analysis.password[start:start + 4]
        if len(text) != 4 or not _is_digits(text):
            return
        if FIRST_YEAR <= int(text) <= LAST_YEAR:
            self.report(analysis, start, start + 4, f"Year {text}", YEAR_COST)
        for order, day, month in (("ddmm", text[:2], text[2:]), ("mmdd", text[2:], text[:2])):
            if _valid(int(day), int(month), 2000):
                self.report(analysis, start, start + 4, f"Day and month ({order})", DAY_MONTH_COST)
                break
