"""Weekday walking over the Gregorian calendar.

Saturday and Sunday are never working days. All walks stop at
``date.max`` instead of overflowing.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date, timedelta

from flowstate.domain.duration import Duration

_ONE_DAY = timedelta(days=1)


def is_weekend(day: date) -> bool:
    """True for Saturday and Sunday."""
    return day.weekday() >= 5


def first_weekday(day: date) -> date:
    """Return *day* itself, or the following Monday if it falls on a weekend."""
    while is_weekend(day) and day < date.max:
        day += _ONE_DAY
    return day


def next_weekday(day: date) -> date | None:
    """The first working day strictly after *day*, or None past the calendar end."""
    if day >= date.max:
        return None
    candidate = first_weekday(day + _ONE_DAY)
    if is_weekend(candidate):
        return None
    return candidate


def shift_days(day: date, days: int) -> date:
    """Add *days* (may be negative), clamping to the representable range."""
    try:
        return day + timedelta(days=days)
    except OverflowError:
        return date.max if days > 0 else date.min


def iter_weekdays(start: date, count: int) -> Iterator[date]:
    """Yield *count* working days beginning on or after *start*."""
    day: date | None = first_weekday(start)
    produced = 0
    while produced < count and day is not None and not is_weekend(day):
        yield day
        produced += 1
        day = next_weekday(day)


def absence_days(start: date, duration: Duration) -> tuple[list[date], date | None]:
    """Expand an absence into its whole weekdays and optional partial day.

    Returns ``(whole_days, partial_day)``. *partial_day* is the weekday after
    the whole days and is only set when ``duration.fraction > 0``.
    """
    whole = list(iter_weekdays(start, duration.days))
    partial: date | None = None
    if duration.fraction > 0:
        if whole:
            partial = next_weekday(whole[-1])
        else:
            partial = first_weekday(start)
            if is_weekend(partial):
                partial = None
    return whole, partial


def absence_span(start: date, duration: Duration) -> tuple[date, date]:
    """Inclusive calendar interval covered by an absence.

    A zero-length absence covers only its start date.
    """
    whole, partial = absence_days(start, duration)
    marked = [*whole, partial] if partial is not None else whole
    end = marked[-1] if marked else start
    return start, max(start, end)


def spans_intersect(a: tuple[date, date], b: tuple[date, date]) -> bool:
    return a[0] <= b[1] and b[0] <= a[1]
