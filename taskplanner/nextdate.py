"""Calculation of the next occurrence of a repeating task."""

from __future__ import annotations

import datetime as _dt
import re

__all__ = ["RepeatRuleError", "parse_date", "format_date", "after_now", "next_date"]

_DATE_RE = re.compile(r"\d{8}")
_MAX_DAY_INTERVAL = 400


class RepeatRuleError(ValueError):
    """Raised when a repeat rule is malformed or out of range."""


def parse_date(text: str) -> _dt.date:
    """Parse a date written as YYYYMMDD."""
    if not isinstance(text, str) or not _DATE_RE.fullmatch(text):
        raise ValueError(f"cannot parse {text!r} as a YYYYMMDD date")
    try:
        return _dt.date(int(text[:4]), int(text[4:6]), int(text[6:]))
    except ValueError as exc:
        raise ValueError(f"cannot parse {text!r} as a YYYYMMDD date: {exc}") from exc


def format_date(value: _dt.date) -> str:
    """Format a date as YYYYMMDD."""
    return f"{value.year:04d}{value.month:02d}{value.day:02d}"


def _as_date(value: _dt.date) -> _dt.date:
    if isinstance(value, _dt.datetime):
        return value.date()
    return value


def after_now(date: _dt.date, now: _dt.date) -> bool:
    """Return True if ``date`` falls on a later day than ``now``."""
    return _as_date(date) > _as_date(now)


def _add_year(value: _dt.date) -> _dt.date:
    try:
        return value.replace(year=value.year + 1)
    except ValueError:
        # 29 February rolls over to 1 March in a non-leap year.
        return _dt.date(value.year + 1, 3, 1)


def next_date(now: _dt.date, dstart: str, repeat: str) -> str:
    """Return the first date after ``now`` produced by ``repeat`` from ``dstart``.

    An empty rule, or a ``d`` rule without an interval, yields an empty string.
    """
    if repeat == "":
        return ""
    date = parse_date(dstart)
    now = _as_date(now)

    parts = repeat.split(" ")
    kind = parts[0]

    if kind == "d":
        if len(parts) < 2:
            return ""
        if not re.fullmatch(r"[+-]?\d+", parts[1]):
            raise ValueError(f"invalid day interval {parts[1]!r}")
        interval = int(parts[1])
        if not 1 <= interval <= _MAX_DAY_INTERVAL:
            raise RepeatRuleError("day interval out of range")
        step = _dt.timedelta(days=interval)
        date += step
        while not after_now(date, now):
            date += step
        return format_date(date)

    if kind == "y":
        date = _add_year(date)
        while not after_now(date, now):
            date = _add_year(date)
        return format_date(date)

    raise RepeatRuleError(f"unsupported repeat rule {repeat!r}")