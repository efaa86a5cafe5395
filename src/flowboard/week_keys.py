"""Map loosely-typed date values to ISO ``YYYY-Www`` week keys.

ISO-8601 text is tried first. Otherwise ``A/B/C`` or ``A-B-C`` text is tried as
month/day/year, then day/month/year, then year/month/day, and the first
calendar-valid date wins. The key carries the ISO week-numbering year, the year
that owns the week's Thursday. Keys sort chronologically as plain strings.
"""
from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .fields import is_blank


# Trial order for ambiguous A/B/C dates; overridable via engine.date_orders
DATE_ORDERS: Tuple[str, ...] = ("mdy", "dmy", "ymd")

WEEK_KEY_RX = re.compile(r"^(\d{4})-W(\d{2})$")
_PARTS_RX = re.compile(r"[-/]")


def format_week_key(iso_year: int, iso_week: int) -> str:
    """Format an ISO (year, week) pair as ``YYYY-Www``."""
    return f"{int(iso_year):04d}-W{int(iso_week):02d}"


def parse_week_key(key: str) -> Tuple[int, int]:
    """Parse ``'2024-W02'`` into ``(2024, 2)``. Raises ValueError on any other shape."""
    m = WEEK_KEY_RX.fullmatch(str(key))
    if not m:
        raise ValueError(f"Not a week key: {key!r}")
    year, week = int(m.group(1)), int(m.group(2))
    if not 1 <= week <= 53:
        raise ValueError(f"Week number out of range in {key!r}")
    return year, week


def week_sort_key(key: str) -> Tuple[int, int]:
    return parse_week_key(key)


def sort_week_keys(keys: Iterable[str]) -> List[str]:
    """Return the distinct week keys in chronological (year, week) order."""
    return sorted(set(keys), key=week_sort_key)


def _parse_iso(text: str) -> Optional[date]:
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def _expand_year(token: str) -> Optional[int]:
    if len(token) in (1, 2):
        return 2000 + int(token)
    if len(token) == 4:
        return int(token)
    return None


def _candidate(order: str, parts: Sequence[str]) -> Optional[date]:
    if order not in ("mdy", "dmy", "ymd"):
        raise ValueError(f"Unknown date order: {order!r}")
    a, b, c = parts
    try:
        if order == "mdy":
            month, day, year = int(a), int(b), _expand_year(c)
        elif order == "dmy":
            day, month, year = int(a), int(b), _expand_year(c)
        else:
            year, month, day = _expand_year(a), int(b), int(c)
        if year is None:
            return None
        return date(year, month, day)
    except (ValueError, OverflowError):
        return None


def _parse_delimited(text: str, orders: Sequence[str]) -> Optional[date]:
    parts = [p.strip() for p in _PARTS_RX.split(text)]
    if len(parts) != 3 or not all(p.isascii() and p.isdigit() for p in parts):
        return None
    # no calendar component is wider than a four-digit year
    if any(len(p) > 4 for p in parts):
        return None
    for order in orders:
        parsed = _candidate(order, parts)
        if parsed is not None:
            return parsed
    return None


def parse_date_value(value: Any, orders: Sequence[str] = DATE_ORDERS) -> Optional[date]:
    """Resolve a loosely-typed date value to a calendar date.

    Strategies, in order:
      1. Native values: ``datetime``/``pandas.Timestamp``, ``date``, ``numpy.datetime64``.
      2. ISO-8601 text (date or date-time, offsets allowed).
      3. ``A/B/C`` or ``A-B-C`` text tried against ``orders``; the first
         calendar-valid candidate wins.

    Returns None when nothing yields a valid date. Numbers are never treated as
    dates.
    """
    if is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, np.datetime64):
        try:
            return pd.Timestamp(value).date()
        except (ValueError, OverflowError):
            return None
    if not isinstance(value, str):
        return None

    text = value.strip()
    parsed = _parse_iso(text)
    if parsed is not None:
        return parsed
    return _parse_delimited(text, orders)


def to_week_key(value: Any, orders: Sequence[str] = DATE_ORDERS) -> Optional[str]:
    """Map a date value to its ISO ``YYYY-Www`` week key, or None when unparseable.

    The year is the ISO week-numbering year, so 2024-12-30 maps to ``2025-W01``.
    """
    parsed = parse_date_value(value, orders)
    if parsed is None:
        return None
    iso_year, iso_week, _ = parsed.isocalendar()
    return format_week_key(iso_year, iso_week)
