"""Provide utility helpers for clocks and due-date parsing."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Optional

_OFFSET_RE = re.compile(r"^(?P<sign>[+-])(?P<days>\d+)d?$")


def _now_local() -> datetime:
    return datetime.now().astimezone()


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _parse_due(value: Optional[str], today: date) -> Optional[date]:
    """Parse a due date given as ``YYYY-MM-DD`` or a signed day offset.

    Args:
        value: Raw text such as ``2026-01-31``, ``+3`` or ``-1d``. Empty or
            ``None`` means "no due date".
        today: Date that day offsets are relative to.

    Returns:
        The parsed date, or None when no value was given.

    Raises:
        ValueError: If the text is neither an ISO date nor an offset.
    """
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    m = _OFFSET_RE.match(text)
    if m:
        days = int(m.group("days"))
        return today + timedelta(days=days if m.group("sign") == "+" else -days)
    return date.fromisoformat(text)
