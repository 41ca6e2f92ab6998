"""
haulbook.dates
~~~~~~~~~~~~~~
Calendar helpers shared by the filter engine, the reports and the CLI.

Months are handled as ``"YYYY-MM"`` keys throughout — the same prefix an
ISO date string starts with, so ``"2024-03-15".startswith("2024-03")``.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, List, Optional, Tuple

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

_MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def _today(today: Optional[date]) -> date:
    if today is None:
        return date.today()
    return today.date() if isinstance(today, datetime) else today


def parse_date(value: Any) -> Optional[date]:
    """
    Leniently turn ``value`` into a ``date``.

    Accepts ``date``/``datetime`` objects and ISO strings (a trailing time
    part is ignored). Anything else — including ``None`` and garbage — gives
    ``None``.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        logger.debug("Unparseable date %r", value)
        return None


def month_key(d: date) -> str:
    """``date(2024, 3, 15)`` → ``"2024-03"``."""
    return f"{d.year:04d}-{d.month:02d}"


def current_month(today: Optional[date] = None) -> str:
    """Key of the month containing ``today`` (default: the real today)."""
    return month_key(_today(today))


def _split(key: str) -> Tuple[int, int]:
    year, month = key.split("-", 1)
    y, m = int(year), int(month)
    if not 1 <= m <= 12:
        raise ValueError(f"Invalid month key: {key!r}")
    return y, m


def shift_month(key: str, months: int) -> str:
    """Move a month key forwards (or backwards, for negative ``months``)."""
    y, m = _split(key)
    index = y * 12 + (m - 1) + months
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def last_months(n: int, today: Optional[date] = None) -> List[str]:
    """The ``n`` month keys ending with the current month, oldest first."""
    end = current_month(today)
    return [shift_month(end, -offset) for offset in range(n - 1, -1, -1)]


def month_label(key: str) -> str:
    """``"2024-03"`` → ``"March 2024"``."""
    y, m = _split(key)
    return f"{_MONTH_NAMES[m - 1]} {y}"


def is_month_key(value: str) -> bool:
    try:
        _split(value)
    except (ValueError, AttributeError):
        return False
    return len(value) == 7


def month_options(n: int = 12, today: Optional[date] = None) -> List[Tuple[str, str]]:
    """
    ``(key, label)`` pairs for the last ``n`` months, oldest first.

    This is the month picker offered on the table, dashboard and bill views.
    """
    return [(key, month_label(key)) for key in last_months(n, today)]


def format_date(d: Optional[date]) -> str:
    """``DD/MM/YYYY`` display format; empty string for a missing date."""
    if d is None:
        return ""
    return d.strftime("%d/%m/%Y")


__all__ = [
    "current_month",
    "format_date",
    "is_month_key",
    "last_months",
    "month_key",
    "month_label",
    "month_options",
    "parse_date",
    "shift_month",
]
