"""
haulbook.reports.aggregate
~~~~~~~~~~~~~~~~~~~~~~~~~~
Pure aggregation over entry sequences.

Nothing here caches or mutates: every function recomputes from the entries
it is given, so the same input always gives the same output.

Unbilled entries (``amount is None``) count as ``0`` in money sums.
"""

from __future__ import annotations

from collections import Counter
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Hashable, Iterable, List, Optional, Sequence, Tuple, Union

from ..dates import last_months
from ..models import Entry, InvoiceTotals, MonthlySummary, ZERO

DEFAULT_TAX_RATE = Decimal("0.18")

Selector = Union[str, Callable[[Entry], Hashable]]


def _selector(field: Selector) -> Callable[[Entry], Hashable]:
    if callable(field):
        return field
    return lambda entry: getattr(entry, field)


def _rate(tax_rate: Any) -> Decimal:
    return tax_rate if isinstance(tax_rate, Decimal) else Decimal(str(tax_rate))


# ---------------------------------------------------------------------------
# Totals
# ---------------------------------------------------------------------------

def total_amount(entries: Iterable[Entry]) -> Decimal:
    """Sum of billed amounts."""
    return sum((e.billed_amount for e in entries), ZERO)


def total_quantity(entries: Iterable[Entry]) -> Decimal:
    return sum((e.quantity for e in entries), ZERO)


def unique_count(entries: Iterable[Entry], field: Selector) -> int:
    """Number of distinct values of ``field`` (attribute name or selector)."""
    key = _selector(field)
    return len({key(e) for e in entries})


def top_n(entries: Iterable[Entry], field: Selector, n: int = 5) -> List[Tuple[Hashable, int]]:
    """
    The ``n`` most frequent values of ``field`` as ``(value, count)`` pairs.

    Sorted by count, highest first; equal counts keep the order in which the
    values were first seen.
    """
    if n <= 0:
        return []
    key = _selector(field)
    counts = Counter(key(e) for e in entries)   # insertion-ordered
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return ranked[:n]


# ---------------------------------------------------------------------------
# Months
# ---------------------------------------------------------------------------

def summarize_month(entries: Iterable[Entry], month: str) -> MonthlySummary:
    """Count, quantity and amount of the entries dated in ``month`` (``YYYY-MM``)."""
    summary = MonthlySummary(month=month)
    for e in entries:
        if e.date is None or not e.date.isoformat().startswith(month):
            continue
        summary.entries.append(e)
        summary.total_entries += 1
        summary.total_quantity += e.quantity
        summary.total_amount += e.billed_amount
    return summary


def monthly_rollup(
    entries: Sequence[Entry],
    months: int = 6,
    today: Optional[date] = None,
) -> List[MonthlySummary]:
    """
    One summary per calendar month for the last ``months`` months, ending
    with the current month, oldest first.

    The window is fixed: months without entries are present with zeros.
    """
    entries = list(entries)
    return [summarize_month(entries, key) for key in last_months(months, today)]


def group_by_month(entries: Iterable[Entry]) -> List[MonthlySummary]:
    """Data-driven counterpart of ``monthly_rollup``: only months that have entries, newest first."""
    buckets: dict[str, MonthlySummary] = {}
    for e in entries:
        if e.month is None:
            continue
        summary = buckets.setdefault(e.month, MonthlySummary(month=e.month))
        summary.entries.append(e)
        summary.total_entries += 1
        summary.total_quantity += e.quantity
        summary.total_amount += e.billed_amount
    return [buckets[k] for k in sorted(buckets, reverse=True)]


# ---------------------------------------------------------------------------
# Invoice arithmetic
# ---------------------------------------------------------------------------

def invoice_total(entries: Iterable[Entry], tax_rate: Any = DEFAULT_TAX_RATE) -> InvoiceTotals:
    """``subtotal`` = billed amount, ``tax`` = subtotal × rate, ``total`` = both."""
    rate = _rate(tax_rate)
    subtotal = total_amount(entries)
    tax = subtotal * rate
    return InvoiceTotals(subtotal=subtotal, tax=tax, total=subtotal + tax, tax_rate=rate)


__all__ = [
    "DEFAULT_TAX_RATE",
    "group_by_month",
    "invoice_total",
    "monthly_rollup",
    "summarize_month",
    "top_n",
    "total_amount",
    "total_quantity",
    "unique_count",
]
