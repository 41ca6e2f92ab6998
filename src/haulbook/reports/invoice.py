"""
haulbook.reports.invoice
~~~~~~~~~~~~~~~~~~~~~~~~
Monthly bill (tax invoice) generation.

Tax flow
--------
    subtotal = sum of billed amounts for the month (unbilled = 0)
    tax      = subtotal × tax rate            (GST, 18 % by default)
    total    = subtotal + tax

The rate is applied once to the subtotal; there is no per-line tax.

Usage::

    from haulbook.reports.invoice import BillDetails, generate_invoice

    inv = generate_invoice(store.list_all(), "2024-03",
                           BillDetails(bill_to="Shree Cement Ltd"))
    print(inv.summary())
    inv.to_json("bill_2024_03.json")
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from pathlib import Path
from typing import Any, List, Optional, Sequence

from ..config import cfg
from ..dates import format_date, month_label
from ..models import Entry, InvoiceTotals
from ..query import filter_entries
from .aggregate import invoice_total, total_quantity

_TWO = Decimal("0.01")


def _r(d: Decimal) -> Decimal:
    return d.quantize(_TWO, rounding=ROUND_HALF_UP)


def new_bill_number() -> str:
    """``BILL-`` followed by the last six digits of the millisecond clock."""
    return f"BILL-{str(time.time_ns() // 1_000_000)[-6:]}"


# ---------------------------------------------------------------------------
# Bill header
# ---------------------------------------------------------------------------

@dataclass
class BillDetails:
    """Who bills whom. Unset sender fields fall back to the configuration."""

    bill_to:   str = ""
    bill_from: Optional[str] = None
    address:   Optional[str] = None
    gst_no:    Optional[str] = None
    bill_no:   str = field(default_factory=new_bill_number)

    def resolved(self) -> "BillDetails":
        billing = cfg.get_billing_config()
        return BillDetails(
            bill_to=self.bill_to,
            bill_from=self.bill_from or billing.company_name,
            address=self.address or billing.company_address,
            gst_no=self.gst_no if self.gst_no is not None else billing.gst_no,
            bill_no=self.bill_no,
        )

    def to_dict(self) -> dict:
        return {
            "bill_no":   self.bill_no,
            "bill_to":   self.bill_to,
            "bill_from": self.bill_from,
            "address":   self.address,
            "gst_no":    self.gst_no,
        }


# ---------------------------------------------------------------------------
# Invoice
# ---------------------------------------------------------------------------

@dataclass
class Invoice:
    """A bill for one month's entries."""

    month:       Optional[str]
    details:     BillDetails
    entries:     List[Entry] = field(default_factory=list)
    totals:      InvoiceTotals = field(default_factory=lambda: invoice_total([]))
    issued_on:   date = field(default_factory=date.today)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def total_quantity(self) -> Decimal:
        return total_quantity(self.entries)

    @property
    def period_label(self) -> str:
        return month_label(self.month) if self.month else "—"

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "month":     self.month,
            "period":    self.period_label,
            "issued_on": self.issued_on.isoformat(),
            **self.details.to_dict(),
            "entries":   [e.to_dict() for e in self.entries],
            "total_quantity": str(self.total_quantity),
            "subtotal":  str(_r(self.totals.subtotal)),
            "tax_rate":  str(self.totals.tax_rate),
            "tax":       str(_r(self.totals.tax)),
            "total":     str(_r(self.totals.total)),
        }

    def to_json(self, path: str | Path | None = None) -> str:
        raw = json.dumps(self.to_dict(), indent=2, ensure_ascii=False)
        if path:
            Path(path).write_text(raw, encoding="utf-8")
        return raw

    def summary(self, currency: Optional[str] = None) -> str:
        currency = currency or cfg.currency
        W = 78
        div = "─" * W
        pct = (self.totals.tax_rate * 100).normalize()

        lines = [
            "=" * W,
            f"  {self.details.bill_from or ''}",
            f"  {self.details.address or ''}",
        ]
        if self.details.gst_no:
            lines.append(f"  GST No: {self.details.gst_no}")
        lines += [
            div,
            f"  Bill No : {self.details.bill_no:<30} Date  : {format_date(self.issued_on)}",
            f"  Bill To : {self.details.bill_to:<30} Period: {self.period_label}",
            div,
            f"  {'SR':>4}  {'Date':<10}  {'Particular':<18} {'Vehicle':<12} {'Qty':>8} {'Amount':>12}",
            div,
        ]
        for index, e in enumerate(self.entries, start=1):
            amount = f"{e.amount:>12.2f}" if e.amount is not None else f"{'—':>12}"
            lines.append(
                f"  {e.sr_no or index:>4}  {format_date(e.date):<10}  "
                f"{e.particular[:18]:<18} {e.vehicle_no[:12]:<12} {e.quantity:>8} {amount}"
            )
        if self.is_empty:
            lines.append("  No entries for this period.")
        lines += [
            div,
            f"  {'Subtotal':<50}: {_r(self.totals.subtotal):>14.2f} {currency}",
            f"  {f'GST ({pct}%)':<50}: {_r(self.totals.tax):>14.2f} {currency}",
            f"  {'Total':<50}: {_r(self.totals.total):>14.2f} {currency}",
            "=" * W,
        ]
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------

def generate_invoice(
    entries: Sequence[Entry],
    month: Optional[str],
    details: Optional[BillDetails] = None,
    *,
    tax_rate: Any = None,
    today: Optional[date] = None,
) -> Invoice:
    """
    Build the bill for ``month`` (``YYYY-MM``).

    Without a month the bill is empty — a bill always covers one month.
    Lines are ordered by date, then by insertion.
    """
    rate = cfg.tax_rate if tax_rate is None else tax_rate
    lines = filter_entries(entries, month=month) if month else []
    lines = sorted(lines, key=lambda e: (e.date is None, e.date or date.min))
    return Invoice(
        month=month or None,
        details=(details or BillDetails()).resolved(),
        entries=lines,
        totals=invoice_total(lines, rate),
        issued_on=today or date.today(),
    )


__all__ = ["BillDetails", "Invoice", "generate_invoice", "new_bill_number"]
