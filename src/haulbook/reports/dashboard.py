"""
haulbook.reports.dashboard
~~~~~~~~~~~~~~~~~~~~~~~~~~
Dashboard overview: headline figures, usage rankings and the monthly trend.

The headline figures and rankings follow the optional month filter; the
"this month" amount and the monthly rollup always look at every entry.

Usage::

    from haulbook.reports.dashboard import build_dashboard

    report = build_dashboard(store.list_all(), month="2024-03")
    print(report.summary())
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Hashable, List, Optional, Sequence, Tuple

from ..dates import current_month, month_label
from ..models import Entry, MonthlySummary
from ..query import filter_entries
from .aggregate import monthly_rollup, top_n, total_amount, total_quantity, unique_count


@dataclass
class DashboardReport:
    """Figures shown on the dashboard for one month filter (or all time)."""

    month:                Optional[str]
    total_entries:        int = 0
    total_amount:         Decimal = field(default_factory=Decimal)
    total_quantity:       Decimal = field(default_factory=Decimal)
    current_month:        str = ""
    current_month_amount: Decimal = field(default_factory=Decimal)
    unique_vehicles:      int = 0
    unique_drivers:       int = 0
    top_vehicles:         List[Tuple[Hashable, int]] = field(default_factory=list)
    top_drivers:          List[Tuple[Hashable, int]] = field(default_factory=list)
    monthly:              List[MonthlySummary] = field(default_factory=list)

    @property
    def scope(self) -> str:
        return month_label(self.month) if self.month else "All Time"

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "month":                self.month,
            "scope":                self.scope,
            "total_entries":        self.total_entries,
            "total_amount":         str(self.total_amount),
            "total_quantity":       str(self.total_quantity),
            "current_month":        self.current_month,
            "current_month_amount": str(self.current_month_amount),
            "unique_vehicles":      self.unique_vehicles,
            "unique_drivers":       self.unique_drivers,
            "top_vehicles":         [{"value": v, "trips": c} for v, c in self.top_vehicles],
            "top_drivers":          [{"value": v, "trips": c} for v, c in self.top_drivers],
            "monthly":              [m.to_dict() for m in self.monthly],
        }

    def summary(self, currency: str = "INR") -> str:
        W = 52
        div = "─" * W

        lines = [
            "=" * W,
            f"  Dashboard — {self.scope}",
            "=" * W,
            f"  Entries             : {self.total_entries}",
            f"  Revenue             : {self.total_amount:>12.2f} {currency}",
            f"  Quantity            : {self.total_quantity:>12}",
            f"  This month ({self.current_month}): {self.current_month_amount:>12.2f} {currency}",
            f"  Active vehicles     : {self.unique_vehicles}",
            f"  Active drivers      : {self.unique_drivers}",
        ]

        for title, ranking in (("Top vehicles", self.top_vehicles), ("Top drivers", self.top_drivers)):
            lines += [div, f"  {title}"]
            if not ranking:
                lines.append("    —")
            for rank, (value, count) in enumerate(ranking, start=1):
                lines.append(f"    {rank}. {value or '—':<24} {count:>4} trips")

        lines += [div, "  Monthly trend"]
        for m in self.monthly:
            lines.append(
                f"    {m.label:<16} {m.total_entries:>4} entries  "
                f"{m.total_amount:>12.2f} {currency}"
            )
        lines.append("=" * W)
        return "\n".join(lines)


def build_dashboard(
    entries: Sequence[Entry],
    month: Optional[str] = None,
    *,
    today: Optional[date] = None,
    top: int = 5,
    months: int = 6,
) -> DashboardReport:
    """Compute the dashboard from the full entry list."""
    entries = list(entries)
    scoped = filter_entries(entries, month=month) if month else entries
    this_month = current_month(today)

    return DashboardReport(
        month=month or None,
        total_entries=len(scoped),
        total_amount=total_amount(scoped),
        total_quantity=total_quantity(scoped),
        current_month=this_month,
        current_month_amount=total_amount(filter_entries(entries, month=this_month)),
        unique_vehicles=unique_count(scoped, "vehicle_no"),
        unique_drivers=unique_count(scoped, "driver_name"),
        top_vehicles=top_n(scoped, "vehicle_no", top),
        top_drivers=top_n(scoped, "driver_name", top),
        monthly=monthly_rollup(entries, months, today),
    )


__all__ = ["DashboardReport", "build_dashboard"]
