"""
haulbook.reports
~~~~~~~~~~~~~~~~
Derived views over the entry collection.

  - ``aggregate``  — pure totals, rankings, monthly rollups, invoice arithmetic
  - ``dashboard``  — the overview screen's figures
  - ``invoice``    — monthly bills with GST
"""

from .aggregate import (
    invoice_total,
    monthly_rollup,
    summarize_month,
    top_n,
    total_amount,
    total_quantity,
    unique_count,
)
from .dashboard import DashboardReport, build_dashboard
from .invoice import BillDetails, Invoice, generate_invoice

__all__ = [
    "BillDetails",
    "DashboardReport",
    "Invoice",
    "build_dashboard",
    "generate_invoice",
    "invoice_total",
    "monthly_rollup",
    "summarize_month",
    "top_n",
    "total_amount",
    "total_quantity",
    "unique_count",
]
