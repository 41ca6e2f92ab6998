"""
haulbook.export
~~~~~~~~~~~~~~~
Delimited-text export of (filtered) entries, as downloaded from the table.

Columns and formatting follow the ledger's table view: dates as
``DD/MM/YYYY`` and an empty cell for an unbilled amount, so "not billed"
stays distinguishable from a billed zero.
"""

from __future__ import annotations

import csv
import io
from datetime import date
from pathlib import Path
from typing import Iterable, Optional

from .dates import format_date
from .models import Entry

CSV_HEADERS = [
    "SR. NO.", "Date", "Particular", "Chalan No.", "Vehicle No.",
    "Driver Name", "From", "To", "Quantity", "Amount",
]


def export_filename(today: Optional[date] = None) -> str:
    """``logistics-entries-YYYY-MM-DD.csv``"""
    return f"logistics-entries-{(today or date.today()).isoformat()}.csv"


def _row(e: Entry) -> list:
    return [
        e.sr_no if e.sr_no is not None else "",
        format_date(e.date),
        e.particular,
        e.chalan_no,
        e.vehicle_no,
        e.driver_name,
        e.from_,
        e.to,
        e.quantity,
        e.amount if e.amount is not None else "",
    ]


def export_csv(entries: Iterable[Entry], path: str | Path | None = None) -> str:
    """Render ``entries`` as CSV text; also write it to ``path`` when given."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    writer.writerows(_row(e) for e in entries)
    text = buf.getvalue()
    if path:
        Path(path).write_text(text, encoding="utf-8")
    return text


__all__ = ["CSV_HEADERS", "export_csv", "export_filename"]
