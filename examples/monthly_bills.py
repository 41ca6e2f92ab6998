"""
examples/monthly_bills.py
~~~~~~~~~~~~~~~~~~~~~~~~~
Generate a bill for every month that has entries and write each one as JSON.

Usage
-----
    python -m examples.monthly_bills --bill-to "Shree Cement Ltd"
    python -m examples.monthly_bills --output-dir bills/ --project fleet-b
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Dict

from haulbook import get_store
from haulbook.reports.aggregate import group_by_month
from haulbook.reports.invoice import BillDetails, Invoice, generate_invoice


def configure_logging():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def generate_bills(bill_to: str, project: str | None = None) -> Dict[str, Invoice]:
    """One invoice per month with entries, newest month first."""
    with get_store(project=project) as store:
        entries = store.list_all()

    if not entries:
        logging.warning("No entries in the ledger; nothing to bill.")
        return {}

    months = [summary.month for summary in group_by_month(entries)]
    logging.info("Billing %d month(s)", len(months))
    return {
        month: generate_invoice(entries, month, BillDetails(bill_to=bill_to))
        for month in months
    }


def generate_report(bills: Dict[str, Invoice], output_dir: Path) -> None:
    output_dir.mkdir(parents=True, exist_ok=True)

    print(f"\n{' Billing Report ':=^40}")
    print(f"Months billed: {len(bills)}")
    for month, invoice in bills.items():
        path = output_dir / f"bill_{month.replace('-', '_')}.json"
        invoice.to_json(path)
        print(f"\n✓ {invoice.period_label}  ({invoice.details.bill_no})")
        print(f"  Entries : {len(invoice.entries)}")
        print(f"  Total   : {invoice.totals.total:.2f}")
        print(f"  Saved   : {path}")


def main():
    configure_logging()
    p = argparse.ArgumentParser(description="Generate monthly bills for a haulbook ledger.")
    p.add_argument("--bill-to",    default="", help="Customer name printed on every bill.")
    p.add_argument("--output-dir", default="bills", metavar="DIR")
    p.add_argument("--project",    default=None)
    args = p.parse_args()

    bills = generate_bills(args.bill_to, project=args.project)
    generate_report(bills, Path(args.output_dir))
    return 0


if __name__ == "__main__":
    import sys
    sys.exit(main())
