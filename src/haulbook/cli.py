"""
haulbook.cli
~~~~~~~~~~~~
Command-line interface for haulbook.

Entry point registered in pyproject.toml::

    [project.scripts]
    haulbook = "haulbook.cli:main"

Usage examples
--------------
    haulbook --version

    # Record a trip (vehicle number is upper-cased automatically)
    haulbook add --date 2024-03-15 --particular Cement --vehicle-no mh01ab1234 \\
                 --driver-name Ramesh --from Pune --to Mumbai --quantity 12 --amount 4500

    # Table view with filters
    haulbook list --month 2024-03 --vehicle-no mh01 --min-amount 1000

    # Dashboard and the March bill
    haulbook dashboard --month 2024-03
    haulbook invoice --month 2024-03 --bill-to "Shree Cement Ltd" --output bill.json

    # Another ledger, stored in SQLite
    haulbook --project fleet-b --backend sqlite list
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any, Dict, Optional

from haulbook.config import cfg
from haulbook.dates import format_date, is_month_key, month_options
from haulbook.exceptions import HaulbookError
from haulbook.export import export_csv, export_filename
from haulbook.query import FilterOptions, filter_entries
from haulbook.reports.dashboard import build_dashboard
from haulbook.reports.invoice import BillDetails, generate_invoice
from haulbook.storage import EntryStore, get_store

logger = logging.getLogger(__name__)

# argparse dest → entry field name
_ENTRY_ARGS = {
    "sr_no":       "sr_no",
    "date":        "date",
    "particular":  "particular",
    "chalan_no":   "chalan_no",
    "vehicle_no":  "vehicle_no",
    "driver_name": "driver_name",
    "origin":      "from_",
    "to":          "to",
    "quantity":    "quantity",
    "amount":      "amount",
}

_FILTER_ARGS = {
    "month":        "month",
    "vehicle_no":   "vehicle_no",
    "driver_name":  "driver_name",
    "origin":       "from_",
    "to":           "to",
    "particular":   "particular",
    "chalan_no":    "chalan_no",
    "min_amount":   "min_amount",
    "max_amount":   "max_amount",
    "min_quantity": "min_quantity",
    "max_quantity": "max_quantity",
}


# ---------------------------------------------------------------------------
# CLI class
# ---------------------------------------------------------------------------

class HaulbookCLI:

    def __init__(self, store: Optional[EntryStore] = None) -> None:
        self.store = store

    def _store(self) -> EntryStore:
        if self.store is None:
            self.store = get_store()
        return self.store

    # ------------------------------------------------------------------
    # Utility
    # ------------------------------------------------------------------

    def print_version(self) -> None:
        try:
            print(f"haulbook version: {version('haulbook')}")
        except PackageNotFoundError:
            print("haulbook version: unknown")

    def show_months(self, count: int | None = None) -> int:
        for key, label in month_options(count or cfg.month_options):
            print(f"  {key}  {label}")
        return 0

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    def add_entry(self, fields: Dict[str, Any]) -> int:
        """Create one entry. Returns exit code."""
        entry = self._store().create(fields)
        amount = f"{entry.amount}" if entry.amount is not None else "not billed"
        print(f"✓  #{entry.sr_no}  {entry.vehicle_no or '—'}  {entry.route}  qty {entry.quantity}  ({amount})")
        print(f"   id: {entry.id}")
        return 0

    def list_entries(self, options: FilterOptions, as_json: bool = False) -> int:
        entries = filter_entries(self._store().list_all(), options)

        if as_json:
            print(json.dumps([e.to_dict() for e in entries], indent=2, ensure_ascii=False))
            return 0

        active = options.active_count
        suffix = f"  ({active} filter{'s' if active > 1 else ''} active)" if active else ""
        print(f"Entries ({len(entries)}){suffix}")
        if not entries:
            print("  No entries found matching the current filters.")
            return 0

        print(
            f"  {'SR':>4}  {'Date':<10}  {'Particular':<16} {'Chalan':<8} {'Vehicle':<12} "
            f"{'Driver':<14} {'From':<10} {'To':<10} {'Qty':>8} {'Amount':>10}  Id"
        )
        for e in entries:
            amount = f"{e.amount:>10}" if e.amount is not None else f"{'—':>10}"
            print(
                f"  {e.sr_no or '':>4}  {format_date(e.date):<10}  {e.particular[:16]:<16} "
                f"{e.chalan_no[:8]:<8} {e.vehicle_no[:12]:<12} {e.driver_name[:14]:<14} "
                f"{e.from_[:10]:<10} {e.to[:10]:<10} {e.quantity:>8} {amount}  {e.id}"
            )
        return 0

    def update_entry(self, entry_id: str, fields: Dict[str, Any]) -> int:
        if not fields:
            print("[error] Nothing to update: pass at least one field option.", file=sys.stderr)
            return 1
        if self._store().update(entry_id, fields):
            print(f"✓  Updated {entry_id}: {', '.join(sorted(fields))}")
            return 0
        print(f"⚠  No entry with id {entry_id} — nothing changed.")
        return 1

    def delete_entry(self, entry_id: str) -> int:
        if self._store().delete(entry_id):
            print(f"✓  Deleted {entry_id}")
        else:
            print(f"⚠  No entry with id {entry_id} — nothing to delete.")
        return 0

    def export_entries(
        self,
        options: FilterOptions,
        output: Path | None = None,
        output_dir: Path | None = None,
    ) -> int:
        """Write the filtered table as CSV (to stdout without a target)."""
        entries = filter_entries(self._store().list_all(), options)

        out_path: Path | None = None
        if output:
            out_path = output
        elif output_dir:
            output_dir.mkdir(parents=True, exist_ok=True)
            out_path = output_dir / export_filename()

        text = export_csv(entries, out_path)
        if out_path:
            print(f"{len(entries)} entries exported to {out_path}")
        else:
            sys.stdout.write(text)
        return 0

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def show_dashboard(self, month: str | None = None, as_json: bool = False) -> int:
        report = build_dashboard(
            self._store().list_all(), month,
            top=cfg.top_n, months=cfg.rollup_months,
        )
        if as_json:
            print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
        else:
            print(report.summary(cfg.currency))
        return 0

    def make_invoice(
        self,
        month: str,
        details: BillDetails,
        tax_rate: float | None = None,
        output: Path | None = None,
    ) -> int:
        invoice = generate_invoice(self._store().list_all(), month, details, tax_rate=tax_rate)
        if invoice.is_empty:
            print(f"No entries found for {invoice.period_label}.")
            return 1

        print(invoice.summary())
        if output:
            invoice.to_json(output)
            print(f"Invoice saved to {output}")
        return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _month(value: str) -> str:
    if not is_month_key(value):
        raise argparse.ArgumentTypeError(f"expected YYYY-MM, got {value!r}")
    return value


def _add_entry_fields(p: argparse.ArgumentParser) -> None:
    g = p.add_argument_group("Entry fields")
    g.add_argument("--sr-no", default=None, help="Serial number (auto-assigned when omitted).")
    g.add_argument("--date", default=None, help="Trip date, YYYY-MM-DD.")
    g.add_argument("--particular", default=None, help="What was carried.")
    g.add_argument("--chalan-no", default=None, help="Chalan (delivery note) number.")
    g.add_argument("--vehicle-no", default=None, help="Vehicle registration number.")
    g.add_argument("--driver-name", default=None)
    g.add_argument("--from", dest="origin", default=None, metavar="PLACE")
    g.add_argument("--to", default=None, metavar="PLACE")
    g.add_argument("--quantity", default=None, help="Quantity; unparseable input counts as 0.")
    g.add_argument("--amount", default=None, help="Amount; leave out for 'not billed'.")


def _add_filters(p: argparse.ArgumentParser) -> None:
    g = p.add_argument_group("Filters")
    g.add_argument("--month", default=None, metavar="YYYY-MM")
    g.add_argument("--vehicle-no", default=None, help="Substring, case-insensitive.")
    g.add_argument("--driver-name", default=None, help="Substring, case-insensitive.")
    g.add_argument("--from", dest="origin", default=None, metavar="PLACE")
    g.add_argument("--to", default=None, metavar="PLACE")
    g.add_argument("--particular", default=None)
    g.add_argument("--chalan-no", default=None)
    g.add_argument("--min-amount", default=None)
    g.add_argument("--max-amount", default=None)
    g.add_argument("--min-quantity", default=None)
    g.add_argument("--max-quantity", default=None)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="haulbook",
        description="haulbook: record trips, filter the ledger, and generate monthly bills.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--version", action="store_true", help="Show package version and exit.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output.")
    parser.add_argument("--project", default=None, help="Ledger name (default: HAULBOOK_PROJECT or 'default').")
    parser.add_argument("--backend", default=None, choices=["json", "sqlite", "memory"],
                        help="Storage backend (default: HAULBOOK_BACKEND or 'json').")
    parser.add_argument("--home", default=None, metavar="DIR", help="Data root (default: ~/.haulbook).")

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    p = sub.add_parser("add", help="Record a new entry.")
    _add_entry_fields(p)

    p = sub.add_parser("list", help="Show entries, optionally filtered.")
    _add_filters(p)
    p.add_argument("--json", action="store_true", help="Print JSON instead of a table.")

    p = sub.add_parser("update", help="Change fields of an existing entry.")
    p.add_argument("id")
    _add_entry_fields(p)

    p = sub.add_parser("delete", help="Delete an entry by id.")
    p.add_argument("id")

    p = sub.add_parser("export", help="Export (filtered) entries as CSV.")
    _add_filters(p)
    p.add_argument("--output", default=None, metavar="FILE", help="CSV file to write.")
    p.add_argument("--output-dir", default=None, metavar="DIR",
                   help="Directory for an auto-named logistics-entries-<date>.csv.")

    p = sub.add_parser("dashboard", help="Show the dashboard overview.")
    p.add_argument("--month", default=None, type=_month, metavar="YYYY-MM")
    p.add_argument("--json", action="store_true")

    p = sub.add_parser("invoice", help="Generate the bill for a month.")
    p.add_argument("--month", required=True, type=_month, metavar="YYYY-MM")
    p.add_argument("--bill-to", default="", help="Customer name.")
    p.add_argument("--bill-from", default=None, help="Company name (default from config).")
    p.add_argument("--address", default=None)
    p.add_argument("--gst-no", default=None)
    p.add_argument("--bill-no", default=None, help="Bill number (default: BILL-<6 digits>).")
    p.add_argument("--tax-rate", default=None, type=float, help="Tax rate as a fraction, e.g. 0.18.")
    p.add_argument("--output", default=None, metavar="FILE", help="Write the invoice as JSON.")

    p = sub.add_parser("months", help="List the selectable months.")
    p.add_argument("--count", default=None, type=int)

    p = sub.add_parser("ui", help="Start the web API server (requires: pip install haulbook[ui]).")
    p.add_argument("--host", default="127.0.0.1", metavar="HOST")
    p.add_argument("--port", default=8000, type=int, metavar="PORT")
    p.add_argument("--no-browser", action="store_true")
    p.add_argument("--reload", action="store_true")
    p.add_argument("--log-level", default="warning", choices=["debug", "info", "warning", "error"])

    return parser


def _collect(args: argparse.Namespace, mapping: Dict[str, str]) -> Dict[str, Any]:
    return {
        field: getattr(args, dest)
        for dest, field in mapping.items()
        if getattr(args, dest, None) is not None
    }


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args   = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)-8s %(name)s — %(message)s",
        )

    cli = HaulbookCLI()
    if args.version:
        cli.print_version()
        return 0

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "months":
        return cli.show_months(args.count)

    if args.command == "ui":
        from haulbook.ui.server import launch
        launch(
            host=args.host,
            port=args.port,
            reload=args.reload,
            open_browser=not args.no_browser,
            log_level=args.log_level,
        )
        return 0

    try:
        cli.store = get_store(args.backend, project=args.project, home=args.home)

        if args.command == "add":
            return cli.add_entry(_collect(args, _ENTRY_ARGS))
        if args.command == "update":
            return cli.update_entry(args.id, _collect(args, _ENTRY_ARGS))
        if args.command == "delete":
            return cli.delete_entry(args.id)
        if args.command == "list":
            return cli.list_entries(FilterOptions.from_mapping(_collect(args, _FILTER_ARGS)), as_json=args.json)
        if args.command == "export":
            return cli.export_entries(
                FilterOptions.from_mapping(_collect(args, _FILTER_ARGS)),
                output=Path(args.output) if args.output else None,
                output_dir=Path(args.output_dir) if args.output_dir else None,
            )
        if args.command == "dashboard":
            return cli.show_dashboard(args.month, as_json=args.json)
        if args.command == "invoice":
            details = BillDetails(
                bill_to=args.bill_to,
                bill_from=args.bill_from,
                address=args.address,
                gst_no=args.gst_no,
            )
            if args.bill_no:
                details.bill_no = args.bill_no
            return cli.make_invoice(
                args.month, details,
                tax_rate=args.tax_rate,
                output=Path(args.output) if args.output else None,
            )
    except HaulbookError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 1
    finally:
        if cli.store is not None:
            cli.store.close()

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
