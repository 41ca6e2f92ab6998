"""
examples/record_trip.py
~~~~~~~~~~~~~~~~~~~~~~~
Record a single trip and print what was stored.

Usage
-----
    python -m examples.record_trip --vehicle-no mh01ab1234 --quantity 12 --amount 4500
    python -m examples.record_trip --date 2024-03-15 --from Pune --to Mumbai
    python -m examples.record_trip --project demo --backend sqlite
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date

logging.basicConfig(level=logging.WARNING, format="%(levelname)s  %(name)s — %(message)s")

from haulbook import StorageUnavailableError, get_store


def record_trip(fields: dict, project: str | None = None, backend: str | None = None) -> bool:
    try:
        with get_store(backend, project=project) as store:
            entry = store.create(fields)
            total = len(store)
    except StorageUnavailableError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return False

    W = 44
    print("\n" + "─" * W)
    print(f"  {'TRIP RECORDED':^{W - 4}}")
    print("─" * W)

    def row(label: str, value: object) -> None:
        print(f"  {label:<14} {value if value not in (None, '') else '—'}")

    row("SR. NO.",    entry.sr_no)
    row("Date",       entry.date)
    row("Particular", entry.particular)
    row("Chalan No.", entry.chalan_no)
    row("Vehicle",    entry.vehicle_no)
    row("Driver",     entry.driver_name)
    row("Route",      entry.route)
    row("Quantity",   entry.quantity)
    row("Amount",     entry.amount if entry.is_billed else "not billed")
    print("─" * W)
    print(f"  ID            : {entry.id}")
    print(f"  Entries now   : {total}\n")
    return True


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Record one trip in a haulbook ledger.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument("--date",        default=date.today().isoformat())
    p.add_argument("--particular",  default="Cement")
    p.add_argument("--chalan-no",   default="CH001")
    p.add_argument("--vehicle-no",  default="MH01AB1234")
    p.add_argument("--driver-name", default="Ramesh")
    p.add_argument("--from",        dest="origin", default="Pune")
    p.add_argument("--to",          default="Mumbai")
    p.add_argument("--quantity",    default="10")
    p.add_argument("--amount",      default=None, help="Leave out for 'not billed'.")
    p.add_argument("--project",     default=None)
    p.add_argument("--backend",     default=None, choices=["json", "sqlite", "memory"])
    p.add_argument("--verbose", "-v", action="store_true")
    return p


if __name__ == "__main__":
    args = _build_parser().parse_args()
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    ok = record_trip(
        {
            "date": args.date,
            "particular": args.particular,
            "chalanNo": args.chalan_no,
            "vehicleNo": args.vehicle_no,
            "driverName": args.driver_name,
            "from": args.origin,
            "to": args.to,
            "quantity": args.quantity,
            "amount": args.amount,
        },
        project=args.project,
        backend=args.backend,
    )
    sys.exit(0 if ok else 1)
