"""
haulbook.ui.api
~~~~~~~~~~~~~~~
FastAPI backend for the haulbook web UI.

Entries are persisted through the configured ``EntryStore`` (JSON blob under
``~/.haulbook/<project>/`` by default). JSON bodies and responses use the
ledger's camelCase field names (``vehicleNo``, ``chalanNo`` …).

Endpoints
---------
GET    /health                  — Liveness + storage status
GET    /config                  — Runtime configuration snapshot
GET    /months                  — Selectable months (?count=)
GET    /entries                 — List entries (filter query parameters)
POST   /entries                 — Create an entry
GET    /entries/export.csv      — Filtered entries as a CSV download
GET    /entries/{id}            — One entry
PATCH  /entries/{id}            — Change fields of an entry
DELETE /entries/{id}            — Delete an entry (idempotent, always 204)
GET    /dashboard?month=        — Dashboard figures
GET    /invoice?month=YYYY-MM   — Monthly bill with GST
"""

from __future__ import annotations

import datetime as dt
from typing import Optional, Union

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from haulbook.config import cfg
from haulbook.dates import month_options
from haulbook.exceptions import StorageUnavailableError
from haulbook.export import export_csv, export_filename
from haulbook.query import FilterOptions, filter_entries
from haulbook.reports.dashboard import build_dashboard
from haulbook.reports.invoice import BillDetails, generate_invoice
from haulbook.storage import EntryStore, get_store

_MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"

Number = Union[str, float, None]


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------

class EntryIn(BaseModel):
    """
    New-entry form. Mirrors the form's required fields; numeric fields are
    passed through as-is and coerced by the store.
    """

    model_config = ConfigDict(populate_by_name=True)

    sr_no:       Union[int, str, None] = Field(default=None, alias="srNo")
    date:        dt.date
    particular:  str = Field(min_length=1)
    chalan_no:   str = Field(alias="chalanNo", min_length=1)
    vehicle_no:  str = Field(alias="vehicleNo", min_length=1)
    driver_name: str = Field(alias="driverName", min_length=1)
    from_:       str = Field(alias="from", min_length=1)
    to:          str = Field(min_length=1)
    quantity:    Number
    amount:      Number = None


class EntryPatch(BaseModel):
    """Partial update — only the fields sent are changed."""

    model_config = ConfigDict(populate_by_name=True)

    sr_no:       Union[int, str, None] = Field(default=None, alias="srNo")
    date:        Optional[dt.date] = None
    particular:  Optional[str] = None
    chalan_no:   Optional[str] = Field(default=None, alias="chalanNo")
    vehicle_no:  Optional[str] = Field(default=None, alias="vehicleNo")
    driver_name: Optional[str] = Field(default=None, alias="driverName")
    from_:       Optional[str] = Field(default=None, alias="from")
    to:          Optional[str] = None
    quantity:    Number = None
    amount:      Number = None


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

def _store(request: Request) -> EntryStore:
    """The app's entry store, opened on first use."""
    store = request.app.state.store
    if store is None:
        store = request.app.state.store = get_store()
    return store


def _filters(
    month:        Optional[str] = Query(default=None),
    vehicle_no:   Optional[str] = Query(default=None, alias="vehicleNo"),
    driver_name:  Optional[str] = Query(default=None, alias="driverName"),
    from_:        Optional[str] = Query(default=None, alias="from"),
    to:           Optional[str] = Query(default=None),
    particular:   Optional[str] = Query(default=None),
    chalan_no:    Optional[str] = Query(default=None, alias="chalanNo"),
    min_amount:   Optional[str] = Query(default=None, alias="minAmount"),
    max_amount:   Optional[str] = Query(default=None, alias="maxAmount"),
    min_quantity: Optional[str] = Query(default=None, alias="minQuantity"),
    max_quantity: Optional[str] = Query(default=None, alias="maxQuantity"),
) -> FilterOptions:
    # Bounds stay strings: unparseable text means "no constraint", not 422.
    return FilterOptions(
        month=month, vehicle_no=vehicle_no, driver_name=driver_name,
        from_=from_, to=to, particular=particular, chalan_no=chalan_no,
        min_amount=min_amount, max_amount=max_amount,
        min_quantity=min_quantity, max_quantity=max_quantity,
    )


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------

def create_app(store: Optional[EntryStore] = None) -> FastAPI:
    """Build the API. Without ``store`` the configured one is opened lazily."""
    app = FastAPI(
        title="haulbook API",
        description="REST API for the haulbook trip ledger — entries, dashboard and monthly bills.",
        version="0.1.0",
        license_info={"name": "MIT"},
    )
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StorageUnavailableError)
    async def _storage_unavailable(request: Request, exc: StorageUnavailableError):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": f"Storage unavailable — the change was not saved. {exc}"},
        )

    # -- Meta -------------------------------------------------------------

    @app.get("/health", tags=["meta"])
    def health(store: EntryStore = Depends(_store)):
        return {
            "status":  "ok",
            "backend": type(store.blobs).__name__,
            "key":     store.key,
            "entries": len(store),
        }

    @app.get("/config", tags=["meta"])
    def get_config():
        """Return active haulbook configuration."""
        billing = cfg.get_billing_config()
        return {
            "project":         cfg.project,
            "backend":         cfg.backend,
            "tax_rate":        billing.tax_rate,
            "currency":        billing.currency,
            "company_name":    billing.company_name,
            "company_address": billing.company_address,
            "gst_no":          billing.gst_no,
            "top_n":           cfg.top_n,
            "rollup_months":   cfg.rollup_months,
        }

    @app.get("/months", tags=["meta"])
    def get_months(count: Optional[int] = Query(default=None, ge=1, le=60)):
        return [
            {"value": key, "label": label}
            for key, label in month_options(count or cfg.month_options)
        ]

    # -- Entries ----------------------------------------------------------

    @app.get("/entries", tags=["entries"])
    def list_entries(
        options: FilterOptions = Depends(_filters),
        store: EntryStore = Depends(_store),
    ):
        """List entries in insertion order, filtered by any query parameters given."""
        entries = filter_entries(store.list_all(), options)
        return {
            "entries":        [e.to_dict() for e in entries],
            "total":          len(entries),
            "active_filters": options.active_count,
        }

    @app.post("/entries", status_code=status.HTTP_201_CREATED, tags=["entries"])
    def create_entry(body: EntryIn, store: EntryStore = Depends(_store)):
        entry = store.create(body.model_dump())
        return entry.to_dict()

    @app.get("/entries/export.csv", tags=["entries"])
    def export_entries(
        options: FilterOptions = Depends(_filters),
        store: EntryStore = Depends(_store),
    ):
        text = export_csv(filter_entries(store.list_all(), options))
        return Response(
            content=text,
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
        )

    @app.get("/entries/{entry_id}", tags=["entries"])
    def get_entry(entry_id: str, store: EntryStore = Depends(_store)):
        entry = store.get(entry_id)
        if entry is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                                detail="Entry not found.")
        return entry.to_dict()

    @app.patch("/entries/{entry_id}", tags=["entries"])
    def update_entry(entry_id: str, body: EntryPatch, store: EntryStore = Depends(_store)):
        """Apply the sent fields. ``id`` and ``createdAt`` never change."""
        if not store.update(entry_id, body.model_dump(exclude_unset=True)):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                                detail="Entry not found.")
        return store.get(entry_id).to_dict()

    @app.delete("/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT,
                tags=["entries"])
    def delete_entry(entry_id: str, store: EntryStore = Depends(_store)):
        """Delete an entry. Unknown ids are accepted so repeated deletes agree."""
        store.delete(entry_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    # -- Reports ----------------------------------------------------------

    @app.get("/dashboard", tags=["reports"])
    def get_dashboard(
        month: Optional[str] = Query(default=None, pattern=_MONTH_PATTERN),
        store: EntryStore = Depends(_store),
    ):
        report = build_dashboard(
            store.list_all(), month, top=cfg.top_n, months=cfg.rollup_months,
        )
        return report.to_dict()

    @app.get("/invoice", tags=["reports"])
    def get_invoice(
        month:     str = Query(..., pattern=_MONTH_PATTERN, description="Bill month, YYYY-MM"),
        bill_to:   str = Query(default="", alias="billTo"),
        bill_from: Optional[str] = Query(default=None, alias="billFrom"),
        address:   Optional[str] = Query(default=None),
        gst_no:    Optional[str] = Query(default=None, alias="gstNo"),
        bill_no:   Optional[str] = Query(default=None, alias="billNo"),
        tax_rate:  Optional[float] = Query(default=None, ge=0, le=1, alias="taxRate"),
        store: EntryStore = Depends(_store),
    ):
        """The bill for one month: lines sorted by date, subtotal, GST and total."""
        details = BillDetails(bill_to=bill_to, bill_from=bill_from,
                              address=address, gst_no=gst_no)
        if bill_no:
            details.bill_no = bill_no
        invoice = generate_invoice(store.list_all(), month, details, tax_rate=tax_rate)
        return invoice.to_dict()

    return app


app = create_app()
