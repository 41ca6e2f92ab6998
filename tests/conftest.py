"""
tests/conftest.py
~~~~~~~~~~~~~~~~~
Shared pytest fixtures for the haulbook test suite.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from haulbook.config import Config
from haulbook.models import Entry
from haulbook.storage import EntryStore, FileBlobStore, MemoryBlobStore


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

@pytest.fixture
def default_config() -> Config:
    return Config(_env_file=None)  # type: ignore[call-arg]


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------

@pytest.fixture
def blobs() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture
def store(blobs) -> EntryStore:
    return EntryStore(blobs)


@pytest.fixture
def file_store(tmp_path) -> EntryStore:
    s = EntryStore(FileBlobStore(tmp_path / "entries"))
    yield s
    s.close()


# ---------------------------------------------------------------------------
# Entry helpers
# ---------------------------------------------------------------------------

def make_entry(
    *,
    id: str = "e1",
    sr_no: int | None = 1,
    entry_date: date | None = date(2024, 3, 15),
    particular: str = "Cement",
    chalan_no: str = "CH001",
    vehicle_no: str = "MH01AB1234",
    driver_name: str = "Ramesh",
    from_: str = "Pune",
    to: str = "Mumbai",
    quantity: str = "10",
    amount: str | None = "1000",
) -> Entry:
    return Entry(
        id=id,
        sr_no=sr_no,
        date=entry_date,
        particular=particular,
        chalan_no=chalan_no,
        vehicle_no=vehicle_no,
        driver_name=driver_name,
        from_=from_,
        to=to,
        quantity=Decimal(quantity),
        amount=Decimal(amount) if amount is not None else None,
        created_at=datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def sample_entries() -> list[Entry]:
    return [
        make_entry(id="a", sr_no=1, entry_date=date(2024, 3, 2), vehicle_no="MH01AB1234",
                   driver_name="Ramesh", quantity="12.5", amount="4500"),
        make_entry(id="b", sr_no=2, entry_date=date(2024, 3, 9), vehicle_no="GJ05CD9876",
                   driver_name="Suresh", from_="Surat", to="Nashik",
                   particular="Sand", quantity="8", amount=None),
        make_entry(id="c", sr_no=3, entry_date=date(2024, 2, 20), vehicle_no="MH01AB1234",
                   driver_name="Ramesh", quantity="20", amount="7000"),
        make_entry(id="d", sr_no=4, entry_date=date(2024, 1, 5), vehicle_no="KA03EF5555",
                   driver_name="Mahesh", chalan_no="CH099", quantity="5", amount="0"),
    ]


@pytest.fixture
def form_fields() -> dict:
    """New-entry input as the form sends it: strings, camelCase keys."""
    return {
        "srNo": "",
        "date": "2024-03-15",
        "particular": "Cement",
        "chalanNo": "CH001",
        "vehicleNo": "mh01ab1234",
        "driverName": "Ramesh",
        "from": "Pune",
        "to": "Mumbai",
        "quantity": "12.5",
        "amount": "4500",
    }


@pytest.fixture
def entry_factory():
    """The ``make_entry`` builder, for tests that need custom entries."""
    return make_entry
