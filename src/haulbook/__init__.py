"""
haulbook
~~~~~~~~
Local trip / shipment ledger for small transport businesses.

Typical usage::

    from haulbook import FilterOptions, filter_entries, get_store
    from haulbook.reports import generate_invoice

    store = get_store()
    store.create({"date": "2024-03-15", "vehicleNo": "mh01ab1234",
                  "particular": "Cement", "quantity": "12", "amount": "4500"})

    march = filter_entries(store.list_all(), FilterOptions(month="2024-03"))
    print(generate_invoice(march, "2024-03").summary())
"""

from .config import BillingConfig, Config, cfg
from .exceptions import ConfigurationError, HaulbookError, StorageUnavailableError
from .models import Entry, InvoiceTotals, MonthlySummary
from .query import FilterOptions, filter_entries
from .storage import EntryStore, get_store

__all__ = [
    # Storage
    "EntryStore",
    "get_store",
    # Configuration
    "BillingConfig",
    "Config",
    "cfg",
    # Models
    "Entry",
    "MonthlySummary",
    "InvoiceTotals",
    # Query
    "FilterOptions",
    "filter_entries",
    # Exceptions
    "HaulbookError",
    "StorageUnavailableError",
    "ConfigurationError",
]
