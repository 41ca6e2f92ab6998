"""
haulbook.query
~~~~~~~~~~~~~~
The filter engine: a pure function of (entries, options).

Every option is independently optional — ``None`` or an empty string means
"no constraint" — and all present options must hold (logical AND). Input
order is preserved.

Usage::

    from haulbook.query import FilterOptions, filter_entries

    opts = FilterOptions(month="2024-03", vehicle_no="mh01", min_amount="500")
    rows = filter_entries(store.list_all(), opts)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional

from .models import FIELD_ALIASES, Entry, parse_number

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

# Text options and the entry attribute each one searches.
_TEXT_OPTIONS = ("vehicle_no", "driver_name", "from_", "to", "particular", "chalan_no")

# Extra camelCase spellings accepted by ``FilterOptions.from_mapping``.
_OPTION_ALIASES = {
    **FIELD_ALIASES,
    "minAmount":   "min_amount",
    "maxAmount":   "max_amount",
    "minQuantity": "min_quantity",
    "maxQuantity": "max_quantity",
}


@dataclass
class FilterOptions:
    """
    Predicate set for ``filter_entries``.

    Numeric bounds may be given as numbers or as raw form text; text that
    does not parse as a number is ignored rather than rejected.
    """

    month:        Optional[str] = None
    vehicle_no:   Optional[str] = None
    driver_name:  Optional[str] = None
    from_:        Optional[str] = None
    to:           Optional[str] = None
    particular:   Optional[str] = None
    chalan_no:    Optional[str] = None
    min_amount:   Any = None
    max_amount:   Any = None
    min_quantity: Any = None
    max_quantity: Any = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "FilterOptions":
        """Build options from query-string / form style keys (camelCase or snake_case)."""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = _OPTION_ALIASES.get(key, key)
            if name in known:
                kwargs[name] = value
        return cls(**kwargs)

    @property
    def active_count(self) -> int:
        """How many options actually constrain the result."""
        return sum(1 for f in fields(self) if not _blank(getattr(self, f.name)))

    def bound(self, name: str) -> Optional[Decimal]:
        """The parsed numeric bound, or ``None`` for "no constraint"."""
        value = getattr(self, name)
        if _blank(value):
            return None
        parsed = parse_number(value)
        if parsed is None:
            logger.debug("Ignoring unparseable %s bound %r", name, value)
        return parsed


def _blank(value: Any) -> bool:
    return value is None or value == ""


def _contains(haystack: Optional[str], needle: str) -> bool:
    if not haystack:
        return False
    return needle.lower() in haystack.lower()


def matches(entry: Entry, options: FilterOptions) -> bool:
    """True when ``entry`` satisfies every option set in ``options``."""
    if not _blank(options.month):
        if entry.date is None or not entry.date.isoformat().startswith(str(options.month)):
            return False

    for name in _TEXT_OPTIONS:
        needle = getattr(options, name)
        if not _blank(needle) and not _contains(getattr(entry, name, None), str(needle)):
            return False

    amount = entry.billed_amount
    lo, hi = options.bound("min_amount"), options.bound("max_amount")
    if lo is not None and amount < lo:
        return False
    if hi is not None and amount > hi:
        return False

    quantity = entry.quantity
    lo, hi = options.bound("min_quantity"), options.bound("max_quantity")
    if lo is not None and quantity < lo:
        return False
    if hi is not None and quantity > hi:
        return False

    return True


def filter_entries(
    entries: Iterable[Entry],
    options: Optional[FilterOptions] = None,
    **criteria: Any,
) -> List[Entry]:
    """
    Entries satisfying all given options, in input order.

    Options come from ``options`` or, for convenience, keyword arguments
    (``filter_entries(rows, month="2024-03")``); keywords win on overlap.
    """
    if criteria:
        base = {f.name: getattr(options, f.name) for f in fields(FilterOptions)} if options else {}
        base.update(criteria)
        options = FilterOptions.from_mapping(base)
    if options is None:
        return list(entries)
    return [e for e in entries if matches(e, options)]


__all__ = ["FilterOptions", "filter_entries", "matches"]
