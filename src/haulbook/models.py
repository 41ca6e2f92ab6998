"""
haulbook.models
~~~~~~~~~~~~~~~
Data models for trip / shipment entries and the figures derived from them.

Key design decisions
--------------------
* ``Entry`` is the only persisted record. It is serialised with the
  camelCase keys of the browser ledger it replaces (``vehicleNo``,
  ``createdAt`` …) so existing exports load unchanged; Python code uses
  snake_case attributes. ``from`` is a keyword, hence ``Entry.from_``.

* Numeric input is *lenient*: whatever the form sends is parsed the way
  ``parseFloat`` would read it (leading number wins, garbage → nothing).
  An unparseable quantity becomes ``0``; an unparseable amount becomes
  ``None`` — "not billed", which is not the same thing as billed at zero.

* ``MonthlySummary`` and ``InvoiceTotals`` are derived, never stored.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional

from .dates import month_label, parse_date

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

ZERO = Decimal("0")

# Largest decimal exponent a double can hold (~1.8e308).
_MAX_EXPONENT = 308

# Leading-number grammar accepted by JavaScript's parseFloat.
_NUMBER_RE = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")

# Persisted (camelCase) key → attribute name. Attribute names map to themselves.
FIELD_ALIASES: Dict[str, str] = {
    "srNo":       "sr_no",
    "chalanNo":   "chalan_no",
    "vehicleNo":  "vehicle_no",
    "driverName": "driver_name",
    "from":       "from_",
    "createdAt":  "created_at",
}

TEXT_FIELDS = ("particular", "chalan_no", "vehicle_no", "driver_name", "from_", "to")

# Fields a caller may set on create / update. ``id`` and ``created_at`` are
# assigned by the store and never change.
EDITABLE_FIELDS = frozenset(
    ("sr_no", "date", "quantity", "amount") + TEXT_FIELDS
)


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------

def _usable(d: Decimal) -> Optional[Decimal]:
    # Beyond the float range parseFloat gives Infinity, which is rejected.
    if not d.is_finite() or (d and d.adjusted() > _MAX_EXPONENT):
        return None
    return d


def parse_number(value: Any) -> Optional[Decimal]:
    """
    Parse ``value`` like ``parseFloat``: ``"12.5 t"`` → ``12.5``,
    ``"abc"`` / ``""`` / ``None`` → ``None``. NaN, infinities and
    magnitudes beyond the float range are rejected.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return _usable(value)
    if isinstance(value, int):
        return _usable(Decimal(value))
    if isinstance(value, float):
        try:
            d = Decimal(str(value))
        except InvalidOperation:
            return None
        return _usable(d)
    match = _NUMBER_RE.match(str(value))
    if not match:
        return None
    try:
        d = Decimal(match.group(1))
    except InvalidOperation:
        return None
    return _usable(d)


def coerce_quantity(value: Any) -> Decimal:
    """Quantity is required: anything unparseable counts as ``0``."""
    parsed = parse_number(value)
    if parsed is None:
        if value not in (None, ""):
            logger.debug("Quantity %r is not a number; using 0", value)
        return ZERO
    return parsed


def coerce_amount(value: Any) -> Optional[Decimal]:
    """Amount is optional: anything unparseable means "not billed" (``None``)."""
    parsed = parse_number(value)
    if parsed is None and value not in (None, ""):
        logger.debug("Amount %r is not a number; leaving unbilled", value)
    return parsed


def coerce_sr_no(value: Any) -> Optional[int]:
    """A positive serial number, or ``None`` when missing / zero / garbage."""
    parsed = parse_number(value)
    if parsed is None:
        return None
    number = int(parsed)
    return number if number > 0 else None


def _to_json_number(d: Optional[Decimal]) -> Any:
    if d is None:
        return None
    if d == d.to_integral_value():
        return int(d)
    return float(d)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.debug("Unparseable timestamp %r", value)
        return None


def normalise_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Map caller-supplied fields onto ``Entry`` attributes and coerce them.

    Keys may be attribute names (``vehicle_no``) or persisted keys
    (``vehicleNo``). Unknown keys, ``id`` and ``created_at`` are dropped.
    The vehicle number is upper-cased; text fields are stringified.
    """
    out: Dict[str, Any] = {}
    for key, value in fields.items():
        name = FIELD_ALIASES.get(key, key)
        if name not in EDITABLE_FIELDS:
            if name not in ("id", "created_at"):
                logger.debug("Ignoring unknown entry field %r", key)
            continue
        if name == "quantity":
            out[name] = coerce_quantity(value)
        elif name == "amount":
            out[name] = coerce_amount(value)
        elif name == "sr_no":
            out[name] = coerce_sr_no(value)
        elif name == "date":
            out[name] = parse_date(value)
        else:
            text = "" if value is None else str(value)
            out[name] = text.upper() if name == "vehicle_no" else text
    return out


# ---------------------------------------------------------------------------
# Entry
# ---------------------------------------------------------------------------

@dataclass
class Entry:
    """
    One trip / shipment line in the ledger.

    Create entries through ``EntryStore.create()`` — it assigns ``id`` and
    ``created_at`` and applies the input coercion rules.
    """

    id:          str
    sr_no:       Optional[int] = None
    date:        Optional[date] = None
    particular:  str = ""
    chalan_no:   str = ""
    vehicle_no:  str = ""
    driver_name: str = ""
    from_:       str = ""
    to:          str = ""
    quantity:    Decimal = ZERO
    amount:      Optional[Decimal] = None
    created_at:  Optional[datetime] = None

    # ------------------------------------------------------------------
    # Derived helpers
    # ------------------------------------------------------------------

    @property
    def is_billed(self) -> bool:
        """True when an amount was recorded (zero counts as billed)."""
        return self.amount is not None

    @property
    def billed_amount(self) -> Decimal:
        """The amount for summing: unbilled entries contribute ``0``."""
        return self.amount if self.amount is not None else ZERO

    @property
    def month(self) -> Optional[str]:
        """``"YYYY-MM"`` of the entry date, or ``None`` without a date."""
        return self.date.isoformat()[:7] if self.date else None

    @property
    def route(self) -> str:
        return f"{self.from_} → {self.to}"

    def replace(self, **changes: Any) -> "Entry":
        """Return a copy with ``changes`` applied (``id`` / ``created_at`` are kept)."""
        data = {name: getattr(self, name) for name in self.__dataclass_fields__}
        data.update({k: v for k, v in changes.items() if k in EDITABLE_FIELDS})
        return Entry(**data)

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        """Persisted form — camelCase keys, JSON-native values."""
        return {
            "id":         self.id,
            "srNo":       self.sr_no,
            "date":       self.date.isoformat() if self.date else None,
            "particular": self.particular,
            "chalanNo":   self.chalan_no,
            "vehicleNo":  self.vehicle_no,
            "driverName": self.driver_name,
            "from":       self.from_,
            "to":         self.to,
            "quantity":   _to_json_number(self.quantity),
            "amount":     _to_json_number(self.amount),
            "createdAt":  self.created_at.isoformat() if self.created_at else None,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Entry":
        """
        Rebuild an entry from its persisted form.

        Lenient: bad numbers and dates are coerced rather than rejected.
        """
        fields = normalise_fields(d)
        fields.setdefault("quantity", ZERO)
        return cls(
            id=str(d.get("id") or ""),
            created_at=_parse_timestamp(d.get("createdAt", d.get("created_at"))),
            **fields,
        )


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Derived figures
# ---------------------------------------------------------------------------

@dataclass
class MonthlySummary:
    """Entry count, quantity and amount for one calendar month."""

    month:          str
    total_entries:  int = 0
    total_quantity: Decimal = field(default_factory=Decimal)
    total_amount:   Decimal = field(default_factory=Decimal)
    entries:        List[Entry] = field(default_factory=list)

    @property
    def label(self) -> str:
        return month_label(self.month)

    def to_dict(self, include_entries: bool = False) -> dict:
        d = {
            "month":          self.month,
            "label":          self.label,
            "total_entries":  self.total_entries,
            "total_quantity": str(self.total_quantity),
            "total_amount":   str(self.total_amount),
        }
        if include_entries:
            d["entries"] = [e.to_dict() for e in self.entries]
        return d


@dataclass(frozen=True)
class InvoiceTotals:
    """``subtotal`` + ``tax`` (= subtotal × rate) = ``total``."""

    subtotal: Decimal
    tax:      Decimal
    total:    Decimal
    tax_rate: Decimal

    def to_dict(self) -> dict:
        return {
            "subtotal": str(self.subtotal),
            "tax":      str(self.tax),
            "total":    str(self.total),
            "tax_rate": str(self.tax_rate),
        }


__all__ = [
    "EDITABLE_FIELDS",
    "Entry",
    "FIELD_ALIASES",
    "InvoiceTotals",
    "MonthlySummary",
    "coerce_amount",
    "coerce_quantity",
    "coerce_sr_no",
    "normalise_fields",
    "parse_number",
    "utcnow",
]
