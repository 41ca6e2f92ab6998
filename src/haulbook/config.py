"""
haulbook.config
~~~~~~~~~~~~~~~
Central configuration for the haulbook library.

All values have sensible defaults that work out of the box (JSON files under
``~/.haulbook/default/``). Override any field via a ``.env`` file or
environment variables — pydantic-settings picks them up automatically.

Usage::

    from haulbook.config import cfg

    print(cfg.backend)                  # "json"
    print(cfg.get_billing_config())     # typed BillingConfig dataclass
"""

from __future__ import annotations

import re
import warnings
from dataclasses import dataclass
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


BACKENDS = ("json", "sqlite", "memory")

# Blob keys double as file names in the json backend.
BLOB_KEY_RE = re.compile(r"^[A-Za-z0-9_-][A-Za-z0-9_.-]{0,127}$")


# ---------------------------------------------------------------------------
# Typed return value for billing configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BillingConfig:
    """Immutable snapshot of the invoice defaults."""

    company_name: str
    company_address: str
    gst_no: str
    currency: str
    tax_rate: float


# ---------------------------------------------------------------------------
# Main settings class
# ---------------------------------------------------------------------------

class Config(BaseSettings):
    """
    Runtime configuration for haulbook.

    Reads from (in priority order):
      1. Environment variables (prefixed with ``HAULBOOK_``)
      2. A ``.env`` file in the working directory
      3. The defaults defined below
    """

    model_config = SettingsConfigDict(
        env_prefix="HAULBOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    home: Path = Field(
        default=Path.home() / ".haulbook",
        description="Root directory holding one sub-folder per project.",
    )
    project: str = Field(
        default="default",
        description="Project (ledger) name. Each project has its own entry collection.",
    )
    backend: str = Field(
        default="json",
        description="Persistence backend: 'json' (one file per blob), 'sqlite' or 'memory'.",
    )
    storage_key: str = Field(
        default="logistics_entries",
        description="Name of the blob holding the entry collection.",
    )

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    tax_rate: float = Field(
        default=0.18,
        ge=0.0,
        le=1.0,
        description="Tax (GST) rate applied to invoice subtotals, as a fraction.",
    )
    top_n: int = Field(
        default=5,
        ge=1,
        description="Number of vehicles / drivers shown in usage rankings.",
    )
    rollup_months: int = Field(
        default=6,
        ge=1,
        le=24,
        description="Width of the dashboard's monthly rollup window.",
    )
    month_options: int = Field(
        default=12,
        ge=1,
        le=60,
        description="How many recent months are offered when picking a month.",
    )

    # ------------------------------------------------------------------
    # Billing
    # ------------------------------------------------------------------

    company_name: str = Field(
        default="Aryan Enterprises",
        description="Name printed in the 'Bill From' block of invoices.",
    )
    company_address: str = Field(
        default="Your Company Address",
        description="Address printed under the company name.",
    )
    gst_no: str = Field(
        default="",
        description="Company GST registration number (optional).",
    )
    currency: str = Field(
        default="INR",
        description="Currency code shown next to amounts.",
    )

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("backend")
    @classmethod
    def _validate_backend(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in BACKENDS:
            raise ValueError(f"backend must be one of {', '.join(BACKENDS)}; got {v!r}.")
        return v

    @field_validator("storage_key", "project")
    @classmethod
    def _strip_non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("value must not be empty.")
        return v

    @field_validator("storage_key")
    @classmethod
    def _validate_storage_key(cls, v: str) -> str:
        if not BLOB_KEY_RE.match(v):
            raise ValueError(
                f"storage_key {v!r} is not usable as a blob name: use letters, digits, "
                "'_', '-' and '.', not starting with '.' (max 128 characters)."
            )
        return v

    @field_validator("home")
    @classmethod
    def _expand_home(cls, v: Path) -> Path:
        return Path(v).expanduser()

    @model_validator(mode="after")
    def _warn_on_high_tax_rate(self) -> "Config":
        if self.tax_rate > 0.5:
            warnings.warn(
                f"tax_rate={self.tax_rate} looks like a percentage above 50%. "
                "The rate is a fraction: use 0.18 for 18%.",
                UserWarning,
                stacklevel=2,
            )
        return self

    # ------------------------------------------------------------------
    # Helper methods
    # ------------------------------------------------------------------

    def get_billing_config(self) -> BillingConfig:
        """Return an immutable, typed snapshot of the invoice defaults."""
        return BillingConfig(
            company_name=self.company_name,
            company_address=self.company_address,
            gst_no=self.gst_no,
            currency=self.currency,
            tax_rate=self.tax_rate,
        )


# ---------------------------------------------------------------------------
# Module-level singleton — import this everywhere
# ---------------------------------------------------------------------------

cfg = Config()

__all__ = ["BACKENDS", "BLOB_KEY_RE", "BillingConfig", "Config", "cfg"]
