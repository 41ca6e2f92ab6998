"""
haulbook.exceptions
~~~~~~~~~~~~~~~~~~~
Exception hierarchy for the haulbook library.

Most problems in haulbook are *not* errors: corrupt storage reads as an empty
collection, unknown ids are no-ops and bad numbers are coerced. The classes
below cover the few failures a caller actually has to react to.
"""

from __future__ import annotations


class HaulbookError(Exception):
    """Base exception for all haulbook errors."""

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause
        self.message = message

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message} (caused by {type(self.cause).__name__}: {self.cause})"
        return self.message


class StorageUnavailableError(HaulbookError):
    """
    Raised when the persistence medium itself cannot be read or written.

    A mutation that raises this did not take effect.

    Attributes:
        key: The blob key that was being accessed.
    """

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.key = key


class ConfigurationError(HaulbookError):
    """Raised when the runtime configuration names something that does not exist."""
