# src/fuelify/domain/errors.py
"""
Domain Errors - Business Logic Exceptions

This module defines domain-specific exceptions that represent
business rule violations and storage failures. Each error carries a
machine-checkable ``kind`` used by adapters to pick a response status.
"""


class DomainError(Exception):
    """Base exception for domain errors."""
    kind = "internal"
    retryable = False


class InvalidArgumentError(DomainError):
    """Raised when input is malformed (bad grade, non-positive price, missing field)."""
    kind = "invalid_argument"


class NotFoundError(DomainError):
    """Raised when a referenced station does not exist."""
    kind = "not_found"


class StoreUnavailableError(DomainError):
    """Raised when the ledger store's backing medium cannot be reached."""
    kind = "store_unavailable"
    retryable = True


class LedgerConflictError(DomainError):
    """Raised when two first-writes race to create the same (station, date) record."""
    kind = "conflict"
    retryable = True
