"""
Persistence Adapters - Ledger Storage

This package contains the interchangeable ledger store backings:
- In-memory storage
- File-based storage (JSON)
- SQLite document table
"""

from __future__ import annotations

import logging

from fuelify.adapters.persistence.base import LedgerStore
from fuelify.adapters.persistence.file_store import FileLedgerStore
from fuelify.adapters.persistence.memory_store import MemoryLedgerStore
from fuelify.adapters.persistence.sqlite_store import SqliteLedgerStore
from fuelify.config.settings import Settings

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> LedgerStore:
    """
    Create the ledger store selected by STORE_BACKEND.

    Args:
        settings: Application settings

    Returns:
        A ready-to-use LedgerStore
    """
    backend = settings.store_backend
    if backend == "memory":
        store: LedgerStore = MemoryLedgerStore()
    elif backend == "file":
        store = FileLedgerStore(settings.ledger_file)
    elif backend == "sqlite":
        store = SqliteLedgerStore(settings.ledger_db, timeout=settings.store_timeout_seconds)
    else:
        raise ValueError(f"Unknown store backend: {backend}")
    logger.info("Using %s ledger store (%s)", store.name, settings.store_path or "in-process")
    return store


__all__ = [
    "LedgerStore",
    "MemoryLedgerStore",
    "FileLedgerStore",
    "SqliteLedgerStore",
    "build_store",
]
