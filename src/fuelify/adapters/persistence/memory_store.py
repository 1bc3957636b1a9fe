# src/fuelify/adapters/persistence/memory_store.py
"""
Memory Store - In-Process Ledger Storage

Keeps the price ledger in a dictionary keyed by (station_id, date).
A single lock makes every merge atomic within the process. Data does
not survive a restart; used for tests and throwaway deployments.

Files that USE this module:
- fuelify.adapters.persistence (build_store when STORE_BACKEND=memory)
- tests.* (service and web tests run against it)

Files that this module USES:
- fuelify.adapters.persistence.base (LedgerStore contract and ordering helpers)
- fuelify.domain (DailyStationRecord, StoreUnavailableError)
"""
from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Dict

from fuelify.adapters.persistence.base import (
    DEFAULT_RECENT_LIMIT,
    DEFAULT_SERIES_LIMIT,
    LedgerStore,
    select_for_station,
    select_recent,
)
from fuelify.domain.errors import StoreUnavailableError
from fuelify.domain.models import DailyStationRecord, FuelGrade

logger = logging.getLogger(__name__)


class MemoryLedgerStore(LedgerStore):
    """Dictionary-backed ledger store."""

    name = "memory"

    def __init__(self):
        self._records: Dict[tuple[str, str], DailyStationRecord] = {}
        self._lock = threading.Lock()
        self._closed = False

    def ping(self) -> None:
        if self._closed:
            raise StoreUnavailableError("Memory ledger store is closed")

    def upsert_field(self, station_id: str, date: str, grade: FuelGrade, amount: float,
                     actor: str, timestamp: datetime) -> None:
        self.ping()
        key = (station_id, date)
        with self._lock:
            existing = self._records.get(key)
            if existing is None:
                self._records[key] = DailyStationRecord.first_write(
                    station_id, date, grade, amount, actor, timestamp,
                )
                logger.debug("Created ledger record %s/%s with %s", station_id, date, grade.value)
            else:
                self._records[key] = existing.merged(grade, amount, actor, timestamp)
                logger.debug("Merged %s into ledger record %s/%s", grade.value, station_id, date)

    def query_recent(self, limit: int = DEFAULT_RECENT_LIMIT) -> list[DailyStationRecord]:
        self.ping()
        with self._lock:
            snapshot = list(self._records.values())
        return select_recent(snapshot, limit)

    def query_by_station(self, station_id: str, limit: int = DEFAULT_SERIES_LIMIT) -> list[DailyStationRecord]:
        self.ping()
        with self._lock:
            snapshot = list(self._records.values())
        return select_for_station(snapshot, station_id, limit)

    def close(self) -> None:
        self._closed = True
