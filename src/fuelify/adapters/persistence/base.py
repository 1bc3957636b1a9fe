# src/fuelify/adapters/persistence/base.py
"""
Base Ledger Store Interface

This module defines the abstract base class every ledger store implements,
plus the timestamp and ordering helpers the backings share.

Files that USE this module:
- fuelify.adapters.persistence.memory_store (MemoryLedgerStore implements LedgerStore)
- fuelify.adapters.persistence.file_store (FileLedgerStore implements LedgerStore)
- fuelify.adapters.persistence.sqlite_store (SqliteLedgerStore implements LedgerStore)
- fuelify.application.ledger_service (depends on the LedgerStore contract only)

Files that this module USES:
- fuelify.domain.models (DailyStationRecord, FuelGrade)
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Iterable

from fuelify.domain.models import DailyStationRecord, FuelGrade

DEFAULT_RECENT_LIMIT = 120
DEFAULT_SERIES_LIMIT = 30


def format_timestamp(ts: datetime) -> str:
    """Render a timestamp as fixed-width UTC ISO 8601 so string order matches time order."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat(timespec="microseconds")


def parse_timestamp(raw: str) -> datetime:
    """Parse a stored timestamp; accepts both "...Z" and "+00:00"."""
    ts = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def select_recent(records: Iterable[DailyStationRecord], limit: int) -> list[DailyStationRecord]:
    """Order by date descending, then last write descending, and cap at limit."""
    ordered = sorted(records, key=lambda r: (r.date, format_timestamp(r.recorded_at)), reverse=True)
    return ordered[:max(limit, 0)]


def select_for_station(records: Iterable[DailyStationRecord], station_id: str,
                       limit: int) -> list[DailyStationRecord]:
    """Keep the station's most recent `limit` days, returned in ascending date order."""
    own = sorted((r for r in records if r.station_id == station_id), key=lambda r: r.date, reverse=True)
    return list(reversed(own[:max(limit, 0)]))


class LedgerStore(ABC):
    """
    Persists one DailyStationRecord per (station_id, date).

    Implementations must make upsert_field atomic per key and must merge
    only the touched grade plus write metadata, never replace the record.
    Station ids are validated by the caller.
    """

    name = "ledger"

    @abstractmethod
    def upsert_field(self, station_id: str, date: str, grade: FuelGrade, amount: float,
                     actor: str, timestamp: datetime) -> None:
        """
        Create the (station_id, date) record with one grade, or merge the grade into it.

        Raises:
            StoreUnavailableError: If the backing medium cannot be reached
            LedgerConflictError: If a concurrent first-write created the record first
        """
        raise NotImplementedError

    @abstractmethod
    def query_recent(self, limit: int = DEFAULT_RECENT_LIMIT) -> list[DailyStationRecord]:
        """Return records by date descending then last write descending, capped at limit."""
        raise NotImplementedError

    @abstractmethod
    def query_by_station(self, station_id: str, limit: int = DEFAULT_SERIES_LIMIT) -> list[DailyStationRecord]:
        """Return the station's most recent `limit` records in ascending date order."""
        raise NotImplementedError

    @abstractmethod
    def ping(self) -> None:
        """Raise StoreUnavailableError if the backing medium cannot be reached."""
        raise NotImplementedError

    def close(self) -> None:
        """Release resources held by the store."""
