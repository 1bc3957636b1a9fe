# src/fuelify/adapters/persistence/sqlite_store.py
"""
SQLite Store - Document-Table Ledger Storage

Stores one row per (station_id, date) in a table guarded by a UNIQUE key.
Each operation opens its own connection with a bounded busy timeout, so the
store is safe to share between threads and between worker processes.

A merge is a partial UPDATE of the touched grade column plus write
metadata. When no row exists yet the store INSERTs one; if another writer
created the row in between, the UNIQUE key rejects the insert and the
store raises LedgerConflictError so the caller can retry as a plain merge.

Files that USE this module:
- fuelify.adapters.persistence (build_store when STORE_BACKEND=sqlite)
- tests.test_stores (contract tests)

Files that this module USES:
- fuelify.adapters.persistence.base (LedgerStore contract and helpers)
- fuelify.domain (DailyStationRecord, LedgerConflictError, StoreUnavailableError)
"""
from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Sequence

from fuelify.adapters.persistence.base import (
    DEFAULT_RECENT_LIMIT,
    DEFAULT_SERIES_LIMIT,
    LedgerStore,
    format_timestamp,
    parse_timestamp,
)
from fuelify.domain.errors import LedgerConflictError, StoreUnavailableError
from fuelify.domain.models import DailyStationRecord, FuelGrade

logger = logging.getLogger(__name__)

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS daily_station_records (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    station_id  TEXT    NOT NULL,
    date        TEXT    NOT NULL,
    recorded_at TEXT    NOT NULL,
    recorded_by TEXT    NOT NULL DEFAULT 'Staff',
    regular     REAL,
    midgrade    REAL,
    premium     REAL,
    diesel      REAL,
    UNIQUE (station_id, date)
);

CREATE INDEX IF NOT EXISTS idx_records_date
    ON daily_station_records(date, recorded_at);
"""

_COLUMNS = "station_id, date, recorded_at, recorded_by, regular, midgrade, premium, diesel"


class SqliteLedgerStore(LedgerStore):
    """SQLite-backed ledger store."""

    name = "sqlite"

    def __init__(self, db_path: Path, timeout: float = 5.0):
        """
        Initialize the SQLite store. The schema is created on first use.

        Args:
            db_path: Path to the SQLite database file
            timeout: Seconds to wait for a competing writer before giving up
        """
        self.db_path = Path(db_path)
        self.timeout = timeout
        self._schema_ready = False
        self._closed = False

    def _connect(self) -> sqlite3.Connection:
        """Open a connection and make sure the schema exists."""
        if self._closed:
            raise StoreUnavailableError("SQLite ledger store is closed")
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path), timeout=self.timeout)
        except (OSError, sqlite3.Error) as e:
            raise StoreUnavailableError(f"Cannot open ledger database {self.db_path}: {e}") from e
        try:
            if not self._schema_ready:
                conn.execute("PRAGMA journal_mode=WAL")
                conn.executescript(_SCHEMA)
                self._schema_ready = True
                logger.debug("Ledger schema ready at %s", self.db_path)
        except sqlite3.Error as e:
            conn.close()
            raise StoreUnavailableError(f"Cannot initialise ledger database {self.db_path}: {e}") from e
        return conn

    def _fetch(self, query: str, params: Sequence[Any]) -> list[DailyStationRecord]:
        conn = self._connect()
        try:
            rows = conn.execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Ledger query failed: {e}") from e
        finally:
            conn.close()
        return [self._row_to_record(r) for r in rows]

    @staticmethod
    def _row_to_record(row: Sequence[Any]) -> DailyStationRecord:
        return DailyStationRecord(
            station_id=row[0],
            date=row[1],
            recorded_at=parse_timestamp(row[2]),
            recorded_by=row[3],
            regular=row[4],
            midgrade=row[5],
            premium=row[6],
            diesel=row[7],
        )

    # ── LedgerStore contract ─────────────────────────────

    def ping(self) -> None:
        conn = self._connect()
        try:
            conn.execute("SELECT 1 FROM daily_station_records LIMIT 1").fetchall()
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Ledger database {self.db_path} unavailable: {e}") from e
        finally:
            conn.close()

    def upsert_field(self, station_id: str, date: str, grade: FuelGrade, amount: float,
                     actor: str, timestamp: datetime) -> None:
        # Column name comes from the FuelGrade enum, never from user input
        column = FuelGrade(grade).value
        ts = format_timestamp(timestamp)
        conn = self._connect()
        try:
            with conn:
                cur = conn.execute(
                    f"UPDATE daily_station_records "
                    f"SET {column} = ?, recorded_at = ?, recorded_by = ? "
                    f"WHERE station_id = ? AND date = ?",
                    (amount, ts, actor, station_id, date),
                )
                if cur.rowcount == 0:
                    conn.execute(
                        f"INSERT INTO daily_station_records "
                        f"(station_id, date, recorded_at, recorded_by, {column}) "
                        f"VALUES (?, ?, ?, ?, ?)",
                        (station_id, date, ts, actor, amount),
                    )
                    logger.debug("Created ledger row %s/%s with %s", station_id, date, column)
        except sqlite3.IntegrityError as e:
            raise LedgerConflictError(
                f"Ledger row {station_id}/{date} was created concurrently"
            ) from e
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Ledger write failed for {station_id}/{date}: {e}") from e
        finally:
            conn.close()

    def query_recent(self, limit: int = DEFAULT_RECENT_LIMIT) -> list[DailyStationRecord]:
        return self._fetch(
            f"SELECT {_COLUMNS} FROM daily_station_records "
            "ORDER BY date DESC, recorded_at DESC LIMIT ?",
            (max(limit, 0),),
        )

    def query_by_station(self, station_id: str, limit: int = DEFAULT_SERIES_LIMIT) -> list[DailyStationRecord]:
        newest_first = self._fetch(
            f"SELECT {_COLUMNS} FROM daily_station_records "
            "WHERE station_id = ? ORDER BY date DESC LIMIT ?",
            (station_id, max(limit, 0)),
        )
        return list(reversed(newest_first))

    def close(self) -> None:
        self._closed = True
