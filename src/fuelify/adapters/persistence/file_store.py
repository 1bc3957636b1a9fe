# src/fuelify/adapters/persistence/file_store.py
"""
File Store - JSON Flat-File Ledger Storage

This module persists the price ledger in a single JSON file. There is no
process-wide cache: every operation re-reads the file, and every merge runs
under an exclusive lock (a thread lock plus an fcntl lock on a sidecar
``.lock`` file) so several worker processes can share one ledger file.
Writes go through a temporary file and an atomic rename.

Files that USE this module:
- fuelify.adapters.persistence (build_store when STORE_BACKEND=file)
- tests.test_stores (contract tests)

Files that this module USES:
- fuelify.adapters.persistence.base (LedgerStore contract and helpers)
- fuelify.domain (DailyStationRecord, StoreUnavailableError)
"""
from __future__ import annotations

import fcntl
import json
import logging
import os
import shutil
import tempfile
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterator

from fuelify.adapters.persistence.base import (
    DEFAULT_RECENT_LIMIT,
    DEFAULT_SERIES_LIMIT,
    LedgerStore,
    format_timestamp,
    parse_timestamp,
    select_for_station,
    select_recent,
)
from fuelify.domain.errors import StoreUnavailableError
from fuelify.domain.models import GRADES, DailyStationRecord, FuelGrade

logger = logging.getLogger(__name__)

FILE_FORMAT_VERSION = 1


def record_to_json(record: DailyStationRecord) -> dict:
    """
    Convert a DailyStationRecord to a JSON-serializable dictionary.

    Returns:
        Dictionary with an ISO-formatted timestamp; unwritten grades are null
    """
    d = {
        "stationId": record.station_id,
        "date": record.date,
        "recordedAt": format_timestamp(record.recorded_at),
        "recordedBy": record.recorded_by,
    }
    d.update(record.prices())
    return d


def record_from_json(data: dict) -> DailyStationRecord:
    """
    Create a DailyStationRecord from a stored dictionary.

    Raises:
        KeyError, ValueError, TypeError: If the entry does not match the schema
    """
    prices = {}
    for grade in GRADES:
        raw = data.get(grade.value)
        prices[grade.value] = None if raw is None else float(raw)
    return DailyStationRecord(
        station_id=str(data["stationId"]),
        date=str(data["date"]),
        recorded_at=parse_timestamp(data["recordedAt"]),
        recorded_by=str(data.get("recordedBy") or "Staff"),
        **prices,
    )


class FileLedgerStore(LedgerStore):
    """JSON-file-backed ledger store."""

    name = "file"

    def __init__(self, path: Path):
        """
        Initialize the file store.

        Args:
            path: Path of the JSON ledger file (created on first write)
        """
        self.path = Path(path)
        self.lock_path = self.path.with_suffix(self.path.suffix + ".lock")
        self._thread_lock = threading.Lock()
        self._closed = False

    def _check_open(self) -> None:
        if self._closed:
            raise StoreUnavailableError("File ledger store is closed")

    # ── Locking ──────────────────────────────────────────

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        """Hold the in-process lock and the cross-process file lock."""
        self._check_open()
        with self._thread_lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                lock_fd = os.open(str(self.lock_path), os.O_RDWR | os.O_CREAT, 0o644)
            except OSError as e:
                raise StoreUnavailableError(f"Cannot open ledger lock file {self.lock_path}: {e}") from e
            try:
                fcntl.flock(lock_fd, fcntl.LOCK_EX)
                try:
                    yield
                finally:
                    fcntl.flock(lock_fd, fcntl.LOCK_UN)
            finally:
                os.close(lock_fd)

    # ── Reading / writing ────────────────────────────────

    def _load(self) -> Dict[tuple[str, str], DailyStationRecord]:
        """
        Read every record from disk.

        A corrupt file is backed up next to the ledger and treated as empty;
        entries that do not match the schema are skipped with a warning.
        """
        self._check_open()
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                try:
                    data = json.load(f)
                except json.JSONDecodeError as e:
                    backup_path = self.path.with_suffix(self.path.suffix + ".corrupt")
                    shutil.copy2(self.path, backup_path)
                    logger.warning("Ledger file corrupted (JSON decode error), backed up to %s: %s",
                                   backup_path, e)
                    return {}
        except OSError as e:
            raise StoreUnavailableError(f"Cannot read ledger file {self.path}: {e}") from e

        entries = data.get("records", []) if isinstance(data, dict) else []
        records: Dict[tuple[str, str], DailyStationRecord] = {}
        for entry in entries:
            try:
                record = record_from_json(entry)
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                logger.warning("Skipping malformed ledger entry %r: %s", entry, e)
                continue
            records[record.key] = record
        return records

    def _save(self, records: Dict[tuple[str, str], DailyStationRecord]) -> None:
        """
        Save all records using an atomic write.

        Uses temporary file + atomic rename so readers never see a partial file.
        """
        payload = {
            "version": FILE_FORMAT_VERSION,
            "records": [record_to_json(r) for r in select_recent(records.values(), len(records))],
        }
        try:
            temp_fd, temp_path = tempfile.mkstemp(
                suffix=".json.tmp",
                dir=str(self.path.parent),
                text=True,
            )
        except OSError as e:
            raise StoreUnavailableError(f"Cannot write ledger file {self.path}: {e}") from e

        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())  # Ensure data is written to disk

            os.replace(temp_path, str(self.path))
        except OSError as e:
            # Clean up temp file on error
            try:
                os.unlink(temp_path)
            except OSError:
                logger.debug("Temp ledger file already gone: %s", temp_path)
            raise StoreUnavailableError(f"Failed to save ledger file {self.path}: {e}") from e

    # ── LedgerStore contract ─────────────────────────────

    def ping(self) -> None:
        self._check_open()
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreUnavailableError(f"Ledger directory {directory} unavailable: {e}") from e
        if not os.access(directory, os.W_OK):
            raise StoreUnavailableError(f"Ledger directory {directory} is not writable")
        if self.path.exists() and not os.access(self.path, os.R_OK | os.W_OK):
            raise StoreUnavailableError(f"Ledger file {self.path} is not readable and writable")

    def upsert_field(self, station_id: str, date: str, grade: FuelGrade, amount: float,
                     actor: str, timestamp: datetime) -> None:
        key = (station_id, date)
        with self._exclusive():
            records = self._load()
            existing = records.get(key)
            if existing is None:
                records[key] = DailyStationRecord.first_write(
                    station_id, date, grade, amount, actor, timestamp,
                )
            else:
                records[key] = existing.merged(grade, amount, actor, timestamp)
            self._save(records)
        logger.debug("Wrote %s for %s/%s to %s", FuelGrade(grade).value, station_id, date, self.path)

    def query_recent(self, limit: int = DEFAULT_RECENT_LIMIT) -> list[DailyStationRecord]:
        return select_recent(self._load().values(), limit)

    def query_by_station(self, station_id: str, limit: int = DEFAULT_SERIES_LIMIT) -> list[DailyStationRecord]:
        return select_for_station(self._load().values(), station_id, limit)

    def close(self) -> None:
        self._closed = True
