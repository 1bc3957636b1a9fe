# src/fuelify/application/ledger_service.py
"""
Price Ledger Service - Business Logic for Fuel Price Submissions

This module contains the core business logic of the price ledger. It
validates and normalizes staff price submissions, resolves the calendar
day a write belongs to, hands the field-level merge to the ledger store,
and builds the snapshot and series read views.

The service holds no locks and no cached ledger state. The store's
per-key atomic merge is the only synchronization point, so any number of
service instances may run side by side against the same store.

Files that USE this module:
- fuelify.adapters.web.routes (HTTP endpoints call the service)
- fuelify.app (composition root builds the service)
- tests.test_ledger_service (unit tests)

Files that this module USES:
- fuelify.adapters.persistence.base (LedgerStore contract)
- fuelify.application.station_directory (StationDirectory lookups)
- fuelify.application.projector (group_by_date, to_series)
- fuelify.shared.validators (input validation)
- fuelify.domain (models and errors)
"""
from __future__ import annotations  # Enable postponed evaluation of annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional
from zoneinfo import ZoneInfo

from fuelify.adapters.persistence.base import DEFAULT_RECENT_LIMIT, DEFAULT_SERIES_LIMIT, LedgerStore
from fuelify.application.projector import group_by_date, to_series
from fuelify.application.station_directory import StationDirectory
from fuelify.domain.errors import InvalidArgumentError, LedgerConflictError
from fuelify.domain.models import DailyStationRecord, PriceObservation, SeriesPoint, SubmitResult
from fuelify.shared.validators import normalize_actor, normalize_grade, parse_price, validate_station_id

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class PriceLedgerService:
    """
    Application service for submitting prices and reading the ledger.
    """

    def __init__(
        self,
        store: LedgerStore,
        directory: StationDirectory,
        clock: Clock = utc_now,
        ledger_timezone: str = "UTC",
        history_limit: int = DEFAULT_RECENT_LIMIT,
        series_limit: int = DEFAULT_SERIES_LIMIT,
    ):
        """
        Initialize the service.

        Args:
            store: Ledger store handle; the service never caches its contents
            directory: Known stations
            clock: Returns the current instant (aware datetime)
            ledger_timezone: IANA zone whose calendar day buckets writes
            history_limit: Default row cap for the snapshot view
            series_limit: Default day cap for the series view
        """
        self.store = store
        self.directory = directory
        self.clock = clock
        self.zone = ZoneInfo(ledger_timezone)
        self.history_limit = history_limit
        self.series_limit = series_limit

    def _now(self) -> datetime:
        now = self.clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now.astimezone(timezone.utc)

    def date_key(self, instant: datetime) -> str:
        """Calendar day (YYYY-MM-DD) of an instant in the ledger time zone."""
        return instant.astimezone(self.zone).strftime("%Y-%m-%d")

    def _resolve_limit(self, limit: Optional[int], default: int) -> int:
        if limit is None:
            return default
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise InvalidArgumentError(f"limit must be a positive integer, got {limit!r}")
        return limit

    # ── Writes ───────────────────────────────────────────

    def build_observation(self, station_id: Any, grade: Any, raw_amount: Any,
                          actor: Optional[Any] = None) -> PriceObservation:
        """
        Validate and normalize a submission without writing it.

        Raises:
            InvalidArgumentError: Missing station id, unknown grade, or a bad price
            NotFoundError: Station id is not in the directory
        """
        station_id = validate_station_id(station_id)
        station = self.directory.get(station_id)
        fuel_grade = normalize_grade(grade)
        amount = parse_price(raw_amount)
        now = self._now()
        return PriceObservation(
            station_id=station.id,
            date=self.date_key(now),
            grade=fuel_grade,
            amount=amount,
            recorded_at=now,
            recorded_by=normalize_actor(actor),
        )

    def _write(self, obs: PriceObservation) -> None:
        self.store.upsert_field(
            obs.station_id, obs.date, obs.grade, obs.amount, obs.recorded_by, obs.recorded_at,
        )

    def submit_price(self, station_id: Any, grade: Any, raw_amount: Any,
                     actor: Optional[Any] = None) -> SubmitResult:
        """
        Record one grade's price for a station on today's ledger record.

        Args:
            station_id: Station id (must be in the directory)
            grade: One of regular, midgrade, premium, diesel
            raw_amount: Price as a number or numeric string, must be > 0
            actor: Who submitted the price; defaults to "Staff"

        Returns:
            SubmitResult with the day bucket and station id

        Raises:
            InvalidArgumentError: Bad input
            NotFoundError: Unknown station
            StoreUnavailableError: Store cannot be reached (checked before writing)
            LedgerConflictError: Record creation raced twice in a row
        """
        obs = self.build_observation(station_id, grade, raw_amount, actor)

        # Fail fast instead of hanging on an unreachable store
        self.store.ping()

        try:
            self._write(obs)
        except LedgerConflictError as e:
            # Another writer created today's record first; merging into it is now a plain update
            logger.info("Create race on %s/%s, retrying as merge: %s", obs.station_id, obs.date, e)
            self._write(obs)

        logger.info(
            "Price recorded: station=%s date=%s %s=%.3f by %s",
            obs.station_id, obs.date, obs.grade.value, obs.amount, obs.recorded_by,
        )
        return SubmitResult(date_key=obs.date, station_id=obs.station_id)

    # ── Reads ────────────────────────────────────────────

    def list_recent_snapshot(self, limit: Optional[int] = None) -> Dict[str, Dict[str, DailyStationRecord]]:
        """
        Return recent records grouped per date (descending), then per station.

        Args:
            limit: Maximum number of ledger records to read (default: history_limit)
        """
        limit = self._resolve_limit(limit, self.history_limit)
        records = self.store.query_recent(limit)
        logger.debug("Snapshot view built from %d records", len(records))
        return group_by_date(records)

    def list_station_series(self, station_id: Any, limit: Optional[int] = None) -> list[SeriesPoint]:
        """
        Return a station's daily prices in ascending date order.

        Args:
            station_id: Station id (must be in the directory)
            limit: Maximum number of days (default: series_limit)

        Raises:
            NotFoundError: Unknown station
        """
        station = self.directory.get(validate_station_id(station_id))
        limit = self._resolve_limit(limit, self.series_limit)
        return to_series(self.store.query_by_station(station.id, limit))
