# tests/test_ledger_service.py
"""
Ledger Service Tests - Unit Tests for Price Submission and Read Views

This module tests the PriceLedgerService against every store backing
(through the parametrized ``store`` fixture) and against mocked stores
for the retry and fail-fast paths.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- fuelify.application.ledger_service (PriceLedgerService)
- fuelify.adapters.persistence (LedgerStore, MemoryLedgerStore)
- unittest.mock (Mock stores for the error paths)
"""
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from fuelify.adapters.persistence import LedgerStore, MemoryLedgerStore
from fuelify.application.ledger_service import PriceLedgerService
from fuelify.domain.errors import (
    InvalidArgumentError,
    LedgerConflictError,
    NotFoundError,
    StoreUnavailableError,
)
from fuelify.domain.models import FuelGrade, SubmitResult


class TestSubmitPrice:
    def test_first_write_of_the_day(self, service, store):
        result = service.submit_price("2", "regular", "3.49", "Bob")

        assert result == SubmitResult(date_key="2026-10-18", station_id="2")
        records = store.query_recent()
        assert len(records) == 1
        assert records[0].prices() == {"regular": 3.49, "midgrade": None, "premium": None, "diesel": None}
        assert records[0].recorded_by == "Bob"

    def test_second_grade_merges_into_same_record(self, service, store, clock):
        service.submit_price("2", "regular", "3.49", "Bob")
        clock.advance(minutes=10)
        service.submit_price("2", "diesel", 3.99, "Ann")

        records = store.query_recent()
        assert len(records) == 1
        record = records[0]
        assert record.regular == 3.49
        assert record.diesel == 3.99
        assert record.recorded_by == "Ann"
        assert record.recorded_at == clock.now

    def test_identical_resubmission_is_idempotent(self, service, store):
        service.submit_price("1", "premium", "4.10", "Bob")
        service.submit_price("1", "premium", "4.10", "Bob")

        records = store.query_recent()
        assert len(records) == 1
        assert records[0].prices() == {"regular": None, "midgrade": None, "premium": 4.10, "diesel": None}
        assert records[0].recorded_by == "Bob"

    def test_resubmitting_a_grade_overwrites_only_that_grade(self, service, store):
        service.submit_price("1", "premium", "4.10")
        service.submit_price("1", "regular", "3.10")
        service.submit_price("1", "premium", "4.25")

        record = store.query_recent()[0]
        assert record.premium == 4.25
        assert record.regular == 3.10

    def test_actor_defaults_to_staff(self, service, store):
        service.submit_price("1", "regular", "3.10")
        assert store.query_recent()[0].recorded_by == "Staff"

    def test_new_day_starts_a_new_record(self, service, store, clock):
        service.submit_price("1", "regular", "3.10")
        clock.advance(days=1)
        service.submit_price("1", "diesel", "3.90")

        records = store.query_recent()
        assert [r.date for r in records] == ["2026-10-19", "2026-10-18"]
        # Yesterday's regular is not carried into today's record
        assert records[0].regular is None
        assert records[0].diesel == 3.90

    @pytest.mark.parametrize("price", ["-5", "0", "abc", None, "nan", 10 ** 400])
    def test_invalid_price_writes_nothing(self, service, store, price):
        with pytest.raises(InvalidArgumentError):
            service.submit_price("1", "regular", price, "Bob")
        assert store.query_recent() == []

    def test_unknown_grade(self, service, store):
        with pytest.raises(InvalidArgumentError):
            service.submit_price("1", "kerosene", "3.50", "Bob")
        assert store.query_recent() == []

    def test_unknown_station(self, service, store):
        with pytest.raises(NotFoundError):
            service.submit_price("999", "regular", "3.50", "Bob")
        assert store.query_recent() == []

    def test_missing_station(self, service):
        with pytest.raises(InvalidArgumentError):
            service.submit_price("", "regular", "3.50", "Bob")

    def test_concurrent_writes_to_different_grades_both_survive(self, service, store):
        store.ping()
        barrier = threading.Barrier(2)

        def submit(grade, price):
            barrier.wait()
            return service.submit_price("3", grade, price, "Staff")

        with ThreadPoolExecutor(max_workers=2) as pool:
            futures = [pool.submit(submit, "regular", "3.19"), pool.submit(submit, "diesel", "3.79")]
            for f in futures:
                f.result()

        records = store.query_recent()
        assert len(records) == 1
        assert records[0].regular == 3.19
        assert records[0].diesel == 3.79


class TestDayBucket:
    def test_utc_by_default(self, directory):
        clock = lambda: datetime(2026, 10, 18, 2, 0, tzinfo=timezone.utc)
        service = PriceLedgerService(MemoryLedgerStore(), directory, clock=clock)
        assert service.submit_price("1", "regular", "3.0").date_key == "2026-10-18"

    def test_configured_zone_shifts_the_day(self, directory):
        clock = lambda: datetime(2026, 10, 18, 2, 0, tzinfo=timezone.utc)
        service = PriceLedgerService(
            MemoryLedgerStore(), directory, clock=clock, ledger_timezone="America/New_York",
        )
        assert service.submit_price("1", "regular", "3.0").date_key == "2026-10-17"

    def test_naive_clock_treated_as_utc(self, directory):
        clock = lambda: datetime(2026, 10, 18, 23, 59)
        service = PriceLedgerService(MemoryLedgerStore(), directory, clock=clock)
        obs = service.build_observation("1", "diesel", "3.0")
        assert obs.date == "2026-10-18"
        assert obs.recorded_at.tzinfo is not None


class TestStoreFailures:
    def _mock_store(self):
        store = Mock(spec=LedgerStore)
        store.name = "mock"
        return store

    def test_conflict_retried_once_as_merge(self, directory, clock):
        store = self._mock_store()
        store.upsert_field.side_effect = [LedgerConflictError("raced"), None]
        service = PriceLedgerService(store, directory, clock=clock)

        result = service.submit_price("1", "regular", "3.50", "Bob")

        assert result.date_key == "2026-10-18"
        assert store.upsert_field.call_count == 2
        first, second = store.upsert_field.call_args_list
        assert first == second
        assert first.args[:5] == ("1", "2026-10-18", FuelGrade.REGULAR, 3.5, "Bob")

    def test_second_conflict_propagates(self, directory, clock):
        store = self._mock_store()
        store.upsert_field.side_effect = LedgerConflictError("raced")
        service = PriceLedgerService(store, directory, clock=clock)

        with pytest.raises(LedgerConflictError):
            service.submit_price("1", "regular", "3.50", "Bob")
        assert store.upsert_field.call_count == 2

    def test_unreachable_store_fails_before_writing(self, directory, clock):
        store = self._mock_store()
        store.ping.side_effect = StoreUnavailableError("down")
        service = PriceLedgerService(store, directory, clock=clock)

        with pytest.raises(StoreUnavailableError):
            service.submit_price("1", "regular", "3.50", "Bob")
        store.upsert_field.assert_not_called()

    def test_validation_happens_before_ping(self, directory, clock):
        store = self._mock_store()
        service = PriceLedgerService(store, directory, clock=clock)

        with pytest.raises(InvalidArgumentError):
            service.submit_price("1", "regular", "-5", "Bob")
        store.ping.assert_not_called()


class TestReadViews:
    def test_snapshot_groups_by_date_then_station(self, service, clock):
        service.submit_price("1", "regular", "3.10", "Bob")
        service.submit_price("2", "diesel", "3.90", "Ann")
        clock.advance(days=1)
        service.submit_price("1", "regular", "3.20", "Bob")

        snapshot = service.list_recent_snapshot()

        assert list(snapshot) == ["2026-10-19", "2026-10-18"]
        assert set(snapshot["2026-10-18"]) == {"1", "2"}
        assert snapshot["2026-10-19"]["1"].regular == 3.20
        assert snapshot["2026-10-18"]["2"].diesel == 3.90
        assert snapshot["2026-10-18"]["2"].regular is None

    def test_snapshot_limit(self, service, clock):
        for _ in range(3):
            service.submit_price("1", "regular", "3.10")
            clock.advance(days=1)
        assert list(service.list_recent_snapshot(limit=2)) == ["2026-10-20", "2026-10-19"]

    def test_empty_ledger(self, service):
        assert service.list_recent_snapshot() == {}
        assert service.list_station_series("1") == []

    def test_series_ascending_with_nulls(self, service, clock):
        service.submit_price("2", "regular", "3.49")
        clock.advance(days=1)
        service.submit_price("2", "regular", "3.59")
        service.submit_price("2", "diesel", "3.99")
        clock.advance(days=1)
        service.submit_price("1", "regular", "9.99")

        series = service.list_station_series("2")

        assert [p.date for p in series] == ["2026-10-18", "2026-10-19"]
        assert series[0].diesel is None
        assert series[1].to_json() == {
            "date": "2026-10-19", "regular": 3.59, "midgrade": None, "premium": None, "diesel": 3.99,
        }

    def test_same_day_grades_form_one_series_point(self, service):
        service.submit_price("2", "regular", "3.49", "Bob")
        service.submit_price("2", "diesel", "3.99", "Bob")

        series = service.list_station_series("2")

        assert len(series) == 1
        assert series[0].to_json() == {
            "date": "2026-10-18", "regular": 3.49, "midgrade": None, "premium": None, "diesel": 3.99,
        }
        snapshot = service.list_recent_snapshot()
        assert list(snapshot) == ["2026-10-18"]
        assert list(snapshot["2026-10-18"]) == ["2"]

    def test_series_limit_keeps_latest_days(self, service, clock):
        for price in ("3.1", "3.2", "3.3"):
            service.submit_price("1", "regular", price)
            clock.advance(days=1)
        series = service.list_station_series("1", limit=2)
        assert [p.regular for p in series] == [3.2, 3.3]

    def test_series_unknown_station(self, service):
        with pytest.raises(NotFoundError):
            service.list_station_series("999")

    @pytest.mark.parametrize("limit", [0, -1, "10", True])
    def test_bad_limit(self, service, limit):
        with pytest.raises(InvalidArgumentError):
            service.list_recent_snapshot(limit)
