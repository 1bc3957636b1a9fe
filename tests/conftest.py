# tests/conftest.py
"""Shared pytest fixtures: a controllable clock, stores for every backing, and a ready service."""

from collections.abc import Generator
from datetime import datetime, timedelta, timezone

import pytest

from fuelify.adapters.persistence import FileLedgerStore, LedgerStore, MemoryLedgerStore, SqliteLedgerStore
from fuelify.application.ledger_service import PriceLedgerService
from fuelify.application.station_directory import StationDirectory


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def directory() -> StationDirectory:
    return StationDirectory()


@pytest.fixture(params=["memory", "file", "sqlite"])
def store(request, tmp_path) -> Generator[LedgerStore, None, None]:
    """Every test using this fixture runs once per store backing."""
    if request.param == "memory":
        s: LedgerStore = MemoryLedgerStore()
    elif request.param == "file":
        s = FileLedgerStore(tmp_path / "ledger.json")
    else:
        s = SqliteLedgerStore(tmp_path / "ledger.db", timeout=5.0)
    yield s
    s.close()


@pytest.fixture
def service(store, directory, clock) -> PriceLedgerService:
    return PriceLedgerService(store=store, directory=directory, clock=clock)
