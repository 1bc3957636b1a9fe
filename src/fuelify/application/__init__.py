"""
Application Layer - Use Cases and Services

This package contains application services that orchestrate domain logic.
Storage is reached only through the LedgerStore interface.
"""

from fuelify.application.health import HealthChecker, HealthStatus
from fuelify.application.ledger_service import PriceLedgerService
from fuelify.application.projector import group_by_date, record_to_entry, to_series
from fuelify.application.station_directory import DEFAULT_STATIONS, StationDirectory

__all__ = [
    "PriceLedgerService",
    "StationDirectory",
    "DEFAULT_STATIONS",
    "HealthChecker",
    "HealthStatus",
    "group_by_date",
    "to_series",
    "record_to_entry",
]
