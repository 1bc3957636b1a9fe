# src/fuelify/domain/models.py
"""
Domain Models - Pure Business Objects

This module contains domain models representing core business concepts:
- Fuel grades and stations
- Single price observations
- The per-station, per-day ledger record
- Read-view points

Files that USE this module:
- fuelify.application.* (all services use domain models)
- fuelify.adapters.* (stores and the web adapter create and render domain models)
- tests.* (tests use domain models for test data)

Files that this module USES:
- None (pure domain layer, no external dependencies)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from dataclasses import dataclass, replace  # Immutable data classes and copy-with-changes
from datetime import datetime  # Timestamps for writes
from enum import Enum  # Fixed set of fuel grades
from typing import Any, Dict, Optional  # Type hints


class FuelGrade(str, Enum):
    """The fixed set of fuel grades a station can price."""
    REGULAR = "regular"
    MIDGRADE = "midgrade"
    PREMIUM = "premium"
    DIESEL = "diesel"


# Column order used by every read view
GRADES: tuple[FuelGrade, ...] = (
    FuelGrade.REGULAR,
    FuelGrade.MIDGRADE,
    FuelGrade.PREMIUM,
    FuelGrade.DIESEL,
)

DEFAULT_ACTOR = "Staff"


@dataclass(frozen=True)
class Station:
    """
    A known fuel station. Defined at configuration time, never mutated by the ledger.

    Attributes:
        id: Stable string identifier
        name: Display name
        latitude: Latitude in decimal degrees
        longitude: Longitude in decimal degrees
        address: Optional street address
        brand: Optional brand name
    """
    id: str
    name: str
    latitude: float
    longitude: float
    address: Optional[str] = None
    brand: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        """Render the station for the listing endpoint, omitting unset optional fields."""
        d: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }
        if self.address is not None:
            d["address"] = self.address
        if self.brand is not None:
            d["brand"] = self.brand
        return d


@dataclass(frozen=True)
class PriceObservation:
    """
    A single staff-submitted price: one grade, one station, one day.

    Attributes:
        station_id: References Station.id
        date: Calendar day in YYYY-MM-DD form
        grade: Fuel grade being priced
        amount: Positive price in currency units
        recorded_at: Aware UTC timestamp of the write
        recorded_by: Free-text actor name
    """
    station_id: str
    date: str
    grade: FuelGrade
    amount: float
    recorded_at: datetime
    recorded_by: str = DEFAULT_ACTOR


@dataclass(frozen=True)
class DailyStationRecord:
    """
    The storage unit: one record per (station_id, date).

    Each grade field is None until first written that day, then holds the
    latest value written for that grade. recorded_at/recorded_by describe
    the most recent write, whichever grade it touched.
    """
    station_id: str
    date: str
    recorded_at: datetime
    recorded_by: str = DEFAULT_ACTOR
    regular: Optional[float] = None
    midgrade: Optional[float] = None
    premium: Optional[float] = None
    diesel: Optional[float] = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.station_id, self.date)

    def price_for(self, grade: FuelGrade) -> Optional[float]:
        """Return the price recorded for a grade, or None when not yet written."""
        return getattr(self, FuelGrade(grade).value)

    def prices(self) -> Dict[str, Optional[float]]:
        """Return all four grades keyed by grade name, None for unwritten grades."""
        return {grade.value: self.price_for(grade) for grade in GRADES}

    def merged(self, grade: FuelGrade, amount: float, actor: str, timestamp: datetime) -> DailyStationRecord:
        """Return a copy with one grade and the write metadata replaced; other grades are kept."""
        return replace(
            self,
            recorded_at=timestamp,
            recorded_by=actor,
            **{FuelGrade(grade).value: amount},
        )

    @classmethod
    def first_write(cls, station_id: str, date: str, grade: FuelGrade, amount: float,
                    actor: str, timestamp: datetime) -> DailyStationRecord:
        """Create the record for a new (station, date) with only one grade populated."""
        return cls(
            station_id=station_id,
            date=date,
            recorded_at=timestamp,
            recorded_by=actor,
            **{FuelGrade(grade).value: amount},
        )


@dataclass(frozen=True)
class SeriesPoint:
    """One day in a station's price series; missing grades are None, never zero."""
    date: str
    regular: Optional[float] = None
    midgrade: Optional[float] = None
    premium: Optional[float] = None
    diesel: Optional[float] = None

    def to_json(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "regular": self.regular,
            "midgrade": self.midgrade,
            "premium": self.premium,
            "diesel": self.diesel,
        }


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of an accepted price submission."""
    date_key: str
    station_id: str
