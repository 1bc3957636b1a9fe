"""
Domain Layer - Pure Business Objects

This package contains domain models and business rules.
No dependencies on infrastructure or external systems.
"""

from fuelify.domain.models import (
    DEFAULT_ACTOR,
    GRADES,
    DailyStationRecord,
    FuelGrade,
    PriceObservation,
    SeriesPoint,
    Station,
    SubmitResult,
)
from fuelify.domain.errors import (
    DomainError,
    InvalidArgumentError,
    LedgerConflictError,
    NotFoundError,
    StoreUnavailableError,
)

__all__ = [
    "DEFAULT_ACTOR",
    "GRADES",
    "FuelGrade",
    "Station",
    "PriceObservation",
    "DailyStationRecord",
    "SeriesPoint",
    "SubmitResult",
    "DomainError",
    "InvalidArgumentError",
    "NotFoundError",
    "StoreUnavailableError",
    "LedgerConflictError",
]
