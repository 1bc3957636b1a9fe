"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation
- Logging configuration
"""

from fuelify.shared.validators import (
    normalize_actor,
    normalize_grade,
    parse_price,
    validate_station_id,
    validate_timezone,
)
from fuelify.shared.logging_conf import setup_logging

__all__ = [
    "normalize_actor",
    "normalize_grade",
    "parse_price",
    "validate_station_id",
    "validate_timezone",
    "setup_logging",
]
