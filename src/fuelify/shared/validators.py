# src/fuelify/shared/validators.py
"""
Input Validation Utilities - Request and Configuration Validation

This module provides the input validation functions shared by the ledger
service and the settings layer. It normalizes fuel grades, parses prices,
cleans actor names, and checks station ids and time zone names so bad
input is rejected before it reaches the ledger store.

Files that USE this module:
- fuelify.application.ledger_service (price, grade, actor and station id checks)
- fuelify.config.settings (time zone validation in field validators)

Files that this module USES:
- fuelify.domain (FuelGrade, DEFAULT_ACTOR, InvalidArgumentError)
"""
import math
import re
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fuelify.domain.errors import InvalidArgumentError
from fuelify.domain.models import DEFAULT_ACTOR, FuelGrade

MAX_ACTOR_LENGTH = 80


def validate_station_id(station_id: Any) -> str:
    """
    Check that a station id is present and return it trimmed.

    Args:
        station_id: Raw station id from the request

    Returns:
        Trimmed station id

    Raises:
        InvalidArgumentError: If the id is missing or blank
    """
    if station_id is None or isinstance(station_id, bool):
        raise InvalidArgumentError("stationId is required")
    # Numeric ids from loosely typed clients are accepted as their string form
    text = str(station_id).strip()
    if not text:
        raise InvalidArgumentError("stationId is required")
    return text


def normalize_grade(grade: Any) -> FuelGrade:
    """
    Convert a raw fuel type into a FuelGrade.

    Args:
        grade: Raw fuel type (case-insensitive, surrounding whitespace ignored)

    Returns:
        Matching FuelGrade

    Raises:
        InvalidArgumentError: If the value is not one of the four grades
    """
    if isinstance(grade, FuelGrade):
        return grade
    if not isinstance(grade, str) or not grade.strip():
        raise InvalidArgumentError("fuelType is required")
    try:
        return FuelGrade(grade.strip().lower())
    except ValueError:
        allowed = ", ".join(g.value for g in FuelGrade)
        raise InvalidArgumentError(f"Unknown fuelType '{grade}'; expected one of: {allowed}") from None


def parse_price(raw_amount: Any) -> float:
    """
    Parse a price given as a number or numeric string.

    Args:
        raw_amount: Raw price value

    Returns:
        Price as a finite float greater than zero

    Raises:
        InvalidArgumentError: If the value is missing, non-numeric, not finite, or <= 0
    """
    if raw_amount is None or isinstance(raw_amount, bool):
        raise InvalidArgumentError("price is required")
    if isinstance(raw_amount, str):
        raw_amount = raw_amount.strip()
        if not raw_amount:
            raise InvalidArgumentError("price is required")
    try:
        value = float(raw_amount)
    except OverflowError:
        raise InvalidArgumentError("price must be a finite number") from None
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"price must be numeric, got {raw_amount!r}") from None
    if not math.isfinite(value):
        raise InvalidArgumentError("price must be a finite number")
    if value <= 0:
        raise InvalidArgumentError(f"price must be greater than zero, got {value}")
    return value


def normalize_actor(actor: Optional[Any]) -> str:
    """
    Clean the name of whoever submitted a price.

    Args:
        actor: Raw actor name, may be None or blank

    Returns:
        Trimmed name capped at MAX_ACTOR_LENGTH, or DEFAULT_ACTOR when blank
    """
    if actor is None:
        return DEFAULT_ACTOR
    # Collapse runs of whitespace so "  Bob   Smith " stores as "Bob Smith"
    cleaned = re.sub(r"\s+", " ", str(actor)).strip()
    if not cleaned:
        return DEFAULT_ACTOR
    return cleaned[:MAX_ACTOR_LENGTH]


def validate_timezone(name: str) -> bool:
    """
    Validate an IANA time zone name.

    Args:
        name: Zone name such as "UTC" or "America/New_York"

    Returns:
        True if valid, False otherwise
    """
    if not name:
        return False
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True
