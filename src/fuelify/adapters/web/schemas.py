# src/fuelify/adapters/web/schemas.py
"""
Request and response models for the HTTP adapter.

Request fields are typed loosely on purpose: the ledger service owns
validation, so a malformed price or unknown grade is reported with the
service's error kinds instead of a framework validation error.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class PriceUpdateRequest(BaseModel):
    """Body of POST /api/update-price."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    station_id: Any = Field(default=None, alias="stationId")
    fuel_type: Any = Field(default=None, alias="fuelType")
    price: Any = None
    updated_by: Any = Field(default=None, alias="updatedBy")


class PriceUpdateResponse(BaseModel):
    """Body returned for an accepted price."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    date_key: str = Field(alias="dateKey")
    station_id: str = Field(alias="stationId")


class ErrorResponse(BaseModel):
    """Error payload with a machine-checkable kind."""

    success: bool = False
    error: str
    message: str
    details: Optional[dict[str, Any]] = None
