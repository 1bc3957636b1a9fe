# src/fuelify/adapters/web/routes.py
"""
HTTP Routes - Price Submission and Dashboard Read Views

Endpoints keep the paths and payload shapes the dashboard front end already
uses. Handlers are plain (sync) functions so FastAPI runs them in its thread
pool while they wait on the ledger store.

Files that USE this module:
- fuelify.adapters.web.app (includes the router)

Files that this module USES:
- fuelify.application.ledger_service (PriceLedgerService)
- fuelify.application.health (HealthChecker)
- fuelify.application.projector (record_to_entry)
- fuelify.adapters.web.schemas (request/response models)
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from fuelify.adapters.web.schemas import PriceUpdateRequest, PriceUpdateResponse
from fuelify.application.health import HealthChecker
from fuelify.application.ledger_service import PriceLedgerService
from fuelify.application.projector import record_to_entry
from fuelify.domain.errors import StoreUnavailableError

logger = logging.getLogger(__name__)

router = APIRouter()


def _service(request: Request) -> PriceLedgerService:
    return request.app.state.ledger_service


def _health(request: Request) -> HealthChecker:
    return request.app.state.health_checker


@router.get("/")
def index(request: Request) -> dict:
    """Service banner with store connectivity and station count."""
    service = _service(request)
    try:
        service.store.ping()
        store_state = "connected"
    except StoreUnavailableError as e:
        logger.warning("Store unreachable on status probe: %s", e)
        store_state = "unavailable"
    return {
        "status": "Fuelify API",
        "store": store_state,
        "backend": service.store.name,
        "stations": len(service.directory),
    }


@router.get("/health")
def health(request: Request) -> JSONResponse:
    """Overall health; 503 when any component is degraded."""
    report = _health(request).get_overall_health()
    return JSONResponse(status_code=200 if report["overall_healthy"] else 503, content=report)


@router.get("/api/stations")
def list_stations(request: Request) -> list[dict]:
    return [s.to_json() for s in _service(request).directory.list()]


@router.post("/api/update-price")
def update_price(body: PriceUpdateRequest, request: Request) -> dict:
    """Record one grade's price on today's record for a station."""
    result = _service(request).submit_price(
        body.station_id, body.fuel_type, body.price, body.updated_by,
    )
    return PriceUpdateResponse(dateKey=result.date_key, stationId=result.station_id).model_dump(by_alias=True)


@router.get("/api/admin/price-history")
def price_history(
    request: Request,
    limit: Optional[int] = Query(None, ge=1, le=5000, description="Maximum ledger records to read"),
) -> dict:
    """
    Cross-station snapshot grouped by date (newest first).

    Each station maps to a one-entry list holding that day's record, the
    shape the dashboard table renders.
    """
    service = _service(request)
    snapshot = service.list_recent_snapshot(limit)
    history = {
        date: {station_id: [record_to_entry(record)] for station_id, record in by_station.items()}
        for date, by_station in snapshot.items()
    }
    return {
        "stations": [s.to_json() for s in service.directory.list()],
        "history": history,
    }


@router.get("/api/admin/chart-data/{station_id}")
def chart_data(
    station_id: str,
    request: Request,
    limit: Optional[int] = Query(None, ge=1, le=366, description="Maximum days in the series"),
) -> dict:
    """A station's daily prices in ascending date order."""
    service = _service(request)
    series = service.list_station_series(station_id, limit)
    station = service.directory.get(station_id)
    return {
        "station": station.name,
        "data": [point.to_json() for point in series],
    }
