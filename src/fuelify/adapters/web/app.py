# src/fuelify/adapters/web/app.py
"""
FastAPI Application Factory

Builds the HTTP application around an already-constructed ledger service,
registers the routes, and maps domain error kinds to response statuses:

- invalid_argument  -> 400 (not retryable)
- not_found         -> 404 (not retryable)
- store_unavailable -> 503 with Retry-After (safe to retry)
- anything else     -> 500 internal, underlying message attached

Files that USE this module:
- fuelify.app (serves the application with uvicorn)
- tests.test_web (TestClient)

Files that this module USES:
- fuelify.adapters.web.routes (router)
- fuelify.application (PriceLedgerService, HealthChecker)
- fuelify.domain.errors (error kinds)
"""
from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fuelify import __version__
from fuelify.adapters.web.routes import router
from fuelify.adapters.web.schemas import ErrorResponse
from fuelify.application.health import HealthChecker
from fuelify.application.ledger_service import PriceLedgerService
from fuelify.domain.errors import DomainError

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "invalid_argument": 400,
    "not_found": 404,
    "store_unavailable": 503,
}

RETRY_AFTER_SECONDS = 1


def create_app(service: PriceLedgerService, health_checker: Optional[HealthChecker] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Ledger service the routes call into
        health_checker: Health checker; built from the service's store and directory if omitted

    Returns:
        Configured FastAPI instance
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        service.store.close()
        logger.info("Ledger store closed")

    app = FastAPI(
        title="Fuelify",
        description="Fuel price ledger: staff price submissions and dashboard read views",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.ledger_service = service
    app.state.health_checker = health_checker or HealthChecker(service.store, service.directory)

    _setup_middleware(app)
    app.include_router(router)
    _setup_exception_handlers(app)
    return app


def _setup_middleware(app: FastAPI) -> None:
    """Configure middleware."""
    # The dashboard is served from a different origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )


def _error_response(status_code: int, kind: str, message: str, details: Optional[dict] = None,
                    headers: Optional[dict] = None) -> JSONResponse:
    payload = ErrorResponse(error=kind, message=message, details=details)
    return JSONResponse(status_code=status_code, content=payload.model_dump(exclude_none=True), headers=headers)


def _setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers."""

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        status_code = STATUS_BY_KIND.get(exc.kind)
        if status_code is None:
            logger.error("Unresolved ledger error on %s %s: %s", request.method, request.url.path, exc)
            return _error_response(500, "internal", str(exc), details={"type": type(exc).__name__})
        if status_code >= 500:
            logger.warning("%s on %s %s: %s", exc.kind, request.method, request.url.path, exc)
            return _error_response(status_code, exc.kind, str(exc),
                                   headers={"Retry-After": str(RETRY_AFTER_SECONDS)})
        return _error_response(status_code, exc.kind, str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = f"{location}: {first.get('msg', 'invalid request')}" if location else "Invalid request"
        return _error_response(400, "invalid_argument", message)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unexpected error on %s %s", request.method, request.url.path)
        return _error_response(500, "internal", str(exc) or type(exc).__name__,
                               details={"type": type(exc).__name__})
