# src/fuelify/app.py
"""
Application Entry Point - Service Wiring and Startup

This module serves as the composition root for the Fuelify service.
It wires settings, logging, the ledger store, the station directory and
the ledger service together, then serves the HTTP application.

Files that USE this module:
- python -m fuelify (module entry point)
- the ``fuelify`` console script

Files that this module USES:
- fuelify.shared.logging_conf (setup_logging for logging configuration)
- fuelify.config (settings for configuration management)
- fuelify.adapters.persistence (build_store)
- fuelify.application (StationDirectory, PriceLedgerService, HealthChecker)
- fuelify.adapters.web (create_app)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations for forward references

import logging  # Standard library for logging messages and errors
import os  # Working directory for startup diagnostics
import sys  # Exit codes

import uvicorn  # ASGI server
from fastapi import FastAPI  # Web application type

from fuelify.adapters.persistence import build_store  # Ledger store factory
from fuelify.adapters.web import create_app  # HTTP application factory
from fuelify.application.health import HealthChecker  # Store and directory health checks
from fuelify.application.ledger_service import PriceLedgerService  # Core ledger logic
from fuelify.application.station_directory import StationDirectory  # Known stations
from fuelify.config.settings import Settings  # Settings type
from fuelify.domain.errors import StoreUnavailableError  # Store reachability failures
from fuelify.shared.logging_conf import setup_logging  # Configure logging with file rotation


def build_application(settings: Settings) -> FastAPI:
    """
    Build the ledger service and its HTTP application from settings.

    Args:
        settings: Application settings

    Returns:
        FastAPI application with the service attached
    """
    logger = logging.getLogger(__name__)

    directory = StationDirectory.from_file(settings.stations_file)
    store = build_store(settings)
    service = PriceLedgerService(
        store=store,
        directory=directory,
        ledger_timezone=settings.ledger_timezone,
        history_limit=settings.history_limit,
        series_limit=settings.series_limit,
    )

    # Report an unreachable store at startup; requests will keep failing fast until it recovers
    try:
        store.ping()
    except StoreUnavailableError as e:
        logger.error("Ledger store not reachable at startup: %s", e)

    app = create_app(service, HealthChecker(store, directory))
    logger.info(
        "Fuelify ready: backend=%s, stations=%d, day bucket=%s",
        store.name, len(directory), settings.ledger_timezone,
    )
    return app


def main() -> None:
    """
    Initialize and start the HTTP service.

    This function:
    1. Sets up logging from settings
    2. Builds the store, directory, service and web application
    3. Runs uvicorn until interrupted
    """
    from fuelify.config import settings

    setup_logging(
        level=getattr(logging, settings.log_level),
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        log_to_stdout=settings.log_stdout,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )
    logger = logging.getLogger(__name__)
    logger.info("Working directory: %s", os.getcwd())

    try:
        app = build_application(settings)
    except (OSError, ValueError) as e:
        logger.error("Failed to start Fuelify: %s", e)
        sys.exit(1)

    logger.info("Serving on %s:%d", settings.host, settings.port)
    try:
        uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    except KeyboardInterrupt:
        logger.info("Fuelify stopped by user (KeyboardInterrupt)")
    except Exception as e:
        logger.exception("Unexpected error during service operation: %s (type: %s)", e, type(e).__name__)
        raise


if __name__ == "__main__":
    main()
