# src/fuelify/application/health.py
"""
Health Checker - Service Monitoring and Diagnostics

This module reports whether the service can take traffic: the ledger store
must be reachable and the station directory must hold at least one station.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fuelify.adapters.persistence.base import LedgerStore
from fuelify.application.station_directory import StationDirectory
from fuelify.domain.errors import StoreUnavailableError

logger = logging.getLogger(__name__)


@dataclass
class HealthStatus:
    """Represents the health status of a component."""
    is_healthy: bool
    message: str
    last_check: datetime
    details: Optional[Dict[str, Any]] = None


class HealthChecker:
    """Health checks for the ledger store and station directory."""

    def __init__(self, store: LedgerStore, directory: StationDirectory):
        self.store = store
        self.directory = directory

    def check_store(self) -> HealthStatus:
        """Check that the ledger store's backing medium is reachable."""
        try:
            self.store.ping()
            return HealthStatus(
                is_healthy=True,
                message=f"Ledger store ({self.store.name}) reachable",
                last_check=datetime.now(timezone.utc),
                details={"backend": self.store.name},
            )
        except StoreUnavailableError as e:
            logger.warning("Ledger store health check failed: %s", e)
            return HealthStatus(
                is_healthy=False,
                message=f"Ledger store unavailable: {e}",
                last_check=datetime.now(timezone.utc),
                details={"backend": self.store.name, "retryable": True},
            )

    def check_directory(self) -> HealthStatus:
        """Check that at least one station is configured."""
        count = len(self.directory)
        return HealthStatus(
            is_healthy=count > 0,
            message=f"{count} station(s) configured" if count else "No stations configured",
            last_check=datetime.now(timezone.utc),
            details={"stations": count},
        )

    def get_overall_health(self) -> Dict[str, Any]:
        """
        Get overall health status of all components.

        Returns degraded status if any component fails.
        """
        checks = {
            "store": self.check_store(),
            "directory": self.check_directory(),
        }

        failed_checks = [name for name, check in checks.items() if not check.is_healthy]
        overall_healthy = not failed_checks

        if overall_healthy:
            status_message = "All systems healthy"
        else:
            status_message = f"Degraded - {len(failed_checks)} component(s) failed: {', '.join(failed_checks)}"

        return {
            "overall_healthy": overall_healthy,
            "status": "healthy" if overall_healthy else "degraded",
            "message": status_message,
            "failed_components": failed_checks,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "checks": {
                name: {
                    "healthy": check.is_healthy,
                    "message": check.message,
                    "last_check": check.last_check.isoformat(),
                    "details": check.details,
                }
                for name, check in checks.items()
            },
        }
