# src/fuelify/application/station_directory.py
"""
Station Directory - Known Fuel Stations

This module holds the small, fixed set of stations the ledger accepts prices
for. It is read-only from the ledger's point of view: the service looks
stations up by id and the read views join names in at projection time.
Registering a station at runtime is a separate administrative operation.

Files that USE this module:
- fuelify.application.ledger_service (station existence checks and names)
- fuelify.application.health (directory health check)
- fuelify.app (builds the directory from settings)

Files that this module USES:
- fuelify.domain (Station, NotFoundError, InvalidArgumentError)
- fuelify.config (optional stations file path)
"""
from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Iterable, Optional

from fuelify.domain.errors import InvalidArgumentError, NotFoundError
from fuelify.domain.models import Station

logger = logging.getLogger(__name__)

DEFAULT_STATIONS: tuple[Station, ...] = (
    Station(id="1", name="EagleStores Parma", latitude=41.38, longitude=-81.73),
    Station(id="2", name="Marathon Killbuck", latitude=40.5, longitude=-81.98),
    Station(id="3", name="Marathon Loudonville", latitude=40.63, longitude=-82.23),
    Station(id="4", name="Acro Akron", latitude=41.08, longitude=-81.51),
)


def station_from_json(data: dict) -> Station:
    """
    Create a Station from a stations-file entry.

    Accepts both ``latitude``/``longitude`` and the short ``lat``/``lng`` keys.

    Raises:
        KeyError, ValueError, TypeError: If required fields are missing or not numeric
    """
    latitude = data["latitude"] if "latitude" in data else data["lat"]
    longitude = data["longitude"] if "longitude" in data else data["lng"]
    return Station(
        id=str(data["id"]).strip(),
        name=str(data["name"]),
        latitude=float(latitude),
        longitude=float(longitude),
        address=data.get("address"),
        brand=data.get("brand"),
    )


def load_stations(path: Path) -> list[Station]:
    """
    Load the station list from a JSON file holding a list of station objects.

    Args:
        path: Path to the stations file

    Returns:
        Stations in file order

    Raises:
        ValueError: If the file is not a list of valid station objects
        OSError: If the file cannot be read
    """
    with Path(path).open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"Stations file {path} must contain a JSON list")
    try:
        return [station_from_json(entry) for entry in data]
    except (KeyError, ValueError, TypeError) as e:
        raise ValueError(f"Invalid station entry in {path}: {e}") from e


class StationDirectory:
    """Lookup of known stations by id."""

    def __init__(self, stations: Iterable[Station] = DEFAULT_STATIONS):
        self._stations: dict[str, Station] = {}
        self._lock = threading.Lock()
        for station in stations:
            if station.id in self._stations:
                raise ValueError(f"Duplicate station id: {station.id}")
            self._stations[station.id] = station

    @classmethod
    def from_file(cls, path: Optional[Path]) -> StationDirectory:
        """Build a directory from a stations file, or the default stations when path is None."""
        if path is None:
            return cls()
        stations = load_stations(path)
        logger.info("Loaded %d stations from %s", len(stations), path)
        return cls(stations)

    def get(self, station_id: str) -> Station:
        """
        Look up a station.

        Raises:
            NotFoundError: If no station has this id
        """
        station = self._stations.get(station_id)
        if station is None:
            raise NotFoundError(f"Unknown station '{station_id}'")
        return station

    def contains(self, station_id: str) -> bool:
        return station_id in self._stations

    def list(self) -> list[Station]:
        """Return all stations in registration order."""
        return list(self._stations.values())

    def __len__(self) -> int:
        return len(self._stations)

    def register(self, station: Station) -> Station:
        """
        Add a station at runtime (administrative operation, not exposed over HTTP).

        Raises:
            InvalidArgumentError: If the id is blank or already registered
        """
        if not station.id or not station.id.strip():
            raise InvalidArgumentError("Station id is required")
        with self._lock:
            if station.id in self._stations:
                raise InvalidArgumentError(f"Station '{station.id}' already exists")
            # Copy-on-write so concurrent readers never see a half-updated dict
            updated = dict(self._stations)
            updated[station.id] = station
            self._stations = updated
        logger.info("Registered station %s (%s)", station.id, station.name)
        return station
