# src/fuelify/application/projector.py
"""
Read-View Projector - Shapes Ledger Records for the Dashboard

Pure functions, no I/O. They turn ledger records into the two views the
dashboard reads: the grouped-by-date snapshot table and a station's
chronological price series. Ordering is enforced here, so the views are
correct whatever order a store returns rows in.

Files that USE this module:
- fuelify.application.ledger_service (builds both read views)
- fuelify.adapters.web.routes (record_to_entry for the history payload)

Files that this module USES:
- fuelify.domain.models (DailyStationRecord, SeriesPoint)
"""
from __future__ import annotations

from typing import Any, Dict, Iterable

from fuelify.adapters.persistence.base import format_timestamp
from fuelify.domain.models import DailyStationRecord, SeriesPoint


def group_by_date(records: Iterable[DailyStationRecord]) -> Dict[str, Dict[str, DailyStationRecord]]:
    """
    Group records per date, then per station.

    Dates come out in descending order. If the same (station, date) appears
    twice, the record with the later write wins.
    """
    grouped: Dict[str, Dict[str, DailyStationRecord]] = {}
    for record in records:
        day = grouped.setdefault(record.date, {})
        current = day.get(record.station_id)
        if current is None or record.recorded_at > current.recorded_at:
            day[record.station_id] = record
    return {date: grouped[date] for date in sorted(grouped, reverse=True)}


def to_series(records: Iterable[DailyStationRecord]) -> list[SeriesPoint]:
    """Turn a station's records into price points in ascending date order."""
    ordered = sorted(records, key=lambda r: r.date)
    return [
        SeriesPoint(
            date=r.date,
            regular=r.regular,
            midgrade=r.midgrade,
            premium=r.premium,
            diesel=r.diesel,
        )
        for r in ordered
    ]


def record_to_entry(record: DailyStationRecord) -> Dict[str, Any]:
    """Render a record as the dashboard's history entry."""
    return {
        "time": format_timestamp(record.recorded_at),
        "updatedBy": record.recorded_by,
        "prices": record.prices(),
    }
