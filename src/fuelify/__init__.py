"""
Fuelify - Fuel Price Ledger Service

Tracks staff-submitted fuel prices per station and per day, and serves the
daily snapshot table and per-station price series consumed by the dashboard.
"""

__version__ = "1.0.0"
