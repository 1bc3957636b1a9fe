"""
Web Adapter - HTTP Interface

FastAPI application exposing price submission and the dashboard read views.
"""

from fuelify.adapters.web.app import create_app

__all__ = ["create_app"]
