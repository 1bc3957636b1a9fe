"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- Persistence (ledger stores)
- Web (HTTP interface)
"""

__all__ = []
