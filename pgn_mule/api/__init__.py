"""
FastAPI relay service.

Provides:
- GET /{names} - Delayed, filtered PGN aggregation of one or more sources
- /admin/* - Source and replacement management
- GET /health - Service health check
"""

from pgn_mule.api.app import create_app

__all__ = ["create_app"]
