"""REST surface: ``GET /api/price/{code}`` over the price resolver."""

from unified_price.api.app import create_app

__all__ = ["create_app"]
