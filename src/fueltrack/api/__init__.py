"""JSON API layer -- FastAPI routes over the entry store."""

from fueltrack.api.app import create_app

__all__ = ["create_app"]
