"""HTTP API for the layout engine."""

from orrery.api.main import app, create_app

__all__ = ["app", "create_app"]
