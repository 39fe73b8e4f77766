"""Web UI -- FastAPI app serving the live chart."""

from api.routes import create_app

__all__ = ["create_app"]
