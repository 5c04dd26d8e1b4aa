"""HTTP layer: FastAPI app, routes, auth and error mapping."""

from .app import create_app

__all__ = ['create_app']
