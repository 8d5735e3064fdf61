"""ASGI entrypoint (``uvicorn habit_planner.asgi:app``)."""

from .application import app, create_app

__all__ = ["app", "create_app"]
