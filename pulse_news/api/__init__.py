"""HTTP API for on-demand news fetching."""

from .app import create_app

__all__ = ["create_app"]
