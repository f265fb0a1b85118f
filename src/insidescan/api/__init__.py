"""HTTP API."""

from insidescan.api.router import api_router

__all__ = ["api_router"]
