"""API dependencies — Dependency injection for FastAPI endpoints."""

from __future__ import annotations

from fastapi import Request

from docsearcher.backends.base.client import ServiceClient
from docsearcher.config.settings import Settings

# Backend selected at startup (set during application lifespan)
_client: ServiceClient | None = None


def set_client(client: ServiceClient | None) -> None:
    """Set the process-wide backend (called during app lifespan)."""
    global _client
    _client = client


def get_client() -> ServiceClient:
    """Get the configured backend.

    Returns:
        The initialized ServiceClient.

    Raises:
        RuntimeError: If no backend is initialized.
    """
    if _client is None:
        raise RuntimeError("Search backend not initialized. Is the server running?")
    return _client


def get_settings(request: Request) -> Settings:
    """Get the settings the application was created with."""
    return request.app.state.settings
