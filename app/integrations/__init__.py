"""Integrations package - clients for external systems."""

from app.integrations.api_client import KantinApiClient

__all__ = ["KantinApiClient"]
