"""Shared FastAPI dependencies."""

from __future__ import annotations

from functools import lru_cache

from ..services.network.service import NetworkService


@lru_cache()
def get_network_service() -> NetworkService:
    """Process-wide network service, loaded from storage on first use."""
    return NetworkService()
