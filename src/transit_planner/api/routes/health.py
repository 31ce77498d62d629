"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ..dependencies import get_network_service
from ...services.network.service import NetworkService

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/storage", status_code=status.HTTP_200_OK)
def health_storage(service: NetworkService = Depends(get_network_service)) -> dict:
    """Report where the network is stored and how large it is."""
    graph = service.graph
    return {
        "snapshot_path": str(service.storage.snapshot_path),
        "snapshot_exists": service.storage.snapshot_path.exists(),
        "stops": len(graph.stops),
        "routes": len(graph.routes),
        "areas": len(graph.areas),
        "destinations": len(graph.destinations),
    }
