"""Network snapshot endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from ..dependencies import get_network_service
from ..errors import to_http_error
from ...schemas.network import NetworkSnapshot
from ...services.network.service import NetworkService

router = APIRouter(prefix="/network", tags=["network"])


@router.get("", status_code=status.HTTP_200_OK)
def get_network(service: NetworkService = Depends(get_network_service)) -> dict:
    return service.snapshot().to_json_dict()


@router.put("", status_code=status.HTTP_200_OK)
def replace_network(payload: NetworkSnapshot, service: NetworkService = Depends(get_network_service)) -> dict:
    """Replace the whole network; every derived field is recomputed from the payload."""
    try:
        return service.replace(payload).to_json_dict()
    except Exception as exc:
        raise to_http_error(exc, "replace the network") from exc


@router.delete("", status_code=status.HTTP_200_OK)
def clear_network(service: NetworkService = Depends(get_network_service)) -> dict:
    service.clear()
    return {"success": True, "message": "Network cleared"}


@router.get("/overlays", status_code=status.HTTP_200_OK)
def get_overlays(service: NetworkService = Depends(get_network_service)) -> dict:
    try:
        return service.overlays()
    except Exception as exc:
        raise to_http_error(exc, "build map overlays") from exc


@router.get("/export/geojson", status_code=status.HTTP_200_OK)
def export_geojson(
    persist: bool = Query(default=False, description="Also write the export under the data root."),
    service: NetworkService = Depends(get_network_service),
) -> dict:
    output_path = service.storage.root / "exports" / "network.geojson" if persist else None
    try:
        return service.export_geojson(output_path)
    except Exception as exc:
        raise to_http_error(exc, "export the network") from exc
