"""Endpoints receiving map editor notifications."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ..dependencies import get_network_service
from ..errors import to_http_error
from ...schemas.editor import EditorResponse, GeometryCreated, GeometryEdited, GeometryRemoved, MarkerDragged
from ...services.network.service import NetworkService

router = APIRouter(prefix="/editor", tags=["editor"])


def _respond(service: NetworkService, kind: str, entity_id: int | str) -> EditorResponse:
    return EditorResponse(
        kind=kind,
        entity_id=entity_id,
        network=service.snapshot(),
        overlays=service.overlays(),
    )


@router.post("/created", response_model=EditorResponse, response_model_by_alias=True, status_code=status.HTTP_201_CREATED)
def geometry_created(payload: GeometryCreated, service: NetworkService = Depends(get_network_service)) -> EditorResponse:
    try:
        entity = service.on_geometry_created(payload.kind, payload.coordinates, name=payload.name)
        return _respond(service, payload.kind, entity.id)
    except Exception as exc:
        raise to_http_error(exc, f"create {payload.kind}") from exc


@router.post("/edited", response_model=EditorResponse, response_model_by_alias=True, status_code=status.HTTP_200_OK)
def geometry_edited(payload: GeometryEdited, service: NetworkService = Depends(get_network_service)) -> EditorResponse:
    try:
        entity = service.on_geometry_edited(payload.kind, payload.entity_id, payload.coordinates)
        return _respond(service, payload.kind, entity.id)
    except Exception as exc:
        raise to_http_error(exc, f"edit {payload.kind}") from exc


@router.post("/removed", response_model=EditorResponse, response_model_by_alias=True, status_code=status.HTTP_200_OK)
def geometry_removed(payload: GeometryRemoved, service: NetworkService = Depends(get_network_service)) -> EditorResponse:
    try:
        entity = service.on_geometry_removed(payload.kind, payload.entity_id)
        return _respond(service, payload.kind, entity.id)
    except Exception as exc:
        raise to_http_error(exc, f"remove {payload.kind}") from exc


@router.post("/dragged", response_model=EditorResponse, response_model_by_alias=True, status_code=status.HTTP_200_OK)
def marker_dragged(payload: MarkerDragged, service: NetworkService = Depends(get_network_service)) -> EditorResponse:
    try:
        entity = service.on_marker_dragged(payload.kind, payload.entity_id, payload.lat, payload.lng)
        return _respond(service, payload.kind, entity.id)
    except Exception as exc:
        raise to_http_error(exc, f"move {payload.kind}") from exc
