"""Attribute edits and read models for stops, lines, areas and destinations."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ..dependencies import get_network_service
from ..errors import to_http_error
from ...schemas.editor import (
    AreaCoverageModel,
    AreaUpdate,
    DestinationServiceModel,
    DestinationUpdate,
    RouteSummaryModel,
    RouteUpdate,
    StopUpdate,
)
from ...schemas.network import AreaModel, DestinationModel, RouteModel, StopModel
from ...services.network.service import NetworkService

router = APIRouter(tags=["entities"])


@router.patch("/stops/{stop_id}", status_code=status.HTTP_200_OK)
def update_stop(stop_id: int, payload: StopUpdate, service: NetworkService = Depends(get_network_service)) -> dict:
    try:
        return StopModel.from_domain(service.update_stop(stop_id, payload)).to_json_dict()
    except Exception as exc:
        raise to_http_error(exc, "update stop") from exc


@router.patch("/routes/{route_id}", status_code=status.HTTP_200_OK)
def update_route(route_id: int, payload: RouteUpdate, service: NetworkService = Depends(get_network_service)) -> dict:
    try:
        return RouteModel.from_domain(service.rename_route(route_id, payload.name)).to_json_dict()
    except Exception as exc:
        raise to_http_error(exc, "update line") from exc


@router.get("/routes/{route_id}/summary", response_model=RouteSummaryModel, status_code=status.HTTP_200_OK)
def route_summary(route_id: int, service: NetworkService = Depends(get_network_service)) -> RouteSummaryModel:
    """Length of the line and distance, time and speed from the first stop to each stop."""
    try:
        return service.route_summary(route_id)
    except Exception as exc:
        raise to_http_error(exc, "summarize line") from exc


@router.patch("/areas/{area_id}", status_code=status.HTTP_200_OK)
def update_area(area_id: str, payload: AreaUpdate, service: NetworkService = Depends(get_network_service)) -> dict:
    try:
        return AreaModel.from_domain(service.update_area(area_id, payload)).to_json_dict()
    except Exception as exc:
        raise to_http_error(exc, "update area") from exc


@router.get("/areas/{area_id}/coverage", response_model=AreaCoverageModel, status_code=status.HTTP_200_OK)
def area_coverage(area_id: str, service: NetworkService = Depends(get_network_service)) -> AreaCoverageModel:
    try:
        return service.area_coverage(area_id)
    except Exception as exc:
        raise to_http_error(exc, "compute area coverage") from exc


@router.patch("/destinations/{destination_id}", status_code=status.HTTP_200_OK)
def update_destination(
    destination_id: int,
    payload: DestinationUpdate,
    service: NetworkService = Depends(get_network_service),
) -> dict:
    try:
        return DestinationModel.from_domain(service.update_destination(destination_id, payload)).to_json_dict()
    except Exception as exc:
        raise to_http_error(exc, "update destination") from exc


@router.get(
    "/destinations/{destination_id}/service",
    response_model=DestinationServiceModel,
    status_code=status.HTTP_200_OK,
)
def destination_service(
    destination_id: int,
    service: NetworkService = Depends(get_network_service),
) -> DestinationServiceModel:
    """Stops within walking distance of a destination and the lines calling there."""
    try:
        return service.destination_service(destination_id)
    except Exception as exc:
        raise to_http_error(exc, "look up destination service") from exc
