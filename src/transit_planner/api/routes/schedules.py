"""Line schedule endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ..dependencies import get_network_service
from ..errors import to_http_error
from ...schemas.schedule import AddTripRequest, AddVehicleRequest, ScheduleChart, ScheduleSnapshot
from ...services.network.service import NetworkService
from ...services.outputs.chart_formatter import schedule_to_chart

router = APIRouter(prefix="/schedules", tags=["schedules"])


@router.get("/{route_id}", status_code=status.HTTP_200_OK)
def get_schedule(route_id: int, service: NetworkService = Depends(get_network_service)) -> dict:
    """Schedule of a line; a default one is generated and stored the first time."""
    try:
        schedule = service.schedules.get_schedule(route_id)
        return ScheduleSnapshot.from_domain(schedule).to_json_dict()
    except Exception as exc:
        raise to_http_error(exc, "load schedule") from exc


@router.post("/{route_id}/vehicles", status_code=status.HTTP_201_CREATED)
def add_vehicle(
    route_id: int,
    payload: AddVehicleRequest,
    service: NetworkService = Depends(get_network_service),
) -> dict:
    try:
        schedule = service.schedules.add_vehicle(route_id, payload.start_stop_id)
        return ScheduleSnapshot.from_domain(schedule).to_json_dict()
    except Exception as exc:
        raise to_http_error(exc, "add vehicle") from exc


@router.delete("/{route_id}/vehicles/{vehicle_id}", status_code=status.HTTP_200_OK)
def delete_vehicle(route_id: int, vehicle_id: str, service: NetworkService = Depends(get_network_service)) -> dict:
    try:
        schedule = service.schedules.delete_vehicle(route_id, vehicle_id)
        return ScheduleSnapshot.from_domain(schedule).to_json_dict()
    except Exception as exc:
        raise to_http_error(exc, "delete vehicle") from exc


@router.post("/{route_id}/vehicles/{vehicle_id}/trips", status_code=status.HTTP_201_CREATED)
def add_trip(
    route_id: int,
    vehicle_id: str,
    payload: AddTripRequest,
    service: NetworkService = Depends(get_network_service),
) -> dict:
    try:
        schedule = service.schedules.add_trip(route_id, vehicle_id, payload.start_time)
        return ScheduleSnapshot.from_domain(schedule).to_json_dict()
    except Exception as exc:
        raise to_http_error(exc, "add trip") from exc


@router.delete("/{route_id}/vehicles/{vehicle_id}/trips/{trip_index}", status_code=status.HTTP_200_OK)
def delete_trip(
    route_id: int,
    vehicle_id: str,
    trip_index: int,
    service: NetworkService = Depends(get_network_service),
) -> dict:
    """Delete a trip together with its return (or outbound) pair."""
    try:
        schedule = service.schedules.delete_trip(route_id, vehicle_id, trip_index)
        return ScheduleSnapshot.from_domain(schedule).to_json_dict()
    except Exception as exc:
        raise to_http_error(exc, "delete trip") from exc


@router.get("/{route_id}/chart", response_model=ScheduleChart, status_code=status.HTTP_200_OK)
def schedule_chart(route_id: int, service: NetworkService = Depends(get_network_service)) -> ScheduleChart:
    try:
        schedule = service.schedules.get_schedule(route_id)
        return schedule_to_chart(schedule, service.graph.stop_list())
    except Exception as exc:
        raise to_http_error(exc, "build schedule chart") from exc
