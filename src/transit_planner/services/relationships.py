"""Destination containment and proximity relations."""

from __future__ import annotations

from typing import Iterable, Sequence

from ..config import settings
from ..models.domain import Area, Destination, Stop
from .geospatial import distance_meters, point_in_polygon


def destinations_in_area(area: Area, destinations: Iterable[Destination]) -> list[int]:
    return [
        destination.id
        for destination in destinations
        if point_in_polygon(destination.latitude, destination.longitude, area.ring)
    ]


def destinations_near_stop(
    stop: Stop,
    destinations: Iterable[Destination],
    threshold_m: float | None = None,
) -> list[int]:
    """Destinations within a straight-line walk of ``threshold_m`` from the stop."""

    threshold = settings.destination_threshold_m if threshold_m is None else threshold_m
    return [
        destination.id
        for destination in destinations
        if distance_meters(stop.position, destination.position) <= threshold
    ]


def update_all_destination_relationships(
    stops: Sequence[Stop],
    areas: Sequence[Area],
    destinations: Sequence[Destination],
    *,
    threshold_m: float | None = None,
) -> None:
    """Recompute area containment and stop proximity for every destination."""

    for area in areas:
        area.destination_ids = destinations_in_area(area, destinations)
    for stop in stops:
        stop.nearby_destination_ids = destinations_near_stop(stop, destinations, threshold_m)


def stops_serving_destination(destination_id: int, stops: Iterable[Stop]) -> list[Stop]:
    return [stop for stop in stops if destination_id in stop.nearby_destination_ids]


def lines_serving_destination(destination_id: int, stops: Iterable[Stop]) -> list[int]:
    lines: set[int] = set()
    for stop in stops_serving_destination(destination_id, stops):
        lines.update(stop.connected_route_ids)
    return sorted(lines)
