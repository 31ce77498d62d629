"""Snap drawn route geometry onto existing stops."""

from __future__ import annotations

from typing import Iterable, Literal, Optional, Sequence

from ..config import settings
from ..models.domain import LatLng, Route, RoutePoint, Stop, derive_stop_ids
from .geospatial import distance_meters, point_to_path_distance_m

StopIconState = Literal["free", "vertex", "nearby"]


def find_nearest_stop(position: LatLng, stops: Iterable[Stop], max_meters: float) -> Optional[Stop]:
    """Closest stop strictly within ``max_meters``; on a tie the earlier stop wins."""

    best: Optional[Stop] = None
    best_distance = float("inf")
    for stop in stops:
        distance = distance_meters(position, stop.position)
        if distance < max_meters and distance < best_distance:
            best = stop
            best_distance = distance
    return best


def snap_points(
    coordinates: Sequence[LatLng],
    stops: Sequence[Stop],
    *,
    tolerance_m: float | None = None,
) -> list[RoutePoint]:
    """Turn raw vertices into route points, moving snapped vertices onto their stop."""

    tolerance = settings.snap_tolerance_m if tolerance_m is None else tolerance_m
    points: list[RoutePoint] = []
    for lat, lng in coordinates:
        nearest = find_nearest_stop((lat, lng), stops, tolerance)
        if nearest:
            points.append(RoutePoint(nearest.latitude, nearest.longitude, nearest.id))
        else:
            points.append(RoutePoint(lat, lng, None))
    return points


def snap_route(
    coordinates: Sequence[LatLng],
    route_id: int,
    stops: Sequence[Stop],
    *,
    tolerance_m: float | None = None,
) -> list[RoutePoint]:
    """Snap a route's geometry and rebuild stop membership for ``route_id``."""

    for stop in stops:
        stop.connected_route_ids.discard(route_id)

    points = snap_points(coordinates, stops, tolerance_m=tolerance_m)
    by_id = {stop.id: stop for stop in stops}
    for stop_id in derive_stop_ids(points):
        by_id[stop_id].connected_route_ids.add(route_id)
    return points


def resnap_all_routes(routes: Iterable[Route], stops: Sequence[Stop], *, tolerance_m: float | None = None) -> None:
    for route in routes:
        route.points = snap_route(route.coordinates, route.id, stops, tolerance_m=tolerance_m)


def move_stop_vertices(routes: Iterable[Route], stop: Stop) -> None:
    """Drag every route vertex tagged with ``stop`` to the stop's current position."""

    for route in routes:
        for point in route.points:
            if point.stop_id == stop.id:
                point.latitude = stop.latitude
                point.longitude = stop.longitude


def rebuild_membership(routes: Iterable[Route], stops: Sequence[Stop]) -> None:
    """Recompute every stop's route set from the routes' tagged points."""

    by_id = {stop.id: stop for stop in stops}
    for stop in stops:
        stop.connected_route_ids.clear()
    for route in routes:
        for point in route.points:
            if point.stop_id is None:
                continue
            stop = by_id.get(point.stop_id)
            if stop is None:
                point.stop_id = None
                continue
            stop.connected_route_ids.add(route.id)


def stop_icon_state(stop: Stop, routes: Iterable[Route], *, nearby_m: float | None = None) -> StopIconState:
    threshold = settings.nearby_route_threshold_m if nearby_m is None else nearby_m
    if stop.connected_route_ids:
        return "vertex"
    for route in routes:
        coordinates = route.coordinates
        if len(coordinates) < 2:
            continue
        if point_to_path_distance_m(stop.position, coordinates) < threshold:
            return "nearby"
    return "free"
