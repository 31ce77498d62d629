"""Along-route distances and travel times."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from ...config import settings
from ...models.domain import Route, Stop
from ..geospatial import path_length_m, segment_lengths_m


def route_length_m(route: Route) -> float:
    if len(route.points) < 2:
        return 0.0
    return path_length_m(route.coordinates)


def _forward_distance(route: Route, stop_id: int) -> Optional[float]:
    index = next((i for i, point in enumerate(route.points) if point.stop_id == stop_id), None)
    if index is None:
        return None
    cumulative = np.concatenate(([0.0], np.cumsum(segment_lengths_m(route.coordinates))))
    return float(cumulative[index])


def cumulative_distance(route: Route, stop_id: int, reverse: bool = False) -> float:
    """Distance in meters from the start of the route (or its end when reversed) to a stop.

    The stop is located at its first tagged point. The reverse distance is the
    route length minus the forward distance.
    """

    if len(route.points) < 2:
        return 0.0
    forward = _forward_distance(route, stop_id)
    if forward is None:
        return 0.0
    if reverse:
        return route_length_m(route) - forward
    return forward


def travel_time_minutes(
    route: Route,
    stop_id: int,
    reverse: bool = False,
    *,
    speed_kmh: float | None = None,
) -> float:
    speed = settings.average_speed_kmh if speed_kmh is None else speed_kmh
    return cumulative_distance(route, stop_id, reverse) / 1000 / speed * 60


def format_distance(meters: float) -> str:
    if meters < 1000:
        return f"{round(meters)} m"
    return f"{meters / 1000:.2f} km"


def format_duration(minutes: float) -> str:
    if minutes == 0:
        return "0 min"
    whole_minutes = int(minutes)
    seconds = round((minutes - whole_minutes) * 60)
    if whole_minutes == 0:
        return f"{seconds} s"
    if seconds == 0:
        return f"{whole_minutes} min"
    return f"{whole_minutes} min {seconds} s"


@dataclass(slots=True)
class StopProgress:
    stop_id: int
    name: str
    sequence: int
    distance_from_start_m: float
    travel_time_min: float
    average_speed_kmh: Optional[float]


@dataclass(slots=True)
class RouteSummary:
    route_id: int
    name: str
    length_m: float
    stops: list[StopProgress]


def summarize_route(route: Route, stops: Sequence[Stop], *, speed_kmh: float | None = None) -> RouteSummary:
    """Per-stop progress along a line; stops that no longer exist are skipped."""

    by_id = {stop.id: stop for stop in stops}
    stop_ids = route.stop_ids
    progress: list[StopProgress] = []
    for stop_id in stop_ids:
        stop = by_id.get(stop_id)
        if stop is None:
            continue
        distance = cumulative_distance(route, stop_id)
        minutes = travel_time_minutes(route, stop_id, speed_kmh=speed_kmh)
        speed = None
        if distance > 0 and minutes > 0:
            speed = round((distance / 1000) / (minutes / 60), 1)
        progress.append(
            StopProgress(
                stop_id=stop_id,
                name=stop.name,
                sequence=stop_ids.index(stop_id) + 1,
                distance_from_start_m=distance,
                travel_time_min=minutes,
                average_speed_kmh=speed,
            )
        )
    return RouteSummary(route_id=route.id, name=route.name, length_m=route_length_m(route), stops=progress)
