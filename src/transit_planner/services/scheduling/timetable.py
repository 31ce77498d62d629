"""Trip timetable generation for a single line."""

from __future__ import annotations

import math
from typing import Sequence

from ...config import settings
from ...models.domain import Route, Stop, StopTime, TripSchedule, Vehicle, VehicleSchedule
from .travel import travel_time_minutes


def minutes_to_time(minutes: float) -> str:
    """Format minutes since midnight as ``HH:MM`` (both fields floored)."""

    hours = math.floor(minutes / 60)
    mins = math.floor(minutes % 60)
    return f"{hours:02d}:{mins:02d}"


def time_to_minutes(value: str) -> int:
    try:
        hours_text, minutes_text = value.strip().split(":")
        hours, minutes = int(hours_text), int(minutes_text)
    except (AttributeError, ValueError) as exc:
        raise ValueError(f"Invalid time '{value}', expected HH:MM.") from exc
    if hours < 0 or not 0 <= minutes < 60:
        raise ValueError(f"Invalid time '{value}', expected HH:MM.")
    return hours * 60 + minutes


def direction_label(stop_ids: Sequence[int]) -> str:
    if not stop_ids:
        return ""
    return f"{stop_ids[0]}->{stop_ids[-1]}"


def ordered_stop_ids(route: Route, stops: Sequence[Stop]) -> list[int]:
    """Forward stop order of a line, without ids of stops that no longer exist."""

    known = {stop.id for stop in stops}
    return [stop_id for stop_id in route.stop_ids if stop_id in known]


def generate_trip(
    route: Route,
    stop_ids: Sequence[int],
    start_minutes: float,
    reverse: bool = False,
    *,
    speed_kmh: float | None = None,
    break_minutes: float | None = None,
) -> tuple[TripSchedule, float]:
    """Walk ``stop_ids`` in the given order starting at ``start_minutes``.

    Returns the trip and the unrounded minute at which its break ends.
    """

    layover = settings.break_minutes if break_minutes is None else break_minutes
    times: list[StopTime] = []
    current = start_minutes
    previous_travel = None
    for stop_id in stop_ids:
        travel = travel_time_minutes(route, stop_id, reverse, speed_kmh=speed_kmh)
        if previous_travel is not None:
            current += abs(travel - previous_travel)
        previous_travel = travel
        times.append(StopTime(stop_id=stop_id, time=minutes_to_time(current)))

    break_end = current + layover
    trip = TripSchedule(
        direction=direction_label(stop_ids),
        times=times,
        break_end_time=minutes_to_time(break_end),
    )
    return trip, break_end


def generate_trip_pair(
    route: Route,
    stop_ids: Sequence[int],
    start_minutes: float,
    reverse_first: bool = False,
    **kwargs,
) -> tuple[list[TripSchedule], float]:
    """One cycle: a trip and its return trip starting when the first break ends."""

    forward_order = list(stop_ids)
    backward_order = list(reversed(forward_order))
    first_order, second_order = (backward_order, forward_order) if reverse_first else (forward_order, backward_order)

    first, first_end = generate_trip(route, first_order, start_minutes, reverse_first, **kwargs)
    second, second_end = generate_trip(route, second_order, first_end, not reverse_first, **kwargs)
    return [first, second], second_end


def vehicle_name(index: int) -> str:
    return f"Vehicle {index}"


def next_vehicle_index(schedule: VehicleSchedule) -> int:
    highest = 0
    for vehicle in schedule.vehicles:
        suffix = vehicle.id.rsplit("-", 1)[-1]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return highest + 1


def generate_default_schedule(route: Route, stops: Sequence[Stop], **kwargs) -> VehicleSchedule:
    """Default timetable: one vehicle running one cycle from the first departure."""

    schedule = VehicleSchedule(route_id=route.id)
    stop_ids = ordered_stop_ids(route, stops)
    if not stop_ids:
        return schedule
    trips, _ = generate_trip_pair(route, stop_ids, time_to_minutes(settings.first_departure), **kwargs)
    schedule.vehicles.append(Vehicle(id="vehicle-1", name=vehicle_name(1), trips=trips))
    return schedule
