"""Line schedule lifecycle: load or generate, then user edits."""

from __future__ import annotations

import logging
from typing import Literal, Sequence

from ...config import settings
from ...models.domain import Route, Stop, TripSchedule, Vehicle, VehicleSchedule
from ...persistence.filesystem import FileStorage
from ..network.graph import NetworkGraph
from .errors import InvalidTripStartTimeError, MissingTripPairError, VehicleNotFoundError
from .timetable import (
    direction_label,
    generate_default_schedule,
    generate_trip_pair,
    next_vehicle_index,
    ordered_stop_ids,
    time_to_minutes,
    vehicle_name,
)

ScheduleState = Literal["none", "default", "edited"]


def _require_vehicle(schedule: VehicleSchedule, vehicle_id: str) -> Vehicle:
    vehicle = schedule.find_vehicle(vehicle_id)
    if vehicle is None:
        raise VehicleNotFoundError(vehicle_id)
    return vehicle


def add_vehicle(schedule: VehicleSchedule, route: Route, stops: Sequence[Stop], start_stop_id: int) -> Vehicle:
    """Add a vehicle running one cycle from the first departure.

    A vehicle starting at the last stop of the line runs the return direction first.
    """

    stop_ids = ordered_stop_ids(route, stops)
    if start_stop_id not in stop_ids:
        raise ValueError(f"Stop {start_stop_id} is not served by line {route.id}.")
    reverse_first = start_stop_id == stop_ids[-1]
    trips, _ = generate_trip_pair(route, stop_ids, time_to_minutes(settings.first_departure), reverse_first)

    index = next_vehicle_index(schedule)
    vehicle = Vehicle(id=f"vehicle-{index}", name=vehicle_name(index), trips=trips)
    schedule.vehicles.append(vehicle)
    schedule.edited = True
    return vehicle


def add_trip(
    schedule: VehicleSchedule,
    route: Route,
    stops: Sequence[Stop],
    vehicle_id: str,
    start_time: str,
) -> list[TripSchedule]:
    """Append one more cycle to a vehicle, no earlier than the end of its last break."""

    vehicle = _require_vehicle(schedule, vehicle_id)
    start_minutes = time_to_minutes(start_time)
    if vehicle.trips:
        last_break_end = vehicle.trips[-1].break_end_time
        if start_minutes < time_to_minutes(last_break_end):
            raise InvalidTripStartTimeError(start_time, last_break_end)

    stop_ids = ordered_stop_ids(route, stops)
    if not stop_ids:
        raise ValueError(f"Line {route.id} has no stops.")
    reverse_label = direction_label(list(reversed(stop_ids)))
    reverse_first = bool(vehicle.trips) and reverse_label != direction_label(stop_ids) and (
        vehicle.trips[0].direction == reverse_label
    )
    trips, _ = generate_trip_pair(route, stop_ids, start_minutes, reverse_first)
    vehicle.trips.extend(trips)
    schedule.edited = True
    return trips


def delete_vehicle(schedule: VehicleSchedule, vehicle_id: str) -> Vehicle:
    vehicle = _require_vehicle(schedule, vehicle_id)
    schedule.vehicles = [item for item in schedule.vehicles if item.id != vehicle_id]
    schedule.edited = True
    return vehicle


def delete_trip(schedule: VehicleSchedule, vehicle_id: str, trip_index: int) -> None:
    """Remove a trip together with its pair (``trip_index ^ 1``)."""

    vehicle = _require_vehicle(schedule, vehicle_id)
    pair_index = trip_index ^ 1
    count = len(vehicle.trips)
    if trip_index < 0 or trip_index >= count or pair_index >= count:
        raise MissingTripPairError(vehicle_id, trip_index)
    for index in sorted((trip_index, pair_index), reverse=True):
        del vehicle.trips[index]
    schedule.edited = True


class ScheduleService:
    """Loads, generates and persists the schedule of each line."""

    def __init__(self, network: NetworkGraph, storage: FileStorage) -> None:
        self.network = network
        self.storage = storage

    def state(self, route_id: int) -> ScheduleState:
        schedule = self.storage.load_schedule(route_id)
        if schedule is None:
            return "none"
        return "edited" if schedule.edited else "default"

    def get_schedule(self, route_id: int) -> VehicleSchedule:
        route = self.network.get_route(route_id)
        schedule = self.storage.load_schedule(route_id)
        if schedule is not None:
            return schedule

        schedule = generate_default_schedule(route, self.network.stop_list())
        if schedule.vehicles:
            self.storage.save_schedule(schedule)
            logging.info(f"Generated default schedule for line {route_id}")
        else:
            logging.info(f"Line {route_id} has no stops; default schedule left empty")
        return schedule

    def _edit(self, route_id: int, action) -> VehicleSchedule:
        route = self.network.get_route(route_id)
        schedule = self.get_schedule(route_id)
        try:
            action(schedule, route)
        except (ValueError, LookupError) as exc:
            logging.info(f"Schedule edit for line {route_id} rejected: {exc}")
            raise
        self.storage.save_schedule(schedule)
        return schedule

    def add_vehicle(self, route_id: int, start_stop_id: int) -> VehicleSchedule:
        stops = self.network.stop_list()
        return self._edit(route_id, lambda schedule, route: add_vehicle(schedule, route, stops, start_stop_id))

    def add_trip(self, route_id: int, vehicle_id: str, start_time: str) -> VehicleSchedule:
        stops = self.network.stop_list()
        return self._edit(
            route_id, lambda schedule, route: add_trip(schedule, route, stops, vehicle_id, start_time)
        )

    def delete_vehicle(self, route_id: int, vehicle_id: str) -> VehicleSchedule:
        return self._edit(route_id, lambda schedule, route: delete_vehicle(schedule, vehicle_id))

    def delete_trip(self, route_id: int, vehicle_id: str, trip_index: int) -> VehicleSchedule:
        return self._edit(route_id, lambda schedule, route: delete_trip(schedule, vehicle_id, trip_index))

    def discard(self, route_id: int) -> None:
        self.storage.delete_schedule(route_id)
