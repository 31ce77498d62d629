"""Errors raised by schedule edits."""

from __future__ import annotations


class ScheduleError(ValueError):
    """A schedule edit was rejected; the schedule is left untouched."""


class InvalidTripStartTimeError(ScheduleError):
    def __init__(self, start_time: str, earliest: str) -> None:
        super().__init__(
            f"Trip cannot start at {start_time}: the vehicle is busy until {earliest}."
        )
        self.start_time = start_time
        self.earliest = earliest


class MissingTripPairError(ScheduleError):
    def __init__(self, vehicle_id: str, trip_index: int) -> None:
        super().__init__(f"No pair found for trip {trip_index} of vehicle '{vehicle_id}'.")
        self.vehicle_id = vehicle_id
        self.trip_index = trip_index


class VehicleNotFoundError(LookupError):
    def __init__(self, vehicle_id: str) -> None:
        super().__init__(f"Vehicle '{vehicle_id}' not found.")
        self.vehicle_id = vehicle_id
