"""Line schedule generation and editing."""

from .errors import InvalidTripStartTimeError, MissingTripPairError, ScheduleError, VehicleNotFoundError

__all__ = [
    "ScheduleError",
    "InvalidTripStartTimeError",
    "MissingTripPairError",
    "VehicleNotFoundError",
]
