"""Domain models for the transit network graph and line schedules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

LatLng = tuple[float, float]


@dataclass(slots=True)
class StopAreaService:
    """Share of an area reached by one stop's catchment disc."""

    area_id: str
    coverage: float
    population_served: int


@dataclass(slots=True)
class Stop:
    """Represents a bus stop placed on the map."""

    id: int
    name: str
    latitude: float
    longitude: float
    has_shelter: bool = False
    connected_route_ids: set[int] = field(default_factory=set)
    areas: list[StopAreaService] = field(default_factory=list)
    nearby_destination_ids: list[int] = field(default_factory=list)

    @property
    def position(self) -> LatLng:
        return (self.latitude, self.longitude)

    @property
    def bus_lines(self) -> list[int]:
        return sorted(self.connected_route_ids)


@dataclass(slots=True)
class RoutePoint:
    latitude: float
    longitude: float
    stop_id: Optional[int] = None

    @property
    def position(self) -> LatLng:
        return (self.latitude, self.longitude)


def derive_stop_ids(points: list[RoutePoint]) -> list[int]:
    """Return the stop ids a route passes, in geometry order, duplicates kept."""
    return [point.stop_id for point in points if point.stop_id is not None]


@dataclass(slots=True)
class Route:
    """A bus line drawn as a polyline; points already snapped to stops."""

    id: int
    name: str
    points: list[RoutePoint] = field(default_factory=list)

    @property
    def stop_ids(self) -> list[int]:
        return derive_stop_ids(self.points)

    @property
    def coordinates(self) -> list[LatLng]:
        return [point.position for point in self.points]


@dataclass(slots=True)
class Area:
    """Polygonal service area with demographic attributes."""

    id: str
    ring: list[LatLng]
    name: Optional[str] = None
    area_m2: float = 0.0
    population: int = 0
    high_percentage_of_elderly: bool = False
    serving_lines: list[str] = field(default_factory=list)
    population_density: float = 0.0
    public_transport_usage_percent: float = 5.0
    destination_ids: list[int] = field(default_factory=list)


@dataclass(slots=True)
class Destination:
    """Travel destination (school, hospital, shop...) placed on the map."""

    id: int
    name: str
    latitude: float
    longitude: float
    recommended_low_floor: bool = False

    @property
    def position(self) -> LatLng:
        return (self.latitude, self.longitude)


@dataclass(slots=True)
class StopTime:
    stop_id: int
    time: str


@dataclass(slots=True)
class TripSchedule:
    """One run of a vehicle along the line in a single direction."""

    direction: str
    times: list[StopTime]
    break_end_time: str


@dataclass(slots=True)
class Vehicle:
    id: str
    name: str
    trips: list[TripSchedule] = field(default_factory=list)


@dataclass(slots=True)
class VehicleSchedule:
    """Timetable of every vehicle operating a line."""

    route_id: int
    vehicles: list[Vehicle] = field(default_factory=list)
    edited: bool = False

    def find_vehicle(self, vehicle_id: str) -> Optional[Vehicle]:
        for vehicle in self.vehicles:
            if vehicle.id == vehicle_id:
                return vehicle
        return None
