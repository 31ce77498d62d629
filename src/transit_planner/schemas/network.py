"""Pydantic models for the persisted network snapshot."""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from ..models.domain import Area, Destination, Route, RoutePoint, Stop, StopAreaService
from .base import CamelModel


class LatLngModel(CamelModel):
    lat: float
    lng: float


class StopAreaModel(CamelModel):
    area_id: str
    coverage: float
    population_served: int

    @classmethod
    def from_domain(cls, entry: StopAreaService) -> "StopAreaModel":
        return cls(area_id=entry.area_id, coverage=entry.coverage, population_served=entry.population_served)


class StopModel(CamelModel):
    id: int
    name: str
    bus_lines: List[int] = Field(default_factory=list)
    has_shelter: bool = False
    lat: float
    lng: float
    connected_route_ids: List[int] = Field(default_factory=list)
    areas: List[StopAreaModel] = Field(default_factory=list)
    nearby_destination_ids: List[int] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, stop: Stop) -> "StopModel":
        return cls(
            id=stop.id,
            name=stop.name,
            bus_lines=stop.bus_lines,
            has_shelter=stop.has_shelter,
            lat=stop.latitude,
            lng=stop.longitude,
            connected_route_ids=sorted(stop.connected_route_ids),
            areas=[StopAreaModel.from_domain(entry) for entry in stop.areas],
            nearby_destination_ids=list(stop.nearby_destination_ids),
        )

    def to_domain(self) -> Stop:
        return Stop(
            id=self.id,
            name=self.name,
            latitude=self.lat,
            longitude=self.lng,
            has_shelter=self.has_shelter,
            connected_route_ids=set(self.connected_route_ids),
            areas=[
                StopAreaService(area_id=entry.area_id, coverage=entry.coverage, population_served=entry.population_served)
                for entry in self.areas
            ],
            nearby_destination_ids=list(self.nearby_destination_ids),
        )


class RoutePointModel(CamelModel):
    lat: float
    lng: float
    stop_id: Optional[int] = None


class RouteModel(CamelModel):
    id: int
    name: str
    stop_ids: List[int] = Field(default_factory=list)
    points: List[RoutePointModel] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, route: Route) -> "RouteModel":
        return cls(
            id=route.id,
            name=route.name,
            stop_ids=route.stop_ids,
            points=[
                RoutePointModel(lat=point.latitude, lng=point.longitude, stop_id=point.stop_id)
                for point in route.points
            ],
        )

    def to_domain(self) -> Route:
        # stopIds is re-derived from the points, the stored copy is ignored.
        return Route(
            id=self.id,
            name=self.name,
            points=[RoutePoint(point.lat, point.lng, point.stop_id) for point in self.points],
        )


class AreaModel(CamelModel):
    id: str
    name: Optional[str] = None
    area_m2: float = Field(default=0.0, alias="areaM2")
    population: int = 0
    high_percentage_of_elderly: bool = False
    serving_lines: List[str] = Field(default_factory=list)
    population_density: float = 0.0
    public_transport_usage_percent: float = 5.0
    destination_ids: List[int] = Field(default_factory=list)
    latlngs: List[List[LatLngModel]] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, area: Area) -> "AreaModel":
        return cls(
            id=area.id,
            name=area.name,
            area_m2=area.area_m2,
            population=area.population,
            high_percentage_of_elderly=area.high_percentage_of_elderly,
            serving_lines=list(area.serving_lines),
            population_density=area.population_density,
            public_transport_usage_percent=area.public_transport_usage_percent,
            destination_ids=list(area.destination_ids),
            latlngs=[[LatLngModel(lat=lat, lng=lng) for lat, lng in area.ring]],
        )

    def to_domain(self) -> Area:
        ring = [(point.lat, point.lng) for point in self.latlngs[0]] if self.latlngs else []
        return Area(
            id=self.id,
            ring=ring,
            name=self.name,
            area_m2=self.area_m2,
            population=self.population,
            high_percentage_of_elderly=self.high_percentage_of_elderly,
            serving_lines=list(self.serving_lines),
            population_density=self.population_density,
            public_transport_usage_percent=self.public_transport_usage_percent,
            destination_ids=list(self.destination_ids),
        )


class DestinationModel(CamelModel):
    id: int
    name: str
    lat: float
    lng: float
    recommended_low_floor: bool = False

    @classmethod
    def from_domain(cls, destination: Destination) -> "DestinationModel":
        return cls(
            id=destination.id,
            name=destination.name,
            lat=destination.latitude,
            lng=destination.longitude,
            recommended_low_floor=destination.recommended_low_floor,
        )

    def to_domain(self) -> Destination:
        return Destination(
            id=self.id,
            name=self.name,
            latitude=self.lat,
            longitude=self.lng,
            recommended_low_floor=self.recommended_low_floor,
        )


class NetworkSnapshot(CamelModel):
    stops: List[StopModel] = Field(default_factory=list)
    routes: List[RouteModel] = Field(default_factory=list)
    areas: List[AreaModel] = Field(default_factory=list)
    destinations: List[DestinationModel] = Field(default_factory=list)
