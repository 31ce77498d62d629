"""Request/response models for map editor events and attribute edits."""

from __future__ import annotations

from typing import Any, List, Literal, Optional, Sequence

from pydantic import BaseModel, Field, field_validator

from .network import NetworkSnapshot

EntityKind = Literal["stop", "route", "area", "destination"]


def _validate_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if len(value) < 3:
        raise ValueError("name must contain at least 3 characters")
    return value


class GeometryCreated(BaseModel):
    kind: EntityKind
    coordinates: Sequence[tuple[float, float]] = Field(..., min_length=1, description="(lat, lng) vertices.")
    name: Optional[str] = None


class GeometryEdited(BaseModel):
    kind: Literal["route", "area"]
    entity_id: int | str
    coordinates: Sequence[tuple[float, float]] = Field(..., min_length=2)


class GeometryRemoved(BaseModel):
    kind: EntityKind
    entity_id: int | str


class MarkerDragged(BaseModel):
    kind: Literal["stop", "destination"]
    entity_id: int
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class EditorResponse(BaseModel):
    kind: EntityKind
    entity_id: int | str
    network: NetworkSnapshot
    overlays: dict[str, Any]


class StopUpdate(BaseModel):
    name: Optional[str] = None
    has_shelter: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        return _validate_name(value)


class RouteUpdate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _validate_name(value)


class AreaUpdate(BaseModel):
    name: Optional[str] = None
    population: Optional[int] = Field(default=None, ge=0, le=10000)
    high_percentage_of_elderly: Optional[bool] = None
    public_transport_usage_percent: Optional[float] = Field(default=None, ge=0, le=100)
    serving_lines: Optional[List[str]] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        return _validate_name(value)


class DestinationUpdate(BaseModel):
    name: Optional[str] = None
    recommended_low_floor: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        return _validate_name(value)


class StopProgressModel(BaseModel):
    stop_id: int
    name: str
    sequence: int
    distance_from_start_m: float
    distance_text: str
    travel_time_min: float
    travel_time_text: str
    average_speed_kmh: Optional[float]


class RouteSummaryModel(BaseModel):
    route_id: int
    name: str
    length_m: float
    length_text: str
    stops: List[StopProgressModel]


class StopCoverageModel(BaseModel):
    stop_id: int
    coverage: float
    population_served: int


class AreaCoverageModel(BaseModel):
    area_id: str
    area_m2: float
    population: int
    population_density: float
    aggregate_coverage: float
    stops: List[StopCoverageModel]
    destination_ids: List[int]


class DestinationServiceModel(BaseModel):
    destination_id: int
    stop_ids: List[int]
    line_ids: List[int]
    area_ids: List[str]
