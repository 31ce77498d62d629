"""Pydantic models for persisted line schedules and schedule edits."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from ..models.domain import StopTime, TripSchedule, Vehicle, VehicleSchedule
from .base import CamelModel


class StopTimeModel(CamelModel):
    stop_id: int
    time: str


class TripModel(CamelModel):
    direction: str
    times: List[StopTimeModel] = Field(default_factory=list)
    break_end_time: str


class VehicleModel(CamelModel):
    id: str
    name: str
    trips: List[TripModel] = Field(default_factory=list)


class ScheduleSnapshot(CamelModel):
    line_id: int
    vehicles: List[VehicleModel] = Field(default_factory=list)
    edited: bool = False

    @classmethod
    def from_domain(cls, schedule: VehicleSchedule) -> "ScheduleSnapshot":
        return cls(
            line_id=schedule.route_id,
            edited=schedule.edited,
            vehicles=[
                VehicleModel(
                    id=vehicle.id,
                    name=vehicle.name,
                    trips=[
                        TripModel(
                            direction=trip.direction,
                            times=[StopTimeModel(stop_id=entry.stop_id, time=entry.time) for entry in trip.times],
                            break_end_time=trip.break_end_time,
                        )
                        for trip in vehicle.trips
                    ],
                )
                for vehicle in schedule.vehicles
            ],
        )

    def to_domain(self) -> VehicleSchedule:
        return VehicleSchedule(
            route_id=self.line_id,
            edited=self.edited,
            vehicles=[
                Vehicle(
                    id=vehicle.id,
                    name=vehicle.name,
                    trips=[
                        TripSchedule(
                            direction=trip.direction,
                            times=[StopTime(stop_id=entry.stop_id, time=entry.time) for entry in trip.times],
                            break_end_time=trip.break_end_time,
                        )
                        for trip in vehicle.trips
                    ],
                )
                for vehicle in self.vehicles
            ],
        )


class AddVehicleRequest(BaseModel):
    start_stop_id: int = Field(..., description="Stop the vehicle departs from at the first departure.")


class AddTripRequest(BaseModel):
    start_time: str = Field(..., pattern=r"^\d{1,2}:\d{2}$", description="Departure of the new cycle (HH:MM).")


class ChartPoint(BaseModel):
    x: float
    y: int


class ChartSeries(BaseModel):
    label: str
    color: str
    points: List[ChartPoint]


class ScheduleChart(BaseModel):
    line_id: int
    stop_ids: List[int]
    stop_names: List[str]
    origin: str
    series: List[ChartSeries]
