"""Serialise a line schedule into time/stop chart series."""

from __future__ import annotations

from typing import Sequence

from ...config import settings
from ...models.domain import Stop, VehicleSchedule
from ...schemas.schedule import ChartPoint, ChartSeries, ScheduleChart
from ..scheduling.timetable import time_to_minutes


def vehicle_color(index: int) -> str:
    # Golden angle hue steps.
    hue = (index * 137.5) % 360
    return f"hsl({hue:g}, 70%, 50%)"


def schedule_to_chart(schedule: VehicleSchedule, stops: Sequence[Stop]) -> ScheduleChart:
    """One series per vehicle: x is minutes since the first departure, y the stop position."""

    names = {stop.id: stop.name for stop in stops}
    first_vehicle = schedule.vehicles[0] if schedule.vehicles else None
    first_trip = first_vehicle.trips[0] if first_vehicle and first_vehicle.trips else None
    stop_ids = [entry.stop_id for entry in first_trip.times] if first_trip else []
    origin = time_to_minutes(settings.first_departure)

    series = []
    for index, vehicle in enumerate(schedule.vehicles):
        points = []
        for trip in vehicle.trips:
            for entry in trip.times:
                if entry.stop_id not in stop_ids:
                    continue
                points.append(ChartPoint(x=time_to_minutes(entry.time) - origin, y=stop_ids.index(entry.stop_id)))
        series.append(ChartSeries(label=vehicle.name, color=vehicle_color(index), points=points))

    return ScheduleChart(
        line_id=schedule.route_id,
        stop_ids=stop_ids,
        stop_names=[names.get(stop_id, f"Stop {stop_id}") for stop_id in stop_ids],
        origin=settings.first_departure,
        series=series,
    )
