"""Catchment coverage of areas by stops."""

from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence

from shapely.geometry import Polygon
from shapely.geometry.base import BaseGeometry

from ..config import settings
from ..models.domain import Area, Stop, StopAreaService
from .geospatial import (
    buffer_circle,
    geometry_area_m2,
    intersect_polygons,
    polygon_area_m2,
    to_polygon,
    union_polygons,
)


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def compute_area_metrics(area: Area) -> None:
    """Refresh the surface and population density of an area."""

    area.area_m2 = polygon_area_m2(area.ring)
    area.population_density = round(area.population / area.area_m2, 6) if area.area_m2 > 0 else 0.0


def catchment_disc(
    stop: Stop,
    *,
    radius_m: float | None = None,
    steps: int | None = None,
) -> Optional[Polygon]:
    return buffer_circle(
        stop.position,
        settings.catchment_radius_m if radius_m is None else radius_m,
        settings.catchment_steps if steps is None else steps,
    )


def _coverage_percent(catchment: Optional[BaseGeometry], area: Area) -> float:
    if catchment is None or area.area_m2 <= 0:
        return 0.0
    overlap = intersect_polygons(catchment, to_polygon(area.ring))
    if overlap is None:
        return 0.0
    return min(geometry_area_m2(overlap) / area.area_m2 * 100, 100.0)


def stop_area_coverage(stop: Stop, area: Area, *, radius_m: float | None = None) -> float:
    """Percentage of ``area`` inside the stop's catchment disc, in [0, 100]."""

    return _coverage_percent(catchment_disc(stop, radius_m=radius_m), area)


def coverage_union(stops: Iterable[Stop], *, radius_m: float | None = None) -> BaseGeometry:
    return union_polygons(catchment_disc(stop, radius_m=radius_m) for stop in stops)


def aggregate_area_coverage(area: Area, stops: Sequence[Stop], *, radius_m: float | None = None) -> float:
    """Percentage of ``area`` inside the union of all catchments (overlaps counted once)."""

    union = coverage_union(stops, radius_m=radius_m)
    if union.is_empty:
        return 0.0
    return _coverage_percent(union, area)


def update_stop_area_info(
    stop: Stop,
    areas: Iterable[Area],
    *,
    radius_m: float | None = None,
    noise_floor_percent: float | None = None,
) -> list[StopAreaService]:
    """Replace ``stop.areas`` with every area the stop covers above the noise floor."""

    floor = settings.coverage_noise_floor_percent if noise_floor_percent is None else noise_floor_percent
    entries: list[StopAreaService] = []
    for area in areas:
        coverage = stop_area_coverage(stop, area, radius_m=radius_m)
        if coverage <= floor:
            continue
        rounded = round(coverage, 2)
        entries.append(
            StopAreaService(
                area_id=area.id,
                coverage=rounded,
                population_served=int(round_half_up(area.population * rounded / 100)),
            )
        )
    stop.areas = entries
    return entries


def update_all_stop_area_info(stops: Iterable[Stop], areas: Sequence[Area], **kwargs) -> None:
    for stop in stops:
        update_stop_area_info(stop, areas, **kwargs)
