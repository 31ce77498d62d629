"""Geospatial helper functions.

Distances use the Haversine formula on a sphere of radius 6,371 km. Surfaces
are measured on the same sphere, so a catchment disc built here and the area
polygon it is compared with share one model of the earth. Shapely geometries
are always built in (lng, lat) order.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Optional, Sequence

import numpy as np
from shapely.errors import GEOSException
from shapely.geometry import LineString, Point, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union

from ..models.domain import LatLng

EARTH_RADIUS_M = 6_371_000.0


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance in meters between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def distance_meters(p1: LatLng, p2: LatLng) -> float:
    return haversine_m(p1[0], p1[1], p2[0], p2[1])


def segment_lengths_m(coordinates: Sequence[LatLng]) -> np.ndarray:
    """Haversine length of every consecutive pair of a path, vectorised."""

    if len(coordinates) < 2:
        return np.zeros(0)
    coords = np.radians(np.asarray(coordinates, dtype=float))
    phi1, phi2 = coords[:-1, 0], coords[1:, 0]
    d_phi = phi2 - phi1
    d_lambda = coords[1:, 1] - coords[:-1, 1]
    a = np.sin(d_phi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(d_lambda / 2) ** 2
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def path_length_m(coordinates: Sequence[LatLng]) -> float:
    return float(segment_lengths_m(coordinates).sum())


def destination_point(lat: float, lon: float, distance_m: float, bearing_deg: float) -> LatLng:
    """Point reached by travelling ``distance_m`` from (lat, lon) along an initial bearing."""

    phi1 = math.radians(lat)
    lambda1 = math.radians(lon)
    theta = math.radians(bearing_deg)
    delta = distance_m / EARTH_RADIUS_M

    phi2 = math.asin(math.sin(phi1) * math.cos(delta) + math.cos(phi1) * math.sin(delta) * math.cos(theta))
    lambda2 = lambda1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(phi1),
        math.cos(delta) - math.sin(phi1) * math.sin(phi2),
    )
    return (math.degrees(phi2), math.degrees(lambda2))


def open_ring(ring: Sequence[LatLng]) -> list[LatLng]:
    points = [tuple(point) for point in ring]
    if len(points) > 1 and points[0] == points[-1]:
        points = points[:-1]
    return points


def close_ring(ring: Sequence[LatLng]) -> list[LatLng]:
    points = open_ring(ring)
    if points:
        points.append(points[0])
    return points


def _ring_area_lnglat(coords: Sequence[tuple[float, float]]) -> float:
    # Spherical excess approximation (Chamberlain & Duquette) over an open ring.
    count = len(coords)
    if count < 3:
        return 0.0
    total = 0.0
    for i in range(count):
        lower = coords[i]
        middle = coords[(i + 1) % count]
        upper = coords[(i + 2) % count]
        total += (math.radians(upper[0]) - math.radians(lower[0])) * math.sin(math.radians(middle[1]))
    return abs(total * EARTH_RADIUS_M * EARTH_RADIUS_M / 2)


def polygon_area_m2(ring: Sequence[LatLng]) -> float:
    """Surface of a (lat, lng) ring in square meters; the ring is closed if needed."""

    points = open_ring(ring)
    return _ring_area_lnglat([(lng, lat) for lat, lng in points])


def geometry_area_m2(geometry: Optional[BaseGeometry]) -> float:
    """Surface of any shapely (lng, lat) geometry in square meters."""

    if geometry is None or geometry.is_empty:
        return 0.0
    parts = getattr(geometry, "geoms", None)
    if parts is not None:
        return sum(geometry_area_m2(part) for part in parts)
    if not isinstance(geometry, Polygon):
        return 0.0
    area = _ring_area_lnglat(list(geometry.exterior.coords)[:-1])
    for interior in geometry.interiors:
        area -= _ring_area_lnglat(list(interior.coords)[:-1])
    return max(area, 0.0)


def to_polygon(ring: Sequence[LatLng]) -> Polygon:
    return Polygon([(lng, lat) for lat, lng in open_ring(ring)])


def point_in_polygon(lat: float, lon: float, polygon_coords: Sequence[LatLng]) -> bool:
    """Return True if the point lies strictly inside the polygon of (lat, lon) pairs.

    Points on the boundary are reported as outside.
    """

    if len(open_ring(polygon_coords)) < 3:
        return False
    polygon = to_polygon(polygon_coords)
    return polygon.contains(Point(lon, lat))


def buffer_circle(center: LatLng, radius_m: float, steps: int = 64) -> Optional[Polygon]:
    """Approximate a disc on the sphere with a ``steps``-sided polygon."""

    if radius_m <= 0 or steps < 3:
        return None
    lat, lon = center
    vertices = []
    for step in range(steps):
        bearing = step * 360.0 / steps
        v_lat, v_lon = destination_point(lat, lon, radius_m, bearing)
        vertices.append((v_lon, v_lat))
    return Polygon(vertices)


def union_polygons(polygons: Iterable[Optional[BaseGeometry]]) -> BaseGeometry:
    """Union of the given polygons; an empty geometry when nothing is given."""

    valid = [polygon for polygon in polygons if polygon is not None and not polygon.is_empty]
    if not valid:
        return Polygon()
    try:
        return unary_union(valid)
    except (GEOSException, ValueError) as exc:
        logging.warning(f"Union of {len(valid)} polygons failed: {exc}")
        return Polygon()


def intersect_polygons(first: Optional[BaseGeometry], second: Optional[BaseGeometry]) -> Optional[BaseGeometry]:
    """Intersection of two polygons, or None when they are disjoint or degenerate."""

    if first is None or second is None or first.is_empty or second.is_empty:
        return None
    if not first.is_valid or not second.is_valid:
        logging.warning("Skipping intersection with an invalid (self-intersecting or zero-area) polygon")
        return None
    try:
        result = first.intersection(second)
    except (GEOSException, ValueError) as exc:
        logging.warning(f"Polygon intersection failed: {exc}")
        return None
    if result.is_empty:
        return None
    return result


def point_to_path_distance_m(point: LatLng, path: Sequence[LatLng]) -> float:
    """Shortest distance from a point to a polyline, in meters.

    The path is projected onto a local equirectangular plane centred on the
    point, which is accurate for the few hundred meters this is used for.
    """

    if not path:
        return math.inf
    lat0, lon0 = point
    cos_lat = math.cos(math.radians(lat0))

    def project(coord: LatLng) -> tuple[float, float]:
        x = math.radians(coord[1] - lon0) * EARTH_RADIUS_M * cos_lat
        y = math.radians(coord[0] - lat0) * EARTH_RADIUS_M
        return (x, y)

    projected = [project(coord) for coord in path]
    if len(projected) == 1:
        return Point(projected[0]).distance(Point(0.0, 0.0))
    return LineString(projected).distance(Point(0.0, 0.0))


def geometry_rings(geometry: Optional[BaseGeometry]) -> list[list[LatLng]]:
    """Exterior rings of a polygonal geometry as closed lists of (lat, lng)."""

    if geometry is None or geometry.is_empty:
        return []
    parts = getattr(geometry, "geoms", None)
    if parts is not None:
        rings: list[list[LatLng]] = []
        for part in parts:
            rings.extend(geometry_rings(part))
        return rings
    if not isinstance(geometry, Polygon):
        return []
    return [[(lat, lng) for lng, lat in geometry.exterior.coords]]
