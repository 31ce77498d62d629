"""GeoJSON export of the network for external GIS tools."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from shapely.geometry import LineString, Point, mapping

from ..geospatial import close_ring, to_polygon
from ..network.graph import NetworkGraph
from ..outputs.overlays import generate_route_color


def polygon_to_wkt(coordinates: List[List[float]]) -> str:
    """Convert polygon coordinates to WKT format.

    Args:
        coordinates: List of [lat, lon] pairs

    Returns:
        WKT POLYGON string (in lon lat order as per WKT spec)
    """
    if not coordinates or len(coordinates) < 3:
        raise ValueError("Polygon must have at least 3 coordinates")

    ring = close_ring([tuple(point) for point in coordinates])
    coord_pairs = [f"{lon} {lat}" for lat, lon in ring]
    return f"POLYGON(({','.join(coord_pairs)}))"


def export_network_to_geojson(graph: NetworkGraph) -> Dict[str, Any]:
    """Convert the network into a GeoJSON FeatureCollection.

    Args:
        graph: Network to export

    Returns:
        FeatureCollection with stop points, line strings and area polygons
    """
    features: List[Dict[str, Any]] = []

    for stop in graph.stops.values():
        features.append(
            {
                "type": "Feature",
                "geometry": mapping(Point(stop.longitude, stop.latitude)),
                "properties": {
                    "kind": "stop",
                    "id": stop.id,
                    "name": stop.name,
                    "hasShelter": stop.has_shelter,
                    "busLines": stop.bus_lines,
                },
            }
        )

    for index, route in enumerate(graph.routes.values()):
        if len(route.points) < 2:
            continue
        features.append(
            {
                "type": "Feature",
                "geometry": mapping(LineString([(lng, lat) for lat, lng in route.coordinates])),
                "properties": {
                    "kind": "route",
                    "id": route.id,
                    "name": route.name,
                    "stopIds": route.stop_ids,
                    "color": generate_route_color(index),
                },
            }
        )

    for area in graph.areas.values():
        features.append(
            {
                "type": "Feature",
                "geometry": mapping(to_polygon(area.ring)),
                "properties": {
                    "kind": "area",
                    "id": area.id,
                    "name": area.name,
                    "areaM2": area.area_m2,
                    "population": area.population,
                    "wkt": polygon_to_wkt([list(point) for point in area.ring]),
                },
            }
        )

    for destination in graph.destinations.values():
        features.append(
            {
                "type": "Feature",
                "geometry": mapping(Point(destination.longitude, destination.latitude)),
                "properties": {"kind": "destination", "id": destination.id, "name": destination.name},
            }
        )

    return {"type": "FeatureCollection", "features": features}


def save_geojson(data: Dict[str, Any], output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as handle:
        json.dump(data, handle, ensure_ascii=False, indent=2)
