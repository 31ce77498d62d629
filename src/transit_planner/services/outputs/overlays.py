"""Style and label payload sent back to the map editor."""

from __future__ import annotations

from typing import Any, Dict, List

from ..coverage import aggregate_area_coverage, catchment_disc, coverage_union
from ..geospatial import geometry_rings
from ..network.graph import NetworkGraph
from ..snapping import stop_icon_state
from ...models.domain import Area

ROUTE_COLORS = [
    "#1565C0",
    "#FFC107",
    "#4CAF50",
    "#FF9800",
    "#9C27B0",
    "#F44336",
    "#00BCD4",
    "#CDDC39",
    "#795548",
    "#607D8B",
]


def generate_route_color(index: int) -> str:
    """Distinct colour for the n-th line on the map."""
    return ROUTE_COLORS[index % len(ROUTE_COLORS)]


def area_label(area: Area, coverage_percent: float) -> str:
    title = area.name or f"Area {area.id}"
    return (
        f"{title}\n"
        f"Surface: {area.area_m2:.2f} m²\n"
        f"Surface: {area.area_m2 / 1_000_000:.6f} km²\n"
        f"Coverage: {coverage_percent:.2f}%"
    )


def route_overlays(graph: NetworkGraph) -> List[Dict[str, Any]]:
    overlays = []
    for index, route in enumerate(graph.routes.values()):
        overlays.append(
            {
                "route_id": route.id,
                "name": route.name,
                "color_index": index,
                "color": generate_route_color(index),
                "coordinates": [list(coordinate) for coordinate in route.coordinates],
                "stop_ids": route.stop_ids,
            }
        )
    return overlays


def stop_overlays(graph: NetworkGraph) -> List[Dict[str, Any]]:
    routes = graph.route_list()
    overlays = []
    for stop in graph.stops.values():
        overlays.append(
            {
                "stop_id": stop.id,
                "name": stop.name,
                "position": list(stop.position),
                "icon_state": stop_icon_state(stop, routes),
                "catchment": [[list(point) for point in ring] for ring in geometry_rings(catchment_disc(stop))],
            }
        )
    return overlays


def area_overlays(graph: NetworkGraph) -> List[Dict[str, Any]]:
    stops = graph.stop_list()
    overlays = []
    for area in graph.areas.values():
        coverage = aggregate_area_coverage(area, stops)
        overlays.append(
            {
                "area_id": area.id,
                "name": area.name,
                "coverage_percent": round(coverage, 2),
                "coverage_text": f"{coverage:.2f}%",
                "label": area_label(area, coverage),
                "coordinates": [list(point) for point in area.ring],
            }
        )
    return overlays


def build_map_overlays(graph: NetworkGraph) -> Dict[str, Any]:
    union = coverage_union(graph.stop_list())
    return {
        "routes": route_overlays(graph),
        "stops": stop_overlays(graph),
        "areas": area_overlays(graph),
        "coverage_union": [[list(point) for point in ring] for ring in geometry_rings(union)],
    }
