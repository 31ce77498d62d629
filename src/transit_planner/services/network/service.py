"""High-level orchestration of editor events over the persisted network."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Sequence

from ...models.domain import Area, Destination, LatLng, Route, Stop
from ...persistence.filesystem import FileStorage
from ...schemas.editor import (
    AreaCoverageModel,
    AreaUpdate,
    DestinationServiceModel,
    DestinationUpdate,
    RouteSummaryModel,
    StopCoverageModel,
    StopProgressModel,
    StopUpdate,
)
from ...schemas.network import NetworkSnapshot
from ..coverage import aggregate_area_coverage
from ..export.geojson import export_network_to_geojson, save_geojson
from ..outputs.overlays import build_map_overlays
from ..relationships import lines_serving_destination, stops_serving_destination
from ..scheduling.service import ScheduleService
from ..scheduling.travel import format_distance, format_duration, summarize_route
from .graph import NetworkGraph
from .snapshot import graph_from_snapshot, graph_to_snapshot


def _entity_key(kind: str, entity_id: int | str) -> int | str:
    if kind == "area":
        return str(entity_id)
    try:
        return int(entity_id)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid {kind} id '{entity_id}'.") from exc


class NetworkService:
    """Owns the network graph, persists it after each mutation and answers the editor."""

    def __init__(self, storage: FileStorage | None = None) -> None:
        self.storage = storage or FileStorage()
        self.graph: NetworkGraph = graph_from_snapshot(self.storage.load_network_snapshot())
        self.schedules = ScheduleService(self.graph, self.storage)

    # ---- snapshot ------------------------------------------------------

    def snapshot(self) -> NetworkSnapshot:
        return graph_to_snapshot(self.graph)

    def persist(self) -> None:
        self.storage.save_network_snapshot(self.snapshot())

    def replace(self, snapshot: NetworkSnapshot) -> NetworkSnapshot:
        """Swap in a new network; schedules of lines missing from it are deleted."""

        graph = graph_from_snapshot(snapshot)
        graph.inherit_ids(self.graph)
        self.graph = graph
        self.schedules.network = graph
        for route_id in self.storage.schedule_route_ids():
            if route_id not in graph.routes:
                self.schedules.discard(route_id)
                logging.info(f"Dropped schedule of line {route_id}, absent from the new network")
        self.persist()
        return self.snapshot()

    def clear(self) -> None:
        self.graph.clear()
        self.storage.clear()
        logging.info("Cleared the network and every line schedule")

    def overlays(self) -> dict[str, Any]:
        return build_map_overlays(self.graph)

    def export_geojson(self, output_path: Optional[Path] = None) -> dict[str, Any]:
        data = export_network_to_geojson(self.graph)
        if output_path is not None:
            save_geojson(data, output_path)
        return data

    # ---- editor events -------------------------------------------------

    def on_geometry_created(
        self,
        kind: str,
        coordinates: Sequence[LatLng],
        *,
        name: Optional[str] = None,
    ) -> Stop | Route | Area | Destination:
        match kind:
            case "stop":
                lat, lng = coordinates[0]
                entity = self.graph.add_stop(lat, lng, name=name)
            case "destination":
                lat, lng = coordinates[0]
                entity = self.graph.add_destination(lat, lng, name=name)
            case "route":
                entity = self.graph.add_route(coordinates, name=name)
            case "area":
                entity = self.graph.add_area(coordinates, name=name)
            case _:
                raise ValueError(f"Unknown geometry kind '{kind}'.")
        self.persist()
        logging.info(f"Created {kind} {entity.id}")
        return entity

    def on_geometry_edited(self, kind: str, entity_id: int | str, coordinates: Sequence[LatLng]) -> Route | Area:
        key = _entity_key(kind, entity_id)
        match kind:
            case "route":
                entity = self.graph.edit_route(key, coordinates)
            case "area":
                entity = self.graph.edit_area(key, coordinates)
            case _:
                raise ValueError(f"Geometry of a {kind} cannot be reshaped.")
        self.persist()
        return entity

    def on_geometry_removed(self, kind: str, entity_id: int | str) -> Stop | Route | Area | Destination:
        key = _entity_key(kind, entity_id)
        match kind:
            case "stop":
                entity = self.graph.remove_stop(key)
            case "route":
                entity = self.graph.remove_route(key)
                self.schedules.discard(key)
            case "area":
                entity = self.graph.remove_area(key)
            case "destination":
                entity = self.graph.remove_destination(key)
            case _:
                raise ValueError(f"Unknown geometry kind '{kind}'.")
        self.persist()
        return entity

    def on_marker_dragged(self, kind: str, entity_id: int, latitude: float, longitude: float) -> Stop | Destination:
        match kind:
            case "stop":
                entity = self.graph.move_stop(entity_id, latitude, longitude)
            case "destination":
                entity = self.graph.move_destination(entity_id, latitude, longitude)
            case _:
                raise ValueError(f"A {kind} cannot be dragged.")
        self.persist()
        return entity

    # ---- attribute edits -----------------------------------------------

    def update_stop(self, stop_id: int, payload: StopUpdate) -> Stop:
        stop = self.graph.update_stop(stop_id, name=payload.name, has_shelter=payload.has_shelter)
        self.persist()
        return stop

    def rename_route(self, route_id: int, name: str) -> Route:
        route = self.graph.rename_route(route_id, name)
        self.persist()
        return route

    def update_area(self, area_id: str, payload: AreaUpdate) -> Area:
        area = self.graph.update_area(area_id, **payload.model_dump(exclude_none=True))
        self.persist()
        return area

    def update_destination(self, destination_id: int, payload: DestinationUpdate) -> Destination:
        destination = self.graph.update_destination(
            destination_id,
            name=payload.name,
            recommended_low_floor=payload.recommended_low_floor,
        )
        self.persist()
        return destination

    # ---- read models ---------------------------------------------------

    def route_summary(self, route_id: int) -> RouteSummaryModel:
        summary = summarize_route(self.graph.get_route(route_id), self.graph.stop_list())
        return RouteSummaryModel(
            route_id=summary.route_id,
            name=summary.name,
            length_m=summary.length_m,
            length_text=format_distance(summary.length_m),
            stops=[
                StopProgressModel(
                    stop_id=item.stop_id,
                    name=item.name,
                    sequence=item.sequence,
                    distance_from_start_m=item.distance_from_start_m,
                    distance_text=format_distance(item.distance_from_start_m),
                    travel_time_min=item.travel_time_min,
                    travel_time_text=format_duration(item.travel_time_min),
                    average_speed_kmh=item.average_speed_kmh,
                )
                for item in summary.stops
            ],
        )

    def area_coverage(self, area_id: str) -> AreaCoverageModel:
        area = self.graph.get_area(area_id)
        stops = self.graph.stop_list()
        served = []
        for stop in stops:
            for entry in stop.areas:
                if entry.area_id == area_id:
                    served.append(
                        StopCoverageModel(
                            stop_id=stop.id,
                            coverage=entry.coverage,
                            population_served=entry.population_served,
                        )
                    )
        return AreaCoverageModel(
            area_id=area.id,
            area_m2=area.area_m2,
            population=area.population,
            population_density=area.population_density,
            aggregate_coverage=round(aggregate_area_coverage(area, stops), 2),
            stops=served,
            destination_ids=list(area.destination_ids),
        )

    def destination_service(self, destination_id: int) -> DestinationServiceModel:
        self.graph.get_destination(destination_id)
        stops = self.graph.stop_list()
        return DestinationServiceModel(
            destination_id=destination_id,
            stop_ids=[stop.id for stop in stops_serving_destination(destination_id, stops)],
            line_ids=[line for line in lines_serving_destination(destination_id, stops) if line in self.graph.routes],
            area_ids=[area.id for area in self.graph.areas.values() if destination_id in area.destination_ids],
        )
