"""In-memory network graph and its mutation cascades.

Every mutation finishes by recomputing the derived data it affects (stop
membership, coverage entries, destination relations), so the graph is always
consistent between two calls.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ...config import settings
from ...models.domain import Area, Destination, LatLng, Route, Stop
from ..coverage import compute_area_metrics, update_all_stop_area_info, update_stop_area_info
from ..relationships import update_all_destination_relationships
from ..snapping import move_stop_vertices, rebuild_membership, resnap_all_routes, snap_route


class EntityNotFoundError(LookupError):
    def __init__(self, kind: str, entity_id: object) -> None:
        super().__init__(f"{kind.capitalize()} '{entity_id}' not found.")
        self.kind = kind
        self.entity_id = entity_id


class IdCounter:
    """Monotonic id source; ids freed by deletions are never reused."""

    def __init__(self, start: int = 0) -> None:
        self.value = start

    def next(self) -> int:
        self.value += 1
        return self.value

    def observe(self, value: int) -> None:
        self.value = max(self.value, value)


def area_id_number(area_id: str) -> Optional[int]:
    suffix = area_id.rsplit("_", 1)[-1]
    return int(suffix) if suffix.isdigit() else None


class NetworkGraph:
    def __init__(self) -> None:
        self.stops: dict[int, Stop] = {}
        self.routes: dict[int, Route] = {}
        self.areas: dict[str, Area] = {}
        self.destinations: dict[int, Destination] = {}
        self.stop_ids = IdCounter()
        self.route_ids = IdCounter()
        self.area_ids = IdCounter()
        self.destination_ids = IdCounter()

    # ---- lookups -------------------------------------------------------

    def stop_list(self) -> list[Stop]:
        return list(self.stops.values())

    def route_list(self) -> list[Route]:
        return list(self.routes.values())

    def area_list(self) -> list[Area]:
        return list(self.areas.values())

    def destination_list(self) -> list[Destination]:
        return list(self.destinations.values())

    def get_stop(self, stop_id: int) -> Stop:
        stop = self.stops.get(stop_id)
        if stop is None:
            raise EntityNotFoundError("stop", stop_id)
        return stop

    def get_route(self, route_id: int) -> Route:
        route = self.routes.get(route_id)
        if route is None:
            raise EntityNotFoundError("route", route_id)
        return route

    def get_area(self, area_id: str) -> Area:
        area = self.areas.get(area_id)
        if area is None:
            raise EntityNotFoundError("area", area_id)
        return area

    def get_destination(self, destination_id: int) -> Destination:
        destination = self.destinations.get(destination_id)
        if destination is None:
            raise EntityNotFoundError("destination", destination_id)
        return destination

    # ---- derived data --------------------------------------------------

    def update_destination_relationships(self) -> None:
        update_all_destination_relationships(self.stop_list(), self.area_list(), self.destination_list())

    def recompute_all(self) -> None:
        """Rebuild every derived field from the primary data (used after loading)."""

        rebuild_membership(self.route_list(), self.stop_list())
        for area in self.areas.values():
            compute_area_metrics(area)
        update_all_stop_area_info(self.stop_list(), self.area_list())
        self.update_destination_relationships()

    def observe_ids(self) -> None:
        for stop_id in self.stops:
            self.stop_ids.observe(stop_id)
        for route_id in self.routes:
            self.route_ids.observe(route_id)
        for destination_id in self.destinations:
            self.destination_ids.observe(destination_id)
        for area_id in self.areas:
            number = area_id_number(area_id)
            if number is not None:
                self.area_ids.observe(number)

    def inherit_ids(self, other: NetworkGraph) -> None:
        """Continue numbering after another graph's counters."""
        self.stop_ids.observe(other.stop_ids.value)
        self.route_ids.observe(other.route_ids.value)
        self.area_ids.observe(other.area_ids.value)
        self.destination_ids.observe(other.destination_ids.value)

    def clear(self) -> None:
        self.stops.clear()
        self.routes.clear()
        self.areas.clear()
        self.destinations.clear()

    # ---- stops ---------------------------------------------------------

    def add_stop(self, latitude: float, longitude: float, *, name: str | None = None, has_shelter: bool = False) -> Stop:
        stop_id = self.stop_ids.next()
        stop = Stop(
            id=stop_id,
            name=name or f"Stop {stop_id}",
            latitude=latitude,
            longitude=longitude,
            has_shelter=has_shelter,
        )
        self.stops[stop_id] = stop
        update_stop_area_info(stop, self.area_list())
        self.update_destination_relationships()
        return stop

    def move_stop(self, stop_id: int, latitude: float, longitude: float) -> Stop:
        stop = self.get_stop(stop_id)
        stop.latitude = latitude
        stop.longitude = longitude
        routes = self.route_list()
        move_stop_vertices(routes, stop)
        resnap_all_routes(routes, self.stop_list())
        update_stop_area_info(stop, self.area_list())
        self.update_destination_relationships()
        return stop

    def update_stop(self, stop_id: int, *, name: str | None = None, has_shelter: bool | None = None) -> Stop:
        stop = self.get_stop(stop_id)
        if name is not None:
            stop.name = name
        if has_shelter is not None:
            stop.has_shelter = has_shelter
        return stop

    def remove_stop(self, stop_id: int) -> Stop:
        stop = self.get_stop(stop_id)
        for route in self.routes.values():
            for point in route.points:
                if point.stop_id == stop_id:
                    point.stop_id = None
        del self.stops[stop_id]
        self.update_destination_relationships()
        logging.info(f"Removed stop {stop_id}")
        return stop

    # ---- routes --------------------------------------------------------

    def add_route(self, coordinates: Sequence[LatLng], *, name: str | None = None) -> Route:
        if len(coordinates) < 2:
            raise ValueError("A line needs at least two points.")
        route_id = self.route_ids.next()
        route = Route(id=route_id, name=name or f"Line {route_id}")
        route.points = snap_route(coordinates, route_id, self.stop_list())
        self.routes[route_id] = route
        return route

    def edit_route(self, route_id: int, coordinates: Sequence[LatLng]) -> Route:
        if len(coordinates) < 2:
            raise ValueError("A line needs at least two points.")
        route = self.get_route(route_id)
        route.points = snap_route(coordinates, route_id, self.stop_list())
        return route

    def rename_route(self, route_id: int, name: str) -> Route:
        route = self.get_route(route_id)
        route.name = name
        return route

    def remove_route(self, route_id: int) -> Route:
        route = self.get_route(route_id)
        for stop in self.stops.values():
            stop.connected_route_ids.discard(route_id)
        line_key = str(route_id)
        for area in self.areas.values():
            area.serving_lines = [line for line in area.serving_lines if line != line_key]
        del self.routes[route_id]
        logging.info(f"Removed line {route_id}")
        return route

    # ---- areas ---------------------------------------------------------

    def _refresh_area(self, area: Area) -> None:
        compute_area_metrics(area)
        update_all_stop_area_info(self.stop_list(), self.area_list())
        self.update_destination_relationships()

    def add_area(self, ring: Sequence[LatLng], *, name: str | None = None, population: int = 0,
                 public_transport_usage_percent: float | None = None) -> Area:
        if len(ring) < 3:
            raise ValueError("An area needs at least three points.")
        area = Area(
            id=f"area_{self.area_ids.next()}",
            ring=[tuple(point) for point in ring],
            name=name,
            population=population,
            public_transport_usage_percent=(
                settings.default_usage_percent
                if public_transport_usage_percent is None
                else public_transport_usage_percent
            ),
        )
        self.areas[area.id] = area
        self._refresh_area(area)
        if area.area_m2 == 0:
            logging.warning(f"Area {area.id} has no surface; its coverage will be reported as 0")
        return area

    def edit_area(self, area_id: str, ring: Sequence[LatLng]) -> Area:
        if len(ring) < 3:
            raise ValueError("An area needs at least three points.")
        area = self.get_area(area_id)
        area.ring = [tuple(point) for point in ring]
        self._refresh_area(area)
        return area

    def update_area(
        self,
        area_id: str,
        *,
        name: str | None = None,
        population: int | None = None,
        high_percentage_of_elderly: bool | None = None,
        public_transport_usage_percent: float | None = None,
        serving_lines: Iterable[str] | None = None,
    ) -> Area:
        area = self.get_area(area_id)
        if name is not None:
            area.name = name
        if high_percentage_of_elderly is not None:
            area.high_percentage_of_elderly = high_percentage_of_elderly
        if public_transport_usage_percent is not None:
            area.public_transport_usage_percent = public_transport_usage_percent
        if serving_lines is not None:
            area.serving_lines = list(serving_lines)
        if population is not None:
            area.population = population
            compute_area_metrics(area)
            update_all_stop_area_info(self.stop_list(), self.area_list())
        return area

    def remove_area(self, area_id: str) -> Area:
        area = self.get_area(area_id)
        del self.areas[area_id]
        update_all_stop_area_info(self.stop_list(), self.area_list())
        self.update_destination_relationships()
        return area

    # ---- destinations --------------------------------------------------

    def add_destination(self, latitude: float, longitude: float, *, name: str | None = None) -> Destination:
        destination_id = self.destination_ids.next()
        destination = Destination(
            id=destination_id,
            name=name or f"Destination {destination_id}",
            latitude=latitude,
            longitude=longitude,
        )
        self.destinations[destination_id] = destination
        self.update_destination_relationships()
        return destination

    def move_destination(self, destination_id: int, latitude: float, longitude: float) -> Destination:
        destination = self.get_destination(destination_id)
        destination.latitude = latitude
        destination.longitude = longitude
        self.update_destination_relationships()
        return destination

    def update_destination(
        self,
        destination_id: int,
        *,
        name: str | None = None,
        recommended_low_floor: bool | None = None,
    ) -> Destination:
        destination = self.get_destination(destination_id)
        if name is not None:
            destination.name = name
        if recommended_low_floor is not None:
            destination.recommended_low_floor = recommended_low_floor
        return destination

    def remove_destination(self, destination_id: int) -> Destination:
        destination = self.get_destination(destination_id)
        del self.destinations[destination_id]
        self.update_destination_relationships()
        return destination
