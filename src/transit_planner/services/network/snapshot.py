"""Conversion between the network graph and its persisted snapshot."""

from __future__ import annotations

import logging

from ...schemas.network import AreaModel, DestinationModel, NetworkSnapshot, RouteModel, StopModel
from .graph import NetworkGraph


def graph_to_snapshot(graph: NetworkGraph) -> NetworkSnapshot:
    return NetworkSnapshot(
        stops=[StopModel.from_domain(stop) for stop in graph.stops.values()],
        routes=[RouteModel.from_domain(route) for route in graph.routes.values()],
        areas=[AreaModel.from_domain(area) for area in graph.areas.values()],
        destinations=[DestinationModel.from_domain(destination) for destination in graph.destinations.values()],
    )


def graph_from_snapshot(snapshot: NetworkSnapshot) -> NetworkGraph:
    """Build a graph from a snapshot and recompute every derived field.

    Route points referring to stops missing from the snapshot lose their tag.
    """

    graph = NetworkGraph()
    for stop_model in snapshot.stops:
        graph.stops[stop_model.id] = stop_model.to_domain()
    for route_model in snapshot.routes:
        graph.routes[route_model.id] = route_model.to_domain()
    for area_model in snapshot.areas:
        area = area_model.to_domain()
        if len(area.ring) < 3:
            logging.warning(f"Skipping area {area.id} without a usable polygon")
            continue
        graph.areas[area.id] = area
    for destination_model in snapshot.destinations:
        graph.destinations[destination_model.id] = destination_model.to_domain()

    graph.observe_ids()
    graph.recompute_all()
    logging.info(
        f"Loaded network with {len(graph.stops)} stops, {len(graph.routes)} lines, "
        f"{len(graph.areas)} areas and {len(graph.destinations)} destinations"
    )
    return graph
