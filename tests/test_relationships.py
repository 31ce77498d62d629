from transit_planner.models.domain import Area, Destination, Stop
from transit_planner.services.geospatial import destination_point
from transit_planner.services.relationships import (
    destinations_in_area,
    destinations_near_stop,
    lines_serving_destination,
    stops_serving_destination,
    update_all_destination_relationships,
)

SQUARE = [(0.0, 0.0), (0.0, 0.01), (0.01, 0.01), (0.01, 0.0)]


def _destination(destination_id: int, lat: float, lng: float) -> Destination:
    return Destination(id=destination_id, name=f"Destination {destination_id}", latitude=lat, longitude=lng)


def test_destinations_inside_area_exclude_the_boundary() -> None:
    area = Area(id="area_1", ring=SQUARE)
    inside = _destination(1, 0.005, 0.005)
    on_edge = _destination(2, 0.0, 0.005)
    outside = _destination(3, 0.02, 0.02)

    assert destinations_in_area(area, [inside, on_edge, outside]) == [1]


def test_destinations_near_stop_use_the_walking_threshold() -> None:
    stop = Stop(id=1, name="Stop 1", latitude=0.0, longitude=0.0)
    close = _destination(1, *destination_point(0.0, 0.0, 299.0, 45.0))
    far = _destination(2, *destination_point(0.0, 0.0, 301.0, 45.0))

    assert destinations_near_stop(stop, [close, far]) == [1]
    assert destinations_near_stop(stop, [close, far], threshold_m=500.0) == [1, 2]


def test_update_all_relationships_and_service_lookup() -> None:
    area = Area(id="area_1", ring=SQUARE)
    school = _destination(1, 0.005, 0.005)
    stop_a = Stop(id=1, name="Stop 1", latitude=0.005, longitude=0.006, connected_route_ids={2, 1})
    stop_b = Stop(id=2, name="Stop 2", latitude=0.05, longitude=0.05, connected_route_ids={3})
    stops = [stop_a, stop_b]

    update_all_destination_relationships(stops, [area], [school])

    assert area.destination_ids == [1]
    assert stop_a.nearby_destination_ids == [1]
    assert stop_b.nearby_destination_ids == []
    assert stops_serving_destination(1, stops) == [stop_a]
    assert lines_serving_destination(1, stops) == [1, 2]


def test_removed_destination_disappears_from_relations() -> None:
    area = Area(id="area_1", ring=SQUARE, destination_ids=[1])
    stop = Stop(id=1, name="Stop 1", latitude=0.005, longitude=0.005, nearby_destination_ids=[1])

    update_all_destination_relationships([stop], [area], [])

    assert area.destination_ids == []
    assert stop.nearby_destination_ids == []
