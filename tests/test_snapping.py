from transit_planner.models.domain import Route, RoutePoint, Stop
from transit_planner.services.geospatial import destination_point
from transit_planner.services.snapping import (
    find_nearest_stop,
    move_stop_vertices,
    rebuild_membership,
    snap_points,
    snap_route,
    stop_icon_state,
)

ORIGIN = (21.5, 39.2)


def _stop(stop_id: int, lat: float, lng: float) -> Stop:
    return Stop(id=stop_id, name=f"Stop {stop_id}", latitude=lat, longitude=lng)


def _offset(meters: float, bearing: float = 0.0, origin=ORIGIN):
    return destination_point(origin[0], origin[1], meters, bearing)


def test_vertex_within_tolerance_takes_the_stop_position() -> None:
    stop = _stop(1, *ORIGIN)
    near = _offset(24.0)
    far = _offset(26.0, 180.0)

    points = snap_points([near, far], [stop])

    assert points[0].stop_id == 1
    assert points[0].position == stop.position
    assert points[1].stop_id is None
    assert points[1].position == far


def test_nearest_stop_tie_goes_to_the_earlier_stop() -> None:
    north = _stop(1, *_offset(10.0, 0.0))
    south = _stop(2, *_offset(10.0, 180.0))

    assert find_nearest_stop(ORIGIN, [north, south], 25.0) is north
    assert find_nearest_stop(ORIGIN, [south, north], 25.0) is south
    assert find_nearest_stop(ORIGIN, [north, south], 5.0) is None


def test_snap_route_rebuilds_membership() -> None:
    first = _stop(1, *ORIGIN)
    second = _stop(2, *_offset(500.0))
    stops = [first, second]

    points = snap_route([_offset(5.0, 90.0), _offset(495.0)], 7, stops)
    assert [point.stop_id for point in points] == [1, 2]
    assert first.connected_route_ids == {7}
    assert second.connected_route_ids == {7}

    snap_route([_offset(5.0, 90.0), _offset(250.0)], 7, stops)
    assert first.connected_route_ids == {7}
    assert second.connected_route_ids == set()


def test_route_may_pass_the_same_stop_twice() -> None:
    stop = _stop(1, *ORIGIN)
    route = Route(id=1, name="Loop", points=snap_route([ORIGIN, _offset(400.0), ORIGIN], 1, [stop]))

    assert route.stop_ids == [1, 1]


def test_rebuild_membership_drops_tags_of_missing_stops() -> None:
    stop = _stop(1, *ORIGIN)
    route = Route(id=3, name="Line 3", points=[RoutePoint(*ORIGIN, 1), RoutePoint(*_offset(300.0), 99)])

    rebuild_membership([route], [stop])

    assert route.stop_ids == [1]
    assert stop.bus_lines == [3]


def test_move_stop_vertices_drags_tagged_points() -> None:
    stop = _stop(1, *ORIGIN)
    route = Route(id=1, name="Line 1", points=[RoutePoint(*ORIGIN, 1), RoutePoint(*_offset(300.0))])
    stop.latitude, stop.longitude = _offset(10.0, 90.0)

    move_stop_vertices([route], stop)

    assert route.points[0].position == stop.position
    assert route.points[1].position == _offset(300.0)


def test_stop_icon_state() -> None:
    route = Route(id=1, name="Line 1", points=[RoutePoint(*ORIGIN), RoutePoint(*_offset(1000.0))])
    on_line = _stop(1, *_offset(500.0))
    on_line.connected_route_ids.add(1)
    beside = _stop(2, *_offset(20.0, 90.0, origin=_offset(500.0)))
    away = _stop(3, *_offset(100.0, 90.0, origin=_offset(500.0)))

    assert stop_icon_state(on_line, [route]) == "vertex"
    assert stop_icon_state(beside, [route]) == "nearby"
    assert stop_icon_state(away, [route]) == "free"


def test_resnapping_a_snapped_route_keeps_its_stops() -> None:
    stops = [_stop(1, *ORIGIN), _stop(2, *_offset(500.0)), _stop(3, *_offset(1000.0))]
    drawn = [_offset(10.0, 90.0), _offset(250.0), _offset(490.0), _offset(1010.0)]
    route = Route(id=4, name="Line 4", points=snap_route(drawn, 4, stops))
    first_pass = route.stop_ids

    route.points = snap_route(route.coordinates, 4, stops)

    assert first_pass == [1, 2, 3]
    assert route.stop_ids == first_pass
    assert [stop.bus_lines for stop in stops] == [[4], [4], [4]]
