from pathlib import Path

import pytest

from transit_planner.models.domain import TripSchedule, Vehicle, VehicleSchedule
from transit_planner.persistence.filesystem import FileStorage
from transit_planner.services.geospatial import destination_point
from transit_planner.services.network.graph import NetworkGraph
from transit_planner.services.scheduling.errors import (
    InvalidTripStartTimeError,
    MissingTripPairError,
    VehicleNotFoundError,
)
from transit_planner.services.scheduling.service import (
    ScheduleService,
    add_trip,
    add_vehicle,
    delete_trip,
    delete_vehicle,
)
from transit_planner.services.scheduling.timetable import generate_default_schedule


def _graph() -> NetworkGraph:
    graph = NetworkGraph()
    positions = [(0.0, 0.0), destination_point(0.0, 0.0, 1000.0, 0.0), destination_point(0.0, 0.0, 3000.0, 0.0)]
    for lat, lng in positions:
        graph.add_stop(lat, lng)
    graph.add_route(positions)
    return graph


def _default(graph: NetworkGraph) -> VehicleSchedule:
    return generate_default_schedule(graph.get_route(1), graph.stop_list())


def test_add_vehicle_numbers_vehicles_and_marks_the_schedule_edited() -> None:
    graph = _graph()
    schedule = _default(graph)

    vehicle = add_vehicle(schedule, graph.get_route(1), graph.stop_list(), start_stop_id=1)

    assert vehicle.id == "vehicle-2"
    assert vehicle.name == "Vehicle 2"
    assert [trip.direction for trip in vehicle.trips] == ["1->3", "3->1"]
    assert vehicle.trips[0].times[0].time == "06:00"
    assert schedule.edited


def test_vehicle_starting_at_the_last_stop_runs_the_return_direction_first() -> None:
    graph = _graph()
    schedule = _default(graph)

    vehicle = add_vehicle(schedule, graph.get_route(1), graph.stop_list(), start_stop_id=3)

    assert [trip.direction for trip in vehicle.trips] == ["3->1", "1->3"]


def test_add_vehicle_rejects_a_stop_off_the_line() -> None:
    graph = _graph()
    schedule = _default(graph)

    with pytest.raises(ValueError):
        add_vehicle(schedule, graph.get_route(1), graph.stop_list(), start_stop_id=99)
    assert len(schedule.vehicles) == 1


def test_add_trip_must_start_after_the_last_break() -> None:
    graph = _graph()
    schedule = _default(graph)
    route, stops = graph.get_route(1), graph.stop_list()

    with pytest.raises(InvalidTripStartTimeError) as excinfo:
        add_trip(schedule, route, stops, "vehicle-1", "06:46")
    assert excinfo.value.earliest == "06:47"
    assert len(schedule.vehicles[0].trips) == 2
    assert not schedule.edited

    trips = add_trip(schedule, route, stops, "vehicle-1", "06:47")
    assert [trip.times[0].time for trip in trips] == ["06:47", "07:10"]
    assert len(schedule.vehicles[0].trips) == 4
    assert schedule.edited


def test_added_trip_keeps_the_vehicle_orientation() -> None:
    graph = _graph()
    schedule = _default(graph)
    route, stops = graph.get_route(1), graph.stop_list()
    vehicle = add_vehicle(schedule, route, stops, start_stop_id=3)

    trips = add_trip(schedule, route, stops, vehicle.id, "08:00")

    assert [trip.direction for trip in trips] == ["3->1", "1->3"]


def test_delete_trip_removes_the_pair() -> None:
    graph = _graph()
    schedule = _default(graph)
    route, stops = graph.get_route(1), graph.stop_list()
    add_trip(schedule, route, stops, "vehicle-1", "08:00")
    kept = list(schedule.vehicles[0].trips[2:])

    delete_trip(schedule, "vehicle-1", 1)

    assert schedule.vehicles[0].trips == kept


def test_delete_trip_without_pair_leaves_the_vehicle_untouched() -> None:
    lone = TripSchedule(direction="1->3", times=[], break_end_time="06:23")
    schedule = VehicleSchedule(route_id=1, vehicles=[Vehicle(id="vehicle-1", name="Vehicle 1", trips=[lone])])

    with pytest.raises(MissingTripPairError):
        delete_trip(schedule, "vehicle-1", 0)
    with pytest.raises(MissingTripPairError):
        delete_trip(schedule, "vehicle-1", 5)
    assert schedule.vehicles[0].trips == [lone]
    assert not schedule.edited


def test_delete_vehicle_removes_only_its_trips() -> None:
    graph = _graph()
    schedule = _default(graph)
    other = add_vehicle(schedule, graph.get_route(1), graph.stop_list(), start_stop_id=1)
    other_trips = list(other.trips)

    removed = delete_vehicle(schedule, "vehicle-1")

    assert len(removed.trips) == 2
    assert [vehicle.id for vehicle in schedule.vehicles] == ["vehicle-2"]
    assert schedule.vehicles[0].trips == other_trips

    with pytest.raises(VehicleNotFoundError):
        delete_vehicle(schedule, "vehicle-1")


def test_schedule_service_lifecycle(tmp_path: Path) -> None:
    graph = _graph()
    storage = FileStorage(root=tmp_path)
    service = ScheduleService(graph, storage)

    assert service.state(1) == "none"
    schedule = service.get_schedule(1)
    assert (tmp_path / "schedules" / "schedule-line-1.json").exists()
    assert service.state(1) == "default"
    assert len(schedule.vehicles) == 1

    service.add_vehicle(1, start_stop_id=1)
    assert service.state(1) == "edited"
    assert [vehicle.id for vehicle in service.get_schedule(1).vehicles] == ["vehicle-1", "vehicle-2"]

    service.delete_trip(1, "vehicle-2", 0)
    assert service.get_schedule(1).vehicles[1].trips == []

    service.discard(1)
    assert service.state(1) == "none"


def test_rejected_edit_is_not_persisted(tmp_path: Path) -> None:
    graph = _graph()
    service = ScheduleService(graph, FileStorage(root=tmp_path))
    service.get_schedule(1)

    with pytest.raises(InvalidTripStartTimeError):
        service.add_trip(1, "vehicle-1", "06:30")

    assert service.state(1) == "default"
    assert len(service.get_schedule(1).vehicles[0].trips) == 2


def test_line_without_stops_gets_an_unsaved_empty_schedule(tmp_path: Path) -> None:
    graph = NetworkGraph()
    graph.add_route([(10.0, 10.0), (10.01, 10.0)])
    service = ScheduleService(graph, FileStorage(root=tmp_path))

    assert service.get_schedule(1).vehicles == []
    assert service.state(1) == "none"
