import json
from pathlib import Path

from transit_planner.models.domain import StopTime, TripSchedule, Vehicle, VehicleSchedule
from transit_planner.persistence.filesystem import FileStorage, schedule_key
from transit_planner.schemas.network import AreaModel, LatLngModel, NetworkSnapshot, StopModel


def _schedule() -> VehicleSchedule:
    trip = TripSchedule(direction="1->2", times=[StopTime(stop_id=1, time="06:00")], break_end_time="06:15")
    return VehicleSchedule(route_id=4, vehicles=[Vehicle(id="vehicle-1", name="Vehicle 1", trips=[trip])], edited=True)


def test_missing_snapshot_is_an_empty_network(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)

    assert storage.load_network_snapshot() == NetworkSnapshot()
    assert storage.schedules_root.is_dir()


def test_malformed_snapshot_is_an_empty_network(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)

    storage.snapshot_path.write_text("{not json", encoding="utf-8")
    assert storage.load_network_snapshot() == NetworkSnapshot()

    storage.snapshot_path.write_text(json.dumps({"stops": [{"id": "abc"}]}), encoding="utf-8")
    assert storage.load_network_snapshot() == NetworkSnapshot()


def test_snapshot_uses_camel_case_keys(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)
    snapshot = NetworkSnapshot(
        stops=[StopModel(id=1, name="Stop 1", lat=0.0, lng=0.0, bus_lines=[2], has_shelter=True)],
        areas=[
            AreaModel(
                id="area_1",
                area_m2=12.5,
                latlngs=[[LatLngModel(lat=0.0, lng=0.0), LatLngModel(lat=0.0, lng=1.0), LatLngModel(lat=1.0, lng=1.0)]],
            )
        ],
    )

    storage.save_network_snapshot(snapshot)
    raw = json.loads(storage.snapshot_path.read_text(encoding="utf-8"))

    assert raw["stops"][0]["busLines"] == [2]
    assert raw["stops"][0]["hasShelter"] is True
    assert raw["areas"][0]["areaM2"] == 12.5
    assert raw["areas"][0]["publicTransportUsagePercent"] == 5.0
    assert storage.load_network_snapshot() == snapshot


def test_schedule_round_trip(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)
    schedule = _schedule()

    storage.save_schedule(schedule)

    path = storage.schedule_path(4)
    assert path.name == f"{schedule_key(4)}.json" == "schedule-line-4.json"
    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["lineId"] == 4
    assert raw["vehicles"][0]["trips"][0]["breakEndTime"] == "06:15"
    assert storage.load_schedule(4) == schedule


def test_malformed_schedule_is_ignored(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)
    storage.schedule_path(4).write_text("[]", encoding="utf-8")

    assert storage.load_schedule(4) is None
    assert storage.load_schedule(5) is None


def test_clear_removes_snapshot_and_schedules(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)
    storage.save_network_snapshot(NetworkSnapshot())
    storage.save_schedule(_schedule())

    storage.clear()

    assert not storage.snapshot_path.exists()
    assert list(storage.schedules_root.iterdir()) == []


def test_schedule_route_ids_lists_stored_lines(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)
    storage.save_schedule(_schedule())
    storage.save_schedule(VehicleSchedule(route_id=12))
    (storage.schedules_root / "notes.json").write_text("{}", encoding="utf-8")

    assert storage.schedule_route_ids() == [4, 12]

    storage.delete_schedule(4)
    assert storage.schedule_route_ids() == [12]
