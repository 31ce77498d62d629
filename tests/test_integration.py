from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from transit_planner.api.dependencies import get_network_service
from transit_planner.main import create_app
from transit_planner.persistence.filesystem import FileStorage
from transit_planner.services.geospatial import destination_point
from transit_planner.services.network.service import NetworkService

STOPS = [(0.0, 0.0), destination_point(0.0, 0.0, 1000.0, 0.0), destination_point(0.0, 0.0, 3000.0, 0.0)]


@pytest.fixture
def api_client(tmp_path: Path) -> TestClient:
    app = create_app()
    service = NetworkService(FileStorage(root=tmp_path))
    app.dependency_overrides[get_network_service] = lambda: service
    return TestClient(app)


def _build_line(client: TestClient) -> None:
    for position in STOPS:
        response = client.post("/api/editor/created", json={"kind": "stop", "coordinates": [list(position)]})
        assert response.status_code == 201
    response = client.post(
        "/api/editor/created",
        json={"kind": "route", "coordinates": [list(position) for position in STOPS]},
    )
    assert response.status_code == 201


def test_health_endpoints(api_client: TestClient) -> None:
    assert api_client.get("/api/health").json() == {"status": "ok"}
    storage = api_client.get("/api/health/storage").json()
    assert storage["stops"] == 0
    assert storage["snapshot_exists"] is False


def test_editor_events_return_the_network(api_client: TestClient) -> None:
    _build_line(api_client)

    network = api_client.get("/api/network").json()
    assert [stop["busLines"] for stop in network["stops"]] == [[1], [1], [1]]
    assert network["routes"][0]["stopIds"] == [1, 2, 3]

    response = api_client.post("/api/editor/removed", json={"kind": "stop", "entity_id": 2})
    assert response.status_code == 200
    body = response.json()
    assert body["entity_id"] == 2
    assert body["network"]["routes"][0]["stopIds"] == [1, 3]
    assert "overlays" in body


def test_unknown_entity_is_404(api_client: TestClient) -> None:
    assert api_client.get("/api/routes/9/summary").status_code == 404
    assert api_client.get("/api/schedules/9").status_code == 404
    response = api_client.post("/api/editor/dragged", json={"kind": "stop", "entity_id": 9, "lat": 0, "lng": 0})
    assert response.status_code == 404


def test_invalid_payloads_are_rejected(api_client: TestClient) -> None:
    api_client.post("/api/editor/created", json={"kind": "stop", "coordinates": [[0.0, 0.0]]})
    api_client.post("/api/editor/created", json={"kind": "area", "coordinates": [[0, 0], [0, 0.01], [0.01, 0.01]]})

    assert api_client.patch("/api/stops/1", json={"name": "ab"}).status_code == 422
    assert api_client.patch("/api/areas/area_1", json={"population": 20000}).status_code == 422
    assert api_client.patch("/api/areas/area_1", json={"public_transport_usage_percent": 150}).status_code == 422
    response = api_client.post("/api/editor/created", json={"kind": "route", "coordinates": [[0, 0]]})
    assert response.status_code == 400


def test_attribute_edits(api_client: TestClient) -> None:
    _build_line(api_client)
    api_client.post("/api/editor/created", json={"kind": "area", "coordinates": [[-0.01, -0.01], [-0.01, 0.01], [0.01, 0.01], [0.01, -0.01]]})

    stop = api_client.patch("/api/stops/1", json={"name": "Market", "has_shelter": True}).json()
    route = api_client.patch("/api/routes/1", json={"name": "Coastal"}).json()
    area = api_client.patch("/api/areas/area_1", json={"population": 5000, "serving_lines": ["1"]}).json()

    assert stop["name"] == "Market"
    assert stop["hasShelter"] is True
    assert route["name"] == "Coastal"
    assert area["population"] == 5000
    assert area["servingLines"] == ["1"]

    coverage = api_client.get("/api/areas/area_1/coverage").json()
    assert [item["stop_id"] for item in coverage["stops"]] == [1, 2]


def test_schedule_workflow(api_client: TestClient) -> None:
    _build_line(api_client)

    schedule = api_client.get("/api/schedules/1").json()
    assert schedule["lineId"] == 1
    assert schedule["edited"] is False
    vehicle = schedule["vehicles"][0]
    assert vehicle["id"] == "vehicle-1"
    assert [entry["time"] for entry in vehicle["trips"][0]["times"]] == ["06:00", "06:02", "06:08"]
    assert vehicle["trips"][0]["breakEndTime"] == "06:23"
    assert vehicle["trips"][1]["breakEndTime"] == "06:47"

    rejected = api_client.post("/api/schedules/1/vehicles/vehicle-1/trips", json={"start_time": "06:30"})
    assert rejected.status_code == 400
    assert "06:47" in rejected.json()["detail"]

    added = api_client.post("/api/schedules/1/vehicles/vehicle-1/trips", json={"start_time": "07:00"})
    assert added.status_code == 201
    assert len(added.json()["vehicles"][0]["trips"]) == 4
    assert added.json()["edited"] is True

    second = api_client.post("/api/schedules/1/vehicles", json={"start_stop_id": 3}).json()
    assert [vehicle["id"] for vehicle in second["vehicles"]] == ["vehicle-1", "vehicle-2"]
    assert second["vehicles"][1]["trips"][0]["direction"] == "3->1"

    trimmed = api_client.delete("/api/schedules/1/vehicles/vehicle-1/trips/3").json()
    assert len(trimmed["vehicles"][0]["trips"]) == 2

    chart = api_client.get("/api/schedules/1/chart").json()
    assert chart["stop_ids"] == [1, 2, 3]
    assert [series["label"] for series in chart["series"]] == ["Vehicle 1", "Vehicle 2"]
    assert chart["series"][0]["points"][0] == {"x": 0.0, "y": 0}

    remaining = api_client.delete("/api/schedules/1/vehicles/vehicle-1").json()
    assert [vehicle["id"] for vehicle in remaining["vehicles"]] == ["vehicle-2"]
    assert api_client.delete("/api/schedules/1/vehicles/vehicle-1").status_code == 404


def test_replace_and_clear_network(api_client: TestClient) -> None:
    _build_line(api_client)
    snapshot = api_client.get("/api/network").json()
    snapshot["stops"][0]["busLines"] = []
    snapshot["routes"][0]["stopIds"] = []

    replaced = api_client.put("/api/network", json=snapshot).json()
    assert replaced["stops"][0]["busLines"] == [1]
    assert replaced["routes"][0]["stopIds"] == [1, 2, 3]

    assert api_client.delete("/api/network").json()["success"] is True
    assert api_client.get("/api/network").json()["stops"] == []


def test_geojson_export(api_client: TestClient) -> None:
    _build_line(api_client)

    data = api_client.get("/api/network/export/geojson").json()

    assert data["type"] == "FeatureCollection"
    assert len(data["features"]) == 4
