"""Tests for the HTTP API."""

from datetime import timedelta

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from backend import api


@pytest.fixture
def client(simulator):
    app = FastAPI()
    app.include_router(api.router)
    api.simulator = simulator
    yield TestClient(app)
    api.simulator = None


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["clock_running"] is False


def test_not_initialized_returns_503():
    app = FastAPI()
    app.include_router(api.router)
    api.simulator = None

    response = TestClient(app).get("/api/state")

    assert response.status_code == 503


def test_state_includes_display_values(client):
    client.post("/api/unit", json={"unit": "F"})

    body = client.get("/api/state").json()

    assert body["inside_temp_c"] == 24
    assert body["display"] == {
        "unit": "F", "inside": 75, "outside": 86, "target": 75, "desired": 75,
    }


def test_appliance_and_locations(client):
    appliance = client.get("/api/appliance").json()
    locations = client.get("/api/locations").json()

    assert appliance["wattage"] == 1080
    assert appliance["currency"] == "PHP"
    assert locations["current"] == "Digos City, PH"
    assert locations["locations"]["Manila, PH"] == {"min_temp": 24, "max_temp": 34}


def test_mode_presets_desired_temperature(client):
    response = client.post("/api/mode", json={"mode": "cool"})

    assert response.json() == {"mode": "cool", "desired_temp_c": 17}


@pytest.mark.parametrize(
    "path, body",
    [
        ("/api/mode", {"mode": "dry"}),
        ("/api/fan", {"fan": "turbo"}),
        ("/api/unit", {"unit": "K"}),
        ("/api/room", {"room": "garage"}),
    ],
)
def test_invalid_enum_rejected(client, path, body):
    assert client.post(path, json=body).status_code == 422


def test_select_room_and_location(client, simulator):
    assert client.post("/api/room", json={"room": "diningroom"}).json() == {"room": "diningroom"}
    assert client.post("/api/location", json={"location": "Cebu, PH"}).status_code == 200

    assert simulator.context.selected_room.value == "diningroom"
    assert simulator.context.location == "Cebu, PH"


def test_unknown_location_returns_404(client):
    response = client.post("/api/location", json={"location": "Atlantis"})

    assert response.status_code == 404


def test_desired_temperature(client):
    ok = client.post("/api/desired_temperature", json={"temperature": 80, "unit": "F"})
    too_hot = client.post("/api/desired_temperature", json={"temperature": 31})

    assert ok.json() == {"desired_temp_c": 27}
    assert too_hot.status_code == 400


def test_schedule_lifecycle(client):
    # Arrange
    put = client.put("/api/schedule/7?room=livingroom", json={"temperature": 20})

    # Act
    listed = client.get("/api/schedule", params={"room": "livingroom"}).json()
    deleted = client.delete("/api/schedule/7", params={"room": "livingroom"})
    after = client.get("/api/schedule", params={"room": "livingroom"}).json()

    # Assert
    assert put.json() == {"room": "livingroom", "hour": 7, "temp_c": 20}
    assert listed["entries"] == [{"hour": 7, "temp_c": 20, "temp": 20}]
    assert deleted.status_code == 200
    assert after["entries"] == []


@pytest.mark.parametrize("hour", ["24", "-1", "noon"])
def test_schedule_rejects_bad_hour(client, hour):
    response = client.put(f"/api/schedule/{hour}", json={"temperature": 20})

    assert response.status_code == 422


def test_schedule_rejects_out_of_range_temperature(client):
    response = client.put("/api/schedule/3", json={"temperature": 50})

    assert response.status_code == 400


def test_dark_mode_toggle(client):
    assert client.post("/api/dark_mode/toggle").json() == {"dark_mode": True}
    assert client.post("/api/dark_mode/toggle").json() == {"dark_mode": False}


def test_room_history_and_reset(client, simulator, now):
    # Arrange
    simulator.set_mode("cool")
    for i in range(3):
        simulator.tick(now + timedelta(seconds=4 * i))

    # Act
    history = client.get("/api/rooms/bedroom/history").json()
    client.post("/api/rooms/bedroom/reset")
    after = client.get("/api/rooms/bedroom/history").json()

    # Assert
    assert history["count"] == 3
    assert [h["inside"] for h in history["history"]] == [23, 22, 21]
    assert history["energy_usage_kwh"] > 0
    assert after["count"] == 0
    assert after["energy_usage_kwh"] == 0


def test_chart_data(client, simulator, now):
    simulator.set_mode("cool")
    simulator.tick(now)
    simulator.tick(now + timedelta(seconds=4))

    body = client.get("/api/rooms/bedroom/chart_data").json()

    labels = [d["label"] for d in body["datasets"]]
    assert labels == ["Inside Temperature", "Outside Temperature", "Target Temperature"]
    assert body["datasets"][0]["data"][-1] == {"x": (now + timedelta(seconds=4)).isoformat(), "y": 22}
    assert body["datasets"][2]["data"][0]["y"] == 17
    assert body["scales"]["y"]["suggestedMin"] == 15
    assert body["metadata"] == {"source": "history_buffer", "data_points": 2, "capacity": 72}


def test_chart_data_for_empty_room(client):
    body = client.get("/api/rooms/masterbedroom/chart_data").json()

    assert body["metadata"]["data_points"] == 0
    assert body["scales"]["y"]["suggestedMin"] is None
    assert all(d["data"] == [] for d in body["datasets"])


def test_unknown_room_path_rejected(client):
    assert client.get("/api/rooms/garage/history").status_code == 422
