import pytest
from fastapi.testclient import TestClient

from ocpp_gateway.api import create_app
from ocpp_gateway.config import Settings

NEW_CP = {
    "charge_point_id": "CP_1",
    "charge_point_model": "Volt-22",
    "charge_point_vendor": "Acme",
    "firmware_version": "1.0.0",
}


@pytest.fixture
def client(repository, pipeline):
    return TestClient(create_app(repository, pipeline, Settings()))


@pytest.fixture
def secured(repository, pipeline):
    return TestClient(create_app(repository, pipeline, Settings(api_key="secret")))


def test_health(client):
    assert client.get("/api/v1/health").json() == {"status": "ok"}


def test_charge_point_lifecycle(client):
    created = client.post("/api/v1/charge-points", json=NEW_CP)
    assert created.status_code == 201
    assert created.json()["charge_point_id"] == "CP_1"

    assert client.post("/api/v1/charge-points", json=NEW_CP).status_code == 409
    assert [cp["charge_point_id"] for cp in client.get("/api/v1/charge-points").json()] == ["CP_1"]

    patched = client.patch("/api/v1/charge-points/CP_1", json={"status": "Faulted"})
    assert patched.status_code == 200
    assert patched.json()["status"] == "Faulted"
    assert patched.json()["charge_point_vendor"] == "Acme"

    assert client.delete("/api/v1/charge-points/CP_1").status_code == 204
    assert client.get("/api/v1/charge-points/CP_1").status_code == 404


def test_blank_fields_are_rejected(client):
    response = client.post("/api/v1/charge-points", json={**NEW_CP, "charge_point_vendor": "  "})

    assert response.status_code == 422


def test_api_key_guards_writes(secured):
    assert secured.post("/api/v1/charge-points", json=NEW_CP).status_code == 401
    assert (
        secured.post("/api/v1/charge-points", json=NEW_CP, headers={"X-API-Key": "secret"}).status_code
        == 201
    )
    assert secured.get("/api/v1/charge-points").status_code == 200


def test_actions_and_schemas(client):
    assert "Core" in client.get("/api/v1/actions").json()
    assert "Heartbeat" in client.get("/api/v1/schemas").json()

    schema = client.get("/api/v1/schemas/Authorize").json()
    assert schema["required"] == ["idTag"]
    assert schema["properties"]["idTag"] == {"type": "string", "maxLength": 20}
    assert schema["additionalProperties"] is False

    assert client.get("/api/v1/schemas/Nope").status_code == 404


def test_ocpp_frame_endpoint(client, repository):
    frame = [2, "m1", "BootNotification", {"chargePointVendor": "Acme", "chargePointModel": "X"}]

    body = client.post("/api/v1/ocpp/CP_5", json=frame).json()

    assert body[:2] == [3, "m1"]
    assert repository.find_by_charge_point_id("CP_5") is not None


def test_ocpp_frame_endpoint_ignores_results(client):
    response = client.post("/api/v1/ocpp/CP_5", json=[3, "m1", {}])

    assert response.status_code == 202
    assert response.json() is None
