"""Tests for driver endpoints."""
import pytest

DRIVER = {
    "name": "Lee Long",
    "email": "lee@acme.example.com",
    "phone": "555-0199",
    "license_number": "DL-200",
    "license_expiry": "2029-01-31",
}


@pytest.mark.asyncio
async def test_create_driver_creates_user(client, driver, fleet_store):
    assert driver["name"] == "Dana Driver"
    assert driver["email"] == "dana@acme.example.com"
    assert driver["status"] == "active"
    assert driver["user"]["role"] == "driver"
    assert driver["vehicle"] is None
    assert driver["trips"] == []

    account = await fleet_store.get("users", driver["user_id"])
    assert account["company_id"] == driver["company_id"]
    assert account["api_token"]


@pytest.mark.asyncio
async def test_email_and_license_unique(client, driver, admin):
    resp = await client.post("/api/drivers", json={**DRIVER, "email": admin["email"]})
    assert resp.status_code == 422
    assert resp.json()["errors"]["email"] == ["The email has already been taken."]

    resp = await client.post("/api/drivers", json={**DRIVER, "license_number": "DL-100"})
    assert resp.status_code == 422
    assert "license_number" in resp.json()["errors"]


@pytest.mark.asyncio
async def test_invalid_email_and_status(client):
    resp = await client.post("/api/drivers", json={**DRIVER, "email": "not-an-email", "status": "asleep"})
    assert resp.status_code == 422
    errors = resp.json()["errors"]
    assert "email" in errors
    assert "status" in errors


@pytest.mark.asyncio
async def test_create_with_vehicle_assigns_it(client, vehicle):
    resp = await client.post("/api/drivers", json={**DRIVER, "vehicle_id": vehicle["id"]})
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["vehicle_id"] == vehicle["id"]
    assert data["vehicle"]["license_plate"] == vehicle["license_plate"]

    v = (await client.get(f"/api/vehicles/{vehicle['id']}")).json()["data"]
    assert v["driver_id"] == data["id"]


@pytest.mark.asyncio
async def test_update_moves_vehicle_and_user_fields(client, vehicle, fleet_store):
    created = (await client.post("/api/drivers", json={**DRIVER, "vehicle_id": vehicle["id"]})).json()["data"]
    other = (await client.post("/api/vehicles", json={
        "make": "Iveco", "model": "Daily", "license_plate": "AC-900",
    })).json()["data"]

    payload = {**DRIVER, "name": "Lee Longer", "email": "lee2@acme.example.com", "vehicle_id": other["id"]}
    resp = await client.put(f"/api/drivers/{created['id']}", json=payload)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["name"] == "Lee Longer"
    assert data["vehicle_id"] == other["id"]

    old = await fleet_store.get("vehicles", vehicle["id"])
    assert old["driver_id"] is None
    account = await fleet_store.get("users", created["user_id"])
    assert account["email"] == "lee2@acme.example.com"


@pytest.mark.asyncio
async def test_update_keeps_own_email(client, driver):
    payload = {**DRIVER, "email": driver["email"], "license_number": driver["license_number"]}
    resp = await client.put(f"/api/drivers/{driver['id']}", json=payload)
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_vehicle_of_other_company_rejected(client, other_company):
    resp = await client.post("/api/drivers", json={**DRIVER, "vehicle_id": other_company["vehicle"]["id"]})
    assert resp.status_code == 422
    assert "vehicle_id" in resp.json()["errors"]


@pytest.mark.asyncio
async def test_only_admin_can_delete(anon_client, client, driver, fleet_store):
    account = await fleet_store.get("users", driver["user_id"])
    headers = {"Authorization": f"Bearer {account['api_token']}"}

    resp = await anon_client.delete(f"/api/drivers/{driver['id']}", headers=headers)
    assert resp.status_code == 403
    assert resp.json()["error"] == "Only admins can delete drivers."


@pytest.mark.asyncio
async def test_delete_unassigns_vehicle(client, vehicle, fleet_store):
    created = (await client.post("/api/drivers", json={**DRIVER, "vehicle_id": vehicle["id"]})).json()["data"]

    resp = await client.delete(f"/api/drivers/{created['id']}")
    assert resp.json()["data"] == {"deleted": True, "id": created["id"]}
    assert (await fleet_store.get("vehicles", vehicle["id"]))["driver_id"] is None
    assert (await client.get(f"/api/drivers/{created['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_show_embeds_latest_trips(client, driver, vehicle):
    for n in range(12):
        resp = await client.post("/api/trips", json={
            "vehicle_id": vehicle["id"], "driver_id": driver["id"],
            "start_location": "Depot", "end_location": f"Stop {n}",
            "start_time": "2026-05-01T08:00", "start_mileage": 100 * n, "trip_date": "2026-05-01",
        })
        assert resp.status_code == 201

    data = (await client.get(f"/api/drivers/{driver['id']}")).json()["data"]
    assert len(data["trips"]) == 10
    assert data["trips"][0]["end_location"] == "Stop 11"


@pytest.mark.asyncio
async def test_filter_by_status(client, driver):
    await client.post("/api/drivers", json={**DRIVER, "status": "suspended"})
    resp = await client.get("/api/drivers", params={"status": "suspended"})
    assert [d["name"] for d in resp.json()["data"]] == ["Lee Long"]
