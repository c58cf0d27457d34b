"""Tests for vehicle location endpoints."""
import pytest


@pytest.mark.asyncio
async def test_report_stamps_time_and_user(client, vehicle, admin):
    resp = await client.post("/api/vehicle-locations", json={
        "vehicle_id": vehicle["id"], "latitude": 51.5, "longitude": -0.12, "speed": 30,
    })
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["recorded_at"]
    assert data["user_id"] == admin["id"]
    assert data["vehicle"]["id"] == vehicle["id"]


@pytest.mark.asyncio
async def test_coordinates_validated(client, vehicle):
    resp = await client.post("/api/vehicle-locations", json={
        "vehicle_id": vehicle["id"], "latitude": 95, "longitude": 200,
    })
    assert resp.status_code == 422
    errors = resp.json()["errors"]
    assert "latitude" in errors
    assert "longitude" in errors


@pytest.mark.asyncio
async def test_latest_per_vehicle(client, vehicle):
    other = (await client.post("/api/vehicles", json={
        "make": "Iveco", "model": "Daily", "license_plate": "AC-321",
    })).json()["data"]
    for vid, stamp, lat in (
        (vehicle["id"], "2026-05-01T08:00:00", 10),
        (vehicle["id"], "2026-05-01T09:00:00", 11),
        (other["id"], "2026-05-01T07:00:00", 20),
    ):
        await client.post("/api/vehicle-locations", json={
            "vehicle_id": vid, "latitude": lat, "longitude": 0, "recorded_at": stamp,
        })

    resp = await client.get("/api/vehicle-locations/latest")
    data = resp.json()["data"]
    assert {row["vehicle_id"]: row["latitude"] for row in data} == {vehicle["id"]: 11, other["id"]: 20}


@pytest.mark.asyncio
async def test_list_filter_by_vehicle(client, vehicle, other_company):
    await client.post("/api/vehicle-locations", json={"vehicle_id": vehicle["id"], "latitude": 1, "longitude": 1})

    resp = await client.get("/api/vehicle-locations", params={"vehicle_id": vehicle["id"]})
    assert len(resp.json()["data"]) == 1
    resp = await client.get("/api/vehicle-locations", params={"vehicle_id": other_company["vehicle"]["id"]})
    assert resp.json()["data"] == []
