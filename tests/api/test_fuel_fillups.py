"""Tests for fuel fillup endpoints and the MPG maintained on save."""
import pytest


@pytest.fixture
def fillup(vehicle, driver):
    def _make(**overrides):
        body = {
            "vehicle_id": vehicle["id"],
            "driver_id": driver["id"],
            "gallons": 12,
            "cost": 48,
            "fillup_date": "2026-02-01",
            "odometer_reading": 12000,
        }
        body.update(overrides)
        return body
    return _make


@pytest.mark.asyncio
async def test_first_fillup_has_no_mpg(client, fillup):
    resp = await client.post("/api/fuel-fillups", json=fillup())
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["mpg"] is None
    assert data["cost_per_gallon"] == 4.0
    assert data["vehicle"]["license_plate"] == "AC-707"
    assert data["driver"]["name"] == "Dana Driver"


@pytest.mark.asyncio
async def test_mpg_from_previous_fillup(client, fillup):
    await client.post("/api/fuel-fillups", json=fillup())
    resp = await client.post("/api/fuel-fillups", json=fillup(
        fillup_date="2026-02-08", odometer_reading=12300, gallons=9, cost=30,
    ))
    data = resp.json()["data"]
    assert data["mpg"] == 33.33
    assert data["cost_per_gallon"] == 3.333


@pytest.mark.asyncio
async def test_backdated_fillup_uses_earlier_reading(client, fillup):
    await client.post("/api/fuel-fillups", json=fillup(fillup_date="2026-02-01", odometer_reading=12000))
    await client.post("/api/fuel-fillups", json=fillup(fillup_date="2026-02-20", odometer_reading=12600))

    resp = await client.post("/api/fuel-fillups", json=fillup(
        fillup_date="2026-02-10", odometer_reading=12240, gallons=10,
    ))
    assert resp.json()["data"]["mpg"] == 24.0


@pytest.mark.asyncio
async def test_odometer_not_advancing_leaves_mpg_empty(client, fillup):
    await client.post("/api/fuel-fillups", json=fillup(odometer_reading=12000))
    resp = await client.post("/api/fuel-fillups", json=fillup(fillup_date="2026-02-02", odometer_reading=11900))
    assert resp.json()["data"]["mpg"] is None


@pytest.mark.asyncio
async def test_update_keeps_stored_mpg_when_undefined(client, fillup):
    await client.post("/api/fuel-fillups", json=fillup())
    second = (await client.post("/api/fuel-fillups", json=fillup(
        fillup_date="2026-02-08", odometer_reading=12240, gallons=12,
    ))).json()["data"]
    assert second["mpg"] == 20.0

    # Moving the reading below the previous one makes MPG undefined.
    resp = await client.put(f"/api/fuel-fillups/{second['id']}", json=fillup(
        fillup_date="2026-02-08", odometer_reading=11000, gallons=12, cost=50,
    ))
    data = resp.json()["data"]
    assert data["mpg"] == 20.0
    assert data["cost_per_gallon"] == 4.167


@pytest.mark.asyncio
async def test_update_excludes_itself_from_previous(client, fillup):
    first = (await client.post("/api/fuel-fillups", json=fillup())).json()["data"]
    resp = await client.put(f"/api/fuel-fillups/{first['id']}", json=fillup(odometer_reading=12100))
    assert resp.json()["data"]["mpg"] is None


@pytest.mark.asyncio
async def test_zero_gallons_rejected(client, fillup):
    resp = await client.post("/api/fuel-fillups", json=fillup(gallons=0))
    assert resp.status_code == 422
    body = resp.json()
    assert body["error"] == "Gallons must be greater than 0"
    assert body["errors"]["gallons"] == ["Gallons must be greater than 0"]


@pytest.mark.asyncio
async def test_required_fields(client):
    resp = await client.post("/api/fuel-fillups", json={"gallons": 10})
    assert resp.status_code == 422
    errors = resp.json()["errors"]
    for field in ("vehicle_id", "driver_id", "cost", "fillup_date", "odometer_reading"):
        assert field in errors


@pytest.mark.asyncio
async def test_vehicle_of_other_company_rejected(client, fillup, other_company):
    resp = await client.post("/api/fuel-fillups", json=fillup(vehicle_id=other_company["vehicle"]["id"]))
    assert resp.status_code == 422
    assert "vehicle_id" in resp.json()["errors"]


@pytest.mark.asyncio
async def test_list_order_and_filter(client, fillup, other_company):
    await client.post("/api/fuel-fillups", json=fillup(fillup_date="2026-02-01"))
    await client.post("/api/fuel-fillups", json=fillup(fillup_date="2026-02-15", odometer_reading=12400))

    resp = await client.get("/api/fuel-fillups")
    dates = [f["fillup_date"] for f in resp.json()["data"]]
    assert dates == ["2026-02-15", "2026-02-01"]

    resp = await client.get("/api/fuel-fillups", params={"vehicle_id": other_company["vehicle"]["id"]})
    assert resp.json()["data"] == []


@pytest.mark.asyncio
async def test_delete_is_soft(client, fillup, fleet_store):
    created = (await client.post("/api/fuel-fillups", json=fillup())).json()["data"]

    resp = await client.delete(f"/api/fuel-fillups/{created['id']}")
    assert resp.json()["data"] == {"deleted": True, "id": created["id"]}
    assert (await client.get(f"/api/fuel-fillups/{created['id']}")).status_code == 404
    assert (await client.get("/api/fuel-fillups")).json()["data"] == []

    raw = await fleet_store.fetch_one("SELECT deleted_at FROM fuel_fillups WHERE id = ?", (created["id"],))
    assert raw["deleted_at"] is not None


@pytest.mark.asyncio
async def test_deleted_fillup_not_used_as_previous(client, fillup):
    first = (await client.post("/api/fuel-fillups", json=fillup())).json()["data"]
    await client.delete(f"/api/fuel-fillups/{first['id']}")

    resp = await client.post("/api/fuel-fillups", json=fillup(fillup_date="2026-02-08", odometer_reading=12300))
    assert resp.json()["data"]["mpg"] is None


@pytest.mark.asyncio
async def test_recompute_mpg_job_queued(client, vehicle):
    resp = await client.post("/api/fuel-fillups/recompute-mpg", json={"vehicle_id": vehicle["id"]})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["job_type"] == "recompute_mpg"
    assert data["status"] == "queued"

    job = (await client.get(f"/api/jobs/{data['job_id']}")).json()["data"]
    assert job["job_type"] == "recompute_mpg"


@pytest.mark.asyncio
async def test_recompute_mpg_without_body(client):
    resp = await client.post("/api/fuel-fillups/recompute-mpg")
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "queued"


@pytest.mark.asyncio
async def test_recompute_mpg_other_company_vehicle(client, other_company):
    resp = await client.post(
        "/api/fuel-fillups/recompute-mpg", json={"vehicle_id": other_company["vehicle"]["id"]}
    )
    assert resp.status_code == 403

    resp = await client.post("/api/fuel-fillups/recompute-mpg", json={"vehicle_id": 9999})
    assert resp.status_code == 404
