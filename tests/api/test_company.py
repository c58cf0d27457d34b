"""Tests for company settings, team members and the profile endpoints."""
import pytest


@pytest.mark.asyncio
async def test_settings_read(client):
    resp = await client.get("/api/company-settings")
    data = resp.json()["data"]
    assert data["company_name"] == "Acme Logistics"
    assert data["company_email"] == "ops@acme.example.com"
    assert data["company_phone"] == ""


@pytest.mark.asyncio
async def test_settings_partial_update(client):
    resp = await client.put("/api/company-settings", json={
        "company_phone": "555-0000", "company_website": "https://acme.example.com",
    })
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["company_phone"] == "555-0000"
    assert data["company_website"].startswith("https://acme.example.com")
    assert data["company_name"] == "Acme Logistics"


@pytest.mark.asyncio
async def test_settings_empty_name_rejected(client):
    resp = await client.put("/api/company-settings", json={"company_name": ""})
    assert resp.status_code == 422
    assert "company_name" in resp.json()["errors"]


@pytest.mark.asyncio
async def test_settings_blank_fields_clear_values(client):
    # The settings form submits untouched fields as empty strings.
    resp = await client.put("/api/company-settings", json={"company_email": "", "company_website": " "})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["company_email"] == ""
    assert data["company_website"] == ""
    assert data["company_name"] == "Acme Logistics"


@pytest.mark.asyncio
async def test_settings_bad_email(client):
    resp = await client.put("/api/company-settings", json={"company_email": "nope"})
    assert resp.status_code == 422
    assert "company_email" in resp.json()["errors"]


@pytest.mark.asyncio
async def test_team_add_list_remove(client, admin):
    resp = await client.post("/api/team-members", json={"email": "grace@acme.example.com"})
    assert resp.status_code == 201
    member = resp.json()["data"]
    assert member["name"] == "grace"
    assert member["role"] == "admin"
    assert member["api_token"]

    listed = (await client.get("/api/team-members")).json()
    assert [m["email"] for m in listed["data"]] == [admin["email"], "grace@acme.example.com"]
    assert "api_token" not in listed["data"][0]

    resp = await client.delete(f"/api/team-members/{member['id']}")
    assert resp.json()["data"] == {"deleted": True, "id": member["id"]}
    assert (await client.get("/api/team-members")).json()["meta"]["total"] == 1


@pytest.mark.asyncio
async def test_new_member_token_works(anon_client, client):
    member = (await client.post("/api/team-members", json={"email": "grace@acme.example.com"})).json()["data"]
    resp = await anon_client.get("/api/profile", headers={"Authorization": f"Bearer {member['api_token']}"})
    assert resp.json()["data"]["email"] == "grace@acme.example.com"


@pytest.mark.asyncio
async def test_team_duplicate_email(client, admin):
    resp = await client.post("/api/team-members", json={"email": admin["email"]})
    assert resp.status_code == 422
    assert resp.json()["errors"]["email"] == ["The email has already been taken."]


@pytest.mark.asyncio
async def test_cannot_remove_self(client, admin):
    resp = await client.delete(f"/api/team-members/{admin['id']}")
    assert resp.status_code == 422
    assert resp.json()["error"] == "You cannot remove yourself"


@pytest.mark.asyncio
async def test_cannot_remove_other_company_member(client, other_company):
    resp = await client.delete(f"/api/team-members/{other_company['user']['id']}")
    assert resp.status_code == 403
    assert (await client.delete("/api/team-members/9999")).status_code == 404


@pytest.mark.asyncio
async def test_profile_read_and_update(client, admin):
    data = (await client.get("/api/profile")).json()["data"]
    assert data == {
        "id": admin["id"], "name": "Ada Admin", "email": admin["email"], "role": "admin",
        "company_id": admin["company_id"], "created_at": admin["created_at"],
    }

    resp = await client.put("/api/profile", json={"name": "Ada L.", "email": admin["email"]})
    assert resp.json()["data"]["name"] == "Ada L."


@pytest.mark.asyncio
async def test_profile_email_taken(client, other_company):
    resp = await client.put("/api/profile", json={"name": "Ada", "email": other_company["user"]["email"]})
    assert resp.status_code == 422
    assert "email" in resp.json()["errors"]
