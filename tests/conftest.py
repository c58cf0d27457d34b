"""Shared test fixtures for the fleet_manager test suite."""
from __future__ import annotations

import sqlite3

import pytest


def pytest_sessionfinish(session, exitstatus):
    """Spawn a watchdog that force-exits if the process hangs at shutdown.

    aiosqlite connection threads and asyncio event loop cleanup can block
    interpreter exit.  This watchdog ensures pytest exits within a few
    seconds of test completion.
    """
    import os
    import threading
    import time

    def _watchdog():
        time.sleep(5)
        os._exit(exitstatus)

    t = threading.Thread(target=_watchdog, daemon=True)
    t.start()


# ── Database fixtures ────────────────────────────────────────────────


@pytest.fixture
def fleet_db_path(tmp_path):
    """A file-backed fleet database with the schema and one company."""
    from fleet_manager.store.schema import SCHEMA_STATEMENTS

    path = tmp_path / "fleet.db"
    conn = sqlite3.connect(str(path))
    for stmt in SCHEMA_STATEMENTS:
        conn.execute(stmt)
    now = "2026-01-01T00:00:00+00:00"
    conn.execute(
        "INSERT INTO companies (id, name, created_at, updated_at) VALUES (1, 'Acme', ?, ?)",
        (now, now),
    )
    conn.execute(
        "INSERT INTO vehicles (id, company_id, make, model, license_plate, status, created_at, updated_at) "
        "VALUES (1, 1, 'Ford', 'Transit', 'AC-001', 'active', ?, ?)",
        (now, now),
    )
    conn.commit()
    conn.close()
    return path


@pytest.fixture
async def fleet_store():
    """A fresh in-memory ``FleetStore`` with the full schema."""
    from fleet_manager.store import FleetStore

    store = FleetStore(":memory:")
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
async def company(fleet_store):
    return await fleet_store.create_company("Acme Logistics", email="ops@acme.example.com")


@pytest.fixture
async def admin(fleet_store, company):
    """Admin user of ``company``; its ``api_token`` authenticates the client."""
    return await fleet_store.create_user(company["id"], "Ada Admin", "ada@acme.example.com", role="admin")


@pytest.fixture
async def other_company(fleet_store):
    """A second company with its own admin and vehicle, for isolation tests."""
    company = await fleet_store.create_company("Rival Freight")
    user = await fleet_store.create_user(company["id"], "Rex Rival", "rex@rival.example.org", role="admin")
    vehicle = await fleet_store.insert("vehicles", {
        "company_id": company["id"],
        "make": "Scania",
        "model": "R450",
        "license_plate": "RV-001",
        "status": "active",
    })
    return {"company": company, "user": user, "vehicle": vehicle}


# ── API fixtures ─────────────────────────────────────────────────────

# Sent as X-Admin-Token to reach process-wide endpoints.
OPERATOR_TOKEN = "operator-secret"


class _InMemoryJobStore:
    """Lightweight in-memory job store for tests (avoids a second aiosqlite thread)."""

    def __init__(self):
        self._jobs = {}

    async def initialize(self):
        pass

    async def close(self):
        self._jobs.clear()

    async def create_job(self, job_type, params=None, company_id=None):
        import uuid
        from fleet_manager.api.jobs.models import JobRecord
        rec = JobRecord(
            job_id=uuid.uuid4().hex[:12], job_type=job_type, company_id=company_id, params=params or {}
        )
        self._jobs[rec.job_id] = rec
        return rec

    async def get_job(self, job_id):
        return self._jobs.get(job_id)

    async def list_jobs(self, company_id=None, limit=50):
        jobs = [j for j in self._jobs.values() if company_id is None or j.company_id == company_id]
        return jobs[:limit]

    async def update_status(self, job_id, status, **kwargs):
        rec = self._jobs.get(job_id)
        if rec:
            rec.status = status

    async def update_progress(self, job_id, progress, message=""):
        rec = self._jobs.get(job_id)
        if rec:
            rec.progress = progress
            rec.progress_message = message

    async def cancel_job(self, job_id):
        from fleet_manager.api.jobs.models import JobStatus
        rec = self._jobs.get(job_id)
        if rec and rec.status in (JobStatus.queued, JobStatus.running):
            rec.status = JobStatus.cancelled
            return True
        return False


@pytest.fixture
async def app(tmp_path, fleet_store):
    """Create a test FastAPI app bound to the per-test fleet store."""
    import fleet_manager.api.deps.providers as _prov
    from fleet_manager.api.config import ApiSettings
    from fleet_manager.api.jobs.runner import JobRunner
    from fleet_manager.api.main import create_app

    settings = ApiSettings(
        db_path=str(tmp_path / "fleet.db"),
        job_db_path=str(tmp_path / "test_jobs.db"),
        admin_token=OPERATOR_TOKEN,
    )

    store = _InMemoryJobStore()
    runner = JobRunner(store)

    # Tests only check the HTTP response (status=queued), not job execution.
    async def _noop_submit(job_id, fn, *args, **kwargs):
        pass

    runner.submit = _noop_submit

    _prov._fleet_store = fleet_store
    _prov._job_store = store
    _prov._job_runner = runner

    application = create_app(settings)
    application.dependency_overrides[_prov.get_settings] = lambda: settings
    yield application

    runner._handles.clear()
    _prov.reset()


@pytest.fixture
async def anon_client(app):
    """Async HTTP client without credentials."""
    from httpx import ASGITransport, AsyncClient

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as ac:
        yield ac


@pytest.fixture
async def client(app, admin):
    """Async HTTP client authenticated as the company admin."""
    from httpx import ASGITransport, AsyncClient

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
        headers={"Authorization": f"Bearer {admin['api_token']}"},
    ) as ac:
        yield ac


@pytest.fixture
async def vehicle(client):
    resp = await client.post("/api/vehicles", json={
        "name": "Van 7",
        "make": "Ford",
        "model": "Transit",
        "year": 2022,
        "license_plate": "AC-707",
        "type": "Van",
        "fuel_type": "diesel",
        "mileage": 12000,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


@pytest.fixture
async def driver(client):
    resp = await client.post("/api/drivers", json={
        "name": "Dana Driver",
        "email": "dana@acme.example.com",
        "phone": "555-0100",
        "license_number": "DL-100",
        "license_expiry": "2030-06-30",
    })
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


@pytest.fixture
def operator_headers():
    """Headers for endpoints that change the whole process, such as PATCH /api/config."""
    return {"X-Admin-Token": OPERATOR_TOKEN}
