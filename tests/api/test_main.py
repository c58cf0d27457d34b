"""Tests for app factory and basic middleware."""
import pytest

from fleet_manager.api.config import ApiSettings
from fleet_manager.api.main import create_app


def test_create_app():
    app = create_app(ApiSettings(job_db_path=":memory:"))
    assert app.title == "Fleet Manager API"


def test_openapi_schema():
    app = create_app(ApiSettings(job_db_path=":memory:"))
    schema = app.openapi()
    assert "/api/health" in schema["paths"]
    assert "/api/vehicles/{vehicle_id}" in schema["paths"]


def test_routes_registered():
    app = create_app(ApiSettings(job_db_path=":memory:"))
    paths = {getattr(r, "path", None) for r in app.routes} | set(app.openapi()["paths"])
    expected = {
        "/api/health",
        "/api/dashboard",
        "/api/dashboard/chart",
        "/api/vehicles",
        "/api/vehicles/{vehicle_id}/fuel-economy",
        "/api/drivers",
        "/api/trips",
        "/api/fuel-fillups",
        "/api/fuel-fillups/recompute-mpg",
        "/api/services",
        "/api/inspections",
        "/api/issues",
        "/api/expenses",
        "/api/vehicle-locations",
        "/api/vehicle-locations/latest",
        "/api/company-settings",
        "/api/team-members",
        "/api/team-members/{user_id}",
        "/api/profile",
        "/api/jobs",
        "/api/logs",
        "/api/config",
    }
    for ep in expected:
        assert ep in paths, f"Missing route: {ep}"


@pytest.mark.asyncio
async def test_404_wrapped(client):
    resp = await client.get("/api/nonexistent")
    assert resp.status_code == 404
    assert resp.json()["ok"] is False


@pytest.mark.asyncio
async def test_cors_headers(client):
    resp = await client.options(
        "/api/health",
        headers={"Origin": "http://localhost:5173", "Access-Control-Request-Method": "GET"},
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "http://localhost:5173"


def test_log_tail_filters_by_minimum_level():
    import logging

    from fleet_manager.api.routers.logs import RecentLogHandler

    handler = RecentLogHandler(capacity=3)
    log = logging.getLogger("fleet_manager.tests.tail")
    log.addHandler(handler)
    log.setLevel(logging.DEBUG)
    try:
        log.debug("ignored")
        log.info("first")
        log.warning("second")
        log.error("third")
        log.info("fourth")
    finally:
        log.removeHandler(handler)

    assert [e["message"] for e in handler.tail(10)] == ["second", "third", "fourth"]
    assert [e["message"] for e in handler.tail(10, "warning")] == ["second", "third"]
    assert [e["message"] for e in handler.tail(1)] == ["fourth"]


@pytest.mark.asyncio
async def test_logs_endpoint_shows_only_own_company(client, anon_client, other_company, caplog):
    import logging

    from fleet_manager.api.routers.logs import setup_log_buffer, teardown_log_buffer

    caplog.set_level(logging.INFO, logger="fleet_manager")
    setup_log_buffer()
    try:
        created = await client.post("/api/vehicles", json={
            "make": "Ford", "model": "Transit", "license_plate": "LG-001",
        })
        vehicle_id = created.json()["data"]["id"]
        logging.getLogger("fleet_manager.tests").warning("disk nearly full")

        own = (await client.get("/api/logs")).json()["data"]
        rival = (await anon_client.get(
            "/api/logs", headers={"Authorization": f"Bearer {other_company['user']['api_token']}"},
        )).json()["data"]
    finally:
        teardown_log_buffer()

    messages = [e["message"] for e in own]
    assert any(m.startswith(f"Created vehicle {vehicle_id} for company") for m in messages)
    assert "disk nearly full" not in messages
    assert rival == []


def test_log_tail_by_company():
    import logging

    from fleet_manager.api.routers.logs import RecentLogHandler

    handler = RecentLogHandler()
    log = logging.getLogger("fleet_manager.tests.tenants")
    log.addHandler(handler)
    log.setLevel(logging.INFO)
    try:
        log.info("fillup for one", extra={"company_id": 1})
        log.info("fillup for two", extra={"company_id": 2})
        log.info("server started")
    finally:
        log.removeHandler(handler)

    assert [e["message"] for e in handler.tail(10, company_id=2)] == ["fillup for two"]
    assert len(handler.tail(10)) == 3


@pytest.fixture
def restore_root_logging():
    import logging

    root = logging.getLogger()
    level, handlers = root.level, root.handlers[:]
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_log_level_setting_drives_root_logger(restore_root_logging):
    import logging

    from fleet_manager.api.main import configure_logging

    configure_logging(ApiSettings(log_level="DEBUG"))
    assert restore_root_logging.level == logging.DEBUG
    configure_logging(ApiSettings(log_level="warning"))
    assert restore_root_logging.level == logging.WARNING


@pytest.mark.parametrize("layout, marker", [("structured", " | "), ("json", '"level":')])
def test_log_format_follows_config(restore_root_logging, monkeypatch, layout, marker):
    import fleet_manager.config as cfg
    from fleet_manager.api.main import configure_logging

    monkeypatch.setattr(cfg, "LOG_FORMAT", layout)
    configure_logging(ApiSettings(log_level="INFO"))
    assert marker in restore_root_logging.handlers[0].formatter._fmt


def test_settings_default_to_fleet_config(monkeypatch):
    import fleet_manager.config as cfg

    monkeypatch.delenv("FLEET_API_DB_PATH", raising=False)
    monkeypatch.delenv("FLEET_API_LOG_LEVEL", raising=False)
    settings = ApiSettings()
    assert settings.db_path == str(cfg.DB_PATH)
    assert settings.log_level == cfg.LOG_LEVEL

    monkeypatch.setattr(cfg, "DB_PATH", "/srv/fleet/fleet.db")
    assert ApiSettings().db_path == "/srv/fleet/fleet.db"
