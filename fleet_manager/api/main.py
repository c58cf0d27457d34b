"""Builds the fleet API application."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import fleet_manager.config as cfg

from .. import __version__
from .config import ApiSettings
from .deps.providers import get_fleet_store, get_job_store, get_settings
from .errors import register_error_handlers
from .routers.logs import setup_log_buffer, teardown_log_buffer

logger = logging.getLogger(__name__)

_FORMATS = {
    "json": '{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
    "structured": "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
}


def configure_logging(settings: ApiSettings) -> None:
    """Root handler at the server's log level, laid out per ``LOG_FORMAT``."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=_FORMATS[cfg.LOG_FORMAT],
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def _report_config() -> None:
    issues = cfg.validate_config()
    for issue in issues:
        log = logger.error if issue.get("level") == "ERROR" else logger.warning
        log("Config: %s", issue.get("message", ""))
    if not issues:
        logger.info("Config: no issues found")


@asynccontextmanager
async def _lifespan(app: FastAPI):
    settings: ApiSettings = app.state.settings
    configure_logging(settings)
    setup_log_buffer()
    _report_config()

    fleet_store, job_store = get_fleet_store(), get_job_store()
    await fleet_store.initialize()
    await job_store.initialize()
    logger.info(
        "Fleet API %s listening on %s:%s (fleet db %s, job db %s)",
        __version__, settings.host, settings.port, settings.db_path, settings.job_db_path,
    )
    try:
        yield
    finally:
        await job_store.close()
        await fleet_store.close()
        logger.info("Fleet API stopped")
        teardown_log_buffer()


def _add_cors(app: FastAPI, cors_origins: str) -> None:
    origins = [o.strip() for o in cors_origins.split(",") if o.strip()]
    # Browsers refuse credentials with a wildcard origin.
    wildcard = "*" in origins
    if wildcard:
        logger.warning("CORS origins include '*'; credentialed requests will be refused")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=not wildcard,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def create_app(settings: ApiSettings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title="Fleet Manager API",
        description="Vehicles, drivers, trips, fuel, maintenance, issues and expenses for fleet companies.",
        version=__version__,
        lifespan=_lifespan,
    )
    app.state.settings = settings
    _add_cors(app, settings.cors_origins)
    register_error_handlers(app)

    from .routers import all_routers

    for router in all_routers():
        app.include_router(router)
    return app


def run_server() -> None:
    """``python -m fleet_manager.api.main``"""
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run_server()
