"""Fleet manager API server, optionally serving the built SPA.

Usage:
    # Development (API only, frontend uses the Vite dev server):
    python run_server.py

    # Production (API + static frontend from build):
    python run_server.py --static

    # Custom host/port and database:
    python run_server.py --host 0.0.0.0 --port 9000 --db /var/lib/fleet/fleet.db --static
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

FRONTEND_DIST = Path(__file__).parent / "frontend" / "dist"


def _mount_spa(app, dist: Path = FRONTEND_DIST) -> None:
    """Serve a built frontend with an index.html fallback for client routes."""
    from fastapi import HTTPException
    from fastapi.responses import FileResponse
    from fastapi.staticfiles import StaticFiles

    if (dist / "assets").is_dir():
        app.mount("/assets", StaticFiles(directory=str(dist / "assets")), name="static-assets")

    @app.get("/{full_path:path}")
    async def spa_fallback(full_path: str):
        # Unknown API paths get a JSON 404, not the SPA page.
        if full_path.startswith("api/") or full_path in ("docs", "redoc", "openapi.json"):
            raise HTTPException(status_code=404, detail=f"Not found: /{full_path}")

        file_path = (dist / full_path).resolve()
        dist_root = dist.resolve()
        if file_path.is_relative_to(dist_root) and file_path.is_file():
            return FileResponse(str(file_path))

        return FileResponse(str(dist / "index.html"))


def main() -> None:
    parser = argparse.ArgumentParser(description="Fleet Manager API Server")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")
    parser.add_argument("--db", default=None, help="Fleet SQLite database (default: FLEET_DB_PATH or fleet.db)")
    parser.add_argument("--static", action="store_true", help="Serve frontend/dist as static files")
    parser.add_argument("--log-level", default="info", choices=["debug", "info", "warning", "error"])
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    import uvicorn

    # Settings are read from the environment by every provider, so CLI
    # values are exported before the app is imported.
    os.environ["FLEET_API_HOST"] = args.host
    os.environ["FLEET_API_PORT"] = str(args.port)
    os.environ["FLEET_API_LOG_LEVEL"] = args.log_level
    if args.db:
        # One variable feeds both the fleet config and the API settings.
        os.environ["FLEET_DB_PATH"] = args.db

    from fleet_manager.api.deps.providers import get_settings
    from fleet_manager.api.main import create_app

    settings = get_settings()
    app = create_app(settings)

    if args.static:
        if not FRONTEND_DIST.exists():
            logger.error(
                "Frontend build not found at %s. Run 'cd frontend && npm run build' first.",
                FRONTEND_DIST,
            )
            sys.exit(1)
        _mount_spa(app)
        logger.info("Serving frontend static files from %s", FRONTEND_DIST)

    logger.info("Starting Fleet Manager API on %s:%s", args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
