"""Tests for the run_seed.py and run_compute_mpg.py command-line scripts."""
from __future__ import annotations

import sqlite3
import sys

import pytest

import run_compute_mpg
import run_seed


@pytest.mark.asyncio
async def test_seed_creates_company_and_admin(tmp_path):
    db = str(tmp_path / "seed.db")
    token = await run_seed.seed(db, "Acme Haulage", "ops@acme.example.com", demo=False)

    conn = sqlite3.connect(db)
    try:
        name, = conn.execute("SELECT name FROM companies").fetchone()
        email, role, stored = conn.execute("SELECT email, role, api_token FROM users").fetchone()
        vehicles, = conn.execute("SELECT COUNT(*) FROM vehicles").fetchone()
    finally:
        conn.close()
    assert name == "Acme Haulage"
    assert (email, role, stored) == ("ops@acme.example.com", "admin", token)
    assert vehicles == 0


@pytest.mark.asyncio
async def test_seed_demo_data(tmp_path):
    db = str(tmp_path / "seed.db")
    await run_seed.seed(db, "Demo Fleet", "admin@example.com", demo=True)

    conn = sqlite3.connect(db)
    try:
        counts = {
            table: conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
            for table in ("vehicles", "drivers", "fuel_fillups")
        }
        with_mpg, = conn.execute("SELECT COUNT(*) FROM fuel_fillups WHERE mpg IS NOT NULL").fetchone()
        roles = [r[0] for r in conn.execute("SELECT role FROM users ORDER BY id")]
    finally:
        conn.close()
    assert counts == {"vehicles": 3, "drivers": 2, "fuel_fillups": 15}
    # The first fillup of each vehicle has no previous reading.
    assert with_mpg == 12
    assert roles == ["admin", "driver", "driver"]


@pytest.mark.asyncio
async def test_seed_refuses_existing_email(tmp_path):
    db = str(tmp_path / "seed.db")
    await run_seed.seed(db, "Demo Fleet", "admin@example.com", demo=False)
    with pytest.raises(SystemExit):
        await run_seed.seed(db, "Other Fleet", "admin@example.com", demo=False)


def test_compute_mpg_missing_db(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["run_compute_mpg.py", "--db", str(tmp_path / "nope.db")])
    assert run_compute_mpg.main() == 1
    assert "Database not found" in capsys.readouterr().err


def test_compute_mpg_updates_fillups(fleet_db_path, monkeypatch, capsys):
    conn = sqlite3.connect(str(fleet_db_path))
    now = "2026-01-01T00:00:00+00:00"
    for n, (date, odo) in enumerate((("2026-01-01", 1000), ("2026-01-08", 1250)), start=1):
        conn.execute(
            "INSERT INTO fuel_fillups (id, company_id, vehicle_id, gallons, cost, odometer_reading, "
            "fillup_date, created_at, updated_at) VALUES (?, 1, 1, 10, 40, ?, ?, ?, ?)",
            (n, odo, date, now, now),
        )
    conn.commit()
    conn.close()

    monkeypatch.setattr(sys, "argv", ["run_compute_mpg.py", "--db", str(fleet_db_path), "--quiet"])
    assert run_compute_mpg.main() == 0
    assert "Updated MPG on 1 fillups across 1 vehicles" in capsys.readouterr().out

    conn = sqlite3.connect(str(fleet_db_path))
    mpg, = conn.execute("SELECT mpg FROM fuel_fillups WHERE id = 2").fetchone()
    conn.close()
    assert mpg == 25.0
