#!/usr/bin/env python3
"""
Create a company with an admin user and print the admin's API token.

Usage:
    python3 run_seed.py                                       # "Demo Fleet", admin@example.com
    python3 run_seed.py --company-name "Acme Haulage" --admin-email ops@acme.example.com
    python3 run_seed.py --demo                                # Also add vehicles, drivers and fillups
    python3 run_seed.py --db /path/to/fleet.db
"""
import argparse
import asyncio
import datetime as dt
import logging
import sys

from fleet_manager.config import DB_PATH
from fleet_manager.fuel import compute_mpg, cost_per_gallon
from fleet_manager.store import FleetStore, new_api_token

logger = logging.getLogger("fleet_manager.seed")

DEMO_VEHICLES = [
    {"name": "Truck 1", "make": "Volvo", "model": "FH16", "year": 2021, "type": "Truck", "fuel_type": "diesel"},
    {"name": "Van 1", "make": "Ford", "model": "Transit", "year": 2022, "type": "Van", "fuel_type": "gasoline"},
    {"name": "Bus 1", "make": "Mercedes", "model": "Citaro", "year": 2019, "type": "Bus", "fuel_type": "diesel"},
]

DEMO_DRIVERS = [
    {"name": "Alex Morgan", "phone": "555-0101"},
    {"name": "Sam Rivera", "phone": "555-0102"},
]

FILLUPS_PER_VEHICLE = 5


async def _seed_demo(store: FleetStore, company_id: int, slug: str) -> None:
    """Vehicles, drivers, and a run of fillups with increasing odometer readings."""
    today = dt.date.today()
    drivers = []
    for i, attrs in enumerate(DEMO_DRIVERS, start=1):
        account = await store.create_user(
            company_id, attrs["name"], f"driver{i}.{slug}@example.com", role="driver", api_token=new_api_token()
        )
        drivers.append(await store.insert("drivers", {
            "company_id": company_id,
            "user_id": account["id"],
            "license_number": f"{slug.upper()}-DL-{i:04d}",
            "license_expiry": (today + dt.timedelta(days=365 * 3)).isoformat(),
            "phone": attrs["phone"],
            "status": "active",
        }))

    for i, attrs in enumerate(DEMO_VEHICLES, start=1):
        driver = drivers[(i - 1) % len(drivers)]
        vehicle = await store.insert("vehicles", {
            **attrs,
            "company_id": company_id,
            "license_plate": f"{slug.upper()}-{i:03d}",
            "status": "active",
            "mileage": 10000.0 * i,
            "driver_id": driver["id"] if i <= len(drivers) else None,
        })
        odometer = vehicle["mileage"]
        previous = None
        for n in range(FILLUPS_PER_VEHICLE):
            gallons = 20.0 + 2 * n
            cost = round(gallons * 3.9, 2)
            odometer += 180.0 + 15 * n
            await store.insert("fuel_fillups", {
                "company_id": company_id,
                "vehicle_id": vehicle["id"],
                "driver_id": driver["id"],
                "gallons": gallons,
                "cost": cost,
                "cost_per_gallon": cost_per_gallon(cost, gallons),
                "odometer_reading": odometer,
                "mpg": compute_mpg(previous, odometer, gallons),
                "fillup_date": (today - dt.timedelta(days=7 * (FILLUPS_PER_VEHICLE - n))).isoformat(),
            })
            previous = odometer
    logger.info("Seeded %d vehicles and %d drivers", len(DEMO_VEHICLES), len(drivers))


async def seed(db_path: str, company_name: str, admin_email: str, demo: bool) -> str:
    store = FleetStore(db_path)
    await store.initialize()
    try:
        if await store.value_exists("users", "email", admin_email):
            raise SystemExit(f"A user with email {admin_email} already exists")
        company = await store.create_company(company_name)
        admin = await store.create_user(company["id"], admin_email.split("@", 1)[0], admin_email, role="admin")
        logger.info("Created company %s (%s) with admin %s", company["id"], company_name, admin_email)
        if demo:
            slug = "".join(ch for ch in company_name.lower() if ch.isalnum())[:8] or "fleet"
            await _seed_demo(store, company["id"], f"{slug}{company['id']}")
        return admin["api_token"]
    finally:
        await store.close()


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed a fleet company and admin user")
    parser.add_argument("--company-name", default="Demo Fleet")
    parser.add_argument("--admin-email", default="admin@example.com")
    parser.add_argument("--demo", action="store_true", help="Add demo vehicles, drivers and fillups")
    parser.add_argument("--db", default=str(DB_PATH), help=f"Fleet database (default: {DB_PATH})")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    token = asyncio.run(seed(args.db, args.company_name, args.admin_email, args.demo))
    print(f"API token for {args.admin_email}:\n{token}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
