#!/usr/bin/env python3
"""
Recompute stored MPG for fuel fillups from their odometer history.

Usage:
    python3 run_compute_mpg.py                  # Every company in the default database
    python3 run_compute_mpg.py --company 3      # One company only
    python3 run_compute_mpg.py --vehicle 12     # One vehicle only
    python3 run_compute_mpg.py --db /path/to/fleet.db
"""
import argparse
import logging
import sys
import time
from pathlib import Path

from fleet_manager.config import DB_PATH
from fleet_manager.fuel import recompute_mpg


def main() -> int:
    parser = argparse.ArgumentParser(description="Recompute fuel fillup MPG")
    parser.add_argument("--company", type=int, default=None, help="Limit to one company ID")
    parser.add_argument("--vehicle", type=int, default=None, help="Limit to one vehicle ID")
    parser.add_argument("--db", default=str(DB_PATH), help=f"Fleet database (default: {DB_PATH})")
    parser.add_argument("--quiet", action="store_true", help="Only print the summary")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if not Path(args.db).exists():
        print(f"Database not found: {args.db}", file=sys.stderr)
        return 1

    def _progress(pct: float, msg: str) -> None:
        if not args.quiet:
            print(f"  [{pct:6.1%}] {msg}")

    t0 = time.time()
    result = recompute_mpg(
        args.db,
        company_id=args.company,
        vehicle_id=args.vehicle,
        progress_callback=_progress,
    )
    elapsed = time.time() - t0
    print(
        f"Updated MPG on {result['processed']} fillups across "
        f"{result['vehicles']} vehicles in {elapsed:.2f}s"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
