"""SQLite-backed persistence for fleet records."""
from .database import FleetStore, new_api_token, utc_now
from .schema import COMPANY_TABLES, SCHEMA_STATEMENTS, SOFT_DELETE_TABLES

__all__ = [
    "COMPANY_TABLES",
    "FleetStore",
    "SCHEMA_STATEMENTS",
    "SOFT_DELETE_TABLES",
    "new_api_token",
    "utc_now",
]
