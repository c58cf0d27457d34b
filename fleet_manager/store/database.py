"""Async SQLite persistence for fleet records."""
from __future__ import annotations

import logging
import secrets
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence

import aiosqlite

from .schema import SCHEMA_STATEMENTS, is_soft_delete

logger = logging.getLogger(__name__)


def utc_now() -> str:
    """ISO-8601 UTC timestamp at second resolution (sortable as text)."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def new_api_token() -> str:
    return secrets.token_urlsafe(45)


class FleetStore:
    """Async SQLite store for every fleet table.

    Rows are returned as plain dicts.  Soft-deletable tables (see
    ``schema.SOFT_DELETE_TABLES``) hide rows with ``deleted_at`` set from
    ``get``/``list`` and only stamp the column on ``delete``.
    """

    def __init__(self, db_path: str = "fleet.db") -> None:
        self.db_path = db_path
        self._db: Optional[aiosqlite.Connection] = None

    async def initialize(self) -> None:
        """Open the connection and create tables.  Safe to call twice."""
        if self._db is not None:
            return
        self._db = await aiosqlite.connect(self.db_path)
        self._db.row_factory = aiosqlite.Row
        await self._db.execute("PRAGMA foreign_keys = ON")
        for stmt in SCHEMA_STATEMENTS:
            await self._db.execute(stmt)
        await self._db.commit()
        logger.debug("Fleet store initialised at %s", self.db_path)

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    async def _conn(self) -> aiosqlite.Connection:
        if self._db is None:
            await self.initialize()
        return self._db

    # ── Raw SQL ──────────────────────────────────────────────────────

    async def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
        db = await self._conn()
        async with db.execute(sql, params) as cur:
            row = await cur.fetchone()
        return dict(row) if row is not None else None

    async def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        db = await self._conn()
        async with db.execute(sql, params) as cur:
            rows = await cur.fetchall()
        return [dict(r) for r in rows]

    async def fetch_value(self, sql: str, params: Sequence[Any] = ()) -> Any:
        db = await self._conn()
        async with db.execute(sql, params) as cur:
            row = await cur.fetchone()
        return row[0] if row is not None else None

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Run a write statement and commit.  Returns the affected row count."""
        db = await self._conn()
        cur = await db.execute(sql, params)
        await db.commit()
        return cur.rowcount

    # ── CRUD ─────────────────────────────────────────────────────────

    async def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a row, stamping timestamps, and return it as stored."""
        now = utc_now()
        row = {**values, "created_at": now, "updated_at": now}
        cols = list(row)
        db = await self._conn()
        cur = await db.execute(
            f"INSERT INTO {table} ({', '.join(cols)}) VALUES ({', '.join('?' for _ in cols)})",
            [row[c] for c in cols],
        )
        await db.commit()
        return await self.get(table, cur.lastrowid)

    async def update(self, table: str, record_id: int, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Update columns of one row and return the fresh row."""
        if values:
            sets = [f"{col} = ?" for col in values] + ["updated_at = ?"]
            vals: list = list(values.values()) + [utc_now(), record_id]
            await self.execute(f"UPDATE {table} SET {', '.join(sets)} WHERE id = ?", vals)
        return await self.get(table, record_id)

    async def get(self, table: str, record_id: int) -> Optional[Dict[str, Any]]:
        """Fetch a single row by ID."""
        sql = f"SELECT * FROM {table} WHERE id = ?"
        if is_soft_delete(table):
            sql += " AND deleted_at IS NULL"
        return await self.fetch_one(sql, (record_id,))

    async def get_many(self, table: str, ids: Iterable[int]) -> Dict[int, Dict[str, Any]]:
        """Fetch rows by ID, keyed by ID.  Missing IDs are absent from the result."""
        wanted = sorted({i for i in ids if i is not None})
        if not wanted:
            return {}
        rows = await self.fetch_all(
            f"SELECT * FROM {table} WHERE id IN ({', '.join('?' for _ in wanted)})", wanted
        )
        return {r["id"]: r for r in rows}

    async def list(
        self,
        table: str,
        company_id: int,
        filters: Optional[Dict[str, Any]] = None,
        order_by: str = "id DESC",
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        """List a company's rows, with optional equality filters."""
        where = ["company_id = ?"]
        vals: list = [company_id]
        for col, value in (filters or {}).items():
            if value is None:
                continue
            where.append(f"{col} = ?")
            vals.append(value)
        if is_soft_delete(table):
            where.append("deleted_at IS NULL")
        sql = f"SELECT * FROM {table} WHERE {' AND '.join(where)} ORDER BY {order_by}"
        if limit is not None:
            sql += " LIMIT ? OFFSET ?"
            vals.extend([limit, offset])
        return await self.fetch_all(sql, vals)

    async def delete(self, table: str, record_id: int) -> bool:
        """Delete a row (soft delete where the table supports it)."""
        if is_soft_delete(table):
            count = await self.execute(
                f"UPDATE {table} SET deleted_at = ? WHERE id = ? AND deleted_at IS NULL",
                (utc_now(), record_id),
            )
        else:
            count = await self.execute(f"DELETE FROM {table} WHERE id = ?", (record_id,))
        return count > 0

    # ── Lookups ──────────────────────────────────────────────────────

    async def value_exists(
        self, table: str, column: str, value: Any, exclude_id: Optional[int] = None
    ) -> bool:
        """True if another row already holds *value* in *column*."""
        if value is None:
            return False
        sql = f"SELECT 1 FROM {table} WHERE {column} = ?"
        vals: list = [value]
        if exclude_id is not None:
            sql += " AND id <> ?"
            vals.append(exclude_id)
        return await self.fetch_value(sql + " LIMIT 1", vals) is not None

    async def get_user_by_token(self, token: str) -> Optional[Dict[str, Any]]:
        return await self.fetch_one("SELECT * FROM users WHERE api_token = ?", (token,))

    async def create_company(self, name: str, **fields: Any) -> Dict[str, Any]:
        return await self.insert("companies", {"name": name, **fields})

    async def create_user(
        self,
        company_id: Optional[int],
        name: str,
        email: str,
        role: str = "admin",
        api_token: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self.insert("users", {
            "company_id": company_id,
            "name": name,
            "email": email,
            "role": role,
            "api_token": api_token or new_api_token(),
        })

    async def table_counts(self, tables: Iterable[str]) -> Dict[str, int]:
        out: Dict[str, int] = {}
        for table in tables:
            sql = f"SELECT COUNT(*) FROM {table}"
            if is_soft_delete(table):
                sql += " WHERE deleted_at IS NULL"
            out[table] = int(await self.fetch_value(sql) or 0)
        return out
