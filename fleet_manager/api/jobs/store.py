"""Job records persisted in their own SQLite file, apart from fleet data."""
from __future__ import annotations

import json
import uuid
from typing import Any, Dict, List, Optional

import aiosqlite

from .models import JobRecord, JobStatus

_SCHEMA = """
CREATE TABLE IF NOT EXISTS jobs (
    job_id           TEXT PRIMARY KEY,
    job_type         TEXT NOT NULL,
    company_id       INTEGER,
    status           TEXT NOT NULL DEFAULT 'queued',
    created_at       TEXT NOT NULL,
    started_at       TEXT,
    completed_at     TEXT,
    progress         REAL DEFAULT 0.0,
    progress_message TEXT DEFAULT '',
    params           TEXT DEFAULT '{}',
    result           TEXT,
    error            TEXT
)
"""

_JSON_COLUMNS = ("params", "result")


def _record(row: aiosqlite.Row) -> JobRecord:
    fields = dict(row)
    fields["params"] = json.loads(fields["params"] or "{}")
    fields["result"] = json.loads(fields["result"]) if fields["result"] else None
    return JobRecord(**fields)


class JobStore:
    """Lifecycle rows for background jobs, each tagged with its company."""

    def __init__(self, db_path: str = "fleet_jobs.db") -> None:
        self.db_path = db_path
        self._db: Optional[aiosqlite.Connection] = None

    async def initialize(self) -> None:
        if self._db is not None:
            return
        self._db = await aiosqlite.connect(self.db_path)
        self._db.row_factory = aiosqlite.Row
        await self._db.execute(_SCHEMA)
        await self._db.commit()

    async def close(self) -> None:
        if self._db is not None:
            await self._db.close()
            self._db = None

    async def _conn(self) -> aiosqlite.Connection:
        if self._db is None:
            await self.initialize()
        return self._db

    async def _write(self, sql: str, params: tuple | list) -> None:
        db = await self._conn()
        await db.execute(sql, params)
        await db.commit()

    async def create_job(
        self,
        job_type: str,
        params: Dict[str, Any] | None = None,
        company_id: Optional[int] = None,
    ) -> JobRecord:
        rec = JobRecord(
            job_id=uuid.uuid4().hex[:12],
            job_type=job_type,
            company_id=company_id,
            params=params or {},
        )
        await self._write(
            "INSERT INTO jobs (job_id, job_type, company_id, status, created_at, params) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (rec.job_id, job_type, company_id, rec.status.value, rec.created_at, json.dumps(rec.params)),
        )
        return rec

    async def get_job(self, job_id: str) -> Optional[JobRecord]:
        db = await self._conn()
        async with db.execute("SELECT * FROM jobs WHERE job_id = ?", (job_id,)) as cur:
            row = await cur.fetchone()
        return _record(row) if row is not None else None

    async def list_jobs(self, company_id: Optional[int] = None, limit: int = 50) -> List[JobRecord]:
        """Newest first; all companies when *company_id* is None."""
        db = await self._conn()
        if company_id is None:
            sql, params = "SELECT * FROM jobs ORDER BY created_at DESC LIMIT ?", (limit,)
        else:
            sql = "SELECT * FROM jobs WHERE company_id = ? ORDER BY created_at DESC LIMIT ?"
            params = (company_id, limit)
        async with db.execute(sql, params) as cur:
            return [_record(row) for row in await cur.fetchall()]

    async def update_status(self, job_id: str, status: JobStatus, **fields: Any) -> None:
        """Set *status* plus any of started_at, completed_at, result or error.

        Fields passed as None are left untouched.
        """
        changes: Dict[str, Any] = {"status": status.value}
        for column in ("started_at", "completed_at", "result", "error"):
            value = fields.get(column)
            if value is None:
                continue
            changes[column] = json.dumps(value) if column in _JSON_COLUMNS else value
        assignments = ", ".join(f"{column} = ?" for column in changes)
        await self._write(
            f"UPDATE jobs SET {assignments} WHERE job_id = ?",
            [*changes.values(), job_id],
        )

    async def update_progress(self, job_id: str, progress: float, message: str = "") -> None:
        """Record progress as a fraction between 0.0 and 1.0."""
        await self._write(
            "UPDATE jobs SET progress = ?, progress_message = ? WHERE job_id = ?",
            (progress, message, job_id),
        )

    async def cancel_job(self, job_id: str) -> bool:
        """Cancel a queued or running job; False if it is unknown or already over."""
        rec = await self.get_job(job_id)
        if rec is None or rec.finished:
            return False
        await self.update_status(job_id, JobStatus.cancelled)
        return True
