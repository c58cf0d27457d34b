"""Background execution of fleet jobs with progress streamed as SSE events."""
from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Callable, Dict, List, Optional

from .models import JobStatus
from .store import JobStore

logger = logging.getLogger(__name__)

# Events after which a subscriber stream closes.
_TERMINAL_EVENTS = ("done", "cancelled")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class JobCancelled(Exception):
    """Raised inside a job function once its cancel event is set."""


class JobQueueFullError(Exception):
    """Too many jobs are already queued or running."""


@dataclass
class _Handle:
    task: Optional[asyncio.Task] = None
    cancel_event: threading.Event = field(default_factory=threading.Event)
    # Set once the worker thread starts; from then on only the thread can end the job.
    started: bool = False


class JobRunner:
    """Runs job functions in worker threads.

    At most ``max_concurrent`` jobs run at once.  Jobs of the same company
    never overlap: each rewrites that company's fuel rows, so a second
    recompute waits for the first in submission order.
    """

    def __init__(self, store: JobStore, max_concurrent: int = 2, max_queued: int = 10) -> None:
        self._store = store
        self._slots = asyncio.Semaphore(max_concurrent)
        self._company_locks: Dict[Optional[int], asyncio.Lock] = {}
        self._handles: Dict[str, _Handle] = {}
        self._listeners: Dict[str, List[asyncio.Queue]] = {}
        self._max_queued = max_queued

    @property
    def pending_count(self) -> int:
        return len(self._handles)

    async def submit(
        self,
        job_id: str,
        fn: Callable[..., Any],
        *args: Any,
        company_id: Optional[int] = None,
        on_success: Optional[Callable[[Dict[str, Any]], None]] = None,
        **kwargs: Any,
    ) -> None:
        """Queue ``fn(*args, progress_callback=..., cancel_event=..., **kwargs)``.

        *fn* returns a JSON-serialisable dict, stored as the job result and
        handed to *on_success*.

        Raises
        ------
        JobQueueFullError
            If ``max_queued`` jobs are already pending.
        """
        if len(self._handles) >= self._max_queued:
            raise JobQueueFullError(f"Job queue full ({self._max_queued} pending). Try again later.")
        handle = _Handle()
        self._handles[job_id] = handle
        lock = self._company_locks.setdefault(company_id, asyncio.Lock())
        handle.task = asyncio.create_task(
            self._run(job_id, handle, lock, fn, args, kwargs, on_success)
        )

    async def _run(
        self,
        job_id: str,
        handle: _Handle,
        lock: asyncio.Lock,
        fn: Callable[..., Any],
        args: tuple,
        kwargs: Dict[str, Any],
        on_success: Optional[Callable[[Dict[str, Any]], None]],
    ) -> None:
        try:
            async with lock, self._slots:
                await self._store.update_status(job_id, JobStatus.running, started_at=_now())
                await self._emit(job_id, "started")
                loop = asyncio.get_running_loop()

                def report(pct: float, msg: str = "") -> None:
                    asyncio.run_coroutine_threadsafe(self._progress(job_id, pct, msg), loop)

                handle.started = True
                worker = asyncio.ensure_future(asyncio.to_thread(
                    fn, *args, progress_callback=report, cancel_event=handle.cancel_event, **kwargs
                ))
                try:
                    result = await asyncio.shield(worker) or {}
                except asyncio.CancelledError:
                    # Keep the company lock until the thread has stopped writing.
                    handle.cancel_event.set()
                    await asyncio.wait([worker])
                    raise
                if handle.cancel_event.is_set():
                    raise JobCancelled("Job cancelled by user")
            await self._store.update_status(job_id, JobStatus.succeeded, completed_at=_now(), result=result)
            await self._store.update_progress(job_id, 1.0, "Done")
            if on_success is not None:
                on_success(result)
            await self._emit(job_id, "completed", result=result)
        except (asyncio.CancelledError, JobCancelled):
            await self._store.update_status(job_id, JobStatus.cancelled, completed_at=_now())
            await self._emit(job_id, "cancelled")
        except Exception as exc:
            logger.exception("Job %s failed", job_id)
            await self._store.update_status(job_id, JobStatus.failed, completed_at=_now(), error=str(exc))
            await self._emit(job_id, "failed", error=str(exc))
        finally:
            self._handles.pop(job_id, None)
            await self._emit(job_id, "done")

    async def _progress(self, job_id: str, pct: float, msg: str) -> None:
        await self._store.update_progress(job_id, pct, msg)
        await self._emit(job_id, "progress", progress=pct, message=msg)

    async def cancel(self, job_id: str) -> bool:
        """Stop a job, or mark an unknown queued one cancelled.

        A job still waiting for its slot is cancelled outright.  A running
        one is signalled through its cancel event and ends when its thread
        returns, so the company lock is never released under a live writer.
        """
        handle = self._handles.get(job_id)
        if handle is None:
            return await self._store.cancel_job(job_id)
        handle.cancel_event.set()
        if not handle.started and handle.task is not None and not handle.task.done():
            handle.task.cancel()
        return True

    async def subscribe_events(self, job_id: str) -> AsyncGenerator[Dict[str, Any], None]:
        """Yield a job's events, starting with its current status, until it ends."""
        queue: asyncio.Queue = asyncio.Queue()
        self._listeners.setdefault(job_id, []).append(queue)
        try:
            rec = await self._store.get_job(job_id)
            if rec is not None:
                yield {"event": "status", "data": rec.model_dump()}
                if rec.finished and job_id not in self._handles:
                    yield {"event": "done", "job_id": job_id}
                    return
            while True:
                event = await queue.get()
                yield event
                if event["event"] in _TERMINAL_EVENTS:
                    break
        finally:
            listeners = self._listeners.get(job_id, [])
            if queue in listeners:
                listeners.remove(queue)
            if not listeners:
                self._listeners.pop(job_id, None)

    async def _emit(self, job_id: str, name: str, **payload: Any) -> None:
        event = {"event": name, "job_id": job_id, **payload}
        for queue in self._listeners.get(job_id, []):
            await queue.put(event)
