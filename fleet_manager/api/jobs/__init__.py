"""SQLite-backed job queue for long-running fleet maintenance tasks."""
from .models import JobRecord, JobStatus, JobType
from .store import JobStore
from .runner import JobCancelled, JobQueueFullError, JobRunner

__all__ = [
    "JobCancelled",
    "JobQueueFullError",
    "JobRecord",
    "JobRunner",
    "JobStatus",
    "JobStore",
    "JobType",
]
