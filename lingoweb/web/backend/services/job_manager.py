"""Background jobs for translation cycles.

A submitted page runs in a thread pool so the HTTP request returns at once.
Every change to a job is pushed to the session's WebSocket subscribers.
Finished jobs are kept for ``retention_seconds`` and then dropped the next
time a job is submitted.
"""

import asyncio
import logging
import threading
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, TYPE_CHECKING

if TYPE_CHECKING:
    from ..websocket.manager import WebSocketManager

logger = logging.getLogger(__name__)

JobTask = Callable[["JobManager", str], dict[str, Any]]


class JobStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_active(self) -> bool:
        return self in (JobStatus.PENDING, JobStatus.RUNNING)


class JobType(str, Enum):
    TRANSLATION = "translation"


@dataclass
class Job:
    """One translation cycle running for a session."""

    id: str
    type: JobType
    session_id: str
    status: JobStatus = JobStatus.PENDING
    progress: float = 0.0
    message: str = ""
    result: dict[str, Any] | None = None
    error: str | None = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    _future: Future | None = field(default=None, repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "job_id": self.id,
            "type": self.type.value,
            "session_id": self.session_id,
            "status": self.status.value,
            "progress": self.progress,
            "message": self.message,
            "result": self.result,
            "error": self.error,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


class JobManager:
    """Runs translation jobs in a thread pool and tracks their status.

    Once a job is cancelled, later updates from its still-running task are
    ignored, so a superseded cycle never reports completion.
    """

    def __init__(self, max_workers: int = 4, retention_seconds: int = 3600):
        """Initialize the job manager.

        Args:
            max_workers: Jobs allowed to run at the same time.
            retention_seconds: How long finished jobs stay queryable.
        """
        self.retention_seconds = retention_seconds
        self._jobs: dict[str, Job] = {}
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=max_workers)
        self._ws_manager: "WebSocketManager | None" = None
        self._loop: asyncio.AbstractEventLoop | None = None

    def set_websocket_manager(self, ws_manager: "WebSocketManager") -> None:
        self._ws_manager = ws_manager

    def set_event_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    def submit_job(self, job_type: JobType, session_id: str, task: JobTask) -> str:
        """Queue ``task(job_manager, job_id)`` and return the new job's id.

        The task's return value becomes the job result. An exception marks
        the job failed with the exception text as its error.
        """
        pruned = self.prune_finished()
        if pruned:
            logger.debug("Dropped %d finished job(s)", pruned)

        job = Job(
            id=f"job_{uuid.uuid4().hex[:12]}",
            type=job_type,
            session_id=session_id,
            message="Job queued",
        )
        with self._lock:
            self._jobs[job.id] = job
        job._future = self._executor.submit(self._run, job.id, task)
        return job.id

    def _run(self, job_id: str, task: JobTask) -> dict[str, Any]:
        self.update_status(job_id, JobStatus.RUNNING, "Job started")
        try:
            result = task(self, job_id)
        except Exception as e:
            logger.error("Job %s failed: %s", job_id, e)
            self.update_status(job_id, JobStatus.FAILED, str(e), error=str(e))
            raise
        self.update_status(job_id, JobStatus.COMPLETED, "Job completed", result=result)
        return result

    def update_progress(self, job_id: str, progress: float, message: str) -> None:
        """Record progress, clamped to 0.0-1.0, for a job that is not cancelled."""
        self._change(job_id, progress=min(max(progress, 0.0), 1.0), message=message)

    def update_status(
        self,
        job_id: str,
        status: JobStatus,
        message: str,
        result: dict[str, Any] | None = None,
        error: str | None = None,
    ) -> None:
        """Move a job to a new status. A cancelled job keeps its status."""
        changes: dict[str, Any] = {"status": status, "message": message}
        if result is not None:
            changes.update(result=result, progress=1.0)
        if error is not None:
            changes["error"] = error
        self._change(job_id, **changes)

    def _change(self, job_id: str, **changes: Any) -> None:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None or job.status == JobStatus.CANCELLED:
                return
            for name, value in changes.items():
                setattr(job, name, value)
            job.updated_at = datetime.now()
            self._broadcast_update(job)

    def _broadcast_update(self, job: Job) -> None:
        if self._ws_manager and self._loop:
            try:
                asyncio.run_coroutine_threadsafe(
                    self._ws_manager.broadcast_job_update(job),
                    self._loop,
                )
            except RuntimeError:
                # Event loop already closed
                logger.debug("Dropped job update for %s", job.id)

    def get_job(self, job_id: str) -> Job | None:
        with self._lock:
            return self._jobs.get(job_id)

    def list_jobs(self, session_id: str | None = None) -> list[Job]:
        """Jobs newest first, optionally only those of one session."""
        with self._lock:
            jobs = [
                job for job in self._jobs.values()
                if session_id is None or job.session_id == session_id
            ]
        return sorted(jobs, key=lambda j: j.created_at, reverse=True)

    def cancel_job(self, job_id: str) -> bool:
        """Cancel a pending or running job.

        A running task is not interrupted; whatever it reports afterwards is
        ignored.

        Returns:
            True if the job was active and is now cancelled.
        """
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None or not job.status.is_active:
                return False
            if job._future:
                job._future.cancel()
            job.status = JobStatus.CANCELLED
            job.message = "Job cancelled"
            job.updated_at = datetime.now()
            self._broadcast_update(job)
            return True

    def cancel_session_jobs(self, session_id: str) -> int:
        """Cancel every active job of a session and return how many there were."""
        with self._lock:
            job_ids = [
                job.id
                for job in self._jobs.values()
                if job.session_id == session_id and job.status.is_active
            ]
        return sum(1 for job_id in job_ids if self.cancel_job(job_id))

    def prune_finished(self, max_age_seconds: float | None = None) -> int:
        """Forget finished jobs last updated more than ``max_age_seconds`` ago.

        Defaults to ``retention_seconds``. Active jobs are never removed.

        Returns:
            Number of jobs removed.
        """
        if max_age_seconds is None:
            max_age_seconds = self.retention_seconds
        cutoff = datetime.now() - timedelta(seconds=max_age_seconds)
        with self._lock:
            expired = [
                job_id
                for job_id, job in self._jobs.items()
                if not job.status.is_active and job.updated_at < cutoff
            ]
            for job_id in expired:
                del self._jobs[job_id]
        return len(expired)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
