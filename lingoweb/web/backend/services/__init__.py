"""Service layer for the web backend.

Services wrap the core pipeline to provide
a clean interface for API endpoints.
"""

from .job_manager import JobManager, Job, JobStatus, JobType
from .page_service import PageService, SessionNotFoundError

__all__ = [
    "JobManager",
    "Job",
    "JobStatus",
    "JobType",
    "PageService",
    "SessionNotFoundError",
]
