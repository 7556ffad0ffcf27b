"""Job status router."""

from fastapi import APIRouter, HTTPException, status

from ..dependencies import JobManagerDep
from ..models.responses import JobResponse

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("", response_model=list[JobResponse])
def list_jobs(
    job_manager: JobManagerDep,
    session_id: str | None = None,
) -> list[JobResponse]:
    """List all jobs, optionally filtered by session."""
    return [JobResponse(**job.to_dict()) for job in job_manager.list_jobs(session_id=session_id)]


@router.get("/{job_id}", response_model=JobResponse)
def get_job(
    job_id: str,
    job_manager: JobManagerDep,
) -> JobResponse:
    """Get job status."""
    job = job_manager.get_job(job_id)
    if not job:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Job not found: {job_id}",
        )
    return JobResponse(**job.to_dict())


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_job(
    job_id: str,
    job_manager: JobManagerDep,
) -> None:
    """Cancel a running job.

    The job's cycle keeps running but its result is ignored once a newer
    submission or a reset supersedes it.
    """
    job = job_manager.get_job(job_id)
    if not job:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Job not found: {job_id}",
        )

    if not job.status.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot cancel job with status: {job.status.value}",
        )

    job_manager.cancel_job(job_id)
