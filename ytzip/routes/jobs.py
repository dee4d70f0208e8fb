"""Job routes"""
import logging
import os
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import FileResponse, JSONResponse
from starlette.background import BackgroundTask

from ytzip.config import get_archive_delete_delay
from ytzip.services import runner
from ytzip.state import JobStatus, state

from .schemas import JobRequest

router = APIRouter()
_logger = logging.getLogger("ytzip")


@router.post("/jobs", response_class=JSONResponse)
async def submit_job(request: JobRequest):
    """
    Create a job and start downloading in the background.
    """
    job = state.add_job(request.url, request.format, request.quality)
    runner.start_job(job.id)
    return {"jobId": job.id, "status": "started"}


@router.get("/jobs", response_class=JSONResponse)
async def list_jobs(status: Optional[JobStatus] = Query(None, description="Only jobs in this status")):
    return [job.to_public() for job in state.list_jobs(status)]


@router.get("/jobs/{job_id}", response_class=JSONResponse)
async def get_job(job_id: int):
    job = state.get_job(job_id)
    if not job:
        _logger.info("Job not found job_id=%s", job_id)
        raise HTTPException(status_code=404, detail="Job not found")
    return job.to_public()


@router.get("/jobs/{job_id}/archive", response_class=FileResponse)
async def get_archive(job_id: int):
    """
    Stream the finished archive; it is deleted shortly after the response ends.
    """
    job = state.get_job(job_id)
    if not job or job.status != JobStatus.completed or not job.zip_path:
        _logger.info("Archive not ready job_id=%s status=%s", job_id, job.status.value if job else None)
        raise HTTPException(status_code=404, detail="Download not ready")

    if not os.path.exists(job.zip_path):
        _logger.info("Archive missing on disk job_id=%s path=%s", job_id, job.zip_path)
        raise HTTPException(status_code=404, detail="File not found")

    async def cleanup() -> None:
        runner.schedule_deletion(job.zip_path, get_archive_delete_delay())

    _logger.info("Serving archive job_id=%s path=%s", job_id, job.zip_path)
    return FileResponse(
        path=job.zip_path,
        filename=f"{job.file_name or 'download'}.zip",
        media_type="application/zip",
        background=BackgroundTask(cleanup),
    )
