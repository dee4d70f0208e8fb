"""Background job execution: download, zip, report."""
import asyncio
import functools
import logging
import os
import shutil
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Optional, Set

from ytzip.config import get_downloads_dir, get_max_workers
from ytzip.notify import notifier, progress_frame
from ytzip.state import Job, JobStatus, state

from .archiver import archive_path_for, create_archive, format_file_size
from .downloader import download_encoding

_logger = logging.getLogger("ytzip")

# Share of the progress bar spent on the download; zipping jumps to 90, completion to 100.
DOWNLOAD_PROGRESS_BUDGET = 80
ARCHIVING_PROGRESS = 90

_EXECUTOR: Optional[ThreadPoolExecutor] = None
_background: Set[asyncio.Task] = set()


def _get_executor() -> ThreadPoolExecutor:
    global _EXECUTOR
    if _EXECUTOR is None:
        _EXECUTOR = ThreadPoolExecutor(max_workers=get_max_workers(), thread_name_prefix="ytzip-worker")
    return _EXECUTOR


async def run_in_threadpool(func, *args, **kwargs):
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_get_executor(), functools.partial(func, *args, **kwargs))


def _track(task: asyncio.Task) -> asyncio.Task:
    _background.add(task)
    task.add_done_callback(_background.discard)
    return task


def scratch_dir_for(job_id: int) -> Path:
    return get_downloads_dir() / f"download_{job_id}"


def _publish(job: Optional[Job], error: Optional[str] = None) -> None:
    if job is not None:
        notifier.broadcast(progress_frame(job, error=error))


def download_progress(downloaded: int, total: int) -> Optional[int]:
    """Map transferred bytes onto the download share of the progress bar."""
    if total <= 0:
        return None
    return min(DOWNLOAD_PROGRESS_BUDGET, round(downloaded / total * DOWNLOAD_PROGRESS_BUDGET))


def _progress_reporter(job_id: int) -> Callable[[int, int], None]:
    last = 0

    def report(downloaded: int, total: int) -> None:
        nonlocal last
        progress = download_progress(downloaded, total)
        if progress is None or progress <= last:
            return
        job = state.update_job(job_id, progress=progress)
        if job is not None:
            last = job.progress
        _publish(job)

    return report


async def process_job(job_id: int) -> None:
    job = state.get_job(job_id)
    if job is None:
        _logger.warning("Process job skipped, job missing job_id=%s", job_id)
        return

    scratch = scratch_dir_for(job_id)
    _logger.info("Process job start job_id=%s url=%s format=%s quality=%s", job_id, job.url, job.format, job.quality)
    start = time.monotonic()
    try:
        _publish(state.update_job(job_id, JobStatus.downloading, progress=0))

        result = await run_in_threadpool(
            download_encoding,
            job.url,
            scratch,
            job.format,
            job.quality,
            _progress_reporter(job_id),
        )

        _publish(state.update_job(job_id, JobStatus.creating_zip, progress=ARCHIVING_PROGRESS))
        zip_path = archive_path_for(get_downloads_dir(), result.title, job_id)
        size = await run_in_threadpool(create_archive, scratch, zip_path)

        done = state.update_job(
            job_id,
            JobStatus.completed,
            progress=100,
            file_name=result.title,
            file_size=format_file_size(size),
            zip_path=str(zip_path),
        )
        _publish(done)
        _logger.info(
            "Process job completed job_id=%s zip_path=%s size=%s elapsed_ms=%d",
            job_id,
            zip_path,
            done.file_size if done else None,
            int((time.monotonic() - start) * 1000),
        )
    except Exception as exc:
        message = str(exc) or exc.__class__.__name__
        _logger.exception("Process job failed job_id=%s error=%s", job_id, message)
        failed = state.update_job(job_id, JobStatus.failed, error_message=message)
        _publish(failed, error=message)
        shutil.rmtree(scratch, ignore_errors=True)


def start_job(job_id: int) -> asyncio.Task:
    """Run ``process_job`` in the background on the current loop."""
    return _track(asyncio.create_task(process_job(job_id)))


async def _delete_later(path: Path, delay: float) -> None:
    await asyncio.sleep(delay)
    try:
        os.remove(path)
        _logger.info("Deleted served archive path=%s", path)
    except FileNotFoundError:
        _logger.debug("Archive already gone path=%s", path)
    except OSError:
        _logger.exception("Failed to delete archive path=%s", path)


def schedule_deletion(path: Path, delay: float) -> asyncio.Task:
    """Remove ``path`` after ``delay`` seconds without holding up the caller."""
    _logger.debug("Scheduled archive deletion path=%s delay=%s", path, delay)
    return _track(asyncio.create_task(_delete_later(Path(path), delay)))


async def wait_for_background() -> None:
    """Wait until every running job and pending deletion has finished."""
    while _background:
        await asyncio.gather(*list(_background), return_exceptions=True)
