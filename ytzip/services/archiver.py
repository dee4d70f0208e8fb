"""Zip a job's scratch directory into a single archive."""
import logging
import shutil
from pathlib import Path
from zipfile import ZIP_DEFLATED, ZipFile

from ytzip.errors import ArchiveError

_logger = logging.getLogger("ytzip")

_SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


def format_file_size(size: int) -> str:
    """1024-based human size, e.g. ``1.5 MB``."""
    if size <= 0:
        return "0 Bytes"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[unit]}"


def archive_path_for(downloads_dir: Path, title: str, job_id: int) -> Path:
    return Path(downloads_dir) / f"{title}_{job_id}.zip"


def create_archive(source_dir: Path, zip_path: Path) -> int:
    """Write every file under ``source_dir`` into ``zip_path``, then remove ``source_dir``.

    Returns the archive size in bytes.
    """
    source_dir = Path(source_dir)
    zip_path = Path(zip_path)
    files = sorted(p for p in source_dir.rglob("*") if p.is_file())
    _logger.info("Creating zip source=%s zip_path=%s file_count=%d", source_dir, zip_path, len(files))

    try:
        zip_path.parent.mkdir(parents=True, exist_ok=True)
        # yt-dlp copies server mtimes, which can predate 1980
        with ZipFile(zip_path, "w", compression=ZIP_DEFLATED, compresslevel=9, strict_timestamps=False) as zf:
            for f in files:
                zf.write(f, arcname=f.relative_to(source_dir).as_posix())
    except (OSError, ValueError) as exc:
        if zip_path.is_file():
            zip_path.unlink()
        raise ArchiveError(f"Failed to create zip: {exc}") from exc

    size = zip_path.stat().st_size
    shutil.rmtree(source_dir, ignore_errors=True)
    _logger.debug("Removed scratch dir path=%s", source_dir)
    return size
