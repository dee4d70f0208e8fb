"""Settings read from the environment (and .env, if present)."""
import os
from pathlib import Path
from typing import Dict, Optional, Union

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DOWNLOADS_DIR = "./downloads"
DEFAULT_ARCHIVE_DELETE_DELAY = 5.0
DEFAULT_MAX_WORKERS = 4
DEFAULT_PUSH_QUEUE_SIZE = 256


def env_truthy(value: Optional[str], *, default: bool = False) -> bool:
    """Parse common truthy/falsey strings from environment variables."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "f", "no", "n", "off"}:
        return False
    return default


def _env_number(name: str, default: Union[int, float], cast=float):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw)
    except ValueError:
        return default
    return value if value >= 0 else default


def get_downloads_dir() -> Path:
    """Root directory for per-job scratch directories and finished archives."""
    return Path(os.getenv("DOWNLOADS_DIR", DEFAULT_DOWNLOADS_DIR))


def get_archive_delete_delay() -> float:
    """Seconds to keep an archive on disk after it has been served."""
    return _env_number("ARCHIVE_DELETE_DELAY", DEFAULT_ARCHIVE_DELETE_DELAY)


def get_max_workers() -> int:
    workers = _env_number("MAX_WORKERS", DEFAULT_MAX_WORKERS, cast=int)
    return workers or DEFAULT_MAX_WORKERS


def get_push_queue_size() -> int:
    """Frames a push-channel listener may leave unread before it is dropped."""
    size = _env_number("PUSH_QUEUE_SIZE", DEFAULT_PUSH_QUEUE_SIZE, cast=int)
    return size if size > 0 else DEFAULT_PUSH_QUEUE_SIZE


def get_ytdlp_quiet() -> bool:
    return env_truthy(os.getenv("YTDLP_QUIET"), default=True)


def get_ffmpeg_location() -> Optional[str]:
    return os.getenv("FFMPEG_LOCATION") or None


def get_server_config() -> Dict[str, Union[str, int]]:
    """uvicorn bind address."""
    return {
        "host": os.getenv("HOST", "0.0.0.0"),
        "port": int(_env_number("PORT", 8000, cast=int)),
    }
