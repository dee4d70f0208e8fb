from .settings import (
    get_archive_delete_delay,
    get_downloads_dir,
    get_ffmpeg_location,
    get_max_workers,
    get_push_queue_size,
    get_server_config,
    get_ytdlp_quiet,
)

__all__ = [
    "get_archive_delete_delay",
    "get_downloads_dir",
    "get_ffmpeg_location",
    "get_max_workers",
    "get_push_queue_size",
    "get_server_config",
    "get_ytdlp_quiet",
]
