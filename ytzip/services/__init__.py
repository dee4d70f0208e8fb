from .archiver import archive_path_for, create_archive, format_file_size
from .downloader import (
    DownloadResult,
    Encoding,
    build_format_selector,
    download_encoding,
    get_video_info,
    list_encodings,
    sanitize_title,
)

__all__ = [
    "DownloadResult",
    "Encoding",
    "archive_path_for",
    "build_format_selector",
    "create_archive",
    "download_encoding",
    "format_file_size",
    "get_video_info",
    "list_encodings",
    "sanitize_title",
]
