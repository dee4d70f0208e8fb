"""yt-dlp wrapper: look up a URL, list its encodings, download one of them."""
import logging
import os
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yt_dlp
from pydantic import BaseModel
from yt_dlp.utils import DownloadError

from ytzip.config import get_ffmpeg_location, get_ytdlp_quiet
from ytzip.errors import ExtractionError, NoMatchingEncoding

from .archiver import format_file_size

_logger = logging.getLogger("ytzip")
_ytdlp_logger = logging.getLogger("ytzip.yt_dlp")

ProgressCallback = Callable[[int, int], None]

QUALITY_HEIGHTS: Dict[str, Optional[int]] = {
    "1080p": 1080,
    "720p": 720,
    "480p": 480,
    "360p": 360,
    "best": None,
}

AUDIO_CONTAINER = {"mp4": "m4a", "webm": "webm"}

_FORMAT_UNAVAILABLE = "requested format is not available"


class Encoding(BaseModel):
    """One retrievable variant of a video."""

    format_id: str
    container: str
    quality: str
    approx_size: Optional[str] = None


@dataclass
class DownloadResult:
    title: str
    file_path: Path
    size_bytes: int


def sanitize_title(title: Optional[str]) -> str:
    """Keep word characters, whitespace and dashes; fall back to 'video'."""
    cleaned = re.sub(r"[^\w\s-]", "", title or "").strip()
    return cleaned or "video"


def build_format_selector(fmt: str, quality: str) -> str:
    """Translate a (container, quality tag) request into a yt-dlp format spec."""
    if fmt == "mp3":
        return "bestaudio/best"
    if fmt not in AUDIO_CONTAINER:
        raise ValueError(f"Unsupported format: {fmt}")
    if quality not in QUALITY_HEIGHTS:
        raise ValueError(f"Unsupported quality: {quality}")

    height = QUALITY_HEIGHTS[quality]
    cap = f"[height<={height}]" if height else ""
    audio_ext = AUDIO_CONTAINER[fmt]
    return f"bestvideo[ext={fmt}]{cap}+bestaudio[ext={audio_ext}]/best[ext={fmt}]{cap}"


def _base_opts() -> Dict[str, Any]:
    quiet = get_ytdlp_quiet()
    opts: Dict[str, Any] = {
        "quiet": quiet,
        "no_warnings": quiet,
        "noplaylist": True,
        "logger": _ytdlp_logger,
    }
    ffmpeg = get_ffmpeg_location()
    if ffmpeg:
        opts["ffmpeg_location"] = ffmpeg
    return opts


def get_video_info(url: str) -> Dict[str, Any]:
    """Metadata for ``url`` without downloading anything."""
    opts = _base_opts()
    opts["skip_download"] = True
    _logger.debug("yt-dlp get_info url=%s", url)
    try:
        with yt_dlp.YoutubeDL(opts) as ydl:
            info = ydl.extract_info(url, download=False)
            return ydl.sanitize_info(info) or {}
    except DownloadError as exc:
        raise ExtractionError(str(exc)) from exc


def list_encodings(url: str) -> List[Encoding]:
    """Available encodings: container, quality tag and approximate size."""
    info = get_video_info(url)
    encodings = []
    for f in info.get("formats") or []:
        ext = f.get("ext")
        if not ext or ext == "mhtml":
            continue
        if f.get("vcodec") == "none":
            quality = "audio"
        elif f.get("height"):
            quality = f"{f['height']}p"
        else:
            quality = f.get("format_note") or "unknown"
        size = f.get("filesize") or f.get("filesize_approx")
        encodings.append(
            Encoding(
                format_id=str(f.get("format_id", "")),
                container=ext,
                quality=quality,
                approx_size=format_file_size(int(size)) if size else None,
            )
        )
    return encodings


def _progress_hook(on_progress: ProgressCallback) -> Callable[[Dict[str, Any]], None]:
    def hook(d: Dict[str, Any]) -> None:
        if d.get("status") != "downloading":
            return
        downloaded = d.get("downloaded_bytes") or 0
        total = d.get("total_bytes") or d.get("total_bytes_estimate") or 0
        on_progress(int(downloaded), int(total))

    return hook


def _downloaded_file(info: Dict[str, Any], output_dir: Path) -> Path:
    for item in info.get("requested_downloads") or []:
        path = item.get("filepath") or item.get("filename")
        if path and os.path.exists(path):
            return Path(path)
    files = sorted((p for p in output_dir.iterdir() if p.is_file()), key=lambda p: p.stat().st_mtime, reverse=True)
    if not files:
        raise ExtractionError("Download finished but no output file was written")
    return files[0]


def download_encoding(
    url: str,
    output_dir: Path,
    fmt: str,
    quality: str,
    on_progress: Optional[ProgressCallback] = None,
) -> DownloadResult:
    """Download the encoding matching ``fmt``/``quality`` into ``output_dir``.

    Blocking; run it on a worker thread. ``on_progress(downloaded, total)`` is called from
    that thread as bytes arrive (``total`` is 0 while unknown).
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    info = get_video_info(url)
    title = sanitize_title(info.get("title"))

    ydl_opts = _base_opts()
    ydl_opts.update(
        {
            "outtmpl": str(output_dir / f"{title}.%(ext)s"),
            "format": build_format_selector(fmt, quality),
            "progress_hooks": [_progress_hook(on_progress)] if on_progress else [],
        }
    )
    if fmt == "mp3":
        ydl_opts["postprocessors"] = [
            {"key": "FFmpegExtractAudio", "preferredcodec": "mp3", "preferredquality": "192"}
        ]
    else:
        ydl_opts["merge_output_format"] = fmt

    _logger.info("yt-dlp download start url=%s output_dir=%s fmt=%s quality=%s", url, output_dir, fmt, quality)
    start = time.monotonic()
    try:
        with yt_dlp.YoutubeDL(ydl_opts) as ydl:
            result = ydl.extract_info(url, download=True) or {}
    except DownloadError as exc:
        if _FORMAT_UNAVAILABLE in str(exc).lower():
            raise NoMatchingEncoding() from exc
        raise ExtractionError(str(exc)) from exc

    path = _downloaded_file(result, output_dir)
    elapsed_ms = int((time.monotonic() - start) * 1000)
    _logger.info("yt-dlp download done url=%s file=%s elapsed_ms=%d", url, path.name, elapsed_ms)
    return DownloadResult(title=title, file_path=path, size_bytes=path.stat().st_size)
