"""
Shared fixtures and test utilities.
"""

import os
import tempfile
from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import pytest
from httpx import ASGITransport, AsyncClient

# Set test environment variables before importing main
os.environ.update({
    "DOWNLOADS_DIR": tempfile.mkdtemp(),
    "ARCHIVE_DELETE_DELAY": "0",
    "LOG_LEVEL": "DEBUG",
})

import main
from ytzip.errors import ExtractionError
from ytzip.notify import notifier
from ytzip.services import runner
from ytzip.services.downloader import DownloadResult
from ytzip.state import State, state

SAMPLE_PAYLOAD = b"\x00\x01fake-media-bytes" * 256


@pytest.fixture
def temp_dir() -> Generator[Path]:
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def downloads_dir(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point DOWNLOADS_DIR at a per-test directory."""
    root = temp_dir / "downloads"
    root.mkdir()
    monkeypatch.setenv("DOWNLOADS_DIR", str(root))
    return root


@pytest.fixture(autouse=True)
def reset_state() -> Generator[None]:
    """Reset the global job store and listener registry between tests."""
    state.clear()
    notifier.clear()
    runner._background.clear()
    yield
    state.clear()
    notifier.clear()


@pytest.fixture
def job_state() -> State:
    """Provide a fresh, unshared State instance."""
    return State()


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Provide an async HTTP client for testing the FastAPI app."""
    transport = ASGITransport(app=main.app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def no_runner(monkeypatch: pytest.MonkeyPatch) -> List[int]:
    """Accept jobs without running them; returns the ids that would have started."""
    started: List[int] = []
    monkeypatch.setattr(runner, "start_job", started.append)
    return started


@pytest.fixture
def fake_download(monkeypatch: pytest.MonkeyPatch) -> List[Tuple[str, str, str]]:
    """Replace yt-dlp with a function that writes a small file and reports progress."""
    calls: List[Tuple[str, str, str]] = []

    def fake(
        url: str,
        output_dir: Path,
        fmt: str,
        quality: str,
        on_progress: Optional[Callable[[int, int], None]] = None,
    ) -> DownloadResult:
        calls.append((url, fmt, quality))
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        total = len(SAMPLE_PAYLOAD)
        if on_progress:
            for done in (0, total // 4, total // 2, total):
                on_progress(done, total)
        path = output_dir / f"Sample Video.{fmt}"
        path.write_bytes(SAMPLE_PAYLOAD)
        return DownloadResult(title="Sample Video", file_path=path, size_bytes=total)

    monkeypatch.setattr(runner, "download_encoding", fake)
    return calls


@pytest.fixture
def failing_download(monkeypatch: pytest.MonkeyPatch) -> None:
    """Replace yt-dlp with a function that writes partial output, then fails."""

    def fake(url, output_dir, fmt, quality, on_progress=None):
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        (output_dir / "partial.part").write_bytes(b"abc")
        if on_progress:
            on_progress(10, 100)
        raise ExtractionError("ERROR: [youtube] abc123: Video unavailable")

    monkeypatch.setattr(runner, "download_encoding", fake)


@pytest.fixture
def sample_video_url() -> str:
    """Provide a sample video URL for testing."""
    return "https://www.youtube.com/watch?v=abc123"


@pytest.fixture
def sample_video_info() -> dict:
    """Provide sample video info response."""
    return {
        "id": "dQw4w9WgXcQ",
        "title": "Sample Video",
        "uploader": "Test Channel",
        "duration": 213,
        "webpage_url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "formats": [
            {
                "format_id": "sb0",
                "ext": "mhtml",
                "format_note": "storyboard",
            },
            {
                "format_id": "137",
                "ext": "mp4",
                "height": 1080,
                "width": 1920,
                "vcodec": "avc1.640028",
                "acodec": "none",
                "filesize": 1572864,
            },
            {
                "format_id": "140",
                "ext": "m4a",
                "vcodec": "none",
                "acodec": "mp4a.40.2",
                "filesize_approx": 3500000,
            },
            {
                "format_id": "18",
                "ext": "mp4",
                "vcodec": "avc1.42001E",
                "acodec": "mp4a.40.2",
                "format_note": "360p",
            },
        ],
    }
