"""Tests for archive creation and size formatting."""

import os
import zipfile
from pathlib import Path

import pytest

from ytzip.errors import ArchiveError
from ytzip.services.archiver import archive_path_for, create_archive, format_file_size


@pytest.mark.parametrize(
    "size,expected",
    [
        (0, "0 Bytes"),
        (512, "512 Bytes"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (1024 * 1024, "1 MB"),
        (int(2.25 * 1024 * 1024), "2.25 MB"),
        (5 * 1024 ** 3, "5 GB"),
        (1024 ** 4, "1024 GB"),
    ],
)
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected


def test_archive_path_for(temp_dir: Path):
    assert archive_path_for(temp_dir, "My Video", 3) == temp_dir / "My Video_3.zip"


def test_create_archive_zips_and_removes_source(temp_dir: Path):
    source = temp_dir / "download_1"
    (source / "sub").mkdir(parents=True)
    (source / "Clip.mp4").write_bytes(b"video" * 100)
    (source / "sub" / "notes.txt").write_text("hello")
    zip_path = temp_dir / "Clip_1.zip"

    size = create_archive(source, zip_path)

    assert size == zip_path.stat().st_size
    assert not source.exists()
    with zipfile.ZipFile(zip_path) as zf:
        assert sorted(zf.namelist()) == ["Clip.mp4", "sub/notes.txt"]
        assert zf.read("Clip.mp4") == b"video" * 100
        assert zf.getinfo("Clip.mp4").compress_type == zipfile.ZIP_DEFLATED


def test_create_archive_failure_raises_archive_error(temp_dir: Path):
    source = temp_dir / "download_2"
    source.mkdir()
    (source / "a.mp3").write_bytes(b"abc")
    blocker = temp_dir / "not-a-dir"
    blocker.write_text("x")

    with pytest.raises(ArchiveError):
        create_archive(source, blocker / "out.zip")

    assert source.exists()


def test_create_archive_accepts_pre_1980_mtime(temp_dir: Path):
    source = temp_dir / "download_3"
    source.mkdir()
    old = source / "old.mp4"
    old.write_bytes(b"vintage")
    os.utime(old, (0, 0))

    zip_path = temp_dir / "old_3.zip"
    size = create_archive(source, zip_path)

    assert size == zip_path.stat().st_size
    with zipfile.ZipFile(zip_path) as zf:
        assert zf.read("old.mp4") == b"vintage"
        assert zf.getinfo("old.mp4").date_time[0] == 1980


def test_create_archive_value_error_leaves_no_partial_zip(temp_dir: Path, monkeypatch):
    source = temp_dir / "download_4"
    source.mkdir()
    (source / "a.mp3").write_bytes(b"abc")

    def bad_write(self, *args, **kwargs):
        raise ValueError("ZIP does not support timestamps before 1980")

    monkeypatch.setattr(zipfile.ZipFile, "write", bad_write)
    zip_path = temp_dir / "a_4.zip"

    with pytest.raises(ArchiveError, match="1980"):
        create_archive(source, zip_path)

    assert not zip_path.exists()
    assert source.exists()
