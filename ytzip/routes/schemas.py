"""Request models"""
import re
from typing import Literal

from pydantic import BaseModel, field_validator

SUPPORTED_URL_PATTERNS = [
    re.compile(r"^https?://(www\.)?youtube\.com/watch\?v=[\w-]+"),
    re.compile(r"^https?://youtu\.be/[\w-]+"),
    re.compile(r"^https?://(www\.)?youtube\.com/embed/[\w-]+"),
]

INVALID_URL_MESSAGE = "Must be a valid YouTube URL"


def is_supported_url(url: str) -> bool:
    return any(p.match(url) for p in SUPPORTED_URL_PATTERNS)


class JobRequest(BaseModel):
    """Body of POST /jobs."""

    url: str
    format: Literal["mp4", "mp3", "webm"]
    quality: Literal["1080p", "720p", "480p", "360p", "best"]

    @field_validator("url")
    @classmethod
    def check_url(cls, value: str) -> str:
        value = value.strip()
        if not is_supported_url(value):
            raise ValueError(INVALID_URL_MESSAGE)
        return value
