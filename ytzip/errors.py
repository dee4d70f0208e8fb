"""Domain exceptions raised while running a job."""


class YtZipError(Exception):
    """Base class for job execution errors."""


class ExtractionError(YtZipError):
    """yt-dlp could not resolve or download the video."""


class NoMatchingEncoding(ExtractionError):
    """None of the available encodings satisfies the requested format and quality."""

    def __init__(self, message: str = "No suitable format found"):
        super().__init__(message)


class ArchiveError(YtZipError):
    """Compressing the downloaded output failed."""


class InvalidTransition(YtZipError):
    """A job was asked to move to a status its current status cannot reach."""
