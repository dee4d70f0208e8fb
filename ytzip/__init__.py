"""ytzip: fetch a video with yt-dlp, zip it, and push progress to the browser."""

__version__ = "0.1.0"
