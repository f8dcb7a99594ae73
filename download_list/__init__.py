"""Queue media URLs over HTTP in Redis and download them in the background with yt-dlp."""

__version__ = "0.1.0"