"""
Helper utility functions for the lecture summarizer application.
"""

import os
import re
import time
import random
import string
import datetime
from pathlib import Path
from typing import Optional


def sanitize_filename(filename: str) -> str:
    """
    Sanitize a string to be used as a filename.

    Args:
        filename: The filename to sanitize

    Returns:
        Sanitized filename
    """
    # Remove invalid characters
    sanitized = re.sub(r'[\\/*?:"<>|]', "_", filename)
    # Replace spaces with underscores
    sanitized = sanitized.replace(" ", "_")
    # Limit length
    if len(sanitized) > 100:
        sanitized = sanitized[:100]
    return sanitized


def get_timestamp() -> str:
    """
    Get the current timestamp in a readable format.

    Returns:
        Formatted timestamp string
    """
    return time.strftime("%Y%m%d_%H%M%S")


def today_stamp() -> str:
    """Return today's date as YYYY-MM-DD."""
    return datetime.date.today().isoformat()


def generate_id(length: int = 9) -> str:
    """Generate a short random identifier for jobs and history items."""
    alphabet = string.ascii_lowercase + string.digits
    return "".join(random.choices(alphabet, k=length))


def ensure_dir(directory: str) -> None:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        directory: Directory path to ensure exists
    """
    os.makedirs(directory, exist_ok=True)


def get_file_extension(filepath: str) -> str:
    """
    Get the extension of a file.

    Args:
        filepath: Path to the file

    Returns:
        File extension (without the dot)
    """
    return Path(filepath).suffix.lstrip('.')


def strip_extension(filename: str) -> str:
    """Drop the last extension from a filename, if any."""
    return re.sub(r'\.[^/.]+$', '', filename)


def format_duration(seconds: float) -> str:
    """Format a duration in seconds as m:ss."""
    seconds = int(seconds)
    mins, secs = divmod(seconds, 60)
    return f"{mins}:{secs:02d}"


def format_timestamp(seconds: float) -> str:
    """Format a transcript offset in seconds as mm:ss."""
    mins, secs = divmod(int(seconds), 60)
    return f"{mins:02d}:{secs:02d}"


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """
    Truncate text to a maximum length.

    Args:
        text: Text to truncate
        max_length: Maximum length
        suffix: Suffix to add if truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix


YOUTUBE_URL_PATTERNS = [
    r"^(https?://)?(www\.)?youtube\.com/watch\?v=[\w-]+",
    r"^(https?://)?(www\.)?youtu\.be/[\w-]+",
    r"^(https?://)?(www\.)?youtube\.com/shorts/[\w-]+",
]


def is_valid_youtube_url(url: str) -> bool:
    """Check a URL against the watch, youtu.be and shorts forms."""
    return any(re.match(pattern, url or "") for pattern in YOUTUBE_URL_PATTERNS)


def extract_video_id(url: str) -> Optional[str]:
    """Extract the video ID from a YouTube URL."""
    patterns = [
        r"(?:v=|\/)([0-9A-Za-z_-]{11}).*",
        r"(?:embed\/)([0-9A-Za-z_-]{11})",
        r"(?:watch\?v=)([0-9A-Za-z_-]{11})",
    ]

    for pattern in patterns:
        match = re.search(pattern, url)
        if match:
            return match.group(1)

    return None
