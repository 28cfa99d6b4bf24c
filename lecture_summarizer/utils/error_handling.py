"""
Centralized error handling for the application.
"""

from typing import Optional, Dict, Any
import json

from lecture_summarizer.config import config
from lecture_summarizer.utils.logger import logging


class LectureSummarizerError(Exception):
    """Base error carrying the HTTP status the API should answer with."""

    status_code = 500
    fallback_to_client = False

    def __init__(self, message: str, status_code: Optional[int] = None,
                 fallback_to_client: Optional[bool] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if fallback_to_client is not None:
            self.fallback_to_client = fallback_to_client

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, "fallback_to_client": self.fallback_to_client}


class MissingInputError(LectureSummarizerError):
    """Raised when audio data or an API key is missing from a request."""

    status_code = 400


class AudioExtractionError(LectureSummarizerError):
    """Raised when ffmpeg cannot produce the audio track.

    The dashboard may still fall back to converting on the client side.
    """

    fallback_to_client = True


class YouTubeDownloadError(LectureSummarizerError):
    """Raised for invalid URLs, over-long videos or failed downloads."""


class TranscriptionError(LectureSummarizerError):
    """Raised when the speech-to-text service fails."""


class SummarizationError(LectureSummarizerError):
    """Raised when Gemini fails to produce a summary."""


def log_diagnostic_info(context: Dict[str, Any]):
    """
    Log diagnostic information for debugging.

    Args:
        context: Dictionary of diagnostic information
    """
    if not config.DEBUG:
        return

    try:
        logging.info(f"Diagnostic info: {json.dumps(context, default=str)}")
    except (TypeError, ValueError) as e:
        logging.error(f"Error logging diagnostic info: {str(e)}")
