"""
YouTube audio downloader module.
"""

import io
import base64

from pytubefix import YouTube
from pytubefix.cli import on_progress

from lecture_summarizer.models.schemas import YouTubeDownloadConfig, YouTubeAudio
from lecture_summarizer.utils.error_handling import YouTubeDownloadError
from lecture_summarizer.utils.logger import logging


class YouTubeDownloader:
    """Class to handle downloading the audio track of YouTube videos."""

    def __init__(self, config: YouTubeDownloadConfig):
        """
        Initialize the YouTube downloader with configuration.

        Args:
            config: Configuration for download operations
        """
        self.config = config
        self.yt = YouTube(config.url, on_progress_callback=on_progress)

    def _check_duration(self) -> int:
        duration = int(self.yt.length or 0)
        if duration > self.config.max_duration:
            raise YouTubeDownloadError(
                f"Videos longer than {self.config.max_duration // 60} minutes cannot be processed",
                status_code=400,
            )
        return duration

    def _get_audio_stream(self):
        """Pick the audio-only stream with the highest bitrate."""
        audio_stream = self.yt.streams.filter(only_audio=True).order_by('abr').last()
        if audio_stream is None:
            raise YouTubeDownloadError("No audio track found", status_code=400)
        return audio_stream

    def download_audio_bytes(self) -> YouTubeAudio:
        """
        Download the audio track into memory.

        Returns:
            YouTubeAudio with base64 data and the stream's MIME type
        """
        duration = self._check_duration()
        audio_stream = self._get_audio_stream()

        logging.info(f"Streaming audio: {self.yt.title}")
        buffer = io.BytesIO()
        try:
            audio_stream.stream_to_buffer(buffer)
        except Exception as e:
            logging.error(f"Error downloading audio: {str(e)}")
            raise YouTubeDownloadError(f"YouTube processing error: {str(e)}") from e

        audio_bytes = buffer.getvalue()
        logging.info(f"Downloaded {len(audio_bytes)} bytes of audio")

        return YouTubeAudio(
            title=self.yt.title,
            duration=duration,
            audio=base64.b64encode(audio_bytes).decode("ascii"),
            mime_type=getattr(audio_stream, "mime_type", None) or "audio/mp4",
        )


def create_downloader(url: str, **kwargs) -> YouTubeDownloader:
    """Validate the URL and build a downloader for it."""
    try:
        download_config = YouTubeDownloadConfig(url=url, **kwargs)
    except ValueError as e:
        raise YouTubeDownloadError("Invalid YouTube URL", status_code=400) from e
    return YouTubeDownloader(download_config)
