"""
Tests for the YouTube downloader module.
"""

import base64
import pytest
from unittest.mock import patch, MagicMock

from lecture_summarizer.models.schemas import YouTubeDownloadConfig, YouTubeAudio
from lecture_summarizer.core.youtube_downloader import YouTubeDownloader, create_downloader
from lecture_summarizer.utils.error_handling import YouTubeDownloadError


@pytest.fixture
def mock_youtube():
    """Fixture to mock the YouTube class."""
    with patch('lecture_summarizer.core.youtube_downloader.YouTube') as mock_yt:
        # Configure the mock YouTube instance
        mock_yt_instance = mock_yt.return_value
        mock_yt_instance.title = "Linear Algebra Lecture 1"
        mock_yt_instance.length = 754

        # Mock streams
        mock_yt_instance.streams = MagicMock()
        mock_audio_stream = MagicMock()
        mock_audio_stream.mime_type = "audio/webm"
        mock_audio_stream.stream_to_buffer.side_effect = lambda buffer: buffer.write(b"audio-bytes")
        mock_yt_instance.streams.filter.return_value.order_by.return_value.last.return_value = mock_audio_stream

        yield mock_yt


@pytest.fixture
def download_config():
    """Fixture to create a download configuration."""
    return YouTubeDownloadConfig(url="https://www.youtube.com/watch?v=V3TUEeB0kW0")


def test_download_audio_bytes(mock_youtube, download_config):
    """Audio is streamed into memory and returned as base64."""
    downloader = YouTubeDownloader(download_config)
    audio = downloader.download_audio_bytes()

    assert isinstance(audio, YouTubeAudio)
    assert audio.title == "Linear Algebra Lecture 1"
    assert audio.duration == 754
    assert audio.mime_type == "audio/webm"
    assert base64.b64decode(audio.audio) == b"audio-bytes"

    # Highest bitrate audio-only stream
    mock_yt = mock_youtube.return_value
    mock_yt.streams.filter.assert_called_once_with(only_audio=True)
    mock_yt.streams.filter.return_value.order_by.assert_called_once_with('abr')


def test_rejects_videos_over_30_minutes(mock_youtube, download_config):
    mock_youtube.return_value.length = 1801

    downloader = YouTubeDownloader(download_config)
    with pytest.raises(YouTubeDownloadError) as exc_info:
        downloader.download_audio_bytes()

    assert exc_info.value.status_code == 400
    assert "30 minutes" in exc_info.value.message


def test_exactly_30_minutes_is_allowed(mock_youtube, download_config):
    mock_youtube.return_value.length = 1800

    audio = YouTubeDownloader(download_config).download_audio_bytes()
    assert audio.duration == 1800


def test_no_audio_track(mock_youtube, download_config):
    mock_youtube.return_value.streams.filter.return_value.order_by.return_value.last.return_value = None

    with pytest.raises(YouTubeDownloadError, match="No audio track found"):
        YouTubeDownloader(download_config).download_audio_bytes()


def test_stream_failure_is_wrapped(mock_youtube, download_config):
    stream = mock_youtube.return_value.streams.filter.return_value.order_by.return_value.last.return_value
    stream.stream_to_buffer.side_effect = RuntimeError("connection reset")

    with pytest.raises(YouTubeDownloadError, match="connection reset"):
        YouTubeDownloader(download_config).download_audio_bytes()


@pytest.mark.parametrize("url", [
    "https://www.youtube.com/watch?v=V3TUEeB0kW0",
    "https://youtu.be/V3TUEeB0kW0?si=-InVol0JhtWji-6R",
    "youtube.com/shorts/V3TUEeB0kW0",
])
def test_create_downloader_accepts_youtube_urls(mock_youtube, url):
    assert isinstance(create_downloader(url), YouTubeDownloader)


def test_create_downloader_rejects_other_urls(mock_youtube):
    with pytest.raises(YouTubeDownloadError) as exc_info:
        create_downloader("https://vimeo.com/12345")

    assert exc_info.value.status_code == 400
    mock_youtube.assert_not_called()
