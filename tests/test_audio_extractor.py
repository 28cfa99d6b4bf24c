"""
Tests for the ffmpeg audio extractor.
"""

import base64
import subprocess
import pytest
from pathlib import Path
from unittest.mock import patch, MagicMock

from lecture_summarizer.core.audio_extractor import AudioExtractor
from lecture_summarizer.utils.error_handling import AudioExtractionError


def fake_run(audio_bytes=b"mp3-data", duration="125.5"):
    """Build a subprocess.run replacement for ffprobe and ffmpeg calls."""
    def run(command, **kwargs):
        if "ffprobe" in command[0]:
            return MagicMock(stdout=f"{duration}\n", returncode=0)
        # ffmpeg writes its output to the path before the trailing -y
        Path(command[-2]).write_bytes(audio_bytes)
        return MagicMock(returncode=0)
    return run


@pytest.fixture
def extractor(tmp_path):
    return AudioExtractor(work_dir=tmp_path)


def test_extract_uses_speech_settings(extractor, tmp_path):
    """The ffmpeg command produces mono 16kHz 64kbps MP3."""
    source = tmp_path / "lecture.mp4"
    source.write_bytes(b"video")

    with patch("lecture_summarizer.core.audio_extractor.subprocess.run") as mock_run:
        target = extractor.extract(source)

    command = mock_run.call_args[0][0]
    assert command == [
        "ffmpeg", "-i", str(source), "-vn", "-ac", "1", "-ar", "16000",
        "-b:a", "64k", "-f", "mp3", str(tmp_path / "lecture.mp3"), "-y",
    ]
    assert target == tmp_path / "lecture.mp3"
    assert mock_run.call_args[1]["timeout"] == 300


def test_extract_from_bytes(extractor, tmp_path):
    video = b"v" * 1000

    with patch("lecture_summarizer.core.audio_extractor.subprocess.run", side_effect=fake_run(b"a" * 100)):
        result = extractor.extract_from_bytes(video, "lecture.mov")

    assert base64.b64decode(result.audio) == b"a" * 100
    assert result.mime_type == "audio/mp3"
    assert result.original_size == 1000
    assert result.compressed_size == 100
    assert result.compression_ratio == "90.0"
    assert result.duration == 125.5
    assert result.file_size_mb == "0.00"
    assert result.needs_file_api is False
    # Temporary files are cleaned up
    assert list(tmp_path.iterdir()) == []


def test_large_audio_needs_file_api(extractor):
    big_audio = b"a" * (16 * 1024 * 1024)

    with patch("lecture_summarizer.core.audio_extractor.subprocess.run", side_effect=fake_run(big_audio)):
        result = extractor.extract_from_bytes(b"v" * 10, "lecture.mp4")

    assert result.needs_file_api is True
    assert result.file_size_mb == "16.00"


def test_unknown_duration_is_zero(extractor, tmp_path):
    with patch("lecture_summarizer.core.audio_extractor.subprocess.run",
               side_effect=subprocess.CalledProcessError(1, "ffprobe")):
        assert extractor.probe_duration(tmp_path / "missing.mp4") == 0.0


def test_missing_ffmpeg(extractor, tmp_path):
    with patch("lecture_summarizer.core.audio_extractor.subprocess.run", side_effect=FileNotFoundError()):
        with pytest.raises(AudioExtractionError) as exc_info:
            extractor.extract(tmp_path / "lecture.mp4")

    assert "FFmpeg is not installed" in exc_info.value.message
    assert exc_info.value.fallback_to_client is True
    assert exc_info.value.status_code == 500


def test_ffmpeg_failure_cleans_up(extractor, tmp_path):
    def run(command, **kwargs):
        if "ffprobe" in command[0]:
            return MagicMock(stdout="10\n")
        raise subprocess.CalledProcessError(1, command, stderr=b"Invalid data found")

    with patch("lecture_summarizer.core.audio_extractor.subprocess.run", side_effect=run):
        with pytest.raises(AudioExtractionError) as exc_info:
            extractor.extract_from_bytes(b"not a video", "broken.mp4")

    assert "Invalid data found" in exc_info.value.message
    assert list(tmp_path.iterdir()) == []


def test_ffmpeg_timeout(extractor, tmp_path):
    with patch("lecture_summarizer.core.audio_extractor.subprocess.run",
               side_effect=subprocess.TimeoutExpired("ffmpeg", 300)):
        with pytest.raises(AudioExtractionError, match="timed out"):
            extractor.extract(tmp_path / "lecture.mp4")
