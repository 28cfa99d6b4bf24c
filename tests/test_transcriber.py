"""
Tests for the audio transcriber module.
"""

import base64
import pytest
from unittest.mock import patch, MagicMock, mock_open

from lecture_summarizer.models.schemas import TranscriptionConfig, TranscriptionResult
from lecture_summarizer.core.transcriber import AudioTranscriber
from lecture_summarizer.utils.error_handling import MissingInputError, TranscriptionError


@pytest.fixture
def mock_groq_client():
    """Fixture to mock the Groq client."""
    with patch('lecture_summarizer.core.transcriber.Groq') as mock_groq:
        mock_client = mock_groq.return_value

        # verbose_json response
        mock_response = MagicMock()
        mock_response.text = "今日は線形代数の講義です。"
        mock_response.segments = [
            {"id": 0, "start": 0.0, "end": 2.5, "text": " 今日は "},
            {"id": 1, "start": 65.2, "end": 70.0, "text": "線形代数の講義です。"},
        ]
        mock_response.duration = 70.0
        mock_response.language = "japanese"

        mock_client.audio.transcriptions.create.return_value = mock_response

        yield mock_client


def test_init_transcriber_uses_environment_key(mock_groq_client):
    transcriber = AudioTranscriber()
    assert transcriber.api_key == "test_groq_key"


def test_init_transcriber_requires_key(monkeypatch):
    monkeypatch.delenv("GROQ_API_KEY", raising=False)

    with pytest.raises(MissingInputError):
        AudioTranscriber()


def test_transcribe_bytes(mock_groq_client):
    transcriber = AudioTranscriber(api_key="request_key")
    result = transcriber.transcribe_bytes(b"mp3-bytes", "audio/mp3")

    assert isinstance(result, TranscriptionResult)
    assert result.transcript == "今日は線形代数の講義です。"
    assert result.duration == 70.0
    assert [s.text for s in result.segments] == ["今日は", "線形代数の講義です。"]
    assert result.segments[1].start == 65.2

    kwargs = mock_groq_client.audio.transcriptions.create.call_args[1]
    assert kwargs["file"] == ("audio.mp3", b"mp3-bytes")
    assert kwargs["model"] == "whisper-large-v3-turbo"
    assert kwargs["response_format"] == "verbose_json"
    assert kwargs["language"] == "ja"


def test_transcribe_without_language(mock_groq_client):
    transcriber = AudioTranscriber(TranscriptionConfig(language=None, prompt="Lecture"))
    transcriber.transcribe_bytes(b"mp3-bytes")

    kwargs = mock_groq_client.audio.transcriptions.create.call_args[1]
    assert "language" not in kwargs
    assert kwargs["prompt"] == "Lecture"


def test_transcribe_dict_response(mock_groq_client):
    mock_groq_client.audio.transcriptions.create.return_value = {
        "text": "hello",
        "segments": None,
    }

    result = AudioTranscriber().transcribe_bytes(b"mp3-bytes")

    assert result.transcript == "hello"
    assert result.segments == []
    assert result.duration is None


def test_transcribe_base64(mock_groq_client):
    audio_b64 = base64.b64encode(b"mp3-bytes").decode("ascii")
    AudioTranscriber().transcribe_base64(audio_b64, "audio/mp4")

    kwargs = mock_groq_client.audio.transcriptions.create.call_args[1]
    assert kwargs["file"] == ("audio.mp3", b"mp3-bytes")


def test_empty_audio_is_rejected(mock_groq_client):
    with pytest.raises(MissingInputError):
        AudioTranscriber().transcribe_bytes(b"")


def test_service_error_is_wrapped(mock_groq_client):
    mock_groq_client.audio.transcriptions.create.side_effect = RuntimeError("invalid api key")

    with pytest.raises(TranscriptionError, match="Transcription error: invalid api key"):
        AudioTranscriber().transcribe_bytes(b"mp3-bytes")


def test_transcribe_file(mock_groq_client):
    with patch("os.path.exists", return_value=True), \
            patch("os.path.isfile", return_value=True), \
            patch("builtins.open", mock_open(read_data=b"file-bytes")):
        AudioTranscriber().transcribe_file("/tmp/lecture.mp3")

    kwargs = mock_groq_client.audio.transcriptions.create.call_args[1]
    assert kwargs["file"] == ("audio.mp3", b"file-bytes")


def test_transcribe_missing_file(mock_groq_client):
    with pytest.raises(FileNotFoundError):
        AudioTranscriber().transcribe_file("/nonexistent/lecture.mp3")
