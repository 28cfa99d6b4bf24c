"""
Module for transcribing lecture audio using Groq's Whisper API.
"""

import os
import base64
from pathlib import Path
from typing import Any, List, Optional

from groq import Groq

from lecture_summarizer.models.schemas import (
    TranscriptionConfig,
    TranscriptionResult,
    TranscriptSegment,
)
from lecture_summarizer.utils.error_handling import MissingInputError, TranscriptionError
from lecture_summarizer.utils.logger import logging


class AudioTranscriber:
    """Class to handle audio transcription operations."""

    def __init__(
        self, transcribe_config: Optional[TranscriptionConfig] = None, api_key: Optional[str] = None
    ):
        """
        Initialize the transcriber with API key.

        Args:
            transcribe_config: Model, language and format settings
            api_key: Groq API key (if None, will try to get from environment)
        """
        self.transcribe_config = transcribe_config or TranscriptionConfig()
        self.api_key = api_key or os.getenv("GROQ_API_KEY")
        if not self.api_key:
            raise MissingInputError(
                "A Whisper (Groq) API key is required. Set it in settings or the .env file."
            )

        self.client = Groq(api_key=self.api_key)

    def transcribe_bytes(self, audio_bytes: bytes, mime_type: str = "audio/mp3") -> TranscriptionResult:
        """
        Transcribe raw audio bytes.

        Args:
            audio_bytes: Encoded audio data
            mime_type: MIME type of the audio

        Returns:
            TranscriptionResult with text, segments and duration
        """
        if not audio_bytes:
            raise MissingInputError("Audio data is required")

        logging.info(f"Transcribing {len(audio_bytes)} bytes of {mime_type} audio")

        request: dict = {
            "file": ("audio.mp3", audio_bytes),
            "model": self.transcribe_config.model,
            "response_format": self.transcribe_config.response_format,
            "temperature": self.transcribe_config.temperature,
        }
        if self.transcribe_config.language:
            request["language"] = self.transcribe_config.language
        if self.transcribe_config.prompt:
            request["prompt"] = self.transcribe_config.prompt

        try:
            transcription = self.client.audio.transcriptions.create(**request)
        except Exception as e:
            logging.error(f"Whisper transcription error: {str(e)}")
            raise TranscriptionError(f"Transcription error: {str(e)}") from e

        result = TranscriptionResult(
            transcript=self._field(transcription, "text") or "",
            segments=self._segments(self._field(transcription, "segments")),
            duration=self._field(transcription, "duration"),
            language=self._field(transcription, "language"),
        )
        logging.info("Transcription complete.")
        return result

    def transcribe_base64(self, audio_b64: str, mime_type: str = "audio/mp3") -> TranscriptionResult:
        """Transcribe base64-encoded audio."""
        if not audio_b64:
            raise MissingInputError("Audio data is required")
        return self.transcribe_bytes(base64.b64decode(audio_b64), mime_type)

    def transcribe_file(self, audio_path: str) -> TranscriptionResult:
        """Transcribe an audio file on disk."""
        if not os.path.exists(audio_path) or not os.path.isfile(audio_path):
            raise FileNotFoundError(f"Audio file not found at {audio_path}")

        with open(audio_path, "rb") as audio_file:
            data = audio_file.read()
        return self.transcribe_bytes(data, f"audio/{Path(audio_path).suffix.lstrip('.') or 'mp3'}")

    @staticmethod
    def _field(obj: Any, key: str) -> Any:
        # verbose_json responses may arrive as objects or plain dicts
        if obj is None:
            return None
        if isinstance(obj, dict):
            return obj.get(key)
        return getattr(obj, key, None)

    @classmethod
    def _segments(cls, raw_segments: Any) -> List[TranscriptSegment]:
        segments = []
        for segment in raw_segments or []:
            segments.append(
                TranscriptSegment(
                    start=float(cls._field(segment, "start") or 0.0),
                    end=float(cls._field(segment, "end") or 0.0),
                    text=str(cls._field(segment, "text") or "").strip(),
                )
            )
        return segments
