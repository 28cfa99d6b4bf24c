"""
Module for summarizing lecture audio with Google Gemini.
"""

import os
import time
import uuid
import base64
import tempfile
from pathlib import Path
from typing import Callable, List, Optional

from google import genai
from google.genai import types

from lecture_summarizer.config import config
from lecture_summarizer.core.prompts import resolve_prompt
from lecture_summarizer.utils.error_handling import MissingInputError, SummarizationError
from lecture_summarizer.utils.retry import retry_with_exponential_backoff
from lecture_summarizer.utils.logger import logging

StatusCallback = Optional[Callable[[str], None]]


def _state_name(file_obj) -> str:
    state = getattr(file_obj, "state", None)
    return getattr(state, "name", None) or str(state or "")


class GeminiSummarizer:
    """Class to turn lecture audio into a Markdown summary."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = config.DEFAULT_SUMMARY_MODEL,
        max_retries: int = config.MAX_RETRIES,
        poll_interval: float = config.FILE_POLL_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the summarizer with API key.

        Args:
            api_key: Gemini API key (if None, will try to get from environment)
            model: Gemini model name
            max_retries: Attempts made on rate limit errors
            poll_interval: Seconds between File API state checks
            sleep: Sleep between File API state checks, replaceable in tests
        """
        self.api_key = api_key or os.getenv("GEMINI_API_KEY")
        if not self.api_key:
            raise MissingInputError("A Gemini API key is required. Set it in settings or the .env file.")

        self.model = model
        self.max_retries = max_retries
        self.poll_interval = poll_interval
        self.sleep = sleep
        self.client = genai.Client(api_key=self.api_key)
        logging.info(f"Initializing Gemini model: {self.model}")

    def _generate(self, contents: list, on_status: StatusCallback = None) -> str:
        def on_retry(attempt: int, wait_time: int):
            if on_status:
                on_status(
                    f"Rate limit reached. Retrying in {wait_time}s ({attempt}/{self.max_retries})..."
                )

        if on_status:
            on_status("Sending request to Gemini API...")

        try:
            response = retry_with_exponential_backoff(
                lambda: self.client.models.generate_content(model=self.model, contents=contents),
                self.max_retries,
                on_retry,
            )
        except Exception as e:
            logging.error(f"Gemini generation error: {str(e)}")
            raise SummarizationError(f"Gemini processing error: {str(e)}") from e
        return response.text

    def summarize_audio(
        self,
        audio_bytes: bytes,
        mime_type: str = "audio/mp3",
        prompt: Optional[str] = None,
        on_status: StatusCallback = None,
    ) -> str:
        """
        Summarize audio sent inline with the request.

        Args:
            audio_bytes: Encoded audio data
            mime_type: MIME type of the audio
            prompt: Custom prompt, the default one is used when blank
            on_status: Receives progress messages

        Returns:
            Markdown summary
        """
        if not audio_bytes:
            raise MissingInputError("Audio data is required")

        if on_status:
            on_status("Uploading audio...")

        audio_part = types.Part.from_bytes(data=audio_bytes, mime_type=mime_type or "audio/mp3")
        return self._generate([resolve_prompt(prompt), audio_part], on_status)

    def summarize_base64(
        self,
        audio_b64: str,
        mime_type: str = "audio/mp4",
        prompt: Optional[str] = None,
        on_status: StatusCallback = None,
    ) -> str:
        """
        Summarize base64-encoded audio, as returned by the YouTube endpoint.

        Large audio goes through the File API like any other input.
        """
        if not audio_b64:
            raise MissingInputError("Audio data is required")
        return self.summarize(base64.b64decode(audio_b64), mime_type or "audio/mp4", prompt, on_status=on_status)

    def summarize_with_file_api(
        self,
        audio_bytes: bytes,
        mime_type: str = "audio/mp3",
        prompt: Optional[str] = None,
        on_status: StatusCallback = None,
    ) -> str:
        """
        Summarize large audio by uploading it through the Gemini File API.

        The uploaded file and the local temp file are deleted afterwards.
        """
        if not audio_bytes:
            raise MissingInputError("Audio data is required")

        file_id = uuid.uuid4().hex
        temp_path = Path(tempfile.gettempdir()) / f"audio_{file_id}.mp3"
        temp_path.write_bytes(audio_bytes)

        try:
            if on_status:
                on_status("Uploading audio to Gemini File API...")
            uploaded = self.client.files.upload(
                file=str(temp_path),
                config=types.UploadFileConfig(
                    mime_type=mime_type or "audio/mp3",
                    display_name=f"audio_{file_id}",
                ),
            )

            remote = self.client.files.get(name=uploaded.name)
            while _state_name(remote) == "PROCESSING":
                if on_status:
                    on_status("Waiting for Gemini to process the file...")
                self.sleep(self.poll_interval)
                remote = self.client.files.get(name=uploaded.name)

            if _state_name(remote) == "FAILED":
                raise SummarizationError("File upload failed")

            file_part = types.Part.from_uri(
                file_uri=remote.uri, mime_type=remote.mime_type or mime_type
            )
            summary = self._generate([resolve_prompt(prompt), file_part], on_status)

            try:
                self.client.files.delete(name=remote.name)
            except Exception as e:
                logging.warning(f"Could not delete uploaded file {remote.name}: {e}")

            return summary
        except SummarizationError:
            raise
        except Exception as e:
            logging.error(f"Gemini File API error: {str(e)}")
            raise SummarizationError(f"Gemini processing error: {str(e)}") from e
        finally:
            try:
                os.unlink(temp_path)
            except OSError:
                pass

    def summarize(
        self,
        audio_bytes: bytes,
        mime_type: str = "audio/mp3",
        prompt: Optional[str] = None,
        use_file_api: Optional[bool] = None,
        on_status: StatusCallback = None,
    ) -> str:
        """Summarize audio, switching to the File API for large inputs."""
        if use_file_api is None:
            size_mb = len(audio_bytes or b"") / (1024 * 1024)
            use_file_api = size_mb > config.LARGE_AUDIO_THRESHOLD_MB

        if use_file_api:
            return self.summarize_with_file_api(audio_bytes, mime_type, prompt, on_status)
        return self.summarize_audio(audio_bytes, mime_type, prompt, on_status)

    def get_available_models(self, candidates: Optional[List[str]] = None) -> List[str]:
        """Probe candidate models with a tiny request and return the working ones."""
        working_models = []
        for model_name in candidates or config.CANDIDATE_SUMMARY_MODELS:
            try:
                self.client.models.generate_content(model=model_name, contents="Test")
                working_models.append(model_name)
                logging.info(f"Model {model_name} is available")
            except Exception as e:
                logging.warning(f"Model {model_name} not available: {e}")
        return working_models
