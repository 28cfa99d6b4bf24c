"""
API client for communicating with the lecture summarizer backend.
"""

import requests
from typing import Dict, List, Any, Optional, Sequence, Tuple
from urllib.parse import urljoin

from lecture_summarizer.config import config


class ApiClient:
    """Client for interacting with the lecture summarizer API."""

    def __init__(self, base_url: str = config.PUBLIC_URL, timeout: int = 900):
        """
        Initialize the API client.

        Args:
            base_url: Base URL of the API
            timeout: Seconds to wait for long-running processing requests
        """
        self.base_url = base_url
        self.api_base = urljoin(base_url, "/api/v1/")
        self.timeout = timeout

    def _url(self, endpoint: str) -> str:
        """Get the full URL for an endpoint."""
        return urljoin(self.api_base, endpoint)

    @staticmethod
    def _json(response: requests.Response) -> Dict[str, Any]:
        # Application errors come back as {"detail": ...}; surface them as {"error": ...}
        if response.status_code >= 400:
            try:
                detail = response.json().get("detail", response.text)
            except ValueError:
                detail = response.text
            if response.status_code in (400, 404) or response.status_code >= 500:
                return {"error": detail, "status_code": response.status_code}
        response.raise_for_status()
        return response.json()

    def extract_audio(self, filename: str, data: bytes, content_type: Optional[str] = None) -> Dict[str, Any]:
        """Extract the compressed audio track of a video file."""
        response = requests.post(
            self._url("extract-audio"),
            files={"file": (filename, data, content_type or "video/mp4")},
            timeout=self.timeout,
        )
        return self._json(response)

    def youtube_audio(self, url: str) -> Dict[str, Any]:
        """Fetch the title, duration and audio of a YouTube video."""
        response = requests.post(self._url("youtube"), json={"url": url}, timeout=self.timeout)
        return self._json(response)

    def transcribe(self, audio: str, mime_type: str, api_key: Optional[str]) -> Dict[str, Any]:
        response = requests.post(
            self._url("whisper"),
            json={"audio": audio, "mime_type": mime_type, "api_key": api_key},
            timeout=self.timeout,
        )
        return self._json(response)

    def summarize_audio(self, audio: str, mime_type: str, api_key: Optional[str],
                        prompt: Optional[str] = None, use_file_api: bool = False) -> Dict[str, Any]:
        """
        Summarize base64 audio.

        Args:
            audio: Base64 encoded audio
            mime_type: MIME type of the audio
            api_key: Gemini API key
            prompt: Optional summary prompt
            use_file_api: Upload through the File API instead of sending inline

        Returns:
            Dictionary with the summary
        """
        response = requests.post(
            self._url("gemini-file" if use_file_api else "gemini"),
            json={"audio": audio, "mime_type": mime_type, "api_key": api_key, "prompt": prompt},
            timeout=self.timeout,
        )
        return self._json(response)

    def summarize_video(self, filename: str, data: bytes, api_key: Optional[str],
                        prompt: Optional[str] = None, content_type: Optional[str] = None) -> Dict[str, Any]:
        """Run the full single-video pipeline and save the result to history."""
        response = requests.post(
            self._url("summarize/video"),
            files={"file": (filename, data, content_type or "video/mp4")},
            data={"api_key": api_key or "", "prompt": prompt or ""},
            timeout=self.timeout,
        )
        return self._json(response)

    def summarize_youtube(self, url: str, api_key: Optional[str], prompt: Optional[str] = None,
                          whisper_api_key: Optional[str] = None) -> Dict[str, Any]:
        response = requests.post(
            self._url("summarize/youtube"),
            json={
                "url": url,
                "api_key": api_key,
                "prompt": prompt,
                "whisper_api_key": whisper_api_key,
            },
            timeout=self.timeout,
        )
        return self._json(response)

    def summarize_batch(self, files: Sequence[Tuple[str, bytes, Optional[str]]],
                        api_key: Optional[str], prompt: Optional[str] = None) -> Dict[str, Any]:
        """
        Summarize several videos in one request.

        Args:
            files: (filename, data, content_type) tuples
            api_key: Gemini API key
            prompt: Optional summary prompt

        Returns:
            Dictionary with the jobs and completed/errors/total counts
        """
        response = requests.post(
            self._url("batch"),
            files=[
                ("files", (filename, data, content_type or "application/octet-stream"))
                for filename, data, content_type in files
            ],
            data={"api_key": api_key or "", "prompt": prompt or ""},
            timeout=self.timeout,
        )
        return self._json(response)

    def available_models(self, api_key: Optional[str]) -> List[str]:
        response = requests.get(self._url("models"), params={"api_key": api_key}, timeout=self.timeout)
        response.raise_for_status()
        return response.json()["models"]

    def list_history(self) -> List[Dict[str, Any]]:
        """Get saved summaries, newest first."""
        response = requests.get(self._url("history"))
        response.raise_for_status()
        return response.json()

    def get_history_item(self, item_id: str) -> Dict[str, Any]:
        response = requests.get(self._url(f"history/{item_id}"))

        if response.status_code == 404:
            return {"error": "History item not found"}

        response.raise_for_status()
        return response.json()

    def delete_history_item(self, item_id: str) -> Dict[str, Any]:
        response = requests.delete(self._url(f"history/{item_id}"))

        if response.status_code == 404:
            return {"error": "History item not found"}

        response.raise_for_status()
        return response.json()

    def clear_history(self) -> Dict[str, Any]:
        response = requests.delete(self._url("history"))
        response.raise_for_status()
        return response.json()

    def export_history(self) -> Optional[bytes]:
        """Download every saved summary as Markdown, or None when history is empty."""
        response = requests.get(self._url("history/export"))

        if response.status_code == 404:
            return None

        response.raise_for_status()
        return response.content

    def get_settings(self) -> Dict[str, Any]:
        response = requests.get(self._url("settings"))
        response.raise_for_status()
        return response.json()

    def save_prompt(self, prompt: str) -> Dict[str, Any]:
        response = requests.put(self._url("settings/prompt"), json={"prompt": prompt})
        response.raise_for_status()
        return response.json()

    def reset_prompt(self) -> Dict[str, Any]:
        response = requests.post(self._url("settings/prompt/reset"))
        response.raise_for_status()
        return response.json()

    def set_debug_mode(self, enabled: bool) -> Dict[str, Any]:
        response = requests.put(self._url("settings/debug"), json={"enabled": enabled})
        response.raise_for_status()
        return response.json()

    def export(self, markdown: str, fmt: str, filename: str = "summary") -> bytes:
        """Render a Markdown summary as a pdf, docx or md file."""
        response = requests.post(
            self._url(f"export/{fmt}"),
            json={"markdown": markdown, "filename": filename},
        )
        response.raise_for_status()
        return response.content
