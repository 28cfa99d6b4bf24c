"""
Audio extraction from lecture videos using ffmpeg.
"""

import os
import uuid
import base64
import tempfile
import subprocess
from pathlib import Path
from typing import Optional, Union

from lecture_summarizer.config import config
from lecture_summarizer.models.schemas import AudioExtractionResult
from lecture_summarizer.utils.error_handling import AudioExtractionError
from lecture_summarizer.utils.logger import logging


class AudioExtractor:
    """Class to extract a compressed speech track from a video file."""

    def __init__(
        self,
        ffmpeg_binary: str = "ffmpeg",
        ffprobe_binary: str = "ffprobe",
        timeout: int = config.FFMPEG_TIMEOUT,
        work_dir: Optional[Union[str, Path]] = None,
    ):
        self.ffmpeg_binary = ffmpeg_binary
        self.ffprobe_binary = ffprobe_binary
        self.timeout = timeout
        self.work_dir = Path(work_dir or tempfile.gettempdir())

    def probe_duration(self, input_path: Union[str, Path]) -> float:
        """Return the media duration in seconds, or 0.0 if it can't be read."""
        command = [
            self.ffprobe_binary,
            "-v", "error",
            "-show_entries", "format=duration",
            "-of", "default=noprint_wrappers=1:nokey=1",
            str(input_path),
        ]
        try:
            result = subprocess.run(
                command, check=True, capture_output=True, text=True, timeout=self.timeout
            )
            return float(result.stdout.strip() or 0)
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            logging.warning(f"Duration detection failed for {input_path}: {e}")
            return 0.0

    def extract(
        self, input_path: Union[str, Path], output_path: Optional[Union[str, Path]] = None
    ) -> Path:
        """
        Extract a mono 16kHz 64kbps MP3 track from a video.

        Args:
            input_path: Path to the source video
            output_path: Target path, defaults to the input with an .mp3 suffix

        Returns:
            Path to the extracted audio file
        """
        source = Path(input_path)
        target = Path(output_path) if output_path else source.with_suffix(".mp3")

        command = [
            self.ffmpeg_binary,
            "-i", str(source),
            "-vn",
            "-ac", "1",
            "-ar", "16000",
            "-b:a", "64k",
            "-f", "mp3",
            str(target),
            "-y",
        ]

        logging.info(f"Extracting audio: {source} -> {target}")
        try:
            subprocess.run(
                command,
                check=True,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise AudioExtractionError(
                "FFmpeg is not installed. Please install FFmpeg on the server."
            ) from e
        except subprocess.TimeoutExpired as e:
            raise AudioExtractionError(
                f"Audio extraction error: ffmpeg timed out after {self.timeout}s"
            ) from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
            raise AudioExtractionError(f"Audio extraction error: {stderr or e}") from e

        return target

    def extract_from_bytes(self, data: bytes, filename: str = "input.mp4") -> AudioExtractionResult:
        """
        Extract audio from an uploaded video held in memory.

        Temporary files are removed whether or not extraction succeeds.

        Args:
            data: Raw video bytes
            filename: Original filename, used for its extension

        Returns:
            AudioExtractionResult with base64 audio and size statistics
        """
        file_id = uuid.uuid4().hex
        suffix = Path(filename).suffix or ".mp4"
        self.work_dir.mkdir(parents=True, exist_ok=True)
        input_path = self.work_dir / f"input_{file_id}{suffix}"
        output_path = self.work_dir / f"output_{file_id}.mp3"

        try:
            input_path.write_bytes(data)

            duration = self.probe_duration(input_path)
            self.extract(input_path, output_path)

            audio_bytes = output_path.read_bytes()
        except OSError as e:
            raise AudioExtractionError(f"Audio extraction error: {e}") from e
        finally:
            for temp_file in (input_path, output_path):
                try:
                    os.unlink(temp_file)
                except OSError:
                    pass

        original_size = len(data)
        compressed_size = len(audio_bytes)
        file_size_mb = compressed_size / (1024 * 1024)
        ratio = (1 - compressed_size / original_size) * 100 if original_size else 0.0

        logging.info(
            f"Extracted {file_size_mb:.2f} MB of audio from {filename} ({ratio:.1f}% smaller)"
        )

        return AudioExtractionResult(
            audio=base64.b64encode(audio_bytes).decode("ascii"),
            mime_type="audio/mp3",
            original_size=original_size,
            compressed_size=compressed_size,
            compression_ratio=f"{ratio:.1f}",
            duration=duration,
            file_size_mb=f"{file_size_mb:.2f}",
            needs_file_api=file_size_mb > config.LARGE_AUDIO_THRESHOLD_MB,
        )
