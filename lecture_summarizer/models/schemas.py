"""
Data models for the lecture summarizer application.
"""
import time
from enum import Enum
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field, field_validator

from lecture_summarizer.config import config
from lecture_summarizer.utils.helpers import is_valid_youtube_url


class YouTubeDownloadConfig(BaseModel):
    """Configuration for YouTube download operations."""
    url: str
    max_duration: int = config.MAX_YOUTUBE_DURATION

    @field_validator('url')
    def validate_youtube_url(cls, v):
        if not is_valid_youtube_url(v):
            raise ValueError('URL must be a valid YouTube URL')
        return v


class YouTubeAudio(BaseModel):
    """Audio track of a YouTube video held in memory."""
    title: str
    duration: int
    audio: str  # base64
    mime_type: str = "audio/mp4"


class AudioExtractionResult(BaseModel):
    """Result of extracting a compressed speech track from a video."""
    audio: str  # base64
    mime_type: str = "audio/mp3"
    original_size: int
    compressed_size: int
    compression_ratio: str
    duration: float = 0.0
    file_size_mb: str
    needs_file_api: bool = False


class TranscriptionConfig(BaseModel):
    """Configuration for transcription operations."""
    model: str = config.DEFAULT_TRANSCRIPTION_MODEL
    language: Optional[str] = config.TRANSCRIPTION_LANGUAGE
    prompt: Optional[str] = None
    response_format: str = "verbose_json"
    temperature: float = 0.0


class TranscriptSegment(BaseModel):
    """A timed piece of a transcript."""
    start: float
    end: float
    text: str


class TranscriptionResult(BaseModel):
    """Transcript returned by the speech-to-text service."""
    transcript: str
    segments: List[TranscriptSegment] = []
    duration: Optional[float] = None
    language: Optional[str] = None


class JobStatus(str, Enum):
    """Lifecycle of a batch job."""
    WAITING = "waiting"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class VideoJob(BaseModel):
    """A single video in a batch run."""
    id: str
    filename: str
    status: JobStatus = JobStatus.WAITING
    progress: int = 0
    status_message: str = "Waiting"
    summary: Optional[str] = None
    error: Optional[str] = None
    audio: Optional[bytes] = None
    is_expanded: bool = False


class LectureSummary(BaseModel):
    """Model for storing a generated lecture summary."""
    source: str
    summary: str
    transcript_text: Optional[str] = None
    transcript_segments: Optional[List[Dict[str, Any]]] = None
    created_at: str = Field(default_factory=lambda: time.strftime("%Y-%m-%d %H:%M:%S"))
