from pydantic import BaseModel
from typing import Optional, List, Dict, Any

from lecture_summarizer.models.schemas import TranscriptSegment


class AudioRequest(BaseModel):
    """Model for requests carrying base64 audio to an AI service."""
    audio: Optional[str] = None
    mime_type: Optional[str] = "audio/mp3"
    api_key: Optional[str] = None
    prompt: Optional[str] = None


class YouTubeRequest(BaseModel):
    """Model for fetching the audio of a YouTube video."""
    url: str


class YouTubeSummaryRequest(BaseModel):
    """Model for the full YouTube summarization pipeline."""
    url: str
    api_key: Optional[str] = None
    prompt: Optional[str] = None
    whisper_api_key: Optional[str] = None


class AudioExtractionResponse(BaseModel):
    """Model for audio extraction responses."""
    success: bool = True
    audio: str
    mime_type: str
    original_size: int
    compressed_size: int
    compression_ratio: str
    duration: float
    file_size_mb: str
    needs_file_api: bool


class YouTubeAudioResponse(BaseModel):
    success: bool = True
    title: str
    duration: int
    audio: str
    mime_type: str


class TranscriptionResponse(BaseModel):
    success: bool = True
    transcript: str
    segments: List[TranscriptSegment] = []
    duration: Optional[float] = None


class SummaryResponse(BaseModel):
    """Model for summary responses."""
    success: bool = True
    summary: str


class VideoSummaryResponse(SummaryResponse):
    filename: str
    history_id: Optional[str] = None
    audio: Optional[str] = None


class YouTubeSummaryResponse(SummaryResponse):
    title: str
    duration: int
    transcript: Optional[str] = None
    segments: List[TranscriptSegment] = []
    history_id: Optional[str] = None


class JobResponse(BaseModel):
    id: str
    filename: str
    status: str
    progress: int
    status_message: str
    summary: Optional[str] = None
    error: Optional[str] = None
    audio: Optional[str] = None


class BatchResponse(BaseModel):
    jobs: List[JobResponse]
    completed: int
    errors: int
    total: int


class HistoryItemResponse(BaseModel):
    id: str
    filename: str
    summary: str
    youtube_url: Optional[str] = None
    timestamp: int

    model_config = {"from_attributes": True}


class SettingsResponse(BaseModel):
    prompt: str
    default_prompt: str
    debug_mode: bool


class PromptRequest(BaseModel):
    prompt: str


class DebugModeRequest(BaseModel):
    enabled: bool


class ExportRequest(BaseModel):
    markdown: str
    filename: Optional[str] = "summary"


class ModelsResponse(BaseModel):
    models: List[str]


class StatusResponse(BaseModel):
    success: bool = True
    detail: Optional[Dict[str, Any]] = None
