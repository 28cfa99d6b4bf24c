"""
API routes for the lecture summarizer application.
"""

import base64
import binascii
import threading
import traceback
from typing import List, Optional
from fastapi import APIRouter, HTTPException, Depends, File, Form, UploadFile, Path, Query
from fastapi.responses import Response

from lecture_summarizer.api.schemas import (
    AudioRequest,
    AudioExtractionResponse,
    BatchResponse,
    DebugModeRequest,
    ExportRequest,
    HistoryItemResponse,
    JobResponse,
    ModelsResponse,
    PromptRequest,
    SettingsResponse,
    StatusResponse,
    SummaryResponse,
    TranscriptionResponse,
    VideoSummaryResponse,
    YouTubeAudioResponse,
    YouTubeRequest,
    YouTubeSummaryRequest,
    YouTubeSummaryResponse,
)
from lecture_summarizer.core.audio_extractor import AudioExtractor
from lecture_summarizer.core.batch import BatchProcessor, counts, is_video_file
from lecture_summarizer.core.exporter import (
    combined_markdown,
    export_summary,
    history_export_filename,
)
from lecture_summarizer.core.prompts import DEFAULT_PROMPT
from lecture_summarizer.core.summarizer import GeminiSummarizer
from lecture_summarizer.core.transcriber import AudioTranscriber
from lecture_summarizer.core.youtube_downloader import create_downloader
from lecture_summarizer.db import crud
from lecture_summarizer.db.database import get_db, DBSession
from lecture_summarizer.utils.error_handling import (
    LectureSummarizerError,
    MissingInputError,
    YouTubeDownloadError,
    log_diagnostic_info,
)
from lecture_summarizer.utils.logger import logging

router = APIRouter(prefix="/api/v1", tags=["lectures"])


def _require_audio(request: AudioRequest) -> bytes:
    if not request.audio:
        raise MissingInputError("Audio data and an API key are required")
    try:
        return base64.b64decode(request.audio, validate=True)
    except binascii.Error:
        raise MissingInputError("Audio data is not valid base64")


def _download_attachment(content: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/extract-audio", response_model=AudioExtractionResponse)
def extract_audio(file: Optional[UploadFile] = File(None)):
    """
    Extract a compressed speech track from an uploaded video.

    The audio is mono, 16kHz, 64kbps MP3 and is returned base64 encoded.
    """
    if file is None:
        raise HTTPException(status_code=400, detail="A file is required")

    data = file.file.read()
    result = AudioExtractor().extract_from_bytes(data, file.filename or "input.mp4")
    log_diagnostic_info({
        "filename": file.filename,
        "content_type": file.content_type,
        "original_size": result.original_size,
        "compressed_size": result.compressed_size,
        "duration": result.duration,
    })
    return AudioExtractionResponse(**result.model_dump())


@router.post("/youtube", response_model=YouTubeAudioResponse)
def youtube_audio(request: YouTubeRequest):
    """Download the audio track of a YouTube video (30 minutes max)."""
    if not request.url:
        raise HTTPException(status_code=400, detail="A YouTube URL is required")

    try:
        audio = create_downloader(request.url).download_audio_bytes()
    except LectureSummarizerError:
        raise
    except Exception as e:
        logging.error(f"YouTube processing error: {str(e)}")
        logging.error(traceback.format_exc())
        raise YouTubeDownloadError(f"YouTube processing error: {str(e)}") from e

    return YouTubeAudioResponse(**audio.model_dump())


@router.post("/whisper", response_model=TranscriptionResponse)
def whisper_transcribe(request: AudioRequest):
    """Transcribe base64 audio with Whisper."""
    audio_bytes = _require_audio(request)
    transcriber = AudioTranscriber(api_key=request.api_key)
    result = transcriber.transcribe_bytes(audio_bytes, request.mime_type or "audio/mp4")
    return TranscriptionResponse(
        transcript=result.transcript,
        segments=result.segments,
        duration=result.duration,
    )


@router.post("/gemini", response_model=SummaryResponse)
def gemini_summarize(request: AudioRequest):
    """Summarize base64 audio sent inline, retrying on rate limits."""
    audio_bytes = _require_audio(request)
    summarizer = GeminiSummarizer(api_key=request.api_key)
    summary = summarizer.summarize_audio(audio_bytes, request.mime_type or "audio/mp3", request.prompt)
    return SummaryResponse(summary=summary)


@router.post("/gemini-file", response_model=SummaryResponse)
def gemini_file_summarize(request: AudioRequest):
    """Summarize base64 audio through the Gemini File API."""
    audio_bytes = _require_audio(request)
    summarizer = GeminiSummarizer(api_key=request.api_key)
    summary = summarizer.summarize_with_file_api(
        audio_bytes, request.mime_type or "audio/mp3", request.prompt
    )
    return SummaryResponse(summary=summary)


@router.post("/summarize/video", response_model=VideoSummaryResponse)
def summarize_video(
    file: Optional[UploadFile] = File(None),
    api_key: Optional[str] = Form(None),
    prompt: Optional[str] = Form(None),
    db: DBSession = Depends(get_db),
):
    """
    Summarize an uploaded lecture video.

    - Extracts the audio track with ffmpeg
    - Sends it to Gemini, through the File API when it is large
    - Saves the summary to the history
    """
    if file is None:
        raise HTTPException(status_code=400, detail="A file is required")

    summarizer = GeminiSummarizer(api_key=api_key)
    filename = file.filename or "video.mp4"
    extraction = AudioExtractor().extract_from_bytes(file.file.read(), filename)
    audio_bytes = base64.b64decode(extraction.audio)

    summary = summarizer.summarize(
        audio_bytes,
        extraction.mime_type,
        prompt or crud.get_custom_prompt(db),
        use_file_api=extraction.needs_file_api,
    )

    item = crud.add_history_item(db, filename, summary)
    logging.info(f"Stored summary for {filename} as history item {item.id}")

    return VideoSummaryResponse(
        summary=summary,
        filename=filename,
        history_id=item.id,
        audio=extraction.audio,
    )


@router.post("/summarize/youtube", response_model=YouTubeSummaryResponse)
def summarize_youtube(request: YouTubeSummaryRequest, db: DBSession = Depends(get_db)):
    """
    Summarize a YouTube video by URL.

    A transcript is produced too when a Whisper key is given; a failed
    transcription does not stop the summary.
    """
    summarizer = GeminiSummarizer(api_key=request.api_key)
    audio = youtube_audio(YouTubeRequest(url=request.url))

    transcript = None
    segments = []
    if request.whisper_api_key:
        try:
            result = AudioTranscriber(api_key=request.whisper_api_key).transcribe_base64(
                audio.audio, audio.mime_type
            )
            transcript, segments = result.transcript, result.segments
        except LectureSummarizerError as e:
            logging.warning(f"Transcription failed: {e.message}")

    summary = summarizer.summarize_base64(
        audio.audio, audio.mime_type, request.prompt or crud.get_custom_prompt(db)
    )
    item = crud.add_history_item(db, audio.title, summary, youtube_url=request.url)

    return YouTubeSummaryResponse(
        summary=summary,
        title=audio.title,
        duration=audio.duration,
        transcript=transcript,
        segments=segments,
        history_id=item.id,
    )


@router.post("/batch", response_model=BatchResponse)
def batch_summarize(
    files: List[UploadFile] = File(...),
    api_key: Optional[str] = Form(None),
    prompt: Optional[str] = Form(None),
    db: DBSession = Depends(get_db),
):
    """Summarize several videos, three at a time. Non-video files are ignored."""
    # Fail fast on a missing key instead of failing every job
    GeminiSummarizer(api_key=api_key)

    video_uploads = [
        upload for upload in files
        if is_video_file(upload.filename or "", upload.content_type)
    ]
    jobs = BatchProcessor.create_jobs(
        [(upload.filename, upload.content_type) for upload in video_uploads]
    )
    payloads = {job.id: upload.file.read() for job, upload in zip(jobs, video_uploads)}

    completed = []
    lock = threading.Lock()

    def on_complete(filename: str, summary: str):
        with lock:
            completed.append((filename, summary))

    processor = BatchProcessor(
        AudioExtractor(),
        lambda: GeminiSummarizer(api_key=api_key),
        prompt=prompt or crud.get_custom_prompt(db),
        on_complete=on_complete,
    )
    processor.process_all(jobs, payloads)

    for filename, summary in completed:
        crud.add_history_item(db, filename, summary)

    return BatchResponse(
        jobs=[
            JobResponse(
                id=job.id,
                filename=job.filename,
                status=job.status.value,
                progress=job.progress,
                status_message=job.status_message,
                summary=job.summary,
                error=job.error,
                audio=base64.b64encode(job.audio).decode("ascii") if job.audio else None,
            )
            for job in jobs
        ],
        **counts(jobs),
    )


@router.get("/models", response_model=ModelsResponse)
def available_models(api_key: Optional[str] = Query(None)):
    """List the candidate Gemini models that answer with this key."""
    return ModelsResponse(models=GeminiSummarizer(api_key=api_key).get_available_models())


@router.get("/history", response_model=List[HistoryItemResponse])
async def list_history(db: DBSession = Depends(get_db)):
    """List saved summaries, newest first."""
    return [HistoryItemResponse.model_validate(item) for item in crud.list_history(db)]


@router.get("/history/export")
async def export_history(db: DBSession = Depends(get_db)):
    """Download every saved summary as one Markdown file."""
    items = crud.list_history(db)
    if not items:
        raise HTTPException(status_code=404, detail="History is empty")

    content = combined_markdown((item.filename, item.summary) for item in items)
    return _download_attachment(
        content.encode("utf-8"), "text/markdown; charset=utf-8", history_export_filename()
    )


@router.get("/history/{item_id}", response_model=HistoryItemResponse)
async def get_history_item(
    item_id: str = Path(..., description="History item ID"),
    db: DBSession = Depends(get_db),
):
    item = crud.get_history_item(db, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="History item not found")
    return HistoryItemResponse.model_validate(item)


@router.delete("/history/{item_id}", response_model=StatusResponse)
async def delete_history_item(
    item_id: str = Path(..., description="History item ID"),
    db: DBSession = Depends(get_db),
):
    if not crud.delete_history_item(db, item_id):
        raise HTTPException(status_code=404, detail="History item not found")
    return StatusResponse()


@router.delete("/history", response_model=StatusResponse)
async def clear_history(db: DBSession = Depends(get_db)):
    removed = crud.clear_history(db)
    return StatusResponse(detail={"removed": removed})


@router.get("/settings", response_model=SettingsResponse)
async def get_settings(db: DBSession = Depends(get_db)):
    """Get the summary prompt and debug mode."""
    return SettingsResponse(
        prompt=crud.get_custom_prompt(db),
        default_prompt=DEFAULT_PROMPT,
        debug_mode=crud.get_debug_mode(db),
    )


@router.put("/settings/prompt", response_model=SettingsResponse)
async def save_prompt(request: PromptRequest, db: DBSession = Depends(get_db)):
    crud.save_custom_prompt(db, request.prompt)
    return await get_settings(db)


@router.post("/settings/prompt/reset", response_model=SettingsResponse)
async def reset_prompt(db: DBSession = Depends(get_db)):
    crud.reset_custom_prompt(db)
    return await get_settings(db)


@router.put("/settings/debug", response_model=SettingsResponse)
async def set_debug_mode(request: DebugModeRequest, db: DBSession = Depends(get_db)):
    crud.set_debug_mode(db, request.enabled)
    return await get_settings(db)


@router.post("/export/{fmt}")
def export(request: ExportRequest, fmt: str = Path(..., description="pdf, docx or md")):
    """Export a Markdown summary as a PDF, Word or Markdown file."""
    try:
        content, media_type, filename = export_summary(
            request.markdown, fmt, request.filename or "summary"
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _download_attachment(content, media_type, filename)
