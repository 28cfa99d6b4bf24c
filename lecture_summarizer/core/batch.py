"""
Batch processing of several lecture videos.

Jobs run in fixed-size chunks: every job of a chunk is started together and
the next chunk starts only once the whole chunk has finished. There is no
queue, cancellation or backpressure.
"""

import base64
import mimetypes
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from lecture_summarizer.config import config
from lecture_summarizer.core.audio_extractor import AudioExtractor
from lecture_summarizer.core.exporter import combined_markdown
from lecture_summarizer.core.summarizer import GeminiSummarizer
from lecture_summarizer.models.schemas import JobStatus, VideoJob
from lecture_summarizer.utils.helpers import generate_id
from lecture_summarizer.utils.logger import logging

VIDEO_EXTENSIONS = {".mp4", ".mov", ".avi", ".mkv", ".webm", ".m4v", ".wmv", ".flv"}


def is_video_file(filename: str, content_type: Optional[str] = None) -> bool:
    """Judge a file by its MIME type, or by its extension when none is given."""
    if content_type and content_type != "application/octet-stream":
        return content_type.startswith("video/")

    guessed, _ = mimetypes.guess_type(filename)
    if guessed:
        return guessed.startswith("video/")
    return any(filename.lower().endswith(ext) for ext in VIDEO_EXTENSIONS)


class BatchProcessor:
    """Runs the extract -> summarize pipeline over many videos."""

    def __init__(
        self,
        extractor: AudioExtractor,
        summarizer_factory: Callable[[], GeminiSummarizer],
        prompt: Optional[str] = None,
        on_update: Optional[Callable[[VideoJob], None]] = None,
        on_complete: Optional[Callable[[str, str], None]] = None,
        concurrency: int = config.BATCH_CONCURRENCY,
    ):
        self.extractor = extractor
        self.summarizer_factory = summarizer_factory
        self.prompt = prompt
        self.on_update = on_update
        self.on_complete = on_complete
        self.concurrency = max(1, concurrency)

    @staticmethod
    def create_jobs(files: Sequence[Tuple[str, Optional[str]]]) -> List[VideoJob]:
        """
        Create waiting jobs for the video files of a selection.

        Args:
            files: (filename, content type) pairs; non-video files are skipped

        Returns:
            List of jobs in the waiting state
        """
        return [
            VideoJob(id=generate_id(), filename=filename)
            for filename, content_type in files
            if is_video_file(filename, content_type)
        ]

    def _update(self, job: VideoJob, **changes) -> None:
        for key, value in changes.items():
            setattr(job, key, value)
        if self.on_update:
            self.on_update(job)

    def process_job(self, job: VideoJob, data: bytes) -> VideoJob:
        """Process one video. Failures are recorded on the job, not raised."""
        self._update(job, status=JobStatus.PROCESSING, progress=10, status_message="Preparing...")

        try:
            self._update(job, progress=20, status_message="Extracting audio...")
            extraction = self.extractor.extract_from_bytes(data, job.filename)

            self._update(job, progress=40, status_message="Reading audio file...")
            audio_bytes = base64.b64decode(extraction.audio)

            self._update(job, progress=60, status_message="Analyzing with Gemini AI...")
            summarizer = self.summarizer_factory()
            summary = summarizer.summarize(
                audio_bytes,
                extraction.mime_type,
                self.prompt,
                use_file_api=extraction.needs_file_api,
                on_status=lambda message: self._update(job, status_message=message),
            )

            self._update(
                job,
                status=JobStatus.COMPLETED,
                progress=100,
                status_message="Done!",
                summary=summary,
                audio=audio_bytes,
            )
        except Exception as e:
            logging.error(f"Batch job {job.id} ({job.filename}) failed: {str(e)}")
            self._update(job, status=JobStatus.ERROR, status_message="Error", error=str(e))
            return job

        if self.on_complete:
            self.on_complete(job.filename, summary)
        return job

    def process_all(self, jobs: List[VideoJob], payloads: Dict[str, bytes]) -> List[VideoJob]:
        """
        Process every waiting job, ``concurrency`` jobs at a time.

        Args:
            jobs: Jobs to run; jobs that are not waiting are left untouched
            payloads: Video bytes keyed by job id

        Returns:
            The same list of jobs, updated in place
        """
        waiting_jobs = [job for job in jobs if job.status == JobStatus.WAITING]
        logging.info(f"Processing {len(waiting_jobs)} videos, {self.concurrency} at a time")

        with ThreadPoolExecutor(max_workers=self.concurrency) as executor:
            for i in range(0, len(waiting_jobs), self.concurrency):
                batch = waiting_jobs[i:i + self.concurrency]
                futures = [
                    executor.submit(self.process_job, job, payloads.get(job.id, b""))
                    for job in batch
                ]
                for future in futures:
                    future.result()

        return jobs


def counts(jobs: Sequence[VideoJob]) -> Dict[str, int]:
    """Return completed, error and total counts for a batch."""
    return {
        "completed": sum(1 for job in jobs if job.status == JobStatus.COMPLETED),
        "errors": sum(1 for job in jobs if job.status == JobStatus.ERROR),
        "total": len(jobs),
    }


def batch_markdown(jobs: Sequence[VideoJob]) -> str:
    """Combine the summaries of completed jobs into one Markdown document."""
    return combined_markdown(
        (job.filename, job.summary)
        for job in jobs
        if job.status == JobStatus.COMPLETED and job.summary
    )
