"""
Tests for the chunked batch processor.
"""

import base64
import threading
import time
import pytest
from unittest.mock import MagicMock

from lecture_summarizer.core.batch import BatchProcessor, batch_markdown, counts, is_video_file
from lecture_summarizer.models.schemas import AudioExtractionResult, JobStatus
from lecture_summarizer.utils.error_handling import AudioExtractionError


def extraction(audio=b"mp3", needs_file_api=False):
    return AudioExtractionResult(
        audio=base64.b64encode(audio).decode("ascii"),
        original_size=100,
        compressed_size=len(audio),
        compression_ratio="97.0",
        duration=60.0,
        file_size_mb="0.00",
        needs_file_api=needs_file_api,
    )


@pytest.fixture
def extractor():
    mock_extractor = MagicMock()
    mock_extractor.extract_from_bytes.side_effect = lambda data, filename: extraction(data)
    return mock_extractor


@pytest.fixture
def summarizer():
    mock_summarizer = MagicMock()
    mock_summarizer.summarize.side_effect = lambda audio, *args, **kwargs: f"summary of {audio.decode()}"
    return mock_summarizer


@pytest.mark.parametrize("filename,content_type,expected", [
    ("lecture.mp4", "video/mp4", True),
    ("lecture.mov", None, True),
    ("lecture.mkv", "application/octet-stream", True),
    ("notes.pdf", "application/pdf", False),
    ("notes.txt", None, False),
    ("video.mp4", "audio/mpeg", False),
])
def test_is_video_file(filename, content_type, expected):
    assert is_video_file(filename, content_type) is expected


def test_create_jobs_skips_non_video_files():
    jobs = BatchProcessor.create_jobs([
        ("a.mp4", "video/mp4"),
        ("slides.pdf", "application/pdf"),
        ("b.mov", "video/quicktime"),
    ])

    assert [job.filename for job in jobs] == ["a.mp4", "b.mov"]
    assert all(job.status == JobStatus.WAITING for job in jobs)
    assert all(job.progress == 0 for job in jobs)
    assert len({job.id for job in jobs}) == 2
    assert all(len(job.id) == 9 for job in jobs)


def test_process_job_stages(extractor, summarizer):
    updates = []
    processor = BatchProcessor(
        extractor,
        lambda: summarizer,
        prompt="custom",
        on_update=lambda job: updates.append((job.progress, job.status_message)),
    )
    job = BatchProcessor.create_jobs([("a.mp4", "video/mp4")])[0]

    processor.process_job(job, b"video-a")

    assert job.status == JobStatus.COMPLETED
    assert job.progress == 100
    assert job.summary == "summary of video-a"
    assert job.audio == b"video-a"
    progress_values = [progress for progress, _ in updates]
    assert progress_values[:4] == [10, 20, 40, 60]
    assert updates[-1] == (100, "Done!")
    assert summarizer.summarize.call_args[0][2] == "custom"


def test_failed_job_records_error(extractor, summarizer):
    extractor.extract_from_bytes.side_effect = AudioExtractionError("Audio extraction error: bad file")
    on_complete = MagicMock()
    processor = BatchProcessor(extractor, lambda: summarizer, on_complete=on_complete)
    job = BatchProcessor.create_jobs([("a.mp4", "video/mp4")])[0]

    processor.process_job(job, b"broken")

    assert job.status == JobStatus.ERROR
    assert job.error == "Audio extraction error: bad file"
    assert job.summary is None
    on_complete.assert_not_called()


def test_process_all_runs_in_chunks_of_three(extractor, summarizer):
    """No more than three jobs run at once, and a chunk finishes before the next starts."""
    lock = threading.Lock()
    state = {"running": 0, "peak": 0}
    started = []

    def slow_extract(data, filename):
        with lock:
            state["running"] += 1
            state["peak"] = max(state["peak"], state["running"])
            started.append(filename)
        time.sleep(0.05)
        with lock:
            state["running"] -= 1
        return extraction(data)

    extractor.extract_from_bytes.side_effect = slow_extract
    completed = []
    processor = BatchProcessor(
        extractor, lambda: summarizer, on_complete=lambda name, summary: completed.append(name)
    )
    jobs = BatchProcessor.create_jobs([(f"{i}.mp4", "video/mp4") for i in range(7)])
    payloads = {job.id: job.filename.encode() for job in jobs}

    processor.process_all(jobs, payloads)

    assert state["peak"] <= 3
    assert sorted(completed) == sorted(job.filename for job in jobs)
    # Chunk boundaries are respected
    assert set(started[:3]) == {"0.mp4", "1.mp4", "2.mp4"}
    assert set(started[3:6]) == {"3.mp4", "4.mp4", "5.mp4"}
    assert started[6] == "6.mp4"
    assert counts(jobs) == {"completed": 7, "errors": 0, "total": 7}


def test_process_all_skips_finished_jobs(extractor, summarizer):
    processor = BatchProcessor(extractor, lambda: summarizer)
    jobs = BatchProcessor.create_jobs([("a.mp4", "video/mp4"), ("b.mp4", "video/mp4")])
    jobs[0].status = JobStatus.COMPLETED
    jobs[0].summary = "earlier"

    processor.process_all(jobs, {job.id: b"x" for job in jobs})

    assert extractor.extract_from_bytes.call_count == 1
    assert jobs[0].summary == "earlier"


def test_one_failure_does_not_stop_the_batch(extractor, summarizer):
    def extract(data, filename):
        if filename == "bad.mp4":
            raise AudioExtractionError("Audio extraction error: corrupt")
        return extraction(data)

    extractor.extract_from_bytes.side_effect = extract
    processor = BatchProcessor(extractor, lambda: summarizer)
    jobs = BatchProcessor.create_jobs([("a.mp4", None), ("bad.mp4", None), ("c.mp4", None)])

    processor.process_all(jobs, {job.id: job.filename.encode() for job in jobs})

    assert counts(jobs) == {"completed": 2, "errors": 1, "total": 3}


def test_batch_markdown(extractor, summarizer):
    processor = BatchProcessor(extractor, lambda: summarizer)
    jobs = BatchProcessor.create_jobs([("a.mp4", None), ("b.mp4", None)])
    processor.process_all(jobs, {jobs[0].id: b"A", jobs[1].id: b"B"})

    assert batch_markdown(jobs) == (
        "## 1. a.mp4\n\nsummary of A\n\n---\n\n"
        "\n"
        "## 2. b.mp4\n\nsummary of B\n\n---\n\n"
    )
