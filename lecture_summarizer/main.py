"""
Command line entry point for the lecture summarizer.
"""

import argparse
import base64
from pathlib import Path
from dotenv import load_dotenv
from typing import List, Optional

from lecture_summarizer.config import config
from lecture_summarizer.core.audio_extractor import AudioExtractor
from lecture_summarizer.core.batch import BatchProcessor, batch_markdown, counts, is_video_file
from lecture_summarizer.core.exporter import batch_export_filename, summary_filename
from lecture_summarizer.core.summarizer import GeminiSummarizer
from lecture_summarizer.core.transcriber import AudioTranscriber
from lecture_summarizer.core.youtube_downloader import create_downloader
from lecture_summarizer.models.schemas import LectureSummary
from lecture_summarizer.utils.error_handling import LectureSummarizerError
from lecture_summarizer.utils.helpers import is_valid_youtube_url, sanitize_filename, strip_extension
from lecture_summarizer.utils.logger import logging


def save_summary(summary: LectureSummary, output_file: Optional[str] = None) -> Path:
    """Save the summary as Markdown, under EXPORTS_DIR unless a path is given."""
    if output_file is None:
        output_dir = Path(config.EXPORTS_DIR)
        output_dir.mkdir(parents=True, exist_ok=True)
        output_file = output_dir / summary_filename(sanitize_filename(strip_extension(summary.source)))
    else:
        output_file = Path(output_file)

    with open(output_file, "w", encoding="utf-8") as f:
        f.write(summary.summary)

    logging.info(f"Summary saved to: {output_file}")
    return output_file


def summarize_lecture_video(
    path: str,
    api_key: Optional[str] = None,
    prompt: Optional[str] = None,
    output_file: Optional[str] = None,
) -> LectureSummary:
    """
    Process a local lecture video: extract audio, then summarize.

    Args:
        path: Path to the video file
        api_key: Gemini API key, GEMINI_API_KEY when omitted
        prompt: Optional summary prompt
        output_file: Optional file path to save the summary

    Returns:
        LectureSummary object
    """
    video_path = Path(path)
    if not video_path.exists():
        raise FileNotFoundError(f"Video file not found: {path}")

    summarizer = GeminiSummarizer(api_key=api_key)

    logging.info(f"Extracting audio from: {video_path}")
    extraction = AudioExtractor().extract_from_bytes(video_path.read_bytes(), video_path.name)
    logging.info(
        f"Audio extracted: {extraction.file_size_mb} MB "
        f"({extraction.compression_ratio}% smaller)"
    )

    summary_text = summarizer.summarize(
        base64.b64decode(extraction.audio),
        extraction.mime_type,
        prompt,
        use_file_api=extraction.needs_file_api,
        on_status=logging.info,
    )

    summary = LectureSummary(source=video_path.name, summary=summary_text)
    save_summary(summary, output_file)
    return summary


def summarize_youtube_video(
    url: str,
    api_key: Optional[str] = None,
    prompt: Optional[str] = None,
    whisper_api_key: Optional[str] = None,
    output_file: Optional[str] = None,
) -> LectureSummary:
    """
    Process a YouTube video: download audio, optionally transcribe, and summarize.

    A failed transcription is logged and the summary is still produced.
    """
    summarizer = GeminiSummarizer(api_key=api_key)

    logging.info(f"Downloading audio from: {url}")
    audio = create_downloader(url).download_audio_bytes()
    logging.info(f"Download complete: {audio.title}")

    transcript_text = None
    segments = None
    if whisper_api_key:
        try:
            result = AudioTranscriber(api_key=whisper_api_key).transcribe_base64(audio.audio, audio.mime_type)
            transcript_text = result.transcript
            segments = [segment.model_dump() for segment in result.segments]
        except LectureSummarizerError as e:
            logging.warning(f"Transcription failed: {e.message}")

    summary_text = summarizer.summarize_base64(audio.audio, audio.mime_type, prompt, on_status=logging.info)

    summary = LectureSummary(
        source=audio.title,
        summary=summary_text,
        transcript_text=transcript_text,
        transcript_segments=segments,
    )
    save_summary(summary, output_file)
    return summary


def summarize_directory(
    directory: str,
    api_key: Optional[str] = None,
    prompt: Optional[str] = None,
    output_file: Optional[str] = None,
) -> LectureSummary:
    """Summarize every video in a directory, three at a time, into one Markdown file."""
    files: List[Path] = sorted(
        p for p in Path(directory).iterdir() if p.is_file() and is_video_file(p.name)
    )
    if not files:
        raise FileNotFoundError(f"No video files found in: {directory}")

    GeminiSummarizer(api_key=api_key)
    jobs = BatchProcessor.create_jobs([(p.name, None) for p in files])
    payloads = {job.id: p.read_bytes() for job, p in zip(jobs, files)}

    processor = BatchProcessor(
        AudioExtractor(),
        lambda: GeminiSummarizer(api_key=api_key),
        prompt=prompt,
        on_update=lambda job: logging.info(f"[{job.filename}] {job.progress}% {job.status_message}"),
    )
    processor.process_all(jobs, payloads)

    stats = counts(jobs)
    logging.info(f"Batch finished: {stats['completed']}/{stats['total']} completed, {stats['errors']} errors")
    for job in jobs:
        if job.error:
            logging.error(f"{job.filename}: {job.error}")

    summary = LectureSummary(source=Path(directory).name, summary=batch_markdown(jobs))
    if output_file is None:
        output_file = str(Path(config.EXPORTS_DIR) / batch_export_filename())
    save_summary(summary, output_file)
    return summary


def main():
    """Main function to run the application from command line."""
    parser = argparse.ArgumentParser(description="Lecture Video Summarizer")
    parser.add_argument("source", help="Video file, directory of videos or YouTube URL")
    parser.add_argument("--api-key", help="Gemini API key (defaults to GEMINI_API_KEY)")
    parser.add_argument("--prompt-file", help="File containing a custom summary prompt")
    parser.add_argument("--output", help="Output file path for the summary")
    parser.add_argument("--whisper-api-key", help="Groq API key for an optional transcript of YouTube videos")

    args = parser.parse_args()

    # Load environment variables
    load_dotenv()

    prompt = None
    if args.prompt_file:
        prompt = Path(args.prompt_file).read_text(encoding="utf-8")

    if is_valid_youtube_url(args.source):
        summary = summarize_youtube_video(
            args.source, args.api_key, prompt, args.whisper_api_key, args.output
        )
    elif Path(args.source).is_dir():
        summary = summarize_directory(args.source, args.api_key, prompt, args.output)
    else:
        summary = summarize_lecture_video(args.source, args.api_key, prompt, args.output)

    # Print the summary
    print("\n" + "=" * 80)
    print(f"Summary of '{summary.source}'")
    print("=" * 80)
    print(summary.summary)
    if summary.transcript_text:
        print("=" * 80)
        print(summary.transcript_text)
    print("=" * 80)


if __name__ == "__main__":
    main()
