"""
Main Streamlit application for the lecture summarizer.
"""

import os
import streamlit as st
from typing import Dict, Any, Optional
from dotenv import load_dotenv

from lecture_summarizer.core.exporter import batch_export_filename, combined_markdown, history_export_filename
from lecture_summarizer.frontend.api_client import ApiClient
from lecture_summarizer.frontend.components import (
    header, sidebar, loading_spinner, display_error, display_success,
    processing_banner, summary_display, export_buttons, audio_download_button,
    transcription_display, history_list, prompt_editor, api_key_settings,
)
from lecture_summarizer.utils.helpers import format_duration, is_valid_youtube_url


load_dotenv()

MODES = ["Single video", "Batch", "YouTube"]


def init_session_state():
    """Initialize session state variables."""
    if "api_url" not in st.session_state:
        st.session_state.api_url = os.getenv("API_URL", "http://localhost:8000")

    if "gemini_api_key" not in st.session_state:
        st.session_state.gemini_api_key = os.getenv("GEMINI_API_KEY", "")

    if "whisper_api_key" not in st.session_state:
        st.session_state.whisper_api_key = os.getenv("GROQ_API_KEY", "")

    if "current_result" not in st.session_state:
        st.session_state.current_result = None

    if "batch_result" not in st.session_state:
        st.session_state.batch_result = None


def get_client() -> ApiClient:
    """Return a client for the API URL currently set in the sidebar."""
    client = st.session_state.get("api_client")
    if client is None or client.base_url != st.session_state.api_url:
        client = ApiClient(st.session_state.api_url)
        st.session_state.api_client = client
    return client


def get_debug_mode() -> bool:
    try:
        return get_client().get_settings()["debug_mode"]
    except Exception:
        return False


def show_debug(data: Dict[str, Any]):
    """Dump a response without its (large) audio payloads."""
    if not get_debug_mode():
        return
    with st.expander("Debug Information"):
        st.json({key: value for key, value in data.items() if key != "audio"})


def require_api_key() -> Optional[str]:
    api_key = st.session_state.gemini_api_key
    if not api_key:
        st.info("Set your Gemini API key in **Settings** to start summarizing.")
    return api_key or None


def show_result(result: Dict[str, Any]):
    """Display the current summary with its export options."""
    if result.get("duration"):
        st.caption(f"Duration: {format_duration(result['duration'])}")

    summary_display(result["summary"], result.get("title") or result.get("filename"))
    export_buttons(result["summary"], result.get("filename") or result.get("title") or "summary")
    audio_download_button(result.get("audio"), result.get("filename") or "audio")

    if result.get("transcript") or result.get("segments"):
        transcription_display(result.get("segments", []), result.get("transcript"))


def single_mode(api_key: str):
    """Upload one video and summarize it."""
    upload = st.file_uploader("Lecture video", type=["mp4", "mov", "avi", "mkv", "webm", "m4v"])

    if upload and st.button("Summarize", type="primary"):
        processing_banner()
        progress = st.progress(10, text="Preparing...")
        with loading_spinner("Extracting audio and analyzing with Gemini AI..."):
            result = get_client().summarize_video(upload.name, upload.getvalue(), api_key, content_type=upload.type)
        show_debug(result)

        if "error" in result:
            progress.empty()
            display_error(result["error"])
            return

        progress.progress(100, text="Done!")
        display_success("Summary generated")
        st.session_state.current_result = result

    if st.session_state.current_result and "filename" in st.session_state.current_result:
        show_result(st.session_state.current_result)


def batch_mode(api_key: str):
    """Upload several videos and summarize them three at a time."""
    uploads = st.file_uploader(
        "Lecture videos",
        type=["mp4", "mov", "avi", "mkv", "webm", "m4v"],
        accept_multiple_files=True,
    )

    if uploads and st.button(f"Summarize {len(uploads)} videos", type="primary"):
        processing_banner()
        with loading_spinner("Processing videos, three at a time..."):
            result = get_client().summarize_batch(
                [(upload.name, upload.getvalue(), upload.type) for upload in uploads], api_key
            )
        show_debug(result)

        if "error" in result:
            display_error(result["error"])
            return
        st.session_state.batch_result = result

    result = st.session_state.batch_result
    if not result:
        return

    col1, col2, col3 = st.columns(3)
    col1.metric("Completed", result["completed"])
    col2.metric("Errors", result["errors"])
    col3.metric("Total", result["total"])

    completed = [job for job in result["jobs"] if job["status"] == "completed"]
    for job in result["jobs"]:
        label = f"{job['filename']} | {job['status_message']}"
        with st.expander(label, expanded=False):
            st.progress(job["progress"])
            if job.get("error"):
                display_error(job["error"])
            if job.get("summary"):
                summary_display(job["summary"])
                export_buttons(job["summary"], job["filename"], key=f"batch_{job['id']}")
                audio_download_button(job.get("audio"), job["filename"], key=f"batch_audio_{job['id']}")

    if completed:
        st.download_button(
            "Download all summaries",
            data=combined_markdown((job["filename"], job["summary"]) for job in completed).encode("utf-8"),
            file_name=batch_export_filename(),
            mime="text/markdown",
        )


def youtube_mode(api_key: str):
    """Summarize a YouTube video by URL."""
    with st.form(key="youtube_form"):
        url = st.text_input(
            "YouTube URL",
            placeholder="https://www.youtube.com/watch?v=VIDEO_ID",
        )
        submit = st.form_submit_button("Summarize")

    if submit and url:
        if not is_valid_youtube_url(url):
            display_error("Please enter a valid YouTube URL")
            return

        processing_banner()
        with loading_spinner("Downloading audio and analyzing with Gemini AI..."):
            result = get_client().summarize_youtube(
                url, api_key, whisper_api_key=st.session_state.whisper_api_key or None
            )
        show_debug(result)

        if "error" in result:
            display_error(result["error"])
            return

        display_success(f"Processed \"{result['title']}\"")
        st.session_state.current_result = result

    if st.session_state.current_result and "title" in st.session_state.current_result:
        show_result(st.session_state.current_result)


def dashboard_view():
    """Display the dashboard with the single, batch and YouTube modes."""
    api_key = require_api_key()
    mode = st.radio("Mode", MODES, horizontal=True)

    if not api_key:
        return

    if mode == "Single video":
        single_mode(api_key)
    elif mode == "Batch":
        batch_mode(api_key)
    else:
        youtube_mode(api_key)


def history_view():
    """Display saved summaries."""
    client = get_client()
    st.markdown("## History")

    try:
        items = client.list_history()
    except Exception as e:
        display_error(f"Error loading history: {str(e)}")
        return

    if items:
        col1, col2 = st.columns([1, 5])
        with col1:
            content = client.export_history()
            if content:
                st.download_button(
                    "Download all",
                    data=content,
                    file_name=history_export_filename(),
                    mime="text/markdown",
                )
        with col2:
            if st.button("Clear history"):
                client.clear_history()
                st.rerun()

    history_list(items, client.delete_history_item)


def settings_view():
    """Display API keys, debug mode and the prompt editor."""
    client = get_client()
    st.markdown("## Settings")

    api_key_settings()
    st.divider()

    try:
        settings = client.get_settings()
    except Exception as e:
        display_error(f"Error loading settings: {str(e)}")
        return

    debug_mode = st.checkbox("Debug Mode", value=settings["debug_mode"])
    if debug_mode != settings["debug_mode"]:
        client.set_debug_mode(debug_mode)

    if settings["debug_mode"] and st.session_state.gemini_api_key:
        if st.button("Check available models"):
            with loading_spinner("Probing models..."):
                st.write(client.available_models(st.session_state.gemini_api_key))

    st.divider()
    prompt_editor(
        settings["prompt"],
        settings["default_prompt"],
        on_save=client.save_prompt,
        on_reset=client.reset_prompt,
    )


def help_view():
    """Display usage and API key instructions."""
    st.markdown("## Help")
    st.markdown("""
    ### Getting a Gemini API key
    1. Open [Google AI Studio](https://aistudio.google.com/app/apikey) and sign in.
    2. Click **Create API key** and copy it.
    3. Paste it into **Settings**. The key stays in this browser session only.

    ### Getting a Whisper (Groq) API key (optional)
    1. Open the [Groq console](https://console.groq.com/keys).
    2. Create a key and paste it into **Settings**.
    3. YouTube summaries then come with a timestamped transcript.

    ### Usage
    - **Single video**: upload a lecture video. The audio is extracted as mono 16 kHz MP3
      and sent to Gemini. Audio over 15 MB goes through the Gemini File API.
    - **Batch**: upload several videos. They are processed three at a time.
    - **YouTube**: paste a video URL. Videos longer than 30 minutes are rejected.

    ### Limits
    - The free Gemini tier is rate limited. Rate limited requests are tried three times, waiting 1s and then 2s.
    - History keeps the 20 most recent summaries.
    """)


def main():
    """Main application entry point."""
    header()
    init_session_state()
    view = sidebar()

    if view == "Dashboard":
        dashboard_view()
    elif view == "History":
        history_view()
    elif view == "Settings":
        settings_view()
    else:
        help_view()


if __name__ == "__main__":
    main()
