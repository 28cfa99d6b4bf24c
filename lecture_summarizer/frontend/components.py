"""
Reusable UI components for the Streamlit app.
"""

import base64
import datetime
import streamlit as st
from typing import Dict, Any, List, Optional, Callable

from lecture_summarizer.core.exporter import (
    EXPORT_FORMATS,
    audio_filename,
    export_summary,
    markdown_to_plain_text,
)
from lecture_summarizer.models.schemas import TranscriptSegment
from lecture_summarizer.utils.helpers import format_timestamp, strip_extension, truncate_text

VIEWS = ["Dashboard", "History", "Settings", "Help"]


def header():
    """Display the application header."""
    st.set_page_config(
        page_title="Lecture Video Summarizer",
        page_icon="🎓",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    st.title("🎓 Lecture Video Summarizer")
    st.markdown("""
    Upload lecture videos or paste a YouTube URL to get a structured AI summary.
    """)
    st.divider()


def sidebar() -> str:
    """
    Display the sidebar with navigation and connection options.

    Returns:
        The selected view name
    """
    with st.sidebar:
        st.title("Lecture Summarizer")

        view = st.radio("Navigation", VIEWS, key="current_view")

        st.markdown("## Connection")
        st.text_input("API URL", key="api_url")

        if st.session_state.get("gemini_api_key"):
            st.success("Gemini API key set")
        else:
            st.warning("Gemini API key not set")

        st.divider()
        st.caption("Audio is extracted on the server and sent to Gemini for summarization.")

    return view


def loading_spinner(message: str = "Processing..."):
    """
    Display a loading spinner with a message.

    Args:
        message: Message to display with the spinner
    """
    return st.spinner(message)


def display_error(message: str):
    st.error(message)


def display_success(message: str):
    st.success(message)


def processing_banner():
    """Warn that leaving the page interrupts processing."""
    st.warning("⏳ Processing... Leaving or reloading this page will interrupt the work.")


def summary_display(summary: str, title: Optional[str] = None):
    """
    Display a Markdown summary.

    Args:
        summary: Markdown summary text
        title: Optional heading shown above the summary
    """
    if title:
        st.markdown(f"### {title}")
    st.markdown(summary, unsafe_allow_html=True)


def export_buttons(summary: str, filename: str, key: str = "export"):
    """
    Display download buttons for every export format plus a copyable text block.

    Args:
        summary: Markdown summary text
        filename: Source filename the export names derive from
        key: Unique widget key prefix
    """
    stem = strip_extension(filename) or "summary"
    columns = st.columns(len(EXPORT_FORMATS))
    for column, fmt in zip(columns, EXPORT_FORMATS):
        content, media_type, export_name = export_summary(summary, fmt, f"{stem}_summary")
        with column:
            st.download_button(
                f"Download {fmt.upper()}",
                data=content,
                file_name=export_name,
                mime=media_type,
                key=f"{key}_{fmt}",
            )

    with st.expander("Copy for Notion"):
        st.code(summary, language="markdown")

    with st.expander("Plain text"):
        st.text(markdown_to_plain_text(summary))


def audio_download_button(audio_b64: Optional[str], filename: str, key: str = "audio"):
    """Offer the extracted MP3 for download."""
    if not audio_b64:
        return
    st.download_button(
        "Download audio (MP3)",
        data=base64.b64decode(audio_b64),
        file_name=audio_filename(filename),
        mime="audio/mp3",
        key=key,
    )


def transcription_display(segments: List[Any], transcript: Optional[str] = None):
    """
    Display a transcript as [mm:ss] lines.

    Args:
        segments: Transcript segments (dicts or TranscriptSegment)
        transcript: Full transcript text used when there are no segments
    """
    with st.expander("Transcript"):
        if not segments:
            st.markdown(transcript or "*No transcript available*")
            return

        lines = []
        for segment in segments:
            if isinstance(segment, dict):
                segment = TranscriptSegment(**segment)
            lines.append(f"[{format_timestamp(segment.start)}] {segment.text.strip()}")
        st.text("\n".join(lines))


def history_list(items: List[Dict[str, Any]], on_delete: Callable[[str], None]):
    """
    Display saved summaries with view and delete actions.

    Args:
        items: History items, newest first
        on_delete: Function to call with the item ID to delete
    """
    if not items:
        st.info("No summaries yet.")
        return

    for item in items:
        created = datetime.datetime.fromtimestamp(item["timestamp"] / 1000).strftime("%Y-%m-%d %H:%M")
        with st.expander(f"{truncate_text(item['filename'], 80)} ({created})"):
            if item.get("youtube_url"):
                st.markdown(f"[Open on YouTube]({item['youtube_url']})")
            summary_display(item["summary"])
            export_buttons(item["summary"], item["filename"], key=f"history_{item['id']}")
            if st.button("Delete", key=f"delete_{item['id']}"):
                on_delete(item["id"])
                st.rerun()


def prompt_editor(prompt: str, default_prompt: str,
                  on_save: Callable[[str], None], on_reset: Callable[[], None]):
    """Display the summary prompt editor with save and reset actions."""
    st.markdown("### Summary prompt")
    edited = st.text_area("Prompt", value=prompt, height=400, key="prompt_editor")

    col1, col2 = st.columns([1, 5])
    with col1:
        if st.button("Save prompt"):
            on_save(edited)
            display_success("Prompt saved")
    with col2:
        if st.button("Reset to default", disabled=prompt == default_prompt):
            on_reset()
            st.rerun()


def api_key_settings():
    """
    Display API key inputs.

    Keys stay in the browser session and are never written to the database.
    """
    st.markdown("### API keys")
    gemini_key = st.text_input(
        "Gemini API key",
        value=st.session_state.get("gemini_api_key", ""),
        type="password",
    )
    whisper_key = st.text_input(
        "Whisper (Groq) API key, optional",
        value=st.session_state.get("whisper_api_key", ""),
        type="password",
    )

    if st.button("Save keys"):
        st.session_state.gemini_api_key = gemini_key.strip()
        st.session_state.whisper_api_key = whisper_key.strip()
        display_success("API keys saved for this session")
