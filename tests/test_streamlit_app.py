"""
Tests for the Streamlit dashboard session state.
"""

import pytest
from unittest.mock import patch

from lecture_summarizer.frontend import streamlit_app


class SessionState(dict):
    """Dict with attribute access, like st.session_state."""

    def __getattr__(self, key):
        try:
            return self[key]
        except KeyError as e:
            raise AttributeError(key) from e

    def __setattr__(self, key, value):
        self[key] = value


@pytest.fixture
def session_state():
    state = SessionState()
    with patch.object(streamlit_app.st, "session_state", state):
        yield state


def test_api_keys_default_from_environment(session_state):
    streamlit_app.init_session_state()

    assert session_state.gemini_api_key == "test_gemini_key"
    assert session_state.whisper_api_key == "test_groq_key"


def test_existing_keys_are_kept(session_state):
    session_state.gemini_api_key = "typed_in_sidebar"

    streamlit_app.init_session_state()

    assert session_state.gemini_api_key == "typed_in_sidebar"


def test_require_api_key_passes_environment_key(session_state):
    streamlit_app.init_session_state()

    assert streamlit_app.require_api_key() == "test_gemini_key"


def test_require_api_key_without_key(session_state, monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    streamlit_app.init_session_state()

    with patch.object(streamlit_app.st, "info") as info:
        assert streamlit_app.require_api_key() is None

    info.assert_called_once()


def test_help_describes_retry_waits():
    with patch.object(streamlit_app.st, "markdown") as markdown:
        streamlit_app.help_view()

    text = "".join(call.args[0] for call in markdown.call_args_list)
    assert "waiting 1s and then 2s" in text
    assert "4s" not in text
