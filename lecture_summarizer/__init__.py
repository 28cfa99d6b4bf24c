"""
Lecture Video Summarizer Application.

This application extracts the audio track of a lecture video (or a YouTube
video), sends it to Gemini for a structured Markdown summary, and keeps a
history of the generated summaries.
"""

from lecture_summarizer.config import config

__version__ = config.APP_VERSION
