"""
Core functionality for the lecture summarization application.

This package contains modules for extracting audio from lecture videos,
downloading YouTube audio, transcribing speech, summarizing with Gemini,
batch processing and exporting summaries.
"""
