"""
Configuration settings for the lecture summarizer application.
"""

import os
from typing import Dict, List
from pathlib import Path
from dotenv import load_dotenv


# Ensure environment variables are loaded
load_dotenv()


class Config:
    """Base configuration class."""

    # Application info
    APP_NAME = "Lecture Video Summarizer"
    APP_VERSION = "0.2.0"

    # Data directories
    BASE_DIR = Path(__file__).resolve().parent.parent.absolute()
    DATA_DIR = Path(os.getenv("DATA_DIR", BASE_DIR / "data"))
    UPLOADS_DIR = Path(os.getenv("UPLOADS_DIR", DATA_DIR / "uploads"))
    AUDIO_DIR = Path(os.getenv("AUDIO_DIR", DATA_DIR / "audio"))
    EXPORTS_DIR = Path(os.getenv("EXPORTS_DIR", DATA_DIR / "exports"))

    # API keys (requests may carry their own key, which wins)
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
    GROQ_API_KEY = os.getenv("GROQ_API_KEY")

    # Default models
    DEFAULT_SUMMARY_MODEL = os.getenv("SUMMARY_MODEL", "gemini-2.0-flash-exp")
    CANDIDATE_SUMMARY_MODELS: List[str] = [
        "gemini-2.0-flash-exp",
        "gemini-1.5-flash",
        "gemini-1.5-flash-001",
        "gemini-1.5-pro",
        "gemini-1.5-pro-001",
    ]
    DEFAULT_TRANSCRIPTION_MODEL = os.getenv("TRANSCRIPTION_MODEL", "whisper-large-v3-turbo")
    TRANSCRIPTION_LANGUAGE = os.getenv("TRANSCRIPTION_LANGUAGE", "ja")

    # Processing limits
    MAX_YOUTUBE_DURATION = 1800  # seconds
    LARGE_AUDIO_THRESHOLD_MB = 15
    FFMPEG_TIMEOUT = 300  # seconds
    MAX_HISTORY_ITEMS = 20
    BATCH_CONCURRENCY = 3
    MAX_RETRIES = 3
    FILE_POLL_INTERVAL = 2  # seconds

    PUBLIC_URL = os.getenv("PUBLIC_URL", "http://localhost:8000")

    # Create data directories if they don't exist
    @classmethod
    def initialize(cls):
        """Initialize the application configuration."""
        cls.DATA_DIR.mkdir(parents=True, exist_ok=True)
        cls.UPLOADS_DIR.mkdir(parents=True, exist_ok=True)
        cls.AUDIO_DIR.mkdir(parents=True, exist_ok=True)
        cls.EXPORTS_DIR.mkdir(parents=True, exist_ok=True)

    @classmethod
    def get_paths(cls) -> Dict[str, Path]:
        """Get all application paths."""
        return {
            "base_dir": cls.BASE_DIR,
            "data_dir": cls.DATA_DIR,
            "uploads_dir": cls.UPLOADS_DIR,
            "audio_dir": cls.AUDIO_DIR,
            "exports_dir": cls.EXPORTS_DIR,
        }


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False
    LOG_LEVEL = "INFO"


# Determine which configuration to use based on environment
def get_config():
    """Get the appropriate configuration based on environment."""
    env = os.getenv("ENVIRONMENT", "development").lower()
    if env == "production":
        return ProductionConfig
    else:
        return DevelopmentConfig


# Create a config instance
config = get_config()
config.initialize()
