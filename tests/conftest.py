"""
Configuration for pytest tests.
"""

import os
import shutil
import tempfile
import pytest
from pathlib import Path

# Config and the database engine read the environment at import time,
# so it must be set before any test module imports the package.
TEST_DATA_DIR = Path(tempfile.mkdtemp(prefix="lecture_summarizer_test_"))

os.environ["GEMINI_API_KEY"] = "test_gemini_key"
os.environ["GROQ_API_KEY"] = "test_groq_key"
os.environ["DATA_DIR"] = str(TEST_DATA_DIR)
os.environ["UPLOADS_DIR"] = str(TEST_DATA_DIR / "uploads")
os.environ["AUDIO_DIR"] = str(TEST_DATA_DIR / "audio")
os.environ["EXPORTS_DIR"] = str(TEST_DATA_DIR / "exports")
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DATA_DIR}/test.db"
os.environ["ENVIRONMENT"] = "development"


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Create the test data directories and remove them afterwards."""
    for sub_dir in ("uploads", "audio", "exports"):
        (TEST_DATA_DIR / sub_dir).mkdir(parents=True, exist_ok=True)

    yield

    shutil.rmtree(TEST_DATA_DIR, ignore_errors=True)


@pytest.fixture(scope="session")
def test_video_url():
    """Return a test YouTube video URL."""
    return "https://www.youtube.com/watch?v=V3TUEeB0kW0"


@pytest.fixture(scope="session")
def test_data_dir():
    return TEST_DATA_DIR


@pytest.fixture
def db_session():
    """An in-memory database session with all tables created."""
    from sqlalchemy.orm import sessionmaker
    from sqlalchemy.pool import StaticPool

    from lecture_summarizer.db.database import init_db, make_engine

    engine = make_engine("sqlite://", poolclass=StaticPool)
    init_db(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def fake_sleep():
    """A sleep replacement that records the requested waits."""
    waits = []

    def sleep(seconds):
        waits.append(seconds)

    sleep.waits = waits
    return sleep


@pytest.fixture
def retry_sleeps():
    """Record the backoff waits of the retry library instead of sleeping."""
    from unittest.mock import patch

    waits = []
    with patch("retry.api.time.sleep", side_effect=waits.append):
        yield waits
