import sys
from pathlib import Path

import pytest

# Ensure the project root is on sys.path for direct pytest runs
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from happy_hour.config import Settings, reset_settings  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="test-key", grounded_search=False, streaming=False)


@pytest.fixture
def streaming_settings() -> Settings:
    return Settings(api_key="test-key", grounded_search=True, streaming=True)


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch):
    for key in (
        "GEMINI_API_KEY",
        "GOOGLE_API_KEY",
        "API_KEY",
        "GOOGLE_GENAI_USE_VERTEXAI",
        "HAPPY_HOUR_MODEL",
        "HAPPY_HOUR_GROUNDED_SEARCH",
        "HAPPY_HOUR_STREAMING",
        "HAPPY_HOUR_STRUCTURED_OUTPUT",
        "HAPPY_HOUR_TEMPERATURE",
    ):
        monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()
