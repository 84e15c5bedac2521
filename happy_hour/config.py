"""Environment configuration and GenAI client construction."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from google import genai
from google.genai.types import HttpOptions

from .errors import ConfigurationError
from .logger import LOGGER

DEFAULT_MODEL = "gemini-2.5-flash"


def _as_bool(val: Optional[str], default: bool = False) -> bool:
    if val is None or not val.strip():
        return default
    return val.strip().lower() in ("1", "true", "yes", "on")


def _as_float(val: Optional[str]) -> Optional[float]:
    if val is None or not val.strip():
        return None
    try:
        return float(val)
    except ValueError:
        LOGGER.warning("Ignoring non-numeric temperature %r", val)
        return None


def load_api_key() -> str:
    """Retrieve the Gemini API key or raise a helpful error."""
    key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or os.getenv("API_KEY")
    if not key:
        raise ConfigurationError("GEMINI_API_KEY environment variable is required.")
    return key


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    use_vertexai: bool = False
    model: str = DEFAULT_MODEL
    grounded_search: bool = True
    streaming: bool = True
    structured_output: bool = False
    temperature: Optional[float] = None

    @classmethod
    def from_env(cls) -> "Settings":
        use_vertexai = _as_bool(os.getenv("GOOGLE_GENAI_USE_VERTEXAI"), False)
        # Vertex AI mode authenticates with application default credentials
        api_key = None if use_vertexai else load_api_key()
        settings = cls(
            api_key=api_key,
            use_vertexai=use_vertexai,
            model=os.getenv("HAPPY_HOUR_MODEL") or DEFAULT_MODEL,
            grounded_search=_as_bool(os.getenv("HAPPY_HOUR_GROUNDED_SEARCH"), True),
            streaming=_as_bool(os.getenv("HAPPY_HOUR_STREAMING"), True),
            structured_output=_as_bool(os.getenv("HAPPY_HOUR_STRUCTURED_OUTPUT"), False),
            temperature=_as_float(os.getenv("HAPPY_HOUR_TEMPERATURE")),
        )
        LOGGER.debug(
            "Settings loaded: model=%s grounded=%s streaming=%s structured=%s vertex=%s",
            settings.model,
            settings.grounded_search,
            settings.streaming,
            settings.structured_output,
            settings.use_vertexai,
        )
        return settings

    @property
    def sends_schema(self) -> bool:
        """Response schemas cannot be combined with the search tool."""
        return self.structured_output and not self.grounded_search


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None


def create_client(settings: Settings) -> genai.Client:
    """Build the GenAI client in either Gemini API or Vertex AI mode."""
    if settings.use_vertexai:
        return genai.Client(vertexai=True, http_options=HttpOptions(api_version="v1"))
    if not settings.api_key:
        raise ConfigurationError("No API key configured for the Gemini API.")
    return genai.Client(api_key=settings.api_key)


__all__ = [
    "DEFAULT_MODEL",
    "Settings",
    "create_client",
    "get_settings",
    "load_api_key",
    "reset_settings",
]
