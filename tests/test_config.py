import pytest

from happy_hour.config import DEFAULT_MODEL, Settings, create_client, get_settings, load_api_key, reset_settings
from happy_hour.errors import ConfigurationError


def test_missing_api_key_raises_configuration_error():
    with pytest.raises(ConfigurationError):
        load_api_key()


@pytest.mark.parametrize("env_key", ["GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY"])
def test_api_key_sources(monkeypatch, env_key):
    monkeypatch.setenv(env_key, "secret")
    assert load_api_key() == "secret"


def test_gemini_key_takes_precedence(monkeypatch):
    monkeypatch.setenv("API_KEY", "legacy")
    monkeypatch.setenv("GEMINI_API_KEY", "preferred")
    assert load_api_key() == "preferred"


def test_defaults_from_env(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "secret")
    settings = Settings.from_env()
    assert settings.api_key == "secret"
    assert settings.model == DEFAULT_MODEL
    assert settings.grounded_search is True
    assert settings.streaming is True
    assert settings.structured_output is False
    assert settings.temperature is None


def test_overrides_from_env(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "secret")
    monkeypatch.setenv("HAPPY_HOUR_MODEL", "gemini-2.5-pro")
    monkeypatch.setenv("HAPPY_HOUR_GROUNDED_SEARCH", "off")
    monkeypatch.setenv("HAPPY_HOUR_STREAMING", "0")
    monkeypatch.setenv("HAPPY_HOUR_STRUCTURED_OUTPUT", "YES")
    monkeypatch.setenv("HAPPY_HOUR_TEMPERATURE", "0.2")
    settings = Settings.from_env()
    assert settings.model == "gemini-2.5-pro"
    assert settings.grounded_search is False
    assert settings.streaming is False
    assert settings.structured_output is True
    assert settings.temperature == 0.2
    assert settings.sends_schema is True


def test_bad_temperature_is_ignored(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "secret")
    monkeypatch.setenv("HAPPY_HOUR_TEMPERATURE", "warm")
    assert Settings.from_env().temperature is None


def test_vertex_mode_needs_no_key(monkeypatch):
    monkeypatch.setenv("GOOGLE_GENAI_USE_VERTEXAI", "true")
    settings = Settings.from_env()
    assert settings.use_vertexai is True
    assert settings.api_key is None


def test_schema_not_sent_with_grounding():
    assert Settings(structured_output=True, grounded_search=True).sends_schema is False
    assert Settings(structured_output=False, grounded_search=False).sends_schema is False


def test_get_settings_is_cached(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "first")
    first = get_settings()
    monkeypatch.setenv("GEMINI_API_KEY", "second")
    assert get_settings() is first
    reset_settings()
    assert get_settings().api_key == "second"


def test_create_client_without_key_raises():
    with pytest.raises(ConfigurationError):
        create_client(Settings(api_key=None))


def test_create_client_with_key():
    client = create_client(Settings(api_key="secret"))
    assert client is not None
