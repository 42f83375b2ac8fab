# backend/tests/test_config.py
"""Configuration tests.

Tests verify behavior (types, ranges, loading) not specific values.
"""

from pathlib import Path

import pytest

from supportdesk.config import (
    CONFIG_SCHEMA,
    DEFAULT_FAQ_DATA_PATH,
    Config,
    ConfigError,
    _load_config,
    load_settings,
)

PROVIDER_ENV_VARS = (
    "ACTIVE_PROVIDER",
    "ACTIVE_MODEL",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "GROQ_API_KEY",
    "OPENAI_API_KEY",
    "OLLAMA_ENDPOINT",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove provider, path and config variables from the environment."""
    for name in PROVIDER_ENV_VARS + ("SUPPORTDESK_CONFIG", "FAQ_DATA_PATH", "SUPPORTDESK_LOG_DIR"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def write_config(tmp_path: Path, content: str) -> Path:
    """Write a config.ini file and return the path."""
    config_path = tmp_path / "config.ini"
    config_path.write_text(content)
    return config_path


# =============================================================================
# Type Validation Tests
# =============================================================================


def test_all_settings_have_correct_types():
    """Every setting matches its declared type from schema."""
    config = _load_config(None)

    for section_name, keys in CONFIG_SCHEMA.items():
        section = getattr(config, section_name)
        for key, (expected_type, *_) in keys.items():
            value = getattr(section, key)
            assert isinstance(value, expected_type), (
                f"{section_name}.{key}: expected {expected_type.__name__}, "
                f"got {type(value).__name__}"
            )


def test_invalid_type_raises_clear_error(tmp_path: Path):
    """Non-numeric value for int setting gives helpful message."""
    config_path = write_config(tmp_path, "[quota]\nlimit = lots")

    with pytest.raises(ConfigError) as exc_info:
        _load_config(config_path)

    assert "quota" in str(exc_info.value)
    assert "limit" in str(exc_info.value)
    assert "int" in str(exc_info.value)


def test_invalid_float_raises_clear_error(tmp_path: Path):
    """Non-numeric value for float setting gives helpful message."""
    config_path = write_config(tmp_path, "[ranking]\nserver_direct_threshold = high")

    with pytest.raises(ConfigError) as exc_info:
        _load_config(config_path)

    assert "ranking" in str(exc_info.value)
    assert "server_direct_threshold" in str(exc_info.value)
    assert "float" in str(exc_info.value)


# =============================================================================
# Range Validation Tests
# =============================================================================


def test_numeric_settings_in_valid_ranges():
    """Default values are within their declared ranges and ordered sensibly."""
    config = _load_config(None)

    assert config.quota.limit > 0
    assert config.quota.window_seconds == config.quota.window_hours * 3600
    assert config.query.max_length > 0
    assert config.llm.max_tokens > 0

    # Direct answers need more confidence than inclusion in a ranking
    assert config.ranking.server_min_score < config.ranking.server_direct_threshold
    assert config.ranking.client_min_score < config.ranking.client_direct_threshold
    assert config.ranking.client_context_min_score < config.ranking.client_min_score
    assert config.ranking.context_limit <= config.ranking.similar_matches


def test_value_below_minimum_raises_error(tmp_path: Path):
    """Value below declared minimum raises ConfigError."""
    config_path = write_config(tmp_path, "[quota]\nlimit = 0")

    with pytest.raises(ConfigError) as exc_info:
        _load_config(config_path)

    assert "quota" in str(exc_info.value)
    assert "minimum" in str(exc_info.value)


def test_value_above_maximum_raises_error(tmp_path: Path):
    """Value above declared maximum raises ConfigError."""
    config_path = write_config(tmp_path, "[llm]\ntemperature = 5.0")

    with pytest.raises(ConfigError) as exc_info:
        _load_config(config_path)

    assert "llm" in str(exc_info.value)
    assert "temperature" in str(exc_info.value)
    assert "maximum" in str(exc_info.value)


# =============================================================================
# Loading Behavior Tests
# =============================================================================


def test_missing_config_uses_defaults():
    """No config.ini file? All defaults load successfully."""
    config = _load_config(None)

    assert config.ranking is not None
    assert config.quota is not None
    assert config.query is not None
    assert config.llm is not None


def test_partial_config_merges_with_defaults(tmp_path: Path):
    """Config with only [quota] still has [ranking] defaults."""
    config_path = write_config(tmp_path, "[quota]\nlimit = 10")

    config = _load_config(config_path)

    assert config.quota.limit == 10
    assert config.ranking.context_limit > 0
    assert config.llm.max_tokens > 0


def test_empty_config_file_uses_defaults(tmp_path: Path):
    """Empty config.ini file loads all defaults."""
    config = _load_config(write_config(tmp_path, ""))

    assert config == _load_config(None)


def test_config_defaults_without_sections():
    """Config() built directly fills every section with schema defaults."""
    assert Config() == _load_config(None)


# =============================================================================
# Integration Tests (load_settings)
# =============================================================================


def test_load_settings_from_environment(clean_env):
    """load_settings integrates with env vars."""
    clean_env.setenv("ACTIVE_PROVIDER", "openai")
    clean_env.setenv("ACTIVE_MODEL", "gpt-4o")

    settings = load_settings()

    assert settings.active_provider == "openai"
    assert settings.active_model == "gpt-4o"


def test_load_settings_default_model_for_provider(clean_env):
    clean_env.setenv("ACTIVE_PROVIDER", "groq")

    settings = load_settings()

    assert settings.active_model == "llama-3.1-8b-instant"


def test_load_settings_auto_detects_provider(clean_env):
    """Provider auto-detection from API keys works."""
    clean_env.setenv("GOOGLE_API_KEY", "test-key")

    settings = load_settings()

    assert settings.active_provider == "gemini"
    assert settings.llm_api_key == "test-key"


def test_load_settings_falls_back_to_ollama(clean_env):
    settings = load_settings()

    assert settings.active_provider == "ollama"
    assert settings.llm_api_key is None
    assert settings.llm_endpoint == "http://localhost:11434"


def test_load_settings_reads_config_file(clean_env, tmp_path: Path):
    config_path = write_config(tmp_path, "[ranking]\nserver_direct_threshold = 0.75")
    clean_env.setenv("SUPPORTDESK_CONFIG", str(config_path))

    settings = load_settings()

    assert settings.ranking.server_direct_threshold == 0.75


def test_load_settings_paths(clean_env, tmp_path: Path):
    """Dataset defaults to the bundled file; the LLM log needs a log dir."""
    settings = load_settings()
    assert settings.faq_data_path == DEFAULT_FAQ_DATA_PATH
    assert settings.llm_log_path is None

    load_settings.cache_clear()
    clean_env.setenv("FAQ_DATA_PATH", str(tmp_path / "faq.json"))
    clean_env.setenv("SUPPORTDESK_LOG_DIR", str(tmp_path / "logs"))

    settings = load_settings()
    assert settings.faq_data_path == tmp_path / "faq.json"
    assert settings.llm_log_path == tmp_path / "logs" / "llm-queries.jsonl"


def test_load_settings_is_cached(clean_env):
    assert load_settings() is load_settings()
