# backend/src/supportdesk/config.py
"""Configuration system for the SupportDesk backend.

This module handles loading settings from environment variables and INI files,
providing sensible defaults for ranking thresholds, quota limits and the LLM
fallback provider.
"""

from configparser import ConfigParser
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional
import os


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# =============================================================================
# CONFIG_SCHEMA
# =============================================================================

# Schema: section -> key -> (type, default, min, max, description)
CONFIG_SCHEMA: dict[str, dict[str, tuple[type, Any, Any, Any, str]]] = {
    "ranking": {
        "server_min_score": (float, 0.3, 0.0, 2.0, "Minimum lexical score kept by the server"),
        "server_direct_threshold": (
            float,
            0.6,
            0.0,
            2.0,
            "Lexical score needed to answer straight from the knowledge base",
        ),
        "client_min_score": (float, 0.1, 0.0, 1.0, "Minimum hybrid score for the best match"),
        "client_context_min_score": (
            float,
            0.05,
            0.0,
            1.0,
            "Minimum hybrid score for similar-question lookups",
        ),
        "client_direct_threshold": (
            float,
            0.88,
            0.0,
            1.0,
            "Hybrid score needed to answer straight from the knowledge base",
        ),
        "context_floor": (float, 0.3, 0.0, 1.0, "Score above which matches become LLM context"),
        "context_limit": (int, 3, 1, 10, "Entries passed to the LLM as context"),
        "top_matches": (int, 3, 1, 20, "Results returned by server searches"),
        "similar_matches": (int, 5, 1, 20, "Results returned by similar-question lookups"),
        "phrase_bonus": (float, 0.2, 0.0, 1.0, "Bonus for a shared 2-3 word phrase"),
    },
    "quota": {
        "limit": (int, 25, 1, 100_000, "Requests allowed per key per window"),
        "window_hours": (int, 24, 1, 720, "Quota window length in hours"),
    },
    "query": {
        "max_length": (int, 500, 1, 10_000, "Maximum query length in characters"),
    },
    "llm": {
        "max_tokens": (int, 512, 32, 32768, "Max response tokens"),
        "temperature": (float, 0.4, 0.0, 2.0, "Sampling temperature for fallback answers"),
    },
}


# =============================================================================
# Section Dataclasses
# =============================================================================


@dataclass(frozen=True)
class RankingConfig:
    """Similarity thresholds and result limits."""

    server_min_score: float
    server_direct_threshold: float
    client_min_score: float
    client_context_min_score: float
    client_direct_threshold: float
    context_floor: float
    context_limit: int
    top_matches: int
    similar_matches: int
    phrase_bonus: float


@dataclass(frozen=True)
class QuotaConfig:
    """Per-session request quota."""

    limit: int
    window_hours: int

    @property
    def window_seconds(self) -> float:
        return self.window_hours * 3600.0


@dataclass(frozen=True)
class QueryConfig:
    """Incoming query validation."""

    max_length: int


@dataclass(frozen=True)
class LLMConfig:
    """LLM client configuration."""

    max_tokens: int
    temperature: float


# =============================================================================
# Config Loader Function
# =============================================================================


def _load_section(
    parser: ConfigParser, section: str, schema: dict[str, tuple[type, Any, Any, Any, str]]
) -> dict[str, Any]:
    """Load and validate a configuration section.

    Args:
        parser: ConfigParser instance with loaded config
        section: Section name to load
        schema: Schema definition for the section

    Returns:
        Dictionary of validated configuration values

    Raises:
        ConfigError: If validation fails
    """
    result = {}

    for key, (typ, default, min_val, max_val, _) in schema.items():
        if parser.has_option(section, key):
            raw_value = parser.get(section, key)
            value: bool | int | float | str
            try:
                if typ is bool:
                    value = raw_value.lower() in ("true", "1", "yes", "on")
                elif typ is int:
                    value = int(raw_value)
                elif typ is float:
                    value = float(raw_value)
                else:
                    value = raw_value
            except ValueError as e:
                raise ConfigError(
                    f"Invalid value for [{section}].{key}: {raw_value!r} (expected {typ.__name__})"
                ) from e
        else:
            value = default

        if typ in (int, float) and value is not None:
            if min_val is not None and value < min_val:
                raise ConfigError(
                    f"Value for [{section}].{key} is {value}, but minimum is {min_val}"
                )
            if max_val is not None and value > max_val:
                raise ConfigError(
                    f"Value for [{section}].{key} is {value}, but maximum is {max_val}"
                )

        result[key] = value

    return result


def _defaults(section: str) -> dict[str, Any]:
    return {key: default for key, (_, default, _, _, _) in CONFIG_SCHEMA[section].items()}


def _load_config(config_path: Optional[Path] = None) -> "Config":
    """Load configuration from an INI file (internal use only).

    Args:
        config_path: Path to config file. If None, uses defaults from schema.

    Returns:
        Config object with all sections populated.

    Raises:
        ConfigError: If validation fails
    """
    parser = ConfigParser()

    if config_path and config_path.exists():
        parser.read(config_path)

    return Config(
        ranking=RankingConfig(**_load_section(parser, "ranking", CONFIG_SCHEMA["ranking"])),
        quota=QuotaConfig(**_load_section(parser, "quota", CONFIG_SCHEMA["quota"])),
        query=QueryConfig(**_load_section(parser, "query", CONFIG_SCHEMA["query"])),
        llm=LLMConfig(**_load_section(parser, "llm", CONFIG_SCHEMA["llm"])),
    )


# =============================================================================
# Config Dataclass
# =============================================================================

DEFAULT_FAQ_DATA_PATH = Path(__file__).parent / "data" / "faq_data.json"


@dataclass(frozen=True)
class Config:
    """Complete application configuration."""

    faq_data_path: Path = DEFAULT_FAQ_DATA_PATH
    active_provider: str = "ollama"
    active_model: str = "llama3"
    gemini_api_key: Optional[str] = None
    groq_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    ollama_endpoint: str = "http://localhost:11434"
    log_dir: Optional[Path] = None

    # Section configs - defaults set in __post_init__
    ranking: RankingConfig = None  # type: ignore[assignment]
    quota: QuotaConfig = None  # type: ignore[assignment]
    query: QueryConfig = None  # type: ignore[assignment]
    llm: LLMConfig = None  # type: ignore[assignment]

    def __post_init__(self):
        """Initialize section configs with defaults if not provided."""
        # Since frozen=True, we need to use object.__setattr__
        if self.ranking is None:
            object.__setattr__(self, "ranking", RankingConfig(**_defaults("ranking")))
        if self.quota is None:
            object.__setattr__(self, "quota", QuotaConfig(**_defaults("quota")))
        if self.query is None:
            object.__setattr__(self, "query", QueryConfig(**_defaults("query")))
        if self.llm is None:
            object.__setattr__(self, "llm", LLMConfig(**_defaults("llm")))

    @property
    def llm_log_path(self) -> Optional[Path]:
        """Path to the LLM query log file, if logging is enabled."""
        if self.log_dir is None:
            return None
        return self.log_dir / "llm-queries.jsonl"

    @property
    def llm_api_key(self) -> Optional[str]:
        """API key for the active LLM provider."""
        provider_keys = {
            "gemini": self.gemini_api_key,
            "groq": self.groq_api_key,
            "openai": self.openai_api_key,
        }
        return provider_keys.get(self.active_provider)

    @property
    def llm_endpoint(self) -> Optional[str]:
        """Endpoint for LLM provider (mainly for Ollama)."""
        if self.active_provider == "ollama":
            return self.ollama_endpoint
        return None


# =============================================================================
# load_settings
# =============================================================================

PROVIDER_DEFAULT_MODELS = {
    "gemini": "gemini-2.5-flash",
    "groq": "llama-3.1-8b-instant",
    "openai": "gpt-4o-mini",
    "ollama": "llama3",
}


def _gemini_key() -> Optional[str]:
    return os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")


def _detect_provider_from_keys() -> tuple[str, str]:
    """Auto-detect provider from available API keys.

    Returns:
        Tuple of (provider, model) based on available keys.
        Falls back to ollama if no keys are found.
    """
    if _gemini_key():
        return ("gemini", PROVIDER_DEFAULT_MODELS["gemini"])
    if os.getenv("GROQ_API_KEY"):
        return ("groq", PROVIDER_DEFAULT_MODELS["groq"])
    if os.getenv("OPENAI_API_KEY"):
        return ("openai", PROVIDER_DEFAULT_MODELS["openai"])
    return ("ollama", PROVIDER_DEFAULT_MODELS["ollama"])


@lru_cache(maxsize=1)
def load_settings() -> Config:
    """Load settings from environment variables and config file.

    Settings are cached for the lifetime of the application.
    Use load_settings.cache_clear() to reload settings.

    Returns:
        Config object populated from environment variables and config file.

    Raises:
        ConfigError: If the config file holds invalid values.
    """
    config_path_str = os.getenv("SUPPORTDESK_CONFIG")
    base_config = _load_config(Path(config_path_str) if config_path_str else None)

    active_provider = os.getenv("ACTIVE_PROVIDER")
    active_model = os.getenv("ACTIVE_MODEL")

    if not active_provider:
        detected_provider, detected_model = _detect_provider_from_keys()
        active_provider = detected_provider
        if not active_model:
            active_model = detected_model
    elif not active_model:
        active_model = PROVIDER_DEFAULT_MODELS.get(active_provider, "llama3")

    data_path_str = os.getenv("FAQ_DATA_PATH")
    log_dir_str = os.getenv("SUPPORTDESK_LOG_DIR")

    return Config(
        faq_data_path=Path(data_path_str) if data_path_str else DEFAULT_FAQ_DATA_PATH,
        active_provider=active_provider,
        active_model=active_model,
        gemini_api_key=_gemini_key(),
        groq_api_key=os.getenv("GROQ_API_KEY"),
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        ollama_endpoint=os.getenv("OLLAMA_ENDPOINT", "http://localhost:11434"),
        log_dir=Path(log_dir_str) if log_dir_str else None,
        ranking=base_config.ranking,
        quota=base_config.quota,
        query=base_config.query,
        llm=base_config.llm,
    )
