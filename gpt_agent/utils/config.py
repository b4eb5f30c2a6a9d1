"""
Configuration Management
========================

Centralized configuration for the assistant. All environment variables are
read and typed here, so the rest of the code never calls os.getenv().

Values come from the process environment or a .env file in the working
directory. Only OPENAI_API_KEY is required, and only when the model client
is actually built; everything else has a default so the tools and tests can
run without a .env file.

Usage:
    from gpt_agent.utils.config import get_config

    config = get_config()
    print(config.openai.model)
    print(config.tools.searxng_url)
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _required(name: str) -> str:
    """
    Get a required environment variable.

    Args:
        name: The environment variable name

    Returns:
        The value of the environment variable

    Raises:
        ValueError: If the variable is not set
    """
    value = os.getenv(name)
    if not value:
        raise ValueError(
            f"Missing required environment variable: {name}\n"
            f"Please ensure {name} is set in your .env file."
        )
    return value


def _optional(name: str, default: str) -> str:
    """Get an optional environment variable with a default."""
    return os.getenv(name, default)


def _optional_int(name: str, default: int) -> int:
    """
    Get an optional integer environment variable.

    Args:
        name: The environment variable name
        default: Default value if not set or invalid

    Returns:
        The integer value or the default
    """
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        print(f"Warning: {name} is not a valid integer, using default: {default}")
        return default


def _optional_float(name: str, default: float) -> float:
    """Get an optional float environment variable."""
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        print(f"Warning: {name} is not a valid number, using default: {default}")
        return default


def _optional_bool(name: str, default: bool) -> bool:
    """
    Get an optional boolean environment variable.

    Accepts "true" and "1" (case-insensitive) as true, anything else as false.
    """
    value = os.getenv(name)
    if not value:
        return default
    return value.lower() in ("true", "1")


# ==============================================================================
# Configuration Dataclasses
# ==============================================================================

@dataclass(frozen=True)
class OpenAIConfig:
    """OpenAI API configuration."""
    api_key: str | None         # sk-... API key, checked when the client is built
    model: str                  # Model for chat completions
    timeout_seconds: float      # Per-request timeout for the chat call
    system_prompt_file: Path | None  # Optional override for the built-in prompt


@dataclass(frozen=True)
class ToolsConfig:
    """Settings shared by the tool adapters."""
    geocode_api_key: str | None  # geocode.maps.co API key
    searxng_url: str             # Base URL of the local SearxNG instance
    http_timeout_seconds: float  # Timeout applied to every outbound HTTP call


@dataclass(frozen=True)
class AgentConfig:
    """Orchestration loop settings."""
    max_tool_rounds: int   # Safety bound on model/tool rounds per turn
    parallel_tools: bool   # Run a round's tool calls concurrently


@dataclass(frozen=True)
class HistoryConfig:
    """Conversation history persistence."""
    path: Path


@dataclass(frozen=True)
class Config:
    """
    Root configuration object.

    Contains all configuration sections. Access via:
        config = get_config()
        config.openai.model
        config.agent.max_tool_rounds
    """
    openai: OpenAIConfig
    tools: ToolsConfig
    agent: AgentConfig
    history: HistoryConfig
    log_level: str
    debug: bool
    debug_log_file: Path


def load_config() -> Config:
    """
    Load all configuration from the environment.

    Loads the .env file first (existing environment variables win), then
    builds the typed Config object with defaults for everything optional.

    Returns:
        Config: The loaded configuration
    """
    load_dotenv()

    prompt_file = os.getenv("SYSTEM_PROMPT_FILE")

    return Config(
        openai=OpenAIConfig(
            api_key=os.getenv("OPENAI_API_KEY"),
            model=_optional("OPENAI_MODEL", "gpt-4o"),
            timeout_seconds=_optional_float("OPENAI_TIMEOUT_SECONDS", 60.0),
            system_prompt_file=Path(prompt_file) if prompt_file else None,
        ),
        tools=ToolsConfig(
            geocode_api_key=os.getenv("GEOCODE_API_KEY"),
            searxng_url=_optional("SEARXNG_URL", "http://localhost:8080").rstrip("/"),
            http_timeout_seconds=_optional_float("HTTP_TIMEOUT_SECONDS", 15.0),
        ),
        agent=AgentConfig(
            max_tool_rounds=_optional_int("MAX_TOOL_ROUNDS", 10),
            parallel_tools=_optional_bool("PARALLEL_TOOLS", False),
        ),
        history=HistoryConfig(
            path=Path(_optional("HISTORY_FILE", os.path.join("data", "history.json"))),
        ),
        log_level=_optional("LOG_LEVEL", "info"),
        debug=_optional_bool("DEBUG", False),
        debug_log_file=Path(_optional("DEBUG_LOG_FILE", "debug.log")),
    )


# ==============================================================================
# Cached instance
# ==============================================================================

_config_instance: Config | None = None


def get_config() -> Config:
    """
    Get the shared configuration instance.

    The configuration is loaded on first access and cached for subsequent calls.

    Returns:
        Config: The application configuration
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = load_config()
    return _config_instance


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads the environment."""
    global _config_instance
    _config_instance = None


def require_openai_key() -> str:
    """Return OPENAI_API_KEY, raising ValueError if it is not set."""
    return _required("OPENAI_API_KEY")
