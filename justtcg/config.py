"""Client configuration: dataclass defaults, YAML loader and validation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from justtcg.errors import AuthenticationError, ConfigError
from justtcg.transport import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("justtcg.yaml")
API_KEY_ENV_VAR = "JUSTTCG_API_KEY"


@dataclass
class ClientConfig:
    """Settings for one client instance."""

    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    page_size: int = 100  # limit used by fetch_all()
    max_pages: Optional[int] = None  # None: follow hasMore without a bound
    user_agent: str = DEFAULT_USER_AGENT


def load_config(path: Optional[Path] = None) -> ClientConfig:
    """Load configuration from a YAML file, falling back to defaults."""
    config_path = path or DEFAULT_CONFIG_PATH
    if not config_path.exists():
        logger.info("No config file at %s, using defaults", config_path)
        config = ClientConfig()
    else:
        logger.info("Loading config from %s", config_path)
        with open(config_path, "r", encoding="utf-8") as f:
            try:
                raw = yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise ConfigError(f"Config error: {config_path} is not valid YAML: {exc}") from exc
        config = _parse_config(raw) if raw else ClientConfig()

    validate_config(config)
    return config


def resolve_api_key(
    api_key: Optional[str],
    config: ClientConfig,
    environ: Mapping[str, str],
) -> str:
    """Pick the API key: explicit argument, then config, then environment."""
    for candidate in (api_key, config.api_key, environ.get(API_KEY_ENV_VAR)):
        if candidate and candidate.strip():
            return candidate.strip()
    raise AuthenticationError("Authentication error: API key is missing.")


def _parse_config(raw: Dict[str, Any]) -> ClientConfig:
    """Parse a raw YAML dict into ClientConfig."""
    if not isinstance(raw, dict):
        raise ConfigError("Config error: top level must be a mapping")

    config = ClientConfig()
    # Settings may sit at the top level or under a ``justtcg:`` section
    section = raw.get("justtcg", raw)
    if not isinstance(section, dict):
        raise ConfigError("Config error: 'justtcg' section must be a mapping")

    if section.get("api_key"):
        config.api_key = str(section["api_key"])
    config.base_url = str(section.get("base_url", config.base_url))
    config.user_agent = str(section.get("user_agent", config.user_agent))

    try:
        config.timeout = float(section.get("timeout", config.timeout))
        config.page_size = int(section.get("page_size", config.page_size))
        max_pages = section.get("max_pages", config.max_pages)
        config.max_pages = None if max_pages is None else int(max_pages)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Config error: {exc}") from exc

    return config


def validate_config(config: ClientConfig) -> None:
    """Validate config and raise on errors."""
    if not config.base_url.startswith(("http://", "https://")):
        raise ConfigError(f"Config error: base_url must be an http(s) URL, got '{config.base_url}'")
    if config.timeout <= 0:
        raise ConfigError(f"Config error: timeout must be positive, got {config.timeout}")
    if config.page_size < 1:
        raise ConfigError(f"Config error: page_size must be >= 1, got {config.page_size}")
    if config.max_pages is not None and config.max_pages < 1:
        raise ConfigError(f"Config error: max_pages must be >= 1, got {config.max_pages}")

    logger.info(
        "Config validated: base_url=%s, page_size=%d, max_pages=%s",
        config.base_url,
        config.page_size,
        config.max_pages,
    )
