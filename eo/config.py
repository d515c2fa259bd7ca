from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "~/.config/eo/config.yaml"
DEFAULT_SERVICE_URL = "http://localhost:11434"
DEFAULT_TIMEOUT = 120

COLOR_MODES = ("auto", "always", "never")


class ConfigError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


@dataclass
class ServiceConfig:
    """Generation service location and request settings."""

    url: str = DEFAULT_SERVICE_URL
    model: str | None = None
    timeout: int = DEFAULT_TIMEOUT


@dataclass
class DisplayConfig:
    """Terminal rendering settings."""

    width: int | None = None
    color: str = "auto"


@dataclass
class AppConfig:
    """Top-level application configuration aggregating all subsections."""

    service: ServiceConfig = field(default_factory=ServiceConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)


def _positive_int(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"{name} must be a positive integer, got {value!r}")
    return value


def _read_raw(config_path: Path) -> dict:
    try:
        with open(config_path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    return raw


def load_config(path: str = DEFAULT_CONFIG_PATH) -> AppConfig:
    """Load and validate application configuration from a YAML file.

    A missing file is not an error: the file only comes into existence the
    first time a service URL is persisted, so every field has a default.

    Args:
        path: Filesystem path to the YAML configuration file. ``~`` is
            expanded.

    Returns:
        A fully populated AppConfig instance.

    Raises:
        ConfigError: If the file cannot be parsed, is not a mapping, or
            holds an invalid timeout, width or color mode.
    """
    config_path = Path(path).expanduser()
    if not config_path.exists():
        logger.debug("No config file at %s, using defaults", config_path)
        return AppConfig()

    raw = _read_raw(config_path)

    # `or {}` fallback handles YAML null values for optional sections
    service_raw = raw.get("service", {}) or {}
    display_raw = raw.get("display", {}) or {}

    url = service_raw.get("url") or DEFAULT_SERVICE_URL
    if not isinstance(url, str):
        raise ConfigError(f"service.url must be a string, got {url!r}")

    timeout = _positive_int(service_raw.get("timeout", DEFAULT_TIMEOUT), "service.timeout")

    width = display_raw.get("width")
    if width is not None:
        width = _positive_int(width, "display.width")

    color = display_raw.get("color", "auto")
    if color not in COLOR_MODES:
        raise ConfigError(
            f"display.color must be one of {', '.join(COLOR_MODES)}, got {color!r}"
        )

    logger.debug("Loaded config from %s", config_path)
    logger.debug("Service url=%s timeout=%d", url, timeout)

    return AppConfig(
        service=ServiceConfig(
            url=url,
            model=service_raw.get("model"),
            timeout=timeout,
        ),
        display=DisplayConfig(width=width, color=color),
    )


def save_service_url(path: str, url: str) -> None:
    """Persist the service URL, keeping every other key in the file.

    Raises:
        ConfigError: If the existing file cannot be parsed or the new
            file cannot be written.
    """
    config_path = Path(path).expanduser()
    raw = _read_raw(config_path) if config_path.exists() else {}

    service_raw = raw.get("service") or {}
    service_raw["url"] = url
    raw["service"] = service_raw

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w") as f:
            yaml.safe_dump(raw, f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise ConfigError(f"Cannot write config file {config_path}: {e}") from e

    logger.info("Saved service url %s to %s", url, config_path)


def resolve_service_url(cli_url: str | None, config: AppConfig) -> str:
    """Pick the service URL: command line, then config file, then default."""
    if cli_url:
        return cli_url.rstrip("/")
    return (config.service.url or DEFAULT_SERVICE_URL).rstrip("/")
