"""Configuration loader for the Transit Timer dial app."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
import yaml

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
LOG_FILENAME = "transit_timer.log"


@dataclass(frozen=True)
class TriMetConfig:
    """TriMet API configuration."""

    app_id: str
    stop_ids: list[int]
    poll_interval_seconds: float
    minutes: int
    arrivals: int


@dataclass(frozen=True)
class DialConfig:
    """Dial canvas size and tick intervals."""

    width: int
    render_interval_seconds: float
    label_interval_seconds: float


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str
    log_dir: str


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""

    trimet: TriMetConfig
    dial: DialConfig
    log: LoggingConfig


def _require_key(mapping: dict[str, Any], key: str, context: str) -> Any:
    if key not in mapping:
        raise ValueError(f"Missing required key '{key}' in {context} config")
    return mapping[key]


def _require_section(data: dict[str, Any], key: str) -> dict[str, Any]:
    section = _require_key(data, key, key)
    if not isinstance(section, dict):
        raise ValueError(f"'{key}' config must be a mapping")
    return section


def _stop_ids(value: Any) -> list[int]:
    if not isinstance(value, list) or not value:
        raise ValueError("'trimet.stop_ids' must be a non-empty list")
    if not all(isinstance(stop_id, int) and not isinstance(stop_id, bool) for stop_id in value):
        raise ValueError("'trimet.stop_ids' must contain only integers")
    return list(value)


def load_config(path: str = "config/config.yaml") -> AppConfig:
    """Load application configuration from a YAML file."""
    load_dotenv()
    app_id = os.environ.get("TRIMET_APP_ID", "")
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise ValueError(f"Config file not found: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping at the top level")

    trimet_section = _require_section(data, "trimet")
    dial_section = _require_section(data, "dial")
    logging_section = _require_section(data, "logging")

    trimet = TriMetConfig(
        app_id=app_id,
        stop_ids=_stop_ids(_require_key(trimet_section, "stop_ids", "trimet")),
        poll_interval_seconds=_require_key(trimet_section, "poll_interval_seconds", "trimet"),
        minutes=trimet_section.get("minutes", 60),
        arrivals=trimet_section.get("arrivals", 20),
    )

    dial = DialConfig(
        width=_require_key(dial_section, "width", "dial"),
        render_interval_seconds=dial_section.get("render_interval_seconds", 0.2),
        label_interval_seconds=dial_section.get("label_interval_seconds", 2),
    )

    logging_config = LoggingConfig(
        level=_require_key(logging_section, "level", "logging"),
        log_dir=_require_key(logging_section, "log_dir", "logging"),
    )

    return AppConfig(trimet=trimet, dial=dial, log=logging_config)


def configure_logging(config: LoggingConfig) -> None:
    """Send log records to stderr and to a file under ``log_dir``."""
    log_dir = Path(config.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=config.level.upper(),
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_dir / LOG_FILENAME, encoding="utf-8"),
        ],
        force=True,
    )


__all__ = [
    "AppConfig",
    "DialConfig",
    "LoggingConfig",
    "TriMetConfig",
    "configure_logging",
    "load_config",
]
