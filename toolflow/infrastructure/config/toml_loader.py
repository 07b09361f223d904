"""TOML configuration loader with env overrides."""

import logging
import os
import tomllib
from pathlib import Path

from toolflow.domain.ports.config import AppConfig, FlowSettings, ResourceSettings, ServerConfig

logger = logging.getLogger(__name__)


def _load_toml(path: Path) -> dict:
    """Load TOML file."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def _apply_env_overrides(config: dict) -> dict:
    """Apply environment variable overrides."""
    if host := os.getenv("HOST"):
        config.setdefault("server", {})["host"] = host.strip()
    if port := os.getenv("PORT"):
        try:
            config.setdefault("server", {})["port"] = int(port)
        except ValueError:
            logger.warning("Invalid PORT env value: %r, ignoring", port)
    if iterations := os.getenv("FLOW_MAX_ITERATIONS"):
        try:
            config.setdefault("flow", {})["max_iterations"] = int(iterations)
        except ValueError:
            logger.warning("Invalid FLOW_MAX_ITERATIONS env value: %r, ignoring", iterations)
    if timeout := os.getenv("RESOURCE_FETCH_TIMEOUT"):
        try:
            config.setdefault("resources", {})["fetch_timeout"] = float(timeout)
        except ValueError:
            logger.warning("Invalid RESOURCE_FETCH_TIMEOUT env value: %r, ignoring", timeout)
    if level := os.getenv("LOG_LEVEL"):
        config.setdefault("logging", {})["level"] = level.upper()
    if path := os.getenv("LOG_FILE"):
        config.setdefault("logging", {})["file"] = path.strip()
    return config


def load_config(config_dir: Path | None = None) -> AppConfig:
    """Load configuration from TOML files with env overrides.

    Loads default.toml, then development.toml if exists.
    """
    if config_dir is None:
        config_dir = Path(__file__).resolve().parent.parent.parent.parent / "config"

    config: dict = {}

    default_path = config_dir / "default.toml"
    if default_path.exists():
        config = _load_toml(default_path)

    dev_path = config_dir / "development.toml"
    if dev_path.exists():
        for key, value in _load_toml(dev_path).items():
            if isinstance(value, dict) and isinstance(config.get(key), dict):
                config[key] = {**config[key], **value}
            else:
                config[key] = value

    config = _apply_env_overrides(config)

    logging_raw = config.get("logging") or {}
    return AppConfig(
        server=ServerConfig(**(config.get("server") or {})),
        flow=FlowSettings(**(config.get("flow") or {})),
        resources=ResourceSettings(**(config.get("resources") or {})),
        log_level=logging_raw.get("level", "INFO"),
        log_file=(logging_raw.get("file") or "").strip(),
        log_rotation_max_mb=int(logging_raw.get("log_rotation_max_mb", 5)),
        log_rotation_backups=int(logging_raw.get("log_rotation_backups", 3)),
    )
