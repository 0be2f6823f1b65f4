"""
Configuration objects for the collector application.

Override via environment variables or a .env file (when using python-dotenv).
"""

from __future__ import annotations
import os


def _env_bool(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_number(name: str) -> float | None:
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _env_int(name: str) -> int | str | None:
    """Integer env value; unparsable text is passed through for the harbor config to degrade."""
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return raw


def _env_list(name: str, default: str) -> set[str]:
    return {item.strip() for item in os.getenv(name, default).split(",") if item.strip()}


class Config:
    """Base configuration (safe defaults)."""

    # Security
    SECRET_KEY = os.getenv("FLASK_SECRET_KEY", "dev-unsafe-change-this")

    # Requests
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(16 * 1024 * 1024)))  # 16 MiB

    # Harbor
    HARBOR_MAXIMUM = _env_int("HARBOR_MAXIMUM")  # None -> 10 MiB default
    HARBOR_PERIOD_MS = _env_number("HARBOR_PERIOD_MS")  # None -> no division
    HARBOR_CARED_DATA = _env_list("HARBOR_CARED_DATA", "console,network,storage,system,rrweb-event")

    # Remote collector
    HARBOR_API = os.getenv("HARBOR_API", "")
    HARBOR_ENABLE_SSL = _env_bool("HARBOR_ENABLE_SSL")
    HARBOR_OFFLINE = _env_bool("HARBOR_OFFLINE")
    HARBOR_PROJECT = os.getenv("HARBOR_PROJECT", "default")
    HARBOR_TITLE = os.getenv("HARBOR_TITLE", "")
    HARBOR_CLIENT_ORIGIN = os.getenv("HARBOR_CLIENT_ORIGIN", "")

    # Exports
    EXPORT_FOLDER = os.getenv("EXPORT_FOLDER", "exports")
    EXPORT_COMPRESS = _env_bool("EXPORT_COMPRESS")

    # Logging
    LOG_FILE = os.getenv("APP_LOG_FILE", "logs/app.log")
    LOG_LEVEL = os.getenv("APP_LOG_LEVEL", "INFO")


class ProductionConfig(Config):
    """Production overrides."""
    LOG_LEVEL = os.getenv("APP_LOG_LEVEL", "INFO")


class DevelopmentConfig(Config):
    """Development overrides."""
    LOG_LEVEL = os.getenv("APP_LOG_LEVEL", "DEBUG")
