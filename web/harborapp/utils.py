"""
Utility helpers: directory setup, logging config, URL helpers, and export tags.
"""

from __future__ import annotations

import logging
import platform
import uuid
from datetime import datetime, timezone
from functools import lru_cache
from logging.handlers import RotatingFileHandler
from pathlib import Path

from flask import Flask

from data_harbor import __version__


def ensure_dirs(*paths: Path) -> None:
    """Ensure each directory exists."""
    for p in paths:
        p.mkdir(parents=True, exist_ok=True)


def init_logging(app: Flask) -> logging.Logger:
    """Configure a console logger + rotating file handler."""
    log_level = getattr(logging, app.config["LOG_LEVEL"].upper(), logging.INFO)
    logger = logging.getLogger("harborapp")
    logger.setLevel(log_level)
    logger.propagate = False  # avoid duplicate logs if root has handlers
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    # Console
    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
    logger.addHandler(ch)

    # File (rotating)
    log_file = Path(app.config["LOG_FILE"])
    ensure_dirs(log_file.parent)
    fh = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=5)
    fh.setLevel(log_level)
    fh.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
    logger.addHandler(fh)

    if app.config["SECRET_KEY"] == "dev-unsafe-change-this":
        logger.warning("Using default SECRET_KEY. Set FLASK_SECRET_KEY for production.")

    return logger


def remove_end_slash(url: str) -> str:
    """Strip trailing slashes from a base URL."""
    return url.rstrip("/")


@lru_cache(maxsize=1)
def get_device_id() -> str:
    """Identifier for this collector process; stable for its lifetime."""
    return uuid.uuid4().hex


def user_agent() -> str:
    return f"data-harbor/{__version__} ({platform.system()}; Python {platform.python_version()})"


def default_filename() -> str:
    """Local timestamp used as the export filename."""
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def utcnow_iso() -> str:
    """Return current UTC timestamp in RFC3339-ish ISO format."""
    return datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z"
