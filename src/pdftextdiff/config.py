"""Environment driven settings for pdftextdiff.

Values are read once at import time.  A ``.env`` file in the working directory
is loaded first so local overrides do not need to be exported.
"""
from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

from .presets import DEFAULT_PRESET

logger = logging.getLogger(__name__)

load_dotenv()

PRESET: str = os.getenv("PDFTEXTDIFF_PRESET", DEFAULT_PRESET)
LOG_LEVEL: str = os.getenv("PDFTEXTDIFF_LOG_LEVEL", "INFO").upper()


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, raw)
        return default
    if value <= 0:
        logger.warning("Ignoring non-positive %s=%r", name, raw)
        return default
    return value


CHUNK_SIZE: int = _int_from_env("PDFTEXTDIFF_CHUNK_SIZE", 64 * 1024)


def log_level() -> int:
    """Return the numeric logging level, falling back to ``INFO``."""

    level = logging.getLevelName(LOG_LEVEL)
    return level if isinstance(level, int) else logging.INFO
