"""Root logger setup for the CLI and embedding hosts.

``SHEETFORM_LOG_LEVEL`` (a level name such as ``DEBUG``) wins over everything;
a truthy ``SHEETFORM_DEBUG`` forces DEBUG. Otherwise the caller's level or the
``debug_logging`` setting applies.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

LEVEL_ENV = "SHEETFORM_LOG_LEVEL"
DEBUG_ENV = "SHEETFORM_DEBUG"

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%H:%M:%S"


def _env_level() -> Optional[int]:
    name = (os.getenv(LEVEL_ENV) or "").strip().upper()
    level = logging.getLevelName(name) if name else None
    if isinstance(level, int):
        return level
    if (os.getenv(DEBUG_ENV) or "").strip().lower() in {"1", "true", "yes", "on"}:
        return logging.DEBUG
    return None


def configure_root(default_level: int = logging.INFO) -> int:
    """Install the compact format once and set the effective root level."""
    level = _env_level() or default_level
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=_FORMAT, datefmt=_DATEFMT)
    root.setLevel(level)
    return level


def apply_debug_preference(debug_enabled: bool) -> int:
    """Apply the ``debug_logging`` setting unless the environment overrides it."""
    level = _env_level()
    if level is None:
        level = logging.DEBUG if debug_enabled else logging.INFO
    logging.getLogger().setLevel(level)
    return level


def env_forces_debug() -> bool:
    level = _env_level()
    return level is not None and level <= logging.DEBUG
