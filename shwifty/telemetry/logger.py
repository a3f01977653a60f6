"""Logging for code generation.

Everything logs under the ``shwifty`` namespace.  The first :func:`get_logger`
call installs ``configs/logging.yaml`` through :func:`logging.config.dictConfig`;
sections missing from that file fall back to :data:`FALLBACK_CONFIG`, which
keeps the generator quiet (warnings and errors only, on stderr).
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from threading import RLock
from typing import Any

from ..utils.config import load_config

LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "logging.yaml"
PACKAGE_LOGGER = "shwifty"

DICT_CONFIG_SECTIONS = (
    "version",
    "disable_existing_loggers",
    "formatters",
    "handlers",
    "root",
    "loggers",
)

FALLBACK_CONFIG: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {"plain": {"format": "%(levelname)s %(name)s: %(message)s"}},
    "handlers": {
        "stderr": {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
            "formatter": "plain",
        }
    },
    "loggers": {
        PACKAGE_LOGGER: {"level": "WARNING", "handlers": ["stderr"], "propagate": False},
    },
}

_lock = RLock()
_installed = False


def logging_config(path: Path = LOGGING_CONFIG_PATH) -> dict[str, Any]:
    """Return the ``dictConfig`` mapping for ``path`` layered over the fallback."""

    config = dict(FALLBACK_CONFIG)
    if not path.exists():
        return config
    try:
        data = load_config(path)
    except ValueError as exc:
        logging.getLogger(f"{PACKAGE_LOGGER}.telemetry").warning(
            "ignoring %s: %s", path.name, exc
        )
        return config
    config.update((key, value) for key, value in data.items() if key in DICT_CONFIG_SECTIONS)
    return config


def configure(level: int | str | None = None) -> None:
    """Install the logging configuration once; ``level`` retunes ``shwifty``."""

    global _installed
    with _lock:
        if not _installed:
            logging.config.dictConfig(logging_config())
            _installed = True
        if level is not None:
            logging.getLogger(PACKAGE_LOGGER).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    if not isinstance(name, str) or not name:
        raise ValueError("logger name must be a non-empty string")
    configure()
    return logging.getLogger(name)


__all__ = [
    "FALLBACK_CONFIG",
    "LOGGING_CONFIG_PATH",
    "PACKAGE_LOGGER",
    "configure",
    "get_logger",
    "logging_config",
]
