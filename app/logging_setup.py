"""Central logging configuration for the question authoring service.

Installs one stdout handler on the root logger so every module logger
(``logging.getLogger(__name__)``) emits without per-module setup. The level is
taken from ``LOG_LEVEL`` (default INFO).
"""
from __future__ import annotations

import logging
import os
from logging.config import dictConfig


def _build_dict_config(level: str) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)s:%(name)s:%(message)s",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "default",
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": {
            "uvicorn": {"level": level, "handlers": ["console"], "propagate": False},
            "uvicorn.access": {"level": level, "handlers": ["console"], "propagate": False},
            # SQL echo stays off unless explicitly requested
            "sqlalchemy.engine": {"level": "WARNING", "propagate": True},
        },
    }


def configure_logging(level: str | None = None) -> None:
    """Configure application-wide logging once.

    Returns early when the root logger already has handlers so reloaders and
    test runners do not get duplicate output.
    """
    root = logging.getLogger()
    if root.handlers:
        return
    resolved = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    dictConfig(_build_dict_config(resolved))


__all__ = ["configure_logging"]
