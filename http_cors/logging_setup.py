"""Central logging configuration for hosts embedding the CORS middleware.

Applies a root stdout handler so the package loggers (``http_cors.*``) emit
without per-module setup. Keeps uvicorn loggers visible and avoids duplicate
handlers on reloads.
"""
from __future__ import annotations
import logging
from logging.config import dictConfig

_DICT_CONFIG = {
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
            "level": "DEBUG",
            "formatter": "default",
            "stream": "ext://sys.stdout",
        }
    },
    "root": {"level": "INFO", "handlers": ["console"]},
    "loggers": {
        "http_cors": {"level": "INFO"},
        "uvicorn": {"level": "INFO", "handlers": ["console"], "propagate": False},
        "uvicorn.error": {"level": "INFO", "handlers": ["console"], "propagate": False},
        "uvicorn.access": {"level": "INFO", "handlers": ["console"], "propagate": False},
    },
}

def configure_logging(level: str | None = None) -> None:
    """Configure application-wide logging once.

    ``level`` overrides the ``http_cors`` logger level (e.g. ``"DEBUG"`` to see
    denied origins and handled preflights). If the root logger already has
    handlers, return to prevent duplicate output.
    """
    root = logging.getLogger()
    if root.handlers:
        if level:
            logging.getLogger("http_cors").setLevel(level.upper())
        return
    config = {**_DICT_CONFIG, "loggers": dict(_DICT_CONFIG["loggers"])}
    if level:
        config["loggers"]["http_cors"] = {"level": level.upper()}
    dictConfig(config)
