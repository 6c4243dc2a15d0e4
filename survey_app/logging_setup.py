"""Central logging configuration for the survey service.

One stdout handler on the root logger; module loggers need no setup of their
own. The level comes from configuration (`LOG_LEVEL`). Uvicorn and SQLAlchemy
loggers are routed through the same handler, SQLAlchemy held at WARNING so
statement echo stays out of request logs.
"""
from __future__ import annotations
import logging
from logging.config import dictConfig
from typing import Any, Dict

LOG_FORMAT = "%(asctime)s %(levelname)s:%(name)s:%(message)s"


def build_logging_config(level: str = "INFO") -> Dict[str, Any]:
    level = (level or "INFO").upper()
    passthrough = {"level": level, "handlers": ["stdout"], "propagate": False}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"plain": {"format": LOG_FORMAT}},
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "plain",
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"level": level, "handlers": ["stdout"]},
        "loggers": {
            "uvicorn.error": dict(passthrough),
            "uvicorn.access": dict(passthrough),
            "sqlalchemy.engine": {"level": "WARNING"},
        },
    }


def configure_logging(level: str = "INFO") -> None:
    """Install the stdout handler unless the root logger already has one.

    pytest and reloaders install their own handlers; only the level is
    applied in that case.
    """
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level.upper())
        return
    dictConfig(build_logging_config(level))
