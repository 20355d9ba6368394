"""
Logging configuration for the command line.

Library modules only create loggers; handlers are installed here.
"""
from __future__ import annotations

import logging.config

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "stream": "ext://sys.stderr",
            "level": "INFO",
        }
    },
    "root": {"handlers": ["console"], "level": "INFO"},
}


def configure_logging(level: str = "INFO") -> None:
    level = level.upper()
    config = {**LOGGING_CONFIG, "root": {**LOGGING_CONFIG["root"], "level": level}}
    config["handlers"] = {
        name: {**handler, "level": level} for name, handler in LOGGING_CONFIG["handlers"].items()
    }
    logging.config.dictConfig(config)
