"""
Logging configuration for the tasklink agent, including silent mode.
"""

import logging
import logging.config
from typing import Any, Dict

AGENT_LOGGER = "tasklink-agent"


class MaxLevelFilter(logging.Filter):
    """Pass only records below a level, so errors are not printed twice."""

    def __init__(self, level: str = "WARNING"):
        super().__init__()
        self.level = logging.getLevelName(level)

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """Get logging configuration: diagnostics to stdout, warnings and errors to stderr."""
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "below_warning": {
                "()": MaxLevelFilter,
                "level": "WARNING",
            }
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
                "filters": ["below_warning"],
            },
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stderr",
                "level": "WARNING",
            },
        },
        "loggers": {
            AGENT_LOGGER: {
                "handlers": ["stdout", "stderr"],
                "level": level,
                "propagate": False,
            }
        },
        "root": {
            "level": "WARNING",
            "handlers": ["stderr"],
        },
    }


def configure_logging(level: str = "INFO") -> None:
    """Install the logging configuration."""
    logging.config.dictConfig(get_logging_config(level))


def apply_silent_mode(silent: bool, level: str = "INFO") -> None:
    """
    Switch agent diagnostics on or off.

    Silent mode keeps warnings and errors; leaving it restores ``level``.
    """
    logger = logging.getLogger(AGENT_LOGGER)
    if silent:
        logger.setLevel(max(logging.WARNING, logging.getLevelName(level.upper())))
    else:
        logger.setLevel(level.upper())
