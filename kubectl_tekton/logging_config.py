"""
Logging configuration with credential redaction
"""

import logging
import logging.config
import re
from typing import Any, Dict

_BEARER = re.compile(r"(Bearer\s+)[A-Za-z0-9\-._~+/]+=*", re.IGNORECASE)


class TokenRedactionFilter(logging.Filter):
    """Filter that masks bearer tokens in log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Rewrite the record in place; never drops it."""
        message = record.getMessage()
        redacted = _BEARER.sub(r"\1REDACTED", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def get_logging_config(level: str = "WARNING") -> Dict[str, Any]:
    """Get logging configuration for the command line."""
    level = level.upper()
    # httpx logs every request at INFO; only show it when debugging
    http_level = "DEBUG" if level == "DEBUG" else "WARNING"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "redact_tokens": {
                "()": TokenRedactionFilter
            }
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stderr",
                "filters": ["redact_tokens"]
            }
        },
        "loggers": {
            "kubectl_tekton": {
                "handlers": ["default"],
                "level": level,
                "propagate": False
            },
            "httpx": {
                "handlers": ["default"],
                "level": http_level,
                "propagate": False
            },
            "httpcore": {
                "handlers": ["default"],
                "level": http_level,
                "propagate": False
            }
        },
        "root": {
            "level": "WARNING",
            "handlers": ["default"]
        }
    }


def configure_logging(level: str = "WARNING") -> None:
    logging.config.dictConfig(get_logging_config(level))
