"""
Custom logging configuration that keeps credentials out of log output
"""

import logging
import logging.config
import re
from typing import Any, Dict

REDACTED = "***"

# Authorization header values and token/password query pairs
_SECRET_PATTERNS = [
    re.compile(r"(?P<prefix>\b(?:Bearer|Basic)\s+)[^\s,;\"']+", re.IGNORECASE),
    re.compile(r"(?P<prefix>\b(?:token|password|access_token|id_token)=)[^\s&,;\"']+", re.IGNORECASE),
]


def redact(message: str) -> str:
    for pattern in _SECRET_PATTERNS:
        message = pattern.sub(lambda match: match.group("prefix") + REDACTED, message)
    return message


class CredentialRedactionFilter(logging.Filter):
    """Filter that masks secrets in log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Rewrite the record message with secrets masked. Never drops a record."""
        message = record.getMessage()
        redacted = redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """Get logging configuration with credential redaction."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "credential_redaction": {
                "()": CredentialRedactionFilter
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
                "stream": "ext://sys.stdout",
                "filters": ["credential_redaction"]
            }
        },
        "loggers": {
            "relaygate": {
                "handlers": ["default"],
                "level": level,
                "propagate": False
            }
        },
        "root": {
            "level": level,
            "handlers": ["default"]
        }
    }


def configure_logging(level: str = "INFO") -> None:
    """Apply the relaygate logging configuration."""
    logging.config.dictConfig(get_logging_config(level))
