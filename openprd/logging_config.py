"""Structured logging configuration."""
from __future__ import annotations

import json
import logging
import logging.config
import re
from typing import Any

from openprd.config import get_settings

REDACTED = "[REDACTED]"

# Provider error bodies sometimes echo the submitted key back.
_SECRET_PATTERNS = (
    re.compile(r"\b(sk-(?:ant-|or-)?)[A-Za-z0-9_\-]{8,}"),
    re.compile(r"\bAIza[0-9A-Za-z_\-]{20,}"),
    re.compile(r"(Bearer\s+)[A-Za-z0-9._\-]{8,}", re.IGNORECASE),
    re.compile(r"([?&]key=)[^&\s\"']+"),
)


def redact_secrets(text: str) -> str:
    """Mask anything that looks like a provider API key."""
    for pattern in _SECRET_PATTERNS:
        text = pattern.sub(lambda m: (m.group(1) if m.groups() else "") + REDACTED, text)
    return text


class SecretRedactionFilter(logging.Filter):
    """Rewrites records so provider keys never reach a handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact_secrets(message)
        if redacted != message:
            record.msg = redacted
            record.args = ()
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    EXTRA_FIELDS = ("provider", "model", "user_id")

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in self.EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value
        if record.exc_info:
            payload["exception"] = redact_secrets(self.formatException(record.exc_info))
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging() -> None:
    """Configure structured logging based on settings."""
    settings = get_settings()
    level = settings.log_level.upper()

    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "redact_secrets": {"()": SecretRedactionFilter},
        },
        "formatters": {
            "text": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": JSONFormatter,
                "datefmt": "%Y-%m-%dT%H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": settings.log_format if settings.log_format in ("text", "json") else "text",
                "filters": ["redact_secrets"],
            },
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": {
            "uvicorn": {"level": level},
            "sqlalchemy.engine": {"level": "WARNING"},
            "httpx": {"level": "WARNING"},
            "openprd": {"level": level},
        },
    }

    logging.config.dictConfig(config)
