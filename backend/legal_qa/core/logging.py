"""Logging utilities for the legal QA service."""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any

import orjson

_DEFAULT_LEVEL = os.environ.get("LEGALQA_LOG_LEVEL", "INFO")
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_LOG_RETENTION_DAYS = 90


class JsonFormatter(logging.Formatter):
    """Lightweight JSON log formatter."""

    default_fields = ("timestamp", "level", "name", "message")

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = record.stack_info
        for key, value in record.__dict__.items():
            if key.startswith("ctx_"):
                payload[key] = value
        return orjson.dumps(payload, default=str).decode("utf-8")


def configure_logging(
    level: str | int = _DEFAULT_LEVEL,
    use_json: bool = True,
    log_dir: Path | None = None,
) -> None:
    """Configure root logger with optional JSON formatting and a daily log file."""
    logging.captureWarnings(True)
    root = logging.getLogger()
    root.setLevel(level)
    formatter: logging.Formatter = JsonFormatter() if use_json else logging.Formatter(_PLAIN_FORMAT)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [handler]
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            log_dir / "legal-qa.log",
            when="midnight",
            backupCount=_LOG_RETENTION_DAYS,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)
    root.handlers = handlers


def get_logger(name: str = "legal_qa") -> logging.Logger:
    """Return configured logger, configuring root on first call."""
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


__all__ = ["JsonFormatter", "configure_logging", "get_logger"]
