"""Central logging utilities for KickOffHub.

One place to configure logging for the API server, the import worker and the CLI.

Environment variables:
    LOG_LEVEL=INFO|DEBUG|...   (default: INFO, or the ``level`` argument)
    LOG_FORMAT=console|json    (default: console)
    LOG_NO_COLOR=1             disable ANSI colors on console output
    LOG_TIMEZONE=utc|local     (default: local)

Usage:
    from kickoffhub.common.logging_utils import configure_logging, get_logger
    configure_logging(service="api")  # idempotent
    logger = get_logger(__name__)

Calling configure_logging() again is a no-op unless ``force=True``.
"""
from __future__ import annotations

import json
import logging
import os
import sys
import threading
from datetime import datetime, timezone
from typing import Any, Dict, Optional

_CONFIG_LOCK = threading.Lock()
_ALREADY_CONFIGURED = False
_SERVICE: Optional[str] = None

# attributes every LogRecord has; anything else came in through ``extra=``
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys() | {"message", "asctime"}
)

# chatty third-party loggers kept at WARNING unless LOG_LEVEL=DEBUG
_NOISY_LOGGERS = ("aiohttp.access", "asyncio", "kombu", "amqp", "urllib3")


def _timestamp(record: logging.LogRecord, tz_local: bool) -> datetime:
    ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
    return ts.astimezone() if tz_local else ts


class ColorFormatter(logging.Formatter):
    COLORS = {
        "DEBUG": "\x1b[38;5;245m",
        "INFO": "\x1b[38;5;39m",
        "WARNING": "\x1b[38;5;214m",
        "ERROR": "\x1b[38;5;196m",
        "CRITICAL": "\x1b[48;5;196m\x1b[38;5;231m",
    }
    RESET = "\x1b[0m"

    def __init__(self, tz_local: bool, use_color: bool = True):
        super().__init__()
        self.tz_local = tz_local
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        ts_str = _timestamp(record, self.tz_local).strftime("%Y-%m-%d %H:%M:%S")
        service = getattr(record, "service", None) or _SERVICE
        prefix = f"{ts_str} | {record.levelname:<8} | "
        if service:
            prefix += f"{service} | "
        base = f"{prefix}{record.name} | {record.getMessage()}"
        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)
        color = self.COLORS.get(record.levelname, "") if self.use_color else ""
        return f"{color}{base}{self.RESET}" if color else base


class JsonFormatter(logging.Formatter):
    def __init__(self, tz_local: bool):
        super().__init__()
        self.tz_local = tz_local

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, Any] = {
            "ts": _timestamp(record, self.tz_local).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if _SERVICE:
            payload["service"] = _SERVICE
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key in payload or key.startswith("_"):
                continue
            try:
                json.dumps(value)
                payload[key] = value
            except (TypeError, ValueError):
                payload[key] = repr(value)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(
    service: str | None = None, *, level: str | None = None, force: bool = False
) -> None:
    """Configure root logging once per process.

    Parameters
    ----------
    service: logical process name ("api", "worker", "cli"), shown in every line
    level: fallback level when LOG_LEVEL is not set in the environment
    force: reconfigure even if already configured
    """
    global _ALREADY_CONFIGURED, _SERVICE
    with _CONFIG_LOCK:
        if _ALREADY_CONFIGURED and not force:
            return

        log_level = os.getenv("LOG_LEVEL", level or "INFO").upper()
        log_format = os.getenv("LOG_FORMAT", "console").lower()
        tz_local = os.getenv("LOG_TIMEZONE", "local").lower() != "utc"
        no_color = os.getenv("LOG_NO_COLOR") == "1"

        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)

        if log_format == "json":
            formatter: logging.Formatter = JsonFormatter(tz_local=tz_local)
        else:
            formatter = ColorFormatter(
                tz_local=tz_local, use_color=sys.stderr.isatty() and not no_color
            )

        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        root.addHandler(handler)
        root.setLevel(getattr(logging, log_level, logging.INFO))

        if log_level != "DEBUG":
            for name in _NOISY_LOGGERS:
                logging.getLogger(name).setLevel(logging.WARNING)

        _SERVICE = service
        _ALREADY_CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = [
    "configure_logging",
    "get_logger",
    "ColorFormatter",
    "JsonFormatter",
]
