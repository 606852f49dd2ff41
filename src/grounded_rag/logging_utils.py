"""Structured logging to stdout.

Two output modes, selected by ``settings.log_format``:

* ``json``   — one JSON object per line, for ``docker logs | jq`` and
  log shippers (Loki, Fluent Bit, …).
* ``pretty`` — a human-readable one-liner for local development.

Event fields are attached through ``extra={"event": {...}}`` so that plain
``logger.info("...")`` calls keep working unchanged.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from grounded_rag.config import Settings

_EVENT_ATTR = "event"


def _timestamp(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()


def _event_fields(record: logging.LogRecord) -> dict[str, Any]:
    fields = getattr(record, _EVENT_ATTR, None)
    return dict(fields) if isinstance(fields, dict) else {}


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": _timestamp(record),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(_event_fields(record))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class PrettyFormatter(logging.Formatter):
    """``[ts] [logger] LEVEL message key=value …``"""

    def format(self, record: logging.LogRecord) -> str:
        extras = " ".join(
            f"{key}={json.dumps(value, default=str)}" for key, value in _event_fields(record).items()
        )
        line = f"[{_timestamp(record)}] [{record.name}] {record.levelname} {record.getMessage()}"
        if extras:
            line = f"{line} {extras}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(settings: Settings) -> None:
    """Install a single stdout handler on the root logger."""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if settings.log_format == "json" else PrettyFormatter())
    root.addHandler(handler)
    root.setLevel(settings.log_level.upper())

    # Third-party clients are chatty at INFO.
    for noisy in ("httpx", "httpcore", "urllib3", "chromadb"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def log_event(logger: logging.Logger, message: str, *, level: int = logging.INFO, **fields: Any) -> None:
    """Emit one structured event record."""
    logger.log(level, message, extra={_EVENT_ATTR: fields})
