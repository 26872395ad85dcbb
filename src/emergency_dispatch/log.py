"""Structured JSON logging for the dispatcher and its senders."""

import json
import logging
import sys
from collections.abc import Sequence
from datetime import datetime, timezone

DEFAULT_SERVICE = "emergency_dispatch"

# Attributes every LogRecord carries; anything else arrived via `extra={...}`.
_RESERVED = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
    | {"message", "asctime"}
)


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    Every entry names the service and the thread that emitted it, so lines
    from concurrent dispatch workers (``dispatch_0``, ``dispatch_1``, ...)
    can be told apart. Context passed through ``extra`` (alert id, channel,
    attempt) is merged into the top-level object; the core fields win on a
    name clash.
    """

    def __init__(self, service: str = DEFAULT_SERVICE) -> None:
        super().__init__()
        self._service = service

    def format(self, record: logging.LogRecord) -> str:
        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED
        }
        entry: dict[str, object] = {
            **extra,
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self._service,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }

        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


def setup_logging(
    level: str = "INFO",
    suppress: Sequence[str] = (),
    service: str = DEFAULT_SERVICE,
) -> None:
    """Send JSON logs to stdout at *level*.

    Loggers named in *suppress* are raised to WARNING.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter(service))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)

    for name in suppress:
        logging.getLogger(name).setLevel(logging.WARNING)
