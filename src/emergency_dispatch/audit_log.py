"""Append-only text store of dispatch attempts.

Each attempt becomes one block::

    ==================== EMERGENCY LOG ====================
    Alert ID: 1700000000_user-1_3f2a9c1d
    Type: SMS
    Status: sent
    Message: help
    Timestamp: 1700000000
    =======================================================

followed by a blank line. Writes to a given file are serialized through one
lock per resolved path, shared by every AuditLog instance in the process,
and each block is written with a single ``write`` call.
"""

import logging
import os
import re
import threading
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from emergency_dispatch.enums import AlertStatus
from emergency_dispatch.errors import AuditLogError
from emergency_dispatch.models import Alert

logger = logging.getLogger(__name__)

BLOCK_HEADER = "==================== EMERGENCY LOG ===================="
BLOCK_FOOTER = "======================================================="

_FIELDS = ("Alert ID", "Type", "Status", "Message", "Timestamp")
_ESCAPES = {"\\": "\\\\", "\n": "\\n", "\r": "\\r"}
_UNESCAPE_RE = re.compile(r"\\(\\|n|r)")
_UNESCAPES = {"\\": "\\", "n": "\n", "r": "\r"}

_registry_lock = threading.Lock()
_store_locks: dict[Path, threading.Lock] = {}


def _store_lock(path: Path) -> threading.Lock:
    with _registry_lock:
        return _store_locks.setdefault(path, threading.Lock())


def _escape(text: str) -> str:
    return "".join(_ESCAPES.get(ch, ch) for ch in text)


def _unescape(text: str) -> str:
    return _UNESCAPE_RE.sub(lambda m: _UNESCAPES[m.group(1)], text)


def user_of(alert_id: str) -> str:
    """Return the user segment of an id shaped ``<epoch>_<user>_<suffix>``.

    Ids that do not have that shape have no user segment and yield "".
    """
    _, sep, rest = alert_id.partition("_")
    user, sep2, _ = rest.rpartition("_")
    return user if sep and sep2 else ""


@dataclass(frozen=True, slots=True)
class AuditRecord:
    """One delivery attempt as persisted. Timestamps have whole-second precision."""

    alert_id: str
    channel_kind: str
    status: str
    message: str
    logged_at: datetime

    @classmethod
    def for_alert(
        cls,
        alert: Alert,
        status: AlertStatus | None = None,
        logged_at: datetime | None = None,
    ) -> "AuditRecord":
        logged_at = logged_at or datetime.now(timezone.utc)
        return cls(
            alert_id=alert.id,
            channel_kind=str(alert.channel_kind),
            status=str(status or alert.status),
            message=alert.message,
            logged_at=logged_at.replace(microsecond=0),
        )

    def to_block(self) -> str:
        return (
            f"{BLOCK_HEADER}\n"
            f"Alert ID: {self.alert_id}\n"
            f"Type: {self.channel_kind}\n"
            f"Status: {self.status}\n"
            f"Message: {_escape(self.message)}\n"
            f"Timestamp: {int(self.logged_at.timestamp())}\n"
            f"{BLOCK_FOOTER}\n"
            "\n"
        )


def parse_block(block: str) -> AuditRecord:
    """Parse one block produced by AuditRecord.to_block.

    Raises ValueError if the block is not well formed.
    """
    lines = block.strip("\n").split("\n")
    if len(lines) != len(_FIELDS) + 2 or lines[0] != BLOCK_HEADER or lines[-1] != BLOCK_FOOTER:
        raise ValueError("Malformed audit block")

    values: dict[str, str] = {}
    for label, line in zip(_FIELDS, lines[1:-1]):
        prefix = f"{label}: "
        if not line.startswith(prefix):
            raise ValueError(f"Expected {label!r} field, got {line!r}")
        values[label] = line[len(prefix):]

    try:
        logged_at = datetime.fromtimestamp(int(values["Timestamp"]), timezone.utc)
    except ValueError as exc:
        raise ValueError(f"Bad timestamp: {values['Timestamp']!r}") from exc

    return AuditRecord(
        alert_id=values["Alert ID"],
        channel_kind=values["Type"],
        status=values["Status"],
        message=_unescape(values["Message"]),
        logged_at=logged_at,
    )


@dataclass(frozen=True, slots=True)
class AuditStatistics:
    total: int = 0
    by_type: dict[str, int] = field(default_factory=dict)
    by_status: dict[str, int] = field(default_factory=dict)


class AuditLog:
    """Durable append-only log of delivery attempts backed by a text file."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        self._lock = _store_lock(self._path.resolve())

    @property
    def path(self) -> Path:
        return self._path

    def append(self, record: AuditRecord) -> None:
        """Write *record* as one complete block.

        Raises AuditLogError if the store cannot be opened or written.
        """
        block = record.to_block()
        with self._lock:
            try:
                with self._path.open("a", encoding="utf-8", newline="") as fh:
                    fh.write(block)
                    fh.flush()
                    os.fsync(fh.fileno())
            except OSError as exc:
                raise AuditLogError(f"Cannot append to audit log {self._path}: {exc}") from exc

    def read_all(self) -> list[str]:
        """Return every complete block in write order.

        A store that has never been written reads as empty; any other
        access failure raises AuditLogError.
        """
        with self._lock:
            try:
                with self._path.open(encoding="utf-8", newline="") as fh:
                    content = fh.read()
            except FileNotFoundError:
                return []
            except OSError as exc:
                raise AuditLogError(f"Cannot read audit log {self._path}: {exc}") from exc

        blocks: list[str] = []
        current: list[str] | None = None
        for line in content.split("\n"):
            if line == BLOCK_HEADER:
                if current is not None:
                    logger.warning("Incomplete audit block skipped", extra={"path": str(self._path)})
                current = [line]
            elif current is not None:
                current.append(line)
                if line == BLOCK_FOOTER:
                    blocks.append("\n".join(current) + "\n")
                    current = None
        if current is not None:
            logger.warning("Incomplete audit block skipped", extra={"path": str(self._path)})
        return blocks

    def records(self, user_id: str | None = None) -> list[AuditRecord]:
        """Parse every stored block, optionally keeping one user's alerts only."""
        records = [parse_block(block) for block in self.read_all()]
        if user_id is None:
            return records
        return [r for r in records if user_of(r.alert_id) == user_id]

    def clear(self) -> None:
        """Truncate the store. Raises AuditLogError on failure."""
        with self._lock:
            try:
                with self._path.open("w", encoding="utf-8"):
                    pass
            except OSError as exc:
                raise AuditLogError(f"Cannot clear audit log {self._path}: {exc}") from exc
        logger.info("Audit log cleared", extra={"path": str(self._path)})

    def statistics(self, user_id: str | None = None) -> AuditStatistics:
        records = self.records(user_id)
        return AuditStatistics(
            total=len(records),
            by_type=dict(Counter(r.channel_kind for r in records)),
            by_status=dict(Counter(r.status for r in records)),
        )
