"""Audit sinks for credential resolution and store dispatch events."""

from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Any

from connection_secrets.core.audit.types import AuditEvent, AuditStatus

logger = logging.getLogger(__name__)


class AuditSink(ABC):
    """Base class for audit event sinks."""

    @abstractmethod
    def emit(self, event: AuditEvent) -> None:
        """Emit a single audit event."""
        ...

    def close(self) -> None:  # noqa: B027
        """Close the sink and release resources."""


class LoggingAuditSink(AuditSink):
    """Log audit events, at WARNING for anything but success.

    The full event is attached to the record as ``audit_event``.

    Args:
        logger_name: Logger name to use. Defaults to ``"css.audit"``.
    """

    def __init__(self, logger_name: str = "css.audit") -> None:
        self._logger = logging.getLogger(logger_name)

    def emit(self, event: AuditEvent) -> None:
        level = logging.INFO if event.status is AuditStatus.SUCCESS else logging.WARNING
        self._logger.log(level, "[AUDIT] %s", event.summary, extra={"audit_event": event.to_dict()})


class FileAuditSink(AuditSink):
    """Append audit events to a JSON-lines audit trail.

    The file is opened on the first emit and reopened after
    :meth:`close`.  One sink may be shared by concurrent dispatchers.

    Args:
        path: Path to the audit trail file.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._file: IO[Any] | None = None
        self._lock = threading.Lock()

    def emit(self, event: AuditEvent) -> None:
        line = json.dumps(event.to_dict()) + "\n"
        with self._lock:
            if self._file is None:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                self._file = open(self._path, "a")  # noqa: SIM115
            self._file.write(line)
            self._file.flush()

    def close(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None


class CompositeAuditSink(AuditSink):
    """Fan out audit events to multiple sinks.

    A failing sink is logged and skipped so the others still receive
    the event.
    """

    def __init__(self, *sinks: AuditSink) -> None:
        self._sinks: tuple[AuditSink, ...] = sinks

    def emit(self, event: AuditEvent) -> None:
        for sink in self._sinks:
            try:
                sink.emit(event)
            except Exception:
                logger.warning("Audit sink %s failed to emit", type(sink).__name__, exc_info=True)

    def close(self) -> None:
        for sink in self._sinks:
            try:
                sink.close()
            except Exception:
                logger.warning("Audit sink %s failed to close", type(sink).__name__, exc_info=True)
