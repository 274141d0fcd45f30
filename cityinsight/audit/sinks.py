"""Append-only destinations for audit records.

A sink only ever appends; nothing in the pipeline reads records back. Each
``append`` is independent, so concurrent pipeline calls need no locking.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Protocol, Union

logger = logging.getLogger(__name__)


class AuditRecord(Protocol):
    def to_dict(self) -> dict[str, Any]: ...


class AuditSink(ABC):
    @abstractmethod
    def append(self, record: AuditRecord) -> None:
        """Persist one record. Return value is never consumed."""


class LoggingAuditSink(AuditSink):
    """Writes each record as one JSON log line at INFO."""

    def __init__(self, logger_name: str = "cityinsight.audit.records") -> None:
        self._logger = logging.getLogger(logger_name)

    def append(self, record: AuditRecord) -> None:
        self._logger.info(json.dumps(record.to_dict(), sort_keys=True, default=str))


class JsonlAuditSink(AuditSink):
    """One JSON object per line, opened in append mode for every record."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def append(self, record: AuditRecord) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        line = json.dumps(record.to_dict(), sort_keys=True, default=str)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(line + "\n")


class InMemoryAuditSink(AuditSink):
    """Keeps records in a list. Intended for tests and local inspection."""

    def __init__(self) -> None:
        self.records: list[AuditRecord] = []

    def append(self, record: AuditRecord) -> None:
        self.records.append(record)
