from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class DxfGeoError(Exception):
    def __init__(self, message: str, code: str = "DXFGEO_ERROR", details: dict[str, Any] | None = None):
        super().__init__(message)
        self.code = code
        self.details = dict(details or {})


class InvalidGeometryError(DxfGeoError, ValueError):
    """Raised by the geometry builders when handed malformed coordinates."""

    def __init__(self, message: str, geometry_type: str, details: dict[str, Any] | None = None):
        super().__init__(message, "INVALID_GEOMETRY", {"geometry_type": geometry_type, **(details or {})})
        self.geometry_type = geometry_type


class EntityValidationError(DxfGeoError):
    def __init__(self, message: str, entity_type: str, handle: str | None = None):
        super().__init__(message, "VALIDATION_ERROR", {"entity_type": entity_type, "handle": handle})
        self.entity_type = entity_type
        self.handle = handle


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


_LOG_LEVELS = {
    Severity.ERROR: logging.ERROR,
    Severity.WARNING: logging.WARNING,
    Severity.INFO: logging.INFO,
}


@dataclass(frozen=True)
class ReportedMessage:
    severity: Severity
    message: str
    code: str
    context: dict[str, Any] = field(default_factory=dict)


class ErrorReporter:
    """Append-only sink for conversion warnings and errors.

    Owned by the caller of the conversion pipeline and passed by reference into
    every converter. Each message is also forwarded to the module logger.
    """

    def __init__(self, log: logging.Logger | None = None):
        self._messages: list[ReportedMessage] = []
        self._log = log or logger

    def add_error(self, message: str, code: str, context: dict[str, Any] | None = None) -> None:
        self._add(Severity.ERROR, message, code, context)

    def add_warning(self, message: str, code: str, context: dict[str, Any] | None = None) -> None:
        self._add(Severity.WARNING, message, code, context)

    def add_info(self, message: str, code: str, context: dict[str, Any] | None = None) -> None:
        self._add(Severity.INFO, message, code, context)

    def _add(self, severity: Severity, message: str, code: str, context: dict[str, Any] | None) -> None:
        record = ReportedMessage(severity=severity, message=message, code=code, context=dict(context or {}))
        self._messages.append(record)
        self._log.log(_LOG_LEVELS[severity], "%s [%s] %s", message, code, record.context)

    @property
    def messages(self) -> tuple[ReportedMessage, ...]:
        return tuple(self._messages)

    @property
    def warnings(self) -> tuple[ReportedMessage, ...]:
        return tuple(m for m in self._messages if m.severity is Severity.WARNING)

    @property
    def errors(self) -> tuple[ReportedMessage, ...]:
        return tuple(m for m in self._messages if m.severity is Severity.ERROR)

    def codes(self, severity: Severity | None = None) -> list[str]:
        return [m.code for m in self._messages if severity is None or m.severity is severity]

    def has_errors(self) -> bool:
        return any(m.severity is Severity.ERROR for m in self._messages)

    def clear(self) -> None:
        self._messages.clear()

    def __len__(self) -> int:
        return len(self._messages)
