"""Rendering validation results to an output sink.

Order is part of the contract: all errors, then all warnings, then a single
acknowledgment when there is nothing to report.
"""

from __future__ import annotations

import logging
from typing import Protocol

from nslock.validation.validator import ValidationResult

logger = logging.getLogger(__name__)

VALID_MESSAGE = "Namespace lockfile is valid"


class ReportSink(Protocol):
    def error(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...


class LoggingSink:
    """Sends report lines to a logger."""

    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger

    def error(self, message: str) -> None:
        self.log.error(message)

    def warn(self, message: str) -> None:
        self.log.warning(message)

    def info(self, message: str) -> None:
        self.log.info(message)


class ListSink:
    """Collects ``(level, message)`` pairs in order."""

    def __init__(self):
        self.lines: list[tuple[str, str]] = []

    def error(self, message: str) -> None:
        self.lines.append(("error", message))

    def warn(self, message: str) -> None:
        self.lines.append(("warning", message))

    def info(self, message: str) -> None:
        self.lines.append(("info", message))


def report(result: ValidationResult, sink: ReportSink) -> None:
    errors = result.errors
    warnings = result.warnings

    if errors:
        sink.error("Namespace lockfile validation errors:")
        for issue in errors:
            sink.error(f"  - {issue.message}")

    if warnings:
        sink.warn("Namespace lockfile validation warnings:")
        for issue in warnings:
            sink.warn(f"  - {issue.message}")

    if not errors and not warnings:
        sink.info(VALID_MESSAGE)
