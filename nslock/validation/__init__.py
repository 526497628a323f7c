"""Validation — drift detection between the live registry and the lockfile."""

from nslock.validation.report import ListSink, LoggingSink, ReportSink, report
from nslock.validation.validator import (
    ConsistencyValidator,
    Severity,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    "ConsistencyValidator",
    "ListSink",
    "LoggingSink",
    "ReportSink",
    "Severity",
    "ValidationIssue",
    "ValidationResult",
    "report",
]
