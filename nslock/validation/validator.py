"""Consistency validator for the namespace lockfile.

Reconciles three views of the same facts:
- Structure: the lockfile parses and has the three-level shape
- Registration drift: registry and lockfile name the same triples
- Fields: every locked record carries a valid version

Structural defects and bad fields are errors. Registration drift is only
advisory: declarations may run ahead of, or lag behind, the last lock.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from nslock.errors import InvalidLockfileError, LockfileReadError
from nslock.lockfile.reader import LockfileReader, check_version
from nslock.registry.store import NamespaceRegistry


class Severity(Enum):
    ERROR = "error"  # Blocks an explicit check
    WARNING = "warning"  # Advisory only


@dataclass
class ValidationIssue:
    """A single issue found while validating the lockfile."""

    severity: Severity
    code: str  # Machine-readable issue code
    message: str
    path: str = ""  # source/namespace/package locator


@dataclass
class ValidationResult:
    """Result of validating a lockfile against a registry."""

    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not any(i.severity == Severity.ERROR for i in self.issues)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def error_messages(self) -> list[str]:
        return [i.message for i in self.errors]

    @property
    def warning_messages(self) -> list[str]:
        return [i.message for i in self.warnings]

    def summary(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        return f"[{status}] {len(self.errors)} error(s), {len(self.warnings)} warning(s)"


class ConsistencyValidator:
    """Validates the namespace lockfile against the live registry."""

    def __init__(self, registry: NamespaceRegistry, reader: LockfileReader):
        self.registry = registry
        self.reader = reader

    def validate(self) -> ValidationResult:
        result = ValidationResult()

        if not self.reader.exists():
            return result

        if not self._check_structure(result):
            return result

        self._check_registered_but_not_locked(result)
        self._check_locked_but_not_registered(result)
        self._check_versions(result)

        return result

    def is_valid(self) -> bool:
        return self.validate().passed

    def _check_structure(self, result: ValidationResult) -> bool:
        try:
            self.reader.parse()
        except InvalidLockfileError as e:
            result.issues.append(
                ValidationIssue(
                    severity=Severity.ERROR,
                    code="INVALID_LOCKFILE",
                    message=f"Invalid lockfile structure: {e}",
                    path="/".join(e.locator),
                )
            )
            return False
        except LockfileReadError as e:
            result.issues.append(
                ValidationIssue(
                    severity=Severity.ERROR,
                    code="LOCKFILE_UNREADABLE",
                    message=str(e),
                )
            )
            return False
        return True

    def _check_registered_but_not_locked(self, result: ValidationResult):
        for source, namespaces in self.registry.snapshot().items():
            for namespace, package_names in namespaces.items():
                for name in package_names:
                    if self.reader.record_of(source, namespace, name) is None:
                        result.issues.append(
                            ValidationIssue(
                                severity=Severity.WARNING,
                                code="REGISTERED_NOT_LOCKED",
                                message=(
                                    f"{name} registered but not locked "
                                    f"(namespace '{namespace}' on {source})"
                                ),
                                path=f"{source}/{namespace}/{name}",
                            )
                        )

    def _check_locked_but_not_registered(self, result: ValidationResult):
        for source, namespace, name in self.reader.triples():
            if not self.registry.is_registered(source, namespace, name):
                result.issues.append(
                    ValidationIssue(
                        severity=Severity.WARNING,
                        code="LOCKED_NOT_REGISTERED",
                        message=(
                            f"{name} locked but not currently registered "
                            f"(namespace '{namespace}' on {source})"
                        ),
                        path=f"{source}/{namespace}/{name}",
                    )
                )

    def _check_versions(self, result: ValidationResult):
        for source, namespace, name in self.reader.triples():
            record = self.reader.record_of(source, namespace, name)
            locator = (source, namespace, name)
            try:
                check_version(record.get("version"), locator)
            except InvalidLockfileError as e:
                missing = record.get("version") in (None, "")
                result.issues.append(
                    ValidationIssue(
                        severity=Severity.ERROR,
                        code="MISSING_VERSION" if missing else "INVALID_VERSION",
                        message=(
                            f"Package '{name}' in {namespace} missing version"
                            if missing
                            else f"Invalid version '{record['version']}' for package '{name}' in {namespace}"
                        ),
                        path="/".join(locator),
                    )
                )
