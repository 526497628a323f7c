"""Error taxonomy for namespace registration and lockfile handling."""

from __future__ import annotations

from enum import Enum


class NamespaceError(Exception):
    """Base class for all namespace-related errors."""


class NamespaceConflictError(NamespaceError):
    """A package resolves to more than one namespace under a single source."""

    def __init__(self, package: str, namespaces: list[str]):
        self.package = package
        self.namespaces = list(namespaces)
        super().__init__(
            f"Package '{package}' specified in multiple namespaces: "
            f"{', '.join(self.namespaces[:-1])} and {self.namespaces[-1]}"
        )


class NamespaceNotSupportedError(NamespaceError):
    """A source cannot serve namespaced packages but namespaces are required."""

    def __init__(self, source: str):
        self.source = source
        super().__init__(
            f"Source '{source}' does not support namespaces. "
            f"Please use a namespace-aware package index or disable strict mode."
        )


class LockfileErrorKind(Enum):
    SYNTAX = "syntax"
    STRUCTURE = "structure"
    MISSING_FIELD = "missing_field"
    BAD_VERSION = "bad_version"


class InvalidLockfileError(NamespaceError):
    """The persisted namespace lockfile cannot be trusted."""

    def __init__(
        self,
        message: str = "Invalid or corrupted namespace lockfile",
        kind: LockfileErrorKind = LockfileErrorKind.STRUCTURE,
        locator: tuple[str, ...] = (),
    ):
        self.kind = kind
        self.locator = locator
        super().__init__(message)


class LockfileReadError(NamespaceError):
    """The lockfile exists but could not be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Failed to read namespace lockfile {path}: {reason}")


class ConfigError(NamespaceError):
    """The namespace configuration file is malformed."""


class ManifestError(NamespaceError):
    """A dependency manifest could not be turned into declarations."""
