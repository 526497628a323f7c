"""Namespace-aware resolution policy.

Sits between the registry and the host resolver. The registry only reports
conflicts; this module decides what a conflict means under the active
configuration (fatal in strict mode, a warning otherwise) and narrows the
candidate versions of a namespaced package.

Whether a given version is actually published under a namespace is a
question for the package index, so version filtering takes that answer
from a caller-supplied predicate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, TypeVar

from nslock.config import NamespaceConfig
from nslock.errors import NamespaceConflictError, NamespaceNotSupportedError
from nslock.registry.store import NamespaceRegistry

logger = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass
class NamespaceConflict:
    """A conflict observed (and tolerated) during resolution."""

    source: str
    package: str
    namespaces: list[str]


class NamespaceResolution:
    """Applies the configured conflict policy to registry lookups."""

    def __init__(self, registry: NamespaceRegistry, config: NamespaceConfig | None = None):
        self.registry = registry
        self.config = config or NamespaceConfig()
        self.conflicts: list[NamespaceConflict] = []

    def namespace_for(self, source: Any, package: str) -> str | None:
        """Namespace of *package* on *source*, or None.

        Raises:
            NamespaceConflictError: only in strict mode.
        """
        try:
            return self.registry.namespace_of(source, package)
        except NamespaceConflictError as e:
            if self.config.strict_mode:
                raise
            self.conflicts.append(
                NamespaceConflict(
                    source=self.registry.identity(source),
                    package=package,
                    namespaces=e.namespaces,
                )
            )
            if self.config.warn_on_missing:
                logger.warning(
                    "Package '%s' requested from multiple namespaces: %s",
                    package,
                    ", ".join(e.namespaces),
                )
            return None

    def filter_versions(
        self,
        source: Any,
        package: str,
        versions: Iterable[V],
        available: Callable[[str, V], bool] | None = None,
    ) -> list[V]:
        """Keep the versions of *package* published under its namespace.

        Args:
            available: ``available(namespace, version)`` answers whether the
                index serves that version in that namespace. Without it, or
                for packages with no namespace, every version is kept.
        """
        versions = list(versions)
        namespace = self.namespace_for(source, package)
        if namespace is None or available is None:
            return versions
        return [v for v in versions if available(namespace, v)]

    def require_support(self, source: Any, supports_namespaces: bool) -> None:
        """Check that a source with namespaced packages can serve namespaces.

        Raises:
            NamespaceNotSupportedError: in strict mode, when it cannot.
        """
        if supports_namespaces or not self.registry.namespaces(source):
            return

        source_key = self.registry.identity(source)
        if self.config.strict_mode:
            raise NamespaceNotSupportedError(source_key)
        if self.config.warn_on_missing:
            logger.warning(
                "Source '%s' does not support namespaces; namespace declarations are ignored",
                source_key,
            )
