"""In-memory namespace registry.

Maps ``source -> namespace -> ordered set of package names``. Registration is
cheap and never fails; ambiguity (one package under two namespaces of the
same source) is only detected when a caller asks for *the* namespace of a
package.
"""

from __future__ import annotations

import threading
from typing import Any, Callable

from nslock.errors import NamespaceConflictError
from nslock.registry.identity import identity_of, namespace_key


class NamespaceRegistry:
    """Index of (source, namespace, package) declarations."""

    def __init__(self, identity: Callable[[Any], str] | None = None):
        self._identity = identity or identity_of
        self._lock = threading.RLock()
        # dict values are unused; dict keys give an insertion-ordered set
        self._index: dict[str, dict[str, dict[str, None]]] = {}

    def identity(self, source: Any) -> str:
        """The string key *source* is stored under."""
        return self._identity(source)

    def register(self, source: Any, namespace: Any, package_name: str) -> None:
        """Record that *package_name* belongs to *namespace* on *source*."""
        source_key = self._identity(source)
        ns_key = namespace_key(namespace)

        with self._lock:
            namespaces = self._index.setdefault(source_key, {})
            namespaces.setdefault(ns_key, {})[package_name] = None

    def packages(self, source: Any, namespace: Any) -> list[str]:
        """Package names registered for a source and namespace."""
        with self._lock:
            names = self._index.get(self._identity(source), {}).get(namespace_key(namespace), {})
            return list(names)

    def namespaces(self, source: Any) -> list[str]:
        with self._lock:
            return list(self._index.get(self._identity(source), {}))

    def sources(self) -> list[str]:
        with self._lock:
            return list(self._index)

    def is_registered(self, source: Any, namespace: Any, package_name: str) -> bool:
        with self._lock:
            names = self._index.get(self._identity(source), {}).get(namespace_key(namespace), {})
            return package_name in names

    def namespace_of(self, source: Any, package_name: str) -> str | None:
        """Return the namespace *package_name* is registered under on *source*.

        Returns None when the package is not namespaced on that source.

        Raises:
            NamespaceConflictError: the package is registered under two or
                more namespaces of the same source.
        """
        with self._lock:
            found = [
                ns
                for ns, names in self._index.get(self._identity(source), {}).items()
                if package_name in names
            ]

        if not found:
            return None
        if len(found) == 1:
            return found[0]
        raise NamespaceConflictError(package_name, found)

    def snapshot(self) -> dict[str, dict[str, tuple[str, ...]]]:
        """Detached copy of the full index, in registration order."""
        with self._lock:
            return {
                source: {ns: tuple(names) for ns, names in namespaces.items()}
                for source, namespaces in self._index.items()
            }

    def count(self) -> int:
        """Total number of distinct (source, namespace, package) registrations."""
        with self._lock:
            return sum(
                len(names) for namespaces in self._index.values() for names in namespaces.values()
            )

    def reset(self) -> None:
        with self._lock:
            self._index.clear()

    def __len__(self) -> int:
        return self.count()

    def __repr__(self) -> str:
        return f"NamespaceRegistry(sources={len(self._index)}, packages={self.count()})"
