"""Declarations — the manifest layer that feeds the namespace registry.

Packages are declared either inside a namespace scope or with an explicit
``namespace=`` option::

    scope = DeclarationScope(registry, default_source="https://pkgs.example.org")
    with scope.namespace("myorg"):
        scope.package("my-lib", ">=1.0")
    scope.package("other-lib", namespace="partner")

Only namespaced declarations are registered; plain ones pass through.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator

import yaml

from nslock.errors import ManifestError
from nslock.registry.identity import namespace_key
from nslock.registry.store import NamespaceRegistry


@dataclass(frozen=True)
class Dependency:
    """A declared dependency, optionally scoped to a namespace."""

    name: str
    requirement: str | None = None
    source: str | None = None
    namespace: str | None = None

    @property
    def namespaced(self) -> bool:
        return self.namespace is not None

    @property
    def qualified_name(self) -> str:
        if self.namespaced:
            return f"{self.namespace}/{self.name}"
        return self.name

    def __str__(self) -> str:
        if self.requirement:
            return f"{self.qualified_name} ({self.requirement})"
        return self.qualified_name


class DeclarationScope:
    """Collects dependency declarations and registers namespaced ones."""

    def __init__(self, registry: NamespaceRegistry, default_source: Any = None):
        self.registry = registry
        self.default_source = default_source
        self.dependencies: list[Dependency] = []
        self._namespaces: list[str] = []

    @property
    def current_namespace(self) -> str | None:
        return self._namespaces[-1] if self._namespaces else None

    @contextmanager
    def namespace(self, *names: Any) -> Iterator[DeclarationScope]:
        """Declare packages inside one or more namespaces; the last one wins."""
        if not names:
            raise ValueError("namespace requires at least one namespace identifier")

        self._namespaces.extend(namespace_key(n) for n in names)
        try:
            yield self
        finally:
            del self._namespaces[-len(names):]

    def package(
        self,
        name: str,
        requirement: str | None = None,
        *,
        source: Any = None,
        namespace: Any = None,
    ) -> Dependency:
        ns = namespace_key(namespace) if namespace is not None else self.current_namespace
        src = source if source is not None else self.default_source

        dep = Dependency(
            name=name,
            requirement=requirement,
            source=None if src is None else self.registry.identity(src),
            namespace=ns,
        )
        if ns is not None:
            self.registry.register(src, ns, name)

        self.dependencies.append(dep)
        return dep


def load_manifest(path: str | Path, registry: NamespaceRegistry) -> list[Dependency]:
    """Declare every package of a YAML manifest into *registry*.

    Manifest shape::

        source: https://pkgs.example.org      # optional default source
        packages:
          - name: requests
          - name: my-lib
            namespace: myorg
            requirement: ">=1.0"
        namespaces:
          partner:
            - name: other-lib
              source: https://partner.example.org
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ManifestError(f"Cannot read manifest {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ManifestError(f"Invalid YAML in manifest {path}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError(f"Manifest {path} must contain a mapping")

    scope = DeclarationScope(registry, default_source=data.get("source"))

    for entry in _entries(data.get("packages", []), "packages"):
        _declare(scope, entry)

    namespaces = data.get("namespaces", {})
    if not isinstance(namespaces, dict):
        raise ManifestError("'namespaces' must map namespace names to package lists")
    for ns, entries in namespaces.items():
        with scope.namespace(ns):
            for entry in _entries(entries, f"namespaces.{ns}"):
                _declare(scope, entry)

    return scope.dependencies


def _entries(value: Any, where: str) -> list[dict]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ManifestError(f"'{where}' must be a list")

    entries = []
    for i, item in enumerate(value):
        if isinstance(item, str):
            item = {"name": item}
        if not isinstance(item, dict) or not item.get("name"):
            raise ManifestError(f"{where}[{i}]: package entry needs a 'name'")
        entries.append(item)
    return entries


def _declare(scope: DeclarationScope, entry: dict) -> Dependency:
    requirement = entry.get("requirement")
    return scope.package(
        str(entry["name"]),
        str(requirement) if requirement is not None else None,
        source=entry.get("source"),
        namespace=entry.get("namespace"),
    )
