"""Key normalization for sources and namespaces.

Sources reach the registry as URLs, ``None`` or source objects owned by the
host tool. Everything is reduced to a string before it touches the index.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

DEFAULT_SOURCE = "default"


def identity_of(source: Any) -> str:
    """Return the string identity of a package source."""
    if isinstance(source, str):
        return source
    if source is None:
        return DEFAULT_SOURCE

    # Source objects (index clients, remotes) usually expose their location
    for attr in ("uri", "url"):
        value = getattr(source, attr, None)
        if isinstance(value, str) and value:
            return value

    return str(source)


def namespace_key(namespace: Any) -> str:
    """Coerce a namespace identifier to its string form, preserving case."""
    if isinstance(namespace, Enum):
        return str(namespace.value)
    return str(namespace)
