"""Registry — in-memory index of namespace declarations.

The registry provides:
- Registration: record which namespace a package belongs to on a source
- Lookup: packages per namespace, namespaces per source
- Conflict detection: a package may resolve to one namespace per source
- Snapshots: a detached copy of the index for lockfile generation
"""

from nslock.registry.identity import DEFAULT_SOURCE, identity_of, namespace_key
from nslock.registry.store import NamespaceRegistry

__all__ = ["DEFAULT_SOURCE", "NamespaceRegistry", "identity_of", "namespace_key"]
