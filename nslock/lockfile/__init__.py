"""Lockfile — the persisted snapshot of namespace assignments.

Document shape::

    <source>:
      <namespace>:
        <package>:
          version: <string, required>
          dependencies: [<string>, ...]
          platform: <string>
"""

from nslock.lockfile.models import PackageRecord, ResolvedSpec, spec_lookup_from
from nslock.lockfile.reader import LockfileReader
from nslock.lockfile.writer import LockfileWriter

__all__ = [
    "LockfileReader",
    "LockfileWriter",
    "PackageRecord",
    "ResolvedSpec",
    "spec_lookup_from",
]
