"""Lockfile writer — serializes the registry into the namespace lockfile.

Generation is best-effort auxiliary output: a failed write is logged and
reported as ``False``, never raised to the workflow that triggered it.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

import yaml

from nslock import DEFAULT_LOCKFILE
from nslock.lockfile.models import PackageRecord, SpecLookup
from nslock.registry.store import NamespaceRegistry

logger = logging.getLogger(__name__)


class LockfileWriter:
    """Writes ``source -> namespace -> package -> record`` documents."""

    def __init__(self, lockfile_path: str | Path = DEFAULT_LOCKFILE):
        self.lockfile_path = Path(lockfile_path)

    def should_generate(self, registry: NamespaceRegistry) -> bool:
        """Only generate when namespaced packages exist.

        A missing lockfile is the canonical "no namespaces in use" state,
        so an empty document is never written.
        """
        return registry.count() > 0

    def build(self, snapshot: dict[str, dict[str, tuple[str, ...]]], spec_lookup: SpecLookup) -> dict:
        """Build the lockfile tree. Packages without a resolved spec are skipped."""
        structure: dict[str, dict[str, dict[str, dict]]] = {}

        for source, namespaces in snapshot.items():
            for namespace, package_names in namespaces.items():
                for name in package_names:
                    spec = spec_lookup(name)
                    if spec is None:
                        continue
                    record = PackageRecord.from_spec(spec)
                    structure.setdefault(str(source), {}).setdefault(str(namespace), {})[name] = (
                        record.to_dict()
                    )

        return structure

    def generate(self, snapshot: dict[str, dict[str, tuple[str, ...]]], spec_lookup: SpecLookup) -> str:
        """Serialize a registry snapshot to YAML text."""
        return yaml.safe_dump(
            self.build(snapshot, spec_lookup),
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )

    def write(self, registry: NamespaceRegistry, spec_lookup: SpecLookup) -> bool:
        """Generate the lockfile and atomically replace the file on disk.

        Returns True if the file was written.
        """
        if not self.should_generate(registry):
            return False

        try:
            content = self.generate(registry.snapshot(), spec_lookup)
            self._replace(content)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Failed to write namespace lockfile %s: %s", self.lockfile_path, e)
            return False

        logger.debug("Wrote namespace lockfile %s (%d packages)", self.lockfile_path, registry.count())
        return True

    def _replace(self, content: str) -> None:
        directory = self.lockfile_path.parent
        directory.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=directory, prefix=f".{self.lockfile_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_name, self.lockfile_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
