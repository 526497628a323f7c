"""Lifecycle hooks — seed the registry before resolution, lock after it.

Both hooks are safe to call from the host workflow: lockfile problems are
logged and never propagate. A lockfile that cannot be trusted is treated as
absent for seeding; explicit validation (``nslock check``) is where such
problems become hard errors.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from nslock.config import NamespaceConfig
from nslock.errors import NamespaceError
from nslock.lockfile.models import ResolvedSpec, spec_lookup_from
from nslock.lockfile.reader import LockfileReader
from nslock.lockfile.writer import LockfileWriter
from nslock.registry.store import NamespaceRegistry
from nslock.validation.report import LoggingSink, ReportSink, report
from nslock.validation.validator import ConsistencyValidator

logger = logging.getLogger(__name__)


def seed_registry(
    registry: NamespaceRegistry,
    config: NamespaceConfig,
    sink: ReportSink | None = None,
) -> bool:
    """Replay the existing lockfile into *registry*.

    Returns True if a lockfile was loaded.
    """
    reader = LockfileReader(config.lockfile_path)
    if not reader.exists():
        return False

    try:
        reader.parse()
        reader.verify_versions()
    except (NamespaceError, OSError) as e:
        logger.warning("Failed to load namespace lockfile: %s", e)
        return False

    count = reader.replay_into(registry)
    logger.debug("Seeded %d namespaced packages from %s", count, reader.lockfile_path)

    if config.warn_on_missing:
        result = ConsistencyValidator(registry, reader).validate()
        if result.issues:
            report(result, sink or LoggingSink(logger))

    return True


def write_lockfile(
    registry: NamespaceRegistry,
    specs: Iterable[ResolvedSpec] | Mapping[str, ResolvedSpec],
    config: NamespaceConfig,
) -> bool:
    """Write the lockfile after a successful resolution.

    Returns True if the file was written.
    """
    writer = LockfileWriter(config.lockfile_path)
    if not writer.should_generate(registry):
        return False

    if writer.write(registry, spec_lookup_from(specs)):
        logger.info("Namespace lockfile written to %s", writer.lockfile_path)
        return True

    logger.warning("Failed to write namespace lockfile")
    return False
