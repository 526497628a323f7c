"""Lockfile reader — parses and structurally validates the namespace lockfile.

The reader is a strict gate: the whole document is walked once during
``parse`` and the first structural violation raises. Once a parse has
succeeded every accessor is a plain lookup that returns an empty value for
paths that do not exist.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from packaging.version import InvalidVersion, Version

from nslock import DEFAULT_LOCKFILE
from nslock.errors import InvalidLockfileError, LockfileErrorKind, LockfileReadError
from nslock.registry.store import NamespaceRegistry

logger = logging.getLogger(__name__)


class LockfileReader:
    """Reads ``source -> namespace -> package -> record`` documents."""

    def __init__(self, lockfile_path: str | Path = DEFAULT_LOCKFILE):
        self.lockfile_path = Path(lockfile_path)
        self.data: dict[str, dict[str, dict[str, dict]]] | None = None

    def exists(self) -> bool:
        return self.lockfile_path.exists()

    def parse(self) -> dict[str, dict[str, dict[str, dict]]]:
        """Parse the lockfile.

        A missing file parses as an empty document: no namespace
        constraints have been recorded yet.

        Raises:
            InvalidLockfileError: YAML syntax error or structural violation.
            LockfileReadError: the file exists but cannot be read.
        """
        self.data = None

        if not self.exists():
            self.data = {}
            return self.data

        try:
            content = self.lockfile_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise LockfileReadError(str(self.lockfile_path), str(e)) from e

        try:
            raw = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise InvalidLockfileError(f"YAML syntax error: {e}", kind=LockfileErrorKind.SYNTAX) from e

        self.data = _validate_structure({} if raw is None else raw)
        logger.debug("Parsed namespace lockfile %s (%d sources)", self.lockfile_path, len(self.data))
        return self.data

    # -- accessors ---------------------------------------------------------

    def _parsed(self) -> dict[str, dict[str, dict[str, dict]]]:
        if self.data is None:
            self.parse()
        return self.data

    def sources(self) -> list[str]:
        return list(self._parsed())

    def namespaces_in(self, source: str) -> list[str]:
        return list(self._parsed().get(source, {}))

    def packages_in(self, source: str, namespace: str) -> dict[str, dict]:
        """Package name -> record for one namespace of a source."""
        return dict(self._parsed().get(source, {}).get(namespace, {}))

    def record_of(self, source: str, namespace: str, package: str) -> dict | None:
        return self._parsed().get(source, {}).get(namespace, {}).get(package)

    def version_of(self, source: str, namespace: str, package: str) -> str | None:
        record = self.record_of(source, namespace, package)
        if record is None or record.get("version") is None:
            return None
        return str(record["version"])

    def triples(self) -> list[tuple[str, str, str]]:
        """Every (source, namespace, package) in document order."""
        return [
            (source, namespace, package)
            for source, namespaces in self._parsed().items()
            for namespace, packages in namespaces.items()
            for package in packages
        ]

    def verify_versions(self) -> int:
        """Check every locked version, raising on the first bad one.

        ``parse`` only requires the ``version`` key. Callers that trust the
        records (seeding) use this to reject null or malformed versions too.

        Returns the number of records checked.
        """
        triples = self.triples()
        for source, namespace, package in triples:
            record = self.record_of(source, namespace, package)
            check_version(record.get("version"), (source, namespace, package))
        return len(triples)

    def replay_into(self, registry: NamespaceRegistry) -> int:
        """Register every locked triple. Replaying twice is a no-op the second time.

        Returns the number of triples walked.
        """
        triples = self.triples()
        for source, namespace, package in triples:
            registry.register(source, namespace, package)
        return len(triples)


def _validate_structure(raw: Any) -> dict[str, dict[str, dict[str, dict]]]:
    """Walk the whole document, rebuilding it with string keys.

    Nothing is returned unless every level is well-formed.
    """
    if not isinstance(raw, dict):
        raise InvalidLockfileError(
            f"Lockfile must be a mapping at the top level, got {type(raw).__name__}"
        )

    document: dict[str, dict[str, dict[str, dict]]] = {}

    for source, namespaces in raw.items():
        source = str(source)
        if not isinstance(namespaces, dict):
            raise InvalidLockfileError(
                f"Namespaces for source '{source}' must be a mapping",
                locator=(source,),
            )

        if source in document:
            raise InvalidLockfileError(f"Duplicate source key '{source}'", locator=(source,))
        document[source] = {}
        for namespace, packages in namespaces.items():
            namespace = str(namespace)
            if not isinstance(packages, dict):
                raise InvalidLockfileError(
                    f"Packages for namespace '{namespace}' in {source} must be a mapping",
                    locator=(source, namespace),
                )

            if namespace in document[source]:
                raise InvalidLockfileError(
                    f"Duplicate namespace key '{namespace}' in {source}",
                    locator=(source, namespace),
                )
            document[source][namespace] = {}
            for package, record in packages.items():
                package = str(package)
                locator = (source, namespace, package)
                if package in document[source][namespace]:
                    raise InvalidLockfileError(
                        f"Duplicate package key '{package}' in {source}/{namespace}",
                        locator=locator,
                    )
                if not isinstance(record, dict):
                    raise InvalidLockfileError(
                        f"Data for package '{package}' in {source}/{namespace} must be a mapping",
                        locator=locator,
                    )
                if "version" not in record:
                    raise InvalidLockfileError(
                        f"Package '{package}' in {source}/{namespace} missing version",
                        kind=LockfileErrorKind.MISSING_FIELD,
                        locator=locator,
                    )
                document[source][namespace][package] = dict(record)

    return document


def check_version(version: Any, locator: tuple[str, ...] = ()) -> Version:
    """Parse a locked version string.

    Raises:
        InvalidLockfileError: the version is missing or not a valid version.
    """
    if version is None or version == "":
        raise InvalidLockfileError(
            f"Package '{'/'.join(locator)}' missing version",
            kind=LockfileErrorKind.MISSING_FIELD,
            locator=locator,
        )
    try:
        return Version(str(version))
    except InvalidVersion as e:
        raise InvalidLockfileError(
            f"Invalid version '{version}'",
            kind=LockfileErrorKind.BAD_VERSION,
            locator=locator,
        ) from e
