"""Tests for namespace-aware resolution policy."""

import logging

import pytest

from nslock.config import NamespaceConfig
from nslock.errors import NamespaceConflictError, NamespaceNotSupportedError
from nslock.registry import NamespaceRegistry
from nslock.resolution import NamespaceResolution


def _conflicting_registry() -> NamespaceRegistry:
    reg = NamespaceRegistry()
    reg.register("s", "org1", "pkg")
    reg.register("s", "org2", "pkg")
    return reg


def test_namespace_for_unique():
    reg = NamespaceRegistry()
    reg.register("s", "org", "pkg")

    assert NamespaceResolution(reg).namespace_for("s", "pkg") == "org"


def test_conflict_is_fatal_in_strict_mode():
    resolution = NamespaceResolution(_conflicting_registry(), NamespaceConfig(strict_mode=True))

    with pytest.raises(NamespaceConflictError):
        resolution.namespace_for("s", "pkg")


def test_conflict_is_advisory_otherwise(caplog):
    resolution = NamespaceResolution(_conflicting_registry(), NamespaceConfig())

    with caplog.at_level(logging.WARNING, logger="nslock.resolution"):
        assert resolution.namespace_for("s", "pkg") is None

    assert "multiple namespaces: org1, org2" in caplog.text
    assert len(resolution.conflicts) == 1
    assert resolution.conflicts[0].namespaces == ["org1", "org2"]


def test_conflict_warning_can_be_silenced(caplog):
    resolution = NamespaceResolution(
        _conflicting_registry(), NamespaceConfig(warn_on_missing=False)
    )

    with caplog.at_level(logging.WARNING, logger="nslock.resolution"):
        resolution.namespace_for("s", "pkg")

    assert caplog.text == ""
    assert len(resolution.conflicts) == 1


def test_filter_versions_uses_index_predicate():
    reg = NamespaceRegistry()
    reg.register("s", "org", "pkg")
    published = {("org", "1.0"), ("org", "1.2")}

    versions = NamespaceResolution(reg).filter_versions(
        "s", "pkg", ["1.0", "1.1", "1.2"], available=lambda ns, v: (ns, v) in published
    )

    assert versions == ["1.0", "1.2"]


def test_filter_versions_accepts_all_without_namespace_or_predicate():
    reg = NamespaceRegistry()
    reg.register("s", "org", "pkg")
    resolution = NamespaceResolution(reg)

    assert resolution.filter_versions("s", "plain", ["1.0"], available=lambda ns, v: False) == ["1.0"]
    assert resolution.filter_versions("s", "pkg", ["1.0", "2.0"]) == ["1.0", "2.0"]


def test_require_support_strict():
    reg = NamespaceRegistry()
    reg.register("https://legacy.example.org", "org", "pkg")
    resolution = NamespaceResolution(reg, NamespaceConfig(strict_mode=True))

    with pytest.raises(NamespaceNotSupportedError):
        resolution.require_support("https://legacy.example.org", supports_namespaces=False)

    resolution.require_support("https://legacy.example.org", supports_namespaces=True)
    # Sources without namespaced packages are never a problem
    resolution.require_support("https://other.example.org", supports_namespaces=False)


def test_require_support_warns_when_not_strict(caplog):
    reg = NamespaceRegistry()
    reg.register("https://legacy.example.org", "org", "pkg")

    with caplog.at_level(logging.WARNING, logger="nslock.resolution"):
        NamespaceResolution(reg).require_support("https://legacy.example.org", False)

    assert "does not support namespaces" in caplog.text
