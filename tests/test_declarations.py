"""Tests for namespace declarations and manifest loading."""

import tempfile
from pathlib import Path

import pytest
import yaml

from nslock.declarations import DeclarationScope, Dependency, load_manifest
from nslock.errors import ManifestError
from nslock.registry import NamespaceRegistry

SOURCE = "https://pkgs.example.org"


def _write_manifest(tmpdir: str, data) -> str:
    path = Path(tmpdir) / "manifest.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return str(path)


def test_namespace_block_registers_packages():
    reg = NamespaceRegistry()
    scope = DeclarationScope(reg, default_source=SOURCE)

    with scope.namespace("myorg"):
        dep = scope.package("my-lib", ">=1.0")

    assert dep == Dependency("my-lib", ">=1.0", SOURCE, "myorg")
    assert reg.packages(SOURCE, "myorg") == ["my-lib"]


def test_namespace_option_overrides_block():
    reg = NamespaceRegistry()
    scope = DeclarationScope(reg, default_source=SOURCE)

    with scope.namespace("outer"):
        scope.package("a", namespace="explicit")
        scope.package("b")

    assert reg.namespace_of(SOURCE, "a") == "explicit"
    assert reg.namespace_of(SOURCE, "b") == "outer"


def test_nested_namespaces_innermost_wins():
    reg = NamespaceRegistry()
    scope = DeclarationScope(reg)

    with scope.namespace("outer"):
        with scope.namespace("inner"):
            scope.package("a")
        scope.package("b")
    scope.package("c")

    assert reg.namespace_of(None, "a") == "inner"
    assert reg.namespace_of(None, "b") == "outer"
    assert reg.namespace_of(None, "c") is None
    assert scope.current_namespace is None


def test_multiple_namespaces_in_one_block():
    scope = DeclarationScope(NamespaceRegistry())

    with scope.namespace("first", "second"):
        dep = scope.package("a")

    assert dep.namespace == "second"
    assert scope.current_namespace is None


def test_namespace_scope_unwinds_on_error():
    scope = DeclarationScope(NamespaceRegistry())

    with pytest.raises(RuntimeError):
        with scope.namespace("org"):
            raise RuntimeError("boom")

    assert scope.current_namespace is None


def test_namespace_requires_identifier():
    scope = DeclarationScope(NamespaceRegistry())

    with pytest.raises(ValueError):
        with scope.namespace():
            pass


def test_plain_packages_are_not_registered():
    reg = NamespaceRegistry()
    scope = DeclarationScope(reg, default_source=SOURCE)

    dep = scope.package("requests")

    assert not dep.namespaced
    assert reg.count() == 0
    assert scope.dependencies == [dep]


def test_dependency_qualified_name():
    assert Dependency("lib", namespace="org").qualified_name == "org/lib"
    assert Dependency("lib").qualified_name == "lib"
    assert str(Dependency("lib", ">=2", namespace="org")) == "org/lib (>=2)"
    assert Dependency("lib", namespace="a") != Dependency("lib", namespace="b")


def test_load_manifest():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = _write_manifest(
            tmpdir,
            {
                "source": SOURCE,
                "packages": [
                    "requests",
                    {"name": "my-lib", "namespace": "myorg", "requirement": ">=1.0"},
                ],
                "namespaces": {
                    "partner": [
                        {"name": "other-lib", "source": "https://partner.example.org"},
                        "shared",
                    ]
                },
            },
        )
        reg = NamespaceRegistry()
        deps = load_manifest(path, reg)

        assert [d.qualified_name for d in deps] == [
            "requests",
            "myorg/my-lib",
            "partner/other-lib",
            "partner/shared",
        ]
        assert reg.packages(SOURCE, "myorg") == ["my-lib"]
        assert reg.packages("https://partner.example.org", "partner") == ["other-lib"]
        assert reg.packages(SOURCE, "partner") == ["shared"]


def test_load_manifest_rejects_entries_without_name():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = _write_manifest(tmpdir, {"packages": [{"namespace": "org"}]})

        with pytest.raises(ManifestError):
            load_manifest(path, NamespaceRegistry())


def test_load_manifest_rejects_non_mapping():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = _write_manifest(tmpdir, ["requests"])

        with pytest.raises(ManifestError):
            load_manifest(path, NamespaceRegistry())


def test_load_manifest_missing_file():
    with pytest.raises(ManifestError):
        load_manifest("/nonexistent/manifest.yaml", NamespaceRegistry())
