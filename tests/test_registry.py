"""Tests for the namespace registry."""

import threading
from enum import Enum

import pytest

from nslock.errors import NamespaceConflictError
from nslock.registry import DEFAULT_SOURCE, NamespaceRegistry, identity_of, namespace_key


class _Source:
    def __init__(self, uri: str):
        self.uri = uri


class _Org(Enum):
    ACME = "acme"


def test_packages_keep_registration_order():
    reg = NamespaceRegistry()
    reg.register("https://example.org", "orgA", "pkg1")
    reg.register("https://example.org", "orgA", "pkg2")

    assert reg.packages("https://example.org", "orgA") == ["pkg1", "pkg2"]


def test_register_same_triple_twice_is_noop():
    reg = NamespaceRegistry()
    reg.register("s", "orgA", "pkg")
    reg.register("s", "orgA", "pkg")

    assert reg.packages("s", "orgA") == ["pkg"]
    assert reg.count() == 1


def test_count_is_number_of_distinct_triples():
    reg = NamespaceRegistry()
    calls = [
        ("s1", "a", "x"),
        ("s1", "a", "y"),
        ("s1", "b", "x"),
        ("s2", "a", "x"),
        ("s1", "a", "x"),
        ("s2", "a", "x"),
    ]
    for call in calls:
        reg.register(*call)

    assert reg.count() == len(set(calls))
    assert len(reg) == 4


def test_lookups_on_unknown_keys_are_empty():
    reg = NamespaceRegistry()

    assert reg.packages("nowhere", "nobody") == []
    assert reg.namespaces("nowhere") == []
    assert not reg.is_registered("nowhere", "nobody", "pkg")
    assert reg.namespace_of("nowhere", "pkg") is None
    # Lookups never create keys
    assert reg.sources() == []


def test_namespaces_for_source():
    reg = NamespaceRegistry()
    reg.register("s", "org1", "a")
    reg.register("s", "org2", "b")
    reg.register("other", "org3", "c")

    assert reg.namespaces("s") == ["org1", "org2"]
    assert reg.sources() == ["s", "other"]


def test_is_registered():
    reg = NamespaceRegistry()
    reg.register("s", "org1", "pkg")

    assert reg.is_registered("s", "org1", "pkg")
    assert not reg.is_registered("s", "org2", "pkg")
    assert not reg.is_registered("t", "org1", "pkg")


def test_namespace_of_unique():
    reg = NamespaceRegistry()
    reg.register("s", "org1", "pkg")
    reg.register("s", "org2", "other")

    assert reg.namespace_of("s", "pkg") == "org1"
    assert reg.namespace_of("s", "missing") is None


def test_namespace_of_conflict():
    reg = NamespaceRegistry()
    reg.register("s", "org1", "pkg")
    reg.register("s", "org2", "pkg")

    with pytest.raises(NamespaceConflictError) as exc_info:
        reg.namespace_of("s", "pkg")

    assert exc_info.value.package == "pkg"
    assert exc_info.value.namespaces == ["org1", "org2"]
    assert "org1" in str(exc_info.value)
    assert "org2" in str(exc_info.value)


def test_same_package_in_two_sources_is_not_a_conflict():
    reg = NamespaceRegistry()
    reg.register("s1", "org1", "pkg")
    reg.register("s2", "org2", "pkg")

    assert reg.namespace_of("s1", "pkg") == "org1"
    assert reg.namespace_of("s2", "pkg") == "org2"


def test_source_normalization():
    assert identity_of("https://example.org") == "https://example.org"
    assert identity_of(None) == DEFAULT_SOURCE
    assert identity_of(_Source("https://pkgs.example.org")) == "https://pkgs.example.org"
    assert identity_of(42) == "42"


def test_namespace_normalization_preserves_case():
    assert namespace_key("MyOrg") == "MyOrg"
    assert namespace_key(_Org.ACME) == "acme"


def test_none_source_registers_under_default():
    reg = NamespaceRegistry()
    reg.register(None, "org", "pkg")

    assert reg.sources() == [DEFAULT_SOURCE]
    assert reg.namespace_of(DEFAULT_SOURCE, "pkg") == "org"
    assert reg.namespace_of(None, "pkg") == "org"


def test_custom_identity_function():
    reg = NamespaceRegistry(identity=lambda s: str(s).rstrip("/").lower())
    reg.register("https://Example.org/", "org", "pkg")

    assert reg.sources() == ["https://example.org"]
    assert reg.is_registered("HTTPS://EXAMPLE.ORG", "org", "pkg")


def test_snapshot_is_detached():
    reg = NamespaceRegistry()
    reg.register("s", "org", "a")

    snap = reg.snapshot()
    reg.register("s", "org", "b")

    assert snap == {"s": {"org": ("a",)}}
    assert reg.snapshot() == {"s": {"org": ("a", "b")}}


def test_reset_clears_everything():
    reg = NamespaceRegistry()
    reg.register("s", "org", "a")
    reg.reset()

    assert reg.count() == 0
    assert reg.snapshot() == {}


def test_concurrent_registration():
    reg = NamespaceRegistry()

    def worker(n: int):
        for i in range(200):
            reg.register("s", f"org{n}", f"pkg{i}")

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert reg.count() == 800
