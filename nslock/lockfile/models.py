"""Lockfile data models — resolved specifications and locked package records."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Callable, Optional


@dataclass
class ResolvedSpec:
    """What the resolver settled on for one package."""

    name: str
    version: str
    platform: str = ""
    dependencies: list[str] = field(default_factory=list)  # Direct dependency names

    @classmethod
    def from_dict(cls, data: dict) -> ResolvedSpec:
        return cls(
            name=str(data["name"]),
            version=str(data["version"]),
            platform=str(data.get("platform") or ""),
            dependencies=[str(d) for d in data.get("dependencies") or []],
        )


@dataclass
class PackageRecord:
    """A locked (source, namespace, package) entry."""

    version: str
    dependencies: list[str] = field(default_factory=list)
    platform: str = ""

    @classmethod
    def from_spec(cls, spec: ResolvedSpec) -> PackageRecord:
        return cls(
            version=str(spec.version),
            dependencies=sorted(spec.dependencies),
            platform=str(spec.platform) if spec.platform else "",
        )

    def to_dict(self) -> dict:
        data: dict = {"version": self.version, "dependencies": list(self.dependencies)}
        if self.platform:
            data["platform"] = self.platform
        return data


SpecLookup = Callable[[str], Optional[ResolvedSpec]]


def spec_lookup_from(specs: Iterable[ResolvedSpec] | Mapping[str, ResolvedSpec]) -> SpecLookup:
    """Build a name -> spec lookup from resolver output.

    When several specs share a name (one per platform), the first one wins.
    """
    if isinstance(specs, Mapping):
        table = dict(specs)
    else:
        table = {}
        for spec in specs:
            table.setdefault(spec.name, spec)
    return table.get
