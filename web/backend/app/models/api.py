"""Pydantic models for API request/response serialization.

These models mirror the nslock dataclasses and provide proper JSON
serialization for the FastAPI endpoints.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Registry models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """A single namespaced package declaration."""

    source: Optional[str] = None
    namespace: str = Field(..., min_length=1)
    package: str = Field(..., min_length=1)


class RegistrySnapshotResponse(BaseModel):
    """Full registry index: source -> namespace -> package names."""

    sources: dict[str, dict[str, list[str]]] = Field(default_factory=dict)
    count: int = 0


class NamespaceLookupResponse(BaseModel):
    source: str
    package: str
    namespace: Optional[str] = None


# ---------------------------------------------------------------------------
# Lockfile models
# ---------------------------------------------------------------------------


class ResolvedSpecRequest(BaseModel):
    """Mirrors nslock.lockfile.models.ResolvedSpec."""

    name: str
    version: str
    platform: str = ""
    dependencies: list[str] = Field(default_factory=list)


class LockRequest(BaseModel):
    specs: list[ResolvedSpecRequest] = Field(default_factory=list)


class LockResponse(BaseModel):
    written: bool
    lockfile_path: str
    package_count: int = 0


class SeedResponse(BaseModel):
    loaded: bool
    lockfile_path: str
    count: int = 0


# ---------------------------------------------------------------------------
# Validation models
# ---------------------------------------------------------------------------


class ValidationIssueResponse(BaseModel):
    """Mirrors nslock.validation.validator.ValidationIssue."""

    severity: str
    code: str
    message: str
    path: str = ""


class ValidationResponse(BaseModel):
    passed: bool
    summary: str
    errors: list[ValidationIssueResponse] = Field(default_factory=list)
    warnings: list[ValidationIssueResponse] = Field(default_factory=list)
