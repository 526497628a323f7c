"""Namespace router -- a long-lived registry with lockfile generation and checks."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from nslock.config import NamespaceConfig, load_config
from nslock.errors import NamespaceConflictError
from nslock.lifecycle import seed_registry, write_lockfile
from nslock.lockfile.models import ResolvedSpec
from nslock.lockfile.reader import LockfileReader
from nslock.registry.store import NamespaceRegistry
from nslock.validation.validator import ConsistencyValidator

from web.backend.app.models.api import (
    LockRequest,
    LockResponse,
    NamespaceLookupResponse,
    RegisterRequest,
    RegistrySnapshotResponse,
    SeedResponse,
    ValidationIssueResponse,
    ValidationResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/namespaces", tags=["namespaces"])

# One registry for the lifetime of the service process
_registry = NamespaceRegistry()


def get_registry() -> NamespaceRegistry:
    return _registry


def get_config() -> NamespaceConfig:
    """Configuration from .nslock.yaml and NSLOCK_* environment variables."""
    return load_config()


def _snapshot_response(registry: NamespaceRegistry) -> RegistrySnapshotResponse:
    return RegistrySnapshotResponse(
        sources={
            source: {ns: list(names) for ns, names in namespaces.items()}
            for source, namespaces in registry.snapshot().items()
        },
        count=registry.count(),
    )


def _issue_to_response(issue) -> ValidationIssueResponse:
    return ValidationIssueResponse(
        severity=issue.severity.value,
        code=issue.code,
        message=issue.message,
        path=issue.path,
    )


@router.get("", response_model=RegistrySnapshotResponse, summary="Show the registry")
async def get_snapshot(registry: NamespaceRegistry = Depends(get_registry)):
    return _snapshot_response(registry)


@router.post("/register", response_model=RegistrySnapshotResponse, summary="Register a package")
async def register(request: RegisterRequest, registry: NamespaceRegistry = Depends(get_registry)):
    registry.register(request.source, request.namespace, request.package)
    return _snapshot_response(registry)


@router.delete("", response_model=RegistrySnapshotResponse, summary="Clear the registry")
async def reset(registry: NamespaceRegistry = Depends(get_registry)):
    registry.reset()
    return _snapshot_response(registry)


@router.get("/resolve", response_model=NamespaceLookupResponse, summary="Namespace of a package")
async def resolve(
    package: str = Query(..., description="Package name"),
    source: Optional[str] = Query(None, description="Source URL (default source when omitted)"),
    registry: NamespaceRegistry = Depends(get_registry),
):
    """Return the single namespace *package* is registered under.

    Responds 409 when the package is registered under more than one
    namespace of the source.
    """
    try:
        namespace = registry.namespace_of(source, package)
    except NamespaceConflictError as exc:
        raise HTTPException(
            status_code=409,
            detail={"message": str(exc), "namespaces": exc.namespaces},
        )
    return NamespaceLookupResponse(source=registry.identity(source), package=package, namespace=namespace)


@router.post("/seed", response_model=SeedResponse, summary="Load the lockfile into the registry")
async def seed(
    registry: NamespaceRegistry = Depends(get_registry),
    config: NamespaceConfig = Depends(get_config),
):
    loaded = seed_registry(registry, config)
    return SeedResponse(loaded=loaded, lockfile_path=config.lockfile_path, count=registry.count())


@router.post("/lock", response_model=LockResponse, summary="Write the namespace lockfile")
async def lock(
    request: LockRequest,
    registry: NamespaceRegistry = Depends(get_registry),
    config: NamespaceConfig = Depends(get_config),
):
    specs = [
        ResolvedSpec(name=s.name, version=s.version, platform=s.platform, dependencies=s.dependencies)
        for s in request.specs
    ]
    written = write_lockfile(registry, specs, config)
    return LockResponse(written=written, lockfile_path=config.lockfile_path, package_count=registry.count())


@router.get("/validate", response_model=ValidationResponse, summary="Check the lockfile for drift")
async def validate(
    registry: NamespaceRegistry = Depends(get_registry),
    config: NamespaceConfig = Depends(get_config),
):
    result = ConsistencyValidator(registry, LockfileReader(config.lockfile_path)).validate()
    if not result.passed:
        logger.info("Namespace lockfile %s failed validation: %s", config.lockfile_path, result.summary())

    return ValidationResponse(
        passed=result.passed,
        summary=result.summary(),
        errors=[_issue_to_response(i) for i in result.errors],
        warnings=[_issue_to_response(i) for i in result.warnings] if config.warn_on_missing else [],
    )
