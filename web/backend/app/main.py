"""FastAPI application for the nslock namespace service.

The service keeps one registry alive across requests. Run it from the
project root once the package is installed::

    uvicorn web.backend.app.main:app
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nslock import DEFAULT_LOCKFILE, __version__
from web.backend.app.routers import namespaces

app = FastAPI(
    title="nslock API",
    description="Namespace registry, lockfile generation and drift validation.",
    version=__version__,
)

# Development setting: any origin may call the API.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(namespaces.router)


@app.get("/", tags=["meta"])
async def root():
    """Service name, version and the default lockfile it manages."""
    return {
        "name": "nslock API",
        "version": __version__,
        "default_lockfile": DEFAULT_LOCKFILE,
        "docs": "/docs",
    }


@app.get("/health", tags=["meta"])
async def health_check():
    return {"status": "healthy"}
