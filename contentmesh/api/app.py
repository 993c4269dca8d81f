"""FastAPI application factory.

Lifespan
--------
On startup the app configures logging and starts one shared
:class:`AnalysisWorker` (available as ``request.app.state.worker``).  On
shutdown the worker drains its queue and stops.

Routers
-------
    /analysis  — health scoring, mesh building, neighbour ranking
    /content   — Markdown repair, link sanitization, response parsing
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from contentmesh import __version__
from contentmesh.api.routers import analysis as analysis_router
from contentmesh.api.routers import content as content_router
from contentmesh.logs import configure_logging
from contentmesh.worker.worker import AnalysisWorker


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start the analysis worker on startup and stop it on shutdown."""
    configure_logging()
    worker = AnalysisWorker()
    await worker.start()
    app.state.worker = worker
    try:
        yield
    finally:
        await worker.close()


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="contentmesh API",
        description=(
            "Content-health scoring, semantic mesh building and generated-HTML "
            "sanitization for a site's article corpus."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    app.include_router(analysis_router.router, prefix="/analysis", tags=["analysis"])
    app.include_router(content_router.router, prefix="/content", tags=["content"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn contentmesh.api.app:app --reload
app = create_app()
