"""Analysis endpoints — health scoring, mesh building, neighbour ranking.

Routes
------
POST /health      Body: {"id", "content", "modified", "site_url"}   → HealthResult
POST /health/bulk Body: {"posts": [...], "site_url"}                 → [HealthResult]
POST /mesh        Body: {"posts": [...]}                             → [SemanticNode]
POST /neighbors   Body: {"posts": [...], "text", "limit"}            → [SemanticNode]

Single-post scoring goes through the shared :class:`AnalysisWorker` so the
event loop never runs the regex scans itself.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from contentmesh.analysis.documents import document_from_dict
from contentmesh.analysis.mesh import build_mesh, rank_neighbors
from contentmesh.analysis.models import Document
from contentmesh.config import settings
from contentmesh.worker.messages import AnalyzeHealthRequest, BuildMeshRequest
from contentmesh.worker.worker import AnalysisWorker

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class HealthRequestBody(BaseModel):
    id: int
    content: str = ""
    modified: str = ""
    site_url: Optional[str] = None


class BulkHealthRequestBody(BaseModel):
    posts: list[dict[str, Any]]
    site_url: Optional[str] = None


class MeshRequestBody(BaseModel):
    posts: list[dict[str, Any]]


class NeighborsRequestBody(BaseModel):
    posts: list[dict[str, Any]]
    text: str
    limit: Optional[int] = Field(default=None, ge=1)
    exclude_id: Optional[int] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _worker(request: Request) -> AnalysisWorker:
    return request.app.state.worker


def _documents(posts: list[dict[str, Any]]) -> list[Document]:
    try:
        return [document_from_dict(p) for p in posts]
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/health")
async def analyze_health_endpoint(body: HealthRequestBody, request: Request) -> dict[str, Any]:
    """Score one post's raw HTML body."""
    response = await _worker(request).submit(
        AnalyzeHealthRequest(
            id=body.id,
            content=body.content,
            modified=body.modified,
            site_url=body.site_url if body.site_url is not None else settings.site_url,
        )
    )
    return response.result.to_dict()  # type: ignore[union-attr]


@router.post("/health/bulk")
async def analyze_health_bulk_endpoint(
    body: BulkHealthRequestBody, request: Request
) -> list[dict[str, Any]]:
    """Score many posts concurrently; results keep the request order."""
    site_url = body.site_url if body.site_url is not None else settings.site_url
    worker = _worker(request)
    responses = await asyncio.gather(
        *(
            worker.submit(
                AnalyzeHealthRequest(
                    id=d.id, content=d.content, modified=d.modified, site_url=site_url
                )
            )
            for d in _documents(body.posts)
        )
    )
    return [r.result.to_dict() for r in responses]  # type: ignore[union-attr]


@router.post("/mesh")
async def build_mesh_endpoint(body: MeshRequestBody, request: Request) -> list[dict[str, Any]]:
    """Build the semantic mesh for a list of posts."""
    response = await _worker(request).submit(
        BuildMeshRequest(documents=tuple(_documents(body.posts)))
    )
    return [n.to_dict() for n in response.nodes]  # type: ignore[union-attr]


@router.post("/neighbors")
def neighbors_endpoint(body: NeighborsRequestBody) -> list[dict[str, Any]]:
    """Rank the posts' mesh nodes by relevance to *text*."""
    nodes = build_mesh(_documents(body.posts))
    ranked = rank_neighbors(nodes, body.text, limit=body.limit, exclude_id=body.exclude_id)
    return [n.to_dict() for n in ranked]
