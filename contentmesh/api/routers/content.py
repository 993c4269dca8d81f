"""Content endpoints — Markdown repair, link sanitization, response parsing.

Routes
------
POST /normalize  Body: {"text"}                                   → {"html"}
POST /sanitize   Body: {"html", "nodes": [{"url", ...}], "site_url"} → {"html"}
POST /parse      Body: {"text", "nodes", "references", "site_url"}  → AnalysisResult
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from contentmesh.analysis.models import SemanticNode
from contentmesh.analysis.tokenizer import extract_top_keywords
from contentmesh.config import settings
from contentmesh.generation.models import ReferenceData
from contentmesh.generation.parser import GenerationParseError, parse_generation_response
from contentmesh.sanitize.links import sanitize_links
from contentmesh.sanitize.markdown import force_html_structure

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class NodeBody(BaseModel):
    url: str
    id: int = 0
    title: str = ""


class ReferenceBody(BaseModel):
    title: str
    link: str
    snippet: str = ""


class NormalizeRequest(BaseModel):
    text: str


class SanitizeRequest(BaseModel):
    html: str
    nodes: list[NodeBody] = Field(default_factory=list)
    site_url: Optional[str] = None


class ParseRequest(BaseModel):
    text: str
    nodes: list[NodeBody] = Field(default_factory=list)
    references: list[ReferenceBody] = Field(default_factory=list)
    site_url: Optional[str] = None


class HtmlResponse(BaseModel):
    html: str


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _nodes(bodies: list[NodeBody]) -> list[SemanticNode]:
    return [SemanticNode(id=b.id, title=b.title, url=b.url) for b in bodies]


def _site_url(value: Optional[str]) -> str:
    return value if value is not None else settings.site_url


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/normalize", response_model=HtmlResponse)
def normalize_endpoint(body: NormalizeRequest) -> dict[str, str]:
    """Convert leaked Markdown in *text* to HTML."""
    return {"html": force_html_structure(body.text)}


@router.post("/sanitize", response_model=HtmlResponse)
def sanitize_endpoint(body: SanitizeRequest) -> dict[str, str]:
    """Keep mesh-backed internal links, strip the rest."""
    return {"html": sanitize_links(body.html, _nodes(body.nodes), _site_url(body.site_url))}


@router.post("/parse")
def parse_endpoint(body: ParseRequest) -> dict[str, Any]:
    """Parse a raw generator response into a sanitized result.

    Returns 422 when the response holds no parseable JSON payload.
    """
    references = [ReferenceData(title=r.title, link=r.link, snippet=r.snippet) for r in body.references]
    try:
        result = parse_generation_response(
            body.text,
            references=references,
            keywords=extract_top_keywords(references, limit=settings.max_keywords),
            valid_nodes=_nodes(body.nodes),
            site_url=_site_url(body.site_url),
        )
    except GenerationParseError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return result.to_dict()
