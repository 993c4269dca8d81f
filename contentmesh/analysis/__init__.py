"""Content analysis package — tokenizer, health scorer and mesh builder."""

from contentmesh.analysis.documents import document_from_dict, load_documents
from contentmesh.analysis.health import analyze_document, analyze_health
from contentmesh.analysis.mesh import build_mesh, build_mesh_inventory, rank_neighbors
from contentmesh.analysis.models import (
    Document,
    HealthMetrics,
    HealthResult,
    HealthStatus,
    SemanticNode,
)
from contentmesh.analysis.tokenizer import extract_top_keywords, tokenize

__all__ = [
    "Document",
    "HealthMetrics",
    "HealthResult",
    "HealthStatus",
    "SemanticNode",
    "analyze_document",
    "analyze_health",
    "build_mesh",
    "build_mesh_inventory",
    "document_from_dict",
    "extract_top_keywords",
    "load_documents",
    "rank_neighbors",
    "tokenize",
]
