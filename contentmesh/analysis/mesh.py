"""Semantic mesh construction.

The mesh is a flat, ordered list of :class:`SemanticNode` — one per post.
Edges are never stored: consumers score relevance on demand, e.g. with
:func:`rank_neighbors`.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Sequence

from contentmesh.analysis.models import Document, SemanticNode
from contentmesh.analysis.tokenizer import MESH_STOP_WORDS, tokenize


def build_node(document: Document, stop_words: frozenset[str] = MESH_STOP_WORDS) -> SemanticNode:
    """Return the node for *document*, tokenized from its title and slug."""
    return SemanticNode(
        id=document.id,
        title=document.title,
        url=document.url,
        tokens=tokenize(f"{document.title} {document.slug}", stop_words),
    )


def build_mesh(
    documents: Iterable[Document],
    stop_words: frozenset[str] = MESH_STOP_WORDS,
) -> list[SemanticNode]:
    """Return one node per document, in input order."""
    return [build_node(doc, stop_words) for doc in documents]


def rank_neighbors(
    nodes: Sequence[SemanticNode],
    text: str,
    limit: int | None = None,
    exclude_id: int | None = None,
) -> list[SemanticNode]:
    """Rank *nodes* by token overlap with *text*.

    Relevance is the share of the query's tokens a node also carries, in
    ``[0, 1]``.  Nodes with no overlap are dropped.  Ties keep mesh order.

    Returns:
        Copies of the matching nodes with ``relevance`` set, best first.
    """
    query = tokenize(text)
    if not query:
        return []

    scored: list[SemanticNode] = []
    for node in nodes:
        if exclude_id is not None and node.id == exclude_id:
            continue
        overlap = len(query & node.tokens)
        if overlap:
            scored.append(replace(node, relevance=overlap / len(query)))

    scored.sort(key=lambda n: n.relevance or 0.0, reverse=True)
    return scored[:limit] if limit is not None else scored


def build_mesh_inventory(nodes: Sequence[SemanticNode]) -> str:
    """Format *nodes* as the numbered URL inventory given to a generator."""
    return "\n".join(
        f"[ID:{i}] URL: {node.url} (Topic: {node.title})" for i, node in enumerate(nodes)
    )
