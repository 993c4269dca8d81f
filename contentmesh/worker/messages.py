"""Typed request/response messages for the analysis worker.

Each message carries a :class:`MessageType` tag.  Requests name an
operation, responses name a result kind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Union

from contentmesh.analysis.documents import document_from_dict
from contentmesh.analysis.models import Document, HealthResult, SemanticNode


class MessageType(str, Enum):
    ANALYZE_HEALTH = "ANALYZE_HEALTH"
    BUILD_MESH = "BUILD_MESH"
    HEALTH_RESULT = "HEALTH_RESULT"
    MESH_RESULT = "MESH_RESULT"


@dataclass(frozen=True)
class AnalyzeHealthRequest:
    id: int
    content: str
    modified: str | datetime
    site_url: str
    type: MessageType = field(default=MessageType.ANALYZE_HEALTH, init=False)


@dataclass(frozen=True)
class BuildMeshRequest:
    documents: tuple[Document, ...]
    type: MessageType = field(default=MessageType.BUILD_MESH, init=False)


@dataclass(frozen=True)
class HealthResultResponse:
    result: HealthResult
    type: MessageType = field(default=MessageType.HEALTH_RESULT, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "result": self.result.to_dict()}


@dataclass(frozen=True)
class MeshResultResponse:
    nodes: tuple[SemanticNode, ...]
    type: MessageType = field(default=MessageType.MESH_RESULT, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "nodes": [n.to_dict() for n in self.nodes]}


Request = Union[AnalyzeHealthRequest, BuildMeshRequest]
Response = Union[HealthResultResponse, MeshResultResponse]


def message_from_dict(data: dict[str, Any]) -> Request:
    """Decode a ``{"type": …, "payload": {…}}`` request.

    Raises:
        ValueError: For an unknown ``type`` or a malformed payload.
    """
    kind = data.get("type")
    payload = data.get("payload") or {}

    if kind == MessageType.ANALYZE_HEALTH.value:
        try:
            return AnalyzeHealthRequest(
                id=int(payload["id"]),
                content=str(payload.get("content", "")),
                modified=str(payload.get("modified", "")),
                site_url=str(payload.get("site_url", "")),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Malformed {kind} payload: {exc}") from exc

    if kind == MessageType.BUILD_MESH.value:
        posts = payload.get("posts")
        if not isinstance(posts, list):
            raise ValueError(f"Malformed {kind} payload: 'posts' must be a list")
        return BuildMeshRequest(documents=tuple(document_from_dict(p) for p in posts))

    raise ValueError(f"Unknown request type: {kind!r}")
