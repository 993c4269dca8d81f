"""Message-based analysis worker.

Public API::

    from contentmesh.worker import AnalysisWorker, AnalyzeHealthRequest
"""

from contentmesh.worker.messages import (
    AnalyzeHealthRequest,
    BuildMeshRequest,
    HealthResultResponse,
    MeshResultResponse,
    MessageType,
    message_from_dict,
)
from contentmesh.worker.worker import AnalysisWorker, analyze_documents, handle_message

__all__ = [
    "AnalysisWorker",
    "AnalyzeHealthRequest",
    "BuildMeshRequest",
    "HealthResultResponse",
    "MeshResultResponse",
    "MessageType",
    "analyze_documents",
    "handle_message",
    "message_from_dict",
]
