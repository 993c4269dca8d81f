"""Generation-result models and parser."""

from contentmesh.generation.models import (
    AnalysisResult,
    ProductDetection,
    ProductSpecs,
    ReferenceData,
    VerdictData,
)

__all__ = [
    "AnalysisResult",
    "ProductDetection",
    "ProductSpecs",
    "ReferenceData",
    "VerdictData",
]
