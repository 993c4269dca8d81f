"""Data models for content analysis.

Plain frozen dataclasses: callers hand them in, the analysis functions build
new ones, nothing is ever updated in place.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class HealthStatus(str, Enum):
    """Lifecycle of a scored post.  Only the caller moves it past ``idle``."""

    IDLE = "idle"
    SCANNING = "scanning"
    OPTIMIZING = "optimizing"
    REVIEW_PENDING = "review_pending"
    PUBLISHED = "published"
    ERROR = "error"


@dataclass(frozen=True)
class Document:
    """A single already-fetched article."""

    id: int
    title: str
    url: str
    slug: str
    modified: str | datetime
    content: str = ""


@dataclass(frozen=True)
class HealthMetrics:
    word_count: int
    has_schema: bool
    has_verdict: bool
    internal_links: int
    external_links: int
    days_since_modified: int | None
    entity_density: int = 0
    broken_media: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class HealthResult:
    id: int
    seo_score: int
    aeo_score: int
    metrics: HealthMetrics
    status: HealthStatus = HealthStatus.IDLE

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "seo_score": self.seo_score,
            "aeo_score": self.aeo_score,
            "status": self.status.value,
            "metrics": self.metrics.to_dict(),
        }


@dataclass(frozen=True)
class SemanticNode:
    """One page of the site mesh, annotated with its significant tokens."""

    id: int
    title: str
    url: str
    tokens: frozenset[str] = field(default_factory=frozenset)
    relevance: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "tokens": sorted(self.tokens),
            "relevance": self.relevance,
        }
