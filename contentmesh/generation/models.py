"""Data models for generation-service payloads."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class ReferenceData:
    """An external search result used for fact checking and keywords."""

    title: str
    link: str
    snippet: str = ""


@dataclass(frozen=True)
class VerdictData:
    score: float = 0
    pros: list[str] = field(default_factory=list)
    cons: list[str] = field(default_factory=list)
    summary: str = ""
    target_audience: str = ""


@dataclass(frozen=True)
class ProductSpecs:
    price: str = "Check"
    rating: float = 0
    review_count: int = 0


@dataclass(frozen=True)
class ProductDetection:
    name: str
    url: str
    asin: str | None = None


@dataclass(frozen=True)
class AnalysisResult:
    """The coerced, sanitized output of one generation call."""

    new_title: str
    meta_description: str
    bluf_sentence: str
    sge_summary_html: str
    verdict: VerdictData
    product_box_html: str
    comparison_table_html: str
    faq_html: str
    schema_json: str
    content_with_links: str
    references_html: str
    detected_old_product: str
    identified_new_product: str
    new_product_specs: ProductSpecs
    keywords_used: list[str] = field(default_factory=list)
    commercial_intent: bool = False
    detected_products: list[ProductDetection] = field(default_factory=list)
    used_internal_links: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
