"""Coerce loosely-structured generator output into an :class:`AnalysisResult`.

Generators wrap their JSON in prose or code fences, omit fields and leak
Markdown into HTML.  This module:

1. Locates the payload — optional fenced block, then the first balanced
   ``{…}`` object — and fails loudly with :class:`GenerationParseError` if
   there is none.
2. Fills every missing field with its placeholder, independently.
3. Runs the article body through :func:`force_html_structure` and then
   :func:`sanitize_links` so only mesh-backed internal links survive.
"""

from __future__ import annotations

import html
import json
import math
import re
from typing import Any, Iterable, Sequence

import structlog

from contentmesh.analysis.models import SemanticNode
from contentmesh.config import settings
from contentmesh.generation.models import (
    AnalysisResult,
    ProductDetection,
    ProductSpecs,
    ReferenceData,
    VerdictData,
)
from contentmesh.sanitize.links import sanitize_links
from contentmesh.sanitize.markdown import force_html_structure

logger = structlog.get_logger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)

DEFAULT_TITLE = "Updated Guide"
SNIPPET_LENGTH = 120


class GenerationParseError(ValueError):
    """The generator response holds no parseable JSON object."""


# ---------------------------------------------------------------------------
# Payload extraction
# ---------------------------------------------------------------------------

def _first_balanced_object(text: str) -> str | None:
    """Return the first complete ``{…}`` block in *text*, or ``None``.

    Braces inside JSON string literals are ignored.
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for pos in range(start, len(text)):
        char = text[pos]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : pos + 1]
    return None


def _reject_constant(name: str) -> Any:
    raise GenerationParseError(f"Invalid JSON in generator response: bare {name}")


def extract_json_payload(text: str | None) -> dict[str, Any]:
    """Return the JSON object embedded in *text*.

    Raises:
        GenerationParseError: If *text* is empty, holds no balanced object,
            or the object is not valid JSON.
    """
    if not text or not text.strip():
        raise GenerationParseError("Generator returned empty text")

    candidate = text
    fence = _FENCE_RE.search(text)
    if fence:
        candidate = fence.group(1)

    block = _first_balanced_object(candidate)
    if block is None:
        raise GenerationParseError("No JSON object found in generator response")

    try:
        payload = json.loads(block, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise GenerationParseError(f"Invalid JSON in generator response: {exc}") from exc

    if not isinstance(payload, dict):
        raise GenerationParseError("Generator payload is not a JSON object")
    return payload


# ---------------------------------------------------------------------------
# Field coercion: each field falls back on its own
# ---------------------------------------------------------------------------

def _text(payload: dict[str, Any], key: str, default: str = "") -> str:
    value = payload.get(key)
    return value if isinstance(value, str) and value else default


def _number(value: Any, default: float = 0) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    return value if isinstance(value, (int, float)) else default


def _strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def _verdict(value: Any) -> VerdictData:
    if not isinstance(value, dict):
        return VerdictData()
    return VerdictData(
        score=_number(value.get("score")),
        pros=_strings(value.get("pros")),
        cons=_strings(value.get("cons")),
        summary=_text(value, "summary"),
        target_audience=_text(value, "targetAudience"),
    )


def _specs(value: Any) -> ProductSpecs:
    if not isinstance(value, dict):
        return ProductSpecs()
    return ProductSpecs(
        price=_text(value, "price", "Check"),
        rating=_number(value.get("rating")),
        review_count=int(_number(value.get("reviewCount"))),
    )


def _products(value: Any) -> list[ProductDetection]:
    if not isinstance(value, list):
        return []
    products = []
    for item in value:
        if isinstance(item, dict) and item.get("name"):
            products.append(
                ProductDetection(
                    name=str(item["name"]),
                    url=str(item.get("url") or ""),
                    asin=str(item["asin"]) if item.get("asin") else None,
                )
            )
    return products


def _schema(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return value if isinstance(value, str) and value else "{}"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def render_references_html(references: Sequence[ReferenceData], limit: int | None = None) -> str:
    """Render a "Sources & Citations" section for up to *limit* references.

    Returns an empty string when there are no references.
    """
    limit = settings.max_references if limit is None else limit
    if not references or limit <= 0:
        return ""

    items = []
    for ref in references[:limit]:
        snippet = ref.snippet[:SNIPPET_LENGTH]
        items.append(
            '<li class="mesh-reference">'
            f'<a href="{html.escape(ref.link)}" target="_blank" rel="nofollow noopener">'
            f'<span class="mesh-reference-title">{html.escape(ref.title)}</span>'
            f'<span class="mesh-reference-snippet">{html.escape(snippet)}...</span>'
            "</a></li>"
        )
    return (
        '<section class="mesh-references">'
        "<h2>Sources &amp; Citations</h2>"
        f"<ul>{''.join(items)}</ul>"
        "</section>"
    )


def parse_generation_response(
    text: str | None,
    references: Sequence[ReferenceData] = (),
    keywords: Iterable[str] = (),
    valid_nodes: Iterable[SemanticNode] = (),
    site_url: str = "",
) -> AnalysisResult:
    """Parse and sanitize one generator response.

    Args:
        text: Raw generator output.
        references: External references used for the citation section.
        keywords: Keywords the prompt asked the generator to use.
        valid_nodes: The site mesh; internal links outside it are stripped.
        site_url: Canonical site URL for internal-link detection.

    Raises:
        GenerationParseError: If no structured payload can be extracted.
            A partially valid result is never returned in that case.
    """
    try:
        payload = extract_json_payload(text)
    except GenerationParseError as exc:
        logger.error("generation_parse_failed", error=str(exc))
        raise

    content = force_html_structure(_text(payload, "contentWithLinks"))
    content = sanitize_links(content, valid_nodes, site_url)

    return AnalysisResult(
        new_title=_text(payload, "newTitle", DEFAULT_TITLE),
        meta_description=_text(payload, "metaDescription"),
        bluf_sentence=_text(payload, "blufSentence"),
        sge_summary_html=_text(payload, "sgeSummaryHTML"),
        verdict=_verdict(payload.get("verdictData")),
        product_box_html=_text(payload, "productBoxHTML"),
        comparison_table_html=_text(payload, "comparisonTableHTML"),
        faq_html=_text(payload, "faqHTML"),
        schema_json=_schema(payload.get("schemaJSON")),
        content_with_links=content,
        references_html=render_references_html(references),
        detected_old_product=_text(payload, "detectedOldProduct", "Unknown"),
        identified_new_product=_text(payload, "identifiedNewProduct", "New Model"),
        new_product_specs=_specs(payload.get("newProductSpecs")),
        keywords_used=list(keywords),
        commercial_intent=payload.get("commercialIntent") is True,
        detected_products=_products(payload.get("detectedProducts")),
        used_internal_links=_strings(payload.get("usedInternalLinks")),
    )
