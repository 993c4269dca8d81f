"""Content-health scoring.

Computes structural metrics straight from a post's raw markup and turns them
into two additive-penalty scores:

* **SEO score** — search-engine readiness.
* **AEO score** — answer-engine readiness (needs a clear verdict and schema).

Regex scanning is used instead of a DOM parser so that very large bodies stay
cheap.  Word counting deliberately runs over the *unstripped* body, so tag
names and attribute values are counted too; the numbers are only comparable
with other results produced the same way.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone

import structlog

from contentmesh.analysis.models import Document, HealthMetrics, HealthResult, HealthStatus

logger = structlog.get_logger(__name__)

SCHEMA_MARKER = "application/ld+json"

_WORD_RE = re.compile(r"\w+")
_VERDICT_RE = re.compile(r"verdict|conclusion|summary|pros and cons|bottom line", re.IGNORECASE)
_HREF_RE = re.compile(r"""href=["'](.*?)["']""")

_SECONDS_PER_DAY = 86400

# Rule-table thresholds
STALE_AFTER_DAYS = 365
SEO_MIN_WORDS = 1000
AEO_MIN_WORDS = 1500
MIN_INTERNAL_LINKS = 3
MIN_EXTERNAL_LINKS = 3


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _count_links(content: str, site_url: str) -> tuple[int, int]:
    """Return ``(internal, external)`` counts over every ``href`` value.

    Internal: contains the site URL or starts with ``/``.  External: any other
    ``http`` URL.  Everything else (fragments, ``mailto:`` …) is ignored.
    """
    clean_site = site_url[:-1] if site_url.endswith("/") else site_url
    internal = 0
    external = 0
    for match in _HREF_RE.finditer(content):
        url = match.group(1)
        if (clean_site and clean_site in url) or url.startswith("/"):
            internal += 1
        elif url.startswith("http"):
            external += 1
    return internal, external


def _parse_timestamp(value: str | datetime) -> datetime | None:
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def days_since(modified: str | datetime, now: datetime | None = None) -> int | None:
    """Whole days between *now* and *modified*, rounded up.

    Naive timestamps are read as UTC.  Returns ``None`` when *modified* cannot
    be parsed.
    """
    parsed = _parse_timestamp(modified)
    if parsed is None:
        return None
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return math.ceil(abs((now - parsed).total_seconds()) / _SECONDS_PER_DAY)


def compute_metrics(
    content: str,
    modified: str | datetime,
    site_url: str,
    now: datetime | None = None,
) -> HealthMetrics:
    """Compute all metrics from one snapshot of *content*."""
    internal, external = _count_links(content, site_url)
    return HealthMetrics(
        word_count=len(_WORD_RE.findall(content)),
        has_schema=SCHEMA_MARKER in content,
        has_verdict=_VERDICT_RE.search(content) is not None,
        internal_links=internal,
        external_links=external,
        days_since_modified=days_since(modified, now),
    )


def seo_score(metrics: HealthMetrics) -> int:
    score = 100
    if metrics.days_since_modified is not None and metrics.days_since_modified > STALE_AFTER_DAYS:
        score -= 20
    if metrics.word_count < SEO_MIN_WORDS:
        score -= 15
    if metrics.internal_links < MIN_INTERNAL_LINKS:
        score -= 15
    if metrics.external_links < MIN_EXTERNAL_LINKS:
        score -= 10
    if not metrics.has_schema:
        score -= 10
    return max(0, score)


def aeo_score(metrics: HealthMetrics) -> int:
    score = 100
    if not metrics.has_verdict:
        score -= 30
    if metrics.word_count < AEO_MIN_WORDS:
        score -= 10
    if not metrics.has_schema:
        score -= 25
    return max(0, score)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def analyze_health(
    doc_id: int,
    content: str,
    modified: str | datetime,
    site_url: str,
    now: datetime | None = None,
) -> HealthResult:
    """Score one post.

    Args:
        doc_id: Identifier echoed back on the result.
        content: Raw HTML body, tags included.
        modified: Last-modified timestamp (ISO 8601 string or ``datetime``).
        site_url: Canonical site URL used to classify internal links.
        now: Reference time; defaults to the current UTC time.

    Returns:
        A :class:`HealthResult` in the ``idle`` state.  An unparsable
        *modified* value is logged and recorded as
        ``days_since_modified=None`` (no recency penalty) instead of raising.
    """
    metrics = compute_metrics(content, modified, site_url, now)
    if metrics.days_since_modified is None:
        logger.warning("unparsable_modified_timestamp", doc_id=doc_id, modified=str(modified))

    return HealthResult(
        id=doc_id,
        seo_score=seo_score(metrics),
        aeo_score=aeo_score(metrics),
        metrics=metrics,
        status=HealthStatus.IDLE,
    )


def analyze_document(document: Document, site_url: str, now: datetime | None = None) -> HealthResult:
    """Score a :class:`Document`."""
    return analyze_health(document.id, document.content, document.modified, site_url, now)
