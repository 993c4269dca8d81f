"""Internal-link validation for generated HTML.

Every internal anchor is checked against the paths of the site mesh.  Known
destinations are kept (and tagged); unknown ones lose their hyperlink but
keep their text, so a hallucinated URL can never ship as a 404.

Anchors are matched by pattern, not parsed: markup the pattern does not
recognise is left exactly as it was.
"""

from __future__ import annotations

import re
from typing import Iterable
from urllib.parse import urlparse

import structlog

from contentmesh.analysis.models import SemanticNode

logger = structlog.get_logger(__name__)

INTERNAL_LINK_CLASS = "mesh-internal-link"
REMOVED_LINK_CLASS = "mesh-link-removed"
REMOVED_LINK_TITLE = "Link removed by validator (404 prevention)"

_ANCHOR_RE = re.compile(
    r"""<a\s+(?:[^>]*?\s+)?href=(["'])(.*?)\1[^>]*>(.*?)</a>""",
    re.IGNORECASE,
)


# ---------------------------------------------------------------------------
# Path normalisation, shared by the index and the href check
# ---------------------------------------------------------------------------

def _strip_trailing_slash(value: str) -> str:
    return value[:-1] if value.endswith("/") else value


def normalize_path(url: str) -> str:
    """Reduce *url* to a comparable path.

    Absolute URLs keep only their path component; relative ones are used as
    is.  Either way a single trailing slash is dropped and the result is
    lowercased.
    """
    if url.startswith("http"):
        try:
            return _strip_trailing_slash(urlparse(url).path).lower()
        except ValueError:
            pass
    return _strip_trailing_slash(url).lower()


def build_valid_path_index(nodes: Iterable[SemanticNode]) -> frozenset[str]:
    """Return the normalised paths of every node in *nodes*."""
    return frozenset(normalize_path(node.url) for node in nodes)


def is_known_path(path: str, index: frozenset[str]) -> bool:
    """Return ``True`` if *path* is in *index* or shares a suffix with an entry.

    The suffix check runs both ways so absolute and relative spellings of the
    same page still match.  It also accepts unrelated paths that merely end
    alike, and the empty site-root path is a suffix of every entry.
    """
    if path in index:
        return True
    return any(entry.endswith(path) or path.endswith(entry) for entry in index)


def _is_internal(href: str, site_url: str) -> bool:
    lower = href.lower()
    if lower.startswith("/") or (site_url and site_url.lower() in lower):
        return True
    # Anything that is not obviously external is treated as a site path.
    return not lower.startswith(("http", "#", "mailto"))


def _attr(value: str) -> str:
    return value.replace('"', "&quot;")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def sanitize_links(html: str, valid_nodes: Iterable[SemanticNode], site_url: str = "") -> str:
    """Validate every internal anchor in *html* against *valid_nodes*.

    Args:
        html: Generated HTML fragment.
        valid_nodes: The site mesh — every legitimate internal destination.
        site_url: Canonical site URL; absolute links containing it count as
            internal.

    Returns:
        *html* with each internal anchor either rewritten as a tagged link or
        replaced by a ``<span>`` carrying the same text.  External links,
        fragments and ``mailto:`` links are returned unchanged.
    """
    index = build_valid_path_index(valid_nodes)
    kept = 0
    removed = 0

    def _rewrite(match: re.Match[str]) -> str:
        nonlocal kept, removed
        href = match.group(2).strip()
        text = match.group(3)

        if not _is_internal(href, site_url):
            return match.group(0)

        if is_known_path(normalize_path(href), index):
            kept += 1
            return (
                f'<a href="{_attr(href)}" class="{INTERNAL_LINK_CLASS}" '
                f'title="Read more: {_attr(text)}">{text}</a>'
            )

        removed += 1
        return f'<span class="{REMOVED_LINK_CLASS}" title="{REMOVED_LINK_TITLE}">{text}</span>'

    result = _ANCHOR_RE.sub(_rewrite, html)
    if removed:
        logger.info("internal_links_removed", kept=kept, removed=removed)
    return result
