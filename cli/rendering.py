"""Plain-text rendering of analysis results for the CLI."""

from __future__ import annotations

from typing import Dict, List, Sequence

from contentmesh.analysis.models import HealthResult, SemanticNode


def _bar(score: int, width: int = 10) -> str:
    filled = round(score / 100 * width)
    return "█" * filled + "░" * (width - filled)


def render_health_table(results: Sequence[HealthResult], titles: Dict[int, str] | None = None) -> str:
    """Render health results as an aligned table, worst SEO score first.

    Args:
        results: Results to show.
        titles: Optional ``id -> title`` map for a readable last column.

    Returns:
        The table as a single string (no trailing newline).
    """
    titles = titles or {}
    lines: List[str] = [
        f"{'ID':>8}  {'SEO':>3} {'':10}  {'AEO':>3} {'':10}  {'WORDS':>6}  {'INT':>3}  {'EXT':>3}  {'AGE':>5}  TITLE"
    ]
    for r in sorted(results, key=lambda r: (r.seo_score, r.aeo_score)):
        m = r.metrics
        age = "?" if m.days_since_modified is None else f"{m.days_since_modified}d"
        lines.append(
            f"{r.id:>8}  {r.seo_score:>3} {_bar(r.seo_score)}  {r.aeo_score:>3} {_bar(r.aeo_score)}"
            f"  {m.word_count:>6}  {m.internal_links:>3}  {m.external_links:>3}  {age:>5}  "
            f"{titles.get(r.id, '')}"
        )
    return "\n".join(lines)


def render_nodes(nodes: Sequence[SemanticNode]) -> str:
    """Render mesh nodes one per line, with relevance when set."""
    lines: List[str] = []
    for n in nodes:
        score = f"{n.relevance:.2f}  " if n.relevance is not None else ""
        tokens = ", ".join(sorted(n.tokens))
        lines.append(f"  {score}[{n.id}] {n.title}  {n.url}  ({tokens})")
    return "\n".join(lines)
