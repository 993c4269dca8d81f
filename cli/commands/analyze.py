"""Commands for scoring posts and building the site mesh."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import typer

from contentmesh.analysis.documents import load_documents
from contentmesh.analysis.mesh import build_mesh, rank_neighbors
from contentmesh.analysis.models import Document
from contentmesh.config import settings
from contentmesh.worker.worker import analyze_documents

from cli.rendering import render_health_table, render_nodes

analyze_app = typer.Typer(help="Score posts and build the semantic mesh.", no_args_is_help=True)


def _load(export: Path) -> List[Document]:
    try:
        return load_documents(export)
    except (FileNotFoundError, ValueError) as e:
        typer.echo(f"❌ {e}")
        raise typer.Exit(code=1)


@analyze_app.command("health")
def health(
    export: Path = typer.Argument(..., help="JSON export of posts (WordPress REST shape)."),
    site_url: Optional[str] = typer.Option(None, "--site-url", help="Canonical site URL."),
    workers: Optional[int] = typer.Option(None, "--workers", help="Concurrent scoring workers."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
) -> None:
    """Score every post's SEO and answer-engine health."""
    documents = _load(export)
    results = asyncio.run(
        analyze_documents(documents, site_url if site_url is not None else settings.site_url, workers)
    )

    if as_json:
        typer.echo(json.dumps([r.to_dict() for r in results], indent=2))
        return

    if not results:
        typer.echo("No posts found.")
        return
    typer.echo(render_health_table(results, {d.id: d.title for d in documents}))


@analyze_app.command("mesh")
def mesh(
    export: Path = typer.Argument(..., help="JSON export of posts (WordPress REST shape)."),
    out: Optional[Path] = typer.Option(None, "--out", help="Write the mesh as JSON to this file."),
) -> None:
    """Build the semantic mesh (one token-annotated node per post)."""
    nodes = build_mesh(_load(export))

    if out is not None:
        out.write_text(json.dumps([n.to_dict() for n in nodes], indent=2), encoding="utf-8")
        typer.echo(f"✅ Wrote {len(nodes)} node(s) to {out}")
        return

    typer.echo(f"Mesh: {len(nodes)} node(s)")
    if nodes:
        typer.echo(render_nodes(nodes))


@analyze_app.command("neighbors")
def neighbors(
    export: Path = typer.Argument(..., help="JSON export of posts (WordPress REST shape)."),
    text: str = typer.Option(..., "--text", help="Topic or title to match against the mesh."),
    limit: int = typer.Option(10, "--limit", help="Maximum neighbours to show."),
    exclude_id: Optional[int] = typer.Option(None, "--exclude-id", help="Post to leave out."),
) -> None:
    """Rank mesh nodes by relevance to a topic."""
    ranked = rank_neighbors(build_mesh(_load(export)), text, limit=limit, exclude_id=exclude_id)
    if not ranked:
        typer.echo(f"No related posts for {text!r}.")
        return
    typer.echo(render_nodes(ranked))
