"""Commands for cleaning generated HTML before it is published."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer

from contentmesh.analysis.documents import load_documents
from contentmesh.analysis.mesh import build_mesh
from contentmesh.analysis.models import SemanticNode
from contentmesh.analysis.tokenizer import extract_top_keywords
from contentmesh.config import settings
from contentmesh.generation.models import ReferenceData
from contentmesh.generation.parser import GenerationParseError, parse_generation_response
from contentmesh.sanitize.links import sanitize_links
from contentmesh.sanitize.markdown import force_html_structure

content_app = typer.Typer(help="Repair and validate generated HTML.", no_args_is_help=True)


def _read(path: Path) -> str:
    if not path.exists():
        typer.echo(f"❌ File not found: {path}")
        raise typer.Exit(code=1)
    return path.read_text(encoding="utf-8")


def _emit(text: str, out: Optional[Path]) -> None:
    if out is None:
        typer.echo(text)
        return
    out.write_text(text, encoding="utf-8")
    typer.echo(f"✅ Wrote {out}")


def _mesh(posts: Path) -> List[SemanticNode]:
    try:
        return build_mesh(load_documents(posts))
    except (FileNotFoundError, ValueError) as e:
        typer.echo(f"❌ {e}")
        raise typer.Exit(code=1)


def _references(path: Optional[Path]) -> List[ReferenceData]:
    if path is None:
        return []
    try:
        raw = json.loads(_read(path))
        return [
            ReferenceData(title=r["title"], link=r["link"], snippet=r.get("snippet", ""))
            for r in raw
        ]
    except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
        typer.echo(f"❌ Invalid references file {path}: {e}")
        raise typer.Exit(code=1)


@content_app.command("normalize")
def normalize(
    source: Path = typer.Argument(..., help="Text file with generated output."),
    out: Optional[Path] = typer.Option(None, "--out", help="Write the result to this file."),
) -> None:
    """Convert leaked Markdown (headers, bold, bullets) to HTML."""
    _emit(force_html_structure(_read(source)), out)


@content_app.command("sanitize")
def sanitize(
    source: Path = typer.Argument(..., help="HTML file to sanitize."),
    posts: Path = typer.Option(..., "--posts", help="JSON export of the site's posts."),
    site_url: Optional[str] = typer.Option(None, "--site-url", help="Canonical site URL."),
    out: Optional[Path] = typer.Option(None, "--out", help="Write the result to this file."),
) -> None:
    """Keep internal links that exist on the site, strip the rest."""
    html = sanitize_links(
        _read(source),
        _mesh(posts),
        site_url if site_url is not None else settings.site_url,
    )
    _emit(html, out)


@content_app.command("parse")
def parse(
    source: Path = typer.Argument(..., help="Raw generator response."),
    posts: Path = typer.Option(..., "--posts", help="JSON export of the site's posts."),
    references: Optional[Path] = typer.Option(
        None, "--references", help="JSON list of {title, link, snippet} references."
    ),
    site_url: Optional[str] = typer.Option(None, "--site-url", help="Canonical site URL."),
) -> None:
    """Parse a generator response into sanitized, structured JSON."""
    refs = _references(references)
    try:
        result = parse_generation_response(
            _read(source),
            references=refs,
            keywords=extract_top_keywords(refs, limit=settings.max_keywords),
            valid_nodes=_mesh(posts),
            site_url=site_url if site_url is not None else settings.site_url,
        )
    except GenerationParseError as e:
        typer.echo(f"❌ {e}")
        raise typer.Exit(code=1)

    typer.echo(json.dumps(result.to_dict(), indent=2))
