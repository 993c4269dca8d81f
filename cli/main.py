"""contentmesh CLI — entry-point for all operations.

Usage:
    python cli/main.py --help

Command groups:
    analyze   → health scoring, mesh building, neighbour ranking
    content   → Markdown repair, link sanitization, response parsing
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from contentmesh.xxx import
# ...` works when the CLI is invoked as `python cli/main.py` from any working
# directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from typing import Optional

import typer

from contentmesh import __version__
from contentmesh.logs import configure_logging

from cli.commands.analyze import analyze_app
from cli.commands.content import content_app

app = typer.Typer(
    name="contentmesh",
    help="Content-health scoring, site mesh and generated-HTML sanitization.",
    no_args_is_help=True,
)

app.add_typer(analyze_app, name="analyze")
app.add_typer(content_app, name="content")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override CONTENTMESH_LOG_LEVEL."),
    log_json: bool = typer.Option(False, "--log-json", help="Emit logs as JSON lines."),
) -> None:
    """Configure logging before any command runs."""
    configure_logging(level=log_level, json_output=log_json or None)


@app.command("version")
def version() -> None:
    """Print the installed version."""
    typer.echo(f"contentmesh {__version__}")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
