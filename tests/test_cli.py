"""Tests for the 'analyze' and 'content' CLI command groups."""

import json
import logging

import pytest
from typer.testing import CliRunner

from cli.main import app

runner = CliRunner()

SITE = "https://example.com"

_POSTS = [
    {
        "id": 11,
        "title": {"rendered": "Best Trail Running Shoes"},
        "link": f"{SITE}/trail-shoes/",
        "slug": "trail-shoes",
        "modified": "2020-01-01T00:00:00",
        "content": {"rendered": "<p>short post</p>"},
    },
    {
        "id": 12,
        "title": {"rendered": "Trail Running for Beginners"},
        "link": f"{SITE}/trail-beginners/",
        "slug": "trail-beginners",
        "modified": "2020-01-01T00:00:00",
        "content": {"rendered": "<h2>Verdict</h2>"},
    },
]


@pytest.fixture(autouse=True)
def restore_logging():
    """The CLI callback reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def export(tmp_path):
    path = tmp_path / "posts.json"
    path.write_text(json.dumps(_POSTS), encoding="utf-8")
    return path


def _invoke(*args: str):
    return runner.invoke(app, ["--log-level", "WARNING", *args])


# ---------------------------------------------------------------------------
# analyze
# ---------------------------------------------------------------------------

def test_health_json(export):
    """analyze health --json prints one result per post, in export order."""
    result = _invoke("analyze", "health", str(export), "--site-url", SITE, "--json")
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert [r["id"] for r in data] == [11, 12]
    assert data[1]["metrics"]["has_verdict"] is True
    assert data[0]["status"] == "idle"


def test_health_table(export):
    """analyze health without --json renders a table with titles."""
    result = _invoke("analyze", "health", str(export), "--workers", "2")
    assert result.exit_code == 0, result.output
    assert "SEO" in result.output
    assert "Best Trail Running Shoes" in result.output
    assert "Trail Running for Beginners" in result.output


def test_health_missing_export(tmp_path):
    """A missing export file exits with code 1."""
    result = _invoke("analyze", "health", str(tmp_path / "nope.json"))
    assert result.exit_code == 1
    assert "❌" in result.output


def test_health_rejects_non_list_export(tmp_path):
    path = tmp_path / "posts.json"
    path.write_text('{"id": 1}', encoding="utf-8")
    result = _invoke("analyze", "health", str(path))
    assert result.exit_code == 1


def test_mesh_summary(export):
    result = _invoke("analyze", "mesh", str(export))
    assert result.exit_code == 0, result.output
    assert "Mesh: 2 node(s)" in result.output
    assert "trailshoes" in result.output


def test_mesh_writes_file(export, tmp_path):
    out = tmp_path / "mesh.json"
    result = _invoke("analyze", "mesh", str(export), "--out", str(out))
    assert result.exit_code == 0, result.output
    assert "✅" in result.output
    nodes = json.loads(out.read_text(encoding="utf-8"))
    assert [n["id"] for n in nodes] == [11, 12]


def test_neighbors(export):
    result = _invoke("analyze", "neighbors", str(export), "--text", "trail running shoes", "--exclude-id", "11")
    assert result.exit_code == 0, result.output
    assert "[12] Trail Running for Beginners" in result.output
    assert "[11]" not in result.output


def test_neighbors_none_found(export):
    result = _invoke("analyze", "neighbors", str(export), "--text", "espresso")
    assert result.exit_code == 0
    assert "No related posts" in result.output


# ---------------------------------------------------------------------------
# content
# ---------------------------------------------------------------------------

def test_normalize_to_stdout(tmp_path):
    source = tmp_path / "draft.txt"
    source.write_text("## Title\n- one\n- two", encoding="utf-8")
    result = _invoke("content", "normalize", str(source))
    assert result.exit_code == 0, result.output
    assert "<h2>Title</h2>" in result.output
    assert "<ul><li>one</li><li>two</li></ul>" in result.output


def test_normalize_to_file(tmp_path):
    source = tmp_path / "draft.txt"
    source.write_text("**bold**", encoding="utf-8")
    out = tmp_path / "draft.html"
    result = _invoke("content", "normalize", str(source), "--out", str(out))
    assert result.exit_code == 0, result.output
    assert out.read_text(encoding="utf-8") == "<strong>bold</strong>"


def test_normalize_missing_source(tmp_path):
    result = _invoke("content", "normalize", str(tmp_path / "missing.txt"))
    assert result.exit_code == 1


def test_sanitize(export, tmp_path):
    source = tmp_path / "body.html"
    source.write_text('<a href="/trail-shoes">Shoes</a> <a href="/ghost">Ghost</a>', encoding="utf-8")
    result = _invoke("content", "sanitize", str(source), "--posts", str(export), "--site-url", SITE)
    assert result.exit_code == 0, result.output
    assert "mesh-internal-link" in result.output
    assert "mesh-link-removed" in result.output
    assert "/ghost" not in result.output


def test_parse(export, tmp_path):
    source = tmp_path / "response.txt"
    source.write_text(
        'Here it is: {"newTitle": "Trail Guide", "contentWithLinks": "<a href=\\"/trail-beginners/\\">Start</a>"}',
        encoding="utf-8",
    )
    refs = tmp_path / "refs.json"
    refs.write_text(
        json.dumps([{"title": "Running shoes tested", "link": "https://news.example.org/r"}]),
        encoding="utf-8",
    )
    result = _invoke(
        "content", "parse", str(source), "--posts", str(export), "--references", str(refs), "--site-url", SITE
    )
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["new_title"] == "Trail Guide"
    assert "mesh-internal-link" in data["content_with_links"]
    assert "running" in data["keywords_used"]


def test_parse_without_json_fails(export, tmp_path):
    source = tmp_path / "response.txt"
    source.write_text("No JSON at all.", encoding="utf-8")
    result = _invoke("content", "parse", str(source), "--posts", str(export))
    assert result.exit_code == 1


def test_parse_bad_references(export, tmp_path):
    source = tmp_path / "response.txt"
    source.write_text("{}", encoding="utf-8")
    refs = tmp_path / "refs.json"
    refs.write_text('[{"title": "no link"}]', encoding="utf-8")
    result = _invoke("content", "parse", str(source), "--posts", str(export), "--references", str(refs))
    assert result.exit_code == 1


def test_parse_references_must_be_objects(export, tmp_path):
    source = tmp_path / "response.txt"
    source.write_text("{}", encoding="utf-8")
    refs = tmp_path / "refs.json"
    refs.write_text('["a", "b"]', encoding="utf-8")
    result = _invoke("content", "parse", str(source), "--posts", str(export), "--references", str(refs))
    assert result.exit_code == 1
    assert "Invalid references file" in result.output


# ---------------------------------------------------------------------------
# misc
# ---------------------------------------------------------------------------

def test_version():
    result = _invoke("version")
    assert result.exit_code == 0
    assert "contentmesh 0.1.0" in result.output
