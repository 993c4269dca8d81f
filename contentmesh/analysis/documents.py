"""Turn CMS exports into :class:`Document` records.

Accepts the WordPress REST shape (``title.rendered``, ``content.rendered``,
``link``) as well as flat dicts (``title``, ``content``, ``url``).
"""

from __future__ import annotations

import html
import json
from pathlib import Path
from typing import Any

from contentmesh.analysis.models import Document


def _rendered(value: Any) -> str:
    """Return ``value["rendered"]`` for WP objects, or *value* itself."""
    if isinstance(value, dict):
        value = value.get("rendered", "")
    return "" if value is None else str(value)


def document_from_dict(post: dict[str, Any]) -> Document:
    """Build a :class:`Document` from one exported post.

    Raises:
        ValueError: If the post has no integer-like ``id``.
    """
    try:
        doc_id = int(post["id"])
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Post has no valid id: {post.get('id')!r}") from exc

    return Document(
        id=doc_id,
        title=html.unescape(_rendered(post.get("title"))),
        url=str(post.get("link") or post.get("url") or ""),
        slug=str(post.get("slug") or ""),
        modified=str(post.get("modified") or post.get("date") or ""),
        content=_rendered(post.get("content")),
    )


def load_documents(path: str | Path) -> list[Document]:
    """Read a JSON array of posts from *path*.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the file is not a JSON array of post objects.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Export not found: {path}")

    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of posts in {path}")
    return [document_from_dict(post) for post in data]
