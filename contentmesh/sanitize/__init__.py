"""Sanitization of generated HTML — Markdown repair and link validation."""

from contentmesh.sanitize.links import build_valid_path_index, normalize_path, sanitize_links
from contentmesh.sanitize.markdown import force_html_structure

__all__ = ["build_valid_path_index", "force_html_structure", "normalize_path", "sanitize_links"]
