"""Repair Markdown that leaked into HTML-only generator output.

Only the handful of constructs generators actually emit are handled:
``##``–``####`` headers, ``**bold**`` and flat ``-``/``*`` bullet lists.
Nested lists, tables and Markdown links are left alone.
"""

from __future__ import annotations

import re

_LINE_END_RE = re.compile(r"\r\n?")
_WORD_COUNT_RE = re.compile(r"\(\d+\s*words,?\s*total\s*\d+\)", re.IGNORECASE)
_HEADER_RES = [
    (re.compile(r"^##[ \t]+(.*)$", re.MULTILINE), r"<h2>\1</h2>"),
    (re.compile(r"^###[ \t]+(.*)$", re.MULTILINE), r"<h3>\1</h3>"),
    (re.compile(r"^####[ \t]+(.*)$", re.MULTILINE), r"<h4>\1</h4>"),
]
_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
_BULLET_RE = re.compile(r"(?:^|\n)[-*][ \t]+(.*)")
_LI_RUN_RE = re.compile(r"(?:<li>.*</li>\n?)+")


def _repair_once(text: str) -> str:
    clean = _LINE_END_RE.sub("\n", text).strip()

    # 1. Word-count annotations, e.g. "(278 words, total 1077)"
    clean = _WORD_COUNT_RE.sub("", clean)

    # 2. Headers
    for pattern, replacement in _HEADER_RES:
        clean = pattern.sub(replacement, clean)

    # 3. Bold
    clean = _BOLD_RE.sub(r"<strong>\1</strong>", clean)

    # 4. Bullet lists, only when the text has no list markup of its own
    if "<ul>" not in clean and ("\n- " in clean or "\n* " in clean):
        clean = _BULLET_RE.sub(r"<li>\1</li>", clean)
        clean = _LI_RUN_RE.sub(lambda m: f"<ul>{m.group(0)}</ul>", clean)

    # 5. Trim
    return clean.strip()


def force_html_structure(text: str) -> str:
    """Return *text* with residual Markdown converted to HTML.

    Each repair can expose another (removing an annotation may join two
    ``**`` halves), so repairs are repeated until the text stops changing.
    Every repair only ever removes Markdown markers, which bounds the loop and
    makes the function idempotent.
    """
    current = text
    while True:
        repaired = _repair_once(current)
        if repaired == current:
            return repaired
        current = repaired
