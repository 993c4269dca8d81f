"""Word tokenization and keyword extraction.

Both routines lowercase, drop punctuation and split on whitespace.  The
stop-word sets are immutable module constants handed in as arguments.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Iterable

from contentmesh.generation.models import ReferenceData

MESH_STOP_WORDS: frozenset[str] = frozenset(
    {"the", "and", "is", "in", "it", "to", "of", "for", "with", "on", "at", "by"}
)

KEYWORD_STOP_WORDS: frozenset[str] = frozenset(
    {
        "the", "best", "review", "guide", "top", "with", "what", "how", "check",
        "price", "amazon", "for", "and", "is", "in", "to", "of", "a", "an", "vs",
        "comparison", "2023", "2024", "2025", "buy", "shop", "online",
    }
)

_PUNCTUATION_RE = re.compile(r"[^\w\s]")


def _words(text: str) -> list[str]:
    return _PUNCTUATION_RE.sub("", text.lower()).split()


def tokenize(text: str, stop_words: frozenset[str] = MESH_STOP_WORDS) -> frozenset[str]:
    """Return the significant lowercase words of *text*.

    A token survives when it is longer than two characters and is not a stop
    word.  Blank input yields an empty set.
    """
    return frozenset(w for w in _words(text) if len(w) > 2 and w not in stop_words)


def extract_top_keywords(
    references: Iterable[ReferenceData],
    limit: int = 40,
    stop_words: frozenset[str] = KEYWORD_STOP_WORDS,
) -> list[str]:
    """Return the *limit* most frequent keywords across *references*.

    Only words longer than three characters count.  Ties keep the order in
    which the words were first seen.
    """
    text = " ".join(f"{ref.title} {ref.snippet}" for ref in references)
    counts = Counter(w for w in _words(text) if len(w) > 3 and w not in stop_words)
    return [word for word, _ in counts.most_common(limit)]
