"""Tests for the tokenizer and keyword extraction."""

from __future__ import annotations

from contentmesh.analysis.tokenizer import (
    KEYWORD_STOP_WORDS,
    MESH_STOP_WORDS,
    extract_top_keywords,
    tokenize,
)
from contentmesh.generation.models import ReferenceData


class TestTokenize:
    def test_empty_text_returns_empty_set(self) -> None:
        assert tokenize("") == frozenset()

    def test_whitespace_only_returns_empty_set(self) -> None:
        assert tokenize("   \n\t  ") == frozenset()

    def test_case_insensitive(self) -> None:
        assert tokenize("Cats") == tokenize("cats") == frozenset({"cats"})

    def test_drops_short_words_and_stop_words(self) -> None:
        tokens = tokenize("The cat is on the mat with an owl and the big dog")
        assert tokens == frozenset({"cat", "mat", "owl", "big", "dog"})

    def test_every_token_is_long_and_significant(self) -> None:
        text = "A quick, brown fox -- jumps over the lazy dog! For it, by them; at 3pm."
        for token in tokenize(text):
            assert len(token) > 2
            assert token not in MESH_STOP_WORDS

    def test_strips_punctuation(self) -> None:
        assert tokenize("widget's, (review)!") == frozenset({"widgets", "review"})

    def test_duplicates_collapse(self) -> None:
        assert tokenize("widget Widget WIDGET") == frozenset({"widget"})

    def test_deterministic(self) -> None:
        text = "Best running shoes for flat feet"
        assert tokenize(text) == tokenize(text)

    def test_custom_stop_words(self) -> None:
        assert tokenize("widget review", frozenset({"review"})) == frozenset({"widget"})


class TestExtractTopKeywords:
    def test_ranks_by_frequency(self) -> None:
        refs = [
            ReferenceData(title="Trail shoes", link="https://a.example", snippet="trail running shoes"),
            ReferenceData(title="Trail running", link="https://b.example", snippet="shoes for trail"),
        ]
        keywords = extract_top_keywords(refs)
        assert keywords[0] == "trail"
        assert set(keywords[1:3]) == {"shoes", "running"}

    def test_skips_stop_words_and_short_words(self) -> None:
        refs = [ReferenceData(title="The best review guide", link="x", snippet="buy shop online now")]
        keywords = extract_top_keywords(refs)
        assert not set(keywords) & KEYWORD_STOP_WORDS
        assert "now" not in keywords

    def test_limit(self) -> None:
        refs = [ReferenceData(title=" ".join(f"word{i}" for i in range(60)), link="x")]
        assert len(extract_top_keywords(refs, limit=40)) == 40

    def test_no_references(self) -> None:
        assert extract_top_keywords([]) == []
