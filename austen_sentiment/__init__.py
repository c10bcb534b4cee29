"""Windowed lexicon sentiment over Jane Austen's novels."""

__all__ = [
    "utils",
    "errors",
    "ingest_corpus",
    "tokenize_corpus",
    "lexicon_sentiment",
    "windowed",
    "analysis",
]
