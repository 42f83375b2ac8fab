"""Deterministic pseudo-embeddings for FAQ text.

This is NOT a semantic embedding model. Each word is scattered into a fixed
width vector by character code, weighted by how often the word occurs, and the
result is L2-normalized. Texts sharing vocabulary get similar vectors, which is
enough for ranking a small static FAQ set without any model dependency.

Swapping in a real embedding model only requires a different ``embed_fn`` for
the Scorer, but the similarity thresholds in config.py were calibrated against
this function and would have to be tuned again.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import TYPE_CHECKING

from supportdesk.constants.ranking import (
    EMBEDDING_DIM,
    EMBEDDING_HASH_MULTIPLIER,
    EMBEDDING_SECONDARY_WEIGHT,
)
from supportdesk.ranking.tokenizer import content_words

if TYPE_CHECKING:
    from supportdesk.kb.models import FaqEntry

EmbeddingVector = tuple[float, ...]

# Process-lifetime memo keyed by the exact input string. Entries are only ever
# inserted, so two requests computing the same key at once is harmless.
_embedding_cache: dict[str, EmbeddingVector] = {}


def _compute_embedding(text: str) -> EmbeddingVector:
    vector = [0.0] * EMBEDDING_DIM

    for word, freq in Counter(content_words(text)).items():
        weight = math.log(1 + freq)
        for char in word:
            code = ord(char)
            vector[code % EMBEDDING_DIM] += weight
            vector[(code * EMBEDDING_HASH_MULTIPLIER) % EMBEDDING_DIM] += (
                weight * EMBEDDING_SECONDARY_WEIGHT
            )

    magnitude = math.sqrt(sum(value * value for value in vector))
    if magnitude == 0:
        return tuple(vector)
    return tuple(value / magnitude for value in vector)


def embed(text: str) -> EmbeddingVector:
    """Embed text into a 512-wide unit vector.

    Args:
        text: Text to embed.

    Returns:
        Tuple of EMBEDDING_DIM floats with Euclidean norm 1, or all zeros when
        the text has no word longer than two characters.
    """
    cached = _embedding_cache.get(text)
    if cached is not None:
        return cached

    vector = _compute_embedding(text)
    _embedding_cache[text] = vector
    return vector


def entry_text(entry: FaqEntry) -> str:
    """Text of an FAQ entry used for embedding and keyword overlap."""
    return f"{entry.question} {entry.answer}"


def embed_entry(entry: FaqEntry) -> EmbeddingVector:
    """Return the entry's embedding, computing and storing it on first use."""
    if entry.embedding is None:
        entry.embedding = embed(entry_text(entry))
    return entry.embedding


def embedding_cache_size() -> int:
    return len(_embedding_cache)


def clear_embedding_cache() -> None:
    """Drop all memoized embeddings (for testing)."""
    _embedding_cache.clear()
