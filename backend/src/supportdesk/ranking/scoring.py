"""Similarity scoring between a query and an FAQ entry.

Two scoring methods exist, each used by one chat path:

- HYBRID: 0.7 * cosine(pseudo-embeddings) + 0.3 * keyword overlap. Used by the
  client direct-chat path.
- LEXICAL: Jaccard over content tokens plus a flat bonus for a shared 2-3 word
  phrase. Used by the server knowledge-base path.

The methods produce scores on different scales, so each comes with its own
thresholds, bundled as a ScoringPreset.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from supportdesk.config import RankingConfig
from supportdesk.constants.ranking import KEYWORD_WEIGHT, SEMANTIC_WEIGHT, SHORT_TOKEN_LENGTH
from supportdesk.ranking.embedding import EmbeddingVector, embed, embed_entry, entry_text
from supportdesk.ranking.tokenizer import extract_phrases, tokenize

if TYPE_CHECKING:
    from supportdesk.kb.models import FaqEntry


# =============================================================================
# Primitive similarity functions
# =============================================================================


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between two vectors.

    Returns 0.0 when the lengths differ or either vector is all zeros.
    """
    if len(a) != len(b):
        return 0.0

    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y

    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (math.sqrt(norm_a) * math.sqrt(norm_b))


def jaccard_similarity(a: set[str], b: set[str]) -> float:
    """|a & b| / |a | b|, or 0.0 when both sets are empty."""
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def phrase_bonus(query: str, question: str, bonus: float) -> float:
    """Flat bonus when the query and question share a 2-3 word phrase.

    A query phrase matches a question phrase when either contains the other as
    a substring. Only the question is searched, never the answer or keywords.

    Args:
        query: Customer query.
        question: FAQ question.
        bonus: Value returned on a match.

    Returns:
        bonus on any match, else 0.0.
    """
    question_phrases = extract_phrases(question)
    for phrase in extract_phrases(query):
        if any(q_phrase in phrase or phrase in q_phrase for q_phrase in question_phrases):
            return bonus
    return 0.0


def keyword_overlap(query: str, document: str) -> float:
    """Fraction of query words found, by substring, among the document's words.

    Query words are whitespace-split, lower-cased and longer than two
    characters; document words are only whitespace-split and lower-cased.
    A query word counts when it contains, or is contained in, any document word.
    """
    query_words = [w for w in query.lower().split() if len(w) > SHORT_TOKEN_LENGTH]
    document_words = document.lower().split()

    matches = sum(
        1
        for word in query_words
        if any(doc_word in word or word in doc_word for doc_word in document_words)
    )
    return matches / max(len(query_words), 1)


# =============================================================================
# Presets
# =============================================================================


class ScoringMethod(str, Enum):
    """How a query/entry pair is scored."""

    HYBRID = "hybrid"
    LEXICAL = "lexical"


@dataclass(frozen=True)
class ScoringPreset:
    """A scoring method together with the thresholds that go with it.

    Attributes:
        name: Preset name used in logs.
        method: Scoring method.
        min_score: Scores below this are dropped from rankings.
        inclusive: Whether a score equal to min_score is kept.
        cap_best_match: Clamp the single best match to BEST_MATCH_SCORE_CAP.
            Ranked lists are never clamped.
        phrase_bonus: Bonus added by the lexical method for a shared phrase.
    """

    name: str
    method: ScoringMethod
    min_score: float
    inclusive: bool = True
    cap_best_match: bool = False
    phrase_bonus: float = 0.2

    def accepts(self, score: float) -> bool:
        if self.inclusive:
            return score >= self.min_score
        return score > self.min_score


SERVER_PRESET = ScoringPreset(
    name="server",
    method=ScoringMethod.LEXICAL,
    min_score=0.3,
    inclusive=True,
    cap_best_match=True,
)

CLIENT_PRESET = ScoringPreset(
    name="client",
    method=ScoringMethod.HYBRID,
    min_score=0.1,
    inclusive=False,
)

CLIENT_CONTEXT_PRESET = ScoringPreset(
    name="client_context",
    method=ScoringMethod.HYBRID,
    min_score=0.05,
    inclusive=False,
)


def presets_from_config(ranking: RankingConfig) -> dict[str, ScoringPreset]:
    """Build the named presets with thresholds taken from configuration."""
    return {
        "server": ScoringPreset(
            name="server",
            method=ScoringMethod.LEXICAL,
            min_score=ranking.server_min_score,
            inclusive=True,
            cap_best_match=True,
            phrase_bonus=ranking.phrase_bonus,
        ),
        "client": ScoringPreset(
            name="client",
            method=ScoringMethod.HYBRID,
            min_score=ranking.client_min_score,
            inclusive=False,
        ),
        "client_context": ScoringPreset(
            name="client_context",
            method=ScoringMethod.HYBRID,
            min_score=ranking.client_context_min_score,
            inclusive=False,
        ),
    }


# =============================================================================
# Scorer
# =============================================================================


class Scorer:
    """Scores a query against FAQ entries with either scoring method."""

    def __init__(self, embed_fn: Callable[[str], EmbeddingVector] = embed) -> None:
        """Initialize scorer.

        Args:
            embed_fn: Text embedding function used by the hybrid method.
        """
        self._embed_fn = embed_fn

    def _entry_vector(self, entry: FaqEntry) -> EmbeddingVector:
        if self._embed_fn is embed:
            return embed_entry(entry)
        return self._embed_fn(entry_text(entry))

    def hybrid_score(self, query: str, entry: FaqEntry) -> float:
        """Weighted cosine similarity plus keyword overlap."""
        semantic = cosine_similarity(self._embed_fn(query), self._entry_vector(entry))
        keywords = keyword_overlap(query, entry_text(entry))
        return semantic * SEMANTIC_WEIGHT + keywords * KEYWORD_WEIGHT

    def lexical_score(self, query: str, entry: FaqEntry, bonus: float = 0.2) -> float:
        """Jaccard over tokens plus the phrase bonus. Not clamped."""
        query_tokens = set(tokenize(query))
        entry_tokens = set(tokenize(entry.question)) | set(entry.keywords)
        return jaccard_similarity(query_tokens, entry_tokens) + phrase_bonus(
            query, entry.question, bonus
        )

    def score(self, query: str, entry: FaqEntry, preset: ScoringPreset) -> float:
        """Score one pair with the preset's method."""
        if preset.method is ScoringMethod.HYBRID:
            return self.hybrid_score(query, entry)
        return self.lexical_score(query, entry, preset.phrase_bonus)
