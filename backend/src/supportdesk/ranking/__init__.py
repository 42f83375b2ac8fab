"""Query/FAQ similarity scoring and ranking."""

from supportdesk.ranking.embedding import embed
from supportdesk.ranking.ranker import MatchResult, Ranker
from supportdesk.ranking.scoring import (
    CLIENT_CONTEXT_PRESET,
    CLIENT_PRESET,
    SERVER_PRESET,
    Scorer,
    ScoringMethod,
    ScoringPreset,
    cosine_similarity,
    jaccard_similarity,
)
from supportdesk.ranking.tokenizer import tokenize

__all__ = [
    "CLIENT_CONTEXT_PRESET",
    "CLIENT_PRESET",
    "MatchResult",
    "Ranker",
    "SERVER_PRESET",
    "Scorer",
    "ScoringMethod",
    "ScoringPreset",
    "cosine_similarity",
    "embed",
    "jaccard_similarity",
    "tokenize",
]
