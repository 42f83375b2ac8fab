"""Ranking and similarity constants.

These values define the deterministic scoring functions used to match a
customer query against the FAQ knowledge base. Changing any of them changes
every score the system produces, so the thresholds in config.py would need to
be re-calibrated as well.
"""

# =============================================================================
# Tokenization
# =============================================================================
# Tokens of SHORT_TOKEN_LENGTH characters or fewer are dropped before scoring.
# STOP_WORDS are common functional words that carry no meaning for FAQ lookup.
# No stemming is applied, so "orders" and "order" are different tokens.

SHORT_TOKEN_LENGTH = 2

STOP_WORDS = frozenset(
    [
        "the", "is", "at", "which", "on", "and", "a", "to", "are", "as",
        "was", "were", "been", "be", "have", "has", "had", "do", "does", "did",
        "will", "would", "should", "could", "can", "may", "might", "must", "shall",
        "for", "of", "with", "by",
    ]
)  # fmt: skip

# =============================================================================
# Pseudo-Embedding
# =============================================================================
# Text is scattered into a fixed-width vector by character code. Each character
# adds the token weight at (code % EMBEDDING_DIM) and a damped copy at
# (code * EMBEDDING_HASH_MULTIPLIER % EMBEDDING_DIM). This is a stand-in for a
# real embedding model, not a semantic representation.

EMBEDDING_DIM = 512
EMBEDDING_HASH_MULTIPLIER = 31
EMBEDDING_SECONDARY_WEIGHT = 0.5

# =============================================================================
# Hybrid Scoring (client direct-chat path)
# =============================================================================
# combined = SEMANTIC_WEIGHT * cosine + KEYWORD_WEIGHT * keyword_overlap

SEMANTIC_WEIGHT = 0.7
KEYWORD_WEIGHT = 0.3

# =============================================================================
# Lexical Scoring (server knowledge-base path)
# =============================================================================
# Phrases are contiguous runs of PHRASE_MIN_WORDS to PHRASE_MAX_WORDS words.

PHRASE_MIN_WORDS = 2
PHRASE_MAX_WORDS = 3
BEST_MATCH_SCORE_CAP = 1.0
