"""Text normalization and tokenization for FAQ matching."""

import re

from supportdesk.constants.ranking import (
    PHRASE_MAX_WORDS,
    PHRASE_MIN_WORDS,
    SHORT_TOKEN_LENGTH,
    STOP_WORDS,
)

_NON_WORD = re.compile(r"[^\w\s]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")


def normalize(text: str) -> str:
    """Lower-case text, turn punctuation into spaces and collapse whitespace."""
    cleaned = _NON_WORD.sub(" ", text.lower())
    return _WHITESPACE.sub(" ", cleaned).strip()


def content_words(text: str) -> list[str]:
    """Split normalized text and drop tokens that are too short.

    Stop-words are kept; the embedder uses this directly.
    """
    return [word for word in normalize(text).split() if len(word) > SHORT_TOKEN_LENGTH]


def tokenize(text: str) -> list[str]:
    """Split text into content tokens.

    Tokens keep their input order and duplicates are not removed.

    Args:
        text: Free text (query, FAQ question, ...).

    Returns:
        Lower-cased tokens longer than two characters that are not stop-words.
    """
    return [word for word in content_words(text) if word not in STOP_WORDS]


def extract_phrases(text: str) -> list[str]:
    """Extract every contiguous 2- and 3-word phrase from text.

    The text is lower-cased and split on whitespace only, so punctuation stays
    attached to its word ("order?" and "order" are different words here).

    Args:
        text: Text to extract phrases from.

    Returns:
        Phrases in order of their starting word, shorter phrase first.
    """
    words = text.lower().split()
    phrases: list[str] = []

    for start in range(len(words)):
        for size in range(PHRASE_MIN_WORDS, PHRASE_MAX_WORDS + 1):
            if start + size <= len(words):
                phrases.append(" ".join(words[start : start + size]))

    return phrases
