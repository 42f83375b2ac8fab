"""Pseudo-embedding tests."""

import math

from hypothesis import given, settings
from hypothesis import strategies as st

from supportdesk.constants import EMBEDDING_DIM
from supportdesk.kb.models import FaqCategory, FaqEntry
from supportdesk.ranking.embedding import (
    clear_embedding_cache,
    embed,
    embed_entry,
    embedding_cache_size,
    entry_text,
)


def _norm(vector) -> float:
    return math.sqrt(sum(value * value for value in vector))


@given(st.text(max_size=200))
@settings(max_examples=100, deadline=None)
def test_embedding_has_fixed_width_and_unit_or_zero_norm(text):
    """Every embedding is 512 wide with norm 1 or all zeros."""
    vector = embed(text)

    assert len(vector) == EMBEDDING_DIM
    norm = _norm(vector)
    assert norm == 0 or math.isclose(norm, 1.0, rel_tol=1e-9)


@given(st.text(max_size=200))
@settings(max_examples=100, deadline=None)
def test_embedding_is_deterministic(text):
    """Embedding the same text twice gives the same vector, cached or not."""
    first = embed(text)
    clear_embedding_cache()

    assert embed(text) == first


def test_text_without_content_words_embeds_to_zero():
    """Words of two characters or less contribute nothing."""
    assert all(value == 0 for value in embed("a is to ?"))
    assert all(value == 0 for value in embed(""))


def test_character_scatter_positions():
    """A single character word lands on ord % 512 and (ord * 31) % 512."""
    vector = embed("aaa")
    primary = ord("a") % EMBEDDING_DIM
    secondary = (ord("a") * 31) % EMBEDDING_DIM

    nonzero = {i for i, value in enumerate(vector) if value != 0}
    assert nonzero == {primary, secondary}
    # Primary weight is twice the secondary one before normalization
    assert math.isclose(vector[primary], 2 * vector[secondary])


def test_embedding_ignores_case_and_punctuation():
    """Case and punctuation do not change the vector."""
    assert embed("Track my ORDER!") == embed("track my order")


def test_embedding_is_cached():
    """Repeated calls reuse the memoized vector."""
    clear_embedding_cache()
    embed("refund status")
    embed("refund status")

    assert embedding_cache_size() == 1


def test_embed_entry_stores_vector_on_entry():
    """The entry keeps its embedding after first use."""
    entry = FaqEntry(
        id="faq_1",
        question="How do I track my order?",
        answer="Use Your Orders section.",
        category=FaqCategory.ORDERS,
    )
    assert entry.embedding is None

    vector = embed_entry(entry)

    assert entry.embedding == vector
    assert vector == embed(entry_text(entry))
    assert entry_text(entry) == "How do I track my order? Use Your Orders section."
