"""Shared pytest fixtures for all tests.

Module-level caches (embeddings, settings, dependency singletons) are reset
around every test so tests never see each other's state.
"""

from unittest.mock import AsyncMock

import pytest

from supportdesk.api.deps import _reset_instances
from supportdesk.chat.policy import DecisionPolicy
from supportdesk.config import load_settings
from supportdesk.kb.loader import parse_faq_records
from supportdesk.kb.models import FaqEntry
from supportdesk.kb.store import InMemoryKnowledgeBase
from supportdesk.llm.support import SupportResponder
from supportdesk.quota.store import QuotaStore
from supportdesk.ranking.embedding import clear_embedding_cache

SAMPLE_RECORDS = [
    {
        "question": "How do I track my order?",
        "answer": "Use Your Orders section.",
        "category": "Orders",
    },
    {
        "question": "How do I return an item?",
        "answer": "Start a return from Your Orders within 10 days.",
        "category": "Returns & Refunds",
    },
    {
        "question": "What payment methods are accepted?",
        "answer": "Cards, UPI, net banking and cash on delivery.",
        "category": "Payments",
        "keywords": ["payment", "card", "upi"],
    },
    {
        "question": "How do I cancel my order?",
        "answer": "Cancel from Your Orders before dispatch.",
        "category": "Cancellations",
    },
    {
        "question": "How do I reset my password?",
        "answer": "Use Forgot Password on the sign-in page.",
        "category": "Account & Security",
    },
]

LLM_ANSWER = "Here is what I found for you."


class FakeClock:
    """Controllable replacement for time.time()."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def reset_caches():
    """Clear process-wide caches before and after each test."""
    clear_embedding_cache()
    load_settings.cache_clear()
    _reset_instances()
    yield
    clear_embedding_cache()
    load_settings.cache_clear()
    _reset_instances()


@pytest.fixture
def sample_entries() -> list[FaqEntry]:
    """Fresh FAQ entries faq_1..faq_5."""
    return parse_faq_records(SAMPLE_RECORDS)


@pytest.fixture
def knowledge_base(sample_entries):
    return InMemoryKnowledgeBase(sample_entries)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def quota_store(fake_clock):
    """Quota store with the production limit and a controllable clock."""
    return QuotaStore(limit=25, window_seconds=24 * 60 * 60, clock=fake_clock)


@pytest.fixture
def mock_responder():
    """LLM responder that answers without calling a provider."""
    responder = AsyncMock(spec=SupportResponder)
    responder.generate.return_value = LLM_ANSWER
    return responder


@pytest.fixture
def policy(knowledge_base, quota_store, mock_responder):
    return DecisionPolicy(knowledge_base, quota_store, mock_responder)
