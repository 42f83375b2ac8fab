"""HTTP API tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from supportdesk.api.deps import (
    get_chat_log,
    get_knowledge_base,
    get_llm,
    get_quota_store,
    get_settings,
)
from supportdesk.chat.history import ChatLog
from supportdesk.config import Config
from supportdesk.constants import DAILY_LIMIT_MESSAGE, GOODWILL_SUFFIX
from supportdesk.llm.client import LLMClient, LLMConnectionError
from supportdesk.main import app


@pytest.fixture
def mock_llm():
    llm = MagicMock(spec=LLMClient)
    llm.generate = AsyncMock(return_value="An agent will follow up shortly.")
    return llm


@pytest.fixture
async def client(knowledge_base, quota_store, mock_llm):
    """Async test client wired to in-memory dependencies."""
    chat_log = ChatLog()
    app.dependency_overrides[get_settings] = lambda: Config()
    app.dependency_overrides[get_knowledge_base] = lambda: knowledge_base
    app.dependency_overrides[get_quota_store] = lambda: quota_store
    app.dependency_overrides[get_llm] = lambda: mock_llm
    app.dependency_overrides[get_chat_log] = lambda: chat_log

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


async def test_health_check_returns_healthy(client: AsyncClient):
    """Health endpoint returns healthy status."""
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


class TestChatQuery:
    """Tests for POST /api/chat/query."""

    async def test_direct_answer_envelope(self, client: AsyncClient):
        response = await client.post(
            "/api/chat/query",
            json={"message": "How do I track my order?", "sessionId": "s1"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["response"] == "Use Your Orders section."
        assert data["source"] == "kb"
        assert data["matchedEntryId"] == "faq_1"
        assert data["similarityScore"] == 1.0
        assert data["rateLimitRemaining"] == 24
        assert data["responseTime"] >= 0

    async def test_fallback_envelope(self, client: AsyncClient, mock_llm):
        response = await client.post(
            "/api/chat/query",
            json={"message": "asdkjasdkj nonsense xyz", "sessionId": "s1"},
        )

        data = response.json()
        assert data["source"] == "llm"
        assert data["response"] == "An agent will follow up shortly."
        assert data["similarityScore"] is None
        assert data["matchedEntryId"] is None
        mock_llm.generate.assert_awaited_once()

    async def test_llm_failure_still_returns_200(self, client: AsyncClient, mock_llm):
        mock_llm.generate.side_effect = LLMConnectionError("down")

        response = await client.post(
            "/api/chat/query",
            json={"message": "asdkjasdkj nonsense xyz", "sessionId": "s1"},
        )

        assert response.status_code == 200
        assert response.json()["source"] == "llm"

    async def test_limit_reached(self, client: AsyncClient, quota_store):
        for _ in range(25):
            quota_store.check_and_consume("s1")

        response = await client.post(
            "/api/chat/query",
            json={"message": "How do I track my order?", "sessionId": "s1"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["source"] == "system"
        assert data["response"] == DAILY_LIMIT_MESSAGE
        assert data["rateLimitRemaining"] == 0

    @pytest.mark.parametrize(
        "body",
        [
            {"message": "", "sessionId": "s1"},
            {"message": "   ", "sessionId": "s1"},
            {"message": "x" * 501, "sessionId": "s1"},
            {"sessionId": "s1"},
            {"message": "Where is my order?"},
        ],
    )
    async def test_malformed_request_is_rejected(self, client: AsyncClient, body, quota_store):
        response = await client.post("/api/chat/query", json=body)

        assert response.status_code == 422
        assert quota_store.peek("s1").remaining == 25

    async def test_history_records_exchanges(self, client: AsyncClient):
        await client.post(
            "/api/chat/query",
            json={"message": "How do I track my order?", "sessionId": "s1"},
        )

        response = await client.get("/api/chat/history/s1")

        assert response.status_code == 200
        history = response.json()
        assert len(history) == 1
        assert history[0]["sessionId"] == "s1"
        assert history[0]["message"] == "How do I track my order?"
        assert history[0]["source"] == "kb"


class TestChatDirect:
    """Tests for POST /api/chat/direct."""

    async def test_quota_keyed_by_forwarded_address(self, client: AsyncClient, quota_store):
        response = await client.post(
            "/api/chat/direct",
            json={"message": "asdkjasdkj nonsense xyz"},
            headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1"},
        )

        assert response.status_code == 200
        assert response.json()["source"] == "llm"
        assert quota_store.peek("203.0.113.7").remaining == 24

    async def test_quota_keyed_by_real_ip(self, client: AsyncClient, quota_store):
        await client.post(
            "/api/chat/direct",
            json={"message": "asdkjasdkj nonsense xyz"},
            headers={"X-Real-IP": "198.51.100.2"},
        )

        assert quota_store.peek("198.51.100.2").remaining == 24

    async def test_direct_answer_has_goodwill_suffix(self, client: AsyncClient, knowledge_base):
        """A word-for-word FAQ answer clears the client threshold."""
        entry = knowledge_base.get_entry_by_id("faq_1")
        message = f"{entry.question} {entry.answer}"

        response = await client.post("/api/chat/direct", json={"message": message})

        data = response.json()
        assert data["source"] == "kb"
        assert data["response"] == entry.answer + GOODWILL_SUFFIX

    async def test_blank_message_is_rejected(self, client: AsyncClient):
        response = await client.post("/api/chat/direct", json={"message": "  "})

        assert response.status_code == 422


class TestFaqEndpoints:
    """Tests for /api/faq endpoints."""

    async def test_select_faq(self, client: AsyncClient, quota_store):
        response = await client.post(
            "/api/faq/select",
            json={"questionId": "faq_2", "category": "Returns & Refunds", "sessionId": "s1"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["response"] == "Start a return from Your Orders within 10 days."
        assert data["source"] == "kb"
        assert data["responseTime"] == 0
        assert data["rateLimitRemaining"] == 25
        assert quota_store.peek("s1").remaining == 25

    async def test_select_unknown_faq_returns_404(self, client: AsyncClient):
        response = await client.post("/api/faq/select", json={"questionId": "faq_404"})

        assert response.status_code == 404
        assert response.json()["detail"] == "FAQ not found"

    async def test_categories(self, client: AsyncClient):
        response = await client.get("/api/faq/categories")

        assert response.status_code == 200
        categories = response.json()
        assert len(categories) == 10
        assert categories[0]["name"] == "Orders"
        assert categories[0]["icon"] == "fas fa-shopping-cart"
        assert categories[0]["questions"][0]["id"] == "faq_1"

    async def test_category_questions(self, client: AsyncClient):
        response = await client.get("/api/faq/category/Payments")

        assert response.status_code == 200
        assert [q["id"] for q in response.json()] == ["faq_3"]

    async def test_search(self, client: AsyncClient, quota_store):
        response = await client.get("/api/faq/search", params={"q": "How do I track my order?"})

        assert response.status_code == 200
        results = response.json()
        assert results[0]["id"] == "faq_1"
        assert results[0]["score"] == pytest.approx(1.2)
        assert len(results) <= 3

    async def test_search_blank_query_is_rejected(self, client: AsyncClient):
        response = await client.get("/api/faq/search", params={"q": "   "})

        assert response.status_code == 400


async def test_kb_stats(client: AsyncClient):
    await client.post("/api/faq/select", json={"questionId": "faq_1"})

    response = await client.get("/api/kb/stats")

    assert response.status_code == 200
    data = response.json()
    assert data["totalEntries"] == 5
    assert data["categoriesCount"] == 5
    assert data["totalUsage"] == 1
    assert data["avgUsage"] == 0
    assert data["topCategory"] == "Orders"


async def test_session_status(client: AsyncClient, quota_store):
    quota_store.check_and_consume("s1")

    response = await client.get("/api/session/s1/status")

    assert response.status_code == 200
    assert response.json() == {"allowed": True, "remaining": 24, "limit": 25}
