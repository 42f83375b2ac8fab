"""Chat service: answers queries and serves FAQ selections."""

import logging

from supportdesk.chat.history import ChatLog
from supportdesk.chat.policy import (
    CLIENT_PROFILE,
    SERVER_PROFILE,
    DecisionPolicy,
    PolicyProfile,
)
from supportdesk.chat.schemas import ChatMessage, ChatResponse, ResponseSource, SessionStatus
from supportdesk.kb.schemas import FaqMatch
from supportdesk.kb.store import EntryNotFoundError, KnowledgeBase
from supportdesk.quota.store import QuotaStore

logger = logging.getLogger(__name__)


class ChatService:
    """Entry point for chat queries from the HTTP layer."""

    def __init__(
        self,
        policy: DecisionPolicy,
        kb: KnowledgeBase,
        quota: QuotaStore,
        chat_log: ChatLog | None = None,
        server_profile: PolicyProfile = SERVER_PROFILE,
        client_profile: PolicyProfile = CLIENT_PROFILE,
    ) -> None:
        self._policy = policy
        self._kb = kb
        self._quota = quota
        self._chat_log = chat_log or ChatLog()
        self._server_profile = server_profile
        self._client_profile = client_profile

    async def ask(self, message: str, session_id: str) -> ChatResponse:
        """Answer a query on the server path, with quota tracked per session.

        Raises:
            MalformedQueryError: If the message is empty, blank or too long.
        """
        decision = await self._policy.decide(message, session_id, self._server_profile)
        self._chat_log.record(session_id, message, decision.response)
        return decision.response

    async def ask_direct(self, message: str, client_key: str) -> ChatResponse:
        """Answer a query on the direct chat path, with quota tracked per client.

        Raises:
            MalformedQueryError: If the message is empty, blank or too long.
        """
        decision = await self._policy.decide(message, client_key, self._client_profile)
        self._chat_log.record(client_key, message, decision.response)
        return decision.response

    def search(self, query: str) -> list[FaqMatch]:
        """Best knowledge-base matches for a query on the server path.

        Searching never consumes quota or records usage.

        Raises:
            MalformedQueryError: If the query is empty, blank or too long.
        """
        self._policy.validate_query(query)
        return [
            FaqMatch(
                id=match.entry.id,
                question=match.entry.question,
                answer=match.entry.answer,
                category=match.entry.category.value,
                score=match.score,
            )
            for match in self._policy.search(query, self._server_profile)
        ]

    def select_faq(self, question_id: str, session_id: str | None = None) -> ChatResponse:
        """Serve an FAQ entry chosen by the customer.

        Selections skip scoring and never consume quota.

        Args:
            question_id: Id of the selected entry.
            session_id: Optional session whose remaining quota is reported.

        Returns:
            Envelope with the entry's answer, source kb and zero response time.

        Raises:
            EntryNotFoundError: If no entry has this id.
        """
        entry = self._kb.get_entry_by_id(question_id)
        if entry is None:
            raise EntryNotFoundError(question_id)

        self._kb.increment_usage(entry.id)
        remaining = self._quota.peek(session_id).remaining if session_id else self._quota.limit
        logger.info(f"Served FAQ selection {entry.id}")

        return ChatResponse(
            response=entry.answer,
            source=ResponseSource.KB,
            response_time=0,
            matched_entry_id=entry.id,
            rate_limit_remaining=remaining,
        )

    def session_status(self, session_id: str) -> SessionStatus:
        """Quota status of a session, without consuming anything."""
        status = self._quota.peek(session_id)
        return SessionStatus(allowed=status.allowed, remaining=status.remaining, limit=status.limit)

    def history(self, session_id: str) -> list[ChatMessage]:
        """Logged exchanges of a session, oldest first."""
        return self._chat_log.get_session(session_id)
