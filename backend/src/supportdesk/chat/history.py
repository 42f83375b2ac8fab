"""In-memory log of chat exchanges."""

import threading
from collections import deque
from datetime import datetime, timezone

from supportdesk.chat.schemas import ChatMessage, ChatResponse

MAX_MESSAGES_PER_SESSION = 200


class ChatLog:
    """Keeps the most recent exchanges of each session.

    Older messages are dropped once a session exceeds ``max_per_session``.
    """

    def __init__(self, max_per_session: int = MAX_MESSAGES_PER_SESSION) -> None:
        self._max = max_per_session
        self._sessions: dict[str, deque[ChatMessage]] = {}
        self._lock = threading.Lock()

    def record(self, session_id: str, message: str, response: ChatResponse) -> ChatMessage:
        """Append an exchange to a session's log."""
        entry = ChatMessage(
            session_id=session_id,
            message=message,
            response=response.response,
            source=response.source,
            response_time=response.response_time,
            timestamp=datetime.now(timezone.utc),
        )
        with self._lock:
            messages = self._sessions.setdefault(session_id, deque(maxlen=self._max))
            messages.append(entry)
        return entry

    def get_session(self, session_id: str) -> list[ChatMessage]:
        """Messages of a session, oldest first."""
        with self._lock:
            return list(self._sessions.get(session_id, ()))
