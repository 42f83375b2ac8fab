"""Chat answering: decision policy, service and schemas."""

from supportdesk.chat.policy import (
    CLIENT_PROFILE,
    SERVER_PROFILE,
    Decision,
    DecisionPolicy,
    DecisionState,
    MalformedQueryError,
    PolicyProfile,
)
from supportdesk.chat.schemas import ChatResponse, ResponseSource
from supportdesk.chat.service import ChatService

__all__ = [
    "CLIENT_PROFILE",
    "ChatResponse",
    "ChatService",
    "Decision",
    "DecisionPolicy",
    "DecisionState",
    "MalformedQueryError",
    "PolicyProfile",
    "ResponseSource",
    "SERVER_PROFILE",
]
