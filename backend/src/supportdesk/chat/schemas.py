"""Chat request and response schemas."""

from datetime import datetime
from enum import Enum

from pydantic import Field, field_validator

from supportdesk.kb.schemas import CamelModel

MAX_QUERY_LENGTH = 500


class ResponseSource(str, Enum):
    """Where an answer came from."""

    KB = "kb"
    LLM = "llm"
    SYSTEM = "system"


class ChatQuery(CamelModel):
    """Request for the server chat endpoint."""

    message: str = Field(..., min_length=1, max_length=MAX_QUERY_LENGTH)
    session_id: str = Field(..., min_length=1, description="Session used for quota tracking")

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("message must not be blank")
        return value


class DirectChatQuery(CamelModel):
    """Request for the direct chat endpoint; quota is tracked by client address."""

    message: str = Field(..., min_length=1, max_length=MAX_QUERY_LENGTH)

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("message must not be blank")
        return value


class FaqSelectRequest(CamelModel):
    """Request to serve one FAQ entry directly, bypassing scoring."""

    question_id: str = Field(..., min_length=1)
    category: str | None = Field(
        None,
        description="Category the question was listed under; informational, not used for lookup",
    )
    session_id: str | None = Field(
        None,
        description="Optional session whose remaining quota is reported",
    )


class ChatResponse(CamelModel):
    """Response envelope returned for every chat query."""

    response: str = Field(..., description="Answer text")
    source: ResponseSource = Field(..., description="kb, llm or system")
    response_time: int = Field(..., ge=0, description="Processing time in milliseconds")
    similarity_score: float | None = Field(None, description="Best match score, if any")
    matched_entry_id: str | None = Field(None, description="FAQ entry that was served")
    rate_limit_remaining: int = Field(..., ge=0, description="Requests left in the window")


class SessionStatus(CamelModel):
    """Quota status of a session."""

    allowed: bool
    remaining: int = Field(..., ge=0)
    limit: int = Field(..., ge=1)


class ChatMessage(CamelModel):
    """A logged query and the answer it received."""

    session_id: str
    message: str
    response: str
    source: ResponseSource
    response_time: int = Field(..., ge=0)
    timestamp: datetime
