# backend/src/supportdesk/llm/__init__.py
"""LLM client abstraction."""

from supportdesk.llm.client import (
    LLMAuthenticationError,
    LLMClient,
    LLMConnectionError,
    LLMError,
    LLMRateLimitError,
)
from supportdesk.llm.prompts import ContextEntry
from supportdesk.llm.support import SupportResponder

__all__ = [
    "ContextEntry",
    "LLMAuthenticationError",
    "LLMClient",
    "LLMConnectionError",
    "LLMError",
    "LLMRateLimitError",
    "SupportResponder",
]
