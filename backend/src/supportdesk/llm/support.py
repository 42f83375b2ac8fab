"""LLM-backed answers for queries the knowledge base cannot answer."""

import logging
from collections.abc import Sequence

from supportdesk.constants.messages import LLM_EMPTY_MESSAGE
from supportdesk.llm.client import LLMClient
from supportdesk.llm.prompts import SUPPORT_SYSTEM_PROMPT, ContextEntry, build_support_prompt

logger = logging.getLogger(__name__)


class SupportResponder:
    """Generates a support answer from a query and knowledge-base context."""

    def __init__(self, llm: LLMClient) -> None:
        self._llm = llm

    async def generate(self, query: str, context_entries: Sequence[ContextEntry]) -> str:
        """Ask the LLM to answer a customer query.

        Args:
            query: Customer query.
            context_entries: Related FAQ pairs to ground the answer.

        Returns:
            The answer text, or a canned apology if the model returned nothing.

        Raises:
            LLMError: If the provider call fails.
        """
        prompt = build_support_prompt(query, context_entries)
        text = await self._llm.generate(prompt, system_prompt=SUPPORT_SYSTEM_PROMPT)
        text = text.strip()
        if not text:
            logger.warning("LLM returned an empty answer")
            return LLM_EMPTY_MESSAGE
        return text
