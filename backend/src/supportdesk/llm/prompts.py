# backend/src/supportdesk/llm/prompts.py
"""Prompt templates for LLM fallback answers."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any


@dataclass
class PromptTemplate:
    """A template for generating prompts with variable substitution."""

    template: str

    def render(self, **kwargs: Any) -> str:
        """Render the template with the given variables.

        Raises:
            KeyError: If a required variable is missing.
        """
        return self.template.format(**kwargs)


@dataclass(frozen=True)
class ContextEntry:
    """A knowledge-base question/answer pair passed to the LLM as reference."""

    question: str
    answer: str


# =============================================================================
# System Prompt
# =============================================================================

SUPPORT_SYSTEM_PROMPT = """You are the final tier customer support agent for an e-commerce platform.
You are the escalation point when the FAQ knowledge base cannot fully answer a customer.

Guidelines:
1. Be professional, warm and solution-focused
2. Acknowledge the customer's specific concern
3. Keep responses focused and actionable (50-150 words)
4. Give clear next steps; if a human is needed, say exactly what the customer should do
5. Say "our platform" instead of naming a company
6. Rely on the knowledge-base policies below when they apply"""


# =============================================================================
# Customer Query Template
# =============================================================================

SUPPORT_QUERY_TEMPLATE = PromptTemplate(
    """KNOWLEDGE BASE CONTEXT (use as reference for accurate policies):
{context}

CUSTOMER QUERY: {query}

Provide a helpful response:"""
)

NO_CONTEXT_TEXT = "No specific context available"


def format_context(entries: Sequence[ContextEntry]) -> str:
    """Format context entries as Q/A blocks separated by blank lines."""
    if not entries:
        return NO_CONTEXT_TEXT
    return "\n\n".join(f"Q: {entry.question}\nA: {entry.answer}" for entry in entries)


def build_support_prompt(query: str, entries: Sequence[ContextEntry]) -> str:
    """Render the user prompt for a fallback answer."""
    return SUPPORT_QUERY_TEMPLATE.render(context=format_context(entries), query=query)
