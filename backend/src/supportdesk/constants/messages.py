"""Canned customer-facing messages.

Returned verbatim when the system cannot or should not produce an answer from
the knowledge base or the LLM.
"""

DAILY_LIMIT_MESSAGE = (
    "Daily free usage limit reached. Please try again tomorrow or contact "
    "customer care for immediate assistance."
)

LLM_FAILURE_MESSAGE = (
    "I'm currently experiencing technical difficulties. Please contact our "
    "customer care team for immediate assistance with your query."
)

LLM_EMPTY_MESSAGE = (
    "I apologize, but I'm having trouble generating a response right now. "
    "Please contact our customer care team for immediate assistance."
)

# Appended to direct knowledge-base answers on the client chat path.
GOODWILL_SUFFIX = "\n\nIs there anything else I can help you with today?"
