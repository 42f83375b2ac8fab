"""FAQ knowledge base: models, storage and loading."""

from supportdesk.kb.loader import DatasetError, load_faq_entries, parse_faq_records
from supportdesk.kb.models import FaqCategory, FaqEntry
from supportdesk.kb.service import KnowledgeBaseService
from supportdesk.kb.store import EntryNotFoundError, InMemoryKnowledgeBase, KnowledgeBase

__all__ = [
    "DatasetError",
    "EntryNotFoundError",
    "FaqCategory",
    "FaqEntry",
    "InMemoryKnowledgeBase",
    "KnowledgeBase",
    "KnowledgeBaseService",
    "load_faq_entries",
    "parse_faq_records",
]
