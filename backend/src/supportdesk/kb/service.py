"""Category listings and statistics over the knowledge base."""

from supportdesk.kb.models import FaqCategory, FaqEntry
from supportdesk.kb.schemas import FaqCategorySummary, FaqQuestion, KnowledgeBaseStats
from supportdesk.kb.store import EntryNotFoundError, KnowledgeBase

CATEGORY_PREVIEW_SIZE = 5


def _to_question(entry: FaqEntry) -> FaqQuestion:
    return FaqQuestion(id=entry.id, question=entry.question, answer=entry.answer)


class KnowledgeBaseService:
    """Browse-oriented views of the FAQ knowledge base."""

    def __init__(self, kb: KnowledgeBase) -> None:
        self._kb = kb

    def get_all_categories(self) -> list[FaqCategorySummary]:
        """List every category with its count and first few questions.

        Categories are returned in their fixed display order, including empty
        ones.
        """
        summaries = []
        for category in FaqCategory:
            entries = self._kb.get_entries_by_category(category)
            summaries.append(
                FaqCategorySummary(
                    name=category.value,
                    icon=category.icon,
                    count=len(entries),
                    questions=[_to_question(e) for e in entries[:CATEGORY_PREVIEW_SIZE]],
                )
            )
        return summaries

    def get_category_questions(self, category_name: str) -> list[FaqQuestion]:
        """All questions of one category; empty for unknown categories."""
        return [_to_question(e) for e in self._kb.get_entries_by_category(category_name)]

    def get_faq_by_id(self, entry_id: str) -> FaqEntry:
        """Look up an entry by id.

        Raises:
            EntryNotFoundError: If no entry has this id.
        """
        entry = self._kb.get_entry_by_id(entry_id)
        if entry is None:
            raise EntryNotFoundError(entry_id)
        return entry

    def get_stats(self) -> KnowledgeBaseStats:
        """Compute entry, category and usage statistics."""
        entries = self._kb.get_all_entries()
        total_entries = len(entries)
        total_usage = sum(entry.usage_count for entry in entries)

        counts: dict[str, int] = {}
        for entry in entries:
            counts[entry.category.value] = counts.get(entry.category.value, 0) + 1

        # Ties go to the category seen first
        top_category = ""
        top_count = 0
        for name, count in counts.items():
            if count > top_count:
                top_category, top_count = name, count

        return KnowledgeBaseStats(
            total_entries=total_entries,
            categories_count=len(counts),
            total_usage=total_usage,
            avg_usage=round(total_usage / total_entries) if total_entries else 0,
            top_category=top_category,
        )
