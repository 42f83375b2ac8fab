"""Knowledge-base store interface and in-memory implementation."""

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable

from supportdesk.kb.models import FaqCategory, FaqEntry

logger = logging.getLogger(__name__)


class EntryNotFoundError(KeyError):
    """Raised when an FAQ entry id is not in the knowledge base."""

    pass


class KnowledgeBase(ABC):
    """Read-mostly access to FAQ entries plus usage bookkeeping."""

    @abstractmethod
    def get_all_entries(self) -> list[FaqEntry]:
        """Return every entry in load order."""

    @abstractmethod
    def get_entry_by_id(self, entry_id: str) -> FaqEntry | None:
        """Return the entry with the given id, or None."""

    @abstractmethod
    def get_entries_by_category(self, category: FaqCategory | str) -> list[FaqEntry]:
        """Return every entry of a category in load order."""

    @abstractmethod
    def increment_usage(self, entry_id: str) -> int:
        """Record that an entry was served.

        Returns:
            The entry's new usage count.

        Raises:
            EntryNotFoundError: If no entry has this id.
        """


class InMemoryKnowledgeBase(KnowledgeBase):
    """Static FAQ collection held in memory for the process lifetime.

    Entries are fixed at construction. Usage counters are the only mutable
    state and are updated under a lock so concurrent requests never lose an
    increment.
    """

    def __init__(self, entries: Iterable[FaqEntry]) -> None:
        self._entries: list[FaqEntry] = list(entries)
        self._by_id: dict[str, FaqEntry] = {}
        for entry in self._entries:
            if entry.id in self._by_id:
                raise ValueError(f"Duplicate FAQ entry id: {entry.id}")
            self._by_id[entry.id] = entry
        self._usage_lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def get_all_entries(self) -> list[FaqEntry]:
        return list(self._entries)

    def get_entry_by_id(self, entry_id: str) -> FaqEntry | None:
        return self._by_id.get(entry_id)

    def get_entries_by_category(self, category: FaqCategory | str) -> list[FaqEntry]:
        name = category.value if isinstance(category, FaqCategory) else category
        return [entry for entry in self._entries if entry.category.value == name]

    def increment_usage(self, entry_id: str) -> int:
        entry = self._by_id.get(entry_id)
        if entry is None:
            raise EntryNotFoundError(entry_id)
        with self._usage_lock:
            entry.usage_count += 1
            count = entry.usage_count
        logger.debug(f"Usage of {entry_id} is now {count}")
        return count
