"""Request quota bookkeeping."""

from supportdesk.quota.store import (
    CounterRecord,
    CounterStore,
    InMemoryCounterStore,
    QuotaStatus,
    QuotaStore,
)

__all__ = [
    "CounterRecord",
    "CounterStore",
    "InMemoryCounterStore",
    "QuotaStatus",
    "QuotaStore",
]
