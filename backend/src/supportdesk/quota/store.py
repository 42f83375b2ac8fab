"""Per-session request quotas with a fixed reset window."""

import logging
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class CounterRecord:
    """A counter value and the time (epoch seconds) its window ends."""

    count: int
    reset_at: float


class CounterStore(ABC):
    """Key/value store for windowed counters.

    Compound read-modify-write sequences must run inside ``transaction()`` so
    they stay atomic when requests are served from several threads.
    """

    @abstractmethod
    def get(self, key: str) -> CounterRecord | None:
        """Return the record for key, or None."""

    @abstractmethod
    def set(self, key: str, record: CounterRecord) -> None:
        """Store a record, replacing any previous one."""

    @abstractmethod
    def increment(self, key: str, amount: int = 1) -> CounterRecord:
        """Add amount to an existing counter and return the updated record.

        Raises:
            KeyError: If the key has no record.
        """

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Context manager serializing access to the store."""


class InMemoryCounterStore(CounterStore):
    """Process-local counter store guarded by a re-entrant lock."""

    def __init__(self) -> None:
        self._records: dict[str, CounterRecord] = {}
        self._lock = threading.RLock()

    def get(self, key: str) -> CounterRecord | None:
        with self._lock:
            record = self._records.get(key)
            return CounterRecord(record.count, record.reset_at) if record else None

    def set(self, key: str, record: CounterRecord) -> None:
        with self._lock:
            self._records[key] = CounterRecord(record.count, record.reset_at)

    def increment(self, key: str, amount: int = 1) -> CounterRecord:
        with self._lock:
            record = self._records[key]
            record.count += amount
            return CounterRecord(record.count, record.reset_at)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            yield


@dataclass(frozen=True)
class QuotaStatus:
    """Outcome of a quota check."""

    allowed: bool
    remaining: int
    limit: int
    reset_at: float | None = None


class QuotaStore:
    """Fixed-window request quota keyed by session id or client address.

    The first request for a key opens a window of ``window_seconds``; once the
    window has passed the next request opens a fresh one. At most ``limit``
    requests are allowed per window.
    """

    def __init__(
        self,
        counters: CounterStore | None = None,
        limit: int = 25,
        window_seconds: float = 24 * 60 * 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize quota store.

        Args:
            counters: Backing counter store (in-memory if omitted).
            limit: Requests allowed per key per window.
            window_seconds: Window length.
            clock: Returns the current time in epoch seconds.
        """
        self._counters = counters or InMemoryCounterStore()
        self._limit = limit
        self._window = window_seconds
        self._clock = clock

    @property
    def limit(self) -> int:
        return self._limit

    def _counter_key(self, key: str) -> str:
        return f"quota:{key}"

    def peek(self, key: str) -> QuotaStatus:
        """Report the quota for key without consuming any of it."""
        now = self._clock()
        record = self._counters.get(self._counter_key(key))
        if record is None or now > record.reset_at:
            return QuotaStatus(allowed=True, remaining=self._limit, limit=self._limit)

        remaining = max(0, self._limit - record.count)
        return QuotaStatus(
            allowed=record.count < self._limit,
            remaining=remaining,
            limit=self._limit,
            reset_at=record.reset_at,
        )

    def check_and_consume(self, key: str) -> QuotaStatus:
        """Consume one request for key if the quota allows it.

        Returns:
            Status after consumption. When the quota is exhausted nothing is
            consumed and ``allowed`` is False with ``remaining`` 0.
        """
        counter_key = self._counter_key(key)

        with self._counters.transaction():
            now = self._clock()
            record = self._counters.get(counter_key)

            if record is None or now > record.reset_at:
                reset_at = now + self._window
                self._counters.set(counter_key, CounterRecord(count=1, reset_at=reset_at))
                return QuotaStatus(
                    allowed=True,
                    remaining=self._limit - 1,
                    limit=self._limit,
                    reset_at=reset_at,
                )

            if record.count >= self._limit:
                logger.info(f"Quota exhausted for {key}")
                return QuotaStatus(
                    allowed=False, remaining=0, limit=self._limit, reset_at=record.reset_at
                )

            record = self._counters.increment(counter_key)
            return QuotaStatus(
                allowed=True,
                remaining=self._limit - record.count,
                limit=self._limit,
                reset_at=record.reset_at,
            )
