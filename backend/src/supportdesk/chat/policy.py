"""Decide how a customer query gets answered.

Every query moves through SEARCHING -> SCORED and ends in exactly one of:

- LIMIT_REACHED: the caller's quota is used up; a canned message is returned
  and nothing else happens.
- DIRECT_ANSWER: the best FAQ match clears the profile's direct threshold; its
  answer is returned and its usage counter incremented.
- FALLBACK_CALL: the query and a few related FAQ entries go to the LLM. LLM
  failures degrade to a canned apology instead of an error.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum

from supportdesk.chat.schemas import ChatResponse, ResponseSource
from supportdesk.config import RankingConfig
from supportdesk.constants.messages import (
    DAILY_LIMIT_MESSAGE,
    GOODWILL_SUFFIX,
    LLM_FAILURE_MESSAGE,
)
from supportdesk.kb.models import FaqEntry
from supportdesk.kb.store import KnowledgeBase
from supportdesk.llm.client import LLMError
from supportdesk.llm.prompts import ContextEntry
from supportdesk.llm.support import SupportResponder
from supportdesk.quota.store import QuotaStatus, QuotaStore
from supportdesk.ranking.ranker import MatchResult, Ranker
from supportdesk.ranking.scoring import (
    CLIENT_CONTEXT_PRESET,
    CLIENT_PRESET,
    SERVER_PRESET,
    ScoringPreset,
    presets_from_config,
)

logger = logging.getLogger(__name__)


class MalformedQueryError(ValueError):
    """Raised for empty, blank or oversized queries before any scoring."""

    pass


class DecisionState(str, Enum):
    """States of the answer decision."""

    SEARCHING = "searching"
    SCORED = "scored"
    DIRECT_ANSWER = "direct_answer"
    FALLBACK_CALL = "fallback_call"
    LIMIT_REACHED = "limit_reached"


@dataclass(frozen=True)
class PolicyProfile:
    """Thresholds and behavior of one chat path.

    Attributes:
        name: Profile name used in logs.
        preset: Scoring preset used to find the best match.
        context_preset: Scoring preset used to pick LLM context entries.
        direct_threshold: Best-match score needed to answer directly.
        context_floor: Best-match score above which ranked matches are used as
            LLM context; otherwise the first knowledge-base entries are used.
        search_limit: Number of ranked matches considered for context.
        context_limit: Number of context entries passed to the LLM.
        count_every_query: Consume quota for every query. When False only LLM
            calls consume quota.
        answer_suffix: Text appended to direct answers.
    """

    name: str
    preset: ScoringPreset
    context_preset: ScoringPreset
    direct_threshold: float
    context_floor: float = 0.3
    search_limit: int = 3
    context_limit: int = 3
    count_every_query: bool = True
    answer_suffix: str = ""


SERVER_PROFILE = PolicyProfile(
    name="server",
    preset=SERVER_PRESET,
    context_preset=SERVER_PRESET,
    direct_threshold=0.6,
    count_every_query=True,
)

CLIENT_PROFILE = PolicyProfile(
    name="client",
    preset=CLIENT_PRESET,
    context_preset=CLIENT_CONTEXT_PRESET,
    direct_threshold=0.88,
    search_limit=5,
    count_every_query=False,
    answer_suffix=GOODWILL_SUFFIX,
)


def profiles_from_config(ranking: RankingConfig) -> dict[str, PolicyProfile]:
    """Build the server and client profiles from configuration."""
    presets = presets_from_config(ranking)
    return {
        "server": PolicyProfile(
            name="server",
            preset=presets["server"],
            context_preset=presets["server"],
            direct_threshold=ranking.server_direct_threshold,
            context_floor=ranking.context_floor,
            search_limit=ranking.top_matches,
            context_limit=ranking.context_limit,
            count_every_query=True,
        ),
        "client": PolicyProfile(
            name="client",
            preset=presets["client"],
            context_preset=presets["client_context"],
            direct_threshold=ranking.client_direct_threshold,
            context_floor=ranking.context_floor,
            search_limit=ranking.similar_matches,
            context_limit=ranking.context_limit,
            count_every_query=False,
            answer_suffix=GOODWILL_SUFFIX,
        ),
    }


@dataclass
class Decision:
    """Final state of a query together with its response envelope."""

    state: DecisionState
    response: ChatResponse
    best_match: MatchResult | None = None
    context: list[FaqEntry] = field(default_factory=list)


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class DecisionPolicy:
    """Chooses between a knowledge-base answer, the LLM and a quota refusal."""

    def __init__(
        self,
        kb: KnowledgeBase,
        quota: QuotaStore,
        responder: SupportResponder,
        ranker: Ranker | None = None,
        max_query_length: int = 500,
    ) -> None:
        """Initialize decision policy.

        Args:
            kb: Knowledge base to search and record usage in.
            quota: Per-caller request quota.
            responder: LLM fallback.
            ranker: Ranker for FAQ matching (default scorer if omitted).
            max_query_length: Longest accepted query, in characters.
        """
        self._kb = kb
        self._quota = quota
        self._responder = responder
        self._ranker = ranker or Ranker()
        self._max_query_length = max_query_length

    def validate_query(self, query: str) -> str:
        """Reject empty, blank or oversized queries.

        Raises:
            MalformedQueryError: If the query cannot be scored.
        """
        if not query or not query.strip():
            raise MalformedQueryError("Query must not be empty")
        if len(query) > self._max_query_length:
            raise MalformedQueryError(
                f"Query is {len(query)} characters, maximum is {self._max_query_length}"
            )
        return query

    def _limit_reached(self, start: float) -> Decision:
        return Decision(
            state=DecisionState.LIMIT_REACHED,
            response=ChatResponse(
                response=DAILY_LIMIT_MESSAGE,
                source=ResponseSource.SYSTEM,
                response_time=_elapsed_ms(start),
                rate_limit_remaining=0,
            ),
        )

    def search(self, query: str, profile: PolicyProfile) -> list[MatchResult]:
        """Top matches for a query under the profile's context preset."""
        return self._ranker.rank(
            query,
            self._kb.get_all_entries(),
            profile.context_preset,
            limit=profile.search_limit,
        )

    def _select_context(
        self,
        query: str,
        entries: list[FaqEntry],
        best: MatchResult | None,
        profile: PolicyProfile,
    ) -> list[FaqEntry]:
        if best is not None and best.score > profile.context_floor:
            ranked = self._ranker.rank(
                query, entries, profile.context_preset, limit=profile.search_limit
            )
            return [match.entry for match in ranked[: profile.context_limit]]
        return entries[: profile.context_limit]

    async def decide(self, query: str, session_key: str, profile: PolicyProfile) -> Decision:
        """Answer one query.

        Args:
            query: Customer query.
            session_key: Key the quota is tracked under (session id or address).
            profile: Thresholds and behavior of the calling chat path.

        Returns:
            The final decision with exactly one response envelope.

        Raises:
            MalformedQueryError: If the query is empty, blank or too long.
        """
        start = time.perf_counter()
        self.validate_query(query)

        status: QuotaStatus
        if profile.count_every_query:
            status = self._quota.check_and_consume(session_key)
        else:
            status = self._quota.peek(session_key)
        if not status.allowed:
            logger.info(f"[{profile.name}] {DecisionState.LIMIT_REACHED.value} for {session_key}")
            return self._limit_reached(start)

        entries = self._kb.get_all_entries()
        best = self._ranker.best_match(query, entries, profile.preset)
        state = DecisionState.SCORED
        best_score = best.score if best is not None else None
        logger.debug(f"[{profile.name}] {state.value}: best score {best_score}")

        if best is not None and best.score >= profile.direct_threshold:
            self._kb.increment_usage(best.entry.id)
            logger.info(
                f"[{profile.name}] {DecisionState.DIRECT_ANSWER.value}: "
                f"{best.entry.id} (score {best.score:.3f})"
            )
            return Decision(
                state=DecisionState.DIRECT_ANSWER,
                response=ChatResponse(
                    response=best.entry.answer + profile.answer_suffix,
                    source=ResponseSource.KB,
                    response_time=_elapsed_ms(start),
                    similarity_score=best.score,
                    matched_entry_id=best.entry.id,
                    rate_limit_remaining=status.remaining,
                ),
                best_match=best,
            )

        if not profile.count_every_query:
            status = self._quota.check_and_consume(session_key)
            if not status.allowed:
                return self._limit_reached(start)

        context = self._select_context(query, entries, best, profile)
        context_entries = [ContextEntry(question=e.question, answer=e.answer) for e in context]

        try:
            answer = await self._responder.generate(query, context_entries)
        except LLMError as e:
            logger.warning(f"[{profile.name}] LLM fallback failed: {e}")
            answer = LLM_FAILURE_MESSAGE

        logger.info(
            f"[{profile.name}] {DecisionState.FALLBACK_CALL.value} with "
            f"{len(context_entries)} context entries"
        )
        return Decision(
            state=DecisionState.FALLBACK_CALL,
            response=ChatResponse(
                response=answer,
                source=ResponseSource.LLM,
                response_time=_elapsed_ms(start),
                similarity_score=best_score,
                rate_limit_remaining=status.remaining,
            ),
            best_match=best,
            context=context,
        )
