"""Rank FAQ entries against a query."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from supportdesk.constants.ranking import BEST_MATCH_SCORE_CAP
from supportdesk.ranking.scoring import Scorer, ScoringPreset

if TYPE_CHECKING:
    from supportdesk.kb.models import FaqEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """An FAQ entry paired with its similarity score for one query."""

    entry: FaqEntry
    score: float


class Ranker:
    """Scores every entry, drops weak matches and keeps the best ones."""

    def __init__(self, scorer: Scorer | None = None) -> None:
        self._scorer = scorer or Scorer()

    @property
    def scorer(self) -> Scorer:
        return self._scorer

    def rank(
        self,
        query: str,
        entries: Iterable[FaqEntry],
        preset: ScoringPreset,
        limit: int,
    ) -> list[MatchResult]:
        """Rank entries by similarity to the query.

        Args:
            query: Customer query.
            entries: Entries to score, in knowledge-base order.
            preset: Scoring method and threshold.
            limit: Maximum number of results.

        Returns:
            Matches passing the preset threshold, highest score first. Equal
            scores keep knowledge-base order. Scores are not clamped.
        """
        start = time.perf_counter()

        matches = []
        for entry in entries:
            score = self._scorer.score(query, entry, preset)
            if preset.accepts(score):
                matches.append(MatchResult(entry=entry, score=score))

        # sorted() is stable, so ties stay in enumeration order
        ranked = sorted(matches, key=lambda match: -match.score)[: max(limit, 0)]

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug(
            f"Ranked query with preset {preset.name} in {elapsed_ms:.1f}ms: "
            f"{len(matches)} above threshold, returning {len(ranked)}"
        )
        return ranked

    def best_match(
        self,
        query: str,
        entries: Iterable[FaqEntry],
        preset: ScoringPreset,
    ) -> MatchResult | None:
        """Return the single highest-scoring match, or None.

        The score is clamped to 1.0 when the preset asks for it.
        """
        ranked = self.rank(query, entries, preset, limit=1)
        if not ranked:
            return None

        best = ranked[0]
        if preset.cap_best_match and best.score > BEST_MATCH_SCORE_CAP:
            return replace(best, score=BEST_MATCH_SCORE_CAP)
        return best
