# besttiming/views.py
"""
Monthly views over the composite score.

  Mode A (where -> when): 12 monthly scores for one destination + best month
  Mode B (when -> where): every destination ranked for one month
"""
from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

from .catalog.cities import all_destinations, get_destination
from .catalog.seasons import DEFAULT_CALENDAR, SeasonCalendar
from .errors import require_month
from .highlights import generate_highlights
from .models import Destination, MonthlyRankingEntry, MonthlyScore, ScoreWeights
from .scoring.composite import ScoreEngine


def best_month(scores: Sequence[MonthlyScore]) -> Optional[Tuple[int, float]]:
    """(month, total) of the highest total; earliest month wins ties."""
    best: Optional[MonthlyScore] = None
    for s in scores:
        if best is None or s.scores.total > best.scores.total:
            best = s
    if best is None:
        return None
    return best.month, best.scores.total


class MonthlyViews:
    def __init__(
        self,
        engine: ScoreEngine,
        *,
        destinations: Callable[[], List[Destination]] = all_destinations,
        lookup: Callable[[str], Optional[Destination]] = get_destination,
        calendar: SeasonCalendar = DEFAULT_CALENDAR,
    ) -> None:
        self.engine = engine
        self._destinations = destinations
        self._lookup = lookup
        self.calendar = calendar

    def scores_for_destination(
        self,
        destination_id: str,
        weights: Optional[ScoreWeights] = None,
    ) -> Optional[List[MonthlyScore]]:
        """12 monthly scores, or None for an unknown destination."""
        destination = self._lookup(destination_id)
        if destination is None:
            return None
        return [self.engine.score_destination(destination, month, weights) for month in range(1, 13)]

    def ranking_for_month(
        self,
        month: int,
        weights: Optional[ScoreWeights] = None,
    ) -> List[MonthlyRankingEntry]:
        require_month(month)
        scored = [
            (d, self.engine.score_destination(d, month, weights))
            for d in self._destinations()
        ]
        scored.sort(key=lambda pair: (-pair[1].scores.total, pair[0].id))

        return [
            MonthlyRankingEntry(
                rank=i,
                destination=d,
                scores=ms.scores,
                highlights=generate_highlights(d.id, month, ms.scores, self.calendar),
            )
            for i, (d, ms) in enumerate(scored, 1)
        ]
