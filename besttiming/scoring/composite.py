# besttiming/scoring/composite.py
"""
Composite monthly score.

  total = W1 * weather + W2 * cost + W3 * crowd + W4 * buzz

rounded half-up to one decimal. Weights are used exactly as supplied:
they are never re-normalized, so callers own the sum (DEFAULT_WEIGHTS
sums to 1.0). Sub-scores arrive already clamped to [1.0, 10.0].

The engine has no side effects; it reads signals and returns a new
MonthlyScore on every call.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from ..errors import InvalidArgumentError, require_month
from ..models import DEFAULT_WEIGHTS, Destination, MonthlyScore, ScoreBreakdown, ScoreWeights
from ..signals import SignalSource
from .buzz import buzz_score
from .cost import cost_score
from .crowd import crowd_score
from .rounding import round1
from .weather import weather_score

GRADE_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (8.0, "best"),
    (6.0, "good"),
    (4.0, "average"),
)


@dataclass(frozen=True)
class ScoreContext:
    """Per-destination facts the sub-calculators need."""
    latitude: float
    currency: str
    country_code: str

    @classmethod
    def from_destination(cls, destination: Destination) -> "ScoreContext":
        return cls(
            latitude=destination.latitude,
            currency=destination.currency,
            country_code=destination.country_code,
        )


def validate_weights(weights: ScoreWeights) -> ScoreWeights:
    for name in ("weather", "cost", "crowd", "buzz"):
        if getattr(weights, name) < 0:
            raise InvalidArgumentError(f"Weight {name!r} must be non-negative, got {getattr(weights, name)}")
    return weights


def calculate_total_score(
    weather: float,
    cost: float,
    crowd: float,
    buzz: float,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> float:
    validate_weights(weights)
    total = (
        weights.weather * weather
        + weights.cost * cost
        + weights.crowd * crowd
        + weights.buzz * buzz
    )
    return round1(total)


def score_grade(total: float) -> str:
    """best >= 8.0, good >= 6.0, average >= 4.0, else poor."""
    for threshold, grade in GRADE_THRESHOLDS:
        if total >= threshold:
            return grade
    return "poor"


class ScoreEngine:
    def __init__(
        self,
        signals: SignalSource,
        *,
        home_country_code: str = "KR",
        today: Callable[[], date] = date.today,
    ) -> None:
        self.signals = signals
        self.home_country_code = home_country_code
        self._today = today

    def score(
        self,
        destination_id: str,
        month: int,
        context: ScoreContext,
        weights: Optional[ScoreWeights] = None,
    ) -> MonthlyScore:
        require_month(month)
        weights = validate_weights(weights or DEFAULT_WEIGHTS)
        if not destination_id or not str(destination_id).strip():
            raise InvalidArgumentError(f"Malformed destination id: {destination_id!r}")

        weather = weather_score(month, context.latitude)
        cost = cost_score(
            context.currency,
            month,
            self.signals.rate_history(context.currency),
            today=self._today(),
        )
        crowd = crowd_score(
            context.country_code,
            month,
            self.signals,
            home_country_code=self.home_country_code,
        )
        buzz = buzz_score(destination_id, month, self.signals)

        scores = ScoreBreakdown(
            weather=weather,
            cost=cost,
            crowd=crowd,
            buzz=buzz,
            total=calculate_total_score(weather, cost, crowd, buzz, weights),
        )
        return MonthlyScore(destination_id=destination_id, month=month, scores=scores)

    def score_destination(
        self,
        destination: Destination,
        month: int,
        weights: Optional[ScoreWeights] = None,
    ) -> MonthlyScore:
        return self.score(destination.id, month, ScoreContext.from_destination(destination), weights)
