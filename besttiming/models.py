from __future__ import annotations

import datetime as dt
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Value(BaseModel):
    """Immutable value type; serializes with camelCase keys for the front end."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Destination(_Value):
    id: str
    name_local: str
    name_en: str
    country: str
    country_code: str
    currency: str
    latitude: float
    longitude: float
    keywords: List[str] = Field(default_factory=list)


class ScoreWeights(_Value):
    weather: float = 0.35
    cost: float = 0.25
    crowd: float = 0.15
    buzz: float = 0.25


DEFAULT_WEIGHTS = ScoreWeights()


class ScoreBreakdown(_Value):
    weather: float
    cost: float
    crowd: float
    buzz: float
    total: float


class MonthlyScore(_Value):
    destination_id: str = Field(alias="cityId")
    month: int
    scores: ScoreBreakdown


class MonthlyRankingEntry(_Value):
    rank: int
    destination: Destination = Field(alias="city")
    scores: ScoreBreakdown
    highlights: List[str] = Field(default_factory=list)


class ForecastDay(_Value):
    date: dt.date
    temp_max: float
    temp_min: float
    precipitation: float
    weather_code: int
    weather_icon: str
    is_clear: bool


Comparison = Literal["better", "similar", "worse"]


class ForecastSummary(_Value):
    destination_id: str = Field(alias="cityId")
    days: List[ForecastDay]
    clear_days: int
    clear_ratio: float
    avg_temp: float
    historical_clear_ratio: float
    comparison: Comparison
    score_adjustment: float
    fetched_at: dt.datetime


class RecommendedPeriod(_Value):
    start: dt.date
    end: dt.date
    label: str


class BonusBreakdown(_Value):
    exchange_rate: float = 0.0
    forecast: float = 0.0
    season: float = 0.0
    timeliness: float = 0.0

    @property
    def total(self) -> float:
        return self.exchange_rate + self.forecast + self.season + self.timeliness


class TodayBestItem(_Value):
    rank: int
    destination: Destination = Field(alias="city")
    recommended_period: RecommendedPeriod
    score: float
    base_score: float
    bonuses: BonusBreakdown
    reasons: List[str] = Field(default_factory=list)
