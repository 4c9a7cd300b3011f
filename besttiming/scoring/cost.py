# besttiming/scoring/cost.py
"""
Cost score and exchange-rate bonus.

Rates are home-currency units per one foreign unit, so a LOWER current rate
means the destination is cheaper than usual.

Cost score (1.0-10.0):
  base   = CURRENCY_BASE_COST[currency]          (default 5.0)
  pct    = (avg365 - current) / avg365 * 100
  score  = base + clamp(pct * 0.3, -1.5, 1.5)

The 365-day average needs at least 30 points inside the last year;
without it the base cost is the score. The rate modifier is the same for
every month: the trailing average is the seasonal baseline.

Exchange bonus (today-best ranking), 90-day window, >= 7 points:
  current <= min(90 days) * 1.005  -> +1.0
  current <= min(last 30 points) * 1.005  -> +0.5
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import Optional, Sequence

from ..errors import require_month
from ..signals import RatePoint
from .rounding import clamp, clamp_score

# Absolute price level from the home traveller's point of view (higher = cheaper).
CURRENCY_BASE_COST: dict[str, float] = {
    # East Asia
    "JPY": 7.5,
    "TWD": 6.5,
    "HKD": 5.5,
    "MOP": 5.5,
    # Southeast Asia
    "VND": 8.0,
    "THB": 7.5,
    "PHP": 7.0,
    "IDR": 7.5,
    "MYR": 7.0,
    "SGD": 4.5,
    "KHR": 8.0,
    "LAK": 8.5,
    "MMK": 8.5,
    # Middle East
    "AED": 4.5,
    "TRY": 7.5,
    # Europe
    "EUR": 4.0,
    "GBP": 3.5,
    "CZK": 5.5,
    "CHF": 3.0,
    "HUF": 6.0,
    "PLN": 5.5,
    "ISK": 3.5,
    "NOK": 3.5,
    "SEK": 4.0,
    "DKK": 4.0,
    # Americas
    "USD": 4.5,
    "CAD": 4.5,
    "MXN": 7.0,
    # Oceania
    "AUD": 5.0,
    "NZD": 5.0,
    "FJD": 5.5,
    # Resort
    "MVR": 3.5,
}
DEFAULT_BASE_COST = 5.0

AVERAGE_WINDOW_DAYS = 365
AVERAGE_MIN_POINTS = 30
MODIFIER_PER_PCT = 0.3
MODIFIER_CAP = 1.5

BONUS_WINDOW_DAYS = 90
BONUS_MIN_POINTS = 7
BONUS_SHORT_POINTS = 30
LOW_TOLERANCE = 1.005


def base_cost(currency: str) -> float:
    return CURRENCY_BASE_COST.get((currency or "").upper(), DEFAULT_BASE_COST)


def _newest_first(rates: Sequence[RatePoint]) -> list[RatePoint]:
    return sorted(rates, key=lambda r: r.rate_date, reverse=True)


def trailing_average(rates: Sequence[RatePoint], *, today: date) -> Optional[float]:
    cutoff = today - timedelta(days=AVERAGE_WINDOW_DAYS)
    recent = [r.rate for r in rates if cutoff <= r.rate_date <= today]
    if len(recent) < AVERAGE_MIN_POINTS:
        return None
    return sum(recent) / len(recent)


def cost_score_from_rates(
    currency: str,
    current_rate: Optional[float],
    average_rate: Optional[float],
) -> float:
    base = base_cost(currency)
    if current_rate is None or not average_rate:
        return base

    pct_diff = (average_rate - current_rate) / average_rate * 100
    modifier = clamp(pct_diff * MODIFIER_PER_PCT, -MODIFIER_CAP, MODIFIER_CAP)
    return clamp_score(base + modifier)


def cost_score(
    currency: str,
    month: int,
    rates: Sequence[RatePoint] = (),
    *,
    today: Optional[date] = None,
) -> float:
    require_month(month)
    today = today or date.today()
    ordered = [r for r in _newest_first(rates) if r.rate_date <= today]
    if not ordered:
        return base_cost(currency)
    return cost_score_from_rates(
        currency,
        ordered[0].rate,
        trailing_average(ordered, today=today),
    )


def exchange_rate_bonus(
    rates: Sequence[RatePoint],
    *,
    today: date,
) -> tuple[float, Optional[str]]:
    """(bonus, reason) for how close today's rate is to its recent low."""
    cutoff = today - timedelta(days=BONUS_WINDOW_DAYS)
    window = [r for r in _newest_first(rates) if cutoff <= r.rate_date <= today]
    if len(window) < BONUS_MIN_POINTS:
        return 0.0, None

    current = window[0].rate
    min_90 = min(r.rate for r in window)
    min_30 = min(r.rate for r in window[:BONUS_SHORT_POINTS])

    if current <= min_90 * LOW_TOLERANCE:
        return 1.0, "Exchange rate at a 3-month low"
    if current <= min_30 * LOW_TOLERANCE:
        return 0.5, "Exchange rate at a 1-month low"
    return 0.0, None
