"""Hi-Lo card counting: per-card weights, true count and bet sizing."""

from __future__ import annotations

from typing import Dict, Mapping

from .constants import (
    BET_LOWER_TC,
    BET_RAISE_2X_TC,
    BET_RAISE_4X_TC,
    BET_RAISE_SLIGHT_TC,
    CARDS_PER_DECK,
)
from .types import BetAdvice


HILO_WEIGHTS: Dict[str, int] = {
    "A": -1,
    "2": 1, "3": 1, "4": 1, "5": 1, "6": 1,
    "7": 0, "8": 0, "9": 0,
    "10": -1, "J": -1, "Q": -1, "K": -1, "T": -1,
}


def hilo_delta(rank: str) -> int:
    return HILO_WEIGHTS.get(rank, 0)


def running_count_of(seen: Mapping[str, int]) -> int:
    """Recompute a running count from a tally of seen ranks."""
    return sum(hilo_delta(rank) * count for rank, count in seen.items())


def true_count(running_count: int, remaining_cards: int) -> float:
    """Running count per remaining deck; 0.0 once the shoe is exhausted."""
    if remaining_cards <= 0:
        return 0.0
    return running_count / (remaining_cards / CARDS_PER_DECK)


def bet_advice(tc: float) -> BetAdvice:
    if tc >= BET_RAISE_4X_TC:
        return BetAdvice("raise-4x", "raise", 4)
    if tc >= BET_RAISE_2X_TC:
        return BetAdvice("raise-2x", "raise", 2)
    if tc >= BET_RAISE_SLIGHT_TC:
        return BetAdvice("raise-slight", "positive", 1)
    if tc <= BET_LOWER_TC:
        return BetAdvice("lower", "negative", 1)
    return BetAdvice("normal", "neutral", 1)


def count_tier(value: float, threshold: float = 0) -> str:
    if value > threshold:
        return "positive"
    if value < -threshold:
        return "negative"
    return "neutral"


def format_count(value: float, digits: int = 0) -> str:
    """Signed display form: '+3', '-1', '+0.75'."""
    text = f"{value:.{digits}f}" if digits else str(int(value))
    return text if text.startswith("-") else f"+{text}"
