from __future__ import annotations

from typing import Dict, Optional

from .cards import CANONICAL_RANKS, normalize_rank
from .constants import CARDS_PER_DECK, RANK_SUPPLY_PER_DECK, TEN_SUPPLY_PER_DECK
from .counting import hilo_delta, true_count
from .rules import validate_deck_count


class ShoeTracker:
    """Tally of the cards already seen from a shoe of ``num_decks`` decks.

    The running count is kept in step with the tally: every ``track`` adds the
    card's Hi-Lo weight and every ``untrack`` takes it back, so
    ``running_count`` always equals the weighted sum of ``seen``.
    """

    def __init__(self, num_decks: int = 1):
        self.num_decks = validate_deck_count(num_decks)
        self.seen: Dict[str, int] = {r: 0 for r in CANONICAL_RANKS}
        self.running_count = 0

    def supply(self, rank: str) -> int:
        per_deck = TEN_SUPPLY_PER_DECK if normalize_rank(rank) == "10" else RANK_SUPPLY_PER_DECK
        return per_deck * self.num_decks

    def is_depleted(self, rank: str) -> bool:
        return self.seen.get(normalize_rank(rank), 0) >= self.supply(rank)

    def track(self, rank: str) -> bool:
        key = normalize_rank(rank)
        if key not in self.seen:
            return False
        self.seen[key] += 1
        self.running_count += hilo_delta(rank)
        return True

    def untrack(self, rank: str) -> bool:
        key = normalize_rank(rank)
        if self.seen.get(key, 0) <= 0:
            return False
        self.seen[key] -= 1
        self.running_count -= hilo_delta(rank)
        return True

    def total_seen(self) -> int:
        return sum(self.seen.values())

    def remaining_cards(self) -> int:
        return CARDS_PER_DECK * self.num_decks - self.total_seen()

    def remaining_of(self, rank: str) -> int:
        key = normalize_rank(rank)
        if key not in self.seen:
            return 0
        return max(0, self.supply(key) - self.seen[key])

    def decks_remaining(self) -> float:
        return self.remaining_cards() / CARDS_PER_DECK

    def card_probability(self, rank: str) -> float:
        remaining = self.remaining_cards()
        if remaining <= 0:
            return 0.0
        return self.remaining_of(rank) / remaining

    def draw_probabilities(self) -> Dict[str, float]:
        return {r: self.card_probability(r) for r in CANONICAL_RANKS}

    def true_count(self) -> float:
        return true_count(self.running_count, self.remaining_cards())

    def reset(self, num_decks: Optional[int] = None) -> None:
        if num_decks is not None:
            self.num_decks = validate_deck_count(num_decks)
        for r in self.seen:
            self.seen[r] = 0
        self.running_count = 0
