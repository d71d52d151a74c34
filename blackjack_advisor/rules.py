from __future__ import annotations

from dataclasses import dataclass

from .constants import (
    DEFAULT_DECKS,
    DEFAULT_PLAYERS,
    MAX_DECKS,
    MAX_PLAYERS,
    MIN_DECKS,
    MIN_PLAYERS,
    TEN_SPLIT_TRUE_COUNT,
)


@dataclass(frozen=True)
class Rules:
    num_decks: int = DEFAULT_DECKS
    num_players: int = DEFAULT_PLAYERS
    ten_split_true_count: float = TEN_SPLIT_TRUE_COUNT  # split 10s at or above this TC
    double_first_two_only: bool = True  # DOUBLE on 3+ cards becomes HIT

    def __post_init__(self) -> None:
        validate_deck_count(self.num_decks)
        validate_player_count(self.num_players)


def validate_deck_count(num_decks: int) -> int:
    if not isinstance(num_decks, int) or isinstance(num_decks, bool):
        raise ValueError(f"Deck count must be an integer, got {num_decks!r}")
    if not MIN_DECKS <= num_decks <= MAX_DECKS:
        raise ValueError(f"Deck count must be between {MIN_DECKS} and {MAX_DECKS}, got {num_decks}")
    return num_decks


def validate_player_count(num_players: int) -> int:
    if not isinstance(num_players, int) or isinstance(num_players, bool):
        raise ValueError(f"Player count must be an integer, got {num_players!r}")
    if not MIN_PLAYERS <= num_players <= MAX_PLAYERS:
        raise ValueError(f"Player count must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {num_players}")
    return num_players
