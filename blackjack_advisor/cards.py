from __future__ import annotations

from typing import Optional, Sequence, Tuple

from .types import HandTotal


RANKS = ["A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K"]
CANONICAL_RANKS = ["A", "2", "3", "4", "5", "6", "7", "8", "9", "10"]
TEN_VALUE_RANKS = ("10", "J", "Q", "K", "T")


def normalize_rank(rank: str) -> str:
    """Collapse 10/J/Q/K (and the 'T' shorthand) to '10'; anything else is returned as is."""
    if rank in TEN_VALUE_RANKS:
        return "10"
    return rank


def is_valid_rank(rank: str) -> bool:
    return normalize_rank(rank) in CANONICAL_RANKS


def card_value(rank: str) -> int:
    if rank == "A":
        return 11
    if rank in TEN_VALUE_RANKS:
        return 10
    if rank in CANONICAL_RANKS:
        return int(rank)
    raise ValueError(f"Unknown card rank: {rank!r}")


def hand_total(hand: Sequence[str]) -> HandTotal:
    total = 0
    aces = 0
    for rank in hand:
        if rank == "A":
            aces += 1
        total += card_value(rank)
    # downgrade aces from 11 to 1 as needed
    while total > 21 and aces > 0:
        total -= 10
        aces -= 1
    return HandTotal(
        total=total,
        # soft if at least one ace remains valued as 11
        soft=aces > 0,
        bust=total > 21,
        blackjack=len(hand) == 2 and total == 21,
    )


def hand_totals(hand: Sequence[str]) -> Tuple[int, bool]:
    info = hand_total(hand)
    return info.total, info.soft


def pair_rank(hand: Sequence[str]) -> Optional[str]:
    if len(hand) != 2:
        return None
    r0 = normalize_rank(hand[0])
    r1 = normalize_rank(hand[1])
    return r0 if r0 == r1 else None


def is_pair(hand: Sequence[str]) -> bool:
    return pair_rank(hand) is not None
