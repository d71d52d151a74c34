from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Union

from .advisor import StrategyAdvisor
from .cards import CANONICAL_RANKS, hand_total, is_valid_rank
from .constants import (
    DEALER_TARGET,
    MAX_PLAYERS,
    MIN_PLAYERS,
    RUNNING_COUNT_TIER_THRESHOLD,
    TRUE_COUNT_TIER_THRESHOLD,
)
from .counting import bet_advice, count_tier
from .rules import Rules, validate_deck_count, validate_player_count
from .shoe import ShoeTracker
from .strategy import dealer_outcomes
from .types import BetAdvice, HandTotal, Mode, Recommendation

Target = Union[int, str]


class Session:
    """One table as seen by a single user: up to seven player hands, the
    dealer up-card, and the shoe tally they were dealt from.

    Every card that enters or leaves a hand goes through the tracker, so the
    seen tally and running count always match the cards on the table plus the
    ones already cleared away. Not thread-safe; share between threads only
    behind a lock.
    """

    def __init__(self, rules: Optional[Rules] = None, *, log_fn: Optional[Callable[[Dict], None]] = None):
        self.rules = rules or Rules()
        self.shoe = ShoeTracker(self.rules.num_decks)
        self.advisor = StrategyAdvisor(self.rules)
        self.num_players = self.rules.num_players
        self.active_player = 1
        self.mode = Mode.PLAYER
        self.hands: Dict[int, List[str]] = {i: [] for i in range(MIN_PLAYERS, MAX_PLAYERS + 1)}
        self.dealer_card: Optional[str] = None
        self.log_fn = log_fn

    # ---- commands -------------------------------------------------------

    def set_deck_count(self, num_decks: int) -> None:
        validate_deck_count(num_decks)
        self._reset(num_decks)
        self._emit("set_deck_count", num_decks=num_decks)

    def reset_shoe(self) -> None:
        self._reset(None)
        self._emit("reset_shoe")

    def add_card(self, target: Target, rank: str) -> bool:
        self._check_rank(rank)
        if self._is_dealer(target):
            return self.set_dealer_card(rank)
        player = self._player(target)
        accepted = player is not None and not self.shoe.is_depleted(rank)
        if accepted:
            self.shoe.track(rank)
            self.hands[player].append(rank)
        self._emit("add_card", target=target, rank=rank, accepted=accepted)
        return accepted

    def remove_card(self, target: Target, index: int) -> bool:
        if self._is_dealer(target):
            return self.remove_dealer_card() if index == 0 else False
        player = self._player(target)
        removed = False
        if player is not None and 0 <= index < len(self.hands[player]):
            rank = self.hands[player].pop(index)
            self.shoe.untrack(rank)
            removed = True
        self._emit("remove_card", target=target, index=index, removed=removed)
        return removed

    def clear_hand(self, target: Target) -> int:
        if self._is_dealer(target):
            return int(self.remove_dealer_card())
        player = self._player(target)
        if player is None:
            return 0
        cleared = self.hands[player]
        for rank in cleared:
            self.shoe.untrack(rank)
        self.hands[player] = []
        self._emit("clear_hand", target=target, cleared=len(cleared))
        return len(cleared)

    def set_dealer_card(self, rank: str) -> bool:
        self._check_rank(rank)
        previous = self.dealer_card
        if previous is not None:
            self.shoe.untrack(previous)
        accepted = not self.shoe.is_depleted(rank)
        if accepted:
            self.shoe.track(rank)
            self.dealer_card = rank
        elif previous is not None:
            # keep the old up-card rather than leave the dealer empty
            self.shoe.track(previous)
        self._emit("set_dealer_card", rank=rank, replaced=previous, accepted=accepted)
        return accepted

    def remove_dealer_card(self) -> bool:
        if self.dealer_card is None:
            return False
        self.shoe.untrack(self.dealer_card)
        removed, self.dealer_card = self.dealer_card, None
        self._emit("remove_dealer_card", rank=removed)
        return True

    def deal(self, rank: str) -> bool:
        """Card picker: goes to the active player, or to the dealer in dealer mode."""
        if self.mode == Mode.DEALER:
            return self.set_dealer_card(rank)
        return self.add_card(self.active_player, rank)

    def set_player_count(self, num_players: int) -> None:
        self.num_players = validate_player_count(num_players)
        if self.active_player > self.num_players:
            self.active_player = self.num_players
        self._emit("set_player_count", num_players=self.num_players)

    def change_player_count(self, delta: int) -> bool:
        new_count = self.num_players + delta
        if not MIN_PLAYERS <= new_count <= MAX_PLAYERS:
            return False
        self.set_player_count(new_count)
        return True

    def set_active_player(self, player: int) -> bool:
        if not isinstance(player, int) or not MIN_PLAYERS <= player <= self.num_players:
            return False
        self.active_player = player
        self.mode = Mode.PLAYER
        self._emit("set_active_player", player=player)
        return True

    def set_mode(self, mode: Union[Mode, str]) -> None:
        self.mode = Mode(mode)
        self._emit("set_mode", mode=self.mode.value)

    # ---- queries --------------------------------------------------------

    def hand(self, target: Target) -> List[str]:
        if self._is_dealer(target):
            return [self.dealer_card] if self.dealer_card else []
        player = self._player(target)
        return list(self.hands[player]) if player is not None else []

    def get_hand_total(self, target: Target) -> HandTotal:
        return hand_total(self.hand(target))

    def get_recommendation(self, target: Optional[Target] = None) -> Optional[Recommendation]:
        player = self.active_player if target is None else target
        return self.advisor.recommend(self.hand(player), self.dealer_card, self.get_true_count())

    def get_running_count(self) -> int:
        return self.shoe.running_count

    def get_true_count(self) -> float:
        return self.shoe.true_count()

    def get_remaining_cards(self) -> int:
        return self.shoe.remaining_cards()

    def get_bet_advice(self) -> BetAdvice:
        return bet_advice(self.get_true_count())

    def get_card_probability(self, rank: str) -> float:
        return self.shoe.card_probability(rank)

    def seen_cards(self) -> Dict[str, int]:
        return dict(self.shoe.seen)

    def depleted_ranks(self) -> List[str]:
        return [r for r in CANONICAL_RANKS if self.shoe.is_depleted(r)]

    def snapshot(self) -> Dict[str, Any]:
        """Everything a renderer needs, as plain data."""
        tc = self.get_true_count()
        rc = self.get_running_count()
        advice = self.get_bet_advice()
        players = []
        for i in range(MIN_PLAYERS, self.num_players + 1):
            info = self.get_hand_total(i)
            rec = self.get_recommendation(i)
            players.append({
                "player": i,
                "active": self.mode == Mode.PLAYER and i == self.active_player,
                "cards": list(self.hands[i]),
                "total": info.total,
                "soft": info.soft and bool(self.hands[i]),
                "blackjack": info.blackjack,
                "bust": info.bust,
                "recommendation": rec.to_dict() if rec else None,
            })
        outcomes = dealer_outcomes(self.dealer_card) if self.dealer_card else None
        return {
            "num_decks": self.shoe.num_decks,
            "num_players": self.num_players,
            "active_player": self.active_player,
            "mode": self.mode.value,
            "players": players,
            "dealer": {
                "card": self.dealer_card,
                "outcomes": dict(outcomes) if outcomes else None,
            },
            "running_count": rc,
            "running_count_tier": count_tier(rc, RUNNING_COUNT_TIER_THRESHOLD),
            "true_count": tc,
            "true_count_tier": count_tier(tc, TRUE_COUNT_TIER_THRESHOLD),
            "remaining_cards": self.get_remaining_cards(),
            "bet_advice": {"label": advice.label, "tier": advice.tier, "multiplier": advice.multiplier},
            "seen": {r: {"count": n, "depleted": self.shoe.is_depleted(r)} for r, n in self.shoe.seen.items()},
            "probabilities": self.shoe.draw_probabilities(),
        }

    # ---- internals ------------------------------------------------------

    def _reset(self, num_decks: Optional[int]) -> None:
        # a new shoe invalidates every hand on the table
        self.shoe.reset(num_decks)
        for i in self.hands:
            self.hands[i] = []
        self.dealer_card = None
        self.active_player = 1
        self.mode = Mode.PLAYER

    @staticmethod
    def _is_dealer(target: Target) -> bool:
        return isinstance(target, str) and target.lower() == DEALER_TARGET

    def _player(self, target: Target) -> Optional[int]:
        if isinstance(target, bool) or not isinstance(target, int):
            raise ValueError(f"Unknown target: {target!r} (expected a player number or '{DEALER_TARGET}')")
        if MIN_PLAYERS <= target <= self.num_players:
            return target
        return None

    @staticmethod
    def _check_rank(rank: str) -> None:
        if not isinstance(rank, str) or not is_valid_rank(rank):
            raise ValueError(f"Unknown card rank: {rank!r}")

    def _emit(self, event: str, **fields: Any) -> None:
        if self.log_fn is None:
            return
        payload: Dict[str, Any] = {"event": event}
        payload.update(fields)
        payload["running_count"] = self.shoe.running_count
        payload["remaining"] = self.shoe.remaining_cards()
        self.log_fn(payload)
