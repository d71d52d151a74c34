from __future__ import annotations

from typing import Optional, Sequence, Tuple

from .cards import hand_total, normalize_rank, pair_rank
from .constants import HARD_TOTAL_MAX, HARD_TOTAL_MIN, TEN_SPLIT_TRUE_COUNT
from .rules import Rules
from .strategy import DEALER_UPCARDS, dealer_bust_probability, hard_action, pair_action, soft_action
from .types import Action, ChartAction, HandTotal, Recommendation


def dealer_number(dealer: str) -> int:
    """Numeric up-card value used by the justification rules (A = 11)."""
    up = normalize_rank(dealer)
    return 11 if up == "A" else int(up)


def should_split_with_count(pair: str, dealer: str, true_count: float, ten_split_true_count: float = TEN_SPLIT_TRUE_COUNT) -> bool:
    """Split decision for a pair after count adjustment.

    Precedence is fixed: 10s split once the true count reaches the deviation
    threshold, A and 8 always split, 10 and 5 otherwise never split, and only
    the remaining pairs consult the pair chart. A/8/10/5 are therefore gated on
    rank alone, whatever the dealer shows.
    """
    pair = normalize_rank(pair)
    if pair == "10" and true_count >= ten_split_true_count:
        return True
    if pair in ("A", "8"):
        return True
    if pair in ("10", "5"):
        return False
    return pair_action(pair, dealer) == ChartAction.SPLIT


def hit_reason(total: int, dealer: str, soft: bool) -> Tuple[str, str]:
    up = dealer_number(dealer)
    if soft:
        if total <= 17:
            return "soft_free_draw", f"Soft {total}: no risk of busting, draw to improve"
        if total == 18 and up >= 9:
            return "soft18_vs_strong", f"Soft 18 vs {dealer}: dealer shows a strong card, draw again"
    if total <= 11:
        return "cannot_bust", f"{total}: cannot bust, safe to draw"
    if up >= 7 and total < 17:
        return "dealer_strong", f"{total} vs {dealer}: dealer is likely to make a hand, you must draw"
    if total == 12 and up in (2, 3):
        return "twelve_vs_low", f"12 vs {dealer}: dealer is not weak enough, draw to improve"
    return "improve", f"{total}: still room to improve the hand"


def stand_reason(total: int, dealer: str, soft: bool) -> Tuple[str, str]:
    up = dealer_number(dealer)
    if total >= 17:
        return "made_hand", f"{total}: high enough, wait for the dealer to bust"
    if 2 <= up <= 6:
        bust = dealer_bust_probability(dealer)
        return "dealer_may_bust", f"{total} vs {dealer}: dealer busts {bust * 100:.1f}% of the time, let them bust"
    return "avoid_bust", f"{total}: stand to avoid busting"


def double_reason(total: int, dealer: str, soft: bool) -> Tuple[str, str]:
    up = dealer_number(dealer)
    if total == 11:
        return "eleven", "11: very good chance of 21, double the bet!"
    if total == 10 and up <= 9:
        return "ten_vs_weak", f"10 vs {dealer}: positive expected value, double!"
    if total == 9 and 3 <= up <= 6:
        return "nine_vs_weak", f"9 vs {dealer}: dealer shows a weak card, doubling pays"
    if soft and 4 <= up <= 6:
        return "soft_vs_weak", f"Soft {total} vs {dealer}: dealer is very weak, double!"
    return "favourable", f"{total}: favourable spot, double!"


_SPLIT_REASONS = {
    "A": "Pair of aces: always split, two chances at 21",
    "8": "Pair of 8s: split to get out of 16, the worst hand",
    "2": "Pair of 2s: split against a weak dealer card (2-7)",
    "3": "Pair of 3s: split against a weak dealer card (2-7)",
    "6": "Pair of 6s: split against a weak dealer card (2-6)",
    "7": "Pair of 7s: split against a weak dealer card (2-7)",
    "9": "Pair of 9s: split except against 7, 10 or A",
    "4": "Pair of 4s: split against dealer 5 or 6",
}


def split_reason(pair: str, true_count: float) -> Tuple[str, str]:
    if pair == "10":
        return "split_10", f"Pair of 10s: true count is high ({true_count:.2f}), split"
    return f"split_{pair}", _SPLIT_REASONS.get(pair, "Split the pair")


class StrategyAdvisor:
    """Basic strategy with Hi-Lo adjustments.

    Resolution order (first match wins):
    - blackjack, then bust;
    - pairs the count-adjusted split check accepts;
    - soft totals that have a soft chart row;
    - hard totals, clamped into the hard chart;
    - otherwise stand.

    The advisor holds no game state; the caller passes the current true count.
    """

    def __init__(self, rules: Optional[Rules] = None):
        self.rules = rules or Rules()

    def recommend(self, hand: Sequence[str], dealer_card: Optional[str], true_count: float = 0.0) -> Optional[Recommendation]:
        if not hand or not dealer_card:
            return None

        info = hand_total(hand)
        if info.blackjack:
            return self._result(Action.BLACKJACK, "blackjack", "Blackjack! Pays 3:2 unless the dealer also has blackjack", info, true_count)
        if info.bust:
            return self._result(Action.BUST, "bust", "Over 21, the hand is lost", info, true_count)

        dealer = normalize_rank(dealer_card)
        if dealer not in DEALER_UPCARDS:
            return self._fallback(info, true_count)

        pair = pair_rank(hand)
        if pair is not None and should_split_with_count(pair, dealer, true_count, self.rules.ten_split_true_count):
            rule, reason = split_reason(pair, true_count)
            return self._result(Action.SPLIT, rule, reason, info, true_count)

        if info.soft:
            code = soft_action(info.total, dealer)
            if code is not None:
                return self._resolve(code, info, dealer, true_count, len(hand))

        clamped = min(max(info.total, HARD_TOTAL_MIN), HARD_TOTAL_MAX)
        code = hard_action(clamped, dealer)
        if code is not None:
            return self._resolve(code, info, dealer, true_count, len(hand))

        return self._fallback(info, true_count)

    def _resolve(self, code: ChartAction, info: HandTotal, dealer: str, true_count: float, num_cards: int) -> Recommendation:
        if code == ChartAction.HIT:
            rule, reason = hit_reason(info.total, dealer, info.soft)
            return self._result(Action.HIT, rule, reason, info, true_count)
        if code == ChartAction.STAND:
            rule, reason = stand_reason(info.total, dealer, info.soft)
            return self._result(Action.STAND, rule, reason, info, true_count)
        if code == ChartAction.DOUBLE:
            if num_cards == 2 or not self.rules.double_first_two_only:
                rule, reason = double_reason(info.total, dealer, info.soft)
                return self._result(Action.DOUBLE, rule, reason, info, true_count)
            note = f" (TC: {true_count:.2f})" if true_count != 0 else ""
            reason = f"Double is best but the hand already has more than 2 cards, hit instead{note}"
            return self._result(Action.HIT, "double_unavailable", reason, info, true_count)
        return self._fallback(info, true_count)

    def _fallback(self, info: HandTotal, true_count: float) -> Recommendation:
        return self._result(Action.STAND, "fallback", "No clear play, stand to be safe", info, true_count)

    @staticmethod
    def _result(action: Action, rule: str, reason: str, info: HandTotal, true_count: float) -> Recommendation:
        return Recommendation(
            action=action,
            reason=reason,
            rule=rule,
            total=info.total,
            soft=info.soft,
            true_count=true_count,
        )


_DEFAULT_ADVISOR = StrategyAdvisor()


def recommend(hand: Sequence[str], dealer_card: Optional[str], true_count: float = 0.0) -> Optional[Recommendation]:
    return _DEFAULT_ADVISOR.recommend(hand, dealer_card, true_count)
