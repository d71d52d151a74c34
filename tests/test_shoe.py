import pytest

from blackjack_advisor.cards import CANONICAL_RANKS, RANKS
from blackjack_advisor.counting import running_count_of
from blackjack_advisor.shoe import ShoeTracker


def test_fresh_shoe_probabilities():
    shoe = ShoeTracker(1)
    assert shoe.card_probability("10") == pytest.approx(16 / 52)
    assert shoe.card_probability("K") == pytest.approx(16 / 52)
    assert shoe.card_probability("A") == pytest.approx(4 / 52)
    assert sum(shoe.draw_probabilities().values()) == pytest.approx(1.0)


def test_probability_after_tracking():
    shoe = ShoeTracker(2)
    shoe.track("A")
    shoe.track("J")
    assert shoe.remaining_cards() == 102
    assert shoe.card_probability("A") == pytest.approx(7 / 102)
    assert shoe.card_probability("10") == pytest.approx(31 / 102)


def test_unknown_rank_probability_is_zero():
    assert ShoeTracker(1).card_probability("X") == 0.0


@pytest.mark.parametrize("rank", RANKS)
def test_track_then_untrack_is_noop(rank):
    shoe = ShoeTracker(1)
    for r in ("2", "K", "A", "7", "5"):
        shoe.track(r)
    seen = dict(shoe.seen)
    rc = shoe.running_count
    assert shoe.track(rank)
    assert shoe.untrack(rank)
    assert shoe.seen == seen
    assert shoe.running_count == rc


def test_running_count_a_five_ten():
    shoe = ShoeTracker(1)
    for r in ("A", "5", "10"):
        shoe.track(r)
    assert shoe.running_count == -1


def test_running_count_matches_seen_tally():
    shoe = ShoeTracker(2)
    for r in ["2", "3", "K", "Q", "A", "9", "6", "6", "J", "4"]:
        shoe.track(r)
    shoe.untrack("Q")
    shoe.untrack("6")
    assert shoe.running_count == running_count_of(shoe.seen)


def test_untrack_floors_at_zero():
    shoe = ShoeTracker(1)
    assert not shoe.untrack("5")
    assert shoe.seen["5"] == 0
    assert shoe.running_count == 0


def test_track_always_counts_past_supply():
    shoe = ShoeTracker(1)
    for _ in range(4):
        assert shoe.track("A")
    assert shoe.is_depleted("A")
    assert shoe.track("A")
    assert shoe.seen["A"] == 5
    assert shoe.running_count == -5
    assert shoe.remaining_of("A") == 0


def test_track_untrack_round_trip_from_depleted_rank():
    shoe = ShoeTracker(1)
    for _ in range(4):
        shoe.track("A")
    seen, rc = dict(shoe.seen), shoe.running_count
    assert shoe.track("A")
    assert shoe.untrack("A")
    assert shoe.seen == seen
    assert shoe.running_count == rc
    assert shoe.running_count == running_count_of(shoe.seen)


def test_track_refuses_unknown_rank():
    shoe = ShoeTracker(1)
    assert not shoe.track("X")
    assert shoe.total_seen() == 0


def test_exhausted_shoe_defaults():
    shoe = ShoeTracker(1)
    for r in CANONICAL_RANKS:
        for _ in range(shoe.supply(r)):
            shoe.track(r)
    assert shoe.remaining_cards() == 0
    assert shoe.running_count == 0
    assert shoe.true_count() == 0.0
    assert shoe.card_probability("10") == 0.0


def test_true_count():
    shoe = ShoeTracker(1)
    for r in ("2", "3", "4", "5"):
        shoe.track(r)
    # 4 / (48 / 52)
    assert shoe.true_count() == pytest.approx(4 * 52 / 48)


def test_reset_changes_decks():
    shoe = ShoeTracker(1)
    shoe.track("5")
    shoe.reset(2)
    assert shoe.num_decks == 2
    assert shoe.total_seen() == 0
    assert shoe.running_count == 0
    assert shoe.remaining_cards() == 104
    assert shoe.supply("Q") == 32


def test_invalid_deck_count():
    with pytest.raises(ValueError):
        ShoeTracker(0)
    shoe = ShoeTracker(1)
    with pytest.raises(ValueError):
        shoe.reset(-1)
