import pytest

from core.cards import Card, parse_cards
from core.participants import Opponent
from practice.bots import BOT_STRATEGIES, baseline_discards, random_discards


def labels(cards):
    return sorted(card.label for card in cards)


def test_baseline_stands_pat_on_made_hands():
    assert baseline_discards(parse_cards(["9h", "8d", "7c", "6s", "5h"])) == []
    assert baseline_discards(parse_cards(["Qc", "Qd", "Qs", "9h", "9s"])) == []


def test_baseline_keeps_matched_ranks():
    discards = baseline_discards(parse_cards(["6h", "6s", "Qh", "8d", "4c"]))
    assert labels(discards) == ["4c", "8d", "Qh"]

    discards = baseline_discards(parse_cards(["7h", "7d", "4s", "4c", "As"]))
    assert labels(discards) == ["As"]


def test_baseline_chases_four_flush():
    discards = baseline_discards(parse_cards(["Ah", "Jh", "9h", "6h", "2c"]))
    assert labels(discards) == ["2c"]


def test_baseline_holds_high_card_with_nothing():
    discards = baseline_discards(parse_cards(["As", "Kd", "Jh", "9c", "4d"]))
    assert labels(discards) == ["4d", "9c", "Jh", "Kd"]


def test_random_discards_picks_distinct_cards_from_hand():
    hand = [Card(card_id) for card_id in (3, 17, 29, 40, 51)]
    for _ in range(50):
        discards = random_discards(hand)
        assert len(set(discards)) == len(discards)
        assert set(discards) <= set(hand)


@pytest.mark.parametrize("name", sorted(BOT_STRATEGIES))
def test_every_strategy_is_a_valid_opponent(name):
    opponent = Opponent(BOT_STRATEGIES[name])
    for card in parse_cards(["As", "Kd", "Jh", "9c", "4d"]):
        opponent.add_card(card)
    chosen = opponent.choose_discards()
    assert opponent.marked_for_exchange() == chosen
