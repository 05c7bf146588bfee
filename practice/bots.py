from __future__ import annotations

import random
from collections import Counter
from typing import Callable, Dict, List, Sequence

from core.cards import Card
from core.evaluator import card_value, judge_hand
from core.game import stand_pat


_RNG = random.Random()

# Made hands of this strength or better are never broken up.
_PAT_STRENGTH = 4


def _four_to_flush(cards: Sequence[Card]) -> List[Card]:
    by_suit = Counter(card.suit for card in cards)
    suit, count = by_suit.most_common(1)[0]
    if count != 4:
        return []
    return [card for card in cards if card.suit != suit]


def baseline_discards(cards: Sequence[Card]) -> List[Card]:
    """House bot: keep made hands and matched ranks, chase four-flushes, else keep the high card."""
    if len(cards) < 5:
        return []

    if judge_hand(cards).strength >= _PAT_STRENGTH:
        return []

    counts = Counter(card.rank for card in cards)
    matched = [card for card in cards if counts[card.rank] >= 2]
    if matched:
        return [card for card in cards if counts[card.rank] == 1]

    flush_draw = _four_to_flush(cards)
    if flush_draw:
        return flush_draw

    # Nothing to build on: hold the highest card and draw four.
    keep = max(cards, key=card_value)
    return [card for card in cards if card != keep]


def random_discards(cards: Sequence[Card]) -> List[Card]:
    """Throw away a random subset; handy for exercising the exchange path."""
    count = _RNG.randint(0, len(cards))
    return _RNG.sample(list(cards), count)


BOT_STRATEGIES: Dict[str, Callable[[Sequence[Card]], List[Card]]] = {
    "baseline": baseline_discards,
    "stand_pat": stand_pat,
    "random": random_discards,
}
