from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterable, List, Optional, Sequence, Tuple

DECK_SIZE = 52
SUIT_SIZE = 13
SHUFFLE_SWAPS = 100

# Index 0 is rank 1 (Ace) through index 12 (King), matching the card id encoding.
RANKS = "A23456789TJQK"
SUITS = "shdc"


class DeckUnderflowError(ValueError):
    """Raised when more cards are requested than the deck still holds."""


@dataclass(frozen=True)
class Card:
    id: int

    def __post_init__(self) -> None:
        if not isinstance(self.id, int) or not 1 <= self.id <= DECK_SIZE:
            raise ValueError(f"Invalid card id: {self.id!r}")

    @property
    def rank(self) -> int:
        # 1 = Ace .. 13 = King
        return (self.id - 1) % SUIT_SIZE + 1

    @property
    def suit(self) -> int:
        return (self.id - 1) // SUIT_SIZE

    @property
    def label(self) -> str:
        return f"{RANKS[self.rank - 1]}{SUITS[self.suit]}"

    def __str__(self) -> str:
        return self.label


def build_deck() -> List[Card]:
    return [Card(index + 1) for index in range(DECK_SIZE)]


def shuffle_cards(cards: List[Card], rng: random.Random, swaps: int = SHUFFLE_SWAPS) -> None:
    """Swap two uniformly chosen positions ``swaps`` times, in place.

    Both positions are drawn independently, so a card may be swapped with
    itself and the same slot may move several times. This is not a uniform
    shuffle; it is the fixed procedure the table has always used.
    """
    size = len(cards)
    if size == 0:
        return
    for _ in range(swaps):
        j = rng.randrange(size)
        k = rng.randrange(size)
        cards[j], cards[k] = cards[k], cards[j]


class Deck:
    """Undealt cards. The top of the deck is the right end, the bottom the left."""

    def __init__(self, cards: Optional[Iterable[Card]] = None) -> None:
        self._cards: Deque[Card] = deque(build_deck() if cards is None else cards)

    def __len__(self) -> int:
        return len(self._cards)

    @property
    def cards(self) -> Tuple[Card, ...]:
        return tuple(self._cards)

    def shuffle(self, rng: random.Random, swaps: int = SHUFFLE_SWAPS) -> None:
        cards = list(self._cards)
        shuffle_cards(cards, rng, swaps)
        self._cards = deque(cards)

    def take_top(self) -> Card:
        if not self._cards:
            raise DeckUnderflowError("Not enough cards left in deck")
        return self._cards.pop()

    def return_to_bottom(self, card: Card) -> None:
        self._cards.appendleft(card)

    def deal(self, count: int) -> List[Card]:
        if count < 0:
            raise ValueError("Cannot deal a negative number of cards")
        if len(self._cards) < count:
            raise DeckUnderflowError("Not enough cards left in deck")
        return [self._cards.pop() for _ in range(count)]


def cards_to_labels(cards: Sequence[Card]) -> List[str]:
    return [card.label for card in cards]


def parse_label(label: str) -> Card:
    if len(label) != 2:
        raise ValueError(f"Invalid card label: {label}")
    rank, suit = label[0].upper(), label[1].lower()
    if rank not in RANKS:
        raise ValueError(f"Invalid rank: {label[0]}")
    if suit not in SUITS:
        raise ValueError(f"Invalid suit: {label[1]}")
    return Card(SUITS.index(suit) * SUIT_SIZE + RANKS.index(rank) + 1)


def parse_cards(labels: Sequence[str]) -> List[Card]:
    return [parse_label(label) for label in labels]
