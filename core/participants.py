from __future__ import annotations

from typing import Callable, Iterable, List, Sequence, Tuple

from .cards import Card

# Opponent strategies look at their own five cards and return the ones to throw away.
DiscardStrategy = Callable[[Sequence[Card]], Iterable[Card]]


class InvalidSelectionError(RuntimeError):
    """Raised when a discard choice does not name distinct cards from the hand."""


class Participant:
    """A hand of cards plus the ordered marks of cards picked for exchange."""

    side = "participant"

    def __init__(self) -> None:
        self._cards: List[Card] = []
        # Hand positions in the order they were marked.
        self._selected: List[int] = []

    @property
    def cards(self) -> Tuple[Card, ...]:
        return tuple(self._cards)

    @property
    def selected_indices(self) -> Tuple[int, ...]:
        return tuple(self._selected)

    def add_card(self, card: Card) -> None:
        self._cards.append(card)

    def toggle(self, index: int) -> bool:
        if not 0 <= index < len(self._cards):
            raise IndexError(f"No card at position {index}")
        if index in self._selected:
            self._selected.remove(index)
            return False
        self._selected.append(index)
        return True

    def clear_selection(self) -> None:
        self._selected.clear()

    def marked_for_exchange(self) -> List[Card]:
        return [self._cards[index] for index in self._selected]

    def draw_card(self, new_card: Card) -> Card:
        """Swap the earliest marked card for ``new_card`` and hand back the old one."""
        if not self._selected:
            raise RuntimeError("No card selected for exchange")
        index = self._selected.pop(0)
        discarded = self._cards[index]
        self._cards[index] = new_card
        return discarded


class Player(Participant):
    side = "you"


class Opponent(Participant):
    side = "com"

    def __init__(self, strategy: DiscardStrategy) -> None:
        super().__init__()
        self.strategy = strategy

    def choose_discards(self) -> List[Card]:
        chosen = list(self.strategy(self.cards))
        seen = set()
        self.clear_selection()
        for card in chosen:
            if card in seen:
                raise InvalidSelectionError(f"Card {card.label} chosen twice")
            if card not in self._cards:
                raise InvalidSelectionError(f"Card {card.label} is not in the opponent's hand")
            seen.add(card)
        for card in chosen:
            self._selected.append(self._cards.index(card))
        return chosen
