from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from .cards import Card
from .models import HandResult, Outcome

HAND_LABELS = (
    "High Card",
    "One Pair",
    "Two Pair",
    "Three of a Kind",
    "Straight",
    "Flush",
    "Full House",
    "Four of a Kind",
    "Straight Flush",
)

OUTCOME_MESSAGES = {
    Outcome.WIN: "You win",
    Outcome.LOSE: "You lose",
    Outcome.DRAW: "It's a draw",
}

_RANK_BASE = 15


def card_value(card: Card) -> int:
    # Aces play high; the wheel straight is handled separately.
    return 14 if card.rank == 1 else card.rank


def judge_hand(cards: Sequence[Card]) -> HandResult:
    """Classify a five-card hand. Higher strength wins, rank breaks ties."""
    if len(cards) != 5:
        raise ValueError(f"Expected 5 cards, got {len(cards)}")
    strength, kickers = _evaluate_five(cards)
    return HandResult(label=HAND_LABELS[strength], strength=strength, rank=_pack(kickers))


def decide_outcome(you: HandResult, com: HandResult) -> Outcome:
    if you.strength != com.strength:
        return Outcome.WIN if you.strength > com.strength else Outcome.LOSE
    if you.rank != com.rank:
        return Outcome.WIN if you.rank > com.rank else Outcome.LOSE
    return Outcome.DRAW


def describe_result(you: HandResult, com: HandResult, outcome: Outcome) -> str:
    return f"(YOU) {you.label} vs (COM) {com.label}\n{OUTCOME_MESSAGES[outcome]}"


def _pack(kickers: List[int]) -> int:
    value = 0
    for kicker in kickers:
        value = value * _RANK_BASE + kicker
    # Shorter kicker lists are padded so every category packs to the same width.
    for _ in range(5 - len(kickers)):
        value *= _RANK_BASE
    return value


def _evaluate_five(cards: Sequence[Card]) -> Tuple[int, List[int]]:
    ranks = sorted((card_value(card) for card in cards), reverse=True)
    suits = [card.suit for card in cards]

    is_flush = len(set(suits)) == 1
    straight_high = _straight_high(ranks)

    counts: Dict[int, int] = {}
    for value in ranks:
        counts.setdefault(value, 0)
        counts[value] += 1

    ordered_counts = sorted(counts.items(), key=lambda x: (x[1], x[0]), reverse=True)
    count_values = [count for _, count in ordered_counts]
    grouped = [value for value, _ in ordered_counts]

    if straight_high and is_flush:
        return 8, [straight_high]
    if count_values[0] == 4:
        return 7, grouped
    if count_values[0] == 3 and count_values[1] == 2:
        return 6, grouped
    if is_flush:
        return 5, ranks
    if straight_high:
        return 4, [straight_high]
    if count_values[0] == 3:
        return 3, grouped
    if count_values[0] == 2 and count_values[1] == 2:
        return 2, grouped
    if count_values[0] == 2:
        return 1, grouped
    return 0, ranks


def _straight_high(ranks: List[int]) -> Optional[int]:
    unique = sorted(set(ranks))
    if len(unique) != 5:
        return None
    if unique[-1] - unique[0] == 4:
        return unique[-1]
    if unique == [2, 3, 4, 5, 14]:  # wheel
        return 5
    return None
