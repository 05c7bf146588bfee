"""Five-card draw primitives shared by the practice server and scripts."""

from .cards import Card, Deck, DeckUnderflowError, build_deck, parse_cards, parse_label, shuffle_cards
from .evaluator import decide_outcome, judge_hand
from .game import GameEngine, RoundContext, stand_pat
from .models import GameConfig, GameState, HandResult, Outcome, RoundResult
from .participants import InvalidSelectionError, Opponent, Participant, Player

__all__ = [
    "Card",
    "Deck",
    "DeckUnderflowError",
    "build_deck",
    "parse_cards",
    "parse_label",
    "shuffle_cards",
    "decide_outcome",
    "judge_hand",
    "GameEngine",
    "RoundContext",
    "stand_pat",
    "GameConfig",
    "GameState",
    "HandResult",
    "Outcome",
    "RoundResult",
    "InvalidSelectionError",
    "Opponent",
    "Participant",
    "Player",
]
