from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class GameState(str, Enum):
    IDLE = "IDLE"
    ACTIVE = "ACTIVE"
    EXCHANGING = "EXCHANGING"
    FINISHED = "FINISHED"


class Outcome(str, Enum):
    # Always from the human player's point of view.
    WIN = "WIN"
    LOSE = "LOSE"
    DRAW = "DRAW"


@dataclass
class GameConfig:
    hand_size: int = 5
    shuffle_swaps: int = 100
    pause_seconds: float = 1.0
    seed: Optional[int] = None


@dataclass(frozen=True)
class HandResult:
    label: str
    strength: int
    rank: int

    def to_payload(self) -> Dict[str, object]:
        return {"label": self.label, "strength": self.strength, "rank": self.rank}


@dataclass
class RoundResult:
    round_id: str
    you: HandResult
    com: HandResult
    outcome: Outcome
    message: str
    you_cards: List[str] = field(default_factory=list)
    com_cards: List[str] = field(default_factory=list)

    def to_payload(self) -> Dict[str, object]:
        return {
            "round_id": self.round_id,
            "outcome": self.outcome.value,
            "message": self.message,
            "you": {**self.you.to_payload(), "cards": list(self.you_cards)},
            "com": {**self.com.to_payload(), "cards": list(self.com_cards)},
        }
