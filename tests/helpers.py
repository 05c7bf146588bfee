from __future__ import annotations

import asyncio
from typing import Callable, List, Optional, Tuple

from core.cards import DECK_SIZE
from core.evaluator import judge_hand
from core.game import GameEngine, RoundContext, stand_pat
from core.models import GameConfig, RoundResult
from core.participants import DiscardStrategy, Participant


class PauseRecorder:
    """Stands in for asyncio.sleep and remembers every pause requested."""

    def __init__(self, log: Optional[List[tuple]] = None) -> None:
        self.delays: List[float] = []
        self.log = log if log is not None else []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        self.log.append(("pause", delay))


class RenderRecorder:
    def __init__(self, log: Optional[List[tuple]] = None) -> None:
        self.frames: List[Tuple[str, bool, Tuple[int, ...]]] = []
        self.log = log if log is not None else []

    def __call__(self, participant: Participant, reveal: bool) -> None:
        ids = tuple(card.id for card in participant.cards)
        self.frames.append((participant.side, reveal, ids))
        self.log.append(("render", participant.side, reveal))


def create_engine(
    *,
    swaps: int = 100,
    strategy: DiscardStrategy = stand_pat,
    judge: Callable = judge_hand,
    render: Optional[Callable] = None,
    notify: Optional[Callable] = None,
    sleep: Optional[Callable] = None,
) -> GameEngine:
    """Engine with instant pauses unless a custom sleep is supplied."""
    return GameEngine(
        GameConfig(shuffle_swaps=swaps, pause_seconds=1.0),
        judge=judge,
        opponent_strategy=strategy,
        render=render,
        notify=notify,
        sleep=sleep or PauseRecorder(),
    )


def start_round(engine: GameEngine, seed: int = 42) -> RoundContext:
    ctx = engine.initialize(seed=seed)
    assert ctx is not None
    return ctx


def run_exchange(engine: GameEngine) -> Optional[RoundResult]:
    return asyncio.run(engine.start_exchange())


def all_card_ids(engine: GameEngine) -> List[int]:
    return sorted(card.id for card in engine.deck_cards + engine.player_cards + engine.opponent_cards)


def full_deck_ids() -> List[int]:
    return list(range(1, DECK_SIZE + 1))
