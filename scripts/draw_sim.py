#!/usr/bin/env python3
"""Play many draw rounds offline and check the deck never gains or loses a card.

Both seats are driven by bot strategies and the pauses are skipped, so this
exercises deal, exchange and judgement at full speed.

Example:
    python scripts/draw_sim.py --rounds 500 --you baseline --com random
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from collections import Counter
from typing import Sequence

from core.cards import DECK_SIZE, Card
from core.game import GameEngine
from core.models import GameConfig, Outcome
from practice.bots import BOT_STRATEGIES

LOGGER = logging.getLogger("draw_sim")


async def _no_pause(_: float) -> None:
    return None


def check_integrity(engine: GameEngine) -> None:
    ids = sorted(card.id for card in engine.deck_cards + engine.player_cards + engine.opponent_cards)
    if ids != list(range(1, DECK_SIZE + 1)):
        raise AssertionError(f"Deck integrity broken in {engine.round_id}: {ids}")


def _select_for_player(engine: GameEngine, discards: Sequence[Card]) -> None:
    hand = engine.player_cards
    for card in discards:
        engine.toggle_card(hand.index(card))


async def run_simulation(args: argparse.Namespace) -> Counter:
    engine = GameEngine(
        GameConfig(shuffle_swaps=args.swaps, pause_seconds=0, seed=args.seed),
        opponent_strategy=BOT_STRATEGIES[args.com],
        sleep=_no_pause,
    )
    player_strategy = BOT_STRATEGIES[args.you]
    tally: Counter = Counter()
    categories: Counter = Counter()

    for idx in range(args.rounds):
        engine.replay()
        check_integrity(engine)
        _select_for_player(engine, player_strategy(engine.player_cards))
        result = await engine.start_exchange()
        assert result is not None
        check_integrity(engine)
        tally[result.outcome] += 1
        categories[result.you.label] += 1
        if (idx + 1) % 100 == 0:
            LOGGER.info("Played %s rounds", idx + 1)

    LOGGER.info(
        "Results: win=%s lose=%s draw=%s",
        tally[Outcome.WIN],
        tally[Outcome.LOSE],
        tally[Outcome.DRAW],
    )
    for label, count in categories.most_common():
        LOGGER.info("  %-16s %s", label, count)
    return tally


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate five-card draw rounds between two bots")
    parser.add_argument("--rounds", type=int, default=1_000)
    parser.add_argument("--you", choices=sorted(BOT_STRATEGIES), default="baseline")
    parser.add_argument("--com", choices=sorted(BOT_STRATEGIES), default="baseline")
    parser.add_argument("--swaps", type=int, default=100)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    try:
        asyncio.run(run_simulation(args))
    except KeyboardInterrupt:
        LOGGER.info("Simulation interrupted; shutting down")


if __name__ == "__main__":
    main()
