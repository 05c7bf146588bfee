from __future__ import annotations

import asyncio
import logging
import random
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from .cards import Card, Deck, build_deck, cards_to_labels
from .evaluator import decide_outcome, describe_result, judge_hand
from .models import GameConfig, GameState, HandResult, RoundResult
from .participants import DiscardStrategy, Opponent, Participant, Player

LOGGER = logging.getLogger("draw_engine")

# GameEngine owns the deck and both hands. Drawing, rendering and result
# display happen through the injected sinks; nothing here touches a socket.

Judge = Callable[[Tuple[Card, ...]], HandResult]
RenderSink = Callable[[Participant, bool], None]
NotifySink = Callable[[str], None]
Sleep = Callable[[float], Awaitable[None]]


def stand_pat(cards: Sequence[Card]) -> List[Card]:
    return []


@dataclass
class RoundContext:
    # Everything that belongs to one deal; replay throws the whole object away.
    round_id: str
    seed: int
    deck: Deck
    player: Player
    opponent: Opponent
    state: GameState = GameState.IDLE
    result: Optional[RoundResult] = None


class GameEngine:
    """Five-card draw, one human against one scripted opponent."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        *,
        judge: Judge = judge_hand,
        opponent_strategy: DiscardStrategy = stand_pat,
        render: Optional[RenderSink] = None,
        notify: Optional[NotifySink] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.config = config or GameConfig()
        self._judge = judge
        self._opponent_strategy = opponent_strategy
        self._render = render
        self._notify = notify
        self._sleep = sleep
        self._seed_source = random.Random(self.config.seed) if self.config.seed is not None else None
        self._round_counter = 0
        self._round: Optional[RoundContext] = None

    # Read-only views -------------------------------------------------

    @property
    def state(self) -> GameState:
        return self._round.state if self._round else GameState.IDLE

    @property
    def is_running(self) -> bool:
        return self.state == GameState.ACTIVE

    @property
    def round_id(self) -> Optional[str]:
        return self._round.round_id if self._round else None

    @property
    def seed(self) -> Optional[int]:
        return self._round.seed if self._round else None

    @property
    def result(self) -> Optional[RoundResult]:
        return self._round.result if self._round else None

    @property
    def deck_size(self) -> int:
        return len(self._require_round().deck)

    @property
    def deck_cards(self) -> Tuple[Card, ...]:
        return self._require_round().deck.cards

    @property
    def player_cards(self) -> Tuple[Card, ...]:
        return self._require_round().player.cards

    @property
    def opponent_cards(self) -> Tuple[Card, ...]:
        return self._require_round().opponent.cards

    @property
    def player_selection(self) -> Tuple[int, ...]:
        return self._require_round().player.selected_indices

    def controls(self) -> Dict[str, bool]:
        running = self.is_running
        return {"draw": running, "replay": not running}

    def _require_round(self) -> RoundContext:
        if self._round is None:
            raise RuntimeError("Round not started")
        return self._round

    # Round lifecycle -------------------------------------------------

    def initialize(self, seed: Optional[int] = None) -> RoundContext:
        if seed is None:
            seed = self._next_seed()

        deck = Deck(build_deck())
        deck.shuffle(random.Random(seed), self.config.shuffle_swaps)

        round_id = f"R-{time.strftime('%Y%m%d')}-{self._round_counter:05d}"
        self._round_counter += 1

        ctx = RoundContext(
            round_id=round_id,
            seed=seed,
            deck=deck,
            player=Player(),
            opponent=Opponent(self._opponent_strategy),
        )
        self._deal(ctx, ctx.player, self.config.hand_size)
        self._deal(ctx, ctx.opponent, self.config.hand_size)
        ctx.state = GameState.ACTIVE
        self._round = ctx
        LOGGER.debug("Round %s dealt (seed=%s, deck=%s)", round_id, seed, len(deck))

        self._update_view()
        return ctx

    def replay(self, seed: Optional[int] = None) -> RoundContext:
        if self._round and self._round.state == GameState.EXCHANGING:
            LOGGER.debug("Replay requested during exchange of %s", self._round.round_id)
        return self.initialize(seed)

    def _next_seed(self) -> int:
        if self._seed_source is not None:
            return self._seed_source.getrandbits(32)
        return int(time.time() * 1000) & 0xFFFFFFFF

    def _deal(self, ctx: RoundContext, participant: Participant, count: int) -> None:
        for card in ctx.deck.deal(count):
            participant.add_card(card)

    # Player input ----------------------------------------------------

    def toggle_card(self, index: int) -> Optional[bool]:
        """Mark or unmark one of the player's cards. Ignored unless the round is running."""
        if not self.is_running:
            return None
        assert self._round is not None
        selected = self._round.player.toggle(index)
        self._render_participant(self._round.player, True)
        return selected

    async def start_exchange(self) -> Optional[RoundResult]:
        if not self.is_running:
            LOGGER.debug("Draw ignored: round is not running (state=%s)", self.state.value)
            return None
        ctx = self._round
        assert ctx is not None

        self._exchange(ctx, ctx.player)
        ctx.state = GameState.EXCHANGING
        # The opponent stays face down until it has drawn too.
        self._update_view(reveal_opponent=False)

        await self._sleep(self.config.pause_seconds)
        if self._round is not ctx:
            return self._abandon(ctx)
        ctx.opponent.choose_discards()

        await self._sleep(self.config.pause_seconds)
        if self._round is not ctx:
            return self._abandon(ctx)
        self._exchange(ctx, ctx.opponent)
        self._update_view()

        await self._sleep(self.config.pause_seconds)
        if self._round is not ctx:
            return self._abandon(ctx)
        return self._judgement(ctx)

    def _exchange(self, ctx: RoundContext, participant: Participant) -> None:
        count = len(participant.marked_for_exchange())
        for _ in range(count):
            # One card leaves the top and the discard goes under the bottom.
            drawn = ctx.deck.take_top()
            ctx.deck.return_to_bottom(participant.draw_card(drawn))
        LOGGER.debug("Round %s: %s exchanged %s card(s)", ctx.round_id, participant.side, count)

    def _abandon(self, ctx: RoundContext) -> Optional[RoundResult]:
        LOGGER.debug("Exchange for %s abandoned after replay", ctx.round_id)
        return None

    def _judgement(self, ctx: RoundContext) -> RoundResult:
        you = self._judge(ctx.player.cards)
        com = self._judge(ctx.opponent.cards)
        outcome = decide_outcome(you, com)
        result = RoundResult(
            round_id=ctx.round_id,
            you=you,
            com=com,
            outcome=outcome,
            message=describe_result(you, com, outcome),
            you_cards=cards_to_labels(ctx.player.cards),
            com_cards=cards_to_labels(ctx.opponent.cards),
        )
        ctx.result = result
        ctx.state = GameState.FINISHED
        LOGGER.info("Round %s: %s vs %s -> %s", ctx.round_id, you.label, com.label, outcome.value)
        if self._notify:
            self._notify(result.message)
        return result

    # Rendering -------------------------------------------------------

    def _update_view(self, reveal_opponent: Optional[bool] = None) -> None:
        ctx = self._require_round()
        if reveal_opponent is None:
            reveal_opponent = not self.is_running
        self._render_participant(ctx.player, True)
        self._render_participant(ctx.opponent, reveal_opponent)

    def _render_participant(self, participant: Participant, reveal: bool) -> None:
        if self._render:
            self._render(participant, reveal)
