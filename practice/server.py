from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from http import HTTPStatus
from pathlib import Path
from typing import Any, Dict, Optional

import websockets
from websockets.asyncio.server import ServerConnection, serve
from websockets.http11 import Request, Response

from core.cards import cards_to_labels
from core.game import GameEngine, Sleep
from core.models import GameConfig
from core.participants import DiscardStrategy, Participant
from practice.bots import baseline_discards

LOGGER = logging.getLogger("practice_host")

HIDDEN_CARD = "??"
HELLO_TIMEOUT = 5
STATIC_DIR = Path(__file__).parent / "static"


class PracticeServerError(Exception):
    def __init__(self, code: str, msg: str) -> None:
        super().__init__(msg)
        self.code = code
        self.msg = msg


def _config_payload(config: GameConfig) -> Dict[str, Any]:
    return {
        "variant": "FIVE_CARD_DRAW",
        "hand_size": config.hand_size,
        "pause_ms": int(config.pause_seconds * 1000),
    }


def _envelope(msg_type: str, payload: Dict[str, Any]) -> str:
    body: Dict[str, Any] = {"type": msg_type, "v": 1, "ts": datetime.now(timezone.utc).isoformat()}
    body.update(payload)
    return json.dumps(body)


def _decode(raw: Any) -> Dict[str, Any]:
    try:
        message = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return {}
    return message if isinstance(message, dict) else {}


@dataclass
class RemoteClient:
    name: str
    websocket: ServerConnection

    async def send_json(self, msg_type: str, payload: Dict[str, Any]) -> None:
        try:
            await self.websocket.send(_envelope(msg_type, payload))
        except websockets.ConnectionClosed:
            pass


# One PracticeSession per browser tab: its own engine, deck and house opponent.


class PracticeSession:
    """Bridges a connected browser to a GameEngine played against the house bot."""

    def __init__(
        self,
        config: GameConfig,
        remote: RemoteClient,
        strategy: DiscardStrategy = baseline_discards,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.remote = remote
        self.engine = GameEngine(
            config,
            opponent_strategy=strategy,
            render=self._on_render,
            notify=self._on_notify,
            sleep=sleep,
        )
        # Engine sinks are synchronous; frames wait here until the pump sends them.
        self.outbox: asyncio.Queue[tuple[str, Dict[str, Any]]] = asyncio.Queue()
        self.exchange_task: Optional[asyncio.Task] = None
        self._pump_task: Optional[asyncio.Task] = None

    async def run(self) -> None:
        await self.start()
        try:
            async for raw in self.remote.websocket:
                await self.handle_message(_decode(raw))
        except websockets.ConnectionClosed:
            pass
        finally:
            await self.close()

    async def start(self) -> None:
        self._pump_task = asyncio.create_task(self._pump())
        self.engine.initialize()

    async def close(self) -> None:
        if self.exchange_task and not self.exchange_task.done():
            self.exchange_task.cancel()
            try:
                await self.exchange_task
            except asyncio.CancelledError:
                pass
        if self._pump_task:
            await self.outbox.join()
            self._pump_task.cancel()
            try:
                await self._pump_task
            except asyncio.CancelledError:
                pass
            self._pump_task = None

    async def handle_message(self, message: Dict[str, Any]) -> None:
        try:
            msg_type = message.get("type")
            if msg_type == "select":
                self._handle_select(message)
            elif msg_type == "draw":
                self._handle_draw()
            elif msg_type == "replay":
                self._handle_replay()
            else:
                raise PracticeServerError("UNKNOWN_TYPE", "Unsupported message type")
        except PracticeServerError as exc:
            self._queue("error", {"code": exc.code, "msg": exc.msg})

    def _handle_select(self, message: Dict[str, Any]) -> None:
        index = message.get("index")
        if not isinstance(index, int) or isinstance(index, bool):
            raise PracticeServerError("BAD_INDEX", "index must be an integer")
        if not self.engine.is_running:
            raise PracticeServerError("NOT_RUNNING", "Cards can only be picked before drawing")
        try:
            self.engine.toggle_card(index)
        except IndexError:
            raise PracticeServerError("BAD_INDEX", f"No card at position {index}") from None

    def _handle_draw(self) -> None:
        if not self.engine.is_running or (self.exchange_task and not self.exchange_task.done()):
            raise PracticeServerError("NOT_RUNNING", "Draw is only available before the exchange")
        self.exchange_task = asyncio.create_task(self._run_exchange())

    def _handle_replay(self) -> None:
        if self.engine.is_running:
            raise PracticeServerError("ROUND_RUNNING", "Finish the current round before replaying")
        self.engine.replay()

    async def _run_exchange(self) -> None:
        try:
            await self.engine.start_exchange()
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("Exchange failed for %s: %s", self.remote.name, exc)
            self._queue("error", {"code": "ENGINE_ERROR", "msg": str(exc)})

    def _on_render(self, participant: Participant, reveal: bool) -> None:
        cards = cards_to_labels(participant.cards) if reveal else [HIDDEN_CARD] * len(participant.cards)
        self._queue("render", {
            "round_id": self.engine.round_id,
            "side": participant.side,
            "cards": cards,
            "revealed": reveal,
            "selected": list(participant.selected_indices) if reveal else [],
            "state": self.engine.state.value,
            "running": self.engine.is_running,
            "deck_size": self.engine.deck_size,
            "controls": self.engine.controls(),
        })

    def _on_notify(self, message: str) -> None:
        result = self.engine.result
        payload = result.to_payload() if result else {"message": message}
        payload["controls"] = self.engine.controls()
        self._queue("result", payload)

    def _queue(self, msg_type: str, payload: Dict[str, Any]) -> None:
        self.outbox.put_nowait((msg_type, payload))

    async def _pump(self) -> None:
        while True:
            msg_type, payload = await self.outbox.get()
            try:
                await self.remote.send_json(msg_type, payload)
            finally:
                self.outbox.task_done()


async def handle_connection(
    websocket: ServerConnection,
    config: GameConfig,
    strategy: DiscardStrategy = baseline_discards,
) -> None:
    # Browsers open with a hello; the name only shows up in logs.
    try:
        hello = _decode(await asyncio.wait_for(websocket.recv(), timeout=HELLO_TIMEOUT))
    except (asyncio.TimeoutError, websockets.ConnectionClosed):
        return
    if hello.get("type") != "hello":
        await RemoteClient("?", websocket).send_json("error", {"code": "BAD_HELLO", "msg": "Expected hello"})
        await websocket.close()
        return

    name_raw = hello.get("name")
    name = name_raw.strip() if isinstance(name_raw, str) else ""
    remote = RemoteClient(name=name or "GUEST", websocket=websocket)
    LOGGER.info("Practice player %s connected", remote.name)
    await remote.send_json("welcome", {"config": _config_payload(config)})

    session = PracticeSession(config, remote, strategy)
    try:
        await session.run()
    except Exception as exc:  # noqa: BLE001
        LOGGER.exception("Practice session crashed: %s", exc)
    LOGGER.info("Practice player %s disconnected", remote.name)


def _index_page() -> str:
    return (STATIC_DIR / "index.html").read_text(encoding="utf-8")


def _process_request(connection: ServerConnection, request: Request) -> Optional[Response]:
    """Serve the table page and a health check on the websocket port."""

    if request.headers.get("Upgrade", "").lower() == "websocket":
        return None  # let the WebSocket handshake continue

    if request.path in {"/health", "/healthz"}:
        return connection.respond(HTTPStatus.OK, "practice server running\n")
    if request.path in {"/", "/index.html"}:
        response = connection.respond(HTTPStatus.OK, _index_page())
        del response.headers["Content-Type"]
        response.headers["Content-Type"] = "text/html; charset=utf-8"
        return response
    return connection.respond(HTTPStatus.NOT_FOUND, "not found\n")


async def run_server(
    host: str,
    port: int,
    config: GameConfig,
    strategy: DiscardStrategy = baseline_discards,
) -> None:
    async def _handler(ws: ServerConnection) -> None:
        await handle_connection(ws, config, strategy)

    async with serve(_handler, host, port, process_request=_process_request):
        LOGGER.info("Practice server listening on http://%s:%s/", host, port)
        await asyncio.Future()
