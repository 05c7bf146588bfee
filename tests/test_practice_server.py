import asyncio
import json
from http import HTTPStatus

from websockets.datastructures import Headers
from websockets.http11 import Request, Response

from core.game import stand_pat
from core.models import GameConfig
from practice.server import PracticeSession, RemoteClient, _process_request, handle_connection


# Fake sockets so we can exercise async paths without opening real connections.
class DummyWebSocket:
    def __init__(self, incoming=None) -> None:
        self.incoming = list(incoming or [])
        self.sent: list[str] = []
        self.closed = False

    async def send(self, message: str) -> None:
        self.sent.append(message)

    async def recv(self) -> str:
        return self.incoming.pop(0)

    async def close(self, *args, **kwargs) -> None:
        self.closed = True

    def __aiter__(self):
        return self

    async def __anext__(self) -> str:
        if not self.incoming:
            raise StopAsyncIteration
        return self.incoming.pop(0)


class FakeConnection:
    def respond(self, status: HTTPStatus, text: str) -> Response:
        headers = Headers([("Content-Type", "text/plain; charset=utf-8")])
        return Response(status.value, status.phrase, headers, text.encode())


async def no_pause(_: float) -> None:
    return None


def make_session(strategy=stand_pat, sleep=no_pause):
    ws = DummyWebSocket()
    config = GameConfig(shuffle_swaps=0, pause_seconds=0)
    session = PracticeSession(config, RemoteClient("tester", ws), strategy=strategy, sleep=sleep)
    return session, ws


def frames(ws: DummyWebSocket) -> list[dict]:
    return [json.loads(raw) for raw in ws.sent]


def play(*messages, wait_exchange=True):
    """Start a session, feed it messages and return every frame it sent."""

    async def scenario():
        session, ws = make_session()
        await session.start()
        for message in messages:
            await session.handle_message(message)
            if wait_exchange and session.exchange_task:
                await session.exchange_task
        await session.close()
        return frames(ws)

    return asyncio.run(scenario())


def test_start_renders_player_hand_and_hides_opponent():
    sent = play()
    assert [frame["side"] for frame in sent] == ["you", "com"]
    you, com = sent
    assert you["cards"] == ["Kc", "Qc", "Jc", "Tc", "9c"]
    assert com["cards"] == ["??"] * 5
    assert com["revealed"] is False
    assert you["controls"] == {"draw": True, "replay": False}
    assert you["deck_size"] == 42
    assert all(frame["v"] == 1 and "ts" in frame for frame in sent)


def test_select_rerenders_player_with_marks():
    sent = play({"type": "select", "index": 3}, {"type": "select", "index": 1})
    assert sent[-1]["side"] == "you"
    assert sent[-1]["selected"] == [3, 1]


def test_draw_runs_exchange_and_reports_result():
    sent = play({"type": "draw"})
    types = [frame["type"] for frame in sent]
    assert types == ["render"] * 6 + ["result"]

    hidden_com = sent[3]
    assert hidden_com["side"] == "com"
    assert hidden_com["cards"] == ["??"] * 5
    assert hidden_com["state"] == "EXCHANGING"
    assert hidden_com["controls"] == {"draw": False, "replay": True}

    revealed_com = sent[5]
    assert revealed_com["cards"] == ["8c", "7c", "6c", "5c", "4c"]

    result = sent[-1]
    assert result["outcome"] == "WIN"
    assert result["message"] == "(YOU) Straight Flush vs (COM) Straight Flush\nYou win"
    assert result["you"]["strength"] == 8
    assert result["controls"] == {"draw": False, "replay": True}


def test_exchanging_a_card_changes_outcome():
    sent = play({"type": "select", "index": 0}, {"type": "draw"})
    result = sent[-1]
    assert result["you"]["cards"] == ["3c", "Qc", "Jc", "Tc", "9c"]
    assert result["you"]["label"] == "Flush"
    assert result["outcome"] == "LOSE"


def test_replay_only_after_round_stops():
    sent = play({"type": "replay"})
    assert sent[-1]["type"] == "error"
    assert sent[-1]["code"] == "ROUND_RUNNING"

    sent = play({"type": "draw"}, {"type": "replay"})
    assert [frame["side"] for frame in sent[-2:]] == ["you", "com"]
    assert sent[-1]["running"] is True
    assert sent[-1]["round_id"] != sent[0]["round_id"]


def test_draw_and_select_rejected_after_draw():
    sent = play({"type": "draw"}, {"type": "draw"}, {"type": "select", "index": 0})
    errors = [frame for frame in sent if frame["type"] == "error"]
    assert [error["code"] for error in errors] == ["NOT_RUNNING", "NOT_RUNNING"]


def test_second_draw_before_exchange_starts_is_rejected():
    async def scenario():
        session, ws = make_session()
        await session.start()
        await session.handle_message({"type": "draw"})
        first = session.exchange_task
        await session.handle_message({"type": "draw"})
        assert session.exchange_task is first
        await first
        await session.close()
        return frames(ws)

    sent = asyncio.run(scenario())
    errors = [frame["code"] for frame in sent if frame["type"] == "error"]
    assert errors == ["NOT_RUNNING"]
    assert [frame["type"] for frame in sent].count("result") == 1


def test_close_cancels_exchange_in_progress():
    async def blocking_sleep(_: float) -> None:
        await asyncio.Event().wait()

    async def scenario():
        session, ws = make_session(sleep=blocking_sleep)
        await session.start()
        await session.handle_message({"type": "draw"})
        task = session.exchange_task
        await asyncio.sleep(0)
        assert session.engine.state.value == "EXCHANGING"
        await session.close()
        return task, frames(ws)

    task, sent = asyncio.run(scenario())
    assert task.cancelled()
    assert "result" not in [frame["type"] for frame in sent]
    assert sent[-1]["side"] == "com"
    assert sent[-1]["state"] == "EXCHANGING"


def test_bad_messages_get_error_codes():
    sent = play(
        {"type": "select", "index": "first"},
        {"type": "select", "index": 9},
        {"type": "select", "index": True},
        {"type": "shuffle"},
    )
    errors = [frame["code"] for frame in sent if frame["type"] == "error"]
    assert errors == ["BAD_INDEX", "BAD_INDEX", "BAD_INDEX", "UNKNOWN_TYPE"]


def test_handle_connection_requires_hello():
    ws = DummyWebSocket([json.dumps({"type": "draw"})])
    asyncio.run(handle_connection(ws, GameConfig(pause_seconds=0)))
    payload = json.loads(ws.sent[-1])
    assert payload["type"] == "error"
    assert payload["code"] == "BAD_HELLO"
    assert ws.closed


def test_handle_connection_welcomes_and_deals():
    ws = DummyWebSocket([
        json.dumps({"type": "hello", "name": "Alice"}),
        json.dumps({"type": "select", "index": 2}),
        "not json",
    ])
    asyncio.run(handle_connection(ws, GameConfig(pause_seconds=0)))
    sent = frames(ws)
    assert sent[0]["type"] == "welcome"
    assert sent[0]["config"]["hand_size"] == 5
    assert [frame["type"] for frame in sent[1:]] == ["render", "render", "render", "error"]
    assert sent[3]["selected"] == [2]
    assert sent[4]["code"] == "UNKNOWN_TYPE"


def test_http_requests_get_page_or_health():
    connection = FakeConnection()

    page = _process_request(connection, Request("/", Headers()))
    assert page.status_code == 200
    assert page.headers["Content-Type"] == "text/html; charset=utf-8"
    assert b"Five-Card Draw" in page.body

    health = _process_request(connection, Request("/healthz", Headers()))
    assert health.status_code == 200

    missing = _process_request(connection, Request("/nope", Headers()))
    assert missing.status_code == 404

    upgrade = _process_request(connection, Request("/", Headers([("Upgrade", "websocket")])))
    assert upgrade is None
