#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import websockets
from websockets.asyncio.client import ClientConnection

logging.basicConfig(level=logging.INFO)

SUIT_SYMBOLS = {"s": "♠", "h": "♥", "d": "♦", "c": "♣"}

# ManualClient plays the practice table from a terminal instead of a browser.


def format_cards(cards: List[str], selected: Optional[List[int]] = None) -> str:
    chosen = set(selected or [])
    shown = []
    for idx, label in enumerate(cards):
        text = label if label == "??" else f"{label[0]}{SUIT_SYMBOLS.get(label[1], label[1])}"
        shown.append(f"[{text}]" if idx in chosen else f" {text} ")
    return " ".join(shown)


def parse_positions(raw: str, hand_size: int) -> Optional[List[int]]:
    """Turn '1 3 5' (1-based) into zero-based indices; None if the input is invalid."""
    positions: List[int] = []
    for token in raw.replace(",", " ").split():
        try:
            value = int(token)
        except ValueError:
            return None
        if not 1 <= value <= hand_size or value - 1 in positions:
            return None
        positions.append(value - 1)
    return positions


class ManualClient:
    def __init__(self, name: str, url: str) -> None:
        self.name = name
        self.url = url
        self.websocket: Optional[ClientConnection] = None
        self.hand_size = 5

    async def run(self) -> None:
        async with websockets.connect(self.url) as ws:
            self.websocket = ws
            await self._send({"type": "hello", "v": 1, "name": self.name})
            await self._loop()

    async def _loop(self) -> None:
        assert self.websocket is not None
        while True:
            raw = await self.websocket.recv()
            msg = json.loads(raw)
            msg_type = msg.get("type")
            self._print_message(msg)

            # The opponent's render closes every view update, so prompt after it.
            if msg_type == "render" and msg.get("side") == "com" and msg.get("running"):
                await self._handle_turn()
            elif msg_type == "result":
                if not self._prompt_replay():
                    print("Thanks for playing.")
                    break
                await self._send({"type": "replay"})

    async def _handle_turn(self) -> None:
        while True:
            raw = input(f"Cards to exchange (1-{self.hand_size}, blank to stand pat): ")
            positions = parse_positions(raw, self.hand_size)
            if positions is not None:
                break
            print("Enter distinct card positions separated by spaces.")
        for index in positions:
            await self._send({"type": "select", "index": index})
        await self._send({"type": "draw"})

    def _prompt_replay(self) -> bool:
        choice = input("Play again? [Y/n]: ").strip().lower()
        return choice in ("", "y", "yes")

    def _print_message(self, msg: Dict[str, Any]) -> None:
        msg_type = msg.get("type")
        if msg_type == "welcome":
            config = msg.get("config", {})
            self.hand_size = config.get("hand_size", self.hand_size)
            print(f"Connected: {json.dumps(config)}")
        elif msg_type == "render":
            side = str(msg.get("side", "?")).upper()
            print(f"{side:>4}: {format_cards(msg.get('cards', []), msg.get('selected'))}  (deck {msg.get('deck_size')})")
        elif msg_type == "result":
            print("\n" + msg.get("message", ""))
        elif msg_type == "error":
            print(f"Error {msg.get('code')}: {msg.get('msg')}")

    async def _send(self, payload: Dict[str, Any]) -> None:
        assert self.websocket is not None
        await self.websocket.send(json.dumps(payload))


def main() -> None:
    parser = argparse.ArgumentParser(description="Play five-card draw against the house from the terminal")
    parser.add_argument("--url", default="ws://127.0.0.1:8770/")
    parser.add_argument("--name", default="terminal")
    args = parser.parse_args()
    try:
        asyncio.run(ManualClient(args.name, args.url).run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
