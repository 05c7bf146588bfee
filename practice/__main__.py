import argparse
import asyncio
import logging
import os

from core.models import GameConfig
from .bots import BOT_STRATEGIES
from .server import run_server


def main() -> None:
    parser = argparse.ArgumentParser(description="Five-card draw practice server (browser vs house bot)")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8770)
    parser.add_argument("--pause-ms", type=int, default=1_000, help="Pause between opponent steps in milliseconds")
    parser.add_argument("--swaps", type=int, default=100, help="Random swaps per shuffle")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible deals")
    parser.add_argument("--bot", choices=sorted(BOT_STRATEGIES), default="baseline")
    parser.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "INFO"))
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    config = GameConfig(
        shuffle_swaps=args.swaps,
        pause_seconds=args.pause_ms / 1000,
        seed=args.seed,
    )
    asyncio.run(run_server(args.host, args.port, config, BOT_STRATEGIES[args.bot]))


if __name__ == "__main__":
    main()
