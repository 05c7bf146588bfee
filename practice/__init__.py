"""Practice table: a browser player against the house draw bot."""

from .bots import BOT_STRATEGIES, baseline_discards, random_discards
from .server import PracticeSession, run_server

__all__ = ["BOT_STRATEGIES", "baseline_discards", "random_discards", "PracticeSession", "run_server"]
