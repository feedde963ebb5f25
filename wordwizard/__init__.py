"""
Word Wizard game engine.

A single-player word-guessing session with a points-based hint economy
and a remote leaderboard.
"""

from .codec import LeaderboardEntry, decode, encode_submission
from .config import GameConfig
from .leaderboard import LeaderboardService
from .session import GameSession, GuessResult, Hint, Phase
from .sources import LeaderboardTransport, SynonymSource, WordSource

__all__ = [
    "GameConfig",
    "GameSession",
    "GuessResult",
    "Hint",
    "Phase",
    "LeaderboardEntry",
    "LeaderboardService",
    "decode",
    "encode_submission",
    "WordSource",
    "SynonymSource",
    "LeaderboardTransport",
]
