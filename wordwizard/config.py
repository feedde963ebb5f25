"""
Game configuration settings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from wordwizard.settings import AppSettings


@dataclass
class GameConfig:
    """Configuration for a Word Wizard session."""

    starting_score: int = 100
    max_attempts: int = 10

    wrong_guess_penalty: int = 10
    assist_cost: int = 5

    hint_unlock_wrong_guesses: int = 5

    # Next level asks for words of at least base_min_word_length + level letters
    base_min_word_length: int = 3
    max_word_fetch_attempts: int = 50

    # Seconds
    win_delay: float = 2.0
    loss_delay: float = 3.0

    default_player_name: str = "Player"

    # Oldest session events are dropped beyond this many; None keeps all
    event_log_limit: Optional[int] = None

    @classmethod
    def from_settings(cls, settings: "AppSettings") -> "GameConfig":
        """Build a config from environment-backed application settings."""
        return cls(
            win_delay=settings.win_delay_seconds,
            loss_delay=settings.loss_delay_seconds,
            max_word_fetch_attempts=settings.max_word_fetch_attempts,
            default_player_name=settings.player_name,
            event_log_limit=settings.event_log_limit,
        )
