"""Shared fixtures for Word Wizard tests."""

from typing import Optional, Sequence, Union

import pytest

from tests.fakes import FakeClock, FakeSynonyms, RecordingTransport, ScriptedWordSource
from wordwizard import GameConfig, GameSession, LeaderboardService
from wordwizard.sources import SynonymSource, WordSource


@pytest.fixture
def game_config():
    """Rules with no delays, so transitions run as soon as the loop yields."""
    return GameConfig(win_delay=0, loss_delay=0)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def make_session(game_config, clock):
    """Factory for sessions wired to fakes."""

    def _make(
        words: Sequence[Union[str, Exception]] = ("planet",),
        synonyms: Optional[SynonymSource] = None,
        leaderboard: Optional[LeaderboardService] = None,
        **kwargs,
    ) -> GameSession:
        source = words if isinstance(words, WordSource) else ScriptedWordSource(words)
        return GameSession(
            source,
            synonyms or FakeSynonyms(),
            leaderboard,
            config=kwargs.pop("config", game_config),
            clock=kwargs.pop("clock", clock),
            **kwargs,
        )

    return _make
