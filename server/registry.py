from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Dict, Optional

from wordwizard import GameConfig, GameSession, LeaderboardService
from wordwizard.exceptions import SessionNotFoundError
from wordwizard.sources import SynonymSource, WordSource

logger = logging.getLogger(__name__)


class SessionRegistry:
    """In-memory registry of live game sessions.

    The word, synonym and leaderboard collaborators are shared by every
    session; each session owns its own state and tasks.
    """

    def __init__(
        self,
        words: WordSource,
        synonyms: SynonymSource,
        leaderboard: Optional[LeaderboardService] = None,
        config: Optional[GameConfig] = None,
    ):
        self.words = words
        self.synonyms = synonyms
        self.leaderboard = leaderboard
        self.config = config or GameConfig()
        self._sessions: Dict[str, GameSession] = {}
        self._lock = asyncio.Lock()

    async def create_session(self, player_name: Optional[str] = None) -> tuple[str, GameSession]:
        """Create a session and start its first game (the word fetch runs in the background)."""
        session_id = uuid.uuid4().hex[:12]
        session = GameSession(
            self.words,
            self.synonyms,
            self.leaderboard,
            player_name=player_name,
            config=self.config,
        )
        async with self._lock:
            self._sessions[session_id] = session
        session.start_new_game()
        logger.info(f"Created session {session_id} for {session.player_name}")
        return session_id, session

    async def get(self, session_id: str) -> GameSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    async def close(self, session_id: str) -> bool:
        async with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        await session.aclose()
        return True

    async def close_all(self) -> None:
        async with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            await session.aclose()

    def __len__(self) -> int:
        return len(self._sessions)
