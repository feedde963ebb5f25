"""
LeaderboardService glues the line-protocol codec to a transport.
"""

from __future__ import annotations

import logging
from typing import List

from wordwizard.codec import DEFAULT_NAME, LeaderboardEntry, decode, encode_submission
from wordwizard.sources import LeaderboardTransport

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 25


class LeaderboardService:
    """Use-case service for submitting and reading leaderboard scores."""

    def __init__(self, transport: LeaderboardTransport, default_name: str = DEFAULT_NAME):
        self.transport = transport
        self.default_name = default_name

    async def submit_score(self, name: str, score: int, seconds: int, level: int) -> str:
        """Encode and send a score; returns the payload that was sent."""
        payload = encode_submission(name, score, seconds, level, default_name=self.default_name)
        await self.transport.submit(payload)
        logger.info(f"Submitted score {score} at level {level} ({seconds}s)")
        return payload

    async def top_scores(self, limit: int = DEFAULT_LIMIT) -> List[LeaderboardEntry]:
        """Fetch and decode the top `limit` entries."""
        raw = await self.transport.fetch(limit)
        return decode(raw)
