"""Base classes for the collaborators a game session talks to."""

import logging
from abc import ABC, abstractmethod
from typing import List

from wordwizard.exceptions import WordUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORD_ATTEMPTS = 50


class WordSource(ABC):
    """
    Abstract source of random secret words.

    Implementations must provide `fetch_random_word`; failures are reported
    by raising `TransportError`.
    """

    @abstractmethod
    async def fetch_random_word(self) -> str:
        """
        Fetch one random word.

        Returns:
            The candidate word, in whatever case the source uses.
        """

    async def fetch_random_word_with_min_length(
        self,
        min_length: int,
        max_attempts: int = DEFAULT_MAX_WORD_ATTEMPTS,
    ) -> str:
        """
        Fetch random words until one has at least `min_length` letters.

        Too-short words are not errors, they just cost another request.
        Transport failures propagate immediately.

        Args:
            min_length: Minimum accepted word length.
            max_attempts: How many words to try before giving up.

        Returns:
            The first word long enough.

        Raises:
            WordUnavailableError: if `max_attempts` words were all too short.
        """
        for attempt in range(1, max_attempts + 1):
            word = await self.fetch_random_word()
            if len(word.strip()) >= min_length:
                return word
            logger.debug(
                "Word too short (%d < %d), attempt %d/%d",
                len(word.strip()), min_length, attempt, max_attempts,
            )
        raise WordUnavailableError(min_length, max_attempts)


class SynonymSource(ABC):
    """Abstract thesaurus used for hints."""

    @abstractmethod
    async def fetch_synonyms(self, word: str) -> List[str]:
        """Return synonyms for `word`, most relevant first (may be empty)."""


class NoSynonyms(SynonymSource):
    """Used when no thesaurus is configured; every hint falls back to letters."""

    async def fetch_synonyms(self, word: str) -> List[str]:
        return []


class LeaderboardTransport(ABC):
    """Abstract carrier for leaderboard submissions and reads."""

    @abstractmethod
    async def submit(self, payload: str) -> None:
        """Send an encoded submission (see `codec.encode_submission`)."""

    @abstractmethod
    async def fetch(self, limit: int) -> str:
        """Fetch the raw pipe-format body for the top `limit` entries."""
