"""HTTP collaborators: random words, thesaurus hints, and the Dreamlo leaderboard."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from wordwizard.exceptions import ConfigurationError, TransportError
from wordwizard.settings import LeaderboardSettings, WordApiSettings
from wordwizard.sources import LeaderboardTransport, SynonymSource, WordSource

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class _HttpCollaborator:
    """
    Shared GET plumbing for the API clients.

    An `httpx.AsyncClient` may be injected (tests pass one backed by
    `httpx.MockTransport`); otherwise one is created lazily and owned by
    this object until `aclose()`.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self._client = client
        self._owns_client = client is None
        self.timeout = timeout

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def _get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        failure: str = "API request failed",
    ) -> httpx.Response:
        try:
            response = await self._get_client().get(url, params=params, headers=headers)
        except httpx.HTTPError as e:
            raise TransportError(f"Network error: {e}") from e
        if not response.is_success:
            raise TransportError(failure, status_code=response.status_code)
        return response

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None


class RandomWordClient(_HttpCollaborator, WordSource):
    """Word source backed by an endpoint returning a JSON array of words."""

    def __init__(self, url: str, client: Optional[httpx.AsyncClient] = None, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        super().__init__(client, timeout)
        self.url = url

    @classmethod
    def from_settings(cls, settings: WordApiSettings, client: Optional[httpx.AsyncClient] = None) -> "RandomWordClient":
        return cls(settings.word_url, client=client, timeout=settings.timeout_seconds)

    async def fetch_random_word(self) -> str:
        response = await self._get(self.url)
        try:
            words = response.json()
        except ValueError as e:
            raise TransportError("Malformed word response") from e
        word = words[0] if isinstance(words, list) and words else None
        if not isinstance(word, str) or not word.strip():
            raise TransportError("No word returned")
        return word


class ThesaurusClient(_HttpCollaborator, SynonymSource):
    """Synonym source for an API Ninjas style thesaurus (`?word=`, X-Api-Key)."""

    def __init__(
        self,
        url: str,
        api_key: Optional[str],
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        if not api_key:
            raise ConfigurationError("Thesaurus API key is not configured")
        super().__init__(client, timeout)
        self.url = url
        self._api_key = api_key

    @classmethod
    def from_settings(cls, settings: WordApiSettings, client: Optional[httpx.AsyncClient] = None) -> "ThesaurusClient":
        api_key = settings.thesaurus_api_key.get_secret_value() if settings.thesaurus_api_key else None
        return cls(settings.thesaurus_url, api_key, client=client, timeout=settings.timeout_seconds)

    async def fetch_synonyms(self, word: str) -> List[str]:
        response = await self._get(
            self.url,
            params={"word": word},
            headers={"X-Api-Key": self._api_key},
            failure="Thesaurus API request failed",
        )
        try:
            data = response.json()
        except ValueError as e:
            raise TransportError("Malformed thesaurus response") from e
        synonyms = data.get("synonyms") if isinstance(data, dict) else None
        if not isinstance(synonyms, list):
            return []
        return [s for s in synonyms if isinstance(s, str) and s]


class DreamloClient(_HttpCollaborator, LeaderboardTransport):
    """
    Leaderboard transport for dreamlo.com.

    Submissions append the encoded payload to ``<base>/<private>/add/``;
    reads use the pipe format at ``<base>/<public>/pipe/<limit>``.
    """

    def __init__(
        self,
        base_url: str,
        private_code: Optional[str],
        public_code: Optional[str],
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        if not private_code or not public_code:
            raise ConfigurationError("Leaderboard private and public codes are required")
        super().__init__(client, timeout)
        self.base_url = base_url.rstrip("/")
        self._private_code = private_code
        self.public_code = public_code

    @classmethod
    def from_settings(cls, settings: LeaderboardSettings, client: Optional[httpx.AsyncClient] = None) -> "DreamloClient":
        private_code = settings.private_code.get_secret_value() if settings.private_code else None
        return cls(
            settings.base_url,
            private_code,
            settings.public_code,
            client=client,
            timeout=settings.timeout_seconds,
        )

    async def submit(self, payload: str) -> None:
        url = f"{self.base_url}/{self._private_code}/add/{payload}"
        await self._get(url, failure="Failed to submit score")

    async def fetch(self, limit: int) -> str:
        url = f"{self.base_url}/{self.public_code}/pipe/{limit}"
        response = await self._get(url, failure="Failed to fetch leaderboard")
        return response.text
