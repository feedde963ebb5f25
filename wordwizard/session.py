"""
Game session state machine.

A GameSession owns all mutable state for one player: the secret word,
score, attempts, level and phase. Word, synonym and leaderboard requests
run as asyncio tasks; every word fetch and delayed transition is tagged
with the session's generation so that completions superseded by a newer
request are dropped instead of applied.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Coroutine, Optional, Set

from wordwizard import rules
from wordwizard.config import GameConfig
from wordwizard.events import EventListener, EventLog, EventType
from wordwizard.exceptions import (
    RejectionReason,
    TransportError,
    ValidationRejection,
    WordUnavailableError,
)
from wordwizard.leaderboard import LeaderboardService
from wordwizard.sources import SynonymSource, WordSource

logger = logging.getLogger(__name__)


class Phase(Enum):
    """Lifecycle phases of a session."""

    IDLE = "idle"
    LOADING = "loading"
    ACTIVE = "active"
    WON = "won"
    LOST = "lost"


@dataclass(frozen=True)
class GuessResult:
    """Outcome of a submitted guess."""

    correct: bool
    score: int
    attempts_left: int
    phase: Phase
    revealed_word: Optional[str] = None


@dataclass(frozen=True)
class Hint:
    """A purchased hint; `fallback` is True when no synonym was available."""

    text: str
    fallback: bool = False


class GameSession:
    """
    Single-player word-guessing session.

    Phases run Idle -> Loading -> Active -> Won|Lost -> Loading ... A win
    schedules the next level's word after `config.win_delay`; a loss
    reveals the word and restarts from level 1 after `config.loss_delay`.

    Attributes:
        secret_word: Lower-cased target word ("" until one is bound).
        score: Points left for this word, 0..starting_score.
        attempts_left: Guesses left for this word, 0..max_attempts.
        level: Current level, starting at 1.
        started_at: Clock reading when the current word became active.
        phase: Current Phase.
        hint_used: Whether the hint was bought for the current word.
        wrong_guess_count: Wrong guesses on the current word.
        generation: Bumped whenever a new word request supersedes older ones.
        last_error: Reason of the most recent failed word fetch, if any.
        event_log: Every state change, in order.
    """

    def __init__(
        self,
        words: WordSource,
        synonyms: SynonymSource,
        leaderboard: Optional[LeaderboardService] = None,
        *,
        player_name: Optional[str] = None,
        config: Optional[GameConfig] = None,
        clock: Callable[[], float] = time.monotonic,
        listener: Optional[EventListener] = None,
    ):
        self.config = config or GameConfig()
        self.words = words
        self.synonyms = synonyms
        self.leaderboard = leaderboard
        self.player_name = player_name or self.config.default_player_name
        self.clock = clock
        self.event_log = EventLog(listener, self.config.event_log_limit)

        self.secret_word = ""
        self.score = self.config.starting_score
        self.attempts_left = self.config.max_attempts
        self.level = 1
        self.started_at: Optional[float] = None
        self.phase = Phase.IDLE
        self.hint_used = False
        self.wrong_guess_count = 0

        self.generation = 0
        self.last_error: Optional[str] = None

        self._word_task: Optional[asyncio.Task] = None
        self._transition_task: Optional[asyncio.Task] = None
        self._background: Set[asyncio.Task] = set()

    def __repr__(self) -> str:
        return (
            f"GameSession(player='{self.player_name}', phase={self.phase.value}, "
            f"level={self.level}, score={self.score}, attempts_left={self.attempts_left})"
        )

    # ---- Properties ----

    @property
    def is_active(self) -> bool:
        return self.phase == Phase.ACTIVE

    @property
    def elapsed_seconds(self) -> int:
        """Whole seconds since the current word became active."""
        if self.started_at is None:
            return 0
        return max(0, int(self.clock() - self.started_at))

    @property
    def hint_available(self) -> bool:
        """True when a hint request would currently be accepted."""
        return self.is_active and rules.hint_rejection(
            self.wrong_guess_count, self.hint_used, self.score, self.config
        ) is None

    # ---- Lifecycle ----

    def start_new_game(self) -> asyncio.Task:
        """
        Reset to level 1 and request a fresh word.

        Cancels any pending delayed transition and supersedes any word
        request still in flight. Must be called from a running event loop.

        Returns:
            The word-fetch task; it resolves to True once a word is bound.
        """
        self._cancel_transition()
        self.generation += 1

        self._reset_round()
        self.level = 1
        self.secret_word = ""
        self.started_at = None
        self.last_error = None
        self.phase = Phase.LOADING

        self.event_log.log(EventType.GAME_START, self.generation, player=self.player_name)
        return self._request_word(min_length=None)

    async def wait_until_settled(self) -> None:
        """Wait until no delayed transition or word fetch is pending."""
        while True:
            pending = [
                t for t in (self._transition_task, self._word_task)
                if t is not None and not t.done()
            ]
            if not pending:
                return
            await asyncio.wait(pending)

    async def aclose(self) -> None:
        """Cancel every task the session owns and wait for them to finish."""
        self._cancel_transition()
        tasks = [t for t in (self._word_task, *self._background) if t is not None and not t.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._word_task = None
        self._background.clear()

    # ---- Player actions ----

    def submit_guess(self, raw: str) -> Optional[GuessResult]:
        """
        Check a guess against the secret word.

        Returns None (and does nothing) unless the session is Active.

        Raises:
            ValidationRejection: if the guess is empty after trimming.
        """
        if not self.is_active:
            return None

        guess = rules.normalize_guess(raw)
        if not guess:
            raise ValidationRejection(RejectionReason.EMPTY_GUESS, "Please enter a word")

        if guess == self.secret_word:
            return self._handle_correct_guess()
        return self._handle_wrong_guess()

    def check_letter(self, letter: str) -> Optional[int]:
        """
        Pay the assist cost to learn how often `letter` occurs in the word.

        Raises:
            ValidationRejection: if the score is too low or `letter` is not
                a single alphabetic character.
        """
        if not self.is_active:
            return None
        self._require_assist_funds()
        if not rules.is_valid_letter(letter):
            raise ValidationRejection(RejectionReason.INVALID_LETTER, "Please enter a single letter")

        self.score = rules.apply_penalty(self.score, self.config.assist_cost)
        count = rules.count_letter(self.secret_word, letter)
        self.event_log.log(
            EventType.LETTER_CHECK, self.generation,
            letter=letter.lower(), count=count, score=self.score,
        )
        return count

    def reveal_word_length(self) -> Optional[int]:
        """Pay the assist cost to learn the secret word's length."""
        if not self.is_active:
            return None
        self._require_assist_funds()

        self.score = rules.apply_penalty(self.score, self.config.assist_cost)
        length = len(self.secret_word)
        self.event_log.log(EventType.WORD_LENGTH, self.generation, length=length, score=self.score)
        return length

    async def request_hint(self) -> Optional[Hint]:
        """
        Buy the single hint for this word: its first synonym, or the first
        and last letters when the thesaurus has nothing.

        The cost is charged before the thesaurus is queried. Returns None if
        the session is not Active, or if a new word replaced this one while
        the thesaurus request was outstanding.

        Raises:
            ValidationRejection: if the hint is locked, already used, or
                unaffordable.
        """
        if not self.is_active:
            return None
        reason = rules.hint_rejection(self.wrong_guess_count, self.hint_used, self.score, self.config)
        if reason is not None:
            message = _HINT_MESSAGES[reason].format(unlock=self.config.hint_unlock_wrong_guesses)
            raise ValidationRejection(reason, message)

        self.score = rules.apply_penalty(self.score, self.config.assist_cost)
        self.hint_used = True
        word = self.secret_word
        generation = self.generation

        try:
            synonyms = await self.synonyms.fetch_synonyms(word)
        except TransportError as e:
            logger.warning(f"Synonym lookup failed, using letter hint: {e}")
            synonyms = []

        if generation != self.generation:
            logger.debug("Dropping hint for superseded word (generation %d)", generation)
            return None

        if synonyms:
            hint = Hint(synonyms[0])
        else:
            hint = Hint(rules.fallback_hint(word), fallback=True)
        self.event_log.log(
            EventType.HINT, self.generation,
            hint=hint.text, fallback=hint.fallback, score=self.score,
        )
        return hint

    # ---- Guess outcomes ----

    def _handle_correct_guess(self) -> GuessResult:
        self.phase = Phase.WON
        seconds = self.elapsed_seconds
        self.event_log.log(
            EventType.GUESS_CORRECT, self.generation,
            level=self.level, score=self.score, seconds=seconds,
        )
        logger.info(f"{self.player_name} solved level {self.level} in {seconds}s with {self.score} points")

        self.event_log.log(
            EventType.SCORE_SUBMISSION, self.generation,
            name=self.player_name, score=self.score, seconds=seconds, level=self.level,
        )
        if self.leaderboard is not None:
            self._spawn_background(self._submit_score(self.score, seconds, self.level))

        self._schedule_transition(self._advance_level(self.generation))
        return GuessResult(True, self.score, self.attempts_left, self.phase)

    def _handle_wrong_guess(self) -> GuessResult:
        self.wrong_guess_count += 1
        self.attempts_left = max(0, self.attempts_left - 1)
        self.score = rules.apply_penalty(self.score, self.config.wrong_guess_penalty)

        if rules.is_round_lost(self.attempts_left, self.score):
            self.phase = Phase.LOST
            self.event_log.log(
                EventType.GAME_LOST, self.generation,
                word=self.secret_word, level=self.level,
            )
            logger.info(f"{self.player_name} lost at level {self.level}; the word was '{self.secret_word}'")
            self._schedule_transition(self._restart_after_loss(self.generation))
            return GuessResult(False, self.score, self.attempts_left, self.phase, revealed_word=self.secret_word)

        self.event_log.log(
            EventType.GUESS_WRONG, self.generation,
            attempts_left=self.attempts_left, score=self.score,
            wrong_guess_count=self.wrong_guess_count,
        )
        return GuessResult(False, self.score, self.attempts_left, self.phase)

    # ---- Delayed transitions ----

    async def _advance_level(self, generation: int) -> None:
        await asyncio.sleep(self.config.win_delay)
        if generation != self.generation:
            return
        self.generation += 1
        self.level += 1
        self.phase = Phase.LOADING
        self.event_log.log(EventType.LEVEL_UP, self.generation, level=self.level)
        logger.info(f"{self.player_name} advanced to level {self.level}")
        self._request_word(min_length=rules.min_word_length(self.level, self.config))

    async def _restart_after_loss(self, generation: int) -> None:
        await asyncio.sleep(self.config.loss_delay)
        if generation != self.generation:
            return
        self.start_new_game()

    def _schedule_transition(self, coro: Coroutine) -> None:
        self._cancel_transition()
        self._transition_task = asyncio.create_task(coro)

    def _cancel_transition(self) -> None:
        task = self._transition_task
        # A transition may itself call start_new_game(); never cancel the caller.
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
        self._transition_task = None

    # ---- Word fetching ----

    def _request_word(self, min_length: Optional[int]) -> asyncio.Task:
        if self._word_task is not None and not self._word_task.done():
            self._word_task.cancel()
        self.event_log.log(EventType.WORD_REQUESTED, self.generation, level=self.level, min_length=min_length)
        self._word_task = asyncio.create_task(self._load_word(self.generation, min_length))
        return self._word_task

    async def _load_word(self, generation: int, min_length: Optional[int]) -> bool:
        try:
            if min_length is None:
                word = await self.words.fetch_random_word()
            else:
                word = await self.words.fetch_random_word_with_min_length(
                    min_length, max_attempts=self.config.max_word_fetch_attempts
                )
            if not word or not word.strip():
                raise TransportError("No word returned")
        except (TransportError, WordUnavailableError) as e:
            if generation != self.generation:
                return False
            self.last_error = str(e)
            logger.warning(f"Error loading word: {e}")
            self.event_log.log(EventType.WORD_FETCH_FAILED, generation, reason=str(e), level=self.level)
            return False

        if generation != self.generation:
            logger.debug("Discarding stale word from generation %d (current %d)", generation, self.generation)
            return False

        self._bind_word(word)
        return True

    def _bind_word(self, word: str) -> None:
        self._reset_round()
        self.secret_word = word.strip().lower()
        self.started_at = self.clock()
        self.last_error = None
        self.phase = Phase.ACTIVE
        self.event_log.log(EventType.WORD_BOUND, self.generation, level=self.level)
        logger.info(f"Level {self.level} word loaded for {self.player_name}")

    def _reset_round(self) -> None:
        self.score = self.config.starting_score
        self.attempts_left = self.config.max_attempts
        self.hint_used = False
        self.wrong_guess_count = 0

    # ---- Leaderboard ----

    async def _submit_score(self, score: int, seconds: int, level: int) -> None:
        try:
            await self.leaderboard.submit_score(self.player_name, score, seconds, level)
        except TransportError as e:
            logger.warning(f"Score submission failed: {e}")
            self.event_log.log(EventType.SCORE_SUBMIT_FAILED, self.generation, reason=str(e), level=level)
            return
        self.event_log.log(EventType.SCORE_SUBMITTED, self.generation, score=score, seconds=seconds, level=level)

    def _spawn_background(self, coro: Coroutine) -> None:
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    # ---- Helpers ----

    def _require_assist_funds(self) -> None:
        if not rules.can_afford_assist(self.score, self.config):
            raise ValidationRejection(
                RejectionReason.INSUFFICIENT_SCORE,
                f"You need at least {self.config.assist_cost} points",
            )


_HINT_MESSAGES = {
    RejectionReason.HINT_LOCKED: "Hints unlock after {unlock} wrong guesses",
    RejectionReason.HINT_ALREADY_USED: "Hint already used for this word",
    RejectionReason.INSUFFICIENT_SCORE: "Not enough points for a hint",
}
