"""
Custom exception hierarchy for the Word Wizard engine and services.

Provides typed errors that can be handled consistently across
the session, the HTTP collaborators, and the API layer.
"""

from enum import Enum
from typing import Optional


class RejectionReason(str, Enum):
    """Why an action was refused without changing the session."""

    EMPTY_GUESS = "empty_guess"
    INVALID_LETTER = "invalid_letter"
    INSUFFICIENT_SCORE = "insufficient_score"
    HINT_LOCKED = "hint_locked"
    HINT_ALREADY_USED = "hint_already_used"


class WordWizardError(Exception):
    """Base exception for all game-related errors."""


class TransportError(WordWizardError):
    """A word, synonym, or leaderboard request failed."""

    def __init__(self, reason: str, status_code: Optional[int] = None):
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code


class WordUnavailableError(WordWizardError):
    """No word of the requested length turned up within the retry budget."""

    def __init__(self, min_length: int, attempts: int):
        super().__init__(
            f"No word with at least {min_length} letters after {attempts} attempts"
        )
        self.min_length = min_length
        self.attempts = attempts


class ValidationRejection(WordWizardError):
    """Action is not allowed in the current state; nothing was charged."""

    def __init__(self, reason: RejectionReason, message: Optional[str] = None):
        super().__init__(message or reason.value)
        self.reason = reason


class ConfigurationError(WordWizardError):
    """A collaborator is missing a required endpoint or credential."""


class SessionNotFoundError(WordWizardError):
    """Session does not exist."""
