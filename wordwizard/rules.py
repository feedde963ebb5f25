"""
Scoring and hint-economy rules.

Pure functions over the session's numbers. The session decides *when* to
apply them; this module decides *what* they cost and whether they are
allowed.
"""

from typing import Optional

from wordwizard.config import GameConfig
from wordwizard.exceptions import RejectionReason


def apply_penalty(score: int, penalty: int) -> int:
    """Deduct a penalty from a score, never going below zero."""
    return max(0, score - penalty)


def can_afford_assist(score: int, config: GameConfig) -> bool:
    """Check if the player can pay for a letter check, word length, or hint."""
    return score >= config.assist_cost


def hint_rejection(
    wrong_guess_count: int,
    hint_used: bool,
    score: int,
    config: GameConfig,
) -> Optional[RejectionReason]:
    """
    Decide whether a hint request must be refused.

    Args:
        wrong_guess_count: Wrong guesses made on the current word
        hint_used: Whether the hint was already bought for this word
        score: Current score
        config: Game rules

    Returns:
        The reason for refusing, or None when the hint may be bought
    """
    if wrong_guess_count < config.hint_unlock_wrong_guesses:
        return RejectionReason.HINT_LOCKED
    if hint_used:
        return RejectionReason.HINT_ALREADY_USED
    if not can_afford_assist(score, config):
        return RejectionReason.INSUFFICIENT_SCORE
    return None


def is_round_lost(attempts_left: int, score: int) -> bool:
    """A round is lost once attempts or score run out, whichever comes first."""
    return attempts_left <= 0 or score <= 0


def min_word_length(level: int, config: GameConfig) -> int:
    """Minimum secret-word length for a level."""
    return config.base_min_word_length + level


def normalize_guess(raw: str) -> str:
    return raw.strip().lower()


def is_valid_letter(letter: str) -> bool:
    """Letter checks accept exactly one alphabetic character."""
    return len(letter) == 1 and letter.isalpha()


def count_letter(word: str, letter: str) -> int:
    """Count occurrences of a letter in the secret word (case-insensitive)."""
    return word.count(letter.lower())


def fallback_hint(word: str) -> str:
    """Hint used when no synonym is available: the first and last letter."""
    return f"Starts with '{word[0]}' and ends with '{word[-1]}'"
