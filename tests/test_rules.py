"""
Tests for the scoring policy and hint economy.
"""

import pytest

from wordwizard import GameConfig
from wordwizard.exceptions import RejectionReason
from wordwizard import rules


@pytest.fixture
def config():
    return GameConfig()


class TestPenalties:
    """Deductions never push the score below zero."""

    @pytest.mark.parametrize("score,penalty,expected", [
        (100, 10, 90),
        (10, 10, 0),
        (5, 10, 0),
        (3, 5, 0),
        (0, 5, 0),
    ])
    def test_apply_penalty_floors_at_zero(self, score, penalty, expected):
        assert rules.apply_penalty(score, penalty) == expected

    def test_assist_requires_full_cost(self, config):
        assert rules.can_afford_assist(5, config)
        assert not rules.can_afford_assist(4, config)


class TestHintEconomy:
    """Unlock threshold, single use, and affordability."""

    def test_locked_before_five_wrong_guesses(self, config):
        assert rules.hint_rejection(4, False, 100, config) == RejectionReason.HINT_LOCKED

    def test_available_at_five_wrong_guesses(self, config):
        assert rules.hint_rejection(5, False, 50, config) is None

    def test_single_use(self, config):
        assert rules.hint_rejection(6, True, 40, config) == RejectionReason.HINT_ALREADY_USED

    def test_insufficient_score(self, config):
        assert rules.hint_rejection(9, False, 4, config) == RejectionReason.INSUFFICIENT_SCORE

    def test_locked_takes_precedence(self, config):
        assert rules.hint_rejection(0, True, 0, config) == RejectionReason.HINT_LOCKED


class TestRoundEnd:

    def test_loss_when_attempts_run_out(self):
        assert rules.is_round_lost(0, 30)

    def test_loss_when_score_runs_out(self):
        assert rules.is_round_lost(4, 0)

    def test_not_lost_while_both_remain(self):
        assert not rules.is_round_lost(1, 10)


def test_min_word_length_grows_with_level(config):
    assert rules.min_word_length(1, config) == 4
    assert rules.min_word_length(2, config) == 5
    assert rules.min_word_length(7, config) == 10


@pytest.mark.parametrize("letter,valid", [
    ("a", True),
    ("Z", True),
    ("", False),
    ("ab", False),
    ("1", False),
    ("?", False),
])
def test_is_valid_letter(letter, valid):
    assert rules.is_valid_letter(letter) is valid


def test_count_letter_is_case_insensitive():
    assert rules.count_letter("banana", "A") == 3
    assert rules.count_letter("banana", "z") == 0


def test_normalize_guess():
    assert rules.normalize_guess("  PlAnEt \n") == "planet"


def test_fallback_hint_uses_first_and_last_letter():
    assert rules.fallback_hint("planet") == "Starts with 'p' and ends with 't'"
