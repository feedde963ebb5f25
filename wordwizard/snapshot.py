"""
Public snapshot serialization of a GameSession.

Produces a UI-friendly view of the session without exposing the secret
word, except once a round is lost and the word has been revealed.
"""

from __future__ import annotations

from typing import Any, Dict

from wordwizard.session import GameSession, Phase


def serialize_snapshot(session: GameSession) -> Dict[str, Any]:
    """Serialize a GameSession into a public, stable JSON dict.

    The snapshot includes:
    - phase, level, score, attempts_left and elapsed time
    - hint state (used / currently available) and wrong guess count
    - last word-fetch error, if the session is stuck loading
    - the revealed word, only in the Lost phase
    """
    return {
        "player_name": session.player_name,
        "phase": session.phase.value,
        "level": session.level,
        "score": session.score,
        "attempts_left": session.attempts_left,
        "elapsed_seconds": session.elapsed_seconds,
        "wrong_guess_count": session.wrong_guess_count,
        "hint_used": session.hint_used,
        "hint_available": session.hint_available,
        "last_error": session.last_error,
        "revealed_word": session.secret_word if session.phase == Phase.LOST else None,
        "event_count": session.event_log.total,
    }
