"""
Session event logging and public event mapping.

The session records every state change as a GameEvent. `map_event`
turns those into stable, UI/JSON-friendly dicts for the server and the
terminal driver.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of session events."""

    GAME_START = "game_start"
    WORD_REQUESTED = "word_requested"
    WORD_BOUND = "word_bound"
    WORD_FETCH_FAILED = "word_fetch_failed"

    GUESS_WRONG = "guess_wrong"
    GUESS_CORRECT = "guess_correct"
    LEVEL_UP = "level_up"
    GAME_LOST = "game_lost"

    LETTER_CHECK = "letter_check"
    WORD_LENGTH = "word_length"
    HINT = "hint"

    SCORE_SUBMISSION = "score_submission"
    SCORE_SUBMITTED = "score_submitted"
    SCORE_SUBMIT_FAILED = "score_submit_failed"


@dataclass
class GameEvent:
    """A logged event in the session."""

    event_type: EventType
    generation: int = 0
    details: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)

    def __repr__(self) -> str:
        return f"[gen {self.generation}] {self.event_type.value}: {self.details}"


EventListener = Callable[[GameEvent], None]


class EventLog:
    """
    Manages the session event log.

    With `max_events` set, the oldest events are dropped once the log is
    full. Indices passed to `events_since` stay absolute: `dropped` counts
    the events discarded so far.
    """

    def __init__(self, listener: Optional[EventListener] = None, max_events: Optional[int] = None):
        self.events: List[GameEvent] = []
        self.listener = listener
        self.max_events = max_events
        self.dropped = 0

    @property
    def total(self) -> int:
        """Number of events ever logged, including dropped ones."""
        return self.dropped + len(self.events)

    def log(self, event_type: EventType, generation: int = 0, **details: Any) -> GameEvent:
        """Log a session event and forward it to the listener, if any."""
        event = GameEvent(event_type, generation, details)
        self.events.append(event)
        if self.max_events is not None and len(self.events) > self.max_events:
            overflow = len(self.events) - self.max_events
            del self.events[:overflow]
            self.dropped += overflow
        if self.listener is not None:
            try:
                self.listener(event)
            except Exception:
                logger.exception("Event listener failed on %s", event_type.value)
        return event

    def get_events(self) -> List[GameEvent]:
        """Get all logged events."""
        return self.events.copy()

    def get_recent_events(self, count: int = 10) -> List[GameEvent]:
        """Get the most recent N events."""
        return self.events[-count:]

    def events_since(self, index: int) -> List[GameEvent]:
        """Get events logged after the first `index` events ever logged."""
        return self.events[max(0, index - self.dropped):]

    def clear(self) -> None:
        """Clear the event log."""
        self.dropped += len(self.events)
        self.events.clear()


def map_event(event: GameEvent, *, index: Optional[int] = None) -> Dict[str, Any]:
    """
    Map a single GameEvent to a canonical JSON dict.

    Args:
        event: internal event object
        index: optional position of the event in its log

    Returns:
        dict with keys: event_type, generation, timestamp, and event-specific fields
    """
    base: Dict[str, Any] = {
        "event_type": event.event_type.value,
        "generation": event.generation,
        "timestamp": event.timestamp,
    }
    if index is not None:
        base["index"] = index
    base.update(event.details)
    return base


def map_events(events: Iterable[GameEvent], *, start_index: int = 0) -> List[Dict[str, Any]]:
    """Map a batch of events, numbering them from `start_index`."""
    return [map_event(e, index=start_index + i) for i, e in enumerate(events)]
