"""
Tests for the session event log and its JSON mapping.
"""

from wordwizard.events import EventLog, EventType, GameEvent, map_event, map_events


class TestEventLog:

    def test_log_records_and_returns_event(self):
        log = EventLog()

        event = log.log(EventType.WORD_LENGTH, 3, length=6, score=95)

        assert log.get_events() == [event]
        assert event.generation == 3
        assert event.details == {"length": 6, "score": 95}

    def test_listener_receives_events(self):
        seen = []
        log = EventLog(seen.append)

        log.log(EventType.GAME_START, 1, player="Ann")

        assert [e.event_type for e in seen] == [EventType.GAME_START]

    def test_failing_listener_does_not_break_logging(self):
        def listener(event):
            raise RuntimeError("display gone")

        log = EventLog(listener)
        log.log(EventType.HINT, 1, hint="world")

        assert len(log.events) == 1

    def test_events_since_and_recent(self):
        log = EventLog()
        for i in range(5):
            log.log(EventType.GUESS_WRONG, 1, attempts_left=9 - i)

        assert [e.details["attempts_left"] for e in log.events_since(3)] == [6, 5]
        assert len(log.get_recent_events(2)) == 2
        assert log.events_since(10) == []

        log.clear()
        assert log.get_events() == []

    def test_capped_log_keeps_absolute_indices(self):
        log = EventLog(max_events=3)
        for i in range(5):
            log.log(EventType.GUESS_WRONG, 1, attempts_left=9 - i)

        assert len(log.events) == 3
        assert log.dropped == 2
        assert log.total == 5
        assert [e.details["attempts_left"] for e in log.events_since(0)] == [7, 6, 5]
        assert [e.details["attempts_left"] for e in log.events_since(4)] == [5]
        assert log.events_since(5) == []


def test_map_event_flattens_details():
    event = GameEvent(EventType.GAME_LOST, 4, {"word": "planet", "level": 2}, timestamp=12.5)

    assert map_event(event) == {
        "event_type": "game_lost",
        "generation": 4,
        "timestamp": 12.5,
        "word": "planet",
        "level": 2,
    }


def test_map_events_numbers_from_start_index():
    events = [GameEvent(EventType.LEVEL_UP, 2, {"level": 2}), GameEvent(EventType.WORD_BOUND, 2, {"level": 2})]

    mapped = map_events(events, start_index=7)

    assert [m["index"] for m in mapped] == [7, 8]
    assert [m["event_type"] for m in mapped] == ["level_up", "word_bound"]
