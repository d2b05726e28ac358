"""Tests for the event emitter."""

from engine.game.events import EventEmitter, EventType, GameEvent


class TestEventEmitter:
    """Tests for EventEmitter."""

    def test_subscribe_to_type(self):
        """Handlers subscribed to a type only see that type."""
        emitter = EventEmitter()
        seen = []
        emitter.subscribe(seen.append, EventType.BET_PLACED)

        emitter.emit_new(EventType.BET_PLACED, amount=10)
        emitter.emit_new(EventType.PLAYER_HIT)

        assert [event.event_type for event in seen] == [EventType.BET_PLACED]
        assert seen[0].data == {"amount": 10}

    def test_subscribe_to_all(self):
        emitter = EventEmitter()
        seen = []
        emitter.subscribe(seen.append)

        emitter.emit_new(EventType.BET_PLACED)
        emitter.emit_new(EventType.PLAYER_HIT)

        assert len(seen) == 2

    def test_unsubscribe(self):
        emitter = EventEmitter()
        seen = []
        emitter.subscribe(seen.append, EventType.PLAYER_HIT)
        emitter.unsubscribe(seen.append, EventType.PLAYER_HIT)

        emitter.emit_new(EventType.PLAYER_HIT)

        assert seen == []

    def test_unsubscribe_unknown_handler(self):
        """Removing a handler that was never added is a no-op."""
        emitter = EventEmitter()
        emitter.unsubscribe(print, EventType.PLAYER_HIT)

    def test_history(self):
        emitter = EventEmitter()
        event = emitter.emit_new(EventType.ROUND_STARTED)

        assert isinstance(event, GameEvent)
        assert emitter.history == [event]

        emitter.clear_history()
        assert emitter.history == []

    def test_history_is_a_copy(self):
        emitter = EventEmitter()
        emitter.emit_new(EventType.ROUND_STARTED)
        emitter.history.clear()
        assert len(emitter.history) == 1

    def test_history_limit(self):
        """Only the most recent events are kept."""
        emitter = EventEmitter(history_limit=3)
        for amount in range(5):
            emitter.emit_new(EventType.BET_PLACED, amount=amount)

        assert [event.data["amount"] for event in emitter.history] == [2, 3, 4]

    def test_event_str(self):
        event = GameEvent(event_type=EventType.PLAYER_HIT, data={"hand_value": 15})
        assert str(event) == "PLAYER_HIT: {'hand_value': 15}"
