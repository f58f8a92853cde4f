"""Tests for the event emitter."""

import pytest

from core.game.events import EventEmitter, EventType, GameEvent


@pytest.fixture
def emitter():
    return EventEmitter()


class TestEventEmitter:
    """Tests for EventEmitter."""

    def test_catch_all_handler(self, emitter):
        received = []
        emitter.subscribe(received.append)

        emitter.emit_new(EventType.ROUND_STARTED, round=1)
        emitter.emit_new(EventType.ROUND_ENDED, round=1)

        assert [e.event_type for e in received] == [
            EventType.ROUND_STARTED,
            EventType.ROUND_ENDED,
        ]

    def test_typed_handler_only_sees_its_type(self, emitter):
        received = []
        emitter.subscribe(received.append, EventType.PLAYER_HIT)

        emitter.emit_new(EventType.PLAYER_STAND, player="Alice")
        emitter.emit_new(EventType.PLAYER_HIT, player="Alice")

        assert len(received) == 1
        assert received[0].data == {"player": "Alice"}

    def test_typed_handlers_run_before_catch_all(self, emitter):
        order = []
        emitter.subscribe(lambda e: order.append("all"))
        emitter.subscribe(lambda e: order.append("typed"), EventType.HAND_BUSTED)

        emitter.emit_new(EventType.HAND_BUSTED)

        assert order == ["typed", "all"]

    def test_unsubscribe(self, emitter):
        received = []
        emitter.subscribe(received.append)
        emitter.unsubscribe(received.append)
        emitter.unsubscribe(received.append)

        emitter.emit_new(EventType.ROUND_STARTED)

        assert received == []

    def test_history_and_of_type(self, emitter):
        emitter.emit_new(EventType.CARD_DEALT, card="A♠")
        emitter.emit_new(EventType.PLAYER_HIT)
        emitter.emit_new(EventType.CARD_DEALT, card="K♥")

        assert len(emitter.history) == 3
        assert [e.data["card"] for e in emitter.of_type(EventType.CARD_DEALT)] == ["A♠", "K♥"]

        emitter.history.clear()
        assert len(emitter.history) == 3

        emitter.clear_history()
        assert emitter.history == []

    def test_event_str(self):
        event = GameEvent(EventType.PLAYER_SPLIT, {"player": "Alice"})
        assert str(event) == "PLAYER_SPLIT: {'player': 'Alice'}"

    def test_event_is_frozen(self):
        event = GameEvent(EventType.PLAYER_SPLIT)
        with pytest.raises(AttributeError):
            event.event_type = EventType.PLAYER_HIT
