"""
Test suite for the event log - validates timestamps, subscriptions and queries.
"""

from ..engine.events import (
    DrawEvent, Event, EventLog, GameEndedEvent, MessageEvent, SpellCastEvent,
)
from ..engine.types import Outcome


class TestEventLog:
    """Tests for the append-only event history."""

    def test_timestamps_increase(self):
        log = EventLog()

        first = log.emit(MessageEvent(message="one"))
        second = log.emit(MessageEvent(message="two"))

        assert first.timestamp == 0
        assert second.timestamp == 1
        assert len(log) == 2

    def test_history_is_a_copy(self):
        log = EventLog()
        log.emit(MessageEvent(message="one"))

        history = log.history()
        history.clear()

        assert len(log.history()) == 1

    def test_of_type(self):
        log = EventLog()
        log.emit(MessageEvent(message="one"))
        log.emit(DrawEvent(object_id=3, name="Forest"))
        log.emit(MessageEvent(message="two"))

        assert [event.message for event in log.of_type(MessageEvent)] == ["one", "two"]
        assert len(log.of_type(Event)) == 3

    def test_for_turn(self):
        log = EventLog()
        log.emit(MessageEvent(turn=1, message="one"))
        log.emit(MessageEvent(turn=2, message="two"))

        assert [event.message for event in log.for_turn(2)] == ["two"]


class TestSubscriptions:
    """Tests for observing events while they are emitted."""

    def test_subscriber_receives_events(self):
        log = EventLog()
        received = []
        log.subscribe(SpellCastEvent, received.append)

        log.emit(SpellCastEvent(name="Aluren"))
        log.emit(MessageEvent(message="ignored"))

        assert [event.name for event in received] == ["Aluren"]

    def test_base_class_subscription(self):
        """Test a subscription to Event sees every event."""
        log = EventLog()
        received = []
        log.subscribe(Event, received.append)

        log.emit(MessageEvent(message="one"))
        log.emit(DrawEvent(object_id=1, name="Island"))

        assert len(received) == 2

    def test_unsubscribe(self):
        log = EventLog()
        received = []
        log.subscribe(MessageEvent, received.append)

        assert log.unsubscribe(MessageEvent, received.append)
        assert not log.unsubscribe(MessageEvent, received.append)

        log.emit(MessageEvent(message="one"))
        assert received == []


class TestGameEvents:
    """Tests for events emitted by a game."""

    def test_events_stamped_with_turn(self, game):
        game.turn = 3
        game.announce("hello")

        event = game.events.of_type(MessageEvent)[-1]
        assert event.turn == 3
        assert event.message == "hello"

    def test_failed_draw_event(self, game):
        game.draw()

        event = game.events.of_type(DrawEvent)[-1]
        assert event.failed
        assert event.describe() == "Failed to draw from an empty library"

    def test_describe(self):
        event = GameEndedEvent(turn=4, outcome=Outcome.WIN, reason="damage")
        assert event.describe() == "WIN on turn 4: damage"

        cast = SpellCastEvent(name="Pattern of Rebirth", target="Llanowar Elves",
                              sources=["Forest"])
        assert cast.describe() == ('Casting "Pattern of Rebirth" on target "Llanowar Elves"'
                                   ' with mana sources: "Forest"')

    def test_verbose_logging(self, capsys):
        from ..engine.game import Game, GameConfig

        game = Game(config=GameConfig(verbose=True))
        game.announce("hello")

        assert "[INFO] Turn 0: hello" in capsys.readouterr().out
