"""
Event log for goldfished games.

Every state change the engine makes is appended to an EventLog alongside
the change itself. The log is append-only: events receive monotonically
increasing timestamps, can be observed through subscriptions while the
game runs, and are returned as part of the game result so a finished game
can be inspected after the fact.
"""

from dataclasses import dataclass, field
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Optional,
    Type,
    TypeVar,
)

from .types import Outcome, Zone


# Type variable for event types
E = TypeVar('E', bound='Event')


# =============================================================================
# Base Event Class
# =============================================================================

@dataclass
class Event:
    """
    Base class for all events.

    Attributes:
        timestamp: Position in the log, assigned when the event is emitted.
        turn: Turn number the event happened on (0 during the mulligan).
    """
    timestamp: int = -1
    turn: int = 0

    def describe(self) -> str:
        """Short human readable description used by verbose output."""
        return type(self).__name__


# =============================================================================
# Zone and card events
# =============================================================================

@dataclass
class ZoneChangeEvent(Event):
    """
    An object moved between zones.

    Attributes:
        object_id: Handle of the object that moved.
        name: Name of the object.
        from_zone: The zone the object left.
        to_zone: The zone the object entered.
    """
    object_id: int = -1
    name: str = ""
    from_zone: Optional[Zone] = None
    to_zone: Optional[Zone] = None

    def describe(self) -> str:
        from_name = self.from_zone.name if self.from_zone else "?"
        to_name = self.to_zone.name if self.to_zone else "?"
        return f'"{self.name}" {from_name} -> {to_name}'


@dataclass
class DrawEvent(Event):
    """A card was drawn, or a draw failed against an empty library."""
    object_id: Optional[int] = None
    name: str = ""
    library_remaining: int = 0

    @property
    def failed(self) -> bool:
        return self.object_id is None

    def describe(self) -> str:
        if self.failed:
            return "Failed to draw from an empty library"
        return f'Drew "{self.name}", {self.library_remaining} cards remaining'


@dataclass
class SpellCastEvent(Event):
    """
    A spell was cast.

    Attributes:
        object_id: Handle of the spell.
        name: Name of the spell.
        sources: Names of the mana sources used.
        target: Name of the object the spell was attached to, if any.
        storm: Spell count this turn including this spell.
    """
    object_id: int = -1
    name: str = ""
    sources: List[str] = field(default_factory=list)
    target: Optional[str] = None
    storm: int = 0

    def describe(self) -> str:
        text = f'Casting "{self.name}"'
        if self.target:
            text += f' on target "{self.target}"'
        if self.sources:
            text += " with mana sources: " + ", ".join(f'"{s}"' for s in self.sources)
        return text


@dataclass
class LandPlayedEvent(Event):
    object_id: int = -1
    name: str = ""

    def describe(self) -> str:
        return f'Playing land "{self.name}"'


@dataclass
class ManaFloatedEvent(Event):
    """A land was tapped to float mana."""
    object_id: int = -1
    name: str = ""
    color: str = ""
    amount: int = 0

    def describe(self) -> str:
        return f'Floating {self.amount} {self.color} mana from "{self.name}"'


@dataclass
class LifeChangeEvent(Event):
    """
    Life total or damage dealt changed.

    Attributes:
        life_total: Our life total after the change.
        damage_dealt: Damage dealt to the opponent after the change.
        life_delta: Change to our life total.
        damage_delta: Change to damage dealt.
    """
    life_total: int = 0
    damage_dealt: int = 0
    life_delta: int = 0
    damage_delta: int = 0

    def describe(self) -> str:
        return f"Life total: {self.life_total}, Damage dealt: {self.damage_dealt}"


@dataclass
class SearchEvent(Event):
    """
    A search or look-at-top effect finished.

    Attributes:
        source: Name of the card doing the search.
        found: Names of the cards found, empty when nothing was found.
        destination: Zone the found card went to.
    """
    source: str = ""
    found: List[str] = field(default_factory=list)
    destination: Optional[Zone] = None

    def describe(self) -> str:
        if not self.found:
            return f'"{self.source}" failed to find'
        return f'"{self.source}" found ' + ", ".join(f'"{n}"' for n in self.found)


# =============================================================================
# Game flow events
# =============================================================================

@dataclass
class MulliganEvent(Event):
    """
    A starting hand decision.

    Attributes:
        mulligan_count: Mulligans taken before this decision.
        kept: Whether the hand was kept.
        forced: Whether the keep was forced by the mulligan floor.
        bottomed: Names of the cards put on the bottom after keeping.
    """
    mulligan_count: int = 0
    kept: bool = False
    forced: bool = False
    bottomed: List[str] = field(default_factory=list)

    def describe(self) -> str:
        if self.kept:
            return f"Keeping a hand of {7 - self.mulligan_count} cards"
        return f"Taking a mulligan number {self.mulligan_count + 1}"


@dataclass
class TurnStartEvent(Event):
    def describe(self) -> str:
        return f"Turn {self.turn} begins"


@dataclass
class GameEndedEvent(Event):
    outcome: Optional[Outcome] = None
    reason: str = ""

    def describe(self) -> str:
        outcome = self.outcome.name if self.outcome else "?"
        return f"{outcome} on turn {self.turn}: {self.reason}"


@dataclass
class MessageEvent(Event):
    """Free form action log line."""
    message: str = ""

    def describe(self) -> str:
        return self.message


# =============================================================================
# Event Log
# =============================================================================

EventCallback = Callable[[Any], None]


class EventLog:
    """
    Append-only event history with subscriptions.

    Subscribers registered for a base class receive events of every
    subclass. Subscriber exceptions propagate to the emitter.

    Thread Safety: one EventLog belongs to one game and is never shared.
    """

    def __init__(self) -> None:
        self._subscribers: Dict[Type[Event], List[EventCallback]] = {}
        self._history: List[Event] = []
        self._next_timestamp: int = 0

    def subscribe(
        self,
        event_type: Type[E],
        callback: Callable[[E], None]
    ) -> None:
        """
        Subscribe to events of a specific type.

        Args:
            event_type: The type of event to subscribe to.
            callback: Function to call when the event occurs.
        """
        callbacks = self._subscribers.setdefault(event_type, [])
        if callback not in callbacks:
            callbacks.append(callback)

    def unsubscribe(
        self,
        event_type: Type[E],
        callback: Callable[[E], None]
    ) -> bool:
        """
        Returns:
            True if the callback was found and removed, False otherwise.
        """
        callbacks = self._subscribers.get(event_type, [])
        if callback in callbacks:
            callbacks.remove(callback)
            return True
        return False

    def emit(self, event: E) -> E:
        """
        Record an event and notify subscribers.

        Args:
            event: The event to emit.

        Returns:
            The event with its timestamp assigned.
        """
        event.timestamp = self._next_timestamp
        self._next_timestamp += 1
        self._history.append(event)

        for event_type in type(event).__mro__:
            for callback in list(self._subscribers.get(event_type, [])):
                callback(event)

        return event

    def history(self) -> List[Event]:
        """Get a copy of every event emitted so far, oldest first."""
        return list(self._history)

    def of_type(self, event_type: Type[E]) -> List[E]:
        """Get the emitted events of one type (including subclasses)."""
        return [event for event in self._history if isinstance(event, event_type)]

    def for_turn(self, turn: int) -> List[Event]:
        return [event for event in self._history if event.turn == turn]

    def __len__(self) -> int:
        return len(self._history)


__all__ = [
    'Event',
    'ZoneChangeEvent',
    'DrawEvent',
    'SpellCastEvent',
    'LandPlayedEvent',
    'ManaFloatedEvent',
    'LifeChangeEvent',
    'SearchEvent',
    'MulliganEvent',
    'TurnStartEvent',
    'GameEndedEvent',
    'MessageEvent',
    'EventLog',
]
