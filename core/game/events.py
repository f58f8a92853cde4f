"""Table events and the emitter that delivers them."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable


class EventType(Enum):
    """Everything the engine reports while running a session."""

    # Session flow events
    PLAYERS_SEATED = auto()
    PLAYER_ELIMINATED = auto()
    GAME_ENDED = auto()

    # Round flow events
    ROUND_STARTED = auto()
    ROUND_ENDED = auto()

    # Supply events
    SUPPLY_REBUILT = auto()
    SUPPLY_RECYCLED = auto()
    CARD_DEALT = auto()

    # Betting events
    WAGER_PLACED = auto()

    # Player turn events
    TURN_STARTED = auto()
    TURN_SKIPPED = auto()
    HAND_FOCUSED = auto()
    HAND_SKIPPED = auto()
    PLAYER_HIT = auto()
    PLAYER_STAND = auto()
    PLAYER_DOUBLE = auto()
    PLAYER_SPLIT = auto()
    HAND_TWENTY_ONE = auto()
    HAND_BUSTED = auto()
    SPLIT_ACES_STAND = auto()

    # Dealer events
    DEALER_NATURAL = auto()
    DEALER_REVEALS = auto()
    DEALER_HITS = auto()
    DEALER_STANDS = auto()

    # Settlement events
    HAND_SETTLED = auto()
    BALANCES = auto()

    # Error events
    INVALID_ACTION = auto()
    INSUFFICIENT_FUNDS = auto()
    SUPPLY_EXHAUSTED = auto()


@dataclass(frozen=True)
class GameEvent:
    """
    Something that happened at the table.

    The engine never prints; renderers and tests read these instead. Card
    values in ``data`` are already strings, with the hole card shown as
    ``"??"`` until the dealer reveals it.
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"


Listener = Callable[[GameEvent], None]


class EventEmitter:
    """
    Output collaborator: fans table events out to listeners and keeps a log.

    Listeners registered for one event type run before catch-all listeners.
    """

    def __init__(self) -> None:
        self._listeners: dict[EventType | None, list[Listener]] = {}
        self._log: list[GameEvent] = []

    def subscribe(self, listener: Listener, event_type: EventType | None = None) -> None:
        """
        Register a listener.

        Args:
            listener: Called with every matching event
            event_type: Only deliver this type; None delivers everything
        """
        self._listeners.setdefault(event_type, []).append(listener)

    def unsubscribe(self, listener: Listener, event_type: EventType | None = None) -> None:
        """Remove a listener; unknown listeners are ignored."""
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def emit(self, event: GameEvent) -> None:
        """Log an event and deliver it to typed, then catch-all, listeners."""
        self._log.append(event)
        for listener in self._listeners.get(event.event_type, []):
            listener(event)
        for listener in self._listeners.get(None, []):
            listener(event)

    def emit_new(self, event_type: EventType, **data: Any) -> GameEvent:
        """Build an event from keyword data, emit it and return it."""
        event = GameEvent(event_type=event_type, data=data)
        self.emit(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        """A copy of every event emitted so far."""
        return list(self._log)

    def of_type(self, event_type: EventType) -> list[GameEvent]:
        return [e for e in self._log if e.event_type == event_type]

    def clear_history(self) -> None:
        self._log.clear()
