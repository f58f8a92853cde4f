"""Round engine, events and settlement."""

from core.game.events import GameEvent, EventType
from core.game.state import RoundPhase
from core.game.settlement import Outcome, Settlement, settle_hand
from core.game.engine import Action, HandResult, RoundEngine

__all__ = [
    "GameEvent",
    "EventType",
    "RoundPhase",
    "Outcome",
    "Settlement",
    "settle_hand",
    "Action",
    "HandResult",
    "RoundEngine",
]
