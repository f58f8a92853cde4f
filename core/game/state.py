"""Round phase enumeration."""

from enum import Enum, auto


class RoundPhase(Enum):
    """
    Round state machine states.

    Flow: IDLE → BETTING → DEALING → PLAYER_TURNS → DEALER_TURN → SETTLING → IDLE
    """

    # Between rounds
    IDLE = auto()

    # Collecting wagers
    BETTING = auto()

    # Initial two cards to everyone
    DEALING = auto()

    # Players act on their hands, in queue order
    PLAYER_TURNS = auto()

    # Dealer reveals and draws
    DEALER_TURN = auto()

    # Paying out and cleaning up
    SETTLING = auto()

    # Session over (supply exhausted or everyone left)
    GAME_OVER = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()

