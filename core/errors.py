"""Exceptions raised by the blackjack core."""


class BlackjackError(Exception):
    """Base class for all game errors."""


class InvalidAction(BlackjackError):
    """The requested action is not eligible for the hand in its current state."""


class InsufficientFunds(BlackjackError):
    """A wager-increasing action was requested without enough chips."""

    def __init__(self, required: int, available: int) -> None:
        super().__init__(f"Need {required} chips, only {available} available")
        self.required = required
        self.available = available


class SupplyExhausted(BlackjackError):
    """No cards are left to deal, even after recycling the discard pile."""
