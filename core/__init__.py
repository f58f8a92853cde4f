"""Core blackjack engine - 100% UI-agnostic."""

from core.cards import Card, Rank, Suit, Supply
from core.errors import BlackjackError, InsufficientFunds, InvalidAction, SupplyExhausted
from core.hand import Hand, HandState
from core.participant import Dealer, Player

__all__ = [
    "Card",
    "Rank",
    "Suit",
    "Supply",
    "BlackjackError",
    "InsufficientFunds",
    "InvalidAction",
    "SupplyExhausted",
    "Hand",
    "HandState",
    "Dealer",
    "Player",
]
