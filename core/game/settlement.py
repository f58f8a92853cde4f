"""Settlement of a player hand against the dealer's final hand."""

from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal
from enum import Enum, auto

from core.hand import BLACKJACK, Hand

# Natural pays 3:2
NATURAL_PAYOUT = Decimal("1.5")


class Outcome(Enum):
    """How a settled hand fared against the dealer."""

    BUST = auto()
    NATURAL_PUSH = auto()
    NATURAL_WIN = auto()
    DEALER_BUST = auto()
    DEALER_NATURAL = auto()
    WIN = auto()
    LOSE = auto()
    PUSH = auto()

    @property
    def category(self) -> str:
        """Collapse the outcome to win, lose or push."""
        if self in (Outcome.NATURAL_WIN, Outcome.DEALER_BUST, Outcome.WIN):
            return "win"
        if self in (Outcome.NATURAL_PUSH, Outcome.PUSH):
            return "push"
        return "lose"

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


@dataclass(frozen=True)
class Settlement:
    """Result of settling one hand. `credit` is returned to the player's balance."""

    outcome: Outcome
    wager: int
    credit: int
    player_score: int
    dealer_score: int

    @property
    def net(self) -> int:
        """Return the chips won (positive) or lost (negative) on the hand."""
        return self.credit - self.wager


def natural_credit(wager: int) -> int:
    """Return the wager plus the floored 3:2 natural bonus."""
    bonus = (Decimal(wager) * NATURAL_PAYOUT).to_integral_value(rounding=ROUND_FLOOR)
    return wager + int(bonus)


def settle_hand(hand: Hand, dealer_hand: Hand) -> Settlement:
    """
    Compare a player hand against the dealer hand.

    Rules are checked in order and the first match wins:
    bust, both natural, player natural, dealer bust, dealer natural,
    then plain score comparison.

    Args:
        hand: The player's hand, wager already taken from the balance
        dealer_hand: The dealer's final hand

    Returns:
        The outcome and the amount to credit back to the player
    """
    wager = hand.wager
    player_score = hand.score
    dealer_score = dealer_hand.score
    player_natural = hand.is_natural
    dealer_natural = dealer_hand.is_natural

    if player_score > BLACKJACK:
        outcome, credit = Outcome.BUST, 0
    elif player_natural and dealer_natural:
        outcome, credit = Outcome.NATURAL_PUSH, wager
    elif player_natural:
        outcome, credit = Outcome.NATURAL_WIN, natural_credit(wager)
    elif dealer_score > BLACKJACK:
        outcome, credit = Outcome.DEALER_BUST, wager * 2
    elif dealer_natural:
        outcome, credit = Outcome.DEALER_NATURAL, 0
    elif player_score > dealer_score:
        outcome, credit = Outcome.WIN, wager * 2
    elif player_score < dealer_score:
        outcome, credit = Outcome.LOSE, 0
    else:
        outcome, credit = Outcome.PUSH, wager

    return Settlement(
        outcome=outcome,
        wager=wager,
        credit=credit,
        player_score=player_score,
        dealer_score=dealer_score,
    )
