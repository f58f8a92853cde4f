"""Hand evaluation and the per-hand decision states."""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator

from core.cards import Card
from core.errors import InvalidAction

BLACKJACK = 21


class HandState(Enum):
    """
    Decision states of a single hand.

    Flow: ACTIVE → STANDING | BUSTED | DOUBLED_COMPLETE, with SPLIT_PENDING
    as a transient stop while a pair is divided into two ACTIVE hands.
    """

    ACTIVE = auto()
    STANDING = auto()
    BUSTED = auto()
    DOUBLED_COMPLETE = auto()
    SPLIT_PENDING = auto()

    @property
    def is_terminal(self) -> bool:
        """Check if no further decisions are taken on the hand."""
        return self in TERMINAL_STATES

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


TERMINAL_STATES = frozenset(
    {HandState.STANDING, HandState.BUSTED, HandState.DOUBLED_COMPLETE}
)

# Valid state transitions
HAND_TRANSITIONS: dict[HandState, frozenset[HandState]] = {
    HandState.ACTIVE: frozenset(
        {
            HandState.STANDING,
            HandState.BUSTED,
            HandState.DOUBLED_COMPLETE,
            HandState.SPLIT_PENDING,
        }
    ),
    HandState.SPLIT_PENDING: frozenset({HandState.ACTIVE, HandState.STANDING}),
    HandState.STANDING: frozenset(),
    HandState.BUSTED: frozenset(),
    HandState.DOUBLED_COMPLETE: frozenset(),
}


@dataclass(eq=False)
class Hand:
    """A blackjack hand: cards, the wager riding on it, and its decision state."""

    cards: list[Card] = field(default_factory=list)
    wager: int = 0
    derived_from_split: bool = False
    wager_doubled: bool = False
    state: HandState = HandState.ACTIVE

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def transition(self, to_state: HandState) -> None:
        """
        Move the hand to a new decision state.

        Raises:
            InvalidAction: If the transition is not allowed from the current state
        """
        if to_state not in HAND_TRANSITIONS[self.state]:
            raise InvalidAction(f"Hand cannot go from {self.state} to {to_state}")
        self.state = to_state

    def reset(self) -> None:
        """Clear flags and state so the hand can be reused next round."""
        self.derived_from_split = False
        self.wager_doubled = False
        self.state = HandState.ACTIVE

    @property
    def score(self) -> int:
        """
        Calculate the hand score.

        Aces count 11 and are softened to 1, one at a time, while the total
        is over 21.
        """
        total = 0
        aces = 0

        for card in self.cards:
            if card.is_ace:
                aces += 1
                total += 11
            else:
                total += card.value

        while total > BLACKJACK and aces > 0:
            total -= 10
            aces -= 1

        return total

    @property
    def is_soft(self) -> bool:
        """Check if an ace is still counted as 11."""
        if not any(card.is_ace for card in self.cards):
            return False
        hard_total = sum(1 if card.is_ace else card.value for card in self.cards)
        return hard_total + 10 <= BLACKJACK

    @property
    def is_natural(self) -> bool:
        """Check for an untouched two-card 21 that did not come from a split."""
        return (
            len(self.cards) == 2
            and self.score == BLACKJACK
            and not self.derived_from_split
        )

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (score > 21)."""
        return self.score > BLACKJACK

    @property
    def is_pair(self) -> bool:
        """Check if the hand is two cards of the same rank."""
        return len(self.cards) == 2 and self.cards[0].rank == self.cards[1].rank

    @property
    def is_ace_pair(self) -> bool:
        """Check if the hand is a pair of aces."""
        return self.is_pair and self.cards[0].is_ace

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        return f"[ {cards_str} ] ({self.score})"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, wager={self.wager}, state={self.state.name})"
