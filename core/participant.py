"""Players and the dealer seated at the table."""

from dataclasses import dataclass, field

from core.cards import Card
from core.errors import InsufficientFunds
from core.hand import Hand


@dataclass(eq=False)
class Player:
    """A seated player: identity, chip balance and the hands live this round."""

    id: int
    name: str
    chips: int = 1000
    hands: list[Hand] = field(default_factory=list)

    def can_afford(self, amount: int) -> bool:
        """Check if the balance covers an amount."""
        return self.chips >= amount

    def debit(self, amount: int) -> None:
        """
        Take chips from the balance.

        Raises:
            InsufficientFunds: If the balance does not cover the amount
        """
        if not self.can_afford(amount):
            raise InsufficientFunds(required=amount, available=self.chips)
        self.chips -= amount

    def credit(self, amount: int) -> None:
        """Add chips to the balance."""
        self.chips += amount

    def open_hand(self, wager: int) -> Hand:
        """Stake a wager on a new first hand."""
        self.debit(wager)
        hand = Hand(wager=wager)
        self.hands.append(hand)
        return hand

    def insert_hand_after(self, hand: Hand, new_hand: Hand) -> int:
        """Insert a hand directly after another one; return its index."""
        index = self.hands.index(hand) + 1
        self.hands.insert(index, new_hand)
        return index

    def prune_hands(self) -> None:
        """Drop hands that hold no cards."""
        self.hands = [hand for hand in self.hands if hand.cards]

    def __str__(self) -> str:
        return f"Player {self.id} ({self.name})"


@dataclass(eq=False)
class Dealer:
    """The house: one permanent hand and no balance."""

    name: str = "Dealer"
    hand: Hand = field(default_factory=Hand)

    @property
    def upcard(self) -> Card | None:
        """Return the face-up card, if dealt."""
        return self.hand.cards[0] if self.hand.cards else None

    def __str__(self) -> str:
        return self.name
