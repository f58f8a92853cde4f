"""Card model and the shared card supply (undealt cards plus discard pile)."""

from dataclasses import dataclass
from enum import Enum, auto
from functools import total_ordering
from random import Random
from typing import TYPE_CHECKING, Iterable, Iterator

from core.errors import SupplyExhausted
from logging_utils import get_logger

if TYPE_CHECKING:
    from core.hand import Hand

logger = get_logger(__name__)

CARDS_PER_SET = 52


class Suit(Enum):
    """Card suits."""

    SPADES = auto()
    HEARTS = auto()
    DIAMONDS = auto()
    CLUBS = auto()

    def __str__(self) -> str:
        symbols = {
            Suit.SPADES: "♠",
            Suit.HEARTS: "♥",
            Suit.DIAMONDS: "♦",
            Suit.CLUBS: "♣",
        }
        return symbols[self]


class Rank(Enum):
    """The thirteen card ranks."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        if self.value <= 10:
            return str(self.value)
        return {
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
            Rank.ACE: "A",
        }[self]

    @property
    def points(self) -> int:
        """Return the primary point value (Ace = 11, face cards = 10)."""
        if self.value <= 10:
            return self.value
        if self == Rank.ACE:
            return 11
        return 10

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE


_RANK_ALIASES = {str(rank): rank for rank in Rank} | {"T": Rank.TEN}
_SUIT_ALIASES = {
    "S": Suit.SPADES,
    "♠": Suit.SPADES,
    "H": Suit.HEARTS,
    "♥": Suit.HEARTS,
    "D": Suit.DIAMONDS,
    "♦": Suit.DIAMONDS,
    "C": Suit.CLUBS,
    "♣": Suit.CLUBS,
}


@total_ordering
@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card, equal by rank and suit, ordered rank-then-suit."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return (self.rank.value, self.suit.value) < (other.rank.value, other.suit.value)

    @property
    def value(self) -> int:
        """Return the primary point value."""
        return self.rank.points

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', '10h'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str, suit_str = s[:-1], s[-1]
        if rank_str not in _RANK_ALIASES:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in _SUIT_ALIASES:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(_RANK_ALIASES[rank_str], _SUIT_ALIASES[suit_str])


def canonical_set() -> list[Card]:
    """Return the 52 distinct cards of a standard deck."""
    return [Card(rank, suit) for rank in Rank for suit in Suit]


class Supply:
    """
    The table's card pool: an ordered undealt sequence and a discard pile.

    Cards are drawn from the front of the undealt sequence. Spent cards are
    bulk-moved to the discard pile and only come back into play when a draw
    finds the undealt sequence empty.
    """

    def __init__(
        self,
        num_sets: int = 4,
        reshuffle_threshold: int = 60,
        rng: Random | None = None,
    ) -> None:
        """
        Initialize a supply of multiple standard card sets.

        Args:
            num_sets: Number of 52-card sets in the supply
            reshuffle_threshold: Undealt count below which a round starts
                with a full rebuild
            rng: Random number generator for shuffling
        """
        if num_sets < 1:
            raise ValueError("Supply must have at least 1 card set")

        self._num_sets = num_sets
        self._reshuffle_threshold = reshuffle_threshold
        self._rng = rng or Random()
        self._undealt: list[Card] = []
        self._discard: list[Card] = []
        self._recycle_count = 0
        self.build(num_sets)

    def build(self, num_sets: int | None = None) -> None:
        """Empty both piles and refill the undealt sequence in set order."""
        if num_sets is not None:
            if num_sets < 1:
                raise ValueError("Supply must have at least 1 card set")
            self._num_sets = num_sets
        self._discard.clear()
        self._undealt = [card for _ in range(self._num_sets) for card in canonical_set()]
        logger.debug("Supply built with %d cards", len(self._undealt))

    def shuffle(self) -> None:
        """Randomly permute the undealt sequence."""
        if not self._undealt:
            return
        self._rng.shuffle(self._undealt)

    def rebuild(self) -> None:
        """Build a fresh supply and shuffle it."""
        logger.info("Rebuilding supply (%d cards undealt)", len(self._undealt))
        self.build()
        self.shuffle()

    def recycle(self) -> None:
        """Move every discarded card back into the undealt sequence and shuffle."""
        logger.info("Recycling %d discarded cards", len(self._discard))
        self._undealt.extend(self._discard)
        self._discard.clear()
        self._recycle_count += 1
        self.shuffle()

    def draw(self) -> Card:
        """
        Remove and return the front card of the undealt sequence.

        Raises:
            SupplyExhausted: If no cards remain even after recycling the discard pile
        """
        if not self._undealt:
            self.recycle()
            if not self._undealt:
                logger.error("Supply exhausted: no cards to deal or recycle")
                raise SupplyExhausted("No cards left to deal or shuffle")
        return self._undealt.pop(0)

    def discard(self, card: Card) -> None:
        """Move a single card to the discard pile."""
        self._discard.append(card)

    def discard_hand(self, hand: "Hand") -> None:
        """Move a hand's cards to the discard pile and reset its wager."""
        self._discard.extend(hand.cards)
        hand.cards.clear()
        hand.wager = 0

    @property
    def needs_rebuild(self) -> bool:
        """Check if the undealt count has dropped below the low-water mark."""
        return len(self._undealt) < self._reshuffle_threshold

    @property
    def undealt_count(self) -> int:
        """Return the number of undealt cards."""
        return len(self._undealt)

    @property
    def discard_count(self) -> int:
        """Return the number of discarded cards."""
        return len(self._discard)

    @property
    def total_cards(self) -> int:
        """Return the number of cards in a full supply."""
        return self._num_sets * CARDS_PER_SET

    @property
    def num_sets(self) -> int:
        """Return the number of card sets."""
        return self._num_sets

    @property
    def reshuffle_threshold(self) -> int:
        """Return the low-water mark."""
        return self._reshuffle_threshold

    @property
    def recycle_count(self) -> int:
        """Return how many times the discard pile has been recycled."""
        return self._recycle_count

    def stack(self, cards: Iterable[Card]) -> None:
        """
        Move the given undealt cards to the front, in draw order.

        Each card is taken out of its current undealt position, so the
        supply keeps the same composition.

        Raises:
            ValueError: If a card is not currently undealt
        """
        front: list[Card] = []
        rest = list(self._undealt)
        for card in cards:
            try:
                rest.remove(card)
            except ValueError:
                raise ValueError(f"{card!r} is not in the undealt sequence") from None
            front.append(card)
        self._undealt = front + rest

    def __len__(self) -> int:
        return len(self._undealt)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._undealt)
