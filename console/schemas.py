"""Pydantic snapshots of the table for the presentation layer."""

from pydantic import BaseModel, ConfigDict, Field

from core.cards import Card
from core.game.engine import RoundEngine
from core.hand import Hand
from core.participant import Player


class CardView(BaseModel):
    """Card representation."""

    model_config = ConfigDict(frozen=True)

    rank: str
    suit: str
    value: int

    @classmethod
    def from_card(cls, card: Card) -> "CardView":
        return cls(rank=str(card.rank), suit=str(card.suit), value=card.value)

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"


class HandView(BaseModel):
    """Hand representation."""

    cards: list[CardView]
    score: int
    wager: int = Field(..., ge=0)
    state: str
    is_split: bool
    is_doubled: bool
    is_natural: bool
    is_busted: bool

    @classmethod
    def from_hand(cls, hand: Hand) -> "HandView":
        return cls(
            cards=[CardView.from_card(c) for c in hand.cards],
            score=hand.score,
            wager=hand.wager,
            state=hand.state.name,
            is_split=hand.derived_from_split,
            is_doubled=hand.wager_doubled,
            is_natural=hand.is_natural,
            is_busted=hand.is_busted,
        )


class PlayerView(BaseModel):
    """A seated player and their live hands."""

    id: int
    name: str
    chips: int = Field(..., ge=0)
    hands: list[HandView] = Field(default_factory=list)

    @classmethod
    def from_player(cls, player: Player) -> "PlayerView":
        return cls(
            id=player.id,
            name=player.name,
            chips=player.chips,
            hands=[HandView.from_hand(h) for h in player.hands],
        )


class TableSnapshot(BaseModel):
    """Everything a renderer needs to show the table between events."""

    round: int
    phase: str
    undealt: int
    discarded: int
    players: list[PlayerView]
    dealer: HandView

    @classmethod
    def from_engine(cls, engine: RoundEngine) -> "TableSnapshot":
        return cls(
            round=engine.round_number,
            phase=engine.phase.name,
            undealt=engine.supply.undealt_count,
            discarded=engine.supply.discard_count,
            players=[PlayerView.from_player(p) for p in engine.standings()],
            dealer=HandView.from_hand(engine.dealer.hand),
        )
