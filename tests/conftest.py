"""Pytest fixtures for blackjack table tests."""

from collections import deque
from random import Random
from typing import Iterable

import pytest

from config import TableConfig
from core.cards import Card, Supply
from core.game import RoundEngine
from core.hand import Hand


def _make_hand(*cards: str, wager: int = 0) -> Hand:
    """Build a hand from card strings like 'AS', '10H'."""
    hand = Hand(wager=wager)
    for card in cards:
        hand.add_card(Card.from_string(card))
    return hand


def _cards(*names: str) -> list[Card]:
    return [Card.from_string(name) for name in names]


class ScriptedInput:
    """Input collaborator that replays canned answers in order."""

    def __init__(
        self,
        ints: Iterable[int] = (),
        choices: Iterable[str] = (),
        lines: Iterable[str] = (),
    ) -> None:
        self.ints = deque(ints)
        self.choices = deque(choices)
        self.lines = deque(lines)
        self.offered: list[list[str]] = []

    def prompt_int(self, low: int, high: int, message: str = "") -> int:
        value = self.ints.popleft()
        assert low <= value <= high, f"{value} outside {low}..{high}"
        return value

    def prompt_choice(self, valid: Iterable[str], message: str = "") -> str:
        valid = [v.upper() for v in valid]
        self.offered.append(valid)
        choice = self.choices.popleft().upper()
        assert choice in valid, f"{choice} not offered in {valid}"
        return choice

    def prompt_line(self, message: str = "") -> str:
        return self.lines.popleft()


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def table():
    """Default table settings, independent of the environment."""
    return TableConfig(
        num_decks=4,
        reshuffle_threshold=60,
        starting_chips=1000,
        min_bet=1,
        min_players=1,
        max_players=3,
        dealer_stand_total=17,
    )


@pytest.fixture
def supply(rng):
    """A shuffled 4-set supply."""
    s = Supply(num_sets=4, reshuffle_threshold=60, rng=rng)
    s.shuffle()
    return s


@pytest.fixture
def engine(table, rng):
    """A table with one seated player."""
    e = RoundEngine(table=table, rng=rng)
    e.seat_players(["Alice"])
    return e


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def natural_hand():
    """A natural (A-K)."""
    return _make_hand("AS", "KH", wager=10)


@pytest.fixture
def pair_8s_hand():
    """A pair of 8s hand."""
    return _make_hand("8S", "8H", wager=10)


@pytest.fixture
def bust_hand():
    """A busted hand (10-5-8)."""
    return _make_hand("10S", "5H", "8C", wager=10)


def _deal_round(engine: RoundEngine, stacked: list[str], wagers: Iterable[int] = (10,)) -> None:
    """Open a round, place wagers and deal from a stacked supply."""
    engine.begin_round()
    engine.supply.stack(_cards(*stacked))
    for player, wager in zip(engine.players, wagers):
        engine.place_wager(player, wager)
    engine.deal_initial()


@pytest.fixture
def make_hand():
    """Factory for hands built from card strings."""
    return _make_hand


@pytest.fixture
def make_cards():
    """Factory for card lists built from card strings."""
    return _cards


@pytest.fixture
def deal_round():
    """Open a round with wagers placed and a stacked deal."""
    return _deal_round


@pytest.fixture
def scripted():
    """Factory for scripted input collaborators."""
    return ScriptedInput
