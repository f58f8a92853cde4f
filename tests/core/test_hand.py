"""Tests for Hand scoring and decision states."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from core.cards import Card, Rank, Suit
from core.errors import InvalidAction
from core.hand import Hand, HandState

NON_ACE_RANKS = [rank for rank in Rank if not rank.is_ace]


class TestHandScore:
    """Tests for hand scoring."""

    def test_empty_hand(self, empty_hand):
        assert len(empty_hand) == 0
        assert empty_hand.score == 0
        assert not empty_hand.is_natural
        assert not empty_hand.is_busted

    def test_add_card(self, empty_hand):
        empty_hand.add_card(Card(Rank.TEN, Suit.SPADES))
        assert len(empty_hand) == 1
        assert empty_hand.score == 10

    def test_face_cards_count_ten(self, make_hand):
        assert make_hand("JS", "QH", "KD").score == 30

    @pytest.mark.parametrize(
        "cards, expected",
        [
            (("AS", "AH"), 12),
            (("AS", "AH", "9C"), 21),
            (("AS", "AH", "AD", "9C"), 12),
            (("AS", "5H"), 16),
            (("AS", "5H", "8C"), 14),
            (("AS", "KH"), 21),
            (("AS", "AH", "AD", "AC"), 14),
        ],
    )
    def test_ace_softening(self, make_hand, cards, expected):
        """Aces drop from 11 to 1 one at a time, only while over 21."""
        assert make_hand(*cards).score == expected

    def test_soft_flag(self, make_hand):
        assert make_hand("AS", "6H").is_soft
        assert not make_hand("AS", "6H", "9C").is_soft
        assert not make_hand("10S", "6H").is_soft

    def test_bust(self, bust_hand):
        assert bust_hand.is_busted
        assert bust_hand.score == 23


class TestNatural:
    """Tests for natural detection."""

    def test_natural(self, natural_hand):
        assert natural_hand.is_natural
        assert natural_hand.score == 21

    def test_three_card_21_is_not_natural(self, make_hand):
        hand = make_hand("7S", "7H", "7C")
        assert hand.score == 21
        assert not hand.is_natural

    def test_split_hand_21_is_not_natural(self, make_hand):
        hand = make_hand("AS", "KH")
        hand.derived_from_split = True
        assert hand.score == 21
        assert not hand.is_natural


class TestPairs:
    """Tests for pair detection."""

    def test_pair_same_rank(self, make_hand):
        assert make_hand("10S", "10H").is_pair

    def test_same_value_different_rank_is_not_pair(self, make_hand):
        hand = make_hand("10S", "JH")
        assert hand.score == 20
        assert not hand.is_pair

    def test_three_cards_is_not_pair(self, make_hand):
        assert not make_hand("8S", "8H", "2C").is_pair

    def test_ace_pair(self, make_hand):
        assert make_hand("AS", "AH").is_ace_pair
        assert not make_hand("8S", "8H").is_ace_pair


class TestHandState:
    """Tests for decision state transitions."""

    def test_new_hand_is_active(self, empty_hand):
        assert empty_hand.state == HandState.ACTIVE
        assert not empty_hand.state.is_terminal

    @pytest.mark.parametrize(
        "state", [HandState.STANDING, HandState.BUSTED, HandState.DOUBLED_COMPLETE]
    )
    def test_terminal_states_are_final(self, empty_hand, state):
        empty_hand.transition(state)
        assert empty_hand.state.is_terminal
        with pytest.raises(InvalidAction):
            empty_hand.transition(HandState.ACTIVE)

    def test_split_pending_returns_to_active(self, empty_hand):
        empty_hand.transition(HandState.SPLIT_PENDING)
        assert not empty_hand.state.is_terminal
        empty_hand.transition(HandState.ACTIVE)
        assert empty_hand.state == HandState.ACTIVE

    def test_split_pending_cannot_bust(self, empty_hand):
        empty_hand.transition(HandState.SPLIT_PENDING)
        with pytest.raises(InvalidAction):
            empty_hand.transition(HandState.BUSTED)

    def test_reset(self, natural_hand):
        natural_hand.derived_from_split = True
        natural_hand.wager_doubled = True
        natural_hand.transition(HandState.STANDING)
        natural_hand.reset()
        assert natural_hand.state == HandState.ACTIVE
        assert not natural_hand.derived_from_split
        assert not natural_hand.wager_doubled

    def test_hands_compare_by_identity(self, make_hand):
        assert make_hand("AS") != make_hand("AS")


@given(st.lists(st.sampled_from(NON_ACE_RANKS), max_size=10))
def test_non_ace_score_is_plain_sum(ranks):
    """Without aces the score is the sum of card values."""
    hand = Hand(cards=[Card(rank, Suit.CLUBS) for rank in ranks])
    assert hand.score == sum(rank.points for rank in ranks)


@given(
    st.lists(st.sampled_from(NON_ACE_RANKS), max_size=6),
    st.integers(min_value=0, max_value=6),
)
def test_aces_are_softened_greedily(ranks, aces):
    """Score equals S + 11k, minus 10 per ace that has to be softened."""
    hand = Hand(cards=[Card(rank, Suit.CLUBS) for rank in ranks])
    hand.cards += [Card(Rank.ACE, Suit.SPADES)] * aces

    expected = sum(rank.points for rank in ranks) + 11 * aces
    softened = 0
    while expected > 21 and softened < aces:
        expected -= 10
        softened += 1

    assert hand.score == expected
