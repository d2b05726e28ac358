"""Tests for Hand evaluation."""

import pytest
from decimal import Decimal
from hypothesis import given

from conftest import hand_strategy
from engine.cards import Card, Rank, Suit, parse_cards
from engine.hand import Hand, PlayerAction


def _hand(cards: str) -> Hand:
    return Hand(cards=parse_cards(cards))


class TestHand:
    """Tests for the Hand class."""

    def test_empty_hand(self, empty_hand):
        """Test empty hand properties."""
        assert len(empty_hand) == 0
        assert empty_hand.total == 0
        assert not empty_hand.is_soft
        assert not empty_hand.is_blackjack
        assert not empty_hand.is_bust

    def test_add_card(self, empty_hand):
        """Test adding cards to hand."""
        empty_hand.add_card(Card(Rank.TEN, Suit.SPADES))
        assert len(empty_hand) == 1
        assert empty_hand.total == 10

    def test_hard_hand_value(self, hard_16_hand):
        assert hard_16_hand.total == 16
        assert hard_16_hand.is_hard

    def test_soft_hand_value(self, soft_17_hand):
        assert soft_17_hand.total == 17
        assert soft_17_hand.is_soft

    def test_blackjack(self, blackjack_hand):
        """Test blackjack detection."""
        assert blackjack_hand.is_blackjack
        assert blackjack_hand.total == 21

    def test_not_blackjack_three_cards(self):
        """Test that 21 with 3+ cards is not blackjack."""
        hand = _hand("7S 7H 7C")
        assert hand.total == 21
        assert not hand.is_blackjack

    def test_split_hand_can_be_blackjack(self):
        """Two cards totalling 21 are blackjack whether or not the hand was split."""
        hand = _hand("AS KH")
        hand.is_split_hand = True
        assert hand.is_blackjack

    def test_bust(self, bust_hand):
        assert bust_hand.is_bust
        assert bust_hand.total == 26

    @pytest.mark.parametrize(
        "cards, total, soft",
        [
            ("AS AH", 12, True),
            ("AS 9H", 20, True),
            ("AS 9H 5C", 15, False),
            ("AS AH AD", 13, True),
            ("AS AH AD AC", 14, True),
            ("AS AH 9D", 21, True),
            ("AS AH 9D KC", 21, False),
            ("AS 5H 5D", 21, True),
            ("10S 6H AD", 17, False),
            ("AS 6H", 17, True),
        ],
    )
    def test_ace_flex(self, cards, total, soft):
        """Aces count 11 one at a time while that does not bust the hand."""
        hand = _hand(cards)
        assert hand.total == total
        assert hand.is_soft is soft

    def test_pair_detection(self, pair_8s_hand):
        assert pair_8s_hand.is_pair
        assert pair_8s_hand.can_split
        assert not pair_8s_hand.is_pair_of_aces

    def test_mixed_tens_are_not_a_pair(self):
        """Splitting needs matching rank, not matching value."""
        assert not _hand("KS QH").is_pair

    def test_pair_of_aces(self):
        assert _hand("AS AH").is_pair_of_aces

    def test_can_double(self):
        hand = _hand("5S 6H")
        assert hand.can_double
        hand.is_doubled = True
        assert not hand.can_double
        assert not _hand("2S 3H 6C").can_double

    def test_stake_defaults(self, empty_hand):
        assert empty_hand.stake == Decimal("0")
        assert empty_hand.funded == Decimal("0")

    def test_record_and_close(self, empty_hand):
        empty_hand.record(PlayerAction.HIT)
        empty_hand.close()
        assert empty_hand.actions == [PlayerAction.HIT]
        assert empty_hand.is_closed

    def test_str(self, blackjack_hand, bust_hand, soft_17_hand):
        assert "BLACKJACK" in str(blackjack_hand)
        assert "BUST" in str(bust_hand)
        assert "soft 17" in str(soft_17_hand)


class TestHandProperties:
    """Property-based tests for hand totals."""

    @given(hand_strategy(min_cards=1, max_cards=8))
    def test_total_is_best_non_busting_choice(self, hand):
        """The total is the highest ace assignment at or under 21, else the lowest."""
        aces = sum(1 for card in hand if card.is_ace)
        hard = sum(1 if card.is_ace else card.value for card in hand)
        options = [hard + 10 * n for n in range(aces + 1)]
        legal = [option for option in options if option <= 21]
        expected = max(legal) if legal else min(options)
        assert hand.total == expected

    @given(hand_strategy())
    def test_soft_hand_never_busts(self, hand):
        if hand.is_soft:
            assert hand.total <= 21

    @given(hand_strategy())
    def test_blackjack_implies_two_card_21(self, hand):
        if hand.is_blackjack:
            assert len(hand) == 2
            assert hand.total == 21
