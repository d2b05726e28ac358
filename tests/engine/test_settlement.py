"""Tests for hand settlement and result messages."""

import pytest
from decimal import Decimal

from engine.cards import parse_cards
from engine.hand import Hand
from engine.game.settlement import (
    HandOutcome,
    HandRecord,
    describe_outcome,
    format_money,
    natural_message,
    round_message,
    settle_hand,
    surrender_refund,
)

STAKE = Decimal("100")


def _hand(cards: str, stake: Decimal = STAKE) -> Hand:
    return Hand(cards=parse_cards(cards), stake=stake, funded=stake)


def _record(outcome: HandOutcome, payout: str, index: int = 0, funded: str = "100") -> HandRecord:
    return HandRecord(
        hand_index=index,
        player_cards=("10♠", "8♥"),
        player_total=18,
        dealer_cards=("10♦", "7♣"),
        dealer_total=17,
        stake=STAKE,
        funded=Decimal(funded),
        payout=Decimal(payout),
        outcome=outcome,
        actions=("stand",),
        was_split=False,
        was_doubled=False,
        profile="ruby",
    )


class TestSettleHand:
    """Tests for settle_hand."""

    @pytest.mark.parametrize(
        "player, dealer, outcome, payout",
        [
            ("10S 6H 9C", "10D 7C", HandOutcome.BUST, "0"),
            ("10S 6H 9C", "10D 6C 9H", HandOutcome.BUST, "0"),
            ("10S 8H", "10D 6C 9H", HandOutcome.DEALER_BUST, "200"),
            ("AS KH", "10D 7C", HandOutcome.BLACKJACK, "250"),
            ("AS KH", "AD QC", HandOutcome.PUSH, "100"),
            ("10S 9H", "10D 7C", HandOutcome.WIN, "200"),
            ("10S 7H", "10D 7C", HandOutcome.PUSH, "100"),
            ("10S 6H", "10D 7C", HandOutcome.LOSS, "0"),
            ("7S 7H 7C", "10D 6C 5H", HandOutcome.PUSH, "100"),
            ("7S 7H 7C", "10D 9C", HandOutcome.WIN, "200"),
        ],
    )
    def test_settlement(self, player, dealer, outcome, payout):
        """Payout is 0, the stake, twice the stake or stake times (1 + payout)."""
        result = settle_hand(_hand(player), Hand(cards=parse_cards(dealer)), 1.5)
        assert result == (outcome, Decimal(payout))

    def test_six_five_blackjack(self):
        outcome, payout = settle_hand(_hand("AS KH"), Hand(cards=parse_cards("9D 8C")), 1.2)
        assert outcome is HandOutcome.BLACKJACK
        assert payout == Decimal("220")

    def test_split_blackjack_pays_bonus(self):
        hand = _hand("AS KH")
        hand.is_split_hand = True
        outcome, payout = settle_hand(hand, Hand(cards=parse_cards("10D 7C")), 1.5)
        assert outcome is HandOutcome.BLACKJACK
        assert payout == Decimal("250")

    def test_no_bonus_hand_pays_even_money(self):
        """A two-card 21 without the bonus settles as an ordinary total."""
        hand = _hand("AS KH")
        hand.no_blackjack_bonus = True
        outcome, payout = settle_hand(hand, Hand(cards=parse_cards("10D 7C")), 1.5)
        assert outcome is HandOutcome.WIN
        assert payout == Decimal("200")

    def test_no_bonus_hand_pushes_three_card_21(self):
        hand = _hand("AS KH")
        hand.no_blackjack_bonus = True
        outcome, payout = settle_hand(hand, Hand(cards=parse_cards("10D 5C 6S")), 1.5)
        assert outcome is HandOutcome.PUSH
        assert payout == STAKE

    def test_doubled_stake_pays_on_full_stake(self):
        hand = _hand("5S 6H 9C", stake=Decimal("200"))
        _, payout = settle_hand(hand, Hand(cards=parse_cards("10D 7C")), 1.5)
        assert payout == Decimal("400")

    def test_surrender_refund(self):
        assert surrender_refund(_hand("10S 6H")) == Decimal("50")

    def test_outcome_is_win(self):
        assert HandOutcome.BLACKJACK.is_win
        assert HandOutcome.DEALER_BUST.is_win
        assert not HandOutcome.PUSH.is_win
        assert not HandOutcome.SURRENDER.is_win


class TestHandRecord:
    """Tests for HandRecord."""

    def test_net_uses_funded_amount(self):
        """A free split hand has nothing funded, so its whole payout is profit."""
        assert _record(HandOutcome.WIN, "200").net == Decimal("100")
        assert _record(HandOutcome.WIN, "200", funded="0").net == Decimal("200")

    def test_to_dict(self):
        data = _record(HandOutcome.PUSH, "100").to_dict()
        assert data["outcome"] == "push"
        assert data["net"] == Decimal("0")
        assert data["player_cards"] == ("10♠", "8♥")


class TestMessages:
    """Tests for result message formatting."""

    def test_format_money(self):
        assert format_money(Decimal("1234.5")) == "$1,234.50"

    def test_win_headline(self):
        message = round_message([_record(HandOutcome.WIN, "200")], "3:2")
        assert message.splitlines()[0] == "You Win! +$100.00"

    def test_push_headline(self):
        message = round_message([_record(HandOutcome.PUSH, "100")], "3:2")
        assert message.splitlines()[0] == "Push - Bet Returned"

    def test_loss_headline(self):
        message = round_message([_record(HandOutcome.LOSS, "0")], "3:2")
        assert message.splitlines()[0] == "Dealer Wins -$100.00"

    def test_split_breakdown_numbers_hands(self):
        records = [
            _record(HandOutcome.WIN, "200", index=0),
            _record(HandOutcome.LOSS, "0", index=1),
        ]
        lines = round_message(records, "3:2").splitlines()
        assert lines[0] == "Push - Bet Returned"
        assert lines[1] == "Win (Hand 1): +$100.00"
        assert lines[2] == "Lose (Hand 2): -$100.00"

    def test_describe_blackjack(self):
        line = describe_outcome(_record(HandOutcome.BLACKJACK, "250"), 1, "3:2")
        assert line == "Blackjack: +$150.00 (3:2)"

    def test_describe_surrender(self):
        line = describe_outcome(_record(HandOutcome.SURRENDER, "50"), 1, "3:2")
        assert line == "Surrender: $50.00 returned"

    def test_natural_messages(self):
        record = _record(HandOutcome.BLACKJACK, "250")
        assert natural_message(True, True, record, "3:2") == "Push - Both Blackjack!"
        assert natural_message(True, False, record, "3:2") == "Blackjack (3:2)! You win $150.00!"
        assert natural_message(False, True, record, "3:2") == "Dealer Blackjack - You lose"
