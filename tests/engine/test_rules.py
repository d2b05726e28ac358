"""Tests for rule sets and the house edge estimate."""

import pytest
from decimal import Decimal

from engine.errors import RuleSetError
from engine.rules import HouseEdgeCalculator, RuleSet


class TestRuleSet:
    """Tests for RuleSet construction and queries."""

    def test_defaults(self, rules):
        """Test the default rules: six decks, S17, 3:2, late surrender."""
        assert rules.deck_count == 6
        assert not rules.dealer_hits_soft_17
        assert rules.blackjack_payout == 1.5
        assert rules.double_restricted_totals == frozenset()
        assert rules.double_after_split
        assert rules.max_hands_after_split == 4
        assert rules.split_aces_one_card
        assert rules.surrender_allowed
        assert not rules.free_doubles
        assert not rules.free_splits

    def test_immutable(self, rules):
        with pytest.raises(AttributeError):
            rules.deck_count = 2

    def test_restricted_totals_normalised(self):
        """Restricted totals given as any iterable become a frozenset."""
        rules = RuleSet(double_restricted_totals={10, 11})
        assert rules.double_restricted_totals == frozenset({10, 11})
        assert hash(rules) == hash(RuleSet(double_restricted_totals=frozenset({11, 10})))

    def test_allows_double_on(self):
        assert RuleSet().allows_double_on(12)
        restricted = RuleSet(double_restricted_totals=frozenset({10, 11}))
        assert restricted.allows_double_on(10)
        assert restricted.allows_double_on(11)
        assert not restricted.allows_double_on(12)
        assert not restricted.allows_double_on(9)

    @pytest.mark.parametrize(
        "changes",
        [
            {"deck_count": 0},
            {"deck_count": 9},
            {"blackjack_payout": 0.9},
            {"max_hands_after_split": 1},
            {"minimum_bet_multiplier": 0},
            {"double_restricted_totals": frozenset({3})},
            {"double_restricted_totals": frozenset({22})},
            {"early_surrender": True, "surrender_allowed": False},
        ],
    )
    def test_invalid_rules_rejected(self, changes):
        """Test that invalid combinations raise RuleSetError."""
        with pytest.raises(RuleSetError):
            RuleSet(**changes)

    def test_rule_set_error_is_value_error(self):
        with pytest.raises(ValueError):
            RuleSet(deck_count=0)

    def test_with_changes_validates(self, rules):
        """Test that with_changes copies and re-validates."""
        h17 = rules.with_changes(dealer_hits_soft_17=True)
        assert h17.dealer_hits_soft_17
        assert not rules.dealer_hits_soft_17

        with pytest.raises(RuleSetError):
            rules.with_changes(deck_count=12)

    @pytest.mark.parametrize(
        "payout, label",
        [(1.5, "3:2"), (1.2, "6:5"), (1.0, "1:1"), (2.0, "2:1")],
    )
    def test_payout_label(self, payout, label):
        assert RuleSet(blackjack_payout=payout).payout_label == label

    def test_minimum_bet_factor(self):
        assert RuleSet(minimum_bet_multiplier=1.5).minimum_bet_factor == Decimal("1.5")

    def test_summary_default(self, rules):
        """Test the display summary of the default rules."""
        summary = rules.summary()
        assert "6 decks" in summary
        assert "Dealer stands on soft 17" in summary
        assert "Blackjack pays 3:2" in summary
        assert "Double on any two cards" in summary
        assert "Late surrender" in summary

    def test_summary_variations(self):
        rules = RuleSet(
            deck_count=1,
            dealer_hits_soft_17=True,
            blackjack_payout=1.2,
            double_restricted_totals=frozenset({10, 11}),
            surrender_allowed=False,
            free_doubles=True,
        )
        summary = rules.summary()
        assert "1 deck" in summary
        assert "Dealer hits soft 17" in summary
        assert "Blackjack pays 6:5" in summary
        assert "Double on 10, 11 only" in summary
        assert "No surrender" in summary
        assert "Free doubles" in summary


class TestHouseEdge:
    """Tests for HouseEdgeCalculator."""

    def test_default_rules_edge(self, rules):
        """Baseline 0.50% less late surrender."""
        assert rules.approximate_house_edge() == Decimal("0.42")

    def test_edge_is_quantized(self, rules):
        assert HouseEdgeCalculator(rules).calculate().as_tuple().exponent == -2

    def test_h17_increases_edge(self, rules):
        h17 = rules.with_changes(dealer_hits_soft_17=True)
        assert h17.approximate_house_edge() - rules.approximate_house_edge() == Decimal("0.22")

    def test_six_five_increases_edge(self, rules):
        six_five = rules.with_changes(blackjack_payout=1.2)
        assert six_five.approximate_house_edge() == Decimal("1.81")

    def test_fewer_decks_lower_edge(self):
        edges = [RuleSet(deck_count=n).approximate_house_edge() for n in range(1, 9)]
        assert edges == sorted(edges)

    def test_interpolated_payout(self):
        """Payouts without a table entry scale linearly from 3:2."""
        rules = RuleSet(blackjack_payout=1.4, surrender_allowed=False)
        assert rules.approximate_house_edge() == Decimal("0.95")

    def test_early_surrender_estimated_as_late(self):
        late = RuleSet()
        early = RuleSet(early_surrender=True)
        assert late.approximate_house_edge() == early.approximate_house_edge()

    def test_restricted_doubles(self):
        nine_to_eleven = RuleSet(double_restricted_totals=frozenset({9, 10, 11}))
        ten_eleven = RuleSet(double_restricted_totals=frozenset({10, 11}))
        assert nine_to_eleven.approximate_house_edge() == Decimal("0.51")
        assert ten_eleven.approximate_house_edge() == Decimal("0.60")

    def test_free_bets_reduce_edge(self, rules):
        free = rules.with_changes(free_doubles=True, free_splits=True)
        assert free.approximate_house_edge() == Decimal("-0.48")
