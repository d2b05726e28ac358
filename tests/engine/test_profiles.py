"""Tests for dealer profiles."""

import pytest
from decimal import Decimal

from engine.rules import PROFILES, WILD_POOL, get_profile
from engine.rules.profiles import LUCKY, MAVERICK, RUBY, SHARK, ZEN


class TestProfiles:
    """Tests for the shipped dealer profiles."""

    def test_keys_are_unique(self):
        keys = [profile.key for profile in PROFILES]
        assert len(set(keys)) == len(keys)

    def test_exactly_one_wild_profile(self):
        wild = [profile for profile in PROFILES if profile.wild]
        assert wild == [MAVERICK]

    def test_wild_profile_opens_with_pool_rules(self):
        assert MAVERICK.rules in {rules for _, rules in WILD_POOL}

    @pytest.mark.parametrize("key", ["ruby", "RUBY", "Ruby"])
    def test_get_profile_case_insensitive(self, key):
        assert get_profile(key) is RUBY

    def test_get_unknown_profile(self):
        with pytest.raises(KeyError, match="Unknown profile"):
            get_profile("nobody")

    def test_ruby_is_the_classic_table(self):
        assert RUBY.rules.approximate_house_edge() == Decimal("0.42")
        assert RUBY.rules.minimum_bet_multiplier == 1.0

    def test_shark_rules(self):
        """Shark runs the tightest table."""
        rules = SHARK.rules
        assert rules.deck_count == 8
        assert rules.blackjack_payout == 1.2
        assert rules.double_restricted_totals == frozenset({9, 10, 11})
        assert not rules.surrender_allowed
        assert rules.approximate_house_edge() == Decimal("2.39")
        assert rules.approximate_house_edge() == max(
            p.rules.approximate_house_edge() for p in PROFILES
        )

    def test_lucky_free_bets(self):
        assert LUCKY.rules.free_doubles
        assert LUCKY.rules.free_splits

    def test_zen_minimum_multiplier(self):
        assert ZEN.rules.minimum_bet_factor == Decimal("5")
        assert ZEN.rules.early_surrender

    def test_profiles_are_immutable(self):
        with pytest.raises(AttributeError):
            RUBY.name = "Other"
