"""Pytest fixtures for blackjack engine tests."""

import pytest
from decimal import Decimal
from random import Random

from hypothesis import strategies as st

from engine.cards import Card, Shoe, Rank, Suit, parse_cards
from engine.hand import Hand
from engine.rules import RuleSet
from engine.rules.profiles import RUBY
from engine.game import RoundEngine


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def shoe(rng):
    """A shuffled 6-deck shoe."""
    return Shoe(deck_count=6, penetration_threshold=0.75, rng=rng)


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    hand = Hand()
    hand.add_card(Card(Rank.ACE, Suit.SPADES))
    hand.add_card(Card(Rank.KING, Suit.HEARTS))
    return hand


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    hand = Hand()
    hand.add_card(Card(Rank.ACE, Suit.SPADES))
    hand.add_card(Card(Rank.SIX, Suit.HEARTS))
    return hand


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    hand = Hand()
    hand.add_card(Card(Rank.TEN, Suit.SPADES))
    hand.add_card(Card(Rank.SIX, Suit.HEARTS))
    return hand


@pytest.fixture
def pair_8s_hand():
    """A pair of 8s hand."""
    hand = Hand()
    hand.add_card(Card(Rank.EIGHT, Suit.SPADES))
    hand.add_card(Card(Rank.EIGHT, Suit.HEARTS))
    return hand


@pytest.fixture
def bust_hand():
    """A busted hand."""
    hand = Hand()
    hand.add_card(Card(Rank.TEN, Suit.SPADES))
    hand.add_card(Card(Rank.SIX, Suit.HEARTS))
    hand.add_card(Card(Rank.KING, Suit.CLUBS))
    return hand


@pytest.fixture
def rules():
    """Default ruleset."""
    return RuleSet()


@pytest.fixture
def engine(rng):
    """A fresh engine at Ruby's table with a 10,000 bankroll."""
    return RoundEngine(
        profile=RUBY,
        starting_bankroll=Decimal("10000"),
        base_minimum_bet=Decimal("10"),
        rng=rng,
    )


@pytest.fixture
def make_engine(rng):
    """Factory for engines with non-default settings."""

    def _make(**kwargs):
        kwargs.setdefault("rng", rng)
        return RoundEngine(**kwargs)

    return _make


@pytest.fixture
def stack():
    """
    Put known cards on top of an engine's shoe.

    Cards are given in dealing order: player, dealer upcard, player, dealer
    hole card, then every later draw.
    """

    def _stack(engine: RoundEngine, cards: str) -> None:
        engine.shoe.arrange(parse_cards(cards))

    return _stack


# Hypothesis strategies for property-based testing
@st.composite
def card_strategy(draw):
    """Generate a random card."""
    rank = draw(st.sampled_from(list(Rank)))
    suit = draw(st.sampled_from(list(Suit)))
    return Card(rank, suit)


@st.composite
def hand_strategy(draw, min_cards=2, max_cards=5):
    """Generate a random hand."""
    cards = draw(st.lists(card_strategy(), min_size=min_cards, max_size=max_cards))
    hand = Hand()
    for card in cards:
        hand.add_card(card)
    return hand
