"""Card and Shoe classes - immutable cards drawn from a multi-deck shoe."""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from random import Random
from typing import Iterable, Iterator

from engine.errors import ShoeExhausted

logger = logging.getLogger(__name__)

CARDS_PER_DECK = 52


class Suit(Enum):
    """Card suits."""

    CLUBS = auto()
    DIAMONDS = auto()
    HEARTS = auto()
    SPADES = auto()

    def __str__(self) -> str:
        symbols = {
            Suit.CLUBS: "♣",
            Suit.DIAMONDS: "♦",
            Suit.HEARTS: "♥",
            Suit.SPADES: "♠",
        }
        return symbols[self]


class Rank(Enum):
    """Card ranks with blackjack values."""

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
    def blackjack_value(self) -> int:
        """Return the blackjack point value (Ace = 11, face cards = 10)."""
        if self.value <= 10:
            return self.value
        if self == Rank.ACE:
            return 11
        return 10

    @property
    def is_ace(self) -> bool:
        return self == Rank.ACE


_RANK_CODES = {
    "2": Rank.TWO,
    "3": Rank.THREE,
    "4": Rank.FOUR,
    "5": Rank.FIVE,
    "6": Rank.SIX,
    "7": Rank.SEVEN,
    "8": Rank.EIGHT,
    "9": Rank.NINE,
    "10": Rank.TEN,
    "T": Rank.TEN,
    "J": Rank.JACK,
    "Q": Rank.QUEEN,
    "K": Rank.KING,
    "A": Rank.ACE,
}

_SUIT_CODES = {
    "C": Suit.CLUBS,
    "♣": Suit.CLUBS,
    "D": Suit.DIAMONDS,
    "♦": Suit.DIAMONDS,
    "H": Suit.HEARTS,
    "♥": Suit.HEARTS,
    "S": Suit.SPADES,
    "♠": Suit.SPADES,
}


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the blackjack point value, counting an ace as 11."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        return self.rank.is_ace

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh' or '10d'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str, suit_str = s[:-1], s[-1]
        if rank_str not in _RANK_CODES:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in _SUIT_CODES:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(_RANK_CODES[rank_str], _SUIT_CODES[suit_str])


def parse_cards(codes: str) -> list[Card]:
    """Parse a whitespace separated list of card codes, e.g. 'AS KH 7C'."""
    return [Card.from_string(token) for token in codes.split()]


def standard_deck() -> list[Card]:
    """Return the 52 cards of one deck in suit/rank order."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


class Shoe:
    """
    A multi-deck shoe dealt front to back through a cursor.

    The shoe never reshuffles on its own: the round engine asks
    ``needs_reshuffle`` before a deal and calls ``rebuild`` when it is due, so
    the composition never changes in the middle of a round.
    """

    def __init__(
        self,
        deck_count: int = 6,
        penetration_threshold: float = 0.75,
        rng: Random | None = None,
    ) -> None:
        """
        Initialize and shuffle a shoe.

        Args:
            deck_count: Number of 52-card decks combined into the shoe
            penetration_threshold: Remaining-cards ratio below which a
                reshuffle is due before the next round
            rng: Random number generator for shuffling
        """
        if not 0.0 <= penetration_threshold < 1.0:
            raise ValueError("Penetration threshold must be in [0, 1)")

        self._penetration_threshold = penetration_threshold
        self._rng = rng or Random()
        self._deck_count = deck_count
        self._cards: list[Card] = []
        self._position = 0
        self.build(deck_count)

    def build(self, deck_count: int | None = None) -> None:
        """Compose ``deck_count`` fresh decks, shuffle them and reset the cursor."""
        if deck_count is not None:
            if deck_count < 1:
                raise ValueError("Shoe must have at least 1 deck")
            self._deck_count = deck_count

        self._cards = [card for _ in range(self._deck_count) for card in standard_deck()]
        self._rng.shuffle(self._cards)
        self._position = 0
        logger.debug("Built %d-deck shoe (%d cards)", self._deck_count, len(self._cards))

    def rebuild(self) -> None:
        """Rebuild and reshuffle with the current deck count."""
        self.build()

    def draw(self) -> Card:
        """Deal the next card."""
        if self._position >= len(self._cards):
            raise ShoeExhausted(f"No cards left in {self._deck_count}-deck shoe")
        card = self._cards[self._position]
        self._position += 1
        return card

    def arrange(self, cards: Iterable[Card]) -> None:
        """
        Move the given undealt cards to the front of the undealt portion.

        The cards come out of ``draw`` in the order given. Only the order of
        the undealt cards changes, so the shoe still holds exactly the same
        cards.

        Raises:
            ValueError: If a requested card is not among the undealt cards
        """
        slot = self._position
        for card in cards:
            try:
                index = self._cards.index(card, slot)
            except ValueError:
                raise ValueError(f"{card!r} is not available in the shoe") from None
            self._cards[slot], self._cards[index] = self._cards[index], self._cards[slot]
            slot += 1

    @property
    def needs_reshuffle(self) -> bool:
        """Check if the remaining-cards ratio has dropped below the threshold."""
        return self.cards_remaining / self.total_cards < self._penetration_threshold

    @property
    def cards_remaining(self) -> int:
        return len(self._cards) - self._position

    @property
    def cards_dealt(self) -> int:
        """Return the number of cards dealt since the last build."""
        return self._position

    @property
    def total_cards(self) -> int:
        return self._deck_count * CARDS_PER_DECK

    @property
    def deck_count(self) -> int:
        return self._deck_count

    @property
    def penetration_threshold(self) -> float:
        return self._penetration_threshold

    def __len__(self) -> int:
        return self.cards_remaining

    def __iter__(self) -> Iterator[Card]:
        """Iterate over the undealt cards in dealing order."""
        return iter(self._cards[self._position:])
