"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Iterator

from engine.cards import Card

BLACKJACK = 21


class PlayerAction(Enum):
    """Actions recorded against a player hand."""

    HIT = "hit"
    STAND = "stand"
    DOUBLE = "double"
    SPLIT = "split"
    SURRENDER = "surrender"


@dataclass
class Hand:
    """
    A blackjack hand with value calculation.

    Player hands also carry their wager: ``stake`` is the amount payouts are
    computed on, ``funded`` is what was actually taken from the bankroll.
    The two differ only after a free double or a free split.
    """

    cards: list[Card] = field(default_factory=list)
    stake: Decimal = Decimal("0")
    funded: Decimal = Decimal("0")
    actions: list[PlayerAction] = field(default_factory=list)
    is_doubled: bool = False
    is_split_hand: bool = False
    no_blackjack_bonus: bool = False
    is_surrendered: bool = False
    is_closed: bool = False

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def record(self, action: PlayerAction) -> None:
        self.actions.append(action)

    def close(self) -> None:
        """Mark the hand as finished; it takes no further actions."""
        self.is_closed = True

    @property
    def total(self) -> int:
        """
        Calculate the best hand total.

        Every ace starts at 11 and is reduced to 1, one at a time, while the
        total is over 21. The result is the highest total that does not
        bust, or the lowest possible total if every option busts.
        """
        total = 0
        aces = 0

        for card in self.cards:
            if card.is_ace:
                aces += 1
            total += card.value

        while total > BLACKJACK and aces > 0:
            total -= 10
            aces -= 1

        return total

    @property
    def is_soft(self) -> bool:
        """
        Check if the hand is soft (an ace is still counted as 11).

        A hand is soft if it contains an ace that can be counted as 11
        without busting.
        """
        if not any(card.is_ace for card in self.cards):
            return False

        total_hard = sum(1 if card.is_ace else card.value for card in self.cards)
        return total_hard + 10 <= BLACKJACK

    @property
    def is_hard(self) -> bool:
        return not self.is_soft

    @property
    def is_blackjack(self) -> bool:
        """Check for two cards totalling 21."""
        return len(self.cards) == 2 and self.total == BLACKJACK

    @property
    def is_bust(self) -> bool:
        return self.total > BLACKJACK

    @property
    def is_pair(self) -> bool:
        """Check if the hand is exactly two cards of the same rank."""
        return (
            len(self.cards) == 2
            and self.cards[0].rank == self.cards[1].rank
        )

    @property
    def is_pair_of_aces(self) -> bool:
        return self.is_pair and self.cards[0].is_ace

    @property
    def can_double(self) -> bool:
        """Check the card-count condition for doubling down."""
        return len(self.cards) == 2 and not self.is_doubled

    @property
    def can_split(self) -> bool:
        return self.is_pair

    @property
    def num_cards(self) -> int:
        return len(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        value_str = f"({self.total})"
        if self.is_soft:
            value_str = f"(soft {self.total})"
        if self.is_blackjack:
            value_str = "(BLACKJACK)"
        if self.is_bust:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, total={self.total})"
