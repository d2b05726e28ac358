"""Blackjack rule variations."""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from fractions import Fraction

from engine.errors import RuleSetError

MIN_DECKS = 1
MAX_DECKS = 8


@dataclass(frozen=True)
class RuleSet:
    """
    Table rules for one playable variant.

    A rule set is a plain value: profiles share them, the wild profile swaps
    one for another, and the round engine reads the flags as it goes. Nothing
    here mutates after construction.
    """

    # Shoe
    deck_count: int = 6

    # Dealer rules
    dealer_hits_soft_17: bool = False  # H17 vs S17

    # Blackjack payout (3:2 = 1.5, 6:5 = 1.2)
    blackjack_payout: float = 1.5

    # Double down rules; an empty set means any two-card total
    double_restricted_totals: frozenset[int] = field(default_factory=frozenset)
    double_after_split: bool = True  # DAS

    # Split rules
    max_hands_after_split: int = 4
    resplit_aces: bool = False  # RSA
    split_aces_one_card: bool = True

    # Surrender rules
    surrender_allowed: bool = True
    early_surrender: bool = False

    # Table stakes
    minimum_bet_multiplier: float = 1.0

    # Promotional rules: the extra wager is not taken from the bankroll
    free_doubles: bool = False
    free_splits: bool = False

    def __post_init__(self) -> None:
        """Normalise the restricted totals and validate rule combinations."""
        object.__setattr__(
            self, "double_restricted_totals", frozenset(self.double_restricted_totals)
        )

        if not MIN_DECKS <= self.deck_count <= MAX_DECKS:
            raise RuleSetError(f"deck_count must be between {MIN_DECKS} and {MAX_DECKS}")
        if self.blackjack_payout < 1.0:
            raise RuleSetError("blackjack_payout must be at least 1.0")
        if self.max_hands_after_split < 2:
            raise RuleSetError("max_hands_after_split must be at least 2")
        if self.minimum_bet_multiplier <= 0:
            raise RuleSetError("minimum_bet_multiplier must be positive")
        if any(not 4 <= total <= 21 for total in self.double_restricted_totals):
            raise RuleSetError("double_restricted_totals must be two-card totals (4-21)")
        if self.early_surrender and not self.surrender_allowed:
            raise RuleSetError("early_surrender requires surrender_allowed")

    def allows_double_on(self, total: int) -> bool:
        """Check the restricted-totals rule for a hand total."""
        return not self.double_restricted_totals or total in self.double_restricted_totals

    def with_changes(self, **changes: object) -> "RuleSet":
        """Return a copy with some rules replaced (validated again)."""
        return replace(self, **changes)

    @property
    def payout_label(self) -> str:
        """Blackjack payout as a ratio, e.g. '3:2' or '6:5'."""
        ratio = Fraction(str(self.blackjack_payout)).limit_denominator(10)
        return f"{ratio.numerator}:{ratio.denominator}"

    @property
    def minimum_bet_factor(self) -> Decimal:
        return Decimal(str(self.minimum_bet_multiplier))

    def approximate_house_edge(self) -> Decimal:
        """
        Heuristic house edge in percent (e.g. Decimal('0.50') for 0.50%).

        This is an additive rule-of-thumb estimate for display. It is not a
        computed probability and the engine never branches on it.
        """
        from engine.rules.house_edge import HouseEdgeCalculator

        return HouseEdgeCalculator(self).calculate()

    def summary(self) -> list[str]:
        """Return the active rules as short display strings."""
        lines = [
            f"{self.deck_count} deck{'s' if self.deck_count > 1 else ''}",
            "Dealer hits soft 17" if self.dealer_hits_soft_17 else "Dealer stands on soft 17",
            f"Blackjack pays {self.payout_label}",
        ]

        if self.double_restricted_totals:
            totals = ", ".join(str(t) for t in sorted(self.double_restricted_totals))
            lines.append(f"Double on {totals} only")
        else:
            lines.append("Double on any two cards")
        lines.append("Double after split" if self.double_after_split else "No double after split")

        lines.append(f"Split up to {self.max_hands_after_split} hands")
        if self.resplit_aces:
            lines.append("Resplit aces")
        if self.split_aces_one_card:
            lines.append("Split aces receive one card")

        if self.surrender_allowed:
            lines.append("Early surrender" if self.early_surrender else "Late surrender")
        else:
            lines.append("No surrender")

        if self.free_doubles:
            lines.append("Free doubles")
        if self.free_splits:
            lines.append("Free splits")
        if self.minimum_bet_multiplier != 1.0:
            lines.append(f"Minimum bet x{self.minimum_bet_multiplier:g}")

        return lines
