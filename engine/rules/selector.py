"""Random rule selection for the wild profile."""

import logging
from decimal import Decimal
from random import Random
from typing import Sequence

from engine.errors import RuleSetError
from engine.rules.ruleset import RuleSet

logger = logging.getLogger(__name__)

# Target band for the heuristic house edge of every wild pool entry (percent)
WILD_EDGE_BAND = (Decimal("0.40"), Decimal("0.80"))

LabelledRuleSet = tuple[str, RuleSet]

WILD_POOL: tuple[LabelledRuleSet, ...] = (
    ("Classic Shoe", RuleSet()),
    ("Hit Seventeen", RuleSet(dealer_hits_soft_17=True)),
    (
        "Single Deck Squeeze",
        RuleSet(
            deck_count=1,
            dealer_hits_soft_17=True,
            double_after_split=False,
            double_restricted_totals=frozenset({10, 11}),
            surrender_allowed=False,
            minimum_bet_multiplier=2.0,
        ),
    ),
    (
        "Double Deck Duel",
        RuleSet(
            deck_count=2,
            dealer_hits_soft_17=True,
            max_hands_after_split=2,
            surrender_allowed=False,
        ),
    ),
    ("Eight Deck Grind", RuleSet(deck_count=8, surrender_allowed=False)),
    (
        "Ace Party",
        RuleSet(
            dealer_hits_soft_17=True,
            resplit_aces=True,
            split_aces_one_card=False,
            surrender_allowed=False,
        ),
    ),
    (
        "Free Bet Frenzy",
        RuleSet(
            deck_count=2,
            blackjack_payout=1.2,
            free_doubles=True,
            free_splits=True,
            minimum_bet_multiplier=1.5,
        ),
    ),
)


def validate_pool(
    pool: Sequence[LabelledRuleSet],
    band: tuple[Decimal, Decimal] = WILD_EDGE_BAND,
) -> None:
    """
    Check a wild pool before it is registered.

    Raises:
        RuleSetError: If the pool is empty, repeats a label or a rule set, or
            holds a rule set whose estimated house edge falls outside ``band``
    """
    if not pool:
        raise RuleSetError("Wild rule pool must not be empty")

    labels = [label for label, _ in pool]
    if len(set(labels)) != len(labels):
        raise RuleSetError("Wild rule pool labels must be unique")
    if len({rules for _, rules in pool}) != len(pool):
        raise RuleSetError("Wild rule pool entries must be distinct rule sets")

    low, high = band
    for label, rules in pool:
        edge = rules.approximate_house_edge()
        if not low <= edge <= high:
            raise RuleSetError(
                f"{label!r} has an estimated edge of {edge}%, outside {low}%-{high}%"
            )


class RuleSetSelector:
    """
    Draws the wild profile's rules, never repeating the previous draw.

    The pool is validated on construction so a badly authored rule set is
    rejected at startup rather than discovered mid-session.
    """

    def __init__(
        self,
        pool: Sequence[LabelledRuleSet] = WILD_POOL,
        rng: Random | None = None,
        band: tuple[Decimal, Decimal] = WILD_EDGE_BAND,
    ) -> None:
        validate_pool(pool, band)
        self._pool = tuple(pool)
        self._rng = rng or Random()
        self._last: LabelledRuleSet | None = None

    @property
    def pool(self) -> tuple[LabelledRuleSet, ...]:
        return self._pool

    @property
    def last(self) -> LabelledRuleSet | None:
        """Return the most recent selection, if any."""
        return self._last

    def select_next(self) -> LabelledRuleSet:
        """Pick a pool entry uniformly, excluding the previous pick."""
        candidates = [
            entry for entry in self._pool
            if len(self._pool) == 1 or entry != self._last
        ]
        choice = self._rng.choice(candidates)
        self._last = choice
        logger.info("Wild rules drawn: %s", choice[0])
        return choice
