"""House edge estimate from rule variations."""

from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from engine.rules.ruleset import RuleSet


class HouseEdgeCalculator:
    """
    Estimate house edge from rule variations.

    Starts from a baseline of 0.50% for six decks, S17, 3:2, DAS and no
    surrender, then adds a fixed effect per rule that differs. Effects are
    independent and additive, which is a rough approximation; the number is
    for display and never feeds back into play.
    """

    # Rule effects on house edge (in percentage points)
    # Positive = increases house edge (bad for player)
    # Negative = decreases house edge (good for player)
    _RULE_EFFECTS = {
        # Dealer rules
        "h17": Decimal("+0.22"),
        # Blackjack payout
        "bj_6_5": Decimal("+1.39"),
        "bj_1_1": Decimal("+2.27"),
        # Double rules
        "no_das": Decimal("+0.14"),
        "double_10_11_only": Decimal("+0.18"),
        "double_9_11_only": Decimal("+0.09"),
        # Split rules
        "no_resplit": Decimal("+0.03"),
        "resplit_aces": Decimal("-0.08"),
        "hit_split_aces": Decimal("-0.19"),
        # Surrender
        "late_surrender": Decimal("-0.08"),
        # Promotions
        "free_doubles": Decimal("-0.55"),
        "free_splits": Decimal("-0.35"),
    }

    # Deck count effects relative to the six-deck baseline
    _DECK_EFFECTS = {
        1: Decimal("-0.48"),
        2: Decimal("-0.19"),
        3: Decimal("-0.12"),
        4: Decimal("-0.06"),
        5: Decimal("-0.03"),
        6: Decimal("0.00"),
        7: Decimal("+0.01"),
        8: Decimal("+0.02"),
    }

    _BASELINE = Decimal("0.50")

    # Edge per unit of blackjack payout below 3:2
    _PAYOUT_SLOPE = Decimal("4.53")

    def __init__(self, rules: "RuleSet") -> None:
        self.rules = rules

    def calculate(self) -> Decimal:
        """
        Calculate the estimated house edge for the configured rules.

        Returns:
            House edge as a percentage (e.g., 0.50 for 0.50%)
        """
        rules = self.rules
        edge = self._BASELINE

        edge += self._DECK_EFFECTS.get(rules.deck_count, Decimal("0"))

        if rules.dealer_hits_soft_17:
            edge += self._RULE_EFFECTS["h17"]

        edge += self._payout_effect()

        if not rules.double_after_split:
            edge += self._RULE_EFFECTS["no_das"]

        restricted = rules.double_restricted_totals
        if restricted:
            if 9 in restricted:
                edge += self._RULE_EFFECTS["double_9_11_only"]
            else:
                edge += self._RULE_EFFECTS["double_10_11_only"]

        if rules.max_hands_after_split <= 2:
            edge += self._RULE_EFFECTS["no_resplit"]
        if rules.resplit_aces:
            edge += self._RULE_EFFECTS["resplit_aces"]
        if not rules.split_aces_one_card:
            edge += self._RULE_EFFECTS["hit_split_aces"]

        # Surrender timing is not differentiated in play, so early surrender
        # is estimated as late surrender.
        if rules.surrender_allowed:
            edge += self._RULE_EFFECTS["late_surrender"]

        if rules.free_doubles:
            edge += self._RULE_EFFECTS["free_doubles"]
        if rules.free_splits:
            edge += self._RULE_EFFECTS["free_splits"]

        return edge.quantize(Decimal("0.01"))

    def _payout_effect(self) -> Decimal:
        """Effect of the blackjack payout relative to 3:2."""
        payout = Decimal(str(self.rules.blackjack_payout))
        if payout == Decimal("1.2"):
            return self._RULE_EFFECTS["bj_6_5"]
        if payout == Decimal("1"):
            return self._RULE_EFFECTS["bj_1_1"]
        return (Decimal("1.5") - payout) * self._PAYOUT_SLOPE
