"""Settlement arithmetic and per-hand outcome records."""

from dataclasses import asdict, dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Sequence

from engine.hand import Hand

TWO = Decimal("2")
HALF = Decimal("0.5")


class HandOutcome(Enum):
    """Outcome category of one settled player hand."""

    BLACKJACK = "blackjack"
    WIN = "win"
    DEALER_BUST = "dealer_bust"
    PUSH = "push"
    LOSS = "loss"
    BUST = "bust"
    SURRENDER = "surrender"

    @property
    def is_win(self) -> bool:
        return self in (HandOutcome.BLACKJACK, HandOutcome.WIN, HandOutcome.DEALER_BUST)


def settle_hand(hand: Hand, dealer: Hand, blackjack_payout: float) -> tuple[HandOutcome, Decimal]:
    """
    Settle one player hand against the dealer's final hand.

    Stakes are taken from the bankroll when wagered, so the payout is the
    full amount returned: 0 for a loss, the stake for a push, twice the
    stake for an even-money win, and ``stake * (1 + blackjack_payout)`` for
    a natural. Split aces closed after one card carry ``no_blackjack_bonus``
    and settle a two-card 21 as an ordinary total.

    Returns:
        Tuple of (outcome, payout)
    """
    stake = hand.stake

    if hand.is_bust:
        return HandOutcome.BUST, Decimal("0")
    if dealer.is_bust:
        return HandOutcome.DEALER_BUST, stake * TWO
    if hand.is_blackjack and not hand.no_blackjack_bonus and not dealer.is_blackjack:
        return HandOutcome.BLACKJACK, stake * (1 + Decimal(str(blackjack_payout)))
    if hand.total > dealer.total:
        return HandOutcome.WIN, stake * TWO
    if hand.total == dealer.total:
        return HandOutcome.PUSH, stake
    return HandOutcome.LOSS, Decimal("0")


def surrender_refund(hand: Hand) -> Decimal:
    """Half the stake comes back on a surrender."""
    return hand.stake * HALF


@dataclass(frozen=True)
class HandRecord:
    """
    Plain-data record of one settled hand.

    Emitted once per hand for statistics, tutorial and achievement
    collaborators. ``dealer_total`` is None when the hole card was never
    revealed (a surrendered hand).
    """

    hand_index: int
    player_cards: tuple[str, ...]
    player_total: int
    dealer_cards: tuple[str, ...]
    dealer_total: int | None
    stake: Decimal
    funded: Decimal
    payout: Decimal
    outcome: HandOutcome
    actions: tuple[str, ...]
    was_split: bool
    was_doubled: bool
    profile: str

    @property
    def net(self) -> Decimal:
        """Payout less the amount the player actually put up."""
        return self.payout - self.funded

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["outcome"] = self.outcome.value
        data["net"] = self.net
        return data


def format_money(amount: Decimal) -> str:
    return f"${amount:,.2f}"


def describe_outcome(record: HandRecord, hand_count: int, payout_label: str) -> str:
    """One line of the result breakdown, e.g. 'Win (Hand 2): +$100.00'."""
    suffix = f" (Hand {record.hand_index + 1})" if hand_count > 1 else ""
    outcome = record.outcome

    if outcome is HandOutcome.BLACKJACK:
        return f"Blackjack{suffix}: +{format_money(record.net)} ({payout_label})"
    if outcome.is_win:
        return f"Win{suffix}: +{format_money(record.net)}"
    if outcome is HandOutcome.PUSH:
        return f"Push{suffix}"
    if outcome is HandOutcome.SURRENDER:
        return f"Surrender{suffix}: {format_money(record.payout)} returned"
    label = "Bust" if outcome is HandOutcome.BUST else "Lose"
    return f"{label}{suffix}: -{format_money(record.stake)}"


def round_message(records: Sequence[HandRecord], payout_label: str) -> str:
    """Headline plus per-hand breakdown for a settled round."""
    net = sum((r.net for r in records), Decimal("0"))

    if net > 0:
        headline = f"You Win! +{format_money(net)}"
    elif net == 0:
        headline = "Push - Bet Returned"
    else:
        headline = f"Dealer Wins -{format_money(-net)}"

    lines = [describe_outcome(r, len(records), payout_label) for r in records]
    return "\n".join([headline, *lines])


def natural_message(player_natural: bool, dealer_natural: bool, record: HandRecord, payout_label: str) -> str:
    """Result message for a round decided on the initial deal."""
    if player_natural and dealer_natural:
        return "Push - Both Blackjack!"
    if player_natural:
        return f"Blackjack ({payout_label})! You win {format_money(record.net)}!"
    return "Dealer Blackjack - You lose"
