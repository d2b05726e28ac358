"""Read-only views of the table for presentation layers."""

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from engine.cards import Card
from engine.hand import Hand
from engine.game.settlement import HandRecord
from engine.game.state import RoundState

if TYPE_CHECKING:
    from engine.game.engine import RoundEngine


@dataclass(frozen=True)
class CardView:
    rank: str
    suit: str
    value: int
    code: str

    @classmethod
    def of(cls, card: Card) -> "CardView":
        return cls(rank=str(card.rank), suit=card.suit.name.lower(), value=card.value, code=str(card))


@dataclass(frozen=True)
class HandView:
    """One player hand as displayed."""

    cards: tuple[CardView, ...]
    total: int
    is_soft: bool
    is_bust: bool
    is_blackjack: bool
    is_pair: bool
    stake: Decimal
    funded: Decimal
    actions: tuple[str, ...]
    is_active: bool
    is_closed: bool
    is_doubled: bool
    is_split_hand: bool
    is_surrendered: bool


@dataclass(frozen=True)
class DealerView:
    """
    The dealer's side of the table.

    Until the hole card is revealed ``cards`` holds only the upcard and
    ``total`` is the upcard's value.
    """

    upcard: CardView | None
    cards: tuple[CardView, ...]
    total: int | None
    is_revealed: bool
    is_soft: bool
    is_bust: bool
    is_blackjack: bool


@dataclass(frozen=True)
class ProfileView:
    """Active dealer, rules and the labelled house-edge estimate."""

    key: str
    name: str
    icon: str
    tagline: str
    description: str
    accent_colour: str
    wild: bool
    wild_rule_label: str | None
    rules: tuple[str, ...]
    deck_count: int
    blackjack_payout: str
    house_edge_estimate: Decimal
    house_edge_label: str


@dataclass(frozen=True)
class TableSnapshot:
    """Everything the presentation layer reads after an action."""

    state: RoundState
    player_hands: tuple[HandView, ...]
    current_hand_index: int
    dealer: DealerView
    bankroll: Decimal
    current_bet: Decimal
    minimum_bet: Decimal
    last_bet: Decimal
    hand_bets: tuple[Decimal, ...]
    result_message: str
    outcomes: tuple[HandRecord, ...]
    net_result: Decimal
    reshuffle_pending: bool
    rules_redraw_pending: bool
    cards_remaining: int
    profile: ProfileView
    can_hit: bool
    can_stand: bool
    can_double: bool
    can_split: bool
    can_surrender: bool


def _hand_view(hand: Hand, is_active: bool) -> HandView:
    return HandView(
        cards=tuple(CardView.of(card) for card in hand.cards),
        total=hand.total,
        is_soft=hand.is_soft,
        is_bust=hand.is_bust,
        is_blackjack=hand.is_blackjack and not hand.no_blackjack_bonus,
        is_pair=hand.is_pair,
        stake=hand.stake,
        funded=hand.funded,
        actions=tuple(action.value for action in hand.actions),
        is_active=is_active,
        is_closed=hand.is_closed,
        is_doubled=hand.is_doubled,
        is_split_hand=hand.is_split_hand,
        is_surrendered=hand.is_surrendered,
    )


def _dealer_view(engine: "RoundEngine") -> DealerView:
    hand = engine.dealer_hand
    upcard = CardView.of(hand.cards[0]) if hand.cards else None
    return DealerView(
        upcard=upcard,
        cards=tuple(CardView.of(card) for card in hand.cards),
        total=hand.total if hand.cards else None,
        is_revealed=engine.dealer_revealed,
        is_soft=hand.is_soft,
        is_bust=hand.is_bust,
        is_blackjack=engine.dealer_revealed and hand.is_blackjack,
    )


def _profile_view(engine: "RoundEngine") -> ProfileView:
    profile = engine.profile
    rules = engine.rules
    edge = rules.approximate_house_edge()
    return ProfileView(
        key=profile.key,
        name=profile.name,
        icon=profile.icon,
        tagline=profile.tagline,
        description=profile.description,
        accent_colour=profile.accent_colour,
        wild=profile.wild,
        wild_rule_label=engine.rules_label,
        rules=tuple(rules.summary()),
        deck_count=rules.deck_count,
        blackjack_payout=rules.payout_label,
        house_edge_estimate=edge,
        house_edge_label=f"~{edge}% (estimate)",
    )


def build_snapshot(engine: "RoundEngine") -> TableSnapshot:
    """Capture the engine's observable state."""
    in_play = engine.state == RoundState.PLAYER_TURN
    return TableSnapshot(
        state=engine.state,
        player_hands=tuple(
            _hand_view(hand, in_play and index == engine.current_hand_index)
            for index, hand in enumerate(engine.player_hands)
        ),
        current_hand_index=engine.current_hand_index,
        dealer=_dealer_view(engine),
        bankroll=engine.bankroll,
        current_bet=engine.current_bet,
        minimum_bet=engine.minimum_bet,
        last_bet=engine.last_bet,
        hand_bets=tuple(engine.hand_bets),
        result_message=engine.result_message,
        outcomes=tuple(engine.last_results),
        net_result=engine.last_net,
        reshuffle_pending=engine.reshuffle_pending,
        rules_redraw_pending=engine.rules_redraw_pending,
        cards_remaining=engine.shoe.cards_remaining,
        profile=_profile_view(engine),
        can_hit=engine.can_hit,
        can_stand=engine.can_stand,
        can_double=engine.can_double,
        can_split=engine.can_split,
        can_surrender=engine.can_surrender,
    )
