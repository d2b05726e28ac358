"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import Literal


# Request schemas
class NewGameRequest(BaseModel):
    """Request to open a table."""

    profile: str | None = Field(default=None, description="Dealer profile key")


class BetRequest(BaseModel):
    """Request to place a bet."""

    amount: int = Field(..., ge=1, description="Bet amount")


class ActionRequest(BaseModel):
    """Request for player action."""

    action: Literal["hit", "stand", "double", "split", "surrender"]


class ProfileRequest(BaseModel):
    """Request to move to another dealer's table."""

    profile: str


class ResetRequest(BaseModel):
    """Request to reset the bankroll; defaults to the starting bankroll."""

    amount: int | None = Field(default=None, ge=0)


# Response schemas
class CardResponse(BaseModel):
    """Card representation."""

    rank: str
    suit: str
    value: int
    code: str


class HandResponse(BaseModel):
    """Player hand representation."""

    cards: list[CardResponse]
    value: int
    is_soft: bool
    is_blackjack: bool
    is_busted: bool
    is_pair: bool
    bet: float
    funded: float
    actions: list[str]
    is_active: bool
    is_closed: bool
    is_doubled: bool
    is_split_hand: bool
    is_surrendered: bool


class DealerResponse(BaseModel):
    """Dealer hand; only the upcard until the hole card is revealed."""

    upcard: CardResponse | None
    cards: list[CardResponse]
    value: int | None
    is_revealed: bool
    is_soft: bool
    is_busted: bool
    is_blackjack: bool


class OutcomeResponse(BaseModel):
    """Settlement of one player hand."""

    hand_index: int
    outcome: Literal["blackjack", "win", "dealer_bust", "push", "loss", "bust", "surrender"]
    player_cards: list[str]
    player_total: int
    dealer_total: int | None
    bet: float
    payout: float
    net: float
    was_split: bool
    was_doubled: bool


class ProfileResponse(BaseModel):
    """Dealer profile with its rules and labelled house-edge estimate."""

    key: str
    name: str
    icon: str
    tagline: str
    description: str
    accent_colour: str
    wild: bool
    wild_rule_label: str | None = None
    rules: list[str]
    num_decks: int
    blackjack_payout: str
    minimum_bet: float
    house_edge_estimate: float
    house_edge_label: str


class GameStateResponse(BaseModel):
    """Current game state."""

    state: str
    player_hands: list[HandResponse]
    current_hand_index: int
    dealer: DealerResponse
    bankroll: float
    current_bet: float
    minimum_bet: float
    last_bet: float
    hand_bets: list[float]
    result_message: str
    outcomes: list[OutcomeResponse]
    net_result: float
    reshuffle_pending: bool
    rules_redraw_pending: bool
    cards_remaining: int
    profile: ProfileResponse
    can_hit: bool
    can_stand: bool
    can_double: bool
    can_split: bool
    can_surrender: bool


class NewGameResponse(BaseModel):
    """Session token for a freshly opened table."""

    session_id: str
    state: GameStateResponse
