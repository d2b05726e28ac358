"""Blackjack round engine - 100% UI-agnostic."""

from engine.cards import Card, Shoe, Rank, Suit
from engine.errors import EngineError, RoundAborted, RuleSetError, ShoeExhausted
from engine.hand import Hand, PlayerAction

__all__ = [
    "Card",
    "Shoe",
    "Rank",
    "Suit",
    "Hand",
    "PlayerAction",
    "EngineError",
    "RoundAborted",
    "RuleSetError",
    "ShoeExhausted",
]
