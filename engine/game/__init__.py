"""Round engine and state management."""

from engine.game.events import GameEvent, EventType, EventEmitter
from engine.game.state import RoundState
from engine.game.settlement import HandOutcome, HandRecord, settle_hand
from engine.game.snapshot import TableSnapshot
from engine.game.engine import RoundEngine

__all__ = [
    "GameEvent",
    "EventType",
    "EventEmitter",
    "RoundState",
    "HandOutcome",
    "HandRecord",
    "settle_hand",
    "TableSnapshot",
    "RoundEngine",
]
