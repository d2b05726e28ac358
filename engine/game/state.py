"""Round state enumeration."""

from enum import Enum, auto


class RoundState(Enum):
    """
    Round engine states.

    Flow: BETTING → DEALING → PLAYER_TURN → DEALER_TURN → RESULT → BETTING
    """

    # Waiting for a wager
    BETTING = auto()

    # Initial cards being dealt
    DEALING = auto()

    # Player acting on one of their hands
    PLAYER_TURN = auto()

    # Dealer drawing automatically
    DEALER_TURN = auto()

    # Round settled, outcome on display
    RESULT = auto()

    # Bankroll below the minimum bet; only a bankroll reset leaves this state
    GAME_OVER = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


# States in which no round is in progress
BETWEEN_ROUNDS = frozenset({RoundState.BETTING, RoundState.RESULT, RoundState.GAME_OVER})
