"""Blackjack round engine with state machine."""

import logging
from decimal import Decimal
from functools import wraps
from random import Random
from typing import Any, Callable, TypeVar

from transitions import Machine

from engine.cards import Card, Shoe
from engine.errors import RoundAborted, ShoeExhausted
from engine.hand import BLACKJACK, Hand, PlayerAction
from engine.rules.profiles import RUBY, Profile, get_profile
from engine.rules.ruleset import RuleSet
from engine.rules.selector import RuleSetSelector
from engine.game.events import EventEmitter, EventHandler, EventType
from engine.game.settlement import (
    HandOutcome,
    HandRecord,
    format_money,
    natural_message,
    round_message,
    settle_hand,
    surrender_refund,
)
from engine.game.snapshot import TableSnapshot, build_snapshot
from engine.game.state import BETWEEN_ROUNDS, RoundState

logger = logging.getLogger(__name__)

DEFAULT_BANKROLL = Decimal("10000")
DEFAULT_BASE_MINIMUM_BET = Decimal("10")

F = TypeVar("F", bound=Callable[..., Any])

# A refusal reason: the event to publish and a message for the player
Refusal = tuple[EventType, str]


def _voids_round_on_exhaustion(method: F) -> F:
    """Turn a mid-round ShoeExhausted into a voided round and RoundAborted."""

    @wraps(method)
    def wrapper(self: "RoundEngine", *args: Any, **kwargs: Any) -> Any:
        try:
            return method(self, *args, **kwargs)
        except ShoeExhausted as exc:
            self._void_round(exc)
            raise RoundAborted("The shoe ran out mid-round; the round was voided") from exc

    return wrapper  # type: ignore[return-value]


class RoundEngine:
    """
    Single-player blackjack round engine.

    Owns the shoe, the player's hands, the dealer's hand, the active rule
    set and the bankroll. Every public action checks that it is legal in the
    current state and then runs its whole effect, including any dealer play
    and settlement it triggers, before returning.

    Refused actions return False, leave the state unchanged and publish an
    INVALID_ACTION or INSUFFICIENT_FUNDS event. Collaborators (statistics,
    presentation, tutorials) subscribe to events or read ``snapshot()``; the
    engine never calls into them.
    """

    STATES = [s.name.lower() for s in RoundState]

    TRANSITIONS = [
        {"trigger": "deal", "source": "betting", "dest": "dealing"},
        {"trigger": "open_play", "source": "dealing", "dest": "player_turn"},
        {"trigger": "settle_naturals", "source": "dealing", "dest": "result"},
        {"trigger": "hand_to_dealer", "source": "player_turn", "dest": "dealer_turn"},
        {"trigger": "surrender_round", "source": "player_turn", "dest": "result"},
        {"trigger": "settle", "source": "dealer_turn", "dest": "result"},
        {"trigger": "bankrupt", "source": "result", "dest": "game_over"},
        {"trigger": "clear_table", "source": "result", "dest": "betting"},
        {"trigger": "reset_table", "source": ["betting", "result", "game_over"], "dest": "betting"},
        {"trigger": "abort_round", "source": ["dealing", "player_turn", "dealer_turn"], "dest": "betting"},
    ]

    def __init__(
        self,
        profile: Profile = RUBY,
        starting_bankroll: Decimal | int = DEFAULT_BANKROLL,
        base_minimum_bet: Decimal | int = DEFAULT_BASE_MINIMUM_BET,
        penetration_threshold: float = 0.75,
        auto_stand_on_21: bool = True,
        rng: Random | None = None,
        selector: RuleSetSelector | None = None,
    ) -> None:
        """
        Initialize a new engine sitting at ``profile``'s table.

        Args:
            profile: Dealer profile whose rules govern play
            starting_bankroll: Bankroll at start and default for resets
            base_minimum_bet: Minimum bet before the profile's multiplier
            penetration_threshold: Remaining-cards ratio that triggers a
                reshuffle before the next deal
            auto_stand_on_21: Stand automatically when a hand reaches 21
            rng: Random number generator for shuffles and wild rule draws
            selector: Wild rule selector (built from the default pool if
                not provided)
        """
        self._rng = rng or Random()
        self.events = EventEmitter()
        self.selector = selector or RuleSetSelector(rng=self._rng)

        self.starting_bankroll = Decimal(str(starting_bankroll))
        self.base_minimum_bet = Decimal(str(base_minimum_bet))
        self.auto_stand_on_21 = auto_stand_on_21

        self.profile = profile
        self.rules, self.rules_label = self._rules_for(profile)
        self.shoe = Shoe(
            deck_count=self.rules.deck_count,
            penetration_threshold=penetration_threshold,
            rng=self._rng,
        )

        self.bankroll = self.starting_bankroll
        self.last_bet = self.minimum_bet
        self.player_hands: list[Hand] = []
        self.current_hand_index = 0
        self.dealer_hand = Hand()
        self.hole_card: Card | None = None
        self.dealer_revealed = False
        self.result_message = ""
        self.last_results: list[HandRecord] = []
        self.last_net = Decimal("0")

        self._session_active = False
        self._session_rounds = 0
        self._shoe_spent = False

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="betting",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def state(self) -> RoundState:
        """Get current round state as enum."""
        return RoundState[self._machine_state.upper()]  # type: ignore[attr-defined]

    @property
    def minimum_bet(self) -> Decimal:
        """Base minimum scaled by the active rules' multiplier."""
        return self.base_minimum_bet * self.rules.minimum_bet_factor

    @property
    def current_hand(self) -> Hand | None:
        """Get the hand currently receiving actions."""
        if 0 <= self.current_hand_index < len(self.player_hands):
            return self.player_hands[self.current_hand_index]
        return None

    @property
    def hand_bets(self) -> list[Decimal]:
        """Stakes index-aligned with ``player_hands``."""
        return [hand.stake for hand in self.player_hands]

    @property
    def current_bet(self) -> Decimal:
        """Total stake riding on the table this round."""
        return sum(self.hand_bets, Decimal("0"))

    @property
    def reshuffle_pending(self) -> bool:
        """True when the next deal will rebuild the shoe first."""
        return self._shoe_spent or self.shoe.needs_reshuffle

    @property
    def rules_redraw_pending(self) -> bool:
        """
        True when a wild table will draw new rules at the next deal.

        The bet is checked against the current minimum before the draw, while
        the drawn rules govern the round being dealt.
        """
        return self.profile.wild and self.reshuffle_pending

    @property
    def session_active(self) -> bool:
        return self._session_active

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    def snapshot(self) -> TableSnapshot:
        """Return an immutable view of everything a presentation layer shows."""
        return build_snapshot(self)

    # ------------------------------------------------------------------
    # Betting and dealing
    # ------------------------------------------------------------------

    def can_bet(self, amount: Decimal | int) -> bool:
        """Check whether ``place_bet(amount)`` would be accepted."""
        return self._bet_refusal(Decimal(str(amount))) is None

    def _bet_refusal(self, amount: Decimal) -> Refusal | None:
        if self.state != RoundState.BETTING:
            return EventType.INVALID_ACTION, f"Cannot bet while {self.state}"
        if amount < self.minimum_bet:
            return EventType.INVALID_ACTION, f"Minimum bet is {format_money(self.minimum_bet)}"
        if amount > self.bankroll:
            return EventType.INSUFFICIENT_FUNDS, f"Insufficient funds for {format_money(amount)}"
        return None

    @_voids_round_on_exhaustion
    def place_bet(self, amount: Decimal | int) -> bool:
        """
        Place a bet and deal the round.

        Args:
            amount: Stake for the single opening hand

        Returns:
            True if the bet was accepted
        """
        amount = Decimal(str(amount))
        refusal = self._bet_refusal(amount)
        if refusal is not None:
            return self._refuse(refusal, amount=amount)

        if not self._session_active:
            self._session_active = True
            self._session_rounds = 0
            self.events.emit_new(
                EventType.SESSION_STARTED,
                profile=self.profile.key,
                starting_bankroll=self.bankroll,
            )

        self.bankroll -= amount
        self.last_bet = amount
        self._discard_hands()
        self.player_hands = [Hand(stake=amount, funded=amount)]

        self.events.emit_new(EventType.BET_PLACED, amount=amount, bankroll=self.bankroll)
        logger.info("Bet placed: %s (bankroll %s)", amount, self.bankroll)

        self.deal()
        self._deal_initial_cards()
        return True

    def _deal_initial_cards(self) -> None:
        """Deal player, dealer up, player, dealer hole and check for naturals."""
        if self.reshuffle_pending:
            self._rebuild_shoe()

        hand = self.player_hands[0]
        self._deal_card_to_hand(hand)
        self._deal_card_to_hand(self.dealer_hand)
        self._deal_card_to_hand(hand)
        self.hole_card = self.shoe.draw()
        self.events.emit_new(EventType.CARD_DEALT, card="??", hand="dealer", hand_value=None)

        self._session_rounds += 1
        self.events.emit_new(EventType.ROUND_STARTED, profile=self.profile.key)
        logger.debug("Dealt %s against %s", hand, self.dealer_hand.cards[0])

        dealer_natural = Hand(cards=[self.dealer_hand.cards[0], self.hole_card]).is_blackjack
        if hand.is_blackjack or dealer_natural:
            self._resolve_naturals(hand.is_blackjack, dealer_natural)
            return

        self.open_play()

    def _resolve_naturals(self, player_natural: bool, dealer_natural: bool) -> None:
        """Settle a round decided on the initial deal, without a player turn."""
        self._reveal_hole_card()
        if player_natural:
            self.events.emit_new(EventType.PLAYER_BLACKJACK)
        if dealer_natural:
            self.events.emit_new(EventType.DEALER_BLACKJACK)

        self.settle_naturals()
        hand = self.player_hands[0]
        outcome, payout = settle_hand(hand, self.dealer_hand, self.rules.blackjack_payout)
        record = self._record(0, hand, outcome, payout)
        message = natural_message(player_natural, dealer_natural, record, self.rules.payout_label)
        self._finish_round([record], message)

    def _deal_card_to_hand(self, hand: Hand) -> Card:
        """Deal a face-up card to a hand."""
        card = self.shoe.draw()
        hand.add_card(card)
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(card),
            hand="dealer" if hand is self.dealer_hand else "player",
            hand_value=hand.total,
        )
        return card

    # ------------------------------------------------------------------
    # Player actions
    # ------------------------------------------------------------------

    def _turn_refusal(self) -> Refusal | None:
        """Refusal shared by every player action."""
        if self.state != RoundState.PLAYER_TURN:
            return EventType.INVALID_ACTION, f"No player action allowed while {self.state}"
        hand = self.current_hand
        if hand is None or hand.is_closed:
            return EventType.INVALID_ACTION, "No hand is waiting for an action"
        return None

    def _hit_refusal(self) -> Refusal | None:
        refusal = self._turn_refusal()
        if refusal is not None:
            return refusal
        hand = self.current_hand
        if hand.is_bust or hand.total >= BLACKJACK:
            return EventType.INVALID_ACTION, f"Cannot hit on {hand.total}"
        return None

    def _double_refusal(self) -> Refusal | None:
        refusal = self._turn_refusal()
        if refusal is not None:
            return refusal
        hand = self.current_hand
        if not hand.can_double:
            return EventType.INVALID_ACTION, f"Cannot double - hand has {len(hand)} cards"
        if hand.is_split_hand and not self.rules.double_after_split:
            return EventType.INVALID_ACTION, "Cannot double after a split at this table"
        if not self.rules.allows_double_on(hand.total):
            allowed = ", ".join(str(t) for t in sorted(self.rules.double_restricted_totals))
            return EventType.INVALID_ACTION, f"Cannot double on {hand.total} - only on {allowed}"
        if not self.rules.free_doubles and self.bankroll < hand.stake:
            return EventType.INSUFFICIENT_FUNDS, f"Doubling needs {format_money(hand.stake)}"
        return None

    def _split_refusal(self) -> Refusal | None:
        refusal = self._turn_refusal()
        if refusal is not None:
            return refusal
        hand = self.current_hand
        if not hand.can_split:
            return EventType.INVALID_ACTION, "Cannot split - not a pair"
        if len(self.player_hands) >= self.rules.max_hands_after_split:
            return (
                EventType.INVALID_ACTION,
                f"Cannot split - {self.rules.max_hands_after_split} hands is the maximum",
            )
        if hand.is_pair_of_aces and hand.is_split_hand and not self.rules.resplit_aces:
            return EventType.INVALID_ACTION, "Cannot re-split aces at this table"
        if not self.rules.free_splits and self.bankroll < hand.stake:
            return EventType.INSUFFICIENT_FUNDS, f"Splitting needs {format_money(hand.stake)}"
        return None

    def _surrender_refusal(self) -> Refusal | None:
        refusal = self._turn_refusal()
        if refusal is not None:
            return refusal
        if not self.rules.surrender_allowed:
            return EventType.INVALID_ACTION, f"{self.profile.name} doesn't allow surrender"
        if len(self.player_hands) != 1:
            return EventType.INVALID_ACTION, "Cannot surrender after splitting"
        if len(self.current_hand) != 2:
            return EventType.INVALID_ACTION, "Cannot surrender - already took a card"
        return None

    @property
    def can_hit(self) -> bool:
        return self._hit_refusal() is None

    @property
    def can_stand(self) -> bool:
        return self._turn_refusal() is None

    @property
    def can_double(self) -> bool:
        return self._double_refusal() is None

    @property
    def can_split(self) -> bool:
        return self._split_refusal() is None

    @property
    def can_surrender(self) -> bool:
        return self._surrender_refusal() is None

    @_voids_round_on_exhaustion
    def hit(self) -> bool:
        """Player hits (takes another card)."""
        refusal = self._hit_refusal()
        if refusal is not None:
            return self._refuse(refusal, action="hit")

        hand = self.current_hand
        hand.record(PlayerAction.HIT)
        self._deal_card_to_hand(hand)
        self.events.emit_new(
            EventType.PLAYER_HIT,
            hand_index=self.current_hand_index,
            hand_value=hand.total,
        )

        if hand.is_bust:
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_index=self.current_hand_index)
            self._advance_to_next_hand()
        elif self.auto_stand_on_21 and hand.total == BLACKJACK:
            self._stand()
        return True

    @_voids_round_on_exhaustion
    def stand(self) -> bool:
        """Player stands on the current hand."""
        refusal = self._turn_refusal()
        if refusal is not None:
            return self._refuse(refusal, action="stand")

        self._stand()
        return True

    def _stand(self) -> None:
        hand = self.current_hand
        hand.record(PlayerAction.STAND)
        self.events.emit_new(
            EventType.PLAYER_STAND,
            hand_index=self.current_hand_index,
            hand_value=hand.total,
        )
        self._advance_to_next_hand()

    @_voids_round_on_exhaustion
    def double_down(self) -> bool:
        """Double the stake, take exactly one card and stand."""
        refusal = self._double_refusal()
        if refusal is not None:
            return self._refuse(refusal, action="double")

        hand = self.current_hand
        extra = hand.stake
        if not self.rules.free_doubles:
            self.bankroll -= extra
            hand.funded += extra
        hand.stake += extra
        hand.is_doubled = True
        hand.record(PlayerAction.DOUBLE)

        self._deal_card_to_hand(hand)
        self.events.emit_new(
            EventType.PLAYER_DOUBLE,
            hand_index=self.current_hand_index,
            hand_value=hand.total,
            new_bet=hand.stake,
            free=self.rules.free_doubles,
        )
        if hand.is_bust:
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_index=self.current_hand_index)

        self._advance_to_next_hand()
        return True

    @_voids_round_on_exhaustion
    def split(self) -> bool:
        """Split a pair into two hands with identical stakes."""
        refusal = self._split_refusal()
        if refusal is not None:
            return self._refuse(refusal, action="split")

        hand = self.current_hand
        splitting_aces = hand.is_pair_of_aces
        stake = hand.stake
        funded = Decimal("0") if self.rules.free_splits else stake
        self.bankroll -= funded

        hand.record(PlayerAction.SPLIT)
        hand.is_split_hand = True
        new_hand = Hand(
            cards=[hand.cards.pop()],
            stake=stake,
            funded=funded,
            actions=[PlayerAction.SPLIT],
            is_split_hand=True,
        )
        self.player_hands.insert(self.current_hand_index + 1, new_hand)

        self._deal_card_to_hand(hand)
        self._deal_card_to_hand(new_hand)
        self.events.emit_new(
            EventType.PLAYER_SPLIT,
            hand_index=self.current_hand_index,
            hand1_value=hand.total,
            hand2_value=new_hand.total,
            free=self.rules.free_splits,
        )

        if splitting_aces and self.rules.split_aces_one_card:
            for split_hand in (hand, new_hand):
                split_hand.no_blackjack_bonus = True
                split_hand.close()
            self._advance_to_next_hand()
        elif self.auto_stand_on_21 and hand.total == BLACKJACK:
            self._stand()
        return True

    def surrender(self) -> bool:
        """
        Give up the hand for half the stake back.

        Surrender is only offered after the natural check, so it is always
        late surrender in practice; ``early_surrender`` does not change the
        timing.
        """
        refusal = self._surrender_refusal()
        if refusal is not None:
            return self._refuse(refusal, action="surrender")

        hand = self.current_hand
        hand.is_surrendered = True
        hand.record(PlayerAction.SURRENDER)
        hand.close()
        refund = surrender_refund(hand)
        self.events.emit_new(EventType.PLAYER_SURRENDER, refund=refund)

        self.surrender_round()
        record = self._record(0, hand, HandOutcome.SURRENDER, refund)
        self._finish_round([record], f"Surrendered - {format_money(refund)} returned")
        return True

    def _advance_to_next_hand(self) -> None:
        """Close the current hand and move to the next open one or the dealer."""
        self.current_hand.close()

        for index in range(self.current_hand_index + 1, len(self.player_hands)):
            hand = self.player_hands[index]
            if hand.is_closed:
                continue
            self.current_hand_index = index
            if self.auto_stand_on_21 and hand.total == BLACKJACK:
                hand.record(PlayerAction.STAND)
                hand.close()
                continue
            return

        self.hand_to_dealer()
        self._play_dealer()

    # ------------------------------------------------------------------
    # Dealer play and settlement
    # ------------------------------------------------------------------

    def _reveal_hole_card(self) -> None:
        if self.dealer_revealed or self.hole_card is None:
            return
        self.dealer_hand.add_card(self.hole_card)
        self.dealer_revealed = True
        self.events.emit_new(
            EventType.DEALER_REVEALS,
            card=str(self.hole_card),
            hand_value=self.dealer_hand.total,
        )

    def _dealer_should_hit(self) -> bool:
        """Dealer hits below 17, and on soft 17 under H17 rules."""
        total = self.dealer_hand.total
        if total < 17:
            return True
        return total == 17 and self.dealer_hand.is_soft and self.rules.dealer_hits_soft_17

    def _play_dealer(self) -> None:
        """Reveal, draw to the house rule and settle every hand."""
        self._reveal_hole_card()

        if all(hand.is_bust for hand in self.player_hands):
            logger.debug("All player hands bust; dealer does not draw")
        else:
            while self._dealer_should_hit():
                self._deal_card_to_hand(self.dealer_hand)
                self.events.emit_new(EventType.DEALER_HITS, hand_value=self.dealer_hand.total)

            if self.dealer_hand.is_bust:
                self.events.emit_new(EventType.DEALER_BUSTS, hand_value=self.dealer_hand.total)
            else:
                self.events.emit_new(
                    EventType.DEALER_STANDS,
                    hand_value=self.dealer_hand.total,
                    soft=self.dealer_hand.is_soft,
                )

        self.settle()
        records = []
        for index, hand in enumerate(self.player_hands):
            outcome, payout = settle_hand(hand, self.dealer_hand, self.rules.blackjack_payout)
            records.append(self._record(index, hand, outcome, payout))
        self._finish_round(records, round_message(records, self.rules.payout_label))

    def _record(self, index: int, hand: Hand, outcome: HandOutcome, payout: Decimal) -> HandRecord:
        return HandRecord(
            hand_index=index,
            player_cards=tuple(str(card) for card in hand.cards),
            player_total=hand.total,
            dealer_cards=tuple(str(card) for card in self.dealer_hand.cards),
            dealer_total=self.dealer_hand.total if self.dealer_revealed else None,
            stake=hand.stake,
            funded=hand.funded,
            payout=payout,
            outcome=outcome,
            actions=tuple(action.value for action in hand.actions),
            was_split=hand.is_split_hand,
            was_doubled=hand.is_doubled,
            profile=self.profile.key,
        )

    def _finish_round(self, records: list[HandRecord], message: str) -> None:
        """Pay out, publish the hand records and check for bankruptcy."""
        total_payout = sum((r.payout for r in records), Decimal("0"))
        self.bankroll += total_payout
        self.last_results = records
        self.last_net = sum((r.net for r in records), Decimal("0"))
        self.result_message = message

        for record in records:
            self.events.emit_new(EventType.HAND_SETTLED, record=record)
        self.events.emit_new(
            EventType.ROUND_ENDED,
            result=self.last_net,
            payout=total_payout,
            bankroll=self.bankroll,
        )
        logger.info("Round settled: net %s, bankroll %s", self.last_net, self.bankroll)

        if self.bankroll < self.minimum_bet:
            self.events.emit_new(EventType.GAME_ENDED, reason="bankrupt", bankroll=self.bankroll)
            logger.info("Bankroll %s is below the %s minimum", self.bankroll, self.minimum_bet)
            self.bankrupt()

    # ------------------------------------------------------------------
    # Between rounds
    # ------------------------------------------------------------------

    def next_hand(self) -> bool:
        """Clear the settled round and return to betting."""
        if self.state != RoundState.RESULT:
            return self._refuse(
                (EventType.INVALID_ACTION, f"Cannot start the next hand while {self.state}"),
                action="next_hand",
            )
        self._discard_hands()
        self.clear_table()
        return True

    def switch_profile(self, profile: Profile | str) -> bool:
        """
        Move to another dealer's table.

        Only allowed between rounds; a switch requested while cards are in
        play is refused so the hand in progress is never discarded. The shoe
        is rebuilt for the new deck count and a wild profile draws its rules.

        Raises:
            KeyError: If ``profile`` is an unknown profile key
        """
        if isinstance(profile, str):
            profile = get_profile(profile)

        if self.state not in BETWEEN_ROUNDS:
            return self._refuse(
                (EventType.INVALID_ACTION, f"Cannot switch dealer while {self.state}"),
                action="switch_profile",
                profile=profile.key,
            )

        self.end_session()
        previous = self.profile
        self.profile = profile
        self._rebuild_shoe()
        self.last_bet = self.minimum_bet

        self._discard_hands()
        if self.state == RoundState.RESULT:
            self.clear_table()

        self.events.emit_new(
            EventType.PROFILE_SWITCHED,
            previous=previous.key,
            profile=profile.key,
            minimum_bet=self.minimum_bet,
        )
        logger.info("Switched from %s to %s", previous.name, profile.name)
        return True

    def reset_bankroll(self, amount: Decimal | int | None = None) -> bool:
        """
        Reset the bankroll with a fresh shoe; the only way out of GAME_OVER.

        Args:
            amount: New bankroll (defaults to the starting bankroll)
        """
        amount = self.starting_bankroll if amount is None else Decimal(str(amount))

        if self.state not in BETWEEN_ROUNDS:
            return self._refuse(
                (EventType.INVALID_ACTION, f"Cannot reset the bankroll while {self.state}"),
                action="reset_bankroll",
            )
        if amount < 0:
            return self._refuse(
                (EventType.INVALID_ACTION, "Bankroll cannot be negative"),
                action="reset_bankroll",
                amount=amount,
            )

        self.end_session()
        self.bankroll = amount
        self.last_bet = self.minimum_bet
        self._discard_hands()
        self._rebuild_shoe()
        self.reset_table()

        self.events.emit_new(EventType.BANKROLL_RESET, bankroll=amount)
        logger.info("Bankroll reset to %s", amount)
        return True

    def end_session(self) -> None:
        """Publish the session-end signal if a session is in progress."""
        if not self._session_active:
            return
        self._session_active = False
        self.events.emit_new(
            EventType.SESSION_ENDED,
            profile=self.profile.key,
            final_bankroll=self.bankroll,
            rounds_played=self._session_rounds,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _rules_for(self, profile: Profile) -> tuple[RuleSet, str | None]:
        """Fixed rules for ordinary profiles, a fresh draw for the wild one."""
        if not profile.wild:
            return profile.rules, None

        label, rules = self.selector.select_next()
        self.events.emit_new(EventType.RULES_DRAWN, profile=profile.key, label=label)
        return rules, label

    def _rebuild_shoe(self) -> None:
        """Rebuild the shoe, drawing new wild rules first if applicable."""
        self.rules, self.rules_label = self._rules_for(self.profile)
        self.shoe.build(self.rules.deck_count)
        self._shoe_spent = False
        self.events.emit_new(
            EventType.SHOE_SHUFFLED,
            deck_count=self.rules.deck_count,
            rules_label=self.rules_label,
        )

    def _discard_hands(self) -> None:
        self.player_hands = []
        self.current_hand_index = 0
        self.dealer_hand = Hand()
        self.hole_card = None
        self.dealer_revealed = False
        self.result_message = ""
        self.last_results = []
        self.last_net = Decimal("0")

    def _void_round(self, exc: ShoeExhausted) -> None:
        """Refund every funded stake and drop the round after an engine failure."""
        refund = sum((hand.funded for hand in self.player_hands), Decimal("0"))
        self.bankroll += refund
        self._shoe_spent = True
        self._discard_hands()
        if self.state not in BETWEEN_ROUNDS:
            self.abort_round()

        self.events.emit_new(EventType.ROUND_ABORTED, reason=str(exc), refund=refund)
        logger.error("Round voided, %s refunded: %s", refund, exc)

    def _refuse(self, refusal: Refusal, **data: Any) -> bool:
        event_type, message = refusal
        self.events.emit_new(event_type, message=message, state=self.state.name, **data)
        logger.debug("Refused: %s", message)
        return False
