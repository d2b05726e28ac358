"""Game API endpoints."""

import logging
from collections.abc import Callable
from fastapi import APIRouter, HTTPException, Header
from typing import Annotated

from api.schemas import (
    ActionRequest,
    BetRequest,
    CardResponse,
    DealerResponse,
    GameStateResponse,
    HandResponse,
    NewGameRequest,
    NewGameResponse,
    OutcomeResponse,
    ProfileRequest,
    ProfileResponse,
    ResetRequest,
)
from api.session import GameSession, build_engine, create_session, get_session, update_session
from engine.errors import RoundAborted
from engine.game import EventType, RoundEngine
from engine.game.snapshot import CardView, DealerView, HandView, ProfileView, TableSnapshot
from engine.game.settlement import HandRecord

logger = logging.getLogger(__name__)

router = APIRouter()

REFUSAL_EVENTS = (EventType.INVALID_ACTION, EventType.INSUFFICIENT_FUNDS)


def _card_to_response(card: CardView) -> CardResponse:
    return CardResponse(rank=card.rank, suit=card.suit, value=card.value, code=card.code)


def _hand_to_response(hand: HandView) -> HandResponse:
    """Convert a HandView to HandResponse."""
    return HandResponse(
        cards=[_card_to_response(c) for c in hand.cards],
        value=hand.total,
        is_soft=hand.is_soft,
        is_blackjack=hand.is_blackjack,
        is_busted=hand.is_bust,
        is_pair=hand.is_pair,
        bet=float(hand.stake),
        funded=float(hand.funded),
        actions=list(hand.actions),
        is_active=hand.is_active,
        is_closed=hand.is_closed,
        is_doubled=hand.is_doubled,
        is_split_hand=hand.is_split_hand,
        is_surrendered=hand.is_surrendered,
    )


def _dealer_to_response(dealer: DealerView) -> DealerResponse:
    return DealerResponse(
        upcard=_card_to_response(dealer.upcard) if dealer.upcard else None,
        cards=[_card_to_response(c) for c in dealer.cards],
        value=dealer.total,
        is_revealed=dealer.is_revealed,
        is_soft=dealer.is_soft,
        is_busted=dealer.is_bust,
        is_blackjack=dealer.is_blackjack,
    )


def _outcome_to_response(record: HandRecord) -> OutcomeResponse:
    return OutcomeResponse(
        hand_index=record.hand_index,
        outcome=record.outcome.value,
        player_cards=list(record.player_cards),
        player_total=record.player_total,
        dealer_total=record.dealer_total,
        bet=float(record.stake),
        payout=float(record.payout),
        net=float(record.net),
        was_split=record.was_split,
        was_doubled=record.was_doubled,
    )


def _profile_to_response(view: ProfileView, minimum_bet: float) -> ProfileResponse:
    return ProfileResponse(
        key=view.key,
        name=view.name,
        icon=view.icon,
        tagline=view.tagline,
        description=view.description,
        accent_colour=view.accent_colour,
        wild=view.wild,
        wild_rule_label=view.wild_rule_label,
        rules=list(view.rules),
        num_decks=view.deck_count,
        blackjack_payout=view.blackjack_payout,
        minimum_bet=minimum_bet,
        house_edge_estimate=float(view.house_edge_estimate),
        house_edge_label=view.house_edge_label,
    )


def _game_state_response(snapshot: TableSnapshot) -> GameStateResponse:
    """Convert a table snapshot to response."""
    return GameStateResponse(
        state=snapshot.state.name,
        player_hands=[_hand_to_response(h) for h in snapshot.player_hands],
        current_hand_index=snapshot.current_hand_index,
        dealer=_dealer_to_response(snapshot.dealer),
        bankroll=float(snapshot.bankroll),
        current_bet=float(snapshot.current_bet),
        minimum_bet=float(snapshot.minimum_bet),
        last_bet=float(snapshot.last_bet),
        hand_bets=[float(b) for b in snapshot.hand_bets],
        result_message=snapshot.result_message,
        outcomes=[_outcome_to_response(r) for r in snapshot.outcomes],
        net_result=float(snapshot.net_result),
        reshuffle_pending=snapshot.reshuffle_pending,
        rules_redraw_pending=snapshot.rules_redraw_pending,
        cards_remaining=snapshot.cards_remaining,
        profile=_profile_to_response(snapshot.profile, float(snapshot.minimum_bet)),
        can_hit=snapshot.can_hit,
        can_stand=snapshot.can_stand,
        can_double=snapshot.can_double,
        can_split=snapshot.can_split,
        can_surrender=snapshot.can_surrender,
    )


def _refusal_detail(engine: RoundEngine, fallback: str) -> str:
    """Message of the refusal event the engine just published."""
    history = engine.events.history
    if history and history[-1].event_type in REFUSAL_EVENTS:
        return history[-1].data.get("message", fallback)
    return fallback


async def _require_session(session_id: str) -> GameSession:
    session = await get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


async def _run(
    session_id: str,
    action: Callable[[RoundEngine], bool],
    fallback: str,
) -> GameStateResponse:
    """
    Apply an engine action under the session lock.

    Refused actions become 400 with the engine's own message; a round
    voided by the engine becomes 409.
    """
    session = await _require_session(session_id)
    async with session.lock:
        engine = session.engine
        try:
            accepted = action(engine)
        except RoundAborted as exc:
            logger.warning("Round aborted for session: %s", exc)
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        finally:
            await update_session(session_id, session)

        if not accepted:
            raise HTTPException(status_code=400, detail=_refusal_detail(engine, fallback))
        return _game_state_response(engine.snapshot())


@router.post("/new")
async def new_game(request: NewGameRequest | None = None) -> NewGameResponse:
    """Open a table at the requested (or default) dealer."""
    profile_key = request.profile if request else None
    try:
        engine = build_engine(profile_key)
    except KeyError as exc:
        raise HTTPException(status_code=400, detail=f"Unknown profile: {profile_key}") from exc

    session_id = await create_session(engine)
    return NewGameResponse(session_id=session_id, state=_game_state_response(engine.snapshot()))


@router.get("/state")
async def get_state(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Get current game state."""
    session = await _require_session(session_id)
    return _game_state_response(session.engine.snapshot())


@router.post("/bet")
async def place_bet(
    request: BetRequest,
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Place a bet and deal cards."""
    return await _run(session_id, lambda engine: engine.place_bet(request.amount), "Invalid bet")


@router.post("/action")
async def player_action(
    request: ActionRequest,
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Execute a player action."""
    actions: dict[str, Callable[[RoundEngine], bool]] = {
        "hit": RoundEngine.hit,
        "stand": RoundEngine.stand,
        "double": RoundEngine.double_down,
        "split": RoundEngine.split,
        "surrender": RoundEngine.surrender,
    }
    return await _run(session_id, actions[request.action], f"Cannot {request.action} now")


@router.post("/next")
async def next_hand(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Clear the settled round and return to betting."""
    return await _run(session_id, RoundEngine.next_hand, "No settled round to clear")


@router.post("/profile")
async def switch_profile(
    request: ProfileRequest,
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Move to another dealer's table between rounds."""

    def switch(engine: RoundEngine) -> bool:
        try:
            return engine.switch_profile(request.profile)
        except KeyError as exc:
            raise HTTPException(status_code=400, detail=f"Unknown profile: {request.profile}") from exc

    return await _run(session_id, switch, "Cannot switch dealer now")


@router.post("/reset")
async def reset_bankroll(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
    request: ResetRequest | None = None,
) -> GameStateResponse:
    """Reset the bankroll with a fresh shoe."""
    amount = request.amount if request else None
    return await _run(session_id, lambda engine: engine.reset_bankroll(amount), "Cannot reset now")
