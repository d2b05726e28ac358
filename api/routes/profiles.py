"""Dealer profile endpoints."""

from fastapi import APIRouter, HTTPException

from api.schemas import ProfileResponse
from config import config
from engine.rules import PROFILES, Profile, get_profile

router = APIRouter()


def _profile_to_response(profile: Profile) -> ProfileResponse:
    """Describe a profile with its opening rules."""
    rules = profile.rules
    edge = rules.approximate_house_edge()
    return ProfileResponse(
        key=profile.key,
        name=profile.name,
        icon=profile.icon,
        tagline=profile.tagline,
        description=profile.description,
        accent_colour=profile.accent_colour,
        wild=profile.wild,
        rules=rules.summary(),
        num_decks=rules.deck_count,
        blackjack_payout=rules.payout_label,
        minimum_bet=float(config.engine.base_minimum_bet * rules.minimum_bet_factor),
        house_edge_estimate=float(edge),
        house_edge_label=f"~{edge}% (estimate)",
    )


@router.get("")
async def list_profiles() -> list[ProfileResponse]:
    """List every dealer profile."""
    return [_profile_to_response(profile) for profile in PROFILES]


@router.get("/{key}")
async def get_profile_detail(key: str) -> ProfileResponse:
    """Get one dealer profile."""
    try:
        profile = get_profile(key)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown profile: {key}") from exc
    return _profile_to_response(profile)
