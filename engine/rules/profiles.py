"""Dealer profiles: named, themed rule sets."""

from dataclasses import dataclass

from engine.rules.ruleset import RuleSet
from engine.rules.selector import WILD_POOL


@dataclass(frozen=True)
class Profile:
    """
    A dealer the player can sit down with.

    A profile is data: the name and theme are cosmetic, ``rules`` decides
    play. For the wild profile ``rules`` is only the opening rule set; the
    round engine replaces the active rules every time the shoe is rebuilt.
    """

    key: str
    name: str
    rules: RuleSet
    icon: str = ""
    tagline: str = ""
    description: str = ""
    accent_colour: str = "#2E7D32"
    wild: bool = False


RUBY = Profile(
    key="ruby",
    name="Ruby",
    icon="♦",
    tagline="The Classic",
    description="Six decks, dealer stands on soft 17, blackjack pays 3:2.",
    accent_colour="#C62828",
    rules=RuleSet(),
)

SHARK = Profile(
    key="shark",
    name="Shark",
    icon="🦈",
    tagline="High Stakes, Tight Rules",
    description="Eight decks, 6:5 blackjack, doubles on 9-11 only and one split.",
    accent_colour="#37474F",
    rules=RuleSet(
        deck_count=8,
        dealer_hits_soft_17=True,
        blackjack_payout=1.2,
        double_restricted_totals=frozenset({9, 10, 11}),
        double_after_split=False,
        max_hands_after_split=2,
        surrender_allowed=False,
        minimum_bet_multiplier=2.0,
    ),
)

LUCKY = Profile(
    key="lucky",
    name="Lucky",
    icon="🍀",
    tagline="Free Doubles, Free Splits",
    description="Doubles and splits cost nothing extra, but blackjack pays 6:5.",
    accent_colour="#2E7D32",
    rules=RuleSet(
        dealer_hits_soft_17=True,
        blackjack_payout=1.2,
        split_aces_one_card=False,
        free_doubles=True,
        free_splits=True,
    ),
)

ZEN = Profile(
    key="zen",
    name="Zen",
    icon="☯",
    tagline="Player Friendly",
    description="Early surrender, resplit aces and full play on split aces.",
    accent_colour="#6A1B9A",
    rules=RuleSet(
        resplit_aces=True,
        split_aces_one_card=False,
        early_surrender=True,
        minimum_bet_multiplier=5.0,
    ),
)

BLITZ = Profile(
    key="blitz",
    name="Blitz",
    icon="⚡",
    tagline="Fast Four-Deck Action",
    description="A quick four-deck table where the dealer hits soft 17.",
    accent_colour="#F9A825",
    rules=RuleSet(deck_count=4, dealer_hits_soft_17=True),
)

MAVERICK = Profile(
    key="maverick",
    name="Maverick",
    icon="🎲",
    tagline="New Rules Every Shoe",
    description="Draws a fresh rule set each time the shoe is rebuilt.",
    accent_colour="#EF6C00",
    rules=WILD_POOL[0][1],
    wild=True,
)

PROFILES: tuple[Profile, ...] = (RUBY, SHARK, LUCKY, ZEN, BLITZ, MAVERICK)

_BY_KEY = {profile.key: profile for profile in PROFILES}


def get_profile(key: str) -> Profile:
    """
    Look up a profile by key (case-insensitive).

    Raises:
        KeyError: If no profile has that key
    """
    try:
        return _BY_KEY[key.lower()]
    except KeyError:
        raise KeyError(f"Unknown profile: {key}") from None
