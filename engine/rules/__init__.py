"""Rule sets, dealer profiles and the wild rule selector."""

from engine.rules.ruleset import RuleSet
from engine.rules.house_edge import HouseEdgeCalculator
from engine.rules.selector import RuleSetSelector, WILD_POOL, WILD_EDGE_BAND, validate_pool
from engine.rules.profiles import Profile, PROFILES, get_profile

__all__ = [
    "RuleSet",
    "HouseEdgeCalculator",
    "RuleSetSelector",
    "WILD_POOL",
    "WILD_EDGE_BAND",
    "validate_pool",
    "Profile",
    "PROFILES",
    "get_profile",
]
