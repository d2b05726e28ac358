"""Exceptions raised by the round engine.

Refused player actions are not exceptions; the engine reports them through
return values and events. Only authoring defects and unrecoverable engine
conditions are raised.
"""


class EngineError(Exception):
    """Base class for engine failures."""


class RuleSetError(EngineError, ValueError):
    """A rule set or rule pool violates an authoring invariant."""


class ShoeExhausted(EngineError, IndexError):
    """A card was drawn from a shoe with no cards left."""


class RoundAborted(EngineError):
    """The in-progress round was voided after an engine-fatal error."""
