"""Signed, in-memory game sessions."""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from uuid import uuid4

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from config import config
from engine.game import RoundEngine
from engine.rules import get_profile

logger = logging.getLogger(__name__)


class SessionSigner:
    """Sign and verify session IDs using itsdangerous."""

    def __init__(self, secret_key: str | None = None) -> None:
        """Initialize the signer with a secret key."""
        self._secret_key = secret_key or config.security.secret_key
        self._serializer = URLSafeTimedSerializer(self._secret_key)

    def sign(self, session_id: str) -> str:
        """Create a signed token from a session ID."""
        return self._serializer.dumps(session_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Verify and extract session_id from a signed token.

        Args:
            token: The signed token to verify
            max_age: Maximum age in seconds (defaults to session_ttl)

        Returns:
            The session ID if valid, None otherwise
        """
        max_age = max_age or config.session_ttl
        try:
            return self._serializer.loads(token, max_age=max_age)
        except (BadSignature, SignatureExpired):
            return None


# Global signer instance
_session_signer: SessionSigner | None = None


def get_session_signer() -> SessionSigner:
    """Get or create the session signer."""
    global _session_signer
    if _session_signer is None:
        _session_signer = SessionSigner()
    return _session_signer


def build_engine(profile_key: str | None = None) -> RoundEngine:
    """
    Create a round engine from the configured defaults.

    Raises:
        KeyError: If ``profile_key`` names no profile
    """
    settings = config.engine
    return RoundEngine(
        profile=get_profile(profile_key or settings.default_profile),
        starting_bankroll=settings.starting_bankroll,
        base_minimum_bet=settings.base_minimum_bet,
        penetration_threshold=settings.penetration_threshold,
        auto_stand_on_21=settings.auto_stand_on_21,
    )


@dataclass
class GameSession:
    """
    One player's engine plus the lock that serialises their requests.

    The engine is not reentrant, so every request holds ``lock`` while it
    acts on the engine.
    """

    engine: RoundEngine
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    created_at: datetime = field(default_factory=datetime.now)
    last_activity: datetime = field(default_factory=datetime.now)

    def touch(self) -> None:
        self.last_activity = datetime.now()


class SessionStore(ABC):
    """Abstract session store."""

    @abstractmethod
    async def get(self, session_id: str) -> GameSession | None:
        """Get a session."""
        ...

    @abstractmethod
    async def set(self, session_id: str, session: GameSession, ttl: int | None = None) -> None:
        """Store a session."""
        ...

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Delete a session."""
        ...

    async def exists(self, session_id: str) -> bool:
        """Check if session exists."""
        return await self.get(session_id) is not None

    def create_session_id(self, signed: bool = True) -> str:
        """
        Create a new session ID.

        Args:
            signed: If True, return a signed session token

        Returns:
            A new session ID (signed or unsigned based on parameter)
        """
        session_id = str(uuid4())
        if signed:
            return get_session_signer().sign(session_id)
        return session_id


class InMemorySessionStore(SessionStore):
    """Process-local session store with expiry."""

    def __init__(self) -> None:
        self._sessions: dict[str, tuple[GameSession, datetime]] = {}

    async def get(self, session_id: str) -> GameSession | None:
        """Get a session, dropping it if it has expired."""
        if session_id not in self._sessions:
            return None

        session, expiry = self._sessions[session_id]
        if expiry < datetime.now():
            await self.delete(session_id)
            return None

        return session

    async def set(
        self,
        session_id: str,
        session: GameSession,
        ttl: int | None = None,
    ) -> None:
        """Store a session and refresh its expiry."""
        ttl = ttl or config.session_ttl
        expiry = datetime.now() + timedelta(seconds=ttl)
        self._sessions[session_id] = (session, expiry)

    async def delete(self, session_id: str) -> None:
        """Delete a session, ending its statistics session first."""
        entry = self._sessions.pop(session_id, None)
        if entry is not None:
            entry[0].engine.end_session()

    async def cleanup_expired(self) -> int:
        """Remove expired sessions."""
        now = datetime.now()
        expired = [sid for sid, (_, expiry) in self._sessions.items() if expiry < now]
        for sid in expired:
            await self.delete(sid)
        return len(expired)


# Global session store instance
_session_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    """Get or create the session store."""
    global _session_store
    if _session_store is None:
        _session_store = InMemorySessionStore()
    return _session_store


async def create_session(engine: RoundEngine) -> str:
    """Register an engine under a new signed session ID."""
    store = get_session_store()
    session_id = store.create_session_id()
    await store.set(session_id, GameSession(engine=engine))
    logger.info("Session created at %s's table", engine.profile.name)
    return session_id


async def get_session(session_id: str) -> GameSession | None:
    """Look up a session; tokens with a bad signature are never found."""
    if extract_session_id(session_id) is None:
        return None
    store = get_session_store()
    return await store.get(session_id)


async def update_session(session_id: str, session: GameSession) -> None:
    """Refresh a session's expiry after activity."""
    session.touch()
    await get_session_store().set(session_id, session)


async def delete_session(session_id: str) -> None:
    await get_session_store().delete(session_id)


def extract_session_id(token: str) -> str | None:
    """
    Extract the raw session ID from a signed token.

    Args:
        token: The signed session token

    Returns:
        The raw session ID if valid, None otherwise
    """
    return get_session_signer().unsign(token)
