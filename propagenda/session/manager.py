"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Agendas are loaded once at startup (the catalog)
2. Player starts a session -> ephemeral session (in-memory only)
3. During the game:
   - Player places, edits and removes objects
   - Engine re-evaluates the current agenda after every change
   - Once satisfied, the player completes the agenda and the next one is selected
4. Game ends after max_rounds agendas -> session can be restarted or ended

PERSISTENCE RULES:
- NO database
- Sessions are destroyed when ended or stale
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence
import logging
import random
import time
import uuid

from ..engine_core.board import BoardObject
from ..engine_core.catalog import RuleCatalog
from ..engine_core.rule import Rule

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Agendas in progress
    GAME_OVER = "game_over"  # All rounds completed (or no agendas at all)
    ABANDONED = "abandoned"  # Player quit


@dataclass
class GameStats:
    """Counters shown on the victory screen."""
    started_at: float = field(default_factory=time.time)
    total_moves: int = 0
    objects_placed: int = 0

    def elapsed_seconds(self, now: float | None = None) -> int:
        now = time.time() if now is None else now
        return max(0, int(now - self.started_at))

    def time_taken(self, now: float | None = None) -> str:
        """Elapsed time as m:ss."""
        minutes, seconds = divmod(self.elapsed_seconds(now), 60)
        return f"{minutes}:{seconds:02d}"


@dataclass
class Session:
    """
    An ephemeral game session.

    Contains:
    - The agenda catalog the game draws from
    - The board (list of objects)
    - Progress (completed agenda ids, in order) and the current agenda
    - Stats for the victory screen

    The session is destroyed when the game ends.
    """
    session_id: str
    catalog: RuleCatalog
    created_at: float

    state: SessionState = SessionState.ACTIVE
    objects: list[BoardObject] = field(default_factory=list)

    # Progress
    completed_ids: list[str] = field(default_factory=list)
    current_rule: Rule | None = None

    stats: GameStats = field(default_factory=GameStats)

    # Uniform source for agenda selection
    rng: random.Random = field(default_factory=random.Random)

    metadata: dict[str, Any] = field(default_factory=dict)

    def is_active(self) -> bool:
        """Check if the session still accepts moves."""
        return self.state == SessionState.ACTIVE

    @property
    def max_rounds(self) -> int:
        return self.catalog.max_rounds

    @property
    def round_number(self) -> int:
        """1-based number of the round in play."""
        return len(self.completed_ids) + 1

    def get_object(self, object_id: str) -> BoardObject | None:
        for obj in self.objects:
            if obj.id == object_id:
                return obj
        return None


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions from the loaded catalog
    - Track active sessions
    - Clean up stale sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self):
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        catalog: RuleCatalog,
        objects: Sequence[BoardObject] | None = None,
        seed: int | None = None,
    ) -> Session:
        """
        Create a new game session.

        Args:
            catalog: Loaded agenda catalog
            objects: Optional starting board
            seed: Seed for reproducible agenda selection

        Returns:
            New Session; call GameLoop.start() to pick the first agenda
        """
        session = Session(
            session_id=str(uuid.uuid4()),
            catalog=catalog,
            created_at=time.time(),
            objects=list(objects or []),
            rng=random.Random(seed),
        )
        self._sessions[session.session_id] = session
        logger.info(
            "Created session %s with %d agenda(s)",
            session.session_id, len(catalog),
        )
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and remove it from memory.

        Returns False if the session did not exist.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False

        if reason == "completed":
            session.state = SessionState.GAME_OVER
        else:
            session.state = SessionState.ABANDONED
        session.objects.clear()
        session.current_rule = None
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_sessions(self) -> list[str]:
        """List IDs of all sessions still in memory."""
        return list(self._sessions.keys())

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions still in play."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600, now: float | None = None) -> int:
        """
        Remove finished sessions older than max_age.

        Games still in play are kept however old they are.
        Returns the number of sessions removed.
        """
        now = time.time() if now is None else now
        stale = [
            sid for sid, session in self._sessions.items()
            if now - session.created_at > max_age_seconds and not session.is_active()
        ]
        for session_id in stale:
            self.end_session(session_id, reason="stale")
        return len(stale)
