"""
Game Loop - Drives one play-through of the agenda puzzle.

The loop:
1. Select the first agenda
2. Player edits the board (place / update / remove)
3. Engine evaluates the current agenda after each change
4. Player completes the satisfied agenda, next agenda is selected
5. Repeat until max_rounds agendas are done

Board changes keep one object per cell; every rejected move raises
InvalidMoveError and leaves the board untouched.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING
import logging
import uuid

from ..engine_core.board import (
    BoardObject,
    DEFAULT_COLOR,
    DEFAULT_SIZE,
    validate_object,
)
from ..engine_core.rule import Rule, Verdict
from ..engine_core.selector import RandomSource, select_next
from .manager import GameStats, SessionState

if TYPE_CHECKING:
    from .manager import Session

logger = logging.getLogger(__name__)


class InvalidMoveError(ValueError):
    """A board change that breaks the board vocabulary or the one-per-cell rule."""


class GameOverError(ValueError):
    """An action on a session whose game has ended."""


class AgendaNotSatisfiedError(ValueError):
    """Completing an agenda the board does not satisfy."""


@dataclass
class RoundStatus:
    """
    Snapshot of where the game stands.

    Contains the current agenda and its verdict for the board
    as it is right now.
    """
    round_number: int
    total_rounds: int
    agenda: Rule | None
    verdict: Verdict
    completed_ids: list[str]
    game_over: bool


class GameLoop:
    """
    The main game loop driver.

    Usage:
        loop = GameLoop(session)
        loop.start()

        obj = loop.place_object("animal", "snail", row=0, col=0)
        loop.update_object(obj.id, color="purple")

        if loop.verdict().satisfied:
            loop.complete_agenda()
    """

    def __init__(self, session: Session, random: RandomSource | None = None):
        self.session = session
        self.random = random or session.rng.random

    # =========================================================================
    # Agenda progression
    # =========================================================================

    def start(self) -> Rule | None:
        """Select the first agenda. An empty catalog ends the game at once."""
        session = self.session
        session.current_rule = select_next(session.catalog, session.completed_ids, self.random)
        if session.current_rule is None:
            session.state = SessionState.GAME_OVER
        else:
            session.state = SessionState.ACTIVE
        return session.current_rule

    def verdict(self) -> Verdict:
        """Evaluate the current agenda against the board."""
        rule = self.session.current_rule
        if rule is None:
            return Verdict(satisfied=False)
        return rule.evaluate(tuple(self.session.objects))

    def complete_agenda(self) -> Rule | None:
        """
        Mark the current agenda as completed and select the next one.

        Returns the next agenda, or None when the game is over.
        """
        session = self.session
        self._require_active()
        rule = session.current_rule
        if rule is None:
            raise GameOverError("No agenda in play")
        if not rule.evaluate(tuple(session.objects)).satisfied:
            raise AgendaNotSatisfiedError(f"Agenda '{rule.id}' is not satisfied yet")

        session.completed_ids.append(rule.id)
        next_rule = select_next(session.catalog, session.completed_ids, self.random)

        if next_rule is None or len(session.completed_ids) >= session.max_rounds:
            session.current_rule = None
            session.state = SessionState.GAME_OVER
            logger.info(
                "Session %s finished after %d agenda(s)",
                session.session_id, len(session.completed_ids),
            )
        else:
            session.current_rule = next_rule
        return session.current_rule

    def restart(self) -> Rule | None:
        """Clear the board, progress and stats, then pick a new first agenda."""
        session = self.session
        session.objects.clear()
        session.completed_ids.clear()
        session.stats = GameStats()
        return self.start()

    def status(self) -> RoundStatus:
        session = self.session
        return RoundStatus(
            round_number=min(session.round_number, session.max_rounds),
            total_rounds=session.max_rounds,
            agenda=session.current_rule,
            verdict=self.verdict(),
            completed_ids=list(session.completed_ids),
            game_over=session.state != SessionState.ACTIVE,
        )

    # =========================================================================
    # Board changes
    # =========================================================================

    def place_object(self, obj_type: str, name: str, row: int, col: int) -> BoardObject:
        """Place a new medium blue object in an empty cell."""
        self._require_active()
        obj = BoardObject(
            id=uuid.uuid4().hex,
            type=obj_type,
            name=name,
            size=DEFAULT_SIZE,
            color=DEFAULT_COLOR,
            row=row,
            col=col,
        )
        self._validate(obj)

        self.session.objects.append(obj)
        self.session.stats.total_moves += 1
        self.session.stats.objects_placed += 1
        return obj

    def update_object(
        self,
        object_id: str,
        size: str | None = None,
        color: str | None = None,
    ) -> BoardObject:
        """Change the size and/or color of an object."""
        self._require_active()
        current = self._require_object(object_id)

        changes = {}
        if size is not None:
            changes["size"] = size
        if color is not None:
            changes["color"] = color
        updated = replace(current, **changes)
        self._validate(updated)

        # Swap in a new object so earlier board snapshots stay unchanged
        objects = self.session.objects
        objects[objects.index(current)] = updated
        self.session.stats.total_moves += 1
        return updated

    def remove_object(self, object_id: str) -> BoardObject:
        self._require_active()
        obj = self._require_object(object_id)
        self.session.objects.remove(obj)
        self.session.stats.total_moves += 1
        return obj

    # =========================================================================
    # Helpers
    # =========================================================================

    def _require_active(self):
        if not self.session.is_active():
            raise GameOverError(f"Session {self.session.session_id} is {self.session.state.value}")

    def _require_object(self, object_id: str) -> BoardObject:
        obj = self.session.get_object(object_id)
        if obj is None:
            raise InvalidMoveError(f"No object with id '{object_id}' on the board")
        return obj

    def validate(self, obj: BoardObject) -> list[str]:
        """Check an object against the board; empty list means it fits."""
        return validate_object(obj, self.session.objects)

    def _validate(self, obj: BoardObject):
        errors = self.validate(obj)
        if errors:
            raise InvalidMoveError("; ".join(errors))
