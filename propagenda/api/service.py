"""
API Service - Business logic layer between API and engine.

The service:
1. Holds the agenda catalog (loaded once at startup)
2. Translates API requests to engine calls
3. Manages sessions and their game loops
4. Formats responses for the client

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
Domain errors never escape: they come back as ErrorResponse.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
import logging
import random

from .schemas import (
    # Requests
    CreateSessionRequest,
    PlaceObjectRequest,
    UpdateObjectRequest,
    # Responses
    CatalogResponse,
    EvaluateResponse,
    NextAgendaResponse,
    SessionResponse,
    ErrorResponse,
    # Shared
    AgendaInfo,
    BoardObjectInfo,
    GameStatsInfo,
    VerdictInfo,
    # Enums
    ErrorCode,
    SessionStatus,
)
from ..engine_core.board import BoardObject
from ..engine_core.catalog import RuleCatalog, load_catalog
from ..engine_core.checks import CHECKS, evaluate
from ..engine_core.rule import Rule, Verdict
from ..engine_core.selector import select_next
from ..session import (
    SessionManager,
    Session,
    GameLoop,
    InvalidMoveError,
    GameOverError,
    AgendaNotSatisfiedError,
)

logger = logging.getLogger(__name__)


def to_board_object(info: BoardObjectInfo) -> BoardObject:
    return BoardObject(
        id=info.id,
        type=info.type.value,
        name=info.name,
        size=info.size.value,
        color=info.color.value,
        row=info.row,
        col=info.col,
    )


def to_object_info(obj: BoardObject) -> BoardObjectInfo:
    return BoardObjectInfo(
        id=obj.id,
        type=obj.type,
        name=obj.name,
        size=obj.size,
        color=obj.color,
        row=obj.row,
        col=obj.col,
        emoji=obj.emoji or None,
    )


def to_agenda_info(rule: Rule) -> AgendaInfo:
    return AgendaInfo(
        id=rule.id,
        title=rule.title,
        description=rule.description,
        difficulty=rule.difficulty,
        has_check=rule.id in CHECKS,
    )


def to_verdict_info(verdict: Verdict) -> VerdictInfo:
    return VerdictInfo(satisfied=verdict.satisfied, hints=list(verdict.hints))


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()
        await service.load_catalog()

        # Stateless engine calls
        response = service.evaluate("one-small", objects)

        # Sessions
        session_response = service.create_session(request)
        service.place_object(session_id, place_request)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    catalog: RuleCatalog = field(default_factory=RuleCatalog)
    catalog_loaded: bool = False

    # Game loops per session
    _game_loops: dict[str, GameLoop] = field(default_factory=dict)

    async def load_catalog(self, path: str | Path | None = None) -> RuleCatalog:
        """Load agenda metadata once. Failures leave an empty catalog."""
        self.catalog = await load_catalog(path)
        self.catalog_loaded = True
        return self.catalog

    # =========================================================================
    # Engine calls
    # =========================================================================

    def list_agendas(self) -> CatalogResponse:
        return CatalogResponse(
            agendas=[to_agenda_info(rule) for rule in self.catalog],
            count=len(self.catalog),
            max_rounds=self.catalog.max_rounds,
        )

    def evaluate(self, agenda_id: str, objects: list[BoardObjectInfo]) -> EvaluateResponse:
        """Evaluate any agenda id against a board snapshot."""
        verdict = evaluate(agenda_id, [to_board_object(o) for o in objects])
        return EvaluateResponse(agenda_id=agenda_id, verdict=to_verdict_info(verdict))

    def next_agenda(self, completed_ids: list[str], seed: int | None = None) -> NextAgendaResponse:
        source = random.Random(seed).random if seed is not None else None
        rule = select_next(self.catalog, completed_ids, source)
        return NextAgendaResponse(
            agenda=to_agenda_info(rule) if rule else None,
            game_over=rule is None,
            max_rounds=self.catalog.max_rounds,
        )

    # =========================================================================
    # Sessions
    # =========================================================================

    def create_session(self, request: CreateSessionRequest) -> SessionResponse | ErrorResponse:
        """Create a new game session and select its first agenda."""
        objects = [to_board_object(o) for o in request.objects]
        session = self.session_manager.create_session(
            catalog=self.catalog,
            seed=request.seed,
        )
        game_loop = GameLoop(session)
        self._game_loops[session.session_id] = game_loop

        # Starting boards go through the same placement checks as moves
        for obj in objects:
            if session.get_object(obj.id) is not None:
                errors = [f"Duplicate object id '{obj.id}'"]
            else:
                errors = game_loop.validate(obj)
            if errors:
                self.end_session(session.session_id, reason="invalid_board")
                return ErrorResponse(
                    error="; ".join(errors),
                    error_code=ErrorCode.INVALID_MOVE,
                    details={"object_id": obj.id},
                )
            session.objects.append(obj)

        game_loop.start()
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        """Get session status."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        return self._session_to_response(session)

    def place_object(self, session_id: str, request: PlaceObjectRequest) -> SessionResponse | ErrorResponse:
        return self._run(
            session_id,
            lambda loop: loop.place_object(request.type.value, request.name, request.row, request.col),
        )

    def update_object(
        self,
        session_id: str,
        object_id: str,
        request: UpdateObjectRequest,
    ) -> SessionResponse | ErrorResponse:
        return self._run(
            session_id,
            lambda loop: loop.update_object(
                object_id,
                size=request.size.value if request.size else None,
                color=request.color.value if request.color else None,
            ),
        )

    def remove_object(self, session_id: str, object_id: str) -> SessionResponse | ErrorResponse:
        return self._run(session_id, lambda loop: loop.remove_object(object_id))

    def complete_agenda(self, session_id: str) -> SessionResponse | ErrorResponse:
        return self._run(session_id, lambda loop: loop.complete_agenda())

    def restart(self, session_id: str) -> SessionResponse | ErrorResponse:
        return self._run(session_id, lambda loop: loop.restart())

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        """End a session."""
        self._game_loops.pop(session_id, None)
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        """List active sessions."""
        return self.session_manager.list_active_sessions()

    def cleanup_stale_sessions(self, max_age_seconds: int) -> int:
        removed = self.session_manager.cleanup_stale_sessions(max_age_seconds)
        live = set(self.session_manager.list_sessions())
        for session_id in list(self._game_loops):
            if session_id not in live:
                del self._game_loops[session_id]
        return removed

    # =========================================================================
    # Helpers
    # =========================================================================

    def _run(self, session_id: str, action) -> SessionResponse | ErrorResponse:
        """Apply an action to a session's game loop, mapping domain errors."""
        game_loop = self._game_loops.get(session_id)
        if game_loop is None:
            return self._session_not_found(session_id)

        try:
            action(game_loop)
        except InvalidMoveError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.INVALID_MOVE)
        except AgendaNotSatisfiedError as e:
            verdict = game_loop.verdict()
            return ErrorResponse(
                error=str(e),
                error_code=ErrorCode.AGENDA_NOT_SATISFIED,
                details={"hints": list(verdict.hints)},
            )
        except GameOverError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.GAME_OVER)

        return self._session_to_response(game_loop.session)

    def _session_not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _session_to_response(self, session: Session) -> SessionResponse:
        """Convert session to API response."""
        status = self._game_loops[session.session_id].status()
        return SessionResponse(
            session_id=session.session_id,
            status=SessionStatus(session.state.value),
            round_number=status.round_number,
            total_rounds=status.total_rounds,
            current_agenda=to_agenda_info(status.agenda) if status.agenda else None,
            verdict=to_verdict_info(status.verdict),
            completed_ids=status.completed_ids,
            objects=[to_object_info(o) for o in session.objects],
            stats=GameStatsInfo(
                total_moves=session.stats.total_moves,
                objects_placed=session.stats.objects_placed,
                elapsed_seconds=session.stats.elapsed_seconds(),
                time_taken=session.stats.time_taken(),
            ),
            created_at=session.created_at,
        )
