"""
FastAPI Application - REST API for the board UI.

Endpoints:
    GET    /api/v1/health                              Health check
    GET    /api/v1/agendas                             List loaded agendas
    POST   /api/v1/agendas/next                        Select the next agenda
    POST   /api/v1/agendas/{agenda_id}/evaluate        Evaluate a board snapshot
    POST   /api/v1/sessions                            Create game session
    GET    /api/v1/sessions                            List active sessions
    GET    /api/v1/sessions/{id}                       Get session state
    DELETE /api/v1/sessions/{id}                       End session
    POST   /api/v1/sessions/{id}/objects               Place an object
    PATCH  /api/v1/sessions/{id}/objects/{object_id}   Change size/color
    DELETE /api/v1/sessions/{id}/objects/{object_id}   Remove an object
    POST   /api/v1/sessions/{id}/complete              Complete the current agenda
    POST   /api/v1/sessions/{id}/restart               Start over

Agenda metadata is loaded once when the app starts. If loading fails the
catalog is empty and every new session is immediately over.

All responses are JSON with explicit Pydantic schemas.
"""

from contextlib import asynccontextmanager
from typing import Annotated, Optional, Union
import logging
import os

from fastapi import FastAPI, Body, Query
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from .service import APIService
from .schemas import (
    # Request models
    EvaluateRequest,
    NextAgendaRequest,
    CreateSessionRequest,
    PlaceObjectRequest,
    UpdateObjectRequest,
    # Response models
    CatalogResponse,
    EvaluateResponse,
    NextAgendaResponse,
    SessionResponse,
    SessionListResponse,
    EndSessionResponse,
    HealthResponse,
    ErrorResponse,
    # Enums
    ErrorCode,
)

logger = logging.getLogger(__name__)

# Environment configuration
PROPAGENDA_ENV = os.getenv("PROPAGENDA_ENV", "development")
PROPAGENDA_AGENDAS_PATH = os.getenv("PROPAGENDA_AGENDAS_PATH", None)
PROPAGENDA_SESSION_MAX_AGE = int(os.getenv("PROPAGENDA_SESSION_MAX_AGE", "3600"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

ERROR_STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.INVALID_MOVE: 400,
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.SESSION_NOT_FOUND: 404,
    ErrorCode.AGENDA_NOT_SATISFIED: 409,
    ErrorCode.GAME_OVER: 409,
}


def create_app(service: APIService | None = None, agendas_path: str | None = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided).
            A service whose catalog is already loaded is used as-is.
        agendas_path: Agendas JSON file; defaults to PROPAGENDA_AGENDAS_PATH
            or the packaged agendas

    Returns:
        FastAPI application instance
    """
    api_service = service or APIService()
    path = agendas_path or PROPAGENDA_AGENDAS_PATH

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not api_service.catalog_loaded:
            await api_service.load_catalog(path)
        if not api_service.catalog:
            logger.warning("No agendas available; games will have zero rounds")
        yield

    app = FastAPI(
        title="prop.agenda API",
        description="""
Agenda puzzle engine - place objects on a 5x5 board and satisfy agendas.

## Game Flow

1. `POST /sessions` creates a game and selects the first agenda
2. Place, edit and remove objects; every response carries the current `verdict`
3. When `verdict.satisfied` is true, `POST /complete` moves to the next agenda
4. After the last round the session `status` is `game_over`

## Error Codes

| Code | Description |
|------|-------------|
| `INVALID_MOVE` | Board change rejected |
| `AGENDA_NOT_SATISFIED` | Agenda is not satisfied yet |
| `GAME_OVER` | No agenda in play |
| `SESSION_NOT_FOUND` | Session does not exist |
| `VALIDATION_ERROR` | Request body failed validation |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.service = api_service

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Create a JSON response with the status code for the error."""
        return JSONResponse(
            status_code=ERROR_STATUS_CODES.get(error.error_code, 400),
            content=error.model_dump(mode="json"),
        )

    def respond(response: Union[SessionResponse, ErrorResponse]):
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request, exc: RequestValidationError) -> JSONResponse:
        errors = jsonable_encoder(exc.errors())
        message = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in errors
        )
        return make_error_response(ErrorResponse(
            error=message or "Invalid request",
            error_code=ErrorCode.VALIDATION_ERROR,
            details={"errors": errors},
        ))

    # =========================================================================
    # Health & Agendas
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["Health"],
        summary="Health check",
    )
    async def health() -> HealthResponse:
        return HealthResponse(
            status="ok",
            service="propagenda",
            version=__version__,
            agendas_loaded=len(api_service.catalog),
        )

    @app.get(
        "/api/v1/agendas",
        response_model=CatalogResponse,
        tags=["Agendas"],
        summary="List loaded agendas",
    )
    async def list_agendas() -> CatalogResponse:
        return api_service.list_agendas()

    @app.post(
        "/api/v1/agendas/next",
        response_model=NextAgendaResponse,
        tags=["Agendas"],
        summary="Select the next agenda from completion history",
    )
    async def next_agenda(
        request: Annotated[Optional[NextAgendaRequest], Body()] = None,
    ) -> NextAgendaResponse:
        """
        Pick the next agenda, favoring easy agendas early in the game.

        Returns `game_over=true` once the round limit is reached or no
        agenda remains. Pass `seed` for a reproducible draw.
        """
        request = request or NextAgendaRequest()
        return api_service.next_agenda(request.completed_ids, request.seed)

    @app.post(
        "/api/v1/agendas/{agenda_id}/evaluate",
        response_model=EvaluateResponse,
        tags=["Agendas"],
        summary="Evaluate an agenda against a board snapshot",
    )
    async def evaluate_agenda(agenda_id: str, request: EvaluateRequest) -> EvaluateResponse:
        """
        Evaluate any agenda id. Unknown ids are not an error: the verdict
        is unsatisfied with a single "no check available" hint.
        """
        return api_service.evaluate(agenda_id, request.objects)

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={400: {"model": ErrorResponse, "description": "Invalid starting board"}},
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(
        request: Annotated[Optional[CreateSessionRequest], Body()] = None,
    ) -> Union[SessionResponse, JSONResponse]:
        api_service.cleanup_stale_sessions(PROPAGENDA_SESSION_MAX_AGE)
        return respond(api_service.create_session(request or CreateSessionRequest()))

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session state",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.get_session(session_id))

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Board Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/objects",
        response_model=SessionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Cell occupied or invalid object"},
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse, "description": "Game is over"},
        },
        tags=["Board"],
        summary="Place an object in an empty cell",
    )
    async def place_object(
        session_id: str, request: PlaceObjectRequest,
    ) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.place_object(session_id, request))

    @app.patch(
        "/api/v1/sessions/{session_id}/objects/{object_id}",
        response_model=SessionResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Board"],
        summary="Change an object's size or color",
    )
    async def update_object(
        session_id: str, object_id: str, request: UpdateObjectRequest,
    ) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.update_object(session_id, object_id, request))

    @app.delete(
        "/api/v1/sessions/{session_id}/objects/{object_id}",
        response_model=SessionResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Board"],
        summary="Remove an object",
    )
    async def remove_object(
        session_id: str, object_id: str,
    ) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.remove_object(session_id, object_id))

    # =========================================================================
    # Progression Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/complete",
        response_model=SessionResponse,
        responses={
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse, "description": "Agenda not satisfied or game over"},
        },
        tags=["Game Loop"],
        summary="Complete the current agenda and move to the next",
    )
    async def complete_agenda(session_id: str) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.complete_agenda(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/restart",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Clear the board and start a new game",
    )
    async def restart(session_id: str) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.restart(session_id))

    return app


# For running directly: uvicorn propagenda.api.app:app
app = create_app()
