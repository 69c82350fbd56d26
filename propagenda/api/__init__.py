"""
API Module - Client interface.

Exposes the engine via REST API. The client:
1. Lists agendas or asks for the next one
2. Creates a game session
3. Places, edits and removes objects, reading back the verdict
4. Completes agendas until the game is over

All state is session-scoped. No persistent user accounts required.
"""

from .schemas import (
    # Requests
    EvaluateRequest,
    NextAgendaRequest,
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
    VerdictInfo,
    GameStatsInfo,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "EvaluateRequest",
    "NextAgendaRequest",
    "CreateSessionRequest",
    "PlaceObjectRequest",
    "UpdateObjectRequest",
    # Responses
    "CatalogResponse",
    "EvaluateResponse",
    "NextAgendaResponse",
    "SessionResponse",
    "ErrorResponse",
    # Shared
    "AgendaInfo",
    "BoardObjectInfo",
    "VerdictInfo",
    "GameStatsInfo",
    # Service
    "APIService",
    "create_app",
]
