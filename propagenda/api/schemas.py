"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between the client (the board UI) and
the engine. All responses include explicit types for OpenAPI schema
generation.

Error Codes:
- INVALID_MOVE: Board change rejected (occupied cell, bad name, unknown object)
- AGENDA_NOT_SATISFIED: Tried to complete an agenda the board does not satisfy
- GAME_OVER: Session has no agenda in play
- SESSION_NOT_FOUND: Session does not exist or has expired
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..engine_core.board import ObjectType, Size, Color, GRID_SIZE


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class ErrorCode(str, Enum):
    """Structured error codes."""
    INVALID_MOVE = "INVALID_MOVE"
    AGENDA_NOT_SATISFIED = "AGENDA_NOT_SATISFIED"
    GAME_OVER = "GAME_OVER"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class BoardObjectInfo(BaseModel):
    """An object on the board."""
    id: str
    type: ObjectType
    name: str = Field(description="Must be valid for the type, e.g. snail for animal")
    size: Size
    color: Color
    row: int = Field(ge=0, le=GRID_SIZE - 1)
    col: int = Field(ge=0, le=GRID_SIZE - 1)
    emoji: Optional[str] = None

    model_config = {"from_attributes": True}


class AgendaInfo(BaseModel):
    """Agenda metadata for display."""
    id: str
    title: str
    description: str = ""
    difficulty: float = Field(0.0, ge=0.0, le=10.0)
    has_check: bool = True

    model_config = {"from_attributes": True}


class VerdictInfo(BaseModel):
    """Whether the board satisfies an agenda, with hints if not."""
    satisfied: bool
    hints: list[str] = Field(default_factory=list)


class GameStatsInfo(BaseModel):
    """Stats for the victory screen."""
    total_moves: int = 0
    objects_placed: int = 0
    elapsed_seconds: int = 0
    time_taken: str = Field("0:00", description="Elapsed time as m:ss")


# =============================================================================
# Request Models
# =============================================================================

class EvaluateRequest(BaseModel):
    """Board snapshot to evaluate an agenda against."""
    objects: list[BoardObjectInfo] = Field(default_factory=list)


class NextAgendaRequest(BaseModel):
    """Completion history used to pick the next agenda."""
    completed_ids: list[str] = Field(
        default_factory=list, description="Completed agenda ids, in order"
    )
    seed: Optional[int] = Field(None, description="Seed for a reproducible draw")


class CreateSessionRequest(BaseModel):
    """Request to create a new game session."""
    objects: list[BoardObjectInfo] = Field(
        default_factory=list, description="Optional starting board"
    )
    seed: Optional[int] = Field(None, description="Seed for reproducible agenda selection")


class PlaceObjectRequest(BaseModel):
    """Place a new object (medium, blue) in an empty cell."""
    type: ObjectType
    name: str
    row: int = Field(ge=0, le=GRID_SIZE - 1)
    col: int = Field(ge=0, le=GRID_SIZE - 1)


class UpdateObjectRequest(BaseModel):
    """Change an object's size and/or color."""
    size: Optional[Size] = None
    color: Optional[Color] = None


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class CatalogResponse(BaseModel):
    """All loaded agendas, in catalog order."""
    agendas: list[AgendaInfo] = Field(default_factory=list)
    count: int = 0
    max_rounds: int = 0
    api_version: str = "v1"


class EvaluateResponse(BaseModel):
    """Verdict for one agenda against one board."""
    agenda_id: str
    verdict: VerdictInfo
    api_version: str = "v1"


class NextAgendaResponse(BaseModel):
    """The selected agenda, or game_over when none is left."""
    agenda: Optional[AgendaInfo] = None
    game_over: bool = False
    max_rounds: int = 0
    api_version: str = "v1"


class SessionResponse(BaseModel):
    """Complete session state for display."""
    session_id: str
    status: SessionStatus
    round_number: int = 0
    total_rounds: int = 0
    current_agenda: Optional[AgendaInfo] = None
    verdict: VerdictInfo
    completed_ids: list[str] = Field(default_factory=list)
    objects: list[BoardObjectInfo] = Field(default_factory=list)
    stats: GameStatsInfo = Field(default_factory=GameStatsInfo)
    created_at: float = 0.0
    api_version: str = "v1"


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    agendas_loaded: int = 0
