"""
Session Module - Manages ephemeral game sessions.

A session represents one play-through of the agenda puzzle:
- Created when the player starts a game
- Holds the board, the current agenda and completion history
- Destroyed when the game ends

Sessions are EPHEMERAL: nothing is written to disk.
"""

from .manager import SessionManager, Session, SessionState, GameStats
from .game_loop import (
    GameLoop,
    RoundStatus,
    InvalidMoveError,
    GameOverError,
    AgendaNotSatisfiedError,
)

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "GameStats",
    "GameLoop",
    "RoundStatus",
    "InvalidMoveError",
    "GameOverError",
    "AgendaNotSatisfiedError",
]
