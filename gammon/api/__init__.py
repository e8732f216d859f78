"""
API Module - Front-end interface.

Exposes the engine to a GUI or the command line.
A front end:
1. Starts a game
2. Draws the board from BoardResponse
3. Submits one gesture per disk moved
4. Asks the bot for its move and shows the diagnostics

All state lives in the GameService instance. Nothing is persisted.
"""

from .schemas import (
    # Requests
    MoveRequest,
    # Responses
    BoardResponse,
    MoveResponse,
    DecisionResponse,
    # Shared
    PointInfo,
    DiceInfo,
    GameStatus,
    ErrorCode,
)
from .service import GameService

__all__ = [
    # Requests
    "MoveRequest",
    # Responses
    "BoardResponse",
    "MoveResponse",
    "DecisionResponse",
    # Shared
    "PointInfo",
    "DiceInfo",
    "GameStatus",
    "ErrorCode",
    # Service
    "GameService",
]
