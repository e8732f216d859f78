"""
Pydantic Schemas for the service facade.

These models define the contract between a GUI (or the CLI) and the
engine. Everything a front end needs to draw the board, submit a move or
show the bot's reasoning crosses this boundary as one of these models.

Error Codes:
- ILLEGAL_MOVE: The action was rejected; the position is unchanged
- NO_LEGAL_MOVE: The action was rejected and the turn passed
- GAME_OVER: The game has already been won
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class GameStatus(str, Enum):
    """Game status values."""
    IN_PROGRESS = "in_progress"
    GAME_OVER = "game_over"


class ErrorCode(str, Enum):
    """Structured error codes."""
    ILLEGAL_MOVE = "ILLEGAL_MOVE"
    NO_LEGAL_MOVE = "NO_LEGAL_MOVE"
    GAME_OVER = "GAME_OVER"


# =============================================================================
# Shared Models
# =============================================================================

class PointInfo(BaseModel):
    """One point of the board for display."""
    point: int = Field(..., ge=0, le=25, description="0 and 25 are the bars")
    owner: Optional[str] = Field(None, description="black, white or null when empty")
    count: int = Field(0, ge=0, le=15)


class DiceInfo(BaseModel):
    """Dice for the turn in progress."""
    values: tuple[int, int]
    used: tuple[int, int] = (0, 0)
    selected: int = Field(0, ge=0, le=1)
    is_doubles: bool = False


# =============================================================================
# Request Models
# =============================================================================

class MoveRequest(BaseModel):
    """A single human gesture: move the disk on a point."""
    action: int = Field(..., ge=-1, le=75, description="Action code; -1 passes")


# =============================================================================
# Response Models
# =============================================================================

class BoardResponse(BaseModel):
    """Complete position for display."""
    status: GameStatus
    player_to_move: str
    move_count: int = 0
    points: list[PointInfo] = Field(default_factory=list)
    dice: DiceInfo
    borne_off: dict[str, int] = Field(default_factory=dict)
    legal_actions: list[int] = Field(default_factory=list)
    utility: float = Field(0.5, ge=0.0, le=1.0, description="For the player to move")
    winner: Optional[str] = None


class MoveResponse(BaseModel):
    """Response after submitting a human move."""
    success: bool
    error: Optional[str] = None
    error_code: Optional[ErrorCode] = None
    changes: list[str] = Field(default_factory=list)
    board: BoardResponse


class DecisionResponse(BaseModel):
    """The bot's chosen action with its search diagnostics."""
    action: int
    description: str
    value: float
    tied_actions: list[int] = Field(default_factory=list)
    expanded_nodes: int = 0
    max_depth: int = 0
    depth_lines: dict[int, str] = Field(default_factory=dict)
