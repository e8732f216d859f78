"""
Action System - Integer action codes and results.

An action is a single int, the wire format shared by the search engine,
the service facade and any GUI:

    0..25   move the disk on this point with the selected die
    50..75  swap the selected die, then move the disk on (code - 50)
    -1      no legal move; applying it ends the turn

Human callers submit the same codes, one per gesture.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .state import BackgammonState


NO_MOVE = -1
SWAP_OFFSET = 50


def encode_action(point: int, swap_die: bool = False) -> int:
    """Build an action code for moving the disk on `point`."""
    if point == NO_MOVE:
        return NO_MOVE
    return point + SWAP_OFFSET if swap_die else point


def decode_action(action: int) -> tuple[int, bool]:
    """
    Split an action code into (source point, swap die first).

    Codes at or above SWAP_OFFSET use the unselected die. Anything else,
    including out-of-range values, is returned unchanged for the caller
    to validate.
    """
    if action >= SWAP_OFFSET:
        return action - SWAP_OFFSET, True
    return action, False


def action_point(action: int) -> int:
    """Source point of an action (NO_MOVE stays NO_MOVE)."""
    return decode_action(action)[0]


def describe_action(state: BackgammonState, action: int) -> str:
    """Human-readable description of an action in a given state."""
    mover = state.player_to_move
    if action == NO_MOVE:
        return f"{mover.display_name} has no legal move and passes"

    point, swap = decode_action(action)
    die = 1 - state.selected_die if swap else state.selected_die
    roll = state.die_value(die)
    target = point + mover.direction * roll
    if target <= 0 or target >= 25:
        destination = "off"
    else:
        destination = str(target)
    source = "bar" if point == mover.bar_point else str(point)
    return f"{mover.display_name} moves {source} -> {destination} with a {roll}"


@dataclass
class ActionResult:
    """
    Result of applying a human action.

    Contains:
    - Whether a disk moved
    - New state (always present; a rejected move may still pass the turn)
    - Error (if the action was rejected)
    """
    success: bool
    new_state: Any | None = None  # BackgammonState
    error: str | None = None
    error_code: str | None = None

    # For UI/presentation
    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        state: Any | None = None,
    ) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, new_state=state, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
        )
