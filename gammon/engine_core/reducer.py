"""
Reducer - Applies action codes to game state.

The reducer is the single point of state mutation outside the state
class itself. The input state is never modified:

    new_state = apply_action(state, action, is_computer=True)

Trusted (engine) callers skip validation. Human callers go through
apply_human_action(), which reports whether the move was accepted.
"""

from __future__ import annotations
import logging
import random

from .state import BackgammonState
from .action import NO_MOVE, ActionResult, describe_action

logger = logging.getLogger(__name__)


def apply_action(
    state: BackgammonState,
    action: int,
    is_computer: bool = False,
    rng: random.Random | None = None,
) -> BackgammonState:
    """Clone `state` and apply one action to the clone."""
    result = state.clone()
    result.move_disk(action, is_computer=is_computer, rng=rng)
    return result


def apply_human_action(
    state: BackgammonState,
    action: int,
    rng: random.Random | None = None,
) -> ActionResult:
    """
    Apply a human gesture with full validation.

    Rejected actions leave the position as it was, unless the player has
    no legal move at all, in which case the turn passes. Either way the
    result carries the state the caller should continue from.
    """
    description = describe_action(state, action)
    new_state = state.clone()
    moved = new_state.move_disk(action, is_computer=False, rng=rng)

    if moved:
        return ActionResult.success_with_state(new_state, changes=[description])

    if action == NO_MOVE:
        return ActionResult.success_with_state(
            new_state,
            changes=[f"{state.player_to_move.display_name} passes"],
        )

    if new_state.move_count != state.move_count:
        logger.debug("%s has no legal move; turn passed", state.player_to_move.display_name)
        return ActionResult.failure(
            f"Illegal move {action}; no legal move exists so the turn passed",
            error_code="NO_LEGAL_MOVE",
            state=new_state,
        )

    logger.debug("Rejected action %d for %s", action, state.player_to_move.display_name)
    return ActionResult.failure(
        f"Illegal move {action} for {state.player_to_move.display_name}",
        error_code="ILLEGAL_MOVE",
        state=new_state,
    )
