"""
Engine Core - Deterministic Backgammon state management.

The engine is the runtime that:
1. Builds the starting position
2. Manages BackgammonState
3. Generates legal actions
4. Applies actions via the reducer
5. Answers the game questions a search needs
"""

from .state import BackgammonState, Player, MoveKind, INITIAL_LAYOUT
from .action import (
    NO_MOVE,
    SWAP_OFFSET,
    ActionResult,
    encode_action,
    decode_action,
    describe_action,
)
from .reducer import apply_action, apply_human_action
from .action_generator import ActionGenerator, legal_actions, is_legal
from .game import BackgammonGame

__all__ = [
    "BackgammonState",
    "Player",
    "MoveKind",
    "INITIAL_LAYOUT",
    "NO_MOVE",
    "SWAP_OFFSET",
    "ActionResult",
    "encode_action",
    "decode_action",
    "describe_action",
    "apply_action",
    "apply_human_action",
    "ActionGenerator",
    "legal_actions",
    "is_legal",
    "BackgammonGame",
]
