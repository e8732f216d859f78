"""
Utility Evaluator - Scores leaf states for the search.

The evaluation is the game's own utility: the stored win estimate for
the player to move, complemented for the other player. Terminal states
score exactly 0.0 or 1.0; anything else is an estimate, which tells the
search that a deeper iteration could still change its answer.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..engine_core.game import BackgammonGame

if TYPE_CHECKING:
    from ..engine_core.state import BackgammonState, Player


@dataclass
class StateEvaluation:
    """
    Result of evaluating a game state.
    """
    score: float
    is_estimate: bool


@dataclass
class UtilityEvaluator:
    """
    Evaluates states using the stored utility.

    Used by the search at depth cutoffs and terminal states.
    """
    game: BackgammonGame = field(default_factory=BackgammonGame)

    def evaluate(self, state: BackgammonState, for_player: Player) -> StateEvaluation:
        """
        Evaluate a state from a player's perspective.

        Returns a score in [0, 1]; 1 is a certain win for `for_player`.
        """
        return StateEvaluation(
            score=self.game.utility(state, for_player),
            is_estimate=not state.is_terminal(),
        )
