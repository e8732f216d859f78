"""
Backgammon Game - Rules facade used by the search engine and the GUI.

Wraps the state, generator and reducer behind the small contract an
adversarial search needs: players, actions, results, terminal test,
utility per player.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import random

from .state import BackgammonState, Player
from .action_generator import ActionGenerator
from .reducer import apply_action


PLAYERS = (Player.BLACK, Player.WHITE)


@dataclass
class BackgammonGame:
    """
    Game definition for two-player Backgammon.

    Usage:
        game = BackgammonGame()
        state = game.initial_state(rng)
        for action in game.actions(state):
            child = game.get_result(state, action, is_computer=True)
    """
    generator: ActionGenerator = field(default_factory=ActionGenerator)

    def initial_state(self, rng: random.Random | None = None) -> BackgammonState:
        return BackgammonState.initial(rng)

    def players(self) -> tuple[Player, Player]:
        return PLAYERS

    def player(self, state: BackgammonState) -> Player:
        """The player whose turn it is."""
        return state.player_to_move

    def actions(self, state: BackgammonState) -> list[int]:
        return self.generator.generate(state)

    def get_result(
        self,
        state: BackgammonState,
        action: int,
        is_computer: bool = False,
        rng: random.Random | None = None,
    ) -> BackgammonState:
        """Clone the state and apply the action to the clone."""
        return apply_action(state, action, is_computer=is_computer, rng=rng)

    def is_terminal(self, state: BackgammonState) -> bool:
        return state.is_terminal()

    def utility(self, state: BackgammonState, player: Player) -> float:
        """Utility for `player`: stored value if on move, complement otherwise."""
        if player is state.player_to_move:
            return state.utility
        return 1.0 - state.utility

    def winner(self, state: BackgammonState) -> Player:
        return state.winner()

    def winner_name(self, state: BackgammonState) -> str:
        return state.winner().display_name
