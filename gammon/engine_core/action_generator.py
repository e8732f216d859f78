"""
Action Generator - Generates the action codes a search should consider.

The action generator is used by:
1. The search engine to enumerate moves
2. The service facade to validate and list moves for a GUI
3. Tests (is this action in legal_actions?)

Design: the list is deliberately reduced. Capturing and bearing-off
moves are placed first so alpha-beta cuts off early, and moves that
reach the same position with the dice taken in the other order are
partly pruned. all_moves() gives the full, unpruned enumeration.
"""

from __future__ import annotations
from dataclasses import dataclass

from .state import BackgammonState, MoveKind, NUM_POINTS, LOW_EDGE, HIGH_EDGE
from .action import NO_MOVE, SWAP_OFFSET


@dataclass
class ActionGenerator:
    """
    Generates action codes for the player to move.

    Never returns an empty list: [NO_MOVE] means the turn must be skipped.
    """

    def generate(self, state: BackgammonState) -> list[int]:
        """
        Generate the reduced, ordered action list.

        Returns codes in 0..25 for the selected die and 50..75 for the
        other die, captures and bear-offs first.
        """
        actions: list[int] = []
        first = state.selected_die
        could_capture = False

        for point in range(NUM_POINTS):
            kind = state.classify_move(point, first)
            if kind is MoveKind.SIMPLE:
                actions.append(point)
            elif kind is MoveKind.CAPTURE_OR_BEAR_OFF:
                actions.insert(0, point)
                could_capture = True

        # Doubles: the other die gives the same moves
        if not state.is_doubles and state.other_die_available():
            second = 1 - first
            initial_size = len(actions)
            could_capture_second = False

            for point in range(NUM_POINTS):
                kind = state.classify_move(point, second)
                if kind is MoveKind.CAPTURE_OR_BEAR_OFF:
                    actions.insert(0, point + SWAP_OFFSET)
                    could_capture_second = True
                elif kind is MoveKind.SIMPLE and (
                    not could_capture
                    or point not in actions
                    or point in (LOW_EDGE, HIGH_EDGE)
                ):
                    # With a capture available for the first die, only keep
                    # second-die moves the first die cannot make or bar entries
                    actions.append(point + SWAP_OFFSET)

            if not could_capture:
                if could_capture_second or len(actions) > 2 * initial_size:
                    offset = -SWAP_OFFSET  # second die has more moves
                else:
                    offset = SWAP_OFFSET
                self._drop_paired_moves(actions, offset)

        return actions or [NO_MOVE]

    def _drop_paired_moves(self, actions: list[int], offset: int) -> None:
        """
        Remove moves of the same disk made with the other die.

        For each remaining action, its partner at `offset` is dropped.
        Partners that resolve to points 0 or 25 are kept.
        """
        i = 0
        while i < len(actions):
            paired = actions[i] + offset
            if paired not in (LOW_EDGE, HIGH_EDGE) and paired in actions:
                actions.remove(paired)
                continue
            i += 1

    def all_moves(self, state: BackgammonState) -> list[int]:
        """Every legal action code, without ordering or pruning."""
        actions = [
            point for point in range(NUM_POINTS)
            if state.classify_move(point) is not MoveKind.ILLEGAL
        ]
        if state.other_die_available():
            other = 1 - state.selected_die
            actions.extend(
                point + SWAP_OFFSET for point in range(NUM_POINTS)
                if state.classify_move(point, other) is not MoveKind.ILLEGAL
            )
        return actions or [NO_MOVE]


def legal_actions(state: BackgammonState) -> list[int]:
    """
    Convenience function to get the search's action list.

    Creates an ActionGenerator and generates actions.
    """
    generator = ActionGenerator()
    return generator.generate(state)


def is_legal(state: BackgammonState, action: int) -> bool:
    """Check if a specific action code is legal in this state."""
    return action in ActionGenerator().all_moves(state)
