"""
Tests for action generation.

Tests:
- The 6-5 opening produces the reduced list
- Captures and bear-offs are ordered first
- Bar entry, doubles and blocked positions
- Every generated action is legal
"""

import random

from ..engine_core.action import NO_MOVE, SWAP_OFFSET
from ..engine_core.action_generator import ActionGenerator, legal_actions, is_legal
from ..engine_core.state import BackgammonState, Player, MoveKind


class TestOpeningActions:
    """Tests for the standard opening with a 6-5."""

    def test_opening_six_five(self, opening_state):
        """Moves with the 5 that repeat a 6 move of the same disk are pruned."""
        assert legal_actions(opening_state) == [1, 12, 17]

    def test_after_first_die(self, opening_state):
        """Only the 5 is left after playing the 6."""
        opening_state.move_disk(1)
        assert legal_actions(opening_state) == [7, 12, 17]

    def test_pruned_moves_are_still_legal(self, opening_state):
        """all_moves keeps the swapped moves the reduced list drops."""
        assert is_legal(opening_state, 62)
        assert is_legal(opening_state, 67)
        assert not is_legal(opening_state, 6)
        assert not is_legal(opening_state, 30)


class TestOrdering:
    """Tests for capture-first ordering."""

    def test_capture_first(self):
        state = BackgammonState.from_layout(
            {1: (Player.BLACK, 1), 10: (Player.BLACK, 1), 4: (Player.WHITE, 1)},
            dice=(3, 3),
        )
        actions = legal_actions(state)

        assert actions[0] == 1
        assert state.classify_move(actions[0]) is MoveKind.CAPTURE_OR_BEAR_OFF
        assert 10 in actions

    def test_doubles_have_no_swap_codes(self, bar_entry_state):
        actions = legal_actions(bar_entry_state)
        assert actions == [0]
        assert all(a < SWAP_OFFSET for a in actions)

    def test_bear_off_first(self, forced_win_state):
        assert legal_actions(forced_win_state) == [24]

    def test_endgame_choices(self, endgame_state):
        assert legal_actions(endgame_state) == [20, 22]


class TestNoMove:
    """Tests for positions without a playable disk."""

    def test_blocked_returns_no_move(self, blocked_state):
        assert legal_actions(blocked_state) == [NO_MOVE]
        assert ActionGenerator().all_moves(blocked_state) == [NO_MOVE]

    def test_never_empty(self, game):
        rng = random.Random(5)
        state = game.initial_state(rng)
        for _ in range(200):
            if state.is_terminal():
                break
            actions = game.actions(state)
            assert actions
            state = game.get_result(state, actions[-1], is_computer=True, rng=rng)


class TestLegality:
    """Generated actions are always legal for the player to move."""

    def test_generated_actions_are_legal(self, game):
        rng = random.Random(9)
        state = game.initial_state(rng)
        generator = ActionGenerator()

        for _ in range(300):
            if state.is_terminal():
                break
            actions = generator.generate(state)
            full = generator.all_moves(state)
            for action in actions:
                assert action in full
            state = game.get_result(state, rng.choice(actions), is_computer=True, rng=rng)
