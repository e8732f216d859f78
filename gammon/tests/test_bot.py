"""
Tests for bot action selection.

Tests:
- The search finds forced moves and wins
- Deadline handling and node counts as the budget grows
- Tie-breaking between equally valued actions
- Iteration control: move ordering, early stop, partial iterations
- Opponent minimization, chance nodes and alpha-beta cutoffs
- Baseline policies select legal actions
"""

import math
import random

import pytest

from ..bots import ExpectimaxBot, RandomPolicy, FirstLegalPolicy, DICE_OUTCOMES
from ..bots.expectimax_bot import SearchRun
from ..bots.metrics import EXPANDED_NODES, MAX_DEPTH
from ..engine_core.action_generator import legal_actions
from ..engine_core.state import BackgammonState, Player
from .conftest import FakeClock


class TestDiceOutcomes:
    """Tests for the chance node distribution."""

    def test_twenty_one_rolls(self):
        assert len(DICE_OUTCOMES) == 21
        assert sum(p for _, _, p in DICE_OUTCOMES) == pytest.approx(1.0)

    def test_doubles_weigh_half(self):
        for first, second, probability in DICE_OUTCOMES:
            expected = 1 / 36 if first == second else 1 / 18
            assert probability == pytest.approx(expected)


class TestForcedMoves:
    """Tests on tiny boards with one legal action."""

    def test_forced_win(self, forced_win_state, fake_clock):
        """Bearing off the last disk is found and valued as a certain win."""
        bot = ExpectimaxBot(clock=fake_clock)
        decision = bot.propose_move(forced_win_state, Player.BLACK, time_budget_ms=100)

        assert decision.action == 24
        assert decision.best_score == 1.0
        assert decision.tied_actions == [24]
        assert decision.metrics.expanded_nodes == 21
        assert decision.metrics.max_depth == 1
        assert decision.metrics.depth_lines() == {1: "depth 1: 24->1.0"}

    @pytest.mark.parametrize("budget_ms", [1, 10, 100])
    def test_forced_bar_entry(self, bar_entry_state, budget_ms):
        bot = ExpectimaxBot(max_depth=3, clock=FakeClock())
        decision = bot.propose_move(bar_entry_state, time_budget_ms=budget_ms)
        assert decision.action == 0

    def test_forced_move_nodes_monotone(self, bar_entry_state):
        counts = []
        for budget_ms in (1, 5, 20, 100):
            bot = ExpectimaxBot(max_depth=3, clock=FakeClock())
            decision = bot.propose_move(bar_entry_state, time_budget_ms=budget_ms)
            counts.append(decision.metrics.expanded_nodes)
        assert counts == sorted(counts)
        assert counts[0] > 0

    def test_no_move(self, blocked_state):
        bot = ExpectimaxBot(max_depth=2, clock=FakeClock())
        decision = bot.propose_move(blocked_state, time_budget_ms=10)
        assert decision.action == -1


class TestDeadline:
    """Tests for time-bounded search."""

    def test_zero_budget_returns_legal_action(self, opening_state):
        """The first iteration always completes, even with no time."""
        bot = ExpectimaxBot(clock=FakeClock())
        decision = bot.propose_move(opening_state, time_budget_ms=0)

        assert decision.action in legal_actions(opening_state)
        assert list(decision.metrics.depth_lines()) in ([1], [1, 2])

    def test_nodes_grow_with_budget(self, endgame_state):
        counts = []
        for budget_ms in (0, 2, 5, 50):
            bot = ExpectimaxBot(max_depth=3, clock=FakeClock())
            decision = bot.propose_move(endgame_state, time_budget_ms=budget_ms)
            assert decision.action in (20, 22)
            counts.append(decision.metrics.expanded_nodes)
        assert counts == sorted(counts)

    def test_max_depth_bounds_iterations(self, endgame_state):
        bot = ExpectimaxBot(max_depth=2, clock=FakeClock(step=0.0))
        decision = bot.propose_move(endgame_state, time_budget_ms=1000)

        assert max(decision.metrics.depth_lines()) <= 2
        assert decision.metrics.max_depth <= 2

    def test_bot_is_reusable(self, endgame_state):
        """Counters start from zero on every call."""
        bot = ExpectimaxBot(max_depth=2, clock=FakeClock(step=0.0))
        first = bot.propose_move(endgame_state, time_budget_ms=1000)
        second = bot.propose_move(endgame_state, time_budget_ms=1000)

        assert first.action == second.action
        assert first.metrics.expanded_nodes == second.metrics.expanded_nodes

    def test_state_not_modified(self, opening_state):
        before = opening_state.clone()
        ExpectimaxBot(max_depth=2, clock=FakeClock()).propose_move(opening_state, time_budget_ms=5)
        assert opening_state == before


class TestMetrics:
    """Tests for the diagnostics returned with a decision."""

    def test_metrics_keys(self, opening_state):
        bot = ExpectimaxBot(max_depth=2, clock=FakeClock())
        decision = bot.propose_move(opening_state, time_budget_ms=5)
        metrics = decision.metrics

        assert "1" in metrics.keys()
        assert EXPANDED_NODES in metrics.keys()
        assert MAX_DEPTH in metrics.keys()
        assert metrics.expanded_nodes > 0
        assert metrics.depth_lines()[1].startswith("depth 1:")
        for action in (1, 12, 17):
            assert f"{action}->" in metrics.depth_lines()[1]


class TestValidation:
    """Tests for programmer errors."""

    def test_wrong_player(self, opening_state):
        with pytest.raises(ValueError):
            ExpectimaxBot().propose_move(opening_state, Player.WHITE)

    def test_terminal_state(self, forced_win_state):
        forced_win_state.move_disk(24)
        with pytest.raises(ValueError):
            ExpectimaxBot().propose_move(forced_win_state)

    def test_select_action_needs_actions(self, opening_state):
        with pytest.raises(ValueError):
            ExpectimaxBot().select_action(opening_state, [])


class TestTieBreak:
    """Tests for choosing among equally valued actions."""

    def test_black_moves_rearmost_disk(self):
        assert ExpectimaxBot()._break_ties([12, 17], Player.BLACK) == 12

    def test_black_all_home_moves_front_disk(self):
        assert ExpectimaxBot()._break_ties([20, 23], Player.BLACK) == 23

    def test_swap_code_kept(self):
        assert ExpectimaxBot()._break_ties([62, 17], Player.BLACK) == 62

    def test_white_all_home(self):
        assert ExpectimaxBot()._break_ties([3, 5], Player.WHITE) == 3

    def test_white_not_home(self):
        assert ExpectimaxBot()._break_ties([3, 13], Player.WHITE) == 13


class TestIterationControl:
    """Tests for how iterative deepening orders, stops and keeps results."""

    def test_dominant_action_stops_after_first_depth(self):
        """Hitting with the 3 is worth 0.548, the only other move 0.504."""
        state = BackgammonState.from_layout(
            {1: (Player.BLACK, 1), 10: (Player.BLACK, 1),
             4: (Player.WHITE, 1), 13: (Player.WHITE, 2)},
            dice=(3, 2),
        )
        bot = ExpectimaxBot(max_depth=3, clock=FakeClock(step=0.0))
        decision = bot.propose_move(state, time_budget_ms=1000)

        assert decision.action == 1
        assert decision.tied_actions == [1]
        assert decision.best_score == pytest.approx(0.548)
        assert list(decision.metrics.depth_lines()) == [1]
        assert decision.metrics.depth_lines()[1] == "depth 1: 1->0.548 60->0.504"

    def test_close_values_search_deeper(self):
        """0.506 against 0.502 is within the margin, so depth 2 runs."""
        state = BackgammonState.from_layout(
            {18: (Player.BLACK, 1), 20: (Player.BLACK, 1),
             19: (Player.WHITE, 2), 23: (Player.WHITE, 2)},
            dice=(1, 3),
        )
        bot = ExpectimaxBot(max_depth=3, clock=FakeClock(step=0.0))
        decision = bot.propose_move(state, time_budget_ms=1000)
        lines = decision.metrics.depth_lines()

        assert 2 in lines
        assert lines[1].startswith("depth 1: 20->")
        # Previous best is searched first
        assert lines[2].startswith("depth 2: 68->")

    def test_partial_depth_discarded_when_not_better(self, endgame_state):
        """
        The clock reads 1.0, 2.0, 3.0: the deadline is 2.5, so depth 2
        searches one action before timing out. Its 0.50601 does not beat
        the depth-1 tie at 0.504 by the margin.
        """
        bot = ExpectimaxBot(max_depth=3, clock=FakeClock(step=1.0))
        decision = bot.propose_move(endgame_state, time_budget_ms=1500)
        lines = decision.metrics.depth_lines()

        assert list(lines) == [1, 2]
        # The last of the tied actions moves to the front
        assert lines[2].startswith("depth 2: 22->")
        assert " 20->" not in lines[2]
        assert decision.tied_actions == [20, 22]
        assert decision.best_score == pytest.approx(0.504)

    def test_partial_depth_kept_when_significantly_better(self):
        """
        Both 2s tie at depth 1. At depth 2 the disk on 3 can go on to hit
        on 7, worth 0.544, which replaces the tie before time runs out.
        """
        state = BackgammonState.from_layout(
            {1: (Player.BLACK, 1), 3: (Player.BLACK, 1), 7: (Player.WHITE, 1)},
            dice=(2, 2),
        )
        bot = ExpectimaxBot(max_depth=3, clock=FakeClock(step=1.0))
        decision = bot.propose_move(state, time_budget_ms=1500)
        lines = decision.metrics.depth_lines()

        assert lines[1] == "depth 1: 1->0.504 3->0.504"
        assert lines[2].startswith("depth 2: 3->")
        assert list(lines) == [1, 2]
        assert decision.tied_actions == [3]
        assert decision.action == 3
        assert decision.best_score == pytest.approx(0.544)


class TestAdversarialSearch:
    """Tests for the opponent's turn inside the search."""

    @pytest.fixture
    def white_to_hit_state(self) -> BackgammonState:
        """A lone Black disk on 9 that White's disk on 12 hits with a 3."""
        return BackgammonState.from_layout(
            {9: (Player.BLACK, 1), 12: (Player.WHITE, 1), 23: (Player.WHITE, 1)},
            player_to_move=Player.WHITE,
        )

    @pytest.fixture
    def run(self) -> SearchRun:
        return SearchRun(deadline=math.inf, rng=random.Random(0), depth_limit=2)

    def test_opponent_picks_worst_reply(self, white_to_hit_state, run):
        """With a 3-5, hitting leaves Black 0.476; running 23->20 leaves 0.494."""
        white_to_hit_state.set_dice(3, 5)
        bot = ExpectimaxBot()
        value = bot.min_value(run, white_to_hit_state, Player.BLACK, -math.inf, math.inf, 1)

        assert value == pytest.approx(0.476)
        assert run.expanded_nodes == 3

    def test_expectation_over_rolls(self, white_to_hit_state, run):
        """
        The 11 rolls in 36 holding a 3 hit for 12 pips of credit. Every
        other roll moves the first die, a, and leaves Black 0.5 - a/500.
        """
        bot = ExpectimaxBot()
        value = bot._chance_value(
            run, white_to_hit_state, Player.BLACK, -math.inf, math.inf, 1, bot.min_value
        )

        hits = 11 / 36 * 12 / 500
        other = sum(
            probability * min(first, second) / 500
            for first, second, probability in DICE_OUTCOMES
            if 3 not in (first, second)
        )
        assert value == pytest.approx(0.5 - hits - other)
        assert value == pytest.approx(0.5 - 196 / 18000)

    def test_min_cutoff_below_alpha(self, white_to_hit_state, run):
        """Black already has 0.48 elsewhere, so the hit ends the search."""
        white_to_hit_state.set_dice(3, 5)
        bot = ExpectimaxBot()
        value = bot.min_value(run, white_to_hit_state, Player.BLACK, 0.48, math.inf, 1)

        assert value == pytest.approx(0.476)
        assert run.expanded_nodes == 2

    def test_max_cutoff_above_beta(self, endgame_state):
        bot = ExpectimaxBot()
        full_run = SearchRun(deadline=math.inf, rng=random.Random(0), depth_limit=2)
        full = bot.max_value(full_run, endgame_state.clone(), Player.BLACK, -math.inf, math.inf, 0)

        pruned_run = SearchRun(deadline=math.inf, rng=random.Random(0), depth_limit=2)
        pruned = bot.max_value(pruned_run, endgame_state.clone(), Player.BLACK, -math.inf, 0.505, 0)

        assert full == pytest.approx(0.50601)
        assert pruned >= 0.505
        assert pruned_run.expanded_nodes < full_run.expanded_nodes
        assert pruned_run.expanded_nodes == 23


class TestBaselinePolicies:
    """Tests that baseline bots only select legal actions."""

    def test_random_policy(self, opening_state):
        bot = RandomPolicy(seed=42)
        legal = legal_actions(opening_state)
        for _ in range(10):
            assert bot.select_action(opening_state, legal).action in legal

    def test_first_legal_policy(self, opening_state):
        decision = FirstLegalPolicy().select_action(opening_state, legal_actions(opening_state))
        assert decision.action == 1

    def test_empty_actions(self, opening_state):
        with pytest.raises(ValueError):
            RandomPolicy().select_action(opening_state, [])
