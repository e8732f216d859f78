"""
Expectimax Bot - Time-bounded adversarial search for Backgammon.

This is the automa that:
- Uses iterative deepening under a wall-clock budget
- Runs alpha-beta over the deciding player's and opponent's moves
- Expands a chance node over all 21 distinct dice rolls whenever the
  turn passes (non-doubles weigh 1/18, doubles 1/36)
- Evaluates cut-off leaves with the stored utility

The deadline is only checked between root actions, so a call can
overrun by the time it takes to finish one root subtree.

The bot does NOT:
- Cancel mid-subtree
- Share counters between calls (every call gets its own SearchRun)
- Learn from games
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable
import logging
import math
import random
import time

from .policy import BotPolicy, BotDecision
from .evaluator import UtilityEvaluator
from .metrics import SearchMetrics, EXPANDED_NODES, MAX_DEPTH
from ..engine_core.game import BackgammonGame
from ..engine_core.state import BackgammonState, Player
from ..engine_core.action import SWAP_OFFSET, action_point, describe_action

logger = logging.getLogger(__name__)


SIGNIFICANCE_MARGIN = 0.03
DEFAULT_MAX_DEPTH = 64
VALUE_DIGITS = 9

# (first die, second die, probability) for the 21 distinct rolls
DICE_OUTCOMES = tuple(
    (first, second, 1 / 36.0 if first == second else 1 / 18.0)
    for first in range(1, 7)
    for second in range(first, 7)
)

ValueFunction = Callable[..., float]


@dataclass
class SearchRun:
    """Limits and counters for a single search call."""
    deadline: float
    rng: random.Random
    depth_limit: int = 0
    expanded_nodes: int = 0
    max_depth: int = 0
    # Set when a leaf was scored by estimate rather than a final result
    cutoff_reached: bool = False


@dataclass
class ExpectimaxBot(BotPolicy):
    """
    Iterative deepening expectimax with alpha-beta pruning.

    Usage:
        bot = ExpectimaxBot(time_budget_ms=500)
        decision = bot.propose_move(state)
        print(decision.action, decision.metrics.depth_lines())
    """
    time_budget_ms: int = 1000
    max_depth: int = DEFAULT_MAX_DEPTH
    significance_margin: float = SIGNIFICANCE_MARGIN
    game: BackgammonGame = None  # type: ignore
    evaluator: UtilityEvaluator = None  # type: ignore
    clock: Callable[[], float] = time.monotonic
    rng: random.Random = None  # type: ignore

    def __post_init__(self):
        if self.game is None:
            self.game = BackgammonGame()
        if self.evaluator is None:
            self.evaluator = UtilityEvaluator(game=self.game)
        if self.rng is None:
            self.rng = random.Random()

    def select_action(
        self,
        state: BackgammonState,
        legal_actions: list[int],
    ) -> BotDecision:
        """Search the given actions with the configured time budget."""
        if not legal_actions:
            raise ValueError("No legal actions available")
        return self._search(state, state.player_to_move, list(legal_actions), self.time_budget_ms)

    def propose_move(
        self,
        state: BackgammonState,
        player: Player | None = None,
        time_budget_ms: int | None = None,
    ) -> BotDecision:
        """
        Choose an action for `player` (the player to move by default).

        Always returns one of the generated action codes; a 0 ms budget
        still completes a one-ply evaluation.
        """
        player = state.player_to_move if player is None else player
        if player is not state.player_to_move:
            raise ValueError(f"{player.display_name} is not on turn")
        if state.is_terminal():
            raise ValueError("Cannot propose a move in a finished game")

        budget = self.time_budget_ms if time_budget_ms is None else time_budget_ms
        return self._search(state, player, self.game.actions(state), budget)

    # ------------------------------------------------------------------
    # Root
    # ------------------------------------------------------------------

    def _search(
        self,
        state: BackgammonState,
        player: Player,
        actions: list[int],
        budget_ms: int,
    ) -> BotDecision:
        run = SearchRun(deadline=self.clock() + budget_ms / 1000.0, rng=self.rng)
        metrics = SearchMetrics()
        results: list[int] = []
        result_value = -math.inf

        while True:
            run.depth_limit += 1
            run.cutoff_reached = False

            # Previous best first for earlier cutoffs
            for action in results:
                actions.remove(action)
                actions.insert(0, action)

            new_results: list[int] = []
            new_value = second_best = alpha = -math.inf
            log_parts = [f"depth {run.depth_limit}:"]
            timed_out = False

            for action in actions:
                # The first iteration always completes
                if results and self.clock() > run.deadline:
                    timed_out = True
                    break

                value = round(self._root_value(run, state, player, action, alpha), VALUE_DIGITS)
                log_parts.append(f"{action}->{value}")

                if value >= new_value:
                    if value > new_value:
                        second_best = new_value
                        new_value = value
                        alpha = value
                        new_results = []
                    new_results.append(action)
                elif value > second_best:
                    second_best = value

            metrics.set(str(run.depth_limit), " ".join(log_parts))
            logger.debug("%s", " ".join(log_parts))

            if not timed_out or self._is_significantly_better(new_value, result_value):
                results = new_results
                result_value = new_value

            if len(results) == 1 and self._is_significantly_better(result_value, second_best):
                break
            if timed_out or not run.cutoff_reached or result_value == 1.0:
                break
            if run.depth_limit >= self.max_depth:
                break

        action = self._break_ties(results, player)
        metrics.set(EXPANDED_NODES, run.expanded_nodes)
        metrics.set(MAX_DEPTH, run.max_depth)

        explanation = (
            f"Depth {run.depth_limit} search: {describe_action(state, action)} "
            f"(value {result_value:.4f})"
        )
        logger.info(
            "%s chose %d at depth %d (value %.6f, %d nodes)",
            player.display_name, action, run.depth_limit, result_value, run.expanded_nodes,
        )

        return BotDecision(
            action=action,
            explanation=explanation,
            confidence=result_value,
            evaluated_actions=len(actions),
            best_score=result_value,
            tied_actions=list(results),
            metrics=metrics,
        )

    def _root_value(
        self,
        run: SearchRun,
        state: BackgammonState,
        player: Player,
        action: int,
        alpha: float,
    ) -> float:
        child = self.game.get_result(state, action, is_computer=True, rng=run.rng)
        if child.player_to_move is player:
            return self.max_value(run, child, player, alpha, math.inf, 1)
        return self._chance_value(run, child, player, alpha, math.inf, 1, self.min_value)

    def _is_significantly_better(self, new_utility: float, utility: float) -> bool:
        # -inf - -inf is nan, which compares False
        return new_utility - utility > self.significance_margin

    def _break_ties(self, results: list[int], player: Player) -> int:
        """
        Pick one action among equally valued ones.

        If every tied disk is already home, move the one closest to
        bearing off; otherwise move the one farthest from it.
        """
        points = sorted(action_point(action) for action in results)
        if player is Player.BLACK:
            all_home = points[0] > 18
            closest, farthest = points[-1], points[0]
        else:
            all_home = points[-1] <= 6
            closest, farthest = points[0], points[-1]

        chosen = closest if all_home else farthest
        if chosen in results:
            return chosen
        return chosen + SWAP_OFFSET

    # ------------------------------------------------------------------
    # Recursion
    # ------------------------------------------------------------------

    def max_value(
        self,
        run: SearchRun,
        state: BackgammonState,
        player: Player,
        alpha: float,
        beta: float,
        depth: int,
    ) -> float:
        """Best value `player` can reach when it is their move in `state`."""
        run.expanded_nodes += 1
        run.max_depth = max(run.max_depth, depth)
        if depth >= run.depth_limit or state.is_terminal():
            return self._evaluate(run, state, player)

        value = 0.0
        for action in self.game.actions(state):
            child = self.game.get_result(state, action, is_computer=True, rng=run.rng)
            if child.player_to_move is player:
                new_value = self.max_value(run, child, player, alpha, beta, depth + 1)
            else:
                new_value = self._chance_value(run, child, player, alpha, beta, depth + 1, self.min_value)

            if new_value >= beta:
                return new_value
            value = max(value, new_value)
            alpha = max(alpha, value)
        return value

    def min_value(
        self,
        run: SearchRun,
        state: BackgammonState,
        player: Player,
        alpha: float,
        beta: float,
        depth: int,
    ) -> float:
        """Value for `player` when the opponent moves in `state`."""
        run.expanded_nodes += 1
        run.max_depth = max(run.max_depth, depth)
        if depth >= run.depth_limit or state.is_terminal():
            return self._evaluate(run, state, player)

        value = 1.0
        for action in self.game.actions(state):
            child = self.game.get_result(state, action, is_computer=True, rng=run.rng)
            if child.player_to_move is player:
                new_value = self._chance_value(run, child, player, alpha, beta, depth + 1, self.max_value)
            else:
                new_value = self.min_value(run, child, player, alpha, beta, depth + 1)

            if new_value <= alpha:
                return new_value
            value = min(value, new_value)
            beta = min(beta, value)
        return value

    def _chance_value(
        self,
        run: SearchRun,
        state: BackgammonState,
        player: Player,
        alpha: float,
        beta: float,
        depth: int,
        value_fn: ValueFunction,
    ) -> float:
        """Expected value over the next roll; `state` is owned by the caller's branch."""
        total = 0.0
        for first, second, probability in DICE_OUTCOMES:
            state.set_dice(first, second)
            total += value_fn(run, state, player, alpha, beta, depth) * probability
        return total

    def _evaluate(self, run: SearchRun, state: BackgammonState, player: Player) -> float:
        evaluation = self.evaluator.evaluate(state, player)
        if evaluation.is_estimate:
            run.cutoff_reached = True
        return evaluation.score
