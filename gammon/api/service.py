"""
Game Service - Business logic layer between a front end and the engine.

The service:
1. Holds the current position and the dice RNG
2. Validates and applies human gestures
3. Runs the search bot for the computer's turn
4. Formats positions and decisions as pydantic models

This layer is framework-agnostic (a GUI, the CLI or a web app can drive it).
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import random

from .schemas import (
    # Requests
    MoveRequest,
    # Responses
    BoardResponse,
    MoveResponse,
    DecisionResponse,
    # Shared
    PointInfo,
    DiceInfo,
    # Enums
    GameStatus,
    ErrorCode,
)
from ..bots.expectimax_bot import ExpectimaxBot
from ..bots.policy import BotDecision, BotPolicy
from ..config import get_settings
from ..engine_core.action import describe_action
from ..engine_core.game import BackgammonGame
from ..engine_core.reducer import apply_human_action
from ..engine_core.state import BackgammonState, Player, NUM_POINTS

logger = logging.getLogger(__name__)


OWNER_NAMES = {Player.BLACK: "black", Player.WHITE: "white"}


@dataclass
class GameService:
    """
    Main service for one game of human or bot play.

    Usage:
        service = GameService()
        service.new_game(seed=7)

        # Human gesture
        response = service.submit_move(MoveRequest(action=12))

        # Computer turn
        decisions = service.play_bot_turn()
    """
    game: BackgammonGame = field(default_factory=BackgammonGame)
    rng: random.Random = field(default_factory=random.Random)
    bot: ExpectimaxBot = None  # type: ignore
    state: BackgammonState = None  # type: ignore

    def __post_init__(self):
        if self.bot is None:
            settings = get_settings()
            self.bot = ExpectimaxBot(
                time_budget_ms=settings.time_budget_ms,
                max_depth=settings.max_search_depth,
                significance_margin=settings.significance_margin,
                game=self.game,
                rng=self.rng,
            )
        if self.state is None:
            self.state = self.game.initial_state(self.rng)

    def new_game(self, seed: int | None = None) -> BoardResponse:
        """Reset to the opening position with freshly rolled dice."""
        self.rng.seed(seed)
        self.state = self.game.initial_state(self.rng)
        logger.info("New game, %s to move", self.state.player_to_move.display_name)
        return self.board()

    def board(self) -> BoardResponse:
        """Current position for display."""
        state = self.state
        terminal = state.is_terminal()
        return BoardResponse(
            status=GameStatus.GAME_OVER if terminal else GameStatus.IN_PROGRESS,
            player_to_move=state.player_to_move.display_name,
            move_count=state.move_count,
            points=[
                PointInfo(
                    point=point,
                    owner=OWNER_NAMES.get(state.owner(point)),
                    count=state.count(point),
                )
                for point in range(NUM_POINTS)
            ],
            dice=DiceInfo(
                values=(state.dice[0], state.dice[1]),
                used=(state.used_dice[0], state.used_dice[1]),
                selected=state.selected_die,
                is_doubles=state.is_doubles,
            ),
            borne_off={
                OWNER_NAMES[player]: state.borne_off(player)
                for player in self.game.players()
            },
            legal_actions=[] if terminal else self.game.actions(state),
            utility=state.utility,
            winner=state.winner().display_name if terminal else None,
        )

    def submit_move(self, request: MoveRequest) -> MoveResponse:
        """
        Apply one human gesture.

        Rejected moves are reported, not raised. When the player has no
        legal move at all, the rejection also passes the turn.
        """
        if self.state.is_terminal():
            return MoveResponse(
                success=False,
                error="The game is over",
                error_code=ErrorCode.GAME_OVER,
                board=self.board(),
            )

        result = apply_human_action(self.state, request.action, rng=self.rng)
        self.state = result.new_state
        if not result.success:
            logger.info("Rejected move %d: %s", request.action, result.error)

        return MoveResponse(
            success=result.success,
            error=result.error,
            error_code=ErrorCode(result.error_code) if result.error_code else None,
            changes=result.state_changes,
            board=self.board(),
        )

    def propose_move(self, time_budget_ms: int | None = None) -> DecisionResponse:
        """Search the current position without changing it."""
        decision = self.bot.propose_move(self.state, time_budget_ms=time_budget_ms)
        return self._decision_to_response(self.state, decision)

    def select_die(self, die: int) -> BoardResponse:
        """
        Make `die` the one the next gesture moves with.

        Mirrors clicking a die in a GUI. A die with no use left this turn
        is not selected and the board comes back unchanged.
        """
        if die not in (0, 1):
            raise ValueError(f"Die index must be 0 or 1, got {die}")
        if die != self.state.selected_die and not self.state.change_selected_die():
            logger.info("Die %d has no use left this turn", die)
        return self.board()

    def play_bot_turn(
        self,
        time_budget_ms: int | None = None,
        policy: BotPolicy | None = None,
    ) -> list[DecisionResponse]:
        """
        Let the bot play every move of the current player's turn.

        Each action moves one disk, so a turn takes one decision per die
        used (up to four on doubles). A `policy` replaces the search bot
        for this turn.
        """
        player = self.state.player_to_move
        responses = []
        while self.state.player_to_move is player and not self.state.is_terminal():
            if policy is None:
                decision = self.bot.propose_move(self.state, time_budget_ms=time_budget_ms)
            else:
                decision = policy.select_action(self.state, self.game.actions(self.state))
            responses.append(self._decision_to_response(self.state, decision))
            self.state = self.game.get_result(
                self.state, decision.action, is_computer=True, rng=self.rng
            )
        return responses

    def _decision_to_response(
        self,
        state: BackgammonState,
        decision: BotDecision,
    ) -> DecisionResponse:
        """Convert a BotDecision to a response."""
        return DecisionResponse(
            action=decision.action,
            description=describe_action(state, decision.action),
            value=decision.best_score,
            tied_actions=decision.tied_actions,
            expanded_nodes=decision.metrics.expanded_nodes,
            max_depth=decision.metrics.max_depth,
            depth_lines=decision.metrics.depth_lines(),
        )
