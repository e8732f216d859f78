"""
Bot Policy - Interface for bot decision-making.

A BotPolicy takes a game state and returns a decision.
Decisions include:
- Which action code to play
- Explanation (for UI/debugging)
- Search diagnostics, when the policy searches
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
import random

from .metrics import SearchMetrics

if TYPE_CHECKING:
    from ..engine_core.state import BackgammonState


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains:
    - The action code to play
    - Explanation (for UI/debugging)
    - Value of the chosen action for the deciding player
    - Diagnostics from the search that produced it
    """
    action: int
    explanation: str = ""
    confidence: float = 1.0

    # Evaluation details (for debugging)
    evaluated_actions: int = 0
    best_score: float = 0.0
    tied_actions: list[int] = field(default_factory=list)
    metrics: SearchMetrics = field(default_factory=SearchMetrics)


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    A policy defines how a bot selects actions.
    Implementations range from baselines to the expectimax search.
    """

    @abstractmethod
    def select_action(
        self,
        state: BackgammonState,
        legal_actions: list[int],
    ) -> BotDecision:
        """
        Select an action from the generated actions.

        Args:
            state: Current game state
            legal_actions: Action codes to choose from

        Returns:
            BotDecision with the selected action
        """
        pass

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(BotPolicy):
    """
    Random policy - selects actions uniformly at random.

    Used for:
    - Testing
    - Baseline comparison
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_action(
        self,
        state: BackgammonState,
        legal_actions: list[int],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        action = self.rng.choice(legal_actions)
        return BotDecision(
            action=action,
            explanation="Selected randomly",
            confidence=1.0 / len(legal_actions),
            evaluated_actions=len(legal_actions),
        )


class FirstLegalPolicy(BotPolicy):
    """
    First-legal policy - always selects the first generated action.

    The generator lists captures and bear-offs first, so this is a
    greedy baseline rather than an arbitrary one.
    """

    def select_action(
        self,
        state: BackgammonState,
        legal_actions: list[int],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        return BotDecision(
            action=legal_actions[0],
            explanation="Selected first legal action",
            evaluated_actions=1,
        )
