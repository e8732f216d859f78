"""
Bots module - Automa AI implementations.

Provides:
- BotPolicy: Interface for bot decision-making
- UtilityEvaluator: Scores leaf states
- ExpectimaxBot: Time-bounded search bot
- SearchMetrics: Diagnostics from a search call
"""

from .policy import BotPolicy, BotDecision, RandomPolicy, FirstLegalPolicy
from .evaluator import UtilityEvaluator, StateEvaluation
from .metrics import SearchMetrics, EXPANDED_NODES, MAX_DEPTH
from .expectimax_bot import ExpectimaxBot, DICE_OUTCOMES

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
    "UtilityEvaluator",
    "StateEvaluation",
    "SearchMetrics",
    "EXPANDED_NODES",
    "MAX_DEPTH",
    "ExpectimaxBot",
    "DICE_OUTCOMES",
]
