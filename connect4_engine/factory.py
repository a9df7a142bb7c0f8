"""
Strategy factory.

Maps an AI type and a difficulty to a constructed engine bound to one side
of the board:

    manager = AIManager()
    ai = manager.create_ai(AIType.MINIMAX_ARRAY, CellState.OPPONENT, AIDifficulty.HARD)
    column = ai.choose_move(board)
"""

from enum import StrEnum
import logging

from .board import ArrayBoard
from .graph_board import GraphBoard
from .players import (
    AIDifficulty, MinimaxArrayPlayer, MinimaxGraphPlayer,
    MonteCarloArrayPlayer, MonteCarloGraphPlayer,
)

logger = logging.getLogger(__name__)


class AIType(StrEnum):
    MINIMAX_ARRAY = "minimax_array"
    MINIMAX_GRAPH = "minimax_graph"
    MONTE_CARLO_ARRAY = "monte_carlo_array"
    MONTE_CARLO_GRAPH = "monte_carlo_graph"


AI_DESCRIPTIONS = {
    AIType.MINIMAX_ARRAY: "Minimax Algorithm with Alpha-Beta pruning using Array representation",
    AIType.MINIMAX_GRAPH: "Minimax Algorithm with graph-based analysis using Graph representation",
    AIType.MONTE_CARLO_ARRAY: "Monte Carlo with random simulations using Array representation",
    AIType.MONTE_CARLO_GRAPH: "Monte Carlo with graph-based simulations",
}

GRAPH_AI_TYPES = frozenset({AIType.MINIMAX_GRAPH, AIType.MONTE_CARLO_GRAPH})


def _coerce_ai_type(ai_type):
    try:
        return AIType(ai_type)
    except ValueError:
        raise ValueError(f"Unknown AI type: {ai_type}") from None


def requires_graph_board(ai_type):
    return _coerce_ai_type(ai_type) in GRAPH_AI_TYPES


def create_board(ai_type):
    """Returns an empty board of the kind the given AI type plays on."""
    return GraphBoard() if requires_graph_board(ai_type) else ArrayBoard()


class AIManager:
    """Registry of engine constructors, keyed by AIType."""

    def __init__(self):
        self._ai_factories = {
            AIType.MINIMAX_ARRAY: MinimaxArrayPlayer,
            AIType.MINIMAX_GRAPH: MinimaxGraphPlayer,
            AIType.MONTE_CARLO_ARRAY: MonteCarloArrayPlayer,
            AIType.MONTE_CARLO_GRAPH: MonteCarloGraphPlayer,
        }

    def create_ai(self, ai_type, player, difficulty=AIDifficulty.MEDIUM, **options):
        """
        Builds an engine.

        Args:
            ai_type (AIType | str): which strategy to build.
            player (CellState): the side the engine plays.
            difficulty (AIDifficulty | str): search depth / rollout budget tier.
            **options: passed through to the engine (e.g. seed= for Monte Carlo).

        Raises:
            ValueError: for an unknown AI type or difficulty.
        """
        factory = self._ai_factories.get(_coerce_ai_type(ai_type))
        if factory is None:
            raise ValueError(f"Unknown AI type: {ai_type}")

        ai = factory(player, AIDifficulty(difficulty), **options)
        logger.debug("Created %r", ai)
        return ai

    def get_all_ai_types(self):
        return list(self._ai_factories)

    @staticmethod
    def get_ai_description(ai_type):
        return AI_DESCRIPTIONS.get(_coerce_ai_type(ai_type), "Unknown AI type")


_default_manager = AIManager()


def create_ai(ai_type, player, difficulty=AIDifficulty.MEDIUM, **options):
    return _default_manager.create_ai(ai_type, player, difficulty, **options)
