from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import StrEnum
import logging
import math
import random
import time

from .board import ArrayBoard, CellState, opponent_of
from .graph_board import GraphBoard

logger = logging.getLogger(__name__)

NO_COLUMN = -1


class AIDifficulty(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# Plies searched by the minimax players
SEARCH_DEPTHS = {
    AIDifficulty.EASY: 3,
    AIDifficulty.MEDIUM: 5,
    AIDifficulty.HARD: 7,
}

# Total rollouts per decision for the Monte Carlo players
SIMULATION_COUNTS = {
    AIDifficulty.EASY: 1000,
    AIDifficulty.MEDIUM: 5000,
    AIDifficulty.HARD: 10000,
}


@dataclass(frozen=True)
class MoveDecision:
    """
    Outcome of one decision plus the diagnostics gathered while making it.

    reason is one of "no-move", "win", "block", "search" or "simulation".
    """
    column: int
    reason: str
    scores: dict = field(default_factory=dict)
    pruning_count: int = 0
    rollouts: int = 0


@dataclass
class _SearchStats:
    pruning_count: int = 0
    rollouts: int = 0


############################################################################
################# Player base class ########################################
############################################################################

class Player(ABC):
    """Abstract base class for all Connect 4 engines."""
    name = "Player"
    board_type = None

    def __init__(self, player, difficulty=AIDifficulty.MEDIUM):
        self.player = CellState(player)
        if self.player == CellState.EMPTY:
            raise ValueError("An engine must play PLAYER or OPPONENT, not EMPTY")
        self.opponent = opponent_of(self.player)
        self.difficulty = AIDifficulty(difficulty)

    def choose_move(self, board):
        """
        Given the current board state, returns the column where the engine wants to move.

        Args:
            board (Board): The current 6x7 game board. It is never modified.

        Returns:
            int: The column index (0-6) for the move, or -1 if no column is playable.
        """
        return self.analyze(board).column

    @abstractmethod
    def analyze(self, board):
        """Same as choose_move, returning a MoveDecision with the search diagnostics."""

    def _check_board(self, board):
        if not isinstance(board, self.board_type):
            raise TypeError(
                f"{type(self).__name__} requires {self.board_type.__name__}, "
                f"got {type(board).__name__}"
            )

    def _is_winning_move(self, board, col, state):
        test_board = board.make_move(col, state)
        if test_board is None:
            return False
        return test_board.winner() == state

    def _find_forced_move(self, board, legal_moves):
        """
        Lookahead-1 safety net, checked in ascending column order.

        Returns:
            MoveDecision | None: an immediate win for self, else a block of the
            opponent's immediate win, else None.
        """
        # 1. Check for immediate winning move for self
        for col in legal_moves:
            if self._is_winning_move(board, col, self.player):
                logger.info("%s (%s): immediate win at column %d", self.name, self.player.name, col)
                return MoveDecision(col, "win")

        # 2. Check for immediate winning move for opponent and block it
        for col in legal_moves:
            if self._is_winning_move(board, col, self.opponent):
                logger.info("%s (%s): blocking opponent at column %d", self.name, self.player.name, col)
                return MoveDecision(col, "block")

        return None

    def __repr__(self):
        return f"{type(self).__name__}(player={self.player.name}, difficulty={self.difficulty.value})"


############################################################################
################# Minimax players ##########################################
############################################################################

class MinimaxPlayer(Player):
    """Depth-limited minimax with alpha-beta pruning over the static evaluator."""

    def __init__(self, player, difficulty=AIDifficulty.MEDIUM, depth=None):
        super().__init__(player, difficulty)
        self.search_depth = depth if depth is not None else SEARCH_DEPTHS[self.difficulty]

    def analyze(self, board):
        self._check_board(board)
        legal_moves = board.get_available_columns()
        if not legal_moves:
            return MoveDecision(NO_COLUMN, "no-move")

        logger.debug("%s (%s): depth %d, legal moves %s",
                     self.name, self.player.name, self.search_depth, legal_moves)

        forced = self._find_forced_move(board, legal_moves)
        if forced is not None:
            return forced

        start_time = time.time()
        stats = _SearchStats()
        move_scores = {}
        best_move = legal_moves[0]
        best_value = -math.inf

        for col in legal_moves:
            child = board.make_move(col, self.player)
            if child is None:
                continue

            # The opponent replies next, so the search starts on a minimizing ply
            value = self._minimax(child, self.search_depth - 1, False, -math.inf, math.inf, stats)
            move_scores[col] = value
            logger.debug("%s: column %d scored %s", self.name, col, value)

            # Strict comparison keeps the lowest column among equal values
            if value > best_value:
                best_value = value
                best_move = col

        logger.info("%s (%s): chose column %d (score %s, %d prunings, %.2fs)",
                    self.name, self.player.name, best_move, best_value,
                    stats.pruning_count, time.time() - start_time)

        return MoveDecision(best_move, "search", move_scores, pruning_count=stats.pruning_count)

    def _minimax(self, board, depth, maximizing, alpha, beta, stats):
        """
        Minimax algorithm with Alpha-Beta pruning.

        Returns:
            int: the evaluation of `board` from this engine's point of view.
        """
        if depth == 0 or board.has_winner() or board.is_full():
            return board.evaluate(self.player)

        if maximizing:
            value = -math.inf
            for col in board.get_available_columns():
                child = board.make_move(col, self.player)
                if child is None:
                    continue
                value = max(value, self._minimax(child, depth - 1, False, alpha, beta, stats))
                alpha = max(alpha, value)
                if beta <= alpha:
                    stats.pruning_count += 1
                    break  # Beta cutoff
            return value
        else:
            value = math.inf
            for col in board.get_available_columns():
                child = board.make_move(col, self.opponent)
                if child is None:
                    continue
                value = min(value, self._minimax(child, depth - 1, True, alpha, beta, stats))
                beta = min(beta, value)
                if beta <= alpha:
                    stats.pruning_count += 1
                    break  # Alpha cutoff
            return value


class MinimaxArrayPlayer(MinimaxPlayer):
    name = "Minimax Array"
    board_type = ArrayBoard


class MinimaxGraphPlayer(MinimaxPlayer):
    name = "Minimax Graph"
    board_type = GraphBoard


############################################################################
################# Monte Carlo players ######################################
############################################################################

def simulations_per_move(budget, legal_count):
    """Even split of the rollout budget; the remainder is not played."""
    if legal_count <= 0:
        return 0
    return budget // legal_count


class MonteCarloPlayer(Player):
    """
    Flat Monte Carlo: every legal column gets the same number of uniformly
    random playouts and the best average reward wins.
    """
    check_forced_moves = False

    def __init__(self, player, difficulty=AIDifficulty.MEDIUM, simulations=None, seed=None):
        super().__init__(player, difficulty)
        self.n_simulations = simulations if simulations is not None else SIMULATION_COUNTS[self.difficulty]
        self.rng = random.Random(seed)

    def analyze(self, board):
        self._check_board(board)
        legal_moves = board.get_available_columns()
        if not legal_moves:
            return MoveDecision(NO_COLUMN, "no-move")

        logger.debug("%s (%s): %d simulations, legal moves %s",
                     self.name, self.player.name, self.n_simulations, legal_moves)

        if self.check_forced_moves:
            forced = self._find_forced_move(board, legal_moves)
            if forced is not None:
                return forced

        start_time = time.time()
        stats = _SearchStats()
        sims_per_move = simulations_per_move(self.n_simulations, len(legal_moves))
        move_scores = {}

        for col in legal_moves:
            total_score = 0.0
            for _ in range(sims_per_move):
                child = board.make_move(col, self.player)
                if child is None:
                    continue
                total_score += self._simulate(child)
                stats.rollouts += 1

            avg_score = total_score / sims_per_move if sims_per_move else 0.0
            move_scores[col] = avg_score
            logger.debug("%s: column %d avg score %.3f over %d simulations",
                         self.name, col, avg_score, sims_per_move)

        # First column reaching the maximum wins ties
        best_move = legal_moves[0]
        for col in legal_moves:
            if move_scores[col] > move_scores[best_move]:
                best_move = col

        logger.info("%s (%s): chose column %d (avg %.3f, %d rollouts, %.2fs)",
                    self.name, self.player.name, best_move, move_scores[best_move],
                    stats.rollouts, time.time() - start_time)

        return MoveDecision(best_move, "simulation", move_scores, rollouts=stats.rollouts)

    def _simulate(self, board):
        """
        Plays random moves on `board` (a private copy) until the game ends.

        Returns:
            float: 1.0 if this engine wins, -1.0 if the opponent wins,
            otherwise the reward for an undecided finish.
        """
        sim_player = self.opponent

        while not board.is_full() and not board.has_winner():
            legal_moves = board.get_available_columns()
            if not legal_moves:
                break

            move = self.rng.choice(legal_moves)
            if board.apply_move(move, sim_player)[0] == -1:
                break
            sim_player = opponent_of(sim_player)

        winner = board.winner()
        if winner == self.player:
            return 1.0
        if winner == self.opponent:
            return -1.0
        return self._undecided_reward(board)

    def _undecided_reward(self, board):
        return 0.0


class MonteCarloArrayPlayer(MonteCarloPlayer):
    name = "Monte Carlo Array"
    board_type = ArrayBoard


class MonteCarloGraphPlayer(MonteCarloPlayer):
    """
    Graph variant: also takes immediate wins and blocks, and scores a rollout
    that ends without a winner with the heuristic difference instead of 0.
    """
    name = "Monte Carlo Graph"
    board_type = GraphBoard
    check_forced_moves = True

    def _undecided_reward(self, board):
        # Not clamped to [-1, 1], unlike win/loss rewards
        score_self = board.heuristic_score(self.player)
        score_opponent = board.heuristic_score(self.opponent)
        return (score_self - score_opponent) / 100.0
