import unittest

from connect4_engine.board import ArrayBoard, CellState
from connect4_engine.graph_board import GraphBoard
from connect4_engine.players import (
    AIDifficulty, MinimaxArrayPlayer, MinimaxGraphPlayer, MonteCarloArrayPlayer,
    MonteCarloGraphPlayer, SEARCH_DEPTHS, SIMULATION_COUNTS, simulations_per_move,
)

from helpers import E, P, O, empty_grid, draw_grid, clear_columns

ALL_PLAYERS = (MinimaxArrayPlayer, MinimaxGraphPlayer, MonteCarloArrayPlayer, MonteCarloGraphPlayer)


def win_grid():
    """P (to move) has three stacked in column 0; O has nothing dangerous."""
    grid = empty_grid()
    grid[5][0] = P; grid[4][0] = P; grid[3][0] = P
    grid[5][6] = O; grid[4][6] = O; grid[5][5] = O
    return grid


def block_grid():
    """O threatens (5,0) along the bottom row; P has no win of its own."""
    grid = empty_grid()
    grid[5][1] = O; grid[5][2] = O; grid[5][3] = O
    grid[5][4] = P; grid[4][1] = P
    return grid


class TestMinimaxPlayers(unittest.TestCase):

    def test_depth_follows_difficulty(self):
        for difficulty, depth in [(AIDifficulty.EASY, 3), (AIDifficulty.MEDIUM, 5), (AIDifficulty.HARD, 7)]:
            self.assertEqual(MinimaxArrayPlayer(CellState.PLAYER, difficulty).search_depth, depth)
            self.assertEqual(SEARCH_DEPTHS[difficulty], depth)
        self.assertEqual(MinimaxGraphPlayer(CellState.PLAYER, "hard").search_depth, 7)

    def test_takes_immediate_win_at_any_depth(self):
        for player_class, board_class in [(MinimaxArrayPlayer, ArrayBoard), (MinimaxGraphPlayer, GraphBoard)]:
            for difficulty in AIDifficulty:
                with self.subTest(player=player_class.__name__, difficulty=difficulty):
                    ai = player_class(CellState.PLAYER, difficulty)
                    decision = ai.analyze(board_class(win_grid()))
                    self.assertEqual(decision.column, 0)
                    self.assertEqual(decision.reason, "win")

    def test_blocks_immediate_threat(self):
        for player_class, board_class in [(MinimaxArrayPlayer, ArrayBoard), (MinimaxGraphPlayer, GraphBoard)]:
            with self.subTest(player=player_class.__name__):
                ai = player_class(CellState.PLAYER, AIDifficulty.HARD)
                decision = ai.analyze(board_class(block_grid()))
                self.assertEqual(decision.column, 0)
                self.assertEqual(decision.reason, "block")

    def test_search_keeps_lowest_column_among_best(self):
        ai = MinimaxArrayPlayer(CellState.PLAYER, AIDifficulty.EASY)
        decision = ai.analyze(ArrayBoard())
        self.assertEqual(decision.reason, "search")
        self.assertEqual(sorted(decision.scores), list(range(7)))

        best = max(decision.scores.values())
        self.assertEqual(decision.column, min(c for c, v in decision.scores.items() if v == best))

    def test_one_ply_prefers_center(self):
        for player_class, board_class in [(MinimaxArrayPlayer, ArrayBoard), (MinimaxGraphPlayer, GraphBoard)]:
            with self.subTest(player=player_class.__name__):
                ai = player_class(CellState.OPPONENT, depth=1)
                self.assertEqual(ai.choose_move(board_class()), 3)

    def test_deterministic_and_stateless_between_calls(self):
        for player_class, board_class in [(MinimaxArrayPlayer, ArrayBoard), (MinimaxGraphPlayer, GraphBoard)]:
            with self.subTest(player=player_class.__name__):
                board = board_class()
                board.apply_move(3, CellState.PLAYER)
                ai = player_class(CellState.OPPONENT, AIDifficulty.EASY)

                first = ai.analyze(board)
                second = ai.analyze(board)
                self.assertEqual(first, second)
                self.assertGreaterEqual(first.pruning_count, 0)

    def test_does_not_modify_callers_board(self):
        board = GraphBoard()
        board.apply_move(2, CellState.PLAYER)
        before = board.to_matrix()
        MinimaxGraphPlayer(CellState.OPPONENT, AIDifficulty.EASY).choose_move(board)
        self.assertEqual(board.to_matrix(), before)
        self.assertEqual((board.last_row, board.last_column), (5, 2))


class TestMonteCarloPlayers(unittest.TestCase):

    def test_budget_follows_difficulty(self):
        self.assertEqual(SIMULATION_COUNTS, {
            AIDifficulty.EASY: 1000, AIDifficulty.MEDIUM: 5000, AIDifficulty.HARD: 10000,
        })
        self.assertEqual(MonteCarloGraphPlayer(CellState.PLAYER, "easy").n_simulations, 1000)

    def test_budget_split_never_exceeds_budget(self):
        for budget in SIMULATION_COUNTS.values():
            for legal_count in range(1, 8):
                per_move = simulations_per_move(budget, legal_count)
                self.assertEqual(per_move, budget // legal_count)
                self.assertLessEqual(per_move * legal_count, budget)
                self.assertLess(budget - per_move * legal_count, legal_count)

    def test_rollouts_run_match_split(self):
        for legal_count in range(1, 8):
            with self.subTest(legal_count=legal_count):
                board = ArrayBoard(clear_columns(draw_grid(), range(legal_count)))
                self.assertEqual(len(board.get_available_columns()), legal_count)

                ai = MonteCarloArrayPlayer(CellState.PLAYER, simulations=50, seed=legal_count)
                decision = ai.analyze(board)
                self.assertEqual(decision.rollouts, (50 // legal_count) * legal_count)
                self.assertIn(decision.column, board.get_available_columns())

    def test_easy_tier_spends_its_budget(self):
        board = ArrayBoard(clear_columns(draw_grid(), [5, 6]))
        decision = MonteCarloArrayPlayer(CellState.OPPONENT, AIDifficulty.EASY, seed=7).analyze(board)
        self.assertEqual(decision.rollouts, 1000)
        self.assertEqual(set(decision.scores), {5, 6})

    def test_seed_makes_decisions_reproducible(self):
        board = ArrayBoard()
        board.apply_move(3, CellState.PLAYER)
        first = MonteCarloArrayPlayer(CellState.OPPONENT, simulations=70, seed=42).analyze(board)
        second = MonteCarloArrayPlayer(CellState.OPPONENT, simulations=70, seed=42).analyze(board)
        self.assertEqual(first, second)
        for score in first.scores.values():
            self.assertGreaterEqual(score, -1.0)
            self.assertLessEqual(score, 1.0)

    def test_array_rollouts_find_the_win(self):
        """The winning column scores 1.0 on every rollout and no column can beat it."""
        decision = MonteCarloArrayPlayer(CellState.PLAYER, simulations=35, seed=3).analyze(ArrayBoard(win_grid()))
        self.assertEqual(decision.reason, "simulation")
        self.assertEqual(decision.column, 0)
        self.assertEqual(decision.scores[0], 1.0)

    def test_graph_variant_short_circuits(self):
        ai = MonteCarloGraphPlayer(CellState.PLAYER, simulations=70, seed=1)

        decision = ai.analyze(GraphBoard(win_grid()))
        self.assertEqual((decision.column, decision.reason, decision.rollouts), (0, "win", 0))

        decision = ai.analyze(GraphBoard(block_grid()))
        self.assertEqual((decision.column, decision.reason, decision.rollouts), (0, "block", 0))

    def test_undecided_rollout_rewards(self):
        """Only (0, 6) is open and filling it draws the game."""
        grid = draw_grid()
        grid[0][6] = E

        array_decision = MonteCarloArrayPlayer(CellState.PLAYER, simulations=10, seed=0).analyze(ArrayBoard(grid))
        self.assertEqual(array_decision.column, 6)
        self.assertEqual(array_decision.scores, {6: 0.0})

        graph_decision = MonteCarloGraphPlayer(CellState.PLAYER, simulations=10, seed=0).analyze(GraphBoard(grid))
        final = GraphBoard(grid)
        final.apply_move(6, CellState.PLAYER)
        self.assertTrue(final.is_full())
        self.assertFalse(final.has_winner())
        expected = (final.heuristic_score(CellState.PLAYER) - final.heuristic_score(CellState.OPPONENT)) / 100.0
        self.assertEqual(graph_decision.column, 6)
        self.assertEqual(graph_decision.rollouts, 10)
        self.assertAlmostEqual(graph_decision.scores[6], expected)


class TestPlayerContract(unittest.TestCase):

    def test_no_legal_move_returns_sentinel(self):
        for player_class in ALL_PLAYERS:
            board_class = player_class.board_type
            with self.subTest(player=player_class.__name__):
                decision = player_class(CellState.PLAYER).analyze(board_class(draw_grid()))
                self.assertEqual((decision.column, decision.reason), (-1, "no-move"))
                self.assertEqual(player_class(CellState.PLAYER).choose_move(board_class(draw_grid())), -1)

    def test_wrong_board_kind_is_rejected(self):
        for player_class in ALL_PLAYERS:
            other = GraphBoard if player_class.board_type is ArrayBoard else ArrayBoard
            with self.subTest(player=player_class.__name__):
                with self.assertRaises(TypeError):
                    player_class(CellState.PLAYER).choose_move(other())

    def test_engine_needs_a_side(self):
        with self.assertRaises(ValueError):
            MinimaxArrayPlayer(CellState.EMPTY)
        with self.assertRaises(ValueError):
            MonteCarloArrayPlayer(CellState.PLAYER, "impossible")

    def test_opponent_is_the_other_side(self):
        ai = MonteCarloGraphPlayer(CellState.OPPONENT)
        self.assertEqual(ai.opponent, CellState.PLAYER)
        self.assertEqual(ai.name, "Monte Carlo Graph")
        self.assertEqual(MinimaxArrayPlayer(2).player, CellState.OPPONENT)


if __name__ == '__main__':
    unittest.main()
