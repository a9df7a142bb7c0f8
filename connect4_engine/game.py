import logging

from .board import ArrayBoard, CellState, NO_MOVE
from .factory import AIManager, AIType
from .graph_board import GraphBoard
from .players import NO_COLUMN

logger = logging.getLogger(__name__)


class Game:
    """
    One human-vs-engine game.

    The human plays CellState.PLAYER and moves first. When a difficulty is
    given, an engine of `ai_type` plays CellState.OPPONENT.
    """

    def __init__(self, difficulty=None, ai_type=AIType.MINIMAX_GRAPH, use_graph_board=True,
                 ai_manager=None):
        self.use_graph_board = use_graph_board
        self.ai_type = AIType(ai_type)
        self.ai_manager = ai_manager or AIManager()
        self.ai = None
        if difficulty is not None:
            self.ai = self.ai_manager.create_ai(self.ai_type, CellState.OPPONENT, difficulty)
        self.reset()

    def reset(self):
        self.board = GraphBoard() if self.use_graph_board else ArrayBoard()
        self.turn = CellState.PLAYER
        self.ended = False

    def is_ended(self):
        return self.ended

    def is_column_full(self, col):
        return self.board.is_column_full(col)

    def is_board_full(self):
        self.ended = self.board.is_full()
        return self.ended

    def current_player_number(self):
        return 1 if self.turn == CellState.PLAYER else 2

    def next_turn(self):
        self.turn = CellState.OPPONENT if self.turn == CellState.PLAYER else CellState.PLAYER

    def get_turn(self):
        return self.turn

    def check_victory(self, row, col):
        self.ended = self.board.check_victory(row, col)
        return self.ended

    def apply_move(self, col, state):
        row, col_played = self.board.apply_move(col, state)
        if state == CellState.PLAYER:
            logger.info("[Player] chose column %d -> row %d", col, row)
        elif self.ai is not None:
            logger.info("[AI: %s] chose column %d -> row %d", self.ai_type.value, col, row)
        return row, col_played

    def get_node(self, row, col):
        return self.board.get_node(row, col)

    def get_cell_state(self, row, col):
        return self.board.get_cell_state(row, col)

    def ai_play(self):
        """
        Lets the engine move for OPPONENT.

        Returns:
            tuple: the landing (row, col), or (-1, -1) when the game is over.
        """
        if self.ai is None:
            raise RuntimeError("AI not enabled.")

        if self.ended or self.board.is_full():
            return NO_MOVE

        col = self.ai.choose_move(self.board)
        if col == NO_COLUMN:
            self.ended = True
            return NO_MOVE

        return self.apply_move(col, CellState.OPPONENT)

    def evaluate(self):
        """Static score of the current position from the engine's side."""
        return self.board.evaluate(CellState.OPPONENT)
