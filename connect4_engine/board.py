from abc import ABC, abstractmethod
from enum import IntEnum

import numpy as np

# --- Constants ---
ROWS = 6  # Standard Connect 4 has 6 rows, row 0 is the TOP
COLS = 7  # Standard Connect 4 has 7 columns
CENTER_COL = COLS // 2
CONNECT = 4  # Stones needed in a line to win

# Alignment axes: horizontal, vertical, diagonal \, diagonal /
DIRECTIONS = ((0, 1), (1, 0), (1, 1), (1, -1))

# Heuristic weights for a 4-cell window
WIN_SCORE = 100000
FOUR_SCORE = 100
THREE_SCORE = 10
TWO_SCORE = 2
OPPONENT_THREE_SCORE = -80
CENTER_SCORE = 3

NO_MOVE = (-1, -1)


class CellState(IntEnum):
    """Occupancy of a single cell."""
    EMPTY = 0
    PLAYER = 1  # Human / first player
    OPPONENT = 2  # Engine / second player


def opponent_of(state):
    """Returns the other non-empty state."""
    return CellState.OPPONENT if state == CellState.PLAYER else CellState.PLAYER


class UnsupportedOperation(NotImplementedError):
    """Raised when a capability is used on a board kind that does not have it."""


def in_bounds(row, col):
    return 0 <= row < ROWS and 0 <= col < COLS


def score_window(mine, theirs, empty):
    """Scores one 4-cell window from the counts of each state in it."""
    score = 0
    if mine == 4:
        score += FOUR_SCORE
    elif mine == 3 and empty == 1:
        score += THREE_SCORE
    elif mine == 2 and empty == 2:
        score += TWO_SCORE

    # Blocking weighs more than the symmetric attack
    if theirs == 3 and empty == 1:
        score += OPPONENT_THREE_SCORE
    return score


def _build_windows():
    """Every in-bounds 4-cell window as (rows, cols) index arrays of shape (N, 4)."""
    rows, cols = [], []
    for dr, dc in DIRECTIONS:
        for r in range(ROWS):
            for c in range(COLS):
                end_r, end_c = r + dr * (CONNECT - 1), c + dc * (CONNECT - 1)
                if not in_bounds(end_r, end_c):
                    continue
                rows.append([r + dr * i for i in range(CONNECT)])
                cols.append([c + dc * i for i in range(CONNECT)])
    return np.array(rows, dtype=np.intp), np.array(cols, dtype=np.intp)


WINDOW_ROWS, WINDOW_COLS = _build_windows()


# --- Board Functions ---
def create_board():
    """Creates an empty Connect 4 grid."""
    return np.zeros((ROWS, COLS), dtype=np.int8)


def get_next_open_row(grid, col):
    """Finds the lowest empty row in a given column, or None if it is full."""
    for r in range(ROWS - 1, -1, -1):
        if grid[r][col] == CellState.EMPTY:
            return r
    return None


def format_board(board):
    """Renders a board as text, top row first, with 1-based column numbers."""
    piece_map = {
        CellState.EMPTY: " ",
        CellState.PLAYER: "X",
        CellState.OPPONENT: "O",
    }
    lines = []
    for r in range(ROWS):
        cells = " ".join(piece_map[board.get_cell_state(r, c)] for c in range(COLS))
        lines.append("| " + cells + " |")
    lines.append("+" + "-" * (COLS * 2 + 1) + "+")
    lines.append("  " + " ".join(map(str, range(1, COLS + 1))))
    return "\n".join(lines)


############################################################################
################# Board base class #########################################
############################################################################

class Board(ABC):
    """
    Common capability set of the two board representations.

    Subclasses own their layout; everything here is written against
    get_cell_state / check_victory so it is shared by both.
    """
    rows = ROWS
    cols = COLS
    supports_nodes = False

    def __init__(self, last_player=CellState.EMPTY, last_row=-1, last_column=-1):
        self.last_player = CellState(last_player)
        self.last_row = last_row
        self.last_column = last_column

    @abstractmethod
    def get_cell_state(self, row, col):
        """Returns the state at (row, col), EMPTY when out of bounds."""

    @abstractmethod
    def apply_move(self, col, state):
        """
        Drops `state` into `col` in place.

        Returns:
            tuple: the landing (row, col), or (-1, -1) for an illegal column.
        """

    @abstractmethod
    def clone(self):
        pass

    @abstractmethod
    def is_full(self):
        pass

    def get_node(self, row, col):
        raise UnsupportedOperation(
            f"get_node is only available for graph-based boards, not {type(self).__name__}"
        )

    def is_column_full(self, col):
        if not 0 <= col < COLS:
            return True
        return self.get_cell_state(0, col) != CellState.EMPTY

    def get_available_columns(self):
        """Returns a list of column indices that are not full, ascending."""
        return [c for c in range(COLS) if self.get_cell_state(0, c) == CellState.EMPTY]

    def make_move(self, col, state):
        """Returns a new board with the move applied, or None if the column is illegal."""
        if self.is_column_full(col):
            return None
        child = self.clone()
        child.apply_move(col, state)
        return child

    def _record_move(self, row, col, state):
        self.last_player = CellState(state)
        self.last_row = row
        self.last_column = col

    def _count_in_direction(self, row, col, dr, dc, state):
        count = 0
        r, c = row + dr, col + dc
        while in_bounds(r, c) and self.get_cell_state(r, c) == state:
            count += 1
            r += dr
            c += dc
        return count

    def check_victory(self, row, col):
        """Checks for 4-in-a-row running through the stone at (row, col)."""
        if not in_bounds(row, col):
            return False
        state = self.get_cell_state(row, col)
        if state == CellState.EMPTY:
            return False

        for dr, dc in DIRECTIONS:
            count = 1
            count += self._count_in_direction(row, col, dr, dc, state)
            count += self._count_in_direction(row, col, -dr, -dc, state)
            if count >= CONNECT:
                return True
        return False

    def winner(self):
        """
        Returns the state that owns a winning line, or EMPTY.

        Uses the recorded last move when there is one; boards built from a raw
        grid have no last move and get a full scan instead.
        """
        if self.last_row != -1 and self.last_column != -1:
            if self.check_victory(self.last_row, self.last_column):
                return self.get_cell_state(self.last_row, self.last_column)
            return CellState.EMPTY

        for r in range(ROWS):
            for c in range(COLS):
                if self.check_victory(r, c):
                    return self.get_cell_state(r, c)
        return CellState.EMPTY

    def has_winner(self):
        return self.winner() != CellState.EMPTY

    def is_terminal(self):
        return self.has_winner() or self.is_full()

    def evaluate(self, state):
        """
        Heuristic score of the position for `state` (the maximizing player).

        A decided game scores +/-WIN_SCORE, a full board without a winner 0.
        Otherwise windowed patterns plus the center column bonus, plus
        whatever structural bonus the representation adds.
        """
        state = CellState(state)
        winner = self.winner()
        if winner != CellState.EMPTY:
            return WIN_SCORE if winner == state else -WIN_SCORE
        if self.is_full():
            return 0
        return self.heuristic_score(state)

    def heuristic_score(self, state):
        """The non-terminal part of evaluate(), computed even on decided or full boards."""
        state = CellState(state)
        return (self._pattern_score(state)
                + self._center_score(state)
                + self._structure_bonus(state))

    @abstractmethod
    def _pattern_score(self, state):
        """Sum of score_window over every window that starts on an occupied cell."""

    def _center_score(self, state):
        score = 0
        for r in range(ROWS):
            cell = self.get_cell_state(r, CENTER_COL)
            if cell == state:
                score += CENTER_SCORE
            elif cell != CellState.EMPTY:
                score -= CENTER_SCORE
        return score

    def _structure_bonus(self, state):
        return 0

    def to_matrix(self):
        """Plain nested-list copy of the cell states (row 0 is the top)."""
        return [[int(self.get_cell_state(r, c)) for c in range(COLS)] for r in range(ROWS)]

    def __str__(self):
        return format_board(self)


############################################################################
################# Array board ##############################################
############################################################################

class ArrayBoard(Board):
    """Dense 6x7 numpy grid of CellState values."""

    def __init__(self, grid=None, move_count=None, last_player=CellState.EMPTY,
                 last_row=-1, last_column=-1):
        super().__init__(last_player, last_row, last_column)
        if grid is None:
            self.grid = create_board()
        else:
            self.grid = np.array(grid, dtype=np.int8)
            if self.grid.shape != (ROWS, COLS):
                raise ValueError(f"Board must be {ROWS}x{COLS}, got {self.grid.shape}")
        if move_count is None:
            move_count = int(np.count_nonzero(self.grid))
        self.move_count = move_count

    def clone(self):
        return ArrayBoard(self.grid, self.move_count, self.last_player,
                          self.last_row, self.last_column)

    def get_cell_state(self, row, col):
        if not in_bounds(row, col):
            return CellState.EMPTY
        return CellState(int(self.grid[row, col]))

    def get_available_columns(self):
        return [int(c) for c in np.flatnonzero(self.grid[0] == CellState.EMPTY)]

    def is_full(self):
        return self.move_count >= ROWS * COLS

    def apply_move(self, col, state):
        if not 0 <= col < COLS or self.grid[0, col] != CellState.EMPTY:
            return NO_MOVE

        row = get_next_open_row(self.grid, col)
        self.grid[row, col] = state
        self.move_count += 1
        self._record_move(row, col, state)
        return row, col

    def _pattern_score(self, state):
        windows = self.grid[WINDOW_ROWS, WINDOW_COLS]
        starts_occupied = windows[:, 0] != CellState.EMPTY
        mine = np.count_nonzero(windows == state, axis=1)
        theirs = np.count_nonzero(windows == opponent_of(state), axis=1)
        empty = np.count_nonzero(windows == CellState.EMPTY, axis=1)

        scores = np.zeros(len(windows), dtype=np.int64)
        scores += np.select(
            [mine == 4, (mine == 3) & (empty == 1), (mine == 2) & (empty == 2)],
            [FOUR_SCORE, THREE_SCORE, TWO_SCORE],
            default=0,
        )
        scores += np.where((theirs == 3) & (empty == 1), OPPONENT_THREE_SCORE, 0)
        return int(scores[starts_occupied].sum())

    def _center_score(self, state):
        center = self.grid[:, CENTER_COL]
        mine = int(np.count_nonzero(center == state))
        theirs = int(np.count_nonzero(center == opponent_of(state)))
        return CENTER_SCORE * (mine - theirs)

    def _count_in_direction(self, row, col, dr, dc, state):
        grid = self.grid
        count = 0
        r, c = row + dr, col + dc
        while 0 <= r < ROWS and 0 <= c < COLS and grid[r, c] == state:
            count += 1
            r += dr
            c += dc
        return count
