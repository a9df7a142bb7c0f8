from connect4_engine.board import ROWS, COLS

# Shorthands for building grids by hand
E, P, O = 0, 1, 2


def empty_grid():
    return [[E] * COLS for _ in range(ROWS)]


def draw_grid():
    """
    A full board with no 4-in-a-row anywhere.

    Columns come in pairs (X X O O X X O) and every row flips the pattern,
    so no line of any direction holds more than 2 equal stones in a row.
    """
    grid = empty_grid()
    for r in range(ROWS):
        for c in range(COLS):
            first = P if c % 4 in (0, 1) else O
            grid[r][c] = first if r % 2 == 0 else (O if first == P else P)
    return grid


def clear_columns(grid, columns):
    """Empties the given columns of a grid (a cleared column never creates a line)."""
    for r in range(ROWS):
        for c in columns:
            grid[r][c] = E
    return grid


def swap_colors(grid):
    swapped = {E: E, P: O, O: P}
    return [[swapped[v] for v in row] for row in grid]
