from dataclasses import dataclass

from .board import (
    Board, CellState, NO_MOVE, ROWS, COLS, DIRECTIONS, CONNECT,
    in_bounds, opponent_of, score_window,
)

# Bonus per stone of the largest same-state connected group
COMPONENT_SCORE = 5

# Offsets of the 8 neighbors of a cell (orthogonal + diagonal)
NEIGHBOR_OFFSETS = ((0, 1), (1, 1), (-1, 1), (1, 0), (-1, 0), (0, -1), (1, -1), (-1, -1))


def node_index(row, col):
    return row * COLS + col


def _build_neighbor_table():
    """Arena indices of each cell's in-bounds neighbors. Depends on coordinates only."""
    table = []
    for r in range(ROWS):
        for c in range(COLS):
            table.append(tuple(
                node_index(r + dr, c + dc)
                for dr, dc in NEIGHBOR_OFFSETS
                if in_bounds(r + dr, c + dc)
            ))
    return tuple(table)


NEIGHBORS = _build_neighbor_table()


@dataclass(slots=True)
class Node:
    """One cell of the graph board."""
    row: int
    col: int
    state: CellState = CellState.EMPTY

    @property
    def index(self):
        return node_index(self.row, self.col)


class GraphBoard(Board):
    """
    Board stored as an arena of Node records addressed by row * COLS + col.

    Edges are not stored on the nodes. Adjacency comes from the shared
    NEIGHBORS table, so a clone only has to copy node states.
    """
    supports_nodes = True

    def __init__(self, grid=None, last_player=CellState.EMPTY, last_row=-1, last_column=-1):
        super().__init__(last_player, last_row, last_column)
        self.nodes = [Node(r, c) for r in range(ROWS) for c in range(COLS)]
        if grid is not None:
            if len(grid) != ROWS or any(len(row) != COLS for row in grid):
                raise ValueError(f"Board must be {ROWS}x{COLS}")
            for r in range(ROWS):
                for c in range(COLS):
                    self.nodes[node_index(r, c)].state = CellState(int(grid[r][c]))

    def clone(self):
        board = GraphBoard(last_player=self.last_player,
                           last_row=self.last_row, last_column=self.last_column)
        board.nodes = [Node(n.row, n.col, n.state) for n in self.nodes]
        return board

    def get_node(self, row, col):
        if not in_bounds(row, col):
            raise IndexError(f"No node at ({row}, {col})")
        return self.nodes[node_index(row, col)]

    def get_all_nodes(self):
        return list(self.nodes)

    def neighbors(self, node):
        """The up-to-8 nodes adjacent to `node`."""
        return [self.nodes[i] for i in NEIGHBORS[node.index]]

    def get_cell_state(self, row, col):
        if not in_bounds(row, col):
            return CellState.EMPTY
        return self.nodes[node_index(row, col)].state

    def is_full(self):
        for col in range(COLS):
            if self.nodes[col].state == CellState.EMPTY:
                return False
        return True

    def apply_move(self, col, state):
        if not 0 <= col < COLS:
            return NO_MOVE

        for row in range(ROWS - 1, -1, -1):
            node = self.nodes[node_index(row, col)]
            if node.state == CellState.EMPTY:
                node.state = CellState(state)
                self._record_move(row, col, state)
                return row, col

        return NO_MOVE  # Column full

    def _window(self, row, col, dr, dc):
        """The 4 nodes starting at (row, col) along (dr, dc), or None if it leaves the board."""
        end_r, end_c = row + dr * (CONNECT - 1), col + dc * (CONNECT - 1)
        if not in_bounds(end_r, end_c):
            return None
        return [self.nodes[node_index(row + dr * i, col + dc * i)] for i in range(CONNECT)]

    def _pattern_score(self, state):
        opponent = opponent_of(state)
        score = 0
        for node in self.nodes:
            if node.state == CellState.EMPTY:
                continue
            for dr, dc in DIRECTIONS:
                window = self._window(node.row, node.col, dr, dc)
                if window is None:
                    continue
                states = [n.state for n in window]
                score += score_window(states.count(state), states.count(opponent),
                                      states.count(CellState.EMPTY))
        return score

    def _structure_bonus(self, state):
        components = self.get_connected_components(state)
        max_chain = max((len(group) for group in components), default=0)
        return max_chain * COMPONENT_SCORE

    def get_connected_components(self, state):
        """Groups of same-state nodes reachable through neighbor edges (depth-first)."""
        components = []
        visited = set()

        for start in self.nodes:
            if start.state != state or start.index in visited:
                continue
            component = []
            stack = [start]
            visited.add(start.index)
            while stack:
                node = stack.pop()
                component.append(node)
                for neighbor in self.neighbors(node):
                    if neighbor.state == state and neighbor.index not in visited:
                        visited.add(neighbor.index)
                        stack.append(neighbor)
            components.append(component)

        return components
