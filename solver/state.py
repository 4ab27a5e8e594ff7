from typing import Iterator

from rules.rules import EMPTY

from .errors import Unsolvable
from .types import Cell, Mask, SolvedGrid, Trail
from .utils import bit_value, box_index, popcount, value_bit


class GridState:
    """Cell values, unit masks and per-cell candidate caches for one search.

    forbidden[r][c] and available[r][c] are only meaningful while (r, c) is
    empty. Mutations go through apply_value and ban_value, which log every
    change on the trail.
    """

    def __init__(self, grid: SolvedGrid, box_rows: int, box_cols: int) -> None:
        self.box_rows = box_rows
        self.box_cols = box_cols
        self.size = box_rows * box_cols
        self.full_mask: Mask = (1 << self.size) - 1
        self.grid = [row[:] for row in grid]

        self.row_taken: list[Mask] = [0] * self.size
        self.col_taken: list[Mask] = [0] * self.size
        self.box_taken: list[Mask] = [0] * self.size
        self.box_of = [[box_index(r, c, box_rows, box_cols) for c in range(self.size)] for r in range(self.size)]
        self.peers = [[_peers_of(r, c, box_rows, box_cols) for c in range(self.size)] for r in range(self.size)]

        self.empty_count = 0
        for r in range(self.size):
            for c in range(self.size):
                value = self.grid[r][c]
                if value == EMPTY:
                    self.empty_count += 1
                    continue
                bit = value_bit(value)
                self.row_taken[r] |= bit
                self.col_taken[c] |= bit
                self.box_taken[self.box_of[r][c]] |= bit

        self.forbidden: list[list[Mask]] = [[0] * self.size for _ in range(self.size)]
        self.available: list[list[int]] = [[0] * self.size for _ in range(self.size)]
        for r in range(self.size):
            for c in range(self.size):
                if self.grid[r][c] != EMPTY:
                    continue
                forbidden = self.row_taken[r] | self.col_taken[c] | self.box_taken[self.box_of[r][c]]
                self.forbidden[r][c] = forbidden
                self.available[r][c] = popcount(self.full_mask & ~forbidden)

    def forbidden_candidates(self, r: int, c: int) -> Mask:
        return self.forbidden[r][c]

    def available_count(self, r: int, c: int) -> int:
        return self.available[r][c]

    def candidates(self, r: int, c: int) -> Mask:
        return self.full_mask & ~self.forbidden[r][c]

    def is_empty(self, r: int, c: int) -> bool:
        return self.grid[r][c] == EMPTY

    def is_solved(self) -> bool:
        return self.empty_count == 0

    def empty_cells(self) -> Iterator[Cell]:
        for r in range(self.size):
            for c in range(self.size):
                if self.grid[r][c] == EMPTY:
                    yield r, c

    def snapshot(self) -> SolvedGrid:
        return [row[:] for row in self.grid]


def _peers_of(r: int, c: int, box_rows: int, box_cols: int) -> list[Cell]:
    size = box_rows * box_cols
    peers: set[Cell] = set()
    for i in range(size):
        peers.add((r, i))
        peers.add((i, c))
    top = (r // box_rows) * box_rows
    left = (c // box_cols) * box_cols
    for i in range(top, top + box_rows):
        for j in range(left, left + box_cols):
            peers.add((i, j))
    peers.discard((r, c))
    return sorted(peers)


def build_initial_state(grid: SolvedGrid, box_rows: int, box_cols: int) -> GridState:
    return GridState(grid, box_rows, box_cols)


def apply_value(state: GridState, r: int, c: int, value: int, trail: Trail) -> list[Cell]:
    """Place value at (r, c) and remove it from every empty peer.

    Returns the peers left with exactly one candidate. Raises Unsolvable as
    soon as a peer runs out of candidates; entries already pushed on the
    trail stay valid for undo.
    """
    bit = value_bit(value)
    b = state.box_of[r][c]

    trail.append(("cell", r, c, state.grid[r][c]))
    state.grid[r][c] = value
    state.empty_count -= 1

    trail.append(("row", r, state.row_taken[r]))
    state.row_taken[r] |= bit
    trail.append(("col", c, state.col_taken[c]))
    state.col_taken[c] |= bit
    trail.append(("box", b, state.box_taken[b]))
    state.box_taken[b] |= bit

    singles: list[Cell] = []
    for pr, pc in state.peers[r][c]:
        if state.grid[pr][pc] != EMPTY or state.forbidden[pr][pc] & bit:
            continue
        trail.append(("cache", pr, pc, state.forbidden[pr][pc], state.available[pr][pc]))
        state.forbidden[pr][pc] |= bit
        state.available[pr][pc] -= 1
        remaining = state.available[pr][pc]
        if remaining == 0:
            raise Unsolvable(f"cell ({pr}, {pc}) has no candidates left after placing {value} at ({r}, {c})")
        if remaining == 1:
            singles.append((pr, pc))

    return singles


def ban_value(state: GridState, r: int, c: int, value: int, trail: Trail) -> None:
    bit = value_bit(value)
    if state.forbidden[r][c] & bit:
        return
    trail.append(("cache", r, c, state.forbidden[r][c], state.available[r][c]))
    state.forbidden[r][c] |= bit
    state.available[r][c] -= 1


def single_value(state: GridState, r: int, c: int) -> int:
    return bit_value(state.candidates(r, c))
