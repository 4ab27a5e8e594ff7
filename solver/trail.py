from rules.rules import EMPTY

from .state import GridState
from .types import Trail, TrailEntry


def undo_entry(state: GridState, entry: TrailEntry) -> None:
    kind = entry[0]
    if kind == "cache":
        _, r, c, forbidden, available = entry
        state.forbidden[r][c] = forbidden
        state.available[r][c] = available
    elif kind == "cell":
        _, r, c, previous = entry
        if state.grid[r][c] != EMPTY and previous == EMPTY:
            state.empty_count += 1
        state.grid[r][c] = previous
    elif kind == "row":
        state.row_taken[entry[1]] = entry[2]
    elif kind == "col":
        state.col_taken[entry[1]] = entry[2]
    elif kind == "box":
        state.box_taken[entry[1]] = entry[2]
    else:
        raise ValueError(f"unknown trail entry kind: {kind!r}")


def undo_to(state: GridState, trail: Trail, mark: int) -> int:
    """Undo trail entries newest first until len(trail) == mark."""
    undone = 0
    while len(trail) > mark:
        undo_entry(state, trail.pop())
        undone += 1
    return undone
