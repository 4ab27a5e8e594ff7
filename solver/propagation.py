from collections import deque

from .errors import Unsolvable
from .state import GridState, apply_value, single_value
from .types import Trail


def propagate(state: GridState, trail: Trail) -> int:
    """Assign every naked single until none is left.

    Returns the number of forced assignments. Raises Unsolvable when an
    empty cell has no candidates, either up front or after an assignment.
    """
    worklist: deque[tuple[int, int]] = deque()
    for r, c in state.empty_cells():
        count = state.available[r][c]
        if count == 0:
            raise Unsolvable(f"cell ({r}, {c}) has no candidates")
        if count == 1:
            worklist.append((r, c))

    forced = 0
    while worklist:
        r, c = worklist.popleft()
        # the cell may have been filled or emptied of candidates since it was queued
        if not state.is_empty(r, c):
            continue
        count = state.available[r][c]
        if count == 0:
            raise Unsolvable(f"cell ({r}, {c}) has no candidates")
        if count != 1:
            continue

        worklist.extend(apply_value(state, r, c, single_value(state, r, c), trail))
        forced += 1

    return forced
