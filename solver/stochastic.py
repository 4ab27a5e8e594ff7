import random
from typing import Optional

from rules.rules import EMPTY, STOCHASTIC_MAX_ATTEMPTS, STOCHASTIC_MAX_REFILLS, STOCHASTIC_MAX_RESTARTS

from .errors import AttemptsExhausted, Unsolvable
from .types import Cell, SolvedGrid, TraceLog
from .utils import trace
from .validation import is_valid_solution


def solve_stochastic(
    grid: SolvedGrid,
    box_rows: int,
    box_cols: int,
    max_attempts: int = STOCHASTIC_MAX_ATTEMPTS,
    max_restarts: int = STOCHASTIC_MAX_RESTARTS,
    max_refills: int = STOCHASTIC_MAX_REFILLS,
    seed: Optional[int] = None,
    trace_enabled: bool = False,
    trace_log: Optional[TraceLog] = None,
) -> SolvedGrid:
    """Fill the grid box by box with random legal values.

    When a cell has no legal value, boxes are cleared walking back from the
    current one until a box with attempts left is found; that box is filled
    again. The whole board restarts once box 0 runs out of attempts. Raises
    AttemptsExhausted after max_restarts restarts or max_refills box refills;
    this never proves the puzzle unsolvable. Givens are never touched.
    Solutions found this way need not match the ones the backtracking engine
    returns.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")
    if max_restarts < 0:
        raise ValueError("max_restarts must be >= 0")
    if max_refills < 1:
        raise ValueError("max_refills must be >= 1")

    size = box_rows * box_cols
    rng = random.Random(seed)
    solution = [row[:] for row in grid]
    box_cells = [_cells_of_box(b, box_rows, box_cols) for b in range(size)]
    attempts = [0] * size
    restarts = 0
    refills = 0
    current = 0

    while current < size:
        if _fill_box(solution, box_cells[current], box_rows, box_cols, rng):
            current += 1
            continue

        refills += 1
        if refills > max_refills:
            raise AttemptsExhausted(f"randomized solver gave up after {max_refills} box refills")

        for t in range(current, -1, -1):
            _reset_box(solution, grid, box_cells[t])
            if attempts[t] < max_attempts:
                break
        attempts[t] += 1
        for later in range(t + 1, size):
            attempts[later] = 0
        current = t

        if t == 0 and attempts[0] >= max_attempts:
            restarts += 1
            if restarts > max_restarts:
                raise AttemptsExhausted(f"randomized solver gave up after {max_restarts} restarts")
            trace(trace_enabled, trace_log, f"Restart {restarts}: box 0 ran out of attempts")
            for box in box_cells:
                _reset_box(solution, grid, box)
            attempts = [0] * size
        else:
            trace(trace_enabled, trace_log, f"Refill box {t} (attempt {attempts[t]})")

    if not is_valid_solution(solution, box_rows, box_cols):
        raise Unsolvable("randomized fill produced an invalid grid")
    return solution


def _cells_of_box(b: int, box_rows: int, box_cols: int) -> list[Cell]:
    top = (b // box_rows) * box_rows
    left = (b % box_rows) * box_cols
    return [(r, c) for r in range(top, top + box_rows) for c in range(left, left + box_cols)]


def _reset_box(solution: SolvedGrid, grid: SolvedGrid, cells: list[Cell]) -> None:
    for r, c in cells:
        if grid[r][c] == EMPTY:
            solution[r][c] = EMPTY


def _fill_box(
    solution: SolvedGrid,
    cells: list[Cell],
    box_rows: int,
    box_cols: int,
    rng: random.Random,
) -> bool:
    size = box_rows * box_cols
    box_values = {solution[r][c] for r, c in cells}
    for r, c in cells:
        if solution[r][c] != EMPTY:
            continue
        taken = set(solution[r]) | {solution[i][c] for i in range(size)} | box_values
        candidates = [value for value in range(1, size + 1) if value not in taken]
        if not candidates:
            return False
        value = rng.choice(candidates)
        solution[r][c] = value
        box_values.add(value)
    return True
