import time
from typing import Callable, Optional

from rules.rules import DEFAULT_ALGORITHM, DEFAULT_BOX_COLS, DEFAULT_BOX_ROWS, DEFAULT_TRACE_MAX_STEPS

from .errors import Unsolvable
from .search import SearchRecorder, search_first_solution
from .state import build_initial_state
from .stochastic import solve_stochastic
from .types import Grid, SolvedGrid, TraceLog, TraceStep
from .utils import trace as trace_message
from .validation import validate_and_normalize_known_grid, validate_box_dims, validate_givens_unique


def prepare_grid(known_grid: Optional[Grid], box_rows: int, box_cols: int) -> SolvedGrid:
    """Validate dimensions and givens up front; raises InvalidPuzzle."""
    size = validate_box_dims(box_rows, box_cols)
    grid = validate_and_normalize_known_grid(size=size, known_grid=known_grid)
    validate_givens_unique(grid, box_rows, box_cols)
    return grid


def solve_backtracking(
    grid: SolvedGrid,
    box_rows: int,
    box_cols: int,
    trace: bool = False,
    trace_log: Optional[TraceLog] = None,
    trace_steps: Optional[list[TraceStep]] = None,
    trace_meta: Optional[dict[str, bool]] = None,
    trace_max_steps: int = DEFAULT_TRACE_MAX_STEPS,
    max_seconds: Optional[float] = None,
    stop_requested: Optional[Callable[[], bool]] = None,
    **_: object,
) -> SolvedGrid:
    state = build_initial_state(grid, box_rows, box_cols)
    recorder = SearchRecorder(
        state,
        trace_enabled=trace,
        trace_log=trace_log,
        trace_steps=trace_steps,
        trace_meta=trace_meta,
        trace_max_steps=trace_max_steps,
    )
    trace_message(
        trace,
        trace_log,
        f"Initialized search: size={state.size}, box={box_rows}x{box_cols}, empty_cells={state.empty_count}",
    )

    deadline = None if max_seconds is None else time.monotonic() + max_seconds
    if not search_first_solution(state, [], recorder=recorder, deadline=deadline, stop_requested=stop_requested):
        raise Unsolvable("No valid solution for the provided grid")
    return state.snapshot()


def _solve_stochastic(
    grid: SolvedGrid,
    box_rows: int,
    box_cols: int,
    trace: bool = False,
    trace_log: Optional[TraceLog] = None,
    seed: Optional[int] = None,
    **_: object,
) -> SolvedGrid:
    return solve_stochastic(grid, box_rows, box_cols, seed=seed, trace_enabled=trace, trace_log=trace_log)


SOLVERS: dict[str, Callable[..., SolvedGrid]] = {
    "backtracking": solve_backtracking,
    "stochastic": _solve_stochastic,
}


def resolve_solver(algorithm: str) -> Callable[..., SolvedGrid]:
    solver = SOLVERS.get(algorithm)
    if solver is None:
        raise ValueError(f"algorithm must be one of: {', '.join(SOLVERS)}")
    return solver


def solve_sudoku(
    known_grid: Optional[Grid],
    box_rows: int = DEFAULT_BOX_ROWS,
    box_cols: int = DEFAULT_BOX_COLS,
    algorithm: str = DEFAULT_ALGORITHM,
    trace: bool = False,
    trace_log: Optional[TraceLog] = None,
    trace_steps: Optional[list[TraceStep]] = None,
    trace_meta: Optional[dict[str, bool]] = None,
    trace_max_steps: int = DEFAULT_TRACE_MAX_STEPS,
    max_seconds: Optional[float] = None,
    stop_requested: Optional[Callable[[], bool]] = None,
    seed: Optional[int] = None,
) -> SolvedGrid:
    solver = resolve_solver(algorithm)
    if max_seconds is not None and max_seconds < 0:
        raise ValueError("max_seconds must be >= 0")
    if trace_max_steps < 1:
        raise ValueError("trace_max_steps must be >= 1")

    grid = prepare_grid(known_grid, box_rows, box_cols)
    return solver(
        grid,
        box_rows,
        box_cols,
        trace=trace,
        trace_log=trace_log,
        trace_steps=trace_steps,
        trace_meta=trace_meta,
        trace_max_steps=trace_max_steps,
        max_seconds=max_seconds,
        stop_requested=stop_requested,
        seed=seed,
    )
