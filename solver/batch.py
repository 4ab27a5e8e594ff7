import os
from concurrent.futures import ProcessPoolExecutor
from typing import Optional

from rules.rules import DEFAULT_ALGORITHM, DEFAULT_BOX_COLS, DEFAULT_BOX_ROWS

from .errors import SudokuError
from .solver import resolve_solver, solve_sudoku
from .types import BatchResult, Grid


def solve_many(
    puzzles: list[Optional[Grid]],
    box_rows: int = DEFAULT_BOX_ROWS,
    box_cols: int = DEFAULT_BOX_COLS,
    algorithm: str = DEFAULT_ALGORITHM,
    use_multiprocessing: bool = False,
    workers: Optional[int] = None,
    max_seconds: Optional[float] = None,
) -> list[BatchResult]:
    """Solve independent puzzles, one engine each, keeping input order.

    Every result carries either a "solution" or an "error" message.
    """
    resolve_solver(algorithm)
    if workers is not None and workers < 1:
        raise ValueError("workers must be >= 1")
    if max_seconds is not None and max_seconds < 0:
        raise ValueError("max_seconds must be >= 0")

    args = [(index, puzzle, box_rows, box_cols, algorithm, max_seconds) for index, puzzle in enumerate(puzzles)]
    if not use_multiprocessing or len(puzzles) < 2:
        return [_solve_one_worker(*item) for item in args]

    worker_count = workers or max(1, (os.cpu_count() or 1) - 1)
    try:
        executor = ProcessPoolExecutor(max_workers=worker_count)
    except (PermissionError, OSError):
        return [_solve_one_worker(*item) for item in args]

    with executor:
        results = list(executor.map(_solve_one_worker, *zip(*args)))
    return sorted(results, key=lambda result: result["index"])


def _solve_one_worker(
    index: int,
    puzzle: Optional[Grid],
    box_rows: int,
    box_cols: int,
    algorithm: str,
    max_seconds: Optional[float],
) -> BatchResult:
    try:
        solution = solve_sudoku(puzzle, box_rows, box_cols, algorithm=algorithm, max_seconds=max_seconds)
    except SudokuError as exc:
        return {"index": index, "solution": None, "error": f"{type(exc).__name__}: {exc}"}
    return {"index": index, "solution": solution, "error": None}
