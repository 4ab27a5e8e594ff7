import argparse
import json
from pathlib import Path
from typing import Any, Optional

from rules.rules import DEFAULT_ALGORITHM, DEFAULT_BOX_COLS, DEFAULT_BOX_ROWS, LAYOUTS
from solver.solver import SOLVERS, solve_sudoku
from solver.types import Grid, SolvedGrid
from solver.validation import is_valid_solution


PuzzleFile = tuple[Grid, int, int, str, Optional[int]]


def run(
    grid: Optional[Grid],
    box_rows: int = DEFAULT_BOX_ROWS,
    box_cols: int = DEFAULT_BOX_COLS,
    algorithm: str = DEFAULT_ALGORITHM,
    seed: Optional[int] = None,
) -> SolvedGrid:
    return solve_sudoku(grid, box_rows=box_rows, box_cols=box_cols, algorithm=algorithm, seed=seed)


def run_with_trace(
    grid: Optional[Grid],
    box_rows: int = DEFAULT_BOX_ROWS,
    box_cols: int = DEFAULT_BOX_COLS,
    algorithm: str = DEFAULT_ALGORITHM,
    seed: Optional[int] = None,
) -> tuple[SolvedGrid, list[str]]:
    trace_log: list[str] = []
    result = solve_sudoku(
        grid,
        box_rows=box_rows,
        box_cols=box_cols,
        algorithm=algorithm,
        seed=seed,
        trace=True,
        trace_log=trace_log,
    )
    return result, trace_log


def load_puzzle_from_file(input_path: str) -> PuzzleFile:
    path = Path(input_path)
    try:
        payload: Any = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ValueError(f"input file not found: {input_path}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"input file is not valid JSON: {input_path}") from exc

    if not isinstance(payload, dict):
        raise ValueError("JSON root must be an object")

    grid = payload.get("grid")
    if grid is None:
        raise ValueError("JSON must include 'grid'")

    layout = payload.get("layout")
    if layout is not None:
        if layout not in LAYOUTS:
            raise ValueError(f"layout must be one of: {', '.join(LAYOUTS)}")
        default_rows, default_cols = LAYOUTS[layout]
    else:
        default_rows, default_cols = DEFAULT_BOX_ROWS, DEFAULT_BOX_COLS

    box_rows = payload.get("box_rows", default_rows)
    box_cols = payload.get("box_cols", default_cols)
    algorithm = payload.get("algorithm", DEFAULT_ALGORITHM)
    seed = payload.get("seed")
    return grid, box_rows, box_cols, algorithm, seed


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Solve a generalized Sudoku grid from a JSON input file")
    parser.add_argument("--input", required=True, help="Path to a JSON file with grid and optional box_rows, box_cols, layout")
    parser.add_argument("--algorithm", choices=sorted(SOLVERS), help="Override the algorithm named in the input file")
    parser.add_argument("--trace", action="store_true", help="Include solver trace output")
    return parser


if __name__ == "__main__":
    args = _build_parser().parse_args()

    try:
        grid, box_rows, box_cols, algorithm, seed = load_puzzle_from_file(args.input)
        algorithm = args.algorithm or algorithm
        if args.trace:
            solution, trace_log = run_with_trace(grid, box_rows, box_cols, algorithm=algorithm, seed=seed)
            output: dict[str, object] = {"solution": solution, "trace": trace_log}
        else:
            solution = run(grid, box_rows, box_cols, algorithm=algorithm, seed=seed)
            output = {"solution": solution}
        output["valid"] = is_valid_solution(solution, box_rows, box_cols)
        print(json.dumps(output, indent=2))
    except ValueError as exc:
        raise SystemExit(f"Error: {exc}")
