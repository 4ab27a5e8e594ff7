from typing import Optional

from rules.rules import EMPTY, MIN_VALUE

from .errors import InvalidPuzzle
from .types import Grid, SolvedGrid
from .utils import box_index


def validate_box_dims(box_rows: int, box_cols: int) -> int:
    if not isinstance(box_rows, int) or not isinstance(box_cols, int):
        raise InvalidPuzzle("box_rows and box_cols must be integers")
    if box_rows < 1 or box_cols < 1:
        raise InvalidPuzzle("box_rows and box_cols must be at least 1")
    return box_rows * box_cols


def validate_and_normalize_known_grid(size: int, known_grid: Optional[Grid]) -> SolvedGrid:
    """Return a copy of known_grid with empty cells as EMPTY, or raise InvalidPuzzle."""
    if known_grid is None:
        return [[EMPTY for _ in range(size)] for _ in range(size)]

    if not isinstance(known_grid, list) or len(known_grid) != size:
        raise InvalidPuzzle(f"grid must be a list of {size} rows")

    normalized_grid: SolvedGrid = []
    for row in known_grid:
        if not isinstance(row, list) or len(row) != size:
            raise InvalidPuzzle(f"every grid row must contain {size} cells")

        normalized_row = []
        for value in row:
            if value is None:
                normalized_row.append(EMPTY)
                continue
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidPuzzle("grid entries must be integers or None")
            if value != EMPTY and not MIN_VALUE <= value <= size:
                raise InvalidPuzzle(f"grid values must be between {MIN_VALUE} and {size}, or {EMPTY} for empty")
            normalized_row.append(value)

        normalized_grid.append(normalized_row)

    return normalized_grid


def validate_givens_unique(grid: SolvedGrid, box_rows: int, box_cols: int) -> None:
    size = box_rows * box_cols
    seen_rows: list[set[int]] = [set() for _ in range(size)]
    seen_cols: list[set[int]] = [set() for _ in range(size)]
    seen_boxes: list[set[int]] = [set() for _ in range(size)]

    for r in range(size):
        for c in range(size):
            value = grid[r][c]
            if value == EMPTY:
                continue
            b = box_index(r, c, box_rows, box_cols)
            if value in seen_rows[r]:
                raise InvalidPuzzle(f"duplicate value {value} in row {r}")
            if value in seen_cols[c]:
                raise InvalidPuzzle(f"duplicate value {value} in column {c}")
            if value in seen_boxes[b]:
                raise InvalidPuzzle(f"duplicate value {value} in box {b}")
            seen_rows[r].add(value)
            seen_cols[c].add(value)
            seen_boxes[b].add(value)


def is_valid_solution(grid: object, box_rows: int, box_cols: int) -> bool:
    """Check that every row, column and box of grid is a permutation of 1..N.

    Pure function: it trusts nothing about how the grid was produced.
    """
    size = box_rows * box_cols
    if size < 1 or not isinstance(grid, list) or len(grid) != size:
        return False
    for row in grid:
        if not isinstance(row, list) or len(row) != size:
            return False
        if any(isinstance(value, bool) for value in row):
            return False

    expected = set(range(MIN_VALUE, size + 1))
    units: list[list[object]] = []
    units.extend(list(row) for row in grid)
    units.extend([grid[r][c] for r in range(size)] for c in range(size))
    for b in range(size):
        top = (b // box_rows) * box_rows
        left = (b % box_rows) * box_cols
        units.append([grid[r][c] for r in range(top, top + box_rows) for c in range(left, left + box_cols)])

    return all(len(unit) == size and set(unit) == expected for unit in units)
