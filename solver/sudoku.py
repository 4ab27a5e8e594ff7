from typing import Optional

from rules.rules import DEFAULT_ALGORITHM, DEFAULT_BOX_COLS, DEFAULT_BOX_ROWS

from .solver import prepare_grid, solve_sudoku
from .types import Grid, SolvedGrid
from .utils import format_grid_rows
from .validation import is_valid_solution


class Sudoku:
    """An initial grid paired with the solution produced for it.

    solution starts as a copy of init and is only replaced by a complete
    grid after a successful solve.
    """

    def __init__(
        self,
        init: Optional[Grid],
        box_rows: int = DEFAULT_BOX_ROWS,
        box_cols: int = DEFAULT_BOX_COLS,
    ) -> None:
        self.box_rows = box_rows
        self.box_cols = box_cols
        self.init: SolvedGrid = prepare_grid(init, box_rows, box_cols)
        self.solution: SolvedGrid = [row[:] for row in self.init]

    @property
    def size(self) -> int:
        return self.box_rows * self.box_cols

    def solve(self, algorithm: str = DEFAULT_ALGORITHM, **options: object) -> SolvedGrid:
        self.solution = solve_sudoku(self.init, self.box_rows, self.box_cols, algorithm=algorithm, **options)
        return self.solution

    def check(self) -> bool:
        return is_valid_solution(self.solution, self.box_rows, self.box_cols)

    def __str__(self) -> str:
        return "\n".join(format_grid_rows(self.solution))
