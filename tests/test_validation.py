import unittest

from solver.errors import InvalidPuzzle
from solver.validation import (
    is_valid_solution,
    validate_and_normalize_known_grid,
    validate_box_dims,
    validate_givens_unique,
)


VALID_6X6 = [
    [1, 2, 3, 4, 5, 6],
    [4, 5, 6, 1, 2, 3],
    [2, 3, 4, 5, 6, 1],
    [5, 6, 1, 2, 3, 4],
    [3, 4, 5, 6, 1, 2],
    [6, 1, 2, 3, 4, 5],
]


class TestInputValidation(unittest.TestCase):
    def test_box_dims_return_size(self) -> None:
        self.assertEqual(validate_box_dims(3, 3), 9)
        self.assertEqual(validate_box_dims(2, 3), 6)

    def test_box_dims_must_be_positive_integers(self) -> None:
        with self.assertRaises(InvalidPuzzle):
            validate_box_dims(0, 3)
        with self.assertRaises(InvalidPuzzle):
            validate_box_dims(3, "3")  # type: ignore[arg-type]

    def test_missing_grid_becomes_empty_board(self) -> None:
        self.assertEqual(validate_and_normalize_known_grid(4, None), [[0] * 4 for _ in range(4)])

    def test_none_cells_become_zero(self) -> None:
        grid = [[None, 2], [1, None]]
        self.assertEqual(validate_and_normalize_known_grid(2, grid), [[0, 2], [1, 0]])

    def test_rejects_wrong_row_count_and_length(self) -> None:
        with self.assertRaises(InvalidPuzzle):
            validate_and_normalize_known_grid(4, [[0] * 4 for _ in range(3)])
        with self.assertRaises(InvalidPuzzle):
            validate_and_normalize_known_grid(4, [[0] * 4, [0] * 4, [0] * 3, [0] * 4])

    def test_rejects_non_integer_and_out_of_range_values(self) -> None:
        with self.assertRaises(InvalidPuzzle):
            validate_and_normalize_known_grid(4, [["1", 0, 0, 0], [0] * 4, [0] * 4, [0] * 4])
        with self.assertRaises(InvalidPuzzle):
            validate_and_normalize_known_grid(4, [[True, 0, 0, 0], [0] * 4, [0] * 4, [0] * 4])
        with self.assertRaises(InvalidPuzzle):
            validate_and_normalize_known_grid(4, [[5, 0, 0, 0], [0] * 4, [0] * 4, [0] * 4])
        with self.assertRaises(InvalidPuzzle):
            validate_and_normalize_known_grid(4, [[-1, 0, 0, 0], [0] * 4, [0] * 4, [0] * 4])

    def test_detects_duplicate_givens_per_unit(self) -> None:
        row_dup = [[1, 0, 0, 1], [0] * 4, [0] * 4, [0] * 4]
        col_dup = [[2, 0, 0, 0], [0] * 4, [2, 0, 0, 0], [0] * 4]
        box_dup = [[3, 0, 0, 0], [0, 3, 0, 0], [0] * 4, [0] * 4]
        for grid, unit in ((row_dup, "row"), (col_dup, "column"), (box_dup, "box")):
            with self.assertRaises(InvalidPuzzle) as ctx:
                validate_givens_unique(grid, 2, 2)
            self.assertIn(unit, str(ctx.exception))

    def test_accepts_distinct_givens(self) -> None:
        validate_givens_unique([[1, 0, 0, 0], [0, 0, 3, 0], [0, 4, 0, 0], [0, 0, 0, 2]], 2, 2)


class TestIsValidSolution(unittest.TestCase):
    def test_accepts_valid_6x6_grid(self) -> None:
        self.assertTrue(is_valid_solution(VALID_6X6, 2, 3))

    def test_is_idempotent(self) -> None:
        self.assertEqual(is_valid_solution(VALID_6X6, 2, 3), is_valid_solution(VALID_6X6, 2, 3))
        broken = [row[:] for row in VALID_6X6]
        broken[0][0], broken[0][1] = broken[0][1], broken[0][0]
        self.assertEqual(is_valid_solution(broken, 2, 3), is_valid_solution(broken, 2, 3))

    def test_rejects_box_violation_with_valid_rows_and_columns(self) -> None:
        # a Latin square that breaks the 2x3 boxes
        latin = [[(r + c) % 6 + 1 for c in range(6)] for r in range(6)]
        self.assertFalse(is_valid_solution(latin, 2, 3))

    def test_rejects_swapped_cells(self) -> None:
        broken = [row[:] for row in VALID_6X6]
        broken[0][0], broken[0][1] = broken[0][1], broken[0][0]
        self.assertFalse(is_valid_solution(broken, 2, 3))

    def test_rejects_incomplete_grid(self) -> None:
        grid = [row[:] for row in VALID_6X6]
        grid[3][3] = 0
        self.assertFalse(is_valid_solution(grid, 2, 3))

    def test_rejects_wrong_shape(self) -> None:
        self.assertFalse(is_valid_solution(VALID_6X6, 3, 3))
        self.assertFalse(is_valid_solution(VALID_6X6[:5], 2, 3))
        self.assertFalse(is_valid_solution(None, 2, 3))

    def test_rejects_bool_in_place_of_one(self) -> None:
        grid = [row[:] for row in VALID_6X6]
        grid[0][grid[0].index(1)] = True
        self.assertFalse(is_valid_solution(grid, 2, 3))

    def test_box_layout_matters(self) -> None:
        self.assertFalse(is_valid_solution(VALID_6X6, 3, 2))


if __name__ == "__main__":
    unittest.main()
