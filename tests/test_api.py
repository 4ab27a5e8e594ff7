import unittest
from unittest import mock

from solver.errors import AttemptsExhausted

try:
    from api import app
except ModuleNotFoundError:
    app = None

try:
    from fastapi.testclient import TestClient
except (ImportError, RuntimeError):
    TestClient = None


PUZZLE = [
    [9, 0, 6, 3, 4, 0, 8, 1, 0],
    [0, 5, 1, 7, 0, 0, 3, 0, 0],
    [4, 7, 0, 0, 9, 1, 0, 0, 5],
    [0, 0, 0, 9, 0, 3, 0, 0, 2],
    [0, 0, 2, 0, 8, 7, 0, 0, 0],
    [1, 0, 7, 2, 0, 0, 6, 0, 0],
    [0, 8, 5, 0, 0, 9, 1, 0, 0],
    [0, 3, 4, 0, 6, 0, 0, 0, 9],
    [0, 1, 0, 5, 0, 8, 7, 0, 6],
]

SOLUTION = [
    [9, 2, 6, 3, 4, 5, 8, 1, 7],
    [8, 5, 1, 7, 2, 6, 3, 9, 4],
    [4, 7, 3, 8, 9, 1, 2, 6, 5],
    [5, 6, 8, 9, 1, 3, 4, 7, 2],
    [3, 4, 2, 6, 8, 7, 9, 5, 1],
    [1, 9, 7, 2, 5, 4, 6, 3, 8],
    [6, 8, 5, 4, 7, 9, 1, 2, 3],
    [7, 3, 4, 1, 6, 2, 5, 8, 9],
    [2, 1, 9, 5, 3, 8, 7, 4, 6],
]


@unittest.skipIf(app is None or TestClient is None, "fastapi stack is not available in this environment")
class TestApiIntegration(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(app)

    def test_health_endpoint(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_solve_endpoint_returns_solution_and_grid_format(self) -> None:
        response = self.client.post("/solve", json={"grid": PUZZLE})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["solution"], SOLUTION)
        self.assertEqual(len(body["grid_rows"]), 9)
        self.assertEqual(body["grid_rows"][0], "9 2 6 3 4 5 8 1 7")
        self.assertEqual(body["grid_text"].splitlines(), body["grid_rows"])
        self.assertIsNone(body["trace"])

    def test_solve_endpoint_accepts_null_cells_and_6x6_layout(self) -> None:
        grid = [[None] * 6 for _ in range(6)]
        grid[0][0] = 1
        response = self.client.post("/solve", json={"grid": grid, "box_rows": 2, "box_cols": 3})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["solution"][0][0], 1)

    def test_solve_endpoint_with_trace_includes_trace(self) -> None:
        response = self.client.post("/solve", json={"grid": [[0] * 9 for _ in range(9)], "trace": True})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(len(body["trace"]) > 0)
        self.assertTrue(any("Select cell" in line for line in body["trace"]))

    def test_solve_endpoint_with_trace_steps_includes_walkthrough_frames(self) -> None:
        response = self.client.post(
            "/solve",
            json={"grid": [[0] * 9 for _ in range(9)], "trace_steps": True, "trace_max_steps": 5},
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(len(body["trace_steps"]), 5)
        self.assertTrue(body["trace_truncated"])
        first_step = body["trace_steps"][0]
        self.assertIn("event", first_step)
        self.assertIn("message", first_step)
        self.assertEqual(len(first_step["grid"]), 9)

    def test_solve_endpoint_supports_stochastic_algorithm(self) -> None:
        response = self.client.post(
            "/solve",
            json={"grid": [[0] * 4 for _ in range(4)], "box_rows": 2, "box_cols": 2, "algorithm": "stochastic", "seed": 3},
        )
        self.assertEqual(response.status_code, 200)

    def test_solve_endpoint_returns_400_on_invalid_puzzle(self) -> None:
        grid = [[0] * 9 for _ in range(9)]
        grid[0][0] = grid[0][1] = 5
        response = self.client.post("/solve", json={"grid": grid})

        self.assertEqual(response.status_code, 400)
        self.assertIn("duplicate", response.json()["detail"])

    def test_solve_endpoint_returns_400_on_unknown_algorithm(self) -> None:
        response = self.client.post("/solve", json={"grid": PUZZLE, "algorithm": "unknown"})
        self.assertEqual(response.status_code, 400)

    def test_solve_endpoint_returns_422_when_unsolvable(self) -> None:
        grid = [[0] * 9 for _ in range(9)]
        grid[0] = [1, 2, 3, 4, 5, 6, 7, 8, 0]
        grid[1][8] = 9
        response = self.client.post("/solve", json={"grid": grid})

        self.assertEqual(response.status_code, 422)
        self.assertIn("detail", response.json())

    def test_solve_endpoint_returns_408_when_budget_is_exhausted(self) -> None:
        response = self.client.post("/solve", json={"grid": [[0] * 9 for _ in range(9)], "max_seconds": 0.0})
        self.assertEqual(response.status_code, 408)

    def test_solve_endpoint_reports_randomized_give_up_as_408_not_422(self) -> None:
        with mock.patch("api.solve_sudoku", side_effect=AttemptsExhausted("randomized solver gave up after 3 restarts")):
            response = self.client.post("/solve", json={"grid": PUZZLE, "algorithm": "stochastic"})

        self.assertEqual(response.status_code, 408)
        self.assertIn("gave up", response.json()["detail"])

    def test_check_endpoint(self) -> None:
        response = self.client.post("/check", json={"grid": SOLUTION})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"valid": True})

        response = self.client.post("/check", json={"grid": PUZZLE})
        self.assertEqual(response.json(), {"valid": False})

    def test_batch_endpoint_reports_each_puzzle(self) -> None:
        duplicate = [[5, 5] + [0] * 7] + [[0] * 9 for _ in range(8)]
        response = self.client.post("/solve/batch", json={"grids": [PUZZLE, duplicate]})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["solved"], 1)
        self.assertEqual(body["failed"], 1)
        self.assertEqual(body["results"][0]["solution"], SOLUTION)
        self.assertIsNotNone(body["results"][1]["error"])


if __name__ == "__main__":
    unittest.main()
