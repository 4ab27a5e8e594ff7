EMPTY = 0
MIN_VALUE = 1

DEFAULT_BOX_ROWS = 3
DEFAULT_BOX_COLS = 3

# name -> (box_rows, box_cols)
LAYOUTS: dict[str, tuple[int, int]] = {
    "4x4": (2, 2),
    "6x6": (2, 3),
    "9x9": (3, 3),
    "16x16": (4, 4),
}

DEFAULT_ALGORITHM = "backtracking"

STOCHASTIC_MAX_ATTEMPTS = 10
STOCHASTIC_MAX_RESTARTS = 1000
STOCHASTIC_MAX_REFILLS = 200_000

DEFAULT_TRACE_MAX_STEPS = 1000
