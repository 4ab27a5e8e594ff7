class SudokuError(ValueError):
    """Base class for every error raised by the solver package."""


class InvalidPuzzle(SudokuError):
    """The input grid is malformed or its givens already conflict."""


class Unsolvable(SudokuError):
    """No assignment satisfies the row, column and box constraints."""


class SearchAborted(SudokuError):
    """The search was stopped by a deadline or a stop request."""


class AttemptsExhausted(SearchAborted):
    """The randomized solver used up its restart or refill budget; the puzzle may still be solvable."""
