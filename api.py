from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from rules.rules import DEFAULT_ALGORITHM, DEFAULT_BOX_COLS, DEFAULT_BOX_ROWS, DEFAULT_TRACE_MAX_STEPS
from solver.batch import solve_many
from solver.errors import InvalidPuzzle, SearchAborted, Unsolvable
from solver.solver import solve_sudoku
from solver.utils import format_grid_rows
from solver.validation import is_valid_solution


class SolveRequest(BaseModel):
    grid: list[list[Optional[int]]] = Field(
        ...,
        description="Square grid with integers 1..N for givens and 0 or null for empty cells",
    )
    box_rows: int = Field(default=DEFAULT_BOX_ROWS, ge=1, description="Number of rows in each box")
    box_cols: int = Field(default=DEFAULT_BOX_COLS, ge=1, description="Number of columns in each box")
    algorithm: str = Field(default=DEFAULT_ALGORITHM, description="Solver: backtracking or stochastic.")
    seed: Optional[int] = Field(default=None, description="Random seed for the stochastic solver")
    max_seconds: Optional[float] = Field(
        default=None,
        ge=0.0,
        description="Time budget for the backtracking search. Use null to run to completion.",
    )
    trace: bool = Field(default=False, description="Include solver trace output in the response")
    trace_steps: bool = Field(default=False, description="Include structured trace steps for walkthrough/debugging.")
    trace_max_steps: int = Field(
        default=DEFAULT_TRACE_MAX_STEPS,
        ge=1,
        le=20000,
        description="Maximum number of trace steps to return.",
    )


class TraceStepResponse(BaseModel):
    event: str
    message: str
    depth: int
    row: Optional[int] = None
    col: Optional[int] = None
    value: Optional[int] = None
    candidates: Optional[list[int]] = None
    grid: list[list[int]]


class SolveResponse(BaseModel):
    solution: list[list[int]]
    grid_rows: list[str]
    grid_text: str
    trace: Optional[list[str]] = None
    trace_steps: Optional[list[TraceStepResponse]] = None
    trace_truncated: bool = False


class CheckRequest(BaseModel):
    grid: list[list[Optional[int]]]
    box_rows: int = Field(default=DEFAULT_BOX_ROWS, ge=1)
    box_cols: int = Field(default=DEFAULT_BOX_COLS, ge=1)


class CheckResponse(BaseModel):
    valid: bool


class BatchSolveRequest(BaseModel):
    grids: list[list[list[Optional[int]]]] = Field(..., description="Independent puzzles sharing one box layout")
    box_rows: int = Field(default=DEFAULT_BOX_ROWS, ge=1)
    box_cols: int = Field(default=DEFAULT_BOX_COLS, ge=1)
    algorithm: str = Field(default=DEFAULT_ALGORITHM)
    max_seconds: Optional[float] = Field(default=None, ge=0.0, description="Time budget per puzzle")
    use_multiprocessing: bool = Field(default=False, description="Solve puzzles in a process pool.")
    workers: Optional[int] = Field(default=None, ge=1, description="Number of worker processes.")


class BatchSolveItem(BaseModel):
    index: int
    solution: Optional[list[list[int]]] = None
    error: Optional[str] = None


class BatchSolveResponse(BaseModel):
    results: list[BatchSolveItem]
    solved: int
    failed: int


app = FastAPI(
    title="Sudoku Solver API",
    description="Solve N x N Sudoku grids with BR x BC boxes using constraint propagation and backtracking.",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://127.0.0.1:5173", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/solve", response_model=SolveResponse)
def solve(request: SolveRequest) -> SolveResponse:
    trace_log: list[str] = []
    trace_steps: list[dict[str, object]] = []
    trace_meta = {"truncated": False}
    try:
        solution = solve_sudoku(
            request.grid,
            box_rows=request.box_rows,
            box_cols=request.box_cols,
            algorithm=request.algorithm,
            seed=request.seed,
            max_seconds=request.max_seconds,
            trace=request.trace,
            trace_log=trace_log,
            trace_steps=trace_steps if request.trace_steps else None,
            trace_meta=trace_meta,
            trace_max_steps=request.trace_max_steps,
        )
    except InvalidPuzzle as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Unsolvable as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except SearchAborted as exc:
        raise HTTPException(status_code=408, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    grid_rows = format_grid_rows(solution)
    return SolveResponse(
        solution=solution,
        grid_rows=grid_rows,
        grid_text="\n".join(grid_rows),
        trace=trace_log if request.trace else None,
        trace_steps=trace_steps if request.trace_steps else None,
        trace_truncated=trace_meta["truncated"],
    )


@app.post("/check", response_model=CheckResponse)
def check(request: CheckRequest) -> CheckResponse:
    return CheckResponse(valid=is_valid_solution(request.grid, request.box_rows, request.box_cols))


@app.post("/solve/batch", response_model=BatchSolveResponse)
def solve_batch(request: BatchSolveRequest) -> BatchSolveResponse:
    try:
        results = solve_many(
            request.grids,
            box_rows=request.box_rows,
            box_cols=request.box_cols,
            algorithm=request.algorithm,
            use_multiprocessing=request.use_multiprocessing,
            workers=request.workers,
            max_seconds=request.max_seconds,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    items = [BatchSolveItem(**result) for result in results]
    solved = sum(1 for item in items if item.solution is not None)
    return BatchSolveResponse(results=items, solved=solved, failed=len(items) - solved)
