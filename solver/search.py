import time
from dataclasses import dataclass
from typing import Callable, Optional

from .constraints import least_constraining_value, select_next_cell
from .errors import SearchAborted, Unsolvable
from .propagation import propagate
from .state import GridState, apply_value, ban_value
from .trail import undo_to
from .types import Mask, Trail, TraceLog, TraceStep
from .utils import indent, iter_values, trace, value_bit


@dataclass(frozen=True)
class ChoicePoint:
    row: int
    col: int
    value: int
    remaining: Mask
    mark: int


class SearchRecorder:
    """Collects trace lines and bounded structured steps for one search."""

    def __init__(
        self,
        state: GridState,
        trace_enabled: bool = False,
        trace_log: Optional[TraceLog] = None,
        trace_steps: Optional[list[TraceStep]] = None,
        trace_meta: Optional[dict[str, bool]] = None,
        trace_max_steps: int = 1000,
    ) -> None:
        self.state = state
        self.trace_enabled = trace_enabled
        self.trace_log = trace_log
        self.trace_steps = trace_steps
        self.trace_meta = trace_meta
        self.trace_max_steps = trace_max_steps

    def record(
        self,
        event: str,
        message: str,
        depth: int,
        row: Optional[int] = None,
        col: Optional[int] = None,
        value: Optional[int] = None,
        candidates: Optional[list[int]] = None,
    ) -> None:
        message = f"{indent(depth)}{message}"
        trace(self.trace_enabled, self.trace_log, message)
        if self.trace_steps is None:
            return
        if len(self.trace_steps) >= self.trace_max_steps:
            if self.trace_meta is not None:
                self.trace_meta["truncated"] = True
            return
        self.trace_steps.append(
            {
                "event": event,
                "message": message,
                "depth": depth,
                "row": row,
                "col": col,
                "value": value,
                "candidates": candidates,
                "grid": self.state.snapshot(),
            }
        )


def search_first_solution(
    state: GridState,
    trail: Trail,
    recorder: Optional[SearchRecorder] = None,
    deadline: Optional[float] = None,
    stop_requested: Optional[Callable[[], bool]] = None,
) -> bool:
    """Run propagation and choice-point search until solved or exhausted.

    Returns True with state holding a complete grid, False once every choice
    point is exhausted. Raises SearchAborted when the deadline passes or
    stop_requested returns True; both are checked once per iteration, after
    propagation, so a grid that propagation completes is never aborted.
    """
    if recorder is None:
        recorder = SearchRecorder(state)
    choice_points: list[ChoicePoint] = []

    while True:
        depth = len(choice_points)
        conflict = False
        try:
            forced = propagate(state, trail)
        except Unsolvable as exc:
            recorder.record("conflict", f"Conflict during propagation: {exc}", depth)
            conflict = True
        else:
            if forced:
                recorder.record("propagate", f"Propagated {forced} naked singles", depth)
            if state.is_solved():
                recorder.record("solved", "All cells assigned", depth)
                return True

        if stop_requested is not None and stop_requested():
            raise SearchAborted("search stopped on request")
        if deadline is not None and time.monotonic() >= deadline:
            raise SearchAborted("search exceeded its time budget")

        if not conflict:
            r, c, mask = select_next_cell(state)
            if not mask:
                recorder.record("conflict", f"Cell ({r}, {c}) has no candidates", depth, row=r, col=c)
                conflict = True
            else:
                recorder.record(
                    "select_cell",
                    f"Select cell ({r}, {c}) with {state.available[r][c]} candidates",
                    depth,
                    row=r,
                    col=c,
                    candidates=list(iter_values(mask)),
                )
                conflict = not _branch(state, trail, choice_points, r, c, mask, recorder)

        if conflict and not backtrack(state, trail, choice_points, recorder):
            recorder.record("exhausted", "No choice points left", 0)
            return False


def _branch(
    state: GridState,
    trail: Trail,
    choice_points: list[ChoicePoint],
    r: int,
    c: int,
    mask: Mask,
    recorder: SearchRecorder,
) -> bool:
    value = least_constraining_value(state, r, c, mask)
    choice_points.append(ChoicePoint(r, c, value, mask & ~value_bit(value), len(trail)))
    recorder.record("try_value", f"Try value {value} at ({r}, {c})", len(choice_points) - 1, row=r, col=c, value=value)
    try:
        apply_value(state, r, c, value, trail)
    except Unsolvable as exc:
        recorder.record("conflict", f"Conflict after placing {value} at ({r}, {c}): {exc}", len(choice_points) - 1)
        return False
    return True


def backtrack(
    state: GridState,
    trail: Trail,
    choice_points: list[ChoicePoint],
    recorder: Optional[SearchRecorder] = None,
) -> bool:
    """Unwind to the newest choice point with an untried value and try it.

    The failed value is banned at its cell with a trail entry below the new
    mark, so the ban lasts until an older choice point is unwound. Returns
    False when no choice point is left.
    """
    if recorder is None:
        recorder = SearchRecorder(state)

    while choice_points:
        point = choice_points.pop()
        undo_to(state, trail, point.mark)
        depth = len(choice_points)
        recorder.record(
            "backtrack",
            f"Backtrack on ({point.row}, {point.col}) value {point.value}",
            depth,
            row=point.row,
            col=point.col,
            value=point.value,
        )
        if not point.remaining:
            continue

        ban_value(state, point.row, point.col, point.value, trail)
        if _branch(state, trail, choice_points, point.row, point.col, point.remaining, recorder):
            return True

    return False
