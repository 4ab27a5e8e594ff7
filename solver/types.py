from typing import Optional


Grid = list[list[Optional[int]]]
SolvedGrid = list[list[int]]
Cell = tuple[int, int]
Mask = int
TraceLog = list[str]
TraceStep = dict[str, object]
# ("cell", r, c, previous_value) | ("row" | "col" | "box", index, previous_mask)
# | ("cache", r, c, previous_forbidden, previous_available)
TrailEntry = tuple
Trail = list[TrailEntry]
BatchResult = dict[str, object]
