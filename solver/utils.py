from typing import Iterator, Optional

from .types import Mask, TraceLog


def box_index(r: int, c: int, box_rows: int, box_cols: int) -> int:
    size = box_rows * box_cols
    return (r // box_rows) * (size // box_cols) + (c // box_cols)


def value_bit(value: int) -> Mask:
    return 1 << (value - 1)


def bit_value(bit: Mask) -> int:
    return bit.bit_length()


def popcount(mask: Mask) -> int:
    return bin(mask).count("1")


def iter_values(mask: Mask) -> Iterator[int]:
    """Yield the values encoded in mask, lowest first."""
    while mask:
        low = mask & -mask
        yield bit_value(low)
        mask ^= low


def trace(enabled: bool, trace_log: Optional[TraceLog], message: str) -> None:
    if not enabled:
        return
    if trace_log is not None:
        trace_log.append(message)
    else:
        print(message)


def indent(depth: int) -> str:
    return "  " * depth


def format_grid_rows(grid: list[list[int]]) -> list[str]:
    return [" ".join(str(value) for value in row) for row in grid]
