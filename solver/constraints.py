from rules.rules import EMPTY

from .state import GridState
from .types import Mask
from .utils import iter_values, value_bit


def select_next_cell(state: GridState) -> tuple[int, int, Mask] | None:
    """Pick the empty cell with the fewest candidates (MRV).

    Ties go to the cell with more empty peers, then to the one whose peers
    have the smaller summed domain, then to the first in row-major order.
    Returns None when no empty cell remains; a cell without candidates is
    returned at once with an empty mask.
    """
    best_choice: tuple[int, int, Mask] | None = None
    best_key: tuple[int, int, int] | None = None

    for r, c in state.empty_cells():
        count = state.available[r][c]
        if count == 0:
            return r, c, 0
        if best_key is not None and count > best_key[0]:
            continue

        peers_count, peers_domain_sum = peer_pressure(state, r, c)
        key = (count, -peers_count, peers_domain_sum)
        if best_key is None or key < best_key:
            best_key = key
            best_choice = (r, c, state.candidates(r, c))

    return best_choice


def peer_pressure(state: GridState, r: int, c: int) -> tuple[int, int]:
    peers_count = 0
    peers_domain_sum = 0
    for pr, pc in state.peers[r][c]:
        if state.grid[pr][pc] != EMPTY:
            continue
        peers_count += 1
        peers_domain_sum += state.available[pr][pc]
    return peers_count, peers_domain_sum


def least_constraining_value(state: GridState, r: int, c: int, available_bits: Mask) -> int:
    """Return the candidate that removes the fewest options from empty peers.

    A value scores one point per empty peer that already forbids it. The
    scan runs from the lowest value up and keeps the later value on ties.
    """
    empty_peers = [(pr, pc) for pr, pc in state.peers[r][c] if state.grid[pr][pc] == EMPTY]

    best_value = 0
    best_score = -1
    for value in iter_values(available_bits):
        bit = value_bit(value)
        score = sum(1 for pr, pc in empty_peers if state.forbidden[pr][pc] & bit)
        if score >= best_score:
            best_score = score
            best_value = value

    if best_value == 0:
        raise ValueError(f"no candidate values given for cell ({r}, {c})")
    return best_value
