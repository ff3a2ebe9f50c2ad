from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .grid import NUM_CELLS, Cell, Grid, candidate_mask, mask_digits

NO_SOLUTION = 'none'
UNIQUE = 'unique'
MULTIPLE = 'multiple'


@dataclass(frozen=True)
class SolveResult:
    status: str  # NO_SOLUTION, UNIQUE or MULTIPLE
    solution: Optional[Grid]  # set only when status == UNIQUE


def _search(cells: List[Cell], found: List[Grid], limit: int) -> None:
    """
    Depth-first search over a private copy of cells.
    Naked singles are placed in scan order until none remain, then the empty
    cell with the fewest candidates (lowest index on ties) is branched on,
    trying digits in ascending order. Stops once `limit` solutions are found.
    """
    cells = list(cells)
    while True:
        progressed = False
        best_pos = -1
        best_mask = 0
        best_count = 10
        for pos in range(NUM_CELLS):
            if cells[pos] is not None:
                continue
            mask = candidate_mask(cells, pos)
            count = bin(mask).count('1')
            if count == 0:
                return  # dead end
            if count == 1:
                cells[pos] = mask.bit_length()
                progressed = True
                continue
            if count < best_count:
                best_count = count
                best_pos = pos
                best_mask = mask
        if progressed:
            # Singles change the candidates of other cells; rescan before branching.
            continue
        if best_pos == -1:
            found.append(Grid(tuple(cells)))
            return
        break

    for n in mask_digits(best_mask):
        cells[best_pos] = n
        _search(cells, found, limit)
        if len(found) >= limit:
            return


def is_consistent(grid: Grid) -> bool:
    return grid.is_consistent()


def count_solutions(grid: Grid, limit: int = 2) -> int:
    """Counts completions of grid, stopping early at `limit`."""
    return len(_find_solutions(grid, limit))


def _find_solutions(grid: Grid, limit: int) -> List[Grid]:
    if limit < 1:
        raise ValueError('limit must be at least 1')
    # Clashing clues would otherwise pass through untouched when the grid is full.
    if not is_consistent(grid):
        return []
    found: List[Grid] = []
    _search(list(grid.cells), found, limit)
    return found


def solve(grid: Grid) -> SolveResult:
    """Classifies grid as having no, exactly one, or several completions."""
    found = _find_solutions(grid, 2)
    if not found:
        return SolveResult(status=NO_SOLUTION, solution=None)
    if len(found) > 1:
        return SolveResult(status=MULTIPLE, solution=None)
    return SolveResult(status=UNIQUE, solution=found[0])


def find_unique_solution(grid: Grid) -> Optional[Grid]:
    """Returns the solution if grid has exactly one, otherwise None."""
    return solve(grid).solution
