from __future__ import annotations

import random
from typing import Dict, List, Optional

from .grid import NUM_CELLS, SIZE, Cell, Grid

# Known puzzles with a single solution, written row by row (y = 0 first).
PUZZLES: Dict[str, str] = {
    'classic': (
        '530070000'
        '600195000'
        '098000060'
        '800060003'
        '400803001'
        '700020006'
        '060000280'
        '000419005'
        '000080079'
    ),
    'euler-01': (
        '003020600'
        '900305001'
        '001806400'
        '008102900'
        '700000008'
        '006708200'
        '002609500'
        '800203009'
        '005010300'
    ),
    'euler-02': (
        '200080300'
        '060070084'
        '030500209'
        '000105408'
        '000000000'
        '402706000'
        '301007040'
        '720040060'
        '004010003'
    ),
}

DEFAULT_PUZZLE = 'classic'


def get_puzzle(name: str) -> Grid:
    if name not in PUZZLES:
        raise KeyError(f'Unknown puzzle: {name}')
    return Grid.from_string(PUZZLES[name])


def _shuffled_lines(rng: random.Random) -> List[int]:
    """A permutation of 0..8 that keeps each group of three together."""
    groups = [0, 1, 2]
    rng.shuffle(groups)
    out: List[int] = []
    for g in groups:
        inner = [0, 1, 2]
        rng.shuffle(inner)
        out.extend(g * 3 + i for i in inner)
    return out


def remix(grid: Grid, rng: random.Random) -> Grid:
    """
    Returns an equivalent puzzle: digits relabelled, rows permuted within and
    across bands, columns within and across stacks, optionally transposed.
    Each of these maps solutions one-to-one, so uniqueness is preserved.
    """
    labels = list(range(1, SIZE + 1))
    rng.shuffle(labels)
    rows = _shuffled_lines(rng)
    cols = _shuffled_lines(rng)
    transpose = rng.random() < 0.5
    cells: List[Cell] = [None] * NUM_CELLS
    for y in range(SIZE):
        for x in range(SIZE):
            sx, sy = cols[x], rows[y]
            if transpose:
                sx, sy = sy, sx
            n = grid.cells[sy * SIZE + sx]
            cells[y * SIZE + x] = labels[n - 1] if n is not None else None
    return Grid(tuple(cells))


def deal_puzzle(seed: Optional[int] = None, name: Optional[str] = None) -> Grid:
    """Picks a bundled puzzle (or the named one) and remixes it with a seeded RNG."""
    rng = random.Random(seed)
    base_name = name if name is not None else rng.choice(sorted(PUZZLES))
    return remix(get_puzzle(base_name), rng)
