from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

Digit = int  # 1..9
Cell = Optional[Digit]
Coord = Tuple[int, int]  # (x, y), x rightward, y upward

SIZE = 9
NUM_CELLS = SIZE * SIZE
ALL_DIGITS_MASK = (1 << SIZE) - 1  # bit k set means digit k + 1


def check_coord(x: int, y: int) -> None:
    if not (0 <= x < SIZE and 0 <= y < SIZE):
        raise ValueError(f"Coordinates out of range: ({x}, {y})")


def check_digit(n: int) -> None:
    if not isinstance(n, int) or isinstance(n, bool) or not (1 <= n <= SIZE):
        raise ValueError(f"Digit out of range: {n!r}")


def get_pos(x: int, y: int) -> int:
    """Calculates the 1D index for a given x and y."""
    check_coord(x, y)
    return y * SIZE + x


def get_x_and_y_from_pos(pos: int) -> Coord:
    if not (0 <= pos < NUM_CELLS):
        raise ValueError(f"Cell index out of range: {pos}")
    return pos % SIZE, pos // SIZE


def digit_bit(n: Digit) -> int:
    return 1 << (n - 1)


def mask_digits(mask: int) -> List[Digit]:
    """Lists the digits set in a 9-bit mask, lowest first."""
    return [k + 1 for k in range(SIZE) if mask & (1 << k)]


def candidate_mask(cells: Sequence[Cell], pos: int) -> int:
    """Digits not used by any peer of pos, as a 9-bit mask."""
    used = 0
    for p in PEERS[pos]:
        n = cells[p]
        if n is not None:
            used |= digit_bit(n)
    return ALL_DIGITS_MASK & ~used


def _build_peers() -> Tuple[Tuple[int, ...], ...]:
    table: List[Tuple[int, ...]] = []
    for pos in range(NUM_CELLS):
        x, y = pos % SIZE, pos // SIZE
        bx, by = x - x % 3, y - y % 3
        peers = set()
        for i in range(SIZE):
            peers.add(y * SIZE + i)
            peers.add(i * SIZE + x)
        for yy in range(by, by + 3):
            for xx in range(bx, bx + 3):
                peers.add(yy * SIZE + xx)
        peers.discard(pos)
        table.append(tuple(sorted(peers)))
    return tuple(table)


# PEERS[pos] holds the 20 indices sharing a row, column or box with pos.
PEERS = _build_peers()


def peers(x: int, y: int) -> List[Coord]:
    """Gets the 20 peer coordinates of (x, y), ordered by index."""
    return [get_x_and_y_from_pos(p) for p in PEERS[get_pos(x, y)]]


def units() -> Iterator[Tuple[int, ...]]:
    """Yields the 27 rows, columns and boxes as tuples of cell indices."""
    for y in range(SIZE):
        yield tuple(y * SIZE + x for x in range(SIZE))
    for x in range(SIZE):
        yield tuple(y * SIZE + x for y in range(SIZE))
    for by in range(0, SIZE, 3):
        for bx in range(0, SIZE, 3):
            yield tuple((by + dy) * SIZE + bx + dx for dy in range(3) for dx in range(3))


@dataclass(frozen=True)
class Grid:
    """A 9x9 board of optional digits, stored as an 81-tuple (index = y * 9 + x).

    Grids are values: set/unset return a new Grid and never touch the original,
    so start, current and solution can never alias each other.
    """
    cells: Tuple[Cell, ...] = (None,) * NUM_CELLS

    def __post_init__(self) -> None:
        if len(self.cells) != NUM_CELLS:
            raise ValueError(f"Grid needs {NUM_CELLS} cells, got {len(self.cells)}")
        for n in self.cells:
            if n is not None:
                check_digit(n)

    @classmethod
    def empty(cls) -> 'Grid':
        return cls()

    @classmethod
    def from_cells(cls, cells: Sequence[Cell]) -> 'Grid':
        return cls(tuple(None if n in (None, 0) else n for n in cells))

    @classmethod
    def from_string(cls, text: str) -> 'Grid':
        """Parses 81 characters where 1-9 are digits and '0' or '.' are empty.
        Whitespace is ignored so puzzles can be written row per line."""
        chars = [ch for ch in text if not ch.isspace()]
        if len(chars) != NUM_CELLS:
            raise ValueError(f"Puzzle string needs {NUM_CELLS} cells, got {len(chars)}")
        cells: List[Cell] = []
        for ch in chars:
            if ch in '0.':
                cells.append(None)
            elif ch in '123456789':
                cells.append(int(ch))
            else:
                raise ValueError(f"Unexpected character in puzzle string: {ch!r}")
        return cls(tuple(cells))

    def get(self, x: int, y: int) -> Cell:
        return self.cells[get_pos(x, y)]

    def has(self, x: int, y: int) -> bool:
        return self.get(x, y) is not None

    def set(self, x: int, y: int, n: Digit) -> 'Grid':
        check_digit(n)
        pos = get_pos(x, y)
        return Grid(self.cells[:pos] + (n,) + self.cells[pos + 1:])

    def unset(self, x: int, y: int) -> 'Grid':
        pos = get_pos(x, y)
        return Grid(self.cells[:pos] + (None,) + self.cells[pos + 1:])

    def empty_positions(self) -> List[int]:
        return [pos for pos, n in enumerate(self.cells) if n is None]

    def candidate_mask(self, pos: int) -> int:
        return candidate_mask(self.cells, pos)

    def is_full(self) -> bool:
        return all(n is not None for n in self.cells)

    def is_consistent(self) -> bool:
        """True if no row, column or box holds the same digit twice."""
        for unit in units():
            seen = 0
            for pos in unit:
                n = self.cells[pos]
                if n is None:
                    continue
                bit = digit_bit(n)
                if seen & bit:
                    return False
                seen |= bit
        return True

    def is_solved(self) -> bool:
        return self.is_full() and self.is_consistent()

    def to_list(self) -> List[Cell]:
        return list(self.cells)

    def to_string(self) -> str:
        return ''.join(str(n) if n is not None else '.' for n in self.cells)

    def pretty(self) -> str:
        """Generates a human-readable rendering, one line per y with y = 0 first."""
        lines: List[str] = []
        for y in range(SIZE):
            if y and y % 3 == 0:
                lines.append('------+-------+------')
            row: List[str] = []
            for x in range(SIZE):
                if x and x % 3 == 0:
                    row.append('|')
                n = self.cells[y * SIZE + x]
                row.append(str(n) if n is not None else '.')
            lines.append(' '.join(row))
        return '\n'.join(lines)
