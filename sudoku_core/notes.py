from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set, Tuple

from .grid import (
    ALL_DIGITS_MASK,
    NUM_CELLS,
    Digit,
    check_digit,
    digit_bit,
    get_pos,
    get_x_and_y_from_pos,
    mask_digits,
)

NoteKey = Tuple[int, int, Digit]  # (x, y, n)


def _empty_masks() -> List[int]:
    return [0] * NUM_CELLS


@dataclass
class Notes:
    """Per-cell 9-bit digit sets. Used for the player's candidate notes and,
    with the same shape, for the digits a player got wrong in each cell."""
    cells: List[int] = field(default_factory=_empty_masks)

    @classmethod
    def from_list(cls, masks: Sequence[int]) -> 'Notes':
        if len(masks) != NUM_CELLS:
            raise ValueError(f"Notes need {NUM_CELLS} masks, got {len(masks)}")
        out: List[int] = []
        for m in masks:
            if not isinstance(m, int) or isinstance(m, bool) or not (0 <= m <= ALL_DIGITS_MASK):
                raise ValueError(f"Note mask out of range: {m!r}")
            out.append(m)
        return cls(out)

    def get(self, x: int, y: int) -> int:
        return self.cells[get_pos(x, y)]

    def digits(self, x: int, y: int) -> List[Digit]:
        return mask_digits(self.get(x, y))

    def has(self, x: int, y: int, n: Digit) -> bool:
        check_digit(n)
        return bool(self.cells[get_pos(x, y)] & digit_bit(n))

    def set(self, x: int, y: int, n: Digit) -> None:
        check_digit(n)
        self.cells[get_pos(x, y)] |= digit_bit(n)

    def unset(self, x: int, y: int, n: Digit) -> None:
        check_digit(n)
        self.cells[get_pos(x, y)] &= ~digit_bit(n)

    def toggle(self, x: int, y: int, n: Digit) -> bool:
        """Flips the note and returns whether it is now set."""
        check_digit(n)
        pos = get_pos(x, y)
        self.cells[pos] ^= digit_bit(n)
        return bool(self.cells[pos] & digit_bit(n))

    def clear(self, x: int, y: int) -> None:
        self.cells[get_pos(x, y)] = 0

    def get_only_number(self, pos: int) -> Optional[Digit]:
        """Returns the digit if exactly one note is set at pos."""
        mask = self.cells[pos]
        if mask and not (mask & (mask - 1)):
            return mask.bit_length()
        return None

    def get_cleared_since(self, previous: 'Notes') -> Set[NoteKey]:
        """Notes that were set in previous but are absent now."""
        cleared: Set[NoteKey] = set()
        for pos in range(NUM_CELLS):
            gone = previous.cells[pos] & ~self.cells[pos]
            if not gone:
                continue
            x, y = get_x_and_y_from_pos(pos)
            for n in mask_digits(gone):
                cleared.add((x, y, n))
        return cleared

    def is_empty(self) -> bool:
        return not any(self.cells)

    def copy(self) -> 'Notes':
        return Notes(list(self.cells))

    def to_list(self) -> List[int]:
        return list(self.cells)
