from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from .grid import (
    NUM_CELLS,
    PEERS,
    Cell,
    Coord,
    Digit,
    Grid,
    check_digit,
    get_pos,
    get_x_and_y_from_pos,
)
from .notes import Notes
from .solver import find_unique_solution


class InvalidPuzzleError(ValueError):
    """A puzzle or saved snapshot that cannot back a game."""


@dataclass(frozen=True)
class PlaceOptions:
    elapsed_secs: float = 0.0
    is_hint: bool = False
    show_mistakes: bool = True


@dataclass(frozen=True)
class Hint:
    """The cell to reveal next. The digit is read from the solution when filled."""
    x: int
    y: int


class Game:
    """
    A single Sudoku session: the given clues (start), the player's progress
    (current), the unique solution, candidate notes and wrong attempts.

    Game is not thread safe; one controller mutates it at a time.
    """

    def __init__(
        self,
        start: Grid,
        current: Optional[Grid] = None,
        notes: Optional[Notes] = None,
        solution: Optional[Grid] = None,
    ) -> None:
        if solution is None:
            solution = find_unique_solution(start)
            if solution is None:
                raise InvalidPuzzleError("Puzzle doesn't have a unique solution")
        self.start = start
        self.current = current if current is not None else start
        self.solution = solution
        self.notes = notes if notes is not None else Notes()
        self.mistakes = Notes()
        self.num_hints = 0
        self.hint: Optional[Hint] = None
        self.elapsed_secs = 0.0

    @classmethod
    def new(cls, start: Grid) -> 'Game':
        return cls(start)

    def is_clue(self, x: int, y: int) -> bool:
        return self.start.has(x, y)

    # ---------- Transitions ----------

    def place(self, x: int, y: int, n: Digit, options: Optional[PlaceOptions] = None) -> bool:
        """
        Fills digit n at (x, y) and returns whether it matches the solution.

        A correct digit is written to current, the cell's notes are cleared and
        n is removed from the notes of every peer. A wrong digit is recorded in
        mistakes when show_mistakes is set; otherwise it is written exactly like
        a correct one.
        """
        opts = options or PlaceOptions()
        check_digit(n)
        if self.is_clue(x, y):
            raise ValueError(f"Cell ({x}, {y}) is a clue and can't be changed")
        self.elapsed_secs = opts.elapsed_secs

        is_correct = self.solution.get(x, y) == n
        if not is_correct and opts.show_mistakes:
            self.mistakes.set(x, y, n)
            return False

        self.current = self.current.set(x, y, n)
        self.notes.clear(x, y)
        if is_correct:
            self.mistakes.clear(x, y)
        for peer in PEERS[get_pos(x, y)]:
            px, py = get_x_and_y_from_pos(peer)
            self.notes.unset(px, py, n)

        if self.hint == Hint(x, y):
            self.hint = None
        return is_correct

    def clear(self, x: int, y: int) -> bool:
        """Erases a player digit. Clue cells are left alone and return False."""
        if self.is_clue(x, y):
            return False
        self.current = self.current.unset(x, y)
        self.notes.clear(x, y)
        self.mistakes.clear(x, y)
        return True

    def toggle_note(self, x: int, y: int, n: Digit) -> bool:
        """Toggles a note on an empty cell; returns whether the note is now set."""
        if self.current.has(x, y):
            check_digit(n)
            return False
        return self.notes.toggle(x, y, n)

    # ---------- Hints ----------

    def get_hint(self) -> Optional[Hint]:
        """Picks the empty cell with the fewest candidates, lowest index on ties.
        With no empty cells left, falls back to the first cell holding a wrong digit."""
        best: Optional[int] = None
        best_count = 10
        for pos in self.current.empty_positions():
            count = bin(self.current.candidate_mask(pos)).count('1')
            if count < best_count:
                best, best_count = pos, count
        if best is None:
            for pos in range(NUM_CELLS):
                if self.current.cells[pos] != self.solution.cells[pos]:
                    best = pos
                    break
        if best is None:
            return None
        x, y = get_x_and_y_from_pos(best)
        return Hint(x, y)

    def has_pending_hint(self) -> bool:
        if self.hint is None:
            return False
        return self.current.get(self.hint.x, self.hint.y) != self.solution.get(self.hint.x, self.hint.y)

    def request_hint(self) -> Optional[Hint]:
        """Returns the pending hint, or selects a new one. Always counts as a hint used."""
        self.num_hints += 1
        if not self.has_pending_hint():
            self.hint = self.get_hint()
        return self.hint

    # ---------- Queries ----------

    def is_solved(self) -> bool:
        return self.current == self.solution

    def _filled_through_notes(self) -> Grid:
        cells: List[Cell] = list(self.current.cells)
        for pos in self.current.empty_positions():
            cells[pos] = self.notes.get_only_number(pos)
        return Grid(tuple(cells))

    def is_solved_through_notes(self) -> bool:
        """True if placing every single-note cell at once would finish the puzzle."""
        return self._filled_through_notes() == self.solution

    def fill_next_from_notes(self) -> Optional[Coord]:
        """Places the first single-note digit when the notes solve the puzzle."""
        if self.is_solved() or not self.is_solved_through_notes():
            return None
        for pos in self.current.empty_positions():
            n = self.notes.get_only_number(pos)
            if n is not None:
                x, y = get_x_and_y_from_pos(pos)
                self.place(x, y, n, PlaceOptions(elapsed_secs=self.elapsed_secs, show_mistakes=False))
                return (x, y)
        return None

    # ---------- Snapshot ----------

    def to_snapshot(self) -> Dict[str, Any]:
        """Serializable state without the solution, mistakes or hint count."""
        return {
            'start': self.start.to_list(),
            'current': self.current.to_list(),
            'notes': self.notes.to_list(),
        }

    @classmethod
    def from_snapshot(cls, obj: Mapping[str, Any]) -> 'Game':
        """Rebuilds a game from to_snapshot() output, re-deriving the solution."""
        if not isinstance(obj, Mapping):
            raise InvalidPuzzleError('Snapshot must be an object')
        try:
            start = _grid_from_json(obj['start'])
            current = _grid_from_json(obj['current'])
            notes = Notes.from_list(_seq(obj['notes']))
        except KeyError as e:
            raise InvalidPuzzleError(f'Snapshot is missing field {e}') from e
        except ValueError as e:
            raise InvalidPuzzleError(f'Malformed snapshot: {e}') from e
        for pos, n in enumerate(start.cells):
            if n is not None and current.cells[pos] != n:
                raise InvalidPuzzleError(f'Saved progress changes clue at index {pos}')
        solution = find_unique_solution(start)
        if solution is None:
            raise InvalidPuzzleError("Saved game didn't have a unique solution")
        return cls(start, current=current, notes=notes, solution=solution)


def _seq(value: Any) -> List[Any]:
    if not isinstance(value, (list, tuple)):
        raise ValueError(f'expected an array, got {type(value).__name__}')
    return list(value)


def _grid_from_json(value: Any) -> Grid:
    cells = _seq(value)
    if len(cells) != NUM_CELLS:
        raise ValueError(f'expected {NUM_CELLS} cells, got {len(cells)}')
    out: List[Cell] = []
    for n in cells:
        if n is not None:
            check_digit(n)
        out.append(n)
    return Grid(tuple(out))


def give_hint(game: Game) -> Optional[Hint]:
    """
    Hint button: the first press selects a cell, pressing again while that
    cell is still open reveals its digit. Every press is counted.
    """
    pending = game.has_pending_hint()
    hint = game.request_hint()
    if pending and hint is not None:
        n = game.solution.get(hint.x, hint.y)
        if n is not None:
            game.place(hint.x, hint.y, n, PlaceOptions(elapsed_secs=game.elapsed_secs, is_hint=True, show_mistakes=False))
    return hint
