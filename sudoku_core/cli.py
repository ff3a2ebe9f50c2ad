from __future__ import annotations

import argparse
import logging
import os
from typing import List, Optional

from .game import Game, InvalidPuzzleError, PlaceOptions, give_hint
from .grid import Grid
from .persistence import checkpoint, default_save_path, load_or_new
from .puzzles import deal_puzzle
from .solver import MULTIPLE, NO_SOLUTION, solve

HELP = 'Commands: x y d (place) | n x y d (note) | c x y (clear) | h (hint) | q (quit)'


def _parse_ints(parts: List[str], count: int) -> Optional[List[int]]:
    if len(parts) != count:
        return None
    try:
        return [int(p) for p in parts]
    except ValueError:
        return None


def _show(game: Game) -> None:
    print(game.current.pretty())
    if game.hint is not None:
        print(f'Hint: look at ({game.hint.x}, {game.hint.y})')


def _report_solve(grid: Grid) -> int:
    res = solve(grid)
    if res.status == NO_SOLUTION:
        print('Puzzle has no solution.')
        return 1
    if res.status == MULTIPLE:
        print('Puzzle has more than one solution.')
        return 1
    assert res.solution is not None
    print('Unique solution:')
    print(res.solution.pretty())
    return 0


def play(game: Game, show_mistakes: bool = True) -> None:
    """Interactive loop on stdin; returns when the puzzle is solved or the player quits."""
    print(HELP)
    _show(game)
    while not game.is_solved():
        text = input('> ').strip().replace(',', ' ')
        parts = [t for t in text.split(' ') if t]
        if not parts:
            continue
        cmd = parts[0].lower()
        if cmd == 'q':
            return
        if cmd == 'h':
            give_hint(game)
            _show(game)
            continue
        if cmd in ('n', 'c'):
            args = _parse_ints(parts[1:], 3 if cmd == 'n' else 2)
        else:
            args = _parse_ints(parts, 3)
        if args is None:
            print('Could not parse. ' + HELP)
            continue
        try:
            if cmd == 'n':
                game.toggle_note(args[0], args[1], args[2])
            elif cmd == 'c':
                if not game.clear(args[0], args[1]):
                    print("That's a clue.")
            else:
                x, y, d = args
                if game.is_clue(x, y):
                    print("That's a clue.")
                    continue
                if not game.place(x, y, d, PlaceOptions(show_mistakes=show_mistakes)):
                    print(f'{d} does not go at ({x}, {y}).')
        except ValueError as e:
            print(f'error: {e}')
            continue
        while game.fill_next_from_notes() is not None:
            pass
        _show(game)
    print(f'Solved! Hints used: {game.num_hints}')


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Sudoku engine: validate, solve and play puzzles')
    parser.add_argument('--puzzle', default=None, help='81-character puzzle, 0 or . for empty cells')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for dealing a bundled puzzle')
    parser.add_argument('--save', default=None, help='Snapshot file (default: $SUDOKU_SAVE_PATH or ~/.sudoku.json)')
    parser.add_argument('--solve', action='store_true', help='Check uniqueness and print the solution')
    parser.add_argument('--play', action='store_true', help='Play in the terminal')
    parser.add_argument('--no-mistakes', action='store_true', help='Accept wrong digits without flagging them')
    args = parser.parse_args(argv)

    debug = os.getenv('SUDOKU_DEBUG', '0').lower() in ('1', 'true', 'yes', 'on')
    logging.basicConfig(level=logging.DEBUG if debug else logging.WARNING, format='%(levelname)s %(name)s: %(message)s')

    try:
        grid = Grid.from_string(args.puzzle) if args.puzzle else None
    except ValueError as e:
        print(f'error: {e}')
        return 2

    if not args.play:
        if grid is None:
            grid = deal_puzzle(seed=args.seed)
        print('Puzzle:')
        print(grid.pretty())
        if args.solve:
            return _report_solve(grid)
        print(grid.to_string())
        return 0

    save_path = args.save or default_save_path()
    if grid is not None:
        try:
            game = Game(grid)
        except InvalidPuzzleError as e:
            print(f'error: {e}')
            return 1
    else:
        game = load_or_new(save_path, seed=args.seed)
    try:
        play(game, show_mistakes=not args.no_mistakes)
    except (EOFError, KeyboardInterrupt):
        print()
    finally:
        checkpoint(game, save_path)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
