from __future__ import annotations

# Facade module that re-exports the Sudoku core API.
# Used by the Flask app, the tests and `python game.py`.
# Single-responsibility modules live under sudoku_core/*.

# Prefer the relative import when this module is part of a package, then the
# installed top-level package.
try:
    from .sudoku_core.grid import (  # type: ignore
        SIZE,
        NUM_CELLS,
        PEERS,
        Cell,
        Coord,
        Digit,
        Grid,
        check_coord,
        check_digit,
        get_pos,
        get_x_and_y_from_pos,
        mask_digits,
        peers,
        units,
    )
    from .sudoku_core.notes import Notes  # type: ignore
    from .sudoku_core.solver import (  # type: ignore
        MULTIPLE,
        NO_SOLUTION,
        UNIQUE,
        SolveResult,
        count_solutions,
        find_unique_solution,
        is_consistent,
        solve,
    )
    from .sudoku_core.game import (  # type: ignore
        Game,
        Hint,
        InvalidPuzzleError,
        PlaceOptions,
        give_hint,
    )
    from .sudoku_core.puzzles import PUZZLES, DEFAULT_PUZZLE, deal_puzzle, get_puzzle, remix  # type: ignore
    from .sudoku_core.persistence import (  # type: ignore
        checkpoint,
        default_save_path,
        game_from_json,
        game_to_json,
        load_game,
        load_or_new,
        save_game,
    )
except ImportError:
    from sudoku_core.grid import (  # type: ignore
        SIZE,
        NUM_CELLS,
        PEERS,
        Cell,
        Coord,
        Digit,
        Grid,
        check_coord,
        check_digit,
        get_pos,
        get_x_and_y_from_pos,
        mask_digits,
        peers,
        units,
    )
    from sudoku_core.notes import Notes  # type: ignore
    from sudoku_core.solver import (  # type: ignore
        MULTIPLE,
        NO_SOLUTION,
        UNIQUE,
        SolveResult,
        count_solutions,
        find_unique_solution,
        is_consistent,
        solve,
    )
    from sudoku_core.game import (  # type: ignore
        Game,
        Hint,
        InvalidPuzzleError,
        PlaceOptions,
        give_hint,
    )
    from sudoku_core.puzzles import PUZZLES, DEFAULT_PUZZLE, deal_puzzle, get_puzzle, remix  # type: ignore
    from sudoku_core.persistence import (  # type: ignore
        checkpoint,
        default_save_path,
        game_from_json,
        game_to_json,
        load_game,
        load_or_new,
        save_game,
    )


def new_game(seed: int | None = None, puzzle: str | None = None) -> Game:
    """Starts a game from an explicit puzzle string, or deals a bundled one."""
    start = Grid.from_string(puzzle) if puzzle else deal_puzzle(seed)
    return Game(start)


def main() -> None:
    # CLI driver delegated to sudoku_core.cli
    try:
        from .sudoku_core.cli import main as _main  # type: ignore
    except ImportError:
        from sudoku_core.cli import main as _main  # type: ignore
    raise SystemExit(_main())


if __name__ == '__main__':
    main()
