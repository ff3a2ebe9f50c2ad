from __future__ import annotations

import json
import logging
import os
from typing import Optional, Union

from .game import Game, InvalidPuzzleError
from .puzzles import deal_puzzle

log = logging.getLogger(__name__)

SAVE_FILE_NAME = '.sudoku.json'


def default_save_path() -> str:
    """SUDOKU_SAVE_PATH, else ~/.sudoku.json, else /tmp/sudoku.json."""
    env = os.getenv('SUDOKU_SAVE_PATH')
    if env:
        return env
    home = os.path.expanduser('~')
    if home and home != '~':
        return os.path.join(home, SAVE_FILE_NAME)
    return os.path.join('/tmp', 'sudoku.json')


def _ensure_save_dir(path: str) -> None:
    """Ensures the directory for the snapshot file exists before writing."""
    directory = os.path.dirname(path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory, exist_ok=True)


def _resolve_save_path(path: str) -> str:
    """Resolves a potentially unwritable save path to a writable one, creating the directory if needed."""
    try:
        _ensure_save_dir(path)
        return path
    except PermissionError:
        pass
    candidates = [
        os.getenv('SUDOKU_SAVE_DIR'),
        os.path.join(os.getcwd(), 'data'),
        '/tmp',
    ]
    base = os.path.basename(path) or 'sudoku.json'
    for d in candidates:
        if not d:
            continue
        try:
            os.makedirs(d, exist_ok=True)
            return os.path.join(d, base)
        except OSError:
            continue
    return base


def game_to_json(game: Game) -> str:
    """Serializes the game to JSON, omitting its solution."""
    return json.dumps(game.to_snapshot())


def game_from_json(text: Union[str, bytes]) -> Game:
    """Parses the game from JSON, verifying there is only a single solution."""
    try:
        obj = json.loads(text)
    except ValueError as e:
        raise InvalidPuzzleError(f'Snapshot is not valid JSON: {e}') from e
    return Game.from_snapshot(obj)


def save_game(game: Game, path: Optional[str] = None) -> None:
    """
    Writes the snapshot, or removes it once the game is solved since a finished
    game has nothing left to resume. Raises OSError if the file can't be written.
    """
    target = _resolve_save_path(path or default_save_path())
    if game.is_solved():
        if os.path.exists(target):
            os.remove(target)
            log.info('Removed snapshot of solved game at %s', target)
        return
    payload = game_to_json(game)
    tmp = target + '.tmp'
    try:
        with open(tmp, 'w', encoding='utf-8') as f:
            f.write(payload)
        os.replace(tmp, target)
    except OSError:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise
    log.debug('Saved game to %s', target)


def checkpoint(game: Game, path: Optional[str] = None) -> bool:
    """save_game() for collaborators: failures are logged and reported as False."""
    try:
        save_game(game, path)
        return True
    except OSError as e:
        log.warning("Can't save Sudoku game: %s", e)
        return False


def load_game(path: Optional[str] = None) -> Optional[Game]:
    """Loads a saved game, or returns None if there is none or it can't be used."""
    # Resolved like save_game, so snapshots in a fallback dir are found.
    try:
        target = _resolve_save_path(path or default_save_path())
    except OSError as e:
        log.warning("Can't locate saved game: %s", e)
        return None
    if not os.path.isfile(target):
        log.debug('No saved game at %s', target)
        return None
    try:
        with open(target, 'rb') as f:
            data = f.read()
    except OSError as e:
        log.warning("Can't read saved game: %s", e)
        return None
    try:
        return game_from_json(data)
    except InvalidPuzzleError as e:
        log.warning("Can't restore Sudoku game: %s", e)
        return None


def load_or_new(path: Optional[str] = None, seed: Optional[int] = None) -> Game:
    """Restores the saved game if possible, otherwise deals a fresh one."""
    game = load_game(path)
    if game is not None:
        return game
    return Game(deal_puzzle(seed))
