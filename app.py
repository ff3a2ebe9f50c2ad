from __future__ import annotations

import os
import sys
from typing import Any, Dict, Optional, Tuple

from flask import Flask, jsonify, request

# Ensure package imports work when executed directly from repo root or as module
if __package__ in (None, ""):
    sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

# Import the game facade
try:
    from .game import (  # type: ignore
        Game,
        Grid,
        Hint,
        InvalidPuzzleError,
        Notes,
        PlaceOptions,
        checkpoint,
        default_save_path,
        give_hint,
        load_game,
        new_game,
        solve,
    )
except ImportError:
    from game import (  # type: ignore
        Game,
        Grid,
        Hint,
        InvalidPuzzleError,
        Notes,
        PlaceOptions,
        checkpoint,
        default_save_path,
        give_hint,
        load_game,
        new_game,
        solve,
    )

app = Flask(__name__)


# ---------- JSON <-> Game ----------

def state_to_json(game: Game) -> Dict[str, Any]:
    """Snapshot fields plus the session-only fields a client needs to continue."""
    state = game.to_snapshot()
    state.update({
        "mistakes": game.mistakes.to_list(),
        "numHints": int(game.num_hints),
        "hint": [game.hint.x, game.hint.y] if game.hint is not None else None,
        "elapsedSecs": float(game.elapsed_secs),
        "solved": game.is_solved(),
        "solvedThroughNotes": game.is_solved_through_notes(),
    })
    return state


def json_to_state(obj: Any) -> Game:
    """Rebuilds a Game from state_to_json() output. Raises InvalidPuzzleError."""
    game = Game.from_snapshot(obj)
    try:
        if obj.get("mistakes") is not None:
            game.mistakes = Notes.from_list(obj["mistakes"])
        game.num_hints = int(obj.get("numHints", 0))
        game.elapsed_secs = float(obj.get("elapsedSecs", 0.0))
        hint = obj.get("hint")
        if hint is not None:
            hx, hy = int(hint[0]), int(hint[1])
            game.current.get(hx, hy)  # range check
            game.hint = Hint(hx, hy)
    except (TypeError, ValueError, IndexError) as e:
        raise InvalidPuzzleError(f"bad session fields: {e}") from e
    return game


def _error(message: str, status: int = 400) -> Any:
    return jsonify({"ok": False, "error": message}), status


def _body() -> Dict[str, Any]:
    body = request.get_json(force=True, silent=True)
    return body if isinstance(body, dict) else {}


def _game_from_body(body: Dict[str, Any]) -> Tuple[Optional[Game], Optional[str]]:
    s_in = body.get("state")
    if not isinstance(s_in, dict):
        return None, "state required"
    try:
        return json_to_state(s_in), None
    except InvalidPuzzleError as e:
        return None, f"bad state: {e}"


def _cell_args(body: Dict[str, Any], *names: str) -> Tuple[int, ...]:
    out = []
    for name in names:
        value = body.get(name)
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError(f"{name} must be an integer")
        out.append(value)
    return tuple(out)


# ---------- Core Game API ----------

@app.post("/api/new")
def api_new() -> Any:
    body = _body()
    seed = body.get("seed", None)
    puzzle = body.get("puzzle", None)
    if seed is not None and (not isinstance(seed, int) or isinstance(seed, bool)):
        return _error("seed must be an integer")
    if puzzle is not None and not isinstance(puzzle, str):
        return _error("puzzle must be a string")
    try:
        game = new_game(seed=seed, puzzle=puzzle)
    except InvalidPuzzleError as e:
        return _error(str(e))
    except ValueError as e:
        return _error(f"bad puzzle: {e}")
    return jsonify({"ok": True, "state": state_to_json(game)})


@app.post("/api/place")
def api_place() -> Any:
    body = _body()
    game, err = _game_from_body(body)
    if game is None:
        return _error(err or "state required")
    previous_notes = game.notes.copy()
    try:
        x, y, digit = _cell_args(body, "x", "y", "digit")
        options = PlaceOptions(
            elapsed_secs=float(body.get("elapsedSecs", game.elapsed_secs)),
            is_hint=False,
            show_mistakes=bool(body.get("showMistakes", True)),
        )
        correct = game.place(x, y, digit, options)
    except (TypeError, ValueError) as e:
        return _error(str(e))
    cleared = sorted(game.notes.get_cleared_since(previous_notes))
    return jsonify({
        "ok": True,
        "correct": correct,
        "state": state_to_json(game),
        "clearedNotes": [[cx, cy, n] for (cx, cy, n) in cleared],
    })


@app.post("/api/clear")
def api_clear() -> Any:
    body = _body()
    game, err = _game_from_body(body)
    if game is None:
        return _error(err or "state required")
    try:
        x, y = _cell_args(body, "x", "y")
        cleared = game.clear(x, y)
    except ValueError as e:
        return _error(str(e))
    return jsonify({"ok": True, "cleared": cleared, "state": state_to_json(game)})


@app.post("/api/note")
def api_note() -> Any:
    body = _body()
    game, err = _game_from_body(body)
    if game is None:
        return _error(err or "state required")
    try:
        x, y, digit = _cell_args(body, "x", "y", "digit")
        noted = game.toggle_note(x, y, digit)
    except ValueError as e:
        return _error(str(e))
    return jsonify({"ok": True, "noted": noted, "state": state_to_json(game)})


@app.post("/api/hint")
def api_hint() -> Any:
    body = _body()
    game, err = _game_from_body(body)
    if game is None:
        return _error(err or "state required")
    hint = give_hint(game)
    return jsonify({
        "ok": True,
        "hint": [hint.x, hint.y] if hint is not None else None,
        "state": state_to_json(game),
    })


@app.post("/api/autofill")
def api_autofill() -> Any:
    body = _body()
    game, err = _game_from_body(body)
    if game is None:
        return _error(err or "state required")
    filled = game.fill_next_from_notes()
    return jsonify({
        "ok": True,
        "filled": list(filled) if filled is not None else None,
        "state": state_to_json(game),
    })


@app.post("/api/solve")
def api_solve() -> Any:
    body = _body()
    puzzle = body.get("puzzle")
    if not isinstance(puzzle, str):
        return _error("puzzle required")
    try:
        grid = Grid.from_string(puzzle)
    except ValueError as e:
        return _error(f"bad puzzle: {e}")
    res = solve(grid)
    return jsonify({
        "ok": True,
        "status": res.status,
        "solution": res.solution.to_list() if res.solution is not None else None,
    })


# ---------- Persistence ----------

@app.post("/api/save")
def api_save() -> Any:
    body = _body()
    game, err = _game_from_body(body)
    if game is None:
        return _error(err or "state required")
    path = default_save_path()
    if not checkpoint(game, path):
        app.logger.warning("save skipped for %s", path)
        return _error("save failed", 500)
    return jsonify({"ok": True, "removed": game.is_solved()})


@app.post("/api/load")
def api_load() -> Any:
    game = load_game(default_save_path())
    if game is None:
        return _error("no saved game", 404)
    return jsonify({"ok": True, "state": state_to_json(game)})


# Entrypoint for "python app.py"
if __name__ == "__main__":
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=debug)
