"""
Sudoku core Python package.

This package contains the puzzle engine: value types, the solver and the
game state machine. Rendering, input handling and the HTTP surface live
outside of it (see app.py).
Modules:
- grid.py: Grid, Coord, peer tables
- notes.py: Notes (candidate and mistake bitmasks)
- solver.py: find_unique_solution, count_solutions
- game.py: Game, PlaceOptions, Hint
- puzzles.py: bundled puzzles and seeded deals
- persistence.py: JSON snapshot save/load
"""
