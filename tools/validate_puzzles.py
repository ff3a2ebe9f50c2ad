#!/usr/bin/env python3
"""
Validate a file of Sudoku puzzles and summarize the results.

- One puzzle per line: 81 characters, 1-9 for clues and 0 or . for empty cells.
- Blank lines and lines starting with '#' are skipped.
- Each puzzle is classified as unique / multiple / none, or 'malformed' if it
  can't be parsed.
- With --jobs N > 1 puzzles are validated in a process pool; the solver keeps
  no shared state so results are identical to a serial run.
- Prints a JSON summary with counts and the line numbers of failures

Usage:
  python tools/validate_puzzles.py puzzles.txt
  python tools/validate_puzzles.py puzzles.txt --jobs 4
"""
from __future__ import annotations

import argparse
import json
import os
import sys
from concurrent.futures import ProcessPoolExecutor
from typing import Dict, Iterator, List, Tuple

# Ensure we can import the local package when run from a checkout
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from sudoku_core.grid import Grid  # noqa: E402
from sudoku_core.solver import UNIQUE, solve  # noqa: E402

MALFORMED = 'malformed'


def iter_puzzles(path: str) -> Iterator[Tuple[int, str]]:
    with open(path, 'r', encoding='utf-8') as f:
        for lineno, line in enumerate(f, start=1):
            text = line.strip()
            if not text or text.startswith('#'):
                continue
            yield lineno, text


def classify(text: str) -> str:
    try:
        grid = Grid.from_string(text)
    except ValueError:
        return MALFORMED
    return solve(grid).status


def validate(path: str, jobs: int = 1) -> Dict[str, object]:
    items = list(iter_puzzles(path))
    texts = [t for _, t in items]
    if jobs > 1 and len(texts) > 1:
        with ProcessPoolExecutor(max_workers=jobs) as pool:
            statuses = list(pool.map(classify, texts, chunksize=8))
    else:
        statuses = [classify(t) for t in texts]

    counts: Dict[str, int] = {}
    failures: List[Dict[str, object]] = []
    for (lineno, _), status in zip(items, statuses):
        counts[status] = counts.get(status, 0) + 1
        if status != UNIQUE and len(failures) < 20:
            failures.append({"line": lineno, "status": status})

    return {
        "count": len(items),
        "statuses": counts,
        "failures": failures,
    }


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description='Validate a file of Sudoku puzzles')
    parser.add_argument('path', help='Puzzle file, one puzzle per line')
    parser.add_argument('--jobs', type=int, default=1, help='Worker processes (default 1)')
    args = parser.parse_args(argv)
    summary = validate(args.path, jobs=max(1, args.jobs))
    print(json.dumps(summary, indent=2))
    return 0 if summary["count"] == summary["statuses"].get(UNIQUE, 0) else 1  # type: ignore[union-attr]


if __name__ == "__main__":
    raise SystemExit(main())
