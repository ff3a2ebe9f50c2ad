import unittest

from game import (
    Game,
    Grid,
    Hint,
    InvalidPuzzleError,
    PlaceOptions,
    give_hint,
    peers,
)

CLASSIC = (
    "530070000600195000098000060800060003400803001"
    "700020006060000280000419005000080079"
)
CLASSIC_SOLUTION = (
    "534678912672195348198342567859761423426853791"
    "713924856961537284287419635345286179"
)


def blank(solution: str, *positions: int) -> Grid:
    cells = list(solution)
    for pos in positions:
        cells[pos] = "0"
    return Grid.from_string("".join(cells))


class TestGameUnit(unittest.TestCase):
    def setUp(self):
        self.game = Game(Grid.from_string(CLASSIC))

    def test_given_new_game_when_created_then_current_is_start_and_session_empty(self):
        g = self.game
        self.assertEqual(g.current, g.start)
        self.assertEqual(g.solution, Grid.from_string(CLASSIC_SOLUTION))
        self.assertTrue(g.notes.is_empty())
        self.assertTrue(g.mistakes.is_empty())
        self.assertEqual(g.num_hints, 0)
        self.assertIsNone(g.hint)
        self.assertFalse(g.is_solved())

    def test_given_ambiguous_start_when_creating_game_then_invalid_puzzle(self):
        with self.assertRaises(InvalidPuzzleError):
            Game(Grid.empty())
        with self.assertRaises(ValueError):
            Game.new(Grid.from_string(CLASSIC).set(2, 0, 5))

    def test_given_correct_digit_when_placed_twice_then_idempotent(self):
        g = self.game
        self.assertTrue(g.place(2, 0, 4))
        after_first = g.current
        self.assertEqual(after_first.get(2, 0), 4)
        self.assertTrue(g.place(2, 0, 4))
        self.assertEqual(g.current, after_first)

    def test_given_clue_or_bad_digit_when_placing_then_value_error(self):
        with self.assertRaises(ValueError):
            self.game.place(0, 0, 5)
        with self.assertRaises(ValueError):
            self.game.place(2, 0, 0)
        with self.assertRaises(ValueError):
            self.game.place(2, 0, 10)
        with self.assertRaises(ValueError):
            self.game.place(9, 0, 1)

    def test_given_show_mistakes_when_wrong_digit_placed_then_recorded_not_written(self):
        g = self.game
        # solution at (1, 3) is 5
        self.assertEqual(g.solution.get(1, 3), 5)
        ok = g.place(1, 3, 3, PlaceOptions(show_mistakes=True))
        self.assertFalse(ok)
        self.assertIsNone(g.current.get(1, 3))
        self.assertTrue(g.mistakes.has(1, 3, 3))
        # a later correct digit clears the cell's mistakes
        self.assertTrue(g.place(1, 3, 5))
        self.assertFalse(g.mistakes.has(1, 3, 3))

    def test_given_lenient_mode_when_wrong_digit_placed_then_written_without_mistake(self):
        g = self.game
        ok = g.place(1, 3, 3, PlaceOptions(show_mistakes=False, elapsed_secs=12.5))
        self.assertFalse(ok)
        self.assertEqual(g.current.get(1, 3), 3)
        self.assertTrue(g.mistakes.is_empty())
        self.assertEqual(g.elapsed_secs, 12.5)

    def test_given_notes_on_peers_when_correct_digit_placed_then_peers_lose_digit(self):
        g = self.game
        for (px, py) in peers(2, 0):
            g.notes.set(px, py, 4)
        g.notes.set(8, 8, 4)  # not a peer of (2, 0)
        g.notes.set(2, 0, 1)
        g.notes.set(2, 0, 4)
        before = g.notes.copy()

        self.assertTrue(g.place(2, 0, 4))

        for (px, py) in peers(2, 0):
            self.assertFalse(g.notes.has(px, py, 4), msg=f"peer {(px, py)}")
        self.assertTrue(g.notes.has(8, 8, 4))
        self.assertEqual(g.notes.get(2, 0), 0)
        cleared = g.notes.get_cleared_since(before)
        self.assertIn((2, 0, 1), cleared)
        self.assertEqual(len(cleared), 20 + 2)

    def test_given_player_digit_when_cleared_then_cell_empty_and_clues_untouched(self):
        g = self.game
        g.place(2, 0, 4)
        self.assertTrue(g.clear(2, 0))
        self.assertIsNone(g.current.get(2, 0))
        self.assertFalse(g.clear(0, 0))
        self.assertEqual(g.current.get(0, 0), 5)

    def test_given_filled_cell_when_toggling_note_then_nothing_changes(self):
        g = self.game
        self.assertFalse(g.toggle_note(0, 0, 1))
        self.assertEqual(g.notes.get(0, 0), 0)
        self.assertTrue(g.toggle_note(2, 0, 1))
        self.assertFalse(g.toggle_note(2, 0, 1))

    def test_given_single_empty_cell_when_requesting_hint_twice_then_same_cell_and_counter_increments(self):
        start = blank(CLASSIC_SOLUTION, 4)  # (4, 0) should be 7
        g = Game(start)
        self.assertEqual(g.solution.get(4, 0), 7)

        h1 = g.request_hint()
        self.assertEqual(h1, Hint(4, 0))
        self.assertEqual(g.num_hints, 1)
        h2 = g.request_hint()
        self.assertEqual(h2, Hint(4, 0))
        self.assertEqual(g.num_hints, 2)
        self.assertIsNone(g.current.get(4, 0))

    def test_given_hint_button_pressed_twice_when_pending_then_digit_revealed(self):
        g = Game(blank(CLASSIC_SOLUTION, 4))
        self.assertEqual(give_hint(g), Hint(4, 0))
        self.assertFalse(g.is_solved())
        give_hint(g)
        self.assertEqual(g.current.get(4, 0), 7)
        self.assertIsNone(g.hint)
        self.assertTrue(g.is_solved())
        self.assertEqual(g.num_hints, 2)

    def test_given_cells_with_different_candidate_counts_when_hinting_then_fewest_wins(self):
        # (0, 0) can be 5 or 3; (1, 0) and (0, 8) have one candidate each
        g = Game(blank(CLASSIC_SOLUTION, 0, 1, 72))
        self.assertEqual(g.get_hint(), Hint(1, 0))
        # ties go to the lowest index
        g2 = Game(blank(CLASSIC_SOLUTION, 80, 4))
        self.assertEqual(g2.get_hint(), Hint(4, 0))

    def test_given_hint_cell_filled_when_requesting_again_then_new_target(self):
        g = Game(blank(CLASSIC_SOLUTION, 4, 80))
        self.assertEqual(g.request_hint(), Hint(4, 0))
        g.place(4, 0, 7)
        self.assertIsNone(g.hint)
        self.assertEqual(g.request_hint(), Hint(8, 8))

    def test_given_solved_game_when_requesting_hint_then_none_but_counted(self):
        g = Game(Grid.from_string(CLASSIC_SOLUTION))
        self.assertTrue(g.is_solved())
        self.assertIsNone(g.request_hint())
        self.assertEqual(g.num_hints, 1)

    def test_given_lenient_mistake_and_no_empty_cells_when_hinting_then_wrong_cell_targeted(self):
        g = Game(blank(CLASSIC_SOLUTION, 4))
        g.place(4, 0, 1, PlaceOptions(show_mistakes=False))
        self.assertEqual(g.get_hint(), Hint(4, 0))

    def test_given_last_cell_note_matches_solution_when_checking_then_solved_through_notes(self):
        g = Game(blank(CLASSIC_SOLUTION, 4))
        self.assertFalse(g.is_solved_through_notes())
        g.notes.set(4, 0, 7)
        self.assertTrue(g.is_solved_through_notes())
        self.assertFalse(g.is_solved())
        g.notes.set(4, 0, 2)
        self.assertFalse(g.is_solved_through_notes())

    def test_given_wrong_single_note_when_checking_then_not_solved_through_notes(self):
        g = Game(blank(CLASSIC_SOLUTION, 4, 80))
        g.notes.set(4, 0, 7)
        g.notes.set(8, 8, 1)  # solution is 9
        self.assertFalse(g.is_solved_through_notes())
        self.assertIsNone(g.fill_next_from_notes())

    def test_given_notes_solve_puzzle_when_autofilling_then_one_cell_per_step(self):
        g = Game(blank(CLASSIC_SOLUTION, 4, 80))
        g.notes.set(4, 0, 7)
        g.notes.set(8, 8, 9)
        self.assertEqual(g.fill_next_from_notes(), (4, 0))
        self.assertFalse(g.is_solved())
        self.assertEqual(g.fill_next_from_notes(), (8, 8))
        self.assertTrue(g.is_solved())
        self.assertIsNone(g.fill_next_from_notes())

    def test_given_progress_when_snapshot_roundtrip_then_identical_and_solution_rederived(self):
        g = self.game
        g.place(2, 0, 4)
        g.toggle_note(3, 0, 6)
        g.toggle_note(3, 0, 2)
        g.place(1, 3, 3)  # mistake, session only
        g.request_hint()

        snap = g.to_snapshot()
        self.assertEqual(set(snap), {"start", "current", "notes"})
        restored = Game.from_snapshot(snap)
        self.assertEqual(restored.start, g.start)
        self.assertEqual(restored.current, g.current)
        self.assertEqual(restored.notes, g.notes)
        self.assertEqual(restored.solution, g.solution)
        self.assertTrue(restored.mistakes.is_empty())
        self.assertEqual(restored.num_hints, 0)
        self.assertIsNot(restored.notes, g.notes)

    def test_given_bad_snapshots_when_restoring_then_invalid_puzzle(self):
        good = self.game.to_snapshot()
        bad_cases = []

        bad_cases.append({k: v for k, v in good.items() if k != "notes"})

        short = dict(good)
        short["current"] = good["current"][:80]
        bad_cases.append(short)

        out_of_range = dict(good)
        cur = list(good["current"])
        cur[2] = 10
        out_of_range["current"] = cur
        bad_cases.append(out_of_range)

        zero_digit = dict(good)
        st = list(good["start"])
        st[2] = 0
        zero_digit["start"] = st
        bad_cases.append(zero_digit)

        bad_mask = dict(good)
        masks = list(good["notes"])
        masks[0] = 1024
        bad_mask["notes"] = masks
        bad_cases.append(bad_mask)

        changed_clue = dict(good)
        cur2 = list(good["current"])
        cur2[0] = None
        changed_clue["current"] = cur2
        bad_cases.append(changed_clue)

        not_unique = {"start": [None] * 81, "current": [None] * 81, "notes": [0] * 81}
        bad_cases.append(not_unique)

        bad_cases.append(["not", "an", "object"])

        for case in bad_cases:
            with self.assertRaises(InvalidPuzzleError):
                Game.from_snapshot(case)  # type: ignore[arg-type]

    def test_given_grids_when_game_mutates_then_start_and_solution_never_change(self):
        g = self.game
        start, solution = g.start, g.solution
        g.place(2, 0, 4)
        g.place(1, 3, 1, PlaceOptions(show_mistakes=False))
        g.clear(1, 3)
        self.assertEqual(g.start, Grid.from_string(CLASSIC))
        self.assertIs(g.start, start)
        self.assertEqual(g.solution, solution)


if __name__ == "__main__":
    unittest.main(verbosity=2)
