import unittest

from game import Grid, find_lines, remove_lines


class TestLines(unittest.TestCase):
    def test_given_row_of_five_when_triggered_in_middle_then_whole_row_removed(self):
        grid = Grid(9, 9, {(x, 4): 2 for x in range(5)})
        removal = remove_lines(grid, (2, 4), 5)
        self.assertEqual(set(removal.coords), {(0, 4), (1, 4), (2, 4), (3, 4), (4, 4)})
        self.assertEqual(removal.count, 5)
        self.assertEqual(removal.color, 2)
        self.assertTrue(grid.is_empty)

    def test_given_run_bounded_by_other_colors_when_triggered_then_exact_maximal_run(self):
        cells = {(x, 0): 1 for x in range(1, 7)}
        cells[(0, 0)] = 3
        cells[(7, 0)] = 3
        grid = Grid(9, 1, cells)
        removal = remove_lines(grid, (6, 0), 5)
        self.assertEqual(removal.coords, tuple((x, 0) for x in range(1, 7)))
        self.assertEqual(grid.marbles(), [((0, 0), 3), ((7, 0), 3)])

    def test_given_gap_in_run_when_triggered_then_stops_at_empty_cell(self):
        cells = {(x, 2): 0 for x in (0, 1, 2, 4, 5, 6)}
        grid = Grid(9, 9, cells)
        self.assertEqual(find_lines(grid, (1, 2), 4), set())
        self.assertEqual(find_lines(grid, (5, 2), 3), {(4, 2), (5, 2), (6, 2)})

    def test_given_short_run_when_triggered_then_nothing_removed(self):
        grid = Grid(9, 9, {(3, y): 1 for y in range(4)})
        removal = remove_lines(grid, (3, 0), 5)
        self.assertFalse(removal)
        self.assertEqual(removal.count, 0)
        self.assertEqual(grid.occupant_count, 4)

    def test_given_cross_when_triggered_at_center_then_union_counted_once(self):
        cells = {(x, 4): 1 for x in range(2, 7)}
        cells.update({(4, y): 1 for y in range(2, 7)})
        grid = Grid(9, 9, cells)
        removal = remove_lines(grid, (4, 4), 5)
        self.assertEqual(removal.count, 9)
        self.assertEqual(len(set(removal.coords)), 9)
        self.assertTrue(grid.is_empty)

    def test_given_cross_when_only_one_axis_long_enough_then_other_axis_kept(self):
        cells = {(x, 0): 4 for x in range(5)}
        cells.update({(0, 1): 4, (0, 2): 4})
        grid = Grid(6, 6, cells)
        removal = remove_lines(grid, (0, 0), 5)
        self.assertEqual(set(removal.coords), {(x, 0) for x in range(5)})
        self.assertEqual(grid.marbles(), [((0, 1), 4), ((0, 2), 4)])

    def test_given_run_at_board_edges_when_triggered_then_bounds_respected(self):
        grid = Grid(5, 5, {(4, y): 0 for y in range(5)})
        self.assertEqual(find_lines(grid, (4, 4), 5), {(4, y) for y in range(5)})

    def test_given_empty_cell_when_triggered_then_empty_removal(self):
        grid = Grid(3, 3)
        removal = remove_lines(grid, (1, 1), 1)
        self.assertFalse(removal)
        self.assertIsNone(removal.color)


if __name__ == '__main__':
    unittest.main(verbosity=2)
