import os
import random
import sqlite3
import tempfile
import unittest
from unittest.mock import patch

from game import (
    GameConfig,
    Grid,
    InvalidConfiguration,
    MemoryHighScoreStore,
    ScoreKeeper,
    SqliteHighScoreStore,
    draw_colors,
    spawn_marbles,
)


class TestConfig(unittest.TestCase):
    def test_given_defaults_when_validating_then_classic_board(self):
        cfg = GameConfig().validate()
        self.assertEqual((cfg.width, cfg.height, cfg.colors_count, cfg.marbles_per_spawn, cfg.line_length),
                         (9, 9, 5, 3, 5))
        self.assertEqual(cfg.score_key(), "9x9|c5|s3|l5")

    def test_given_camel_case_mapping_when_loading_then_fields_set_and_unknown_ignored(self):
        cfg = GameConfig.from_mapping({"width": "7", "colorsCount": 6, "lineLength": 4, "theme": "dark"})
        self.assertEqual(cfg, GameConfig(width=7, colors_count=6, line_length=4))

    def test_given_bad_values_when_loading_then_invalid_configuration(self):
        for data in [{"width": 0}, {"height": -3}, {"marbles_per_spawn": "x"},
                     {"width": 1, "height": 2, "marbles_per_spawn": 2}]:
            with self.assertRaises(InvalidConfiguration):
                GameConfig.from_mapping(data)
        with self.assertRaises(InvalidConfiguration):
            GameConfig(width=True).validate()

    def test_given_line_length_one_when_validating_then_invalid_configuration(self):
        with self.assertRaises(InvalidConfiguration):
            GameConfig(line_length=1).validate()
        with self.assertRaises(InvalidConfiguration):
            GameConfig.from_mapping({"lineLength": 1})
        self.assertEqual(GameConfig(line_length=2).validate().line_length, 2)

    def test_given_environment_when_loading_then_env_overrides_defaults(self):
        with patch.dict(os.environ, {"KULKI_WIDTH": "6", "KULKI_LINE": "4"}):
            cfg = GameConfig.from_env()
        self.assertEqual(cfg.width, 6)
        self.assertEqual(cfg.line_length, 4)
        self.assertEqual(cfg.height, 9)


class TestSpawn(unittest.TestCase):
    def test_given_seed_when_drawing_colors_then_in_range_and_reproducible(self):
        a = draw_colors(random.Random(3), 20, 4)
        b = draw_colors(random.Random(3), 20, 4)
        self.assertEqual(a, b)
        self.assertTrue(all(0 <= c < 4 for c in a))

    def test_given_small_free_space_when_spawning_then_stops_when_full(self):
        grid = Grid(2, 2, {(0, 0): 1, (1, 0): 1})
        spawned = spawn_marbles(grid, [2, 3, 4], random.Random(1))
        self.assertEqual(len(spawned), 2)
        self.assertTrue(grid.is_full)
        self.assertEqual(sorted(c for _, c in spawned), [2, 3])


class TestScore(unittest.TestCase):
    def test_given_removals_when_adding_then_score_accumulates(self):
        keeper = ScoreKeeper()
        self.assertEqual(keeper.add_removed(5), 5)
        self.assertEqual(keeper.add_removed(0), 5)
        self.assertEqual(keeper.add_removed(9), 14)
        with self.assertRaises(ValueError):
            keeper.add_removed(-1)
        keeper.reset()
        self.assertEqual(keeper.score, 0)

    def test_given_memory_store_when_saving_then_loaded_per_key(self):
        store = MemoryHighScoreStore()
        self.assertEqual(store.load("a"), 0)
        store.save("a", 12)
        self.assertEqual(store.load("a"), 12)
        self.assertEqual(store.load("b"), 0)

    def test_given_sqlite_store_when_saving_then_persisted_across_instances(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "nested", "scores.db")
            store = SqliteHighScoreStore(path)
            self.assertEqual(store.load("9x9|c5|s3|l5"), 0)
            store.save("9x9|c5|s3|l5", 40)
            store.save("9x9|c5|s3|l5", 55)
            again = SqliteHighScoreStore(path)
            self.assertEqual(again.load("9x9|c5|s3|l5"), 55)
            conn = sqlite3.connect(path)
            try:
                rows = conn.execute("SELECT key, score, achieved_at FROM high_scores").fetchall()
            finally:
                conn.close()
            self.assertEqual(len(rows), 1)
            self.assertTrue(rows[0][2])

    def test_given_unwritable_directory_when_opening_store_then_falls_back_to_db_dir(self):
        with tempfile.TemporaryDirectory() as tmp:
            with patch.dict(os.environ, {"KULKI_DB_DIR": tmp}), \
                    patch("kulki_core.score._ensure_db_dir", side_effect=PermissionError):
                store = SqliteHighScoreStore("/no/access/scores.db")
            self.assertEqual(store.db_path, os.path.join(tmp, "scores.db"))
            store.save("k", 7)
            self.assertEqual(store.load("k"), 7)


if __name__ == '__main__':
    unittest.main(verbosity=2)
