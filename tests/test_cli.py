import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch

from kulki_core import cli


class TestCli(unittest.TestCase):
    def test_given_inputs_when_parsing_then_select_and_move_forms_accepted(self):
        self.assertEqual(cli._parse_move("3,4"), [(3, 4)])
        self.assertEqual(cli._parse_move("3 4"), [(3, 4)])
        self.assertEqual(cli._parse_move("0,0 2,5"), [(0, 0), (2, 5)])
        self.assertEqual(cli._parse_move("0 0 2 5"), [(0, 0), (2, 5)])
        for bad in ["", "1,2 3,4 5,6", "a,b"]:
            with self.assertRaises(ValueError):
                cli._parse_move(bad)

    def test_given_scripted_session_when_running_then_board_printed_and_quits(self):
        with tempfile.TemporaryDirectory() as tmp:
            db = os.path.join(tmp, "scores.db")
            out = io.StringIO()
            with patch("builtins.input", side_effect=["nonsense", "4,4", "q"]), redirect_stdout(out):
                cli.main(["--seed", "5", "--db", db, "--width", "6", "--height", "6"])
            text = out.getvalue()
        self.assertIn("High score: 0", text)
        self.assertIn("Spawned:", text)
        self.assertIn("Could not parse", text)
        self.assertTrue("Not allowed" in text or "Reachable:" in text)

    def test_given_invalid_board_when_running_then_exits_with_error(self):
        with tempfile.TemporaryDirectory() as tmp:
            with redirect_stdout(io.StringIO()), self.assertRaises(SystemExit):
                cli.main(["--width", "0", "--db", os.path.join(tmp, "s.db")])


if __name__ == '__main__':
    unittest.main(verbosity=2)
