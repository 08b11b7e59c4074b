"""Unit tests for the movetree command line tool."""

import io
import os
import sys
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

from movetree import cli
from movetree.services.logging_service import LoggingService


class TestCli(unittest.TestCase):
    """Test rendering movetext files from the command line."""

    def setUp(self):
        self._excepthook = sys.excepthook
        self.addCleanup(setattr, sys, 'excepthook', self._excepthook)

    def _write_pgn(self, content: str) -> str:
        handle, path = tempfile.mkstemp(suffix=".pgn")
        with os.fdopen(handle, 'w', encoding='utf-8') as f:
            f.write(content)
        self.addCleanup(os.remove, path)
        return path

    def _run(self, *args: str):
        output = io.StringIO()
        with redirect_stdout(output):
            exit_code = cli.main(list(args))
        return exit_code, output.getvalue().strip()

    def test_renders_canonical_movetext(self):
        path = self._write_pgn('[Event "Test"]\n\n1. e4 {open} e5 2. Nf3 (2. Bc4) Nc6 $1 1-0\n')
        exit_code, output = self._run(path)

        self.assertEqual(exit_code, cli.EXIT_OK)
        self.assertEqual(output, "1. e4 { open } 1... e5 2. Nf3 (2. Bc4) 2... Nc6 $1")

    def test_omits_comments_and_nags(self):
        path = self._write_pgn("1. e4 {open} e5 2. Nf3 Nc6 $1\n")
        exit_code, output = self._run(path, "--no-comments", "--no-nags")

        self.assertEqual(exit_code, cli.EXIT_OK)
        self.assertEqual(output, "1. e4 e5 2. Nf3 Nc6")

    def test_setup_position(self):
        path = self._write_pgn("10... Nc6 11. Bb5\n")
        fen = "rnbqkbnr/pppp1ppp/8/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R b KQkq - 1 10"
        exit_code, output = self._run(path, "--fen", fen)

        self.assertEqual(exit_code, cli.EXIT_OK)
        self.assertEqual(output, "10... Nc6 11. Bb5")

    def test_missing_file_exits_with_fatal_status(self):
        stderr = io.StringIO()
        with redirect_stderr(stderr), self.assertRaises(SystemExit) as cm:
            cli.main(["/nonexistent/movetree/game.pgn"])

        self.assertEqual(cm.exception.code, cli.EXIT_FATAL)
        self.assertIn("movetree: Cannot read /nonexistent/movetree/game.pgn", stderr.getvalue())
        self.assertNotIn("Traceback", stderr.getvalue())

    def test_logging_is_shut_down_after_a_fatal_error(self):
        logging_service = LoggingService.get_instance()
        logging_service.initialize()
        self.assertTrue(logging_service._initialized)

        with redirect_stderr(io.StringIO()), self.assertRaises(SystemExit):
            cli.main(["/nonexistent/movetree/game.pgn"])

        self.assertFalse(logging_service._initialized)
        self.assertIsNone(logging_service._listener)

    def test_invalid_setup_position_exits_with_fatal_status(self):
        path = self._write_pgn("1. e4 e5\n")
        stderr = io.StringIO()
        with redirect_stderr(stderr), self.assertRaises(SystemExit) as cm:
            cli.main([path, "--fen", "not a fen"])

        self.assertEqual(cm.exception.code, cli.EXIT_FATAL)
        self.assertIn("movetree: Invalid input: ", stderr.getvalue())


if __name__ == "__main__":
    unittest.main()
