import io
import logging
import os
import tempfile
import unittest
from unittest.mock import patch
from rich.console import Console
from sslmenu import cli
from tests.fakes import FakeHost


def closed_stdin(prompt):
    raise EOFError


class TestCli(unittest.TestCase):

    def setUp(self):
        self.buf = io.StringIO()
        self.console = Console(file=self.buf, width=200, color_system=None)
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        env = patch.dict(os.environ, {"SSLMENU_CERT_DIR": self.tmp.name}, clear=False)
        env.start()
        self.addCleanup(env.stop)
        for k in ("SSLMENU_KEY_LENGTH", "SSLMENU_CA", "SSLMENU_CHALLENGE_PORT", "SSLMENU_LOG_FILE", "SSLMENU_LOG_LEVEL"):
            os.environ.pop(k, None)
        self.addCleanup(logging.getLogger().handlers.clear)

    def test_help_exits_zero(self):
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            with self.assertRaises(SystemExit) as cm:
                cli.run(["-h"], console=self.console)
        self.assertEqual(cm.exception.code, 0)
        self.assertIn("usage: ssl-menu", out.getvalue())

    def test_unknown_argument(self):
        with patch("sys.stderr", new_callable=io.StringIO):
            with self.assertRaises(SystemExit) as cm:
                cli.run(["--batch"], console=self.console)
        self.assertEqual(cm.exception.code, 2)

    def test_requires_root(self):
        code = cli.run([], console=self.console, host=FakeHost([], root=False), read_line=closed_stdin)
        self.assertEqual(code, 1)
        self.assertIn("Error: This script must be run as root.", self.buf.getvalue())

    def test_runs_menu_as_root(self):
        code = cli.run([], console=self.console, host=FakeHost([]), read_line=closed_stdin)
        self.assertEqual(code, 0)
        out = self.buf.getvalue()
        self.assertIn("Running as root, continuing...", out)
        self.assertIn("Choose an option:", out)

    def test_invalid_configuration(self):
        os.environ["SSLMENU_KEY_LENGTH"] = "ec-521"
        code = cli.run([], console=self.console, host=FakeHost([]), read_line=closed_stdin)
        self.assertEqual(code, 2)
        self.assertIn("Invalid configuration", self.buf.getvalue())

    def test_unknown_log_level(self):
        os.environ["SSLMENU_LOG_LEVEL"] = "verbose"
        code = cli.run([], console=self.console, host=FakeHost([]), read_line=closed_stdin)
        self.assertEqual(code, 2)
        self.assertIn("log_level must be one of", self.buf.getvalue())

    def test_unwritable_log_file(self):
        os.environ["SSLMENU_LOG_FILE"] = os.path.join(self.tmp.name, "missing", "ssl-menu.log")
        code = cli.run([], console=self.console, host=FakeHost([]), read_line=closed_stdin)
        self.assertEqual(code, 2)
        self.assertIn("cannot open log file", self.buf.getvalue())
        self.assertNotIn("Choose an option:", self.buf.getvalue())

    def test_log_file_written(self):
        path = os.path.join(self.tmp.name, "ssl-menu.log")
        os.environ["SSLMENU_LOG_FILE"] = path
        code = cli.run([], console=self.console, host=FakeHost([]), read_line=closed_stdin)
        self.assertEqual(code, 0)
        self.assertTrue(os.path.exists(path))

    @patch("sslmenu.cli.run", return_value=0)
    def test_main_exits_with_run_code(self, run):
        with self.assertRaises(SystemExit) as cm:
            cli.main([])
        self.assertEqual(cm.exception.code, 0)
        run.assert_called_once_with([])


if __name__ == "__main__":
    unittest.main()
