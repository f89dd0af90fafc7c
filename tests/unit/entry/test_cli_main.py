"""Tests for the command-line front door.

State and config paths point into temporary directories; HTTP is patched.
"""

from __future__ import annotations

import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from requests.structures import CaseInsensitiveDict

from bolthttp import cli, persistence
from bolthttp.persistence import load_state
from bolthttp.state import default_state


class CliTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.tmp = Path(self._tmp.name)
        self.state_path = self.tmp / "data" / "state.json"
        for patcher in (
            mock.patch("bolthttp.persistence.STATE_PATH", self.state_path),
            mock.patch("bolthttp.config.CONFIG_PATH", self.tmp / "config" / "config.json"),
        ):
            patcher.start()
            self.addCleanup(patcher.stop)

    def run_main(self, *argv: str) -> str:
        with mock.patch("sys.stdout", new_callable=io.StringIO) as stdout:
            cli.main(list(argv))
        return stdout.getvalue()


class ShowAndResetTests(CliTestCase):
    def test_show_creates_state_file_on_first_run(self) -> None:
        output = self.run_main("show")

        self.assertIn("> 0: GET     New Request 1", output)
        self.assertTrue(self.state_path.exists())
        self.assertEqual(load_state(self.state_path), default_state())

    def test_corrupt_state_is_regenerated_with_warning(self) -> None:
        self.state_path.parent.mkdir(parents=True)
        self.state_path.write_text('{"page": "Elsewhere"}', encoding="utf-8")

        with self.assertLogs("bolthttp.app", level="WARNING") as logs:
            output = self.run_main("show")

        self.assertIn("regenerating defaults", logs.output[0])
        self.assertIn("New Request 1", output)
        self.assertEqual(load_state(self.state_path), default_state())

    def test_reset_overwrites_existing_state(self) -> None:
        state = default_state()
        state.main.requests[0].url = "http://keep.me"
        persistence.save_state(state, self.state_path)

        output = self.run_main("reset")

        self.assertIn("state reset", output)
        self.assertEqual(load_state(self.state_path), default_state())

    def test_explicit_state_path_overrides_default(self) -> None:
        custom = self.tmp / "custom.json"

        self.run_main("--state", str(custom), "show")

        self.assertTrue(custom.exists())
        self.assertFalse(self.state_path.exists())


class ConfigCommandTests(CliTestCase):
    def test_config_lists_and_sets_values(self) -> None:
        self.assertIn("request_timeout = 30.0", self.run_main("config"))

        self.assertEqual(self.run_main("config", "style", "dracula"), "style = dracula\n")
        self.assertEqual(self.run_main("config", "style"), "style = dracula\n")

    def test_invalid_config_value_exits(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            self.run_main("config", "request_timeout", "0")
        self.assertIn("request_timeout must be > 0", str(ctx.exception))

    def test_cli_flags_override_saved_settings(self) -> None:
        self.run_main("config", "request_timeout", "9")

        output = self.run_main("--timeout", "2", "--style", "native", "--no-color", "config")

        self.assertIn("request_timeout = 2.0", output)
        self.assertIn("style = native", output)
        self.assertIn("no_color = True", output)


class SendCommandTests(CliTestCase):
    def _fake_response(self) -> mock.Mock:
        response = mock.Mock()
        response.status_code = 200
        response.text = '{"pong":true}'
        response.content = b'{"pong":true}'
        response.headers = CaseInsensitiveDict({"Content-Type": "application/json"})
        return response

    def test_send_prints_and_persists_response(self) -> None:
        state = default_state()
        state.main.requests[0].url = "http://localhost:2000/ping"
        persistence.save_state(state, self.state_path)

        with mock.patch("bolthttp.executor.requests.request", return_value=self._fake_response()) as request_mock:
            output = self.run_main("--no-color", "send")

        self.assertEqual(request_mock.call_args.args[:2], ("GET", "http://localhost:2000/ping"))
        self.assertIn("Response: 200", output)
        self.assertIn('"pong": true', output)
        saved = json.loads(self.state_path.read_text(encoding="utf-8"))
        stored = saved["main_col"]["requests"][0]["response"]
        self.assertEqual(stored["status"], 200)
        self.assertEqual(stored["response_type"], "JSON")
        self.assertEqual(stored["body"], '{\n    "pong": true\n}')

    def test_send_without_target_exits(self) -> None:
        state = default_state()
        state.main.requests.clear()
        persistence.save_state(state, self.state_path)

        with self.assertRaises(SystemExit) as ctx:
            self.run_main("send")
        self.assertIn("cannot send", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
