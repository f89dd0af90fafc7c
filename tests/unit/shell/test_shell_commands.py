"""Tests for shell command parsing and dispatch.

Commands map onto reducer actions; bad input is reported, never raised.
"""

from __future__ import annotations

import unittest

from bolthttp import actions
from bolthttp.model import HttpMethod, Page, RequestTab, ResponseTab
from bolthttp.shell import HELP_TEXT, CommandError, Shell
from bolthttp.state import default_state
from bolthttp.store import Store


def _make_shell(lines: list[str] | None = None):
    output: list[str] = []
    sent = []
    opened = []
    store = Store(default_state(), send=sent.append, open_url=opened.append, transform_json=lambda text: text)
    pending = list(lines or [])

    def read_line(_prompt: str) -> str:
        if not pending:
            raise EOFError
        return pending.pop(0)

    shell = Shell(store, read_line=read_line, write=output.append)
    return shell, store, output, sent, opened


class CommandParsingTests(unittest.TestCase):
    def test_parse_maps_commands_to_actions(self) -> None:
        shell, *_ = _make_shell()
        cases = {
            "page collections": actions.SwitchPage(Page.COLLECTIONS),
            "select 2": actions.SelectRequest(2),
            "sel 1 3": actions.SelectFromCollection(1, 3),
            "method patch": actions.MethodChanged(HttpMethod.PATCH),
            'header 0 "X-Api Key" "a b"': actions.HeaderChanged(0, "X-Api Key", "a b"),
            "param 1 q": actions.ParamChanged(1, "q", ""),
            "tab headers": actions.SelectRequestTab(RequestTab.HEADERS),
            "rtab headers": actions.SelectResponseTab(ResponseTab.HEADERS),
            "add": actions.AddRequest(),
            "rm 0": actions.RemoveRequest(0),
            "add-col": actions.AddCollection(),
            "rm-col 1": actions.RemoveCollection(1),
            "add-to 0": actions.AddToCollection(0),
            "rm-from 0 1": actions.RemoveFromCollection(0, 1),
            "toggle 2": actions.ToggleCollapsed(2),
            "send": actions.SendPressed(),
        }
        for line, expected in cases.items():
            with self.subTest(line=line):
                self.assertEqual(shell.registry.parse(line), expected)

    def test_url_and_body_keep_raw_remainder(self) -> None:
        shell, *_ = _make_shell()

        self.assertEqual(
            shell.registry.parse("url http://h/p?a=1&b='x y'"),
            actions.UrlChanged("http://h/p?a=1&b='x y'"),
        )
        self.assertEqual(shell.registry.parse('body {"a": 1}'), actions.BodyChanged('{"a": 1}'))
        self.assertEqual(shell.registry.parse("body"), actions.BodyChanged(""))

    def test_unknown_command_parses_to_none(self) -> None:
        shell, *_ = _make_shell()

        self.assertIsNone(shell.registry.parse("frobnicate 1"))

    def test_bad_arguments_raise_command_error(self) -> None:
        shell, *_ = _make_shell()
        for line in ("select", "select a", "select -1", "page away", "method FETCH", "rm", 'header 0 "open'):
            with self.subTest(line=line):
                with self.assertRaises(CommandError):
                    shell.registry.parse(line)


class HandleLineTests(unittest.TestCase):
    def test_commands_update_store(self) -> None:
        shell, store, *_ = _make_shell()

        shell.handle_line("url http://localhost:2000/ping")
        shell.handle_line("add-header")
        shell.handle_line("header 1 Accept */*")

        request = store.snapshot().main.requests[0]
        self.assertEqual(request.url, "http://localhost:2000/ping")
        self.assertEqual(request.headers, [("", ""), ("Accept", "*/*")])

    def test_last_header_and_param_rows_cannot_be_removed(self) -> None:
        shell, store, output, *_ = _make_shell()

        shell.handle_line("rm-header 0")
        shell.handle_line("rm-param 0")

        request = store.snapshot().main.requests[0]
        self.assertEqual(len(request.headers), 1)
        self.assertEqual(len(request.params), 1)
        self.assertIn("error: cannot remove the last header row\n", output)
        self.assertIn("error: cannot remove the last param row\n", output)

    def test_out_of_range_index_is_reported(self) -> None:
        shell, store, output, *_ = _make_shell()

        self.assertTrue(shell.handle_line("select 4"))

        self.assertTrue(output[-1].startswith("error: request index 4 out of range"))
        self.assertEqual(store.snapshot().main_current, 0)

    def test_send_hands_request_to_executor(self) -> None:
        shell, _store, _output, sent, _opened = _make_shell()

        shell.handle_line("send")

        self.assertEqual(len(sent), 1)

    def test_help_prints_commands_and_opens_link(self) -> None:
        shell, _store, output, _sent, opened = _make_shell()

        shell.handle_line("help")

        self.assertIn(HELP_TEXT, output)
        self.assertEqual(len(opened), 1)

    def test_quit_and_blank_lines(self) -> None:
        shell, *_ = _make_shell()

        self.assertTrue(shell.handle_line("   "))
        self.assertFalse(shell.handle_line("quit"))
        self.assertFalse(shell.handle_line("EXIT"))

    def test_unknown_command_is_reported(self) -> None:
        shell, _store, output, *_ = _make_shell()

        shell.handle_line("frobnicate")

        self.assertEqual(output[-1], "unknown command: 'frobnicate' (try 'help')\n")


class RunLoopTests(unittest.TestCase):
    def test_run_draws_initially_and_after_each_change(self) -> None:
        shell, store, output, *_ = _make_shell(["add", "show", "quit", "never read"])

        shell.run()

        views = [chunk for chunk in output if chunk.startswith("== Home ==")]
        self.assertEqual(len(views), 3)
        self.assertEqual(len(store.snapshot().main.requests), 2)

    def test_run_stops_at_eof_and_unsubscribes(self) -> None:
        shell, store, output, *_ = _make_shell(["add"])

        shell.run()
        drawn = len(output)
        store.dispatch(actions.AddRequest())

        self.assertEqual(len(output), drawn)


if __name__ == "__main__":
    unittest.main()
