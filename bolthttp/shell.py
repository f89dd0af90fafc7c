"""Line-command front end: the UI event path into the store.

Each input line is looked up in a command registry and turned into one
action. Redraws triggered by any transition, including late response
arrivals from the listener thread, are written back to the terminal.
"""

from __future__ import annotations

import logging
import shlex
import sys
import threading
from collections.abc import Callable
from dataclasses import dataclass

from . import actions
from .actions import Action
from .addressing import resolve_request
from .errors import BoltError
from .model import HttpMethod, Page, RequestTab, ResponseTab
from .render import render_view
from .state import AppState
from .store import Store

logger = logging.getLogger(__name__)

HELP_TEXT = """\
Commands:
  page home|collections     switch page
  select N | select C R     select request N (Home) or request R of collection C
  url TEXT | body TEXT      edit the selected request
  method NAME               GET, POST, PUT, PATCH, DELETE, ...
  header I NAME [VALUE]     edit header row I      (add-header, rm-header I)
  param I NAME [VALUE]      edit query param row I (add-param, rm-param I)
  tab body|params|headers   request editor tab
  rtab body|headers         response viewer tab
  add | rm N                add/remove a Home request
  add-col | rm-col N        add/remove a collection
  add-to N | rm-from C R    add/remove a request in a collection
  toggle N                  collapse/expand collection N
  send                      send the selected request
  show | help | quit
"""

_PAGES = {"home": Page.HOME, "collections": Page.COLLECTIONS}
_REQUEST_TABS = {"body": RequestTab.BODY, "params": RequestTab.PARAMS, "headers": RequestTab.HEADERS}
_RESPONSE_TABS = {"body": ResponseTab.BODY, "headers": ResponseTab.HEADERS}


class CommandError(ValueError):
    """Input line could not be turned into an action."""


@dataclass(frozen=True)
class CommandBinding:
    """Mapping from one or more command names to an argument parser.

    ``raw`` parsers receive the unsplit remainder of the line as their only argument.
    """

    names: tuple[str, ...]
    parse: Callable[[list[str]], Action]
    raw: bool = False


class CommandRegistry:
    """Small name-to-parser dispatch table."""

    def __init__(self) -> None:
        self._bindings: dict[str, CommandBinding] = {}

    def register_bindings(self, *bindings: CommandBinding) -> CommandRegistry:
        for binding in bindings:
            for name in binding.names:
                self._bindings[name.lower()] = binding
        return self

    def parse(self, line: str) -> Action | None:
        """Parse ``line`` into an action; ``None`` for unknown commands."""
        name, _, rest = line.strip().partition(" ")
        binding = self._bindings.get(name.lower())
        if binding is None:
            return None
        if binding.raw:
            return binding.parse([rest.strip()])
        try:
            args = shlex.split(rest)
        except ValueError as exc:
            raise CommandError(str(exc)) from exc
        return binding.parse(args)


def _index(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise CommandError(f"not an index: {raw!r}") from exc
    if value < 0:
        raise CommandError(f"index must be >= 0: {value}")
    return value


def _arity(args: list[str], *counts: int) -> None:
    if len(args) not in counts:
        expected = " or ".join(str(count) for count in counts)
        raise CommandError(f"expected {expected} argument(s), got {len(args)}")


def _choice(raw: str, choices: dict):
    try:
        return choices[raw.lower()]
    except KeyError as exc:
        raise CommandError(f"expected one of {', '.join(choices)}; got {raw!r}") from exc


class Shell:
    """Interactive loop reading commands and printing redraws."""

    def __init__(
        self,
        store: Store,
        read_line: Callable[[str], str] = input,
        write: Callable[[str], object] = sys.stdout.write,
        prompt: str = "bolt> ",
    ) -> None:
        self._store = store
        self._read_line = read_line
        self._write = write
        self._prompt = prompt
        self._write_lock = threading.Lock()
        self.registry = CommandRegistry().register_bindings(
            CommandBinding(("page",), self._page),
            CommandBinding(("select", "sel"), self._select),
            CommandBinding(("url",), self._url, raw=True),
            CommandBinding(("body",), self._body, raw=True),
            CommandBinding(("method",), self._method),
            CommandBinding(("header",), self._header),
            CommandBinding(("param",), self._param),
            CommandBinding(("add-header",), self._no_args(actions.AddHeader)),
            CommandBinding(("rm-header",), self._remove_header),
            CommandBinding(("add-param",), self._no_args(actions.AddParam)),
            CommandBinding(("rm-param",), self._remove_param),
            CommandBinding(("tab",), self._request_tab),
            CommandBinding(("rtab",), self._response_tab),
            CommandBinding(("add",), self._no_args(actions.AddRequest)),
            CommandBinding(("rm",), self._one_index(actions.RemoveRequest)),
            CommandBinding(("add-col",), self._no_args(actions.AddCollection)),
            CommandBinding(("rm-col",), self._one_index(actions.RemoveCollection)),
            CommandBinding(("add-to",), self._one_index(actions.AddToCollection)),
            CommandBinding(("rm-from",), self._remove_from),
            CommandBinding(("toggle",), self._one_index(actions.ToggleCollapsed)),
            CommandBinding(("send",), self._no_args(actions.SendPressed)),
            CommandBinding(("help", "?"), self._no_args(actions.HelpPressed)),
        )

    # Output

    def write(self, text: str) -> None:
        with self._write_lock:
            self._write(text)

    def redraw(self, state: AppState) -> None:
        self.write(render_view(state))

    # Parsers

    @staticmethod
    def _no_args(factory: Callable[[], Action]) -> Callable[[list[str]], Action]:
        def parse(args: list[str]) -> Action:
            _arity(args, 0)
            return factory()

        return parse

    @staticmethod
    def _one_index(factory: Callable[[int], Action]) -> Callable[[list[str]], Action]:
        def parse(args: list[str]) -> Action:
            _arity(args, 1)
            return factory(_index(args[0]))

        return parse

    def _page(self, args: list[str]) -> Action:
        _arity(args, 1)
        return actions.SwitchPage(_choice(args[0], _PAGES))

    def _select(self, args: list[str]) -> Action:
        _arity(args, 1, 2)
        if len(args) == 1:
            return actions.SelectRequest(_index(args[0]))
        return actions.SelectFromCollection(_index(args[0]), _index(args[1]))

    def _url(self, args: list[str]) -> Action:
        return actions.UrlChanged(args[0])

    def _body(self, args: list[str]) -> Action:
        return actions.BodyChanged(args[0])

    def _method(self, args: list[str]) -> Action:
        _arity(args, 1)
        try:
            return actions.MethodChanged(HttpMethod.parse(args[0]))
        except ValueError as exc:
            raise CommandError(f"unknown method: {args[0]!r}") from exc

    def _header(self, args: list[str]) -> Action:
        _arity(args, 2, 3)
        value = args[2] if len(args) == 3 else ""
        return actions.HeaderChanged(_index(args[0]), args[1], value)

    def _param(self, args: list[str]) -> Action:
        _arity(args, 2, 3)
        value = args[2] if len(args) == 3 else ""
        return actions.ParamChanged(_index(args[0]), args[1], value)

    def _remove_header(self, args: list[str]) -> Action:
        _arity(args, 1)
        if len(resolve_request(self._store.snapshot()).headers) <= 1:
            raise CommandError("cannot remove the last header row")
        return actions.RemoveHeader(_index(args[0]))

    def _remove_param(self, args: list[str]) -> Action:
        _arity(args, 1)
        if len(resolve_request(self._store.snapshot()).params) <= 1:
            raise CommandError("cannot remove the last param row")
        return actions.RemoveParam(_index(args[0]))

    def _request_tab(self, args: list[str]) -> Action:
        _arity(args, 1)
        return actions.SelectRequestTab(_choice(args[0], _REQUEST_TABS))

    def _response_tab(self, args: list[str]) -> Action:
        _arity(args, 1)
        return actions.SelectResponseTab(_choice(args[0], _RESPONSE_TABS))

    def _remove_from(self, args: list[str]) -> Action:
        _arity(args, 2)
        return actions.RemoveFromCollection(_index(args[0]), _index(args[1]))

    # Loop

    def handle_line(self, line: str) -> bool:
        """Run one command line; returns ``False`` when the shell should exit."""
        command = line.strip()
        if not command:
            return True
        lowered = command.lower()
        if lowered in {"quit", "exit", "q"}:
            return False
        if lowered == "show":
            self.redraw(self._store.snapshot())
            return True

        try:
            action = self.registry.parse(command)
            if action is None:
                self.write(f"unknown command: {command.split()[0]!r} (try 'help')\n")
                return True
            if isinstance(action, actions.HelpPressed):
                self.write(HELP_TEXT)
            self._store.dispatch(action)
        except (CommandError, BoltError) as exc:
            logger.debug("command %r rejected: %s", command, exc)
            self.write(f"error: {exc}\n")
        return True

    def run(self) -> None:
        """Read commands until EOF or ``quit``."""
        unsubscribe = self._store.subscribe(self.redraw)
        try:
            self.redraw(self._store.snapshot())
            while True:
                try:
                    line = self._read_line(self._prompt)
                except EOFError:
                    self.write("\n")
                    return
                if not self.handle_line(line):
                    return
        finally:
            unsubscribe()


__all__ = ["CommandBinding", "CommandError", "CommandRegistry", "HELP_TEXT", "Shell"]
