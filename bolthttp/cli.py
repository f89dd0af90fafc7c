"""Command-line front door for bolthttp.

Parses options, configures logging, and recovers the state file.
Then runs the interactive shell or a one-shot command.
"""

from __future__ import annotations

import argparse
import logging
import sys
import threading
from dataclasses import replace
from pathlib import Path

from . import config, persistence
from .actions import SendPressed
from .app import BoltRuntime, load_startup_state, start_runtime
from .config import LOG_LEVELS, SETTING_KEYS, Settings
from .errors import BoltError
from .render import render_view
from .shell import Shell

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
# Extra time beyond the request timeout for the listener to deliver the arrival.
SEND_WAIT_MARGIN_SECONDS = 2.0


def _positive_float(value: str) -> float:
    """argparse type for positive seconds."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be > 0")
    return parsed


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bolthttp",
        description="Compose, organize, and send HTTP requests from the terminal.",
    )
    parser.add_argument("--state", type=Path, default=None, help="State file path (default: per-user data dir).")
    parser.add_argument("--style", default=None, help="Pygments style for JSON responses.")
    parser.add_argument("--no-color", action="store_true", help="Disable response highlighting.")
    parser.add_argument("--timeout", type=_positive_float, default=None, help="Per-request timeout in seconds.")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default=None, help="Logging level.")

    commands = parser.add_subparsers(dest="command")
    commands.add_parser("shell", help="Interactive command shell (default).")
    commands.add_parser("show", help="Print the current view and exit.")
    commands.add_parser("send", help="Send the selected request and print the response.")
    commands.add_parser("reset", help="Replace the state file with the default seed.")
    config_parser = commands.add_parser("config", help="Show or change saved preferences.")
    config_parser.add_argument("key", nargs="?", choices=SETTING_KEYS)
    config_parser.add_argument("value", nargs="?")
    return parser


def _resolve_settings(args: argparse.Namespace) -> Settings:
    """Layer CLI overrides on top of saved preferences."""
    settings = config.load_settings()
    overrides: dict[str, object] = {}
    if args.style is not None:
        overrides["style"] = args.style
    if args.no_color:
        overrides["no_color"] = True
    if args.timeout is not None:
        overrides["request_timeout"] = args.timeout
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    return replace(settings, **overrides)


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level), format=LOG_FORMAT, stream=sys.stderr)


def _run_config_command(args: argparse.Namespace, settings: Settings) -> None:
    if args.key is None:
        for key in SETTING_KEYS:
            sys.stdout.write(f"{key} = {getattr(settings, key)}\n")
        return
    if args.value is None:
        sys.stdout.write(f"{args.key} = {getattr(settings, args.key)}\n")
        return
    try:
        stored = config.save_setting(args.key, args.value)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc
    sys.stdout.write(f"{args.key} = {stored}\n")


def send_and_wait(runtime: BoltRuntime, timeout: float) -> bool:
    """Send the selected request and block until its arrival is applied."""
    arrived = threading.Event()
    unsubscribe = runtime.store.subscribe(lambda _state: arrived.set())
    try:
        runtime.store.dispatch(SendPressed())
        return arrived.wait(timeout)
    finally:
        unsubscribe()


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run the selected command.

    ``argv`` is primarily for tests; when omitted ``sys.argv`` is used.
    """
    args = _build_parser().parse_args(argv)
    settings = _resolve_settings(args)
    _configure_logging(settings.log_level)
    state_path = args.state if args.state is not None else persistence.STATE_PATH
    command = args.command or "shell"

    if command == "config":
        _run_config_command(args, settings)
        return
    if command == "reset":
        persistence.reset_state_file(state_path)
        sys.stdout.write(f"state reset: {state_path}\n")
        return

    state = load_startup_state(state_path)
    if command == "show":
        sys.stdout.write(render_view(state))
        return

    runtime = start_runtime(state, settings, state_path)
    try:
        if command == "send":
            try:
                arrived = send_and_wait(runtime, settings.request_timeout + SEND_WAIT_MARGIN_SECONDS)
            except BoltError as exc:
                raise SystemExit(f"cannot send: {exc}") from exc
            if not arrived:
                raise SystemExit("no response received")
            sys.stdout.write(render_view(runtime.store.snapshot()))
            return
        Shell(runtime.store).run()
    finally:
        runtime.stop()


if __name__ == "__main__":
    main()
