"""CLI command handlers for swayctl.

Exit codes: 0 success, 1 command failure, 2 socket/launch/config error.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from .. import __version__
from ..config import ClientConfig
from ..core.client import ControlClient
from ..core.protocol import IGNORE
from ..errors import CommandError, SwayctlError
from ..logging_config import setup_logging, timed
from .formatters import console, format_tree, format_window_list


EXIT_COMMAND_FAILED = 1
EXIT_ENVIRONMENT_ERROR = 2


# ANSI color codes for output
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    BLUE = "\033[34m"


def print_success(message: str) -> None:
    """Print success message in green."""
    print(f"{Colors.GREEN}✓{Colors.RESET} {message}")


def print_error(message: str) -> None:
    """Print error message in red."""
    print(f"{Colors.RED}✗{Colors.RESET} {message}", file=sys.stderr)


def print_warning(message: str) -> None:
    """Print warning message in yellow."""
    print(f"{Colors.YELLOW}⚠{Colors.RESET} {message}", file=sys.stderr)


def print_error_with_remediation(error: str, remediation: str) -> None:
    """Print error with remediation steps."""
    print(f"{Colors.RED}✗ Error:{Colors.RESET} {error}", file=sys.stderr)
    print(f"{Colors.BLUE}  Remediation:{Colors.RESET} {remediation}", file=sys.stderr)


def cmd_run(client: ControlClient, args: argparse.Namespace) -> int:
    """Send commands; several MESSAGE arguments are joined with ';'."""
    failures = []

    def collect(report: str) -> bool:
        failures.append(report)
        return False

    on_error = IGNORE if args.ignore_errors else collect
    result = client.run_commands(args.message, on_error=on_error)

    if result is True:
        print_success("Command succeeded")
        return 0

    for report in failures:
        print_error(report)
    if args.ignore_errors:
        print_warning("Some commands failed (ignored)")
        return 0
    return EXIT_COMMAND_FAILED


def cmd_tree(client: ControlClient, args: argparse.Namespace) -> int:
    """Print the window/workspace tree."""
    root = client.get_tree()
    if args.json:
        print(json.dumps(root.model_dump(mode="json", by_alias=True), indent=2))
    else:
        console.print(format_tree(root))
    return 0


def cmd_windows(client: ControlClient, args: argparse.Namespace) -> int:
    """List windows, optionally filtered."""
    windows = client.list_windows(
        visible_only=args.visible,
        focused_only=args.focused,
        owned_only=args.owned,
        pid=args.pid,
    )
    if args.json:
        print(json.dumps([w.model_dump(mode="json", by_alias=True) for w in windows], indent=2))
    else:
        console.print(format_window_list(windows))
    return 0


def cmd_version(client: ControlClient, args: argparse.Namespace) -> int:
    """Print the window manager version."""
    major, minor, patch = client.get_version()
    if args.json:
        print(json.dumps({"major": major, "minor": minor, "patch": patch}))
    else:
        print(f"{major}.{minor}.{patch}")
    return 0


def cmd_socket(client: ControlClient, args: argparse.Namespace) -> int:
    """Print the control socket that would be used."""
    print(client.socket_path())
    return 0


COMMAND_HANDLERS = {
    "run": cmd_run,
    "tree": cmd_tree,
    "windows": cmd_windows,
    "version": cmd_version,
    "socket": cmd_socket,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="swayctl",
        description="Send commands to sway and inspect its window tree",
    )
    parser.add_argument("--version", action="version", version=f"swayctl {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging (INFO level)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging (DEBUG level)")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.json")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parser_run = subparsers.add_parser("run", help="Run one or more commands")
    parser_run.add_argument("message", nargs="+", help="Command(s); several are joined with ';'")
    parser_run.add_argument("--ignore-errors", action="store_true", help="Exit 0 even if a command fails")

    parser_tree = subparsers.add_parser("tree", help="Show the window/workspace tree")
    parser_tree.add_argument("--json", action="store_true", help="Output the tree as JSON, keyed like the tree query")

    parser_windows = subparsers.add_parser("windows", help="List windows")
    parser_windows.add_argument("--visible", action="store_true", help="Only visible windows")
    parser_windows.add_argument("--focused", action="store_true", help="Only the focused window")
    parser_windows.add_argument("--owned", action="store_true", help="Only windows owned by --pid")
    parser_windows.add_argument("--pid", type=int, default=None, help="Owner PID for --owned (default: this process)")
    parser_windows.add_argument("--json", action="store_true", help="Output JSON")

    parser_version = subparsers.add_parser("version", help="Show the window manager version")
    parser_version.add_argument("--json", action="store_true", help="Output JSON")

    subparsers.add_parser("socket", help="Show the control socket path")

    return parser


def cli_main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # No command = show help
    if not args.command:
        parser.print_help()
        return 0

    logger = setup_logging(verbose=args.verbose, debug=args.debug)
    handler = COMMAND_HANDLERS[args.command]

    try:
        config = ClientConfig.load(args.config)
        if args.command != "socket":
            config = config.resolve_binaries()
        client = ControlClient(config)
        with timed(f"swayctl {args.command}", logger):
            return handler(client, args)
    except CommandError as e:
        print_error(e.report)
        return EXIT_COMMAND_FAILED
    except SwayctlError as e:
        if e.suggestion:
            print_error_with_remediation(e.message, e.suggestion)
        else:
            print_error(e.message)
        return EXIT_ENVIRONMENT_ERROR


if __name__ == "__main__":
    sys.exit(cli_main())
