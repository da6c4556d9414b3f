"""Command line interface for the thorn task runner."""

from __future__ import annotations

import argparse
import sys
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from .config import Settings
from .errors import ConfigurationError, ThornError
from .logging_setup import setup_logging
from .prompt import StaticPrompter
from .runner import Runner
from .tasks.base import build_parser
from .tasks.namespace import TaskGroup
from .util import constant_to_path

COMMANDS: Dict[str, str] = {
    "install": "install a task file into your system tasks, optionally named for future updates",
    "uninstall": "uninstall a named task module",
    "update": "update a task file from its original location",
    "installed": "list the installed modules and their tasks",
    "list": "list the available tasks (--substring means SEARCH can be anywhere in the name)",
    "help": "describe the available commands or one specific task",
}

SHORTCUTS: Dict[str, str] = {"-T": "list", "-i": "install", "-u": "update"}


def _build_install_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="thorn install", description=COMMANDS["install"])
    parser.add_argument("name", help="Path, directory or URL of the task file")
    parser.add_argument("--as", dest="as_", help="Name to register the module under")
    parser.add_argument(
        "--relative",
        action="store_true",
        help="Remember the location exactly as given instead of as an absolute path",
    )
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Install without showing the contents or asking for a name",
    )
    return parser


def _build_alias_parser(command: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=f"thorn {command}", description=COMMANDS[command])
    parser.add_argument("name", help="Name of the installed module")
    return parser


def _build_installed_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="thorn installed", description=COMMANDS["installed"])
    parser.add_argument(
        "--internal",
        action="store_true",
        help="List the built-in commands as well",
    )
    return parser


def _build_list_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="thorn list", description=COMMANDS["list"])
    parser.add_argument("search", nargs="?", default="", help="Only list tasks under this path")
    parser.add_argument("--substring", action="store_true", help="Match SEARCH anywhere in the path")
    parser.add_argument("--group", default="standard", help="Only list groups in this listing group")
    parser.add_argument("--all", dest="all_groups", action="store_true", help="List groups of every listing group")
    return parser


def _build_help_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="thorn help", description=COMMANDS["help"])
    parser.add_argument("task", nargs="?", help="Task to describe")
    return parser


def main(argv: Optional[List[str]] = None, *, runner: Optional[Runner] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    if runner is None:
        try:
            settings = Settings.from_env()
        except ConfigurationError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2
        runner = Runner(settings)
    setup_logging(runner.settings.log_level)

    if not argv:
        argv = ["help"]
    command = SHORTCUTS.get(argv[0], argv[0])
    handler = _HANDLERS.get(command)

    try:
        if handler is not None:
            return handler(runner, argv[1:])
        runner.invoke(command, argv[1:])
    except ThornError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


def _handle_install(runner: Runner, argv: Iterable[str]) -> int:
    args = _build_install_parser().parse_args(list(argv))
    if args.yes:
        runner.lifecycle.prompter = StaticPrompter()
    stored_id = runner.install(args.name, as_=args.as_, relative=args.relative)
    return 0 if stored_id is not None else 1


def _handle_uninstall(runner: Runner, argv: Iterable[str]) -> int:
    args = _build_alias_parser("uninstall").parse_args(list(argv))
    runner.uninstall(args.name)
    return 0


def _handle_update(runner: Runner, argv: Iterable[str]) -> int:
    args = _build_alias_parser("update").parse_args(list(argv))
    runner.update(args.name)
    return 0


def _handle_installed(runner: Runner, argv: Iterable[str]) -> int:
    args = _build_installed_parser().parse_args(list(argv))
    groups = runner.installed_groups()
    if args.internal:
        _print_commands()
    if not groups:
        raise ThornError("No tasks available")
    _print_modules(runner)
    _print_groups(groups)
    return 0


def _handle_list(runner: Runner, argv: Iterable[str]) -> int:
    args = _build_list_parser().parse_args(list(argv))
    groups = runner.list_groups(
        args.search,
        substring=args.substring,
        group=args.group,
        all_groups=args.all_groups,
    )
    if not groups:
        raise ThornError("No tasks available")
    _print_groups(groups)
    return 0


def _handle_help(runner: Runner, argv: Iterable[str]) -> int:
    args = _build_help_parser().parse_args(list(argv))
    if not args.task or args.task in COMMANDS:
        _print_commands()
        return 0

    task = runner.find_task(args.task)
    print(build_parser(task.identifier, task.handler).format_help().rstrip())
    return 0


_HANDLERS: Dict[str, Callable[[Runner, Iterable[str]], int]] = {
    "install": _handle_install,
    "uninstall": _handle_uninstall,
    "update": _handle_update,
    "installed": _handle_installed,
    "list": _handle_list,
    "help": _handle_help,
}


def _print_commands() -> None:
    print("Usage: thorn COMMAND [ARGS] | thorn TASK [ARGS]")
    print()
    print("Commands:")
    width = max(len(name) for name in COMMANDS) + 2
    for name, summary in COMMANDS.items():
        print(f"  {name.ljust(width)}{summary}")
    shortcuts = ", ".join(f"{flag} ({name})" for flag, name in SHORTCUTS.items())
    print()
    print(f"Shortcuts: {shortcuts}")
    print()


def _print_modules(runner: Runner) -> None:
    modules = runner.modules()
    if not modules:
        return

    modules_label = "Modules"
    namespaces_label = "Namespaces"
    width = max(max(len(entry.alias) for entry in modules) + 4, len(modules_label) + 1)

    print(f"{modules_label.ljust(width)}{namespaces_label}")
    print(f"{('-' * len(modules_label)).ljust(width)}{'-' * len(namespaces_label)}")
    for entry in modules:
        paths = ", ".join(constant_to_path(constant) for constant in entry.namespace_ids)
        print(f"{entry.alias.ljust(width)}{paths}")
    print()


def _print_groups(groups: Sequence[TaskGroup]) -> None:
    tasks = [task for group in groups for task in group.tasks.values()]
    width = max((len(task.usage) for task in tasks), default=0) + 4

    for group in groups:
        if not group.tasks:
            continue
        print(group.path)
        print("-" * len(group.path))
        for task in group.tasks.values():
            print(f"{task.usage.ljust(width)}{task.summary}".rstrip())
        print()


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
