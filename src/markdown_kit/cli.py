"""The ``mdkit`` command: a thin dispatcher over the markdown-kit tools.

Each subcommand lives in a module exposing ``main(argv) -> int``. The module
is imported only when its command runs, so ``mdkit init`` never pays for
the conversion stack.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from importlib import import_module, metadata
from typing import Mapping, Optional, Sequence

DISTRIBUTION = "markdown-kit"


@dataclass(frozen=True)
class Command:
    name: str
    summary: str
    module: str

    def run(self, argv: Sequence[str]) -> int:
        entry = getattr(import_module(self.module), "main")
        try:
            result = entry(list(argv))
        except SystemExit as exc:
            return _exit_status(exc)
        return result if isinstance(result, int) else 0


COMMANDS: Mapping[str, Command] = {
    command.name: command
    for command in (
        Command(
            "init",
            "Create the workspace and seed config/render.toml.",
            "markdown_kit.workspace.cli",
        ),
        Command(
            "render",
            "Convert one JSON, HTML, XML, PDF or URL input to Markdown.",
            "markdown_kit.render.cli",
        ),
    )
}


def command_table() -> str:
    width = max(len(name) for name in COMMANDS)
    rows = [
        f"  {command.name.ljust(width)}  {command.summary}"
        for command in COMMANDS.values()
    ]
    return "\n".join(["Available commands:", *rows])


def usage() -> str:
    return (
        "Usage: mdkit <command> [args...]\n"
        "Run `mdkit help <command>` for details.\n\n" + command_table()
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print(usage())
        return 2

    name, rest = args[0], args[1:]
    if name in ("-h", "--help"):
        print(usage())
        return 0
    if name in ("-V", "--version", "version"):
        print(_version())
        return 0
    if name == "list":
        print(command_table())
        return 0
    if name == "help":
        return _help(rest)

    command = COMMANDS.get(name)
    if command is None:
        return _unknown(name)
    return command.run(rest)


def _help(topics: Sequence[str]) -> int:
    if not topics:
        print(usage())
        return 0
    command = COMMANDS.get(topics[0])
    if command is None:
        return _unknown(topics[0])
    print(f"{command.name}: {command.summary}")
    print(f"Run `mdkit {command.name} --help` for its options.")
    return 0


def _unknown(name: str) -> int:
    print(f"Unknown command '{name}'.", file=sys.stderr)
    print(command_table(), file=sys.stderr)
    return 2


def _version() -> str:
    try:
        return metadata.version(DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return "unknown"


def _exit_status(exc: SystemExit) -> int:
    if exc.code is None:
        return 0
    if isinstance(exc.code, int):
        return exc.code
    print(exc.code, file=sys.stderr)
    return 1


if __name__ == "__main__":  # pragma: no cover - manual invocation guard
    raise SystemExit(main())
