"""``mdkit init``: create the workspace and seed the render configuration."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from markdown_kit.core.workspace import (
    Workspace,
    WorkspaceError,
    ensure_workspace,
)
from markdown_kit.render.config import (
    CONFIG_FILENAME,
    RenderConfigError,
    write_config_template,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdkit init",
        description=(
            "Create the markdown-kit workspace (config/ and logs/) and write "
            "a commented config/render.toml."
        ),
    )
    parser.add_argument(
        "--path",
        type=Path,
        help=(
            "Workspace root (default: $MDKIT_DATA_HOME or "
            "~/.markdown-kit-data)."
        ),
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Replace an existing render.toml with the template.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Print nothing on success.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(list(argv) if argv is not None else None)

    try:
        workspace = ensure_workspace(path=args.path)
        config_path = workspace.config_dir / CONFIG_FILENAME
        seeded = args.force or not config_path.exists()
        if seeded:
            write_config_template(workspace.config_dir, force=True)
    except (WorkspaceError, RenderConfigError) as exc:
        sys.stderr.write(f"{exc}\n")
        return 1

    if not args.quiet:
        sys.stdout.write(_report(workspace, config_path, seeded))
    return 0


def _report(workspace: Workspace, config_path: Path, seeded: bool) -> str:
    def state(name: str) -> str:
        return "created" if name in workspace.created else "exists"

    lines = [f"Workspace ready at {workspace.root} ({state('root')})"]
    for name, directory in workspace.directories():
        lines.append(f"  {name:<7} {directory} ({state(name)})")
    lines.append(
        f"  {'render':<7} {config_path} ({'written' if seeded else 'kept'})"
    )
    return "\n".join(lines) + "\n"


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
