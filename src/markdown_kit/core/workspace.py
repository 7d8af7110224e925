"""Locate and create the directory markdown-kit keeps its state in.

The workspace holds the render configuration (``config/``) and the JSON log
files (``logs/``). Its root is the ``path`` a command was given, then
``$MDKIT_DATA_HOME``, then ``~/.markdown-kit-data``.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

WORKSPACE_ENV = "MDKIT_DATA_HOME"
DEFAULT_ROOT = Path("~/.markdown-kit-data")


class WorkspaceError(RuntimeError):
    """Raised when the workspace cannot be created or is not a directory."""


@dataclass(frozen=True)
class Workspace:
    root: Path
    # Names ("root", "config", "logs") of directories made by this call.
    created: frozenset[str] = frozenset()

    @property
    def config_dir(self) -> Path:
        return self.root / "config"

    @property
    def logs_dir(self) -> Path:
        return self.root / "logs"

    def directories(self) -> tuple[tuple[str, Path], ...]:
        return (("config", self.config_dir), ("logs", self.logs_dir))


def locate_workspace(
    path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> tuple[Path, bool]:
    """Return the workspace root and whether it was chosen explicitly."""

    env_map = os.environ if env is None else env
    if path is not None:
        return _absolute(path), True
    configured = (env_map.get(WORKSPACE_ENV) or "").strip()
    if configured:
        return _absolute(Path(configured)), True
    return _absolute(DEFAULT_ROOT), False


def ensure_workspace(
    *,
    path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Workspace:
    """Create the workspace directories that are missing.

    An explicitly chosen root must be writable. The implicit default moves
    under the system temp dir when the home directory is read-only.
    """

    root, explicit = locate_workspace(path, env)
    try:
        return _create(root)
    except PermissionError as exc:
        if explicit:
            raise WorkspaceError(f"Workspace is not writable: {root}") from exc
        fallback = fallback_root()
    try:
        return _create(fallback)
    except PermissionError as exc:
        raise WorkspaceError(
            f"Unable to prepare workspace at {root} or {fallback}"
        ) from exc


def fallback_root() -> Path:
    return Path(tempfile.gettempdir()) / "markdown-kit-data"


def _create(root: Path) -> Workspace:
    if root.exists() and not root.is_dir():
        raise WorkspaceError(f"Workspace path is not a directory: {root}")
    created = set()
    for name, directory in (("root", root), *Workspace(root).directories()):
        if _make_private_dir(directory):
            created.add(name)
    return Workspace(root=root, created=frozenset(created))


def _make_private_dir(directory: Path) -> bool:
    if directory.is_dir():
        return False
    try:
        directory.mkdir(mode=0o700, parents=True)
    except FileExistsError as exc:
        raise WorkspaceError(
            f"Expected a directory but found a file: {directory}"
        ) from exc
    return True


def _absolute(path: Path) -> Path:
    return path.expanduser().absolute()


__all__ = [
    "DEFAULT_ROOT",
    "WORKSPACE_ENV",
    "Workspace",
    "WorkspaceError",
    "ensure_workspace",
    "fallback_root",
    "locate_workspace",
]
