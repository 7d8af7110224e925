"""Workspace, configuration and logging plumbing shared by the commands."""

from __future__ import annotations

from .config import TomlConfigError, load_toml, overlay, write_template
from .logging import JsonLogFormatter, configure_logger
from .workspace import Workspace, WorkspaceError, ensure_workspace

__all__ = [
    "JsonLogFormatter",
    "TomlConfigError",
    "Workspace",
    "WorkspaceError",
    "configure_logger",
    "ensure_workspace",
    "load_toml",
    "overlay",
    "write_template",
]
