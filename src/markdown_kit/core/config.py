"""Reading and seeding the TOML files markdown-kit is configured with."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Mapping, MutableMapping


class TomlConfigError(RuntimeError):
    """Raised when a TOML config cannot be read, merged or written."""


def load_toml(path: Path) -> dict[str, Any]:
    """Parse ``path``; every failure surfaces as :class:`TomlConfigError`."""

    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError as exc:
        raise TomlConfigError(f"Config file not found: {path}") from exc
    except IsADirectoryError as exc:
        raise TomlConfigError(f"Config path is a directory: {path}") from exc
    except UnicodeDecodeError as exc:
        raise TomlConfigError(f"Config file is not UTF-8: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise TomlConfigError(f"Invalid TOML in {path}: {exc}") from exc


def overlay(
    defaults: MutableMapping[str, Any],
    values: Mapping[str, Any],
    *,
    section: str = "",
) -> MutableMapping[str, Any]:
    """Copy ``values`` onto ``defaults`` in place, table by table.

    A key that ``defaults`` does not know is almost always a typo, so it is
    reported with its dotted name instead of being ignored.
    """

    for key, value in values.items():
        name = f"{section}.{key}" if section else key
        if key not in defaults:
            raise TomlConfigError(f"Unknown configuration key '{name}'.")
        if isinstance(defaults[key], MutableMapping):
            if not isinstance(value, Mapping):
                raise TomlConfigError(
                    f"'{name}' must be a table, not {type(value).__name__}."
                )
            overlay(defaults[key], value, section=name)
        else:
            defaults[key] = value
    return defaults


def write_template(path: Path, text: str, *, force: bool = False) -> Path:
    """Write ``text`` to ``path`` readable by the owner only.

    An existing file is left alone unless ``force`` is set.
    """

    if path.exists() and not force:
        raise TomlConfigError(f"Config already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    path.chmod(0o600)
    return path


__all__ = ["TomlConfigError", "load_toml", "overlay", "write_template"]
