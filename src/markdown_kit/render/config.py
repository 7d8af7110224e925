"""Settings for ``mdkit render``.

Each value comes from the first source that sets it: command-line flags,
``MDKIT_RENDER_*`` environment variables, the TOML file, then the defaults
in :func:`_defaults`. The file is ``--config``, else ``$MDKIT_RENDER_CONFIG``,
else ``<workspace>/config/render.toml`` when it exists.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Mapping, Optional

from markdown_kit.core import config as core_config

from .payload import (
    DEFAULT_MAX_FILE_BYTES,
    DEFAULT_MAX_JSON_DEPTH,
    DEFAULT_MAX_TEXT_CHARS,
    InputLimits,
)

CONFIG_FILENAME = "render.toml"
CONFIG_ENV = "MDKIT_RENDER_CONFIG"
ENV_PREFIX = "MDKIT_RENDER_"

DEFAULT_FETCH_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "INFO"


class RenderConfigError(RuntimeError):
    """Raised when the render configuration cannot be read or is invalid."""


@dataclass(frozen=True)
class RenderConfig:
    limits: InputLimits = field(default_factory=InputLimits)
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL


@dataclass(frozen=True)
class ConfigOverrides:
    """Values given on the command line; ``None`` means not given."""

    fetch_timeout: Optional[float] = None
    log_level: Optional[str] = None


@dataclass(frozen=True)
class LoadedConfig:
    config: RenderConfig
    # The TOML file that was read, if any.
    source: Optional[Path]


def load_config(
    *,
    config_dir: Path,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
) -> LoadedConfig:
    """Resolve the render settings for one invocation.

    A file named by ``config_path`` or ``$MDKIT_RENDER_CONFIG`` must exist;
    the workspace default is optional.
    """

    env_map = os.environ if env is None else env
    overrides = overrides or ConfigOverrides()

    table = _defaults()
    path, required = _config_location(config_dir, config_path, env_map)
    source: Optional[Path] = None
    if required or path.exists():
        try:
            core_config.overlay(table, core_config.load_toml(path))
        except core_config.TomlConfigError as exc:
            raise RenderConfigError(str(exc)) from exc
        source = path

    limits = table["limits"]
    config = RenderConfig(
        limits=InputLimits(
            max_text_chars=_positive_int(
                _env_number(env_map, "MAX_TEXT_CHARS", int),
                limits["max_text_chars"],
                key="limits.max_text_chars",
            ),
            max_file_bytes=_positive_int(
                _env_number(env_map, "MAX_FILE_BYTES", int),
                limits["max_file_bytes"],
                key="limits.max_file_bytes",
            ),
            max_json_depth=_positive_int(
                _env_number(env_map, "MAX_JSON_DEPTH", int),
                limits["max_json_depth"],
                key="limits.max_json_depth",
            ),
        ),
        fetch_timeout=_positive_float(
            overrides.fetch_timeout,
            _env_number(env_map, "FETCH_TIMEOUT", float),
            table["fetch"]["timeout_seconds"],
            key="fetch.timeout_seconds",
        ),
        log_level=_log_level(
            overrides.log_level,
            _env_text(env_map, "LOG_LEVEL"),
            table["logging"]["level"],
        ),
    )
    return LoadedConfig(config=config, source=source)


def config_template() -> str:
    """Return the commented TOML file ``mdkit init`` seeds."""

    resource = resources.files(__package__).joinpath("template.toml")
    return resource.read_text(encoding="utf-8")


def write_config_template(config_dir: Path, *, force: bool = False) -> Path:
    try:
        return core_config.write_template(
            config_dir / CONFIG_FILENAME, config_template(), force=force
        )
    except core_config.TomlConfigError as exc:
        raise RenderConfigError(str(exc)) from exc


def _defaults() -> dict[str, dict[str, Any]]:
    return {
        "limits": {
            "max_text_chars": DEFAULT_MAX_TEXT_CHARS,
            "max_file_bytes": DEFAULT_MAX_FILE_BYTES,
            "max_json_depth": DEFAULT_MAX_JSON_DEPTH,
        },
        "fetch": {"timeout_seconds": DEFAULT_FETCH_TIMEOUT},
        "logging": {"level": DEFAULT_LOG_LEVEL},
    }


def _config_location(
    config_dir: Path,
    config_path: Optional[Path],
    env_map: Mapping[str, str],
) -> tuple[Path, bool]:
    if config_path is not None:
        return config_path.expanduser(), True
    configured = (env_map.get(CONFIG_ENV) or "").strip()
    if configured:
        return Path(configured).expanduser(), True
    return config_dir / CONFIG_FILENAME, False


def _first(*candidates: Any) -> Any:
    return next((value for value in candidates if value is not None), None)


def _positive_int(*candidates: Any, key: str) -> int:
    value = _first(*candidates)
    # bool is an int subclass; ``true`` is not a size.
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise RenderConfigError(f"{key} must be a positive integer.")
    return value


def _positive_float(*candidates: Any, key: str) -> float:
    value = _first(*candidates)
    if (
        isinstance(value, bool)
        or not isinstance(value, (int, float))
        or not value > 0
    ):
        raise RenderConfigError(f"{key} must be a positive number.")
    return float(value)


def _log_level(*candidates: Any) -> str:
    value = _first(*candidates)
    if not isinstance(value, str) or not value.strip():
        raise RenderConfigError("logging.level must be a non-empty string.")
    return value.strip().upper()


def _env_text(env_map: Mapping[str, str], key: str) -> Optional[str]:
    value = (env_map.get(ENV_PREFIX + key) or "").strip()
    return value or None


def _env_number(
    env_map: Mapping[str, str], key: str, kind: type
) -> Optional[Any]:
    raw = _env_text(env_map, key)
    if raw is None:
        return None
    try:
        return kind(raw)
    except ValueError as exc:
        raise RenderConfigError(
            f"{ENV_PREFIX}{key} must be a number, got '{raw}'."
        ) from exc


__all__ = [
    "CONFIG_ENV",
    "CONFIG_FILENAME",
    "ConfigOverrides",
    "LoadedConfig",
    "RenderConfig",
    "RenderConfigError",
    "config_template",
    "load_config",
    "write_config_template",
]
