"""Structured log files for markdown-kit commands.

A command logs to ``<workspace>/logs/<command>.log`` as one JSON object per
line. With ``verbose`` the records are echoed to stderr as well; stdout is
never touched because it carries the converted Markdown.
"""

from __future__ import annotations

import json
import logging
import sys
import tempfile
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Mapping

LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 3

_MANAGED = "_markdown_kit_handler"

# Every LogRecord has these; anything else arrived through ``extra=``.
_RECORD_FIELDS = frozenset(vars(logging.makeLogRecord({}))) | {
    "message",
    "asctime",
    "taskName",
}


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record, with ``extra=`` fields under ``extra``."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra = {
            key: _jsonable(value)
            for key, value in vars(record).items()
            if key not in _RECORD_FIELDS
        }
        if extra:
            entry["extra"] = extra
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stack"] = self.formatStack(record.stack_info)
        return json.dumps(entry, ensure_ascii=False)


def configure_logger(
    name: str,
    *,
    log_dir: Path,
    level: str = "INFO",
    verbose: bool = False,
) -> tuple[logging.Logger, Path]:
    """Point logger ``name`` at ``<log_dir>/<last name segment>.log``.

    Handlers from an earlier call are replaced, not stacked. When
    ``log_dir`` is not writable the file goes under the system temp dir;
    the returned path says where it ended up.
    """

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    for handler in list(logger.handlers):
        if getattr(handler, _MANAGED, False):
            logger.removeHandler(handler)
            handler.close()

    filename = f"{name.rpartition('.')[2]}.log"
    try:
        path = log_dir / filename
        file_handler = _json_file_handler(path)
    except PermissionError:
        path = fallback_log_dir() / filename
        file_handler = _json_file_handler(path)
    file_handler.setLevel(logging.DEBUG if verbose else level_number(level))
    _attach(logger, file_handler)

    if verbose:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        _attach(logger, console)

    return logger, path


def level_number(level: str) -> int:
    """Map a level name to its number; unknown names mean INFO."""

    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def fallback_log_dir() -> Path:
    return Path(tempfile.gettempdir()) / "markdown-kit-logs"


def _json_file_handler(path: Path) -> RotatingFileHandler:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.touch(mode=0o600, exist_ok=True)
    handler = RotatingFileHandler(
        path,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setFormatter(JsonLogFormatter())
    return handler


def _attach(logger: logging.Logger, handler: logging.Handler) -> None:
    setattr(handler, _MANAGED, True)
    logger.addHandler(handler)


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Mapping):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_jsonable(item) for item in value]
    return str(value)


__all__ = [
    "JsonLogFormatter",
    "configure_logger",
    "fallback_log_dir",
    "level_number",
]
