"""Input validation that runs before any converter sees a request.

A request carries an uploaded file (``data``), an inline text field
(``text``) or a URL. The helpers here pick the right one, enforce the
size ceilings from :class:`InputLimits`, decode bytes and parse JSON, so
converters only ever receive well-formed input.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlparse

DEFAULT_MAX_TEXT_CHARS = 500_000
DEFAULT_MAX_FILE_BYTES = 2 * 1024 * 1024
DEFAULT_MAX_JSON_DEPTH = 200


class InputError(ValueError):
    """Raised when a request is rejected before conversion starts."""


class MissingInputError(InputError):
    """Raised when neither a file nor the expected field was supplied."""


class InputTooLargeError(InputError):
    """Raised when a file or text field exceeds its configured ceiling."""


class InputTooDeepError(InputError):
    """Raised when decoded JSON nests deeper than the configured limit."""


class MalformedInputError(InputError):
    """Raised when the input cannot be parsed (invalid JSON, bad URL)."""


@dataclass(frozen=True)
class InputLimits:
    """Ceilings applied to request input."""

    max_text_chars: int = DEFAULT_MAX_TEXT_CHARS
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES
    max_json_depth: int = DEFAULT_MAX_JSON_DEPTH


DEFAULT_LIMITS = InputLimits()


@dataclass(frozen=True)
class Payload:
    """Raw request input; at most one field is normally populated."""

    text: Optional[str] = None
    data: Optional[bytes] = None
    url: Optional[str] = None
    filename: Optional[str] = None

    @classmethod
    def from_file(
        cls, path: Path, *, max_bytes: Optional[int] = None
    ) -> "Payload":
        """Read ``path`` as an upload.

        With ``max_bytes`` at most one byte past the ceiling is read, which
        is enough for :func:`require_bytes` to reject an oversized file
        without loading all of it.
        """

        size = -1 if max_bytes is None else max_bytes + 1
        with path.open("rb") as handle:
            data = handle.read(size)
        return cls(data=data, filename=path.name)


def resolve_text(
    payload: Payload,
    *,
    label: str,
    limits: InputLimits = DEFAULT_LIMITS,
) -> str:
    """Return the text to convert, preferring an uploaded file.

    The text-length ceiling only applies to inline text; uploads are bounded
    by ``max_file_bytes`` instead.
    """

    if payload.data is not None:
        return require_bytes(payload, limits=limits).decode(
            "utf-8", errors="replace"
        )
    if not payload.text:
        raise MissingInputError(f"{label} content is required")
    if len(payload.text) > limits.max_text_chars:
        raise InputTooLargeError(
            f"{label} content exceeds {_format_size(limits.max_text_chars)} "
            "limit"
        )
    return payload.text


def require_bytes(
    payload: Payload, *, limits: InputLimits = DEFAULT_LIMITS
) -> bytes:
    if payload.data is None:
        raise MissingInputError("No file uploaded")
    if len(payload.data) > limits.max_file_bytes:
        raise InputTooLargeError(
            f"File exceeds {_format_size(limits.max_file_bytes)} limit"
        )
    return payload.data


def require_url(payload: Payload) -> str:
    """Return the payload URL after checking it is absolute http(s)."""

    raw = (payload.url or "").strip()
    if not raw:
        raise MissingInputError("URL is required")
    parsed = urlparse(raw)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise MalformedInputError("Invalid URL")
    return raw


def parse_json(text: str, *, limits: InputLimits = DEFAULT_LIMITS) -> Any:
    """Decode ``text`` as strict JSON and enforce the nesting ceiling."""

    try:
        value = json.loads(text, parse_constant=_reject_constant)
    except RecursionError as exc:
        # The decoder gave up before the depth could be measured.
        raise InputTooDeepError("JSON nesting is too deep to decode") from exc
    except ValueError as exc:
        raise MalformedInputError("Invalid JSON format") from exc
    if nesting_depth(value) > limits.max_json_depth:
        raise InputTooDeepError(
            "JSON nesting exceeds {0} levels".format(limits.max_json_depth)
        )
    return value


def nesting_depth(value: Any) -> int:
    """Return how many containers deep ``value`` goes (scalars are 0)."""

    deepest = 0
    stack = [(value, 1)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, dict):
            children = node.values()
        elif isinstance(node, list):
            children = node
        else:
            continue
        deepest = max(deepest, depth)
        stack.extend((child, depth + 1) for child in children)
    return deepest


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _format_size(limit: int) -> str:
    if limit >= 1024 * 1024 and limit % (1024 * 1024) == 0:
        return f"{limit // (1024 * 1024)}MB"
    if limit >= 1000 and limit % 1000 == 0:
        return f"{limit // 1000}KB"
    return f"{limit}-byte"


__all__ = [
    "DEFAULT_LIMITS",
    "DEFAULT_MAX_FILE_BYTES",
    "DEFAULT_MAX_JSON_DEPTH",
    "DEFAULT_MAX_TEXT_CHARS",
    "InputError",
    "InputLimits",
    "InputTooDeepError",
    "InputTooLargeError",
    "MalformedInputError",
    "MissingInputError",
    "Payload",
    "nesting_depth",
    "parse_json",
    "require_bytes",
    "require_url",
    "resolve_text",
]
