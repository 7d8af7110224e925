"""Render decoded JSON values as Markdown.

A non-empty array whose elements are all objects becomes a table with one
column per key seen across the elements. Everything else becomes a nested
bullet list. An array of objects that yields no columns at all (``[{}]``)
is emitted as a fenced ``json`` code block instead of a headerless table.

Scalars, including numbers inside the compact JSON of a table cell, are
printed the way a JavaScript runtime would print them: ``null``, ``true``
and ``30`` rather than ``None``, ``True`` and ``30.0``. Integers are the
exception; they keep every digit where JavaScript would switch to exponent
notation past 1e21.
"""

from __future__ import annotations

import json
import math
from decimal import Decimal
from typing import Any, Dict, List, Union

JSONScalar = Union[None, bool, int, float, str]
JSONValue = Union[JSONScalar, List[Any], Dict[str, Any]]

_INDENT = "  "


def render(value: JSONValue) -> str:
    """Return Markdown for ``value``; never raises for decoded JSON."""

    if _is_table(value):
        columns = _column_union(value)  # type: ignore[arg-type]
        if not columns:
            return _fenced_json(value)
        return _render_table(value, columns)  # type: ignore[arg-type]
    return to_list(value)


def to_list(value: JSONValue, depth: int = 0) -> str:
    """Render ``value`` as an indented bullet list starting at ``depth``."""

    indent = _INDENT * depth
    parts: list[str] = []

    if isinstance(value, list):
        for index, item in enumerate(value, start=1):
            if _is_container(item):
                parts.append(f"{indent}- Item {index}:\n")
                parts.append(to_list(item, depth + 1))
            else:
                parts.append(f"{indent}- {scalar_text(item)}\n")
    elif isinstance(value, dict):
        for key, child in value.items():
            parts.append(f"{indent}- **{key}**: ")
            if _is_container(child):
                parts.append("\n")
                parts.append(to_list(child, depth + 1))
            else:
                parts.append(f"{scalar_text(child)}\n")
    else:
        parts.append(f"{indent}{scalar_text(value)}\n")

    return "".join(parts)


def scalar_text(value: JSONScalar) -> str:
    """Return the JavaScript-style string form of a JSON scalar."""

    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return _number_text(value)
    return str(value)


def _number_text(value: float) -> str:
    # Shortest round-trip digits from repr, laid out per ECMAScript
    # Number::toString: plain notation for 1e-6 <= |x| < 1e21.
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    digits = "".join(str(digit) for digit in digit_tuple)
    point = exponent + len(digits)
    digits = digits.rstrip("0")
    count = len(digits)
    if count <= point <= 21:
        text = digits + "0" * (point - count)
    elif 0 < point <= 21:
        text = f"{digits[:point]}.{digits[point:]}"
    elif -6 < point <= 0:
        text = "0." + "0" * -point + digits
    else:
        mantissa = digits[0] + (f".{digits[1:]}" if count > 1 else "")
        power = point - 1
        text = f"{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"
    return sign + text


def _is_container(value: Any) -> bool:
    return isinstance(value, (dict, list))


def _is_table(value: Any) -> bool:
    return (
        isinstance(value, list)
        and bool(value)
        and all(isinstance(item, dict) for item in value)
    )


def _column_union(rows: List[Dict[str, Any]]) -> list[str]:
    # dict preserves first-seen order and drops repeats.
    seen: dict[str, None] = {}
    for row in rows:
        for key in row:
            seen.setdefault(key, None)
    return list(seen)


def _render_table(rows: List[Dict[str, Any]], columns: list[str]) -> str:
    lines = [
        _table_line(columns),
        _table_line(["---"] * len(columns)),
    ]
    for row in rows:
        cells = [_cell(row.get(column)) for column in columns]
        lines.append(_table_line(cells))
    return "".join(lines)


def _table_line(cells: list[str]) -> str:
    return "| " + " | ".join(cells) + " |\n"


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if _is_container(value):
        return _compact_json(value)
    return scalar_text(value).replace("|", "\\|")


def _compact_json(value: Any) -> str:
    # JSON.stringify layout: no spaces, JavaScript number text, and null for
    # non-finite floats.
    if isinstance(value, dict):
        members = (
            f"{json.dumps(str(key), ensure_ascii=False)}:{_compact_json(item)}"
            for key, item in value.items()
        )
        return "{" + ",".join(members) + "}"
    if isinstance(value, list):
        return "[" + ",".join(_compact_json(item) for item in value) + "]"
    if isinstance(value, float):
        return scalar_text(value) if math.isfinite(value) else "null"
    return json.dumps(value, ensure_ascii=False)


def _fenced_json(value: JSONValue) -> str:
    body = json.dumps(value, indent=2, ensure_ascii=False)
    return f"```json\n{body}\n```"


__all__ = [
    "JSONScalar",
    "JSONValue",
    "render",
    "scalar_text",
    "to_list",
]
