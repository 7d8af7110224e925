"""Dispatch one conversion request to the matching Markdown backend."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .json_renderer import render as render_json
from .payload import (
    DEFAULT_LIMITS,
    InputError,
    InputLimits,
    Payload,
    parse_json,
    require_bytes,
    require_url,
    resolve_text,
)


class ConversionError(RuntimeError):
    """Raised when an input was accepted but could not be converted."""


class UnsupportedFormatError(ConversionError):
    """Raised for a source format name that is not recognised."""


class DependencyError(ConversionError):
    """Raised when a backend library is missing or unusable."""


class SourceFormat(Enum):
    JSON = "json"
    HTML = "html"
    XML = "xml"
    PDF = "pdf"
    URL = "url"

    @property
    def label(self) -> str:
        """Name used in user-facing messages (``"Failed to convert PDF"``)."""

        return self.value.upper()

    @classmethod
    def from_value(cls, value: str) -> "SourceFormat":
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            expected = ", ".join(member.value for member in cls)
            raise UnsupportedFormatError(
                f"Unknown source format '{value}'. Expected one of: "
                f"{expected}."
            ) from exc


@dataclass(frozen=True)
class ConverterDependencies:
    """Backend callables, injected so tests never need the real libraries.

    ``html`` turns HTML or XML markup into Markdown, ``pdf`` extracts
    Markdown from PDF bytes and ``fetch`` downloads a page and returns its
    cleaned markup. JSON is rendered in-house and uses none of them.
    """

    html: Callable[[str], str]
    pdf: Callable[[bytes], str]
    fetch: Callable[[str], str]


def convert_payload(
    source_format: SourceFormat,
    payload: Payload,
    *,
    dependencies: ConverterDependencies,
    limits: InputLimits = DEFAULT_LIMITS,
) -> str:
    """Convert ``payload`` to Markdown according to ``source_format``.

    :class:`~.payload.InputError` and :class:`ConversionError` propagate
    unchanged. Any other backend failure is wrapped as
    ``ConversionError("Failed to convert <LABEL>: ...")``.
    """

    label = source_format.label
    try:
        if source_format is SourceFormat.JSON:
            text = resolve_text(payload, label=label, limits=limits)
            return render_json(parse_json(text, limits=limits))
        if source_format is SourceFormat.PDF:
            return dependencies.pdf(require_bytes(payload, limits=limits))
        if source_format is SourceFormat.URL:
            return dependencies.html(dependencies.fetch(require_url(payload)))
        text = resolve_text(payload, label=label, limits=limits)
        return dependencies.html(text)
    except (InputError, ConversionError):
        raise
    except Exception as exc:
        raise ConversionError(f"Failed to convert {label}: {exc}") from exc


__all__ = [
    "ConversionError",
    "ConverterDependencies",
    "DependencyError",
    "SourceFormat",
    "UnsupportedFormatError",
    "convert_payload",
]
