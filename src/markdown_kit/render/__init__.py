"""Turn JSON, HTML, XML, PDF and web pages into Markdown, one at a time."""

from __future__ import annotations

from .json_renderer import render, scalar_text, to_list
from .payload import (
    InputError,
    InputLimits,
    InputTooDeepError,
    InputTooLargeError,
    MalformedInputError,
    MissingInputError,
    Payload,
    parse_json,
)
from .converter import (
    ConversionError,
    ConverterDependencies,
    DependencyError,
    SourceFormat,
    UnsupportedFormatError,
    convert_payload,
)
from .backends import build_dependencies
from .envelope import failure_envelope, success_envelope

__all__ = [
    "ConversionError",
    "ConverterDependencies",
    "DependencyError",
    "InputError",
    "InputLimits",
    "InputTooDeepError",
    "InputTooLargeError",
    "MalformedInputError",
    "MissingInputError",
    "Payload",
    "SourceFormat",
    "UnsupportedFormatError",
    "build_dependencies",
    "convert_payload",
    "failure_envelope",
    "parse_json",
    "render",
    "scalar_text",
    "success_envelope",
    "to_list",
]
