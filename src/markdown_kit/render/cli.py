"""``mdkit render``: convert a single input and print the Markdown.

One payload goes in (inline text, stdin, a file or a URL) and Markdown comes
out on stdout. With ``--envelope`` the result is printed as
``{"success": true, "markdown": ...}`` and failures as
``{"success": false, "message": ...}`` so callers can relay it verbatim.

Exit status: 0 on success, 1 when conversion fails, 2 when the input is
rejected (missing, too large, malformed) or the arguments are invalid.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from markdown_kit.core.logging import configure_logger
from markdown_kit.core.workspace import WorkspaceError, ensure_workspace

from .backends import build_dependencies
from .config import (
    ConfigOverrides,
    RenderConfig,
    RenderConfigError,
    load_config,
)
from .converter import ConversionError, SourceFormat, convert_payload
from .envelope import dump_envelope, failure_envelope, success_envelope
from .payload import InputError, Payload

LOGGER_NAME = "markdown_kit.render"

EXIT_OK = 0
EXIT_CONVERSION_FAILED = 1
EXIT_INPUT_REJECTED = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdkit render",
        description="Convert one JSON, HTML, XML, PDF or URL input.",
    )
    parser.add_argument(
        "format",
        choices=[member.value for member in SourceFormat],
        help="Format of the input.",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--text", help="Inline input text.")
    source.add_argument(
        "--file",
        type=Path,
        help="Read the input from a file (required for pdf).",
    )
    source.add_argument("--url", help="Page to fetch (url format only).")
    source.add_argument(
        "--stdin",
        action="store_true",
        help="Read inline input text from standard input.",
    )
    parser.add_argument(
        "--envelope",
        action="store_true",
        help="Print a JSON envelope instead of bare Markdown.",
    )
    parser.add_argument("--config", type=Path, help="Path to a render TOML.")
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Workspace root holding logs/ and config/render.toml.",
    )
    parser.add_argument(
        "--fetch-timeout",
        type=float,
        help="HTTP timeout in seconds for the url format.",
    )
    parser.add_argument("--log-level", help="Level for the render log file.")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Echo log records to stderr.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    source_format = SourceFormat.from_value(args.format)
    if args.url is not None and source_format is not SourceFormat.URL:
        parser.error("--url is only valid with the url format.")

    try:
        workspace = ensure_workspace(path=args.workspace)
        config = load_config(
            config_dir=workspace.config_dir,
            config_path=args.config,
            overrides=ConfigOverrides(
                fetch_timeout=args.fetch_timeout,
                log_level=args.log_level,
            ),
        ).config
    except (WorkspaceError, RenderConfigError) as exc:
        parser.error(str(exc))

    logger, _ = configure_logger(
        LOGGER_NAME,
        log_dir=workspace.logs_dir,
        level=config.log_level,
        verbose=args.verbose,
    )

    try:
        payload = _read_payload(args, source_format, config)
    except OSError as exc:
        logger.error(
            "Unable to read input",
            extra={"format": source_format.value, "error": str(exc)},
        )
        return _emit_failure(
            args.envelope, EXIT_INPUT_REJECTED, f"Unable to read input: {exc}"
        )

    return _render(
        source_format,
        payload,
        config=config,
        logger=logger,
        envelope=args.envelope,
    )


def _read_payload(
    args: argparse.Namespace, source_format: SourceFormat, config: RenderConfig
) -> Payload:
    if args.file is not None:
        return Payload.from_file(
            args.file.expanduser(), max_bytes=config.limits.max_file_bytes
        )
    text = sys.stdin.read() if args.stdin else args.text
    if source_format is SourceFormat.URL:
        return Payload(url=args.url if args.url is not None else text)
    return Payload(text=text)


def _render(
    source_format: SourceFormat,
    payload: Payload,
    *,
    config: RenderConfig,
    logger: logging.Logger,
    envelope: bool,
) -> int:
    logger.info(
        "Render requested",
        extra={
            "format": source_format.value,
            "source_filename": payload.filename,
            "url": payload.url,
            "text_length": len(payload.text or ""),
            "data_length": len(payload.data or b""),
        },
    )
    try:
        markdown = convert_payload(
            source_format,
            payload,
            dependencies=build_dependencies(
                fetch_timeout=config.fetch_timeout
            ),
            limits=config.limits,
        )
    except InputError as exc:
        logger.info(
            "Rejected render input",
            extra={
                "format": source_format.value,
                "reason": str(exc),
                "error_type": type(exc).__name__,
            },
        )
        return _emit_failure(envelope, EXIT_INPUT_REJECTED, str(exc))
    except ConversionError as exc:
        logger.exception(
            "Render failed", extra={"format": source_format.value}
        )
        return _emit_failure(
            envelope,
            EXIT_CONVERSION_FAILED,
            f"Failed to convert {source_format.label}",
            str(exc),
        )

    logger.info(
        "Rendered markdown",
        extra={
            "format": source_format.value,
            "markdown_length": len(markdown),
        },
    )
    if envelope:
        sys.stdout.write(dump_envelope(success_envelope(markdown)) + "\n")
    elif markdown:
        sys.stdout.write(markdown.rstrip("\n") + "\n")
    return EXIT_OK


def _emit_failure(
    envelope: bool, code: int, message: str, error: Optional[str] = None
) -> int:
    if envelope:
        failure = failure_envelope(message, error)
        sys.stdout.write(dump_envelope(failure) + "\n")
    else:
        sys.stderr.write((f"{message}: {error}" if error else message) + "\n")
    return code


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
