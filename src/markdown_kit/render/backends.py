"""Third-party conversion backends wired into :class:`ConverterDependencies`.

Nothing is imported until a backend is first called, so JSON rendering
works even when markitdown or the HTML stack cannot be loaded. A missing
library surfaces as :class:`DependencyError` with an install hint.
"""

from __future__ import annotations

import importlib
import io
from typing import Any

from .converter import ConverterDependencies, DependencyError

USER_AGENT = "Mozilla/5.0 (compatible; markdown-kit)"

# Elements that never carry page content worth converting.
_NON_CONTENT_TAGS = ("script", "style", "nav", "footer", "iframe", "noscript")

_DISTRIBUTIONS = {
    "bs4": "beautifulsoup4",
    "markitdown": "markitdown[pdf]",
}


def build_dependencies(
    *, fetch_timeout: float = 30.0
) -> ConverterDependencies:
    """Return the markdownify, markitdown and requests backends."""

    return ConverterDependencies(
        html=html_to_markdown,
        pdf=_PdfBackend(),
        fetch=lambda url: fetch_page(url, timeout=fetch_timeout),
    )


def html_to_markdown(markup: str) -> str:
    module = _import_module("markdownify", "markdownify")
    heading_style = getattr(module, "ATX", "atx")
    return module.markdownify(markup, heading_style=heading_style).strip()


def fetch_page(url: str, *, timeout: float) -> str:
    """Download ``url`` and return its markup minus scripts and chrome."""

    requests = _import_module("requests", "get")
    soup_factory = _import_module("bs4", "BeautifulSoup").BeautifulSoup
    response = requests.get(
        url,
        headers={"User-Agent": USER_AGENT},
        timeout=timeout,
        allow_redirects=True,
    )
    response.raise_for_status()
    soup = soup_factory(response.text, "html.parser")
    for tag in soup.find_all(list(_NON_CONTENT_TAGS)):
        tag.decompose()
    return str(soup)


class _PdfBackend:
    """Builds one MarkItDown engine on the first PDF and reuses it."""

    def __init__(self) -> None:
        self._engine: Any = None

    def __call__(self, data: bytes) -> str:
        if self._engine is None:
            module = _import_module("markitdown", "MarkItDown")
            self._engine = module.MarkItDown()
        result = self._engine.convert_stream(
            io.BytesIO(data), file_extension=".pdf"
        )
        markdown = _markdown_text(result)
        if markdown is None:
            raise DependencyError(
                "markitdown returned an unsupported response; "
                "expected Markdown text."
            )
        return markdown.strip()


def _import_module(module: str, required_attribute: str) -> Any:
    try:
        imported = importlib.import_module(module)
    except ImportError as exc:
        package = _DISTRIBUTIONS.get(module, module)
        raise DependencyError(
            f"Dependency '{package}' is required for this format. "
            f'Reinstall markdown-kit or run `pip install "{package}"`.'
        ) from exc
    if not hasattr(imported, required_attribute):
        raise DependencyError(
            f"Dependency '{module}' is installed but has no "
            f"'{required_attribute}'. Upgrade or reinstall it."
        )
    return imported


def _markdown_text(result: Any) -> str | None:
    if isinstance(result, str):
        return result
    if isinstance(result, dict):
        value = result.get("markdown")
        return value if isinstance(value, str) else None
    for attribute in ("markdown", "text_content"):
        value = getattr(result, attribute, None)
        if isinstance(value, str):
            return value
    return None


__all__ = [
    "USER_AGENT",
    "build_dependencies",
    "fetch_page",
    "html_to_markdown",
]
