"""Stand-ins for the third-party conversion backends.

``RecordingBackends`` replaces the callables inside ``ConverterDependencies``
so pipeline tests never touch markdownify, markitdown or the network.
``FakeBackendModules`` mimics the modules the real backends import on first
use, so the wiring itself can be exercised offline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

from markdown_kit.render.converter import ConverterDependencies


@dataclass
class RecordingBackends:
    html_result: str = "# Converted"
    pdf_result: str = "PDF text"
    fetch_result: str = "<h1>Fetched</h1>"
    html_calls: List[str] = field(default_factory=list)
    pdf_calls: List[bytes] = field(default_factory=list)
    fetch_calls: List[str] = field(default_factory=list)
    error: Optional[Exception] = None

    def html(self, markup: str) -> str:
        self.html_calls.append(markup)
        self._maybe_raise()
        return self.html_result

    def pdf(self, data: bytes) -> str:
        self.pdf_calls.append(data)
        self._maybe_raise()
        return self.pdf_result

    def fetch(self, url: str) -> str:
        self.fetch_calls.append(url)
        self._maybe_raise()
        return self.fetch_result

    def dependencies(self) -> ConverterDependencies:
        return ConverterDependencies(
            html=self.html,
            pdf=self.pdf,
            fetch=self.fetch,
        )

    def _maybe_raise(self) -> None:
        if self.error is not None:
            raise self.error


class _FakeTag:
    def __init__(self, soup: "_FakeSoup", name: str) -> None:
        self._soup = soup
        self.name = name

    def decompose(self) -> None:
        self._soup.removed.append(self.name)


class _FakeSoup:
    def __init__(self, markup: str, parser: str) -> None:
        self.markup = markup
        self.parser = parser
        self.requested: List[List[str]] = []
        self.removed: List[str] = []

    def find_all(self, names: List[str]) -> List[_FakeTag]:
        self.requested.append(list(names))
        return [_FakeTag(self, name) for name in names if f"<{name}" in self.markup]

    def __str__(self) -> str:
        return f"cleaned:{self.markup}"


class _FakeResponse:
    def __init__(self, text: str, status_error: Optional[Exception]) -> None:
        self.text = text
        self._status_error = status_error

    def raise_for_status(self) -> None:
        if self._status_error is not None:
            raise self._status_error


@dataclass
class FakeBackendModules:
    """Module namespaces keyed by import name, recording how they are used."""

    page_text: str = "<html><script>x</script><h1>Hi</h1></html>"
    status_error: Optional[Exception] = None
    markitdown_result: Any = field(
        default_factory=lambda: SimpleNamespace(markdown="  # PDF body  \n")
    )
    markdownify_calls: List[Dict[str, Any]] = field(default_factory=list)
    request_calls: List[Dict[str, Any]] = field(default_factory=list)
    stream_calls: List[Dict[str, Any]] = field(default_factory=list)
    soups: List[_FakeSoup] = field(default_factory=list)
    imported: List[str] = field(default_factory=list)
    engines_built: int = 0

    def modules(self) -> Dict[str, Any]:
        fake = self

        def markdownify(markup: str, **options: Any) -> str:
            fake.markdownify_calls.append({"markup": markup, **options})
            return f"\n\nmd:{markup}\n\n"

        def beautiful_soup(markup: str, parser: str) -> _FakeSoup:
            soup = _FakeSoup(markup, parser)
            fake.soups.append(soup)
            return soup

        def get(url: str, **kwargs: Any) -> _FakeResponse:
            fake.request_calls.append({"url": url, **kwargs})
            return _FakeResponse(fake.page_text, fake.status_error)

        class MarkItDown:
            def __init__(self) -> None:
                fake.engines_built += 1

            def convert_stream(self, stream: Any, **kwargs: Any) -> Any:
                fake.stream_calls.append({"data": stream.read(), **kwargs})
                return fake.markitdown_result

        return {
            "markdownify": SimpleNamespace(markdownify=markdownify, ATX="atx"),
            "bs4": SimpleNamespace(BeautifulSoup=beautiful_soup),
            "requests": SimpleNamespace(get=get),
            "markitdown": SimpleNamespace(MarkItDown=MarkItDown),
        }

    def install(self, monkeypatch, backends_module: Any) -> None:
        """Serve these fakes from ``backends_module._import_module``."""

        modules = self.modules()

        def fake_import(module: str, required_attribute: str) -> Any:
            self.imported.append(module)
            return modules[module]

        monkeypatch.setattr(backends_module, "_import_module", fake_import)
