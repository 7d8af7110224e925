"""Stand-ins shared by the markdown_kit test suite."""

from .backends import FakeBackendModules, RecordingBackends  # noqa: F401

__all__ = ["FakeBackendModules", "RecordingBackends"]
