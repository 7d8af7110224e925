from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

TESTS_DIR = Path(__file__).resolve().parent
SRC_DIR = TESTS_DIR.parent / "src"
# Importable without an install; ``fixtures`` is a plain test directory.
for entry in (SRC_DIR, TESTS_DIR):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))

from fixtures import RecordingBackends  # noqa: E402


@pytest.fixture(autouse=True)
def mdkit_home(tmp_path: Path, monkeypatch) -> Path:
    """Give every test its own workspace and a clean MDKIT_RENDER_* env."""

    home = tmp_path / "mdkit-home"
    monkeypatch.setenv("MDKIT_DATA_HOME", str(home))
    for name in [key for key in os.environ if key.startswith("MDKIT_RENDER_")]:
        monkeypatch.delenv(name)
    return home


@pytest.fixture
def backends() -> RecordingBackends:
    """Canned conversion backends that record every call."""

    return RecordingBackends()
