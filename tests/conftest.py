import os
from pathlib import Path

import pytest
from loguru import logger

from fakes import FAKE_COMPILER


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch):
    for key in list(os.environ):
        if key.startswith("BUNDLER_"):
            monkeypatch.delenv(key)
    yield
    logger.remove()


@pytest.fixture
def fake_library(tmp_path: Path) -> Path:
    """A Python library whose bundle_compiler.compile() writes a small bundle."""
    root = tmp_path / "vendor" / "fakelib"
    root.mkdir(parents=True)
    (root / "bundle_compiler.py").write_text(FAKE_COMPILER)
    return root
