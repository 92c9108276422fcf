"""
Shared pytest fixtures and configuration for bidi-detector tests.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from bidi_detector.observability.logger import ROOT_LOGGER_NAME

# ============================================================
# Pytest Hooks and Configuration
# ============================================================


def pytest_configure(config: Any) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "property: marks property-based tests")
    config.addinivalue_line("markers", "integration: marks end-to-end CLI tests")


# ============================================================
# Environment Isolation Fixtures
# ============================================================


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop BIDI_DETECTOR_* overrides inherited from the calling shell."""
    for key in list(os.environ):
        if key.startswith("BIDI_DETECTOR_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Any:
    """Undo handlers installed by configure_logging during a test."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


# ============================================================
# Filesystem Fixtures
# ============================================================


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[dict[str, str | bytes]], Path]:
    """
    Factory fixture that writes a directory tree under tmp_path.

    Keys are relative POSIX paths; str values are written as UTF-8, bytes
    values verbatim.

    Returns:
        A function that creates the files and returns the tree root.
    """

    def _make(files: dict[str, str | bytes]) -> Path:
        for rel, content in files.items():
            target = tmp_path / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_bytes(content.encode("utf-8"))
        return tmp_path

    return _make
