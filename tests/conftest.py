"""Shared fixtures for the langkit test suite."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from langkit.engines import EngineRegistry, register_builtin_codecs
from langkit.language_server import GlobalLanguageServer, reset_language_server


@pytest.fixture(autouse=True)
def _fresh_default_server():
    """Each test starts without a process-wide language server."""
    reset_language_server()
    yield
    reset_language_server()


@pytest.fixture
def registry():
    return register_builtin_codecs(EngineRegistry())


@pytest.fixture
def server(registry):
    return GlobalLanguageServer(registry)
