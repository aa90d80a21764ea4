"""Shared test fixtures for gistify."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from tests._helpers import FakeSnippetClient

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def fake_client() -> FakeSnippetClient:
    return FakeSnippetClient()


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty working directory with no GISTIFY_* variables set."""
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.startswith("GISTIFY_"):
            monkeypatch.delenv(name)
    return tmp_path
