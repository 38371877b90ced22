from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.repo_builder import RepoBuilder


@pytest.fixture
def repo_builder(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> RepoBuilder:
    """Provide a throwaway repository and make it the working directory."""
    builder = RepoBuilder(tmp_path)
    monkeypatch.chdir(builder.path())
    return builder


@pytest.fixture(autouse=True)
def _reset_reusebom_logger():
    """Undo configure_logging() so caplog keeps seeing reusebom records."""
    yield
    logger = logging.getLogger("reusebom")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
