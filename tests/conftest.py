from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.repo_builder import RepoBuilder
from tests._fixtures.runner import RecordingRunner


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return RepoBuilder(tmp_path)


@pytest.fixture
def recording_runner() -> RecordingRunner:
    """Provide a runner that records commands instead of spawning processes."""
    return RecordingRunner()


@pytest.fixture(autouse=True)
def _reset_buildgate_logger():
    """Drop handlers bound to a previous test's captured streams."""
    yield
    logger = logging.getLogger("buildgate")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
