# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

import logging
from pathlib import Path
from typing import Callable

import pytest

from local_actions.config import reset_config
from local_actions.document import TextDocument
from local_actions.logconfig import ROOT_LOGGER_NAME

_ENV_VARS = (
    "LOCAL_GITHUB_ACTIONS_FILE_EXIST_ERRORS",
    "LOCAL_GITHUB_ACTIONS_FILE_PLACEMENT_ERRORS",
    "LOCAL_GITHUB_ACTIONS_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def package_logger():
    """Detach handlers installed by configure_logging() during a test."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    saved = logger.handlers[:], logger.level
    logger.handlers = []
    yield logger
    logger.handlers, level = saved
    logger.setLevel(level)


@pytest.fixture
def repo(tmp_path) -> Path:
    """A repository with two local actions, one reusable workflow and a root action."""
    root = tmp_path / "repo"
    (root / ".github" / "workflows").mkdir(parents=True)
    (root / ".github" / "workflows" / "reusable.yml").write_text(
        "on: workflow_call\njobs:\n  noop:\n    runs-on: ubuntu-latest\n"
    )
    setup = root / ".github" / "actions" / "setup"
    setup.mkdir(parents=True)
    (setup / "action.yml").write_text("name: setup\nruns:\n  using: composite\n  steps: []\n")
    lint = root / ".github" / "actions" / "lint"
    lint.mkdir(parents=True)
    (lint / "action.yaml").write_text("name: lint\nruns:\n  using: node20\n  main: index.js\n")
    (root / "local-action").mkdir()
    (root / "local-action" / "action.yml").write_text("name: local\n")
    return root


@pytest.fixture
def make_document(repo) -> Callable[..., TextDocument]:
    """Write *text* to ``repo/<rel>`` and return it as a document."""

    def _make(text: str, rel: str = ".github/workflows/ci.yml") -> TextDocument:
        path = repo / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
        return TextDocument(path, text)

    return _make

