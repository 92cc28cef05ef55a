from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.repo_builder import NEXT_APP, RepoBuilder


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return RepoBuilder(tmp_path)


@pytest.fixture
def next_app(repo_builder: RepoBuilder) -> RepoBuilder:
    """A small Next.js-style project with every relevant category present."""
    repo_builder.write(NEXT_APP)
    return repo_builder
