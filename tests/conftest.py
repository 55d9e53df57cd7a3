"""Fixtures for tests.

This file provides shared constants, a mocked git operations provider for exercising the clone-or-open flow
offline, GitPython mocks for the provider itself, and a real upstream repository built in a temporary directory
for end-to-end runs.
"""

from __future__ import annotations

import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable
from unittest.mock import MagicMock

import git
import pytest

from clonetrack.schemas import (
    CheckoutOutcome,
    CloneOutcome,
    CloneRequest,
    CommitInfo,
    HeadState,
    PullOutcome,
)
from clonetrack.utils.git_utils import GitPythonProvider

if TYPE_CHECKING:
    from pytest_mock import MockerFixture

DEMO_URL = "https://example.com/sample.git"
LOCAL_REPO_PATH = "/tmp/sample"
DEMO_COMMIT = "deadbeefdeadbeefdeadbeefdeadbeefdeadbeef"
OTHER_COMMIT = "cafebabecafebabecafebabecafebabecafebabe"

AUTHOR = git.Actor("Test User", "test@example.com")

MakeRequestFunc = Callable[..., CloneRequest]


@pytest.fixture
def make_request() -> MakeRequestFunc:
    """Return a factory building ``CloneRequest`` objects for ``DEMO_URL`` with overridable fields."""

    def _factory(**overrides: Any) -> CloneRequest:
        fields: dict[str, Any] = {"url": DEMO_URL, "local_path": LOCAL_REPO_PATH}
        fields.update(overrides)
        return CloneRequest(**fields)

    return _factory


@pytest.fixture
def fake_provider() -> MagicMock:
    """Provide a ``GitPythonProvider`` stand-in describing an existing clone on ``main``.

    ``clone`` reports ``ALREADY_EXISTS``, HEAD is on ``refs/heads/main`` at ``DEMO_COMMIT``, checkouts succeed
    and pulls bring no changes. Tests tweak the return values to drive other paths of the flow.
    """
    provider = MagicMock(spec=GitPythonProvider)
    provider.clone.return_value = (CloneOutcome.ALREADY_EXISTS, None)
    provider.open.return_value = MagicMock(name="repo")
    provider.head.return_value = HeadState(reference="refs/heads/main", commit=DEMO_COMMIT)
    provider.checkout.return_value = CheckoutOutcome.CHECKED_OUT
    provider.resolve_reference.return_value = DEMO_COMMIT
    provider.pull.return_value = PullOutcome.NO_CHANGES
    provider.resolve_commit.return_value = CommitInfo(
        hexsha=DEMO_COMMIT,
        author_name="Test User",
        author_email="test@example.com",
        authored_at=datetime(2024, 1, 2, 15, 4, 5, tzinfo=timezone.utc),
        message="Initial commit\n",
    )
    return provider


@pytest.fixture
def gitpython_mocks(mocker: MockerFixture) -> dict[str, MagicMock]:
    """Patch ``git.Repo`` and ``git.Git`` as seen from ``clonetrack.utils.git_utils``."""
    mock_git_cmd = MagicMock()
    mock_git_cmd.version.return_value = "git version 2.43.0"
    mock_git_cmd.config.return_value = "true"

    mock_repo = MagicMock()
    mock_repo.working_dir = LOCAL_REPO_PATH
    mock_repo.head.commit.hexsha = DEMO_COMMIT
    mock_repo.head.is_detached = False
    mock_repo.head.ref.path = "refs/heads/main"

    mock_clone_from = MagicMock(return_value=mock_repo)

    git_repo_mock = mocker.patch("clonetrack.utils.git_utils.git.Repo", return_value=mock_repo)
    git_repo_mock.clone_from = mock_clone_from
    mocker.patch("clonetrack.utils.git_utils.git.Git", return_value=mock_git_cmd)

    return {
        "git_cmd": mock_git_cmd,
        "repo": mock_repo,
        "clone_from": mock_clone_from,
        "git_repo_mock": git_repo_mock,
    }


def commit_file(repo: git.Repo, name: str, content: str, message: str) -> git.Commit:
    """Write ``name`` into the working tree of ``repo`` and commit it."""
    path = Path(repo.working_tree_dir) / name
    path.write_text(content, encoding="utf-8")
    repo.index.add([name])
    return repo.index.commit(message, author=AUTHOR, committer=AUTHOR)


@pytest.fixture
def upstream_repo(tmp_path: Path) -> git.Repo:
    """Create an upstream repository at ``<tmp_path>/upstream/sample.git``.

    The repository has a ``main`` branch with one commit, tagged ``v1.0``, and a ``release`` branch
    with one more commit. ``main`` is checked out.
    """
    if shutil.which("git") is None:
        pytest.skip("git executable not available")

    path = tmp_path / "upstream" / "sample.git"
    path.mkdir(parents=True)
    repo = git.Repo.init(path)
    repo.git.symbolic_ref("HEAD", "refs/heads/main")

    first = commit_file(repo, "README.md", "# sample\n", "Initial commit")
    repo.create_tag("v1.0", ref=first)

    release = repo.create_head("release")
    release.checkout()
    commit_file(repo, "CHANGELOG.md", "release notes\n", "Prepare release")
    repo.heads.main.checkout()
    return repo
