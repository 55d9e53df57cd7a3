"""End-to-end runs of the CLI against a real upstream repository on the local filesystem."""

from __future__ import annotations

from inspect import signature
from typing import TYPE_CHECKING

import git
import pytest
from click.testing import CliRunner, Result

from clonetrack.__main__ import main
from tests.conftest import commit_file

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def work_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run from an empty working directory."""
    path = tmp_path / "work"
    path.mkdir()
    monkeypatch.chdir(path)
    return path


@pytest.fixture
def existing_clone(upstream_repo: git.Repo, work_dir: Path) -> git.Repo:
    """Provide a clone of the upstream repository on ``main`` in ``<work_dir>/sample``."""
    return git.Repo.clone_from(upstream_repo.working_tree_dir, work_dir / "sample")


def test_clone_into_derived_directory(upstream_repo: git.Repo, work_dir: Path) -> None:
    """Without a directory the repository is cloned into one named after it."""
    result = _invoke([upstream_repo.working_tree_dir])

    assert result.exit_code == 0, result.stderr
    clone = git.Repo(work_dir / "sample")
    assert clone.active_branch.name == "main"
    assert (work_dir / "sample" / "README.md").is_file()
    assert "v1.0" in [tag.name for tag in clone.tags]
    assert "On branch" not in result.stdout


def test_clone_branch_with_custom_remote(upstream_repo: git.Repo, work_dir: Path) -> None:
    """The branch and remote name given on the command line shape the new clone."""
    result = _invoke([upstream_repo.working_tree_dir, "checkout", "-b", "release", "-o", "upstream", "--single-branch"])

    assert result.exit_code == 0, result.stderr
    clone = git.Repo(work_dir / "checkout")
    assert clone.active_branch.name == "release"
    assert [remote.name for remote in clone.remotes] == ["upstream"]
    assert (work_dir / "checkout" / "CHANGELOG.md").is_file()


def test_existing_checkout_switches_and_pulls(upstream_repo: git.Repo, existing_clone: git.Repo) -> None:
    """An existing clone on ``main`` is moved to ``release``, created from ``origin/release``, and pulled."""
    upstream_repo.heads.release.checkout()
    latest = commit_file(upstream_repo, "CHANGELOG.md", "release notes\nhotfix\n", "Hotfix")
    upstream_repo.heads.main.checkout()

    result = _invoke([upstream_repo.working_tree_dir, "sample", "--branch", "release", "--pull", "--last"])

    assert result.exit_code == 0, result.stderr
    assert "Repository already exists!" in result.stdout
    clone = git.Repo(existing_clone.working_tree_dir)
    assert clone.active_branch.name == "release"
    assert clone.active_branch.tracking_branch().name == "origin/release"
    assert clone.head.commit.hexsha == latest.hexsha
    assert f"Show last commit {latest.hexsha}" in result.stdout


def test_pull_without_changes(upstream_repo: git.Repo, existing_clone: git.Repo) -> None:
    """Pulling a clone that is up to date is a success."""
    result = _invoke([upstream_repo.working_tree_dir, "sample", "--pull", "-t", "following"])

    assert result.exit_code == 0, result.stderr
    assert "already up-to-date" in result.stdout
    assert git.Repo(existing_clone.working_tree_dir).head.commit == upstream_repo.heads.main.commit


def test_tag_checkout_is_not_pulled(upstream_repo: git.Repo, existing_clone: git.Repo) -> None:
    """A tag leaves HEAD detached at the tagged commit and skips the pull."""
    result = _invoke([upstream_repo.working_tree_dir, "sample", "--branch", "tags/v1.0", "--pull"])

    assert result.exit_code == 0, result.stderr
    clone = git.Repo(existing_clone.working_tree_dir)
    assert clone.head.is_detached
    assert clone.head.commit == upstream_repo.tags["v1.0"].commit
    assert "Pull" not in result.stdout


def test_unknown_branch_is_fatal(upstream_repo: git.Repo, existing_clone: git.Repo) -> None:
    """A branch that exists nowhere fails the run."""
    result = _invoke([upstream_repo.working_tree_dir, "sample", "--branch", "does-not-exist"])

    assert result.exit_code == 1
    assert "refs/remotes/origin/does-not-exist" in result.stderr
    assert git.Repo(existing_clone.working_tree_dir).active_branch.name == "main"


def test_last_commit_after_clone(upstream_repo: git.Repo, work_dir: Path) -> None:
    """``--last`` prints the branch and the commit at HEAD."""
    result = _invoke([upstream_repo.working_tree_dir, "--last"])

    assert result.exit_code == 0, result.stderr
    head = upstream_repo.heads.main.commit
    assert "On branch main" in result.stdout
    assert f"Show last commit {head.hexsha}" in result.stdout
    assert "Author: Test User <test@example.com>" in result.stdout
    assert "    Initial commit" in result.stdout
    assert (work_dir / "sample").is_dir()


def _invoke(args: list[str]) -> Result:
    """Run the CLI with ``stderr`` kept separate on Click 8.0-8.1."""
    kwargs = {}
    if "mix_stderr" in signature(CliRunner.__init__).parameters:
        kwargs["mix_stderr"] = False  # Click 8.0-8.1
    return CliRunner(**kwargs).invoke(main, args, env={"GIT_CLONE_KEY": None})
