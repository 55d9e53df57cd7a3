"""Utility functions for interacting with Git repositories."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

import git

from clonetrack.config import BRANCH_REF_PREFIX
from clonetrack.schemas import CheckoutOutcome, CloneOutcome, CommitInfo, HeadState, PullOutcome, TagMode
from clonetrack.utils.exceptions import (
    CheckoutError,
    CommitLookupError,
    GitNotInstalledError,
    RepositoryOpenError,
    TransportError,
)
from clonetrack.utils.logging_config import get_logger
from clonetrack.utils.os_utils import ensure_directory_exists_or_create

if TYPE_CHECKING:
    from clonetrack.schemas import CloneRequest

# Initialize logger for this module
logger = get_logger(__name__)


class GitProvider(Protocol):
    """Git operations the clone-or-open flow relies on."""

    def clone(self, request: CloneRequest) -> tuple[CloneOutcome, Any]: ...

    def open(self, path: str) -> Any: ...

    def head(self, repo: Any) -> HeadState: ...

    def resolve_reference(self, repo: Any, name: str) -> str | None: ...

    def checkout(
        self,
        repo: Any,
        reference: str,
        *,
        start_point: str | None = None,
        force: bool = True,
    ) -> CheckoutOutcome: ...

    def pull(self, repo: Any, request: CloneRequest, reference: str) -> PullOutcome: ...

    def resolve_commit(self, repo: Any, hexsha: str) -> CommitInfo: ...


def ensure_git_installed() -> None:
    """Ensure Git is installed and accessible on the system.

    On Windows, this also checks whether Git is configured to support long file paths.

    Raises
    ------
    GitNotInstalledError
        If Git is not installed or not accessible.

    """
    try:
        git_cmd = git.Git()
        git_cmd.version()
    except (git.GitCommandError, git.GitCommandNotFound, OSError) as exc:
        raise GitNotInstalledError from exc

    if sys.platform == "win32":
        try:
            longpaths_value = git_cmd.config("core.longpaths")
            if longpaths_value.lower() != "true":
                logger.warning(
                    "Git clone may fail on Windows due to long file paths. "
                    "Consider enabling long path support with: 'git config --global core.longpaths true'.",
                    extra={"platform": "windows", "longpaths_enabled": False},
                )
        except git.GitCommandError:
            # Ignore if checking 'core.longpaths' fails.
            pass


def is_git_repository(path: str) -> bool:
    """Check whether ``path`` already holds a Git repository.

    Parameters
    ----------
    path : str
        The directory to inspect.

    Returns
    -------
    bool
        ``True`` if a repository can be opened at ``path``, ``False`` otherwise.

    """
    try:
        git.Repo(path)
    except (git.InvalidGitRepositoryError, git.NoSuchPathError):
        return False
    return True


def build_clone_options(request: CloneRequest) -> dict[str, Any]:
    """Translate a clone request into ``git clone`` keyword options.

    Parameters
    ----------
    request : CloneRequest
        The clone request.

    Returns
    -------
    dict[str, Any]
        Keyword options for ``git.Repo.clone_from``.

    """
    options: dict[str, Any] = {"origin": request.remote_name}
    if request.branch_name:
        options["branch"] = request.branch_name
    if request.depth > 0:
        options["depth"] = request.depth
    if request.single_branch:
        options["single_branch"] = True
    if request.include_submodules:
        options["recurse_submodules"] = True
    if request.tags is TagMode.NO:
        options["no_tags"] = True
    return options


def build_pull_options(request: CloneRequest) -> dict[str, Any]:
    """Translate a clone request into ``git pull`` keyword options.

    The pull always names a single branch, so ``single_branch`` needs no option of its own.

    Parameters
    ----------
    request : CloneRequest
        The clone request.

    Returns
    -------
    dict[str, Any]
        Keyword options for ``git.Remote.pull``.

    """
    options: dict[str, Any] = {}
    if request.depth > 0:
        options["depth"] = request.depth
    if request.include_submodules:
        options["recurse_submodules"] = True
    if request.tags is TagMode.ALL:
        options["tags"] = True
    elif request.tags is TagMode.NO:
        options["no_tags"] = True
    return options


class GitPythonProvider:
    """Git operations backed by GitPython and the ``git`` executable.

    Parameters
    ----------
    progress : git.RemoteProgress | None
        Receives the progress of clone, fetch and pull operations.

    """

    def __init__(self, progress: git.RemoteProgress | None = None) -> None:
        self.progress = progress

    def clone(self, request: CloneRequest) -> tuple[CloneOutcome, git.Repo | None]:
        """Clone the requested repository unless the destination already holds one.

        Parameters
        ----------
        request : CloneRequest
            The clone request.

        Returns
        -------
        tuple[CloneOutcome, git.Repo | None]
            ``CLONED`` with the new repository, or ``ALREADY_EXISTS`` with ``None``.

        Raises
        ------
        TransportError
            If ``git clone`` or the tag fetch that follows it fails.

        """
        local_path = request.local_path
        if is_git_repository(local_path):
            logger.info("Repository already exists", extra={"local_path": local_path})
            return CloneOutcome.ALREADY_EXISTS, None

        ensure_git_installed()
        ensure_directory_exists_or_create(Path(local_path).absolute().parent)

        options = build_clone_options(request)
        env = request.git_env()
        logger.info("Executing git clone operation", extra={"url": request.url, "local_path": local_path, **options})
        try:
            repo = git.Repo.clone_from(request.url, local_path, progress=self.progress, env=env or None, **options)
            if request.tags is TagMode.ALL:
                logger.debug("Fetching all tags", extra={"remote": request.remote_name})
                with repo.git.custom_environment(**env):
                    repo.remote(request.remote_name).fetch(progress=self.progress, tags=True)
        except git.GitCommandError as exc:
            msg = f"Git clone failed: {exc}"
            raise TransportError(msg) from exc

        logger.info("Git clone completed successfully", extra={"local_path": local_path})
        return CloneOutcome.CLONED, repo

    def open(self, path: str) -> git.Repo:
        """Open the working copy at ``path``.

        Raises
        ------
        RepositoryOpenError
            If ``path`` does not hold a Git repository.

        """
        try:
            return git.Repo(path)
        except (git.InvalidGitRepositoryError, git.NoSuchPathError) as exc:
            msg = f"Invalid git repository at {path}"
            raise RepositoryOpenError(msg) from exc

    def head(self, repo: git.Repo) -> HeadState:
        """Read where HEAD points.

        Parameters
        ----------
        repo : git.Repo
            The working copy.

        Returns
        -------
        HeadState
            The reference and commit of HEAD; the reference is ``"HEAD"`` when detached.

        Raises
        ------
        RepositoryOpenError
            If HEAD does not point to a commit yet.

        """
        try:
            commit = repo.head.commit.hexsha
        except ValueError as exc:
            msg = f"Repository at {repo.working_dir} has no commit at HEAD"
            raise RepositoryOpenError(msg) from exc

        reference = "HEAD" if repo.head.is_detached else repo.head.ref.path
        return HeadState(reference=reference, commit=commit)

    def resolve_reference(self, repo: git.Repo, name: str) -> str | None:
        """Return the commit SHA ``name`` points to, or ``None`` if it does not exist."""
        try:
            return repo.git.rev_parse("--verify", "--quiet", f"{name}^{{commit}}")
        except git.GitCommandError:
            return None

    def checkout(
        self,
        repo: git.Repo,
        reference: str,
        *,
        start_point: str | None = None,
        force: bool = True,
    ) -> CheckoutOutcome:
        """Check out ``reference``, optionally creating it as a branch tracking ``start_point``.

        Branch references are checked out by their short name so that HEAD stays attached,
        any other reference leaves HEAD detached.

        Parameters
        ----------
        repo : git.Repo
            The working copy.
        reference : str
            Full name of the branch or tag to check out.
        start_point : str | None
            Remote-tracking reference to (re)create the branch from. Without it the reference must already exist.
        force : bool
            Whether local changes are discarded (default: ``True``).

        Returns
        -------
        CheckoutOutcome
            ``CHECKED_OUT``, or ``REFERENCE_NOT_FOUND`` when ``reference`` is missing and no ``start_point`` is given.

        Raises
        ------
        CheckoutError
            If ``git checkout`` fails.

        """
        branch = reference[len(BRANCH_REF_PREFIX) :] if reference.startswith(BRANCH_REF_PREFIX) else None

        if start_point is None:
            if self.resolve_reference(repo, reference) is None:
                logger.debug("Reference not found", extra={"reference": reference})
                return CheckoutOutcome.REFERENCE_NOT_FOUND
            args = [branch or reference]
        else:
            if branch is None:
                msg = f"Only branches can track {start_point}, got {reference}"
                raise CheckoutError(msg)
            args = ["-B", branch, "--track", start_point]

        if force:
            args.insert(0, "--force")

        logger.info("Checking out reference", extra={"reference": reference, "start_point": start_point})
        try:
            repo.git.checkout(*args)
        except git.GitCommandError as exc:
            msg = f"Checkout of {reference} failed: {exc}"
            raise CheckoutError(msg) from exc

        return CheckoutOutcome.CHECKED_OUT

    def pull(self, repo: git.Repo, request: CloneRequest, reference: str) -> PullOutcome:
        """Pull ``reference`` from the request's remote into the current branch.

        Parameters
        ----------
        repo : git.Repo
            The working copy.
        request : CloneRequest
            The clone request whose remote, depth, submodule, tag and credential settings are reused.
        reference : str
            Full name of the branch to pull.

        Returns
        -------
        PullOutcome
            ``NO_CHANGES`` when HEAD did not move, ``UPDATED`` otherwise.

        Raises
        ------
        TransportError
            If the remote is unknown or ``git pull`` fails.

        """
        branch = reference[len(BRANCH_REF_PREFIX) :] if reference.startswith(BRANCH_REF_PREFIX) else reference
        before = repo.head.commit.hexsha
        options = build_pull_options(request)

        logger.info("Pulling branch", extra={"remote": request.remote_name, "branch": branch, **options})
        try:
            remote = repo.remote(request.remote_name)
            with repo.git.custom_environment(**request.git_env()):
                remote.pull(branch, progress=self.progress, **options)
        except ValueError as exc:
            msg = f"Git pull failed: {exc}"
            raise TransportError(msg) from exc
        except git.GitCommandError as exc:
            msg = f"Git pull failed: {exc}"
            raise TransportError(msg) from exc

        after = repo.head.commit.hexsha
        if before == after:
            logger.info("Already up to date", extra={"commit": after})
            return PullOutcome.NO_CHANGES
        logger.info("Branch updated", extra={"before": before, "after": after})
        return PullOutcome.UPDATED

    def resolve_commit(self, repo: git.Repo, hexsha: str) -> CommitInfo:
        """Decode the commit object ``hexsha``.

        Raises
        ------
        CommitLookupError
            If the commit cannot be found.

        """
        try:
            commit = repo.commit(hexsha)
        except (ValueError, git.BadName) as exc:
            msg = f"Commit {hexsha} not found: {exc}"
            raise CommitLookupError(msg) from exc

        return CommitInfo(
            hexsha=commit.hexsha,
            author_name=commit.author.name or "",
            author_email=commit.author.email or "",
            authored_at=commit.authored_datetime,
            message=commit.message if isinstance(commit.message, str) else commit.message.decode(errors="replace"),
            parents=[parent.hexsha for parent in commit.parents],
        )
