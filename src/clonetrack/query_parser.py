"""Module containing functions to turn command-line values into a ``CloneRequest``."""

from __future__ import annotations

import posixpath

from clonetrack.config import BRANCH_REF_PREFIX, DEFAULT_REMOTE_NAME, TAG_REF_PREFIX, TAG_SELECTOR_PREFIX
from clonetrack.schemas import CloneRequest, TagMode
from clonetrack.utils.logging_config import get_logger

# Initialize logger for this module
logger = get_logger(__name__)


def derive_destination(url: str) -> str:
    """Return the directory a repository is cloned into when none is given.

    The directory is the last path segment of the URL without its ``.git`` suffix,
    e.g. ``https://example.com/sample.git`` and ``git@example.com:team/sample.git`` both give ``sample``.

    Parameters
    ----------
    url : str
        The repository URL.

    Returns
    -------
    str
        The directory name.

    Raises
    ------
    ValueError
        If the URL has no usable last path segment.

    """
    # scp-like URLs separate the host from the path with a colon
    path = url.split(":")[-1].rstrip("/")
    destination = posixpath.basename(path).removesuffix(".git")
    if not destination:
        msg = f"Cannot derive a directory name from {url!r}, please give one explicitly"
        raise ValueError(msg)
    return destination


def parse_reference(branch: str | None, tags: TagMode) -> str | None:
    """Return the full reference name selected by ``--branch``.

    ``tags/<name>`` selects ``refs/tags/<name>`` unless tags are disabled, any other value selects a branch.

    Parameters
    ----------
    branch : str | None
        The value of ``--branch``.
    tags : TagMode
        The tag fetch mode.

    Returns
    -------
    str | None
        The full reference name, or ``None`` when no branch was requested.

    """
    if not branch:
        return None
    if branch.startswith(TAG_SELECTOR_PREFIX) and tags is not TagMode.NO:
        return TAG_REF_PREFIX + branch[len(TAG_SELECTOR_PREFIX) :]
    return BRANCH_REF_PREFIX + branch


def build_clone_request(
    repository: str,
    directory: str | None = None,
    *,
    remote_name: str = DEFAULT_REMOTE_NAME,
    branch: str | None = None,
    depth: int = 0,
    single_branch: bool = False,
    include_submodules: bool = False,
    tags: TagMode | str = TagMode.ALL,
    pull: bool = False,
    show_last: bool = False,
) -> CloneRequest:
    """Validate command-line values and build the ``CloneRequest`` of a run.

    Parameters
    ----------
    repository : str
        The repository URL.
    directory : str | None
        The destination directory; derived from ``repository`` when omitted.
    remote_name : str
        Name of the remote (default: ``"origin"``).
    branch : str | None
        Branch to check out, or ``tags/<name>`` for a tag.
    depth : int
        Length of truncated history; zero or less means the full history.
    single_branch : bool
        Whether only one branch is fetched.
    include_submodules : bool
        Whether submodules are initialised recursively.
    tags : TagMode | str
        Tag fetch mode, one of ``all``, ``no`` or ``following``.
    pull : bool
        Whether an existing working copy is updated.
    show_last : bool
        Whether the current branch and last commit are printed.

    Returns
    -------
    CloneRequest
        The validated request, without credential.

    Raises
    ------
    ValueError
        If the repository URL is empty, no directory can be derived, or the tag mode is unknown.

    """
    repository = repository.strip()
    if not repository:
        msg = "The repository URL must not be empty"
        raise ValueError(msg)
    if not remote_name:
        msg = "The remote name must not be empty"
        raise ValueError(msg)

    tag_mode = TagMode(tags)
    local_path = directory or derive_destination(repository)

    request = CloneRequest(
        url=repository,
        local_path=local_path,
        remote_name=remote_name,
        reference=parse_reference(branch, tag_mode),
        depth=max(depth, 0),
        single_branch=single_branch,
        include_submodules=include_submodules,
        tags=tag_mode,
        pull=pull,
        show_last=show_last,
    )
    logger.debug("Built clone request", extra=request.model_dump(exclude={"credential"}))
    return request
