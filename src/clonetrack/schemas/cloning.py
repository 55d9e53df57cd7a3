"""Schema for the clone request."""

from __future__ import annotations

import shlex
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from clonetrack.config import BRANCH_REF_PREFIX, DEFAULT_REMOTE_NAME, SSH_COMMAND_TEMPLATE, TAG_REF_PREFIX
from clonetrack.utils.compat_typing import StrEnum


class TagMode(StrEnum):
    """Which tags are fetched alongside the selected history."""

    ALL = "all"
    NO = "no"
    FOLLOWING = "following"


class AuthCredential(BaseModel):
    """SSH identity used by every git subprocess of a run.

    Attributes
    ----------
    key_path : Path
        Path of the private key file handed to ``ssh -i``.
    temporary : bool
        Whether ``key_path`` is a private copy of inline key material that is removed at the end of the run.

    """

    model_config = ConfigDict(frozen=True)

    key_path: Path
    temporary: bool = False

    def git_env(self) -> dict[str, str]:
        """Return the environment variables that make git use this identity."""
        return {"GIT_SSH_COMMAND": SSH_COMMAND_TEMPLATE.format(key_path=shlex.quote(str(self.key_path)))}


class CloneRequest(BaseModel):  # pylint: disable=too-many-instance-attributes
    """Configuration for one clone-and-track run.

    This model is built once from the command line and handed to every step of the flow.

    Attributes
    ----------
    url : str
        The URL of the Git repository to clone.
    local_path : str
        The local directory holding (or receiving) the working copy.
    remote_name : str
        Name of the remote tracking the upstream repository (default: ``"origin"``).
    reference : str | None
        Full name of the requested branch (``refs/heads/...``) or tag (``refs/tags/...``).
    depth : int
        Number of commits of truncated history; ``0`` means the full history.
    single_branch : bool
        Whether only the history of a single branch is fetched (default: ``False``).
    include_submodules : bool
        Whether submodules are initialised recursively (default: ``False``).
    tags : TagMode
        Which tags are fetched (default: ``TagMode.ALL``).
    credential : AuthCredential | None
        SSH identity, or ``None`` for the transport defaults.
    pull : bool
        Whether an existing working copy is updated from the remote (default: ``False``).
    show_last : bool
        Whether the current branch and HEAD commit are printed at the end (default: ``False``).

    """

    model_config = ConfigDict(frozen=True)

    url: str
    local_path: str
    remote_name: str = DEFAULT_REMOTE_NAME
    reference: str | None = None
    depth: int = Field(default=0, ge=0)
    single_branch: bool = False
    include_submodules: bool = False
    tags: TagMode = TagMode.ALL
    credential: AuthCredential | None = None
    pull: bool = False
    show_last: bool = False

    @property
    def is_tag(self) -> bool:
        """Whether the requested reference is a tag."""
        return self.reference is not None and self.reference.startswith(TAG_REF_PREFIX)

    @property
    def branch_name(self) -> str | None:
        """Short name of the requested reference, as given to ``git clone --branch``."""
        if self.reference is None:
            return None
        if self.is_tag:
            return self.reference[len(TAG_REF_PREFIX) :]
        return self.reference[len(BRANCH_REF_PREFIX) :]

    def git_env(self) -> dict[str, str]:
        """Return the environment for git subprocesses, empty without a credential."""
        return self.credential.git_env() if self.credential else {}
