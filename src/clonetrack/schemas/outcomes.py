"""Schemas describing what the git operations did and where HEAD ended up."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from clonetrack.config import BRANCH_REF_PREFIX, TAG_REF_PREFIX
from clonetrack.utils.compat_typing import StrEnum

# Layout of the ``Date:`` line of a rendered commit, e.g. ``Mon Jan 02 15:04:05 2006 -0700``
COMMIT_DATE_FORMAT = "%a %b %d %H:%M:%S %Y %z"


class CloneOutcome(StrEnum):
    """Result of a clone attempt."""

    CLONED = "cloned"
    ALREADY_EXISTS = "already-exists"


class CheckoutOutcome(StrEnum):
    """Result of a checkout attempt."""

    CHECKED_OUT = "checked-out"
    REFERENCE_NOT_FOUND = "reference-not-found"


class PullOutcome(StrEnum):
    """Result of a pull."""

    UPDATED = "updated"
    NO_CHANGES = "no-changes"


class FlowState(StrEnum):
    """Terminal success states of the clone-or-open flow."""

    CLONED = "cloned"
    OPENED = "opened"
    BRANCH_SWITCHED = "branch-switched"
    PULLED = "pulled"


class HeadState(BaseModel):
    """Where HEAD points in a working copy.

    Attributes
    ----------
    reference : str
        Full name of the reference HEAD points to, or ``"HEAD"`` when detached.
    commit : str
        Hex SHA of the commit at HEAD.

    """

    model_config = ConfigDict(frozen=True)

    reference: str
    commit: str

    @property
    def is_branch(self) -> bool:
        """Whether HEAD is attached to a local branch."""
        return self.reference.startswith(BRANCH_REF_PREFIX)

    @property
    def short_name(self) -> str:
        """The reference without its ``refs/heads/`` or ``refs/tags/`` namespace."""
        for prefix in (BRANCH_REF_PREFIX, TAG_REF_PREFIX):
            if self.reference.startswith(prefix):
                return self.reference[len(prefix) :]
        return self.reference


class CommitInfo(BaseModel):
    """Decoded commit object."""

    model_config = ConfigDict(frozen=True)

    hexsha: str
    author_name: str
    author_email: str
    authored_at: datetime
    message: str
    parents: list[str] = Field(default_factory=list)

    def __str__(self) -> str:
        message = "\n".join(f"    {line}" if line else "" for line in self.message.rstrip("\n").split("\n"))
        return (
            f"commit {self.hexsha}\n"
            f"Author: {self.author_name} <{self.author_email}>\n"
            f"Date:   {self.authored_at.strftime(COMMIT_DATE_FORMAT)}\n"
            f"\n{message}\n"
        )


class FlowResult(BaseModel):
    """Terminal state of the clone-or-open flow.

    Attributes
    ----------
    state : FlowState
        The success state the flow ended in.
    repo : Any
        Handle of the working copy the flow operated on.
    head : HeadState | None
        HEAD after the last operation, ``None`` after a fresh clone.
    pull_outcome : PullOutcome | None
        Outcome of the pull, ``None`` when no pull ran.

    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    state: FlowState
    repo: Any = None
    head: HeadState | None = None
    pull_outcome: PullOutcome | None = None
