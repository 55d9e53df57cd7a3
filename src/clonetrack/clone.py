"""Module containing the clone-or-open flow of a clone-and-track run."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from clonetrack.config import REMOTE_REF_PREFIX
from clonetrack.report import EchoProgress
from clonetrack.schemas import CheckoutOutcome, CloneOutcome, FlowResult, FlowState, PullOutcome
from clonetrack.utils.exceptions import CheckoutError
from clonetrack.utils.git_utils import GitPythonProvider
from clonetrack.utils.logging_config import get_logger

if TYPE_CHECKING:
    from clonetrack.schemas import CloneRequest
    from clonetrack.utils.git_utils import GitProvider

# Initialize logger for this module
logger = get_logger(__name__)


def clone_or_open(request: CloneRequest, provider: GitProvider | None = None) -> FlowResult:
    """Clone a repository, or bring an existing working copy to the requested branch.

    A fresh clone ends the flow. When the destination already holds a repository it is opened instead,
    the requested branch or tag is checked out if HEAD does not point to it yet, and the branch is pulled
    when a pull was requested and HEAD is attached to a branch.

    Parameters
    ----------
    request : CloneRequest
        The configuration of the run.
    provider : GitProvider | None
        The git operations provider (default: ``GitPythonProvider`` streaming progress to ``stdout``).

    Returns
    -------
    FlowResult
        The success state the flow ended in, with the repository handle.

    Raises
    ------
    CloneTrackError
        If any git operation fails fatally.

    """
    if provider is None:
        provider = GitPythonProvider(progress=EchoProgress())

    logger.info(
        "Starting clone-or-open flow",
        extra={
            "url": request.url,
            "local_path": request.local_path,
            "reference": request.reference,
            "pull": request.pull,
        },
    )

    outcome, repo = provider.clone(request)
    if outcome is CloneOutcome.CLONED:
        return FlowResult(state=FlowState.CLONED, repo=repo)

    click.secho("Repository already exists!", fg="yellow")
    repo = provider.open(request.local_path)
    head = provider.head(repo)
    state = FlowState.OPENED

    if request.reference and head.reference != request.reference:
        click.secho(f"Checkout remote branch {request.branch_name}", fg="cyan")
        _switch_reference(provider, repo, request, request.reference)
        head = provider.head(repo)
        state = FlowState.BRANCH_SWITCHED

    pull_outcome = None
    if request.pull:
        if head.is_branch:
            click.secho(f"Pull {head.reference}", fg="cyan")
            pull_outcome = provider.pull(repo, request, head.reference)
            if pull_outcome is PullOutcome.NO_CHANGES:
                click.secho("already up-to-date", fg="green")
            head = provider.head(repo)
            state = FlowState.PULLED
        else:
            logger.info("Skipping pull, HEAD is not a branch", extra={"reference": head.reference})

    logger.info("Flow completed", extra={"state": state, "reference": head.reference, "commit": head.commit})
    return FlowResult(state=state, repo=repo, head=head, pull_outcome=pull_outcome)


def _switch_reference(provider: GitProvider, repo: Any, request: CloneRequest, reference: str) -> None:
    """Force a checkout of the requested reference, creating a tracking branch when it only exists remotely.

    Raises
    ------
    CheckoutError
        If the reference exists neither locally nor as a remote-tracking branch, or a checkout fails.

    """
    if provider.checkout(repo, reference, force=True) is CheckoutOutcome.CHECKED_OUT:
        return

    if request.is_tag:
        msg = f"Tag {request.branch_name} not found in {request.local_path}"
        raise CheckoutError(msg)

    tracking = f"{REMOTE_REF_PREFIX}{request.remote_name}/{request.branch_name}"
    if provider.resolve_reference(repo, tracking) is None:
        msg = f"Reference {reference} not found, and no remote-tracking reference {tracking} to create it from"
        raise CheckoutError(msg)

    logger.info("Creating local branch from remote", extra={"reference": reference, "start_point": tracking})
    if provider.checkout(repo, reference, start_point=tracking, force=True) is not CheckoutOutcome.CHECKED_OUT:
        msg = f"Could not create {reference} from {tracking}"
        raise CheckoutError(msg)
