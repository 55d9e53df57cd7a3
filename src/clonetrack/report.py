"""Console output: operation progress and the last-commit report."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
import git

from clonetrack.utils.logging_config import get_logger

if TYPE_CHECKING:
    from clonetrack.schemas import CloneRequest, FlowResult
    from clonetrack.utils.git_utils import GitProvider

logger = get_logger(__name__)


_STAGE_LABELS = {
    git.RemoteProgress.COUNTING: "Counting objects",
    git.RemoteProgress.COMPRESSING: "Compressing objects",
    git.RemoteProgress.WRITING: "Writing objects",
    git.RemoteProgress.RECEIVING: "Receiving objects",
    git.RemoteProgress.RESOLVING: "Resolving deltas",
    git.RemoteProgress.FINDING_SOURCES: "Finding sources",
    git.RemoteProgress.CHECKING_OUT: "Checking out files",
}


class EchoProgress(git.RemoteProgress):
    """Stream the progress of clone, fetch and pull operations to ``stdout``."""

    def update(
        self,
        op_code: int,
        cur_count: str | float,
        max_count: str | float | None = None,
        message: str = "",
    ) -> None:
        stage = _STAGE_LABELS.get(op_code & self.OP_MASK, "Progress")
        current = int(float(cur_count))
        if max_count:
            total = int(float(max_count))
            line = f"{stage}: {current / total:4.0%} ({current}/{total}){message}"
        else:
            line = f"{stage}: {current}{message}"
        # Rewrite the current line while a stage runs, keep it once the stage ends
        click.echo(f"\r{line}", nl=bool(op_code & self.END))


def show_last_commit(request: CloneRequest, result: FlowResult | None, provider: GitProvider) -> None:
    """Print the current branch and the commit at HEAD.

    The working copy is opened from ``request.local_path`` when ``result`` carries no handle.

    Parameters
    ----------
    request : CloneRequest
        The clone request of the run.
    result : FlowResult | None
        Terminal state of the clone-or-open flow.
    provider : GitProvider
        The git operations provider.

    """
    repo = result.repo if result is not None and result.repo is not None else provider.open(request.local_path)
    head = provider.head(repo)
    commit = provider.resolve_commit(repo, head.commit)
    logger.debug("Reporting last commit", extra={"reference": head.reference, "commit": head.commit})

    click.echo()
    click.secho(f"On branch {head.short_name}", fg="green")
    click.echo(f"Show last {commit}")
