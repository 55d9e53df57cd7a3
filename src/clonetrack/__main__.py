"""Command-line interface (CLI) for clonetrack."""

# pylint: disable=no-value-for-parameter
from __future__ import annotations

from typing import TypedDict

import click

from clonetrack.clone import clone_or_open
from clonetrack.config import DEFAULT_REMOTE_NAME, DEFAULT_TAG_MODE, IDENTITY_ENV_VAR
from clonetrack.query_parser import build_clone_request
from clonetrack.report import EchoProgress, show_last_commit
from clonetrack.schemas import TagMode
from clonetrack.utils.auth import identity_context
from clonetrack.utils.compat_typing import Unpack
from clonetrack.utils.exceptions import CloneTrackError
from clonetrack.utils.git_utils import GitPythonProvider

# Import logging configuration first to intercept all logging
from clonetrack.utils.logging_config import get_logger

# Initialize logger for this module
logger = get_logger(__name__)


class _CLIArgs(TypedDict):
    repository: str
    directory: str | None
    identity: str | None
    recursive: bool
    pull: bool
    origin: str
    branch: str | None
    single_branch: bool
    depth: int
    tags: str
    last: bool


@click.command()
@click.argument("repository", type=str)
@click.argument("directory", type=str, required=False, default=None)
@click.option(
    "--identity",
    "-i",
    envvar=IDENTITY_ENV_VAR,
    default=None,
    metavar="<file>",
    help=(
        "File from which the identity (private key) for public key SSH authentication is read, "
        f"or the key itself. If omitted, the {IDENTITY_ENV_VAR} environment variable is used."
    ),
)
@click.option(
    "--recursive",
    "-r",
    is_flag=True,
    default=False,
    help="After the clone is created, initialize all submodules within, using their default settings.",
)
@click.option(
    "--pull",
    "-p",
    is_flag=True,
    default=False,
    help="Incorporate changes from the remote repository into the current branch (if already cloned).",
)
@click.option(
    "--origin",
    "-o",
    default=DEFAULT_REMOTE_NAME,
    show_default=True,
    metavar="<name>",
    help="Name of the remote used to keep track of the upstream repository.",
)
@click.option(
    "--branch",
    "-b",
    default=None,
    metavar="<name>",
    help=(
        "Point HEAD to <name> branch instead of the remote HEAD; use tags/<name> for a tag. "
        "If the repository is already cloned, switch to it and discard local changes."
    ),
)
@click.option(
    "--single-branch",
    is_flag=True,
    default=False,
    help="Clone only the history leading to the tip of a single branch.",
)
@click.option(
    "--depth",
    "-d",
    type=int,
    default=0,
    metavar="<depth>",
    help="Create a shallow clone with a history truncated to the specified number of commits (0: full history).",
)
@click.option(
    "--tags",
    "-t",
    type=click.Choice([mode.value for mode in TagMode]),
    default=DEFAULT_TAG_MODE,
    show_default=True,
    help="Tag mode.",
)
@click.option("--last", "-l", is_flag=True, default=False, help="Print the latest commit.")
def main(**cli_kwargs: Unpack[_CLIArgs]) -> None:
    """Clone a repository, or switch and pull it when it is already cloned.

    Examples
    --------
    Basic usage:
        $ clonetrack https://example.com/sample.git
        $ clonetrack https://example.com/sample.git work/sample

    Keep an existing clone on a branch up to date:
        $ clonetrack git@example.com:team/sample.git --branch release --pull

    Private repositories over SSH:
        $ clonetrack git@example.com:team/sample.git -i ~/.ssh/deploy_key
        $ GIT_CLONE_KEY="$(cat ~/.ssh/deploy_key)" clonetrack git@example.com:team/sample.git

    """
    _main(**cli_kwargs)


def _main(
    repository: str,
    directory: str | None = None,
    *,
    identity: str | None = None,
    recursive: bool = False,
    pull: bool = False,
    origin: str = DEFAULT_REMOTE_NAME,
    branch: str | None = None,
    single_branch: bool = False,
    depth: int = 0,
    tags: str = DEFAULT_TAG_MODE,
    last: bool = False,
) -> None:
    """Run a clone-and-track invocation.

    Arguments are validated before anything touches the disk or the network. Fatal errors are printed
    in red on ``stderr`` and end the process with the error's exit code.

    Raises
    ------
    click.UsageError
        If the arguments do not form a valid request.
    click.exceptions.Exit
        If the run fails.

    """
    try:
        request = build_clone_request(
            repository,
            directory,
            remote_name=origin,
            branch=branch,
            depth=depth,
            single_branch=single_branch,
            include_submodules=recursive,
            tags=tags,
            pull=pull,
            show_last=last,
        )
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc

    try:
        with identity_context(identity) as credential:
            if credential is not None:
                request = request.model_copy(update={"credential": credential})

            provider = GitPythonProvider(progress=EchoProgress())
            result = clone_or_open(request, provider=provider)
            if request.show_last:
                show_last_commit(request, result, provider)
    except CloneTrackError as exc:
        logger.debug("Run failed", extra={"error": type(exc).__name__})
        click.secho(f"Error: {exc}", fg="red", err=True)
        raise click.exceptions.Exit(exc.exit_code) from exc
    except OSError as exc:
        click.secho(f"Error: {exc}", fg="red", err=True)
        raise click.exceptions.Exit(1) from exc


if __name__ == "__main__":
    main()
