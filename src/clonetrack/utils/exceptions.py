"""Custom exceptions for the Clone-and-Track CLI."""


class CloneTrackError(Exception):
    """Base exception for every fatal error of a clone-and-track run.

    The CLI prints the message and terminates with ``exit_code``.
    """

    exit_code: int = 1


class AuthSetupError(CloneTrackError):
    """Exception raised when the SSH identity cannot be turned into a credential."""


class GitNotInstalledError(CloneTrackError):
    """Exception raised when no usable ``git`` executable is found."""

    def __init__(self) -> None:
        super().__init__("Git is not installed or not accessible. Please install Git first.")


class TransportError(CloneTrackError):
    """Exception raised when a clone or pull fails on the way to or from the remote."""


class RepositoryOpenError(CloneTrackError):
    """Exception raised when an existing working copy cannot be opened or has no HEAD."""


class CheckoutError(CloneTrackError):
    """Exception raised when the requested branch or tag cannot be checked out."""


class CommitLookupError(CloneTrackError):
    """Exception raised when a commit object cannot be read from the repository."""
