"""Clonetrack: clone a Git repository, or keep an existing clone on a branch and up to date."""

from clonetrack.clone import clone_or_open
from clonetrack.query_parser import build_clone_request

__all__ = ["build_clone_request", "clone_or_open"]
