"""Configuration for the Clone-and-Track CLI."""

from __future__ import annotations

import os

DEFAULT_REMOTE_NAME: str = "origin"
DEFAULT_TAG_MODE: str = "all"

# Identity (private key) for SSH transports, as a file path or inline key material
IDENTITY_ENV_VAR: str = "GIT_CLONE_KEY"
PRIVATE_KEY_MARKER: str = "RSA PRIVATE KEY"

# ``{key_path}`` is substituted with the shell-quoted path of the identity file
SSH_COMMAND_TEMPLATE: str = os.getenv("CLONETRACK_SSH_COMMAND", "ssh -i {key_path} -o IdentitiesOnly=yes")

BRANCH_REF_PREFIX: str = "refs/heads/"
TAG_REF_PREFIX: str = "refs/tags/"
REMOTE_REF_PREFIX: str = "refs/remotes/"
TAG_SELECTOR_PREFIX: str = "tags/"

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "WARNING")
LOG_FORMAT: str = os.getenv("LOG_FORMAT", "human")
