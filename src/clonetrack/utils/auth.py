"""Utilities for handling SSH authentication."""

from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from clonetrack.config import PRIVATE_KEY_MARKER
from clonetrack.schemas import AuthCredential
from clonetrack.utils.exceptions import AuthSetupError
from clonetrack.utils.logging_config import get_logger

logger = get_logger(__name__)


def resolve_credential(identity: str | None) -> AuthCredential | None:
    """Turn an identity value into an SSH credential.

    Values containing ``RSA PRIVATE KEY`` are inline key material, anything else is the path of a key file.

    Parameters
    ----------
    identity : str | None
        Inline private key material or the path of a private key file.

    Returns
    -------
    AuthCredential | None
        The credential, or ``None`` when no identity was given.

    Raises
    ------
    AuthSetupError
        If the key file cannot be read, holds no private key, or the inline material cannot be stored.

    """
    if not identity:
        return None

    if PRIVATE_KEY_MARKER in identity:
        logger.debug("Using inline private key material")
        return _credential_from_material(identity)

    key_path = Path(identity).expanduser()
    logger.debug("Using private key file", extra={"key_path": str(key_path)})
    try:
        content = key_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Cannot read identity file {key_path}: {exc}"
        raise AuthSetupError(msg) from exc

    if "PRIVATE KEY" not in content:
        msg = f"Identity file {key_path} does not contain a private key"
        raise AuthSetupError(msg)

    return AuthCredential(key_path=key_path.resolve())


def _credential_from_material(material: str) -> AuthCredential:
    """Store inline key material in a private temporary file."""
    if not material.endswith("\n"):
        material += "\n"

    try:
        fd, name = tempfile.mkstemp(prefix="clonetrack-", suffix=".key")
        with os.fdopen(fd, "w", encoding="utf-8") as key_file:
            key_file.write(material)
        os.chmod(name, 0o600)
    except OSError as exc:
        msg = f"Cannot store inline identity: {exc}"
        raise AuthSetupError(msg) from exc

    return AuthCredential(key_path=Path(name), temporary=True)


@contextmanager
def identity_context(identity: str | None) -> Generator[AuthCredential | None]:
    """Context manager that resolves an identity and removes its temporary key file on exit.

    Parameters
    ----------
    identity : str | None
        Inline private key material or the path of a private key file.

    Yields
    ------
    Generator[AuthCredential | None]
        The resolved credential, or ``None`` when no identity was given.

    """
    credential = resolve_credential(identity)
    try:
        yield credential
    finally:
        if credential is not None and credential.temporary:
            credential.key_path.unlink(missing_ok=True)
