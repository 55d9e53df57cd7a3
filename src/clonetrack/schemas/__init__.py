"""Module containing the schemas for the clonetrack package."""

from clonetrack.schemas.cloning import AuthCredential, CloneRequest, TagMode
from clonetrack.schemas.outcomes import (
    CheckoutOutcome,
    CloneOutcome,
    CommitInfo,
    FlowResult,
    FlowState,
    HeadState,
    PullOutcome,
)

__all__ = [
    "AuthCredential",
    "CheckoutOutcome",
    "CloneOutcome",
    "CloneRequest",
    "CommitInfo",
    "FlowResult",
    "FlowState",
    "HeadState",
    "PullOutcome",
    "TagMode",
]
