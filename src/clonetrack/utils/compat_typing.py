"""Compatibility layer for typing."""

try:
    from enum import StrEnum  # type: ignore[attr-defined]  # Py ≥ 3.11
except ImportError:
    from strenum import StrEnum  # type: ignore[import-untyped] # Py ≤ 3.10

try:
    from typing import Unpack  # type: ignore[attr-defined]  # Py ≥ 3.11
except ImportError:
    from typing_extensions import Unpack  # type: ignore[attr-defined]  # Py ≤ 3.10

__all__ = ["StrEnum", "Unpack"]
