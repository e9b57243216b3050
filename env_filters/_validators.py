"""Shared validation helpers."""

from __future__ import annotations

import math


def validate_positive_int(value: int, *, name: str) -> None:
    """Ensure *value* is an integer of at least one."""
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{name} must be an integer"
        raise TypeError(msg)

    if value < 1:
        msg = f"{name} must be >= 1"
        raise ValueError(msg)


def validate_non_negative_finite(value: float, *, name: str) -> None:
    """Ensure *value* is a usable delay in seconds."""
    if isinstance(value, bool):
        msg = f"{name} must be a real number"
        raise TypeError(msg)

    if not (value >= 0 and math.isfinite(value)):
        msg = f"{name} must be >= 0 and finite"
        raise ValueError(msg)


def validate_path_component(value: str, *, name: str) -> None:
    """Ensure *value* can be embedded in a single file name."""
    if not value:
        msg = f"{name} must not be empty"
        raise ValueError(msg)

    if "/" in value or "\\" in value:
        msg = f"{name} must not contain a path separator"
        raise ValueError(msg)
