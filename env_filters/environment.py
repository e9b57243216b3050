"""Helpers for merging overrides into environments."""

from __future__ import annotations

import contextlib
import logging
import os
import typing as t

logger = logging.getLogger(__name__)


def _restore_env(orig_env: dict[str, str]) -> None:
    """Reset ``os.environ`` to the snapshot stored in ``orig_env``."""
    os.environ.clear()
    os.environ.update(orig_env)


def merge_overrides(
    base: t.Mapping[str, str], overrides: t.Mapping[str, str]
) -> dict[str, str]:
    """Return a copy of *base* with *overrides* layered on top."""
    merged = dict(base)
    merged.update(overrides)
    return merged


@contextlib.contextmanager
def temporary_env(mapping: t.Mapping[str, str]) -> t.Iterator[None]:
    """Temporarily apply environment variables from *mapping*.

    Everything the body does to ``os.environ`` is undone on exit, including
    on error.
    """
    orig_env = os.environ.copy()
    os.environ.update(mapping)
    logger.debug("Exported %d variable(s) to the process environment", len(mapping))
    try:
        yield
    finally:
        _restore_env(orig_env)


__all__ = ["merge_overrides", "temporary_env"]
