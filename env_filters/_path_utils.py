"""Shared helpers for locating files relative to a build workspace."""

from __future__ import annotations

import os
from pathlib import Path

TMP_SUFFIX = "tmp"


def workspace_temp_dir(workspace: os.PathLike[str] | str, combinator: str) -> Path:
    """Return the scratch directory paired with *workspace*.

    The directory is a sibling of the workspace named
    ``<workspace name><combinator>tmp``, so it is owned by whichever
    execution holds the workspace and never lands inside checked-out files.
    """
    ws = Path(workspace)
    return ws.with_name(f"{ws.name}{combinator}{TMP_SUFFIX}")


def resolve_against(
    workspace: os.PathLike[str] | str | None, path: os.PathLike[str] | str
) -> Path:
    """Resolve *path* relative to *workspace*; absolute paths pass through."""
    candidate = Path(path)
    if workspace is None or candidate.is_absolute():
        return candidate
    return Path(workspace) / candidate
