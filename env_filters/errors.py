"""Exception hierarchy for environment filtering and externalization."""

from __future__ import annotations

import typing as t

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .env2file import ExternalizationRecord


class EnvFiltersError(Exception):
    """Base class for all errors raised by :mod:`env_filters`."""


class LifecycleError(EnvFiltersError):
    """Raised when a setup/teardown session is driven out of order."""


class PatternError(EnvFiltersError):
    """Raised when a filter's regular expression cannot be compiled."""

    def __init__(self, pattern: str, reason: str) -> None:
        msg = f"Invalid pattern {pattern!r}: {reason}"
        super().__init__(msg)
        self.pattern = pattern
        self.reason = reason


class FilterError(EnvFiltersError):
    """Raised when an environment variable matched a prohibited value.

    The host surfaces this as the cause of the build failure. Mutations made
    by earlier rules, or for earlier keys of the same rule, are not undone.
    """

    def __init__(self, key: str, reason: str = "matched prohibited value") -> None:
        msg = f"Environment variable '{key}' {reason}"
        super().__init__(msg)
        self.key = key
        self.reason = reason


class FatalSetupError(EnvFiltersError):
    """Raised when externalized files cannot be written.

    ``record`` lists the files already written by the failing setup call so
    the caller can still delete them.
    """

    def __init__(
        self, message: str, record: ExternalizationRecord | None = None
    ) -> None:
        super().__init__(message)
        self.record = record


class ExternalizedFileDeletionError(OSError):
    """Raised when an externalized file survives every deletion attempt."""

    def __init__(self, path: str, last_exception: Exception | None) -> None:
        msg = f"Could not delete {path}: {last_exception}"
        super().__init__(msg)
        self.path = path
        self.last_exception = last_exception


__all__ = [
    "EnvFiltersError",
    "ExternalizedFileDeletionError",
    "FatalSetupError",
    "FilterError",
    "LifecycleError",
    "PatternError",
]
