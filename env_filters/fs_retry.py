"""Deletion of externalized files with retries for transient failures.

Agents on shared or network filesystems occasionally refuse to delete a file
that a just-finished process still holds open. Deletion is therefore retried
a bounded number of times before the failure is reported.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import time
import typing as t

from ._validators import validate_non_negative_finite, validate_positive_int

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from pathlib import Path

_logger = logging.getLogger(__name__)

DeletionErrorFactory: t.TypeAlias = "t.Callable[[Path, Exception], Exception]"


@dc.dataclass(frozen=True, slots=True)
class RetryConfig:
    """
    How persistently to retry a failed deletion.

    Attributes
    ----------
    max_attempts : int
        Total deletion attempts, at least one.
    retry_delay : float
        Seconds to wait between attempts; zero disables waiting.
    """

    max_attempts: int
    retry_delay: float

    def __post_init__(self) -> None:
        """Reject configurations that could never delete anything."""
        validate_positive_int(self.max_attempts, name="max_attempts")
        validate_non_negative_finite(self.retry_delay, name="retry_delay")


DEFAULT_UNLINK_RETRY = RetryConfig(max_attempts=3, retry_delay=0.5)


def retry_unlink(
    path: Path,
    *,
    config: RetryConfig = DEFAULT_UNLINK_RETRY,
    logger: logging.Logger | None = None,
    exc_factory: DeletionErrorFactory | None = None,
) -> bool:
    """
    Delete *path*, retrying ``OSError`` until *config* is exhausted.

    Parameters
    ----------
    path : Path
        File to delete.
    config : RetryConfig, optional
        Attempt budget; defaults to ``DEFAULT_UNLINK_RETRY``.
    logger : logging.Logger | None, optional
        Receives one debug record per failed attempt.
    exc_factory : DeletionErrorFactory | None, optional
        Wraps the final error. Without it the last ``OSError`` propagates.

    Returns
    -------
    bool
        ``False`` if the file was already gone, ``True`` if this call
        deleted it. A file that vanishes between attempts counts as gone.
    """
    log = logger or _logger
    attempt = 1
    while True:
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            if attempt >= config.max_attempts:
                if exc_factory is None:
                    raise
                raise exc_factory(path, exc) from exc
            log.debug(
                "Deleting %s failed on attempt %d of %d (%s); retrying in %.2fs",
                path,
                attempt,
                config.max_attempts,
                exc,
                config.retry_delay,
            )
            if config.retry_delay:
                time.sleep(config.retry_delay)
            attempt += 1
        else:
            return True


__all__ = [
    "DEFAULT_UNLINK_RETRY",
    "DeletionErrorFactory",
    "RetryConfig",
    "retry_unlink",
]
