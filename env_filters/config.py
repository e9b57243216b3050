"""Runtime settings read from the process environment.

Hosts rarely need to touch these; they exist so agents with unusual
workspace naming or slow filesystems can be accommodated without code
changes.
"""

from __future__ import annotations

import dataclasses as dc
import os
import typing as t

from ._validators import validate_path_component
from .fs_retry import DEFAULT_UNLINK_RETRY, RetryConfig

WORKSPACE_COMBINATOR_ENV: t.Final[str] = "ENV_FILTERS_WORKSPACE_COMBINATOR"
UNLINK_ATTEMPTS_ENV: t.Final[str] = "ENV_FILTERS_UNLINK_ATTEMPTS"
UNLINK_DELAY_ENV: t.Final[str] = "ENV_FILTERS_UNLINK_DELAY"

DEFAULT_WORKSPACE_COMBINATOR: t.Final[str] = "@"


@dc.dataclass(frozen=True, slots=True)
class Settings:
    """Tunables for the externalize-to-file wrapper."""

    workspace_combinator: str = DEFAULT_WORKSPACE_COMBINATOR
    unlink_retry: RetryConfig = DEFAULT_UNLINK_RETRY

    def __post_init__(self) -> None:
        """Reject combinators that would escape the workspace parent."""
        validate_path_component(
            self.workspace_combinator, name="workspace_combinator"
        )


def _parse_int(raw: str, name: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        msg = f"{name} must be an integer, got {raw!r}"
        raise ValueError(msg) from None


def _parse_float(raw: str, name: str) -> float:
    try:
        return float(raw.strip())
    except ValueError:
        msg = f"{name} must be a number, got {raw!r}"
        raise ValueError(msg) from None


def load_settings(environ: t.Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from *environ* (default: ``os.environ``).

    Unset or blank variables fall back to the defaults. Malformed values
    raise ``ValueError`` rather than being silently ignored.
    """
    env = os.environ if environ is None else environ

    combinator = env.get(WORKSPACE_COMBINATOR_ENV) or DEFAULT_WORKSPACE_COMBINATOR

    attempts = DEFAULT_UNLINK_RETRY.max_attempts
    if raw_attempts := env.get(UNLINK_ATTEMPTS_ENV, "").strip():
        attempts = _parse_int(raw_attempts, UNLINK_ATTEMPTS_ENV)

    delay = DEFAULT_UNLINK_RETRY.retry_delay
    if raw_delay := env.get(UNLINK_DELAY_ENV, "").strip():
        delay = _parse_float(raw_delay, UNLINK_DELAY_ENV)

    return Settings(
        workspace_combinator=combinator,
        unlink_retry=RetryConfig(max_attempts=attempts, retry_delay=delay),
    )


__all__ = [
    "DEFAULT_WORKSPACE_COMBINATOR",
    "UNLINK_ATTEMPTS_ENV",
    "UNLINK_DELAY_ENV",
    "WORKSPACE_COMBINATOR_ENV",
    "Settings",
    "load_settings",
]
