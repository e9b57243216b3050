"""Remediation actions applied to environment variables matched by a rule."""

from __future__ import annotations

import enum
import typing as t

from .errors import FilterError

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .diagnostics import DiagnosticSink

REDACTED: t.Final[str] = "REDACTED"

ActionFunction: t.TypeAlias = (
    "t.Callable[[t.MutableMapping[str, str], str, DiagnosticSink], None]"
)


def remove(env: t.MutableMapping[str, str], key: str, sink: DiagnosticSink) -> None:
    """Delete *key* from *env*."""
    sink.println(f"Removing environment variable '{key}' matched by a value filter")
    del env[key]


def redact(env: t.MutableMapping[str, str], key: str, sink: DiagnosticSink) -> None:
    """Overwrite the value of *key* with :data:`REDACTED`."""
    sink.println(f"Redacting environment variable '{key}' matched by a value filter")
    env[key] = REDACTED


def fail(env: t.MutableMapping[str, str], key: str, sink: DiagnosticSink) -> None:
    """Abort filtering because *key* holds a prohibited value."""
    sink.println(f"Environment variable '{key}' matched a prohibited value")
    raise FilterError(key)


class FilterAction(enum.StrEnum):
    """What a value filter does with each matching variable."""

    REMOVE = "remove"
    REDACT = "redact"
    FAIL = "fail"

    def apply(
        self, env: t.MutableMapping[str, str], key: str, sink: DiagnosticSink
    ) -> None:
        """Run this action for *key* against the live *env*."""
        _ACTIONS[self](env, key, sink)


_ACTIONS: t.Final[dict[FilterAction, ActionFunction]] = {
    FilterAction.REMOVE: remove,
    FilterAction.REDACT: redact,
    FilterAction.FAIL: fail,
}


__all__ = ["REDACTED", "FilterAction", "fail", "redact", "remove"]
