"""Value objects describing the invocation a rule is evaluated for."""

from __future__ import annotations

import dataclasses as dc
import typing as t

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .diagnostics import DiagnosticSink


@dc.dataclass(frozen=True, slots=True)
class RunIdentity:
    """Identity of one execution of a job."""

    job_name: str
    build_number: int

    def __str__(self) -> str:
        """Return the ``job #number`` form used in diagnostics."""
        return f"{self.job_name} #{self.build_number}"


@dc.dataclass(frozen=True, slots=True)
class ApplicabilityContext:
    """Where a rule is being evaluated.

    ``run`` is ``None`` for context-free evaluations such as configuration
    validation. ``subject`` is the host object being prepared (a build step,
    for example) and ``channel`` names the launcher or agent executing it.
    """

    run: RunIdentity | None
    subject: object
    channel: str = "local"


@dc.dataclass(frozen=True, slots=True)
class RuleContext:
    """Collaborators handed to a rule while it filters an environment."""

    sink: DiagnosticSink
    channel: str = "local"


__all__ = ["ApplicabilityContext", "RuleContext", "RunIdentity"]
