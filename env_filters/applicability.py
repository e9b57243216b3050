"""Decide whether a rule takes part in a given invocation."""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as t

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .context import RunIdentity
    from .matchers import RunMatcher, SubjectMatcher

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class ApplicabilityGate:
    """Scope a rule by subject category and by excluded runs.

    The gate never looks at variable contents. The descriptor matcher is
    consulted first and short-circuits; exclusions only apply when a run is
    known and exclude it if any of them matches.
    """

    exclusions: list[RunMatcher] = dc.field(default_factory=list)
    descriptor_matcher: SubjectMatcher | None = None

    def is_applicable(
        self, run: RunIdentity | None, subject: object, channel: str
    ) -> bool:
        """Return ``True`` when a rule guarded by this gate should run."""
        if self.descriptor_matcher is not None and not self.descriptor_matcher(
            subject
        ):
            logger.debug(
                "%s is not one of the configured applicable descriptors", subject
            )
            return False

        if run is None:
            logger.debug(
                "No run for %s on %s so always including it", subject, channel
            )
            return True

        if any(exclusion(run) for exclusion in self.exclusions):
            logger.debug("%s is being excluded", run)
            return False

        logger.debug("No exclusions apply to %s", run)
        return True


__all__ = ["ApplicabilityGate"]
