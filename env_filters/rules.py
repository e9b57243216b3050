"""Environment filter rules.

A rule is asked whether it applies to an invocation and, if so, mutates the
environment map it is handed in place. Rules keep no reference to the map
once :meth:`EnvironmentRule.filter` returns.
"""

from __future__ import annotations

import functools
import logging
import re
import typing as t

from .actions import FilterAction
from .applicability import ApplicabilityGate
from .errors import PatternError

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .context import RuleContext, RunIdentity
    from .matchers import RunMatcher, SubjectMatcher

logger = logging.getLogger(__name__)


@t.runtime_checkable
class EnvironmentRule(t.Protocol):
    """A host-configured rule applied while preparing a build environment."""

    def is_applicable(
        self, run: RunIdentity | None, subject: object, channel: str
    ) -> bool:
        """Return ``True`` if the rule takes part in this invocation."""
        ...

    def filter(
        self, env: t.MutableMapping[str, str], rule_context: RuleContext
    ) -> None:
        """Mutate *env* in place."""
        ...


@functools.lru_cache(maxsize=128)
def compile_pattern(regex: str) -> re.Pattern[str]:
    """Compile *regex*, converting syntax errors to :class:`PatternError`."""
    try:
        return re.compile(regex)
    except re.error as exc:
        raise PatternError(regex, str(exc)) from exc


class RegexValueFilter:
    """Apply a :class:`FilterAction` to every variable whose value matches.

    The pattern must match the entire value. Matching keys are collected from
    one pass over a snapshot of the map, then handled in sorted order so the
    key named by a ``FAIL`` action is stable across processes.
    """

    def __init__(
        self,
        regex: str | None,
        action: FilterAction,
        *,
        exclusions: t.Iterable[RunMatcher] = (),
        descriptor_matcher: SubjectMatcher | None = None,
    ) -> None:
        self.regex = regex
        self.action = FilterAction(action)
        self.gate = ApplicabilityGate(
            exclusions=list(exclusions), descriptor_matcher=descriptor_matcher
        )

    @property
    def exclusions(self) -> list[RunMatcher]:
        """Return the runs this rule never applies to."""
        return self.gate.exclusions

    @exclusions.setter
    def exclusions(self, exclusions: t.Iterable[RunMatcher]) -> None:
        self.gate.exclusions = list(exclusions)

    @property
    def descriptor_matcher(self) -> SubjectMatcher | None:
        """Return the subject predicate, if any."""
        return self.gate.descriptor_matcher

    def is_applicable(
        self, run: RunIdentity | None, subject: object, channel: str
    ) -> bool:
        """Delegate to the rule's :class:`ApplicabilityGate`."""
        return self.gate.is_applicable(run, subject, channel)

    def matching_keys(self, env: t.Mapping[str, str]) -> list[str]:
        """Return the sorted keys of *env* whose value fully matches."""
        if not self.regex:
            return []
        pattern = compile_pattern(self.regex)
        matched = {
            key
            for key, value in list(env.items())
            if pattern.fullmatch(value) is not None
        }
        return sorted(matched)

    def filter(
        self, env: t.MutableMapping[str, str], rule_context: RuleContext
    ) -> None:
        """Run the configured action for every matching variable.

        Raises
        ------
        PatternError
            If the pattern does not compile. Nothing has been mutated.
        FilterError
            If the action is ``FAIL`` and a value matched. Keys handled
            before the failing one keep their mutations.
        """
        if not self.regex:
            return

        keys = self.matching_keys(env)
        logger.debug(
            "Pattern %r matched %d variable(s); applying %s",
            self.regex,
            len(keys),
            self.action,
        )
        for key in keys:
            self.action.apply(env, key, rule_context.sink)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        """Return a debug representation."""
        return f"RegexValueFilter({self.regex!r}, {self.action!s})"


class StaticInjectionFilter:
    """Set one variable to a fixed value for every invocation."""

    def __init__(self, key: str, value: str) -> None:
        self.key = key
        self.value = value

    def is_applicable(
        self, run: RunIdentity | None, subject: object, channel: str
    ) -> bool:
        """Always apply."""
        return True

    def filter(
        self, env: t.MutableMapping[str, str], rule_context: RuleContext
    ) -> None:
        """Overwrite ``env[key]`` with the configured value."""
        rule_context.sink.println(f"Setting environment variable '{self.key}'")
        env[self.key] = self.value

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        """Return a debug representation."""
        return f"StaticInjectionFilter({self.key!r})"


__all__ = [
    "EnvironmentRule",
    "RegexValueFilter",
    "StaticInjectionFilter",
    "compile_pattern",
]
