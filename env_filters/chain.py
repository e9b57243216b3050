"""Dispatch rules over an environment map in host-defined order."""

from __future__ import annotations

import logging
import typing as t

from .context import RuleContext

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .context import ApplicabilityContext
    from .diagnostics import DiagnosticSink
    from .rules import EnvironmentRule

logger = logging.getLogger(__name__)


def _require_values(env: t.Mapping[str, str]) -> None:
    """Reject maps carrying ``None`` values; actions only remove keys."""
    missing = sorted(key for key, value in env.items() if value is None)
    if missing:
        msg = f"Environment values must not be None: {', '.join(missing)}"
        raise ValueError(msg)


def apply_rule(
    rule: EnvironmentRule,
    env: t.MutableMapping[str, str],
    context: ApplicabilityContext,
    sink: DiagnosticSink,
) -> bool:
    """Filter *env* with *rule* if it applies to *context*.

    Returns ``True`` when the rule ran. Errors raised by the rule propagate
    unchanged.
    """
    if not rule.is_applicable(context.run, context.subject, context.channel):
        logger.debug("Skipping %r for %s", rule, context.subject)
        return False
    rule.filter(env, RuleContext(sink=sink, channel=context.channel))
    return True


def apply_rules(
    rules: t.Iterable[EnvironmentRule],
    env: t.MutableMapping[str, str],
    context: ApplicabilityContext,
    sink: DiagnosticSink,
) -> list[EnvironmentRule]:
    """Run each applicable rule in order and return the ones that ran.

    The first :class:`~env_filters.errors.FilterError` or
    :class:`~env_filters.errors.PatternError` stops the chain; mutations
    already made stay in place.
    """
    _require_values(env)
    applied: list[EnvironmentRule] = []
    for rule in rules:
        if apply_rule(rule, env, context, sink):
            applied.append(rule)
    _require_values(env)
    return applied


__all__ = ["apply_rule", "apply_rules"]
