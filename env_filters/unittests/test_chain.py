"""Unit tests for :mod:`env_filters.chain`."""

from __future__ import annotations

import typing as t

import pytest

from env_filters.actions import REDACTED, FilterAction
from env_filters.chain import apply_rule, apply_rules
from env_filters.context import ApplicabilityContext
from env_filters.errors import FilterError
from env_filters.matchers import JobName
from env_filters.rules import RegexValueFilter, StaticInjectionFilter

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from env_filters.context import RunIdentity
    from env_filters.diagnostics import RecordingSink


def test_excluded_rule_is_never_invoked(
    sink: RecordingSink, make_run: t.Callable[..., RunIdentity]
) -> None:
    """An excluded rule makes no mutations and writes no diagnostics."""
    rule = RegexValueFilter(
        "secret.*", FilterAction.REDACT, exclusions=[JobName("p")]
    )
    env = {"TOKEN": "secret123"}
    context = ApplicabilityContext(run=make_run("p"), subject=object())

    assert apply_rule(rule, env, context, sink) is False
    assert env == {"TOKEN": "secret123"}
    assert sink.lines == []


def test_rules_run_in_given_order(
    sink: RecordingSink, make_run: t.Callable[..., RunIdentity]
) -> None:
    """Later rules see the mutations of earlier ones."""
    rules = [
        StaticInjectionFilter("TOKEN", "secret-injected"),
        RegexValueFilter("secret-.*", FilterAction.REDACT),
    ]
    env: dict[str, str] = {}
    context = ApplicabilityContext(run=make_run(), subject=object())

    applied = apply_rules(rules, env, context, sink)

    assert applied == rules
    assert env == {"TOKEN": REDACTED}
    assert len(sink.lines) == 2


def test_filter_error_stops_chain(
    sink: RecordingSink, make_run: t.Callable[..., RunIdentity]
) -> None:
    """Rules after a failing rule do not run; earlier mutations remain."""
    rules = [
        RegexValueFilter("drop", FilterAction.REMOVE),
        RegexValueFilter("secret.*", FilterAction.FAIL),
        StaticInjectionFilter("LATE", "never"),
    ]
    env = {"A": "drop", "TOKEN": "secret123"}
    context = ApplicabilityContext(run=make_run(), subject=object())

    with pytest.raises(FilterError, match="TOKEN"):
        apply_rules(rules, env, context, sink)

    assert env == {"TOKEN": "secret123"}


def test_none_values_are_rejected(
    sink: RecordingSink, make_run: t.Callable[..., RunIdentity]
) -> None:
    """The host must not hand over variables without a value."""
    env = t.cast("dict[str, str]", {"A": None})
    context = ApplicabilityContext(run=make_run(), subject=object())

    with pytest.raises(ValueError, match="must not be None: A"):
        apply_rules([], env, context, sink)
